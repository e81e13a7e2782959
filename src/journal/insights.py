"""Weekly/monthly insight summaries: model first, fixed rules as the fallback."""

from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional

import structlog

from observability import metrics
from shared_types import Period, Sentiment

from .analysis import AnalysisError, RemoteAnalyzer, text_items
from .dates import month_bounds, to_local, week_bounds
from .models import Entry, PeriodInsight, coerce_sentiment
from .stats import dominant_sentiment, rank_themes, round_half_up, sentiment_counts

logger = structlog.get_logger()

TOP_THEMES_LIMIT = 3
MAX_HIGHLIGHTS = 4
MIN_CONSISTENT_ENTRIES = 3
MAX_REMOTE_ITEMS = 3
CONTEXT_ENTRIES = 10

MORE_POSITIVE = "You've been experiencing more positive emotions this period"
WORK_PROMINENT = "Work and career have been prominent themes in your reflections"
RELATIONSHIPS_IMPORTANT = "Your relationships and connections have been important to you"

SELF_COMPASSION = "Consider practicing self-compassion and mindfulness"
STRESS_REDUCTION = "Try incorporating stress-reduction techniques into your routine"
WRITE_CONSISTENTLY = "Aim to write more consistently to gain deeper insights"

WORK_NOTE = "Work appears frequently in your thoughts"
FAMILY_NOTE = "Family relationships are important to you"
POSITIVE_NOTE = "You've been experiencing mostly positive emotions"
NEGATIVE_NOTE = "You've been dealing with challenging emotions"
MIXED_SUMMARY = "Your journal shows a mix of experiences and emotions."
EMPTY_SUMMARY = "No entries yet. Start journaling to see insights about your patterns and growth."
DEFAULT_REMOTE_SUMMARY = "Your journal shows a journey of self-discovery and growth."

GROWTH_AREAS = (
    "Continue exploring your thoughts",
    "Notice patterns in your emotions",
    "Celebrate small wins",
)
STARTER_GROWTH_AREAS = (
    "Begin with daily journaling",
    "Try different writing prompts",
    "Reflect on your feelings regularly",
)

_WORK_THEMES = {"work", "career"}
_RELATIONSHIP_THEMES = {"relationship", "relationships", "family"}
_STRESS_THEMES = {"stress", "anxiety"}

_INSIGHT_PROMPT = """Analyze this user's journal entries over time. Generate a gentle, insightful
summary that helps them understand patterns in their thoughts, emotions, and experiences.

{context}

Generate insights that are gentle and non-judgmental, celebrate positive moments and growth,
and offer supportive recommendations for continued reflection.

Return the insights in this exact JSON format:
{{
  "insights": {{
    "period": "{period}",
    "summary": "A gentle, empathetic summary of key patterns and observations",
    "topThemes": ["theme1", "theme2", "theme3"],
    "dominantSentiment": "positive|negative|neutral|mixed",
    "growthAreas": ["area1", "area2", "area3"],
    "recommendations": ["recommendation1", "recommendation2", "recommendation3"]
  }}
}}"""


def period_bounds(period: Period | str, now: datetime) -> tuple[datetime, datetime]:
    """Inclusive bounds of the current week (Monday start) or calendar month.

    Raises:
        ValueError: Unknown period
    """
    period = Period(period)
    if period == Period.WEEK:
        return week_bounds(now)
    return month_bounds(now)


def entries_in_period(
    entries: Iterable[Entry], period: Period | str, now: Optional[datetime] = None
) -> list[Entry]:
    start, end = period_bounds(period, now or datetime.now())
    return [e for e in entries if start <= to_local(e.created_at) <= end]


def summarize_period(
    entries: Iterable[Entry], period: Period | str, now: Optional[datetime] = None
) -> PeriodInsight:
    """Summarize the entries that fall in the current week or month.

    Args:
        entries: Entry snapshot, most recent first
        period: "week" or "month"
        now: Reference time (defaults to now)

    Returns:
        PeriodInsight; check is_empty/entry_count before presenting it
    """
    period = Period(period)
    matched = entries_in_period(entries, period, now)
    if not matched:
        return PeriodInsight(
            period=period,
            entry_count=0,
            summary=EMPTY_SUMMARY,
            growth_areas=list(STARTER_GROWTH_AREAS),
        )

    theme_stats = rank_themes(matched, limit=None)
    top_themes = [t.theme for t in theme_stats[:TOP_THEMES_LIMIT]]
    top_set = set(top_themes)
    counts = sentiment_counts(matched)
    positive = counts.get(Sentiment.POSITIVE, 0)
    negative = counts.get(Sentiment.NEGATIVE, 0)

    patterns = []
    if positive > negative:
        patterns.append(MORE_POSITIVE)
    if top_set & _WORK_THEMES:
        patterns.append(WORK_PROMINENT)
    if top_set & _RELATIONSHIP_THEMES:
        patterns.append(RELATIONSHIPS_IMPORTANT)

    recommendations = []
    if negative > 0:
        recommendations.append(SELF_COMPASSION)
    if top_set & _STRESS_THEMES:
        recommendations.append(STRESS_REDUCTION)
    if len(matched) < MIN_CONSISTENT_ENTRIES:
        recommendations.append(WRITE_CONSISTENTLY)

    highlights = [e for e in matched if e.sentiment == Sentiment.POSITIVE][:MAX_HIGHLIGHTS]
    dominant = dominant_sentiment(matched)

    return PeriodInsight(
        period=period,
        entry_count=len(matched),
        summary=_rule_summary(top_themes, dominant),
        top_themes=top_themes,
        dominant_sentiment=dominant,
        patterns=patterns,
        recommendations=recommendations,
        positive_highlights=highlights,
        growth_areas=list(GROWTH_AREAS),
        theme_stats=theme_stats,
    )


def _rule_summary(top_themes: list[str], dominant: Sentiment) -> str:
    notes = []
    if "work" in top_themes:
        notes.append(WORK_NOTE)
    if "family" in top_themes:
        notes.append(FAMILY_NOTE)
    if dominant == Sentiment.POSITIVE:
        notes.append(POSITIVE_NOTE)
    elif dominant == Sentiment.NEGATIVE:
        notes.append(NEGATIVE_NOTE)
    if not notes:
        return MIXED_SUMMARY
    return ". ".join(notes) + "."


def build_insight_prompt(matched: list[Entry], period: Period | str) -> str:
    """Describe the period's entries for the model without sending full texts."""
    period = Period(period)
    recent = matched[:CONTEXT_ENTRIES]
    themes = [t.theme for t in rank_themes(recent, limit=TOP_THEMES_LIMIT)]
    words = [e.word_count for e in recent]
    avg_words = round_half_up(sum(words) / len(words)) if words else 0

    context = (
        f"Over the {period}, the user has written {len(matched)} journal entries. "
        f"The most common themes are: {', '.join(themes) or 'general reflection'}. "
        f"The emotional tone has been mostly {dominant_sentiment(recent)}. "
        f"Average entry length: {avg_words} words."
    )
    return _INSIGHT_PROMPT.format(context=context, period=period)


def repair_period_insight(payload: dict, local: PeriodInsight) -> PeriodInsight:
    """Merge a model reply into the rule-based result, clamping each list.

    Counts, patterns and highlights always come from the entries themselves.

    Raises:
        AnalysisError: The reply has no "insights" object
    """
    body = payload.get("insights")
    if not isinstance(body, dict):
        raise AnalysisError("Model reply has no insights object")

    summary = body.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        summary = DEFAULT_REMOTE_SUMMARY

    return replace(
        local,
        summary=summary,
        top_themes=text_items(body.get("topThemes"))[:TOP_THEMES_LIMIT],
        dominant_sentiment=coerce_sentiment(body.get("dominantSentiment")),
        growth_areas=text_items(body.get("growthAreas"))[:MAX_REMOTE_ITEMS],
        recommendations=text_items(body.get("recommendations"))[:MAX_REMOTE_ITEMS],
        fallback_used=False,
    )


async def generate_period_insight(
    entries: Iterable[Entry],
    period: Period | str,
    analyzer: Optional[RemoteAnalyzer] = None,
    now: Optional[datetime] = None,
) -> PeriodInsight:
    """Ask the model for a period summary, or fall back to the rules.

    An empty period never reaches the model. The result's fallback_used flag
    records which tier answered.
    """
    entries = list(entries)
    local = summarize_period(entries, period, now)
    if analyzer is None or local.is_empty:
        metrics.counter("insights.fallback")
        return replace(local, fallback_used=True)

    matched = entries_in_period(entries, period, now)
    try:
        with metrics.timer("insights.remote_call"):
            payload = await analyzer.request_json(build_insight_prompt(matched, period))
        insight = repair_period_insight(payload, local)
    except AnalysisError as e:
        logger.warning("remote_insights_failed", error=str(e), error_type=type(e).__name__)
        metrics.counter("insights.fallback")
        return replace(local, fallback_used=True)

    metrics.counter("insights.remote")
    logger.debug("period_insight_generated", period=str(local.period), entries=local.entry_count)
    return insight
