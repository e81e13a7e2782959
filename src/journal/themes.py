"""Theme analysis across the whole journal history.

The local tier ranks entry themes and fits a weekly trend line; the remote tier
asks the model for the same ThemeAnalysis shape and clamps what comes back.
"""

from collections import Counter
from datetime import date, timedelta
from typing import Optional

import numpy as np
import structlog

from observability import metrics
from shared_types import Sentiment, ThemeTrend

from .analysis import AnalysisError, RemoteAnalyzer, leading_int, text_items
from .dates import day_key, to_local
from .models import Entry, ThemeAnalysis, coerce_sentiment
from .stats import dominant_sentiment, rank_themes, round_half_up

logger = structlog.get_logger()

DEFAULT_LIMIT = 8
MAX_REMOTE_THEMES = 10
CONTEXT_THEMES = 5
CONTEXT_ENTRIES = 5
MAX_EXAMPLES = 3
MAX_RELATED = 3
EXAMPLE_CHARS = 100
TREND_THRESHOLD = 0.2


def _week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def weekly_counts(entries: list[Entry], theme: str, first_week: date, last_week: date) -> list[int]:
    """Entries carrying theme per Monday-based week, dense from first_week to last_week."""
    buckets = Counter(
        _week_start(day_key(e.created_at)) for e in entries if theme in e.themes
    )
    counts = []
    week = first_week
    while week <= last_week:
        counts.append(buckets.get(week, 0))
        week += timedelta(weeks=1)
    return counts


def growth_rate(counts: list[int]) -> float:
    """Least-squares slope of counts normalized by their mean."""
    if len(counts) < 2 or not any(counts):
        return 0.0
    x = np.arange(len(counts), dtype=float)
    y = np.array(counts, dtype=float)
    mean_y = y.mean()
    if mean_y == 0:
        return 0.0
    slope = np.polyfit(x, y, 1)[0]
    return float(slope / mean_y)


def classify_trend(rate: float, threshold: float = TREND_THRESHOLD) -> ThemeTrend:
    if rate > threshold:
        return ThemeTrend.INCREASING
    if rate < -threshold:
        return ThemeTrend.DECREASING
    return ThemeTrend.STABLE


def related_themes(entries: list[Entry], theme: str, limit: int = MAX_RELATED) -> list[str]:
    """Themes that most often share an entry with theme; ties keep first-seen order."""
    co = Counter(
        other for e in entries if theme in e.themes for other in e.themes if other != theme
    )
    ranked = sorted(co.items(), key=lambda item: item[1], reverse=True)
    return [name for name, _ in ranked[:limit]]


def _example(text: str) -> str:
    return text[:EXAMPLE_CHARS] + "..."


def analyze_themes(entries: list[Entry], limit: Optional[int] = DEFAULT_LIMIT) -> list[ThemeAnalysis]:
    """Per-theme frequency, tone, examples, trend and neighbours.

    Args:
        entries: Entry snapshot, most recent first (examples follow this order)
        limit: Maximum themes returned, most frequent first

    Returns:
        One ThemeAnalysis per theme; empty for no entries
    """
    entries = list(entries)
    if not entries:
        return []

    weeks = [_week_start(day_key(e.created_at)) for e in entries]
    first_week, last_week = min(weeks), max(weeks)

    results = []
    for stat in rank_themes(entries, limit=limit):
        carrying = [e for e in entries if stat.theme in e.themes]
        rate = growth_rate(weekly_counts(entries, stat.theme, first_week, last_week))
        results.append(
            ThemeAnalysis(
                theme=stat.theme,
                frequency=stat.count,
                percentage=min(round_half_up(stat.count / len(entries) * 100), 100),
                sentiment=dominant_sentiment(carrying) if carrying else Sentiment.NEUTRAL,
                examples=[_example(e.text) for e in carrying[:MAX_EXAMPLES]],
                trend=classify_trend(rate),
                related_themes=related_themes(entries, stat.theme),
            )
        )
    return results


_THEME_PROMPT = """Analyze this user's journal entries to identify recurring themes and patterns,
and how they relate to the user's emotional state and experiences.

{context}

Return the analysis in this exact JSON format:
{{
  "themes": [
    {{
      "theme": "theme name",
      "frequency": number,
      "percentage": number,
      "sentiment": "positive|negative|neutral|mixed",
      "examples": ["example1", "example2", "example3"],
      "trend": "increasing|decreasing|stable",
      "relatedThemes": ["related1", "related2"]
    }}
  ]
}}"""


def _time_range(entries: list[Entry]) -> str:
    stamps = [to_local(e.created_at) for e in entries]
    span = (max(stamps) - min(stamps)).days
    if span <= 7:
        return "the past week"
    if span <= 30:
        return "the past month"
    if span <= 90:
        return "the past few months"
    return "several months"


def build_theme_prompt(entries: list[Entry]) -> str:
    top = [t.theme for t in rank_themes(entries, limit=CONTEXT_THEMES)]
    recent = " | ".join(
        ", ".join(e.themes[:2]) or "general reflection" for e in entries[:CONTEXT_ENTRIES]
    )
    context = (
        f"The user has written {len(entries)} journal entries over {_time_range(entries)}. "
        f"The most common themes are: {', '.join(top) or 'general reflection'}. "
        f"The emotional tone has been mostly {dominant_sentiment(entries)}. "
        f"Recent entries include themes like: {recent}"
    )
    return _THEME_PROMPT.format(context=context)


def _coerce_trend(value) -> ThemeTrend:
    try:
        return ThemeTrend(value)
    except ValueError:
        return ThemeTrend.STABLE


def repair_theme_analyses(payload: dict, limit: Optional[int] = MAX_REMOTE_THEMES) -> list[ThemeAnalysis]:
    """Clamp a model's theme list into ThemeAnalysis records.

    Raises:
        AnalysisError: The reply has no "themes" list
    """
    raw = payload.get("themes")
    if not isinstance(raw, list):
        raise AnalysisError("Model reply has no themes list")

    cap = MAX_REMOTE_THEMES if limit is None else min(limit, MAX_REMOTE_THEMES)
    results = []
    for index, item in enumerate(raw[:cap]):
        if not isinstance(item, dict):
            item = {}
        name = item.get("theme")
        frequency = leading_int(item.get("frequency"))
        percentage = leading_int(item.get("percentage"))
        results.append(
            ThemeAnalysis(
                theme=name if isinstance(name, str) and name.strip() else f"theme-{index}",
                frequency=frequency if frequency and frequency > 0 else 1,
                percentage=min(max(percentage or 0, 0), 100),
                sentiment=coerce_sentiment(item.get("sentiment")),
                examples=text_items(item.get("examples"))[:MAX_EXAMPLES],
                trend=_coerce_trend(item.get("trend")),
                related_themes=text_items(item.get("relatedThemes"))[:MAX_RELATED],
            )
        )
    return results


async def discover_themes(
    entries: list[Entry],
    analyzer: Optional[RemoteAnalyzer] = None,
    limit: Optional[int] = DEFAULT_LIMIT,
) -> tuple[list[ThemeAnalysis], bool]:
    """Theme analysis from the model, or analyze_themes() when it is unavailable.

    Returns:
        (themes, fallback_used)
    """
    entries = list(entries)
    if analyzer is None or not entries:
        metrics.counter("themes.fallback")
        return analyze_themes(entries, limit=limit), True

    try:
        with metrics.timer("themes.remote_call"):
            payload = await analyzer.request_json(build_theme_prompt(entries))
        themes = repair_theme_analyses(payload, limit)
    except AnalysisError as e:
        logger.warning("remote_themes_failed", error=str(e), error_type=type(e).__name__)
        metrics.counter("themes.fallback")
        return analyze_themes(entries, limit=limit), True

    metrics.counter("themes.remote")
    return themes, False
