"""Entry enrichment: remote analysis with repair, or a full local fallback."""

from datetime import datetime
from typing import Optional

import structlog

from observability import metrics
from shared_types import Sentiment

from .analysis import RemoteAnalyzer, leading_int, text_items
from .models import (
    DEFAULT_THEME,
    MAX_KEY_TOPICS,
    MAX_THEMES,
    ClassificationResult,
    EnrichedFields,
    count_words,
    dedupe,
)
from .sentiment import MAX_INTENSITY, classify
from .suggestions import select_suggestions

logger = structlog.get_logger()

DEFAULT_INSIGHT = (
    "Thank you for sharing your thoughts. Every entry helps you understand yourself better."
)
DEFAULT_INTENSITY = 5


def repair_analysis(payload: dict, text: str) -> ClassificationResult:
    """Validate every field of a remote payload independently.

    Each field that is missing or out of range is repaired on its own; a bad
    field never discards the good ones.
    """
    try:
        sentiment = Sentiment(payload.get("sentiment"))
    except ValueError:
        sentiment = Sentiment.NEUTRAL

    raw_themes = payload.get("themes")
    if isinstance(raw_themes, list):
        themes = dedupe(text_items(raw_themes))[:MAX_THEMES]
    else:
        themes = [DEFAULT_THEME]

    insight = payload.get("insights")
    if not isinstance(insight, str) or not insight.strip():
        insight = DEFAULT_INSIGHT

    word_count = leading_int(payload.get("wordCount"))
    if word_count is None or word_count <= 0:
        word_count = count_words(text)

    intensity = leading_int(payload.get("emotionalIntensity"))
    if not intensity:
        intensity = DEFAULT_INTENSITY
    intensity = min(max(intensity, 1), MAX_INTENSITY)

    raw_topics = payload.get("keyTopics")
    if isinstance(raw_topics, list):
        key_topics = text_items(raw_topics)[:MAX_KEY_TOPICS]
    else:
        key_topics = themes[:MAX_KEY_TOPICS]

    return ClassificationResult(
        sentiment=sentiment,
        themes=themes,
        insight_note=insight,
        word_count=word_count,
        intensity=intensity,
        key_topics=key_topics,
    )


def local_enrichment(
    text: str, with_suggestions: bool = False, now: Optional[datetime] = None
) -> EnrichedFields:
    """Heuristic-only enrichment; always fully populated."""
    result = classify(text)
    suggestions = []
    if with_suggestions:
        suggestions = select_suggestions([], text, result.sentiment, result.themes, now)
    return EnrichedFields(
        sentiment=result.sentiment,
        themes=result.themes,
        insight_note=result.insight_note,
        word_count=result.word_count,
        # Entries only carry intensities in [1, 10]
        intensity=max(result.intensity, 1),
        key_topics=result.key_topics,
        suggestions=suggestions,
        fallback_used=True,
    )


class EntryEnricher:
    """Try the remote model, repair its answer, or fall back to local heuristics."""

    def __init__(self, analyzer: Optional[RemoteAnalyzer] = None, with_suggestions: bool = False):
        """
        Args:
            analyzer: Remote analyzer; None runs fully offline
            with_suggestions: Also produce up to 3 action suggestions
        """
        self.analyzer = analyzer
        self.with_suggestions = with_suggestions

    async def enrich(self, text: str, now: Optional[datetime] = None) -> EnrichedFields:
        """Enrich entry text. Never raises for remote failures.

        The result's fallback_used flag tells observers which tier answered; it
        must not drive behavior.
        """
        if self.analyzer is None:
            metrics.counter("enrichment.fallback")
            return local_enrichment(text, self.with_suggestions, now)

        try:
            with metrics.timer("enrichment.remote_call"):
                payload = await self.analyzer.analyze(text, with_suggestions=self.with_suggestions)
            repaired = repair_analysis(payload, text)
        except Exception as e:
            logger.warning("remote_analysis_failed", error=str(e), error_type=type(e).__name__)
            metrics.counter("enrichment.fallback")
            return local_enrichment(text, self.with_suggestions, now)

        suggestions = []
        if self.with_suggestions:
            base = text_items(payload.get("suggestions"))
            suggestions = select_suggestions(
                base, text, repaired.sentiment, repaired.themes, now
            )

        metrics.counter("enrichment.remote")
        logger.debug("entry_enriched", sentiment=str(repaired.sentiment), themes=repaired.themes)
        return EnrichedFields(
            sentiment=repaired.sentiment,
            themes=repaired.themes,
            insight_note=repaired.insight_note,
            word_count=repaired.word_count,
            intensity=repaired.intensity,
            key_topics=repaired.key_topics,
            suggestions=suggestions,
            fallback_used=False,
        )
