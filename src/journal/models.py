"""Data models for journal entries and the views derived from them."""

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional

from shared_types import Period, PromptCategory, Sentiment, ThemeTrend

from .dates import parse_timestamp

DEFAULT_THEME = "reflection"
MAX_THEMES = 5
MAX_KEY_TOPICS = 3
MIN_INTENSITY = 1
MAX_INTENSITY = 10


def count_words(text: str) -> int:
    """Whitespace-tokenized word count."""
    return len(text.split())


def dedupe(items: list[str]) -> list[str]:
    """Drop exact duplicates, keeping first occurrence order."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def _string_list(value) -> Optional[list[str]]:
    """Strings from a stored list; None when the value is not a list at all."""
    if not isinstance(value, list):
        return None
    return [item for item in value if isinstance(item, str)]


def _stored_intensity(value) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if MIN_INTENSITY <= value <= MAX_INTENSITY else None


def coerce_sentiment(value) -> Sentiment:
    try:
        return Sentiment(value)
    except ValueError:
        return Sentiment.NEUTRAL


@dataclass
class ClassificationResult:
    """Sentiment/theme analysis of one text, from the model or the heuristics."""

    sentiment: Sentiment
    themes: list[str]
    insight_note: str
    word_count: int
    intensity: int
    key_topics: list[str] = field(default_factory=list)


@dataclass
class EnrichedFields(ClassificationResult):
    """Fully populated enrichment output handed back to the caller."""

    suggestions: list[str] = field(default_factory=list)
    fallback_used: bool = False


@dataclass(frozen=True)
class Entry:
    """A single journal record.

    id, text and created_at never change; everything else is replaced as a
    unit by with_enrichment().
    """

    id: str
    text: str
    created_at: datetime
    sentiment: Sentiment = Sentiment.NEUTRAL
    themes: list[str] = field(default_factory=list)
    word_count: int = 0
    insight_note: Optional[str] = None
    emotional_intensity: Optional[int] = None
    key_topics: Optional[list[str]] = None

    def with_enrichment(self, fields: ClassificationResult) -> "Entry":
        word_count = fields.word_count if fields.word_count > 0 else count_words(self.text)
        return replace(
            self,
            sentiment=coerce_sentiment(fields.sentiment),
            themes=dedupe(list(fields.themes)),
            insight_note=fields.insight_note,
            word_count=word_count,
            emotional_intensity=fields.intensity,
            key_topics=list(fields.key_topics)[:MAX_KEY_TOPICS],
        )

    @property
    def display_themes(self) -> list[str]:
        return self.themes or [DEFAULT_THEME]

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "content": self.text,
            "timestamp": self.created_at.isoformat(),
            "sentiment": str(self.sentiment),
            "themes": list(self.themes),
            "wordCount": self.word_count,
        }
        if self.insight_note is not None:
            data["aiInsights"] = self.insight_note
        if self.emotional_intensity is not None:
            data["emotionalIntensity"] = self.emotional_intensity
        if self.key_topics is not None:
            data["keyTopics"] = list(self.key_topics)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Entry":
        """Build from the stored shape, repairing fields that break invariants.

        Raises:
            KeyError/ValueError: If id, content or timestamp is missing or unparsable
        """
        text = data["content"]
        key_topics = _string_list(data.get("keyTopics"))
        insight_note = data.get("aiInsights")
        word_count = data.get("wordCount")
        if not isinstance(word_count, int) or isinstance(word_count, bool):
            word_count = count_words(text)
        return cls(
            id=str(data["id"]),
            text=text,
            created_at=parse_timestamp(data["timestamp"]),
            sentiment=coerce_sentiment(data.get("sentiment")),
            themes=dedupe(_string_list(data.get("themes")) or []),
            word_count=max(word_count, 0),
            insight_note=insight_note if isinstance(insight_note, str) else None,
            emotional_intensity=_stored_intensity(data.get("emotionalIntensity")),
            key_topics=key_topics[:MAX_KEY_TOPICS] if key_topics is not None else None,
        )


def new_entry(text: str, now: Optional[datetime] = None) -> Optional[Entry]:
    """Placeholder entry for freshly committed text, or None for blank text."""
    if not text or not text.strip():
        return None
    return Entry(
        id=uuid.uuid4().hex[:16],
        text=text,
        created_at=now or datetime.now(),
        word_count=count_words(text),
    )


@dataclass
class ThemeStat:
    theme: str
    count: int


@dataclass
class TrendPoint:
    """Per-sentiment entry counts for one calendar day."""

    day: date
    date_label: str
    positive: int = 0
    negative: int = 0
    neutral: int = 0
    mixed: int = 0


@dataclass
class DashboardStats:
    window_days: int
    total_entries: int
    total_words: int
    avg_words_per_entry: int
    sentiment_counts: dict[str, int]
    top_themes: list[ThemeStat]
    trend: list[TrendPoint]


@dataclass
class PeriodInsight:
    period: Period
    entry_count: int
    summary: str = ""
    top_themes: list[str] = field(default_factory=list)
    dominant_sentiment: Sentiment = Sentiment.NEUTRAL
    patterns: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    positive_highlights: list[Entry] = field(default_factory=list)
    growth_areas: list[str] = field(default_factory=list)
    theme_stats: list[ThemeStat] = field(default_factory=list)
    fallback_used: bool = False

    @property
    def is_empty(self) -> bool:
        return self.entry_count == 0


@dataclass
class ThemeAnalysis:
    theme: str
    frequency: int
    percentage: int
    sentiment: Sentiment
    examples: list[str]
    trend: ThemeTrend
    related_themes: list[str]


@dataclass
class PromptSuggestion:
    id: str
    text: str
    category: PromptCategory
    context: str = ""


@dataclass
class StreakStats:
    current: int
    longest: int
    active_days: int
    last_entry_day: Optional[date] = None
