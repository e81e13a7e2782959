"""Shared test fixtures for journal-companion."""

import sys
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from journal.models import Entry, count_words  # noqa: E402
from observability import metrics  # noqa: E402
from shared_types import Sentiment  # noqa: E402

# Wednesday; its week runs Mon 2026-10-12 .. Sun 2026-10-18
FIXED_NOW = datetime(2026, 10, 14, 12, 0)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def make_entry():
    """Factory for entries relative to FIXED_NOW."""
    counter = {"n": 0}

    def _make(
        text: str = "A quiet day.",
        days_ago: int = 0,
        sentiment: Sentiment | str = Sentiment.NEUTRAL,
        themes: list[str] | None = None,
        word_count: int | None = None,
        created_at: datetime | None = None,
        entry_id: str | None = None,
    ) -> Entry:
        counter["n"] += 1
        return Entry(
            id=entry_id or f"entry-{counter['n']}",
            text=text,
            created_at=created_at or FIXED_NOW - timedelta(days=days_ago),
            sentiment=Sentiment(sentiment),
            themes=list(themes or []),
            word_count=count_words(text) if word_count is None else word_count,
        )

    return _make


@pytest.fixture
def sample_entries(make_entry):
    """Most recent first, as the session keeps them."""
    return [
        make_entry(
            "Great day at work, the launch went well and I feel happy",
            days_ago=0,
            sentiment="positive",
            themes=["work"],
        ),
        make_entry(
            "Dinner with family, a little stressed about the move",
            days_ago=1,
            sentiment="mixed",
            themes=["family", "stress"],
        ),
        make_entry(
            "Could not sleep, worried about deadlines at work",
            days_ago=3,
            sentiment="negative",
            themes=["work", "stress", "health"],
        ),
    ]


@pytest.fixture
def mock_provider():
    """LLMProvider stand-in returning a well-formed analysis."""
    provider = MagicMock()
    provider.provider_name = "claude"
    provider.generate.return_value = (
        '{"sentiment": "positive", "themes": ["work", "growth"], '
        '"insights": "You sound proud of your progress.", "wordCount": 9, '
        '"emotionalIntensity": 6, "keyTopics": ["launch"]}'
    )
    return provider
