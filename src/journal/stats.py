"""Windowed dashboard statistics over a snapshot of entries.

Everything here is pure: the same entries, window and `now` always give the
same result.
"""

import math
from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable, Optional

from shared_types import Sentiment

from .dates import day_key, start_of_day, to_local
from .models import DashboardStats, Entry, ThemeStat, TrendPoint

TOP_THEMES_LIMIT = 5


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (round() would go to even)."""
    return math.floor(value + 0.5)


def sentiment_counts(entries: Iterable[Entry]) -> dict[str, int]:
    """Occurrences of each sentiment present, in first-seen order; absent ones omitted."""
    return dict(Counter(str(e.sentiment) for e in entries))


def rank_themes(entries: Iterable[Entry], limit: Optional[int] = TOP_THEMES_LIMIT) -> list[ThemeStat]:
    """Theme frequencies, highest first; ties keep first-seen order."""
    counts = Counter(theme for e in entries for theme in e.themes)
    # sorted() is stable and Counter keeps insertion order, so ties stay first-seen
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return [ThemeStat(theme=theme, count=count) for theme, count in ranked]


def dominant_sentiment(entries: Iterable[Entry]) -> Sentiment:
    """Most frequent sentiment (first-seen wins ties); neutral when empty."""
    counts = sentiment_counts(entries)
    if not counts:
        return Sentiment.NEUTRAL
    top = max(counts.values())
    return Sentiment(next(s for s, c in counts.items() if c == top))


def filter_window(entries: Iterable[Entry], window_days: int, now: datetime) -> list[Entry]:
    """Entries created at or after the start of the day window_days ago."""
    cutoff = start_of_day(now - timedelta(days=window_days))
    return [e for e in entries if to_local(e.created_at) >= cutoff]


def sentiment_trend(entries: list[Entry], window_days: int, now: datetime) -> list[TrendPoint]:
    """Dense per-day sentiment counts for the window_days days ending today, oldest first."""
    by_day: dict = {}
    for e in entries:
        by_day.setdefault(day_key(e.created_at), Counter())[str(e.sentiment)] += 1

    points = []
    for offset in range(window_days - 1, -1, -1):
        day = day_key(now - timedelta(days=offset))
        counts = by_day.get(day, Counter())
        points.append(
            TrendPoint(
                day=day,
                date_label=day.strftime("%b %d"),
                positive=counts[Sentiment.POSITIVE],
                negative=counts[Sentiment.NEGATIVE],
                neutral=counts[Sentiment.NEUTRAL],
                mixed=counts[Sentiment.MIXED],
            )
        )
    return points


def aggregate(
    entries: Iterable[Entry], window_days: int, now: Optional[datetime] = None
) -> DashboardStats:
    """Compute dashboard statistics for the last window_days days.

    Args:
        entries: Entry snapshot, any order
        window_days: Positive number of days
        now: Reference time (defaults to now)

    Timestamps are taken as stored: an entry dated after today counts in the
    totals but falls outside the trend days, matching current_streak.

    Returns:
        DashboardStats; an empty window yields zeros and a zero-filled trend

    Raises:
        TypeError: window_days is not an int
        ValueError: window_days is not positive
    """
    if not isinstance(window_days, int) or isinstance(window_days, bool):
        raise TypeError(f"window_days must be an int, got {type(window_days).__name__}")
    if window_days <= 0:
        raise ValueError(f"window_days must be positive, got {window_days}")

    now = now or datetime.now()
    filtered = filter_window(entries, window_days, now)

    total_entries = len(filtered)
    total_words = sum(e.word_count for e in filtered)
    avg = round_half_up(total_words / total_entries) if total_entries else 0

    return DashboardStats(
        window_days=window_days,
        total_entries=total_entries,
        total_words=total_words,
        avg_words_per_entry=avg,
        sentiment_counts=sentiment_counts(filtered),
        top_themes=rank_themes(filtered),
        trend=sentiment_trend(filtered, window_days, now),
    )
