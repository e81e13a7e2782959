"""Daily journaling streaks over entry timestamps."""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from .dates import day_key
from .models import StreakStats

ONE_DAY = timedelta(days=1)


def unique_days(timestamps: Iterable[datetime]) -> list[date]:
    """Distinct local calendar days, most recent first."""
    return sorted({day_key(ts) for ts in timestamps}, reverse=True)


def current_streak(timestamps: Iterable[datetime], now: Optional[datetime] = None) -> int:
    """Consecutive days with an entry, counted back from today or yesterday.

    A run whose latest day is yesterday is still alive; anything older is 0.
    Several entries on one day count once, and the first missing day ends the
    walk. Timestamps are taken as stored, so a latest day after today also
    gives 0.
    """
    today = day_key(now or datetime.now())
    days = set(unique_days(timestamps))
    if not days:
        return 0

    latest = max(days)
    if latest == today:
        cursor = today
    elif latest == today - ONE_DAY:
        cursor = latest
    else:
        return 0

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= ONE_DAY
    return streak


def longest_streak(timestamps: Iterable[datetime]) -> int:
    """Longest run of consecutive days anywhere in the history."""
    days = sorted(set(day_key(ts) for ts in timestamps))
    if not days:
        return 0

    longest = run = 1
    for prev, day in zip(days, days[1:]):
        if day - prev == ONE_DAY:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def streak_stats(timestamps: Iterable[datetime], now: Optional[datetime] = None) -> StreakStats:
    timestamps = list(timestamps)
    days = unique_days(timestamps)
    current = current_streak(timestamps, now)
    return StreakStats(
        current=current,
        longest=max(longest_streak(timestamps), current),
        active_days=len(days),
        last_entry_day=days[0] if days else None,
    )


def encouragement(stats: StreakStats) -> str:
    """Short message matched to the current streak length."""
    streak = stats.current
    if streak == 0:
        if stats.active_days == 0:
            return "Your first entry is waiting. A few lines is all it takes."
        return "Welcome back. Pick up where you left off today."
    if streak == 1:
        return "Day one done. Come back tomorrow to keep it going."
    if streak < 7:
        return f"{streak} days in a row. The habit is taking shape."
    if streak < 30:
        return f"{streak}-day streak. Writing is part of your routine now."
    if streak < 100:
        return f"{streak} days straight. That is real commitment to reflection."
    return f"{streak}-day streak. Remarkable consistency."
