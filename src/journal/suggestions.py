"""Weekly-rotating action suggestions seeded by entry content.

The same (text, calendar week) pair always yields the same suggestions; a new
week reshuffles the pool without any stored state.
"""

import hashlib
import random
from datetime import datetime
from typing import Optional

from shared_types import Sentiment

from .dates import week_identifier

MAX_SUGGESTIONS = 3

SUGGESTION_POOLS = {
    "general": [
        "Take a 10-minute walk without your phone",
        "Write down three things that went well today",
        "Drink a glass of water and take five slow breaths",
        "Set one small, achievable intention for tomorrow",
        "Spend five minutes tidying your space",
        "Revisit an older entry and notice what has changed",
    ],
    "stress": [
        "Try a 4-7-8 breathing exercise",
        "List what is in your control and what is not",
        "Schedule a short break away from screens",
        "Do a quick body scan and relax your shoulders",
        "Break the biggest worry into one next step",
    ],
    "work": [
        "Block 30 minutes of focus time on your calendar",
        "Pick the single most important task for tomorrow",
        "Set a clear end time for your workday",
        "Note one win from work, however small",
    ],
    "relationships": [
        "Send a kind message to someone you care about",
        "Plan a short call with a friend or family member",
        "Tell someone what you appreciate about them",
        "Listen fully in your next conversation",
    ],
    "health": [
        "Go to bed 30 minutes earlier tonight",
        "Stretch for five minutes",
        "Prepare a nourishing meal or snack",
        "Get some daylight in the next hour",
    ],
    "creativity": [
        "Spend 15 minutes on a creative project",
        "Sketch or doodle without judging the result",
        "Listen to an album you have never heard",
        "Capture one idea you want to explore",
    ],
    "gratitude": [
        "Write a thank-you note you may never send",
        "Name one person who made today easier",
        "Savor one good moment for thirty seconds",
    ],
}


def _candidate_pool(text: str, sentiment: Sentiment | str, themes: list[str]) -> list[str]:
    lowered = text.lower()
    theme_set = set(themes)

    pool = list(SUGGESTION_POOLS["general"])
    if sentiment == Sentiment.NEGATIVE or "stress" in lowered or "anxiety" in lowered:
        pool.extend(SUGGESTION_POOLS["stress"])
    if "work" in theme_set:
        pool.extend(SUGGESTION_POOLS["work"])
    if theme_set & {"family", "relationships"} or "friend" in lowered:
        pool.extend(SUGGESTION_POOLS["relationships"])
    if "health" in theme_set:
        pool.extend(SUGGESTION_POOLS["health"])
    if "creativity" in theme_set:
        pool.extend(SUGGESTION_POOLS["creativity"])
    if "gratitude" in theme_set or "grateful" in lowered:
        pool.extend(SUGGESTION_POOLS["gratitude"])
    return pool


def _dedupe_casefold(items: list) -> list[str]:
    seen = set()
    result = []
    for item in items:
        if not isinstance(item, str) or not item.strip():
            continue
        key = item.strip().casefold()
        if key not in seen:
            seen.add(key)
            result.append(item.strip())
    return result


def weekly_seed(text: str, now: datetime) -> int:
    """Stable integer seed for (text, week); sha256 so it survives process restarts."""
    digest = hashlib.sha256(f"{text}|{week_identifier(now)}".encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def select_suggestions(
    base_suggestions: list[str],
    text: str,
    sentiment: Sentiment | str,
    themes: list[str],
    now: Optional[datetime] = None,
) -> list[str]:
    """Pick up to 3 suggestions from base + themed pools, shuffled per week.

    Args:
        base_suggestions: Caller-supplied suggestions (e.g. from the model), kept first in the pool
        text: Entry text, part of the seed
        sentiment: Entry sentiment
        themes: Entry themes
        now: Reference time for the week bucket (defaults to now)

    Returns:
        Up to 3 suggestions, unique case-insensitively
    """
    now = now or datetime.now()
    candidates = _dedupe_casefold(
        list(base_suggestions or []) + _candidate_pool(text, sentiment, themes)
    )
    rng = random.Random(weekly_seed(text, now))
    rng.shuffle(candidates)
    return candidates[:MAX_SUGGESTIONS]
