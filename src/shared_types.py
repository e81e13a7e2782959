"""Shared enums and types for journal-companion."""

from enum import StrEnum


class Sentiment(StrEnum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    MIXED = "mixed"


class Period(StrEnum):
    WEEK = "week"
    MONTH = "month"


class ThemeTrend(StrEnum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class PromptCategory(StrEnum):
    REFLECTION = "reflection"
    GRATITUDE = "gratitude"
    GROWTH = "growth"
    RELATIONSHIP = "relationship"
    WORK = "work"
    CREATIVITY = "creativity"
    HEALTH = "health"
    STRESS = "stress"
