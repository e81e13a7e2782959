"""Context-aware writing prompts built from the most recent entries."""

from typing import Optional, Sequence

import structlog

from observability import metrics
from shared_types import PromptCategory, Sentiment

from .analysis import AnalysisError, RemoteAnalyzer
from .models import Entry, PromptSuggestion
from .stats import dominant_sentiment

logger = structlog.get_logger()

MAX_PROMPTS = 6
RECENT_WINDOW = 3
EXCERPT_CHARS = 100

DEFAULT_PROMPT_TEXT = "What would you like to reflect on today?"
DEFAULT_PROMPT_CONTEXT = "Continue your journaling journey"

STARTER_PROMPTS = (
    PromptSuggestion(
        id="starter-gratitude",
        text="What's one thing you're grateful for today?",
        category=PromptCategory.GRATITUDE,
        context="Start your journaling journey with gratitude",
    ),
    PromptSuggestion(
        id="starter-feeling",
        text="How are you feeling right now, and what led to this feeling?",
        category=PromptCategory.REFLECTION,
        context="Begin exploring your emotional landscape",
    ),
)

CALM_PROMPT = PromptSuggestion(
    id="stress-relief",
    text="What's one small thing that brought you peace today?",
    category=PromptCategory.REFLECTION,
    context="Focus on finding moments of calm",
)
WORK_BALANCE_PROMPT = PromptSuggestion(
    id="work-balance",
    text="How did you maintain work-life balance today?",
    category=PromptCategory.REFLECTION,
    context="Reflect on your work boundaries",
)
FAMILY_PROMPT = PromptSuggestion(
    id="family-connection",
    text="What's a meaningful interaction you had with family today?",
    category=PromptCategory.RELATIONSHIP,
    context="Cherish family connections",
)
POSITIVE_PROMPT = PromptSuggestion(
    id="positive-moment",
    text="What made today's positive moments possible?",
    category=PromptCategory.REFLECTION,
    context="Understand what brings you joy",
)
GROWTH_PROMPT = PromptSuggestion(
    id="growth-reflection",
    text="What's one thing you learned about yourself this week?",
    category=PromptCategory.GROWTH,
    context="Track your personal development",
)


def suggest_prompts(entries: Sequence[Entry]) -> list[PromptSuggestion]:
    """Pick prompts matching the themes and tone of the latest entries.

    Args:
        entries: Entry snapshot, most recent first

    Returns:
        At most six prompts; the growth prompt always closes the list
    """
    if not entries:
        return list(STARTER_PROMPTS)

    recent = list(entries[:RECENT_WINDOW])
    themes = {theme for e in recent for theme in e.themes}
    sentiments = {e.sentiment for e in recent}

    prompts = []
    if "stress" in themes or Sentiment.NEGATIVE in sentiments:
        prompts.append(CALM_PROMPT)
    if "work" in themes:
        prompts.append(WORK_BALANCE_PROMPT)
    if "family" in themes:
        prompts.append(FAMILY_PROMPT)
    if Sentiment.POSITIVE in sentiments:
        prompts.append(POSITIVE_PROMPT)
    prompts.append(GROWTH_PROMPT)
    return prompts[:MAX_PROMPTS]


_PROMPT_REQUEST = """Based on the user's recent journal entries, generate 6 thoughtful,
context-aware writing prompts that will help them continue their self-reflection.

{context}

The prompts should show understanding of their current emotional state and themes,
encourage positive reflection and growth, and be specific to their situation.

Return the prompts in this exact JSON format:
{{
  "prompts": [
    {{
      "id": "unique-id-1",
      "text": "The actual prompt question",
      "category": "one of: reflection, gratitude, growth, relationship, work, creativity, health, stress",
      "context": "Brief explanation of why this prompt is relevant"
    }}
  ]
}}"""


def build_prompt_request(entries: Sequence[Entry], goals: Optional[Sequence[str]] = None) -> str:
    if not entries:
        parts = [
            "This is a new user starting their journaling journey. "
            "They haven't written any entries yet."
        ]
    else:
        recent = list(entries[:RECENT_WINDOW])
        themes = [theme for e in recent for theme in e.themes]
        parts = [
            f"Recent journal entries show these themes: {', '.join(themes) or 'general reflection'}.",
            f"The emotional tone has been mostly {dominant_sentiment(recent)}.",
        ]
    if goals:
        parts.append(f"The user has stated goals: {', '.join(goals)}.")
    if entries:
        excerpts = " | ".join(f'"{e.text[:EXCERPT_CHARS]}..."' for e in entries[:RECENT_WINDOW])
        parts.append(f"Recent entries include: {excerpts}")
    return _PROMPT_REQUEST.format(context=" ".join(parts))


def _text_or(value, default: str) -> str:
    return value if isinstance(value, str) and value.strip() else default


def repair_prompts(payload: dict) -> list[PromptSuggestion]:
    """Clamp a model's prompt list to at most six complete suggestions.

    Raises:
        AnalysisError: No "prompts" list, or an empty one
    """
    raw = payload.get("prompts")
    if not isinstance(raw, list) or not raw:
        raise AnalysisError("Model reply has no prompts")

    prompts = []
    for index, item in enumerate(raw[:MAX_PROMPTS]):
        if not isinstance(item, dict):
            item = {}
        try:
            category = PromptCategory(item.get("category"))
        except ValueError:
            category = PromptCategory.REFLECTION
        prompts.append(
            PromptSuggestion(
                id=_text_or(item.get("id"), f"generated-{index}"),
                text=_text_or(item.get("text"), DEFAULT_PROMPT_TEXT),
                category=category,
                context=_text_or(item.get("context"), DEFAULT_PROMPT_CONTEXT),
            )
        )
    return prompts


async def generate_prompts(
    entries: Sequence[Entry],
    analyzer: Optional[RemoteAnalyzer] = None,
    goals: Optional[Sequence[str]] = None,
) -> tuple[list[PromptSuggestion], bool]:
    """Prompts written by the model, or the rule-based ones when it is unavailable.

    Args:
        entries: Entry snapshot, most recent first
        analyzer: Remote analyzer; None uses the rules directly
        goals: Free-text goals the user wants prompts to lean towards

    Returns:
        (prompts, fallback_used)
    """
    if analyzer is None:
        metrics.counter("prompts.fallback")
        return suggest_prompts(entries), True

    try:
        with metrics.timer("prompts.remote_call"):
            payload = await analyzer.request_json(build_prompt_request(entries, goals))
        prompts = repair_prompts(payload)
    except AnalysisError as e:
        logger.warning("remote_prompts_failed", error=str(e), error_type=type(e).__name__)
        metrics.counter("prompts.fallback")
        return suggest_prompts(entries), True

    metrics.counter("prompts.remote")
    return prompts, False
