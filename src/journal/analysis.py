"""Remote entry analysis through an LLM provider.

The analyzer only talks to the model and parses its reply. It never fills in
defaults: any reply it cannot read raises AnalysisError and the caller decides
what to do (see enrichment.EntryEnricher).
"""

import asyncio
import json
import math
import re
from typing import Optional

import structlog

from cli.retry import llm_retry
from llm import LLMError, LLMProvider

logger = structlog.get_logger()

EXPECTED_KEYS = ("sentiment", "themes", "insights", "wordCount", "emotionalIntensity", "keyTopics")

_SYSTEM = (
    "You are an empathetic journaling companion. Be gentle, non-judgmental and "
    "supportive. Reply with JSON only."
)

_PROMPT = """Analyze this journal entry and provide:
1. Sentiment analysis (positive, negative, neutral, or mixed)
2. Key themes and topics discussed
3. A gentle insight about their emotional state
4. Word count
5. Emotional intensity (1-10 scale, where 1 is very calm and 10 is very intense)
6. Key topics for further reflection
{suggestions_item}
Return the analysis in this exact JSON format:
{{
  "sentiment": "positive|negative|neutral|mixed",
  "themes": ["theme1", "theme2", "theme3"],
  "insights": "A gentle, empathetic insight about their entry",
  "wordCount": number,
  "emotionalIntensity": number,
  "keyTopics": ["topic1", "topic2", "topic3"]{suggestions_field}
}}

Journal Entry:
\"\"\"
{text}
\"\"\""""

_SUGGESTIONS_ITEM = "7. Three short, concrete actions they could take next\n"
_SUGGESTIONS_FIELD = ',\n  "suggestions": ["action1", "action2", "action3"]'

_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class AnalysisError(Exception):
    """Remote analysis failed or returned something unreadable."""


def build_prompt(text: str, with_suggestions: bool = False) -> str:
    return _PROMPT.format(
        text=text,
        suggestions_item=_SUGGESTIONS_ITEM if with_suggestions else "",
        suggestions_field=_SUGGESTIONS_FIELD if with_suggestions else "",
    )


def extract_json_object(reply: str) -> dict:
    """Pull the outermost JSON object out of a model reply.

    Raises:
        AnalysisError: No object found, invalid JSON, or not an object
    """
    cleaned = reply.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.split("\n", 1)[-1]
        if cleaned.endswith("```"):
            cleaned = cleaned[: cleaned.rfind("```")]

    match = _OBJECT_RE.search(cleaned)
    if not match:
        raise AnalysisError("No JSON object in model reply")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise AnalysisError(f"Unparsable model reply: {e}") from e

    if not isinstance(parsed, dict):
        raise AnalysisError(f"Expected JSON object, got {type(parsed).__name__}")
    return parsed


def leading_int(value) -> Optional[int]:
    """Integer value of an int, float, or string starting with digits; else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return None


def text_items(value) -> list[str]:
    """Non-blank strings of a reply list; empty when value is not a list."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item.strip()]


class RemoteAnalyzer:
    """Classify entry text with a remote model."""

    def __init__(
        self,
        provider: LLMProvider,
        max_tokens: int = 1000,
        max_attempts: int = 3,
        min_wait: float = 2.0,
        max_wait: float = 30.0,
    ):
        """
        Args:
            provider: Any LLMProvider; its SDK owns timeouts/cancellation
            max_tokens: Reply budget
            max_attempts: Attempts per call, rate limits only
            min_wait: Backoff floor (seconds)
            max_wait: Backoff ceiling (seconds)
        """
        self.provider = provider
        self.max_tokens = max_tokens
        self._generate = llm_retry(
            max_attempts=max_attempts, min_wait=min_wait, max_wait=max_wait
        )(self._generate_once)

    async def _generate_once(self, prompt: str) -> str:
        # Provider SDKs are blocking; keep the event loop free for other entries
        return await asyncio.to_thread(
            self.provider.generate,
            messages=[{"role": "user", "content": prompt}],
            system=_SYSTEM,
            max_tokens=self.max_tokens,
            json_output=True,
        )

    async def request_json(self, prompt: str) -> dict:
        """Send prompt and return the JSON object in the reply.

        Raises:
            AnalysisError: Transport failure or no readable object in the reply
        """
        try:
            reply = await self._generate(prompt)
        except LLMError as e:
            raise AnalysisError(f"{self.provider.provider_name} call failed: {e}") from e
        return extract_json_object(reply)

    async def analyze(self, text: str, with_suggestions: bool = False) -> dict:
        """Request an analysis and return the raw parsed payload.

        Args:
            text: Entry text
            with_suggestions: Also ask for a "suggestions" list

        Returns:
            Parsed JSON object with at least one of EXPECTED_KEYS

        Raises:
            AnalysisError: Transport failure, unreadable reply, or wrong shape
        """
        payload = await self.request_json(build_prompt(text, with_suggestions))
        if not any(key in payload for key in EXPECTED_KEYS):
            raise AnalysisError(
                f"Model reply has none of the expected keys: {sorted(payload)[:5]}"
            )

        logger.debug(
            "remote_analysis_parsed",
            provider=self.provider.provider_name,
            keys=sorted(payload),
        )
        return payload


def analyzer_from_config(provider: Optional[LLMProvider], config) -> Optional[RemoteAnalyzer]:
    """Wire a RemoteAnalyzer from a JournalConfig; None when no provider."""
    if provider is None:
        return None
    return RemoteAnalyzer(
        provider,
        max_tokens=config.llm.max_tokens,
        max_attempts=config.retry.max_attempts,
        min_wait=config.retry.min_wait,
        max_wait=config.retry.llm_max_wait,
    )
