"""Base LLM provider abstraction."""

from abc import ABC, abstractmethod


class LLMError(Exception):
    """Base LLM error."""


class LLMRateLimitError(LLMError):
    """Rate limit hit."""


class LLMAuthError(LLMError):
    """Authentication failure."""


class LLMProvider(ABC):
    """Abstract LLM provider interface."""

    provider_name: str = "base"

    @abstractmethod
    def generate(
        self,
        messages: list[dict],
        system: str | None = None,
        max_tokens: int = 1000,
        json_output: bool = False,
    ) -> str:
        """Generate a response from messages.

        Args:
            messages: List of {"role": ..., "content": ...} dicts
            system: Optional system prompt
            max_tokens: Max response tokens
            json_output: Ask the provider for a JSON-only reply where supported

        Returns:
            Generated text (never empty)

        Raises:
            LLMError: On any transport/SDK failure or an empty reply
        """
        ...


def require_text(text: str | None, provider_name: str) -> str:
    """Reject empty replies so callers never mistake them for a valid answer."""
    if not text or not text.strip():
        raise LLMError(f"{provider_name} returned an empty response")
    return text
