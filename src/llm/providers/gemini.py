"""Google Gemini LLM provider using google-genai SDK."""

import re

from ..base import LLMAuthError, LLMError, LLMProvider, LLMRateLimitError, require_text

# google.genai.errors.APIError carries the HTTP status as .code
_AUTH_CODES = {401, 403}
_RATE_LIMIT_CODE = 429
_RATE_LIMIT_RE = re.compile(r"\b429\b|resource[_ ]exhausted|\brate[- ]limit", re.IGNORECASE)


def _handle_gemini_error(e: Exception):
    if isinstance(e, LLMError):
        raise e
    code = getattr(e, "code", None)
    err_str = str(e).lower()
    if code in _AUTH_CODES or any(s in err_str for s in ("api key", "authentication", "permission")):
        raise LLMAuthError(f"Gemini auth failed: {e}") from e
    if code == _RATE_LIMIT_CODE or _RATE_LIMIT_RE.search(err_str):
        raise LLMRateLimitError(f"Gemini rate limit: {e}") from e
    raise LLMError(f"Gemini API error: {e}") from e


class GeminiProvider(LLMProvider):
    """Google Gemini provider (google-genai SDK)."""

    provider_name = "gemini"

    def __init__(self, api_key: str | None = None, model: str | None = None, client=None):
        self.model_name = model or "gemini-2.5-flash"
        self._api_key = api_key

        if client:
            self.client = client
            return

        try:
            from google import genai
        except ImportError:
            raise LLMError(
                "google-genai package not installed. Run: pip install 'journal-companion[gemini]'"
            )

        self.client = genai.Client(api_key=api_key)

    def generate(
        self,
        messages: list[dict],
        system: str | None = None,
        max_tokens: int = 1000,
        json_output: bool = False,
    ) -> str:
        prompt = "\n".join(msg["content"] for msg in messages)

        try:
            from google.genai import types

            config = types.GenerateContentConfig(
                system_instruction=system,
                max_output_tokens=max_tokens,
                response_mime_type="application/json" if json_output else None,
            )
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=config,
            )
            return require_text(response.text, "Gemini")
        except Exception as e:
            _handle_gemini_error(e)
