"""Google Gemini backend implementation.

Talks to the Generative Language REST API directly over ``httpx``. Gemini has
no system role in this API, so the system prompt is folded into the user turn.
"""

import logging
from typing import Any

import httpx

from ...config import EnvVar, get_environment
from .base import (
    AuthenticationError,
    CompletionProvider,
    ContentFilteredError,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    NetworkError,
    ProviderError,
    RateLimitError,
    ServerError,
)

logger = logging.getLogger(__name__)

API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"

SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)


class GeminiProvider(CompletionProvider):
    """Gemini completion provider.

    Environment:
        GEMINI_API_KEY: API key (required if not passed to constructor).

    Example:
        >>> provider = GeminiProvider()
        >>> result = await provider.complete("Generate a login screen as JSON")
        >>> print(result.content)
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_GEMINI_MODEL,
        base_url: str = API_BASE_URL,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize Gemini provider.

        Args:
            api_key: Gemini API key. Falls back to GEMINI_API_KEY env var.
            model: Model name (gemini-1.5-flash, gemini-1.5-pro, etc.).
            base_url: Models endpoint.
            timeout: Request timeout in seconds. Falls back to COMPLETION_TIMEOUT.
            client: Optional pre-built HTTP client (used by tests).

        Raises:
            AuthenticationError: If no API key available.
        """
        self._api_key = api_key or get_environment(EnvVar.GEMINI_API_KEY)
        if not self._api_key:
            raise AuthenticationError(
                "Gemini API key required. Set GEMINI_API_KEY environment "
                "variable or pass api_key parameter."
            )

        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout or get_environment(EnvVar.COMPLETION_TIMEOUT)
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        """Get the model identifier."""
        return self._model

    @property
    def provider(self) -> str:
        """Get the provider identifier."""
        return "gemini"

    def build_request(
        self,
        prompt: str,
        system_prompt: str | None,
        config: GenerationConfig,
    ) -> dict[str, Any]:
        """Build the generateContent request body."""
        text = f"{system_prompt}\n\nUser Request: {prompt}" if system_prompt else prompt

        generation_config: dict[str, Any] = {
            "temperature": config.temperature,
            "maxOutputTokens": config.max_tokens,
            "topK": 40,
            "topP": config.top_p,
        }
        if config.json_mode:
            generation_config["responseMimeType"] = "application/json"
        if config.stop_sequences:
            generation_config["stopSequences"] = config.stop_sequences

        return {
            "contents": [{"role": "user", "parts": [{"text": text}]}],
            "generationConfig": generation_config,
            "safetySettings": [
                {"category": category, "threshold": "BLOCK_ONLY_HIGH"}
                for category in SAFETY_CATEGORIES
            ],
        }

    async def complete(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        """Generate text using the Gemini API.

        Args:
            prompt: User prompt text.
            system_prompt: Optional system instruction.
            config: Generation configuration.

        Returns:
            GenerationResult with content and metadata.

        Raises:
            RateLimitError: On 429 or quota responses.
            AuthenticationError: On 401/403 or a rejected key.
            ServerError: On 5xx responses.
            NetworkError: On timeouts and connection failures.
            ContentFilteredError: If the safety filter blocked the answer.
            InvalidResponseError: If the response has no content.
        """
        config = config or GenerationConfig()
        url = f"{self._base_url}/{self._model}:generateContent"
        body = self.build_request(prompt, system_prompt, config)

        logger.debug(f"Calling {self.name}")
        try:
            response = await self._get_client().post(
                url, params={"key": self._api_key}, json=body
            )
        except httpx.TimeoutException as e:
            raise NetworkError(f"Gemini request timed out: {e}") from e
        except httpx.RequestError as e:
            raise NetworkError(f"Gemini request failed: {e}") from e

        if response.status_code != 200:
            raise self._status_error(response.status_code, response.text[:500])

        return self._parse_response(response.json())

    def _parse_response(self, data: dict[str, Any]) -> GenerationResult:
        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback") or {}
            if feedback.get("blockReason"):
                raise ContentFilteredError("Content was blocked by safety filters.")
            raise InvalidResponseError("No candidates returned from API")

        candidate = candidates[0]
        finish_reason = candidate.get("finishReason") or "unknown"
        if finish_reason == "SAFETY":
            raise ContentFilteredError("Content was blocked by safety filters.")

        parts = (candidate.get("content") or {}).get("parts") or []
        if not parts or "text" not in parts[0]:
            raise InvalidResponseError("No content in API response")

        metadata = data.get("usageMetadata") or {}
        return GenerationResult(
            content=parts[0]["text"].strip(),
            finish_reason=finish_reason,
            usage={
                "prompt_tokens": metadata.get("promptTokenCount", 0),
                "completion_tokens": metadata.get("candidatesTokenCount", 0),
                "total_tokens": metadata.get("totalTokenCount", 0),
            },
            model=data.get("modelVersion", self._model),
            raw_response=data,
        )

    def _status_error(self, status: int, body: str) -> ProviderError:
        """Map a non-200 status onto the provider error hierarchy."""
        message = f"HTTP {status}: {body}"
        lowered = body.lower()

        if status == 429 or "quota" in lowered or "rate limit" in lowered:
            return RateLimitError("Rate limit exceeded. Please try again later.")
        if status in (401, 403) or "api key" in lowered:
            return AuthenticationError("Invalid API key or authentication failed.")
        if status >= 500:
            return ServerError(f"Server error. Please try again later. ({message})")
        if "safety" in lowered or "blocked" in lowered:
            return ContentFilteredError("Content was blocked by safety filters.")
        return ProviderError(message)


__all__ = ["API_BASE_URL", "DEFAULT_GEMINI_MODEL", "GeminiProvider"]
