"""Mapping of SDK exceptions onto the provider error hierarchy.

The OpenAI and Anthropic SDKs both attach ``status_code`` to HTTP errors and
use recognisable messages for timeouts and connection failures.
"""

from .base import (
    AuthenticationError,
    ContentFilteredError,
    NetworkError,
    ProviderError,
    RateLimitError,
    ServerError,
)

NETWORK_PATTERNS = ("timeout", "timed out", "connection", "network", "aborted")


def classify_sdk_error(error: Exception) -> ProviderError:
    """Convert an SDK exception into a ``ProviderError``.

    Args:
        error: The caught exception.

    Returns:
        The matching ``ProviderError`` subclass instance.
    """
    status = getattr(error, "status_code", None)
    message = str(error)
    lowered = message.lower()

    if status == 429 or "rate limit" in lowered or "rate_limit" in lowered or "quota" in lowered:
        return RateLimitError(message)
    if status in (401, 403) or "authentication" in lowered or "invalid api key" in lowered:
        return AuthenticationError(message)
    if status is not None and status >= 500:
        return ServerError(message)
    if "content_filter" in lowered or "content filter" in lowered or "safety" in lowered:
        return ContentFilteredError(message)
    if status is None and any(pattern in lowered for pattern in NETWORK_PATTERNS):
        return NetworkError(message)
    if status is not None and 400 <= status < 500:
        return ProviderError(message, retryable=False)
    return ProviderError(message)


__all__ = ["classify_sdk_error"]
