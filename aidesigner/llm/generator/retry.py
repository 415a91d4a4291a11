"""Retry strategy and JSON recovery for completion calls.

Provides JSON repair utilities and the retry policy for provider failures.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from aidesigner.config import EnvVar, get_environment

from ..backend.base import ProviderError

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry strategy.

    Attributes:
        max_retries: Retries after the first failed attempt.
        repair_json: Attempt to repair malformed JSON.
        retry_delay: Base delay in seconds, multiplied by the attempt number.
    """

    max_retries: int = field(
        default_factory=lambda: get_environment(EnvVar.COMPLETION_MAX_RETRIES)
    )
    repair_json: bool = True
    retry_delay: float = field(
        default_factory=lambda: get_environment(EnvVar.COMPLETION_RETRY_DELAY)
    )


class RetryStrategy:
    """Handles retries and JSON recovery for layout generation.

    Provides:
    - JSON extraction and repair for common malformations
    - Linear backoff delay calculation
    - Retry decision based on the provider error's ``retryable`` flag

    Example:
        >>> strategy = RetryStrategy()
        >>> strategy.repair_json('```json\\n{"items": []}\\n```')
        {'items': []}
    """

    # Common JSON repair patterns (pattern, replacement)
    JSON_REPAIR_PATTERNS: list[tuple[str, str]] = [
        # Remove markdown code blocks
        (r"^```json\s*", ""),
        (r"^```\s*", ""),
        (r"\s*```$", ""),
        # Fix trailing commas before closing braces/brackets
        (r",\s*}", "}"),
        (r",\s*]", "]"),
    ]

    def __init__(self, config: RetryConfig | None = None):
        """Initialize retry strategy.

        Args:
            config: Retry configuration options.
        """
        self._config = config or RetryConfig()

    @property
    def max_retries(self) -> int:
        return self._config.max_retries

    def extract_json(self, content: str) -> dict[str, Any] | None:
        """Parse the outermost JSON object found in the content.

        Args:
            content: Raw completion text.

        Returns:
            Parsed dict, or None if no valid object is present.
        """
        match = re.search(r"\{[\s\S]*\}", content)
        if not match:
            return None
        try:
            parsed = json.loads(match.group())
        except json.JSONDecodeError:
            return None
        return parsed if isinstance(parsed, dict) else None

    def repair_json(self, content: str) -> dict[str, Any] | None:
        """Attempt to repair malformed JSON.

        Tries, in order: pattern cleanup (code fences, trailing commas),
        extraction from mixed content, then the first balanced object.

        Args:
            content: Raw content that failed JSON parsing.

        Returns:
            Parsed dict if repair successful, None otherwise.
        """
        if not self._config.repair_json:
            return None

        cleaned = content.strip()
        for pattern, replacement in self.JSON_REPAIR_PATTERNS:
            cleaned = re.sub(pattern, replacement, cleaned, flags=re.MULTILINE)

        try:
            parsed = json.loads(cleaned)
            if isinstance(parsed, dict):
                return parsed
        except json.JSONDecodeError:
            pass

        extracted = self.extract_json(cleaned)
        if extracted is not None:
            return extracted

        return self._balanced_object(cleaned)

    def _balanced_object(self, content: str) -> dict[str, Any] | None:
        """Parse the first brace-balanced object, ignoring anything after it."""
        try:
            start = content.index("{")
        except ValueError:
            return None

        depth = 0
        in_string = False
        escaped = False
        for i, char in enumerate(content[start:], start):
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    try:
                        return json.loads(content[start : i + 1])
                    except json.JSONDecodeError:
                        return None
        return None

    def get_backoff_delay(self, attempt: int) -> float:
        """Delay before retry number ``attempt`` (1-based).

        Args:
            attempt: Retry number, starting at 1.

        Returns:
            Delay in seconds before the retry.
        """
        return self._config.retry_delay * attempt

    def should_retry(self, error: Exception, attempt: int) -> bool:
        """Determine if an error should trigger a retry.

        Args:
            error: The exception that occurred.
            attempt: Retries already made (0 after the first failure).

        Returns:
            True if should retry, False otherwise.
        """
        if attempt >= self._config.max_retries:
            return False
        if isinstance(error, ProviderError):
            return error.retryable
        return False


__all__ = ["RetryConfig", "RetryStrategy"]
