"""Centralized environment configuration management for aidesigner.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from aidesigner.config import EnvVar, get_environment
    >>>
    >>> retries = get_environment(EnvVar.COMPLETION_MAX_RETRIES)  # Returns int
    >>> api_key = get_environment(EnvVar.GEMINI_API_KEY)  # Returns str | None
    >>>
    >>> # Override at runtime
    >>> retries = get_environment(EnvVar.COMPLETION_MAX_RETRIES, override=5)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "GEMINI_API_KEY").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, float, bool, Path).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by aidesigner.

    Categories:
        - llm: Completion provider keys and selection
        - completion: Retry and timeout policy for completion calls
        - session: Persistent session storage
        - render: Document rendering defaults
        - logging: Log verbosity
    """

    # -------------------------------------------------------------------------
    # Completion Provider Keys
    # -------------------------------------------------------------------------
    GEMINI_API_KEY = EnvConfig(
        name="GEMINI_API_KEY",
        default=None,
        var_type=str,
        description="Google Gemini API key",
        category="llm",
    )
    OPENAI_API_KEY = EnvConfig(
        name="OPENAI_API_KEY",
        default=None,
        var_type=str,
        description="OpenAI API key for GPT models",
        category="llm",
    )
    ANTHROPIC_API_KEY = EnvConfig(
        name="ANTHROPIC_API_KEY",
        default=None,
        var_type=str,
        description="Anthropic API key for Claude models",
        category="llm",
    )
    LLM_PROVIDER = EnvConfig(
        name="LLM_PROVIDER",
        default="gemini",
        var_type=str,
        description="Completion provider (gemini, openai, anthropic)",
        category="llm",
    )
    LLM_MODEL = EnvConfig(
        name="LLM_MODEL",
        default=None,
        var_type=str,
        description="Model name override for the selected provider",
        category="llm",
    )

    # -------------------------------------------------------------------------
    # Completion Policy
    # -------------------------------------------------------------------------
    COMPLETION_MAX_RETRIES = EnvConfig(
        name="COMPLETION_MAX_RETRIES",
        default=2,
        var_type=int,
        description="Retries after the first failed completion call",
        category="completion",
    )
    COMPLETION_RETRY_DELAY = EnvConfig(
        name="COMPLETION_RETRY_DELAY",
        default=2.0,
        var_type=float,
        description="Base delay in seconds, multiplied by the attempt number",
        category="completion",
    )
    COMPLETION_TIMEOUT = EnvConfig(
        name="COMPLETION_TIMEOUT",
        default=60.0,
        var_type=float,
        description="Per-request timeout in seconds",
        category="completion",
    )

    # -------------------------------------------------------------------------
    # Session Storage
    # -------------------------------------------------------------------------
    SESSION_DB_PATH = EnvConfig(
        name="SESSION_DB_PATH",
        default=None,  # Computed from the home directory
        var_type=Path,
        description="SQLite file holding scan results and the API key",
        category="session",
    )

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------
    DEFAULT_FONT_FAMILY = EnvConfig(
        name="DEFAULT_FONT_FAMILY",
        default="Inter",
        var_type=str,
        description="Font family used for native text nodes",
        category="render",
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    LOG_LEVEL = EnvConfig(
        name="LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Root log level (DEBUG, INFO, WARNING, ERROR)",
        category="logging",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is float:
        try:
            return float(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    if var_type is Path:
        return Path(value).expanduser()

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: float) -> float: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: Path) -> Path: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type.
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable."""
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_session_db_path(override: Path | str | None = None) -> Path:
    """Get the session database path.

    Resolution: override > SESSION_DB_PATH > ~/.aidesigner/session.db
    """
    if override is not None:
        return Path(override)

    env_path = get_environment(EnvVar.SESSION_DB_PATH)
    if env_path:
        return env_path

    return Path.home() / ".aidesigner" / "session.db"


def get_available_llm_providers() -> list[str]:
    """Get list of completion providers with an API key configured.

    Returns:
        Provider names in preference order (e.g., ["gemini", "openai"]).
    """
    providers = []

    if get_environment(EnvVar.GEMINI_API_KEY):
        providers.append("gemini")
    if get_environment(EnvVar.OPENAI_API_KEY):
        providers.append("openai")
    if get_environment(EnvVar.ANTHROPIC_API_KEY):
        providers.append("anthropic")

    return providers


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (llm, completion, session, render, logging).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_session_db_path",
    "get_available_llm_providers",
    # Introspection
    "list_environment_variables",
]
