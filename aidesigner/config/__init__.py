"""Centralized configuration management for aidesigner.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from aidesigner.config import EnvVar, get_environment
    >>> delay = get_environment(EnvVar.COMPLETION_RETRY_DELAY)  # float: 2.0
    >>> for var in list_environment_variables("llm"):
    ...     print(get_environment_info(var).name)

Environment Variable Categories:
    llm: API keys and provider selection (Gemini, OpenAI, Anthropic)
    completion: Retry count, retry delay and timeout for completion calls
    session: Session database location
    render: Rendering defaults such as the native text font
    logging: Log verbosity
"""

from .lib import (
    EnvConfig,
    EnvVar,
    get_available_llm_providers,
    get_environment,
    get_environment_info,
    get_session_db_path,
    list_environment_variables,
)

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
