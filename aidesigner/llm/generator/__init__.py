"""Layout generation from natural language requests."""

from .lib import (
    MODIFY_TEMPERATURE,
    GenerationOutput,
    GenerationStats,
    GeneratorConfig,
    LayoutGenerator,
)
from .retry import RetryConfig, RetryStrategy

__all__ = [
    "LayoutGenerator",
    "GeneratorConfig",
    "GenerationStats",
    "GenerationOutput",
    "MODIFY_TEMPERATURE",
    "RetryConfig",
    "RetryStrategy",
]
