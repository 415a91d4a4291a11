"""Prompt building module for completion providers.

Provides PromptBuilder for constructing catalog-aware generation and
modification prompts.
"""

from aidesigner.prompt.lib import (
    JSON_ONLY_INSTRUCTION,
    PROMPT_CONFIDENCE_THRESHOLD,
    Platform,
    PromptBuilder,
    PromptConfig,
    PromptContext,
)

__all__ = [
    "JSON_ONLY_INSTRUCTION",
    "PROMPT_CONFIDENCE_THRESHOLD",
    "Platform",
    "PromptBuilder",
    "PromptConfig",
    "PromptContext",
]
