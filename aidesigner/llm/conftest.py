"""LLM module test fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from aidesigner.llm.backend.base import (
    CompletionProvider,
    GenerationConfig,
    GenerationResult,
)

# =============================================================================
# Mock Completion Provider
# =============================================================================


class MockCompletionProvider(CompletionProvider):
    """Scripted completion provider for testing without API keys.

    Each call pops the next scripted reply. A string is returned as the
    completion content and an exception instance is raised. When the script
    runs out, the login layout is returned.
    """

    MOCK_LOGIN_JSON = """{
    "layoutContainer": {"name": "Login", "layoutMode": "VERTICAL", "width": 360, "itemSpacing": 16},
    "items": [
        {"type": "native-text", "properties": {"content": "Welcome back", "fontSize": 24}},
        {"type": "button", "componentNodeId": "10:2", "properties": {"text": "Log In"}}
    ]
}"""

    def __init__(self, replies: list[str | Exception] | None = None):
        self.replies: list[str | Exception] = list(replies or [])
        self.calls: list[dict[str, Any]] = []

    @property
    def model_name(self) -> str:
        """Return mock model name."""
        return "mock-model-v1"

    @property
    def provider(self) -> str:
        """Return mock provider name."""
        return "mock"

    async def complete(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        self.calls.append(
            {"prompt": prompt, "system_prompt": system_prompt, "config": config}
        )
        reply: str | Exception = self.replies.pop(0) if self.replies else self.MOCK_LOGIN_JSON
        if isinstance(reply, Exception):
            raise reply
        return GenerationResult(
            content=reply,
            finish_reason="stop",
            usage={"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30},
            model=self.model_name,
        )


@pytest.fixture
def mock_provider() -> MockCompletionProvider:
    """Provide a mock completion provider with an empty script."""
    return MockCompletionProvider()


@pytest.fixture
def no_sleep():
    """Backoff replacement that records requested delays instead of waiting."""
    delays: list[float] = []

    async def sleep(delay: float) -> None:
        delays.append(delay)

    sleep.delays = delays
    return sleep
