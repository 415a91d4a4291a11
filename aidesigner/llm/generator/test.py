"""Tests for LLM generator module.

Covers:
- RetryStrategy: JSON repair, backoff and retry decisions
- LayoutGenerator: orchestration with the mock provider
"""

import pytest

from aidesigner.catalog import Catalog, ComponentRecord
from aidesigner.schema import ComponentItem, LayoutParseError, parse_layout

from ..backend.base import (
    AuthenticationError,
    ContentFilteredError,
    InvalidResponseError,
    NetworkError,
    RateLimitError,
    ServerError,
)
from ..backend.factory import create_completion_provider
from ..conftest import MockCompletionProvider
from .lib import MODIFY_TEMPERATURE, GeneratorConfig, LayoutGenerator
from .retry import RetryConfig, RetryStrategy


@pytest.fixture
def catalog() -> Catalog:
    return Catalog(
        [ComponentRecord(id="10:2", name="Button", suggested_type="button", confidence=0.95)]
    )


def generator_for(provider, sleep, max_retries: int = 2) -> LayoutGenerator:
    config = GeneratorConfig(retry=RetryConfig(max_retries=max_retries, retry_delay=2.0))
    return LayoutGenerator(provider, config=config, sleep=sleep)


# =============================================================================
# RetryStrategy Tests
# =============================================================================


class TestRetryConfig:
    """Tests for RetryConfig dataclass."""

    @pytest.mark.unit
    def test_defaults_from_environment(self, monkeypatch):
        monkeypatch.delenv("COMPLETION_MAX_RETRIES", raising=False)
        monkeypatch.delenv("COMPLETION_RETRY_DELAY", raising=False)
        config = RetryConfig()
        assert config.max_retries == 2
        assert config.retry_delay == 2.0
        assert config.repair_json is True

    @pytest.mark.unit
    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("COMPLETION_MAX_RETRIES", "5")
        assert RetryConfig().max_retries == 5


class TestRetryStrategyJsonRepair:
    """Tests for JSON repair functionality."""

    @pytest.fixture
    def strategy(self):
        return RetryStrategy(RetryConfig(max_retries=2, repair_json=True))

    @pytest.mark.unit
    def test_repair_markdown_code_blocks(self, strategy):
        content = '```json\n{"items": [], "layoutContainer": {"name": "A"}}\n```'
        result = strategy.repair_json(content)
        assert result == {"items": [], "layoutContainer": {"name": "A"}}

    @pytest.mark.unit
    def test_repair_trailing_commas(self, strategy):
        assert strategy.repair_json('{"items": ["a", "b",],}') == {"items": ["a", "b"]}

    @pytest.mark.unit
    def test_extract_from_mixed_content(self, strategy):
        content = 'Here is your layout: {"items": []} Enjoy!'
        assert strategy.repair_json(content) == {"items": []}

    @pytest.mark.unit
    def test_balanced_object_ignores_trailing_braces(self, strategy):
        content = '{"items": [], "note": "a } b"} and then {broken'
        assert strategy.repair_json(content) == {"items": [], "note": "a } b"}

    @pytest.mark.unit
    def test_unrepairable(self, strategy):
        assert strategy.repair_json("no json here") is None

    @pytest.mark.unit
    def test_repair_disabled(self):
        strategy = RetryStrategy(RetryConfig(repair_json=False))
        assert strategy.repair_json('```json\n{"a": 1}\n```') is None


class TestRetryStrategyDecisions:
    """Tests for backoff and retry decisions."""

    @pytest.fixture
    def strategy(self):
        return RetryStrategy(RetryConfig(max_retries=2, retry_delay=2.0))

    @pytest.mark.unit
    def test_linear_backoff(self, strategy):
        assert [strategy.get_backoff_delay(n) for n in (1, 2, 3)] == [2.0, 4.0, 6.0]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "error,expected",
        [
            (RateLimitError("slow down"), True),
            (ServerError("503"), True),
            (NetworkError("timeout"), True),
            (AuthenticationError("bad key"), False),
            (ContentFilteredError("blocked"), False),
            (ValueError("not a provider error"), False),
        ],
    )
    def test_should_retry(self, strategy, error, expected):
        assert strategy.should_retry(error, 0) is expected

    @pytest.mark.unit
    def test_no_retry_when_exhausted(self, strategy):
        assert strategy.should_retry(ServerError("503"), 2) is False


# =============================================================================
# LayoutGenerator Tests
# =============================================================================


class TestLayoutGenerator:
    """Tests for LayoutGenerator with the mock provider."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_generate(self, catalog, no_sleep):
        provider = MockCompletionProvider()
        output = await generator_for(provider, no_sleep).generate("login screen", catalog)

        assert output.layout.layout_container.name == "Login"
        assert output.stats.attempts == 1
        assert output.stats.total_tokens == 30
        assert output.stats.final_model == "mock-model-v1"
        assert output.prompt_context.component_ids == ["10:2"]
        assert '"login screen"' in provider.calls[0]["prompt"]
        assert provider.calls[0]["system_prompt"]
        assert provider.calls[0]["config"].temperature == 0.7
        assert no_sleep.delays == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_retries_with_linear_backoff(self, catalog, no_sleep):
        provider = MockCompletionProvider(
            [ServerError("HTTP 503"), NetworkError("timeout")]
        )
        output = await generator_for(provider, no_sleep).generate("login", catalog)

        assert output.stats.attempts == 3
        assert no_sleep.delays == [2.0, 4.0]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_last_error(self, catalog, no_sleep):
        provider = MockCompletionProvider([ServerError("a"), ServerError("b"), ServerError("c")])
        with pytest.raises(ServerError, match="c"):
            await generator_for(provider, no_sleep).generate("login", catalog)
        assert len(provider.calls) == 3

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_retryable_fails_immediately(self, catalog, no_sleep):
        provider = MockCompletionProvider([AuthenticationError("bad key")])
        with pytest.raises(AuthenticationError):
            await generator_for(provider, no_sleep).generate("login", catalog)
        assert len(provider.calls) == 1
        assert no_sleep.delays == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_repairs_fenced_reply(self, catalog, no_sleep):
        reply = '```json\n{"layoutContainer": {"name": "Fenced"}, "items": [],}\n```'
        provider = MockCompletionProvider([reply])
        output = await generator_for(provider, no_sleep).generate("x", catalog)

        assert output.layout.layout_container.name == "Fenced"
        assert output.stats.json_repairs == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unparseable_reply_is_retried(self, catalog, no_sleep):
        provider = MockCompletionProvider(["I cannot do that"])
        output = await generator_for(provider, no_sleep).generate("x", catalog)
        assert output.stats.attempts == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_layout_after_retries(self, catalog, no_sleep):
        provider = MockCompletionProvider(['{"no": "items"}'] * 3)
        with pytest.raises(LayoutParseError):
            await generator_for(provider, no_sleep).generate("x", catalog)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_garbage_after_retries(self, catalog, no_sleep):
        provider = MockCompletionProvider(["nope"] * 3)
        with pytest.raises(InvalidResponseError):
            await generator_for(provider, no_sleep).generate("x", catalog)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_modify(self, catalog, no_sleep):
        current = parse_layout(MockCompletionProvider.MOCK_LOGIN_JSON)
        reply = """{
            "layoutContainer": {"name": "Login", "layoutMode": "VERTICAL"},
            "items": [{"type": "button", "componentNodeId": "10:2", "properties": {"text": "Sign in"}}]
        }"""
        provider = MockCompletionProvider([reply])

        output = await generator_for(provider, no_sleep).modify(
            current, "rename the button", catalog
        )

        call = provider.calls[0]
        assert call["config"].temperature == MODIFY_TEMPERATURE
        assert call["system_prompt"] is None
        assert '"Welcome back"' in call["prompt"]
        assert '"rename the button"' in call["prompt"]
        item = output.layout.items[0]
        assert isinstance(item, ComponentItem)
        assert item.properties["text"] == "Sign in"


class TestLiveProvider:
    """Round trips against the configured provider. Skipped without a key."""

    @pytest.mark.live
    @pytest.mark.asyncio
    async def test_connection(self):
        provider = create_completion_provider()
        assert await provider.test_connection()

    @pytest.mark.live
    @pytest.mark.asyncio
    async def test_generate_login_screen(self, catalog):
        generator = LayoutGenerator(create_completion_provider())
        output = await generator.generate("simple login screen with one button", catalog)
        assert output.stats.attempts >= 1
        assert output.layout.items
