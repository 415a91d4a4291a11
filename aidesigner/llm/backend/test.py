"""Tests for completion provider backends.

Covers:
- GeminiProvider request building and response/status mapping
- SDK error classification used by OpenAI and Anthropic providers
- OpenAIProvider / AnthropicProvider with stubbed clients
- create_completion_provider routing
"""

import json
from types import SimpleNamespace

import httpx
import pytest

from .anthropic import AnthropicProvider
from .base import (
    CONNECTION_TEST_PROMPT,
    AuthenticationError,
    ContentFilteredError,
    GenerationConfig,
    InvalidResponseError,
    NetworkError,
    ProviderError,
    RateLimitError,
    ServerError,
)
from .errors import classify_sdk_error
from .factory import ProviderType, create_completion_provider
from .gemini import GeminiProvider
from .openai import OpenAIProvider


def gemini_reply(text: str, finish_reason: str = "STOP") -> dict:
    return {
        "candidates": [
            {"content": {"parts": [{"text": text}]}, "finishReason": finish_reason}
        ],
        "usageMetadata": {
            "promptTokenCount": 5,
            "candidatesTokenCount": 7,
            "totalTokenCount": 12,
        },
    }


def gemini_with(handler) -> GeminiProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeminiProvider(api_key="test-key", client=client)


@pytest.fixture(autouse=True)
def _clear_provider_env(monkeypatch):
    for name in (
        "GEMINI_API_KEY",
        "OPENAI_API_KEY",
        "ANTHROPIC_API_KEY",
        "LLM_PROVIDER",
        "LLM_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Gemini
# =============================================================================


class TestGeminiProvider:
    """Tests for GeminiProvider."""

    @pytest.mark.unit
    def test_requires_api_key(self):
        with pytest.raises(AuthenticationError):
            GeminiProvider()

    @pytest.mark.unit
    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        provider = GeminiProvider()
        assert provider.name == "gemini:gemini-1.5-flash"

    @pytest.mark.unit
    def test_build_request_folds_system_prompt(self):
        provider = GeminiProvider(api_key="k")
        body = provider.build_request("make a form", "be brief", GenerationConfig())

        text = body["contents"][0]["parts"][0]["text"]
        assert text == "be brief\n\nUser Request: make a form"
        assert body["generationConfig"]["responseMimeType"] == "application/json"
        assert body["generationConfig"]["topK"] == 40
        assert len(body["safetySettings"]) == 4
        assert {s["threshold"] for s in body["safetySettings"]} == {"BLOCK_ONLY_HIGH"}

    @pytest.mark.unit
    def test_plain_text_mode(self):
        provider = GeminiProvider(api_key="k")
        body = provider.build_request("hi", None, GenerationConfig(json_mode=False))
        assert "responseMimeType" not in body["generationConfig"]
        assert body["contents"][0]["parts"][0]["text"] == "hi"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_complete_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=gemini_reply('  {"items": []}  '))

        provider = gemini_with(handler)
        result = await provider.complete("hello", config=GenerationConfig(temperature=0.1))

        assert result.content == '{"items": []}'
        assert result.usage == {
            "prompt_tokens": 5,
            "completion_tokens": 7,
            "total_tokens": 12,
        }
        assert seen["url"].params["key"] == "test-key"
        assert seen["url"].path.endswith("/gemini-1.5-flash:generateContent")
        assert seen["body"]["generationConfig"]["temperature"] == 0.1

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,body,error_type,retryable",
        [
            (429, "Resource has been exhausted", RateLimitError, True),
            (401, "Unauthorized", AuthenticationError, False),
            (400, "API key not valid. Please pass a valid API key.", AuthenticationError, False),
            (503, "Service Unavailable", ServerError, True),
            (400, "Bad request", ProviderError, True),
        ],
    )
    async def test_status_mapping(self, status, body, error_type, retryable):
        provider = gemini_with(lambda request: httpx.Response(status, text=body))
        with pytest.raises(error_type) as excinfo:
            await provider.complete("hello")
        assert excinfo.value.retryable is retryable

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_safety_finish_reason(self):
        provider = gemini_with(
            lambda request: httpx.Response(200, json=gemini_reply("", "SAFETY"))
        )
        with pytest.raises(ContentFilteredError) as excinfo:
            await provider.complete("hello")
        assert excinfo.value.retryable is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_candidates(self):
        provider = gemini_with(lambda request: httpx.Response(200, json={"candidates": []}))
        with pytest.raises(InvalidResponseError):
            await provider.complete("hello")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connection_failure_is_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused")

        with pytest.raises(NetworkError) as excinfo:
            await gemini_with(handler).complete("hello")
        assert excinfo.value.retryable is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_test_connection(self):
        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            assert CONNECTION_TEST_PROMPT in body["contents"][0]["parts"][0]["text"]
            assert body["generationConfig"]["temperature"] == 0.0
            return httpx.Response(
                200, json=gemini_reply("Hello, API connection successful!")
            )

        assert await gemini_with(handler).test_connection() is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_test_connection_failure(self):
        provider = gemini_with(lambda request: httpx.Response(401, text="no"))
        assert await provider.test_connection() is False

        provider = gemini_with(lambda request: httpx.Response(200, json=gemini_reply("Hi!")))
        assert await provider.test_connection() is False


# =============================================================================
# SDK providers
# =============================================================================


class FakeSDKError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class TestClassifySDKError:
    """Tests for classify_sdk_error."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "error,error_type,retryable",
        [
            (FakeSDKError("Too many requests", 429), RateLimitError, True),
            (FakeSDKError("Invalid API key", 401), AuthenticationError, False),
            (FakeSDKError("Internal error", 500), ServerError, True),
            (FakeSDKError("Request timed out."), NetworkError, True),
            (FakeSDKError("Connection error."), NetworkError, True),
            (FakeSDKError("Bad request", 400), ProviderError, False),
            (FakeSDKError("something odd"), ProviderError, True),
        ],
    )
    def test_classification(self, error, error_type, retryable):
        mapped = classify_sdk_error(error)
        assert type(mapped) is error_type
        assert mapped.retryable is retryable


class FakeCreate:
    def __init__(self, response=None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.kwargs: dict = {}

    async def __call__(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return self.response


class TestOpenAIProvider:
    """Tests for OpenAIProvider with a stubbed client."""

    @staticmethod
    def provider_with(create: FakeCreate) -> OpenAIProvider:
        provider = OpenAIProvider(api_key="sk-test")
        provider._client = SimpleNamespace(
            chat=SimpleNamespace(completions=SimpleNamespace(create=create))
        )
        return provider

    @staticmethod
    def response(content: str, finish_reason: str = "stop"):
        return SimpleNamespace(
            choices=[
                SimpleNamespace(
                    message=SimpleNamespace(content=content),
                    finish_reason=finish_reason,
                )
            ],
            usage=SimpleNamespace(prompt_tokens=3, completion_tokens=4, total_tokens=7),
            model="gpt-4.1-mini",
        )

    @pytest.mark.unit
    def test_requires_api_key(self):
        with pytest.raises(AuthenticationError):
            OpenAIProvider()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_complete(self):
        create = FakeCreate(self.response('{"items": []}'))
        result = await self.provider_with(create).complete("hi", system_prompt="sys")

        assert result.content == '{"items": []}'
        assert result.usage["total_tokens"] == 7
        assert create.kwargs["messages"][0] == {"role": "system", "content": "sys"}
        assert create.kwargs["response_format"] == {"type": "json_object"}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_content_filter(self):
        create = FakeCreate(self.response("", finish_reason="content_filter"))
        with pytest.raises(ContentFilteredError):
            await self.provider_with(create).complete("hi")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_sdk_error_is_mapped(self):
        create = FakeCreate(error=FakeSDKError("Rate limit reached", 429))
        with pytest.raises(RateLimitError):
            await self.provider_with(create).complete("hi")


class TestAnthropicProvider:
    """Tests for AnthropicProvider with a stubbed client."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_complete_reinforces_json(self):
        create = FakeCreate(
            SimpleNamespace(
                content=[SimpleNamespace(type="text", text=' {"items": []} ')],
                stop_reason="end_turn",
                usage=SimpleNamespace(input_tokens=2, output_tokens=3),
                model="claude-sonnet-4-5",
            )
        )
        provider = AnthropicProvider(api_key="test")
        provider._client = SimpleNamespace(messages=SimpleNamespace(create=create))

        result = await provider.complete("make it", system_prompt="sys")

        assert result.content == '{"items": []}'
        assert result.usage["total_tokens"] == 5
        assert create.kwargs["system"] == "sys"
        assert "Respond with valid JSON only" in create.kwargs["messages"][0]["content"]


# =============================================================================
# Factory
# =============================================================================


class TestFactory:
    """Tests for create_completion_provider."""

    @pytest.mark.unit
    def test_default_is_gemini(self):
        provider = create_completion_provider(api_key="k")
        assert isinstance(provider, GeminiProvider)

    @pytest.mark.unit
    def test_provider_from_environment(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "anthropic")
        monkeypatch.setenv("LLM_MODEL", "claude-opus-4-1")
        provider = create_completion_provider(api_key="k")
        assert isinstance(provider, AnthropicProvider)
        assert provider.model_name == "claude-opus-4-1"

    @pytest.mark.unit
    def test_explicit_provider_and_model(self):
        provider = create_completion_provider(ProviderType.OPENAI, model="gpt-4.1", api_key="k")
        assert provider.name == "openai:gpt-4.1"

    @pytest.mark.unit
    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_completion_provider("mistral", api_key="k")

    @pytest.mark.unit
    def test_missing_key(self):
        with pytest.raises(AuthenticationError):
            create_completion_provider("openai")
