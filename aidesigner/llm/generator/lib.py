"""LayoutGenerator orchestrator for prompt-driven layout generation.

Integrates PromptBuilder, a completion provider and the layout schema to turn
a natural language request into a parsed LayoutDocument.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from aidesigner.catalog import Catalog
from aidesigner.prompt import PromptBuilder, PromptContext
from aidesigner.schema import LayoutDocument, LayoutParseError, parse_layout

from ..backend.base import (
    CompletionProvider,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    ProviderError,
)
from .retry import RetryConfig, RetryStrategy

logger = logging.getLogger(__name__)

MODIFY_TEMPERATURE = 0.1


@dataclass
class GeneratorConfig:
    """Configuration for LayoutGenerator.

    Attributes:
        temperature: Sampling temperature for new layouts.
        modify_temperature: Sampling temperature when editing a layout.
        max_tokens: Output token cap per call.
        retry: Retry and JSON repair policy.
    """

    temperature: float = 0.7
    modify_temperature: float = MODIFY_TEMPERATURE
    max_tokens: int = 4000
    retry: RetryConfig = field(default_factory=RetryConfig)


@dataclass
class GenerationStats:
    """Statistics from layout generation.

    Attributes:
        attempts: Number of provider calls made.
        json_repairs: Number of JSON repair attempts.
        total_tokens: Total tokens used across all attempts.
        final_model: Model identifier used for the successful call.
    """

    attempts: int = 0
    json_repairs: int = 0
    total_tokens: int = 0
    final_model: str = ""


@dataclass
class GenerationOutput:
    """Complete output from layout generation.

    Attributes:
        layout: Parsed layout document.
        stats: Generation statistics.
        raw_response: Raw completion content.
        prompt_context: Prompt metadata (generation only).
    """

    layout: LayoutDocument
    stats: GenerationStats
    raw_response: str
    prompt_context: PromptContext | None = None


class LayoutGenerator:
    """Orchestrates completion-based layout generation.

    Pipeline:
        1. Build prompt from the request and the scanned catalog
        2. Call the provider, retrying retryable failures with linear backoff
        3. Extract or repair the JSON object in the reply
        4. Parse it into a LayoutDocument

    Example:
        >>> generator = LayoutGenerator(create_completion_provider())
        >>> output = await generator.generate("login screen", catalog)
        >>> output.layout.layout_container.name
        'Login'
    """

    def __init__(
        self,
        provider: CompletionProvider,
        prompt_builder: PromptBuilder | None = None,
        config: GeneratorConfig | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initialize LayoutGenerator.

        Args:
            provider: Completion provider to call.
            prompt_builder: Prompt builder. Creates default if None.
            config: Generator configuration.
            sleep: Awaitable used for backoff delays.
        """
        self._provider = provider
        self._prompt_builder = prompt_builder or PromptBuilder()
        self._config = config or GeneratorConfig()
        self._retry = RetryStrategy(self._config.retry)
        self._sleep = sleep

    @property
    def provider(self) -> CompletionProvider:
        return self._provider

    async def generate(self, request: str, catalog: Catalog) -> GenerationOutput:
        """Generate a layout from a natural language request.

        Args:
            request: Screen description.
            catalog: Scanned catalog offered to the model.

        Returns:
            GenerationOutput with the parsed layout and metadata.

        Raises:
            ProviderError: If a non-retryable error occurs or retries run out.
            LayoutParseError: If the last reply was JSON but not a layout.
        """
        prompt, prompt_context = self._prompt_builder.build_with_context(request, catalog)
        gen_config = GenerationConfig(
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
            json_mode=True,
        )
        output = await self._run(prompt, gen_config, PromptBuilder.SYSTEM_PROMPT)
        output.prompt_context = prompt_context
        logger.info(
            f"Generated layout '{output.layout.layout_container.name}' "
            f"after {output.stats.attempts} attempt(s)"
        )
        return output

    async def modify(
        self,
        current: LayoutDocument | dict[str, Any],
        instruction: str,
        catalog: Catalog,
    ) -> GenerationOutput:
        """Edit an existing layout according to an instruction.

        Uses a low temperature so unchanged elements are copied verbatim.

        Args:
            current: Layout currently rendered.
            instruction: What to change.
            catalog: Scanned catalog offered to the model.

        Returns:
            GenerationOutput with the complete modified layout.

        Raises:
            ProviderError: If a non-retryable error occurs or retries run out.
            LayoutParseError: If the last reply was JSON but not a layout.
        """
        prompt = self._prompt_builder.build_modification(current, instruction, catalog)
        gen_config = GenerationConfig(
            temperature=self._config.modify_temperature,
            max_tokens=self._config.max_tokens,
            json_mode=True,
        )
        output = await self._run(prompt, gen_config, None)
        logger.info(f"Modified layout after {output.stats.attempts} attempt(s)")
        return output

    async def _run(
        self,
        prompt: str,
        gen_config: GenerationConfig,
        system_prompt: str | None,
    ) -> GenerationOutput:
        stats = GenerationStats()
        last_error: Exception | None = None
        max_retries = self._retry.max_retries

        for attempt in range(max_retries + 1):
            if attempt:
                delay = self._retry.get_backoff_delay(attempt)
                logger.info(f"Retry attempt {attempt}/{max_retries} in {delay:.1f}s")
                await self._sleep(delay)

            stats.attempts += 1
            try:
                result = await self._provider.complete(
                    prompt, system_prompt=system_prompt, config=gen_config
                )
                self._record_usage(result, stats)
                layout = parse_layout(self._parse_response(result.content, stats))
                return GenerationOutput(
                    layout=layout, stats=stats, raw_response=result.content
                )

            except LayoutParseError as e:
                last_error = e
                logger.warning(f"Layout error on attempt {attempt + 1}: {e}")

            except ProviderError as e:
                last_error = e
                logger.error(f"Provider error on attempt {attempt + 1}: {e}")
                if not self._retry.should_retry(e, attempt):
                    raise

        raise last_error or InvalidResponseError("No completion attempts were made")

    def _record_usage(self, result: GenerationResult, stats: GenerationStats) -> None:
        stats.total_tokens += result.usage.get("total_tokens", 0)
        stats.final_model = result.model

    def _parse_response(self, content: str, stats: GenerationStats) -> dict[str, Any]:
        """Parse completion content to a JSON dict.

        Args:
            content: Raw response content.
            stats: Stats to update.

        Returns:
            Parsed dictionary.

        Raises:
            InvalidResponseError: If no JSON object can be recovered.
        """
        content = content.strip()
        try:
            parsed = json.loads(content)
            if isinstance(parsed, dict):
                return parsed
        except json.JSONDecodeError:
            pass

        stats.json_repairs += 1
        repaired = self._retry.repair_json(content)
        if repaired is not None:
            logger.debug("JSON repair successful")
            return repaired

        raise InvalidResponseError(f"Cannot parse response as JSON: {content[:500]}")


__all__ = [
    "GenerationOutput",
    "GenerationStats",
    "GeneratorConfig",
    "LayoutGenerator",
    "MODIFY_TEMPERATURE",
]
