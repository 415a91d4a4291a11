"""Plugin controller.

Dispatches UI messages to the scanner, the session store, the layout
generator and the renderer, and posts the replies back to the UI. One
controller serves one open document.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import ValidationError

from aidesigner.catalog import Catalog
from aidesigner.config import EnvVar, get_environment
from aidesigner.host import DocumentHost, HostError
from aidesigner.llm import (
    CompletionProvider,
    GeneratorConfig,
    LayoutGenerator,
    ProviderError,
    create_completion_provider,
)
from aidesigner.prompt import Platform, PromptBuilder, PromptConfig
from aidesigner.render import LayoutTreeRenderer, RenderReport
from aidesigner.resolver import ResolutionError, resolve_component_ids
from aidesigner.scanner import DesignSystemScanner, ScanProgress
from aidesigner.schema import LayoutDocument, LayoutParseError, parse_layout
from aidesigner.session import SessionManager, SessionStore, StorageError

from .messages import (
    KNOWN_REQUESTS,
    CheckAPIConnection,
    ClearAPIKey,
    ClearStorage,
    GenerateFromJSON,
    GenerateFromPrompt,
    GenerateLLMPrompt,
    GetAPIKey,
    GetSavedScan,
    ModifyExistingUI,
    ModifyFromPrompt,
    NavigateToComponent,
    RequestType,
    ResponseType,
    SaveAPIKey,
    ScanDesignSystem,
    UpdateComponentType,
    parse_request,
    response,
)

logger = logging.getLogger(__name__)

PostMessage = Callable[[dict[str, Any]], None]
ProviderFactory = Callable[[str | None], CompletionProvider]

NO_API_KEY_MESSAGE = "No API key found. Please configure your API key first."

# Failures that end a generation request with ui-generation-error
GENERATION_ERRORS = (
    LayoutParseError,
    ResolutionError,
    HostError,
    ProviderError,
    StorageError,
)

_GENERATION_REQUESTS = frozenset(
    {
        RequestType.GENERATE_UI_FROM_JSON.value,
        RequestType.GENERATE_UI_FROM_PROMPT.value,
        RequestType.MODIFY_EXISTING_UI.value,
        RequestType.MODIFY_UI_FROM_PROMPT.value,
    }
)


def default_provider_factory(api_key: str | None) -> CompletionProvider:
    """Provider chosen by LLM_PROVIDER, keyed with the stored API key."""
    return create_completion_provider(api_key=api_key)


class PluginController:
    """Message handler for one open document.

    Args:
        host: The open document.
        store: Session storage backend.
        post: Sends a message to the UI.
        provider_factory: Builds a completion provider from an API key.
        generator_config: Retry and sampling policy for prompt requests.

    Example:
        >>> posted = []
        >>> controller = PluginController(host, store, posted.append)
        >>> await controller.handle({"type": "scan-design-system"})
        >>> posted[-1]["type"]
        'scan-results'
    """

    def __init__(
        self,
        host: DocumentHost,
        store: SessionStore,
        post: PostMessage,
        provider_factory: ProviderFactory = default_provider_factory,
        generator_config: GeneratorConfig | None = None,
    ):
        self.host = host
        self.session = SessionManager(store, host.document_fingerprint)
        self._post = post
        self._provider_factory = provider_factory
        self._generator_config = generator_config
        self._font_family = get_environment(EnvVar.DEFAULT_FONT_FAMILY)

        self._handlers: dict[RequestType, Callable[[Any], Awaitable[None]]] = {
            RequestType.SCAN_DESIGN_SYSTEM: self._scan,
            RequestType.GENERATE_UI_FROM_JSON: self._generate_from_json,
            RequestType.GENERATE_UI_FROM_PROMPT: self._generate_from_prompt,
            RequestType.MODIFY_EXISTING_UI: self._modify_existing,
            RequestType.MODIFY_UI_FROM_PROMPT: self._modify_from_prompt,
            RequestType.UPDATE_COMPONENT_TYPE: self._update_component_type,
            RequestType.NAVIGATE_TO_COMPONENT: self._navigate,
            RequestType.GET_API_KEY: self._get_api_key,
            RequestType.SAVE_API_KEY: self._save_api_key,
            RequestType.CLEAR_API_KEY: self._clear_api_key,
            RequestType.GET_SAVED_SCAN: self._get_saved_scan,
            RequestType.GENERATE_LLM_PROMPT: self._generate_llm_prompt,
            RequestType.TEST_API_CONNECTION: self._test_api_connection,
            RequestType.CLEAR_STORAGE: self._clear_storage,
        }

    # =========================================================================
    # Entry points
    # =========================================================================

    async def initialize(self) -> None:
        """Announce the stored API key and the saved scan, if any."""
        try:
            api_key = await self.session.get_api_key()
        except StorageError as e:
            logger.error(f"Could not read API key: {e}")
            api_key = None
        if api_key:
            self._post(response(ResponseType.API_KEY_LOADED, payload=api_key))

        stored = await self.session.load_catalog()
        if stored is not None:
            self._post(
                response(
                    ResponseType.SAVED_SCAN_LOADED,
                    components=stored.to_catalog().to_json_list(),
                    scanTime=stored.scan_time.isoformat(),
                )
            )

    async def handle(self, message: dict[str, Any]) -> None:
        """Dispatch one UI message. Unknown message types are ignored."""
        kind = message.get("type")
        if kind not in KNOWN_REQUESTS:
            logger.debug(f"Ignoring unknown message type: {kind}")
            return

        logger.info(f"Message from UI: {kind}")
        try:
            request = parse_request(message)
        except ValidationError as e:
            error = f"Invalid '{kind}' message: {e.error_count()} error(s)"
            logger.error(f"{error}\n{e}")
            self.host.notify(error, is_error=True)
            if kind in _GENERATION_REQUESTS:
                self._post(response(ResponseType.UI_GENERATION_ERROR, error=error))
            return

        await self._handlers[RequestType(kind)](request)

    # =========================================================================
    # Scanning and catalog
    # =========================================================================

    async def _scan(self, request: ScanDesignSystem) -> None:
        def on_progress(progress: ScanProgress) -> None:
            self._post(
                response(
                    ResponseType.SCAN_PROGRESS,
                    current=progress.current,
                    total=progress.total,
                    status=progress.status,
                )
            )

        try:
            catalog = await DesignSystemScanner(self.host, on_progress).scan()
        except HostError as e:
            logger.error(f"Scan failed: {e}")
            self.host.notify("Scanning error", is_error=True)
            return

        await self.session.save_catalog(catalog)
        self._post(response(ResponseType.SCAN_RESULTS, components=catalog.to_json_list()))

    async def _get_saved_scan(self, request: GetSavedScan) -> None:
        stored = await self.session.load_catalog()
        if stored is None:
            self._post(response(ResponseType.NO_SAVED_SCAN))
            return
        self._post(
            response(
                ResponseType.SAVED_SCAN_LOADED,
                components=stored.to_catalog().to_json_list(),
                scanTime=stored.scan_time.isoformat(),
            )
        )

    async def _update_component_type(self, request: UpdateComponentType) -> None:
        payload = request.payload
        try:
            record = await self.session.update_component_type(
                payload.component_id, payload.new_type
            )
        except KeyError:
            logger.error(f"Cannot update type of unknown component {payload.component_id}")
            self.host.notify("Error updating type", is_error=True)
            return

        self._post(
            response(
                ResponseType.COMPONENT_TYPE_UPDATED,
                componentId=record.id,
                newType=record.suggested_type,
                componentName=record.name,
            )
        )

    async def _navigate(self, request: NavigateToComponent) -> None:
        node = self.host.get_node_by_id(request.component_id)
        if node is None:
            self.host.notify("Component not found", is_error=True)
            return

        try:
            if request.page_name:
                page = next(
                    (p for p in self.host.pages if p.name == request.page_name), None
                )
                if page is not None and page is not self.host.current_page:
                    self.host.set_current_page(page)
            self.host.set_selection_and_focus(node)
        except HostError as e:
            logger.error(f"Navigation error: {e}")
            self.host.notify("Navigation error", is_error=True)
            return

        self.host.notify(f"Navigated to: {node.name}")

    # =========================================================================
    # Rendering
    # =========================================================================

    async def _generate_from_json(self, request: GenerateFromJSON) -> None:
        try:
            document = parse_layout(request.payload)
            report = await self._render(document)
        except GENERATION_ERRORS as e:
            self._generation_failed("JSON parsing error", e)
            return
        self._post_generated(document, report)

    async def _generate_from_prompt(self, request: GenerateFromPrompt) -> None:
        payload = request.payload
        try:
            catalog = await self.session.current_catalog()
            generator = await self._generator(Platform(payload.platform))
            output = await generator.generate(payload.prompt, catalog)
            report = await self._render(output.layout, catalog)
        except GENERATION_ERRORS as e:
            self._generation_failed("API generation error", e)
            return
        self._post_generated(output.layout, report, retryCount=output.stats.attempts - 1)

    async def _modify_existing(self, request: ModifyExistingUI) -> None:
        payload = request.payload
        try:
            document = parse_layout(payload.modified_json)
            report = await self._modify(payload.frame_id, document)
        except GENERATION_ERRORS as e:
            self._generation_failed("Modification error", e)
            return
        self._post_modified(document, report)

    async def _modify_from_prompt(self, request: ModifyFromPrompt) -> None:
        payload = request.payload
        try:
            current = parse_layout(payload.original_json)
            catalog = await self.session.current_catalog()
            generator = await self._generator()
            output = await generator.modify(current, payload.modification_request, catalog)
            report = await self._modify(payload.frame_id, output.layout, catalog)
        except GENERATION_ERRORS as e:
            self._generation_failed("API modification error", e)
            return
        self._post_modified(output.layout, report, retryCount=output.stats.attempts - 1)

    async def _render(
        self, document: LayoutDocument, catalog: Catalog | None = None
    ) -> RenderReport:
        if catalog is None:
            catalog = await self.session.current_catalog()
        renderer = LayoutTreeRenderer(self.host, catalog, font_family=self._font_family)
        return await renderer.render_resolved(document)

    async def _modify(
        self, frame_id: str, document: LayoutDocument, catalog: Catalog | None = None
    ) -> RenderReport:
        if catalog is None:
            catalog = await self.session.current_catalog()
        rewrites = resolve_component_ids(document, catalog)
        renderer = LayoutTreeRenderer(self.host, catalog, font_family=self._font_family)
        report = await renderer.modify_existing(frame_id, document)
        report.rewrites = rewrites
        return report

    def _post_generated(
        self, document: LayoutDocument, report: RenderReport, **extra: Any
    ) -> None:
        self._post(
            response(
                ResponseType.UI_GENERATED_SUCCESS,
                frameId=report.frame.id,
                generatedJSON=document.to_json_dict(),
                warnings=[w.message for w in report.warnings],
                **extra,
            )
        )

    def _post_modified(
        self, document: LayoutDocument, report: RenderReport, **extra: Any
    ) -> None:
        self._post(
            response(
                ResponseType.UI_MODIFIED_SUCCESS,
                frameId=report.frame.id,
                modifiedJSON=document.to_json_dict(),
                warnings=[w.message for w in report.warnings],
                **extra,
            )
        )

    def _generation_failed(self, label: str, error: Exception) -> None:
        logger.error(f"{label}: {error}")
        self.host.notify(f"{label}: {error}", is_error=True)
        self._post(response(ResponseType.UI_GENERATION_ERROR, error=str(error)))

    # =========================================================================
    # Completion provider
    # =========================================================================

    async def _provider(self, api_key: str | None = None) -> CompletionProvider:
        """Provider keyed with the given key, else the stored one.

        Raises:
            ProviderError: If no key is available (AuthenticationError).
        """
        if api_key is None:
            api_key = await self.session.get_api_key()
        return self._provider_factory(api_key)

    async def _generator(self, platform: Platform = Platform.MOBILE) -> LayoutGenerator:
        provider = await self._provider()
        return LayoutGenerator(
            provider,
            prompt_builder=PromptBuilder(PromptConfig(platform=platform)),
            config=self._generator_config,
        )

    async def _generate_llm_prompt(self, request: GenerateLLMPrompt) -> None:
        payload = request.payload
        catalog = await self.session.current_catalog()
        if not catalog:
            self.host.notify("Scan components first", is_error=True)
            return

        builder = PromptBuilder(PromptConfig(platform=Platform(payload.platform)))
        if payload.request:
            prompt = builder.build(payload.request, catalog)
        else:
            prompt = builder.build_catalog_prompt(catalog)
        self._post(response(ResponseType.LLM_PROMPT_GENERATED, prompt=prompt))

    async def _test_api_connection(self, request: CheckAPIConnection) -> None:
        try:
            provider = await self._provider(request.payload)
        except ProviderError as e:
            logger.warning(f"Cannot test connection: {e}")
            self._post(
                response(ResponseType.API_TEST_RESULT, success=False, error=NO_API_KEY_MESSAGE)
            )
            return

        connected = await provider.test_connection()
        self._post(
            response(
                ResponseType.API_TEST_RESULT,
                success=connected,
                error=None if connected else "Connection test failed",
            )
        )
        if connected:
            self.host.notify("API connection successful!")
        else:
            self.host.notify("API connection failed", is_error=True)

    # =========================================================================
    # API key and storage
    # =========================================================================

    async def _get_api_key(self, request: GetAPIKey) -> None:
        try:
            api_key = await self.session.get_api_key()
        except StorageError as e:
            self._post(response(ResponseType.API_KEY_ERROR, payload=str(e)))
            return
        if api_key:
            self._post(response(ResponseType.API_KEY_FOUND, payload=api_key))
        else:
            self._post(response(ResponseType.API_KEY_NOT_FOUND))

    async def _save_api_key(self, request: SaveAPIKey) -> None:
        try:
            await self.session.save_api_key(request.payload)
        except StorageError as e:
            logger.error(f"Error saving API key: {e}")
            self.host.notify("Error saving API key", is_error=True)
            return
        self._post(response(ResponseType.API_KEY_SAVED))

    async def _clear_api_key(self, request: ClearAPIKey) -> None:
        try:
            await self.session.clear_api_key()
        except StorageError as e:
            logger.error(f"Error clearing API key: {e}")
            self.host.notify("Error clearing API key", is_error=True)
            return
        self._post(response(ResponseType.API_KEY_CLEARED))

    async def _clear_storage(self, request: ClearStorage) -> None:
        try:
            await self.session.clear_all()
        except StorageError as e:
            logger.error(f"Error clearing storage: {e}")
            self.host.notify("Error clearing storage", is_error=True)
            return
        self.host.notify("Storage cleared")


__all__ = [
    "GENERATION_ERRORS",
    "NO_API_KEY_MESSAGE",
    "PluginController",
    "PostMessage",
    "ProviderFactory",
    "default_provider_factory",
]
