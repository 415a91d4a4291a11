"""Design-system scanner.

Walks every page of the open document, finds component sets and standalone
components, and turns each into a ComponentRecord. Failures are contained:
a page that cannot be searched or a component that cannot be analyzed is
logged and skipped.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from aidesigner.catalog import Catalog, ComponentRecord, PageContext
from aidesigner.classifier import classify
from aidesigner.host import (
    ComponentNode,
    ComponentSetNode,
    DocumentHost,
    Node,
    PageNode,
)

from .text_slots import find_text_slots
from .variants import extract_variant_schema

logger = logging.getLogger(__name__)


@dataclass
class ScanProgress:
    """Progress report emitted during a scan.

    Attributes:
        current: Pages processed so far.
        total: Total pages.
        status: Human-readable status line.
    """

    current: int
    total: int
    status: str


ProgressCallback = Callable[[ScanProgress], None]


def is_catalog_root(node: Node) -> bool:
    """Component sets, and components that are not members of a set."""
    if isinstance(node, ComponentSetNode):
        return True
    if isinstance(node, ComponentNode):
        return node.parent is not None and not isinstance(
            node.parent, ComponentSetNode
        )
    return False


class DesignSystemScanner:
    """Builds a Catalog from the components in a document.

    Example:
        >>> scanner = DesignSystemScanner(host, on_progress=print)
        >>> catalog = await scanner.scan()
        >>> [r.suggested_type for r in catalog]
        ['button', 'input']
    """

    def __init__(
        self,
        host: DocumentHost,
        on_progress: ProgressCallback | None = None,
    ):
        self._host = host
        self._on_progress = on_progress

    async def scan(self) -> Catalog:
        """Scan every page.

        Returns:
            Catalog in page order, then depth-first order within a page.
        """
        logger.info("Starting design system scan")
        await self._host.load_all_pages()

        pages = self._host.pages
        total = len(pages)
        records: list[ComponentRecord] = []
        self._report(0, total, "Initializing scan...")

        for index, page in enumerate(pages, start=1):
            self._report(index, total, f'Scanning page: "{page.name}" ({index}/{total})')
            try:
                nodes = self._host.find_all(page, is_catalog_root)
            except Exception as e:
                logger.error(f"Error scanning page '{page.name}': {e}")
                continue

            logger.debug(f"Found {len(nodes)} main components on page '{page.name}'")
            for node in nodes:
                try:
                    records.append(self.analyze_component(node, page))
                except Exception as e:
                    logger.error(f"Error analyzing component '{node.name}': {e}")

        self._report(total, total, f"Scan complete! Found {len(records)} components")
        logger.info(f"Design system scan complete: {len(records)} components")
        return Catalog(records)

    def analyze_component(self, node: Node, page: PageNode | None = None) -> ComponentRecord:
        """Classify one component or component set.

        Args:
            node: Component or component set.
            page: Page the node lives on. Looked up from the tree when omitted.

        Returns:
            ComponentRecord with type, confidence, variants, text slots and page.
        """
        classification = classify(node.name)

        variant_groups = None
        if isinstance(node, ComponentSetNode):
            variant_groups = extract_variant_schema(node.variant_group_properties) or None

        text_slots = find_text_slots(self._host, node) or None

        page = page or node.page()
        page_context = None
        if page is not None:
            page_context = PageContext(
                page_name=page.name,
                page_id=page.id,
                is_current_page=page is self._host.current_page,
            )

        return ComponentRecord(
            id=node.id,
            name=node.name,
            suggested_type=classification.suggested_type,
            confidence=classification.confidence,
            variant_groups=variant_groups,
            text_slots=text_slots,
            page_context=page_context,
        )

    def _report(self, current: int, total: int, status: str) -> None:
        if self._on_progress is not None:
            self._on_progress(ScanProgress(current=current, total=total, status=status))


__all__ = ["DesignSystemScanner", "ProgressCallback", "ScanProgress", "is_catalog_root"]
