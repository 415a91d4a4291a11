"""aidesigner: design-system scanning and layout rendering for a design-tool plugin."""

from aidesigner.catalog import Catalog, ComponentRecord
from aidesigner.classifier import classify
from aidesigner.plugin import PluginController
from aidesigner.render import LayoutTreeRenderer, RenderReport
from aidesigner.resolver import SemanticResolver, resolve_component_ids
from aidesigner.scanner import DesignSystemScanner
from aidesigner.schema import LayoutDocument, export_json_schema, parse_layout

__all__ = [
    # Catalog
    "Catalog",
    "ComponentRecord",
    "classify",
    "DesignSystemScanner",
    # Layout
    "LayoutDocument",
    "parse_layout",
    "export_json_schema",
    # Rendering
    "SemanticResolver",
    "resolve_component_ids",
    "LayoutTreeRenderer",
    "RenderReport",
    # Plugin
    "PluginController",
]
