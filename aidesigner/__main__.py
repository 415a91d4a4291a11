"""CLI entry point for aidesigner.

Runs the plugin core outside the design tool, over JSON document snapshots
(see ``InMemoryDocumentHost.to_dict``) and catalog files written by ``scan``.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from aidesigner.config import EnvVar, get_environment
from aidesigner.core import get_logger, parse_level, setup_logging

# Load environment variables from .env file
load_dotenv()

logger = get_logger("aidesigner.cli")


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _write_output(text: str, output: Path | None) -> None:
    if output:
        output.write_text(text, encoding="utf-8")
        logger.info(f"Saved to {output}")
    else:
        print(text)


def _load_catalog(path: Path | None):
    from aidesigner.catalog import Catalog

    if path is None:
        return Catalog()
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("components", [])
    return Catalog.from_json_list(data)


# =============================================================================
# Catalog Commands
# =============================================================================


def cmd_classify(args: argparse.Namespace) -> int:
    """Handle the classify command."""
    from aidesigner.classifier import classify

    for name in args.names:
        result = classify(name)
        print(f"{name!r}: {result.suggested_type} ({result.confidence:.2f})")
    return 0


def cmd_scan(args: argparse.Namespace) -> int:
    """Handle the scan command."""
    from aidesigner.host import HostError, InMemoryDocumentHost
    from aidesigner.scanner import DesignSystemScanner

    try:
        host = InMemoryDocumentHost.from_dict(_read_json(args.document))
        scanner = DesignSystemScanner(host, on_progress=lambda p: logger.info(p.status))
        catalog = asyncio.run(scanner.scan())
    except (OSError, ValueError, HostError) as e:
        logger.error(f"Scan failed: {e}")
        return 1

    _write_output(json.dumps(catalog.to_json_list(), indent=2), args.output)
    by_type = catalog.by_type()
    logger.info(f"Found {len(catalog)} components in {len(by_type)} types")
    return 0


# =============================================================================
# Layout Commands
# =============================================================================


def cmd_schema(args: argparse.Namespace) -> int:
    """Handle the schema command."""
    from aidesigner.schema import export_json_schema

    _write_output(json.dumps(export_json_schema(), indent=2), args.output)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle the validate command."""
    from aidesigner.schema import LayoutParseError, parse_layout

    try:
        document = parse_layout(args.layout.read_text(encoding="utf-8"))
    except (OSError, LayoutParseError) as e:
        logger.error(f"Invalid layout: {e}")
        return 1

    components = document.iter_components()
    logger.info(
        f"Layout '{document.layout_container.name}' is valid: "
        f"{len(document.items)} top-level items, {len(components)} components"
    )
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    """Handle the resolve command."""
    from aidesigner.resolver import ResolutionError, resolve_component_ids
    from aidesigner.schema import LayoutParseError, parse_layout

    try:
        catalog = _load_catalog(args.catalog)
        document = parse_layout(args.layout.read_text(encoding="utf-8"))
        rewrites = resolve_component_ids(document, catalog)
    except (OSError, ValueError, LayoutParseError, ResolutionError) as e:
        logger.error(f"Resolution failed: {e}")
        return 1

    for rewrite in rewrites:
        logger.info(
            f"{rewrite.component_type}: {rewrite.old_id!r} -> {rewrite.new_id} "
            f"({rewrite.strategy})"
        )
    _write_output(json.dumps(document.to_json_dict(), indent=2), args.output)
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    """Handle the render command."""
    from aidesigner.host import HostError, InMemoryDocumentHost
    from aidesigner.render import LayoutTreeRenderer
    from aidesigner.resolver import ResolutionError
    from aidesigner.schema import LayoutParseError, parse_layout

    font_family = args.font or get_environment(EnvVar.DEFAULT_FONT_FAMILY)
    try:
        host = InMemoryDocumentHost.from_dict(_read_json(args.document))
        catalog = _load_catalog(args.catalog)
        document = parse_layout(args.layout.read_text(encoding="utf-8"))
        renderer = LayoutTreeRenderer(host, catalog, font_family=font_family)
        report = asyncio.run(renderer.render_resolved(document))
    except (OSError, ValueError, LayoutParseError, ResolutionError, HostError) as e:
        logger.error(f"Render failed: {e}")
        return 1

    for warning in report.warnings:
        logger.warning(f"[{warning.kind.value}] {warning.message}")
    logger.info(
        f"Rendered frame {report.frame.id} with {len(report.instances)} instance(s)"
    )
    _write_output(json.dumps(host.to_dict(), indent=2), args.output)
    return 0


# =============================================================================
# Completion Commands
# =============================================================================


def cmd_prompt(args: argparse.Namespace) -> int:
    """Handle the prompt command."""
    from aidesigner.prompt import Platform, PromptBuilder, PromptConfig

    try:
        catalog = _load_catalog(args.catalog)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load catalog: {e}")
        return 1

    builder = PromptBuilder(PromptConfig(platform=Platform(args.platform)))
    if args.request:
        text = builder.build(args.request, catalog)
    else:
        text = builder.build_catalog_prompt(catalog)
    _write_output(text, args.output)
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate command."""
    from aidesigner.llm import (
        GeneratorConfig,
        LayoutGenerator,
        ProviderError,
        RetryConfig,
        create_completion_provider,
    )
    from aidesigner.prompt import Platform, PromptBuilder, PromptConfig
    from aidesigner.schema import LayoutParseError

    retry = RetryConfig() if args.retries is None else RetryConfig(max_retries=args.retries)
    config = GeneratorConfig(temperature=args.temperature, retry=retry)

    try:
        catalog = _load_catalog(args.catalog)
        provider = create_completion_provider(args.provider, model=args.model)
        generator = LayoutGenerator(
            provider,
            prompt_builder=PromptBuilder(PromptConfig(platform=Platform(args.platform))),
            config=config,
        )
        logger.info(f"Generating layout with {provider.name} for: {args.request}")
        output = asyncio.run(generator.generate(args.request, catalog))
    except (OSError, ValueError, LayoutParseError, ProviderError) as e:
        logger.error(f"Generation failed: {e}")
        return 1

    _write_output(json.dumps(output.layout.to_json_dict(), indent=2), args.output)
    logger.info(
        f"Stats: {output.stats.attempts} attempt(s), "
        f"{output.stats.json_repairs} JSON repair(s), "
        f"{output.stats.total_tokens} tokens, "
        f"model={output.stats.final_model}"
    )
    return 0


def cmd_test_connection(args: argparse.Namespace) -> int:
    """Handle the test-connection command."""
    from aidesigner.llm import ProviderError, create_completion_provider

    try:
        provider = create_completion_provider(args.provider, model=args.model)
    except (ValueError, ProviderError) as e:
        logger.error(f"Cannot create provider: {e}")
        return 1

    if asyncio.run(provider.test_connection()):
        logger.info(f"{provider.name}: connection successful")
        return 0
    logger.error(f"{provider.name}: connection test failed")
    return 1


# =============================================================================
# Parser
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all commands."""
    parser = argparse.ArgumentParser(
        prog="aidesigner",
        description="Design-system scanning and layout rendering tools",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: LOG_LEVEL env var or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    classify_parser = subparsers.add_parser(
        "classify", help="Classify component names into semantic types"
    )
    classify_parser.add_argument("names", nargs="+", help="Component names")
    classify_parser.set_defaults(func=cmd_classify)

    scan_parser = subparsers.add_parser(
        "scan", help="Scan a document snapshot into a component catalog"
    )
    scan_parser.add_argument("document", type=Path, help="Document snapshot JSON")
    scan_parser.add_argument("--output", "-o", type=Path, help="Catalog output file")
    scan_parser.set_defaults(func=cmd_scan)

    schema_parser = subparsers.add_parser(
        "schema", help="Print the layout JSON Schema"
    )
    schema_parser.add_argument("--output", "-o", type=Path, help="Output file")
    schema_parser.set_defaults(func=cmd_schema)

    validate_parser = subparsers.add_parser("validate", help="Validate a layout file")
    validate_parser.add_argument("layout", type=Path, help="Layout JSON")
    validate_parser.set_defaults(func=cmd_validate)

    resolve_parser = subparsers.add_parser(
        "resolve", help="Replace placeholder component ids using a catalog"
    )
    resolve_parser.add_argument("layout", type=Path, help="Layout JSON")
    resolve_parser.add_argument("--catalog", "-c", type=Path, required=True)
    resolve_parser.add_argument("--output", "-o", type=Path, help="Output file")
    resolve_parser.set_defaults(func=cmd_resolve)

    render_parser = subparsers.add_parser(
        "render", help="Render a layout into a document snapshot"
    )
    render_parser.add_argument("document", type=Path, help="Document snapshot JSON")
    render_parser.add_argument("layout", type=Path, help="Layout JSON")
    render_parser.add_argument("--catalog", "-c", type=Path, help="Catalog file")
    render_parser.add_argument("--font", help="Font family for native text")
    render_parser.add_argument(
        "--output", "-o", type=Path, help="Updated snapshot output file"
    )
    render_parser.set_defaults(func=cmd_render)

    prompt_parser = subparsers.add_parser(
        "prompt", help="Print the completion prompt for a catalog"
    )
    prompt_parser.add_argument("request", nargs="?", help="Screen description")
    prompt_parser.add_argument("--catalog", "-c", type=Path, required=True)
    prompt_parser.add_argument(
        "--platform", choices=["mobile", "desktop"], default="mobile"
    )
    prompt_parser.add_argument("--output", "-o", type=Path, help="Output file")
    prompt_parser.set_defaults(func=cmd_prompt)

    generate_parser = subparsers.add_parser(
        "generate", help="Generate a layout from a natural language request"
    )
    generate_parser.add_argument("request", help="Screen description")
    generate_parser.add_argument("--catalog", "-c", type=Path, required=True)
    generate_parser.add_argument(
        "--provider",
        choices=["gemini", "openai", "anthropic"],
        help="Completion provider (default: LLM_PROVIDER env var)",
    )
    generate_parser.add_argument("--model", "-m", help="Model name override")
    generate_parser.add_argument(
        "--platform", choices=["mobile", "desktop"], default="mobile"
    )
    generate_parser.add_argument("--temperature", type=float, default=0.7)
    generate_parser.add_argument(
        "--retries", type=int, default=None, help="Max retries on failure"
    )
    generate_parser.add_argument("--output", "-o", type=Path, help="Output file")
    generate_parser.set_defaults(func=cmd_generate)

    connection_parser = subparsers.add_parser(
        "test-connection", help="Check the configured provider's API key"
    )
    connection_parser.add_argument(
        "--provider", choices=["gemini", "openai", "anthropic"]
    )
    connection_parser.add_argument("--model", "-m", help="Model name override")
    connection_parser.set_defaults(func=cmd_test_connection)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    level = args.log_level or get_environment(EnvVar.LOG_LEVEL)
    setup_logging(level=parse_level(level))
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
