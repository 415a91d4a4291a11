"""PromptBuilder for catalog-aware layout prompts.

Constructs prompts that describe the scanned design system, the layout JSON
contract and the user's request, so the completion provider answers with a
layout that references real component ids.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from aidesigner.catalog import Catalog, ComponentRecord
from aidesigner.schema import LayoutDocument

PROMPT_CONFIDENCE_THRESHOLD = 0.7

JSON_ONLY_INSTRUCTION = (
    "Respond ONLY with valid JSON, without any additional text, comments, or markdown."
)

PURPOSE_GROUPS: dict[str, tuple[str, ...]] = {
    "User Actions": ("button", "fab", "chip", "link", "icon-button"),
    "Data Input": (
        "input", "textarea", "select", "checkbox", "radio", "switch",
        "slider", "searchbar", "form", "upload",
    ),
    "Navigation": (
        "appbar", "tab", "tabs", "breadcrumb", "pagination",
        "navigation", "sidebar", "menu",
    ),
    "Content Display": (
        "card", "list", "list-item", "avatar", "image", "text",
        "header", "badge", "icon",
    ),
    "Feedback": ("snackbar", "alert", "dialog", "modal", "progress", "skeleton", "tooltip"),
    "Page Structure": ("container", "grid", "divider", "spacer", "frame"),
}
FALLBACK_GROUP = "Page Structure"

# (keywords, advice) pairs matched against the lowercased request
CONTEXTUAL_GUIDANCE: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("form", "login", "register", "signin", "password", "email"),
        "Forms should be simple and clear. Place required fields first, "
        "and group related fields.",
    ),
    (
        ("navigat", "menu", "tab", "section"),
        "Navigation should be intuitive. No more than 7 items per level. "
        "Indicate the current location.",
    ),
    (
        ("list", "card", "item", "product"),
        "Lists should have a scannable structure: important information at the "
        "top, secondary below it.",
    ),
    (
        ("dashboard", "panel", "stat", "analytic"),
        "Dashboards: most important information at the top and left.",
    ),
    (
        ("settings", "preferences", "account", "options", "configure"),
        "Settings screens should show current values. Use 'trailing-text' for "
        "the current language, email, notification status and similar.",
    ),
)


class Platform(str, Enum):
    """Target form factor for the generated screen."""

    MOBILE = "mobile"
    DESKTOP = "desktop"


@dataclass
class PromptConfig:
    """Configuration for prompt building.

    Attributes:
        platform: Target form factor, controls width and layout advice.
        min_confidence: Components below this confidence are left out.
        include_structure_guide: Whether to include the layout JSON contract.
        include_guidance: Whether to add keyword-driven UX advice.
    """

    platform: Platform = Platform.MOBILE
    min_confidence: float = PROMPT_CONFIDENCE_THRESHOLD
    include_structure_guide: bool = True
    include_guidance: bool = True


@dataclass
class PromptContext:
    """Context for a generated prompt.

    Tracks what was included in the prompt for debugging/analysis.

    Attributes:
        request: Original user request.
        component_ids: Ids of catalog components offered to the model.
        guidance: UX advice lines added for the request.
        total_tokens_estimate: Rough token count estimate.
    """

    request: str
    component_ids: list[str] = field(default_factory=list)
    guidance: list[str] = field(default_factory=list)
    total_tokens_estimate: int = 0


class PromptBuilder:
    """Builds completion prompts from a request and a scanned catalog.

    Example:
        >>> builder = PromptBuilder()
        >>> prompt = builder.build("login screen with email and password", catalog)
        >>> "componentNodeId" in prompt
        True
    """

    SYSTEM_PROMPT = """You are an experienced Senior UX Designer.
Create structured JSON that generates UI in the design tool, using components
from the user's design system. Apply your UX knowledge to create logical,
user-friendly interfaces.

RULES:
1. Output ONLY valid JSON matching the layout structure below
2. Use ONLY componentNodeId values listed in the design system section
3. Never invent placeholder ids like "button_id" or "component_123"
4. Put variant choices inside a "variants" object in properties"""

    def __init__(self, config: PromptConfig | None = None):
        """Initialize PromptBuilder.

        Args:
            config: Prompt building configuration.
        """
        self._config = config or PromptConfig()

    @property
    def config(self) -> PromptConfig:
        return self._config

    def build(self, request: str, catalog: Catalog) -> str:
        """Build a complete generation prompt.

        Args:
            request: User's natural language screen description.
            catalog: Scanned design-system catalog.

        Returns:
            Formatted prompt with design system, contract and request.
        """
        prompt, _ = self.build_with_context(request, catalog)
        return prompt

    def build_with_context(
        self, request: str, catalog: Catalog
    ) -> tuple[str, PromptContext]:
        """Build a generation prompt and return context metadata.

        Args:
            request: User's natural language screen description.
            catalog: Scanned design-system catalog.

        Returns:
            Tuple of (prompt_string, PromptContext).
        """
        context = PromptContext(request=request)
        parts: list[str] = [self._format_platform()]

        summary, ids = self._format_design_system(catalog)
        parts.append(summary)
        context.component_ids = ids

        if self._config.include_structure_guide:
            parts.append(self._format_structure_guide())

        if self._config.include_guidance:
            context.guidance = self.guidance_for(request)

        parts.append(self._format_request(request, context.guidance))
        parts.append(JSON_ONLY_INSTRUCTION)

        prompt = "\n\n".join(parts)
        context.total_tokens_estimate = len(prompt) // 4  # Rough estimate
        return prompt, context

    def build_modification(
        self,
        current: LayoutDocument | dict[str, Any],
        instruction: str,
        catalog: Catalog,
    ) -> str:
        """Build a prompt asking the model to edit an existing layout.

        Args:
            current: The layout currently rendered in the frame.
            instruction: What the user wants changed.
            catalog: Scanned design-system catalog.

        Returns:
            Self-contained modification prompt.
        """
        if isinstance(current, LayoutDocument):
            current = current.to_json_dict()
        summary, _ = self._format_design_system(catalog)

        parts = [
            "You are an expert UX Designer modifying an existing UI design.",
            self._format_platform(),
            summary,
            f"""## Your Task

Modify the CURRENT DESIGN according to the USER REQUEST. Return the COMPLETE,
new JSON structure.

## CURRENT DESIGN:
```json
{json.dumps(current, indent=2)}
```

## USER REQUEST:
"{instruction}"

## MODIFICATION RULES:
1. Preserve unchanged elements: keep every element and property not mentioned
   in the request exactly as it is.
2. Maintain component ids: use the same componentNodeId for every unchanged
   component.
3. Return the full structure: the output must be the ENTIRE JSON object.""",
        ]
        if self._config.include_structure_guide:
            parts.append(self._format_structure_guide())
        parts.append(JSON_ONLY_INSTRUCTION)
        return "\n\n".join(parts)

    def build_catalog_prompt(self, catalog: Catalog) -> str:
        """Build a standalone instruction sheet for use in an external chat.

        Lists the best component of every type in alphabetical order, then
        the layout JSON contract. No request is embedded.
        """
        selected = self.select_components(catalog)
        lines = ["# Layout JSON Generation Instructions", "", "## Available Components"]
        for component_type in sorted(selected):
            lines.append("")
            lines.append(f"### {component_type.upper()}")
            lines.extend(_describe_component(selected[component_type]))
        parts = ["\n".join(lines), self._format_structure_guide(), JSON_ONLY_INSTRUCTION]
        return "\n\n".join(parts)

    def guidance_for(self, request: str) -> list[str]:
        """UX advice lines triggered by keywords in the request."""
        lowered = request.lower()
        return [
            advice
            for keywords, advice in CONTEXTUAL_GUIDANCE
            if any(keyword in lowered for keyword in keywords)
        ]

    def select_components(self, catalog: Catalog) -> dict[str, ComponentRecord]:
        """Best component per type at or above the confidence threshold."""
        return {
            component_type: records[0]
            for component_type, records in catalog.by_type(
                self._config.min_confidence
            ).items()
        }

    def _format_platform(self) -> str:
        if self._config.platform == Platform.MOBILE:
            return """## Platform
Target: Mobile, single column layout.
Screen width: 360px.
Interaction: thumb navigation, 44px+ touch targets."""
        return """## Platform
Target: Desktop, multi-column layouts are possible.
Screen width: 1440px."""

    def _format_design_system(self, catalog: Catalog) -> tuple[str, list[str]]:
        """Format the design system section.

        Returns:
            Tuple of (formatted_section, offered_component_ids).
        """
        selected = self.select_components(catalog)
        if not selected:
            return (
                """## Available Components
Design system not loaded. Please scan your design system first.

You cannot use placeholder ids. Use native elements only.""",
                [],
            )

        grouped: dict[str, list[ComponentRecord]] = {name: [] for name in PURPOSE_GROUPS}
        for component_type, record in selected.items():
            grouped[_purpose_of(component_type)].append(record)

        lines = [
            f"## Your Design System ({len(selected)} component types)",
            "",
            "CRITICAL: You MUST use the exact componentNodeId values below.",
        ]
        ids: list[str] = []
        for group, records in grouped.items():
            if not records:
                continue
            lines.append("")
            lines.append(f"### {group}")
            for record in records:
                lines.extend(_describe_component(record))
                ids.append(record.id)
        return "\n".join(lines), ids

    def _format_structure_guide(self) -> str:
        return """## JSON Structure & Rules

Basic structure:
```json
{
  "layoutContainer": {
    "name": "Screen Name",
    "layoutMode": "VERTICAL",
    "width": 360,
    "paddingTop": 24, "paddingBottom": 24, "paddingLeft": 16, "paddingRight": 16,
    "itemSpacing": 16
  },
  "items": []
}
```

Item kinds:
- Nested container: {"type": "layoutContainer", "name": "...", "layoutMode": "HORIZONTAL", "items": [...]}
- Native text: {"type": "native-text", "properties": {"content": "...", "fontSize": 16}}
- Native rectangle: {"type": "native-rectangle", "properties": {"width": 200, "height": 2, "fill": {"r": 0.9, "g": 0.9, "b": 0.9}}}
- Native circle: {"type": "native-circle", "properties": {"width": 8, "height": 8}}
- Component: {"type": "<component type>", "componentNodeId": "<id>", "properties": {"text": "...", "variants": {"<Axis>": "<value>"}}}

Property names:
- Main content: "text" or "headline"
- Secondary content: "supporting-text" or "subtitle"
- End content: "trailing-text" or "value"
- Sizing: "horizontalSizing": "FILL" stretches the element across its container"""

    def _format_request(self, request: str, guidance: list[str]) -> str:
        section = f"""## Your Task

Generate a UI layout in JSON format for this request:

"{request}\""""
        if guidance:
            tips = "\n".join(f"- {tip}" for tip in guidance)
            section += f"\n\nConsider these principles:\n{tips}"
        return section


def _purpose_of(component_type: str) -> str:
    for group, types in PURPOSE_GROUPS.items():
        if component_type in types:
            return group
    return FALLBACK_GROUP


def _describe_component(record: ComponentRecord) -> list[str]:
    lines = [
        f'- **{record.suggested_type}** ({record.name}) -> componentNodeId: "{record.id}"'
    ]
    if record.variant_groups:
        lines.append("  - Variants:")
        for axis, values in record.variant_groups.items():
            options = ", ".join(f'"{value}"' for value in values)
            lines.append(f"    - {axis}: [{options}]")
    if record.text_slots:
        layers = ", ".join(f'"{slot.node_name}"' for slot in record.text_slots)
        lines.append(f"  - Text layers: {layers}")
    if record.page_context is not None:
        lines.append(f"  - Page: {record.page_context.page_name}")
    return lines


__all__ = [
    "CONTEXTUAL_GUIDANCE",
    "JSON_ONLY_INSTRUCTION",
    "PROMPT_CONFIDENCE_THRESHOLD",
    "PURPOSE_GROUPS",
    "Platform",
    "PromptBuilder",
    "PromptConfig",
    "PromptContext",
]
