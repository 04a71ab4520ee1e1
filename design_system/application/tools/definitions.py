"""
Tool Definitions

Names, descriptions and JSON input schemas of the tools the service
exposes. The dispatcher checks incoming arguments against these schemas
before calling a facade.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from design_system.core.config.constants import TOKEN_CATEGORIES


class ToolDefinition(BaseModel):
    """One tool as advertised to clients."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")

    @property
    def required(self) -> list[str]:
        return list(self.input_schema.get("required", []))

    @property
    def properties(self) -> dict[str, dict[str, Any]]:
        return self.input_schema.get("properties", {})


def _string(description: str, **extra: Any) -> dict[str, Any]:
    return {"type": "string", "description": description, **extra}


def _string_list(description: str) -> dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def _schema(properties: dict[str, Any] | None = None, required: list[str] | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties or {}}
    if required:
        schema["required"] = required
    return schema


TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = (
    # Design tokens
    ToolDefinition(
        name="get-design-tokens",
        description="Get design tokens with optional category filtering",
        input_schema=_schema({
            "category": _string(
                "Filter tokens by category (color, typography, spacing, elevation, motion)",
                enum=list(TOKEN_CATEGORIES),
            ),
            "deprecated": {
                "type": "boolean",
                "description": "Filter by deprecated status (true for deprecated, false for active)",
            },
            "hasUsage": _string_list("Only tokens whose usage mentions every listed context"),
        }),
    ),
    ToolDefinition(
        name="search-design-tokens",
        description="Search design tokens by name or value",
        input_schema=_schema({"query": _string("Search query for token names or values")}, ["query"]),
    ),
    ToolDefinition(
        name="get-design-token-details",
        description="Get detailed information about a specific design token",
        input_schema=_schema({"name": _string("Design token name")}, ["name"]),
    ),
    ToolDefinition(
        name="get-design-token-categories",
        description="Get all available design token categories",
        input_schema=_schema(),
    ),
    # Components
    ToolDefinition(
        name="get-components",
        description="Get all components with optional filtering",
        input_schema=_schema({
            "category": _string("Filter components by category"),
            "name": _string("Filter components by name (partial match)"),
            "hasProps": _string_list("Only components that define every listed prop"),
            "hasVariants": _string_list("Only components that define every listed variant"),
        }),
    ),
    ToolDefinition(
        name="get-component-details",
        description="Get detailed information about a specific component",
        input_schema=_schema({"name": _string("Component name")}, ["name"]),
    ),
    ToolDefinition(
        name="get-component-examples",
        description="Get code examples for a specific component",
        input_schema=_schema({"name": _string("Component name")}, ["name"]),
    ),
    ToolDefinition(
        name="search-components",
        description="Search components by name, description, or other criteria",
        input_schema=_schema({"query": _string("Search query for components")}, ["query"]),
    ),
    # Guidelines
    ToolDefinition(
        name="get-guidelines",
        description="Get design guidelines with optional category filtering",
        input_schema=_schema({
            "category": _string("Filter guidelines by category"),
            "tags": _string_list("Only guidelines carrying every listed tag"),
            "relatedComponent": _string("Only guidelines related to this component"),
            "relatedToken": _string("Only guidelines related to this token"),
        }),
    ),
    ToolDefinition(
        name="get-guideline-details",
        description="Get detailed information about a specific guideline",
        input_schema=_schema({"id": _string("Guideline ID")}, ["id"]),
    ),
    ToolDefinition(
        name="search-guidelines",
        description="Search guidelines by content, title, or tags",
        input_schema=_schema({"query": _string("Search query for guidelines")}, ["query"]),
    ),
)

TOOLS_BY_NAME: dict[str, ToolDefinition] = {tool.name: tool for tool in TOOL_DEFINITIONS}
