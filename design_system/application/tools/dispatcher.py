"""
Tool Dispatcher

Maps a tool name plus a JSON arguments object onto a facade call, and the
facade's result or error onto the response envelope:

    {"success": True, "data": {...}}
    {"success": False, "error": {code, message, suggestions, retryable, timestamp}}

Arguments are checked against the tool's input schema (required keys,
primitive types, enums) before any facade runs. Retryable errors are
retried with tenacity up to ``retry_attempts`` attempts.
"""

import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from design_system.application.services.component_service import ComponentService
from design_system.application.services.design_token_service import DesignTokenService
from design_system.application.services.guidelines_service import GuidelinesService
from design_system.application.tools.definitions import TOOL_DEFINITIONS, TOOLS_BY_NAME, ToolDefinition
from design_system.core.exceptions import (
    ProtocolError,
    ValidationError,
    error_response,
    log_error,
    normalize_error,
)
from design_system.core.logging.logger import clear_request_id, get_logger, get_request_id, set_request_id
from design_system.core.resilience.retry import create_retry_decorator

logger = get_logger(__name__)

ToolHandler = Callable[[dict[str, Any]], Awaitable[Any]]

_JSON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "boolean": (bool,),
    "number": (int, float),
    "integer": (int,),
    "array": (list,),
    "object": (dict,),
}

_ARGUMENT_LABELS = {
    "query": "Query parameter",
    "name": "Name parameter",
    "id": "ID parameter",
}


def _is_type(value: Any, json_type: str) -> bool:
    expected = _JSON_TYPES.get(json_type)
    if expected is None:
        return True
    if json_type in ("number", "integer") and isinstance(value, bool):
        return False
    return isinstance(value, expected)


def validate_arguments(tool: ToolDefinition, arguments: dict[str, Any]) -> None:
    """
    Check ``arguments`` against the tool's input schema.

    Raises:
        ValidationError: Missing required argument, wrong type or value outside the enum
    """
    for key in tool.required:
        value = arguments.get(key)
        if not isinstance(value, str) or not value.strip():
            label = _ARGUMENT_LABELS.get(key, f'Argument "{key}"')
            raise ValidationError(
                f"{label} is required and must be a non-empty string",
                suggestions=[f'Provide "{key}" when calling {tool.name}'],
                context={"tool": tool.name, "argument": key},
            )

    for key, schema in tool.properties.items():
        if key not in arguments or arguments[key] is None:
            continue
        value = arguments[key]
        json_type = schema.get("type", "")
        if not _is_type(value, json_type):
            raise ValidationError(
                f'Argument "{key}" must be of type {json_type}',
                context={"tool": tool.name, "argument": key},
            )
        if json_type == "array":
            item_type = schema.get("items", {}).get("type", "")
            if not all(_is_type(item, item_type) for item in value):
                raise ValidationError(
                    f'Argument "{key}" must be an array of {item_type} values',
                    context={"tool": tool.name, "argument": key},
                )
        if "enum" in schema and value not in schema["enum"]:
            raise ValidationError(
                f'Argument "{key}" must be one of: {", ".join(map(str, schema["enum"]))}',
                context={"tool": tool.name, "argument": key},
            )


def _dump(items) -> list[dict[str, Any]]:
    return [item.to_json_dict() for item in items]


class ToolDispatcher:
    """
    Routes tool calls to the query facades.

    Usage:
        dispatcher = ToolDispatcher(token_service, component_service, guidelines_service)
        payload = await dispatcher.call_tool("get-design-token-details", {"name": "primary-blue"})
    """

    def __init__(
        self,
        token_service: DesignTokenService,
        component_service: ComponentService,
        guidelines_service: GuidelinesService,
        retry_attempts: int = 1,
    ):
        self.tokens = token_service
        self.components = component_service
        self.guidelines = guidelines_service
        self.retry_attempts = retry_attempts

        handlers: dict[str, ToolHandler] = {
            "get-design-tokens": self._get_design_tokens,
            "search-design-tokens": self._search_design_tokens,
            "get-design-token-details": self._get_design_token_details,
            "get-design-token-categories": self._get_design_token_categories,
            "get-components": self._get_components,
            "get-component-details": self._get_component_details,
            "get-component-examples": self._get_component_examples,
            "search-components": self._search_components,
            "get-guidelines": self._get_guidelines,
            "get-guideline-details": self._get_guideline_details,
            "search-guidelines": self._search_guidelines,
        }
        retrying = create_retry_decorator(max_attempts=retry_attempts)
        self._handlers = {name: retrying(handler) for name, handler in handlers.items()}

    def list_tools(self) -> list[ToolDefinition]:
        return list(TOOL_DEFINITIONS)

    async def invoke(self, name: str, arguments: Any = None) -> Any:
        """
        Run a tool and return its data, raising on failure.

        Raises:
            ProtocolError: Unknown tool or non-object arguments
            DesignSystemError: Whatever the facade raised
        """
        tool = TOOLS_BY_NAME.get(name)
        if tool is None:
            raise ProtocolError(
                f'Unknown tool "{name}"',
                suggestions=[f"Available tools: {', '.join(TOOLS_BY_NAME)}"],
                context={"tool": name},
            )
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise ProtocolError(
                "Tool arguments must be a JSON object",
                context={"tool": name, "arguments_type": type(arguments).__name__},
            )

        validate_arguments(tool, arguments)
        return await self._handlers[name](arguments)

    async def call_tool(self, name: str, arguments: Any = None) -> dict[str, Any]:
        """Run a tool and return the success or error envelope; never raises for tool failures."""
        owns_request_id = get_request_id() is None
        if owns_request_id:
            set_request_id(str(uuid.uuid4()))
        try:
            data = await self.invoke(name, arguments)
            logger.info("Tool call succeeded", tool=name)
            return {"success": True, "data": data}
        except Exception as exc:
            error = normalize_error(exc, tool=name)
        finally:
            if owns_request_id:
                clear_request_id()

        log_error(error, tool=name)
        return error_response(error)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _get_design_tokens(self, args: dict[str, Any]) -> dict[str, Any]:
        tokens = await self.tokens.get_tokens(
            category=args.get("category"),
            deprecated=args.get("deprecated"),
            has_usage=args.get("hasUsage"),
        )
        return {"tokens": _dump(tokens), "count": len(tokens), "category": args.get("category") or "all"}

    async def _search_design_tokens(self, args: dict[str, Any]) -> dict[str, Any]:
        tokens = await self.tokens.search_tokens(args["query"])
        return {"tokens": _dump(tokens), "count": len(tokens), "query": args["query"]}

    async def _get_design_token_details(self, args: dict[str, Any]) -> dict[str, Any]:
        token = await self.tokens.get_token(args["name"])
        return token.to_json_dict()

    async def _get_design_token_categories(self, args: dict[str, Any]) -> dict[str, Any]:
        categories = await self.tokens.get_token_categories()
        return {"categories": categories, "count": len(categories)}

    async def _get_components(self, args: dict[str, Any]) -> dict[str, Any]:
        components = await self.components.get_components(
            category=args.get("category"),
            name=args.get("name"),
            has_props=args.get("hasProps"),
            has_variants=args.get("hasVariants"),
        )
        return {"components": _dump(components), "count": len(components), "filters": args}

    async def _get_component_details(self, args: dict[str, Any]) -> dict[str, Any]:
        component = await self.components.get_component(args["name"])
        return component.to_json_dict()

    async def _get_component_examples(self, args: dict[str, Any]) -> dict[str, Any]:
        examples = await self.components.get_component_examples(args["name"])
        return {"component": args["name"], "examples": _dump(examples), "count": len(examples)}

    async def _search_components(self, args: dict[str, Any]) -> dict[str, Any]:
        components = await self.components.search_components(args["query"])
        return {"components": _dump(components), "count": len(components), "query": args["query"]}

    async def _get_guidelines(self, args: dict[str, Any]) -> dict[str, Any]:
        guidelines = await self.guidelines.get_guidelines(
            category=args.get("category"),
            tags=args.get("tags"),
            related_component=args.get("relatedComponent"),
            related_token=args.get("relatedToken"),
        )
        return {"guidelines": _dump(guidelines), "count": len(guidelines), "filters": args}

    async def _get_guideline_details(self, args: dict[str, Any]) -> dict[str, Any]:
        guideline = await self.guidelines.get_guideline(args["id"])
        return guideline.to_json_dict()

    async def _search_guidelines(self, args: dict[str, Any]) -> dict[str, Any]:
        guidelines = await self.guidelines.search_guidelines(args["query"])
        return {"guidelines": _dump(guidelines), "count": len(guidelines), "query": args["query"]}
