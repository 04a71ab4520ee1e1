"""
Tool Layer

Tool definitions (name, description, JSON input schema) and the dispatcher
that routes a tool call to the query facades.
"""

from design_system.application.tools.definitions import TOOL_DEFINITIONS, TOOLS_BY_NAME, ToolDefinition
from design_system.application.tools.dispatcher import ToolDispatcher, validate_arguments

__all__ = [
    "TOOL_DEFINITIONS",
    "TOOLS_BY_NAME",
    "ToolDefinition",
    "ToolDispatcher",
    "validate_arguments",
]
