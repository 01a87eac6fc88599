"""Mapbox tool definitions module."""

from .definitions import (
    ToolDefinition,
    get_tool_definition,
    get_tool_definitions,
    get_tool_definitions_for_api,
)

__all__ = [
    "ToolDefinition",
    "get_tool_definition",
    "get_tool_definitions",
    "get_tool_definitions_for_api",
]
