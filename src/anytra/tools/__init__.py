"""
Tools package for the anytra MCP server.
"""

from .mcp_tools import (
    ENHANCE_PROMPT_SCHEMA,
    ENHANCE_PROMPT_TOOL,
    list_tools,
    parse_enhance_arguments,
    tool_error,
    tool_result,
)

__all__ = [
    "ENHANCE_PROMPT_SCHEMA",
    "ENHANCE_PROMPT_TOOL",
    "list_tools",
    "parse_enhance_arguments",
    "tool_error",
    "tool_result",
]
