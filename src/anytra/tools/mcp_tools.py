"""
MCP tool definition for prompt enhancement.

Holds the ``enhance_prompt`` descriptor advertised by ``tools/list``, the
argument parsing used by ``tools/call`` and the content envelopes returned to
the caller.
"""

from typing import Any, Dict, Tuple

from mcp.types import CallToolResult, TextContent, Tool

from anytra.config import TOOL_NAME
from anytra.models.core_models import EnhancementOptions, Prompt
from anytra.models.rpc_models import EnhanceArgs

ENHANCE_PROMPT_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["prompt"],
    "properties": {
        "prompt": {"type": "string", "description": "The raw prompt to enhance"},
        "goal": {"type": ["string", "null"], "description": "Desired outcome"},
        "style": {
            "type": ["string", "null"],
            "description": "Writing style (concise, formal, etc.)",
        },
        "tone": {
            "type": ["string", "null"],
            "description": "Tone (neutral, persuasive, etc.)",
        },
        "level": {
            "type": ["integer", "null"],
            "minimum": 1,
            "maximum": 5,
            "description": "Enhancement strength 1-5",
        },
        "audience": {"type": ["string", "null"], "description": "Target audience"},
        "language": {
            "type": ["string", "null"],
            "description": "Output language, e.g., en, id",
        },
        "enable_sequential_thinking": {
            "type": ["boolean", "null"],
            "description": "Run iterative refinement; defaults to the server setting",
        },
        "thought_count": {
            "type": ["integer", "null"],
            "minimum": 1,
            "description": "Number of refinement steps (default 3)",
        },
    },
}

ENHANCE_PROMPT_TOOL = Tool(
    name=TOOL_NAME,
    description="Enhance a user prompt for clarity, constraints, and specificity",
    inputSchema=ENHANCE_PROMPT_SCHEMA,
)


def list_tools() -> Dict[str, Any]:
    """Result payload of ``tools/list``."""
    return {
        "tools": [ENHANCE_PROMPT_TOOL.model_dump(by_alias=True, exclude_none=True)]
    }


def parse_enhance_arguments(arguments: Any) -> Tuple[Prompt, EnhancementOptions]:
    """
    Build the request-scoped prompt and options from tool arguments.

    Raises:
        pydantic.ValidationError: If the arguments do not match the schema
    """
    args = EnhanceArgs.model_validate(arguments)
    return args.to_prompt(), args.to_options()


def tool_result(text: str, is_error: bool = False) -> Dict[str, Any]:
    """
    Content envelope of a ``tools/call`` result.

    ``isError`` is only present on failures.
    """
    result = CallToolResult(
        content=[TextContent(type="text", text=text)], isError=is_error
    )
    return result.model_dump(
        by_alias=True,
        exclude_none=True,
        exclude=None if is_error else {"isError"},
    )


def tool_error(error: Exception) -> Dict[str, Any]:
    return tool_result(f"tool error: {error}", is_error=True)
