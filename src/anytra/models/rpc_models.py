"""
JSON-RPC 2.0 envelope models for the line-delimited stdio transport.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field

from anytra.models.core_models import EnhancementOptions, Prompt

JSONRPC_VERSION = "2.0"


class JsonRpcRequest(BaseModel):
    """Incoming request line. ``id`` is opaque and echoed back."""

    jsonrpc: str = JSONRPC_VERSION
    id: Optional[Any] = None
    method: str
    params: Any = Field(default_factory=dict)


class JsonRpcError(BaseModel):
    code: int
    message: str
    data: Optional[Any] = None


class JsonRpcResponse(BaseModel):
    """Outgoing response line; absent members are omitted on the wire."""

    jsonrpc: str = JSONRPC_VERSION
    id: Optional[Any] = None
    result: Optional[Dict[str, Any]] = None
    error: Optional[JsonRpcError] = None

    @classmethod
    def success(cls, request_id: Any, result: Dict[str, Any]) -> "JsonRpcResponse":
        return cls(id=request_id, result=result)

    @classmethod
    def failure(
        cls, request_id: Any, code: int, message: str, data: Any = None
    ) -> "JsonRpcResponse":
        return cls(id=request_id, error=JsonRpcError(code=code, message=message, data=data))

    def to_line(self) -> str:
        """Serialize as a single JSON line without the trailing newline."""
        return self.model_dump_json(exclude_none=True)


class ToolCallParams(BaseModel):
    """``params`` of a ``tools/call`` request."""

    model_config = ConfigDict(strict=True)

    name: str
    # Shape is checked by the tool itself, after the name is resolved.
    arguments: Any = Field(default_factory=dict)


class EnhanceArgs(BaseModel):
    """Arguments of the ``enhance_prompt`` tool."""

    model_config = ConfigDict(strict=True)

    prompt: str
    goal: Optional[str] = None
    style: Optional[str] = None
    tone: Optional[str] = None
    level: Optional[int] = Field(None, ge=1, le=5)
    audience: Optional[str] = None
    language: Optional[str] = None
    enable_sequential_thinking: Optional[bool] = None
    thought_count: Optional[int] = Field(None, ge=1)

    def to_prompt(self) -> Prompt:
        return Prompt(text=self.prompt)

    def to_options(self) -> EnhancementOptions:
        return EnhancementOptions(**self.model_dump(exclude={"prompt"}))
