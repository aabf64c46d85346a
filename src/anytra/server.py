"""
Line-delimited JSON-RPC server over stdio.

One request line is read, dispatched and answered before the next line is
read, so responses leave in the order their requests arrived. Protocol
problems (malformed envelope, unknown method or tool, malformed arguments)
become JSON-RPC errors; failures of the enhancement itself are reported inside
a normal result with ``isError: true``.
"""

import asyncio
import logging
import sys
from typing import Any, Awaitable, Callable, Dict, Optional, TextIO

from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    Implementation,
)
from pydantic import ValidationError

from anytra import __version__
from anytra.config import (
    DEFAULT_SHUTDOWN_TIMEOUT,
    MAX_LINE_BYTES,
    PROTOCOL_VERSION,
    SERVER_NAME,
    TOOL_NAME,
)
from anytra.exceptions import AnytraError
from anytra.handlers.enhance_prompt import EnhancePrompt
from anytra.models.rpc_models import JsonRpcRequest, JsonRpcResponse, ToolCallParams
from anytra.tools.mcp_tools import (
    list_tools,
    parse_enhance_arguments,
    tool_error,
    tool_result,
)

logger = logging.getLogger(__name__)

MethodHandler = Callable[[JsonRpcRequest], Awaitable[JsonRpcResponse]]


class MCPServer:
    """Routes JSON-RPC requests to the enhancement use case."""

    def __init__(
        self,
        usecase: EnhancePrompt,
        shutdown_timeout: float = DEFAULT_SHUTDOWN_TIMEOUT,
    ):
        """
        Args:
            usecase: Orchestrator invoked by ``tools/call``
            shutdown_timeout: Seconds an in-flight request may keep running
                once a stop signal arrives
        """
        self.usecase = usecase
        self.shutdown_timeout = shutdown_timeout
        self._methods: Dict[str, MethodHandler] = {
            "initialize": self._initialize,
            "mcp/initialize": self._initialize,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "ping": self._ping,
            "shutdown": self._shutdown,
        }

    # =========================================================================
    # Dispatch
    # =========================================================================

    async def handle_line(self, line: str) -> Optional[JsonRpcResponse]:
        """Parse and answer one input line. Blank lines produce no response."""
        if not line.strip():
            return None

        logger.debug(f"stdin line: {line.rstrip()}")
        try:
            request = JsonRpcRequest.model_validate_json(line)
        except ValidationError as e:
            logger.warning(f"Unparseable request line: {e.error_count()} error(s)")
            return JsonRpcResponse.failure(None, PARSE_ERROR, f"parse error: {e}")

        return await self.handle_request(request)

    async def handle_request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        handler = self._methods.get(request.method)
        if handler is None:
            return JsonRpcResponse.failure(
                request.id, METHOD_NOT_FOUND, f"unknown method: {request.method}"
            )

        try:
            return await handler(request)
        except Exception as e:
            logger.exception(f"Unhandled error while processing '{request.method}'")
            return JsonRpcResponse.failure(
                request.id, INTERNAL_ERROR, f"internal error: {e}"
            )

    async def _initialize(self, request: JsonRpcRequest) -> JsonRpcResponse:
        server_info = Implementation(name=SERVER_NAME, version=__version__)
        return JsonRpcResponse.success(
            request.id,
            {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {"list": True, "call": True}},
                "serverInfo": server_info.model_dump(exclude_none=True),
            },
        )

    async def _tools_list(self, request: JsonRpcRequest) -> JsonRpcResponse:
        return JsonRpcResponse.success(request.id, list_tools())

    async def _tools_call(self, request: JsonRpcRequest) -> JsonRpcResponse:
        try:
            params = ToolCallParams.model_validate(request.params)
        except ValidationError as e:
            return JsonRpcResponse.failure(
                request.id, INVALID_PARAMS, f"invalid params: {e}"
            )

        if params.name != TOOL_NAME:
            return JsonRpcResponse.failure(
                request.id, METHOD_NOT_FOUND, f"unknown tool: {params.name}"
            )

        try:
            prompt, options = parse_enhance_arguments(params.arguments)
        except ValidationError as e:
            return JsonRpcResponse.failure(
                request.id, INVALID_PARAMS, f"invalid arguments: {e}"
            )

        try:
            enhanced = await self.usecase.execute(prompt, options)
        except AnytraError as e:
            logger.error(
                f"{TOOL_NAME} failed: {e}", extra={"error_type": e.error_type.value}
            )
            return JsonRpcResponse.success(request.id, tool_error(e))

        logger.info(
            f"{TOOL_NAME} succeeded (confidence={enhanced.confidence}, "
            f"length={len(enhanced.text)})"
        )
        return JsonRpcResponse.success(request.id, tool_result(enhanced.text))

    async def _ping(self, request: JsonRpcRequest) -> JsonRpcResponse:
        return JsonRpcResponse.success(request.id, {"message": "pong"})

    async def _shutdown(self, request: JsonRpcRequest) -> JsonRpcResponse:
        # Acknowledgement only; the loop ends on EOF or a stop signal.
        return JsonRpcResponse.success(request.id, {"ok": True})

    # =========================================================================
    # Serve loop
    # =========================================================================

    async def serve(
        self,
        reader: asyncio.StreamReader,
        writer: TextIO,
        stop_event: Optional[asyncio.Event] = None,
    ) -> None:
        """
        Answer requests from ``reader`` on ``writer`` until EOF, a read error
        or ``stop_event`` is set.
        """
        stop_event = stop_event or asyncio.Event()
        logger.info("MCP stdio server ready")

        while not stop_event.is_set():
            try:
                raw = await self._read_line(reader, stop_event)
            except (OSError, ValueError) as e:
                logger.error(f"error reading stdin: {e}")
                break

            if not raw:
                break

            response = await self._run_request(
                raw.decode("utf-8", errors="replace"), stop_event
            )
            if response is not None:
                writer.write(response.to_line() + "\n")
                writer.flush()

        logger.info("MCP stdio server stopped")

    async def _read_line(
        self, reader: asyncio.StreamReader, stop_event: asyncio.Event
    ) -> Optional[bytes]:
        """Next raw line, or None on EOF or stop."""
        read = asyncio.ensure_future(reader.readline())
        stopped = asyncio.ensure_future(stop_event.wait())
        try:
            await asyncio.wait({read, stopped}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            read.cancel()
            raise
        finally:
            stopped.cancel()

        if read.done():
            return read.result() or None

        read.cancel()
        return None

    async def _run_request(
        self, line: str, stop_event: asyncio.Event
    ) -> Optional[JsonRpcResponse]:
        """
        Handle one line. If a stop signal arrives meanwhile, the request gets
        ``shutdown_timeout`` seconds to finish before it is cancelled.
        """
        task = asyncio.ensure_future(self.handle_line(line))
        stopped = asyncio.ensure_future(stop_event.wait())
        try:
            await asyncio.wait({task, stopped}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            stopped.cancel()

        if task.done():
            return task.result()

        logger.info(
            f"Stop requested; waiting up to {self.shutdown_timeout}s "
            f"for the in-flight request"
        )
        try:
            return await asyncio.wait_for(task, timeout=self.shutdown_timeout)
        except asyncio.TimeoutError:
            logger.warning("In-flight request cancelled after shutdown timeout")
            return None


async def open_stdin_reader(
    stream: Any = None, limit: int = MAX_LINE_BYTES
) -> asyncio.StreamReader:
    """Wrap a readable pipe (stdin by default) in an asyncio StreamReader."""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader(limit=limit)
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, stream or sys.stdin)
    return reader


async def run_stdio_server(
    usecase: EnhancePrompt,
    shutdown_timeout: float = DEFAULT_SHUTDOWN_TIMEOUT,
    stop_event: Optional[asyncio.Event] = None,
) -> None:
    server = MCPServer(usecase, shutdown_timeout)
    reader = await open_stdin_reader()
    await server.serve(reader, sys.stdout, stop_event)
