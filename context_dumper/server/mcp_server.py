"""FastMCP server exposing the codebase dump as a tool."""

from typing import Annotated, Any, Dict, Literal, Optional

import structlog
from mcp import types
from mcp.server.fastmcp import FastMCP
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData
from pydantic import Field

from context_dumper import __version__
from context_dumper.config.settings import DumperConfig
from context_dumper.core.service import ContextDumpService
from context_dumper.exceptions import ContextDumperError, InvalidRequestError

log = structlog.get_logger(__name__)

SERVER_NAME = "codebase-context-dumper"
TOOL_NAME = "dump_codebase_context"
TOOL_DESCRIPTION = (
    "Recursively reads text files from a specified directory, respecting .gitignore rules "
    "and skipping binary files. Concatenates content with file path headers/footers. "
    "Supports chunking the output for large codebases."
)

Transport = Literal["stdio", "sse", "streamable-http"]


def dump_codebase_context(
    service: ContextDumpService,
    base_path: Optional[str],
    num_chunks: int = 1,
    chunk_index: int = 1,
) -> str:
    """Run one dump request and translate failures into MCP errors.

    Returns:
        The concatenated file blocks of the requested chunk
    """
    try:
        result = service.dump(base_path, num_chunks=num_chunks, chunk_index=chunk_index)
    except InvalidRequestError as e:
        log.warning("tool_request_rejected", tool=TOOL_NAME, error=str(e))
        raise McpError(ErrorData(code=INVALID_PARAMS, message=str(e))) from e
    except ContextDumperError as e:
        raise McpError(ErrorData(code=INTERNAL_ERROR, message=str(e))) from e
    except Exception as e:
        log.error("tool_unexpected_error", tool=TOOL_NAME, error=str(e), exc_info=True)
        raise McpError(
            ErrorData(code=INTERNAL_ERROR, message=f"Failed to get codebase context: {e}")
        ) from e

    log.info("tool_summary", tool=TOOL_NAME, summary=result.summary())
    return result.text


def _int_argument(arguments: Dict[str, Any], name: str) -> Any:
    # absent or null counts fall back to 1; anything else is checked by the service.
    value = arguments.get(name)
    return 1 if value is None else value


def create_mcp_server(config: Optional[DumperConfig] = None) -> FastMCP:
    """Create the MCP server with its single dump tool.

    The tool is registered with FastMCP so it is listed with its input schema,
    but calls are answered by a raw ``tools/call`` handler: FastMCP would turn
    an ``McpError`` into an ``isError`` result, and clients need the JSON-RPC
    error code to tell bad parameters from internal failures.

    Args:
        config: Settings shared by every request served by this process

    Returns:
        Configured FastMCP server instance
    """
    mcp = FastMCP(name=SERVER_NAME)
    service = ContextDumpService(config or DumperConfig())

    @mcp.tool(name=TOOL_NAME, description=TOOL_DESCRIPTION, structured_output=False)
    def dump_tool(
        base_path: Annotated[str, Field(description="The absolute path to the project directory to scan.")],
        num_chunks: Annotated[
            int, Field(ge=1, description="Optional total number of chunks to divide the output into (default: 1).")
        ] = 1,
        chunk_index: Annotated[
            int, Field(ge=1, description="Optional 1-based index of the chunk to return (default: 1).")
        ] = 1,
    ) -> str:
        return dump_codebase_context(service, base_path, num_chunks=num_chunks, chunk_index=chunk_index)

    async def handle_call_tool(request: types.CallToolRequest) -> types.ServerResult:
        if request.params.name != TOOL_NAME:
            raise McpError(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {request.params.name}"))
        arguments = request.params.arguments or {}
        text = dump_codebase_context(
            service,
            arguments.get("base_path"),
            num_chunks=_int_argument(arguments, "num_chunks"),
            chunk_index=_int_argument(arguments, "chunk_index"),
        )
        return types.ServerResult(
            types.CallToolResult(content=[types.TextContent(type="text", text=text)], isError=False)
        )

    mcp._mcp_server.request_handlers[types.CallToolRequest] = handle_call_tool
    return mcp


def run_server(config: Optional[DumperConfig] = None, transport: Transport = "stdio") -> None:
    mcp = create_mcp_server(config)
    log.info("mcp_server_starting", name=SERVER_NAME, version=__version__, transport=transport)
    mcp.run(transport=transport)
