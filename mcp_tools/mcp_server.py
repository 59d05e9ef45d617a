# =============================================================================
# mcp_tools/mcp_server.py  —  FastMCP Server (every tool in the catalog)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Puts the ToolDispatcher behind a FastMCP server.  Every ToolSpec in
#   mcp_tools/registry.py becomes one MCP tool whose input schema is the
#   ToolSpec's generated schema, and whose body is a dispatcher call.
#
# HOW A CALL FLOWS:
#   1. The assistant calls a tool by name (e.g. "get_company")
#   2. FastMCP routes the call to that tool's BillingTool.run()
#   3. run() logs the request and hands the raw arguments to the dispatcher
#   4. The dispatcher validates, resolves, calls Schematic, formats text
#   5. Text comes back as one TextContent item, or a ToolFailure becomes a
#      ToolError, which FastMCP returns as an error result with the message
#
# RUNNING THIS SERVER:
#   python main.py      (stdio transport; see main.py)
# =============================================================================

import json
import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent
from pydantic import PrivateAttr

from mcp_tools.dispatcher import ToolDispatcher, ToolFailure
from mcp_tools.registry import ToolSpec

SERVER_NAME = "schematic-mcp-server"
STARTUP_BANNER = "Schematic MCP server running on stdio"

# =============================================================================
# Logging Setup
# =============================================================================
# STDOUT carries the MCP JSON-RPC stream, so every log line goes to STDERR.
#
#   CYAN   → incoming requests (tool name + arguments)
#   GREEN  → responses
#   YELLOW → status / failures
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logger = logging.getLogger("schematic_mcp")


def configure_logging() -> None:
    """Send log lines to stderr; LOG_LEVEL picks the level (default INFO)."""
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _log_request(tool_name: str, arguments: dict[str, Any]) -> None:
    param_str = ", ".join(f"{k}={v!r}" for k, v in arguments.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, text: str) -> str:
    logger.info(f"{_GREEN}  ← {tool_name} response: {json.dumps(text)}{_RESET}")
    return text


# =============================================================================
# BillingTool — one MCP tool backed by the dispatcher
# =============================================================================
class BillingTool(Tool):
    """An MCP tool whose schema comes from a ToolSpec and whose body is a dispatch."""

    _dispatcher: ToolDispatcher = PrivateAttr()

    @classmethod
    def from_spec(cls, spec: ToolSpec, dispatcher: ToolDispatcher) -> "BillingTool":
        tool = cls(
            name=spec.name,
            description=spec.description,
            parameters=spec.input_schema(),
        )
        tool._dispatcher = dispatcher
        return tool

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        _log_request(self.name, arguments or {})
        try:
            text = await self._dispatcher.dispatch(self.name, arguments)
        except ToolFailure as failure:
            _log_status(f"{self.name} failed ({failure.kind}): {failure.message}")
            raise ToolError(failure.message) from failure
        _log_response(self.name, text)
        return ToolResult(content=[TextContent(type="text", text=text)])


# =============================================================================
# Server factory
# =============================================================================
def create_server(dispatcher: ToolDispatcher) -> FastMCP:
    """Build the FastMCP server exposing every tool the dispatcher knows.

    The dispatcher's SchematicClient is closed when the server shuts down.
    """

    @asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[None]:
        logger.info(STARTUP_BANNER)
        try:
            yield
        finally:
            await dispatcher.client.aclose()

    mcp = FastMCP(SERVER_NAME, lifespan=lifespan)
    for spec in dispatcher.list_tools():
        mcp.add_tool(BillingTool.from_spec(spec, dispatcher))
    return mcp
