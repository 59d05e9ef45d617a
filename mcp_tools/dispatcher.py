# =============================================================================
# mcp_tools/dispatcher.py  —  Route a Tool Call to Its Handler
# =============================================================================
#
# THE FLOW OF ONE CALL:
#   1. Look the tool up in the catalog            → UnknownTool if missing
#   2. Extract its declared arguments strictly    → InvalidArgument on bad input
#   3. Run the handler with the shared client     → text
#   4. Any failure in 2-3 becomes ONE ToolFailure carrying the original
#      message.  A ToolFailure raised inside passes through untouched.
#
# The dispatcher is transport-agnostic: mcp_tools/mcp_server.py adapts it
# to FastMCP, the tests drive it directly.
# =============================================================================

import logging
from typing import Any

from billing.client import SchematicClient
from billing.errors import BillingError, UnknownTool
from mcp_tools.arguments import extract_arguments
from mcp_tools.handlers import HANDLERS, Handler
from mcp_tools.registry import TOOLS, ToolSpec

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "internal_error"


class ToolFailure(Exception):
    """The single error shape every failed tool call surfaces as.

    `kind` is the taxonomy tag of the original error (invalid_argument,
    not_found, ...); the message is the original message, unmodified.
    """

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @classmethod
    def from_exception(cls, error: Exception) -> "ToolFailure":
        if isinstance(error, BillingError):
            return cls(error.kind, error.message)
        return cls(INTERNAL_ERROR, str(error) or "An error occurred")


class ToolDispatcher:
    """Holds the catalog, the handlers and the one SchematicClient they share."""

    def __init__(
        self,
        client: SchematicClient,
        tools: tuple[ToolSpec, ...] = TOOLS,
        handlers: dict[str, Handler] | None = None,
    ):
        self.client = client
        self._tools = {tool.name: tool for tool in tools}
        self._handlers = HANDLERS if handlers is None else handlers

    def list_tools(self) -> list[ToolSpec]:
        return [tool for name, tool in self._tools.items() if name in self._handlers]

    async def dispatch(self, name: str, arguments: dict[str, Any] | None = None) -> str:
        """Run the named tool and return its text.

        Raises:
            ToolFailure: For every failure, whatever its cause.
        """
        try:
            tool = self._tools.get(name)
            handler = self._handlers.get(name)
            if tool is None or handler is None:
                raise UnknownTool(f"Unknown tool: {name}")

            args = extract_arguments(tool.params, arguments)
            return await handler(args, self.client)
        except ToolFailure:
            raise
        except Exception as e:
            failure = ToolFailure.from_exception(e)
            if failure.kind == INTERNAL_ERROR:
                logger.exception("Unexpected error in tool %s", name)
            raise failure from e
