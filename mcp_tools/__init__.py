# =============================================================================
# mcp_tools/__init__.py
# =============================================================================
# This package exposes the billing layer as MCP tools.
#
#   mcp_tools/registry.py     → tool names, descriptions, parameters
#   mcp_tools/arguments.py    → Param declarations + strict extraction
#   mcp_tools/handlers.py     → one async function per tool
#   mcp_tools/dispatcher.py   → name → handler, uniform ToolFailure
#   mcp_tools/mcp_server.py   → FastMCP binding, stderr logging
#   mcp_tools/smoke_client.py → spawns the server and checks it end to end
#
# Business rules (how a company is found, how a value string is read) stay
# in billing/; this package only translates between MCP and that layer.
# =============================================================================
