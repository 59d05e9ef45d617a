# =============================================================================
# billing/__init__.py
# =============================================================================
# This package contains everything that talks to the Schematic billing API
# and turns its records into something the tools can reason about.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or knows about MCP.  The tools
#   layer (mcp_tools/) depends on billing/, never the other way round.
#
#   billing/config.py      → API key and connection settings
#   billing/client.py      → async REST client (httpx)
#   billing/models.py      → Company, Plan, Feature, ... dataclasses
#   billing/values.py      → boolean / numeric / unlimited entitlement values
#   billing/pagination.py  → fetch every page of a list endpoint
#   billing/resolvers.py   → company / plan / feature lookup rules
#   billing/formatting.py  → text helpers shared by the tool handlers
#   billing/errors.py      → the error taxonomy surfaced to callers
# =============================================================================
