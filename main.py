# =============================================================================
# main.py  —  Entry Point for the Schematic MCP Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py          (or the installed `schematic-mcp` script)
#
# WHAT HAPPENS:
#   1. Loads .env into the environment (never overriding what is set)
#   2. Resolves settings: SCHEMATIC_API_KEY, or ~/.schematic-mcp/config.json
#   3. Builds ONE SchematicClient and hands it to the ToolDispatcher
#   4. Wraps the dispatcher in a FastMCP server and serves it over stdio
#
#   A missing API key is reported on stderr and the process exits with
#   status 1 before any tool is served.
#
# CONNECTING AN MCP CLIENT (e.g. a desktop assistant's config):
#   {"command": "uv", "args": ["run", "python", "/path/to/main.py"],
#    "env": {"SCHEMATIC_API_KEY": "sk_..."}}
# =============================================================================

import logging
import sys

from dotenv import load_dotenv

from billing.client import SchematicClient
from billing.config import load_settings
from billing.errors import ConfigurationMissing
from mcp_tools.dispatcher import ToolDispatcher
from mcp_tools.mcp_server import configure_logging, create_server

logger = logging.getLogger("schematic_mcp")


def main() -> None:
    load_dotenv()
    configure_logging()

    try:
        settings = load_settings()
    except ConfigurationMissing as e:
        logger.error("Fatal error: %s", e)
        sys.exit(1)

    client = SchematicClient.from_settings(settings)
    dispatcher = ToolDispatcher(client)
    server = create_server(dispatcher)

    server.run(transport="stdio")


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    main()
