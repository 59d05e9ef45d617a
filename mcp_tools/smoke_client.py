# =============================================================================
# mcp_tools/smoke_client.py  —  End-to-End Check of the Running Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python -m mcp_tools.smoke_client
#
# WHAT HAPPENS:
#   1. Spawns main.py as a subprocess and connects over stdio
#   2. Lists the tools and prints each one
#   3. With a real SCHEMATIC_API_KEY set, calls list_plans
#   4. Checks every tool has a name, a description and an input schema
#
#   Without a key the server is started with "test-key", so steps 1, 2
#   and 4 still run; only the live API call is skipped.
# =============================================================================

import asyncio
import os
import sys
from pathlib import Path
from typing import Any

from fastmcp import Client
from fastmcp.client.transports import PythonStdioTransport

from billing.config import API_KEY_ENV_VAR

PLACEHOLDER_KEY = "test-key"
SERVER_SCRIPT = Path(__file__).resolve().parent.parent / "main.py"


def validate_tool_schemas(tools: list[Any]) -> tuple[list[str], list[str]]:
    """Check listed tools.  Returns (errors, warnings) as printable lines."""
    errors: list[str] = []
    warnings: list[str] = []
    for tool in tools:
        if not tool.name:
            errors.append("Tool missing name")
        if not tool.description:
            warnings.append(f"Tool {tool.name} missing description")
        if not tool.inputSchema:
            errors.append(f"Tool {tool.name} missing inputSchema")
    return errors, warnings


async def run_smoke_test() -> int:
    print("🧪 Testing Schematic MCP Server\n")

    api_key = os.environ.get(API_KEY_ENV_VAR) or PLACEHOLDER_KEY
    transport = PythonStdioTransport(
        script_path=SERVER_SCRIPT,
        env={**os.environ, API_KEY_ENV_VAR: api_key},
        cwd=str(SERVER_SCRIPT.parent),
    )

    async with Client(transport) as client:
        print("✅ Connected to MCP server\n")

        print("Test 1: Listing tools...")
        tools = await client.list_tools()
        print(f"✅ Found {len(tools)} tools:")
        for tool in tools:
            print(f"   - {tool.name}: {(tool.description or '')[:60]}...")
        print()

        if api_key != PLACEHOLDER_KEY:
            print("Test 2: Calling list_plans tool...")
            result = await client.call_tool("list_plans", {}, raise_on_error=False)
            if result.is_error:
                print(f"⚠️  Tool call failed (expected if API key is invalid): {result.content[0].text}\n")
            else:
                print("✅ Tool call successful!")
                print(f"Response: {result.content[0].text[:200]}...\n")
        else:
            print(f"Test 2: Skipped (no valid {API_KEY_ENV_VAR} set)\n")

        print("Test 3: Validating tool schemas...")
        errors, warnings = validate_tool_schemas(tools)
        for warning in warnings:
            print(f"   ⚠️  {warning}")
        for error in errors:
            print(f"   ❌ {error}")

    if errors:
        print(f"❌ Found {len(errors)} schema errors\n")
        return 1

    print("✅ All tool schemas are valid\n")
    print("✅ Tests completed successfully!")
    return 0


def main() -> None:
    sys.exit(asyncio.run(run_smoke_test()))


if __name__ == "__main__":
    main()
