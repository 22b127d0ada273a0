"""Run the MCP server with ``python -m mcp_server``."""

from mcp_server.server import main

main()
