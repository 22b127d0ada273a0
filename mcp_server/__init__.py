"""MCP server exposing MCPollinations tools.

This module implements the Model Context Protocol (MCP) server that
exposes the Pollinations image, text and audio services to MCP clients.

MCP tools:
- Are advertised from a fixed, ordered registry
- Map directly to the mcpollinations services
- Report failures as error results, never by crashing the server
"""

from mcp_server.server import ToolDispatcher, create_server, main

__all__ = ["ToolDispatcher", "create_server", "main"]
