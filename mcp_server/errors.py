"""Error definitions for MCP tools.

This module defines helpers turning failures into protocol responses.
Unknown tools are a protocol error; failed tool calls are reported as
tool results with ``isError`` set.
"""

from mcp import types
from mcp.shared.exceptions import McpError


def tool_not_found(name: str) -> McpError:
    """Create the protocol-level error for an unknown tool."""
    return McpError(
        types.ErrorData(
            code=types.METHOD_NOT_FOUND,
            message=f"Unknown tool: {name}",
        )
    )


def error_result(message: str) -> types.CallToolResult:
    """Create a tool result reporting a failed call."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=message)],
        isError=True,
    )


__all__ = ["error_result", "tool_not_found"]
