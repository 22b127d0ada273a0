"""MCPollinations - Pollinations generative media as MCP tools.

This package provides thin clients for the Pollinations image, text and
audio APIs, plus helpers for saving generated media and generating MCP
launch configuration files.
"""

__version__ = "1.0.8"
__all__ = ["__version__"]
