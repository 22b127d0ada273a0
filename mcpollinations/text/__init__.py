"""Text generation module."""

from mcpollinations.text.service import list_text_models, respond_text

__all__ = ["list_text_models", "respond_text"]
