"""MCP server implementation.

This module creates the MCP server, advertises the tool registry, and
dispatches tool calls to the mcpollinations services.

Dispatch rules:
- Unknown tool names are a protocol error (method not found)
- Service failures become tool results with isError set
- Audio playback runs in the background and never fails a call
"""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from mcp_server.errors import error_result, tool_not_found
from mcp_server.schemas import get_tools
from mcpollinations import __version__
from mcpollinations.audio import AudioPlayer, list_audio_voices, respond_audio
from mcpollinations.config import Settings, get_settings
from mcpollinations.image import generate_image, generate_image_url, list_image_models
from mcpollinations.log import configure_logging
from mcpollinations.text import list_text_models, respond_text
from mcpollinations.types import ToolName

logger = logging.getLogger(__name__)

SERVER_NAME = "mcpollinations"

Content = types.TextContent | types.ImageContent
Handler = Callable[[dict[str, Any]], Awaitable[list[Content]]]


def _arg(arguments: dict[str, Any], key: str, default: Any = None) -> Any:
    """Return an argument, falling back to the default when absent or null."""
    value = arguments.get(key)
    return default if value is None else value


def _dumps(value: Any) -> str:
    # Non-ASCII prompts stay readable
    return json.dumps(value, indent=2, ensure_ascii=False)


def _text(text: str) -> types.TextContent:
    return types.TextContent(type="text", text=text)


def _json_text(value: Any) -> types.TextContent:
    return _text(_dumps(value))


class ToolDispatcher:
    """Maps tool calls to service functions.

    Attributes:
        settings: Settings providing defaults and upstream endpoints.
        audio_player: Player used for respondAudio.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        audio_player: AudioPlayer | None = None,
    ) -> None:
        self.settings = settings if settings is not None else get_settings()
        self.audio_player = (
            audio_player
            if audio_player is not None
            else AudioPlayer(command=self.settings.audio_player)
        )
        # name -> (handler, action used in error messages)
        self._handlers: dict[str, tuple[Handler, str]] = {
            ToolName.GENERATE_IMAGE_URL.value: (
                self._generate_image_url,
                "generating image URL",
            ),
            ToolName.GENERATE_IMAGE.value: (self._generate_image, "generating image"),
            ToolName.LIST_IMAGE_MODELS.value: (
                self._list_image_models,
                "listing image models",
            ),
            ToolName.RESPOND_AUDIO.value: (self._respond_audio, "generating audio"),
            ToolName.LIST_AUDIO_VOICES.value: (
                self._list_audio_voices,
                "listing audio voices",
            ),
            ToolName.RESPOND_TEXT.value: (
                self._respond_text,
                "generating text response",
            ),
            ToolName.LIST_TEXT_MODELS.value: (
                self._list_text_models,
                "listing text models",
            ),
        }

    async def dispatch(
        self, name: str, arguments: dict[str, Any] | None = None
    ) -> types.CallToolResult:
        """Run a tool call.

        Args:
            name: Tool name.
            arguments: Tool arguments.

        Returns:
            CallToolResult with the tool's content, or an error result.

        Raises:
            McpError: If no tool has the given name.
        """
        entry = self._handlers.get(name)
        if entry is None:
            raise tool_not_found(name)
        handler, action = entry

        try:
            content = await handler(arguments or {})
        except Exception as e:
            logger.error("Tool %s failed: %s", name, e)
            return error_result(f"Error {action}: {e}")

        return types.CallToolResult(content=content)

    async def _generate_image_url(self, args: dict[str, Any]) -> list[Content]:
        s = self.settings
        result = generate_image_url(
            args.get("prompt"),
            model=_arg(args, "model", s.image_model),
            seed=_arg(args, "seed"),
            width=_arg(args, "width", s.image_width),
            height=_arg(args, "height", s.image_height),
            enhance=_arg(args, "enhance", s.image_enhance),
            safe=_arg(args, "safe", s.image_safe),
            settings=s,
        )
        return [_json_text(result.to_dict())]

    async def _generate_image(self, args: dict[str, Any]) -> list[Content]:
        s = self.settings
        prompt = args.get("prompt")
        result = await generate_image(
            prompt,
            model=_arg(args, "model", s.image_model),
            seed=_arg(args, "seed"),
            width=_arg(args, "width", s.image_width),
            height=_arg(args, "height", s.image_height),
            enhance=_arg(args, "enhance", s.image_enhance),
            safe=_arg(args, "safe", s.image_safe),
            output_path=_arg(args, "outputPath", s.output_dir),
            file_name=_arg(args, "fileName", ""),
            image_format=_arg(args, "format", s.image_format),
            settings=s,
        )

        text = (
            f'Generated image from prompt: "{prompt}"\n\n'
            f"Image metadata: {_dumps(result.metadata)}"
        )
        if result.file_path:
            text += f"\n\nImage saved to: {result.file_path}"

        return [
            types.ImageContent(type="image", data=result.data, mimeType=result.mime_type),
            _text(text),
        ]

    async def _list_image_models(self, args: dict[str, Any]) -> list[Content]:
        return [_json_text(await list_image_models(settings=self.settings))]

    async def _respond_audio(self, args: dict[str, Any]) -> list[Content]:
        result = await respond_audio(
            args.get("prompt"),
            voice=_arg(args, "voice", self.settings.audio_voice),
            seed=_arg(args, "seed"),
            voice_instructions=_arg(args, "voiceInstructions"),
            settings=self.settings,
        )

        self.audio_player.play_in_background(base64.b64decode(result.data))

        return [
            _text(
                "Audio has been played.\n\n"
                f"Audio metadata: {_dumps(result.metadata)}"
            )
        ]

    async def _list_audio_voices(self, args: dict[str, Any]) -> list[Content]:
        return [_json_text(list_audio_voices())]

    async def _respond_text(self, args: dict[str, Any]) -> list[Content]:
        text = await respond_text(
            args.get("prompt"),
            model=_arg(args, "model", self.settings.text_model),
            seed=_arg(args, "seed"),
            settings=self.settings,
        )
        return [_text(text)]

    async def _list_text_models(self, args: dict[str, Any]) -> list[Content]:
        return [_json_text(await list_text_models(settings=self.settings))]


def create_server(dispatcher: ToolDispatcher | None = None) -> Server:
    """Create the MCP server with the tool registry and dispatcher installed.

    Args:
        dispatcher: Dispatcher for tool calls; created from settings if None.

    Returns:
        Configured low-level MCP server.
    """
    if dispatcher is None:
        dispatcher = ToolDispatcher()

    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return get_tools()

    async def call_tool(req: types.CallToolRequest) -> types.ServerResult:
        result = await dispatcher.dispatch(req.params.name, req.params.arguments)
        return types.ServerResult(result)

    # Installed directly so an unknown tool reaches the client as a
    # protocol error rather than as tool content.
    server.request_handlers[types.CallToolRequest] = call_tool

    return server


async def run_stdio(server: Server) -> None:
    """Serve MCP requests over stdin/stdout until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info("MCPollinations MCP server running on stdio")
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main(settings: Settings | None = None) -> None:
    """Run the stdio server.

    Exits with status 0 on interrupt and 1 if the server fails.
    """
    if settings is None:
        settings = get_settings()
    configure_logging(settings.log_level)

    try:
        server = create_server(ToolDispatcher(settings))
        asyncio.run(run_stdio(server))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except Exception:
        logger.exception("MCP server failed")
        sys.exit(1)


__all__ = [
    "SERVER_NAME",
    "ToolDispatcher",
    "create_server",
    "main",
    "run_stdio",
]
