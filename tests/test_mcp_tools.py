"""Tests for the MCP tool registry and dispatcher.

These tests verify:
- The registry advertises the seven tools in order
- Tool calls map to the right upstream requests and content blocks
- Service failures become error results
- Unknown tools are protocol errors, not error results
"""

import base64
import json
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
import respx
from mcp import types
from mcp.shared.exceptions import McpError

from mcp_server.errors import error_result, tool_not_found
from mcp_server.schemas import TOOL_DESCRIPTORS, get_tool_descriptors, get_tools
from mcp_server.server import ToolDispatcher, create_server, main
from mcpollinations.audio.playback import AudioPlayer
from mcpollinations.config import Settings

IMAGE_BYTES = b"fake-png"
AUDIO_BYTES = b"fake-mp3"

EXPECTED_TOOLS = [
    "generateImageUrl",
    "generateImage",
    "listImageModels",
    "respondAudio",
    "listAudioVoices",
    "respondText",
    "listTextModels",
]


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings with the default upstream and a temporary output directory."""
    return Settings(
        image_base_url="https://image.pollinations.ai",
        text_base_url="https://text.pollinations.ai",
        output_dir=tmp_path / "output",
    )


@pytest.fixture
def audio_player() -> MagicMock:
    """Audio player that never plays anything."""
    return MagicMock(spec=AudioPlayer)


@pytest.fixture
def dispatcher(settings, audio_player) -> ToolDispatcher:
    """Dispatcher wired to the test settings and player."""
    return ToolDispatcher(settings=settings, audio_player=audio_player)


class TestToolRegistry:
    """Tests for the tool descriptors."""

    def test_tool_order(self):
        """All seven tools should be listed in registry order."""
        assert [d.name for d in get_tool_descriptors()] == EXPECTED_TOOLS

    def test_prompt_required_for_generation_tools(self):
        """Generation tools should require a prompt."""
        by_name = {d.name: d for d in TOOL_DESCRIPTORS}
        for name in ("generateImageUrl", "generateImage", "respondAudio", "respondText"):
            schema = by_name[name].input_schema
            assert schema["type"] == "object"
            assert schema["required"] == ["prompt"]
            assert schema["properties"]["prompt"]["type"] == "string"

    def test_list_tools_take_no_arguments(self):
        """Listing tools should have an empty object schema."""
        by_name = {d.name: d for d in TOOL_DESCRIPTORS}
        for name in ("listImageModels", "listAudioVoices", "listTextModels"):
            assert by_name[name].input_schema == {"type": "object", "properties": {}}

    def test_generate_image_has_save_options(self):
        """generateImage should add the file saving options."""
        by_name = {d.name: d for d in TOOL_DESCRIPTORS}
        properties = by_name["generateImage"].input_schema["properties"]
        assert {"outputPath", "fileName", "format"} <= set(properties)
        assert "outputPath" not in by_name["generateImageUrl"].input_schema["properties"]

    def test_respond_audio_has_voice_instructions(self):
        """respondAudio should advertise voiceInstructions."""
        by_name = {d.name: d for d in TOOL_DESCRIPTORS}
        properties = by_name["respondAudio"].input_schema["properties"]
        assert properties["voiceInstructions"]["type"] == "string"

    def test_get_tools_returns_mcp_tools(self):
        """Descriptors should convert to MCP Tool objects."""
        tools = get_tools()
        assert all(isinstance(t, types.Tool) for t in tools)
        assert [t.name for t in tools] == EXPECTED_TOOLS
        assert tools[0].inputSchema["required"] == ["prompt"]


class TestErrors:
    """Tests for MCP error helpers."""

    def test_tool_not_found(self):
        """Unknown tools should map to METHOD_NOT_FOUND."""
        error = tool_not_found("nope")
        assert isinstance(error, McpError)
        assert error.error.code == types.METHOD_NOT_FOUND
        assert error.error.message == "Unknown tool: nope"

    def test_error_result(self):
        """Error results should carry a single text block with isError set."""
        result = error_result("boom")
        assert result.isError is True
        assert result.content[0].type == "text"
        assert result.content[0].text == "boom"


class TestDispatchUnknownTool:
    """Tests for unknown tool names."""

    @pytest.mark.asyncio
    async def test_raises_method_not_found(self, dispatcher):
        """An unknown tool should raise, not return an error result."""
        with pytest.raises(McpError) as exc_info:
            await dispatcher.dispatch("generateVideo", {"prompt": "x"})
        assert exc_info.value.error.code == types.METHOD_NOT_FOUND


class TestGenerateImageUrlTool:
    """Tests for the generateImageUrl tool."""

    @pytest.mark.asyncio
    async def test_defaults(self, dispatcher):
        """Defaults should be applied and the result returned as JSON text."""
        result = await dispatcher.dispatch(
            "generateImageUrl", {"prompt": "A beautiful sunset over the ocean"}
        )

        assert not result.isError
        assert len(result.content) == 1
        data = json.loads(result.content[0].text)
        assert data["imageUrl"].startswith(
            "https://image.pollinations.ai/prompt/A%20beautiful%20sunset%20over%20the%20ocean?model=flux&"
        )
        assert data["imageUrl"].endswith("&nologo=true&private=true&safe=false")
        assert data["model"] == "flux"
        assert data["width"] == 1024
        assert data["height"] == 1024
        assert data["enhance"] is True
        assert data["private"] is True
        assert data["nologo"] is True
        assert data["safe"] is False
        assert isinstance(data["seed"], int)

    @pytest.mark.asyncio
    async def test_explicit_arguments(self, dispatcher):
        """Explicit arguments should override the defaults."""
        result = await dispatcher.dispatch(
            "generateImageUrl",
            {"prompt": "cat", "model": "turbo", "seed": 11, "enhance": False},
        )

        data = json.loads(result.content[0].text)
        assert data["model"] == "turbo"
        assert data["seed"] == 11
        assert "enhance=" not in data["imageUrl"]

    @pytest.mark.asyncio
    async def test_settings_defaults(self, audio_player):
        """Defaults should come from settings."""
        dispatcher = ToolDispatcher(
            settings=Settings(image_model="turbo", image_width=512),
            audio_player=audio_player,
        )

        result = await dispatcher.dispatch("generateImageUrl", {"prompt": "cat"})

        data = json.loads(result.content[0].text)
        assert data["model"] == "turbo"
        assert data["width"] == 512

    @pytest.mark.asyncio
    async def test_missing_prompt(self, dispatcher):
        """A missing prompt should produce an error result."""
        result = await dispatcher.dispatch("generateImageUrl", {})

        assert result.isError is True
        assert result.content[0].text == (
            "Error generating image URL: Prompt is required and must be a string"
        )

    @pytest.mark.asyncio
    async def test_null_arguments(self, dispatcher):
        """Null arguments should be treated as empty."""
        result = await dispatcher.dispatch("generateImageUrl", None)
        assert result.isError is True

    @pytest.mark.asyncio
    async def test_integral_float_arguments(self, dispatcher):
        """JSON numbers like 512.0 should appear as integers in the URL."""
        result = await dispatcher.dispatch(
            "generateImageUrl",
            {"prompt": "cat", "width": 512.0, "height": 512.0, "seed": 42.0},
        )

        url = json.loads(result.content[0].text)["imageUrl"]
        assert "seed=42&" in url
        assert "width=512&" in url
        assert "height=512&" in url

    @pytest.mark.asyncio
    async def test_non_ascii_prompt_is_readable(self, dispatcher):
        """Non-ASCII prompts should not be escaped in the JSON text."""
        result = await dispatcher.dispatch("generateImageUrl", {"prompt": "日本の山"})

        assert '"prompt": "日本の山"' in result.content[0].text
        assert "\\u" not in result.content[0].text


class TestGenerateImageTool:
    """Tests for the generateImage tool."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_image_and_summary(self, dispatcher, settings):
        """Should return an image block followed by a text summary."""
        respx.get(url__startswith="https://image.pollinations.ai/prompt/").mock(
            return_value=httpx.Response(
                200, content=IMAGE_BYTES, headers={"content-type": "image/png"}
            )
        )

        result = await dispatcher.dispatch(
            "generateImage", {"prompt": "red fox", "fileName": "fox"}
        )

        assert not result.isError
        image, text = result.content
        assert image.type == "image"
        assert image.mimeType == "image/png"
        assert base64.b64decode(image.data) == IMAGE_BYTES
        assert text.type == "text"
        assert text.text.startswith('Generated image from prompt: "red fox"')
        assert "Image metadata:" in text.text
        saved = settings.output_dir / "fox.png"
        assert f"Image saved to: {saved}" in text.text
        assert saved.read_bytes() == IMAGE_BYTES

    @pytest.mark.asyncio
    @respx.mock
    async def test_output_path_argument(self, dispatcher, tmp_path):
        """outputPath and format should be honored."""
        respx.get(url__startswith="https://image.pollinations.ai/prompt/").mock(
            return_value=httpx.Response(200, content=IMAGE_BYTES)
        )
        target = tmp_path / "custom"

        await dispatcher.dispatch(
            "generateImage",
            {
                "prompt": "cat",
                "outputPath": str(target),
                "fileName": "cat",
                "format": "webp",
            },
        )

        assert (target / "cat.webp").read_bytes() == IMAGE_BYTES

    @pytest.mark.asyncio
    @respx.mock
    async def test_upstream_failure(self, dispatcher):
        """An upstream failure should produce an error result."""
        respx.get(url__startswith="https://image.pollinations.ai/prompt/").mock(
            return_value=httpx.Response(500)
        )

        result = await dispatcher.dispatch("generateImage", {"prompt": "cat"})

        assert result.isError is True
        assert result.content[0].text.startswith("Error generating image: ")


class TestListTools:
    """Tests for the model and voice listing tools."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_image_models(self, dispatcher):
        """Image models should be returned as JSON text."""
        respx.get("https://image.pollinations.ai/models").mock(
            return_value=httpx.Response(200, json=["flux", "turbo"])
        )

        result = await dispatcher.dispatch("listImageModels", {})

        assert json.loads(result.content[0].text) == ["flux", "turbo"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_text_models(self, dispatcher):
        """Text models should be wrapped under models."""
        respx.get("https://text.pollinations.ai/models").mock(
            return_value=httpx.Response(200, json=["openai"])
        )

        result = await dispatcher.dispatch("listTextModels", {})

        assert json.loads(result.content[0].text) == {"models": ["openai"]}

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_text_models_failure(self, dispatcher):
        """An upstream failure should produce an error result."""
        respx.get("https://text.pollinations.ai/models").mock(
            return_value=httpx.Response(500)
        )

        result = await dispatcher.dispatch("listTextModels", {})

        assert result.isError is True
        assert result.content[0].text.startswith("Error listing text models: ")

    @pytest.mark.asyncio
    async def test_list_audio_voices(self, dispatcher):
        """Voices should be returned without any request."""
        result = await dispatcher.dispatch("listAudioVoices", {})

        voices = json.loads(result.content[0].text)["voices"]
        assert len(voices) == 13
        assert voices[0] == "alloy"


class TestRespondTextTool:
    """Tests for the respondText tool."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_plain_text(self, dispatcher):
        """The upstream body should be returned as a text block."""
        route = respx.get(url__startswith="https://text.pollinations.ai/").mock(
            return_value=httpx.Response(200, text="Four.")
        )

        result = await dispatcher.dispatch("respondText", {"prompt": "2+2?"})

        assert result.content[0].text == "Four."
        assert route.calls.last.request.url.params["model"] == "openai"

    @pytest.mark.asyncio
    async def test_non_string_prompt(self, dispatcher):
        """A non-string prompt should produce an error result."""
        result = await dispatcher.dispatch("respondText", {"prompt": 5})

        assert result.isError is True
        assert result.content[0].text.startswith("Error generating text response: ")


class TestRespondAudioTool:
    """Tests for the respondAudio tool."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_plays_in_background(self, dispatcher, audio_player):
        """Audio should be handed to the player and metadata returned."""
        route = respx.get(url__startswith="https://text.pollinations.ai/").mock(
            return_value=httpx.Response(200, content=AUDIO_BYTES)
        )

        result = await dispatcher.dispatch(
            "respondAudio",
            {"prompt": "Hello", "voiceInstructions": "Speak slowly", "seed": 4},
        )

        assert not result.isError
        assert result.content[0].text.startswith("Audio has been played.")
        metadata = json.loads(result.content[0].text.split("Audio metadata: ", 1)[1])
        assert metadata["voice"] == "alloy"
        assert metadata["voiceInstructions"] == "Speak slowly"
        assert metadata["seed"] == 4
        audio_player.play_in_background.assert_called_once_with(AUDIO_BYTES)
        assert str(route.calls.last.request.url).startswith(
            "https://text.pollinations.ai/Speak%20slowly%0A%0AHello?"
        )

    @pytest.mark.asyncio
    async def test_invalid_prompt_does_not_play(self, dispatcher, audio_player):
        """A validation failure should not start playback."""
        result = await dispatcher.dispatch("respondAudio", {"prompt": ""})

        assert result.isError is True
        assert result.content[0].text.startswith("Error generating audio: ")
        audio_player.play_in_background.assert_not_called()


class TestServer:
    """Tests for the MCP server request handlers."""

    @pytest.mark.asyncio
    async def test_list_tools_handler(self, dispatcher):
        """tools/list should return the registry."""
        server = create_server(dispatcher)
        handler = server.request_handlers[types.ListToolsRequest]

        response = await handler(types.ListToolsRequest(method="tools/list"))

        assert [t.name for t in response.root.tools] == EXPECTED_TOOLS

    @pytest.mark.asyncio
    async def test_call_tool_handler(self, dispatcher):
        """tools/call should return the dispatcher's result."""
        server = create_server(dispatcher)
        handler = server.request_handlers[types.CallToolRequest]

        response = await handler(
            types.CallToolRequest(
                method="tools/call",
                params=types.CallToolRequestParams(
                    name="listAudioVoices", arguments={}
                ),
            )
        )

        assert isinstance(response.root, types.CallToolResult)
        assert "alloy" in response.root.content[0].text

    @pytest.mark.asyncio
    async def test_call_unknown_tool_handler(self, dispatcher):
        """tools/call with an unknown name should raise a protocol error."""
        server = create_server(dispatcher)
        handler = server.request_handlers[types.CallToolRequest]

        with pytest.raises(McpError) as exc_info:
            await handler(
                types.CallToolRequest(
                    method="tools/call",
                    params=types.CallToolRequestParams(name="nope"),
                )
            )
        assert exc_info.value.error.code == types.METHOD_NOT_FOUND


class TestMain:
    """Tests for the stdio server entry point."""

    def test_interrupt_exits_cleanly(self, settings):
        """KeyboardInterrupt should end main without an error exit."""
        with patch("mcp_server.server.configure_logging"), patch(
            "mcp_server.server.run_stdio",
            new=AsyncMock(side_effect=KeyboardInterrupt),
        ):
            main(settings)

    def test_startup_failure_exits_with_one(self, settings, caplog):
        """A failure while starting should be logged and exit with status 1."""
        with caplog.at_level(logging.ERROR), patch(
            "mcp_server.server.configure_logging"
        ), patch(
            "mcp_server.server.create_server",
            side_effect=RuntimeError("cannot start"),
        ):
            with pytest.raises(SystemExit) as exc_info:
                main(settings)

        assert exc_info.value.code == 1
        assert "MCP server failed" in caplog.text
