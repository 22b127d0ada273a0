"""Tool descriptors advertised by the MCP server.

Each descriptor names a tool, describes it, and declares the JSON Schema of
its arguments. Defaults are documented in the property descriptions; the
dispatcher applies them.
"""

from typing import Any

from mcp import types
from pydantic import BaseModel, ConfigDict, Field

from mcpollinations.types import AUDIO_VOICES, ToolName


class ToolDescriptor(BaseModel):
    """Name, description and input schema of a tool."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")

    def to_tool(self) -> types.Tool:
        """Convert to the MCP ``Tool`` type."""
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
        )


def _object_schema(
    properties: dict[str, dict[str, Any]], required: list[str] | None = None
) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


_VOICE_OPTIONS = ", ".join(f'"{v}"' for v in AUDIO_VOICES)

_IMAGE_PROPERTIES: dict[str, dict[str, Any]] = {
    "prompt": {
        "type": "string",
        "description": "The text description of the image to generate",
    },
    "model": {
        "type": "string",
        "description": 'Model name to use for generation (default: "flux"). '
        "Use listImageModels to see all models",
    },
    "seed": {
        "type": "number",
        "description": "Seed for reproducible results (default: random)",
    },
    "width": {
        "type": "number",
        "description": "Width of the generated image (default: 1024)",
    },
    "height": {
        "type": "number",
        "description": "Height of the generated image (default: 1024)",
    },
    "enhance": {
        "type": "boolean",
        "description": "Whether to enhance the prompt using an LLM before "
        "generating (default: true)",
    },
    "safe": {
        "type": "boolean",
        "description": "Whether to apply content filtering (default: false)",
    },
}

_SAVE_PROPERTIES: dict[str, dict[str, Any]] = {
    "outputPath": {
        "type": "string",
        "description": "Directory path where to save the image "
        '(default: "./mcpollinations-output")',
    },
    "fileName": {
        "type": "string",
        "description": "Name of the file to save (without extension, "
        "default: generated from prompt)",
    },
    "format": {
        "type": "string",
        "description": "Image format to save as (png, jpeg, jpg, webp - default: png)",
    },
}

TOOL_DESCRIPTORS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name=ToolName.GENERATE_IMAGE_URL.value,
        description="Generate an image URL from a text prompt",
        input_schema=_object_schema(dict(_IMAGE_PROPERTIES), ["prompt"]),
    ),
    ToolDescriptor(
        name=ToolName.GENERATE_IMAGE.value,
        description="Generate an image, return the base64-encoded data, "
        "and save to a file by default",
        input_schema=_object_schema(
            {**_IMAGE_PROPERTIES, **_SAVE_PROPERTIES}, ["prompt"]
        ),
    ),
    ToolDescriptor(
        name=ToolName.LIST_IMAGE_MODELS.value,
        description="List available image models",
        input_schema=_object_schema({}),
    ),
    ToolDescriptor(
        name=ToolName.RESPOND_AUDIO.value,
        description="Generate an audio response to a text prompt and play it "
        "through the system",
        input_schema=_object_schema(
            {
                "prompt": {
                    "type": "string",
                    "description": "The text prompt to respond to with audio",
                },
                "voice": {
                    "type": "string",
                    "description": 'Voice to use for audio generation (default: "alloy"). '
                    f"Available options: {_VOICE_OPTIONS}",
                },
                "seed": {
                    "type": "number",
                    "description": "Seed for reproducible results (default: random)",
                },
                "voiceInstructions": {
                    "type": "string",
                    "description": "Additional instructions for the voice's "
                    "character or style",
                },
            },
            ["prompt"],
        ),
    ),
    ToolDescriptor(
        name=ToolName.LIST_AUDIO_VOICES.value,
        description="List all available audio voices for text-to-speech generation",
        input_schema=_object_schema({}),
    ),
    ToolDescriptor(
        name=ToolName.RESPOND_TEXT.value,
        description="Respond with text to a prompt using the Pollinations Text API",
        input_schema=_object_schema(
            {
                "prompt": {
                    "type": "string",
                    "description": "The text prompt to generate a response for",
                },
                "model": {
                    "type": "string",
                    "description": 'Model to use for text generation (default: "openai"). '
                    "Use listTextModels to see all models",
                },
                "seed": {
                    "type": "number",
                    "description": "Seed for reproducible results (default: random)",
                },
            },
            ["prompt"],
        ),
    ),
    ToolDescriptor(
        name=ToolName.LIST_TEXT_MODELS.value,
        description="List available text models",
        input_schema=_object_schema({}),
    ),
)


def get_tool_descriptors() -> list[ToolDescriptor]:
    """Return all tool descriptors in registry order."""
    return list(TOOL_DESCRIPTORS)


def get_tools() -> list[types.Tool]:
    """Return all tools as MCP ``Tool`` objects."""
    return [d.to_tool() for d in TOOL_DESCRIPTORS]


__all__ = [
    "TOOL_DESCRIPTORS",
    "ToolDescriptor",
    "get_tool_descriptors",
    "get_tools",
]
