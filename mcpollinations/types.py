"""Shared type definitions for mcpollinations.

This module contains dataclasses, enums, and constants shared across
subpackages to avoid circular imports.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ImageFormat(str, Enum):
    """File formats accepted when saving generated images."""

    PNG = "png"
    JPEG = "jpeg"
    JPG = "jpg"
    WEBP = "webp"


class ToolName(str, Enum):
    """Names of the tools exposed over MCP, in registry order."""

    GENERATE_IMAGE_URL = "generateImageUrl"
    GENERATE_IMAGE = "generateImage"
    LIST_IMAGE_MODELS = "listImageModels"
    RESPOND_AUDIO = "respondAudio"
    LIST_AUDIO_VOICES = "listAudioVoices"
    RESPOND_TEXT = "respondText"
    LIST_TEXT_MODELS = "listTextModels"


ALL_TOOL_NAMES: list[str] = [t.value for t in ToolName]

AUDIO_MODEL = "openai-audio"

AUDIO_VOICES: tuple[str, ...] = (
    "alloy",
    "echo",
    "fable",
    "onyx",
    "nova",
    "shimmer",
    "coral",
    "verse",
    "ballad",
    "ash",
    "sage",
    "amuch",
    "dan",
)


@dataclass
class ImageUrlResult:
    """Image URL plus the effective generation parameters."""

    image_url: str
    prompt: str
    width: int
    height: int
    model: str
    seed: int
    enhance: bool
    safe: bool
    private: bool = True
    nologo: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase mapping returned to MCP clients."""
        return {
            "imageUrl": self.image_url,
            "prompt": self.prompt,
            "width": self.width,
            "height": self.height,
            "model": self.model,
            "seed": self.seed,
            "enhance": self.enhance,
            "private": self.private,
            "nologo": self.nologo,
            "safe": self.safe,
        }

    def metadata(self) -> dict[str, Any]:
        """Return the parameters without the URL."""
        result = self.to_dict()
        del result["imageUrl"]
        return result


@dataclass
class GenerationResult:
    """Base64 media payload returned by the image and audio services."""

    data: str
    mime_type: str
    metadata: dict[str, Any] = field(default_factory=dict)
    file_path: str | None = None


__all__ = [
    "ALL_TOOL_NAMES",
    "AUDIO_MODEL",
    "AUDIO_VOICES",
    "GenerationResult",
    "ImageFormat",
    "ImageUrlResult",
    "ToolName",
]
