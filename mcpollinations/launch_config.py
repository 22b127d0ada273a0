"""MCP launch configuration files.

Models and helpers for the static JSON file that tells MCP clients how to
launch the MCPollinations server. The server itself never reads this file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mcpollinations.types import ALL_TOOL_NAMES

logger = logging.getLogger(__name__)

# Key under which the server entry is written
SERVER_KEY = "mcpollinations"

DEFAULT_CONFIG_PATH = Path("./mcp.json")


class ResourceDirs(BaseModel):
    """Directories used by the server."""

    model_config = ConfigDict(extra="forbid")

    output_dir: str = "~/mcpollinations-output"


class ImageDefaults(BaseModel):
    """Default image generation parameters."""

    model_config = ConfigDict(extra="forbid")

    model: str = "flux"
    width: int = 1024
    height: int = 1024
    safe: bool = False
    enhance: bool = True


class TextDefaults(BaseModel):
    """Default text generation parameters."""

    model_config = ConfigDict(extra="forbid")

    model: str = "openai"


class AudioDefaults(BaseModel):
    """Default audio generation parameters."""

    model_config = ConfigDict(extra="forbid")

    voice: str = "alloy"


class DefaultParams(BaseModel):
    """Per-modality default parameters."""

    model_config = ConfigDict(extra="forbid")

    image: ImageDefaults = Field(default_factory=ImageDefaults)
    text: TextDefaults = Field(default_factory=TextDefaults)
    audio: AudioDefaults = Field(default_factory=AudioDefaults)


class ServerEntry(BaseModel):
    """Launch description of the MCPollinations server."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    command: str = "mcpollinations"
    args: list[str] = Field(default_factory=lambda: ["serve"])
    resources: ResourceDirs = Field(default_factory=ResourceDirs)
    default_params: DefaultParams = Field(default_factory=DefaultParams)
    disabled: bool = False
    always_allow: list[str] = Field(
        default_factory=lambda: list(ALL_TOOL_NAMES),
        alias="alwaysAllow",
    )


def default_server_entry() -> ServerEntry:
    """Return a server entry populated with the defaults."""
    return ServerEntry()


def to_config_dict(entry: ServerEntry) -> dict[str, Any]:
    """Wrap a server entry into the on-disk configuration mapping."""
    return {SERVER_KEY: entry.model_dump(by_alias=True)}


def render_config(entry: ServerEntry) -> str:
    """Render a configuration as indented JSON."""
    return json.dumps(to_config_dict(entry), indent=2)


def write_config(entry: ServerEntry, path: Path = DEFAULT_CONFIG_PATH) -> Path:
    """Write a configuration file.

    Args:
        entry: Server entry to write.
        path: Destination file.

    Returns:
        The path written.

    Raises:
        OSError: If the file cannot be written.
    """
    path.write_text(render_config(entry) + "\n", encoding="utf-8")
    logger.info("Wrote MCP configuration to %s", path)
    return path


def parse_tool_selection(selection: str) -> list[str]:
    """Parse a tool allow-list answer.

    Args:
        selection: ``all`` or comma-separated 1-based tool numbers.

    Returns:
        Selected tool names, in the order given. Out-of-range and
        non-numeric entries are ignored.
    """
    if selection.strip().lower() == "all":
        return list(ALL_TOOL_NAMES)

    selected: list[str] = []
    for part in selection.split(","):
        part = part.strip()
        if not part.isdigit():
            continue
        index = int(part) - 1
        if 0 <= index < len(ALL_TOOL_NAMES):
            selected.append(ALL_TOOL_NAMES[index])
    return selected


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "SERVER_KEY",
    "AudioDefaults",
    "DefaultParams",
    "ImageDefaults",
    "ResourceDirs",
    "ServerEntry",
    "TextDefaults",
    "default_server_entry",
    "parse_tool_selection",
    "render_config",
    "to_config_dict",
    "write_config",
]
