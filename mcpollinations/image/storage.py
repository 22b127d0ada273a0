"""Saving generated images to disk.

This module handles:
- Validating the requested file format
- Deriving default file names from prompts
- Writing files without ever overwriting an existing one
"""

from __future__ import annotations

import logging
import random
import re
import time
from pathlib import Path

from mcpollinations.types import ImageFormat

logger = logging.getLogger(__name__)

# Number of prompt characters used for derived file names
PROMPT_SLUG_LENGTH = 20

_NON_ALNUM = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def resolve_format(image_format: str) -> str:
    """Return a valid file extension for the requested format.

    Unknown formats fall back to png with a warning.

    Args:
        image_format: Requested format (png, jpeg, jpg, webp).

    Returns:
        File extension without the leading dot.
    """
    try:
        return ImageFormat(image_format).value
    except ValueError:
        logger.warning("Invalid format '%s', defaulting to 'png'", image_format)
        return ImageFormat.PNG.value


def default_file_name(prompt: str, timestamp_ms: int | None = None) -> str:
    """Derive a file name (without extension) from a prompt.

    Args:
        prompt: Prompt the image was generated from.
        timestamp_ms: Epoch milliseconds; current time if not provided.

    Returns:
        Name of the form ``<slug>_<timestamp>_<4 random digits>``.
    """
    slug = _NON_ALNUM.sub("_", prompt[:PROMPT_SLUG_LENGTH]).lower()
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    suffix = f"{random.randrange(10000):04d}"
    return f"{slug}_{timestamp_ms}_{suffix}"


def expand_output_path(output_path: str | Path) -> Path:
    """Expand a leading ``~`` in an output directory."""
    return Path(output_path).expanduser()


def save_unique(directory: Path, base_name: str, extension: str, data: bytes) -> Path:
    """Write data to a file that did not exist before.

    Files are created with exclusive-create opens. On a name collision a
    numeric suffix (``_1``, ``_2``, ...) is appended to the base name.

    Args:
        directory: Target directory (created if missing).
        base_name: File name without extension.
        extension: File extension without the leading dot.
        data: Bytes to write.

    Returns:
        Path of the written file.

    Raises:
        OSError: If the directory or file cannot be written.
    """
    directory.mkdir(parents=True, exist_ok=True)

    candidate = directory / f"{base_name}.{extension}"
    counter = 1
    while True:
        try:
            with candidate.open("xb") as f:
                f.write(data)
        except FileExistsError:
            candidate = directory / f"{base_name}_{counter}.{extension}"
            counter += 1
            continue
        logger.debug("Saved %d bytes to %s", len(data), candidate)
        return candidate


__all__ = [
    "PROMPT_SLUG_LENGTH",
    "default_file_name",
    "expand_output_path",
    "resolve_format",
    "save_unique",
]
