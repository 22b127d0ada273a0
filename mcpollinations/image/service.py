"""Pollinations image service.

Functions for building image URLs, fetching generated images, and
listing the available image models.
"""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Any

import httpx

from mcpollinations.client import (
    build_url,
    encode_prompt,
    fetch,
    random_seed,
    require_prompt,
)
from mcpollinations.config import Settings, get_settings
from mcpollinations.image.storage import (
    default_file_name,
    expand_output_path,
    resolve_format,
    save_unique,
)
from mcpollinations.types import GenerationResult, ImageUrlResult

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"


def generate_image_url(
    prompt: str,
    model: str = "flux",
    seed: int | None = None,
    width: int = 1024,
    height: int = 1024,
    enhance: bool = True,
    safe: bool = False,
    settings: Settings | None = None,
) -> ImageUrlResult:
    """Build the URL of an image generated from a text prompt.

    No request is made; the upstream service generates the image when the
    URL is fetched. ``nologo`` and ``private`` are always enabled.

    Args:
        prompt: Text description of the image.
        model: Image model name.
        seed: Seed for reproducible results (random if not provided).
        width: Image width in pixels.
        height: Image height in pixels.
        enhance: Ask the upstream service to rewrite the prompt with an LLM.
        safe: Apply upstream content filtering.
        settings: Settings providing the base URL.

    Returns:
        ImageUrlResult with the URL and effective parameters.

    Raises:
        ValidationError: If the prompt is missing or not a string.
    """
    require_prompt(prompt)
    if settings is None:
        settings = get_settings()
    if seed is None:
        seed = random_seed()

    params: list[tuple[str, Any]] = [("model", model), ("seed", seed)]
    if width:
        params.append(("width", width))
    if height:
        params.append(("height", height))
    if enhance:
        params.append(("enhance", True))
    params.append(("nologo", True))
    params.append(("private", True))
    params.append(("safe", bool(safe)))

    url = build_url(
        settings.image_base_url, f"prompt/{encode_prompt(prompt)}", params
    )

    return ImageUrlResult(
        image_url=url,
        prompt=prompt,
        width=width,
        height=height,
        model=model,
        seed=seed,
        enhance=enhance,
        safe=safe,
    )


async def generate_image(
    prompt: str,
    model: str = "flux",
    seed: int | None = None,
    width: int = 1024,
    height: int = 1024,
    enhance: bool = True,
    safe: bool = False,
    output_path: str | Path = "./mcpollinations-output",
    file_name: str = "",
    image_format: str = "png",
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> GenerationResult:
    """Generate an image, return it as base64 and save it to a file.

    Args:
        prompt: Text description of the image.
        model: Image model name.
        seed: Seed for reproducible results (random if not provided).
        width: Image width in pixels.
        height: Image height in pixels.
        enhance: Ask the upstream service to rewrite the prompt with an LLM.
        safe: Apply upstream content filtering.
        output_path: Directory where the image is saved.
        file_name: File name without extension (derived from prompt if empty).
        image_format: png, jpeg, jpg or webp; anything else falls back to png.
        settings: Settings providing the base URL and timeout.
        client: Optional HTTP client to reuse.

    Returns:
        GenerationResult with base64 data, MIME type, metadata and the saved
        file path. ``file_path`` is None if the file could not be written.

    Raises:
        ValidationError: If the prompt is missing or not a string.
        UpstreamError: If the image could not be fetched.
    """
    if settings is None:
        settings = get_settings()

    url_result = generate_image_url(
        prompt, model, seed, width, height, enhance, safe, settings=settings
    )

    response = await fetch(
        url_result.image_url,
        action="generate image",
        client=client,
        timeout=settings.http_timeout,
    )
    image_bytes = response.content

    result = GenerationResult(
        data=base64.b64encode(image_bytes).decode("ascii"),
        mime_type=response.headers.get("content-type") or DEFAULT_IMAGE_MIME_TYPE,
        metadata=url_result.metadata(),
    )

    extension = resolve_format(image_format)
    base_name = file_name or default_file_name(prompt)
    directory = expand_output_path(output_path)

    try:
        saved = save_unique(directory, base_name, extension, image_bytes)
    except OSError as e:
        logger.error("Failed to save image to %s: %s", directory, e)
    else:
        result.file_path = str(saved)
        logger.info("Saved image to %s", saved)

    return result


async def list_image_models(
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> Any:
    """List the image models offered by the upstream service.

    Returns:
        Parsed JSON body, unmodified.

    Raises:
        UpstreamError: If the request fails.
    """
    if settings is None:
        settings = get_settings()

    response = await fetch(
        build_url(settings.image_base_url, "models", []),
        action="list models",
        client=client,
        timeout=settings.http_timeout,
    )
    return response.json()


__all__ = [
    "DEFAULT_IMAGE_MIME_TYPE",
    "generate_image",
    "generate_image_url",
    "list_image_models",
]
