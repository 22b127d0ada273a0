"""Pollinations text service.

Functions for generating text responses and listing text models.
"""

from __future__ import annotations

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


async def respond_text(
    prompt: str,
    model: str = "openai",
    seed: int | None = None,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Generate a text response to a prompt.

    Args:
        prompt: Prompt to respond to.
        model: Text model name.
        seed: Seed for reproducible results (random if not provided).
        settings: Settings providing the base URL and timeout.
        client: Optional HTTP client to reuse.

    Returns:
        The raw response body.

    Raises:
        ValidationError: If the prompt is missing or not a string.
        UpstreamError: If the request fails.
    """
    require_prompt(prompt)
    if settings is None:
        settings = get_settings()
    if seed is None:
        seed = random_seed()

    params: list[tuple[str, Any]] = []
    if model:
        params.append(("model", model))
    params.append(("seed", seed))

    response = await fetch(
        build_url(settings.text_base_url, encode_prompt(prompt), params),
        action="generate text",
        client=client,
        timeout=settings.http_timeout,
    )
    return response.text


async def list_text_models(
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """List the text models offered by the upstream service.

    Returns:
        Mapping with the parsed model list under ``models``.

    Raises:
        UpstreamError: If the request fails.
    """
    if settings is None:
        settings = get_settings()

    response = await fetch(
        build_url(settings.text_base_url, "models", []),
        action="list text models",
        client=client,
        timeout=settings.http_timeout,
    )
    return {"models": response.json()}


__all__ = ["list_text_models", "respond_text"]
