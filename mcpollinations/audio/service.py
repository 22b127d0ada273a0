"""Pollinations audio service.

Functions for generating spoken audio responses and listing voices.
"""

from __future__ import annotations

import base64
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
from mcpollinations.types import AUDIO_MODEL, AUDIO_VOICES, GenerationResult

DEFAULT_AUDIO_MIME_TYPE = "audio/mpeg"


def compose_audio_prompt(prompt: str, voice_instructions: str | None = None) -> str:
    """Prepend voice instructions to a prompt, separated by a blank line."""
    if voice_instructions:
        return f"{voice_instructions}\n\n{prompt}"
    return prompt


async def respond_audio(
    prompt: str,
    voice: str = "alloy",
    seed: int | None = None,
    voice_instructions: str | None = None,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> GenerationResult:
    """Generate a spoken audio response to a prompt.

    Args:
        prompt: Prompt to respond to.
        voice: Voice name (see list_audio_voices).
        seed: Seed for reproducible results (random if not provided).
        voice_instructions: Optional instructions for the voice's style.
        settings: Settings providing the base URL and timeout.
        client: Optional HTTP client to reuse.

    Returns:
        GenerationResult with base64 audio, MIME type and metadata.

    Raises:
        ValidationError: If the prompt is missing or not a string.
        UpstreamError: If the request fails.
    """
    require_prompt(prompt)
    if settings is None:
        settings = get_settings()
    if seed is None:
        seed = random_seed()

    full_prompt = compose_audio_prompt(prompt, voice_instructions)
    params: list[tuple[str, Any]] = [
        ("model", AUDIO_MODEL),
        ("voice", voice),
        ("seed", seed),
    ]

    response = await fetch(
        build_url(settings.text_base_url, encode_prompt(full_prompt), params),
        action="generate audio",
        client=client,
        timeout=settings.http_timeout,
    )

    return GenerationResult(
        data=base64.b64encode(response.content).decode("ascii"),
        mime_type=response.headers.get("content-type") or DEFAULT_AUDIO_MIME_TYPE,
        metadata={
            "prompt": prompt,
            "voice": voice,
            "model": AUDIO_MODEL,
            "seed": seed,
            "voiceInstructions": voice_instructions,
        },
    )


def list_audio_voices() -> dict[str, list[str]]:
    """Return the fixed list of available voices."""
    return {"voices": list(AUDIO_VOICES)}


__all__ = [
    "DEFAULT_AUDIO_MIME_TYPE",
    "compose_audio_prompt",
    "list_audio_voices",
    "respond_audio",
]
