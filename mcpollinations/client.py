"""Shared HTTP helpers for the Pollinations APIs.

This module handles:
- Error types shared by the image, text and audio services
- Prompt and query-string encoding
- Single GET requests against the upstream service
"""

from __future__ import annotations

import random
from typing import Any
from urllib.parse import quote, urlencode

import httpx

# Characters left unescaped by JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"

# Upper bound (exclusive) for randomly generated seeds
MAX_SEED = 1_000_000


class PollinationsError(Exception):
    """Base class for errors raised by the Pollinations services."""

    def __init__(self, message: str, code: str = "pollinations_error") -> None:
        """Initialize PollinationsError.

        Args:
            message: Error description.
            code: Error code for structured error handling.
        """
        super().__init__(message)
        self.code = code


class ValidationError(PollinationsError):
    """Raised when required input is missing or malformed."""

    def __init__(self, message: str, code: str = "validation") -> None:
        super().__init__(message, code)


class UpstreamError(PollinationsError):
    """Raised when the upstream service fails or returns a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str = "upstream_error",
    ) -> None:
        """Initialize UpstreamError.

        Args:
            message: Error description.
            status_code: HTTP status code, if a response was received.
            code: Error code for structured error handling.
        """
        super().__init__(message, code)
        self.status_code = status_code


def require_prompt(prompt: Any) -> str:
    """Validate a prompt argument.

    Args:
        prompt: Candidate prompt value.

    Returns:
        The prompt, unchanged.

    Raises:
        ValidationError: If the prompt is missing, empty or not a string.
    """
    if not prompt or not isinstance(prompt, str):
        raise ValidationError("Prompt is required and must be a string")
    return prompt


def random_seed() -> int:
    """Return a random seed in the range accepted by the upstream service."""
    return random.randrange(MAX_SEED)


def encode_prompt(prompt: str) -> str:
    """Percent-encode a prompt for use as a URL path segment."""
    return quote(prompt, safe=_URI_COMPONENT_SAFE)


def format_query_value(value: Any) -> str:
    """Render a query value the way the upstream service expects it.

    Booleans are rendered in lowercase. Integral floats (JSON numbers such
    as ``512.0``) are rendered without a fractional part.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_url(base_url: str, path: str, params: list[tuple[str, Any]]) -> str:
    """Join a base URL, path and ordered query parameters.

    Args:
        base_url: Service base URL (trailing slash optional).
        path: Already-encoded path, without a leading slash.
        params: Ordered query parameters.

    Returns:
        Full request URL.
    """
    url = f"{base_url.rstrip('/')}/{path}"
    if params:
        query = urlencode([(k, format_query_value(v)) for k, v in params])
        url = f"{url}?{query}"
    return url


async def fetch(
    url: str,
    *,
    action: str,
    client: httpx.AsyncClient | None = None,
    timeout: float | None = None,
) -> httpx.Response:
    """Perform a single GET request against the upstream service.

    Args:
        url: Request URL.
        action: Short description used in error messages (e.g. "generate image").
        client: Optional client to reuse; a new one is created and closed otherwise.
        timeout: Request timeout in seconds (None = no timeout).

    Returns:
        The successful response with its body loaded.

    Raises:
        UpstreamError: On transport failure or non-success status.
    """
    try:
        if client is not None:
            response = await client.get(url)
        else:
            async with httpx.AsyncClient(
                timeout=timeout, follow_redirects=True
            ) as own_client:
                response = await own_client.get(url)
    except httpx.HTTPError as e:
        raise UpstreamError(f"Failed to {action}: {e}") from e

    if not response.is_success:
        reason = response.reason_phrase or f"HTTP {response.status_code}"
        raise UpstreamError(
            f"Failed to {action}: {reason}",
            status_code=response.status_code,
        )

    return response


__all__ = [
    "MAX_SEED",
    "PollinationsError",
    "UpstreamError",
    "ValidationError",
    "build_url",
    "encode_prompt",
    "fetch",
    "format_query_value",
    "random_seed",
    "require_prompt",
]
