"""Image generation module.

This module handles:
- Building Pollinations image URLs from prompts
- Fetching generated images as base64 payloads
- Saving images to disk without overwriting existing files
- Listing available image models
"""

from mcpollinations.image.service import (
    generate_image,
    generate_image_url,
    list_image_models,
)

__all__ = ["generate_image", "generate_image_url", "list_image_models"]
