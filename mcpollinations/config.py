"""Configuration settings for mcpollinations.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: tool arguments > env vars > defaults.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IMAGE_BASE_URL = "https://image.pollinations.ai"
DEFAULT_TEXT_BASE_URL = "https://text.pollinations.ai"


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the MCPOLLINATIONS_
    prefix. Tool call arguments override the defaults declared here.
    """

    model_config = SettingsConfigDict(
        env_prefix="MCPOLLINATIONS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Upstream endpoints
    image_base_url: str = Field(
        default=DEFAULT_IMAGE_BASE_URL,
        description="Base URL of the Pollinations image API",
    )
    text_base_url: str = Field(
        default=DEFAULT_TEXT_BASE_URL,
        description="Base URL of the Pollinations text and audio API",
    )

    # Image defaults
    output_dir: Path = Field(
        default=Path("./mcpollinations-output"),
        description="Directory where generated images are saved",
    )
    image_model: str = Field(default="flux", description="Default image model")
    image_width: int = Field(default=1024, ge=1, description="Default image width")
    image_height: int = Field(
        default=1024, ge=1, description="Default image height"
    )
    image_enhance: bool = Field(
        default=True,
        description="Enhance prompts with an LLM before generating images",
    )
    image_safe: bool = Field(
        default=False,
        description="Apply upstream content filtering to images",
    )
    image_format: str = Field(
        default="png",
        description="Default file format for saved images",
    )

    # Text and audio defaults
    text_model: str = Field(default="openai", description="Default text model")
    audio_voice: str = Field(default="alloy", description="Default audio voice")
    audio_player: str | None = Field(
        default=None,
        description="Command used to play audio (autodetected if not set)",
    )

    # Networking
    http_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Timeout for upstream requests in seconds (no timeout if not set)",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )


def get_settings() -> Settings:
    """Get the application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = [
    "DEFAULT_IMAGE_BASE_URL",
    "DEFAULT_TEXT_BASE_URL",
    "Settings",
    "get_settings",
    "print_settings_json",
]
