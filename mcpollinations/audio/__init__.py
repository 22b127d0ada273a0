"""Audio generation module.

This module handles:
- Generating spoken responses through the Pollinations text API
- Listing the available voices
- Playing generated audio locally in the background
"""

from mcpollinations.audio.playback import AudioPlayer
from mcpollinations.audio.service import (
    compose_audio_prompt,
    list_audio_voices,
    respond_audio,
)

__all__ = [
    "AudioPlayer",
    "compose_audio_prompt",
    "list_audio_voices",
    "respond_audio",
]
