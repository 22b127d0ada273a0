"""Local audio playback.

Generated audio is written to a temporary file and played by a local
command-line player in a detached background task. The task deletes the
file afterwards. Failures are logged and never reach the tool caller.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shlex
import shutil
import tempfile
import time
from pathlib import Path

logger = logging.getLogger(__name__)

# Candidate players, in order of preference, with the arguments they need
# to play a single file and exit.
PLAYER_CANDIDATES: list[list[str]] = [
    ["afplay"],
    ["mpg123", "-q"],
    ["mpg321", "-q"],
    ["mplayer", "-really-quiet"],
    ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet"],
    ["cvlc", "--play-and-exit", "--quiet"],
    ["play", "-q"],
]


class AudioPlayer:
    """Plays audio files in the background.

    Attributes:
        command: Explicit player command; autodetected when None.
        temp_dir: Directory for temporary audio files.
    """

    def __init__(
        self,
        command: str | None = None,
        temp_dir: Path | None = None,
    ) -> None:
        self.command = command
        self.temp_dir = temp_dir if temp_dir is not None else Path(tempfile.gettempdir())
        # References keep running tasks from being garbage collected.
        self._tasks: set[asyncio.Task[None]] = set()

    def resolve_command(self) -> list[str] | None:
        """Return the player command line, without the file argument."""
        if self.command:
            return shlex.split(self.command)
        for candidate in PLAYER_CANDIDATES:
            if shutil.which(candidate[0]):
                return list(candidate)
        return None

    def write_temp_file(self, data: bytes, suffix: str = ".mp3") -> Path:
        """Write audio bytes to a new temporary file.

        Each call gets its own file, even within the same millisecond.

        Raises:
            OSError: If the file cannot be written.
        """
        fd, name = tempfile.mkstemp(
            prefix=f"pollinations-audio-{int(time.time() * 1000)}-",
            suffix=suffix,
            dir=self.temp_dir,
        )
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        return Path(name)

    def play_in_background(self, data: bytes) -> asyncio.Task[None]:
        """Start playing audio without waiting for it to finish.

        Args:
            data: Decoded audio bytes.

        Returns:
            The background task.

        Raises:
            OSError: If the temporary file cannot be written.
        """
        path = self.write_temp_file(data)
        task = asyncio.get_running_loop().create_task(self._play_and_cleanup(path))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _play_and_cleanup(self, path: Path) -> None:
        try:
            await self._play(path)
        except Exception as e:
            logger.error("Error playing audio: %s", e)
        finally:
            try:
                path.unlink()
            except OSError as e:
                logger.error("Error cleaning up temp file %s: %s", path, e)

    async def _play(self, path: Path) -> None:
        cmd = self.resolve_command()
        if cmd is None:
            logger.warning("No audio player found; skipping playback of %s", path)
            return

        cmd.append(str(path))
        logger.debug("Playing audio: %s", shlex.join(cmd))
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
        exit_code = await process.wait()
        if exit_code != 0:
            logger.error("Audio player %s exited with code %d", cmd[0], exit_code)


__all__ = ["PLAYER_CANDIDATES", "AudioPlayer"]
