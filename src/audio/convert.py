"""ffmpeg transcoding of voice notes.

Voice notes arrive as OGG/Opus; the transcription service receives mono mp3 resampled to a fixed
rate. Conversion runs through pipes, no temporary files are written.
"""

from __future__ import annotations

import asyncio

SAMPLE_RATE_HZ = 44_100
CHANNELS = 1


class AudioConversionError(RuntimeError):
    """Raised when ffmpeg cannot convert the input audio."""


def ffmpeg_args(ffmpeg_binary: str = "ffmpeg") -> list[str]:
    return [
        ffmpeg_binary,
        "-hide_banner",
        "-loglevel",
        "error",
        "-i",
        "pipe:0",
        "-acodec",
        "libmp3lame",
        "-ar",
        str(SAMPLE_RATE_HZ),
        "-ac",
        str(CHANNELS),
        "-f",
        "mp3",
        "pipe:1",
    ]


async def convert_voice_note(data: bytes, *, ffmpeg_binary: str = "ffmpeg") -> bytes:
    """Convert raw voice-note bytes into mono mp3 bytes.

    Raises:
        AudioConversionError: If the input is empty, ffmpeg is missing, or ffmpeg fails.
    """

    if not data:
        raise AudioConversionError("empty audio payload")

    try:
        proc = await asyncio.create_subprocess_exec(
            *ffmpeg_args(ffmpeg_binary),
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise AudioConversionError(f"cannot start {ffmpeg_binary}: {exc}") from exc

    stdout, stderr = await proc.communicate(data)
    if proc.returncode != 0 or not stdout:
        detail = stderr.decode(errors="replace").strip()[:200]
        raise AudioConversionError(f"ffmpeg exited with {proc.returncode}: {detail}")
    return stdout
