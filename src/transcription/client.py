"""OpenAI Whisper speech-to-text client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from openai import AsyncOpenAI

# Vocabulary hint: intents, gaine prefixes (always starting with G) and French month names.
TRANSCRIPTION_PROMPT = (
    "Termes: entrées, sorties, stock, GSB, GAB, GL, GS (toujours avec G au début). "
    "Après GSB/GAB/GL/GS il y a des chiffres seulement (ex: GSB11). "
    "Mois FR: janvier, février, mars, avril, mai, juin, juillet, août, septembre, octobre, "
    "novembre, décembre."
)


class Transcriber(Protocol):
    """Anything that turns converted audio bytes into transcript text (or raises)."""

    async def transcribe(self, audio: bytes) -> str: ...


@dataclass
class WhisperTranscriber:
    """Transcribe mono mp3 audio with the OpenAI audio transcription endpoint."""

    api_key: str
    model: str = "whisper-1"
    language: str = "fr"
    filename: str = "voice.mp3"
    _client: AsyncOpenAI | None = field(default=None, init=False, repr=False)

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            # SDK retries are disabled: throttling is handled by the transcription service.
            self._client = AsyncOpenAI(api_key=self.api_key, max_retries=0)
        return self._client

    async def transcribe(self, audio: bytes) -> str:
        result = await self.client.audio.transcriptions.create(
            file=(self.filename, audio),
            model=self.model,
            language=self.language,
            prompt=TRANSCRIPTION_PROMPT,
        )
        return (result.text or "").strip()
