"""aiogram message handlers.

Voice flow: download -> ffmpeg -> rate-limited transcription -> extraction -> clarification prompt
or inventory router reply. Text flow: raw text is forwarded to the router unchanged.

Hard contract: every handled message produces exactly one reply, and internal errors are logged,
never shown to the user.
"""

from __future__ import annotations

import asyncio
import logging
from time import monotonic
from typing import Any

from aiogram import Bot
from aiogram.types import Message

from src.app import App
from src.audio.convert import AudioConversionError, convert_voice_note
from src.bot import messages
from src.intent.parser import Outcome, parse_query_with_source
from src.inventory.client import RouterError
from src.transcription.service import transcribe_audio

logger = logging.getLogger(__name__)


def caller_id(message: Message) -> str:
    """Opaque caller identifier forwarded to the router."""

    user = message.from_user
    if user is not None:
        return str(user.id)
    return str(message.chat.id)


async def reply_for_transcript(transcript: str, caller: str, app: App) -> str:
    """Turn a transcript into the reply text (clarification prompt or router answer)."""

    started = monotonic()
    # The LLM request is blocking I/O; keep it off the event loop.
    parse_result = await asyncio.to_thread(
        parse_query_with_source,
        transcript,
        llm_enabled=app.settings.llm_enabled,
        llm_api_key=app.settings.effective_llm_api_key,
    )
    outcome = parse_result.outcome
    logger.info(
        "extracted source=%s outcome=%s intent=%s gaine=%s time=%s latency_ms=%d",
        parse_result.source,
        outcome,
        parse_result.query.intent,
        parse_result.query.gaine.value if parse_result.query.gaine else None,
        parse_result.query.time.to_payload(),
        int((monotonic() - started) * 1000),
    )

    if outcome is not Outcome.ready:
        return messages.CLARIFICATIONS[outcome]

    try:
        reply = await app.router_client.route_query(parse_result.query, caller)
    except RouterError as exc:
        logger.warning("router failed flow=audio reason=%s", exc)
        return messages.ROUTER_UNAVAILABLE
    return reply or messages.ROUTER_EMPTY_REPLY


async def _download(bot: Bot, media: Any) -> bytes:
    buffer = await bot.download(media)
    if buffer is None:
        return b""
    return buffer.read()


async def handle_voice(message: Message, bot: Bot, app: App) -> None:
    """Handle a voice note or audio file and reply with exactly one text message."""

    media = message.voice or message.audio
    reply = messages.UNEXPECTED_ERROR

    # noinspection PyBroadException
    try:
        raw = await _download(bot, media)
        audio = await convert_voice_note(raw, ffmpeg_binary=app.settings.ffmpeg_binary)

        transcript = await transcribe_audio(
            audio,
            gate=app.rate_gate,
            transcriber=app.transcriber,
            policy=app.retry_policy,
        )
        if not transcript:
            reply = messages.TRANSCRIPTION_UNAVAILABLE
        else:
            logger.info("transcribed caller=%s chars=%d", caller_id(message), len(transcript))
            reply = await reply_for_transcript(transcript, caller_id(message), app)
    except AudioConversionError as exc:
        logger.warning("audio conversion failed reason=%s", exc)
        reply = messages.AUDIO_FAILED
    except Exception:
        # Handler boundary: any internal error results in a fixed reply without leaking details.
        logger.exception("voice handler failed")

    await message.answer(reply)


async def handle_text(message: Message, app: App) -> None:
    """Forward a text message to the router and reply with its answer."""

    text = (message.text or "").strip()
    if not text or text.startswith("/"):
        return

    # noinspection PyBroadException
    try:
        reply = await app.router_client.route_text(text, caller_id(message))
    except RouterError as exc:
        logger.warning("router failed flow=text reason=%s", exc)
        reply = messages.ROUTER_UNAVAILABLE
    except Exception:
        logger.exception("text handler failed")
        reply = messages.UNEXPECTED_ERROR

    await message.answer(reply or messages.ROUTER_EMPTY_REPLY)
