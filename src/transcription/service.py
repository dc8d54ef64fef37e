"""Rate-limited, retrying transcription entry point."""

from __future__ import annotations

import asyncio
import logging

from src.transcription.client import Transcriber
from src.transcription.gate import RateGate, Sleep
from src.transcription.retry import RetryPolicy, RetryState, compute_backoff_delay, is_throttle_error

logger = logging.getLogger(__name__)


async def transcribe_audio(
        audio: bytes,
        *,
        gate: RateGate,
        transcriber: Transcriber,
        policy: RetryPolicy,
        sleep: Sleep = asyncio.sleep,
) -> str:
    """Transcribe audio through the rate gate, retrying throttling failures.

    Contract:
        - Every attempt (first call and retries) acquires its own slot from `gate`.
        - Only rate/quota errors are retried, up to `policy.max_retries` times.
        - Any other error, or exhausted retries, yields `""` (transcription unavailable now).
        - Never raises.
    """

    state = RetryState(policy=policy)

    while True:
        await gate.acquire()
        try:
            text = await transcriber.transcribe(audio)
        except Exception as exc:  # noqa: BLE001 - terminal failures become an empty transcript
            if is_throttle_error(exc) and state.can_retry():
                delay = compute_backoff_delay(state.attempt, policy)
                logger.warning(
                    "transcription throttled retry=%d/%d backoff_s=%.2f",
                    state.attempt + 1,
                    policy.max_retries,
                    delay,
                )
                await sleep(delay)
                state.record_retry()
                continue

            state.mark_terminal()
            logger.error(
                "transcription failed throttled=%s attempts=%d error=%s",
                is_throttle_error(exc),
                state.attempt + 1,
                exc,
            )
            return ""

        return (text or "").strip()
