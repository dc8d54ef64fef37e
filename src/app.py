"""Application composition root.

This module wires together configuration, the transcription rate gate, the speech-to-text client
and the inventory router client for the bot runtime.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.config.settings import Settings
from src.inventory.client import InventoryRouterClient
from src.transcription.client import Transcriber, WhisperTranscriber
from src.transcription.gate import RateGate
from src.transcription.retry import RetryPolicy


@dataclass(frozen=True)
class App:
    """Shared application dependencies for handlers.

    `rate_gate` is the single process-wide gate for the transcription quota; every transcription
    goes through it.
    """

    settings: Settings
    rate_gate: RateGate
    retry_policy: RetryPolicy
    transcriber: Transcriber
    router_client: InventoryRouterClient


def create_app(settings: Settings) -> App:
    """Create the application container."""

    return App(
        settings=settings,
        rate_gate=RateGate(settings.transcribe_min_interval_s),
        retry_policy=RetryPolicy(max_retries=settings.transcribe_max_retries),
        transcriber=WhisperTranscriber(api_key=settings.openai_api_key),
        router_client=InventoryRouterClient(
            api_url=settings.router_api_url,
            api_token=settings.router_api_token,
            timeout_s=settings.router_timeout_s,
        ),
    )
