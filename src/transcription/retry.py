"""Retry policy for throttled transcription calls.

Backoff is a pure function of the attempt number, so the policy can be unit-tested without real
timers:

    delay(attempt) = min(base * 2**attempt, cap) + uniform(0, jitter)
"""

from __future__ import annotations

import random
import re
from collections.abc import Callable
from dataclasses import dataclass

from openai import RateLimitError

BACKOFF_BASE_S = 2.0
BACKOFF_CAP_S = 8.0
BACKOFF_JITTER_S = 0.3

_THROTTLE_MESSAGE_RE = re.compile(r"rate.?limit|quota|too many requests", flags=re.IGNORECASE)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times, and how patiently, a throttled call is retried."""

    max_retries: int = 3
    base_delay_s: float = BACKOFF_BASE_S
    max_delay_s: float = BACKOFF_CAP_S
    jitter_s: float = BACKOFF_JITTER_S

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")


def compute_backoff_delay(
        attempt: int,
        policy: RetryPolicy,
        *,
        rng: Callable[[], float] = random.random,
) -> float:
    """Return the delay (seconds) before retry number `attempt` (0-indexed)."""

    capped = min(policy.base_delay_s * (2 ** attempt), policy.max_delay_s)
    return capped + rng() * policy.jitter_s


@dataclass
class RetryState:
    """Attempt counter plus terminal flag for one transcription request."""

    policy: RetryPolicy
    attempt: int = 0
    terminal: bool = False

    def can_retry(self) -> bool:
        return not self.terminal and self.attempt < self.policy.max_retries

    def record_retry(self) -> None:
        self.attempt += 1

    def mark_terminal(self) -> None:
        self.terminal = True


def _status_code(exc: BaseException) -> int | None:
    for attr in ("status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def is_throttle_error(exc: BaseException) -> bool:
    """Whether an error means "rate/quota limited" (retryable) rather than a terminal failure."""

    if isinstance(exc, RateLimitError):
        return True
    if _status_code(exc) == 429:
        return True
    return bool(_THROTTLE_MESSAGE_RE.search(str(exc)))
