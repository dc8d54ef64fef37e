"""Process-wide logging setup.

Records stay in the process logs. Chat users only ever see the fixed texts in `src.bot.messages`.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Per-request HTTP chatter from the SDKs would drown the pipeline logs.
QUIET_LOGGERS = ("aiogram.event", "openai", "httpx")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
