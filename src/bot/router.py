"""Bot router composition (private chats only; group messages are ignored)."""

from __future__ import annotations

from aiogram import F, Router
from aiogram.enums import ChatType

from src.bot.handlers import handle_text, handle_voice

router = Router(name="root")
router.message.filter(F.chat.type == ChatType.PRIVATE)
router.message.register(handle_voice, F.voice | F.audio)
router.message.register(handle_text, F.text)
