"""Fixed user-facing replies.

Wording is presentation only; which reply is sent is decided by the extraction outcome and the
transcription/router results.
"""

from __future__ import annotations

from src.intent.parser import Outcome

INTENT_MISSING = (
    "🎯 Précise si tu veux les entrées, les sorties ou le stock "
    "(exemple : « les sorties de gsb11 le 01-10-2025 »)."
)
GAINE_MISSING = (
    "🧵 Donne-moi la gaine sous la forme gsb11 / gab22 / gl90 "
    "(uniquement des chiffres après le préfixe)."
)
TRANSCRIPTION_UNAVAILABLE = "🕒 Service de transcription saturé, réessaie dans un moment."
AUDIO_FAILED = "⚠️ Impossible de traiter ce message vocal pour le moment. Réessaie plus tard."
ROUTER_EMPTY_REPLY = "🤖 Aucune réponse claire du serveur."
ROUTER_UNAVAILABLE = "⚠️ Problème temporaire côté serveur. Réessaie un peu plus tard."
UNEXPECTED_ERROR = "🤖 Erreur inattendue."

CLARIFICATIONS: dict[Outcome, str] = {
    Outcome.intent_missing: INTENT_MISSING,
    Outcome.gaine_missing: GAINE_MISSING,
}
