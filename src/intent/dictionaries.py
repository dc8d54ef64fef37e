"""French intent stems and gaine identifier patterns.

These mappings are shared by the anchor parser, the keyword fallback and the LLM output normalizer,
and should remain small and deterministic.
"""

from __future__ import annotations

import re

from src.intent.normalize import fold_accents
from src.intent.schema import QueryIntent

# Priority order matters: the first stem found anywhere in the text wins.
INTENT_STEMS: tuple[tuple[str, QueryIntent], ...] = (
    ("entr", QueryIntent.entrees),
    ("sort", QueryIntent.sorties),
    ("stock", QueryIntent.stock),
)

GAINE_PREFIXES: tuple[str, ...] = ("gsb", "gab", "gl", "gs")
_PREFIX_GROUP = "|".join(GAINE_PREFIXES)

# Loose spoken/transcribed form: "gsb11", "GSB 11", "gsb-11".
LOOSE_GAINE_RE = re.compile(
    rf"\b(?P<prefix>{_PREFIX_GROUP})\s*-?\s*(?P<digits>\d{{1,5}})\b",
    flags=re.IGNORECASE,
)
_STRICT_GAINE_RE = re.compile(rf"^(?P<prefix>{_PREFIX_GROUP})(?P<digits>\d{{1,5}})$")
_SEPARATORS_RE = re.compile(r"[\s\-]+")


def intent_from_stem(word: str | None) -> QueryIntent | None:
    """Map a single word (`entrées`, `Sorties`, `stock`) to an intent by stem prefix."""

    value = fold_accents(word)
    for stem, intent in INTENT_STEMS:
        if value.startswith(stem):
            return intent
    return None


def find_intent_stem(text: str | None) -> QueryIntent | None:
    """Return the highest-priority intent whose stem starts any token of the text."""

    tokens = re.findall(r"\w+", fold_accents(text))
    for stem, intent in INTENT_STEMS:
        if any(token.startswith(stem) for token in tokens):
            return intent
    return None


def compact_gaine(raw: str) -> str:
    """Strip spaces/hyphens and lowercase a loosely matched identifier (`GSB - 11` -> `gsb11`)."""

    return _SEPARATORS_RE.sub("", raw).lower()


def normalize_gaine_value(value: object) -> str | None:
    """Validate a gaine value, returning its compact form or `None` if non-conforming.

    Non-conforming values are rejected, never corrected (`gsb11a`, `xy12`, `gsb123456` -> `None`).
    """

    if value is None or isinstance(value, bool):
        return None
    compact = compact_gaine(str(value))
    match = _STRICT_GAINE_RE.fullmatch(compact)
    if not match:
        return None
    return f"{match.group('prefix')}{match.group('digits')}"
