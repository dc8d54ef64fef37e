"""Text normalization for deterministic extraction."""

from __future__ import annotations

import re
import unicodedata

_MULTISPACE_RE = re.compile(r"\s+")


def normalize_keep_accents(text: str | None) -> str:
    """Normalize user text while keeping accents (month names, `entrées`).

    Normalization is intentionally conservative:
        - Lowercase.
        - Unicode NFKC (compatibility forms, composed accents).
        - Normalize unicode dashes to an ASCII hyphen.
        - Collapse whitespace.
    """

    value = unicodedata.normalize("NFKC", text or "").lower()
    value = value.replace("—", "-").replace("–", "-").replace("‑", "-")
    return _MULTISPACE_RE.sub(" ", value).strip()


def fold_accents(text: str | None) -> str:
    """Lowercase and strip diacritics (`février` -> `fevrier`)."""

    decomposed = unicodedata.normalize("NFKD", normalize_keep_accents(text))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))
