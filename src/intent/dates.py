"""French date phrase resolution.

Every accepted surface form is converted into a canonical `YYYY-MM-DD` string:
    - canonical:  `2025-10-01`
    - numeric:    `01-10-2025`, `1/10/25` (two-digit years are `20YY`)
    - textual:    `1er octobre 2025`, `premier mars 2025`, `15 février 2025`

The resolver never raises: an unrecognized phrase is a normal outcome and yields `None`.
"""

from __future__ import annotations

import re

from src.intent.normalize import fold_accents, normalize_keep_accents

_FR_MONTH_NAMES: tuple[str, ...] = (
    "janvier",
    "fevrier",
    "mars",
    "avril",
    "mai",
    "juin",
    "juillet",
    "aout",
    "septembre",
    "octobre",
    "novembre",
    "decembre",
)
# Keys are accent-folded; lookups fold the candidate word first.
FR_MONTHS: dict[str, int] = {name: idx + 1 for idx, name in enumerate(_FR_MONTH_NAMES)}

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_NUMERIC_DATE_RE = re.compile(r"^(?P<d>\d{1,2})(?P<sep>[/-])(?P<m>\d{1,2})(?P=sep)(?P<y>\d{4}|\d{2})$")

# Shared with the fallback extractor, which scans free text for the same phrase shape.
TEXTUAL_DATE_RE = re.compile(
    r"\b(?P<d>1er|premier|\d{1,2})\s+(?P<month>[a-zéèêëûüôöîïùàâäç]+)\s+(?P<y>\d{4})\b"
)
DATE_TOKEN_RE = re.compile(r"\b(?:\d{4}-\d{2}-\d{2}|\d{1,2}/\d{1,2}/(?:\d{4}|\d{2})|\d{1,2}-\d{1,2}-(?:\d{4}|\d{2}))\b")

_STANDALONE_LE_RE = re.compile(r"(?:^|\s)le\s+")
_TRAILING_PUNCT = ".,;:!?…"


def _format_iso(year: int, month: int, day: int) -> str | None:
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    return f"{year:04d}-{month:02d}-{day:02d}"


def _clean_phrase(phrase: str) -> str:
    value = normalize_keep_accents(phrase)
    value = _STANDALONE_LE_RE.sub(" ", value).strip()
    return value.rstrip(_TRAILING_PUNCT).strip()


def _resolve_numeric(value: str) -> str | None:
    match = _NUMERIC_DATE_RE.fullmatch(value)
    if not match:
        return None
    year = int(match.group("y"))
    if len(match.group("y")) == 2:
        year += 2000
    return _format_iso(year, int(match.group("m")), int(match.group("d")))


def _resolve_textual(value: str) -> str | None:
    match = TEXTUAL_DATE_RE.search(value)
    if not match:
        return None

    month = FR_MONTHS.get(fold_accents(match.group("month")))
    if month is None:
        return None

    raw_day = match.group("d")
    day = 1 if raw_day in {"1er", "premier"} else int(raw_day)
    return _format_iso(int(match.group("y")), month, day)


def resolve_date_phrase(phrase: str | None) -> str | None:
    """Resolve a French date expression into an ISO `YYYY-MM-DD` string.

    Forms are tried in priority order: canonical, numeric `D/M/Y` | `D-M-Y`, textual. Day and month
    are only checked for plausible bounds (1-31, 1-12); there is no per-month calendar validation.

    Returns:
        The ISO date string, or `None` if no form matches.
    """

    if not phrase:
        return None

    value = _clean_phrase(str(phrase))
    if not value:
        return None

    if _ISO_DATE_RE.fullmatch(value):
        return value

    return _resolve_numeric(value) or _resolve_textual(value)
