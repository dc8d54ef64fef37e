"""Keyword/regex fallback extraction.

Used when an utterance does not follow the anchor syntax. Each lookup is independent and scans the
whole text, so surrounding words and their order do not influence which value is found. Only a
single date is ever recovered here; ranges require the anchor syntax.
"""

from __future__ import annotations

from src.intent.dates import DATE_TOKEN_RE, TEXTUAL_DATE_RE, resolve_date_phrase
from src.intent.dictionaries import LOOSE_GAINE_RE, find_intent_stem
from src.intent.normalize import normalize_keep_accents
from src.intent.schema import Gaine, QueryIntent, TimeRef


def detect_intent(text: str) -> QueryIntent | None:
    """Detect the intent by stem (`entr` > `sort` > `stock`), case and accent insensitive."""

    return find_intent_stem(text)


def extract_gaine(text: str) -> Gaine | None:
    """Return the first prefix+digits identifier found anywhere in the text."""

    match = LOOSE_GAINE_RE.search(text or "")
    if not match:
        return None
    return Gaine(value=f"{match.group('prefix').lower()}{match.group('digits')}")


def extract_time(text: str) -> TimeRef:
    """Recover a single date: textual phrase first, then the first numeric/ISO date token."""

    value = normalize_keep_accents(text)

    textual = TEXTUAL_DATE_RE.search(value)
    if textual:
        day = resolve_date_phrase(textual.group(0))
        if day:
            return TimeRef.single(day)

    token = DATE_TOKEN_RE.search(value)
    if token:
        day = resolve_date_phrase(token.group(0))
        if day:
            return TimeRef.single(day)

    return TimeRef()
