"""Anchor-syntax parser (no LLM).

Recognizes utterances shaped like the canonical French request:

    les <entrées|sorties|stock> de <gaine> [le <date> | du <date> au <date>]

The parser is all-or-nothing on the required fields: a query is returned only when both the intent
anchor and the gaine anchor are present. Time is best-effort and falls back to `{}`.
"""

from __future__ import annotations

import re

from src.intent.dates import resolve_date_phrase
from src.intent.dictionaries import GAINE_PREFIXES, compact_gaine, intent_from_stem
from src.intent.normalize import normalize_keep_accents
from src.intent.schema import Gaine, QueryIntent, StructuredQuery, TimeRef

_INTENT_ANCHOR_RE = re.compile(r"\bles\s+(?P<word>entr[ée]e?s?|sorties?|stocks?)\b")
_GAINE_ANCHOR_RE = re.compile(
    rf"\bde\s+(?P<raw>(?:{'|'.join(GAINE_PREFIXES)})\s*-?\s*\d{{1,5}})\b"
)
_RANGE_ANCHOR_RE = re.compile(r"\bdu\s+(?P<start>.+?)\s+au\s+(?P<end>.+)$")
_SINGLE_ANCHOR_RE = re.compile(r"\ble\s+(?P<day>.+)$")


def _intent_anchor(text: str) -> QueryIntent | None:
    match = _INTENT_ANCHOR_RE.search(text)
    if not match:
        return None
    return intent_from_stem(match.group("word"))


def _gaine_anchor(text: str) -> Gaine | None:
    match = _GAINE_ANCHOR_RE.search(text)
    if not match:
        return None
    return Gaine(value=compact_gaine(match.group("raw")))


def _time_anchor(text: str) -> TimeRef:
    range_match = _RANGE_ANCHOR_RE.search(text)
    if range_match:
        start = resolve_date_phrase(range_match.group("start"))
        end = resolve_date_phrase(range_match.group("end"))
        # A half-resolved range is dropped rather than returned as a single day.
        if start and end:
            return TimeRef.between(start, end)
        return TimeRef()

    single_match = _SINGLE_ANCHOR_RE.search(text)
    if single_match:
        day = resolve_date_phrase(single_match.group("day"))
        if day:
            return TimeRef.single(day)

    return TimeRef()


def extract_by_anchors(text: str) -> StructuredQuery | None:
    """Parse anchor syntax into a complete StructuredQuery.

    Returns:
        A query with both `intent` and `gaine` set, or `None` when either anchor is missing.
    """

    normalized = normalize_keep_accents(text)
    if not normalized:
        return None

    intent = _intent_anchor(normalized)
    gaine = _gaine_anchor(normalized)
    if intent is None or gaine is None:
        return None

    return StructuredQuery(intent=intent, gaine=gaine, time=_time_anchor(normalized))
