"""Extraction orchestration (LLM optional; anchors; keyword fallback).

Strategies are an ordered list; the first one that returns a query wins and no other strategy is
consulted. Results are never merged across strategies.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from functools import partial
from typing import Literal

from src.intent.anchor_parser import extract_by_anchors
from src.intent.fallback_parser import detect_intent, extract_gaine, extract_time
from src.intent.llm_parser import LLMParserError, extract_via_model, llm_config_from_env
from src.intent.schema import StructuredQuery

logger = logging.getLogger(__name__)

ParseSource = Literal["llm", "anchors", "fallback"]


class Outcome(StrEnum):
    """What the caller must do with an extracted query."""

    ready = "ready"
    intent_missing = "intent_missing"
    gaine_missing = "gaine_missing"


@dataclass(frozen=True)
class Strategy:
    """A named extraction step returning a query or `None` (fall through)."""

    name: ParseSource
    extract: Callable[[str], StructuredQuery | None]


@dataclass(frozen=True)
class ParseResult:
    """Extracted query plus information about which strategy produced it."""

    query: StructuredQuery
    source: ParseSource

    @property
    def outcome(self) -> Outcome:
        return decide_outcome(self.query)


def compose_fallback(text: str) -> StructuredQuery:
    """Compose the three independent fallback lookups. Fields may be absent."""

    return StructuredQuery(
        intent=detect_intent(text),
        gaine=extract_gaine(text),
        time=extract_time(text),
    )


def build_strategies(*, llm_enabled: bool, llm_api_key: str | None = None) -> list[Strategy]:
    """Build the ordered strategy chain: [llm?] -> anchors -> fallback."""

    strategies: list[Strategy] = []

    if llm_enabled:
        try:
            cfg = llm_config_from_env(api_key=llm_api_key)
        except LLMParserError as exc:
            # A misconfigured LLM must never block the local strategies.
            logger.warning("llm strategy disabled reason=%s", exc)
        else:
            strategies.append(Strategy(name="llm", extract=partial(extract_via_model, config=cfg)))

    strategies.append(Strategy(name="anchors", extract=extract_by_anchors))
    strategies.append(Strategy(name="fallback", extract=compose_fallback))
    return strategies


def run_strategies(text: str, strategies: list[Strategy]) -> ParseResult:
    """Run strategies in order and stop at the first non-`None` result."""

    for strategy in strategies:
        query = strategy.extract(text)
        if query is not None:
            return ParseResult(query=query, source=strategy.name)

    return ParseResult(query=StructuredQuery(), source="fallback")


def parse_query_with_source(
        text: str,
        *,
        llm_enabled: bool,
        llm_api_key: str | None = None,
) -> ParseResult:
    """Extract a StructuredQuery from text.

    Strategy:
        1) If LLM mode is enabled, ask the LLM for query JSON and normalize it.
        2) Otherwise, or if the LLM result is rejected, parse the anchor syntax.
        3) If the anchors are incomplete, compose the keyword/regex fallback lookups.
    """

    strategies = build_strategies(llm_enabled=llm_enabled, llm_api_key=llm_api_key)
    return run_strategies(text, strategies)


def parse_query(text: str, *, llm_enabled: bool, llm_api_key: str | None = None) -> StructuredQuery:
    """Extract a StructuredQuery from text (convenience wrapper)."""

    return parse_query_with_source(text, llm_enabled=llm_enabled, llm_api_key=llm_api_key).query


def decide_outcome(query: StructuredQuery) -> Outcome:
    """Decide which clarification (if any) a query needs.

    An empty `time` is a valid, unbounded query and never triggers a clarification.
    """

    if query.is_complete:
        return Outcome.ready
    if query.intent is None:
        return Outcome.intent_missing
    return Outcome.gaine_missing
