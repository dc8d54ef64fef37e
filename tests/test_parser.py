"""Tests for the extraction orchestrator (strategy chain + outcome decision)."""

from __future__ import annotations

from http.client import RemoteDisconnected
from typing import Any

import pytest

from src.intent.parser import (
    Outcome,
    build_strategies,
    decide_outcome,
    parse_query,
    parse_query_with_source,
    run_strategies,
)
from src.intent.schema import Gaine, QueryIntent, StructuredQuery, TimeRef


def _never_called(*_args: Any, **_kwargs: Any) -> Any:
    raise AssertionError("strategy must not be consulted")


def test_anchor_single_day_scenario() -> None:
    result = parse_query_with_source("les sorties de gsb11 le 01-10-2025", llm_enabled=False)
    assert result.source == "anchors"
    assert result.query.to_payload() == {
        "intent": "sorties",
        "gaine": {"type": "prefix", "value": "gsb11"},
        "time": {"date": "2025-10-01"},
    }
    assert result.outcome == Outcome.ready


def test_anchor_range_scenario() -> None:
    query = parse_query("les entrées de gab22 du 1er mars 2025 au 15 mars 2025", llm_enabled=False)
    assert query.intent == QueryIntent.entrees
    assert query.gaine is not None and query.gaine.value == "gab22"
    assert query.time.to_payload() == {"from": "2025-03-01", "to": "2025-03-15"}


def test_fallback_scenario_without_anchor_syntax() -> None:
    result = parse_query_with_source("stock gl90", llm_enabled=False)
    assert result.source == "fallback"
    assert result.query.intent == QueryIntent.stock
    assert result.query.gaine is not None and result.query.gaine.value == "gl90"
    assert result.query.time.is_empty
    assert result.outcome == Outcome.ready


def test_missing_identifier_scenario() -> None:
    result = parse_query_with_source("les sorties", llm_enabled=False)
    assert result.source == "fallback"
    assert result.query.intent == QueryIntent.sorties
    assert result.query.gaine is None
    assert result.outcome == Outcome.gaine_missing


def test_nothing_found_means_intent_missing() -> None:
    result = parse_query_with_source("bonjour, ça va ?", llm_enabled=False)
    assert result.query == StructuredQuery()
    assert result.outcome == Outcome.intent_missing


def test_fallback_is_not_consulted_after_anchor_success(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("src.intent.parser.compose_fallback", _never_called)
    result = parse_query_with_source("les stock de gl90", llm_enabled=False)
    assert result.source == "anchors"


def test_llm_result_short_circuits_local_strategies(monkeypatch: pytest.MonkeyPatch) -> None:
    llm_query = StructuredQuery(intent=QueryIntent.stock, gaine=Gaine(value="gs7"))

    monkeypatch.setattr("src.intent.parser.extract_via_model", lambda _text, config: llm_query)
    monkeypatch.setattr("src.intent.parser.extract_by_anchors", _never_called)
    monkeypatch.setattr("src.intent.parser.compose_fallback", _never_called)

    result = parse_query_with_source("le stock de gs7", llm_enabled=True, llm_api_key="sk-test")

    assert result.source == "llm"
    assert result.query is llm_query


def test_rejected_llm_output_falls_through_to_anchors(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("src.intent.parser.extract_via_model", lambda _text, config: None)

    result = parse_query_with_source(
        "les sorties de gsb11 le 01-10-2025",
        llm_enabled=True,
        llm_api_key="sk-test",
    )

    assert result.source == "anchors"
    assert result.query.time.to_payload() == {"date": "2025-10-01"}


def test_dropped_llm_connection_falls_through_to_anchors(monkeypatch: pytest.MonkeyPatch) -> None:
    def _disconnected(*_args: Any, **_kwargs: Any) -> Any:
        raise RemoteDisconnected("Remote end closed connection without response")

    monkeypatch.setattr("src.intent.llm_parser.urlopen", _disconnected)

    result = parse_query_with_source(
        "les sorties de gsb11 le 01-10-2025",
        llm_enabled=True,
        llm_api_key="sk-test",
    )

    assert result.source == "anchors"
    assert result.query.intent == QueryIntent.sorties
    assert result.query.time.to_payload() == {"date": "2025-10-01"}


def test_llm_is_not_called_when_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("src.intent.parser.extract_via_model", _never_called)
    assert [s.name for s in build_strategies(llm_enabled=False)] == ["anchors", "fallback"]
    assert parse_query("stock gl90", llm_enabled=False).intent == QueryIntent.stock


def test_llm_without_key_is_skipped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LLM_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    assert [s.name for s in build_strategies(llm_enabled=True)] == ["anchors", "fallback"]


def test_run_strategies_without_strategies_returns_empty_query() -> None:
    result = run_strategies("les sorties de gsb11", [])
    assert result.query == StructuredQuery()


def test_decide_outcome() -> None:
    gaine = Gaine(value="gsb11")
    assert decide_outcome(StructuredQuery()) == Outcome.intent_missing
    assert decide_outcome(StructuredQuery(gaine=gaine)) == Outcome.intent_missing
    assert decide_outcome(StructuredQuery(intent=QueryIntent.sorties)) == Outcome.gaine_missing
    assert decide_outcome(StructuredQuery(intent=QueryIntent.sorties, gaine=gaine)) == Outcome.ready
    dated = StructuredQuery(
        intent=QueryIntent.sorties,
        gaine=gaine,
        time=TimeRef.single("2025-10-01"),
    )
    assert decide_outcome(dated) == Outcome.ready
    assert dated.is_complete
    assert not StructuredQuery(gaine=gaine).is_complete
