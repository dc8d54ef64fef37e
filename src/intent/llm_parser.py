"""Optional LLM-based extractor (feature-flagged).

The LLM is only allowed to produce **query JSON** (`{intent, gaine: {value}, time}`). Every field is
normalized independently and the result is discarded unless both intent and gaine survive
normalization: the model is never trusted to return a half-complete query that looks complete.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from http.client import HTTPException
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from src.intent.dates import resolve_date_phrase
from src.intent.dictionaries import intent_from_stem, normalize_gaine_value
from src.intent.schema import Gaine, QueryIntent, StructuredQuery, TimeRef

logger = logging.getLogger(__name__)


class LLMParserError(RuntimeError):
    """Raised when the LLM parser fails to return valid JSON."""


@dataclass(frozen=True)
class LLMConfig:
    """Configuration for the OpenAI-style Chat Completions API call."""

    api_key: str
    model: str = "gpt-4o-mini"
    api_base: str = "https://api.openai.com/v1"
    timeout_s: float = 30.0


def _load_prompt() -> str:
    prompt_path = Path(__file__).resolve().parent / "prompt_anchors_v1.md"
    return prompt_path.read_text(encoding="utf-8")


def _strip_code_fences(text: str) -> str:
    value = (text or "").strip()
    if value.startswith("```"):
        value = value.strip("`")
        # After stripping backticks, try to remove leading "json" marker.
        value = value.removeprefix("json").strip()
    return value


def _chat_completions_url(api_base: str) -> str:
    return api_base.rstrip("/") + "/chat/completions"


def request_extraction_json(user_text: str, *, config: LLMConfig) -> dict[str, Any]:
    """Call an LLM and return the parsed JSON object.

    The call is compatible with OpenAI-style `/v1/chat/completions` APIs and uses deterministic
    sampling with JSON-object output.
    """

    payload = {
        "model": config.model,
        "temperature": 0,
        "response_format": {"type": "json_object"},
        "messages": [
            {"role": "system", "content": _load_prompt()},
            {"role": "user", "content": f'Phrase: """{user_text}"""\nExtraire intent/gaine/time.'},
        ],
    }

    req = Request(
        _chat_completions_url(config.api_base),
        method="POST",
        headers={
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
        },
        data=json.dumps(payload).encode(),
    )

    try:
        with urlopen(req, timeout=config.timeout_s) as resp:  # noqa: S310 (explicit, feature-flagged network call)
            body = resp.read()
    except HTTPError as exc:
        raise LLMParserError(f"LLM HTTP error: {exc.code}") from exc
    except (OSError, HTTPException) as exc:
        raise LLMParserError("LLM connection error") from exc

    try:
        decoded = json.loads(body)
        content = decoded["choices"][0]["message"]["content"]
    except Exception as exc:  # noqa: BLE001
        raise LLMParserError("Unexpected LLM response format") from exc

    if not isinstance(content, str):
        raise LLMParserError("LLM message content is not text")

    try:
        obj = json.loads(_strip_code_fences(content))
    except json.JSONDecodeError as exc:
        raise LLMParserError("LLM did not return valid JSON") from exc

    if not isinstance(obj, dict):
        raise LLMParserError("LLM JSON is not an object")
    return obj


def normalize_intent(value: object) -> QueryIntent | None:
    if not isinstance(value, str) or not value.strip():
        return None
    return intent_from_stem(value.strip())


def normalize_time(value: object) -> TimeRef:
    """Normalize the model's time object (`{date}`, `{single}` or `{from, to}`) into a TimeRef."""

    if not isinstance(value, dict):
        return TimeRef()

    single = value.get("date") or value.get("single")
    if single:
        day = resolve_date_phrase(str(single))
        return TimeRef.single(day) if day else TimeRef()

    start, end = value.get("from"), value.get("to")
    if start and end:
        start_day = resolve_date_phrase(str(start))
        end_day = resolve_date_phrase(str(end))
        if start_day and end_day:
            return TimeRef.between(start_day, end_day)

    return TimeRef()


def normalize_model_output(obj: Any) -> StructuredQuery | None:
    """Validate and normalize a decoded model response.

    Returns:
        A complete StructuredQuery, or `None` if intent or gaine does not normalize.
    """

    if not isinstance(obj, dict):
        return None

    intent = normalize_intent(obj.get("intent"))
    raw_gaine = obj.get("gaine")
    gaine_value = normalize_gaine_value(raw_gaine.get("value")) if isinstance(raw_gaine, dict) else None
    if intent is None or gaine_value is None:
        return None

    return StructuredQuery(
        intent=intent,
        gaine=Gaine(value=gaine_value),
        time=normalize_time(obj.get("time")),
    )


def extract_via_model(user_text: str, *, config: LLMConfig) -> StructuredQuery | None:
    """Run the LLM extraction; any failure is treated as "no extraction" (`None`)."""

    try:
        obj = request_extraction_json(user_text, config=config)
    except LLMParserError as exc:
        logger.warning("llm extraction failed reason=%s", exc)
        return None

    query = normalize_model_output(obj)
    if query is None:
        logger.info("llm output rejected by normalization")
    return query


def llm_config_from_env(*, api_key: str | None = None) -> LLMConfig:
    """Build LLM config from environment variables.

    Environment variables (optional):
        - LLM_MODEL
        - LLM_API_BASE
        - LLM_TIMEOUT_S
    """

    key = api_key or os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY") or ""
    if not key:
        raise LLMParserError("LLM_API_KEY is required")

    timeout_s = float(os.getenv("LLM_TIMEOUT_S") or "30")
    return LLMConfig(
        api_key=key,
        model=os.getenv("LLM_MODEL") or "gpt-4o-mini",
        api_base=os.getenv("LLM_API_BASE") or "https://api.openai.com/v1",
        timeout_s=timeout_s,
    )
