"""Structured query schema (Pydantic models).

This schema is the contract between the extraction strategies (anchors/fallback/LLM) and the
downstream inventory router. A query with `intent` or `gaine` missing is a valid *partial* result;
the orchestrator decides how to respond to it.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

GAINE_VALUE_PATTERN = r"^(gsb|gab|gl|gs)\d{1,5}$"
ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class QueryIntent(StrEnum):
    """Supported inventory query categories."""

    entrees = "entrees"
    sorties = "sorties"
    stock = "stock"


class Gaine(BaseModel):
    """A gaine identifier: known prefix immediately followed by digits (e.g. `gsb11`)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: Literal["prefix"] = "prefix"
    value: str = Field(pattern=GAINE_VALUE_PATTERN)


class TimeRef(BaseModel):
    """Temporal filter: unspecified, a single day, or an inclusive range.

    Dates are kept as ISO `YYYY-MM-DD` strings. The resolver does not perform calendar validation,
    so the values are not coerced into `datetime.date`.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    date: str | None = Field(default=None, pattern=ISO_DATE_PATTERN)
    from_: str | None = Field(default=None, alias="from", pattern=ISO_DATE_PATTERN)
    to: str | None = Field(default=None, pattern=ISO_DATE_PATTERN)

    @model_validator(mode="after")
    def validate_shape(self) -> TimeRef:
        """Enforce the three legal shapes: `{}`, `{date}` or `{from, to}`."""

        has_range_part = self.from_ is not None or self.to is not None
        if self.date is not None and has_range_part:
            raise ValueError("date and from/to are mutually exclusive")
        if has_range_part and (self.from_ is None or self.to is None):
            raise ValueError("a range requires both from and to")
        return self

    @classmethod
    def single(cls, day: str) -> TimeRef:
        return cls(date=day)

    @classmethod
    def between(cls, start: str, end: str) -> TimeRef:
        return cls(from_=start, to=end)

    @property
    def is_empty(self) -> bool:
        return self.date is None and self.from_ is None

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(by_alias=True, exclude_none=True)


class StructuredQuery(BaseModel):
    """Intent + gaine + time extracted from one utterance."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    intent: QueryIntent | None = None
    gaine: Gaine | None = None
    time: TimeRef = Field(default_factory=TimeRef)

    @property
    def is_complete(self) -> bool:
        """Whether both required fields (intent and gaine) are present."""

        return self.intent is not None and self.gaine is not None

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready representation sent to the inventory router."""

        return {
            "intent": self.intent.value if self.intent is not None else None,
            "gaine": self.gaine.model_dump() if self.gaine is not None else None,
            "time": self.time.to_payload(),
        }
