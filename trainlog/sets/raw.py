"""Source-neutral raw effort records.

Both readers (legacy JSON export and canonical CSV) reduce their rows to
``RawAction`` so a single converter handles every source. Units are already
folded into ``Unit`` here; values are already parsed leniently.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trainlog.sets.parsing import safe_float
from trainlog.sets.units import Unit


class RawEffort(BaseModel):
    """One unit-tagged value as recorded by the source."""

    model_config = ConfigDict(frozen=True)

    value: float = 0.0
    unit: Unit = Unit.UNKNOWN
    imperial: float | None = None

    @field_validator("value", mode="before")
    @classmethod
    def parse_value(cls, v: Any) -> float:
        return safe_float(v)

    @field_validator("unit", mode="before")
    @classmethod
    def parse_unit(cls, v: Any) -> Unit:
        return Unit.parse(v)

    @field_validator("imperial", mode="before")
    @classmethod
    def parse_imperial(cls, v: Any) -> float | None:
        parsed = safe_float(v)
        return parsed or None


class RawAction(BaseModel):
    """One performed effort (a set) before conversion."""

    model_config = ConfigDict(frozen=True)

    efforts: tuple[RawEffort, ...] = ()
    notes: str | None = None
    rpe: float = 0.0
    timestamp: str | None = None
    exercise_name: str | None = None
    source: dict[str, Any] = Field(default_factory=dict)

    @field_validator("rpe", mode="before")
    @classmethod
    def parse_rpe(cls, v: Any) -> float:
        return safe_float(v)

    @field_validator("timestamp", "exercise_name", mode="before")
    @classmethod
    def text_or_none(cls, v: Any) -> str | None:
        return v if isinstance(v, str) and v.strip() else None

    @field_validator("notes", mode="before")
    @classmethod
    def blank_notes_to_none(cls, v: Any) -> str | None:
        if v is None:
            return None
        text = str(v).strip()
        return text or None
