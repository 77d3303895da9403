"""Typed set records, one variant per primary type.

Each variant declares exactly the measurement fields that are legal for its
primary type and forbids everything else, so a distance can never end up on
a resistance set. Complex sets are the one variant that mixes dimensions.

All measurements are stored in canonical units (pound, mile, inch, seconds).
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from trainlog.catalog.models import PrimaryType
from trainlog.core.errors import SetValidationError

MEASUREMENT_FIELDS: tuple[str, ...] = ("reps", "weight", "distance", "seconds", "primary_load", "height")


class Weight(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: float
    unit: Literal["pound"] = "pound"


class Distance(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: float
    unit: Literal["mile"] = "mile"


class Height(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: float
    unit: Literal["inch"] = "inch"


class AdditionalLoad(BaseModel):
    """Load worn on top of the movement itself (vest, chains, backpack)."""

    model_config = ConfigDict(frozen=True)

    weight: Weight
    type: str


class BaseSet(BaseModel):
    """Metadata shared by every set variant."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    notes: str | None = None
    rpe: float | None = Field(default=None, ge=0, le=10)
    additional_load: AdditionalLoad | None = Field(default=None, alias="additionalLoad")
    # Raw source values kept for suspicious rows; never written out
    debug: dict[str, Any] | None = Field(default=None, exclude=True)

    def has_measurement(self) -> bool:
        """True when at least one measurement field is populated."""
        return any(getattr(self, name, None) is not None for name in MEASUREMENT_FIELDS)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ResistanceSet(BaseSet):
    """Weight and repetitions (bench press, squat, pull-up)."""

    reps: int | None = Field(default=None, ge=0)
    weight: Weight | None = None


class DistanceSet(BaseSet):
    """Distance covered, optionally timed or loaded (run, row, carry)."""

    distance: Distance | None = None
    seconds: int | None = Field(default=None, ge=0)
    primary_load: Weight | None = Field(default=None, alias="primaryLoad")


class DurationSet(BaseSet):
    """Time held, optionally with repetitions (plank, dead hang)."""

    seconds: int | None = Field(default=None, ge=0)
    reps: int | None = Field(default=None, ge=0)


class ComplexSet(BaseSet):
    """Multi-modal efforts (wall balls, box jumps, thrusters)."""

    reps: int | None = Field(default=None, ge=0)
    seconds: int | None = Field(default=None, ge=0)
    primary_load: Weight | None = Field(default=None, alias="primaryLoad")
    distance: Distance | None = None
    height: Height | None = None


WorkoutSet = ResistanceSet | DistanceSet | DurationSet | ComplexSet

SET_VARIANTS: dict[PrimaryType, type[BaseSet]] = {
    PrimaryType.RESISTANCE: ResistanceSet,
    PrimaryType.DISTANCE: DistanceSet,
    PrimaryType.DURATION: DurationSet,
    PrimaryType.COMPLEX: ComplexSet,
}


def set_variant(primary_type: PrimaryType) -> type[BaseSet]:
    return SET_VARIANTS[PrimaryType(primary_type)]


def allowed_fields(primary_type: PrimaryType) -> frozenset[str]:
    """Measurement fields a set of this primary type may carry."""
    variant = set_variant(primary_type)
    return frozenset(name for name in MEASUREMENT_FIELDS if name in variant.model_fields)


def make_set(primary_type: PrimaryType, **fields: Any) -> BaseSet:
    """Construct the set variant for a primary type.

    Raises:
        SetValidationError: If a field is illegal for the primary type or a
            value fails validation
    """
    variant = set_variant(primary_type)
    try:
        return variant(**fields)
    except ValidationError as e:
        raise SetValidationError(f"Invalid {primary_type} set: {e!s}") from e
