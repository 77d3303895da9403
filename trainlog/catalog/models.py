"""Exercise catalog schema.

Serialised with the camelCase field names the dashboard reads, with unset
optional attributes omitted.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class PrimaryType(StrEnum):
    """Movement-measurement category; decides which fields a set may carry."""

    RESISTANCE = "resistance"
    DISTANCE = "distance"
    DURATION = "duration"
    COMPLEX = "complex"


class Exercise(BaseModel):
    """Canonical catalog entry."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int = Field(ge=1)
    name: str
    primary_type: PrimaryType = Field(default=PrimaryType.RESISTANCE, alias="primaryType")
    base_exercise: str | None = Field(default=None, alias="baseExercise")
    modifier: str | None = None
    equipment: str | None = None
    category: str | None = None

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CatalogMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    export_date: str = Field(alias="exportDate")
    count: int


class ExerciseCatalog(BaseModel):
    """Immutable snapshot of the catalog, as written to exercises.json."""

    model_config = ConfigDict(frozen=True)

    metadata: CatalogMetadata
    exercises: tuple[Exercise, ...]

    def to_json(self) -> dict:
        return {
            "metadata": self.metadata.model_dump(by_alias=True),
            "exercises": [exercise.to_json() for exercise in self.exercises],
        }
