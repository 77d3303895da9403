"""Session schema for the per-year artifacts."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from trainlog.sets.models import BaseSet

SessionKey = tuple[str, str]


class ExerciseSession(BaseModel):
    """One exercise performed inside one workout."""

    model_config = ConfigDict(populate_by_name=True)

    exercise_id: int = Field(alias="exerciseId")
    sets: list[SerializeAsAny[BaseSet]] = Field(default_factory=list)

    def to_json(self) -> dict:
        return {"exerciseId": self.exercise_id, "sets": [s.to_json() for s in self.sets]}


class Session(BaseModel):
    """One workout occurrence, keyed by (date, time)."""

    model_config = ConfigDict(populate_by_name=True)

    date: str
    time: str = ""
    name: str
    duration: int | None = None
    notes: str | None = None
    exercises: list[ExerciseSession] = Field(default_factory=list)

    @property
    def key(self) -> SessionKey:
        return (self.date, self.time)

    @property
    def year(self) -> str:
        return self.date.split("-", 1)[0]

    def to_json(self) -> dict:
        data: dict = {"date": self.date, "time": self.time, "name": self.name}
        if self.duration is not None:
            data["duration"] = self.duration
        if self.notes is not None:
            data["notes"] = self.notes
        data["exercises"] = [exercise.to_json() for exercise in self.exercises]
        return data


class YearStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    entries: int
    sessions: int
    json_size_mb: str = Field(alias="jsonSizeMB")


class Summary(BaseModel):
    """Contents of summary.json."""

    model_config = ConfigDict(populate_by_name=True)

    export_date: str = Field(alias="exportDate")
    total_exercises: int = Field(alias="totalExercises")
    yearly_stats: dict[str, YearStats] = Field(default_factory=dict, alias="yearlyStats")

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
