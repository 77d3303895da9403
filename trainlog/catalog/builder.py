"""Catalog builder with explicit ownership.

The builder is the only mutable view of the catalog during a run. Readers
hand it to whichever stage may discover new exercises and take back an
immutable ``ExerciseCatalog`` snapshot from ``build()`` at the end.
Entries are append-only: an id is never reassigned once handed out.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from trainlog.catalog.classify import infer_category, infer_equipment, infer_primary_type, split_modifier
from trainlog.catalog.models import CatalogMetadata, Exercise, ExerciseCatalog, PrimaryType
from trainlog.core.errors import CatalogError


class CatalogBuilder:
    """Append-only exercise catalog keyed by id and exact name."""

    def __init__(self, exercises: Iterable[Exercise] = ()):
        self._by_id: dict[int, Exercise] = {}
        self._by_name: dict[str, Exercise] = {}
        for exercise in exercises:
            self._insert(exercise)

    @classmethod
    def load(cls, path: Path) -> CatalogBuilder:
        """Load a catalog file, or start empty if the file does not exist.

        Args:
            path: Path to an exercises.json file

        Returns:
            Builder seeded with the file's exercises

        Raises:
            CatalogError: If the file exists but cannot be parsed
        """
        if not path.exists():
            logger.info(f"No catalog at {path}, starting from an empty catalog")
            return cls()

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            raw_exercises = data["exercises"] if isinstance(data, dict) else data
            exercises = [Exercise.model_validate(item) for item in raw_exercises]
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValidationError) as e:
            raise CatalogError(f"Failed to read exercise catalog {path}: {e!s}") from e

        builder = cls(exercises)
        logger.info(f"Loaded {len(builder)} exercises from {path}")
        return builder

    def _insert(self, exercise: Exercise) -> None:
        if exercise.id in self._by_id:
            raise CatalogError(f"Duplicate exercise id {exercise.id} ({exercise.name!r})")
        self._by_id[exercise.id] = exercise
        # First entry wins when a name is listed twice
        self._by_name.setdefault(exercise.name, exercise)

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, exercise_id: object) -> bool:
        return exercise_id in self._by_id

    def get(self, exercise_id: int) -> Exercise | None:
        return self._by_id.get(exercise_id)

    def find_by_name(self, name: str) -> Exercise | None:
        return self._by_name.get(name)

    def next_id(self) -> int:
        return max(self._by_id, default=0) + 1

    def ensure(self, name: str, primary_type: PrimaryType | None = None) -> Exercise:
        """Return the exercise with this exact name, creating it if needed.

        New entries get the next free id and attributes inferred from the
        name. ``primary_type`` overrides the inferred type for new entries
        only; an existing entry is returned untouched.
        """
        existing = self._by_name.get(name)
        if existing is not None:
            return existing

        base_exercise, modifier = split_modifier(name)
        exercise = Exercise(
            id=self.next_id(),
            name=name,
            primary_type=primary_type or infer_primary_type(name),
            base_exercise=base_exercise,
            modifier=modifier,
            equipment=infer_equipment(name),
            category=infer_category(name),
        )
        self._insert(exercise)
        logger.debug(f"Created exercise {exercise.id}: {name!r} ({exercise.primary_type})")
        return exercise

    def exercises(self) -> list[Exercise]:
        return sorted(self._by_id.values(), key=lambda ex: ex.id)

    def build(self, export_date: str | None = None) -> ExerciseCatalog:
        """Snapshot the catalog as an immutable value."""
        exercises = tuple(self.exercises())
        return ExerciseCatalog(
            metadata=CatalogMetadata(
                export_date=export_date or datetime.now(UTC).isoformat(),
                count=len(exercises),
            ),
            exercises=exercises,
        )
