"""Tests for the exercise catalog builder and attribute inference.

Tests cover:
- Loading (missing file, wrapped and bare lists, malformed input)
- Append-only id assignment for new exercises
- Primary type, equipment, modifier and category inference from names
"""

import json

import pytest

from trainlog.catalog.builder import CatalogBuilder
from trainlog.catalog.classify import infer_category, infer_equipment, infer_primary_type, split_modifier
from trainlog.catalog.models import Exercise, PrimaryType
from trainlog.core.errors import CatalogError


class TestLoad:
    """Test reading exercises.json."""

    def test_missing_file_starts_empty(self, tmp_path):
        builder = CatalogBuilder.load(tmp_path / "exercises.json")
        assert len(builder) == 0
        assert builder.next_id() == 1

    def test_wrapped_catalog(self, tmp_path):
        path = tmp_path / "exercises.json"
        path.write_text(
            json.dumps(
                {
                    "metadata": {"exportDate": "2024-01-01T00:00:00.000Z", "count": 1},
                    "exercises": [{"id": 7, "name": "Squat", "primaryType": "resistance", "baseExercise": "Squat"}],
                }
            )
        )
        builder = CatalogBuilder.load(path)
        assert builder.get(7).base_exercise == "Squat"
        assert 7 in builder

    def test_bare_list(self, tmp_path):
        path = tmp_path / "exercises.json"
        path.write_text(json.dumps([{"id": 1, "name": "Plank", "primaryType": "duration"}]))
        assert CatalogBuilder.load(path).find_by_name("Plank").primary_type == PrimaryType.DURATION

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            json.dumps({"exercises": [{"name": "No Id"}]}),
            json.dumps({"exercises": [{"id": 1, "name": "A", "primaryType": "flying"}]}),
            json.dumps({"metadata": {}}),
        ],
    )
    def test_malformed_catalog_raises(self, tmp_path, content):
        path = tmp_path / "exercises.json"
        path.write_text(content)
        with pytest.raises(CatalogError):
            CatalogBuilder.load(path)

    def test_duplicate_id_raises(self):
        with pytest.raises(CatalogError):
            CatalogBuilder([Exercise(id=1, name="A"), Exercise(id=1, name="B")])


class TestEnsure:
    """Test append-only creation of new entries."""

    def test_existing_name_returned(self, catalog):
        assert catalog.ensure("Squat").id == 2
        assert len(catalog) == 6

    def test_new_name_gets_next_id(self, catalog):
        exercise = catalog.ensure("Dumbbell Curl (Hammer)")
        assert exercise.id == 7
        assert exercise.primary_type == PrimaryType.RESISTANCE
        assert exercise.base_exercise == "Dumbbell Curl"
        assert exercise.modifier == "Hammer"
        assert exercise.equipment == "Dumbbell"
        assert exercise.category == "Upper Body Pull"

    def test_ids_never_reused(self):
        builder = CatalogBuilder([Exercise(id=4, name="Squat")])
        assert builder.ensure("Running").id == 5
        assert builder.ensure("Plank").id == 6

    def test_explicit_primary_type(self, catalog):
        assert catalog.ensure("Sled Push", PrimaryType.DISTANCE).primary_type == PrimaryType.DISTANCE

    def test_build_snapshot(self, catalog):
        catalog.ensure("Hip Thrust")
        snapshot = catalog.build("2024-01-01T00:00:00.000Z")
        assert snapshot.metadata.count == 7
        assert [e.id for e in snapshot.exercises] == [1, 2, 3, 4, 5, 6, 7]
        data = snapshot.to_json()
        assert data["metadata"] == {"exportDate": "2024-01-01T00:00:00.000Z", "count": 7}
        assert data["exercises"][2] == {"id": 3, "name": "Running", "primaryType": "distance", "category": "Cardio"}


class TestInference:
    """Test name-based attribute rules."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Plank", PrimaryType.DURATION),
            ("Dead Hang", PrimaryType.DURATION),
            ("Hang Power Clean", PrimaryType.RESISTANCE),
            ("Running", PrimaryType.DISTANCE),
            ("Farmer's Carry", PrimaryType.DISTANCE),
            ("Rowing (Machine)", PrimaryType.DISTANCE),
            ("Crunch", PrimaryType.RESISTANCE),
            ("Barbell Row", PrimaryType.RESISTANCE),
            ("Narrow Grip Bench", PrimaryType.RESISTANCE),
            ('Box Jump (24")', PrimaryType.COMPLEX),
            ("Burpees", PrimaryType.COMPLEX),
            ("Bench Press", PrimaryType.RESISTANCE),
            ("", PrimaryType.RESISTANCE),
        ],
    )
    def test_primary_type(self, name, expected):
        assert infer_primary_type(name) == expected

    def test_split_modifier(self):
        assert split_modifier("Bench Press (Paused)") == ("Bench Press", "Paused")
        assert split_modifier("Bench Press") == (None, None)
        assert split_modifier("Squat ()") == ("Squat", None)

    def test_equipment_prefers_smith_machine(self):
        assert infer_equipment("Smith Machine Squat") == "Smith Machine"
        assert infer_equipment("Leg Press Machine") == "Machine"
        assert infer_equipment("Pull Up") is None

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Front Squat", "Lower Body"),
            ("Overhead Press", "Upper Body Push"),
            ("Lat Pulldown", "Upper Body Pull"),
            ("Power Clean", "Olympic Lifting"),
            ("Sit Up", "Core"),
            ("Jump Rope", "Cardio"),
            ("Hip Thrust", None),
        ],
    )
    def test_category(self, name, expected):
        assert infer_category(name) == expected
