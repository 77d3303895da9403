"""Tests for raw-effort to typed-set conversion.

Tests cover:
- Routing by unit tag for each primary type
- kg and km conversion into pound and mile
- Box-jump height and weighted-vest load extraction
- Empty actions produce no set
- Outliers are kept as recorded, with debug data that is never serialized
"""

import pytest

from trainlog.catalog.models import Exercise, PrimaryType
from trainlog.core.errors import SetValidationError
from trainlog.ingestion.canonical_csv import row_to_action
from trainlog.sets.converter import box_jump_height, convert_action, vest_load
from trainlog.sets.models import ComplexSet, Distance, DistanceSet, DurationSet, ResistanceSet, allowed_fields, make_set
from trainlog.sets.raw import RawAction, RawEffort


def _action(*efforts, **kwargs) -> RawAction:
    return RawAction(efforts=tuple(RawEffort(value=v, unit=u) for v, u in efforts), **kwargs)


@pytest.fixture
def squat():
    return Exercise(id=2, name="Squat", primary_type=PrimaryType.RESISTANCE)


class TestResistance:
    """Test resistance sets."""

    def test_kilograms_converted_to_pounds(self, squat):
        workout_set = convert_action(_action((100, {"abbr": "kg"}), (5, "reps")), squat)
        assert isinstance(workout_set, ResistanceSet)
        assert workout_set.to_json() == {"reps": 5, "weight": {"value": 220.462, "unit": "pound"}}

    def test_imperial_value_preferred(self, squat):
        action = RawAction(efforts=(RawEffort(value=100, unit="kg", imperial=220.46), RawEffort(value=5, unit="reps")))
        assert convert_action(action, squat).weight.value == 220.46

    def test_slot_order_does_not_matter(self, squat):
        first = convert_action(_action((5, "reps"), (135, "lb")), squat)
        second = convert_action(_action((135, "lb"), (5, "reps")), squat)
        assert first == second

    def test_canonical_csv_row(self, squat):
        row = {"Date": "2024-03-01 08:00:00", "Exercise Name": "Squat", "Weight": "135", "Reps": "5", "Set Order": "1"}
        workout_set = convert_action(row_to_action(row), squat)
        assert workout_set.to_json() == {"reps": 5, "weight": {"value": 135.0, "unit": "pound"}}

    def test_distance_effort_dropped(self, squat):
        workout_set = convert_action(_action((5, "reps"), (1, "mi")), squat)
        assert workout_set.to_json() == {"reps": 5}

    def test_rpe_recorded_when_in_range(self, squat):
        assert convert_action(_action((5, "reps"), rpe="8.5"), squat).rpe == 8.5

    def test_rpe_out_of_range_not_recorded(self, squat, log_messages):
        workout_set = convert_action(_action((5, "reps"), rpe=11), squat)
        assert workout_set.rpe is None
        assert workout_set.reps == 5
        assert any("RPE 11" in m and "not recorded" in m for m in log_messages)


class TestOtherTypes:
    """Test distance, duration and complex routing."""

    def test_distance_in_kilometers(self):
        running = Exercise(id=3, name="Running", primary_type=PrimaryType.DISTANCE)
        workout_set = convert_action(_action((5, "km"), (1800, "sec"), (3, "reps")), running)
        assert isinstance(workout_set, DistanceSet)
        assert workout_set.distance.value == pytest.approx(3.106855)
        assert workout_set.seconds == 1800
        assert "reps" not in workout_set.to_json()

    def test_loaded_carry(self):
        carry = Exercise(id=7, name="Farmer's Carry", primary_type=PrimaryType.DISTANCE)
        workout_set = convert_action(_action((100, "yd"), (70, "lb")), carry)
        assert workout_set.to_json()["primaryLoad"] == {"value": 70.0, "unit": "pound"}

    def test_duration_in_minutes(self):
        plank = Exercise(id=4, name="Plank", primary_type=PrimaryType.DURATION)
        workout_set = convert_action(_action((1.5, "min"), (45, "lb")), plank)
        assert isinstance(workout_set, DurationSet)
        assert workout_set.to_json() == {"seconds": 90}

    def test_box_jump_height_from_name(self):
        box_jump = Exercise(id=5, name='Box Jump (24")', primary_type=PrimaryType.COMPLEX)
        workout_set = convert_action(_action((10, "reps")), box_jump)
        assert isinstance(workout_set, ComplexSet)
        assert workout_set.to_json() == {"reps": 10, "height": {"value": 24.0, "unit": "inch"}}

    def test_height_not_added_to_resistance(self, squat):
        workout_set = convert_action(_action((5, "reps"), (24, "in")), squat)
        assert workout_set.to_json() == {"reps": 5}


class TestExtraction:
    """Test values pulled from names and notes."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ('Box Jump (24")', 24),
            ("Box Jump (30in)", 30),
            ("Box Jump (20'')", 20),
            ("Box Jump", None),
            ("Squat (24)", None),
            (None, None),
        ],
    )
    def test_box_jump_height(self, name, expected):
        assert box_jump_height(name) == expected

    def test_vest_load(self):
        load = vest_load("Wore 20 lb vest today")
        assert load.type == "vest"
        assert load.weight.value == 20

    def test_vest_plural(self):
        assert vest_load("40lbs vest").weight.value == 40

    def test_no_vest(self):
        assert vest_load("felt heavy") is None

    def test_vest_on_set(self):
        pull_up = Exercise(id=8, name="Pull Up", primary_type=PrimaryType.RESISTANCE)
        workout_set = convert_action(_action((10, "reps"), notes="20 lb vest"), pull_up)
        assert workout_set.to_json() == {
            "reps": 10,
            "notes": "20 lb vest",
            "additionalLoad": {"weight": {"value": 20.0, "unit": "pound"}, "type": "vest"},
        }


class TestEdgeCases:
    """Empty actions and outliers."""

    def test_empty_action_yields_none(self, squat):
        assert convert_action(_action((0, "reps"), ("", "lb")), squat) is None

    def test_notes_alone_are_not_a_set(self, squat):
        assert convert_action(_action(notes="skipped, sore knee"), squat) is None

    def test_outlier_kept(self, squat, log_messages):
        workout_set = convert_action(_action((150, "reps"), (135, "lb")), squat)
        assert workout_set.reps == 150
        assert any("Unusually high reps" in m for m in log_messages)

    def test_suspicious_row_debug_not_serialized(self, squat):
        action = RawAction(
            efforts=(RawEffort(value=60, unit="reps"), RawEffort(value=2.5, unit="lb")),
            source={"originalWeight": "2.5", "originalReps": "60"},
        )
        workout_set = convert_action(action, squat)
        assert workout_set.debug == {"originalWeight": "2.5", "originalReps": "60"}
        assert "debug" not in workout_set.to_json()

    def test_olympic_rep_count_flagged(self, log_messages):
        clean = Exercise(id=6, name="Power Clean", primary_type=PrimaryType.RESISTANCE, category="Olympic Lifting")
        workout_set = convert_action(_action((40, "reps"), (95, "lb")), clean)
        assert workout_set.reps == 40
        assert any("Olympic lift" in m for m in log_messages)


class TestSetModels:
    """Field legality per primary type."""

    def test_allowed_fields(self):
        assert allowed_fields(PrimaryType.RESISTANCE) == {"reps", "weight"}
        assert allowed_fields(PrimaryType.DURATION) == {"seconds", "reps"}
        assert "height" in allowed_fields(PrimaryType.COMPLEX)

    def test_illegal_field_rejected(self):
        with pytest.raises(SetValidationError):
            make_set(PrimaryType.RESISTANCE, reps=5, distance=Distance(value=1.0))

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            make_set(PrimaryType.DURATION, seconds=-1)
