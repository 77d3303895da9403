"""Convert raw effort records into typed sets.

The exercise's primary type selects a routing template. Each effort is routed
by its unit tag, never by the slot it occupied in the source record, because
the two sources place the primary and secondary efforts in different slots.

Template (unit class -> set field):

| primary type | reps | weight       | distance | time    | height |
|--------------|------|--------------|----------|---------|--------|
| resistance   | reps | weight       |          |         |        |
| distance     |      | primary_load | distance | seconds |        |
| duration     | reps |              |          | seconds |        |
| complex      | reps | primary_load | distance | seconds | height |

Values are converted to pound / mile / seconds / inch. Outliers are logged
and kept as recorded. The one exception is an RPE above 10: sets only accept
RPE on the 0-10 scale, so it is logged and left off the set.
"""

from __future__ import annotations

import re
from typing import Any

from loguru import logger

from trainlog.catalog.classify import OLYMPIC_LIFTING
from trainlog.catalog.models import Exercise, PrimaryType
from trainlog.sets.models import AdditionalLoad, BaseSet, Distance, Height, Weight, allowed_fields, make_set
from trainlog.sets.raw import RawAction, RawEffort
from trainlog.sets.units import Unit, to_inches, to_miles, to_pounds, to_seconds

MAX_PLAUSIBLE_REPS = 100
MAX_PLAUSIBLE_WEIGHT_LB = 1000
MAX_PLAUSIBLE_OLYMPIC_REPS = 30
MAX_RPE = 10
# Decimal places kept after a unit conversion (drops float noise like 220.46200000000002)
CONVERTED_PRECISION = 6

_WEIGHT_FIELD: dict[PrimaryType, str] = {
    PrimaryType.RESISTANCE: "weight",
    PrimaryType.DISTANCE: "primary_load",
    PrimaryType.COMPLEX: "primary_load",
}

_BOX_JUMP_HEIGHT_RE = re.compile(r"\((\d+)\s*(?:\"|''|”|″|in\.?)?\)\s*$", re.IGNORECASE)
_VEST_RE = re.compile(r"(\d+)\s*lbs?\s+vest", re.IGNORECASE)


def _route(effort: RawEffort, primary_type: PrimaryType) -> tuple[str, Any] | None:
    """Map one effort to a (field, canonical value) pair for the template."""
    unit = effort.unit
    if unit == Unit.REPS:
        if primary_type == PrimaryType.DISTANCE:
            return None
        return "reps", int(effort.value)
    if unit.is_weight:
        field = _WEIGHT_FIELD.get(primary_type)
        if field is None:
            return None
        return field, Weight(value=round(to_pounds(effort.value, unit, effort.imperial), CONVERTED_PRECISION))
    if unit.is_distance:
        if primary_type not in (PrimaryType.DISTANCE, PrimaryType.COMPLEX):
            return None
        return "distance", Distance(value=round(to_miles(effort.value, unit), CONVERTED_PRECISION))
    if unit.is_time:
        if primary_type == PrimaryType.RESISTANCE:
            return None
        return "seconds", to_seconds(effort.value, unit)
    if unit.is_height:
        if primary_type != PrimaryType.COMPLEX:
            return None
        return "height", Height(value=round(to_inches(effort.value, unit), CONVERTED_PRECISION))
    return None


def box_jump_height(name: str | None) -> int | None:
    """Height in inches from a name like "Box Jump (24")", or None."""
    if not name or "box jump" not in name.lower():
        return None
    match = _BOX_JUMP_HEIGHT_RE.search(name)
    return int(match.group(1)) if match else None


def vest_load(notes: str | None) -> AdditionalLoad | None:
    """Weighted-vest load from notes like "wore 20 lb vest", or None."""
    if not notes:
        return None
    match = _VEST_RE.search(notes)
    if not match:
        return None
    return AdditionalLoad(weight=Weight(value=int(match.group(1))), type="vest")


def _check_plausibility(fields: dict[str, Any], exercise: Exercise, action: RawAction) -> dict[str, Any] | None:
    """Log data-quality warnings; return debug info for suspicious rows."""
    reps = fields.get("reps") or 0
    load = fields.get("weight") or fields.get("primary_load")
    weight = load.value if load else 0.0

    if reps > MAX_PLAUSIBLE_REPS:
        logger.warning(f"Unusually high reps value ({reps}) for {exercise.name}")
    if weight > MAX_PLAUSIBLE_WEIGHT_LB:
        logger.warning(f"Unusually high weight value ({weight}) for {exercise.name}")
    if exercise.category == OLYMPIC_LIFTING and reps > MAX_PLAUSIBLE_OLYMPIC_REPS:
        logger.warning(f"Olympic lift {exercise.name} has {reps} reps, possible data issue")

    if ("clean" in exercise.name.lower() and reps > MAX_PLAUSIBLE_OLYMPIC_REPS) or (reps > 50 and 0 < weight < 5):
        return dict(action.source)
    return None


def convert_action(action: RawAction, exercise: Exercise) -> BaseSet | None:
    """Convert one raw action into the set variant for the exercise.

    Args:
        action: Source-neutral raw effort record
        exercise: Catalog entry the action belongs to

    Returns:
        Typed set, or None when the action carries no measurement
    """
    primary_type = exercise.primary_type
    fields: dict[str, Any] = {}

    for effort in action.efforts:
        if effort.value <= 0:
            continue
        routed = _route(effort, primary_type)
        if routed is None:
            logger.debug(f"Dropping {effort.unit} effort on {primary_type} exercise {exercise.name}")
            continue
        field, value = routed
        if field in fields:
            logger.debug(f"Ignoring second {field} value for {exercise.name}")
            continue
        if field in ("reps", "seconds") and value <= 0:
            continue
        fields[field] = value

    if "height" in allowed_fields(primary_type) and "height" not in fields:
        height = box_jump_height(exercise.name) or box_jump_height(action.exercise_name)
        if height:
            fields["height"] = Height(value=height)

    if action.notes:
        fields["notes"] = action.notes
        load = vest_load(action.notes)
        if load:
            fields["additional_load"] = load

    if action.rpe > 0:
        if action.rpe <= MAX_RPE:
            fields["rpe"] = action.rpe
        else:
            logger.warning(f"RPE {action.rpe} out of range for {exercise.name}, not recorded")

    debug = _check_plausibility(fields, exercise, action)
    if debug:
        fields["debug"] = debug

    workout_set = make_set(primary_type, **fields)
    if not workout_set.has_measurement():
        return None
    return workout_set
