"""Reader for the legacy social-fitness export.

The export is one JSON object keyed by exercise name. Each value is a list of
sessions, each session holding an ``actions`` list of raw effort records:

    {"Barbell Squat": [
        {"id": 1, "actions": [
            {"actiondate": "2014-03-05T18:30:00",
             "effort0": 100, "effort0_unit": {"abbr": "kg"}, "effort0_imperial": 220.46,
             "effort1": 5, "effort1_unit": "reps",
             "notes": "...", "action": {"name": "Barbell Squat"}}]}]}

Unit tags appear either as a bare string or as an object with ``abbr``; both
are folded into ``Unit`` by ``RawEffort``.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict

from trainlog.ingestion.stream_parser import IncrementalObjectParser
from trainlog.sets.raw import RawAction, RawEffort

MAX_EFFORT_SLOTS = 6
DEFAULT_CHUNK_SIZE = 65536


class LegacyExerciseHistory(BaseModel):
    """Every recorded session of one legacy exercise."""

    model_config = ConfigDict(frozen=True)

    name: str
    sessions: tuple[dict[str, Any], ...]


def iter_legacy_export(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[LegacyExerciseHistory]:
    """Stream exercise histories out of the legacy export.

    The file is read ``chunk_size`` characters at a time; only the member
    currently being assembled is held in memory.

    Args:
        path: Path to the export file
        chunk_size: Characters per read

    Yields:
        One LegacyExerciseHistory per top-level member

    Raises:
        StreamParseError: If the file is not a well-formed object of members
    """
    parser = IncrementalObjectParser()
    processed = 0

    with path.open(encoding="utf-8") as handle:
        while chunk := handle.read(chunk_size):
            for name, value in parser.feed(chunk):
                if not isinstance(value, list):
                    logger.warning(f"Skipping legacy exercise {name!r}: expected a list of sessions, got {type(value).__name__}")
                    continue
                sessions = tuple(s for s in value if isinstance(s, dict))
                processed += 1
                if processed % 10 == 0:
                    logger.info(f"Processed {processed} legacy exercises...")
                yield LegacyExerciseHistory(name=name, sessions=sessions)

    parser.close()
    logger.info(f"Processed {processed} legacy exercises ({parser.skipped} values skipped)")


def _efforts(action: dict[str, Any]) -> tuple[RawEffort, ...]:
    efforts: list[RawEffort] = []
    for slot in range(MAX_EFFORT_SLOTS):
        value = action.get(f"effort{slot}")
        if value is None or value == "":
            continue
        efforts.append(
            RawEffort(
                value=value,
                unit=action.get(f"effort{slot}_unit"),
                imperial=action.get(f"effort{slot}_imperial"),
            )
        )
    return tuple(efforts)


def _source_fields(action: dict[str, Any]) -> dict[str, Any]:
    keep = {}
    for slot in range(MAX_EFFORT_SLOTS):
        for suffix in ("", "_unit", "_imperial"):
            key = f"effort{slot}{suffix}"
            if key in action:
                keep[key] = action[key]
    return keep


def legacy_actions(session: dict[str, Any]) -> list[RawAction]:
    """Normalise a legacy session's actions into RawAction records."""
    actions = session.get("actions")
    if not isinstance(actions, list):
        return []

    raw_actions: list[RawAction] = []
    for action in actions:
        if not isinstance(action, dict):
            logger.warning(f"Skipping malformed legacy action: {action!r}")
            continue
        action_info = action.get("action")
        raw_actions.append(
            RawAction(
                efforts=_efforts(action),
                notes=action.get("notes"),
                rpe=action.get("rpe"),
                timestamp=action.get("actiondate"),
                exercise_name=action_info.get("name") if isinstance(action_info, dict) else None,
                source=_source_fields(action),
            )
        )
    return raw_actions


def session_timestamp(session: dict[str, Any], actions: list[RawAction]) -> str | None:
    """Timestamp that keys a legacy session: its first action's, else its own date."""
    if actions and actions[0].timestamp:
        return actions[0].timestamp
    fallback = session.get("date")
    return fallback if isinstance(fallback, str) else None
