"""Turn each source's raw records into sessions.

Both builders resolve exercises through the catalog builder they are handed
and may append to it: the canonical CSV introduces every exercise it names,
and legacy names without a usable match become new catalog entries.
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from trainlog.catalog.builder import CatalogBuilder
from trainlog.catalog.models import Exercise
from trainlog.ingestion.canonical_csv import parse_duration, row_to_action
from trainlog.ingestion.legacy_export import LegacyExerciseHistory, legacy_actions, session_timestamp
from trainlog.ingestion.timestamps import split_timestamp
from trainlog.matching.report import MappingReport
from trainlog.sessions.accumulator import SessionAccumulator
from trainlog.sets.converter import convert_action
from trainlog.sets.parsing import safe_int

CANONICAL_SOURCE = "canonical"
LEGACY_SOURCE = "legacy"
DEFAULT_CANONICAL_SESSION_NAME = "Untitled"
DEFAULT_LEGACY_SESSION_NAME = "Legacy Workout"


def _text(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def build_canonical_sessions(rows: Iterable[dict[str, str]], catalog: CatalogBuilder) -> SessionAccumulator:
    """Group canonical CSV rows into sessions.

    Args:
        rows: Row dicts from ``read_canonical_rows``
        catalog: Catalog builder; unseen exercise names are appended

    Returns:
        Accumulator holding the canonical sessions and raw entry counts
    """
    accumulator = SessionAccumulator(CANONICAL_SOURCE)
    skipped = 0

    for row in rows:
        exercise_name = row.get("Exercise Name", "")
        key = split_timestamp(row.get("Date"))
        if key is None or not exercise_name:
            skipped += 1
            logger.warning(f"Skipping CSV row without a usable date or exercise: {row}")
            continue

        date, time = key
        accumulator.count_entry(date)
        exercise = catalog.ensure(exercise_name)

        # Session metadata comes from the first row seen for the key
        session = accumulator.session(
            date,
            time,
            row.get("Workout Name") or DEFAULT_CANONICAL_SESSION_NAME,
            duration=parse_duration(row.get("Duration")),
            notes=row.get("Workout Notes") or None,
        )
        workout_set = convert_action(row_to_action(row), exercise)
        if workout_set is None:
            logger.debug(f"No measurements in CSV row for {exercise_name} on {date}")
            continue
        accumulator.add_sets(date, time, session.name, exercise.id, [workout_set])

    logger.info(f"Built {len(accumulator)} canonical sessions ({skipped} rows skipped)")
    return accumulator


def resolve_legacy_exercise(name: str, mapping: MappingReport, catalog: CatalogBuilder) -> Exercise:
    """Catalog entry for a legacy exercise name, creating one if unmatched."""
    entry = mapping.resolve(name)
    if entry is not None:
        if entry.canonical_id is not None:
            exercise = catalog.get(entry.canonical_id)
            if exercise is not None:
                return exercise
        return catalog.ensure(entry.canonical)
    return catalog.ensure(name)


def build_legacy_sessions(
    histories: Iterable[LegacyExerciseHistory],
    mapping: MappingReport,
    catalog: CatalogBuilder,
) -> SessionAccumulator:
    """Group legacy exercise histories into sessions.

    Args:
        histories: Exercise histories streamed from the legacy export
        mapping: Mapping report resolving legacy names to catalog ids
        catalog: Catalog builder; unmatched legacy names are appended

    Returns:
        Accumulator holding the legacy sessions and raw entry counts
    """
    accumulator = SessionAccumulator(LEGACY_SOURCE)
    skipped = 0

    for history in histories:
        exercise = resolve_legacy_exercise(history.name, mapping, catalog)

        for session in history.sessions:
            actions = legacy_actions(session)
            if not actions:
                continue
            key = split_timestamp(session_timestamp(session, actions))
            if key is None:
                skipped += 1
                logger.warning(f"Skipping {history.name} session without a usable timestamp: {session.get('id')}")
                continue

            date, time = key
            accumulator.count_entry(date, len(actions))
            sets = [s for s in (convert_action(action, exercise) for action in actions) if s is not None]
            if not sets:
                continue

            accumulator.add_sets(
                date,
                time,
                _text(session.get("name")) or DEFAULT_LEGACY_SESSION_NAME,
                exercise.id,
                sets,
                duration=safe_int(session.get("duration")) or None,
                notes=_text(session.get("notes")),
            )

    logger.info(f"Built {len(accumulator)} legacy sessions ({skipped} sessions skipped)")
    return accumulator
