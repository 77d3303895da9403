"""Reader for the mobile-app CSV export.

One row per performed set. Columns used:
Date, Workout Name, Exercise Name, Set Order, Weight, Reps, Distance,
Seconds, Notes, Workout Notes, RPE, Duration.

The app records weight in pounds and distance in miles. Quoted fields may
contain commas and line breaks.
"""

from __future__ import annotations

import csv
import re
from collections.abc import Iterator
from pathlib import Path

from loguru import logger

from trainlog.core.errors import ExportFormatError
from trainlog.sets.parsing import safe_int
from trainlog.sets.raw import RawAction, RawEffort
from trainlog.sets.units import Unit

REQUIRED_COLUMNS: tuple[str, ...] = ("Date", "Exercise Name")
CANONICAL_COLUMNS: tuple[str, ...] = (
    "Date",
    "Workout Name",
    "Exercise Name",
    "Set Order",
    "Weight",
    "Reps",
    "Distance",
    "Seconds",
    "Notes",
    "Workout Notes",
    "RPE",
    "Duration",
)

_HOURS_RE = re.compile(r"(\d+)\s*h")
_MINUTES_RE = re.compile(r"(\d+)\s*m(?!s)")
_SECONDS_RE = re.compile(r"(\d+)\s*s")


def read_canonical_rows(path: Path) -> Iterator[dict[str, str]]:
    """Yield the data rows of a canonical CSV export.

    Rows with more values than the header (an unquoted comma) or that the
    csv module cannot tokenise are logged and skipped. Missing trailing
    values are filled with "".

    Args:
        path: Path to the CSV export

    Yields:
        Row dict keyed by column name

    Raises:
        ExportFormatError: If the header lacks a required column
    """
    with path.open(encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle, restval="")
        header = [name.strip() for name in (reader.fieldnames or [])]
        missing = [column for column in REQUIRED_COLUMNS if column not in header]
        if missing:
            raise ExportFormatError(f"CSV export {path} is missing required columns: {', '.join(missing)}")
        reader.fieldnames = header

        while True:
            try:
                row = next(reader)
            except StopIteration:
                break
            except csv.Error as e:
                logger.warning(f"Error parsing CSV row near line {reader.line_num}: {e}")
                continue

            if None in row:
                logger.warning(f"Skipping CSV row {reader.line_num} with extra values: {row}")
                continue
            yield {key: (value or "").strip() for key, value in row.items()}


def parse_duration(text: str | None) -> int | None:
    """Parse a workout duration like "1h 5m" into minutes.

    Also accepts "45m", "1h", "90s" and a bare number of minutes.
    Returns None when no positive duration is present.
    """
    if not text or not text.strip():
        return None
    text = text.strip().lower()

    if text.replace(".", "", 1).isdigit():
        minutes = safe_int(text)
        return minutes or None

    hours = _HOURS_RE.search(text)
    mins = _MINUTES_RE.search(text)
    secs = _SECONDS_RE.search(text)
    total = 0
    if hours:
        total += int(hours.group(1)) * 60
    if mins:
        total += int(mins.group(1))
    if secs:
        total += int(secs.group(1)) // 60
    return total or None


def row_to_action(row: dict[str, str]) -> RawAction:
    """Reduce a CSV row to a unit-tagged RawAction."""
    return RawAction(
        efforts=(
            RawEffort(value=row.get("Weight"), unit=Unit.LB),
            RawEffort(value=row.get("Reps"), unit=Unit.REPS),
            RawEffort(value=row.get("Distance"), unit=Unit.MI),
            RawEffort(value=row.get("Seconds"), unit=Unit.SEC),
        ),
        notes=row.get("Notes"),
        rpe=row.get("RPE"),
        timestamp=row.get("Date"),
        exercise_name=row.get("Exercise Name"),
        source={
            "originalWeight": row.get("Weight", ""),
            "originalReps": row.get("Reps", ""),
            "setOrder": row.get("Set Order", ""),
        },
    )
