"""Artifact writers.

Every artifact is pretty-printed UTF-8 JSON; the dashboard loads the files
verbatim. Writers return the number of bytes written so the summary can
report file sizes without a second stat call.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from loguru import logger

from trainlog.catalog.models import ExerciseCatalog
from trainlog.sessions.models import Session, Summary

BYTES_PER_MB = 1024 * 1024


def export_timestamp() -> str:
    """Current UTC time as an ISO string with millisecond precision and a Z suffix."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_size_mb(size_bytes: int) -> str:
    return f"{size_bytes / BYTES_PER_MB:.2f}"


def write_json(path: Path, payload: Any) -> int:
    """Write ``payload`` as indented JSON, creating parent directories.

    Returns:
        Size of the written file in bytes
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    encoded = json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")
    path.write_bytes(encoded)
    return len(encoded)


def sessions_filename(year: str) -> str:
    return f"sessions_{year}.json"


def write_exercises(output_dir: Path, catalog: ExerciseCatalog) -> Path:
    path = output_dir / "exercises.json"
    write_json(path, catalog.to_json())
    logger.info(f"Exercises saved to {path} ({catalog.metadata.count} exercises)")
    return path


def write_year_sessions(output_dir: Path, year: str, sessions: list[Session], export_date: str) -> int:
    """Write sessions_<year>.json, replacing any previous file for the year.

    Returns:
        Size of the written file in bytes
    """
    path = output_dir / sessions_filename(year)
    payload = {
        "metadata": {"exportDate": export_date, "year": year, "count": len(sessions)},
        "sessions": [session.to_json() for session in sessions],
    }
    size = write_json(path, payload)
    logger.info(f"Sessions for {year} saved to {path} ({format_size_mb(size)} MB, {len(sessions)} sessions)")
    return size


def write_summary(output_dir: Path, summary: Summary) -> Path:
    path = output_dir / "summary.json"
    write_json(path, summary.to_json())
    logger.info(f"Summary saved to {path}")
    return path
