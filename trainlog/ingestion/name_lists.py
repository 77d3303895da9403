"""Readers for the flat exercise-name lists used by the matcher."""

from __future__ import annotations

from pathlib import Path

from loguru import logger


def read_name_list(path: Path) -> list[str]:
    """Read a newline-delimited list of exercise names.

    Blank lines are dropped and surrounding whitespace is stripped. The first
    occurrence of a repeated name keeps its position.
    """
    seen: set[str] = set()
    names: list[str] = []
    with path.open(encoding="utf-8") as handle:
        for line in handle:
            name = line.strip()
            if not name or name in seen:
                continue
            seen.add(name)
            names.append(name)
    logger.debug(f"Read {len(names)} exercise names from {path}")
    return names
