"""Attribute inference for catalog entries created from free-text names.

All rules are keyword rules on the lower-cased name. Word boundaries are used
so that short keywords do not fire inside unrelated words ("run" in
"crunch", "row" in "narrow").
"""

from __future__ import annotations

import re

from trainlog.catalog.models import PrimaryType

_DURATION_PATTERNS: tuple[str, ...] = (
    r"\bplank",
    r"\bhold\b",
    r"\bhang(?:ing)?\b(?!\s+(?:power\s+|squat\s+)?(?:clean|snatch))",
    r"\bstatic\b",
    r"\bl[\s-]?sit\b",
    r"\bwall sit\b",
)

_DISTANCE_PATTERNS: tuple[str, ...] = (
    r"\brun(?:ning)?\b",
    r"\bwalk(?:ing)?\b",
    r"\bjog(?:ging)?\b",
    r"\bbike\b",
    r"\bcycling\b",
    r"\bswim(?:ming)?\b",
    r"\bcarry\b",
    r"\browing\b",
    r"\brower\b",
    r"\bmachine row\b",
    r"\brow\b.*\(machine\)",
    r"\bski[\s-]?erg\b",
)

_COMPLEX_PATTERNS: tuple[str, ...] = (
    r"\bburpee",
    r"\bwall ball",
    r"\bbox jump",
    r"\bkettlebell swing",
    r"\bthruster",
    r"\bdouble[\s-]under",
    r"\bclean and jerk\b",
    r"\bsnatch",
)

EQUIPMENT_DISPLAY: tuple[tuple[str, str], ...] = (
    ("barbell", "Barbell"),
    ("dumbbell", "Dumbbell"),
    ("kettlebell", "Kettlebell"),
    ("smith machine", "Smith Machine"),
    ("machine", "Machine"),
    ("cable", "Cable"),
)

_CATEGORY_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Lower Body", ("squat", "deadlift", "lunge", "leg press")),
    ("Upper Body Push", ("bench press", "chest press", "push", "shoulder press", "overhead press", "dip")),
    ("Upper Body Pull", ("row", "pull", "curl", "lat pulldown", "chin")),
    ("Olympic Lifting", ("clean", "snatch", "jerk")),
    ("Core", ("sit up", "crunch", "plank", "ab ", "twist")),
    ("Cardio", ("run", "row", "bike", "jump rope")),
)

OLYMPIC_LIFTING = "Olympic Lifting"


def _any_match(patterns: tuple[str, ...], text: str) -> bool:
    return any(re.search(pattern, text) for pattern in patterns)


def infer_primary_type(name: str | None) -> PrimaryType:
    """Guess the primary type of an exercise from its name.

    Args:
        name: Exercise display name

    Returns:
        Inferred primary type (resistance when nothing more specific fires)
    """
    if not name:
        return PrimaryType.RESISTANCE
    lowered = name.lower()

    if _any_match(_DURATION_PATTERNS, lowered):
        return PrimaryType.DURATION
    if _any_match(_DISTANCE_PATTERNS, lowered):
        return PrimaryType.DISTANCE
    if _any_match(_COMPLEX_PATTERNS, lowered):
        return PrimaryType.COMPLEX
    return PrimaryType.RESISTANCE


def split_modifier(name: str) -> tuple[str | None, str | None]:
    """Split "Bench Press (Paused)" into ("Bench Press", "Paused").

    Returns (None, None) when the name has no parenthetical.
    """
    if "(" not in name:
        return None, None
    base = name.split("(", 1)[0].strip() or None
    match = re.search(r"\((.*?)\)", name)
    modifier = match.group(1).strip() if match and match.group(1).strip() else None
    return base, modifier


def infer_equipment(name: str) -> str | None:
    lowered = name.lower()
    for term, display in EQUIPMENT_DISPLAY:
        if term in lowered:
            return display
    return None


def infer_category(name: str) -> str | None:
    """Group an exercise into a broad category, or None when no rule fires."""
    lowered = name.lower()
    for category, keywords in _CATEGORY_RULES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return None
