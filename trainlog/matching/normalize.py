"""Exercise-name normalization with equipment detection.

Normalization lower-cases a name, detects at most one equipment tag, and
reduces the name to the words that describe the movement itself so names
from two vocabularies can be compared.

Normalizing an already-normalized string returns it unchanged.
"""

from __future__ import annotations

import re
from enum import StrEnum
from functools import lru_cache

from pydantic import BaseModel, ConfigDict

# Order matters: the first group with any keyword present wins.
EQUIPMENT_TERMS: dict[str, tuple[str, ...]] = {
    "barbell": ("barbell",),
    "dumbbell": ("dumbbell", "db"),
    "kettlebell": ("kettlebell", "kb"),
    "machine": ("machine", "machines"),
    "cable": ("cable",),
    "smith machine": ("smith machine",),
    "bodyweight": ("body weight", "bodyweight", "bw"),
    "suspension": ("trx", "suspension trainer"),
    "band": ("band", "bands", "resistance band"),
    "plate": ("plate", "plates"),
}

# Assumed equipment when the name carries no equipment keyword.
DEFAULT_EQUIPMENT: dict[str, str] = {
    "bench press": "barbell",
    "squat": "barbell",
    "deadlift": "barbell",
    "overhead press": "barbell",
    "shoulder press": "barbell",
    "row": "barbell",
    "lunge": "bodyweight",
    "push up": "bodyweight",
    "pull up": "bodyweight",
    "chin up": "bodyweight",
    "dip": "bodyweight",
    "bulgarian split squat": "bodyweight",
    "plank": "bodyweight",
    "crunch": "bodyweight",
    "sit up": "bodyweight",
}

FILLER_WORDS: tuple[str, ...] = ("with", "using", "on", "the", "a", "an")

_ALL_EQUIPMENT_KEYWORDS: tuple[str, ...] = tuple(
    sorted({term for terms in EQUIPMENT_TERMS.values() for term in terms}, key=len, reverse=True)
)
_EQUIPMENT_WORDS_RE = re.compile(r"\b(?:" + "|".join(re.escape(t) for t in _ALL_EQUIPMENT_KEYWORDS) + r")\b")
_FILLER_RE = re.compile(r"\b(?:" + "|".join(FILLER_WORDS) + r")\b")
_PARENTHETICAL_RE = re.compile(r"\([^)]*\)")
_WHITESPACE_RE = re.compile(r"\s+")


class EquipmentSource(StrEnum):
    """How an equipment tag was obtained."""

    KEYWORD = "keyword"
    DEFAULT = "default"


class NormalizedName(BaseModel):
    """Result of normalizing one exercise name."""

    model_config = ConfigDict(frozen=True)

    original: str
    normalized: str
    equipment: str | None = None
    equipment_source: EquipmentSource | None = None

    @property
    def words(self) -> list[str]:
        return self.normalized.split(" ") if self.normalized else []


def detect_equipment(lowered: str) -> tuple[str | None, EquipmentSource | None]:
    """Find the equipment named (or implied) by a lower-cased exercise name.

    Args:
        lowered: Lower-cased exercise name

    Returns:
        Tuple of (equipment tag, how it was found); (None, None) if neither
        an equipment keyword nor a known base movement is present
    """
    for equipment, terms in EQUIPMENT_TERMS.items():
        if any(term in lowered for term in terms):
            return equipment, EquipmentSource.KEYWORD

    for base_exercise, equipment in DEFAULT_EQUIPMENT.items():
        if base_exercise in lowered:
            return equipment, EquipmentSource.DEFAULT

    return None, None


def _collapse(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


@lru_cache(maxsize=4096)
def normalize(name: str) -> NormalizedName:
    """Normalize an exercise name and extract equipment information.

    Args:
        name: Free-text exercise name from either vocabulary

    Returns:
        NormalizedName with the reduced name and at most one equipment tag
    """
    lowered = name.lower()
    # Hyphenated spellings ("body-weight") are detected like their spaced form
    equipment, source = detect_equipment(_collapse(lowered.replace("-", " ")))

    normalized = _PARENTHETICAL_RE.sub("", lowered)
    normalized = normalized.replace("-", " ")
    normalized = _collapse(normalized)

    if source == EquipmentSource.KEYWORD:
        normalized = _collapse(_EQUIPMENT_WORDS_RE.sub("", normalized))

    normalized = _collapse(_FILLER_RE.sub("", normalized))

    return NormalizedName(
        original=name,
        normalized=normalized,
        equipment=equipment,
        equipment_source=source,
    )
