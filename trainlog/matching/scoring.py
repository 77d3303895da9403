"""Confidence scoring between two normalized exercise names.

Score components:
- +50 for identical normalized names
- otherwise +20 when one name contains the other, plus up to +10 scaled by
  the length ratio of the two names
- +30 for matching equipment, -20 for conflicting equipment; only tags
  named by a keyword count, an assumed default tag counts as no tag
- +5 for every shared word longer than two characters

The word-overlap bonus stacks with the containment bonus. The 30/60
classification thresholds were tuned with that stacking in place.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from trainlog.matching.normalize import EquipmentSource, NormalizedName

EXACT_NAME_POINTS = 50
CONTAINMENT_POINTS = 20
CONTAINMENT_LENGTH_BONUS = 10
EQUIPMENT_MATCH_POINTS = 30
EQUIPMENT_CONFLICT_PENALTY = 20
SHARED_WORD_POINTS = 5
MIN_WORD_LENGTH = 3


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _scored_equipment(name: NormalizedName) -> str | None:
    # Tags from the default table never contribute points
    return name.equipment if name.equipment_source == EquipmentSource.KEYWORD else None


def _equipment_points(legacy: NormalizedName, canonical: NormalizedName) -> int:
    a, b = _scored_equipment(legacy), _scored_equipment(canonical)
    if not a or not b:
        return 0
    if a != b:
        return -EQUIPMENT_CONFLICT_PENALTY
    return EQUIPMENT_MATCH_POINTS


def score(legacy: NormalizedName, canonical: NormalizedName) -> int:
    """Calculate the confidence score for a potential match.

    Args:
        legacy: Normalized legacy-vocabulary name
        canonical: Normalized canonical-vocabulary name

    Returns:
        Rounded integer score (may be negative)
    """
    total = 0.0
    a, b = legacy.normalized, canonical.normalized

    if a == b:
        total += EXACT_NAME_POINTS
    elif a in b or b in a:
        total += CONTAINMENT_POINTS
        longest = max(len(a), len(b))
        if longest:
            total += CONTAINMENT_LENGTH_BONUS * (min(len(a), len(b)) / longest)

    total += _equipment_points(legacy, canonical)

    canonical_words = {w for w in canonical.words if len(w) >= MIN_WORD_LENGTH}
    shared = [w for w in legacy.words if len(w) >= MIN_WORD_LENGTH and w in canonical_words]
    total += len(shared) * SHARED_WORD_POINTS

    return _round_half_up(total)


class MatchResult(BaseModel):
    """Best candidate for one legacy name."""

    model_config = ConfigDict(frozen=True)

    match: NormalizedName | None
    score: int
    ambiguous: bool


def best_match(legacy: NormalizedName, candidates: Iterable[NormalizedName]) -> MatchResult:
    """Find the highest-scoring canonical candidate for a legacy name.

    A strictly higher score replaces the current best. An equal positive
    score marks the result ambiguous until a higher score appears.

    Args:
        legacy: Normalized legacy name
        candidates: Normalized canonical names to scan, in order

    Returns:
        MatchResult; ``match`` is None when no candidate scored above 0
    """
    best: NormalizedName | None = None
    best_score = 0
    ambiguous = False

    for candidate in candidates:
        candidate_score = score(legacy, candidate)
        if candidate_score > best_score:
            best = candidate
            best_score = candidate_score
            ambiguous = False
        elif candidate_score == best_score and best_score > 0:
            ambiguous = True

    return MatchResult(match=best, score=best_score, ambiguous=ambiguous and best_score > 0)
