"""Mapping report schema and cache persistence.

The report records how every legacy exercise name was reconciled with the
canonical vocabulary. Once written it acts as a cache: later runs load it
instead of re-scoring. Deleting the file is the only invalidation.
"""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from trainlog.core.errors import MappingError

CONFIDENT_THRESHOLD = 60
AMBIGUOUS_THRESHOLD = 30
EXACT_MATCH_SCORE = 100


class _ReportModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class MatchEntry(_ReportModel):
    """A legacy name reconciled with a canonical name."""

    legacy: str
    canonical: str
    score: int
    canonical_id: int | None = Field(default=None, alias="canonicalId")


class UnmatchedEntry(_ReportModel):
    """A legacy name with no usable candidate, kept for manual review."""

    legacy: str
    normalized: str
    equipment: str | None = None


class MappingSummary(_ReportModel):
    total_legacy_exercises: int = Field(alias="totalLegacyExercises")
    total_canonical_exercises: int = Field(alias="totalCanonicalExercises")
    exact_matches: int = Field(alias="exactMatches")
    confident_matches: int = Field(alias="confidentMatches")
    ambiguous_matches: int = Field(alias="ambiguousMatches")
    no_matches: int = Field(alias="noMatches")


class MappingReport(_ReportModel):
    """Outcome of reconciling the legacy vocabulary with the canonical one.

    ``matches`` holds exact matches (score 100) and confident matches;
    ``ambiguous_matches`` holds ties and mid-range scores.
    """

    summary: MappingSummary
    matches: list[MatchEntry] = Field(default_factory=list)
    ambiguous_matches: list[MatchEntry] = Field(default_factory=list, alias="ambiguousMatches")
    no_matches: list[UnmatchedEntry] = Field(default_factory=list, alias="noMatches")

    _resolved: dict[str, MatchEntry] | None = PrivateAttr(default=None)

    def exercise_id(self, name: str) -> int | None:
        """Resolve a legacy name to a canonical exercise id.

        Exact and confident matches resolve directly; an ambiguous match
        resolves only when its score reached the confident threshold
        (a tie among high scorers). Everything else returns None, and the
        caller is expected to create a new catalog entry.
        """
        entry = self.resolve(name)
        return entry.canonical_id if entry else None

    def resolve(self, name: str) -> MatchEntry | None:
        """Entry a legacy name resolves through, if any."""
        if self._resolved is None:
            resolved: dict[str, MatchEntry] = {}
            for entry in self.matches:
                resolved.setdefault(entry.legacy, entry)
            for entry in self.ambiguous_matches:
                if entry.score >= CONFIDENT_THRESHOLD:
                    resolved.setdefault(entry.legacy, entry)
            self._resolved = resolved
        return self._resolved.get(name)


def load_mapping_report(path: Path) -> MappingReport:
    """Load a cached mapping report.

    Raises:
        MappingError: If the file cannot be read or does not match the schema
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        report = MappingReport.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise MappingError(f"Failed to read mapping report {path}: {e!s}") from e
    logger.info(f"Using existing exercise mapping from {path}")
    return report


def save_mapping_report(report: MappingReport, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report.to_json(), indent=2), encoding="utf-8")
    logger.info(f"Mapping saved to {path}")
