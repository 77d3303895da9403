"""Reconcile the legacy exercise vocabulary with the canonical one.

Classification, in priority order:
- Byte-identical names are exact matches (score 100) and skip scoring
- Best score >= 60 with a unique best candidate: confident match
- Best score >= 60 with a tie, or 30 <= best score < 60: ambiguous match
- Anything lower: unmatched, recorded with its normalized form for review
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from trainlog.catalog.builder import CatalogBuilder
from trainlog.config.settings import Settings
from trainlog.core.errors import MappingError
from trainlog.ingestion.name_lists import read_name_list
from trainlog.matching.normalize import normalize
from trainlog.matching.report import (
    AMBIGUOUS_THRESHOLD,
    CONFIDENT_THRESHOLD,
    EXACT_MATCH_SCORE,
    MappingReport,
    MappingSummary,
    MatchEntry,
    UnmatchedEntry,
    load_mapping_report,
    save_mapping_report,
)
from trainlog.matching.scoring import best_match


def _canonical_id(catalog: CatalogBuilder | None, name: str) -> int | None:
    if catalog is None:
        return None
    exercise = catalog.find_by_name(name)
    return exercise.id if exercise else None


def map_exercises(
    legacy_names: Sequence[str],
    canonical_names: Sequence[str],
    catalog: CatalogBuilder | None = None,
) -> MappingReport:
    """Build the mapping report for two exercise vocabularies.

    Args:
        legacy_names: Distinct exercise names from the legacy export
        canonical_names: Distinct exercise names from the canonical export
        catalog: Canonical catalog used to attach ``canonicalId`` values

    Returns:
        MappingReport with exact, confident, ambiguous and unmatched names
    """
    logger.info(f"Mapping {len(legacy_names)} legacy exercises onto {len(canonical_names)} canonical exercises")

    canonical_set = set(canonical_names)
    exact_names = [name for name in legacy_names if name in canonical_set]
    exact_set = set(exact_names)
    logger.info(f"Found {len(exact_names)} exact matches")

    candidates = [normalize(name) for name in canonical_names if name not in exact_set]

    confident: list[MatchEntry] = []
    ambiguous: list[MatchEntry] = []
    unmatched: list[UnmatchedEntry] = []

    for legacy_name in legacy_names:
        if legacy_name in exact_set:
            continue

        legacy = normalize(legacy_name)
        result = best_match(legacy, candidates)

        if result.match is None or result.score < AMBIGUOUS_THRESHOLD:
            unmatched.append(
                UnmatchedEntry(legacy=legacy_name, normalized=legacy.normalized, equipment=legacy.equipment)
            )
            continue

        entry = MatchEntry(
            legacy=legacy_name,
            canonical=result.match.original,
            score=result.score,
            canonical_id=_canonical_id(catalog, result.match.original),
        )
        if result.score >= CONFIDENT_THRESHOLD and not result.ambiguous:
            confident.append(entry)
        else:
            ambiguous.append(entry)

    exact = [
        MatchEntry(
            legacy=name,
            canonical=name,
            score=EXACT_MATCH_SCORE,
            canonical_id=_canonical_id(catalog, name),
        )
        for name in exact_names
    ]

    matches = sorted(confident + exact, key=lambda m: m.score, reverse=True)
    ambiguous.sort(key=lambda m: m.score, reverse=True)

    report = MappingReport(
        summary=MappingSummary(
            total_legacy_exercises=len(legacy_names),
            total_canonical_exercises=len(canonical_names),
            exact_matches=len(exact),
            confident_matches=len(confident),
            ambiguous_matches=len(ambiguous),
            no_matches=len(unmatched),
        ),
        matches=matches,
        ambiguous_matches=ambiguous,
        no_matches=unmatched,
    )

    logger.info(
        f"Exercise mapping complete: {len(exact)} exact, {len(confident)} confident, "
        f"{len(ambiguous)} ambiguous, {len(unmatched)} unmatched"
    )
    return report


def load_or_build_mapping(settings: Settings, catalog: CatalogBuilder | None = None, force: bool = False) -> MappingReport:
    """Return the cached mapping report, computing and persisting it if absent.

    Args:
        settings: Paths to the cache file and both name lists
        catalog: Canonical catalog used to attach ``canonicalId`` values
        force: Recompute even when a cached report exists

    Raises:
        MappingError: If the cache is unreadable or a name list is missing
    """
    if settings.mapping_path.exists() and not force:
        return load_mapping_report(settings.mapping_path)

    logger.info("Generating exercise mapping...")
    for path in (settings.legacy_names_path, settings.canonical_names_path):
        if not path.exists():
            raise MappingError(f"Exercise name list not found: {path}")

    report = map_exercises(
        read_name_list(settings.legacy_names_path),
        read_name_list(settings.canonical_names_path),
        catalog,
    )
    save_mapping_report(report, settings.mapping_path)
    return report
