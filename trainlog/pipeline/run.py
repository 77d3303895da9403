"""End-to-end batch run.

Order of work:
1. Load the canonical catalog (an absent file starts an empty catalog)
2. Group the canonical CSV into sessions, adding any new exercise names
3. Load the cached mapping report, or compute and persist it
4. Stream the legacy export into sessions, creating unmatched exercises
5. Merge both sources per year and write sessions_<year>.json
6. Write exercises.json and summary.json

A missing source file contributes zero sessions. Fatal errors (unreadable
catalog or mapping, broken export stream) propagate to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from trainlog.catalog.builder import CatalogBuilder
from trainlog.config.settings import Settings
from trainlog.ingestion.canonical_csv import read_canonical_rows
from trainlog.ingestion.legacy_export import iter_legacy_export
from trainlog.matching.mapper import load_or_build_mapping
from trainlog.matching.report import MappingReport
from trainlog.pipeline.export import (
    export_timestamp,
    format_size_mb,
    write_exercises,
    write_summary,
    write_year_sessions,
)
from trainlog.sessions.accumulator import SessionAccumulator
from trainlog.sessions.builders import (
    CANONICAL_SOURCE,
    LEGACY_SOURCE,
    build_canonical_sessions,
    build_legacy_sessions,
)
from trainlog.sessions.merge import merge_year, partition_by_year
from trainlog.sessions.models import Summary, YearStats


@dataclass
class PipelineResult:
    summary: Summary
    mapping: MappingReport
    sessions_by_year: dict[str, int] = field(default_factory=dict)


def _canonical_sessions(settings: Settings, catalog: CatalogBuilder) -> SessionAccumulator:
    path = settings.canonical_csv_path
    if not path.exists():
        logger.warning(f"Canonical export not found at {path}; continuing with zero canonical sessions")
        return SessionAccumulator(CANONICAL_SOURCE)
    logger.info(f"Reading canonical export: {path}")
    return build_canonical_sessions(read_canonical_rows(path), catalog)


def _legacy_sessions(settings: Settings, mapping: MappingReport, catalog: CatalogBuilder) -> SessionAccumulator:
    path = settings.legacy_export_path
    if not path.exists():
        logger.warning(f"Legacy export not found at {path}; continuing with zero legacy sessions")
        return SessionAccumulator(LEGACY_SOURCE)
    logger.info(f"Streaming legacy export: {path}")
    return build_legacy_sessions(iter_legacy_export(path, settings.stream_chunk_size), mapping, catalog)


def run_pipeline(settings: Settings, export_date: str | None = None) -> PipelineResult:
    """Run the full reconciliation and write every artifact.

    Args:
        settings: Input and output paths
        export_date: Timestamp stamped into every artifact (defaults to now)

    Returns:
        PipelineResult with the written summary and the mapping report used

    Raises:
        TrainlogError: On any fatal error
    """
    export_date = export_date or export_timestamp()
    output_dir = settings.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    catalog = CatalogBuilder.load(settings.catalog_path)
    canonical = _canonical_sessions(settings, catalog)
    mapping = load_or_build_mapping(settings, catalog)
    legacy = _legacy_sessions(settings, mapping, catalog)

    canonical_by_year = partition_by_year(canonical.sessions())
    legacy_by_year = partition_by_year(legacy.sessions())
    years = sorted(set(canonical.years()) | set(legacy.years()))

    yearly_stats: dict[str, YearStats] = {}
    sessions_by_year: dict[str, int] = {}
    for year in years:
        if year not in canonical_by_year:
            logger.debug(f"No {CANONICAL_SOURCE} sessions for {year}")
        if year not in legacy_by_year:
            logger.debug(f"No {LEGACY_SOURCE} sessions for {year}")

        entries = canonical.entries_by_year[year] + legacy.entries_by_year[year]
        logger.info(f"Processing {entries} entries for {year}")
        sessions = merge_year(canonical_by_year.get(year, []), legacy_by_year.get(year, []))
        size = write_year_sessions(output_dir, year, sessions, export_date)

        yearly_stats[year] = YearStats(entries=entries, sessions=len(sessions), json_size_mb=format_size_mb(size))
        sessions_by_year[year] = len(sessions)

    snapshot = catalog.build(export_date)
    write_exercises(output_dir, snapshot)

    summary = Summary(
        export_date=export_date,
        total_exercises=snapshot.metadata.count,
        yearly_stats=yearly_stats,
    )
    write_summary(output_dir, summary)

    logger.info(f"Conversion complete! Files saved to {output_dir}")
    return PipelineResult(summary=summary, mapping=mapping, sessions_by_year=sessions_by_year)
