"""Tests for mapping-report generation, resolution and caching.

Tests cover:
- Exact matches skip scoring and score 100
- Confident / ambiguous / unmatched classification
- Ambiguous ties at or above the confident threshold still resolve
- The persisted report is reused until deleted or forced
"""

import json

import pytest

from trainlog.catalog.builder import CatalogBuilder
from trainlog.catalog.models import Exercise
from trainlog.core.errors import MappingError
from trainlog.matching.mapper import load_or_build_mapping, map_exercises
from trainlog.matching.report import load_mapping_report, save_mapping_report

LEGACY = ["Bench Press", 'Box Jump (20")', "Bench Press (Close Grip)", "Zottman Curl"]
CANONICAL = ["Bench Press", "Squat", "Close Grip Bench Press", 'Box Jump (24")']


@pytest.fixture
def report(catalog):
    return map_exercises(LEGACY, CANONICAL, catalog)


class TestClassification:
    """Test how each legacy name is classified."""

    def test_summary_counts(self, report):
        summary = report.summary
        assert summary.total_legacy_exercises == 4
        assert summary.total_canonical_exercises == 4
        assert summary.exact_matches == 1
        assert summary.confident_matches == 1
        assert summary.ambiguous_matches == 1
        assert summary.no_matches == 1

    def test_exact_match_scores_100(self, report):
        exact = report.matches[0]
        assert exact.legacy == "Bench Press"
        assert exact.canonical == "Bench Press"
        assert exact.score == 100
        assert exact.canonical_id == 1

    def test_matches_sorted_by_score(self, report):
        assert [m.score for m in report.matches] == sorted((m.score for m in report.matches), reverse=True)

    def test_confident_match(self, report):
        confident = report.matches[1]
        assert confident.legacy == 'Box Jump (20")'
        assert confident.canonical == 'Box Jump (24")'
        # 50 exact normalized name + 2 shared words
        assert confident.score == 60
        assert confident.canonical_id == 5

    def test_close_grip_variant_is_ambiguous(self, report):
        (entry,) = report.ambiguous_matches
        assert entry.legacy == "Bench Press (Close Grip)"
        assert entry.canonical == "Close Grip Bench Press"
        assert entry.score == 35
        assert entry.canonical_id is None

    def test_unmatched_keeps_normalized_form(self, report):
        (entry,) = report.no_matches
        assert entry.legacy == "Zottman Curl"
        assert entry.normalized == "zottman curl"
        assert entry.equipment is None

    def test_exact_matched_names_are_not_scoring_candidates(self):
        """Once a canonical name is claimed exactly it cannot win a fuzzy match."""
        report = map_exercises(["Squat", "Barbell Squat"], ["Squat"])
        assert report.summary.exact_matches == 1
        assert report.no_matches[0].legacy == "Barbell Squat"

    def test_exact_match_wins_over_tie(self):
        """A byte-identical name is exact even when scoring would tie."""
        report = map_exercises(["Bench Press"], ["Bench Press (Paused)", "Bench Press"])
        assert report.summary.exact_matches == 1
        assert report.summary.ambiguous_matches == 0
        assert report.matches[0].score == 100

    def test_every_legacy_name_classified_once(self, report):
        classified = (
            [m.legacy for m in report.matches]
            + [m.legacy for m in report.ambiguous_matches]
            + [m.legacy for m in report.no_matches]
        )
        assert sorted(classified) == sorted(LEGACY)


class TestResolution:
    """Test resolving legacy names to catalog ids."""

    def test_exact_and_confident_resolve(self, report):
        assert report.exercise_id("Bench Press") == 1
        assert report.exercise_id('Box Jump (20")') == 5

    def test_low_ambiguous_and_unmatched_do_not_resolve(self, report):
        assert report.exercise_id("Bench Press (Close Grip)") is None
        assert report.exercise_id("Zottman Curl") is None
        assert report.exercise_id("Never Seen") is None

    def test_high_scoring_tie_resolves_to_first_candidate(self):
        catalog = CatalogBuilder(
            [
                Exercise(id=10, name="Bench Press (Paused)"),
                Exercise(id=11, name="Bench Press (Wide Grip)"),
            ]
        )
        report = map_exercises(["Bench Press"], ["Bench Press (Paused)", "Bench Press (Wide Grip)"], catalog)
        (entry,) = report.ambiguous_matches
        assert entry.score == 60
        assert report.exercise_id("Bench Press") == 10


class TestPersistence:
    """Test report serialization and caching."""

    def test_saved_report_uses_camel_case(self, report, tmp_path):
        path = tmp_path / "exercise_mapping.json"
        save_mapping_report(report, path)
        data = json.loads(path.read_text())
        assert set(data) == {"summary", "matches", "ambiguousMatches", "noMatches"}
        assert data["summary"]["totalLegacyExercises"] == 4
        assert data["matches"][0]["canonicalId"] == 1

    def test_saved_report_loads_back(self, report, tmp_path):
        path = tmp_path / "exercise_mapping.json"
        save_mapping_report(report, path)
        loaded = load_mapping_report(path)
        assert loaded.summary == report.summary
        assert loaded.exercise_id('Box Jump (20")') == 5

    def test_corrupt_report_raises(self, tmp_path):
        path = tmp_path / "exercise_mapping.json"
        path.write_text("{not json")
        with pytest.raises(MappingError):
            load_mapping_report(path)

    def test_cache_is_reused(self, settings, catalog):
        settings.legacy_names_path.write_text("\n".join(LEGACY))
        settings.canonical_names_path.write_text("\n".join(CANONICAL))
        first = load_or_build_mapping(settings, catalog)
        assert settings.mapping_path.exists()

        # Changing the inputs has no effect while the cache exists
        settings.legacy_names_path.write_text("Hip Thrust\n")
        second = load_or_build_mapping(settings, catalog)
        assert second.summary == first.summary

    def test_force_recomputes(self, settings, catalog):
        settings.legacy_names_path.write_text("\n".join(LEGACY))
        settings.canonical_names_path.write_text("\n".join(CANONICAL))
        load_or_build_mapping(settings, catalog)

        settings.legacy_names_path.write_text("Hip Thrust\n")
        forced = load_or_build_mapping(settings, catalog, force=True)
        assert forced.summary.total_legacy_exercises == 1

    def test_missing_name_list_raises(self, settings):
        settings.canonical_names_path.write_text("Squat\n")
        with pytest.raises(MappingError):
            load_or_build_mapping(settings)
