"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

from pathlib import Path

import pytest
from loguru import logger

from trainlog.catalog.builder import CatalogBuilder
from trainlog.catalog.models import Exercise, PrimaryType
from trainlog.config.settings import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing every input and output at a temporary directory."""
    return Settings(
        legacy_export_path=tmp_path / "legacy_export.json",
        canonical_csv_path=tmp_path / "canonical_export.csv",
        legacy_names_path=tmp_path / "legacy_exercises.txt",
        canonical_names_path=tmp_path / "canonical_exercises.txt",
        catalog_path=tmp_path / "exercises.json",
        mapping_path=tmp_path / "exercise_mapping.json",
        output_dir=tmp_path / "combined_data",
        stream_chunk_size=64,
    )


@pytest.fixture
def sample_exercises() -> list[Exercise]:
    return [
        Exercise(id=1, name="Bench Press", primary_type=PrimaryType.RESISTANCE, category="Upper Body Push"),
        Exercise(id=2, name="Squat", primary_type=PrimaryType.RESISTANCE, category="Lower Body"),
        Exercise(id=3, name="Running", primary_type=PrimaryType.DISTANCE, category="Cardio"),
        Exercise(id=4, name="Plank", primary_type=PrimaryType.DURATION, category="Core"),
        Exercise(id=5, name='Box Jump (24")', primary_type=PrimaryType.COMPLEX),
        Exercise(id=6, name="Power Clean", primary_type=PrimaryType.RESISTANCE, category="Olympic Lifting"),
    ]


@pytest.fixture
def catalog(sample_exercises: list[Exercise]) -> CatalogBuilder:
    return CatalogBuilder(sample_exercises)


@pytest.fixture
def log_messages():
    """Capture loguru messages emitted during a test.

    Usage:
        def test_something(log_messages):
            do_work()
            assert any("skipped" in m for m in log_messages)
    """
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
