"""Tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from trainlog.config.settings import Settings


class TestSettings:
    """Test defaults, overrides and validation."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TRAINLOG_OUTPUT_DIR", raising=False)
        settings = Settings(_env_file=None)
        assert settings.output_dir == Path("combined_data")
        assert settings.mapping_path == Path("exercise_mapping.json")
        assert settings.stream_chunk_size == 65536

    def test_environment_prefix(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TRAINLOG_OUTPUT_DIR", str(tmp_path))
        monkeypatch.setenv("TRAINLOG_STREAM_CHUNK_SIZE", "1024")
        settings = Settings(_env_file=None)
        assert settings.output_dir == tmp_path
        assert settings.stream_chunk_size == 1024

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_falls_back(self):
        assert Settings(_env_file=None, log_level="chatty").log_level == "INFO"

    def test_chunk_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, stream_chunk_size=0)
