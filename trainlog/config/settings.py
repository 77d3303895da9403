from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    legacy_export_path: Path = Field(
        default=Path("data/legacy_export.json"),
        description="Legacy social-fitness export (one JSON object keyed by exercise name)",
    )
    canonical_csv_path: Path = Field(
        default=Path("data/canonical_export.csv"),
        description="Mobile-app CSV export",
    )
    legacy_names_path: Path = Field(
        default=Path("data/legacy_exercises.txt"),
        description="Newline-delimited list of every legacy exercise name",
    )
    canonical_names_path: Path = Field(
        default=Path("data/canonical_exercises.txt"),
        description="Newline-delimited list of every canonical exercise name",
    )
    catalog_path: Path = Field(
        default=Path("data/exercises.json"),
        description="Canonical exercise catalog used as the match target",
    )
    mapping_path: Path = Field(
        default=Path("exercise_mapping.json"),
        description="Mapping report; reused as a cache when present",
    )
    output_dir: Path = Field(default=Path("combined_data"))
    stream_chunk_size: int = Field(default=65536, description="Characters read per chunk from the legacy export")
    log_level: str = Field(default="INFO")
    log_file: str | None = Field(default=None)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("stream_chunk_size")
    @classmethod
    def validate_chunk_size(cls, value: int) -> int:
        """Chunk size must be positive."""
        if value <= 0:
            raise ValueError("stream_chunk_size must be > 0")
        return value

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TRAINLOG_",
        extra="ignore",
    )
