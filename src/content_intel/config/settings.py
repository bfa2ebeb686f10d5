"""
Pydantic settings models for the Content Intelligence Engine.

All configuration is defined here with defaults suited to a
knowledge-capturing browser extension.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ClassifierSettings(BaseModel):
    """Keyword classifier configuration."""

    subject_min_score: int = Field(
        default=2,
        ge=1,
        le=100,
        description="Minimum keyword score before a subject is accepted",
    )
    topic_min_score: int = Field(
        default=1,
        ge=1,
        le=100,
        description="Minimum keyword score before a topic is accepted",
    )
    chapter_min_score: int = Field(
        default=1,
        ge=1,
        le=100,
        description="Minimum keyword score before a chapter is accepted",
    )
    max_paragraphs: int = Field(
        default=20,
        ge=0,
        le=50,
        description="Number of leading paragraphs included in the scoring corpus",
    )
    max_list_items: int = Field(
        default=30,
        ge=0,
        le=100,
        description="Number of leading list items included in the scoring corpus",
    )
    max_key_points: int = Field(
        default=10,
        ge=0,
        le=10,
        description="Maximum key points taken from headings and sub-headings",
    )
    keywords_path: Path | None = Field(
        default=None,
        description="YAML file with subject/topic/chapter tables. None uses the built-in tables.",
    )

    @field_validator("keywords_path", mode="before")
    @classmethod
    def convert_keywords_path(cls, v: str | Path | None) -> Path | None:
        """Convert string paths to Path objects."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v


class SummarizerSettings(BaseModel):
    """Extractive summarizer configuration."""

    max_summary_points: int = Field(
        default=5,
        ge=0,
        le=5,
        description="Maximum number of key sentences in a summary",
    )
    max_definitions: int = Field(
        default=3,
        ge=0,
        le=3,
        description="Maximum number of definition sentences",
    )
    max_examples: int = Field(
        default=2,
        ge=0,
        le=2,
        description="Maximum number of example sentences",
    )
    min_sentence_length: int = Field(
        default=30,
        ge=1,
        le=200,
        description="Shortest cleaned sentence considered for any section",
    )
    max_sentence_length: int = Field(
        default=300,
        ge=50,
        le=2000,
        description="Longest cleaned sentence accepted as a definition or example",
    )
    dedup_prefix_length: int = Field(
        default=50,
        ge=10,
        le=500,
        description="Prefix length used to detect near-duplicate sentences",
    )


class StorageSettings(BaseModel):
    """SQLite knowledge store configuration."""

    database_path: Path = Field(
        default=Path("data/knowledge.db"),
        description="Path to SQLite database file",
    )
    wal_mode: bool = Field(
        default=True,
        description="Enable WAL mode so readers never see uncommitted writes",
    )
    cache_size_mb: int = Field(
        default=16,
        ge=1,
        le=512,
        description="SQLite cache size in megabytes",
    )
    retained_paragraphs: int = Field(
        default=50,
        ge=0,
        le=50,
        description="Number of paragraphs kept on each saved entry for display",
    )

    @field_validator("database_path", mode="before")
    @classmethod
    def convert_to_path(cls, v: str | Path) -> Path:
        """Convert string paths to Path objects."""
        return Path(v) if isinstance(v, str) else v


class CaptureSettings(BaseModel):
    """Automatic capture ("knowledge mode") configuration."""

    enabled: bool = Field(
        default=False,
        description="Initial capture state when no state file exists",
    )
    state_path: Path = Field(
        default=Path("data/capture_state.json"),
        description="File persisting the capture on/off switch",
    )
    skip_urls: list[str] = Field(
        default_factory=lambda: ["about:blank"],
        description="URLs that are never classified or saved",
    )

    @field_validator("state_path", mode="before")
    @classmethod
    def convert_state_path(cls, v: str | Path) -> Path:
        """Convert string paths to Path objects."""
        return Path(v) if isinstance(v, str) else v


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Minimum logging level",
    )
    format: str = Field(
        default="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        description="Log message format string",
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Date format for log timestamps",
    )
    file_path: Path | None = Field(
        default=None,
        description="Path to log file. None means console only.",
    )
    max_file_size_mb: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum log file size before rotation",
    )
    backup_count: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Number of backup log files to keep",
    )
    log_to_console: bool = Field(
        default=True,
        description="Whether to output logs to console",
    )

    @field_validator("file_path", mode="before")
    @classmethod
    def convert_file_path(cls, v: str | Path | None) -> Path | None:
        """Convert string paths to Path objects."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v


class Settings(BaseModel):
    """
    Root configuration model containing all subsystem settings.

    Settings are loaded from YAML with environment variable overrides.
    """

    classifier: ClassifierSettings = Field(
        default_factory=ClassifierSettings,
        description="Keyword classifier settings",
    )
    summarizer: SummarizerSettings = Field(
        default_factory=SummarizerSettings,
        description="Summarizer settings",
    )
    storage: StorageSettings = Field(
        default_factory=StorageSettings,
        description="Knowledge store settings",
    )
    capture: CaptureSettings = Field(
        default_factory=CaptureSettings,
        description="Automatic capture settings",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    model_config = {
        "extra": "forbid",
        "validate_default": True,
    }
