"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (SCHEMAPLANE__SECTION__KEY)
3. Repo YAML (<source root>/.schemaplane/config.yaml)
4. Global YAML (~/.config/schemaplane/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    SCHEMAPLANE__<SECTION>__<KEY>=<VALUE>

Examples:
    SCHEMAPLANE__LOGGING__LEVEL=DEBUG
    SCHEMAPLANE__EXTRACTION__MAX_FILE_SIZE_MB=4
    SCHEMAPLANE__CACHE__ENABLED=false
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        SCHEMAPLANE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every classified field.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ExtractionConfig(BaseModel):
    """Source discovery and parsing configuration.

    Env vars:
        SCHEMAPLANE__EXTRACTION__MAX_FILE_SIZE_MB: Skip files larger than this
        SCHEMAPLANE__EXTRACTION__FILE_EXTENSIONS: Source file extensions to parse
    """

    file_extensions: list[str] = Field(
        default_factory=lambda: [".java"],
        description="Source file extensions to parse.",
    )
    max_file_size_mb: float = Field(
        default=2.0,
        description="Skip files larger than this (MB). Generated sources can be huge.",
    )
    excluded_dirs: list[str] = Field(
        default_factory=list,
        description="Directory names pruned in addition to the built-in exclusions.",
    )

    @field_validator("file_extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        normalized = [ext if ext.startswith(".") else f".{ext}" for ext in v]
        if not normalized:
            raise ValueError("At least one file extension is required")
        return [ext.lower() for ext in normalized]

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_size(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"max_file_size_mb must be positive, got {v}")
        return v


class CacheConfig(BaseModel):
    """Schema document cache configuration.

    Env vars:
        SCHEMAPLANE__CACHE__ENABLED: Reuse documents for unchanged sources
        SCHEMAPLANE__CACHE__DIRECTORY: Cache storage location
    """

    enabled: bool = Field(
        default=True,
        description="Reuse previously extracted documents for unchanged content versions.",
    )
    directory: str = Field(
        default="~/.cache/schemaplane",
        description="Directory holding cached schema documents.",
    )

    @property
    def path(self) -> Path:
        return Path(self.directory).expanduser()


class SchemaPlaneConfig(BaseModel):
    """Root configuration for SchemaPlane."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
