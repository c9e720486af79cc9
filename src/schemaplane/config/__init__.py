"""Config module exports."""

from schemaplane.config.loader import load_config
from schemaplane.config.models import (
    CacheConfig,
    ExtractionConfig,
    LoggingConfig,
    LogOutputConfig,
    SchemaPlaneConfig,
)

__all__ = [
    "load_config",
    "CacheConfig",
    "ExtractionConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "SchemaPlaneConfig",
]
