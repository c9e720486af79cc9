"""Core module exports."""

from schemaplane.core.errors import (
    CacheError,
    ConfigError,
    ErrorCode,
    ExtractionError,
    SchemaPlaneError,
)
from schemaplane.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "CacheError",
    "ConfigError",
    "ErrorCode",
    "ExtractionError",
    "SchemaPlaneError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
