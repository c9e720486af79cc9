"""SchemaPlane error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Extraction
- 4xxx: Cache

Only corpus-level problems are raised. File, symbol and template problems
found during extraction are recorded as diagnostics instead.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Extraction (3xxx)
    SOURCE_ROOT_NOT_FOUND = 3001
    SOURCE_ROOT_NOT_DIRECTORY = 3002
    SCHEMA_WRITE_FAILED = 3003
    SCHEMA_READ_FAILED = 3004

    # Cache (4xxx)
    CACHE_WRITE_FAILED = 4001


@dataclass(frozen=True, slots=True)
class SchemaPlaneError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'SOURCE_ROOT_NOT_FOUND')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(SchemaPlaneError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class ExtractionError(SchemaPlaneError):
    """Corpus-level extraction failures. No document is produced."""

    @classmethod
    def root_not_found(cls, path: str) -> "ExtractionError":
        return cls(
            code=ErrorCode.SOURCE_ROOT_NOT_FOUND,
            message=f"Source root does not exist: {path}",
            details={"path": path},
        )

    @classmethod
    def root_not_directory(cls, path: str) -> "ExtractionError":
        return cls(
            code=ErrorCode.SOURCE_ROOT_NOT_DIRECTORY,
            message=f"Source root is not a directory: {path}",
            details={"path": path},
        )

    @classmethod
    def write_failed(cls, path: str, reason: str) -> "ExtractionError":
        return cls(
            code=ErrorCode.SCHEMA_WRITE_FAILED,
            message=f"Failed to write schema to {path}: {reason}",
            retryable=True,
            details={"path": path, "reason": reason},
        )

    @classmethod
    def read_failed(cls, path: str, reason: str) -> "ExtractionError":
        return cls(
            code=ErrorCode.SCHEMA_READ_FAILED,
            message=f"Failed to read schema from {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class CacheError(SchemaPlaneError):
    """Schema cache errors."""

    @classmethod
    def write_failed(cls, path: str, reason: str) -> "CacheError":
        return cls(
            code=ErrorCode.CACHE_WRITE_FAILED,
            message=f"Failed to write cache entry {path}: {reason}",
            retryable=True,
            details={"path": path, "reason": reason},
        )
