"""Naming and storage-type conventions.

These defaults decide every name and type not given explicitly in source,
so they must stay stable: changing one changes every extracted document.
"""

from __future__ import annotations

import re

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")

DEFAULT_SQL_TYPE = "VARCHAR"

# Keyed by simple type name
SQL_TYPES: dict[str, str] = {
    "String": "VARCHAR",
    "Long": "BIGINT",
    "long": "BIGINT",
    "Integer": "INTEGER",
    "int": "INTEGER",
    "Short": "SMALLINT",
    "short": "SMALLINT",
    "Double": "DOUBLE PRECISION",
    "double": "DOUBLE PRECISION",
    "Float": "REAL",
    "float": "REAL",
    "Boolean": "BOOLEAN",
    "boolean": "BOOLEAN",
    "LocalDate": "DATE",
    "LocalDateTime": "TIMESTAMP",
    "Date": "TIMESTAMP",
    "Timestamp": "TIMESTAMP",
    "LocalTime": "TIME",
    "Time": "TIME",
    "ZonedDateTime": "TIMESTAMP WITH TIME ZONE",
    "OffsetDateTime": "TIMESTAMP WITH TIME ZONE",
    "Instant": "TIMESTAMP WITH TIME ZONE",
    "BigDecimal": "NUMERIC",
    "BigInteger": "NUMERIC",
    "byte[]": "BYTEA",
    "Byte[]": "BYTEA",
    "UUID": "UUID",
    "Character": "CHAR(1)",
    "char": "CHAR(1)",
}


def snake_case(name: str) -> str:
    """``createdAt`` -> ``created_at``, ``HTTPRequest`` -> ``http_request``."""
    if not name:
        return ""
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    return _WORD_BOUNDARY.sub(r"\1_\2", name).lower()


def sql_type_for(type_name: str | None) -> str:
    """Storage type for a simple type name; unknown names map to VARCHAR."""
    if type_name is None:
        return DEFAULT_SQL_TYPE
    return SQL_TYPES.get(type_name, DEFAULT_SQL_TYPE)


def join_column_default(field_name: str) -> str:
    return f"{snake_case(field_name)}_id"


def embedded_column_default(owner_field: str, template_column: str) -> str:
    return f"{snake_case(owner_field)}_{template_column}"
