"""Persistence schema extraction.

Turns annotated Java sources into a SchemaDocument (tables, columns, keys,
relationships). See ops.extract_schema for the entry point.
"""

from schemaplane.schema.diagnostics import Diagnostic, DiagnosticKind
from schemaplane.schema.models import (
    Column,
    Embeddable,
    Entity,
    EnumSpec,
    EnumStorage,
    FetchType,
    Relationship,
    RelationshipKind,
    SchemaDocument,
)
from schemaplane.schema.ops import (
    ExtractionResult,
    default_output_name,
    extract_schema,
    read_schema,
    safe_source_name,
    validate_root,
    write_schema,
)

__all__ = [
    # Operations
    "ExtractionResult",
    "default_output_name",
    "extract_schema",
    "read_schema",
    "safe_source_name",
    "validate_root",
    "write_schema",
    # IR
    "Column",
    "Embeddable",
    "Entity",
    "EnumSpec",
    "EnumStorage",
    "FetchType",
    "Relationship",
    "RelationshipKind",
    "SchemaDocument",
    # Diagnostics
    "Diagnostic",
    "DiagnosticKind",
]
