"""Compact schema listing for language-model prompts.

One ``Table:`` line per entity, one line per column annotated with
[PK], [AUTO_INCREMENT], [NOT NULL], [UNIQUE] and enum values, then one
[FK] line per owning join column not already listed as a column.
"""

from __future__ import annotations

from schemaplane.index.types import simple_name
from schemaplane.schema.models import Column, Entity, EnumSpec, EnumStorage, SchemaDocument

AUTO_INCREMENT_STRATEGIES = frozenset({"IDENTITY", "SEQUENCE"})
SIZED_NUMERIC_TYPES = frozenset({"DECIMAL", "NUMERIC"})


def _sql_type(column: Column) -> str:
    sql_type = column.sql_type
    if sql_type.upper() == "VARCHAR" and column.length is not None and column.length > 0:
        return f"{sql_type}({column.length})"
    if (
        sql_type.upper() in SIZED_NUMERIC_TYPES
        and column.precision is not None
        and column.scale is not None
    ):
        return f"{sql_type}({column.precision},{column.scale})"
    return sql_type


def _enum_values(enum_info: EnumSpec) -> str:
    values = enum_info.possible_values
    if not values:
        return "(UNKNOWN)"
    if enum_info.storage_type == EnumStorage.ORDINAL:
        return "[" + ", ".join(f"{i}='{value}'" for i, value in enumerate(values)) + "]"
    return "[" + ", ".join(values) + "]"


def render_column(column: Column) -> str:
    line = f"  - {column.column_name} ({_sql_type(column)})"
    if column.primary_key:
        line += " [PK]"
        if column.generation_strategy in AUTO_INCREMENT_STRATEGIES:
            line += " [AUTO_INCREMENT]"
    if column.nullable is False and not column.primary_key:
        line += " [NOT NULL]"
    if column.unique is True and not column.primary_key:
        line += " [UNIQUE]"
    if column.is_enum and column.enum_info is not None:
        line += " -- ENUM VALUES: " + _enum_values(column.enum_info)
    return line


def render_entity(entity: Entity) -> list[str]:
    lines = [f"Table: {entity.table_name}"]
    lines.extend(render_column(column) for column in entity.columns)

    listed = {column.column_name for column in entity.columns}
    for relationship in entity.relationships:
        join_column = relationship.join_column_name
        if not relationship.owning_side or join_column is None or join_column in listed:
            continue
        target = simple_name(relationship.target_entity_java_class)
        lines.append(f"  - {join_column} (BIGINT) [FK] -- References Table: {target}")
        listed.add(join_column)
    return lines


def render_schema_listing(document: SchemaDocument) -> str:
    """Render every entity, separated by blank lines."""
    return "\n\n".join("\n".join(render_entity(entity)) for entity in document.entities) + "\n"
