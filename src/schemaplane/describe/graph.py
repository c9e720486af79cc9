"""Graphviz DOT description of a schema.

Text only: rendering the description to an image is left to the caller.
"""

from __future__ import annotations

from html import escape

from schemaplane.schema.models import RelationshipKind, SchemaDocument

DEFAULT_MAX_COLUMNS = 12
KEY_GLYPH = "\U0001f511"

EDGE_STYLES: dict[str, str] = {
    RelationshipKind.ONE_TO_MANY.value: '[label="1:N", color="#5bc0de"]',
    RelationshipKind.MANY_TO_ONE.value: '[label="N:1", color="#f0ad4e"]',
    RelationshipKind.MANY_TO_MANY.value: '[dir=both, label="N:M", color="#d9534f"]',
}
DEFAULT_EDGE_STYLE = '[color="black"]'


def _quote(name: str) -> str:
    return '"' + name.replace("\\", "\\\\").replace('"', '\\"') + '"'


def find_table(document: SchemaDocument, java_class_name: str) -> str | None:
    entity = document.entity(java_class_name)
    return entity.table_name if entity is not None else None


def build_dot_graph(document: SchemaDocument, max_columns: int = DEFAULT_MAX_COLUMNS) -> str:
    """One HTML-label node per table and one edge per related table pair.

    Args:
        document: Extracted schema
        max_columns: Columns shown per table

    Returns:
        DOT source for a ``digraph DB``.
    """
    lines = [
        "digraph DB {",
        "  rankdir=LR;",
        "  node [shape=plaintext];",
        "  graph [bgcolor=transparent];",
    ]

    for entity in document.entities:
        table = escape(entity.table_name)
        rows = [f'<tr><td bgcolor="lightgrey"><b>{table}</b></td></tr>']
        for column in entity.columns[:max_columns]:
            icon = f"{KEY_GLYPH} " if column.primary_key else ""
            sql_type = escape(column.sql_type or "N/A")
            rows.append(
                f'<tr><td align="left">{icon}{escape(column.column_name)} '
                f'<font color="grey">{sql_type}</font></td></tr>'
            )
        label = '<table border="0" cellborder="1" cellspacing="0">' + "".join(rows) + "</table>"
        lines.append(f"  {_quote(entity.table_name)} [label=<{label}>];")

    seen: set[tuple[str, str]] = set()
    for entity in document.entities:
        for relationship in entity.relationships:
            target = find_table(document, relationship.target_entity_java_class)
            if target is None:
                continue
            edge = (entity.table_name, target)
            if edge in seen:
                continue
            seen.add(edge)
            style = EDGE_STYLES.get(relationship.kind, DEFAULT_EDGE_STYLE)
            lines.append(f"  {_quote(edge[0])} -> {_quote(edge[1])} {style};")

    lines.append("}")
    return "\n".join(lines) + "\n"
