"""Composition of embeddable columns into their owners.

Each template column of an embeddable is copied into the owner with:
- field name ``<owner field>.<template field>`` (unique per embedding)
- column name from a matching attribute override, else
  ``snake_case(owner field) + "_" + template column name``
"""

from __future__ import annotations

from dataclasses import dataclass

from schemaplane.core.logging import get_logger
from schemaplane.index.annotations import Annotation, Annotations
from schemaplane.index.symbols import FieldDecl, TypeDecl
from schemaplane.index.types import concrete_name, display_name
from schemaplane.schema.diagnostics import DiagnosticKind, DiagnosticSink
from schemaplane.schema.models import Column, Embeddable
from schemaplane.schema.naming import embedded_column_default

log = get_logger(__name__)

EMBEDDED_MARKERS: tuple[str, ...] = ("Embedded", "EmbeddedId")


@dataclass(frozen=True)
class AttributeOverride:
    name: str  # Overridden field, possibly "embedded.field"
    column_name: str
    nullable: bool | None = None  # Unset unless the override column says so


def read_overrides(annotations: Annotations) -> dict[str, AttributeOverride]:
    """Attribute overrides on a declaration, keyed by overridden field name.

    Reads ``@AttributeOverrides({...})`` and bare (possibly repeated)
    ``@AttributeOverride``. The first override of a name wins; overrides
    without a column name are ignored.
    """
    items: list[Annotation] = []
    for container in annotations.find_all("AttributeOverrides"):
        items.extend(container.get_annotations("value"))
    items.extend(annotations.find_all("AttributeOverride"))

    overrides: dict[str, AttributeOverride] = {}
    for item in items:
        if item.name != "AttributeOverride":
            continue
        name = item.get_str("name")
        column = item.get("column")
        if not name or not isinstance(column, Annotation):
            continue
        column_name = column.get_str("name")
        if not column_name:
            continue
        overrides.setdefault(
            name,
            AttributeOverride(
                name=name, column_name=column_name, nullable=column.get_bool("nullable")
            ),
        )
    return overrides


def apply_override(column: Column, override: AttributeOverride) -> None:
    column.column_name = override.column_name
    column.nullable = override.nullable


class EmbeddingMerger:
    """Expands embedded fields using the embeddables built beforehand."""

    def __init__(self, embeddables: dict[str, Embeddable], diagnostics: DiagnosticSink) -> None:
        self._embeddables = embeddables
        self._diagnostics = diagnostics

    def expand(self, fld: FieldDecl, owner: TypeDecl) -> list[Column]:
        type_name = concrete_name(fld.declared_type)
        embeddable = self._embeddables.get(type_name) if type_name else None
        if embeddable is None:
            self._diagnostics.report(
                DiagnosticKind.MISSING_EMBEDDABLE,
                f"No @Embeddable definition for type {display_name(fld.declared_type)} "
                f"used by field '{fld.name}'; field skipped",
                path=owner.unit.rel_path,
                symbol=f"{owner.fqn}.{fld.name}",
                line=fld.line,
            )
            return []

        overrides = read_overrides(fld.annotations)
        embedded_id = fld.annotations.has("EmbeddedId")

        columns: list[Column] = []
        for template in embeddable.fields:
            column = template.model_copy(deep=True)
            column.field_name = f"{fld.name}.{template.field_name}"
            column.is_embedded_attribute = True
            column.embedded_from_field_name = fld.name
            column.original_embeddable_field_name = template.field_name

            override = overrides.get(template.field_name)
            if override is not None:
                apply_override(column, override)
            else:
                column.column_name = embedded_column_default(fld.name, template.column_name)

            if embedded_id:
                column.primary_key = True
                column.nullable = False
            columns.append(column)

        log.debug(
            "embedded_expanded",
            field=f"{owner.fqn}.{fld.name}",
            embeddable=embeddable.java_class_name,
            columns=len(columns),
        )
        return columns
