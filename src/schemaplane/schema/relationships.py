"""Relationship resolution for association fields.

Owning side:
- ManyToOne always owns the foreign key.
- Every other kind owns the association unless ``mappedBy`` names the
  inverse field. A ``@JoinTable`` is recorded but does not change that.

Join column (owning to-one only, when none is declared):
    snake_case(field) + "_id"
"""

from __future__ import annotations

from schemaplane.core.logging import get_logger
from schemaplane.index.annotations import Annotation, Annotations
from schemaplane.index.symbols import FieldDecl, SymbolIndex, TypeDecl
from schemaplane.index.types import (
    DeclaredType,
    ScalarType,
    UnresolvedType,
    concrete_name,
    display_name,
    element_type,
    is_collection,
)
from schemaplane.schema.diagnostics import DiagnosticKind, DiagnosticSink
from schemaplane.schema.models import FetchType, Relationship, RelationshipKind
from schemaplane.schema.naming import join_column_default

log = get_logger(__name__)

RELATIONSHIP_MARKERS: tuple[str, ...] = tuple(kind.value for kind in RelationshipKind)


def relationship_marker(annotations: Annotations) -> Annotation | None:
    """First association annotation on a field, if any."""
    return next((a for a in annotations if a.name in RELATIONSHIP_MARKERS), None)


def _first_join_column_name(columns: list[Annotation]) -> str | None:
    for column in columns:
        if column.name == "JoinColumn":
            return column.get_str("name") or None
    return None


class RelationshipResolver:
    def __init__(self, index: SymbolIndex, diagnostics: DiagnosticSink) -> None:
        self._index = index
        self._diagnostics = diagnostics

    def resolve(self, fld: FieldDecl, owner: TypeDecl) -> Relationship | None:
        """Build the relationship for an association field.

        Returns None (and records a diagnostic) when the target entity
        cannot be named.
        """
        marker = relationship_marker(fld.annotations)
        if marker is None:
            return None
        kind = RelationshipKind(marker.name)
        declared = fld.declared_type
        symbol = f"{owner.fqn}.{fld.name}"

        many_valued = is_collection(declared)
        if kind.is_to_one and many_valued:
            log.warning(
                "to_one_on_collection", field=symbol, kind=kind.value, type=display_name(declared)
            )
        elif not kind.is_to_one and not many_valued:
            log.warning(
                "to_many_on_single_value", field=symbol, kind=kind.value, type=display_name(declared)
            )

        target = self._target(marker, declared, owner)
        if target is None:
            self._diagnostics.report(
                DiagnosticKind.UNRESOLVED_TARGET,
                f"Cannot determine target entity of @{kind.value} field '{fld.name}' "
                f"(declared type {display_name(declared)}); relationship dropped",
                path=owner.unit.rel_path,
                symbol=symbol,
                line=fld.line,
            )
            return None

        mapped_by = marker.get_str("mappedBy") or None
        fetch = marker.get_constant("fetch")
        if fetch in (FetchType.EAGER.value, FetchType.LAZY.value):
            fetch_type = FetchType(fetch)
        else:
            fetch_type = FetchType.EAGER if kind.is_to_one else FetchType.LAZY

        relationship = Relationship(
            field_name=fld.name,
            kind=kind,
            target_entity_java_class=target,
            mapped_by=mapped_by,
            fetch_type=fetch_type,
            cascade_types=marker.get_constants("cascade"),
            owning_side=kind == RelationshipKind.MANY_TO_ONE or mapped_by is None,
            join_column_name=self._join_column_name(fld.annotations),
        )
        if (
            relationship.join_column_name is None
            and relationship.owning_side
            and kind.is_to_one
        ):
            relationship.join_column_name = join_column_default(fld.name)

        join_table = fld.annotations.find("JoinTable")
        if join_table is not None:
            relationship.join_table_name = join_table.get_str("name") or None
            relationship.join_table_join_column_name = _first_join_column_name(
                join_table.get_annotations("joinColumns")
            )
            relationship.join_table_inverse_join_column_name = _first_join_column_name(
                join_table.get_annotations("inverseJoinColumns")
            )
            if mapped_by is not None:
                log.debug("join_table_on_inverse_side", field=symbol, mapped_by=mapped_by)

        log.debug(
            "relationship_resolved",
            field=symbol,
            kind=kind.value,
            target=target,
            owning=relationship.owning_side,
        )
        return relationship

    def _target(
        self, marker: Annotation, declared: DeclaredType | None, owner: TypeDecl
    ) -> str | None:
        # targetEntity = X.class wins over the declared type
        literal = marker.get_class("targetEntity")
        if literal is not None:
            fqn = self._index.resolve_name(literal.type_name, owner)
            explicit: DeclaredType = (
                ScalarType(fqn) if fqn is not None else UnresolvedType(literal.type_name)
            )
            return concrete_name(explicit)
        return concrete_name(element_type(declared))

    @staticmethod
    def _join_column_name(annotations: Annotations) -> str | None:
        join_column = annotations.find("JoinColumn")
        if join_column is not None:
            return join_column.get_str("name") or None
        join_columns = annotations.find("JoinColumns")
        if join_columns is not None:
            return _first_join_column_name(join_columns.get_annotations("value"))
        return None
