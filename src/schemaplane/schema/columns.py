"""Per-field classification into columns, embedded columns and relationships.

Priority for each persistent field:
1. association annotation -> RelationshipResolver
2. @Embedded / @EmbeddedId -> EmbeddingMerger
3. anything else -> basic column

Static and transient fields and fields marked @Transient are not persistent.
"""

from __future__ import annotations

from schemaplane.core.logging import get_logger
from schemaplane.index.symbols import FieldDecl, SymbolIndex, TypeDecl
from schemaplane.index.types import display_name, storage_type_name
from schemaplane.schema.diagnostics import DiagnosticKind, DiagnosticSink
from schemaplane.schema.embedding import EMBEDDED_MARKERS, EmbeddingMerger
from schemaplane.schema.models import (
    Column,
    Embeddable,
    EnumSpec,
    EnumStorage,
    Relationship,
    add_if_absent,
)
from schemaplane.schema.naming import snake_case, sql_type_for
from schemaplane.schema.relationships import RELATIONSHIP_MARKERS, RelationshipResolver

log = get_logger(__name__)

DEFAULT_GENERATION_STRATEGY = "AUTO"


def is_persistent(fld: FieldDecl) -> bool:
    return not (fld.is_static or fld.is_transient or fld.annotations.has("Transient"))


class FieldClassifier:
    """Builds the IR fragments for the fields of one declaration."""

    def __init__(
        self,
        index: SymbolIndex,
        embeddables: dict[str, Embeddable],
        diagnostics: DiagnosticSink,
    ) -> None:
        self._index = index
        self._diagnostics = diagnostics
        self._relationships = RelationshipResolver(index, diagnostics)
        self._embedding = EmbeddingMerger(embeddables, diagnostics)

    def collect(
        self,
        decl: TypeDecl,
        columns: list[Column],
        relationships: list[Relationship],
        *,
        basic_only: bool = False,
    ) -> None:
        """Append the members declared directly on ``decl``.

        Args:
            decl: Declaration whose own fields are classified
            columns: Receives columns (first field name wins)
            relationships: Receives relationships (first field name wins)
            basic_only: Embeddable bodies: skip associations and nested embedding
        """
        for fld in decl.fields:
            if not is_persistent(fld):
                continue
            symbol = f"{decl.fqn}.{fld.name}"

            if fld.annotations.has(*RELATIONSHIP_MARKERS):
                if basic_only:
                    log.debug("embeddable_member_skipped", field=symbol, reason="relationship")
                    continue
                relationship = self._relationships.resolve(fld, decl)
                if relationship is not None:
                    add_if_absent(relationships, relationship)
            elif fld.annotations.has(*EMBEDDED_MARKERS):
                if basic_only:
                    log.debug("embeddable_member_skipped", field=symbol, reason="embedded")
                    continue
                for column in self._embedding.expand(fld, decl):
                    add_if_absent(columns, column)
            else:
                column = self.basic_column(fld, decl)
                if add_if_absent(columns, column):
                    log.debug(
                        "field_classified",
                        field=symbol,
                        column=column.column_name,
                        sql_type=column.sql_type,
                    )

    def basic_column(self, fld: FieldDecl, owner: TypeDecl) -> Column:
        declared = fld.declared_type
        annotations = fld.annotations

        column = Column(
            field_name=fld.name,
            column_name=snake_case(fld.name),
            java_type=display_name(declared),
            sql_type=sql_type_for(storage_type_name(declared)),
            primary_key=annotations.has("Id"),
        )

        generated = annotations.find("GeneratedValue")
        if generated is not None:
            column.generation_strategy = (
                generated.get_constant("strategy") or DEFAULT_GENERATION_STRATEGY
            )

        mapping = annotations.find("Column")
        if mapping is not None:
            column.column_name = mapping.get_str("name") or column.column_name
            column.nullable = mapping.get_bool("nullable")
            column.unique = mapping.get_bool("unique")
            column.length = mapping.get_int("length")
            column.precision = mapping.get_int("precision")
            column.scale = mapping.get_int("scale")

        if column.nullable is None:
            column.nullable = not column.primary_key
        if column.unique is None:
            column.unique = column.primary_key

        enumerated = annotations.find("Enumerated")
        if enumerated is not None:
            storage = (
                EnumStorage.STRING
                if enumerated.get_constant() == EnumStorage.STRING.value
                else EnumStorage.ORDINAL
            )
            values = self._index.enum_constants(declared)
            if values is None:
                self._diagnostics.report(
                    DiagnosticKind.UNRESOLVED_ENUM,
                    f"Cannot resolve constants of enum type {display_name(declared)}",
                    path=owner.unit.rel_path,
                    symbol=f"{owner.fqn}.{fld.name}",
                    line=fld.line,
                )
                values = []
            column.is_enum = True
            column.enum_info = EnumSpec(storage_type=storage, possible_values=values)
            column.sql_type = "VARCHAR" if storage == EnumStorage.STRING else "INTEGER"

        return column
