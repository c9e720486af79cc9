"""Entity build pass.

Runs after every template exists. Each @Entity class becomes one Entity:
inherited members of its direct mapped superclass (deep-copied, entity-level
attribute overrides applied), followed by its own members.
"""

from __future__ import annotations

from schemaplane.core.logging import get_logger
from schemaplane.index.symbols import SymbolIndex, TypeDecl
from schemaplane.index.types import display_name
from schemaplane.schema.columns import FieldClassifier
from schemaplane.schema.diagnostics import DiagnosticSink
from schemaplane.schema.embedding import apply_override, read_overrides
from schemaplane.schema.models import Column, Entity, Relationship
from schemaplane.schema.naming import snake_case
from schemaplane.schema.templates import TemplateRegistry, inherited_copies, merge_members

log = get_logger(__name__)


class EntityBuilder:
    def __init__(
        self, index: SymbolIndex, registry: TemplateRegistry, diagnostics: DiagnosticSink
    ) -> None:
        self._index = index
        self._registry = registry
        self._classifier = FieldClassifier(index, registry.embeddables, diagnostics)

    def build(self, decl: TypeDecl) -> Entity:
        table = decl.annotations.find("Table")
        table_name = (table.get_str("name") if table is not None else None) or snake_case(
            decl.simple_name
        )
        entity = Entity(java_class_name=decl.fqn, table_name=table_name)

        own_columns: list[Column] = []
        own_relationships: list[Relationship] = []
        self._classifier.collect(decl, own_columns, own_relationships)

        parent_decl = self._index.superclass_of(decl)
        template = self._registry.superclasses.get(parent_decl.fqn) if parent_decl else None
        if template is None:
            if decl.superclass is not None:
                log.debug(
                    "superclass_not_template",
                    entity=decl.fqn,
                    superclass=display_name(decl.superclass),
                )
            entity.columns = own_columns
            entity.relationships = own_relationships
            return entity

        entity.mapped_superclass = template.java_class_name
        overrides = read_overrides(decl.annotations)
        inherited_columns = list(inherited_copies(template.columns, template.java_class_name))
        for column in inherited_columns:
            override = overrides.get(column.field_name)
            if override is not None:
                apply_override(column, override)
                log.debug(
                    "inherited_override_applied",
                    entity=decl.fqn,
                    field=column.field_name,
                    column=column.column_name,
                )

        entity.columns = merge_members(inherited_columns, own_columns)
        entity.relationships = merge_members(
            inherited_copies(template.relationships, template.java_class_name),
            own_relationships,
        )
        return entity


def build_entities(
    index: SymbolIndex, registry: TemplateRegistry, diagnostics: DiagnosticSink
) -> list[Entity]:
    """One Entity per @Entity declaration, in declaration order."""
    builder = EntityBuilder(index, registry, diagnostics)
    entities = [
        builder.build(decl) for decl in index.declarations() if decl.annotations.has("Entity")
    ]
    log.info("entities_built", count=len(entities))
    return entities
