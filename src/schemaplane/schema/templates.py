"""Reusable-definition pass: embeddables and mapped-superclass templates.

This pass runs over the whole corpus before any entity is built, since an
entity may use a template declared in any file.

Embeddables are built first because superclass templates may embed them.
Superclass templates are built on demand and memoized by name, so a chain
``S -> S2 -> S3`` resolves the same whatever order the files come in.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from schemaplane.core.logging import get_logger
from schemaplane.index.symbols import SymbolIndex, TypeDecl
from schemaplane.schema.columns import FieldClassifier
from schemaplane.schema.diagnostics import DiagnosticKind, DiagnosticSink
from schemaplane.schema.models import (
    Column,
    Embeddable,
    MappedSuperclassTemplate,
    MemberT,
    Relationship,
    add_if_absent,
)

log = get_logger(__name__)


def inherited_copies(members: Iterable[MemberT], declared_in: str) -> Iterator[MemberT]:
    """Deep copies flagged as inherited.

    Members that were already inherited keep the class that declared them.
    """
    for member in members:
        copy = member.model_copy(deep=True)
        if not copy.inherited:
            copy.inherited = True
            copy.inherited_from_class = declared_in
        yield copy


def merge_members(inherited: Iterable[MemberT], own: list[MemberT]) -> list[MemberT]:
    """Inherited members first, minus any the class declares itself."""
    own_names = {member.field_name for member in own}
    merged: list[MemberT] = []
    for member in inherited:
        if member.field_name in own_names:
            log.debug("inherited_member_shadowed", field=member.field_name)
            continue
        add_if_absent(merged, member)
    for member in own:
        add_if_absent(merged, member)
    return merged


@dataclass
class TemplateRegistry:
    """Templates by fully-qualified class name. Read-only once built."""

    embeddables: dict[str, Embeddable] = field(default_factory=dict)
    superclasses: dict[str, MappedSuperclassTemplate] = field(default_factory=dict)


class _TemplateBuilder:
    def __init__(self, index: SymbolIndex, diagnostics: DiagnosticSink) -> None:
        self._index = index
        self._diagnostics = diagnostics
        self.registry = TemplateRegistry()
        self._classifier = FieldClassifier(index, self.registry.embeddables, diagnostics)

    def build(self) -> TemplateRegistry:
        for decl in self._index.declarations():
            if decl.annotations.has("Embeddable"):
                self._embeddable(decl)
        for decl in self._index.declarations():
            if decl.annotations.has("MappedSuperclass"):
                self._superclass(decl, visiting=())
        return self.registry

    def _embeddable(self, decl: TypeDecl) -> None:
        columns: list[Column] = []
        self._classifier.collect(decl, columns, [], basic_only=True)
        self.registry.embeddables[decl.fqn] = Embeddable(java_class_name=decl.fqn, fields=columns)
        log.debug("embeddable_built", type=decl.fqn, columns=len(columns))

    def _superclass(
        self, decl: TypeDecl, visiting: tuple[str, ...]
    ) -> MappedSuperclassTemplate | None:
        done = self.registry.superclasses.get(decl.fqn)
        if done is not None:
            return done
        if decl.fqn in visiting:
            self._diagnostics.report(
                DiagnosticKind.INHERITANCE_CYCLE,
                "Superclass cycle: " + " -> ".join((*visiting, decl.fqn)),
                path=decl.unit.rel_path,
                symbol=decl.fqn,
                line=decl.line,
            )
            return None

        parent: MappedSuperclassTemplate | None = None
        parent_decl = self._index.superclass_of(decl)
        if parent_decl is not None and parent_decl.annotations.has("MappedSuperclass"):
            parent = self._superclass(parent_decl, (*visiting, decl.fqn))

        # A cycle may have completed this template while recursing
        done = self.registry.superclasses.get(decl.fqn)
        if done is not None:
            return done

        own_columns: list[Column] = []
        own_relationships: list[Relationship] = []
        self._classifier.collect(decl, own_columns, own_relationships)

        template = MappedSuperclassTemplate(java_class_name=decl.fqn)
        if parent is not None:
            template.columns = merge_members(
                inherited_copies(parent.columns, parent.java_class_name), own_columns
            )
            template.relationships = merge_members(
                inherited_copies(parent.relationships, parent.java_class_name),
                own_relationships,
            )
        else:
            template.columns = own_columns
            template.relationships = own_relationships

        self.registry.superclasses[decl.fqn] = template
        log.debug(
            "superclass_template_built",
            type=decl.fqn,
            parent=parent.java_class_name if parent else None,
            columns=len(template.columns),
            relationships=len(template.relationships),
        )
        return template


def build_templates(index: SymbolIndex, diagnostics: DiagnosticSink) -> TemplateRegistry:
    """Build every embeddable and mapped-superclass template in the corpus."""
    registry = _TemplateBuilder(index, diagnostics).build()
    log.info(
        "templates_built",
        embeddables=len(registry.embeddables),
        superclasses=len(registry.superclasses),
    )
    return registry
