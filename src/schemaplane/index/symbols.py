"""Project-wide symbol index over Java sources.

The index is built in two steps and is read-only afterwards:

1. Every source file is parsed and its declarations (types, fields,
   annotations, enum constants, import tables) are copied out of the
   syntax tree into plain dataclasses.
2. Once every fully-qualified type name in the corpus is known, field and
   superclass types are resolved into ``DeclaredType`` variants.

Resolution is best effort. A name that cannot be resolved keeps its literal
text (``UnresolvedType``) so extraction keeps going on partial corpora.

Usage::

    index = SymbolIndex.build(sources)
    post = index.lookup("com.acme.blog.Post")
    for field in post.fields:
        print(field.name, display_name(field.declared_type))
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from schemaplane.core.logging import get_logger
from schemaplane.index.annotations import Annotations, node_text, read_modifiers
from schemaplane.index.discovery import SourceFile
from schemaplane.index.parser import JavaParser, ParseFailure
from schemaplane.index.types import (
    COLLECTION_TYPES,
    MAP_TYPES,
    OPTIONAL_TYPES,
    PRIMITIVES,
    CollectionType,
    DeclaredType,
    OptionalType,
    ScalarType,
    TypeSyntax,
    UnresolvedType,
    concrete_name,
    display_name,
)

log = get_logger(__name__)

_TYPE_DECL_KINDS: dict[str, str] = {
    "class_declaration": "class",
    "enum_declaration": "enum",
    "interface_declaration": "interface",
    "record_declaration": "record",
    "annotation_type_declaration": "annotation",
}

_PRIMITIVE_NODES = frozenset({"integral_type", "floating_point_type", "boolean_type", "void_type"})

# Types visible without an import
JAVA_LANG_TYPES: frozenset[str] = frozenset(
    {
        "Boolean",
        "Byte",
        "Character",
        "Double",
        "Enum",
        "Float",
        "Integer",
        "Iterable",
        "Long",
        "Number",
        "Object",
        "Short",
        "String",
    }
)

# JDK types reachable through wildcard imports. The corpus never contains them.
WELL_KNOWN_PACKAGES: dict[str, frozenset[str]] = {
    "java.util": frozenset(
        {
            "ArrayList",
            "Collection",
            "Date",
            "Deque",
            "HashMap",
            "HashSet",
            "LinkedHashMap",
            "LinkedHashSet",
            "LinkedList",
            "List",
            "Map",
            "NavigableSet",
            "Optional",
            "Queue",
            "Set",
            "SortedMap",
            "SortedSet",
            "TreeMap",
            "TreeSet",
            "UUID",
        }
    ),
    "java.time": frozenset(
        {
            "Duration",
            "Instant",
            "LocalDate",
            "LocalDateTime",
            "LocalTime",
            "OffsetDateTime",
            "OffsetTime",
            "Year",
            "YearMonth",
            "ZonedDateTime",
        }
    ),
    "java.math": frozenset({"BigDecimal", "BigInteger"}),
    "java.sql": frozenset({"Blob", "Clob", "Date", "Time", "Timestamp"}),
}

_GENERIC_ARGS_RE = re.compile(r"<[^<>]*>")


@dataclass
class FieldDecl:
    """A field declared in a type body (one per declared variable)."""

    name: str
    type_syntax: TypeSyntax
    modifiers: frozenset[str]
    annotations: Annotations
    line: int
    declared_type: DeclaredType | None = None  # Set when the index is finalized

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers

    @property
    def is_transient(self) -> bool:
        return "transient" in self.modifiers


@dataclass
class SourceUnit:
    """One parsed source file: package, imports, declared types."""

    rel_path: str
    package: str = ""
    imports: dict[str, str] = field(default_factory=dict)  # simple name -> FQN
    wildcard_imports: list[str] = field(default_factory=list)  # package or type prefixes
    types: list[TypeDecl] = field(default_factory=list)  # Nested types included


@dataclass
class TypeDecl:
    """A class, enum, interface or record declaration."""

    fqn: str
    simple_name: str
    kind: str
    unit: SourceUnit = field(repr=False)
    annotations: Annotations
    line: int
    outer: TypeDecl | None = field(default=None, repr=False)
    type_parameters: tuple[str, ...] = ()
    superclass_syntax: TypeSyntax | None = None
    fields: list[FieldDecl] = field(default_factory=list)
    enum_constants: list[str] = field(default_factory=list)
    superclass: DeclaredType | None = None  # Set when the index is finalized

    @property
    def is_enum(self) -> bool:
        return self.kind == "enum"


# =============================================================================
# Syntax readers
# =============================================================================


def _compact(text: str) -> str:
    return "".join(text.split())


def _erase(text: str) -> str:
    """Drop generic arguments: ``Outer<T>.Inner<U>`` -> ``Outer.Inner``."""
    erased = _compact(text)
    while True:
        stripped = _GENERIC_ARGS_RE.sub("", erased)
        if stripped == erased:
            return stripped
        erased = stripped


def _named(node: Any) -> list[Any]:
    return [child for child in node.named_children if not child.type.endswith("comment")]


def read_type_syntax(node: Any) -> TypeSyntax | None:
    """Read a type node into ``TypeSyntax``; None for an unbounded wildcard."""
    kind = node.type
    text = _compact(node_text(node))

    if kind in _PRIMITIVE_NODES:
        return TypeSyntax(name=text, text=text)
    if kind == "generic_type":
        children = _named(node)
        base = next(
            (c for c in children if c.type in ("type_identifier", "scoped_type_identifier")), None
        )
        args_node = next((c for c in children if c.type == "type_arguments"), None)
        arguments = tuple(read_type_syntax(a) for a in _named(args_node)) if args_node else ()
        name = _erase(node_text(base)) if base is not None else _erase(text)
        return TypeSyntax(name=name, text=text, arguments=arguments)
    if kind == "array_type":
        element_node = node.child_by_field_name("element")
        dims = node_text(node.child_by_field_name("dimensions")).count("[")
        element = read_type_syntax(element_node) if element_node is not None else None
        if element is None:
            return TypeSyntax(name=_erase(text), text=text)
        return dataclasses.replace(element, text=text, array_dims=element.array_dims + dims)
    if kind == "annotated_type":
        inner = [c for c in _named(node) if c.type not in ("annotation", "marker_annotation")]
        return read_type_syntax(inner[-1]) if inner else None
    if kind == "wildcard":
        # ? extends T reads as T; ? and ? super T carry no usable bound
        bounded = [c for c in _named(node) if c.type not in ("annotation", "marker_annotation")]
        if bounded and "super" not in (child.type for child in node.children):
            return read_type_syntax(bounded[-1])
        return None
    return TypeSyntax(name=_erase(text), text=text)


def _with_extra_dims(syntax: TypeSyntax, dims: int) -> TypeSyntax:
    if not dims:
        return syntax
    return dataclasses.replace(
        syntax, text=syntax.text + "[]" * dims, array_dims=syntax.array_dims + dims
    )


def _find_child(node: Any, kind: str) -> Any:
    for child in node.children:
        if child.type == kind:
            return child
    return None


class _UnitReader:
    """Copies declarations out of one syntax tree."""

    def __init__(self, rel_path: str) -> None:
        self.unit = SourceUnit(rel_path=rel_path)

    def read(self, root: Any) -> SourceUnit:
        for child in _named(root):
            if child.type == "package_declaration":
                name = next(
                    (c for c in _named(child) if c.type in ("scoped_identifier", "identifier")),
                    None,
                )
                self.unit.package = node_text(name)
            elif child.type == "import_declaration":
                self._read_import(child)
            elif child.type in _TYPE_DECL_KINDS:
                self._read_type(child, outer=None)
        return self.unit

    def _read_import(self, node: Any) -> None:
        if any(child.type == "static" for child in node.children):
            return
        name_node = next(
            (c for c in _named(node) if c.type in ("scoped_identifier", "identifier")), None
        )
        if name_node is None:
            return
        name = _compact(node_text(name_node))
        if any(child.type == "asterisk" for child in node.children):
            self.unit.wildcard_imports.append(name)
        else:
            self.unit.imports[name.rsplit(".", 1)[-1]] = name

    def _read_type(self, node: Any, outer: TypeDecl | None) -> None:
        simple = node_text(node.child_by_field_name("name"))
        if not simple:
            return
        if outer is not None:
            fqn = f"{outer.fqn}.{simple}"
        else:
            fqn = f"{self.unit.package}.{simple}" if self.unit.package else simple

        _, annotations = read_modifiers(_find_child(node, "modifiers"))
        decl = TypeDecl(
            fqn=fqn,
            simple_name=simple,
            kind=_TYPE_DECL_KINDS[node.type],
            unit=self.unit,
            annotations=annotations,
            line=node.start_point[0] + 1,
            outer=outer,
            type_parameters=self._type_parameters(node),
        )

        superclass = node.child_by_field_name("superclass")
        if superclass is not None:
            type_nodes = _named(superclass)
            if type_nodes:
                decl.superclass_syntax = read_type_syntax(type_nodes[-1])

        components = node.child_by_field_name("parameters")
        if node.type == "record_declaration" and components is not None:
            decl.fields.extend(self._read_components(components))

        self.unit.types.append(decl)

        body = node.child_by_field_name("body")
        if body is not None:
            self._read_body(body, decl)

    @staticmethod
    def _type_parameters(node: Any) -> tuple[str, ...]:
        params = node.child_by_field_name("type_parameters")
        if params is None:
            return ()
        names: list[str] = []
        for param in _named(params):
            ident = next((c for c in _named(param) if c.type in ("type_identifier", "identifier")), None)
            if ident is not None:
                names.append(node_text(ident))
        return tuple(names)

    def _read_body(self, body: Any, decl: TypeDecl) -> None:
        for member in _named(body):
            if member.type == "field_declaration":
                decl.fields.extend(self._read_fields(member))
            elif member.type == "enum_constant":
                decl.enum_constants.append(node_text(member.child_by_field_name("name")))
            elif member.type == "enum_body_declarations":
                self._read_body(member, decl)
            elif member.type in _TYPE_DECL_KINDS:
                self._read_type(member, outer=decl)

    @staticmethod
    def _read_components(node: Any) -> list[FieldDecl]:
        """Record components, which are the record's fields."""
        fields: list[FieldDecl] = []
        for param in _named(node):
            if param.type != "formal_parameter":
                continue
            modifiers, annotations = read_modifiers(_find_child(param, "modifiers"))
            type_node = param.child_by_field_name("type")
            name = node_text(param.child_by_field_name("name"))
            syntax = read_type_syntax(type_node) if type_node is not None else None
            if syntax is None or not name:
                continue
            dims = node_text(param.child_by_field_name("dimensions")).count("[")
            fields.append(
                FieldDecl(
                    name=name,
                    type_syntax=_with_extra_dims(syntax, dims),
                    modifiers=modifiers,
                    annotations=annotations,
                    line=param.start_point[0] + 1,
                )
            )
        return fields

    @staticmethod
    def _read_fields(node: Any) -> list[FieldDecl]:
        modifiers, annotations = read_modifiers(_find_child(node, "modifiers"))
        type_node = node.child_by_field_name("type")
        syntax = read_type_syntax(type_node) if type_node is not None else None
        if syntax is None:
            return []
        fields: list[FieldDecl] = []
        for declarator in node.children_by_field_name("declarator"):
            name = node_text(declarator.child_by_field_name("name"))
            if not name:
                continue
            # C-style array declarators: byte data[];
            dims = node_text(declarator.child_by_field_name("dimensions")).count("[")
            fields.append(
                FieldDecl(
                    name=name,
                    type_syntax=_with_extra_dims(syntax, dims),
                    modifiers=modifiers,
                    annotations=annotations,
                    line=declarator.start_point[0] + 1,
                )
            )
        return fields


# =============================================================================
# Index
# =============================================================================


class SymbolIndex:
    """Read-only symbol table shared by both extraction passes."""

    def __init__(self) -> None:
        self._types: dict[str, TypeDecl] = {}
        self._order: list[TypeDecl] = []
        self.units: list[SourceUnit] = []
        self.failures: list[ParseFailure] = []
        self.duplicates: list[TypeDecl] = []

    @classmethod
    def build(
        cls,
        sources: list[SourceFile],
        *,
        max_file_size_bytes: int | None = None,
        parser: JavaParser | None = None,
    ) -> SymbolIndex:
        """Parse every source file and resolve declared types.

        Files that cannot be read, decoded or parsed cleanly are recorded in
        ``failures`` and skipped.
        """
        index = cls()
        parser = parser or JavaParser()

        for source in sources:
            if max_file_size_bytes is not None and source.size > max_file_size_bytes:
                index._fail(source, f"file size {source.size} exceeds {max_file_size_bytes} bytes")
                continue
            try:
                content = source.path.read_bytes()
                content.decode("utf-8")
            except (OSError, UnicodeDecodeError) as e:
                index._fail(source, str(e))
                continue

            result = parser.parse(source.path, content)
            if result.has_errors:
                reason = f"syntax errors ({result.error_count} of {result.total_nodes} nodes)"
                index._fail(source, reason)
                continue

            index._register(_UnitReader(source.rel_path).read(result.root_node))

        index._finalize()
        log.info(
            "symbol_index_built",
            files=len(index.units),
            types=len(index._types),
            failures=len(index.failures),
        )
        return index

    def _fail(self, source: SourceFile, reason: str) -> None:
        log.debug("source_skipped", path=source.rel_path, reason=reason)
        self.failures.append(ParseFailure(rel_path=source.rel_path, reason=reason))

    def _register(self, unit: SourceUnit) -> None:
        self.units.append(unit)
        for decl in unit.types:
            if decl.fqn in self._types:
                log.debug(
                    "duplicate_type",
                    type=decl.fqn,
                    path=unit.rel_path,
                    first=self._types[decl.fqn].unit.rel_path,
                )
                self.duplicates.append(decl)
                continue
            self._types[decl.fqn] = decl
            self._order.append(decl)

    def _finalize(self) -> None:
        for decl in self._order:
            if decl.superclass_syntax is not None:
                decl.superclass = self.resolve_type(decl.superclass_syntax, decl)
            for fld in decl.fields:
                fld.declared_type = self.resolve_type(fld.type_syntax, decl)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, fqn: object) -> bool:
        return fqn in self._types

    def declarations(self) -> Iterator[TypeDecl]:
        """All unique declarations, in sorted-file then source order."""
        return iter(self._order)

    def lookup(self, fqn: str | None) -> TypeDecl | None:
        if fqn is None:
            return None
        return self._types.get(fqn)

    def superclass_of(self, decl: TypeDecl) -> TypeDecl | None:
        """Declaration of the direct superclass, when it is in the corpus."""
        return self.lookup(concrete_name(decl.superclass))

    def enum_constants(self, declared: DeclaredType | None) -> list[str] | None:
        """Constant names of an enum type in source order, or None if unresolvable."""
        decl = self.lookup(concrete_name(declared))
        if decl is None or not decl.is_enum:
            return None
        return list(decl.enum_constants)

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def resolve_type(self, syntax: TypeSyntax, context: TypeDecl) -> DeclaredType:
        """Resolve a written type in the scope of a declaration."""
        if syntax.array_dims:
            element = self.resolve_type(
                dataclasses.replace(syntax, array_dims=0, text=syntax.text.rstrip("[]")), context
            )
            if isinstance(element, UnresolvedType):
                return UnresolvedType(syntax.text, type_variable=element.type_variable)
            return ScalarType(display_name(element) + "[]" * syntax.array_dims)

        if syntax.is_primitive:
            return ScalarType(syntax.name)

        if "." not in syntax.name and syntax.name in self._type_variables(context):
            return UnresolvedType(syntax.text, type_variable=True)

        fqn = self.resolve_name(syntax.name, context)
        if fqn is None:
            log.debug("type_unresolved", type=syntax.text, context=context.fqn)
            return UnresolvedType(syntax.text)

        if fqn in OPTIONAL_TYPES:
            return OptionalType(self._argument(syntax, 0, context))
        if fqn in COLLECTION_TYPES:
            return CollectionType(fqn, self._argument(syntax, 0, context))
        if fqn in MAP_TYPES:
            return CollectionType(fqn, self._argument(syntax, 1, context))
        return ScalarType(fqn)

    def _argument(self, syntax: TypeSyntax, position: int, context: TypeDecl) -> DeclaredType | None:
        if position >= len(syntax.arguments):
            return None
        argument = syntax.arguments[position]
        return self.resolve_type(argument, context) if argument is not None else None

    @staticmethod
    def _type_variables(context: TypeDecl) -> set[str]:
        names: set[str] = set()
        scope: TypeDecl | None = context
        while scope is not None:
            names.update(scope.type_parameters)
            scope = scope.outer
        return names

    def resolve_name(self, name: str, context: TypeDecl) -> str | None:
        """Fully-qualified name for a (possibly qualified) type name, or None."""
        if name in PRIMITIVES:
            return name
        head, _, rest = name.partition(".")
        resolved_head = self._resolve_simple(head, context)
        if resolved_head is not None:
            return f"{resolved_head}.{rest}" if rest else resolved_head
        if rest and (name in self._types or head[:1].islower()):
            return name
        return None

    def _resolve_simple(self, name: str, context: TypeDecl) -> str | None:
        unit = context.unit

        # The declaration itself, its enclosing types and their member types
        scope: TypeDecl | None = context
        while scope is not None:
            if scope.simple_name == name:
                return scope.fqn
            member = f"{scope.fqn}.{name}"
            if member in self._types:
                return member
            scope = scope.outer

        if name in unit.imports:
            return unit.imports[name]

        same_package = f"{unit.package}.{name}" if unit.package else name
        if same_package in self._types:
            return same_package

        for prefix in unit.wildcard_imports:
            candidate = f"{prefix}.{name}"
            if candidate in self._types or name in WELL_KNOWN_PACKAGES.get(prefix, ()):
                return candidate

        if name in JAVA_LANG_TYPES:
            return f"java.lang.{name}"
        return None
