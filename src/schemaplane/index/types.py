"""Declared types of fields and supertypes.

Two layers:

``TypeSyntax``
    The type exactly as written (``List<Comment>``), captured at parse time.

``DeclaredType``
    The resolved form, a closed set of variants:

    - ``ScalarType``: a resolved, non-wrapping type (``java.lang.String``,
      ``long``, ``byte[]``, ``com.acme.User``)
    - ``OptionalType``: an optional-like wrapper around one type
    - ``CollectionType``: a multi-valued container and its element type
    - ``UnresolvedType``: the literal text, when resolution failed

Functions at the bottom of this module are total over the variants; they
are the only place that looks inside a declared type.
"""

from __future__ import annotations

from dataclasses import dataclass

PRIMITIVES: frozenset[str] = frozenset(
    {"boolean", "byte", "char", "short", "int", "long", "float", "double", "void"}
)

OPTIONAL_TYPES: frozenset[str] = frozenset(
    {
        "java.util.Optional",
        "com.google.common.base.Optional",
        "io.vavr.control.Option",
    }
)

# Multi-valued containers. Element is the first type argument...
COLLECTION_TYPES: frozenset[str] = frozenset(
    {
        "java.lang.Iterable",
        "java.util.Collection",
        "java.util.List",
        "java.util.Set",
        "java.util.SortedSet",
        "java.util.NavigableSet",
        "java.util.Queue",
        "java.util.Deque",
        "java.util.ArrayList",
        "java.util.LinkedList",
        "java.util.HashSet",
        "java.util.LinkedHashSet",
        "java.util.TreeSet",
    }
)

# ...except for maps, where it is the value type argument.
MAP_TYPES: frozenset[str] = frozenset(
    {
        "java.util.Map",
        "java.util.SortedMap",
        "java.util.HashMap",
        "java.util.LinkedHashMap",
        "java.util.TreeMap",
    }
)

OBJECT_TYPE = "java.lang.Object"


@dataclass(frozen=True)
class TypeSyntax:
    """A type as written in source."""

    name: str  # Erased name as written: "List", "java.util.List", "int"
    text: str  # Full literal: "List<Comment>"
    arguments: tuple[TypeSyntax | None, ...] = ()  # None for an unbounded wildcard
    array_dims: int = 0

    @property
    def is_primitive(self) -> bool:
        return self.name in PRIMITIVES


@dataclass(frozen=True)
class ScalarType:
    name: str


@dataclass(frozen=True)
class OptionalType:
    inner: DeclaredType | None


@dataclass(frozen=True)
class CollectionType:
    container: str
    element: DeclaredType | None


@dataclass(frozen=True)
class UnresolvedType:
    literal: str
    type_variable: bool = False


DeclaredType = ScalarType | OptionalType | CollectionType | UnresolvedType


def display_name(declared: DeclaredType | None) -> str:
    """Human-readable type name, as stored in ``Column.java_type``."""
    if declared is None:
        return "UNKNOWN"
    if isinstance(declared, ScalarType):
        return declared.name
    if isinstance(declared, OptionalType):
        return f"Optional<{display_name(declared.inner)}>"
    if isinstance(declared, CollectionType):
        if declared.element is None:
            return declared.container
        return f"{declared.container}<{display_name(declared.element)}>"
    return declared.literal


def simple_name(name: str) -> str:
    """Last segment of a dotted name, generic arguments dropped."""
    return name.split("<", 1)[0].rsplit(".", 1)[-1]


def storage_type_name(declared: DeclaredType | None) -> str | None:
    """Simple type name used for storage mapping, after optional unwrapping.

    Collections have no storage name of their own and return None.
    """
    declared = unwrap_optional(declared)
    if declared is None or isinstance(declared, CollectionType):
        return None
    if isinstance(declared, ScalarType):
        return simple_name(declared.name)
    if declared.type_variable:
        return None
    return simple_name(declared.literal)


def unwrap_optional(declared: DeclaredType | None) -> DeclaredType | None:
    while isinstance(declared, OptionalType):
        declared = declared.inner
    return declared


def concrete_name(declared: DeclaredType | None) -> str | None:
    """Name of a concrete, non-generic class type, or None.

    Rejects type variables, primitives, arrays, ``java.lang.Object``,
    containers and literals that still carry generic syntax.
    """
    declared = unwrap_optional(declared)
    if isinstance(declared, ScalarType):
        name = declared.name
        if name in PRIMITIVES or name.endswith("]") or name == OBJECT_TYPE:
            return None
        return name
    if isinstance(declared, UnresolvedType):
        literal = declared.literal
        if declared.type_variable or not literal or any(c in literal for c in "<>?[]"):
            return None
        if literal in PRIMITIVES or literal == "Object":
            return None
        return literal
    return None


def is_collection(declared: DeclaredType | None) -> bool:
    return isinstance(unwrap_optional(declared), CollectionType)


def element_type(declared: DeclaredType | None) -> DeclaredType | None:
    """Element type of a container, or the (unwrapped) type itself."""
    unwrapped = unwrap_optional(declared)
    if isinstance(unwrapped, CollectionType):
        return unwrapped.element
    return unwrapped
