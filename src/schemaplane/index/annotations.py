"""Annotation values read out of Java syntax trees.

Annotations are converted into plain data while the tree is still alive, so
the symbol index never has to keep syntax nodes around. Values keep just
enough shape for the schema passes:

- string, integer, floating point and boolean literals become Python values
- names such as ``GenerationType.IDENTITY`` become ``ConstantRef``
- ``Comment.class`` becomes ``ClassLiteral``
- ``{a, b}`` becomes a tuple
- nested annotations become ``Annotation``

Anything else (method calls, arithmetic) reads as None.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ConstantRef:
    """A reference to a named constant, e.g. ``FetchType.LAZY``."""

    text: str

    @property
    def name(self) -> str:
        return self.text.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class ClassLiteral:
    """A ``X.class`` literal; ``type_name`` is the literal as written."""

    type_name: str


@dataclass
class Annotation:
    """A single annotation use. Single-member values are stored under ``value``."""

    name: str
    qualified_name: str
    arguments: dict[str, AnnotationValue] = field(default_factory=dict)

    def get(self, key: str = "value") -> AnnotationValue:
        return self.arguments.get(key)

    def get_str(self, key: str = "value") -> str | None:
        value = self.arguments.get(key)
        if isinstance(value, str):
            return value
        if isinstance(value, ConstantRef):
            return value.text
        return None

    def get_bool(self, key: str) -> bool | None:
        value = self.arguments.get(key)
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
        return None

    def get_int(self, key: str) -> int | None:
        value = self.arguments.get(key)
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.strip().lstrip("-").isdigit():
            return int(value)
        return None

    def get_constant(self, key: str = "value") -> str | None:
        """Constant name with its qualifier stripped (``EnumType.STRING`` -> ``STRING``)."""
        value = self.arguments.get(key)
        if isinstance(value, ConstantRef):
            return value.name
        if isinstance(value, str):
            return value.rsplit(".", 1)[-1]
        return None

    def get_constants(self, key: str) -> list[str]:
        """Constant names of a single value or array value, in declaration order."""
        value = self.arguments.get(key)
        items = value if isinstance(value, tuple) else (value,)
        names: list[str] = []
        for item in items:
            if isinstance(item, ConstantRef):
                names.append(item.name)
            elif isinstance(item, str):
                names.append(item.rsplit(".", 1)[-1])
        return names

    def get_annotations(self, key: str = "value") -> list[Annotation]:
        """Nested annotations of a single value or array value."""
        value = self.arguments.get(key)
        items = value if isinstance(value, tuple) else (value,)
        return [item for item in items if isinstance(item, Annotation)]

    def get_class(self, key: str) -> ClassLiteral | None:
        value = self.arguments.get(key)
        return value if isinstance(value, ClassLiteral) else None


class Annotations:
    """Annotations on one declaration, looked up by simple name.

    ``@Entity`` and ``@jakarta.persistence.Entity`` both match ``"Entity"``.
    """

    def __init__(self, items: list[Annotation] | None = None) -> None:
        self._items = list(items or [])

    def __iter__(self) -> Iterator[Annotation]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def find(self, name: str) -> Annotation | None:
        for item in self._items:
            if item.name == name:
                return item
        return None

    def find_all(self, name: str) -> list[Annotation]:
        return [item for item in self._items if item.name == name]

    def has(self, *names: str) -> bool:
        return any(item.name in names for item in self._items)

    def __repr__(self) -> str:
        return f"Annotations({[a.name for a in self._items]!r})"


AnnotationValue = (
    str | int | float | bool | ConstantRef | ClassLiteral | Annotation | tuple[Any, ...] | None
)


# =============================================================================
# Tree-sitter readers
# =============================================================================

_ANNOTATION_NODES = frozenset({"annotation", "marker_annotation"})

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "s": " ",
    "0": "\0",
    '"': '"',
    "'": "'",
    "\\": "\\",
}
_ESCAPE_RE = re.compile(r"\\u+([0-9a-fA-F]{4})|\\(.)", re.DOTALL)


def node_text(node: Any) -> str:
    return node.text.decode("utf-8") if node is not None and node.text else ""


def _unescape(body: str) -> str:
    def replace(match: re.Match[str]) -> str:
        if match.group(1):
            return chr(int(match.group(1), 16))
        return _ESCAPES.get(match.group(2), match.group(0))

    return _ESCAPE_RE.sub(replace, body)


def _string_value(node: Any) -> str:
    raw = node_text(node)
    if raw.startswith('"""'):
        body = raw[3:-3]
        # Text blocks start after the line terminator following the opening quotes
        if body.startswith("\n"):
            body = body[1:]
        elif body.startswith("\r\n"):
            body = body[2:]
    else:
        body = raw[1:-1]
    return _unescape(body)


def _int_value(text: str) -> int | None:
    cleaned = text.replace("_", "").rstrip("lL")
    try:
        if cleaned.startswith(("0x", "0X", "0b", "0B")):
            return int(cleaned, 0)
        if len(cleaned) > 1 and cleaned.startswith("0"):
            return int(cleaned, 8)
        return int(cleaned)
    except ValueError:
        return None


def _is_comment(node: Any) -> bool:
    return node.type.endswith("comment")


def read_value(node: Any) -> AnnotationValue:
    """Convert an annotation element value node into plain data."""
    kind = node.type
    if kind == "string_literal":
        return _string_value(node)
    if kind == "true":
        return True
    if kind == "false":
        return False
    if kind.endswith("integer_literal"):
        return _int_value(node_text(node))
    if kind.endswith("floating_point_literal"):
        try:
            return float(node_text(node).replace("_", "").rstrip("fFdD"))
        except ValueError:
            return None
    if kind in ("identifier", "field_access", "scoped_identifier"):
        return ConstantRef(node_text(node))
    if kind == "class_literal":
        type_node = node.named_children[0] if node.named_children else None
        return ClassLiteral(node_text(type_node)) if type_node is not None else None
    if kind == "element_value_array_initializer":
        return tuple(read_value(child) for child in node.named_children if not _is_comment(child))
    if kind in _ANNOTATION_NODES:
        return read_annotation(node)
    if kind == "parenthesized_expression":
        inner = [child for child in node.named_children if not _is_comment(child)]
        return read_value(inner[0]) if inner else None
    if kind == "unary_expression":
        operand = node.child_by_field_name("operand")
        operator = node.child_by_field_name("operator")
        value = read_value(operand) if operand is not None else None
        if node_text(operator) == "-" and isinstance(value, int | float) and not isinstance(
            value, bool
        ):
            return -value
        return value if node_text(operator) == "+" else None
    if kind == "binary_expression":
        # Compile-time string concatenation: "user_" + "roles"
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if node_text(node.child_by_field_name("operator")) == "+":
            lhs = read_value(left) if left is not None else None
            rhs = read_value(right) if right is not None else None
            if isinstance(lhs, str) and isinstance(rhs, str):
                return lhs + rhs
        return None
    return None


def read_annotation(node: Any) -> Annotation:
    """Convert an ``annotation`` or ``marker_annotation`` node."""
    qualified = node_text(node.child_by_field_name("name"))
    annotation = Annotation(name=qualified.rsplit(".", 1)[-1], qualified_name=qualified)

    arguments = node.child_by_field_name("arguments")
    if arguments is None:
        return annotation

    for child in arguments.named_children:
        if _is_comment(child):
            continue
        if child.type == "element_value_pair":
            key = node_text(child.child_by_field_name("key"))
            value_node = child.child_by_field_name("value")
            annotation.arguments[key] = read_value(value_node) if value_node is not None else None
        else:
            annotation.arguments["value"] = read_value(child)
    return annotation


def read_modifiers(node: Any) -> tuple[frozenset[str], Annotations]:
    """Split a ``modifiers`` node into keywords and annotations.

    Args:
        node: The ``modifiers`` node, or None when the declaration has none.

    Returns:
        (keywords such as ``static``/``transient``, annotations in source order)
    """
    if node is None:
        return frozenset(), Annotations()
    keywords: set[str] = set()
    items: list[Annotation] = []
    for child in node.children:
        if child.type in _ANNOTATION_NODES:
            items.append(read_annotation(child))
        elif not child.is_named:
            keywords.add(child.type)
    return frozenset(keywords), Annotations(items)
