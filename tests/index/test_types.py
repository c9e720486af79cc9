"""Tests for declared type variants and the functions over them."""

import pytest

from schemaplane.index.types import (
    CollectionType,
    OptionalType,
    ScalarType,
    UnresolvedType,
    concrete_name,
    display_name,
    element_type,
    is_collection,
    simple_name,
    storage_type_name,
)


class TestDisplayName:
    """Human-readable names stored as the column's Java type."""

    @pytest.mark.parametrize(
        ("declared", "expected"),
        [
            (ScalarType("java.lang.String"), "java.lang.String"),
            (ScalarType("byte[]"), "byte[]"),
            (OptionalType(ScalarType("java.lang.Integer")), "Optional<java.lang.Integer>"),
            (OptionalType(None), "Optional<UNKNOWN>"),
            (
                CollectionType("java.util.List", ScalarType("com.acme.Comment")),
                "java.util.List<com.acme.Comment>",
            ),
            (CollectionType("java.util.List", None), "java.util.List"),
            (UnresolvedType("Money"), "Money"),
            (None, "UNKNOWN"),
        ],
    )
    def test_given_declared_type_when_displayed_then_renders_literal(
        self, declared: object, expected: str
    ) -> None:
        """Every variant has a display form."""
        assert display_name(declared) == expected  # type: ignore[arg-type]


class TestStorageTypeName:
    """Simple names used to pick a storage type."""

    def test_given_optional_wrapper_when_named_then_unwraps_to_inner(self) -> None:
        """Optional<Integer> stores as Integer."""
        # Given
        declared = OptionalType(ScalarType("java.lang.Integer"))

        # When
        name = storage_type_name(declared)

        # Then
        assert name == "Integer"

    def test_given_collection_when_named_then_has_no_storage_name(self) -> None:
        """Collections have no storage name of their own."""
        assert storage_type_name(CollectionType("java.util.Set", ScalarType("x.Tag"))) is None

    def test_given_type_variable_when_named_then_has_no_storage_name(self) -> None:
        """Type variables cannot be mapped."""
        assert storage_type_name(UnresolvedType("T", type_variable=True)) is None

    def test_given_unresolved_qualified_literal_when_named_then_uses_last_segment(self) -> None:
        """Unresolved literals still map by simple name."""
        assert storage_type_name(UnresolvedType("org.joda.time.LocalDate")) == "LocalDate"


class TestConcreteName:
    """Names acceptable as relationship targets or embeddable lookups."""

    @pytest.mark.parametrize(
        ("declared", "expected"),
        [
            (ScalarType("com.acme.User"), "com.acme.User"),
            (OptionalType(ScalarType("com.acme.User")), "com.acme.User"),
            (UnresolvedType("User"), "User"),
            (ScalarType("java.lang.Object"), None),
            (ScalarType("long"), None),
            (ScalarType("com.acme.User[]"), None),
            (UnresolvedType("T", type_variable=True), None),
            (UnresolvedType("Box<T>"), None),
            (UnresolvedType("Object"), None),
            (CollectionType("java.util.List", ScalarType("com.acme.User")), None),
            (None, None),
        ],
    )
    def test_given_declared_type_when_checked_then_only_concrete_classes_pass(
        self, declared: object, expected: str | None
    ) -> None:
        """Primitives, arrays, Object, type variables and generics are rejected."""
        assert concrete_name(declared) == expected  # type: ignore[arg-type]


class TestContainers:
    """Collection detection and element extraction."""

    def test_given_collection_when_element_requested_then_returns_argument(self) -> None:
        """The element of a collection is its type argument."""
        # Given
        declared = CollectionType("java.util.List", ScalarType("com.acme.Comment"))

        # When / Then
        assert is_collection(declared)
        assert element_type(declared) == ScalarType("com.acme.Comment")

    def test_given_scalar_when_element_requested_then_returns_itself(self) -> None:
        """A single-valued type is its own element."""
        declared = OptionalType(ScalarType("com.acme.User"))

        assert not is_collection(declared)
        assert element_type(declared) == ScalarType("com.acme.User")


class TestSimpleName:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("java.util.List", "List"),
            ("java.util.List<java.lang.String>", "List"),
            ("byte[]", "byte[]"),
            ("User", "User"),
        ],
    )
    def test_given_name_when_simplified_then_last_segment(self, name: str, expected: str) -> None:
        assert simple_name(name) == expected
