"""Tests for the symbol index: declarations and name resolution."""

from collections.abc import Callable
from pathlib import Path

import pytest

from schemaplane.index.discovery import discover_sources
from schemaplane.index.symbols import SymbolIndex
from schemaplane.index.types import (
    CollectionType,
    OptionalType,
    ScalarType,
    UnresolvedType,
)

SourceWriter = Callable[[dict[str, str]], Path]


def _build(write_sources: SourceWriter, files: dict[str, str], **kwargs: int) -> SymbolIndex:
    root = write_sources(files)
    return SymbolIndex.build(discover_sources(root), **kwargs)


def _field_type(index: SymbolIndex, fqn: str, name: str) -> object:
    decl = index.lookup(fqn)
    assert decl is not None
    fld = next(f for f in decl.fields if f.name == name)
    return fld.declared_type


class TestDeclarations:
    """What the index records per declaration."""

    def test_given_nested_types_when_indexed_then_qualified_by_enclosing_type(
        self, write_sources: SourceWriter
    ) -> None:
        """Nested types are registered under Outer.Inner."""
        # Given
        files = {
            "com/acme/Outer.java": """
                package com.acme;

                public class Outer {
                    public static class Inner {
                        private String value;
                    }

                    public enum Kind { A, B }
                }
            """
        }

        # When
        index = _build(write_sources, files)

        # Then
        assert "com.acme.Outer" in index
        assert "com.acme.Outer.Inner" in index
        kind = index.lookup("com.acme.Outer.Kind")
        assert kind is not None
        assert kind.is_enum
        assert kind.enum_constants == ["A", "B"]

    def test_given_enum_with_bodies_when_indexed_then_constants_in_source_order(
        self, write_sources: SourceWriter
    ) -> None:
        """Constants with arguments and bodies keep declaration order."""
        # Given
        files = {
            "Status.java": """
                public enum Status {
                    DRAFT("d"),
                    PUBLISHED("p") {
                        @Override
                        public String toString() { return "published"; }
                    },
                    ARCHIVED("a");

                    private final String code;

                    Status(String code) { this.code = code; }
                }
            """
        }

        # When
        index = _build(write_sources, files)

        # Then
        assert index.enum_constants(ScalarType("Status")) == ["DRAFT", "PUBLISHED", "ARCHIVED"]

    def test_given_field_modifiers_when_indexed_then_keywords_and_annotations_split(
        self, write_sources: SourceWriter
    ) -> None:
        """Modifier keywords and annotations are recorded separately."""
        # Given
        files = {
            "Thing.java": """
                public class Thing {
                    private static final long serialVersionUID = 1L;
                    @Deprecated private transient String cache;
                    private int width, height;
                }
            """
        }

        # When
        index = _build(write_sources, files)

        # Then
        decl = index.lookup("Thing")
        assert decl is not None
        fields = {f.name: f for f in decl.fields}
        assert list(fields) == ["serialVersionUID", "cache", "width", "height"]
        assert fields["serialVersionUID"].is_static
        assert fields["cache"].is_transient
        assert fields["cache"].annotations.has("Deprecated")
        assert fields["height"].declared_type == ScalarType("int")

    def test_given_duplicate_declaration_when_indexed_then_first_file_wins(
        self, write_sources: SourceWriter
    ) -> None:
        """The first declaration in sorted file order is kept."""
        # Given
        files = {
            "a/User.java": "package com.acme;\npublic class User { private String first; }\n",
            "b/User.java": "package com.acme;\npublic class User { private String second; }\n",
        }

        # When
        index = _build(write_sources, files)

        # Then
        user = index.lookup("com.acme.User")
        assert user is not None
        assert [f.name for f in user.fields] == ["first"]
        assert [d.unit.rel_path for d in index.duplicates] == ["b/User.java"]

    def test_given_broken_file_when_indexed_then_recorded_and_skipped(
        self, write_sources: SourceWriter
    ) -> None:
        """A file with syntax errors is a parse failure; other files still index."""
        # Given
        files = {
            "Broken.java": "public class Broken { private String name\n",
            "Good.java": "public class Good { private String name; }\n",
        }

        # When
        index = _build(write_sources, files)

        # Then
        assert "Good" in index
        assert "Broken" not in index
        assert [f.rel_path for f in index.failures] == ["Broken.java"]

    def test_given_oversized_file_when_indexed_then_skipped(
        self, write_sources: SourceWriter
    ) -> None:
        """Files over the size limit are not parsed."""
        # Given
        files = {"Big.java": "public class Big { private String name; }\n"}

        # When
        index = _build(write_sources, files, max_file_size_bytes=10)

        # Then
        assert len(index) == 0
        assert "exceeds" in index.failures[0].reason

    def test_given_record_when_indexed_then_components_are_fields(
        self, write_sources: SourceWriter
    ) -> None:
        """Record components are indexed as fields in declaration order."""
        # Given
        files = {
            "p/Point.java": """
                package p;

                public record Point(int x, @Deprecated long y, byte[] tag) {
                    static int ORIGIN = 0;
                }
            """
        }

        # When
        index = _build(write_sources, files)

        # Then
        point = index.lookup("p.Point")
        assert point is not None
        assert point.kind == "record"
        assert [f.name for f in point.fields] == ["x", "y", "tag", "ORIGIN"]
        assert point.fields[1].annotations.has("Deprecated")
        assert _field_type(index, "p.Point", "tag") == ScalarType("byte[]")
        assert point.fields[3].is_static


class TestResolution:
    """Resolution of written type names."""

    def test_given_imports_and_package_when_resolved_then_qualified(
        self, write_sources: SourceWriter
    ) -> None:
        """Single imports, same-package types, java.lang and JDK wildcards resolve."""
        # Given
        files = {
            "com/acme/model/Post.java": """
                package com.acme.model;

                import com.acme.types.Status;
                import java.time.*;
                import java.util.List;

                public class Post {
                    private Status status;
                    private Author author;
                    private String title;
                    private LocalDate published;
                    private List<Comment> comments;
                }
            """,
            "com/acme/model/Author.java": "package com.acme.model;\npublic class Author {}\n",
            "com/acme/model/Comment.java": "package com.acme.model;\npublic class Comment {}\n",
            "com/acme/types/Status.java": "package com.acme.types;\npublic enum Status { A }\n",
        }

        # When
        index = _build(write_sources, files)

        # Then
        post = "com.acme.model.Post"
        assert _field_type(index, post, "status") == ScalarType("com.acme.types.Status")
        assert _field_type(index, post, "author") == ScalarType("com.acme.model.Author")
        assert _field_type(index, post, "title") == ScalarType("java.lang.String")
        assert _field_type(index, post, "published") == ScalarType("java.time.LocalDate")
        assert _field_type(index, post, "comments") == CollectionType(
            "java.util.List", ScalarType("com.acme.model.Comment")
        )

    def test_given_single_import_when_same_package_has_same_name_then_import_wins(
        self, write_sources: SourceWriter
    ) -> None:
        """A single-type import shadows a same-package type."""
        # Given
        files = {
            "a/Holder.java": """
                package a;

                import b.Money;

                public class Holder { private Money amount; }
            """,
            "a/Money.java": "package a;\npublic class Money {}\n",
            "b/Money.java": "package b;\npublic class Money {}\n",
        }

        # When
        index = _build(write_sources, files)

        # Then
        assert _field_type(index, "a.Holder", "amount") == ScalarType("b.Money")

    def test_given_generic_wrappers_when_resolved_then_tagged_variants(
        self, write_sources: SourceWriter
    ) -> None:
        """Optional, maps, wildcards and arrays become the right variants."""
        # Given
        files = {
            "Shapes.java": """
                import java.util.*;

                public class Shapes {
                    private Optional<String> nickname;
                    private Map<String, Shapes> byName;
                    private Set<? extends Shapes> bounded;
                    private List<?> anything;
                    private List raw;
                    private byte[] data;
                    private byte legacy[];
                }
            """
        }

        # When
        index = _build(write_sources, files)

        # Then
        assert _field_type(index, "Shapes", "nickname") == OptionalType(
            ScalarType("java.lang.String")
        )
        assert _field_type(index, "Shapes", "byName") == CollectionType(
            "java.util.Map", ScalarType("Shapes")
        )
        assert _field_type(index, "Shapes", "bounded") == CollectionType(
            "java.util.Set", ScalarType("Shapes")
        )
        assert _field_type(index, "Shapes", "anything") == CollectionType("java.util.List", None)
        assert _field_type(index, "Shapes", "raw") == CollectionType("java.util.List", None)
        assert _field_type(index, "Shapes", "data") == ScalarType("byte[]")
        assert _field_type(index, "Shapes", "legacy") == ScalarType("byte[]")

    def test_given_type_parameter_when_resolved_then_type_variable(
        self, write_sources: SourceWriter
    ) -> None:
        """Class type parameters never resolve to a class."""
        # Given
        files = {"Box.java": "public class Box<T> { private T content; }\n"}

        # When
        index = _build(write_sources, files)

        # Then
        assert _field_type(index, "Box", "content") == UnresolvedType("T", type_variable=True)

    @pytest.mark.parametrize(
        ("written", "expected"),
        [
            ("java.math.BigDecimal", ScalarType("java.math.BigDecimal")),
            ("Missing", UnresolvedType("Missing")),
        ],
    )
    def test_given_qualified_or_unknown_name_when_resolved_then_literal_kept(
        self, write_sources: SourceWriter, written: str, expected: object
    ) -> None:
        """Fully-qualified names pass through; unknown names keep their literal."""
        # Given
        files = {"Account.java": f"public class Account {{ private {written} value; }}\n"}

        # When
        index = _build(write_sources, files)

        # Then
        assert _field_type(index, "Account", "value") == expected

    def test_given_superclass_in_corpus_when_queried_then_declaration_returned(
        self, write_sources: SourceWriter
    ) -> None:
        """superclass_of follows extends clauses within the corpus."""
        # Given
        files = {
            "p/Base.java": "package p;\npublic abstract class Base<T> {}\n",
            "p/Child.java": "package p;\npublic class Child extends Base<String> {}\n",
            "p/Orphan.java": "package p;\npublic class Orphan extends Unknown {}\n",
        }

        # When
        index = _build(write_sources, files)

        # Then
        child = index.lookup("p.Child")
        orphan = index.lookup("p.Orphan")
        assert child is not None and orphan is not None
        base = index.superclass_of(child)
        assert base is not None and base.fqn == "p.Base"
        assert index.superclass_of(orphan) is None


def test_given_nonexistent_enum_when_constants_requested_then_none() -> None:
    """Unresolvable enums yield None, not an empty list."""
    index = SymbolIndex.build([])
    assert index.enum_constants(UnresolvedType("Nope")) is None
