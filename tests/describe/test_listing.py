"""Tests for the compact schema listing."""

from schemaplane.describe.listing import render_column, render_schema_listing
from schemaplane.schema.models import Column, EnumSpec, EnumStorage, SchemaDocument


class TestRenderSchemaListing:
    """Whole-document listing."""

    def test_given_document_when_listed_then_tables_columns_and_keys(
        self, shop_document: SchemaDocument
    ) -> None:
        """Each table lists its columns followed by foreign key lines."""
        # When
        listing = render_schema_listing(shop_document)

        # Then
        assert listing == (
            "Table: customers\n"
            "  - id (BIGINT) [PK] [AUTO_INCREMENT]\n"
            "  - email (VARCHAR(120)) [NOT NULL] [UNIQUE]\n"
            "\n"
            "Table: orders\n"
            "  - id (BIGINT) [PK]\n"
            "  - total (NUMERIC(10,2))\n"
            "  - status (INTEGER) -- ENUM VALUES: [0='NEW', 1='PAID']\n"
            "  - customer_id (BIGINT) [FK] -- References Table: Customer\n"
            "  - buyer_id (BIGINT) [FK] -- References Table: Customer\n"
            "\n"
            "Table: products\n"
            "  - sku (VARCHAR) [PK]\n"
        )

    def test_given_join_column_already_listed_when_listed_then_no_duplicate_fk(
        self, shop_document: SchemaDocument
    ) -> None:
        """A join column mapped as a column is not repeated as an FK line."""
        # Given
        order = shop_document.entity("Order")
        assert order is not None
        order.columns.append(
            Column(
                field_name="customerId",
                column_name="customer_id",
                java_type="java.lang.Long",
                sql_type="BIGINT",
            )
        )

        # When
        listing = render_schema_listing(shop_document)

        # Then
        assert listing.count("customer_id") == 1
        assert "[FK]" in listing


class TestRenderColumn:
    """Single column lines."""

    def test_given_string_enum_without_values_when_rendered_then_unknown(self) -> None:
        """An enum with no known values is marked UNKNOWN."""
        # Given
        column = Column(
            field_name="currency",
            column_name="currency",
            java_type="Currency",
            sql_type="VARCHAR",
            is_enum=True,
            enum_info=EnumSpec(storage_type=EnumStorage.STRING),
        )

        # When / Then
        assert render_column(column) == "  - currency (VARCHAR) -- ENUM VALUES: (UNKNOWN)"

    def test_given_string_enum_when_rendered_then_names_listed(self) -> None:
        """STRING enums list constant names."""
        column = Column(
            field_name="status",
            column_name="status",
            java_type="Status",
            sql_type="VARCHAR",
            nullable=False,
            is_enum=True,
            enum_info=EnumSpec(storage_type=EnumStorage.STRING, possible_values=["A", "B"]),
        )
        assert render_column(column) == "  - status (VARCHAR) [NOT NULL] -- ENUM VALUES: [A, B]"
