"""Shared documents for describe tests."""

from datetime import UTC, datetime

import pytest

from schemaplane.schema.models import (
    Column,
    Entity,
    EnumSpec,
    EnumStorage,
    FetchType,
    Relationship,
    RelationshipKind,
    SchemaDocument,
)


@pytest.fixture
def shop_document() -> SchemaDocument:
    """Customer 1:N Order, Order N:1 Customer, Order N:M Product."""
    customer = Entity(
        java_class_name="shop.Customer",
        table_name="customers",
        columns=[
            Column(
                field_name="id",
                column_name="id",
                java_type="java.lang.Long",
                sql_type="BIGINT",
                primary_key=True,
                generation_strategy="IDENTITY",
                nullable=False,
                unique=True,
            ),
            Column(
                field_name="email",
                column_name="email",
                java_type="java.lang.String",
                sql_type="VARCHAR",
                nullable=False,
                unique=True,
                length=120,
            ),
        ],
        relationships=[
            Relationship(
                field_name="orders",
                kind=RelationshipKind.ONE_TO_MANY,
                target_entity_java_class="shop.Order",
                mapped_by="customer",
                fetch_type=FetchType.LAZY,
            )
        ],
    )
    order = Entity(
        java_class_name="shop.Order",
        table_name="orders",
        columns=[
            Column(
                field_name="id",
                column_name="id",
                java_type="java.lang.Long",
                sql_type="BIGINT",
                primary_key=True,
                generation_strategy="AUTO",
                nullable=False,
                unique=True,
            ),
            Column(
                field_name="total",
                column_name="total",
                java_type="java.math.BigDecimal",
                sql_type="NUMERIC",
                nullable=True,
                unique=False,
                precision=10,
                scale=2,
            ),
            Column(
                field_name="status",
                column_name="status",
                java_type="shop.Status",
                sql_type="INTEGER",
                nullable=True,
                unique=False,
                is_enum=True,
                enum_info=EnumSpec(
                    storage_type=EnumStorage.ORDINAL, possible_values=["NEW", "PAID"]
                ),
            ),
        ],
        relationships=[
            Relationship(
                field_name="customer",
                kind=RelationshipKind.MANY_TO_ONE,
                target_entity_java_class="shop.Customer",
                fetch_type=FetchType.EAGER,
                owning_side=True,
                join_column_name="customer_id",
            ),
            Relationship(
                field_name="buyer",
                kind=RelationshipKind.MANY_TO_ONE,
                target_entity_java_class="shop.Customer",
                fetch_type=FetchType.EAGER,
                owning_side=True,
                join_column_name="buyer_id",
            ),
            Relationship(
                field_name="products",
                kind=RelationshipKind.MANY_TO_MANY,
                target_entity_java_class="shop.Product",
                fetch_type=FetchType.LAZY,
                owning_side=True,
                join_table_name="order_products",
            ),
        ],
    )
    product = Entity(
        java_class_name="shop.Product",
        table_name="products",
        columns=[
            Column(
                field_name="sku",
                column_name="sku",
                java_type="java.lang.String",
                sql_type="VARCHAR",
                primary_key=True,
                nullable=False,
                unique=True,
            )
        ],
    )
    return SchemaDocument(
        repository_url="test://shop",
        analysis_timestamp=datetime(2024, 1, 1, tzinfo=UTC),
        entities=[customer, order, product],
    )
