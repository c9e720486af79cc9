"""Schema IR: the extraction output and its serialized form.

Serialized documents use camelCase keys and always emit every attribute.
An unset optional value is written as ``null``, never omitted, so that
"no join column" stays distinguishable from an empty name.

Build-time templates (``MappedSuperclassTemplate``) live here too but are
never part of a document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


# ============================================================================
# ENUMS
# ============================================================================


class RelationshipKind(str, Enum):
    ONE_TO_ONE = "OneToOne"
    ONE_TO_MANY = "OneToMany"
    MANY_TO_ONE = "ManyToOne"
    MANY_TO_MANY = "ManyToMany"

    @property
    def is_to_one(self) -> bool:
        return self in (RelationshipKind.ONE_TO_ONE, RelationshipKind.MANY_TO_ONE)


class FetchType(str, Enum):
    EAGER = "EAGER"
    LAZY = "LAZY"


class EnumStorage(str, Enum):
    """How an enumerated value is stored."""

    STRING = "STRING"  # Constant name
    ORDINAL = "ORDINAL"  # Declaration-order index


# ============================================================================
# IR
# ============================================================================


class SchemaModel(BaseModel):
    """Base for IR models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)


class EnumSpec(SchemaModel):
    storage_type: EnumStorage
    possible_values: list[str] = Field(default_factory=list)


class Column(SchemaModel):
    """One column of a table, or a column template of an embeddable."""

    field_name: str
    column_name: str
    java_type: str
    sql_type: str
    primary_key: bool = False
    generation_strategy: str | None = None
    nullable: bool | None = None
    unique: bool | None = None
    length: int | None = None
    precision: int | None = None
    scale: int | None = None
    is_enum: bool = False
    enum_info: EnumSpec | None = None
    is_embedded_attribute: bool = False
    embedded_from_field_name: str | None = None
    original_embeddable_field_name: str | None = None
    inherited: bool = False
    inherited_from_class: str | None = None


class Relationship(SchemaModel):
    """An association from the owning entity to a target entity."""

    field_name: str
    kind: RelationshipKind = Field(alias="type")
    target_entity_java_class: str
    mapped_by: str | None = None
    fetch_type: FetchType
    cascade_types: list[str] = Field(default_factory=list)
    owning_side: bool = False
    join_column_name: str | None = None
    join_table_name: str | None = None
    join_table_join_column_name: str | None = None
    join_table_inverse_join_column_name: str | None = None
    inherited: bool = False
    inherited_from_class: str | None = None


class Entity(SchemaModel):
    """One table."""

    java_class_name: str
    table_name: str
    mapped_superclass: str | None = None
    columns: list[Column] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)

    def column(self, field_name: str) -> Column | None:
        return next((c for c in self.columns if c.field_name == field_name), None)

    def relationship(self, field_name: str) -> Relationship | None:
        return next((r for r in self.relationships if r.field_name == field_name), None)


class Embeddable(SchemaModel):
    """A value type whose columns are inlined into embedding tables."""

    java_class_name: str
    fields: list[Column] = Field(default_factory=list)


class SchemaDocument(SchemaModel):
    """Root of an extraction result."""

    repository_url: str
    analysis_timestamp: datetime
    entities: list[Entity] = Field(default_factory=list)
    embeddables: list[Embeddable] = Field(default_factory=list)

    @field_serializer("analysis_timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.strftime(TIMESTAMP_FORMAT)

    def entity(self, java_class_name: str) -> Entity | None:
        """Entity by fully-qualified or trailing simple name."""
        for entity in self.entities:
            name = entity.java_class_name
            if name == java_class_name or name.endswith("." + java_class_name):
                return entity
        return None


# ============================================================================
# Build-time templates
# ============================================================================


@dataclass
class MappedSuperclassTemplate:
    """Resolved members of a mapped superclass, inherited ones first."""

    java_class_name: str
    columns: list[Column] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)


MemberT = TypeVar("MemberT", Column, Relationship)


def add_if_absent(members: list[MemberT], member: MemberT) -> bool:
    """Append unless a member with the same field name is already present.

    Returns:
        True if the member was added.
    """
    if any(existing.field_name == member.field_name for existing in members):
        return False
    members.append(member)
    return True
