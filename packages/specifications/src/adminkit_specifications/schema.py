"""
Collection and field descriptors.

Descriptors are built once at startup from model introspection and are
immutable afterwards. ``to_dict()`` / ``to_schema()`` produce the JSON
shape consumed by the admin UI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .exceptions import (
    ConfigurationError,
    FieldNotFoundError,
    UnsupportedFieldTypeError,
)
from .types import DefaultValueKind, SemanticType

COMPOSITE_ID_FIELD = "compositePrimary"

SEARCHABLE_TYPES: frozenset[SemanticType] = frozenset(
    {
        SemanticType.STRING,
        SemanticType.ENUM,
        SemanticType.UUID,
        SemanticType.NUMBER,
    }
)


@dataclass(frozen=True)
class DefaultValue:
    """Tagged default: ``STATIC`` carries ``value``, the others do not."""

    kind: DefaultValueKind = DefaultValueKind.NONE
    value: Any = None

    @classmethod
    def static(cls, value: Any) -> DefaultValue:
        return cls(DefaultValueKind.STATIC, value)

    @classmethod
    def dynamic(cls) -> DefaultValue:
        return cls(DefaultValueKind.DYNAMIC)

    @classmethod
    def none(cls) -> DefaultValue:
        return cls(DefaultValueKind.NONE)

    @property
    def is_dynamic(self) -> bool:
        return self.kind is DefaultValueKind.DYNAMIC


@dataclass(frozen=True)
class Validation:
    type: str
    value: Any = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type}
        if self.value is not None:
            data["value"] = self.value
        if self.message is not None:
            data["message"] = self.message
        return data


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Schema of one column.

    Invariant: ``enum_values`` is set if and only if ``semantic_type`` is
    ``SemanticType.ENUM``.
    """

    name: str
    semantic_type: SemanticType
    column_name: str | None = None
    is_required: bool = False
    is_primary_key: bool = False
    enum_values: tuple[str, ...] | None = None
    default: DefaultValue = field(default_factory=DefaultValue.none)
    validations: tuple[Validation, ...] = ()

    def __post_init__(self) -> None:
        if (self.semantic_type is SemanticType.ENUM) != (self.enum_values is not None):
            raise ValueError(
                f"Field '{self.name}': enum values must be given exactly "
                f"when the type is Enum"
            )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "field": self.name,
            "type": self.semantic_type.value,
        }
        # Only needed when the attribute and the database column differ
        if self.column_name and self.column_name != self.name:
            data["columnName"] = self.column_name
        if self.is_primary_key:
            data["primaryKey"] = True
        if self.enum_values is not None:
            data["enums"] = list(self.enum_values)
        if self.is_required:
            data["isRequired"] = True
        if self.default.kind is DefaultValueKind.STATIC and not self.is_primary_key:
            data["defaultValue"] = self.default.value
        if self.validations:
            data["validations"] = [v.to_dict() for v in self.validations]
        return data


@dataclass(frozen=True)
class AssociationDescriptor:
    """One-hop relationship from a collection to another collection."""

    name: str
    target: str
    many: bool = False
    foreign_keys: tuple[str, ...] = ()


@dataclass(frozen=True)
class Collection:
    """
    A named set of typed fields with its primary key and associations.

    Attributes:
        name: Collection name (usually the table name).
        fields: Field descriptors in declaration order. Unsupported
            columns are not part of this tuple.
        primary_keys: Primary key field names, in key order.
        search_fields: Declared search fields; empty means "all fields".
        associations: One-hop relationships keyed by name.
        unsupported_fields: ``(name, native type)`` of columns dropped
            from the schema.

    Raises:
        ConfigurationError: A declared search field is unknown or cannot
            be searched.
    """

    name: str
    fields: tuple[FieldDescriptor, ...]
    primary_keys: tuple[str, ...]
    search_fields: tuple[str, ...] = ()
    associations: tuple[AssociationDescriptor, ...] = ()
    unsupported_fields: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        for name in self.search_fields:
            descriptor = self.find_field(name)
            if descriptor is None:
                raise ConfigurationError(
                    f"Search field '{name}' is not a field of '{self.name}'"
                )
            if descriptor.semantic_type not in SEARCHABLE_TYPES:
                raise ConfigurationError(
                    f"Search field '{self.name}.{name}' has type "
                    f"{descriptor.semantic_type.value}, which cannot be searched"
                )

    @property
    def is_composite_primary(self) -> bool:
        return len(self.primary_keys) > 1

    @property
    def id_field(self) -> str:
        if self.is_composite_primary:
            return COMPOSITE_ID_FIELD
        return self.primary_keys[0] if self.primary_keys else "id"

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def find_field(self, name: str) -> FieldDescriptor | None:
        for descriptor in self.fields:
            if descriptor.name == name:
                return descriptor
        return None

    def get_field(self, name: str, *, raw: Any = None) -> FieldDescriptor:
        descriptor = self.find_field(name)
        if descriptor is not None:
            return descriptor
        for unsupported, native_type in self.unsupported_fields:
            if unsupported == name:
                raise UnsupportedFieldTypeError(name, native_type, raw=raw)
        raise FieldNotFoundError(name, self.name, self.field_names)

    def find_association(self, name: str) -> AssociationDescriptor | None:
        for association in self.associations:
            if association.name == name:
                return association
        return None

    def to_schema(
        self, targets: dict[str, Collection] | None = None
    ) -> dict[str, Any]:
        """
        Serialise the collection for the admin UI.

        ``targets`` maps collection names to collections and is used to
        type association fields after their target's primary key.
        """
        fields = [f.to_dict() for f in self.fields]
        for association in self.associations:
            fields.append(_association_schema(association, targets or {}))

        schema: dict[str, Any] = {
            "name": self.name,
            "idField": self.id_field,
            "primaryKeys": list(self.primary_keys),
            "isCompositePrimary": self.is_composite_primary,
            "fields": fields,
        }
        if self.search_fields:
            schema["searchFields"] = list(self.search_fields)
        return schema


def _association_schema(
    association: AssociationDescriptor, targets: dict[str, Collection]
) -> dict[str, Any]:
    target = targets.get(association.target)
    key_type = SemanticType.NUMBER.value
    key_name = "id"
    if target is not None and target.primary_keys:
        key_name = target.primary_keys[0]
        key_field = target.find_field(key_name)
        if key_field is not None:
            key_type = key_field.semantic_type.value

    return {
        "field": association.name,
        "type": [key_type] if association.many else key_type,
        "reference": f"{association.target}.{key_name}",
    }
