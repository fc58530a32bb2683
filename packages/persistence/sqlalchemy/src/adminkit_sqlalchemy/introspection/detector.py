"""Column type -> semantic type."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import types as sqltypes

from adminkit_specifications.types import SemanticType

if TYPE_CHECKING:
    from sqlalchemy import Column
    from sqlalchemy.types import TypeEngine

# Checked in order: Enum subclasses String, so it must come first.
_TYPE_MAP: tuple[tuple[type[TypeEngine], SemanticType], ...] = (
    (sqltypes.Enum, SemanticType.ENUM),
    (sqltypes.Boolean, SemanticType.BOOLEAN),
    (sqltypes.Integer, SemanticType.NUMBER),
    (sqltypes.Numeric, SemanticType.NUMBER),
    (sqltypes.String, SemanticType.STRING),
    (sqltypes.DateTime, SemanticType.DATE),
    (sqltypes.Date, SemanticType.DATEONLY),
    (sqltypes.Uuid, SemanticType.UUID),
    (sqltypes.JSON, SemanticType.JSON),
)

# TypeDecorators whose storage type says nothing about their values
_OPAQUE_DECORATORS: tuple[type[TypeEngine], ...] = (
    sqltypes.Interval,
    sqltypes.PickleType,
)


def unwrap_type(type_: TypeEngine) -> TypeEngine:
    """Follow ``TypeDecorator.impl`` down to the storage type."""
    while isinstance(type_, sqltypes.TypeDecorator):
        if isinstance(type_, _OPAQUE_DECORATORS):
            return type_
        type_ = type_.impl_instance
    return type_


def detect_semantic_type(column: Column) -> SemanticType:
    """Map *column*'s SQLAlchemy type to a :class:`SemanticType`. Never raises."""
    type_ = unwrap_type(column.type)
    if isinstance(type_, _OPAQUE_DECORATORS):
        return SemanticType.UNSUPPORTED
    for type_cls, semantic_type in _TYPE_MAP:
        if isinstance(type_, type_cls):
            return semantic_type
    return SemanticType.UNSUPPORTED


def native_type_name(column: Column) -> str:
    return type(column.type).__name__
