"""SQLAlchemy adapter for admin-UI collections."""

from __future__ import annotations

from .exceptions import (
    InvalidRecordIdError,
    RegistryFrozenError,
    RegistryNotFrozenError,
)
from .execution import execute, with_timeout
from .introspection import build_field_descriptor, detect_semantic_type
from .registry import CollectionRegistry, describe_associations, describe_model
from .services import (
    HasManyGetter,
    LineStatGetter,
    PieStatGetter,
    ResourceGetter,
    ResourcesGetter,
    parse_record_id,
    record_id_of,
)
from .specifications import (
    DEFAULT_SQLA_REGISTRY,
    CompileOptions,
    SQLAlchemyOperator,
    SQLAlchemyOperatorRegistry,
    apply_sort,
    build_sqla_filter,
)

__all__ = [
    # Registry
    "CollectionRegistry",
    "describe_model",
    "describe_associations",
    "build_field_descriptor",
    "detect_semantic_type",
    # Getters
    "ResourcesGetter",
    "HasManyGetter",
    "ResourceGetter",
    "PieStatGetter",
    "LineStatGetter",
    "parse_record_id",
    "record_id_of",
    # Compilation
    "build_sqla_filter",
    "apply_sort",
    "CompileOptions",
    "DEFAULT_SQLA_REGISTRY",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    # Execution
    "execute",
    "with_timeout",
    # Exceptions
    "InvalidRecordIdError",
    "RegistryFrozenError",
    "RegistryNotFrozenError",
]
