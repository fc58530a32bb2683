"""Model introspection: semantic types and field descriptors."""

from .builder import (
    build_field_descriptor,
    build_validations,
    detect_default,
    is_system_generated,
)
from .detector import detect_semantic_type, native_type_name, unwrap_type

__all__ = [
    "build_field_descriptor",
    "build_validations",
    "detect_default",
    "detect_semantic_type",
    "is_system_generated",
    "native_type_name",
    "unwrap_type",
]
