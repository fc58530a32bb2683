"""
Column -> FieldDescriptor.

Declarative validation rules are read from ``column.info["validate"]``::

    name: Mapped[str] = mapped_column(
        String(50),
        info={"validate": {"len": [2, 50], "is": r"^[a-z]+$"}},
    )
    age: Mapped[int] = mapped_column(
        info={"validate": {"min": {"args": 18, "msg": "adults only"}}},
    )

Each rule is a bare value or ``{"args": value, "msg": message}``.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import Integer

from adminkit_specifications.schema import DefaultValue, FieldDescriptor, Validation
from adminkit_specifications.types import SemanticType

from .detector import detect_semantic_type, unwrap_type

if TYPE_CHECKING:
    from sqlalchemy import Column

VALIDATE_KEY = "validate"

_PRIMITIVES = (str, int, float, bool)
_DYNAMIC_CAPABLE = frozenset(
    {SemanticType.DATE, SemanticType.DATEONLY, SemanticType.UUID}
)

# rule key -> validation type, for rules that map one to one
_SIMPLE_RULES: tuple[tuple[str, str], ...] = (
    ("min", "is greater than"),
    ("max", "is less than"),
    ("is_before", "is before"),
    ("is_after", "is after"),
)


def build_field_descriptor(
    column: Column, *, attribute_name: str | None = None
) -> FieldDescriptor:
    """
    Describe *column* for the admin UI.

    ``attribute_name`` is the mapped attribute key when it differs from
    the database column name.
    """
    semantic_type = detect_semantic_type(column)
    generated = is_system_generated(column)
    default = detect_default(column, semantic_type)

    is_required = (
        column.nullable is False and not generated and not default.is_dynamic
    )
    validations: tuple[Validation, ...] = ()
    if not generated and not default.is_dynamic:
        validations = tuple(build_validations(column))

    enum_values = None
    if semantic_type is SemanticType.ENUM:
        enum_type: Any = unwrap_type(column.type)
        enum_values = tuple(enum_type.enums)

    return FieldDescriptor(
        name=attribute_name or column.key,
        semantic_type=semantic_type,
        column_name=column.name,
        is_required=is_required,
        is_primary_key=bool(column.primary_key),
        enum_values=enum_values,
        default=default,
        validations=validations,
    )


def is_system_generated(column: Column) -> bool:
    """Whether the database fills the value in on its own."""
    if column.computed is not None or column.identity is not None:
        return True
    if column.server_default is not None:
        return True
    if column.onupdate is not None or column.server_onupdate is not None:
        return True
    table = column.table
    return (
        column.primary_key
        and isinstance(unwrap_type(column.type), Integer)
        and table is not None
        and table.autoincrement_column is column
    )


def detect_default(column: Column, semantic_type: SemanticType) -> DefaultValue:
    if column.server_default is not None:
        return DefaultValue.dynamic()

    default = column.default
    if default is None:
        return DefaultValue.none()
    if not getattr(default, "is_scalar", False):
        # callables, SQL expressions and sequences
        return DefaultValue.dynamic()

    value = default.arg  # type: ignore[attr-defined]
    if value is None:
        return DefaultValue.none()
    if isinstance(value, enum.Enum):
        value = value.name
    if semantic_type in _DYNAMIC_CAPABLE and not isinstance(value, _PRIMITIVES):
        return DefaultValue.dynamic()
    if column.primary_key:
        # Primary key defaults are never surfaced
        return DefaultValue.none()
    return DefaultValue.static(value)


def build_validations(column: Column) -> list[Validation]:
    """Validations of a user-writable column, ``is present`` first."""
    validations: list[Validation] = []
    if column.nullable is False:
        validations.append(Validation("is present"))

    rules = column.info.get(VALIDATE_KEY)
    if not isinstance(rules, Mapping):
        return validations

    for key, validation_type in _SIMPLE_RULES:
        if key in rules:
            value, message = _rule(rules[key])
            if value is not None:
                validations.append(Validation(validation_type, value, message))

    if "len" in rules:
        validations.extend(_length_validations(rules["len"]))

    if "contains" in rules:
        value, message = _rule(rules["contains"])
        if value is not None:
            validations.append(Validation("contains", value, message))

    if "is" in rules:
        value, message = _rule(rules["is"])
        # Only a single pattern; lists of pattern/flags are not exposed
        if isinstance(value, re.Pattern):
            validations.append(Validation("is like", value.pattern, message))
        elif isinstance(value, str):
            validations.append(Validation("is like", value, message))

    return validations


def _length_validations(rule: Any) -> list[Validation]:
    value, message = _rule(rule)
    if isinstance(value, Sequence) and not isinstance(value, str):
        out: list[Validation] = []
        bounds = list(value)
        if bounds and bounds[0]:
            out.append(Validation("is longer than", bounds[0], message))
        if len(bounds) > 1 and bounds[1]:
            out.append(Validation("is shorter than", bounds[1], message))
        return out
    if value is None:
        return []
    return [Validation("is longer than", value, message)]


def _rule(rule: Any) -> tuple[Any, str | None]:
    if isinstance(rule, Mapping):
        return rule.get("args"), rule.get("msg")
    return rule, None
