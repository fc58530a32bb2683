from __future__ import annotations

from enum import Enum

from .exceptions import UnsupportedOperatorError
from .types import SemanticType


class ConditionOperator(str, Enum):
    """Operators a filter condition can carry."""

    # Standard comparison
    EQ = "equals"
    NE = "not_equals"
    GT = "greater_than"
    LT = "less_than"

    # String operations
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    STARTSWITH = "starts_with"
    ENDSWITH = "ends_with"

    # Null / boolean checks
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"
    IS_TRUE = "is_true"
    IS_FALSE = "is_false"
    IS_NOT_TRUE = "is_not_true"
    IS_NOT_FALSE = "is_not_false"

    # Relative dates
    BEFORE_HOURS = "relative_date_before"
    AFTER_HOURS = "relative_date_after"

    # Presence
    IS_PRESENT = "is_present"
    IS_BLANK = "is_blank"


class LogicalOperator(str, Enum):
    AND = "and"
    OR = "or"


_NULL_CHECKS = frozenset({ConditionOperator.IS_NULL, ConditionOperator.IS_NOT_NULL})
_EQUALITY = frozenset({ConditionOperator.EQ, ConditionOperator.NE})
_ORDERING = frozenset({ConditionOperator.GT, ConditionOperator.LT})

# Which operators each semantic type accepts. Shared by the condition
# parser and the predicate compilers.
OPERATOR_SUPPORT: dict[SemanticType, frozenset[ConditionOperator]] = {
    SemanticType.NUMBER: _NULL_CHECKS | _EQUALITY | _ORDERING,
    SemanticType.STRING: _NULL_CHECKS
    | _EQUALITY
    | frozenset(
        {
            ConditionOperator.CONTAINS,
            ConditionOperator.NOT_CONTAINS,
            ConditionOperator.STARTSWITH,
            ConditionOperator.ENDSWITH,
            ConditionOperator.IS_PRESENT,
            ConditionOperator.IS_BLANK,
        }
    ),
    SemanticType.BOOLEAN: _NULL_CHECKS
    | _EQUALITY
    | frozenset(
        {
            ConditionOperator.IS_TRUE,
            ConditionOperator.IS_FALSE,
            ConditionOperator.IS_NOT_TRUE,
            ConditionOperator.IS_NOT_FALSE,
        }
    ),
    SemanticType.DATE: _NULL_CHECKS
    | _EQUALITY
    | _ORDERING
    | frozenset({ConditionOperator.BEFORE_HOURS, ConditionOperator.AFTER_HOURS}),
    SemanticType.DATEONLY: _NULL_CHECKS
    | _EQUALITY
    | _ORDERING
    | frozenset({ConditionOperator.BEFORE_HOURS, ConditionOperator.AFTER_HOURS}),
    SemanticType.ENUM: _NULL_CHECKS | _EQUALITY,
    SemanticType.UUID: _NULL_CHECKS | _EQUALITY,
    SemanticType.JSON: _NULL_CHECKS,
    SemanticType.UNSUPPORTED: frozenset(),
}


def is_supported(semantic_type: SemanticType, operator: ConditionOperator) -> bool:
    return operator in OPERATOR_SUPPORT.get(semantic_type, frozenset())


def check_operator(
    semantic_type: SemanticType,
    operator: ConditionOperator,
    *,
    field: str | None = None,
    raw: object = None,
) -> None:
    """Raise :class:`UnsupportedOperatorError` if the pair is illegal."""
    if not is_supported(semantic_type, operator):
        raise UnsupportedOperatorError(
            operator.value,
            semantic_type.value,
            field=field,
            raw=raw,
        )
