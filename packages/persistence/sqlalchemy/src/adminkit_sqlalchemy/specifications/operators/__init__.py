"""
SQLAlchemy operator implementations and default registry.

Usage::

    from adminkit_sqlalchemy.specifications.operators import (
        DEFAULT_SQLA_REGISTRY,
    )

    expr = DEFAULT_SQLA_REGISTRY.apply(ConditionOperator.EQ, column, value)
"""

from __future__ import annotations

from ..strategy import SQLAlchemyOperatorRegistry
from .boolean import (
    IsFalseOperator,
    IsNotFalseOperator,
    IsNotTrueOperator,
    IsTrueOperator,
)
from .null import (
    IsBlankOperator,
    IsNotNullOperator,
    IsNullOperator,
    IsPresentOperator,
)
from .standard import (
    EqualOperator,
    GreaterThanOperator,
    LessThanOperator,
    NotEqualOperator,
)
from .string import (
    ContainsOperator,
    EndsWithOperator,
    NotContainsOperator,
    StartsWithOperator,
)
from .temporal import RelativeAfterOperator, RelativeBeforeOperator


def build_default_sqla_registry() -> SQLAlchemyOperatorRegistry:
    """Create a registry with all built-in SQLAlchemy operators."""
    registry = SQLAlchemyOperatorRegistry()
    registry.register_all(
        # Standard comparison
        EqualOperator(),
        NotEqualOperator(),
        GreaterThanOperator(),
        LessThanOperator(),
        # String
        ContainsOperator(),
        NotContainsOperator(),
        StartsWithOperator(),
        EndsWithOperator(),
        # Null / presence
        IsNullOperator(),
        IsNotNullOperator(),
        IsPresentOperator(),
        IsBlankOperator(),
        # Boolean
        IsTrueOperator(),
        IsFalseOperator(),
        IsNotTrueOperator(),
        IsNotFalseOperator(),
        # Relative dates
        RelativeBeforeOperator(),
        RelativeAfterOperator(),
    )
    return registry


DEFAULT_SQLA_REGISTRY: SQLAlchemyOperatorRegistry = build_default_sqla_registry()

__all__ = [
    "DEFAULT_SQLA_REGISTRY",
    "build_default_sqla_registry",
    "SQLAlchemyOperatorRegistry",
]
