"""
SQLAlchemy operator compilation strategy.

Provides the ``SQLAlchemyOperator`` protocol, a registry keyed by
:class:`ConditionOperator`, and the per-request ``CompileOptions`` every
strategy receives.
"""

from __future__ import annotations

import datetime
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from adminkit_specifications.exceptions import UnsupportedOperatorError

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

    from adminkit_specifications.operators import ConditionOperator
    from adminkit_specifications.settings import QuerySettings


@dataclass(frozen=True)
class CompileOptions:
    """
    Request-scoped compilation inputs.

    Attributes:
        case_sensitive: String matching sensitivity.
        timezone: IANA zone relative dates are computed in.
        now: Reference instant for relative dates, shared by every leaf
            of a request.
    """

    case_sensitive: bool = False
    timezone: str = "UTC"
    now: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )

    @classmethod
    def from_settings(
        cls,
        settings: QuerySettings,
        *,
        timezone: str | None = None,
        now: datetime.datetime | None = None,
    ) -> CompileOptions:
        kwargs: dict[str, Any] = {
            "case_sensitive": settings.case_sensitive,
            "timezone": timezone or settings.default_timezone,
        }
        if now is not None:
            kwargs["now"] = now
        return cls(**kwargs)


class SQLAlchemyOperator(ABC):
    """
    Strategy interface for compiling a condition operator
    into a SQLAlchemy ``ColumnElement[bool]``.
    """

    @property
    @abstractmethod
    def name(self) -> ConditionOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def apply(
        self,
        column: Any,
        value: Any,
        options: CompileOptions,
    ) -> ColumnElement[bool]:
        """
        Build a SQLAlchemy filter clause.

        Args:
            column: A SQLAlchemy column or instrumented attribute.
            value: The typed operand of the condition.
            options: Request-scoped compilation inputs.

        Returns:
            A SQLAlchemy boolean expression.
        """
        ...


class SQLAlchemyOperatorRegistry:
    """
    Registry of ``SQLAlchemyOperator`` instances keyed by
    :class:`ConditionOperator`.
    """

    def __init__(self) -> None:
        self._operators: dict[ConditionOperator, SQLAlchemyOperator] = {}

    def register(self, operator: SQLAlchemyOperator) -> None:
        self._operators[operator.name] = operator

    def register_all(self, *operators: SQLAlchemyOperator) -> None:
        for op in operators:
            self.register(op)

    def unregister(self, name: ConditionOperator) -> None:
        self._operators.pop(name, None)

    def get(self, name: ConditionOperator) -> SQLAlchemyOperator | None:
        return self._operators.get(name)

    def has(self, name: ConditionOperator) -> bool:
        return name in self._operators

    @property
    def supported_operators(self) -> set[ConditionOperator]:
        return set(self._operators.keys())

    def apply(
        self,
        name: ConditionOperator,
        column: Any,
        value: Any,
        options: CompileOptions | None = None,
    ) -> ColumnElement[bool]:
        """
        Look up the operator and apply.

        Raises:
            UnsupportedOperatorError: If the operator is not registered.
        """
        op = self.get(name)
        if op is None:
            raise UnsupportedOperatorError(name.value, "SQLAlchemy")
        return op.apply(column, value, options or CompileOptions())
