"""
String operators for SQLAlchemy.

Operands are LIKE-escaped (``autoescape``). Unless the options ask for
case-sensitive matching, both sides are compiled through ``lower()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import or_

from adminkit_specifications.operators import ConditionOperator

from ..strategy import CompileOptions, SQLAlchemyOperator

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement


def _contains(column: Any, value: Any, options: CompileOptions) -> ColumnElement[bool]:
    if options.case_sensitive:
        return cast("ColumnElement[bool]", column.contains(value, autoescape=True))
    return cast("ColumnElement[bool]", column.icontains(value, autoescape=True))


class ContainsOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.CONTAINS

    def apply(
        self, column: Any, value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        return _contains(column, value, options)


class NotContainsOperator(SQLAlchemyOperator):
    """Complement of :class:`ContainsOperator`, NULL rows included."""

    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.NOT_CONTAINS

    def apply(
        self, column: Any, value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        return or_(~_contains(column, value, options), column.is_(None))


class StartsWithOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.STARTSWITH

    def apply(
        self, column: Any, value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        if options.case_sensitive:
            return cast(
                "ColumnElement[bool]", column.startswith(value, autoescape=True)
            )
        return cast(
            "ColumnElement[bool]", column.istartswith(value, autoescape=True)
        )


class EndsWithOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.ENDSWITH

    def apply(
        self, column: Any, value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        if options.case_sensitive:
            return cast(
                "ColumnElement[bool]", column.endswith(value, autoescape=True)
            )
        return cast(
            "ColumnElement[bool]", column.iendswith(value, autoescape=True)
        )
