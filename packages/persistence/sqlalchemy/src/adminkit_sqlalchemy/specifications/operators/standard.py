"""Standard comparison operators for SQLAlchemy."""

from __future__ import annotations

import operator as op_module
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import or_

from adminkit_specifications.operators import ConditionOperator

from ..strategy import CompileOptions, SQLAlchemyOperator
from ..utils import bind_temporal

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement


class EqualOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.EQ

    def apply(
        self, column: Any, value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        bound = bind_temporal(column, value)
        return cast("ColumnElement[bool]", op_module.eq(column, bound))


class NotEqualOperator(SQLAlchemyOperator):
    """Rows where the column is NULL also differ from the value."""

    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.NE

    def apply(
        self, column: Any, value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        bound = bind_temporal(column, value)
        return or_(op_module.ne(column, bound), column.is_(None))


class GreaterThanOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.GT

    def apply(
        self, column: Any, value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        bound = bind_temporal(column, value)
        return cast("ColumnElement[bool]", op_module.gt(column, bound))


class LessThanOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.LT

    def apply(
        self, column: Any, value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        bound = bind_temporal(column, value)
        return cast("ColumnElement[bool]", op_module.lt(column, bound))
