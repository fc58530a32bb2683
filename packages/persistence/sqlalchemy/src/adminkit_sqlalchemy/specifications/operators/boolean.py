"""Boolean check operators for SQLAlchemy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import or_

from adminkit_specifications.operators import ConditionOperator

from ..strategy import CompileOptions, SQLAlchemyOperator

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement


class IsTrueOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.IS_TRUE

    def apply(
        self, column: Any, _value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.is_(True))


class IsFalseOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.IS_FALSE

    def apply(
        self, column: Any, _value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.is_(False))


class IsNotTrueOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.IS_NOT_TRUE

    def apply(
        self, column: Any, _value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        return or_(column.is_(None), column.is_(False))


class IsNotFalseOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.IS_NOT_FALSE

    def apply(
        self, column: Any, _value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        return or_(column.is_(None), column.is_(True))
