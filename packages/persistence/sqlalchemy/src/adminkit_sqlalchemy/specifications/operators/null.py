"""Null / presence check operators for SQLAlchemy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import and_, or_

from adminkit_specifications.operators import ConditionOperator

from ..strategy import CompileOptions, SQLAlchemyOperator

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement


class IsNullOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.IS_NULL

    def apply(
        self, column: Any, _value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.is_(None))


class IsNotNullOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.IS_NOT_NULL

    def apply(
        self, column: Any, _value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.is_not(None))


class IsPresentOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.IS_PRESENT

    def apply(
        self, column: Any, _value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        return and_(column.is_not(None), column != "")


class IsBlankOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.IS_BLANK

    def apply(
        self, column: Any, _value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        return or_(column.is_(None), column == "")
