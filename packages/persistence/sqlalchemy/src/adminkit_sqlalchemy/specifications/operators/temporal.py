"""Relative date operators for SQLAlchemy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from adminkit_specifications.dates import resolve_relative_date
from adminkit_specifications.operators import ConditionOperator

from ..strategy import CompileOptions, SQLAlchemyOperator
from ..utils import bind_temporal

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement


class RelativeBeforeOperator(SQLAlchemyOperator):
    """Strictly earlier than ``now - N hours``."""

    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.BEFORE_HOURS

    def apply(
        self, column: Any, value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        boundary = resolve_relative_date(value, "before", options.timezone, options.now)
        return cast("ColumnElement[bool]", column < bind_temporal(column, boundary))


class RelativeAfterOperator(SQLAlchemyOperator):
    """Strictly later than ``now + N hours``."""

    @property
    def name(self) -> ConditionOperator:
        return ConditionOperator.AFTER_HOURS

    def apply(
        self, column: Any, value: Any, options: CompileOptions
    ) -> ColumnElement[bool]:
        boundary = resolve_relative_date(value, "after", options.timezone, options.now)
        return cast("ColumnElement[bool]", column > bind_temporal(column, boundary))
