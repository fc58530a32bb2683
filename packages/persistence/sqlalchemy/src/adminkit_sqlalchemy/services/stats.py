"""
Aggregation getters for Pie and Line charts.

Pie groups in SQL. Line fetches ``(date, value)`` rows and buckets them
in Python after localizing each date to the request timezone, so bucket
boundaries never depend on the database dialect or session zone.
"""

from __future__ import annotations

import datetime
import logging
import time
from collections import defaultdict
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select

from adminkit_filtering.params import StatParams
from adminkit_filtering.parser import QueryParamsParser
from adminkit_specifications.ast import LeafNode, combine
from adminkit_specifications.composer import compose_condition_tree, resolve_field_path
from adminkit_specifications.conditions import Condition
from adminkit_specifications.dates import bucket_label, bucket_start, get_timezone
from adminkit_specifications.exceptions import UnsupportedOperatorError
from adminkit_specifications.operators import ConditionOperator, LogicalOperator
from adminkit_specifications.types import (
    ORDERABLE_TYPES,
    TEMPORAL_TYPES,
    AggregateKind,
    SemanticType,
)

from ..execution import execute
from ..specifications.compiler import build_sqla_filter
from ..specifications.strategy import CompileOptions

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement
    from sqlalchemy.ext.asyncio import AsyncSession

    from adminkit_specifications.composer import ResolvedPath

    from ..registry import CollectionRegistry

logger = logging.getLogger("adminkit.stats")

_AGGREGATES = {
    AggregateKind.COUNT: func.count,
    AggregateKind.SUM: func.sum,
    AggregateKind.AVG: func.avg,
    AggregateKind.MIN: func.min,
    AggregateKind.MAX: func.max,
}

_UNGROUPABLE = frozenset({SemanticType.JSON, SemanticType.UNSUPPORTED})


class _StatGetter:
    def __init__(
        self,
        session: AsyncSession,
        registry: CollectionRegistry,
        params: StatParams | Mapping[str, Any],
        *,
        now: datetime.datetime | None = None,
    ) -> None:
        self._session = session
        self._registry = registry
        self._settings = registry.settings
        if isinstance(params, StatParams):
            self._params = params
            self._filter = params.to_filter_specification()
        else:
            parser = QueryParamsParser(self._settings)
            self._params, self._filter = parser.parse_stat(params)
        self._collection = registry.get_collection(self._params.collection)
        self._model = registry.get_model(self._params.collection)
        self._timezone = self._params.timezone or self._settings.default_timezone
        self._now = now

    def _where(self, extra: list[LeafNode] | None = None) -> ColumnElement[bool]:
        tree = compose_condition_tree(
            self._filter, self._collection, self._registry.collections
        )
        nodes = [node for node in (tree, *(extra or [])) if node is not None]
        options = CompileOptions.from_settings(
            self._settings, timezone=self._timezone, now=self._now
        )
        return build_sqla_filter(
            self._collection,
            self._model,
            combine(LogicalOperator.AND, nodes),
            collections=self._registry.collections,
            options=options,
        )

    def _aggregate_field(self) -> Any | None:
        """Column aggregated over, checked against the aggregate kind."""
        aggregate = self._params.aggregate
        if aggregate is AggregateKind.COUNT and not self._params.aggregate_field:
            return None
        name = self._params.aggregate_field or ""
        descriptor = self._collection.get_field(name)
        allowed = (
            ORDERABLE_TYPES
            if aggregate in (AggregateKind.MIN, AggregateKind.MAX)
            else {SemanticType.NUMBER}
        )
        if aggregate is not AggregateKind.COUNT and (
            descriptor.semantic_type not in allowed
        ):
            raise UnsupportedOperatorError(
                aggregate.value, descriptor.semantic_type.value, field=name
            )
        return getattr(self._model, descriptor.name)

    def _log(self, kind: str, start: float, buckets: int) -> None:
        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            "%s stat on '%s': %d buckets in %.2fms",
            kind,
            self._collection.name,
            buckets,
            elapsed,
        )


class PieStatGetter(_StatGetter):
    """``{"value": [{"key", "value"}]}`` grouped by ``group_by_field``."""

    async def perform(self) -> dict[str, list[dict[str, Any]]]:
        start = time.perf_counter()
        try:
            group = self._group_path()
            group_column, join = self._group_column(group)
            value_column = self._aggregate_field()
            aggregate = _AGGREGATES[self._params.aggregate]
            value = (
                aggregate(value_column) if value_column is not None else func.count()
            )

            stmt = select(
                group_column.label("key"), value.label("value")
            ).select_from(self._model)
            if join is not None:
                stmt = stmt.outerjoin(join)
            stmt = (
                stmt.where(self._where(), group_column.is_not(None))
                .group_by(group_column)
                .order_by(value.desc())
            )
            result = await execute(
                self._session,
                stmt,
                operation=f"pie stat '{self._collection.name}'",
                timeout=self._settings.timeout,
            )
            values = [{"key": row.key, "value": row.value} for row in result]
        except Exception:
            logger.exception("Pie stat on '%s' failed", self._collection.name)
            raise
        self._log("Pie", start, len(values))
        return {"value": values}

    def _group_path(self) -> ResolvedPath:
        path = self._params.group_by_field or ""
        resolved = resolve_field_path(
            path, self._collection, self._registry.collections
        )
        if resolved.field.semantic_type in _UNGROUPABLE:
            raise UnsupportedOperatorError(
                "group by", resolved.field.semantic_type.value, field=path
            )
        if resolved.association is not None and resolved.association.many:
            raise UnsupportedOperatorError(
                "group by", "to-many association", field=path
            )
        return resolved

    def _group_column(self, resolved: ResolvedPath) -> tuple[Any, Any | None]:
        if resolved.association is None:
            return getattr(self._model, resolved.field.name), None
        relationship = getattr(self._model, resolved.association.name)
        target_model = relationship.property.mapper.class_
        return getattr(target_model, resolved.field.name), relationship


class LineStatGetter(_StatGetter):
    """``{"value": [{"label", "value"}]}`` bucketed by ``time_range``."""

    async def perform(self) -> dict[str, list[dict[str, Any]]]:
        start = time.perf_counter()
        try:
            date_name = self._params.group_by_date_field or ""
            descriptor = self._collection.get_field(date_name)
            if descriptor.semantic_type not in TEMPORAL_TYPES:
                raise UnsupportedOperatorError(
                    "group by date", descriptor.semantic_type.value, field=date_name
                )
            date_column = getattr(self._model, descriptor.name)
            value_column = self._aggregate_field()
            tz = get_timezone(self._timezone)

            not_null = LeafNode(
                Condition(date_name, ConditionOperator.IS_NOT_NULL, raw="!null")
            )
            columns = [date_column]
            if value_column is not None:
                columns.append(value_column)
            stmt = select(*columns).where(self._where([not_null]))
            result = await execute(
                self._session,
                stmt,
                operation=f"line stat '{self._collection.name}'",
                timeout=self._settings.timeout,
            )

            buckets: dict[datetime.date, list[Any]] = defaultdict(list)
            for row in result:
                bucket = bucket_start(row[0], self._params.time_range, tz)
                buckets[bucket].append(row[1] if value_column is not None else 1)

            values = [
                {
                    "label": bucket_label(day, self._params.time_range),
                    "value": _reduce(self._params.aggregate, buckets[day]),
                }
                for day in sorted(buckets)
            ]
        except Exception:
            logger.exception("Line stat on '%s' failed", self._collection.name)
            raise
        self._log("Line", start, len(values))
        return {"value": values}


def _reduce(aggregate: AggregateKind, values: list[Any]) -> Any:
    if aggregate is AggregateKind.COUNT:
        return sum(1 for v in values if v is not None)
    present = [v for v in values if v is not None]
    if not present:
        return None
    if aggregate is AggregateKind.SUM:
        return sum(present)
    if aggregate is AggregateKind.AVG:
        return sum(present) / len(present)
    if aggregate is AggregateKind.MIN:
        return min(present)
    return max(present)
