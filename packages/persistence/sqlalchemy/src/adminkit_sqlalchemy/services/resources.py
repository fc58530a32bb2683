"""
Resource getters: filtered, searched, sorted and paginated record lists.

Each getter is built per request and runs its statements sequentially in
the caller's ``AsyncSession``::

    parsed = QueryParamsParser(registry.settings).parse(request.query_params)
    getter = ResourcesGetter(session, registry, "users", parsed)
    count, rows = await getter.perform()

The filter is composed and compiled before any statement runs, so
malformed conditions never reach the database.
"""

from __future__ import annotations

import datetime
import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.orm import load_only, selectinload, with_parent

from adminkit_filtering.parser import ParsedQuery, QueryParamsParser
from adminkit_specifications.composer import compose_condition_tree
from adminkit_specifications.exceptions import FieldNotFoundError

from ..execution import execute, with_timeout
from ..specifications.compiler import apply_sort, build_sqla_filter
from ..specifications.strategy import CompileOptions
from .identity import parse_record_id

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from adminkit_specifications.schema import Collection

    from ..registry import CollectionRegistry
    from ..specifications.strategy import SQLAlchemyOperatorRegistry

logger = logging.getLogger("adminkit.getters")


class _ListGetter:
    """Shared filter/sort/page assembly for list getters."""

    def __init__(
        self,
        session: AsyncSession,
        registry: CollectionRegistry,
        params: ParsedQuery | Mapping[str, Any],
        *,
        operators: SQLAlchemyOperatorRegistry | None = None,
        now: datetime.datetime | None = None,
    ) -> None:
        self._session = session
        self._registry = registry
        self._settings = registry.settings
        if isinstance(params, ParsedQuery):
            self._query = params
        else:
            self._query = QueryParamsParser(self._settings).parse(params)
        self._operators = operators
        self._now = now

    def _where(
        self, collection: Collection, model: type[Any]
    ) -> ColumnElement[bool]:
        tree = compose_condition_tree(
            self._query.filter, collection, self._registry.collections
        )
        options = CompileOptions.from_settings(
            self._settings, timezone=self._query.filter.timezone, now=self._now
        )
        return build_sqla_filter(
            collection,
            model,
            tree,
            collections=self._registry.collections,
            registry=self._operators,
            options=options,
        )

    def _page_statement(
        self, stmt: Select[Any], collection: Collection, model: type[Any]
    ) -> Select[Any]:
        stmt = apply_sort(
            stmt,
            collection,
            model,
            self._query.sort,
            collections=self._registry.collections,
        )
        stmt = stmt.options(*self._load_options(collection, model))
        return stmt.offset(self._query.page.offset).limit(self._query.page.limit)

    def _load_options(self, collection: Collection, model: type[Any]) -> list[Any]:
        requested = self._query.params.fields_for(collection.name)
        if requested is None:
            return []

        columns = list(collection.primary_keys)
        associations = []
        for name in requested:
            association = collection.find_association(name)
            if collection.find_field(name) is not None:
                if name not in columns:
                    columns.append(name)
            elif association is not None:
                associations.append(name)
                if not association.many:
                    # selectinload reads the foreign key off the parent row
                    columns.extend(
                        fk for fk in association.foreign_keys if fk not in columns
                    )
            else:
                logger.debug(
                    "Ignoring requested field '%s' unknown to '%s'",
                    name,
                    collection.name,
                )
        options: list[Any] = [load_only(*[getattr(model, c) for c in columns])]
        options.extend(selectinload(getattr(model, a)) for a in associations)
        return options

    async def _count_and_rows(
        self,
        label: str,
        collection: Collection,
        model: type[Any],
        criteria: list[ColumnElement[bool]],
    ) -> tuple[int, list[Any]]:
        timeout = self._settings.timeout
        count_stmt = select(func.count()).select_from(model).where(*criteria)
        count_result = await execute(
            self._session, count_stmt, operation=f"{label} count", timeout=timeout
        )
        count = int(count_result.scalar_one())

        page_stmt = self._page_statement(
            select(model).where(*criteria), collection, model
        )
        rows_result = await execute(
            self._session, page_stmt, operation=f"{label} page", timeout=timeout
        )
        return count, list(rows_result.scalars().all())


class ResourcesGetter(_ListGetter):
    """``(count, rows)`` of one collection."""

    def __init__(
        self,
        session: AsyncSession,
        registry: CollectionRegistry,
        collection_name: str,
        params: ParsedQuery | Mapping[str, Any],
        **kwargs: Any,
    ) -> None:
        super().__init__(session, registry, params, **kwargs)
        self._collection = registry.get_collection(collection_name)
        self._model = registry.get_model(collection_name)

    async def perform(self) -> tuple[int, list[Any]]:
        label = f"resources '{self._collection.name}'"
        start = time.perf_counter()
        try:
            where = self._where(self._collection, self._model)
            count, rows = await self._count_and_rows(
                label, self._collection, self._model, [where]
            )
        except Exception:
            elapsed = (time.perf_counter() - start) * 1000
            logger.exception("%s failed after %.2fms", label, elapsed)
            raise
        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            "%s: %d of %d rows in %.2fms", label, len(rows), count, elapsed
        )
        return count, rows


class HasManyGetter(_ListGetter):
    """``(count, rows)`` of a to-many association of one parent record."""

    def __init__(
        self,
        session: AsyncSession,
        registry: CollectionRegistry,
        parent_name: str,
        record_id: Any,
        association_name: str,
        params: ParsedQuery | Mapping[str, Any],
        **kwargs: Any,
    ) -> None:
        super().__init__(session, registry, params, **kwargs)
        self._parent = registry.get_collection(parent_name)
        self._parent_model = registry.get_model(parent_name)
        association = self._parent.find_association(association_name)
        if association is None or not association.many:
            available = [a.name for a in self._parent.associations if a.many]
            raise FieldNotFoundError(association_name, parent_name, available)
        self._association = association
        self._record_id = record_id
        self._collection = registry.get_collection(association.target)
        self._model = registry.get_model(association.target)

    async def perform(self) -> tuple[int, list[Any]]:
        label = f"has-many '{self._parent.name}.{self._association.name}'"
        start = time.perf_counter()
        try:
            identity = parse_record_id(
                self._parent,
                self._record_id,
                separator=self._settings.composite_key_separator,
            )
            where = self._where(self._collection, self._model)
            parent = await with_timeout(
                self._session.get(self._parent_model, identity),
                operation=f"{label} parent",
                timeout=self._settings.timeout,
            )
            if parent is None:
                logger.info("%s: parent %r not found", label, self._record_id)
                return 0, []
            belongs = with_parent(
                parent, getattr(self._parent_model, self._association.name)
            )
            count, rows = await self._count_and_rows(
                label, self._collection, self._model, [belongs, where]
            )
        except Exception:
            elapsed = (time.perf_counter() - start) * 1000
            logger.exception("%s failed after %.2fms", label, elapsed)
            raise
        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            "%s: %d of %d rows in %.2fms", label, len(rows), count, elapsed
        )
        return count, rows


class ResourceGetter:
    """One record by id, or ``None``."""

    def __init__(
        self,
        session: AsyncSession,
        registry: CollectionRegistry,
        collection_name: str,
        record_id: Any,
    ) -> None:
        self._session = session
        self._settings = registry.settings
        self._collection = registry.get_collection(collection_name)
        self._model = registry.get_model(collection_name)
        self._record_id = record_id

    async def perform(self) -> Any | None:
        identity = parse_record_id(
            self._collection,
            self._record_id,
            separator=self._settings.composite_key_separator,
        )
        record = await with_timeout(
            self._session.get(self._model, identity),
            operation=f"resource '{self._collection.name}'",
            timeout=self._settings.timeout,
        )
        logger.debug(
            "resource '%s' %r: %s",
            self._collection.name,
            self._record_id,
            "found" if record is not None else "not found",
        )
        return record
