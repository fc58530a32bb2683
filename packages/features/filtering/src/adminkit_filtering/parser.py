"""QueryParamsParser: raw request params -> validated params and specifications."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, NamedTuple, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from adminkit_specifications.dates import get_timezone
from adminkit_specifications.exceptions import InvalidQueryParamsError
from adminkit_specifications.settings import QuerySettings
from adminkit_specifications.specification import (
    FilterSpecification,
    SortSpecification,
)

from .pagination import PageWindow, PaginationParser
from .params import ResourceQueryParams, StatParams
from .query_string import unflatten

TModel = TypeVar("TModel", bound=BaseModel)


class ParsedQuery(NamedTuple):
    """Everything a list request needs, parsed once."""

    params: ResourceQueryParams
    filter: FilterSpecification
    sort: SortSpecification | None
    page: PageWindow


class QueryParamsParser:
    """
    Parse admin UI query params.

    Accepts either nested dicts (``{"page": {"number": 2}}``) or flat
    bracket keys (``{"page[number]": "2"}``), as produced by a query
    string decoder.
    """

    def __init__(self, settings: QuerySettings | None = None) -> None:
        self._settings = settings or QuerySettings()
        self._pagination = PaginationParser(self._settings)

    def parse(self, query_params: Mapping[str, Any]) -> ParsedQuery:
        """
        Return ``(params, filter, sort, page)``.

        Raises:
            InvalidQueryParamsError: Parameters failed validation.
            InvalidTimezoneError: ``timezone`` is not a known IANA zone.
        """
        params = self._validate(ResourceQueryParams, query_params)
        timezone = self._timezone(params.timezone)
        if timezone != params.timezone:
            params = params.model_copy(update={"timezone": timezone})

        sort = None
        if params.sort and params.sort.strip():
            sort = SortSpecification.parse(params.sort)
            if not sort.path:
                raise InvalidQueryParamsError({"sort": ["sort field is empty"]})

        page = self._pagination.parse(params.page.number, params.page.size)
        return ParsedQuery(
            params=params,
            filter=params.to_filter_specification(),
            sort=sort,
            page=page,
        )

    def parse_stat(
        self, query_params: Mapping[str, Any]
    ) -> tuple[StatParams, FilterSpecification]:
        """Validate stat params and build the filter of its ``filters`` list."""
        params = self._validate(StatParams, query_params)
        timezone = self._timezone(params.timezone)
        if timezone != params.timezone:
            params = params.model_copy(update={"timezone": timezone})
        return params, params.to_filter_specification()

    def _timezone(self, name: str | None) -> str:
        name = name or self._settings.default_timezone
        get_timezone(name)
        return name

    def _validate(
        self, model: type[TModel], query_params: Mapping[str, Any]
    ) -> TModel:
        data = unflatten(query_params)
        try:
            return model.model_validate(data)
        except PydanticValidationError as exc:
            errors: dict[str, list[str]] = {}
            for error in exc.errors():
                loc = ".".join(str(p) for p in error.get("loc", ())) or "__root__"
                msg = error.get("msg", "validation error")
                errors.setdefault(loc, []).append(msg)
            raise InvalidQueryParamsError(errors) from exc
