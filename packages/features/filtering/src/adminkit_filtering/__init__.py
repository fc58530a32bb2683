"""Admin UI query parsing: filter, search, sort and pagination params."""

from __future__ import annotations

from .exceptions import FilterParseError
from .pagination import PageWindow, PaginationParser
from .params import PageParams, ResourceQueryParams, StatFilter, StatParams
from .parser import ParsedQuery, QueryParamsParser
from .query_string import split_key, unflatten

__all__ = [
    "FilterParseError",
    "PageParams",
    "PageWindow",
    "PaginationParser",
    "ParsedQuery",
    "QueryParamsParser",
    "ResourceQueryParams",
    "StatFilter",
    "StatParams",
    "split_key",
    "unflatten",
]
