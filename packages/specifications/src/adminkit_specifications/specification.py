"""
Request-level filter and sort specifications.

A :class:`FilterSpecification` is what the admin UI asks for: raw
condition strings keyed by field path, an optional nested OR of groups,
a top-level combinator and an optional free-text search. It is turned
into a predicate tree by
:func:`~adminkit_specifications.composer.compose_condition_tree`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .types import FilterCombinator


@dataclass(frozen=True)
class FilterSpecification:
    """
    Attributes:
        conditions: Ordered ``(field path, raw condition)`` pairs.
        groups: Nested specifications; each is the AND of its entries and
            all groups are OR'ed together.
        combinator: Joins ``conditions`` (and the OR of ``groups``).
        search: Free-text search, AND'ed with everything else.
        search_extended: Also search one-hop associations.
        timezone: IANA zone for relative dates; ``None`` uses the
            configured default.
    """

    conditions: tuple[tuple[str, str], ...] = ()
    groups: tuple[FilterSpecification, ...] = ()
    combinator: FilterCombinator = FilterCombinator.AND
    search: str | None = None
    search_extended: bool = False
    timezone: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.conditions and not self.groups and not self.has_search

    @property
    def has_search(self) -> bool:
        return bool(self.search and self.search.strip())

    @classmethod
    def from_mapping(
        cls,
        filters: Mapping[str, Any] | None,
        *,
        combinator: FilterCombinator | str = FilterCombinator.AND,
        search: str | None = None,
        search_extended: bool = False,
        timezone: str | None = None,
    ) -> FilterSpecification:
        """
        Build a specification from a ``{path: raw}`` mapping.

        Values may be a raw string, a list of raw strings (several
        conditions on one field) or a mapping (a group; its key is only
        a label).
        """
        conditions: list[tuple[str, str]] = []
        groups: list[FilterSpecification] = []
        for key, value in (filters or {}).items():
            if isinstance(value, Mapping):
                groups.append(cls.from_mapping(value))
            elif isinstance(value, list | tuple):
                conditions.extend((key, _raw(v)) for v in value)
            else:
                conditions.append((key, _raw(value)))
        return cls(
            conditions=tuple(conditions),
            groups=tuple(groups),
            combinator=FilterCombinator(combinator),
            search=search,
            search_extended=search_extended,
            timezone=timezone,
        )

    @classmethod
    def from_pairs(
        cls,
        pairs: list[tuple[str, Any]],
        *,
        combinator: FilterCombinator | str = FilterCombinator.AND,
        timezone: str | None = None,
    ) -> FilterSpecification:
        """Build from ``(path, raw)`` pairs, e.g. stat filters."""
        return cls(
            conditions=tuple((path, _raw(raw)) for path, raw in pairs),
            combinator=FilterCombinator(combinator),
            timezone=timezone,
        )


def _raw(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class SortSpecification:
    """``field``, ``-field`` or ``association.field``."""

    path: str
    descending: bool = False

    @classmethod
    def parse(cls, raw: str) -> SortSpecification:
        text = raw.strip()
        if text.startswith("-"):
            return cls(path=text[1:].strip(), descending=True)
        return cls(path=text)

    def __str__(self) -> str:
        return f"-{self.path}" if self.descending else self.path
