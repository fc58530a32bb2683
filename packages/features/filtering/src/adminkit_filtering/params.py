"""
Request parameter models.

Field names follow the admin UI's wire format through aliases
(``filterType``, ``searchExtended``); both the alias and the Python name
are accepted.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, model_validator

from adminkit_specifications.specification import FilterSpecification
from adminkit_specifications.types import AggregateKind, FilterCombinator, TimeRange


class PageParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: PositiveInt = 1
    size: PositiveInt | None = None


class ResourceQueryParams(BaseModel):
    """Parameters of a list request (resources or has-many)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    fields: dict[str, str] = Field(default_factory=dict)
    filter: dict[str, Any] = Field(default_factory=dict)
    filter_type: FilterCombinator = Field(
        default=FilterCombinator.AND, alias="filterType"
    )
    search: str | None = None
    search_extended: bool = Field(default=False, alias="searchExtended")
    sort: str | None = None
    page: PageParams = Field(default_factory=PageParams)
    timezone: str | None = None

    def fields_for(self, collection_name: str) -> list[str] | None:
        """Requested attribute names for *collection_name*, or ``None`` for all."""
        raw = self.fields.get(collection_name)
        if not raw:
            return None
        return [name.strip() for name in raw.split(",") if name.strip()]

    def to_filter_specification(self) -> FilterSpecification:
        return FilterSpecification.from_mapping(
            self.filter,
            combinator=self.filter_type,
            search=self.search,
            search_extended=self.search_extended,
            timezone=self.timezone,
        )


class StatFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    value: Any = None


class StatParams(BaseModel):
    """Parameters of a Pie or Line aggregation request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    type: Literal["Pie", "Line"]
    collection: str
    group_by_field: str | None = None
    group_by_date_field: str | None = None
    aggregate: AggregateKind = AggregateKind.COUNT
    aggregate_field: str | None = None
    time_range: TimeRange | None = None
    filters: list[StatFilter] = Field(default_factory=list)
    filter_type: FilterCombinator = Field(
        default=FilterCombinator.AND, alias="filterType"
    )
    timezone: str | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> StatParams:
        if self.type == "Pie" and not self.group_by_field:
            raise ValueError("Pie charts need group_by_field")
        if self.type == "Line" and not self.group_by_date_field:
            raise ValueError("Line charts need group_by_date_field")
        if self.type == "Line" and self.time_range is None:
            raise ValueError("Line charts need time_range")
        if self.aggregate is not AggregateKind.COUNT and not self.aggregate_field:
            raise ValueError(f"{self.aggregate.value} needs aggregate_field")
        return self

    def to_filter_specification(self) -> FilterSpecification:
        return FilterSpecification.from_pairs(
            [(f.field, f.value) for f in self.filters],
            combinator=self.filter_type,
            timezone=self.timezone,
        )
