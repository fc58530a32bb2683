"""PageWindow: page number/size -> offset/limit."""

from __future__ import annotations

from typing import NamedTuple

from adminkit_specifications.settings import QuerySettings


class PageWindow(NamedTuple):
    number: int
    size: int

    @property
    def offset(self) -> int:
        return (self.number - 1) * self.size

    @property
    def limit(self) -> int:
        return self.size


class PaginationParser:
    """Resolve requested page number and size against the settings."""

    def __init__(self, settings: QuerySettings | None = None) -> None:
        self._settings = settings or QuerySettings()

    def parse(self, number: int | None, size: int | None) -> PageWindow:
        number = max(1, number or 1)
        if size is None:
            size = self._settings.default_page_size
        size = min(self._settings.max_page_size, max(1, size))
        return PageWindow(number=number, size=size)
