"""
Query settings.

``QuerySettings`` carries the knobs shared by the compiler and the
getters. It is passed explicitly; there is no module-level instance.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class QuerySettings:
    """
    Immutable container for query behaviour.

    Attributes:
        case_sensitive: Whether contains/starts-with/ends-with and search
            compare case-sensitively.
        default_page_size: Page size used when the request has none.
        max_page_size: Upper bound for requested page sizes.
        timeout: Seconds allowed for each storage call; ``None`` waits
            indefinitely.
        default_timezone: IANA zone used when the request has none.
        composite_key_separator: Joins primary key values of composite ids.
    """

    case_sensitive: bool = False
    default_page_size: int = 10
    max_page_size: int = 100
    timeout: float | None = None
    default_timezone: str = "UTC"
    composite_key_separator: str = "-"

    def __post_init__(self) -> None:
        if self.default_page_size < 1 or self.max_page_size < 1:
            raise ValueError("Page sizes must be positive")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")

    def with_timeout(self, timeout: float | None) -> QuerySettings:
        """Return a copy with the storage timeout replaced."""
        return replace(self, timeout=timeout)

    def with_case_sensitivity(self, case_sensitive: bool) -> QuerySettings:
        """Return a copy with string matching sensitivity replaced."""
        return replace(self, case_sensitive=case_sensitive)
