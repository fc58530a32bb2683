"""
Timezone-aware date helpers.

Relative-date boundaries and Line aggregation buckets are computed here,
in pure Python, so the result never depends on the process-local zone
or on the database dialect.
"""

from __future__ import annotations

import datetime
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .exceptions import InvalidTimezoneError
from .types import TimeRange

Direction = Literal["before", "after"]

UTC = datetime.timezone.utc


def get_timezone(name: str) -> ZoneInfo:
    """Return the IANA zone called *name* or raise ``InvalidTimezoneError``."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidTimezoneError(name)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidTimezoneError(name) from exc


def localize(value: datetime.datetime, tz: datetime.tzinfo) -> datetime.datetime:
    """Convert *value* into *tz*. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(tz)


def resolve_relative_date(
    offset_hours: int,
    direction: Direction,
    timezone: str,
    now: datetime.datetime,
) -> datetime.datetime:
    """
    Compute the boundary instant of a ``$<N>HoursBefore/After`` condition.

    *now* is localized to *timezone*, then *offset_hours* are subtracted
    (``before``) or added (``after``). The boundary is exclusive: the
    predicate is "strictly earlier" / "strictly later" than the result.
    """
    if direction not in ("before", "after"):
        raise ValueError(f"Unknown direction: {direction!r}")
    local_now = localize(now, get_timezone(timezone))
    delta = datetime.timedelta(hours=offset_hours)
    return local_now - delta if direction == "before" else local_now + delta


def to_naive_utc(value: datetime.datetime) -> datetime.datetime:
    """Aware → naive UTC, for columns stored without a zone."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# Buckets
# ---------------------------------------------------------------------------


def truncate(
    value: datetime.datetime | datetime.date, time_range: TimeRange
) -> datetime.date:
    """Return the first day of the bucket *value* falls in."""
    day = value.date() if isinstance(value, datetime.datetime) else value
    if time_range is TimeRange.DAY:
        return day
    if time_range is TimeRange.WEEK:
        return day - datetime.timedelta(days=day.weekday())
    if time_range is TimeRange.MONTH:
        return day.replace(day=1)
    if time_range is TimeRange.YEAR:
        return day.replace(month=1, day=1)
    raise ValueError(f"Unknown time range: {time_range!r}")


def bucket_label(start: datetime.date, time_range: TimeRange) -> str:
    if time_range is TimeRange.DAY:
        return start.strftime("%d/%m/%Y")
    if time_range is TimeRange.WEEK:
        iso_year, iso_week, _ = start.isocalendar()
        return f"W{iso_week}-{iso_year}"
    if time_range is TimeRange.MONTH:
        return start.strftime("%b %y")
    if time_range is TimeRange.YEAR:
        return start.strftime("%Y")
    raise ValueError(f"Unknown time range: {time_range!r}")


def bucket_start(
    value: datetime.datetime | datetime.date,
    time_range: TimeRange,
    tz: datetime.tzinfo,
) -> datetime.date:
    """Localize datetimes to *tz* before truncating; plain dates as-is."""
    if isinstance(value, datetime.datetime):
        value = localize(value, tz)
    return truncate(value, time_range)
