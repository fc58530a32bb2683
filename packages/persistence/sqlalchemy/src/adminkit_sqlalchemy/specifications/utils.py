"""
SQLAlchemy-specific utilities for the specifications compiler.
"""

from __future__ import annotations

import datetime
from typing import Any

from sqlalchemy import Date, DateTime

from adminkit_specifications.dates import to_naive_utc

from ..introspection.detector import unwrap_type


def bind_temporal(column: Any, value: Any) -> Any:
    """
    Align a datetime operand with the column's storage.

    ``DateTime`` columns without a zone get naive UTC, ``Date`` columns
    get the (already localized) calendar date. Anything else is returned
    unchanged.
    """
    if not isinstance(value, datetime.datetime):
        return value
    type_ = unwrap_type(column.type)
    if isinstance(type_, DateTime) and not type_.timezone:
        return to_naive_utc(value)
    if isinstance(type_, Date):
        return value.date()
    return value
