"""Filtering package exceptions."""

from __future__ import annotations

from adminkit_specifications.exceptions import InvalidQueryParamsError


class FilterParseError(InvalidQueryParamsError):
    """Raised when the query string or filter structure is malformed."""
