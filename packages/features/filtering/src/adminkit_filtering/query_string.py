"""Bracket-key query strings -> nested parameter dicts."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from .exceptions import FilterParseError

_KEY_RE = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_SEGMENT_RE = re.compile(r"\[([^\[\]]*)\]")


def split_key(key: str) -> list[str]:
    """``filter[user.email]`` -> ``["filter", "user.email"]``."""
    match = _KEY_RE.match(key)
    if match is None:
        raise FilterParseError({key: ["malformed parameter name"]})
    head, brackets = match.groups()
    segments = _SEGMENT_RE.findall(brackets)
    if any(not s for s in segments):
        raise FilterParseError({key: ["empty bracket segment"]})
    return [head, *segments]


def unflatten(query_params: Mapping[str, Any]) -> dict[str, Any]:
    """
    Turn flat bracket keys into nested dicts.

    Example::

        unflatten({"page[number]": "2", "filter[id]": "5", "search": "x"})
        # -> {"page": {"number": "2"}, "filter": {"id": "5"}, "search": "x"}

    Keys without brackets pass through unchanged, as do values that are
    already nested. Dots inside brackets are kept: ``filter[user.id]``
    addresses the ``user.id`` path.
    """
    result: dict[str, Any] = {}
    for key, value in query_params.items():
        segments = split_key(key)
        target = result
        for segment in segments[:-1]:
            existing = target.setdefault(segment, {})
            if not isinstance(existing, dict):
                raise FilterParseError(
                    {key: [f"'{segment}' is both a value and a group"]}
                )
            target = existing
        leaf = segments[-1]
        if isinstance(target.get(leaf), dict) and isinstance(value, Mapping):
            target[leaf].update(value)
        elif leaf in target:
            raise FilterParseError({key: ["parameter given more than once"]})
        else:
            target[leaf] = dict(value) if isinstance(value, Mapping) else value
    return result
