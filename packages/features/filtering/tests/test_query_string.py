"""Tests for bracket-key unflattening."""

from __future__ import annotations

import pytest

from adminkit_filtering.exceptions import FilterParseError
from adminkit_filtering.query_string import split_key, unflatten


@pytest.mark.parametrize(
    ("key", "segments"),
    [
        ("search", ["search"]),
        ("page[number]", ["page", "number"]),
        ("filter[user.email]", ["filter", "user.email"]),
        ("filter[group][role]", ["filter", "group", "role"]),
    ],
)
def test_split_key(key, segments) -> None:
    assert split_key(key) == segments


@pytest.mark.parametrize(
    "key", ["filter[", "filter]x[", "[id]", "filter[a]b", "page[]"]
)
def test_split_key_rejects_malformed(key) -> None:
    with pytest.raises(FilterParseError):
        split_key(key)


def test_unflatten() -> None:
    assert unflatten(
        {
            "page[number]": "2",
            "page[size]": "15",
            "filter[user.email]": "*@x.io",
            "filter[g1][role]": "admin",
            "search": "bob",
        }
    ) == {
        "page": {"number": "2", "size": "15"},
        "filter": {"user.email": "*@x.io", "g1": {"role": "admin"}},
        "search": "bob",
    }


def test_unflatten_merges_nested_values() -> None:
    result = unflatten({"filter": {"id": "1"}, "filter[name]": "bob"})
    assert result == {"filter": {"id": "1", "name": "bob"}}


def test_unflatten_value_and_group_conflict() -> None:
    with pytest.raises(FilterParseError) as excinfo:
        unflatten({"filter": "x", "filter[id]": "1"})
    assert "filter[id]" in excinfo.value.errors


def test_unflatten_duplicate_parameter() -> None:
    with pytest.raises(FilterParseError):
        unflatten({"filter": {"id": "1"}, "filter[id]": "2"})
