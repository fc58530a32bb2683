"""Integration tests for the resource getters on SQLite."""

from __future__ import annotations

import datetime
import logging
import uuid

import pytest
from sqlalchemy import inspect

from adminkit_filtering.parser import QueryParamsParser
from adminkit_specifications.exceptions import (
    FieldNotFoundError,
    TypeMismatchError,
    UnsupportedDepthError,
    UnsupportedFieldTypeError,
    UnsupportedOperatorError,
)
from adminkit_sqlalchemy import (
    HasManyGetter,
    InvalidRecordIdError,
    ResourceGetter,
    ResourcesGetter,
)

BIKE_ID = uuid.UUID("1f0e8d6a-5c4b-4a39-8e27-1d0c9b8a7f6e")


async def _list(session, registry, name, params=None, **kwargs):
    count, rows = await ResourcesGetter(
        session, registry, name, params or {}, **kwargs
    ).perform()
    return count, [row.id for row in rows]


# ---------------------------------------------------------------------------
# ResourcesGetter
# ---------------------------------------------------------------------------


async def test_list_defaults(seeded, registry) -> None:
    assert await _list(seeded, registry, "users") == (4, [4, 3, 2, 1])


async def test_list_accepts_parsed_query(seeded, registry) -> None:
    parsed = QueryParamsParser(registry.settings).parse({"filter[role]": "member"})
    assert await _list(seeded, registry, "users", parsed) == (2, [4, 2])


@pytest.mark.parametrize(
    ("filters", "expected"),
    [
        ({"filter[email]": "*@test.org"}, [4, 3]),
        ({"filter[email]": "ALICE*"}, [1]),
        ({"filter[email]": "!*example*"}, [4, 3]),
        ({"filter[firstName]": "!Bob"}, [4, 3, 1]),
        ({"filter[firstName]": "$present"}, [3, 2, 1]),
        ({"filter[firstName]": "null"}, [4]),
        ({"filter[isActive]": "true"}, [4, 1]),
        ({"filter[isActive]": "!true"}, [3, 2]),
        ({"filter[isActive]": "!false"}, [4, 3, 1]),
        ({"filter[role]": "admin"}, [1]),
        ({"filter[id]": ">2"}, [4, 3]),
        ({"filter[createdAt]": ">2024-02-01T00:00:00Z"}, [4, 3]),
        ({"filter[birthday]": "<1988-01-01"}, [3]),
        ({"filter[preferences]": "!null"}, [1]),
        ({"filter[addresses.city]": "Lyon"}, [1]),
        ({"filter[orders.status]": "refunded"}, [3]),
    ],
)
async def test_list_filters(seeded, registry, filters, expected) -> None:
    count, ids = await _list(seeded, registry, "users", filters)
    assert ids == expected
    assert count == len(expected)


async def test_list_filter_groups(seeded, registry) -> None:
    params = {
        "filter[email]": "*example.com",
        "filter[g1][role]": "admin",
        "filter[g2][isActive]": "false",
    }
    assert await _list(seeded, registry, "users", params) == (2, [2, 1])


async def test_list_filter_type_or(seeded, registry) -> None:
    params = {"filter[role]": "guest", "filter[id]": "1", "filterType": "or"}
    assert await _list(seeded, registry, "users", params) == (2, [3, 1])


async def test_list_association_filter_to_one(seeded, registry) -> None:
    params = {"filter[user.email]": "bob*"}
    assert await _list(seeded, registry, "addresses", params) == (1, [3])


async def test_relative_dates(seeded, registry) -> None:
    now = datetime.datetime(2024, 1, 21, tzinfo=datetime.timezone.utc)
    params = {"filter[createdAt]": "$24HoursBefore"}
    assert await _list(seeded, registry, "users", params, now=now) == (1, [1])

    now = datetime.datetime(2024, 2, 1, tzinfo=datetime.timezone.utc)
    params = {"filter[createdAt]": "$2HoursAfter", "timezone": "Europe/Paris"}
    assert await _list(seeded, registry, "users", params, now=now) == (2, [4, 3])


async def test_search(seeded, registry) -> None:
    assert await _list(seeded, registry, "users", {"search": "alice"}) == (1, [1])
    assert await _list(seeded, registry, "users", {"search": "TEST.ORG"}) == (
        2,
        [4, 3],
    )
    assert await _list(seeded, registry, "users", {"search": "3"}) == (1, [3])
    assert await _list(seeded, registry, "users", {"search": "0_3"}) == (0, [])


async def test_search_declared_fields(seeded, registry) -> None:
    assert await _list(seeded, registry, "orders", {"search": "250"}) == (1, [2])
    assert await _list(seeded, registry, "orders", {"search": "paid"}) == (0, [])


async def test_search_extended(seeded, registry) -> None:
    params = {"search": "paris"}
    assert await _list(seeded, registry, "users", params) == (0, [])
    params["searchExtended"] = "true"
    assert await _list(seeded, registry, "users", params) == (1, [1])


async def test_search_extended_uuid_on_to_one_target(seeded, registry) -> None:
    params = {"search": str(BIKE_ID)}
    assert await _list(seeded, registry, "rentals", params) == (0, [])
    params["searchExtended"] = "1"
    assert await _list(seeded, registry, "rentals", params) == (1, [1])
    params["search"] = str(BIKE_ID)[:8]
    assert await _list(seeded, registry, "rentals", params) == (0, [])


async def test_search_and_filter(seeded, registry) -> None:
    params = {"search": "example", "filter[isActive]": "true"}
    assert await _list(seeded, registry, "users", params) == (1, [1])


async def test_present_and_blank_partition_rows(seeded, registry, models) -> None:
    seeded.add(models.User(id=5, email="erin@example.com", firstName=""))
    await seeded.commit()

    async def matching(raw):
        _, ids = await _list(seeded, registry, "users", {"filter[firstName]": raw})
        return ids

    _, everyone = await _list(seeded, registry, "users")
    present = await matching("$present")
    blank = await matching("$blank")
    null = await matching("null")

    assert present == [3, 2, 1]
    assert blank == [5, 4]
    assert null == [4]
    assert not set(present) & set(blank)
    assert sorted(present + blank) == sorted(everyone)
    assert set(null) <= set(blank)


async def test_search_uuid(seeded, registry) -> None:
    count, rows = await ResourcesGetter(
        seeded, registry, "bikes", {"search": str(BIKE_ID)}
    ).perform()
    assert count == 1
    assert rows[0].id == BIKE_ID


async def test_sort_and_pagination(seeded, registry) -> None:
    params = {"sort": "email", "page[number]": "2", "page[size]": "3"}
    assert await _list(seeded, registry, "users", params) == (4, [4])

    params = {"sort": "-user.email"}
    assert await _list(seeded, registry, "addresses", params) == (3, [3, 2, 1])


async def test_page_size_is_capped(seeded, registry) -> None:
    params = {"page[size]": "1000"}
    count, ids = await _list(seeded, registry, "users", params)
    assert count == 4
    assert len(ids) == 4


async def test_requested_fields(seeded, registry) -> None:
    params = {"fields[users]": "email,unknown"}
    _, rows = await ResourcesGetter(seeded, registry, "users", params).perform()
    state = inspect(rows[0])
    assert "email" not in state.unloaded
    assert "id" not in state.unloaded
    assert "firstName" in state.unloaded


async def test_requested_association_is_loaded(seeded, registry) -> None:
    params = {"fields[addresses]": "city,user", "sort": "id"}
    _, rows = await ResourcesGetter(seeded, registry, "addresses", params).perform()
    assert rows[0].user.email == "alice@example.com"


@pytest.mark.parametrize(
    ("filters", "error"),
    [
        ({"filter[emial]": "x"}, FieldNotFoundError),
        ({"filter[id]": "abc"}, TypeMismatchError),
        ({"filter[id]": "*1*"}, UnsupportedOperatorError),
        ({"filter[preferences]": "dark"}, UnsupportedOperatorError),
        ({"filter[addresses.user.email]": "x"}, UnsupportedDepthError),
        ({"sort": "addresses.city"}, FieldNotFoundError),
        ({"filter[createdAt]": "$99999999999HoursBefore"}, TypeMismatchError),
        ({"filter[createdAt]": "$100000000HoursAfter"}, TypeMismatchError),
        ({"filter[id]": ">1_0"}, TypeMismatchError),
    ],
)
async def test_list_errors(seeded, registry, filters, error) -> None:
    with pytest.raises(error):
        await ResourcesGetter(seeded, registry, "users", filters).perform()


async def test_unsupported_field_filter(seeded, registry) -> None:
    with pytest.raises(UnsupportedFieldTypeError):
        await ResourcesGetter(
            seeded, registry, "reminders", {"filter[every]": "null"}
        ).perform()


async def test_list_logs_timing(seeded, registry, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="adminkit.getters"):
        await ResourcesGetter(seeded, registry, "users", {}).perform()
    assert any(
        "resources 'users': 4 of 4 rows" in r.getMessage() for r in caplog.records
    )


async def test_list_logs_failures(seeded, registry, caplog) -> None:
    with caplog.at_level(logging.ERROR, logger="adminkit.getters"):
        with pytest.raises(FieldNotFoundError):
            await ResourcesGetter(
                seeded, registry, "users", {"filter[nope]": "1"}
            ).perform()
    assert any(r.levelno == logging.ERROR for r in caplog.records)


# ---------------------------------------------------------------------------
# HasManyGetter
# ---------------------------------------------------------------------------


async def test_has_many(seeded, registry) -> None:
    count, rows = await HasManyGetter(
        seeded, registry, "users", "1", "addresses", {}
    ).perform()
    assert count == 2
    assert [row.id for row in rows] == [2, 1]


async def test_has_many_with_filter(seeded, registry) -> None:
    count, rows = await HasManyGetter(
        seeded, registry, "users", 1, "orders", {"filter[status]": "paid"}
    ).perform()
    assert (count, [row.id for row in rows]) == (1, [1])


async def test_has_many_search_and_page(seeded, registry) -> None:
    params = {"search": "r", "page[size]": "1", "sort": "id"}
    count, rows = await HasManyGetter(
        seeded, registry, "users", "1", "orders", params
    ).perform()
    assert count == 2
    assert [row.id for row in rows] == [1]


async def test_has_many_missing_parent(seeded, registry) -> None:
    assert await HasManyGetter(
        seeded, registry, "users", "99", "addresses", {}
    ).perform() == (0, [])


async def test_has_many_requires_to_many_association(registry) -> None:
    with pytest.raises(FieldNotFoundError) as excinfo:
        HasManyGetter(None, registry, "addresses", "1", "user", {})
    assert excinfo.value.available_fields == []


async def test_has_many_invalid_id(seeded, registry) -> None:
    with pytest.raises(InvalidRecordIdError):
        await HasManyGetter(seeded, registry, "users", "one", "addresses", {}).perform()


# ---------------------------------------------------------------------------
# ResourceGetter
# ---------------------------------------------------------------------------


async def test_get_one(seeded, registry) -> None:
    user = await ResourceGetter(seeded, registry, "users", "2").perform()
    assert user.email == "bob@example.com"
    assert await ResourceGetter(seeded, registry, "users", "42").perform() is None


async def test_get_one_uuid(seeded, registry) -> None:
    bike = await ResourceGetter(seeded, registry, "bikes", str(BIKE_ID)).perform()
    assert bike.name == "Roadster"


async def test_get_one_composite(seeded, registry) -> None:
    log = await ResourceGetter(
        seeded, registry, "logs", "G@G#F@G@-Ggg23g242@"
    ).perform()
    assert log.message == "weird ids"

    log = await ResourceGetter(seeded, registry, "logs", "A-B-C").perform()
    assert log.trace == "B-C"


@pytest.mark.parametrize(
    ("name", "record_id"),
    [
        ("users", "abc"),
        ("bikes", "not-a-uuid"),
        ("logs", "no_separator"),
        ("logs", 12),
    ],
)
async def test_get_one_invalid_id(seeded, registry, name, record_id) -> None:
    with pytest.raises(InvalidRecordIdError):
        await ResourceGetter(seeded, registry, name, record_id).perform()
