"""Tests for CollectionRegistry."""

from __future__ import annotations

import logging

import pytest

from adminkit_specifications.exceptions import (
    CollectionNotFoundError,
    ConfigurationError,
    UnsupportedFieldTypeError,
)
from adminkit_specifications.types import SemanticType
from adminkit_sqlalchemy import (
    CollectionRegistry,
    RegistryFrozenError,
    RegistryNotFrozenError,
)


def test_collections_are_named_after_tables(registry, models) -> None:
    assert list(registry.collections) == [
        "users",
        "addresses",
        "orders",
        "bikes",
        "logs",
        "reminders",
        "rentals",
    ]
    assert "users" in registry
    assert len(registry) == 7
    assert registry.get_model("orders") is models.Order


def test_custom_name(models) -> None:
    registry = CollectionRegistry()
    registry.register(models.User, name="customers")
    registry.freeze()
    assert registry.get_collection("customers").name == "customers"


def test_fields(registry) -> None:
    users = registry.get_collection("users")
    assert users.field_names == [
        "id",
        "email",
        "firstName",
        "role",
        "isActive",
        "createdAt",
        "birthday",
        "preferences",
    ]
    assert users.get_field("firstName").column_name == "first_name"
    assert users.get_field("role").enum_values == ("admin", "member", "guest")
    assert users.get_field("preferences").semantic_type is SemanticType.JSON
    assert users.primary_keys == ("id",)


def test_composite_primary_key(registry) -> None:
    logs = registry.get_collection("logs")
    assert logs.primary_keys == ("code", "trace")
    assert logs.id_field == "compositePrimary"


def test_unsupported_columns_are_dropped(caplog, models) -> None:
    registry = CollectionRegistry()
    with caplog.at_level(logging.WARNING, logger="adminkit.registry"):
        registry.register(models.Reminder)
    registry.freeze()

    reminders = registry.get_collection("reminders")
    assert reminders.field_names == ["id", "label"]
    assert reminders.unsupported_fields == (
        ("every", "Interval"),
        ("payload", "PickleType"),
    )
    assert any("every" in r.getMessage() for r in caplog.records)
    with pytest.raises(UnsupportedFieldTypeError):
        reminders.get_field("every")


def test_associations(registry) -> None:
    users = registry.get_collection("users")
    addresses = users.find_association("addresses")
    assert addresses is not None
    assert addresses.many
    assert addresses.target == "addresses"
    assert addresses.foreign_keys == ("user_id",)

    user = registry.get_collection("addresses").find_association("user")
    assert user is not None
    assert not user.many
    assert user.target == "users"
    assert user.foreign_keys == ("user_id",)


def test_unregistered_targets_are_skipped(models) -> None:
    registry = CollectionRegistry()
    registry.register(models.Address)
    registry.freeze()
    assert registry.get_collection("addresses").associations == ()


def test_schemas(registry) -> None:
    schemas = {schema["name"]: schema for schema in registry.schemas()}
    assert schemas["orders"]["searchFields"] == ["amount", "comment"]
    assert schemas["logs"]["isCompositePrimary"] is True
    user_field = schemas["orders"]["fields"][-1]
    assert user_field == {"field": "user", "type": "Number", "reference": "users.id"}
    amount = next(f for f in schemas["orders"]["fields"] if f["field"] == "amount")
    assert amount["isRequired"] is True
    assert amount["validations"] == [
        {"type": "is present"},
        {"type": "is greater than", "value": 0},
    ]
    bike_field = schemas["rentals"]["fields"][-1]
    assert bike_field == {"field": "bike", "type": "Uuid", "reference": "bikes.id"}


def test_reads_require_freeze(models) -> None:
    registry = CollectionRegistry()
    registry.register(models.User)
    assert not registry.is_frozen
    with pytest.raises(RegistryNotFrozenError):
        registry.get_collection("users")


def test_register_after_freeze(registry, models) -> None:
    with pytest.raises(RegistryFrozenError):
        registry.register(models.Log, name="other_logs")


def test_duplicate_name(models) -> None:
    registry = CollectionRegistry()
    registry.register(models.User)
    with pytest.raises(ConfigurationError):
        registry.register(models.User)


def test_invalid_search_fields(models) -> None:
    registry = CollectionRegistry()
    with pytest.raises(ConfigurationError):
        registry.register(models.Order, search_fields=["createdAt"])
    with pytest.raises(ConfigurationError):
        registry.register(models.Order, search_fields=["missing"])


def test_unknown_collection(registry) -> None:
    with pytest.raises(CollectionNotFoundError) as excinfo:
        registry.get_collection("user")
    assert excinfo.value.suggestions == ["users"]
