"""Shared fixtures for specifications tests."""

from __future__ import annotations

import pytest

from adminkit_specifications.schema import (
    AssociationDescriptor,
    Collection,
    FieldDescriptor,
)
from adminkit_specifications.types import SemanticType


@pytest.fixture
def users() -> Collection:
    return Collection(
        name="users",
        fields=(
            FieldDescriptor("id", SemanticType.NUMBER, is_primary_key=True),
            FieldDescriptor("email", SemanticType.STRING, is_required=True),
            FieldDescriptor("firstName", SemanticType.STRING),
            FieldDescriptor(
                "role",
                SemanticType.ENUM,
                enum_values=("admin", "member", "guest"),
            ),
            FieldDescriptor("isActive", SemanticType.BOOLEAN),
            FieldDescriptor("createdAt", SemanticType.DATE),
            FieldDescriptor("birthday", SemanticType.DATEONLY),
            FieldDescriptor("preferences", SemanticType.JSON),
            FieldDescriptor("token", SemanticType.UUID),
        ),
        primary_keys=("id",),
        associations=(
            AssociationDescriptor(
                "addresses", "addresses", many=True, foreign_keys=("user_id",)
            ),
        ),
        unsupported_fields=(("period", "INTERVAL"),),
    )


@pytest.fixture
def addresses() -> Collection:
    return Collection(
        name="addresses",
        fields=(
            FieldDescriptor("id", SemanticType.NUMBER, is_primary_key=True),
            FieldDescriptor("city", SemanticType.STRING),
            FieldDescriptor("user_id", SemanticType.NUMBER),
        ),
        primary_keys=("id",),
        search_fields=("city",),
        associations=(
            AssociationDescriptor("user", "users", foreign_keys=("user_id",)),
        ),
    )


@pytest.fixture
def collections(users: Collection, addresses: Collection) -> dict[str, Collection]:
    return {"users": users, "addresses": addresses}
