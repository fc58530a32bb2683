"""Exceptions for the SQLAlchemy adapter."""

from __future__ import annotations

from typing import Any

from adminkit_specifications.exceptions import AdminKitError, ConfigurationError


class RegistryFrozenError(ConfigurationError):
    """Raised when a model is registered after ``freeze()``."""


class RegistryNotFrozenError(ConfigurationError):
    """Raised when a request reads the registry before ``freeze()``."""


class InvalidRecordIdError(AdminKitError):
    """Record id does not match the collection's primary key."""

    def __init__(self, collection: str, record_id: Any, reason: str) -> None:
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"Invalid id {record_id!r} for '{collection}': {reason}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_RECORD_ID",
            "collection": self.collection,
            "id": str(self.record_id),
            "message": str(self),
        }


__all__: list[str] = [
    "InvalidRecordIdError",
    "RegistryFrozenError",
    "RegistryNotFrozenError",
]
