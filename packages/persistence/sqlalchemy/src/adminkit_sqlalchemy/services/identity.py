"""Record ids: primary key values <-> the id string the admin UI uses."""

from __future__ import annotations

from typing import Any

from adminkit_specifications.conditions import coerce_operand
from adminkit_specifications.exceptions import TypeMismatchError
from adminkit_specifications.schema import Collection
from adminkit_specifications.types import SemanticType

from ..exceptions import InvalidRecordIdError

_UUID_LENGTH = 36


def parse_record_id(
    collection: Collection, record_id: Any, *, separator: str = "-"
) -> Any:
    """
    Turn *record_id* into a primary key identity for ``session.get()``.

    Composite ids are the primary key values joined by *separator* in key
    order. Only the last value may contain the separator, except for UUID
    keys, which are read as their 36-character canonical form. Returns a
    scalar for single keys and a tuple for composite keys.

    Raises:
        InvalidRecordIdError: Wrong number of parts, or a part that
            cannot be read as its key's type.
    """
    primary_keys = collection.primary_keys
    if not primary_keys:
        raise InvalidRecordIdError(collection.name, record_id, "no primary key")

    if collection.is_composite_primary:
        if not isinstance(record_id, str):
            raise InvalidRecordIdError(
                collection.name, record_id, "composite ids must be strings"
            )
        parts: list[Any] = _split_composite(collection, record_id, separator)
    else:
        parts = [record_id]

    values = []
    for name, part in zip(primary_keys, parts):
        descriptor = collection.get_field(name)
        if isinstance(part, str):
            try:
                part = coerce_operand(
                    part,
                    descriptor.semantic_type,
                    field=name,
                    enum_values=descriptor.enum_values,
                )
            except TypeMismatchError as exc:
                raise InvalidRecordIdError(
                    collection.name, record_id, exc.message
                ) from exc
        values.append(part)

    if collection.is_composite_primary:
        return tuple(values)
    return values[0]


def _split_composite(
    collection: Collection, record_id: str, separator: str
) -> list[str]:
    parts = []
    rest = record_id
    for name in collection.primary_keys[:-1]:
        descriptor = collection.get_field(name)
        after_uuid = rest[_UUID_LENGTH : _UUID_LENGTH + len(separator)]
        if descriptor.semantic_type is SemanticType.UUID and after_uuid == separator:
            head, rest = rest[:_UUID_LENGTH], rest[_UUID_LENGTH + len(separator) :]
        else:
            head, found, rest = rest.partition(separator)
            if not found:
                raise InvalidRecordIdError(
                    collection.name,
                    record_id,
                    f"expected {len(collection.primary_keys)} values joined "
                    f"by '{separator}'",
                )
        parts.append(head)
    parts.append(rest)
    return parts


def record_id_of(
    collection: Collection, instance: Any, *, separator: str = "-"
) -> str:
    """The id string of a loaded *instance*."""
    return separator.join(
        str(getattr(instance, name)) for name in collection.primary_keys
    )
