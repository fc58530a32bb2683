"""
CollectionRegistry: declarative models -> collections, built once.

Usage::

    registry = CollectionRegistry()
    registry.register(User, search_fields=["email", "firstName"])
    registry.register(Order)
    registry.freeze()

    registry.get_collection("users").to_schema(registry.collections)

After ``freeze()`` the registry is read-only and may be shared by every
request.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from sqlalchemy import Column, inspect
from sqlalchemy.orm import Mapper, RelationshipDirection, RelationshipProperty

from adminkit_specifications.exceptions import (
    CollectionNotFoundError,
    ConfigurationError,
    UnsupportedFieldTypeError,
)
from adminkit_specifications.schema import AssociationDescriptor, Collection
from adminkit_specifications.settings import QuerySettings
from adminkit_specifications.types import SemanticType

from .exceptions import RegistryFrozenError, RegistryNotFrozenError
from .introspection import build_field_descriptor, native_type_name

logger = logging.getLogger("adminkit.registry")


class CollectionRegistry:
    """Registry of collections keyed by name, with their model classes."""

    def __init__(self, settings: QuerySettings | None = None) -> None:
        self._settings = settings or QuerySettings()
        self._collections: dict[str, Collection] = {}
        self._models: dict[str, type[Any]] = {}
        self._frozen = False

    @property
    def settings(self) -> QuerySettings:
        return self._settings

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    # -- registration -------------------------------------------------------

    def register(
        self,
        model: type[Any],
        *,
        name: str | None = None,
        search_fields: Iterable[str] = (),
    ) -> Collection:
        """
        Describe *model* and add it under *name* (default: table name).

        Associations are resolved in :meth:`freeze`, once every target is
        known.

        Raises:
            RegistryFrozenError: The registry is already frozen.
            ConfigurationError: Duplicate name, or invalid search fields.
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register {model.__name__}: registry is frozen"
            )
        mapper: Mapper[Any] = inspect(model)
        collection_name = name or mapper.local_table.name
        if collection_name in self._collections:
            raise ConfigurationError(
                f"Collection '{collection_name}' is already registered"
            )

        collection = describe_model(
            mapper, collection_name, search_fields=tuple(search_fields)
        )
        self._collections[collection_name] = collection
        self._models[collection_name] = model
        logger.debug(
            "Registered collection '%s' (%d fields)",
            collection_name,
            len(collection.fields),
        )
        return collection

    def freeze(self) -> None:
        """Resolve associations and make the registry read-only."""
        if self._frozen:
            return
        names_by_model = {model: name for name, model in self._models.items()}
        for name, model in self._models.items():
            associations = tuple(
                describe_associations(inspect(model), names_by_model, owner=name)
            )
            self._collections[name] = dataclasses.replace(
                self._collections[name], associations=associations
            )
        self._frozen = True
        logger.info("Collection registry frozen with %d collections", len(self))

    # -- lookup -------------------------------------------------------------

    @property
    def collections(self) -> Mapping[str, Collection]:
        self._require_frozen()
        return MappingProxyType(self._collections)

    def get_collection(self, name: str) -> Collection:
        self._require_frozen()
        try:
            return self._collections[name]
        except KeyError:
            raise CollectionNotFoundError(name, list(self._collections)) from None

    def get_model(self, name: str) -> type[Any]:
        self._require_frozen()
        try:
            return self._models[name]
        except KeyError:
            raise CollectionNotFoundError(name, list(self._models)) from None

    def schemas(self) -> list[dict[str, Any]]:
        """Schema of every collection, in registration order."""
        collections = self.collections
        return [c.to_schema(dict(collections)) for c in collections.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._collections

    def __len__(self) -> int:
        return len(self._collections)

    def _require_frozen(self) -> None:
        if not self._frozen:
            raise RegistryNotFrozenError(
                "Collection registry must be frozen before use"
            )


# ---------------------------------------------------------------------------
# Model description
# ---------------------------------------------------------------------------


def describe_model(
    mapper: Mapper[Any],
    name: str,
    *,
    search_fields: tuple[str, ...] = (),
) -> Collection:
    """Build a :class:`Collection` (without associations) from *mapper*."""
    fields = []
    unsupported: list[tuple[str, str]] = []
    for attr in mapper.column_attrs:
        column = attr.columns[0]
        if not isinstance(column, Column):
            # column_property() over an expression
            continue
        descriptor = build_field_descriptor(column, attribute_name=attr.key)
        if descriptor.semantic_type is SemanticType.UNSUPPORTED:
            error = UnsupportedFieldTypeError(attr.key, native_type_name(column))
            logger.warning("%s; dropped from collection '%s'", error, name)
            unsupported.append((attr.key, error.native_type))
            continue
        fields.append(descriptor)

    primary_keys = tuple(
        mapper.get_property_by_column(column).key for column in mapper.primary_key
    )
    return Collection(
        name=name,
        fields=tuple(fields),
        primary_keys=primary_keys,
        search_fields=search_fields,
        unsupported_fields=tuple(unsupported),
    )


def describe_associations(
    mapper: Mapper[Any],
    names_by_model: Mapping[type[Any], str],
    *,
    owner: str,
) -> list[AssociationDescriptor]:
    associations = []
    for relationship in mapper.relationships:
        target_name = names_by_model.get(relationship.mapper.class_)
        if target_name is None:
            logger.debug(
                "Skipping association '%s.%s': target %s is not registered",
                owner,
                relationship.key,
                relationship.mapper.class_.__name__,
            )
            continue
        associations.append(
            AssociationDescriptor(
                name=relationship.key,
                target=target_name,
                many=bool(relationship.uselist),
                foreign_keys=_foreign_keys(relationship),
            )
        )
    return associations


def _foreign_keys(relationship: RelationshipProperty[Any]) -> tuple[str, ...]:
    """Attribute names of the foreign key, on whichever side holds it."""
    if relationship.direction is RelationshipDirection.MANYTOONE:
        owner, columns = relationship.parent, relationship.local_columns
    elif relationship.direction is RelationshipDirection.ONETOMANY:
        owner, columns = relationship.mapper, relationship.remote_side
    else:
        return ()
    return tuple(sorted(owner.get_property_by_column(c).key for c in columns))
