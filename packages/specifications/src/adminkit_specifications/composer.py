"""
Condition tree composition.

Turns a :class:`FilterSpecification` into a predicate tree for one
collection::

    spec = FilterSpecification.from_mapping(
        {"status": "active", "user.email": "*@example.com"},
        search="john",
    )
    tree = compose_condition_tree(spec, orders, registry.collections)
    # → AND(status == "active", user.email ends with "@example.com",
    #       OR(<search leaves>))

Field paths are ``field`` or ``association.field``; anything deeper is
rejected.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from .ast import FalseNode, LeafNode, OrNode, PredicateNode, combine
from .conditions import Condition, parse_condition, try_parse_number, try_parse_uuid
from .exceptions import (
    CollectionNotFoundError,
    FieldNotFoundError,
    UnsupportedDepthError,
)
from .operators import ConditionOperator, LogicalOperator
from .schema import AssociationDescriptor, Collection, FieldDescriptor
from .specification import FilterSpecification
from .types import SemanticType


@dataclass(frozen=True)
class ResolvedPath:
    """
    A field path resolved against the collection schema.

    Attributes:
        path: The path as written in the request.
        field: Descriptor of the addressed field.
        collection: Collection that owns ``field``.
        association: The association hop, ``None`` for a local field.
    """

    path: str
    field: FieldDescriptor
    collection: Collection
    association: AssociationDescriptor | None = None


def resolve_field_path(
    path: str,
    collection: Collection,
    collections: Mapping[str, Collection],
    *,
    raw: object = None,
) -> ResolvedPath:
    """
    Resolve ``field`` or ``association.field`` on *collection*.

    Raises:
        UnsupportedDepthError: The path has more than one dot.
        FieldNotFoundError: The field or association does not exist.
        UnsupportedFieldTypeError: The field exists but has no semantic type.
    """
    parts = path.split(".")
    if len(parts) > 2:
        raise UnsupportedDepthError(path, raw=raw)
    if len(parts) == 1:
        return ResolvedPath(path, collection.get_field(path, raw=raw), collection)

    association_name, field_name = parts
    association = collection.find_association(association_name)
    if association is None:
        available = collection.field_names + [a.name for a in collection.associations]
        raise FieldNotFoundError(
            association_name, collection.name, available, full_path=path
        )

    target = collections.get(association.target)
    if target is None:
        raise CollectionNotFoundError(association.target, list(collections))

    try:
        descriptor = target.get_field(field_name, raw=raw)
    except FieldNotFoundError as exc:
        raise FieldNotFoundError(
            field_name, target.name, target.field_names, full_path=path
        ) from exc
    return ResolvedPath(path, descriptor, target, association)


def build_condition_node(
    path: str,
    raw: object,
    collection: Collection,
    collections: Mapping[str, Collection],
) -> LeafNode:
    """Parse one ``(path, raw)`` filter entry into a leaf."""
    resolved = resolve_field_path(path, collection, collections, raw=raw)
    condition = parse_condition(
        raw,
        resolved.field.semantic_type,
        field=path,
        enum_values=resolved.field.enum_values,
    )
    return LeafNode(condition)


def compose_condition_tree(
    spec: FilterSpecification,
    collection: Collection,
    collections: Mapping[str, Collection],
) -> PredicateNode | None:
    """
    Build the predicate tree for *spec*.

    Returns ``None`` when the specification imposes no constraint. The
    search group, when present, is AND'ed with the filter tree.
    """
    filter_node = _compose_filters(spec, collection, collections)
    if not spec.has_search:
        return filter_node

    search_node = build_search_node(
        spec.search or "",
        collection,
        collections,
        extended=spec.search_extended,
    )
    nodes = [node for node in (filter_node, search_node) if node is not None]
    return combine(LogicalOperator.AND, nodes)


def _compose_filters(
    spec: FilterSpecification,
    collection: Collection,
    collections: Mapping[str, Collection],
) -> PredicateNode | None:
    nodes = _entry_nodes(spec, collection, collections)
    return combine(spec.combinator.value, nodes)


def _compose_group(
    group: FilterSpecification,
    collection: Collection,
    collections: Mapping[str, Collection],
) -> PredicateNode | None:
    nodes = _entry_nodes(group, collection, collections)
    return combine(LogicalOperator.AND, nodes)


def _entry_nodes(
    spec: FilterSpecification,
    collection: Collection,
    collections: Mapping[str, Collection],
) -> list[PredicateNode]:
    """Leaves for ``spec.conditions`` followed by the OR of its groups."""
    nodes: list[PredicateNode] = [
        build_condition_node(path, raw, collection, collections)
        for path, raw in spec.conditions
    ]
    if not spec.groups:
        return nodes

    group_nodes = [_compose_group(g, collection, collections) for g in spec.groups]
    # An unconstrained group makes the whole OR unconstrained
    if any(node is None for node in group_nodes):
        return nodes
    or_node = combine(LogicalOperator.OR, [n for n in group_nodes if n is not None])
    if or_node is not None:
        nodes.append(or_node)
    return nodes


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


def build_search_node(
    text: str,
    collection: Collection,
    collections: Mapping[str, Collection],
    *,
    extended: bool = False,
) -> PredicateNode:
    """
    OR of one leaf per searchable field.

    Uses the collection's declared search fields, or every field when
    none are declared. With *extended*, each one-hop association target
    contributes leaves on ``association.field`` as well. Returns a
    :class:`~adminkit_specifications.ast.FalseNode` when no field can
    match *text*.
    """
    text = text.strip()
    leaves: list[PredicateNode] = list(_search_leaves(text, collection))

    if extended:
        for association in collection.associations:
            target = collections.get(association.target)
            if target is None:
                raise CollectionNotFoundError(association.target, list(collections))
            leaves.extend(
                _search_leaves(text, target, prefix=f"{association.name}.")
            )

    if not leaves:
        return FalseNode()
    if len(leaves) == 1:
        return leaves[0]
    return OrNode(tuple(leaves))


def searchable_fields(collection: Collection) -> list[FieldDescriptor]:
    if collection.search_fields:
        return [collection.get_field(name) for name in collection.search_fields]
    return list(collection.fields)


def _search_leaves(
    text: str, collection: Collection, *, prefix: str = ""
) -> Iterator[LeafNode]:
    for descriptor in searchable_fields(collection):
        path = f"{prefix}{descriptor.name}"
        kind = descriptor.semantic_type

        if kind is SemanticType.STRING:
            yield _leaf(path, ConditionOperator.CONTAINS, text)

        elif kind is SemanticType.ENUM:
            needle = text.lower()
            for value in descriptor.enum_values or ():
                if needle in value.lower():
                    yield _leaf(path, ConditionOperator.EQ, value, text)

        elif kind is SemanticType.UUID:
            uuid_value = try_parse_uuid(text)
            if uuid_value is not None:
                yield _leaf(path, ConditionOperator.EQ, uuid_value, text)

        elif kind is SemanticType.NUMBER:
            number = try_parse_number(text)
            if number is not None:
                yield _leaf(path, ConditionOperator.EQ, number, text)


def _leaf(
    path: str, operator: ConditionOperator, operand: object, raw: str | None = None
) -> LeafNode:
    return LeafNode(
        Condition(
            field=path,
            operator=operator,
            operand=operand,
            raw=raw if raw is not None else str(operand),
        )
    )
