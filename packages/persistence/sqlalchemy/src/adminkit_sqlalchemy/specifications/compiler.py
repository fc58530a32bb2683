"""
Compile a predicate tree into a SQLAlchemy filter expression.

Uses the strategy pattern: each operator is an isolated class in
``operators/``, registered in a ``SQLAlchemyOperatorRegistry``.
``build_sqla_filter`` walks the tree and delegates leaf compilation to
the registry. Leaves on ``association.field`` compile through
``relationship.has()`` (to-one) or ``relationship.any()`` (to-many).

Sorting
-------
``apply_sort`` orders a ``Select`` by ``field``, ``-field`` or
``association.field`` (to-one only), defaulting to the primary key(s)
descending.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import ColumnElement, and_, false, or_, true

from adminkit_specifications.ast import (
    AndNode,
    FalseNode,
    LeafNode,
    OrNode,
    PredicateNode,
)
from adminkit_specifications.composer import resolve_field_path
from adminkit_specifications.exceptions import FieldNotFoundError
from adminkit_specifications.operators import check_operator

from .operators import DEFAULT_SQLA_REGISTRY
from .strategy import CompileOptions

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy import Select

    from adminkit_specifications.schema import Collection
    from adminkit_specifications.specification import SortSpecification

    from .strategy import SQLAlchemyOperatorRegistry

logger = logging.getLogger("adminkit.compiler")

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_sqla_filter(
    collection: Collection,
    model: type[Any],
    tree: PredicateNode | None,
    *,
    collections: Mapping[str, Collection],
    registry: SQLAlchemyOperatorRegistry | None = None,
    options: CompileOptions | None = None,
) -> ColumnElement[bool]:
    """
    Build a SQLAlchemy filter expression from a predicate tree.

    Args:
        collection: Collection the tree was composed for.
        model: The SQLAlchemy model class of ``collection``.
        tree: Predicate tree; ``None`` compiles to ``TRUE``.
        collections: Every registered collection, for association targets.
        registry: Optional custom operator registry. Falls back to
            ``DEFAULT_SQLA_REGISTRY``.
        options: Request-scoped options (case sensitivity, timezone, now).

    Returns:
        SQLAlchemy Boolean expression.

    Raises:
        UnsupportedOperatorError: A leaf's operator is illegal for its field.
        UnsupportedDepthError: A path traverses more than one association.
    """
    if tree is None:
        return true()
    logger.debug(
        "Compiling %d conditions on '%s'",
        sum(1 for _ in tree.leaves()),
        collection.name,
    )
    compiler = _Compiler(
        collection,
        model,
        collections,
        registry or DEFAULT_SQLA_REGISTRY,
        options or CompileOptions(),
    )
    return compiler.compile(tree)


def apply_sort(
    stmt: Select[Any],
    collection: Collection,
    model: type[Any],
    sort: SortSpecification | None,
    *,
    collections: Mapping[str, Collection],
) -> Select[Any]:
    """
    Order *stmt* by *sort*, or by the primary key(s) descending.

    Sorting on ``association.field`` outer-joins the (to-one) association.
    The primary key is appended as a tie-breaker.

    Raises:
        FieldNotFoundError: Unknown field, or a to-many association.
        UnsupportedDepthError: The path traverses more than one association.
    """
    pk_columns = [getattr(model, name) for name in collection.primary_keys]
    if sort is None:
        return stmt.order_by(*[column.desc() for column in pk_columns])

    resolved = resolve_field_path(sort.path, collection, collections, raw=str(sort))
    association = resolved.association
    if association is None:
        column = getattr(model, resolved.field.name)
    elif association.many:
        available = [a.name for a in collection.associations if not a.many]
        raise FieldNotFoundError(
            association.name, collection.name, available, full_path=sort.path
        )
    else:
        relationship = getattr(model, association.name)
        target_model = relationship.property.mapper.class_
        column = getattr(target_model, resolved.field.name)
        stmt = stmt.outerjoin(relationship)

    ordering = column.desc() if sort.descending else column.asc()
    tie_breakers = [c.desc() for c in pk_columns if c is not column]
    return stmt.order_by(ordering, *tie_breakers)


# ---------------------------------------------------------------------------
# Internal compilation
# ---------------------------------------------------------------------------


class _Compiler:
    def __init__(
        self,
        collection: Collection,
        model: type[Any],
        collections: Mapping[str, Collection],
        registry: SQLAlchemyOperatorRegistry,
        options: CompileOptions,
    ) -> None:
        self._collection = collection
        self._model = model
        self._collections = collections
        self._registry = registry
        self._options = options

    def compile(self, node: PredicateNode) -> ColumnElement[bool]:
        if isinstance(node, LeafNode):
            return self._compile_leaf(node)
        if isinstance(node, AndNode):
            return and_(*[self.compile(child) for child in node.children])
        if isinstance(node, OrNode):
            return or_(*[self.compile(child) for child in node.children])
        if isinstance(node, FalseNode):
            return false()
        raise TypeError(f"Unknown predicate node: {node!r}")

    def _compile_leaf(self, node: LeafNode) -> ColumnElement[bool]:
        condition = node.condition
        resolved = resolve_field_path(
            condition.field,
            self._collection,
            self._collections,
            raw=condition.raw,
        )
        check_operator(
            resolved.field.semantic_type,
            condition.operator,
            field=condition.field,
            raw=condition.raw,
        )

        if resolved.association is None:
            column = getattr(self._model, resolved.field.name)
            return self._registry.apply(
                condition.operator, column, condition.operand, self._options
            )

        # Relationship traversal (e.g. "user.email")
        relationship = getattr(self._model, resolved.association.name)
        target_model = relationship.property.mapper.class_
        column = getattr(target_model, resolved.field.name)
        inner = self._registry.apply(
            condition.operator, column, condition.operand, self._options
        )
        logger.debug(
            "Compiled '%s' through %s()",
            condition.field,
            "any" if resolved.association.many else "has",
        )
        if resolved.association.many:
            return cast("ColumnElement[bool]", relationship.any(inner))
        return cast("ColumnElement[bool]", relationship.has(inner))
