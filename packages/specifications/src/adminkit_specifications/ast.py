"""
Predicate tree.

Nodes are immutable and built fresh for every request. Backends walk the
tree and compile each :class:`LeafNode` into a native predicate.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from .conditions import Condition
from .operators import LogicalOperator


class PredicateNode:
    """Base class for predicate tree nodes."""

    def leaves(self) -> Iterator[LeafNode]:
        """Yield every leaf below this node, depth first."""
        return iter(())


@dataclass(frozen=True)
class LeafNode(PredicateNode):
    """A single condition on ``field`` or ``association.field``."""

    condition: Condition

    @property
    def path(self) -> str:
        return self.condition.field

    def leaves(self) -> Iterator[LeafNode]:
        yield self


@dataclass(frozen=True)
class AndNode(PredicateNode):
    """Logical AND composite node."""

    children: tuple[PredicateNode, ...]

    def leaves(self) -> Iterator[LeafNode]:
        for child in self.children:
            yield from child.leaves()


@dataclass(frozen=True)
class OrNode(PredicateNode):
    """Logical OR composite node."""

    children: tuple[PredicateNode, ...]

    def leaves(self) -> Iterator[LeafNode]:
        for child in self.children:
            yield from child.leaves()


@dataclass(frozen=True)
class FalseNode(PredicateNode):
    """Matches nothing; the value of an empty OR group."""


def combine(
    op: LogicalOperator | str, nodes: list[PredicateNode]
) -> PredicateNode | None:
    """
    Combine *nodes* with *op*.

    A single node is returned as-is, an empty AND is ``None`` (no
    constraint) and an empty OR is :class:`FalseNode`.
    """
    op = LogicalOperator(op)
    if not nodes:
        return FalseNode() if op is LogicalOperator.OR else None
    if len(nodes) == 1:
        return nodes[0]
    if op is LogicalOperator.AND:
        return AndNode(tuple(nodes))
    return OrNode(tuple(nodes))
