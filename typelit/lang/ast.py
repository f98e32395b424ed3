"""Expression tree produced by the grammar.

Nodes are plain dataclasses.  ``span`` and ``metadata`` never take part in
equality, so a parsed tree compares equal to one built by hand.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Iterator, Optional, Sequence

from .type_system import Type
from .values import Value


@dataclass(slots=True, frozen=True)
class Span:
    """Half-open ``[start, end)`` range of character offsets in the source."""

    start: int
    end: int

    def to_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)


@dataclass(slots=True, kw_only=True)
class Node:
    """Base class for expression nodes.

    ``metadata`` is available for passes that want to attach information
    (inferred types, for instance) without touching structural fields.
    """

    span: Optional[Span] = field(default=None, compare=False)
    metadata: dict[str, object] = field(default_factory=dict, compare=False, repr=False)

    @property
    def node_type(self) -> str:
        return self.__class__.__name__

    def children(self) -> Iterator[Node]:
        for spec in fields(self):
            if spec.name in {"span", "metadata"}:
                continue
            value = getattr(self, spec.name)
            if isinstance(value, Node):
                yield value

    def walk(self) -> Iterator[Node]:
        """Depth-first traversal starting at this node."""

        yield self
        for child in self.children():
            yield from child.walk()


Expr = Node


@dataclass(slots=True, eq=False)
class Var(Node):
    """``let`` binding of a name to a value with a declared or inferred type list.

    Two bindings are equal when they share the name and the type list; the
    bound value is not compared.
    """

    name: str
    types: tuple[Type, ...]
    value: Expr

    def __post_init__(self) -> None:
        self.types = tuple(self.types)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Var):
            return NotImplemented
        return self.name == other.name and self.types == other.types

    def __hash__(self) -> int:
        return hash((self.name, self.types))


@dataclass(slots=True)
class ValueExpr(Node):
    """A bare literal value."""

    value: Value


@dataclass(slots=True)
class If(Node):
    """Conditional pairing a condition with a single branch.

    The grammar has no syntax that produces this node.
    """

    condition: Expr
    branch: Expr


def iter_nodes(roots: Sequence[Node]) -> Iterator[Node]:
    for root in roots:
        yield from root.walk()


__all__ = ["Expr", "If", "Node", "Span", "ValueExpr", "Var", "iter_nodes"]
