"""Structural type inference.

``type_of`` maps a value to its canonical type.  Collections record only
*which* member types occur; multiplicity and position are discarded, and
the member sets are canonicalised by the type constructors themselves.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from . import ast
from .type_system import BOOL, INTEGER, STRING, ListType, MapType, Type, TypeSystemError
from .values import BoolValue, IntegerValue, ListValue, MapValue, StringValue, Value


def type_of(value: Value) -> Type:
    """Return the canonical type of ``value``."""

    if isinstance(value, BoolValue):
        return BOOL
    if isinstance(value, IntegerValue):
        return INTEGER
    if isinstance(value, StringValue):
        return STRING
    if isinstance(value, ListValue):
        return ListType(tuple(type_of(item) for item in value.items))
    if isinstance(value, MapValue):
        return MapType(
            tuple(type_of(key) for key in value.keys()),
            tuple(type_of(val) for val in value.values()),
        )
    raise TypeSystemError(f"cannot infer the type of {value!r}")


def types_of(expr: ast.Expr) -> tuple[Type, ...]:
    """Return the type list of an expression.

    Bindings report their stored list as-is; a conditional reports the
    concatenation of both sides, duplicates included.
    """

    if isinstance(expr, ast.ValueExpr):
        return (type_of(expr.value),)
    if isinstance(expr, ast.Var):
        return expr.types
    if isinstance(expr, ast.If):
        return types_of(expr.condition) + types_of(expr.branch)
    raise TypeSystemError(f"cannot infer the type of {expr!r}")


def annotate(expressions: Iterable[ast.Expr]) -> Sequence[ast.Expr]:
    """Record type information in each node's ``metadata``.

    ``"types"`` holds :func:`types_of` for every node reachable from the
    roots; value-carrying nodes also get ``"inferred_type"``.  Declared
    annotations are left untouched and are not compared with the value.
    """

    roots = list(expressions)
    for node in ast.iter_nodes(roots):
        node.metadata["types"] = types_of(node)
        if isinstance(node, ast.ValueExpr):
            node.metadata["inferred_type"] = type_of(node.value)
        elif isinstance(node, ast.Var) and isinstance(node.value, ast.ValueExpr):
            node.metadata["inferred_type"] = type_of(node.value.value)
    return roots


__all__ = ["annotate", "type_of", "types_of"]
