"""Canonical JSON serializer for parsed expressions.

The output is deterministic so golden files and cache keys stay stable:
map entries are ordered by the encoding of their keys and type unions are
already canonical.  Each expression receives a content-addressed ``id``
derived from its structural encoding; the deserializer recomputes it to
guarantee integrity.
"""

from __future__ import annotations

import json
from collections import OrderedDict
from typing import Any, Mapping, Sequence

from ..utils.hashing import hash_text
from . import ast, type_system, values


def to_json(expressions: Sequence[ast.Expr], *, indent: int | None = 2) -> str:
    """Serialize ``expressions`` into canonical JSON."""

    payload = [_serialize_node(node) for node in expressions]
    return json.dumps(payload, indent=indent, separators=(",", ": "), ensure_ascii=False)


def from_json(payload: str) -> list[ast.Expr]:
    """Deserialize JSON back into expressions, validating every node hash."""

    raw = json.loads(payload)
    if not isinstance(raw, list):
        raise ValueError("serialized program must be a JSON array")
    return [_deserialize_node(item) for item in raw]


# ---------------------------------------------------------------------------
# Serialization helpers


def _serialize_node(node: ast.Expr) -> OrderedDict[str, Any]:
    data: OrderedDict[str, Any] = OrderedDict()
    data["type"] = node.node_type
    if isinstance(node, ast.Var):
        data["name"] = node.name
        data["types"] = [type_system.to_plain(typ) for typ in node.types]
        data["value"] = _serialize_node(node.value)
    elif isinstance(node, ast.ValueExpr):
        data["value"] = values.to_plain(node.value)
    elif isinstance(node, ast.If):
        data["condition"] = _serialize_node(node.condition)
        data["branch"] = _serialize_node(node.branch)
    else:
        raise TypeError(f"cannot serialize node {node!r}")
    if node.span is not None:
        data["span"] = list(node.span.to_tuple())
    data["id"] = _hash_payload(data)
    return data


def _hash_payload(data: Mapping[str, Any]) -> str:
    normalized = json.dumps(
        _strip_volatile(data), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )
    return hash_text(normalized)[:16]


def _strip_volatile(data: Any) -> Any:
    if isinstance(data, Mapping):
        return {
            key: _strip_volatile(value)
            for key, value in data.items()
            if key not in {"id", "span"}
        }
    if isinstance(data, list):
        return [_strip_volatile(item) for item in data]
    return data


# ---------------------------------------------------------------------------
# Deserialization helpers


def _deserialize_node(data: Any) -> ast.Expr:
    if not isinstance(data, Mapping):
        raise ValueError("serialized node must be a JSON object")
    _verify_hash(data)
    node_type = data.get("type")
    span = ast.Span(*data["span"]) if data.get("span") is not None else None
    if node_type == "Var":
        return ast.Var(
            data["name"],
            type_system.canonicalize(type_system.from_plain(item) for item in data["types"]),
            _deserialize_node(data["value"]),
            span=span,
        )
    if node_type == "ValueExpr":
        return ast.ValueExpr(values.from_plain(data["value"]), span=span)
    if node_type == "If":
        return ast.If(
            _deserialize_node(data["condition"]),
            _deserialize_node(data["branch"]),
            span=span,
        )
    raise ValueError(f"Unknown node type '{node_type}'")


def _verify_hash(data: Mapping[str, Any]) -> None:
    stored = data.get("id")
    if stored is None:
        raise ValueError("Serialized node is missing 'id'")
    if stored != _hash_payload(data):
        raise ValueError("Serialized node failed integrity check")


__all__ = ["from_json", "to_json"]
