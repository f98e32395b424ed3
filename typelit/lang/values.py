"""Literal value model.

Values are immutable and hashable so that any of them, lists and maps
included, can serve as a map key.  Lists compare element by element in
order; maps compare by content only, and their hash is an order-independent
fold over the per-entry hashes so equal maps always hash alike.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Optional, Union

from ..utils.hashing import combine_ordered, combine_unordered

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


class Value:
    """Base class for all literal values."""

    __slots__ = ()

    @property
    def kind(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class BoolValue(Value):
    value: bool

    @property
    def kind(self) -> str:
        return "bool"


@dataclass(frozen=True, slots=True)
class IntegerValue(Value):
    value: int

    @property
    def kind(self) -> str:
        return "integer"


@dataclass(frozen=True, slots=True)
class StringValue(Value):
    value: str

    @property
    def kind(self) -> str:
        return "string"


@dataclass(frozen=True, slots=True, eq=False)
class ListValue(Value):
    """Ordered sequence of values."""

    items: tuple[Value, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    @property
    def kind(self) -> str:
        return "list"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ListValue):
            return NotImplemented
        return self.items == other.items

    def __hash__(self) -> int:
        return combine_ordered((hash(item) for item in self.items), seed=0x4C495354)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)


MapEntries = Union[Mapping[Value, Value], Iterable[tuple[Value, Value]]]


@dataclass(frozen=True, slots=True, eq=False)
class MapValue(Value):
    """Mapping of values to values with unique keys.

    Entries are kept in first-insertion order of their key; a repeated key
    overwrites the earlier value.
    """

    entries: tuple[tuple[Value, Value], ...] = ()

    def __post_init__(self) -> None:
        source = self.entries.items() if isinstance(self.entries, Mapping) else self.entries
        deduped: dict[Value, Value] = {}
        for key, value in source:
            deduped[key] = value
        object.__setattr__(self, "entries", tuple(deduped.items()))

    @property
    def kind(self) -> str:
        return "map"

    def as_dict(self) -> dict[Value, Value]:
        return dict(self.entries)

    def get(self, key: Value, default: Optional[Value] = None) -> Optional[Value]:
        for entry_key, entry_value in self.entries:
            if entry_key == key:
                return entry_value
        return default

    def keys(self) -> tuple[Value, ...]:
        return tuple(key for key, _ in self.entries)

    def values(self) -> tuple[Value, ...]:
        return tuple(value for _, value in self.entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MapValue):
            return NotImplemented
        if len(self.entries) != len(other.entries):
            return False
        return self.as_dict() == other.as_dict()

    def __hash__(self) -> int:
        pair_hashes = (combine_ordered((hash(k), hash(v))) for k, v in self.entries)
        return combine_unordered(pair_hashes, seed=0x4D4150)

    def __len__(self) -> int:
        return len(self.entries)


# ---------------------------------------------------------------------------
# Conversions


def from_python(obj: Any) -> Value:
    """Convert a tree of plain Python objects into a :class:`Value`.

    ``bool`` is checked before ``int`` because it is an ``int`` subclass.
    Tuples are treated like lists; any :class:`~typing.Mapping` becomes a
    map.
    """

    if isinstance(obj, Value):
        return obj
    if isinstance(obj, bool):
        return BoolValue(obj)
    if isinstance(obj, int):
        if not INT64_MIN <= obj <= INT64_MAX:
            raise OverflowError(f"{obj} does not fit in a signed 64-bit integer")
        return IntegerValue(obj)
    if isinstance(obj, str):
        return StringValue(obj)
    if isinstance(obj, (list, tuple)):
        return ListValue(tuple(from_python(item) for item in obj))
    if isinstance(obj, Mapping):
        return MapValue(tuple((from_python(k), from_python(v)) for k, v in obj.items()))
    raise TypeError(f"cannot convert {type(obj).__name__} to a typelit value")


def format_value(value: Value) -> str:
    """Render ``value`` in source syntax."""

    if isinstance(value, BoolValue):
        return "true" if value.value else "false"
    if isinstance(value, IntegerValue):
        return str(value.value)
    if isinstance(value, StringValue):
        return f'"{value.value}"'
    if isinstance(value, ListValue):
        return "[" + ", ".join(format_value(item) for item in value.items) + "]"
    if isinstance(value, MapValue):
        inside = ", ".join(f"{format_value(k)}: {format_value(v)}" for k, v in value.entries)
        return "{" + inside + "}"
    raise TypeError(f"not a typelit value: {value!r}")


def to_plain(value: Value) -> Any:
    """Return a JSON-compatible structure describing ``value``."""

    if isinstance(value, (BoolValue, IntegerValue, StringValue)):
        return {"kind": value.kind, "value": value.value}
    if isinstance(value, ListValue):
        return {"kind": "list", "items": [to_plain(item) for item in value.items]}
    if isinstance(value, MapValue):
        entries = [{"key": to_plain(k), "value": to_plain(v)} for k, v in value.entries]
        entries.sort(key=lambda entry: json.dumps(entry["key"], sort_keys=True))
        return {"kind": "map", "entries": entries}
    raise TypeError(f"not a typelit value: {value!r}")


def from_plain(data: Mapping[str, Any]) -> Value:
    """Inverse of :func:`to_plain`."""

    kind = data.get("kind")
    if kind == "bool":
        return BoolValue(bool(data["value"]))
    if kind == "integer":
        return IntegerValue(int(data["value"]))
    if kind == "string":
        return StringValue(str(data["value"]))
    if kind == "list":
        return ListValue(tuple(from_plain(item) for item in data["items"]))
    if kind == "map":
        return MapValue(
            tuple((from_plain(entry["key"]), from_plain(entry["value"])) for entry in data["entries"])
        )
    raise ValueError(f"unknown value kind {kind!r}")


__all__ = [
    "BoolValue",
    "INT64_MAX",
    "INT64_MIN",
    "IntegerValue",
    "ListValue",
    "MapValue",
    "StringValue",
    "Value",
    "format_value",
    "from_plain",
    "from_python",
    "to_plain",
]
