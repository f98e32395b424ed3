"""Structural types in canonical union form.

Collection types hold *sets* of member types.  Those sets are normalised on
construction (deduplicated, then sorted by a fixed total order), so two
types describing the same union are equal and hash alike no matter how
their members were discovered or written down.

The order ranks ``bool < i64 < str < list[...] < map[...]``; lists and maps
then compare their member tuples lexicographically.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

__all__ = [
    "BOOL",
    "BoolType",
    "INTEGER",
    "IntegerType",
    "ListType",
    "MapType",
    "STRING",
    "StringType",
    "Type",
    "TypeSystemError",
    "canonicalize",
    "format_type",
    "format_types",
    "from_plain",
    "to_plain",
]


class TypeSystemError(RuntimeError):
    """Raised when a structure cannot be interpreted as a type."""


class Type:
    """Base class for structural types."""

    __slots__ = ()

    rank: int = -1

    def sort_key(self) -> tuple:
        return (self.rank,)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Type):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Type):
            return NotImplemented
        return self.sort_key() <= other.sort_key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Type):
            return NotImplemented
        return self.sort_key() > other.sort_key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Type):
            return NotImplemented
        return self.sort_key() >= other.sort_key()


@dataclass(frozen=True, slots=True)
class BoolType(Type):
    rank = 0

    def __repr__(self) -> str:
        return "Bool"


@dataclass(frozen=True, slots=True)
class IntegerType(Type):
    rank = 1

    def __repr__(self) -> str:
        return "Integer"


@dataclass(frozen=True, slots=True)
class StringType(Type):
    rank = 2

    def __repr__(self) -> str:
        return "String"


@dataclass(frozen=True, slots=True)
class ListType(Type):
    """List whose elements are drawn from ``members``."""

    members: tuple[Type, ...] = ()

    rank = 3

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", canonicalize(self.members))

    def sort_key(self) -> tuple:
        return (self.rank, tuple(member.sort_key() for member in self.members))

    def __repr__(self) -> str:
        return f"List({list(self.members)!r})"


@dataclass(frozen=True, slots=True)
class MapType(Type):
    """Map with keys drawn from ``keys`` and values drawn from ``values``."""

    keys: tuple[Type, ...] = ()
    values: tuple[Type, ...] = ()

    rank = 4

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", canonicalize(self.keys))
        object.__setattr__(self, "values", canonicalize(self.values))

    def sort_key(self) -> tuple:
        return (
            self.rank,
            tuple(member.sort_key() for member in self.keys),
            tuple(member.sort_key() for member in self.values),
        )

    def __repr__(self) -> str:
        return f"Map({list(self.keys)!r}, {list(self.values)!r})"


BOOL = BoolType()
INTEGER = IntegerType()
STRING = StringType()


def canonicalize(types: Iterable[Type]) -> tuple[Type, ...]:
    """Deduplicate ``types`` and return them in canonical order."""

    unique = set()
    for typ in types:
        if not isinstance(typ, Type):
            raise TypeSystemError(f"not a type: {typ!r}")
        unique.add(typ)
    return tuple(sorted(unique, key=lambda typ: typ.sort_key()))


# ---------------------------------------------------------------------------
# Rendering


_ATOM_NAMES = {BoolType: "bool", IntegerType: "i64", StringType: "str"}


def format_type(typ: Type) -> str:
    """Render ``typ`` in annotation syntax (``list[bool | i64]``)."""

    name = _ATOM_NAMES.get(type(typ))
    if name is not None:
        return name
    if isinstance(typ, ListType):
        return f"list[{format_types(typ.members)}]"
    if isinstance(typ, MapType):
        return f"map[{format_types(typ.keys)}, {format_types(typ.values)}]"
    raise TypeSystemError(f"not a type: {typ!r}")


def format_types(types: Sequence[Type]) -> str:
    """Render a union, members separated by ``|``."""

    return " | ".join(format_type(typ) for typ in types)


# ---------------------------------------------------------------------------
# Plain-data encoding used by the serializer


def to_plain(typ: Type) -> dict:
    name = _ATOM_NAMES.get(type(typ))
    if name is not None:
        return {"kind": name}
    if isinstance(typ, ListType):
        return {"kind": "list", "members": [to_plain(m) for m in typ.members]}
    if isinstance(typ, MapType):
        return {
            "kind": "map",
            "keys": [to_plain(m) for m in typ.keys],
            "values": [to_plain(m) for m in typ.values],
        }
    raise TypeSystemError(f"not a type: {typ!r}")


def from_plain(data: dict) -> Type:
    kind = data.get("kind")
    if kind == "bool":
        return BOOL
    if kind == "i64":
        return INTEGER
    if kind == "str":
        return STRING
    if kind == "list":
        return ListType(tuple(from_plain(m) for m in data["members"]))
    if kind == "map":
        return MapType(
            tuple(from_plain(m) for m in data["keys"]),
            tuple(from_plain(m) for m in data["values"]),
        )
    raise TypeSystemError(f"unknown type kind {kind!r}")
