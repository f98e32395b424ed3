"""Hash helpers shared by the value model and the serializer."""

from __future__ import annotations

import hashlib
from typing import Iterable

_MASK = (1 << 64) - 1
_MULTIPLIER = 1_000_003


def hash_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def combine_ordered(hashes: Iterable[int], *, seed: int = 0x345678) -> int:
    """Fold ``hashes`` so that element order changes the result."""

    acc = seed
    for item in hashes:
        acc = ((acc ^ (item & _MASK)) * _MULTIPLIER) & _MASK
    return acc


def combine_unordered(hashes: Iterable[int], *, seed: int = 0) -> int:
    """Fold ``hashes`` with a commutative, associative sum.

    Any enumeration of the same multiset yields the same result, which is
    what mapping hashes require.
    """

    acc = seed
    for item in hashes:
        acc = (acc + (item & _MASK)) & _MASK
    return acc


__all__ = ["combine_ordered", "combine_unordered", "hash_text"]
