"""Tests for the hash combiners."""

from __future__ import annotations

from typelit.utils.hashing import combine_ordered, combine_unordered, hash_text


def test_unordered_combiner_is_commutative() -> None:
    items = [hash("a"), hash(("b", 1)), -17, 2**70]
    assert combine_unordered(items) == combine_unordered(reversed(items))
    assert combine_unordered(items) == combine_unordered(sorted(items))


def test_ordered_combiner_depends_on_order() -> None:
    assert combine_ordered([1, 2]) != combine_ordered([2, 1])


def test_hash_text_is_sha256_hex() -> None:
    digest = hash_text("typelit")
    assert len(digest) == 64
    assert digest == hash_text("typelit")
