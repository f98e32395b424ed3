"""Tests for the forward-only character cursor."""

from __future__ import annotations

from typelit.lang.cursor import Cursor


def test_peek_returns_none_when_input_is_short() -> None:
    cursor = Cursor("let")
    assert cursor.peek(3) == "let"
    assert cursor.peek(4) is None
    assert cursor.position == 0


def test_consume_char_only_advances_on_match() -> None:
    cursor = Cursor("ab")
    assert cursor.consume_char("b") is False
    assert cursor.position == 0
    assert cursor.consume_char("a") is True
    assert cursor.current() == "b"


def test_skip_whitespace_and_end_of_input() -> None:
    cursor = Cursor(" \t\r\n\x0cx")
    cursor.skip_whitespace()
    assert cursor.current() == "x"
    cursor.advance()
    assert cursor.at_end
    assert cursor.current() is None
    cursor.skip_whitespace()
    assert cursor.at_end


def test_line_column_tracks_newlines() -> None:
    cursor = Cursor("ab\ncd")
    cursor.advance(4)
    assert cursor.line_column() == (2, 2)
