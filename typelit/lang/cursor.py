"""Forward-only character cursor used by the grammar."""

from __future__ import annotations

from typing import Optional

from .errors import line_column

WHITESPACE = frozenset(" \t\n\r\x0c")
DIGITS = frozenset("0123456789")
LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")


class Cursor:
    """Sequential reader over the full input text.

    The position only ever moves forward; every decision the grammar makes
    is based on a fixed, short lookahead.
    """

    __slots__ = ("source", "position")

    def __init__(self, source: str) -> None:
        self.source = source
        self.position = 0

    def __len__(self) -> int:
        return len(self.source)

    @property
    def at_end(self) -> bool:
        return self.position >= len(self.source)

    def peek(self, count: int) -> Optional[str]:
        """Return the next ``count`` characters, or ``None`` if fewer remain."""

        end = self.position + count
        if end > len(self.source):
            return None
        return self.source[self.position : end]

    def current(self) -> Optional[str]:
        if self.at_end:
            return None
        return self.source[self.position]

    def starts_with(self, word: str) -> bool:
        return self.peek(len(word)) == word

    def advance(self, count: int = 1) -> None:
        self.position += count

    def consume_char(self, char: str) -> bool:
        if self.current() == char:
            self.position += 1
            return True
        return False

    def skip_whitespace(self) -> None:
        source = self.source
        while self.position < len(source) and source[self.position] in WHITESPACE:
            self.position += 1

    def line_column(self, position: Optional[int] = None) -> tuple[int, int]:
        return line_column(self.source, self.position if position is None else position)

    def __repr__(self) -> str:
        line, column = self.line_column()
        return f"Cursor(position={self.position}, line={line}, column={column})"


def is_digit(char: Optional[str]) -> bool:
    return char is not None and char in DIGITS


def is_letter(char: Optional[str]) -> bool:
    return char is not None and char in LETTERS


__all__ = ["Cursor", "DIGITS", "LETTERS", "WHITESPACE", "is_digit", "is_letter"]
