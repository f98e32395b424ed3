"""Parse error taxonomy.

Every error carries the absolute offset where parsing stopped together with
the derived line/column so messages can point at the offending character.
"""

from __future__ import annotations

from typing import Optional

DEFAULT_FILENAME = "<typelit>"


def line_column(source: str, position: int) -> tuple[int, int]:
    """Return the 1-based line and column for ``position`` within ``source``."""

    position = max(0, min(position, len(source)))
    line = source.count("\n", 0, position) + 1
    column = position - (source.rfind("\n", 0, position) + 1) + 1
    return line, column


class ParseError(RuntimeError):
    """Structured parse error that includes source location information."""

    def __init__(
        self,
        message: str,
        *,
        position: int,
        source: str = "",
        filename: str = DEFAULT_FILENAME,
    ) -> None:
        line, column = line_column(source, position)
        super().__init__(f"{filename}:{line}:{column}: {message}")
        self.message = message
        self.position = position
        self.line = line
        self.column = column
        self.filename = filename


class UnexpectedEndOfInput(ParseError):
    """The input ran out while a token was still expected."""

    def __init__(self, expected: str, **kwargs) -> None:
        super().__init__(f"unexpected end of input, expected {expected}", **kwargs)
        self.expected = expected


class UnexpectedCharacter(ParseError):
    """A specific literal, keyword or token class failed to match."""

    def __init__(self, expected: str, found: str, **kwargs) -> None:
        super().__init__(f"expected {expected}, found {found!r}", **kwargs)
        self.expected = expected
        self.found = found


class UnknownTypeName(ParseError):
    """A type annotation atom is not one of the known type names."""

    def __init__(self, name: Optional[str], **kwargs) -> None:
        if name:
            message = f"unknown type name {name!r}"
        else:
            message = "expected a type name"
        super().__init__(message, **kwargs)
        self.name = name


class TrailingInput(ParseError):
    """The statement loop stopped before the end of the input."""

    def __init__(self, **kwargs) -> None:
        super().__init__("unparsed trailing input", **kwargs)


class IntegerOverflow(ParseError):
    """An integer literal does not fit in a signed 64-bit integer."""

    def __init__(self, literal: str, **kwargs) -> None:
        super().__init__(f"integer literal {literal} exceeds the signed 64-bit range", **kwargs)
        self.literal = literal


class NestingTooDeep(ParseError):
    """Lists, maps or type constructors are nested past the parser's limit."""

    def __init__(self, limit: int, **kwargs) -> None:
        super().__init__(f"nesting exceeds the maximum depth of {limit}", **kwargs)
        self.limit = limit


__all__ = [
    "DEFAULT_FILENAME",
    "IntegerOverflow",
    "NestingTooDeep",
    "ParseError",
    "TrailingInput",
    "UnexpectedCharacter",
    "UnexpectedEndOfInput",
    "UnknownTypeName",
    "line_column",
]
