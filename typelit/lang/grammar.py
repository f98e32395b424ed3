"""Recursive-descent parser for typelit source text.

The grammar works directly on characters through a forward-only
:class:`~typelit.lang.cursor.Cursor`; there is no separate tokenizer.  Each
decision needs at most a keyword's worth of lookahead.

A program is a sequence of statements, each optionally terminated by
``;``::

    let x: map[i64 | str, bool] = {10: false};
    [1, [2], "three"];

Statements are either ``let`` bindings or bare values.  Bindings without an
annotation receive the inferred type of their value; an explicit annotation
is stored as written (in canonical order) and is not checked against the
value.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from ..telemetry import hooks, logger, metrics
from . import ast
from .cursor import Cursor, is_digit, is_letter
from .errors import (
    DEFAULT_FILENAME,
    IntegerOverflow,
    NestingTooDeep,
    ParseError,
    TrailingInput,
    UnexpectedCharacter,
    UnexpectedEndOfInput,
    UnknownTypeName,
)
from .inference import type_of
from .type_system import BOOL, INTEGER, STRING, ListType, MapType, Type, canonicalize
from .values import (
    INT64_MAX,
    BoolValue,
    IntegerValue,
    ListValue,
    MapValue,
    StringValue,
    Value,
)

_LOGGER = logger.get_logger("typelit.lang.grammar")

LET_KEYWORD = "let"
TRUE_KEYWORD = "true"
FALSE_KEYWORD = "false"

ATOMIC_TYPES: dict[str, Type] = {
    "i64": INTEGER,
    "bool": BOOL,
    "str": STRING,
}
LIST_TYPE_NAME = "list"
MAP_TYPE_NAME = "map"

# Lists, maps and list/map type constructors share this limit.
MAX_NESTING_DEPTH = 100


class Parser:
    """Single-use parser over one source string.

    Create it with the source text, call :meth:`parse` once, then discard
    it.  Every routine raises a :class:`ParseError` subclass on the first
    problem it meets; lists, maps and type constructors nested deeper than
    ``max_depth`` raise :class:`NestingTooDeep`.
    """

    def __init__(
        self,
        source: str,
        filename: str = DEFAULT_FILENAME,
        *,
        max_depth: int = MAX_NESTING_DEPTH,
    ) -> None:
        self.cursor = Cursor(source)
        self.filename = filename
        self.max_depth = max_depth
        self._depth = 0
        self._consumed = False

    # ------------------------------------------------------------------
    # Entry points

    def parse(self) -> list[ast.Expr]:
        """Parse the whole input into its ordered top-level expressions."""

        if self._consumed:
            raise RuntimeError("Parser instances can only parse once")
        self._consumed = True
        cursor = self.cursor
        expressions: list[ast.Expr] = []
        cursor.skip_whitespace()
        while self._at_statement():
            expressions.append(self._parse_statement())
            cursor.skip_whitespace()
            cursor.consume_char(";")
            cursor.skip_whitespace()
        self._expect_end()
        return expressions

    def parse_value_only(self) -> Value:
        """Parse input consisting of exactly one value."""

        return self._parse_whole(self._parse_value)

    def parse_type_union_only(self) -> tuple[Type, ...]:
        """Parse input consisting of exactly one type union."""

        return self._parse_whole(self._parse_type_union)

    def _parse_whole(self, routine: Callable[[], object]):
        if self._consumed:
            raise RuntimeError("Parser instances can only parse once")
        self._consumed = True
        self.cursor.skip_whitespace()
        result = routine()
        self.cursor.skip_whitespace()
        self._expect_end()
        return result

    # ------------------------------------------------------------------
    # Error helpers

    def _error(self, error_cls: type[ParseError], *args, position: Optional[int] = None):
        return error_cls(
            *args,
            position=self.cursor.position if position is None else position,
            source=self.cursor.source,
            filename=self.filename,
        )

    def _unexpected(self, expected: str) -> ParseError:
        found = self.cursor.current()
        if found is None:
            return self._error(UnexpectedEndOfInput, expected)
        return self._error(UnexpectedCharacter, expected, found)

    def _expect_char(self, char: str) -> None:
        if not self.cursor.consume_char(char):
            raise self._unexpected(repr(char))

    def _expect_end(self) -> None:
        if not self.cursor.at_end:
            raise self._error(TrailingInput)

    @contextmanager
    def _nested(self, position: Optional[int] = None) -> Iterator[None]:
        if self._depth >= self.max_depth:
            raise self._error(NestingTooDeep, self.max_depth, position=position)
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    # ------------------------------------------------------------------
    # Statements

    def _at_statement(self) -> bool:
        return self._at_var_decl() or self._at_value()

    def _at_var_decl(self) -> bool:
        return self.cursor.starts_with(LET_KEYWORD)

    def _parse_statement(self) -> ast.Expr:
        if self._at_var_decl():
            return self._parse_var_decl()
        start = self.cursor.position
        value = self._parse_value()
        return ast.ValueExpr(value, span=ast.Span(start, self.cursor.position))

    def _parse_var_decl(self) -> ast.Var:
        cursor = self.cursor
        start = cursor.position
        cursor.advance(len(LET_KEYWORD))
        cursor.skip_whitespace()
        name = self._parse_identifier()
        cursor.skip_whitespace()
        declared: Optional[tuple[Type, ...]] = None
        if cursor.current() == ":":
            declared = self._parse_type_annotation()
            cursor.skip_whitespace()
        self._expect_char("=")
        cursor.skip_whitespace()
        value_start = cursor.position
        value = self._parse_value()
        value_expr = ast.ValueExpr(value, span=ast.Span(value_start, cursor.position))
        types = declared if declared is not None else (type_of(value),)
        return ast.Var(name, types, value_expr, span=ast.Span(start, cursor.position))

    def _parse_identifier(self) -> str:
        cursor = self.cursor
        chars: list[str] = []
        while is_letter(cursor.current()):
            chars.append(cursor.current())
            cursor.advance()
        if not chars:
            raise self._unexpected("identifier")
        return "".join(chars)

    # ------------------------------------------------------------------
    # Values

    def _at_value(self) -> bool:
        cursor = self.cursor
        char = cursor.current()
        return (
            is_digit(char)
            or char in ('"', "[", "{")
            or cursor.starts_with(TRUE_KEYWORD)
            or cursor.starts_with(FALSE_KEYWORD)
        )

    def _parse_value(self) -> Value:
        cursor = self.cursor
        char = cursor.current()
        if is_digit(char):
            return self._parse_integer()
        if char == '"':
            return self._parse_string()
        if cursor.starts_with(TRUE_KEYWORD) or cursor.starts_with(FALSE_KEYWORD):
            return self._parse_bool()
        if char == "[":
            return self._parse_list()
        if char == "{":
            return self._parse_map()
        raise self._unexpected("value")

    def _parse_integer(self) -> IntegerValue:
        cursor = self.cursor
        start = cursor.position
        number = 0
        while is_digit(cursor.current()):
            number = number * 10 + (ord(cursor.current()) - ord("0"))
            if number > INT64_MAX:
                while is_digit(cursor.current()):
                    cursor.advance()
                literal = cursor.source[start : cursor.position]
                raise self._error(IntegerOverflow, literal, position=start)
            cursor.advance()
        return IntegerValue(number)

    def _parse_string(self) -> StringValue:
        cursor = self.cursor
        cursor.advance()  # opening quote
        chars: list[str] = []
        while True:
            char = cursor.current()
            if char is None:
                raise self._error(UnexpectedEndOfInput, "'\"' to close string literal")
            if char == '"':
                break
            chars.append(char)
            cursor.advance()
        cursor.advance()  # closing quote
        return StringValue("".join(chars))

    def _parse_bool(self) -> BoolValue:
        cursor = self.cursor
        if cursor.starts_with(TRUE_KEYWORD):
            cursor.advance(len(TRUE_KEYWORD))
            return BoolValue(True)
        if cursor.starts_with(FALSE_KEYWORD):
            cursor.advance(len(FALSE_KEYWORD))
            return BoolValue(False)
        raise self._unexpected("'true' or 'false'")

    def _parse_list(self) -> ListValue:
        # Commas are optional separators: the loop only looks for ``]``.
        cursor = self.cursor
        items: list[Value] = []
        with self._nested():
            self._expect_char("[")
            cursor.skip_whitespace()
            while not cursor.consume_char("]"):
                if cursor.at_end:
                    raise self._error(UnexpectedEndOfInput, "']' to close list")
                items.append(self._parse_value())
                cursor.skip_whitespace()
                cursor.consume_char(",")
                cursor.skip_whitespace()
        return ListValue(tuple(items))

    def _parse_map(self) -> MapValue:
        cursor = self.cursor
        entries: list[tuple[Value, Value]] = []
        with self._nested():
            self._expect_char("{")
            cursor.skip_whitespace()
            while not cursor.consume_char("}"):
                if cursor.at_end:
                    raise self._error(UnexpectedEndOfInput, "'}' to close map")
                key = self._parse_value()
                cursor.skip_whitespace()
                self._expect_char(":")
                cursor.skip_whitespace()
                value = self._parse_value()
                entries.append((key, value))
                cursor.skip_whitespace()
                cursor.consume_char(",")
                cursor.skip_whitespace()
        return MapValue(tuple(entries))

    # ------------------------------------------------------------------
    # Type annotations

    def _parse_type_annotation(self) -> tuple[Type, ...]:
        self._expect_char(":")
        self.cursor.skip_whitespace()
        return self._parse_type_union()

    def _parse_type_union(self) -> tuple[Type, ...]:
        cursor = self.cursor
        members = [self._parse_type_atom()]
        while True:
            cursor.skip_whitespace()
            if not cursor.consume_char("|"):
                break
            cursor.skip_whitespace()
            members.append(self._parse_type_atom())
        return canonicalize(members)

    def _parse_type_atom(self) -> Type:
        cursor = self.cursor
        start = cursor.position
        if not is_letter(cursor.current()):
            raise self._error(UnknownTypeName, None)
        name = self._read_type_name()
        atomic = ATOMIC_TYPES.get(name)
        if atomic is not None:
            return atomic
        if name == LIST_TYPE_NAME:
            with self._nested(position=start):
                cursor.skip_whitespace()
                self._expect_char("[")
                cursor.skip_whitespace()
                members = self._parse_type_union()
                cursor.skip_whitespace()
                self._expect_char("]")
            return ListType(members)
        if name == MAP_TYPE_NAME:
            with self._nested(position=start):
                cursor.skip_whitespace()
                self._expect_char("[")
                cursor.skip_whitespace()
                keys = self._parse_type_union()
                cursor.skip_whitespace()
                self._expect_char(",")
                cursor.skip_whitespace()
                values = self._parse_type_union()
                cursor.skip_whitespace()
                self._expect_char("]")
            return MapType(keys, values)
        raise self._error(UnknownTypeName, name, position=start)

    def _read_type_name(self) -> str:
        cursor = self.cursor
        chars: list[str] = []
        while is_letter(cursor.current()) or is_digit(cursor.current()):
            chars.append(cursor.current())
            cursor.advance()
        return "".join(chars)


# ---------------------------------------------------------------------------
# Module-level helpers


def parse(source: str, *, filename: str = DEFAULT_FILENAME) -> list[ast.Expr]:
    """Parse ``source`` and return its top-level expressions.

    Every call is recorded in the parse statistics and published as a
    :class:`~typelit.telemetry.hooks.ParseEvent`; a failure re-raises the
    original :class:`ParseError`.
    """

    started = time.perf_counter()
    try:
        expressions = Parser(source, filename=filename).parse()
    except ParseError as exc:
        _LOGGER.debug("parse of %s failed: %s", filename, exc)
        _report(
            hooks.ParseEvent.failed(
                filename, type(exc).__name__, exc.position, latency_ms=_elapsed_ms(started)
            )
        )
        raise
    elapsed_ms = _elapsed_ms(started)
    _LOGGER.debug(
        "parsed %d expression(s) from %s in %.3f ms", len(expressions), filename, elapsed_ms
    )
    _report(hooks.ParseEvent.completed(filename, len(expressions), elapsed_ms))
    return expressions


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0


def _report(event: hooks.ParseEvent) -> None:
    metrics.record(event)
    hooks.publish(event)


def parse_value(source: str, *, filename: str = DEFAULT_FILENAME) -> Value:
    """Parse a source fragment holding exactly one value."""

    return Parser(source, filename=filename).parse_value_only()


def parse_type_annotation(source: str, *, filename: str = DEFAULT_FILENAME) -> tuple[Type, ...]:
    """Parse a type union such as ``bool | list[i64]`` into canonical form.

    A leading ``:`` is accepted so annotations can be passed verbatim.
    """

    stripped = source.lstrip()
    if stripped.startswith(":"):
        source = stripped[1:]
    return Parser(source, filename=filename).parse_type_union_only()


__all__ = ["Parser", "parse", "parse_type_annotation", "parse_value"]
