"""Integration-focused tests for the typelit grammar."""

from __future__ import annotations

import pytest

from typelit.lang import ast, errors, generators, grammar
from typelit.lang.inference import type_of
from typelit.lang.type_system import BOOL, INTEGER, STRING, ListType, MapType
from typelit.lang.values import (
    BoolValue,
    IntegerValue,
    ListValue,
    MapValue,
    StringValue,
)


def test_integer_binding_gets_inferred_type() -> None:
    (expr,) = grammar.parse("let x = 10;")
    assert expr == ast.Var("x", (INTEGER,), ast.ValueExpr(IntegerValue(10)))
    assert expr.value == ast.ValueExpr(IntegerValue(10))


def test_annotation_is_accepted_without_checking_the_value() -> None:
    (expr,) = grammar.parse("let x: bool | str = false;")
    assert expr.name == "x"
    assert expr.types == (BOOL, STRING)
    assert expr.value == ast.ValueExpr(BoolValue(False))

    (mismatch,) = grammar.parse("let x: bool = 10;")
    assert mismatch.types == (BOOL,)
    assert mismatch.value == ast.ValueExpr(IntegerValue(10))


def test_map_annotation_and_value() -> None:
    (expr,) = grammar.parse("let x: map[i64|str|bool, i64|str|bool] = {10: false};")
    union = (BOOL, INTEGER, STRING)
    assert expr.types == (MapType(union, union),)
    assert expr.value == ast.ValueExpr(MapValue({IntegerValue(10): BoolValue(False)}))


def test_union_order_does_not_matter() -> None:
    first = grammar.parse_type_annotation("i64 | bool | str")
    second = grammar.parse_type_annotation("bool | str | i64")
    assert first == second == (BOOL, INTEGER, STRING)
    assert grammar.parse_type_annotation(": i64 | i64") == (INTEGER,)


def test_nested_type_annotations() -> None:
    types = grammar.parse_type_annotation("list [ map[str, list[i64]] | bool ]")
    assert types == (ListType((BOOL, MapType((STRING,), (ListType((INTEGER,)),)))),)


def test_bare_values_and_statement_sequence() -> None:
    source = """
    let a = "text";
    [[1],2,3];
    { "key": 2, [1]: 3 }
    """
    first, second, third = grammar.parse(source)
    assert first == ast.Var("a", (STRING,), ast.ValueExpr(StringValue("text")))
    assert second == ast.ValueExpr(
        ListValue((ListValue((IntegerValue(1),)), IntegerValue(2), IntegerValue(3)))
    )
    assert type_of(third.value) == MapType((STRING, ListType((INTEGER,))), (INTEGER,))


def test_semicolons_are_optional_between_statements() -> None:
    exprs = grammar.parse("1 2; let x = true")
    assert [type(e) for e in exprs] == [ast.ValueExpr, ast.ValueExpr, ast.Var]


def test_empty_input_parses_to_nothing() -> None:
    assert grammar.parse("") == []
    assert grammar.parse("  \n\t ") == []


def test_list_separators_are_lenient() -> None:
    expected = ListValue((IntegerValue(1), IntegerValue(2), IntegerValue(3)))
    assert grammar.parse_value("[1,2,3,]") == expected
    assert grammar.parse_value("[ 1 2 3 ]") == expected
    assert grammar.parse_value("[]") == ListValue(())


def test_strings_are_copied_verbatim() -> None:
    assert grammar.parse_value('"a\\nb [1]; let"') == StringValue("a\\nb [1]; let")


def test_duplicate_map_keys_last_write_wins() -> None:
    value = grammar.parse_value('{"k": 1, "k": 2}')
    assert value == MapValue({StringValue("k"): IntegerValue(2)})


def test_integer_accumulation_matches_decimal_parsing() -> None:
    assert grammar.parse_value("0042") == IntegerValue(42)
    assert grammar.parse_value("9223372036854775807") == IntegerValue((1 << 63) - 1)


def test_spans_cover_statements() -> None:
    (expr,) = grammar.parse("  let x = [1];")
    assert expr.span == ast.Span(2, 13)
    assert expr.value.span == ast.Span(10, 13)


# ---------------------------------------------------------------------------
# Errors


def test_trailing_input_fails_fast() -> None:
    with pytest.raises(errors.TrailingInput) as exc:
        grammar.parse("10; garbage")
    assert exc.value.position == 4
    assert (exc.value.line, exc.value.column) == (1, 5)


def test_unterminated_string() -> None:
    with pytest.raises(errors.UnexpectedEndOfInput):
        grammar.parse('let s = "open;')


def test_unterminated_collections() -> None:
    with pytest.raises(errors.UnexpectedEndOfInput):
        grammar.parse("[1, 2")
    with pytest.raises(errors.UnexpectedEndOfInput):
        grammar.parse('{"a": 1')


def test_unrecognized_value_start() -> None:
    with pytest.raises(errors.UnexpectedCharacter) as exc:
        grammar.parse("let x = nope;")
    assert exc.value.found == "n"
    assert exc.value.expected == "value"


def test_missing_map_colon() -> None:
    with pytest.raises(errors.UnexpectedCharacter) as exc:
        grammar.parse('{"a" 1}')
    assert exc.value.expected == "':'"


def test_missing_equals_in_binding() -> None:
    with pytest.raises(errors.UnexpectedCharacter):
        grammar.parse("let x 10;")


def test_binding_requires_identifier() -> None:
    with pytest.raises(errors.UnexpectedCharacter) as exc:
        grammar.parse("let = 10;")
    assert exc.value.expected == "identifier"


@pytest.mark.parametrize("annotation", ["int", "list[float]", "map[str, i32]"])
def test_unknown_type_names(annotation) -> None:
    with pytest.raises(errors.UnknownTypeName):
        grammar.parse(f"let x: {annotation} = 1;")


def test_annotation_requires_atom_after_pipe() -> None:
    with pytest.raises(errors.UnknownTypeName) as exc:
        grammar.parse("let x: bool | = true;")
    assert exc.value.name is None


def test_integer_overflow_is_reported() -> None:
    with pytest.raises(errors.IntegerOverflow) as exc:
        grammar.parse("let big = 9223372036854775808;")
    assert exc.value.literal == "9223372036854775808"
    assert exc.value.position == 10


def test_nesting_up_to_the_limit_parses() -> None:
    depth = grammar.MAX_NESTING_DEPTH
    value = grammar.parse_value("[" * depth + "]" * depth)
    expected = ListValue(())
    for _ in range(depth - 1):
        expected = ListValue((expected,))
    assert value == expected
    assert hash(value) == hash(expected)
    assert isinstance(type_of(value), ListType)


@pytest.mark.parametrize("parse", [grammar.parse, grammar.parse_value])
def test_deeply_nested_lists_are_rejected(parse) -> None:
    with pytest.raises(errors.NestingTooDeep) as exc:
        parse("[" * 600 + "]" * 600)
    assert exc.value.limit == grammar.MAX_NESTING_DEPTH
    assert exc.value.position == grammar.MAX_NESTING_DEPTH
    assert isinstance(exc.value, errors.ParseError)


def test_deeply_nested_maps_are_rejected() -> None:
    source = '{"a": ' * 300 + "1" + "}" * 300
    with pytest.raises(errors.NestingTooDeep) as exc:
        grammar.parse(source)
    assert exc.value.position == len('{"a": ') * grammar.MAX_NESTING_DEPTH


def test_deeply_nested_type_annotations_are_rejected() -> None:
    annotation = "list[" * 600 + "bool" + "]" * 600
    with pytest.raises(errors.NestingTooDeep) as exc:
        grammar.parse(f"let x: {annotation} = [];")
    assert exc.value.position == len("let x: ") + len("list[") * grammar.MAX_NESTING_DEPTH


def test_nesting_limit_is_configurable() -> None:
    assert grammar.Parser("[[1]]", max_depth=2).parse_value_only() == ListValue(
        (ListValue((IntegerValue(1),)),)
    )
    with pytest.raises(errors.NestingTooDeep):
        grammar.Parser("[[[1]]]", max_depth=2).parse_value_only()


def test_errors_share_a_common_base() -> None:
    with pytest.raises(errors.ParseError) as exc:
        grammar.parse("let x = 1; ?", filename="config.tl")
    assert str(exc.value).startswith("config.tl:1:12:")


def test_parser_is_single_use() -> None:
    parser = grammar.Parser("1;")
    assert parser.parse() == [ast.ValueExpr(IntegerValue(1))]
    with pytest.raises(RuntimeError):
        parser.parse()


# ---------------------------------------------------------------------------
# Fixtures


@pytest.mark.parametrize(
    "program",
    list(generators.iter_fixture_programs()),
    ids=lambda program: program.name,
)
def test_fixture_programs_parse(program) -> None:
    assert program.expressions, "fixtures should contain at least one statement"
    for expr in program.expressions:
        assert isinstance(expr, (ast.Var, ast.ValueExpr))
        if isinstance(expr, ast.Var):
            assert expr.types, "bindings always carry a type list"


def test_fixture_programs_are_present() -> None:
    names = [program.name for program in generators.iter_fixture_programs()]
    assert {"scalars", "nested_collections", "annotated", "structural_keys"} <= set(names)


def test_missing_fixture_directory_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        generators.iter_fixture_programs(tmp_path / "absent")
    with pytest.raises(FileNotFoundError):
        generators.iter_fixture_programs(tmp_path)
