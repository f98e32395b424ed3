"""typelit command-line interface."""

from __future__ import annotations

import argparse
import ast
import sys
from pathlib import Path
from typing import Any, Mapping, Sequence, TextIO

from .lang import grammar, serializer
from .lang.ast import Expr, If, ValueExpr, Var
from .lang.errors import ParseError
from .lang.inference import types_of
from .lang.type_system import format_types
from .lang.values import format_value
from .settings import DEFAULT_CONFIG_PATH, Settings, load_settings
from .telemetry import exporters, logger

DEMO_SOURCE = "let x: bool | str = false;"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typelit", description="Parse typelit sources and report their structural types"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None,
        help="Optional path to a settings YAML file.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        metavar="KEY=VALUE",
        help="Override settings using dot notation (e.g. output.format=json).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Parse a file, inline text or stdin")
    parse_cmd.add_argument(
        "source", nargs="?", type=Path, help="Source file (omit to read from stdin)"
    )
    parse_cmd.add_argument("--expr", help="Inline source text to parse")
    parse_cmd.add_argument(
        "--json", action="store_true", help="Emit canonical JSON regardless of settings"
    )

    subparsers.add_parser("demo", help=f"Parse the built-in example {DEMO_SOURCE!r}")
    return parser


def main(argv: Sequence[str] | None = None, *, stdout: TextIO | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    out = stdout or sys.stdout

    try:
        settings = load_settings(args.config, overrides=_parse_overrides(args.overrides))
        _apply_settings(settings)
        if args.command == "parse":
            return _cmd_parse(args, settings, out)
        if args.command == "demo":
            return _emit(grammar.parse(DEMO_SOURCE, filename="<demo>"), settings, out)
    except ParseError as exc:
        print(f"[typelit] parse error: {exc}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as exc:
        print(f"[typelit] error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


# ---------------------------------------------------------------------------
# Commands


def _cmd_parse(args: argparse.Namespace, settings: Settings, out: TextIO) -> int:
    if args.expr is not None and args.source is not None:
        raise ValueError("pass either a source file or --expr, not both")
    if args.expr is not None:
        source, filename = args.expr, "<expr>"
    elif args.source is not None:
        source, filename = args.source.read_text(encoding="utf-8"), str(args.source)
    else:
        source, filename = sys.stdin.read(), "<stdin>"
    if args.json:
        settings = settings.merge({"output.format": "json"})
    return _emit(grammar.parse(source, filename=filename), settings, out)


def _emit(expressions: list[Expr], settings: Settings, out: TextIO) -> int:
    if settings.output.format == "json":
        out.write(serializer.to_json(expressions, indent=settings.output.indent or None))
        out.write("\n")
        return 0
    for expr in expressions:
        out.write(_describe(expr, show_types=settings.output.show_types) + "\n")
    return 0


def _describe(expr: Expr, *, show_types: bool) -> str:
    if isinstance(expr, Var):
        text = f"let {expr.name} = {_describe(expr.value, show_types=False)}"
    elif isinstance(expr, ValueExpr):
        text = format_value(expr.value)
    elif isinstance(expr, If):
        condition = _describe(expr.condition, show_types=False)
        text = f"if {condition} then {_describe(expr.branch, show_types=False)}"
    else:
        raise TypeError(f"unknown expression {expr!r}")
    if show_types:
        text += f"  :: {format_types(types_of(expr))}"
    return text


# ---------------------------------------------------------------------------
# Settings wiring


def _apply_settings(settings: Settings) -> None:
    logger.set_level(settings.logging_level)
    if settings.telemetry.metrics_path is not None:
        exporters.configure(exporters.JsonlExporter(settings.telemetry.metrics_path))


def _parse_overrides(raw: Sequence[str] | None) -> Mapping[str, Any]:
    overrides: dict[str, Any] = {}
    for item in raw or ():
        if "=" not in item:
            raise ValueError(f"override must be KEY=VALUE, got {item!r}")
        key, value = item.split("=", 1)
        overrides[key.strip()] = _coerce_override(value.strip())
    return overrides


def _coerce_override(value: str) -> Any:
    try:
        return ast.literal_eval(value)
    except (ValueError, SyntaxError):
        return value


__all__ = ["DEMO_SOURCE", "build_parser", "main"]
