#!/usr/bin/env python3
"""Parse a typelit source file and print its expressions with their types."""

from __future__ import annotations

import argparse
from pathlib import Path

from typelit import cli


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Parse a typelit source file")
    parser.add_argument("source", type=Path, nargs="?", help="Source file (default: stdin)")
    parser.add_argument("--config", type=Path, help="Optional settings file")
    parser.add_argument(
        "--set", dest="overrides", action="append", help="Settings overrides (key=value)"
    )
    parser.add_argument("--json", action="store_true", help="Emit canonical JSON")

    args = parser.parse_args(argv)

    cli_args: list[str] = []
    if args.config:
        cli_args.extend(["--config", str(args.config)])
    for override in args.overrides or ():
        cli_args.extend(["--set", override])

    cli_args.append("parse")
    if args.source:
        cli_args.append(str(args.source))
    if args.json:
        cli_args.append("--json")

    return cli.main(cli_args)


if __name__ == "__main__":
    raise SystemExit(main())
