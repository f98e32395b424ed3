"""Loader for the bundled ``.tl`` fixture programs.

Tests parametrize over these so each fixture is checked for parseability
and stable type inference without repeating the I/O boilerplate.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from . import grammar
from .ast import Expr

FIXTURE_ROOT = Path(__file__).resolve().parents[2] / "tests" / "python" / "fixtures" / "programs"


@dataclass(frozen=True)
class FixtureProgram:
    """A fixture file together with its parsed expressions."""

    name: str
    path: Path
    source: str
    expressions: list[Expr]


def iter_fixture_programs(root: Path | None = None) -> Iterator[FixtureProgram]:
    """Return an iterator over the ``*.tl`` programs under ``root``, by file name.

    Parameters
    ----------
    root:
        Optional directory override.  When omitted the fixtures under
        ``tests/python/fixtures/programs`` are used.

    Raises
    ------
    FileNotFoundError
        If ``root`` is missing or holds no ``*.tl`` files.  The check runs
        on the call itself, before iteration starts.
    """

    directory = Path(root) if root is not None else FIXTURE_ROOT
    paths = sorted(directory.glob("*.tl")) if directory.is_dir() else []
    if not paths:
        raise FileNotFoundError(f"no *.tl fixture programs under {directory}")
    return (_load_program(path) for path in paths)


def _load_program(path: Path) -> FixtureProgram:
    source = path.read_text(encoding="utf-8")
    expressions = grammar.parse(source, filename=str(path))
    return FixtureProgram(name=path.stem, path=path, source=source, expressions=expressions)


__all__ = ["FIXTURE_ROOT", "FixtureProgram", "iter_fixture_programs"]
