"""typelit: a small literal/config language with structural type inference."""

from __future__ import annotations

from .lang.grammar import parse
from .lang.inference import type_of, types_of

__version__ = "0.1.0"

__all__ = ["__version__", "parse", "type_of", "types_of"]
