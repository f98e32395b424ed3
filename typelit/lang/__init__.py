"""Parser, value model and structural type inference for the typelit language."""

from . import ast, errors, grammar, inference, type_system, values

__all__ = ["ast", "errors", "grammar", "inference", "type_system", "values"]
