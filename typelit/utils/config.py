"""Utility helpers for loading YAML configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

__all__ = ["load_config"]


def load_config(path: str | Path) -> dict[str, Any]:
    """Return the parsed YAML mapping located at ``path``.

    An empty document yields an empty dictionary.  Anything other than a
    mapping at the root is rejected with :class:`ValueError` so callers can
    rely on ``.get`` lookups.
    """

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"configuration file not found: {config_path}")
    raw_text = config_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(raw_text)
    except yaml.YAMLError as exc:
        raise ValueError(f"failed to parse configuration {config_path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"configuration root must be a mapping: {config_path}")
    return data
