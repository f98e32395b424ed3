"""Destinations for parse event records."""

from __future__ import annotations

import json
from pathlib import Path
from threading import RLock
from typing import Any, Mapping, Optional, Protocol


class Exporter(Protocol):
    def export(self, record: Mapping[str, Any]) -> None: ...


class JsonlExporter:
    """Append one JSON object per parse event to ``path``."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = RLock()

    @property
    def path(self) -> Path:
        return self._path

    def export(self, record: Mapping[str, Any]) -> None:
        with self._lock:
            with self._path.open("a", encoding="utf-8") as handle:
                json.dump(dict(record), handle, ensure_ascii=False, sort_keys=True)
                handle.write("\n")


_EXPORTER: Optional[Exporter] = None


def configure(exporter: Optional[Exporter]) -> Optional[Exporter]:
    """Install ``exporter`` (``None`` disables exporting) and return the previous one."""

    global _EXPORTER
    previous, _EXPORTER = _EXPORTER, exporter
    return previous


def export(record: Mapping[str, Any]) -> None:
    if _EXPORTER is not None:
        _EXPORTER.export(record)


__all__ = ["Exporter", "JsonlExporter", "configure", "export"]
