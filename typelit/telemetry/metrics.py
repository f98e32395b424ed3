"""Running parser statistics.

Only aggregates are kept (counts, latency totals and the failure tally per
error class), so the footprint stays constant however many parses a
long-lived process performs.  Individual events go to the active exporter.
"""

from __future__ import annotations

import threading
from collections import Counter
from typing import Any, Dict

from . import exporters
from .hooks import ParseEvent


class ParseStats:
    """Thread-safe running totals over :class:`ParseEvent` records."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self.parses = 0
            self.expressions = 0
            self.failures: Counter[str] = Counter()
            self.latency_total_ms = 0.0
            self.latency_max_ms = 0.0
            self.latency_last_ms = 0.0

    def record(self, event: ParseEvent) -> None:
        with self._lock:
            self.parses += 1
            if event.ok:
                self.expressions += event.expressions
            else:
                self.failures[event.error or "ParseError"] += 1
            self.latency_total_ms += event.latency_ms
            self.latency_max_ms = max(self.latency_max_ms, event.latency_ms)
            self.latency_last_ms = event.latency_ms

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            failed = sum(self.failures.values())
            return {
                "parses": self.parses,
                "succeeded": self.parses - failed,
                "failed": failed,
                "expressions": self.expressions,
                "failures": dict(self.failures),
                "latency_ms": {
                    "total": self.latency_total_ms,
                    "mean": self.latency_total_ms / self.parses if self.parses else 0.0,
                    "max": self.latency_max_ms,
                    "last": self.latency_last_ms,
                },
            }


_STATS = ParseStats()


def record(event: ParseEvent) -> None:
    """Fold ``event`` into the process-wide totals and export it."""

    _STATS.record(event)
    exporters.export(event.to_dict())


def get_stats() -> ParseStats:
    """Return the process-wide :class:`ParseStats`."""

    return _STATS


__all__ = ["ParseStats", "get_stats", "record"]
