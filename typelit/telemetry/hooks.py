"""Parse lifecycle events and the subscribers that observe them."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Callable, Dict, Optional

from . import logger

PARSE_COMPLETED = "parser.parse.completed"
PARSE_FAILED = "parser.parse.failed"

EVENT_KINDS = (PARSE_COMPLETED, PARSE_FAILED)


@dataclass(frozen=True)
class ParseEvent:
    """Outcome of one call to :func:`typelit.lang.grammar.parse`.

    Completed parses fill in ``expressions`` and ``latency_ms``; failed ones
    carry the error class name and the offset it was raised at.
    """

    kind: str
    filename: str
    expressions: int = 0
    latency_ms: float = 0.0
    error: Optional[str] = None
    position: Optional[int] = None
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def completed(cls, filename: str, expressions: int, latency_ms: float) -> "ParseEvent":
        return cls(PARSE_COMPLETED, filename, expressions=expressions, latency_ms=latency_ms)

    @classmethod
    def failed(
        cls, filename: str, error: str, position: int, latency_ms: float = 0.0
    ) -> "ParseEvent":
        return cls(
            PARSE_FAILED, filename, latency_ms=latency_ms, error=error, position=position
        )

    @property
    def ok(self) -> bool:
        return self.kind == PARSE_COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "event": self.kind,
            "filename": self.filename,
            "latency_ms": self.latency_ms,
            "timestamp": self.timestamp,
        }
        if self.ok:
            payload["expressions"] = self.expressions
        else:
            payload["error"] = self.error
            payload["position"] = self.position
        return payload


Subscriber = Callable[[ParseEvent], None]


class Subscription:
    """Returned by :func:`subscribe`; closing it removes the subscriber."""

    def __init__(self, kind: str, fn: Subscriber) -> None:
        self.kind = kind
        self._fn = fn
        self._closed = False

    def close(self) -> None:
        if self._closed:
            return
        with _LOCK:
            bucket = _SUBSCRIBERS[self.kind]
            if self._fn in bucket:
                bucket.remove(self._fn)
        self._closed = True

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


_LOCK = RLock()
_SUBSCRIBERS: Dict[str, list[Subscriber]] = {kind: [] for kind in EVENT_KINDS}
_LOGGER = logger.get_logger("typelit.telemetry.hooks")


def subscribe(kind: str, fn: Subscriber) -> Subscription:
    """Call ``fn`` with every event of ``kind`` until the handle is closed."""

    if kind not in _SUBSCRIBERS:
        raise ValueError(f"unknown parse event {kind!r}; expected one of {EVENT_KINDS}")
    if not callable(fn):
        raise TypeError("subscriber must be callable")
    with _LOCK:
        _SUBSCRIBERS[kind].append(fn)
    return Subscription(kind, fn)


def publish(event: ParseEvent) -> None:
    """Deliver ``event`` to its subscribers.

    A subscriber that raises is logged and skipped; the parse result is
    never affected.
    """

    with _LOCK:
        subscribers = list(_SUBSCRIBERS.get(event.kind, ()))
    for fn in subscribers:
        try:
            fn(event)
        except Exception:
            _LOGGER.exception("subscriber for %s failed", event.kind)


__all__ = [
    "EVENT_KINDS",
    "PARSE_COMPLETED",
    "PARSE_FAILED",
    "ParseEvent",
    "Subscriber",
    "Subscription",
    "publish",
    "subscribe",
]
