"""Logging helpers used across typelit."""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from threading import RLock
from typing import Any, Mapping

import yaml

_CONFIG_LOCK = RLock()
_CONFIGURED = False

LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "logging.yaml"

_DEFAULT_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "formatter": "standard",
        }
    },
    "root": {
        "level": "WARNING",
        "handlers": ["console"],
    },
    "loggers": {
        "typelit": {
            "level": "WARNING",
            "handlers": ["console"],
            "propagate": False,
        }
    },
}

_ALLOWED_KEYS = ("version", "disable_existing_loggers", "formatters", "handlers", "root", "loggers")


def _load_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        return dict(_DEFAULT_CONFIG)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        logging.basicConfig(level=logging.WARNING)
        logging.getLogger("typelit.telemetry").warning("failed to parse %s: %s", path, exc)
        return dict(_DEFAULT_CONFIG)
    if not isinstance(data, Mapping):
        return dict(_DEFAULT_CONFIG)
    merged = dict(_DEFAULT_CONFIG)
    merged.update({k: v for k, v in data.items() if k in _ALLOWED_KEYS})
    return merged


def configure() -> None:
    """Apply ``configs/logging.yaml`` once; later calls are no-ops."""

    global _CONFIGURED
    with _CONFIG_LOCK:
        if _CONFIGURED:
            return
        config = _load_config(LOGGING_CONFIG_PATH)
        logging.config.dictConfig(config)
        _CONFIGURED = True


def set_level(level: str | int) -> None:
    """Adjust the level of the ``typelit`` logger tree."""

    configure()
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown logging level: {level!r}")
        level = resolved
    logging.getLogger("typelit").setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Return a logger configured via ``configs/logging.yaml``."""

    if not isinstance(name, str) or not name:
        raise ValueError("logger name must be a non-empty string")
    configure()
    return logging.getLogger(name)


__all__ = ["LOGGING_CONFIG_PATH", "configure", "get_logger", "set_level"]
