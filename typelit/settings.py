"""Typed configuration objects for the typelit command-line front end."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from .utils.config import load_config

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "configs" / "default.yaml"

OUTPUT_FORMATS = ("text", "json")


def _deep_update(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``updates`` recursively merged."""

    result: dict[str, Any] = dict(base)
    for key, value in updates.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = _deep_update(result[key], value)
        else:
            result[key] = value
    return result


def _expand_dotted(overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Turn ``{"output.indent": 4}`` into ``{"output": {"indent": 4}}``."""

    expanded: dict[str, Any] = {}
    for dotted, value in overrides.items():
        parts = [part for part in str(dotted).split(".") if part]
        if not parts:
            raise ValueError(f"invalid override key: {dotted!r}")
        cursor = expanded
        for part in parts[:-1]:
            nested = cursor.setdefault(part, {})
            if not isinstance(nested, dict):
                raise ValueError(f"conflicting override for {dotted!r}")
            cursor = nested
        cursor[parts[-1]] = value
    return expanded


def _as_bool(value: Any, *, fallback: bool) -> bool:
    if value is None:
        return fallback
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"expected a boolean, got {value!r}")


@dataclass(slots=True)
class OutputOptions:
    """How parse results are rendered."""

    format: str = "text"
    show_types: bool = True
    indent: int = 2

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "OutputOptions":
        data = data or {}
        fmt = str(data.get("format", "text"))
        if fmt not in OUTPUT_FORMATS:
            raise ValueError(f"output.format must be one of {OUTPUT_FORMATS}, got {fmt!r}")
        return cls(
            format=fmt,
            show_types=_as_bool(data.get("show_types"), fallback=True),
            indent=int(data.get("indent", 2)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"format": self.format, "show_types": self.show_types, "indent": self.indent}


@dataclass(slots=True)
class TelemetryOptions:
    """Where parse event records are appended; ``None`` disables exporting."""

    metrics_path: Path | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "TelemetryOptions":
        data = data or {}
        raw = data.get("metrics_path")
        return cls(metrics_path=Path(raw) if raw else None)

    def to_dict(self) -> dict[str, Any]:
        return {"metrics_path": str(self.metrics_path) if self.metrics_path else None}


@dataclass(slots=True)
class Settings:
    """Top-level configuration object."""

    logging_level: str = "WARNING"
    output: OutputOptions = field(default_factory=OutputOptions)
    telemetry: TelemetryOptions = field(default_factory=TelemetryOptions)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "Settings":
        data = data or {}
        logging_section = data.get("logging") or {}
        return cls(
            logging_level=str(logging_section.get("level", "WARNING")).upper(),
            output=OutputOptions.from_mapping(data.get("output")),
            telemetry=TelemetryOptions.from_mapping(data.get("telemetry")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "logging": {"level": self.logging_level},
            "output": self.output.to_dict(),
            "telemetry": self.telemetry.to_dict(),
        }

    def merge(self, overrides: Mapping[str, Any] | None) -> "Settings":
        """Return a copy with dotted-key ``overrides`` applied."""

        if not overrides:
            return Settings.from_mapping(self.to_dict())
        return Settings.from_mapping(_deep_update(self.to_dict(), _expand_dotted(overrides)))


def load_settings(
    config_path: str | Path | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Return :class:`Settings` from ``config_path`` and ``overrides``."""

    data: Mapping[str, Any] | None = None
    if config_path is not None:
        data = load_config(config_path)
    return Settings.from_mapping(data).merge(overrides)


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "OUTPUT_FORMATS",
    "OutputOptions",
    "Settings",
    "TelemetryOptions",
    "load_settings",
]
