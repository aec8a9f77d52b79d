"""
Configuration for the structschema.backend module.

Defines BackendSettings, a frozen dataclass carrying runtime configuration for the
Polars-backed adapter, schema conversion, and CLI logging.

Precedence
- environment (STRUCTSCHEMA_*) > TOML (structschema.toml or [tool.structschema.backend]
  in pyproject.toml) > defaults.

Import DAG discipline
- Depends only on stdlib.
- Does not import structschema.cli.

Notes
- timestamp_unit/timestamp_time_zone select the Polars Datetime dtype that
  "timestamp" columns map to.
- unique_field_names opts into structschema.core.schema.ensure_unique_field_names
  before a schema is pushed to the backend.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal

__all__ = [
    "TimeUnit",
    "BackendSettings",
]

logger = logging.getLogger(__name__)

TimeUnit = Literal["ns", "us", "ms"]

_TIME_UNITS = ("ns", "us", "ms")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}
    return False


@dataclass(frozen=True)
class BackendSettings:
    """
    Runtime settings for the structschema backend layer.

    Attributes:
        timestamp_unit (Literal["ns","us","ms"]): Precision of Polars Datetime columns.
        timestamp_time_zone (str | None): Time zone of Polars Datetime columns (None = naive).
        unique_field_names (bool): If True, require unique field names (all struct levels)
            before converting a schema to the backend.
        log_level (str): Logging level name used by the CLI.

    Examples:
        >>> from structschema.backend.config import BackendSettings
        >>> BackendSettings(timestamp_unit="ms")  # doctest: +ELLIPSIS
        BackendSettings(...)
    """

    timestamp_unit: TimeUnit = "us"
    timestamp_time_zone: str | None = None
    unique_field_names: bool = False
    log_level: str = "WARNING"

    @classmethod
    def _apply_mapping(cls, base: BackendSettings, cfg: dict[str, Any] | None) -> BackendSettings:
        """Apply a loose config mapping onto BackendSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        if "timestamp_unit" in cfg and isinstance(cfg["timestamp_unit"], str):
            unit = cfg["timestamp_unit"].strip().lower()
            if unit in _TIME_UNITS:
                s = replace(s, timestamp_unit=unit)  # type: ignore[arg-type]
            else:
                logger.warning("ignoring unsupported timestamp_unit %r", cfg["timestamp_unit"])

        if "timestamp_time_zone" in cfg and isinstance(cfg["timestamp_time_zone"], str):
            tz = cfg["timestamp_time_zone"].strip()
            s = replace(s, timestamp_time_zone=tz or None)

        if "unique_field_names" in cfg:
            s = replace(s, unique_field_names=_bool(cfg["unique_field_names"]))

        if "log_level" in cfg and isinstance(cfg["log_level"], str):
            level = cfg["log_level"].strip().upper()
            if level in _LOG_LEVELS:
                s = replace(s, log_level=level)
            else:
                logger.warning("ignoring unsupported log_level %r", cfg["log_level"])

        return s

    @classmethod
    def from_env(
        cls, base: BackendSettings | None = None, prefix: str = "STRUCTSCHEMA_"
    ) -> BackendSettings:
        """
        Build BackendSettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - STRUCTSCHEMA_TIMESTAMP_UNIT ("ns" | "us" | "ms")
            - STRUCTSCHEMA_TIMESTAMP_TIME_ZONE
            - STRUCTSCHEMA_UNIQUE_FIELD_NAMES (1/0/true/false/yes/no/on/off)
            - STRUCTSCHEMA_LOG_LEVEL
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for key in ("timestamp_unit", "timestamp_time_zone", "unique_field_names", "log_level"):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> BackendSettings:
        """
        Build BackendSettings from a TOML file.

        Search order when `path` is None:
            1) ./structschema.toml (with either a [backend] table or top-level keys)
            2) ./pyproject.toml under [tool.structschema.backend]

        Returns defaults if no file is present.

        Raises:
            tomllib.TOMLDecodeError: If a found file is not valid TOML.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "structschema.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            with p.open("rb") as fh:
                data = tomllib.load(fh)
            if p.name == "pyproject.toml":
                tool = data.get("tool")
                section = tool.get("structschema") if isinstance(tool, dict) else None
                cfg = section.get("backend") if isinstance(section, dict) else None
            elif isinstance(data.get("backend"), dict):
                cfg = data["backend"]
            else:
                cfg = data
            if cfg:
                logger.debug("loaded backend settings from %s", p)
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> BackendSettings:
        """
        Load BackendSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults
                (structschema.toml, pyproject.toml).
        """
        s = cls.from_toml(path)
        return cls.from_env(base=s)
