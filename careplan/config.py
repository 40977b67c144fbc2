"""Load and validate configuration from YAML or JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

from careplan.domain.db import DEFAULT_DB_URL
from careplan.domain.values import TimeWindow
from careplan.engine.timetable import MAX_BLOCKS
from careplan.services.constraints import validate_window
from careplan.services.timeplan import to_hhmm


@dataclass
class WindowConfig:
    start: str = "09:00"
    end: str = "12:00"

    def to_window(self) -> TimeWindow:
        return TimeWindow(start=self.start, end=self.end)


@dataclass
class NarrativeConfig:
    enabled: bool = True
    base_url: str = "http://localhost:5000"
    timeout_seconds: float = 12.0


@dataclass
class CarePlanConfig:
    db_url: str = DEFAULT_DB_URL
    default_window: WindowConfig = field(default_factory=WindowConfig)
    max_blocks: int = MAX_BLOCKS
    narrative: NarrativeConfig = field(default_factory=NarrativeConfig)


def _read_raw(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping: {path}")
    return data


def _time_value(value: Any) -> str:
    # YAML 1.1 reads an unquoted 12:00 as the base-60 integer 720
    if isinstance(value, int) and not isinstance(value, bool):
        return to_hhmm(value)
    return str(value)


def config_from_dict(data: Dict[str, Any]) -> CarePlanConfig:
    """Build a validated config, falling back to defaults for missing keys."""
    cfg = CarePlanConfig()
    cfg.db_url = str(data.get("db_url", cfg.db_url))

    window = data.get("default_window") or {}
    cfg.default_window = WindowConfig(
        start=_time_value(window.get("start", cfg.default_window.start)),
        end=_time_value(window.get("end", cfg.default_window.end)),
    )
    validate_window(cfg.default_window.to_window())

    cfg.max_blocks = int(data.get("max_blocks", cfg.max_blocks))
    if cfg.max_blocks <= 0:
        raise ValueError(f"max_blocks must be positive, got {cfg.max_blocks}")

    narrative = data.get("narrative") or {}
    cfg.narrative = NarrativeConfig(
        enabled=bool(narrative.get("enabled", cfg.narrative.enabled)),
        base_url=str(narrative.get("base_url", cfg.narrative.base_url)).rstrip("/"),
        timeout_seconds=float(narrative.get("timeout_seconds", cfg.narrative.timeout_seconds)),
    )
    if cfg.narrative.timeout_seconds <= 0:
        raise ValueError("narrative.timeout_seconds must be positive")
    return cfg


def load_config(path: str | Path | None = None) -> CarePlanConfig:
    """
    Load configuration from a YAML (.yaml/.yml) or JSON (.json) file.

    Args:
        path: Config file path; None returns the defaults

    Returns:
        CarePlanConfig

    Raises:
        FileNotFoundError: If the path does not exist
        ValueError: If a value is invalid
    """
    if path is None:
        return CarePlanConfig()
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p}")
    return config_from_dict(_read_raw(p))
