"""Configuration handling."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
import yaml

from .circles import CirclePreferences


@dataclass
class Config:
    data_dir: str
    log_dir: Optional[str] = None
    log_level: str = "INFO"
    circles: CirclePreferences = field(default_factory=CirclePreferences)


def load_config(path: str) -> Config:
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    circles_data = data.get("circles", {}) or {}
    circles = CirclePreferences()
    if circles_data.get("order"):
        circles.order = {str(k): int(v) for k, v in circles_data["order"].items()}
    circles.disabled = [str(name) for name in circles_data.get("disabled", [])]

    return Config(
        data_dir=data.get("data_dir", ""),
        log_dir=data.get("log_dir"),
        log_level=str(data.get("log_level", "INFO")).upper(),
        circles=circles,
    )


def save_config(path: str, config: Config) -> None:
    data = {
        "data_dir": config.data_dir,
        "log_dir": config.log_dir,
        "log_level": config.log_level,
        "circles": {
            "order": dict(config.circles.order),
            "disabled": list(config.circles.disabled),
        },
    }
    with open(path, "w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False)
