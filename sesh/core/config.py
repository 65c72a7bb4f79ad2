"""Session settings with an optional per-user JSON override file."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from loguru import logger


def _default_config_path() -> Path:
    return Path.home() / ".sesh" / "config.json"


@dataclass(frozen=True)
class SessionConfig:
    prep_sec: int = 5
    tick_sec: float = 1.0
    countdown_cue_sec: int = 3
    warmup_fraction: float = 0.2
    warmup_min_minutes: float = 2
    warmup_max_minutes: float = 10
    catalog_path: Path | None = None
    warmups_path: Path | None = None

    def with_overrides(self, **overrides: Any) -> SessionConfig:
        values = {key: value for key, value in overrides.items() if value is not None}
        return _validated(replace(self, **values))


def load_config(path: Path | None = None) -> SessionConfig:
    target = path or _default_config_path()
    if not target.exists():
        return SessionConfig()

    try:
        payload = json.loads(target.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid config JSON in {target}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError(f"Config {target} must be a JSON object")

    known = {f.name for f in fields(SessionConfig)}
    unknown = sorted(set(payload) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {target}: {', '.join(unknown)}")

    for key in ("catalog_path", "warmups_path"):
        if payload.get(key) is not None:
            payload[key] = Path(str(payload[key])).expanduser()

    config = _validated(SessionConfig(**payload))
    logger.info("Loaded config from {}", target)
    return config


def _validated(config: SessionConfig) -> SessionConfig:
    if config.prep_sec < 0:
        raise ValueError("prep_sec must be >= 0")
    if config.tick_sec <= 0:
        raise ValueError("tick_sec must be > 0")
    if config.countdown_cue_sec < 0:
        raise ValueError("countdown_cue_sec must be >= 0")
    if not 0 < config.warmup_fraction <= 1:
        raise ValueError("warmup_fraction must be in (0, 1]")
    if config.warmup_min_minutes > config.warmup_max_minutes:
        raise ValueError("warmup_min_minutes must be <= warmup_max_minutes")
    return config
