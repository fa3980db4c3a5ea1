"""
Configuration for Anky
Loads optional overrides from a JSON file next to the writings directory
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    decay_seconds: float = 8.0
    tick_seconds: float = 1.0
    window_width: int = 960
    window_height: int = 600
    writings_dir: str = "writings"
    background_image: str = "librarian.jpeg"


def load_settings(path: Path | None) -> Settings:
    """Read settings from a JSON object, falling back to defaults on any problem."""
    defaults = Settings()
    if path is None or not Path(path).exists():
        return defaults

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        logger.error("Error loading settings from %s: %s", path, e)
        return defaults

    if not isinstance(raw, dict):
        logger.error("Settings file %s must contain a JSON object", path)
        return defaults

    return _apply_overrides(defaults, raw)


def _apply_overrides(base: Settings, raw: dict[str, Any]) -> Settings:
    known = {f.name for f in fields(Settings)}
    overrides: dict[str, Any] = {}
    for key, value in raw.items():
        if key not in known:
            logger.debug("Ignoring unknown setting %r", key)
            continue
        coerced = _coerce(getattr(base, key), value)
        if coerced is None:
            logger.error("Invalid value for setting %r: %r", key, value)
            continue
        overrides[key] = coerced

    settings = replace(base, **overrides)
    if settings.decay_seconds <= 0:
        logger.error("decay_seconds must be positive, using %g", base.decay_seconds)
        settings = replace(settings, decay_seconds=base.decay_seconds)
    if settings.tick_seconds <= 0:
        logger.error("tick_seconds must be positive, using %g", base.tick_seconds)
        settings = replace(settings, tick_seconds=base.tick_seconds)
    return settings


def _coerce(default: Any, value: Any) -> Any:
    # JSON booleans are ints to Python; none of the settings is a flag.
    if isinstance(value, bool):
        return None
    if isinstance(default, float) and isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, type(default)):
        return value
    return None
