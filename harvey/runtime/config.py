"""Persistent JSON config helpers.

Stores the theme, color preference, input poll interval and log level.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path

from platformdirs import user_config_dir

from ..ui_theme import DEFAULT_THEME, normalize_theme_name

logger = logging.getLogger(__name__)

APP_NAME = "harvey"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_POLL_INTERVAL_MS = 30
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class EngineConfig:
    """Resolved settings for one session."""

    theme: str = DEFAULT_THEME.name
    no_color: bool = False
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    log_level: str = DEFAULT_LOG_LEVEL


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> bool:
    """Persist config data as pretty-printed JSON.

    Filesystem and serialization errors are logged and reported through the
    return value; they are never fatal.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("could not write config %s: %s", config_path, exc)
        return False
    return True


def normalize_log_level(value: object) -> str | None:
    """Return an upper-case stdlib level name, or ``None`` when unrecognized."""
    if not isinstance(value, str):
        return None
    candidate = value.strip().upper()
    return candidate if candidate in LOG_LEVELS else None


def _coerce_poll_interval(value: object) -> int | None:
    # Booleans are ints in Python; reject them explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value >= 1 else None


def config_from_mapping(data: dict[str, object]) -> EngineConfig:
    """Build an ``EngineConfig``, ignoring keys with invalid values."""
    config = EngineConfig()

    theme = data.get("theme")
    if isinstance(theme, str) and theme.strip():
        config = replace(config, theme=normalize_theme_name(theme))

    no_color = data.get("no_color")
    if isinstance(no_color, bool):
        config = replace(config, no_color=no_color)

    poll_interval = _coerce_poll_interval(data.get("poll_interval_ms"))
    if poll_interval is not None:
        config = replace(config, poll_interval_ms=poll_interval)

    log_level = normalize_log_level(data.get("log_level"))
    if log_level is not None:
        config = replace(config, log_level=log_level)
    return config


def config_to_mapping(config: EngineConfig) -> dict[str, object]:
    return {
        "theme": config.theme,
        "no_color": config.no_color,
        "poll_interval_ms": config.poll_interval_ms,
        "log_level": config.log_level,
    }


def load_engine_config(path: Path | None = None) -> EngineConfig:
    return config_from_mapping(load_config(path))


def apply_overrides(
    config: EngineConfig,
    *,
    theme: str | None = None,
    no_color: bool | None = None,
    log_level: str | None = None,
) -> EngineConfig:
    """Layer command-line flags over file settings; ``None`` keeps the file value."""
    if theme is not None:
        config = replace(config, theme=normalize_theme_name(theme))
    if no_color:
        config = replace(config, no_color=True)
    level = normalize_log_level(log_level)
    if level is not None:
        config = replace(config, log_level=level)
    return config


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_POLL_INTERVAL_MS",
    "DEFAULT_LOG_LEVEL",
    "LOG_LEVELS",
    "EngineConfig",
    "load_config",
    "save_config",
    "normalize_log_level",
    "config_from_mapping",
    "config_to_mapping",
    "load_engine_config",
    "apply_overrides",
]
