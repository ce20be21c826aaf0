"""Read-only user configuration for the ambient mixer."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_SOUND_DIRS = ("sounds",)
DEFAULT_GRANULARITY = 25
DEFAULT_START_VOLUME = 0


@dataclass(frozen=True)
class AppConfig:
    """Immutable defaults for a mixer session."""

    sound_dirs: tuple[str, ...] = DEFAULT_SOUND_DIRS
    granularity: int = DEFAULT_GRANULARITY
    start_volume: int = DEFAULT_START_VOLUME


def get_config_dir(app_name: str = "ambient-mixer") -> Path:
    """Return the per-user config directory for the current platform."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Roaming"
        return root / app_name
    if _is_macos():
        return Path.home() / "Library" / "Application Support" / app_name
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / app_name


def get_config_path() -> Path:
    """Return the full config file path."""
    return get_config_dir() / "config.json"


def load_config() -> AppConfig:
    """Load configuration from disk, falling back to defaults on error."""
    path = get_config_path()
    if not path.is_file():
        return AppConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.exception("Failed to load config from %s", path)
        return AppConfig()
    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: expected a JSON object", path)
        return AppConfig()
    return _config_from_mapping(raw)


def _is_macos() -> bool:
    """Return True when running on macOS."""
    return os.uname().sysname == "Darwin" if hasattr(os, "uname") else False  # pyright: ignore[reportAttributeAccessIssue]


def _get_int(
    raw: dict[str, Any],
    key: str,
    default: int,
    *,
    min_value: int | None = None,
) -> int:
    """Fetch an integer value with optional lower clamping."""
    value = raw.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool):
        value = default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _get_str_list(
    raw: dict[str, Any], key: str, default: tuple[str, ...]
) -> tuple[str, ...]:
    """Fetch a non-empty list of non-empty strings (a bare string counts as one)."""
    value = raw.get(key, default)
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return default
    items = tuple(item for item in value if isinstance(item, str) and item)
    return items or default


def _config_from_mapping(raw: dict[str, Any]) -> AppConfig:
    """Normalize raw JSON data into an AppConfig."""
    return AppConfig(
        sound_dirs=_get_str_list(raw, "sound_dirs", DEFAULT_SOUND_DIRS),
        granularity=_get_int(raw, "granularity", DEFAULT_GRANULARITY, min_value=1),
        start_volume=_get_int(
            raw, "start_volume", DEFAULT_START_VOLUME, min_value=0
        ),
    )
