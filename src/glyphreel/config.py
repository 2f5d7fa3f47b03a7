"""Persisted user defaults for GlyphReel."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from glyphreel.settings import CHAR_PRESETS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    """Immutable rendering defaults loaded from disk."""

    color: bool = True
    char_set: Optional[str] = None
    preserve_aspect_ratio: bool = True
    width: Optional[int] = None
    height: Optional[int] = None


def get_config_dir(app_name: str = "glyphreel") -> Path:
    """Return the per-user config directory for the current platform."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Roaming"
        return _ensure_dir(root / app_name)
    if os.name == "posix" and _is_macos():
        return _ensure_dir(Path.home() / "Library" / "Application Support" / app_name)
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return _ensure_dir(root / app_name)


def get_config_path() -> Path:
    """Return the full config file path."""
    return get_config_dir() / "config.json"


def load_config() -> AppConfig:
    """Load defaults from disk, falling back to built-ins on error."""
    path = get_config_path()
    if not path.exists():
        return AppConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.exception("Failed to load config from %s", path)
        return AppConfig()
    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: top level is not an object", path)
        return AppConfig()
    return _config_from_mapping(raw)


def save_config(cfg: AppConfig) -> Path:
    """Persist defaults to disk atomically and return the file path."""
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(".tmp")
    data = {
        "color": cfg.color,
        "char_set": cfg.char_set,
        "preserve_aspect_ratio": cfg.preserve_aspect_ratio,
        "width": cfg.width,
        "height": cfg.height,
    }
    temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    os.replace(temp_path, path)
    return path


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def _is_macos() -> bool:
    return os.uname().sysname == "Darwin" if hasattr(os, "uname") else False


def _get_bool(raw: dict[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key, default)
    return value if isinstance(value, bool) else default


def _get_size(raw: dict[str, Any], key: str) -> Optional[int]:
    """Fetch an optional positive dimension, dropping anything else."""
    value = raw.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return None
    return value


def _config_from_mapping(raw: dict[str, Any]) -> AppConfig:
    """Normalize raw JSON data into an AppConfig."""
    char_set = raw.get("char_set")
    if char_set not in CHAR_PRESETS:
        char_set = None
    return AppConfig(
        color=_get_bool(raw, "color", True),
        char_set=char_set,
        preserve_aspect_ratio=_get_bool(raw, "preserve_aspect_ratio", True),
        width=_get_size(raw, "width"),
        height=_get_size(raw, "height"),
    )
