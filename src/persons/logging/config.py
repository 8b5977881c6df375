"""Persisted logging preferences for the persons service.

The file is a small JSON object, by default ``~/.persons/logging.json``::

    {"log_level": "DEBUG"}
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

LEVEL_KEY = "log_level"


def config_path(config_file: Optional[os.PathLike[str] | str] = None) -> Path:
    """Return the logging config path.

    Resolution order is the explicit argument, ``PERSONS_LOG_CONFIG``, then
    ``logging.json`` inside ``PERSONS_CONFIG_DIR`` (default ``~/.persons``).
    """

    if config_file is not None:
        return Path(config_file)
    raw = (os.environ.get("PERSONS_LOG_CONFIG") or "").strip()
    if raw:
        return Path(raw).expanduser()
    config_dir = (os.environ.get("PERSONS_CONFIG_DIR") or "").strip()
    base = Path(config_dir).expanduser() if config_dir else Path.home() / ".persons"
    return base / "logging.json"


def load_config(config_file: Optional[os.PathLike[str] | str] = None) -> Dict[str, Any]:
    """Read the config file; unreadable or non-object content counts as empty."""

    try:
        data = json.loads(config_path(config_file).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(
    config: Dict[str, Any],
    config_file: Optional[os.PathLike[str] | str] = None,
) -> Path:
    path = config_path(config_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    return path


def level_number(level: str | int) -> Optional[int]:
    """Return the numeric value for ``level`` or ``None`` when it is unknown."""

    if isinstance(level, int):
        return level
    candidate = logging.getLevelName(str(level).strip().upper())
    return candidate if isinstance(candidate, int) else None


def load_log_level(
    config_file: Optional[os.PathLike[str] | str] = None,
) -> Optional[int]:
    value = load_config(config_file).get(LEVEL_KEY)
    if value is None:
        return None
    return level_number(value)


def save_log_level(
    level: str | int,
    config_file: Optional[os.PathLike[str] | str] = None,
) -> Path:
    """Persist ``level`` by name and return the config path.

    Raises
    ------
    ValueError
        If ``level`` is not a known logging level.
    """

    numeric = level_number(level)
    if numeric is None:
        raise ValueError(f"Unknown logging level: {level!r}")
    config = load_config(config_file)
    config[LEVEL_KEY] = logging.getLevelName(numeric)
    return save_config(config, config_file)


__all__ = [
    "config_path",
    "load_config",
    "save_config",
    "load_log_level",
    "save_log_level",
]
