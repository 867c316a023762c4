"""Persistent JSON settings and on-disk locations.

Settings hold the layout width factor, blank-line preference, and whether
non-UTF-8 books are rewritten in place. Settings access is lenient:
malformed or missing values fall back to defaults. The progress store lives
next to the settings file but is validated strictly by ``fika.store``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir, user_log_dir

APP_NAME = "fika"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / "config.json"
STORE_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / "progress.json"
LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / "fika.log"

DEFAULT_WIDTH_FACTOR = 0.45


@dataclass(frozen=True)
class Settings:
    width_factor: float = DEFAULT_WIDTH_FACTOR
    keep_blank_lines: bool = False
    convert_in_place: bool = True


def load_config() -> dict[str, object]:
    """Load the persisted JSON settings object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _load_bool(data: dict[str, object], key: str, default: bool) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _load_width_factor(data: dict[str, object]) -> float:
    """Accept only numeric factors in ``(0, 1]``; booleans are rejected."""
    value = data.get("width_factor")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_WIDTH_FACTOR
    if value <= 0 or value > 1:
        return DEFAULT_WIDTH_FACTOR
    return float(value)


def load_settings() -> Settings:
    data = load_config()
    return Settings(
        width_factor=_load_width_factor(data),
        keep_blank_lines=_load_bool(data, "keep_blank_lines", False),
        convert_in_place=_load_bool(data, "convert_in_place", True),
    )
