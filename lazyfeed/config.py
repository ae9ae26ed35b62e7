"""Persistent JSON config helpers.

Stores the list-pane width preset, pager command, default user id, and page
size. All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir, user_log_dir

from .feed.provider import MAX_PAGE_SIZE, MIN_PAGE_SIZE

APP_NAME = "lazyfeed"
CONFIG_FILENAME = "config.json"
LOG_FILENAME = "lazyfeed.log"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored to keep runtime behavior non-fatal when
    config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def load_list_pane_percent() -> float | None:
    """Read the list-pane width percentage constrained to (0, 100)."""
    value = load_config().get("list_pane_percent")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value <= 0 or value >= 100:
        return None
    return float(value)


def save_list_pane_percent(total_width: int, list_width: int) -> None:
    """Store the list-pane width as a percentage clamped to ``[1.0, 99.0]``."""
    if total_width <= 0:
        return
    percent = max(1.0, min(99.0, (list_width / total_width) * 100.0))
    config = load_config()
    config["list_pane_percent"] = round(percent, 2)
    save_config(config)


def _load_string(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_pager() -> str | None:
    return _load_string("pager")


def load_user_id() -> str | None:
    return _load_string("user_id")


def load_page_size() -> int | None:
    """Return the configured page size, or ``None`` when unset or out of range."""
    value = load_config().get("page_size")
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if value < MIN_PAGE_SIZE or value > MAX_PAGE_SIZE:
        return None
    return value


__all__ = [
    "CONFIG_PATH",
    "LOG_PATH",
    "load_config",
    "load_list_pane_percent",
    "load_page_size",
    "load_pager",
    "load_user_id",
    "save_config",
    "save_list_pane_percent",
]
