"""Pager excursion for inspecting the selected item.

Writes the item to a fixed temp file and runs the pager on it, blocking the
event loop until the pager exits. Returns an error message string instead of
raising for UI-friendly handling.
"""

from __future__ import annotations

import json
import logging
import os
import shlex
import subprocess
import tempfile
from pathlib import Path

from ..feed.types import FeedItem
from .display_mode import DisplayMode, DisplayModeController

logger = logging.getLogger(__name__)

ITEM_DUMP_PATH = Path(tempfile.gettempdir()) / "lazyfeed-item.txt"
DEFAULT_PAGER = "less"


def resolve_pager_command(configured: str | None = None) -> list[str]:
    """Return the pager argv from ``$PAGER``, config, or ``less``."""
    for candidate in (os.environ.get("PAGER", ""), configured or ""):
        cmd = shlex.split(candidate.strip())
        if cmd:
            return cmd
    return [DEFAULT_PAGER]


def format_item(item: FeedItem) -> str:
    return json.dumps(item.to_dict(), indent=2, ensure_ascii=False) + "\n"


def inspect_item(
    item: FeedItem,
    display: DisplayModeController,
    pager_command: list[str],
    dump_path: Path = ITEM_DUMP_PATH,
) -> str | None:
    try:
        dump_path.write_text(format_item(item), encoding="utf-8")
    except OSError as exc:
        return f"Cannot write {dump_path}: {exc}"

    display.set_mode(DisplayMode.LOG)
    logger.debug("running pager %s on %s", pager_command, dump_path)
    try:
        subprocess.run([*pager_command, str(dump_path)], check=False)
    except OSError as exc:
        return f"Failed to launch pager: {exc}"
    return None


__all__ = [
    "ITEM_DUMP_PATH",
    "format_item",
    "inspect_item",
    "resolve_pager_command",
]
