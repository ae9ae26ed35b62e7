"""The three panes of the feed screen and their shared capability.

The pane set is fixed: ``ListPane`` (feed rows), ``DetailPane`` (selected
item), and ``StatusPane`` (bottom line). Each one renders into a shared
output buffer for a bounding box, answers where the cursor should sit, and
may handle keys the dispatcher did not bind.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from ..feed.store import FeedSnapshot, FeedStore
from ..feed.types import UNKNOWN_AUTHOR, FeedItem
from ..layout import BoundingBox
from ..state import SelectionState
from .ansi import (
    DIM_SGR,
    RESET,
    REVERSE,
    SEPARATOR_SGR,
    STATUS_SGR,
    fit_to_width,
    move_to,
    sanitize,
)
from .wrap import wrap_text

DETAIL_MARGIN = 1
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
LIST_TIME_FORMAT = "%m-%d %H:%M"


class PaneKind(Enum):
    LIST = "list"
    DETAIL = "detail"
    STATUS = "status"


@dataclass(frozen=True)
class RenderView:
    """State handed to panes for one render pass or one key."""

    snapshot: FeedSnapshot
    selection: SelectionState
    loading: bool = False


class Pane(Protocol):
    def render(self, out: list[str], box: BoundingBox, view: RenderView) -> None: ...

    def handle_key(self, key: str, box: BoundingBox, view: RenderView) -> bool: ...

    def cursor(self, box: BoundingBox, view: RenderView) -> tuple[int, int]: ...


@dataclass
class PaneSlot:
    """A pane plus its dirty flag."""

    kind: PaneKind
    pane: Pane
    should_render: bool = True


def list_row_label(item: FeedItem) -> str:
    username = item.author_username or UNKNOWN_AUTHOR
    text = " ".join(sanitize(item.text).split())
    return f"{item.created_at.strftime(LIST_TIME_FORMAT)} @{username}: {text}"


class ListPane:
    """Scrollable list of feed rows with the selected row in reverse video."""

    _STEP_KEYS = {"j": 1, "k": -1}

    def __init__(self, selection: SelectionState) -> None:
        self._selection = selection

    def render(self, out: list[str], box: BoundingBox, view: RenderView) -> None:
        snapshot = view.snapshot
        total = len(snapshot)
        for row in range(box.height):
            index = view.selection.view_offset + row
            out.append(move_to(box.left, box.top + row))
            if index >= total:
                out.append(" " * box.width)
                continue
            label = fit_to_width(list_row_label(snapshot.item_at(index)), box.width)
            if index == view.selection.selected_index:
                out.append(f"{REVERSE}{label}{RESET}")
            else:
                out.append(label)

    def handle_key(self, key: str, box: BoundingBox, view: RenderView) -> bool:
        total = len(view.snapshot)
        if total == 0:
            return False
        page = max(1, box.height - 1)
        if key in self._STEP_KEYS:
            return self._selection.move(self._STEP_KEYS[key], total, box.height)
        if key == "PAGE_DOWN":
            return self._selection.move(page, total, box.height)
        if key == "PAGE_UP":
            return self._selection.move(-page, total, box.height)
        if key in {"g", "HOME"}:
            return self._selection.move_to(0, total, box.height)
        if key in {"G", "END"}:
            return self._selection.move_to(total - 1, total, box.height)
        return False

    def cursor(self, box: BoundingBox, view: RenderView) -> tuple[int, int]:
        if len(view.snapshot) == 0:
            return box.left, box.top
        row = view.selection.selected_index - view.selection.view_offset
        return box.left, box.top + max(0, min(box.height - 1, row))


class DetailPane:
    """Full text of one item, wrapped to the pane width."""

    def __init__(self, store: FeedStore) -> None:
        self._store = store
        self.selected_id: str | None = None

    def show(self, item_id: str | None) -> None:
        self.selected_id = item_id

    def body_lines(self, item: FeedItem, width: int) -> list[str]:
        text_width = max(1, width - DETAIL_MARGIN)
        lines = [
            item.created_at.strftime(TIMESTAMP_FORMAT),
            sanitize(item.author_label),
            "",
        ]
        lines.extend(wrap_text(sanitize(item.text), text_width))
        return lines

    def render(self, out: list[str], box: BoundingBox, view: RenderView) -> None:
        lines: list[str] = []
        if self.selected_id is not None:
            lines = self.body_lines(self._store.get(self.selected_id), box.width)
        text_width = max(0, box.width - DETAIL_MARGIN)
        for row in range(box.height):
            out.append(move_to(box.left, box.top + row))
            out.append(f"{SEPARATOR_SGR}│{RESET}")
            text = lines[row] if row < len(lines) else ""
            if row == 0 and lines:
                out.append(f"{DIM_SGR}{fit_to_width(text, text_width)}{RESET}")
            else:
                out.append(fit_to_width(text, text_width))

    def handle_key(self, key: str, box: BoundingBox, view: RenderView) -> bool:
        return False

    def cursor(self, box: BoundingBox, view: RenderView) -> tuple[int, int]:
        return box.left + DETAIL_MARGIN, box.top


class StatusPane:
    def render(self, out: list[str], box: BoundingBox, view: RenderView) -> None:
        out.append(move_to(box.left, box.top))
        out.append(f"{STATUS_SGR}{fit_to_width(status_text(view), max(0, box.width - 1))}{RESET}")

    def handle_key(self, key: str, box: BoundingBox, view: RenderView) -> bool:
        return False

    def cursor(self, box: BoundingBox, view: RenderView) -> tuple[int, int]:
        return box.left, box.top


def status_text(view: RenderView) -> str:
    """Return ``"{n}/{total} items"`` with a 1-based position."""
    total = len(view.snapshot)
    position = view.selection.selected_index + 1 if total else 0
    text = f"{position}/{total} items"
    if view.loading:
        text += "  loading…"
    return text


__all__ = [
    "DETAIL_MARGIN",
    "DetailPane",
    "ListPane",
    "Pane",
    "PaneKind",
    "PaneSlot",
    "RenderView",
    "StatusPane",
    "list_row_label",
    "status_text",
]
