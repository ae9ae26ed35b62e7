"""Main interactive event loop for the feed viewer.

Waits on the merged event sources, handles exactly one event per iteration,
and lets the render pipeline redraw whatever that event made stale.
Feature logic is bound through the key table; this module is wiring.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import NoReturn, Protocol

from ..events import Event, FeedUpdated, KeyEvent, LogError, ResizeEvent
from ..feed.fetcher import PaginationFetcher
from ..feed.store import FeedStore
from ..input.keys import KeyBinding, KeyBindingTable
from ..render.panes import DetailPane, PaneKind
from ..render.pipeline import RenderPipeline
from ..state import SelectionState
from .display_mode import DisplayModeController
from .inspect import inspect_item

logger = logging.getLogger(__name__)

LIST_WIDTH_STEP = 2


class EventSource(Protocol):
    def next_event(self) -> Event: ...


class Resettable(Protocol):
    def reset(self) -> None: ...


class EventDispatcher:
    """Route terminal and internal events to state changes and render passes."""

    def __init__(
        self,
        *,
        store: FeedStore,
        fetcher: PaginationFetcher,
        pipeline: RenderPipeline,
        display: DisplayModeController,
        selection: SelectionState,
        detail: DetailPane,
        terminal: Resettable,
        pager_command: list[str],
        save_list_width: Callable[[int, int], None] | None = None,
        exit_process: Callable[[int], object] = sys.exit,
    ) -> None:
        self._store = store
        self._fetcher = fetcher
        self._pipeline = pipeline
        self._display = display
        self._selection = selection
        self._detail = detail
        self._terminal = terminal
        self._pager_command = pager_command
        self._save_list_width = save_list_width
        self._exit_process = exit_process
        self.bindings = KeyBindingTable().bind_all(
            KeyBinding(("UP",), lambda: self.move_selection(-1)),
            KeyBinding(("DOWN",), lambda: self.move_selection(1)),
            KeyBinding(("n",), self.load_next_page, "next page"),
            KeyBinding(("i",), self.inspect_selected, "inspect"),
            KeyBinding(("d",), self.log_diagnostics, "status"),
            KeyBinding(("?",), self.log_help, "help"),
            KeyBinding(("ESC", "CTRL_L"), self.redraw, "redraw"),
            KeyBinding(("SHIFT_LEFT",), lambda: self.adjust_list_width(-LIST_WIDTH_STEP)),
            KeyBinding(("SHIFT_RIGHT",), lambda: self.adjust_list_width(LIST_WIDTH_STEP)),
            KeyBinding(("q", "CTRL_C"), self.quit, "quit"),
        )

    # -- actions -----------------------------------------------------------

    def move_selection(self, delta: int) -> None:
        total = len(self._store)
        if total == 0:
            return
        if self._selection.move(delta, total, self._pipeline.layout.content_rows):
            self.selection_changed()

    def selection_changed(self) -> None:
        self._detail.show(self._store.id_at(self._selection.selected_index))
        self._pipeline.mark_dirty(PaneKind.LIST, PaneKind.DETAIL, PaneKind.STATUS)
        self._pipeline.render()

    def load_next_page(self) -> None:
        self._fetcher.load(restart=False)
        self._pipeline.mark_dirty(PaneKind.STATUS)

    def inspect_selected(self) -> None:
        if len(self._store) == 0:
            self._display.log_message("No item selected")
            return
        item = self._store.get(self._store.id_at(self._selection.selected_index))
        error = inspect_item(item, self._display, self._pager_command)
        if error is not None:
            self._display.log_message(error)
            return
        self._pipeline.mark_all_dirty()
        self._pipeline.render()

    def log_diagnostics(self) -> None:
        snapshot = self._store.snapshot()
        total = len(snapshot)
        position = self._selection.selected_index + 1 if total else 0
        self._display.log_message(
            f"{total} items loaded, selected {position}, "
            f"more pages: {'yes' if snapshot.page_cursor else 'no'}, "
            f"loading: {'yes' if self._fetcher.is_loading else 'no'}"
        )

    def log_help(self) -> None:
        self._display.log_message(self.bindings.help_text())

    def redraw(self) -> None:
        self._pipeline.mark_all_dirty()
        self._pipeline.render()

    def adjust_list_width(self, delta: int) -> None:
        layout = self._pipeline.layout
        if not layout.adjust_list_width(delta):
            return
        if self._save_list_width is not None:
            self._save_list_width(layout.columns, layout.list_width)
        self._pipeline.mark_all_dirty()
        self._pipeline.render()

    def quit(self) -> None:
        logger.info("quit requested")
        self._terminal.reset()
        self._exit_process(0)

    # -- event handling ----------------------------------------------------

    def handle_terminal_event(self, event: KeyEvent | ResizeEvent) -> None:
        if isinstance(event, ResizeEvent):
            self._pipeline.resize(event.columns, event.rows)
            return
        if self.bindings.dispatch(event.key):
            return
        if self._pipeline.handle_focused_key(event.key):
            self.selection_changed()

    def handle_internal_event(self, event: FeedUpdated | LogError) -> None:
        if isinstance(event, LogError):
            self._display.log_message(event.message)
            return
        total = len(self._store)
        self._selection.clamp(total, self._pipeline.layout.content_rows)
        self._pipeline.mark_dirty(PaneKind.LIST, PaneKind.STATUS)
        if self._detail.selected_id is None and total > 0:
            self._detail.show(self._store.id_at(self._selection.selected_index))
            self._pipeline.mark_dirty(PaneKind.DETAIL)
        self._pipeline.render()

    def handle_event(self, event: Event) -> None:
        if isinstance(event, (KeyEvent, ResizeEvent)):
            self.handle_terminal_event(event)
        else:
            self.handle_internal_event(event)

    def render_pending(self) -> None:
        """Redraw panes left dirty by the last event while the screen is up."""
        if self._display.interactive and self._pipeline.any_dirty:
            self._pipeline.render()

    def run(self, sources: EventSource) -> NoReturn:
        """Handle events until the quit key exits the process."""
        while True:
            self.render_pending()
            self.handle_event(sources.next_event())


__all__ = ["EventDispatcher"]
