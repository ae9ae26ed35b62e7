"""Runtime composition layer for lazyfeed.

Builds the store, fetcher, panes, and dispatcher, then starts the loop.
This is the one place where terminal, feed data, and rendering meet.
"""

from __future__ import annotations

import logging
import sys

from ..config import load_list_pane_percent, save_list_pane_percent
from ..events import InternalEventChannel
from ..feed.fetcher import PaginationFetcher
from ..feed.provider import FeedProvider
from ..feed.store import FeedStore
from ..input.reader import KeyReader
from ..layout import Layout
from ..render.panes import DetailPane, ListPane, PaneKind, PaneSlot, StatusPane
from ..render.pipeline import RenderPipeline
from ..state import SelectionState
from .display_mode import DisplayModeController
from .event_sources import EventSources
from .inspect import resolve_pager_command
from .loop import EventDispatcher
from .terminal import TerminalController

logger = logging.getLogger(__name__)


def run_app(
    provider: FeedProvider,
    user_id: str,
    *,
    pager: str | None = None,
    stdin_fd: int | None = None,
    stdout_fd: int | None = None,
) -> None:
    """Run the interactive feed viewer until the user quits.

    Terminal I/O errors propagate after the terminal has been restored.
    """
    stdin_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
    stdout_fd = sys.stdout.fileno() if stdout_fd is None else stdout_fd

    terminal = TerminalController(stdin_fd, stdout_fd)
    channel = InternalEventChannel()
    store = FeedStore()
    fetcher = PaginationFetcher(store, provider, user_id, channel.send)
    selection = SelectionState()
    display = DisplayModeController(terminal)

    columns, rows = terminal.size()
    layout = Layout.for_size(columns, rows, load_list_pane_percent())
    detail = DetailPane(store)
    pipeline = RenderPipeline(
        layout,
        [
            PaneSlot(PaneKind.LIST, ListPane(selection)),
            PaneSlot(PaneKind.DETAIL, detail),
            PaneSlot(PaneKind.STATUS, StatusPane()),
        ],
        display=display,
        store=store,
        selection=selection,
        write=terminal.write,
        is_loading=lambda: fetcher.is_loading,
        focus=PaneKind.LIST,
    )
    dispatcher = EventDispatcher(
        store=store,
        fetcher=fetcher,
        pipeline=pipeline,
        display=display,
        selection=selection,
        detail=detail,
        terminal=terminal,
        pager_command=resolve_pager_command(pager),
        save_list_width=save_list_pane_percent,
    )
    sources = EventSources(KeyReader(stdin_fd), channel, terminal.size)

    logger.info("starting feed viewer for user %s (%dx%d)", user_id, columns, rows)
    try:
        with terminal.session(), sources.resize_notifications():
            display.log_message("Loading feed…")
            fetcher.load(restart=True)
            dispatcher.run(sources)
    finally:
        sources.close()
        channel.close()


__all__ = ["run_app"]
