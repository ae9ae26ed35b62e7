"""Event dispatcher key handling, internal events, and quit path."""

from __future__ import annotations

import unittest
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest import mock

from lazyfeed.events import FeedUpdated, KeyEvent, LogError, ResizeEvent
from lazyfeed.feed.store import FeedStore
from lazyfeed.feed.types import FeedItem
from lazyfeed.layout import Layout
from lazyfeed.render.panes import DetailPane, ListPane, PaneKind, PaneSlot, StatusPane
from lazyfeed.render.pipeline import RenderPipeline
from lazyfeed.runtime.display_mode import DisplayMode, DisplayModeController
from lazyfeed.runtime.loop import EventDispatcher
from lazyfeed.state import SelectionState


def _items(start: int, count: int) -> list[FeedItem]:
    return [
        FeedItem(
            id=f"id-{n}",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            text=f"post {n}",
            author_username="erin",
        )
        for n in range(start, start + count)
    ]


class _Exited(Exception):
    pass


class EventDispatcherTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = FeedStore()
        self.selection = SelectionState()
        self.surface = mock.Mock()
        self.display = DisplayModeController(self.surface)
        self.detail = DetailPane(self.store)
        self.fetcher = mock.Mock(is_loading=False)
        self.terminal = mock.Mock()
        self.writes: list[str] = []
        self.exit_codes: list[int] = []
        self.saved_widths: list[tuple[int, int]] = []
        self.pipeline = RenderPipeline(
            Layout.for_size(80, 12),
            [
                PaneSlot(PaneKind.LIST, ListPane(self.selection)),
                PaneSlot(PaneKind.DETAIL, self.detail),
                PaneSlot(PaneKind.STATUS, StatusPane()),
            ],
            display=self.display,
            store=self.store,
            selection=self.selection,
            write=self.writes.append,
        )
        self.dispatcher = EventDispatcher(
            store=self.store,
            fetcher=self.fetcher,
            pipeline=self.pipeline,
            display=self.display,
            selection=self.selection,
            detail=self.detail,
            terminal=self.terminal,
            pager_command=["less"],
            save_list_width=lambda total, width: self.saved_widths.append((total, width)),
            exit_process=self._exit,
        )

    def _exit(self, code: int) -> None:
        self.exit_codes.append(code)
        raise _Exited()

    def _load(self, count: int = 20, cursor: str | None = "next") -> None:
        self.store.merge_page(_items(len(self.store), count), cursor)
        self.dispatcher.handle_event(FeedUpdated())

    def test_feed_updated_shows_first_item_and_renders(self) -> None:
        self._load()

        self.assertEqual(self.detail.selected_id, "id-0")
        self.assertEqual(self.display.mode, DisplayMode.INTERACTIVE)
        self.assertEqual(self.pipeline.render_count, 1)
        self.assertIn("1/20 items", self.writes[-1])

    def test_feed_updated_keeps_current_selection(self) -> None:
        self._load()
        self.dispatcher.handle_event(KeyEvent("DOWN"))

        self._load()

        self.assertEqual(self.detail.selected_id, "id-1")
        self.assertIn("2/40 items", self.writes[-1])

    def test_arrow_keys_move_selection_and_update_detail(self) -> None:
        self._load()

        self.dispatcher.handle_event(KeyEvent("DOWN"))
        self.dispatcher.handle_event(KeyEvent("DOWN"))
        self.dispatcher.handle_event(KeyEvent("UP"))

        self.assertEqual(self.selection.selected_index, 1)
        self.assertEqual(self.detail.selected_id, "id-1")
        self.assertFalse(self.pipeline.any_dirty)

    def test_up_at_top_does_not_render(self) -> None:
        self._load()
        renders = self.pipeline.render_count

        self.dispatcher.handle_event(KeyEvent("UP"))

        self.assertEqual(self.pipeline.render_count, renders)

    def test_arrow_keys_on_empty_feed_are_ignored(self) -> None:
        self.dispatcher.handle_event(KeyEvent("DOWN"))

        self.assertEqual(self.selection.selected_index, 0)
        self.assertEqual(self.pipeline.render_count, 0)

    def test_unbound_key_falls_through_to_list_pane(self) -> None:
        self._load()

        self.dispatcher.handle_event(KeyEvent("G"))

        self.assertEqual(self.selection.selected_index, 19)
        self.assertEqual(self.detail.selected_id, "id-19")

    def test_next_page_key_requests_continuation(self) -> None:
        self.dispatcher.handle_event(KeyEvent("n"))

        self.fetcher.load.assert_called_once_with(restart=False)
        self.assertIn(PaneKind.STATUS, self.pipeline.dirty_kinds())

    def test_loaded_feed_is_never_restarted_from_the_keyboard(self) -> None:
        self._load()
        before = self.store.snapshot().order

        self.dispatcher.handle_event(KeyEvent("r"))

        self.fetcher.load.assert_not_called()
        self.assertNotIn("r", self.dispatcher.bindings)
        self.assertEqual(self.store.snapshot().order, before)

    def test_log_error_prints_on_primary_screen(self) -> None:
        self._load()

        self.dispatcher.handle_event(LogError("No more pages"))

        self.assertEqual(self.display.mode, DisplayMode.LOG)
        self.surface.write.assert_called_with("No more pages\r\n")

    def test_resize_marks_panes_dirty_without_rendering(self) -> None:
        self._load()
        renders = self.pipeline.render_count

        self.dispatcher.handle_event(ResizeEvent(columns=120, rows=30))

        self.assertEqual(self.pipeline.render_count, renders)
        self.assertEqual(self.pipeline.dirty_kinds(), {PaneKind.LIST, PaneKind.DETAIL, PaneKind.STATUS})
        self.assertEqual(self.pipeline.layout.list_width, 60)

        self.dispatcher.render_pending()
        self.assertEqual(self.pipeline.render_count, renders + 1)
        self.assertFalse(self.pipeline.any_dirty)

    def test_render_pending_skips_while_in_log_mode(self) -> None:
        self.pipeline.mark_all_dirty()

        self.dispatcher.render_pending()

        self.assertEqual(self.pipeline.render_count, 0)

    def test_quit_resets_terminal_then_exits_zero(self) -> None:
        with self.assertRaises(_Exited):
            self.dispatcher.handle_event(KeyEvent("q"))

        self.terminal.reset.assert_called_once_with()
        self.assertEqual(self.exit_codes, [0])

    def test_ctrl_c_quits(self) -> None:
        with self.assertRaises(_Exited):
            self.dispatcher.handle_event(KeyEvent("CTRL_C"))

        self.assertEqual(self.exit_codes, [0])

    def test_escape_forces_full_redraw(self) -> None:
        self._load()

        self.dispatcher.handle_event(KeyEvent("ESC"))

        self.assertEqual(self.pipeline.render_count, 2)
        self.assertIn("1/20 items", self.writes[-1])

    def test_diagnostics_line_reports_feed_state(self) -> None:
        self._load(count=3, cursor=None)

        self.dispatcher.handle_event(KeyEvent("d"))

        self.surface.write.assert_called_with(
            "3 items loaded, selected 1, more pages: no, loading: no\r\n"
        )

    def test_help_lists_bindings(self) -> None:
        self.dispatcher.handle_event(KeyEvent("?"))

        message = self.surface.write.call_args.args[0]
        self.assertIn("n: next page", message)
        self.assertIn("q/CTRL_C: quit", message)

    def test_shift_arrows_resize_list_pane_and_persist(self) -> None:
        self._load()

        self.dispatcher.handle_event(KeyEvent("SHIFT_RIGHT"))

        self.assertEqual(self.pipeline.layout.list_width, 42)
        self.assertEqual(self.saved_widths, [(80, 42)])

    def test_inspect_on_empty_feed_logs_message(self) -> None:
        self.dispatcher.handle_event(KeyEvent("i"))

        self.surface.write.assert_called_with("No item selected\r\n")

    def test_inspect_runs_pager_and_redraws(self) -> None:
        self._load()

        with mock.patch("lazyfeed.runtime.loop.inspect_item", return_value=None) as inspect_mock:
            self.dispatcher.handle_event(KeyEvent("i"))

        item = inspect_mock.call_args.args[0]
        self.assertEqual(item.id, "id-0")
        self.assertEqual(inspect_mock.call_args.args[2], ["less"])
        self.assertEqual(self.pipeline.render_count, 2)

    def test_inspect_failure_is_logged(self) -> None:
        self._load()

        with mock.patch("lazyfeed.runtime.loop.inspect_item", return_value="Failed to launch pager: x"):
            self.dispatcher.handle_event(KeyEvent("i"))

        self.surface.write.assert_called_with("Failed to launch pager: x\r\n")

    def test_run_renders_pending_then_handles_next_event(self) -> None:
        events = iter([FeedUpdated(), KeyEvent("q")])
        self.store.merge_page(_items(0, 2), None)
        sources = SimpleNamespace(next_event=lambda: next(events))

        with self.assertRaises(_Exited):
            self.dispatcher.run(sources)

        self.assertEqual(self.detail.selected_id, "id-0")
        self.assertEqual(self.exit_codes, [0])


if __name__ == "__main__":
    unittest.main()
