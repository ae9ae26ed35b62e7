"""Dirty-flag render pipeline.

A render pass switches to interactive mode, redraws only panes whose
``should_render`` flag is set, parks the cursor where the focused pane wants
it, and hands the whole frame to the terminal in one write.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from ..feed.store import FeedStore
from ..layout import BoundingBox, Layout
from ..runtime.display_mode import DisplayMode, DisplayModeController
from ..state import SelectionState
from .ansi import move_to
from .panes import PaneKind, PaneSlot, RenderView


class RenderPipeline:
    def __init__(
        self,
        layout: Layout,
        slots: Iterable[PaneSlot],
        *,
        display: DisplayModeController,
        store: FeedStore,
        selection: SelectionState,
        write: Callable[[str], None],
        is_loading: Callable[[], bool] = lambda: False,
        focus: PaneKind = PaneKind.LIST,
    ) -> None:
        self.layout = layout
        self._slots = list(slots)
        self._display = display
        self._store = store
        self._selection = selection
        self._write = write
        self._is_loading = is_loading
        self.focus = focus
        self.render_count = 0

    def slot(self, kind: PaneKind) -> PaneSlot:
        for slot in self._slots:
            if slot.kind == kind:
                return slot
        raise KeyError(kind)

    def box_for(self, kind: PaneKind) -> BoundingBox:
        if kind == PaneKind.LIST:
            return self.layout.list_box
        if kind == PaneKind.DETAIL:
            return self.layout.detail_box
        return self.layout.status_box

    def mark_dirty(self, *kinds: PaneKind) -> None:
        for kind in kinds:
            self.slot(kind).should_render = True

    def mark_all_dirty(self) -> None:
        for slot in self._slots:
            slot.should_render = True

    @property
    def any_dirty(self) -> bool:
        return any(slot.should_render for slot in self._slots)

    def dirty_kinds(self) -> set[PaneKind]:
        return {slot.kind for slot in self._slots if slot.should_render}

    def resize(self, columns: int, rows: int) -> None:
        """Recompute pane geometry and schedule a full redraw."""
        self.layout.resize(columns, rows)
        self._selection.clamp(len(self._store), self.layout.content_rows)
        self.mark_all_dirty()

    def current_view(self) -> RenderView:
        return RenderView(
            snapshot=self._store.snapshot(),
            selection=self._selection,
            loading=self._is_loading(),
        )

    def handle_focused_key(self, key: str) -> bool:
        """Offer ``key`` to the focused pane; return whether selection changed."""
        slot = self.slot(self.focus)
        return slot.pane.handle_key(key, self.box_for(slot.kind), self.current_view())

    def render(self) -> None:
        if self._display.set_mode(DisplayMode.INTERACTIVE):
            # The alternate screen starts blank after every re-entry.
            self.mark_all_dirty()

        view = self.current_view()
        if self._selection.clamp(len(view.snapshot), self.layout.content_rows):
            self.mark_dirty(PaneKind.LIST, PaneKind.STATUS)

        out: list[str] = []
        for slot in self._slots:
            if not slot.should_render:
                continue
            slot.pane.render(out, self.box_for(slot.kind), view)
            slot.should_render = False

        focused = self.slot(self.focus)
        col, row = focused.pane.cursor(self.box_for(focused.kind), view)
        out.append(move_to(col, row))
        self._write("".join(out))
        self.render_count += 1


__all__ = ["RenderPipeline"]
