from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SelectionState:
    """Selected row and list scroll window, owned by the event loop thread.

    Keeps ``view_offset <= selected_index < view_offset + visible_height``
    whenever the feed is non-empty.
    """

    selected_index: int = 0
    view_offset: int = 0

    def move(self, delta: int, total: int, visible_height: int) -> bool:
        """Move the selection by ``delta`` rows, clamped to the feed bounds.

        Returns whether the selected index changed. Does nothing on an empty
        feed.
        """
        if total <= 0:
            return False
        previous = self.selected_index
        self.selected_index = max(0, min(total - 1, self.selected_index + delta))
        self.scroll_into_view(visible_height)
        return self.selected_index != previous

    def move_to(self, index: int, total: int, visible_height: int) -> bool:
        return self.move(index - self.selected_index, total, visible_height)

    def clamp(self, total: int, visible_height: int) -> bool:
        """Re-apply bounds after the feed length or window height changed."""
        previous = (self.selected_index, self.view_offset)
        if total <= 0:
            self.selected_index = 0
            self.view_offset = 0
        else:
            self.selected_index = max(0, min(total - 1, self.selected_index))
            self.scroll_into_view(visible_height)
        return (self.selected_index, self.view_offset) != previous

    def scroll_into_view(self, visible_height: int) -> bool:
        """Shift the window so the selected row is visible; return if it moved."""
        height = max(1, visible_height)
        previous = self.view_offset
        if self.selected_index < self.view_offset:
            self.view_offset = self.selected_index
        elif self.selected_index >= self.view_offset + height:
            self.view_offset = max(0, self.selected_index - height + 1)
        return self.view_offset != previous


__all__ = ["SelectionState"]
