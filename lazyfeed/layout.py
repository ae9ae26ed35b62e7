"""Screen layout: list pane on the left, detail pane on the right, status row.

Widths are recomputed from the terminal size on every resize.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_LIST_PANE_PERCENT = 50.0
MIN_PANE_WIDTH = 12


@dataclass(frozen=True)
class BoundingBox:
    left: int
    top: int
    width: int
    height: int


def compute_list_width(total_width: int, percent: float | None = None) -> int:
    """Return the list pane width for ``total_width`` columns."""
    if percent is None:
        percent = DEFAULT_LIST_PANE_PERCENT
    desired = int(round(total_width * percent / 100.0))
    return clamp_list_width(total_width, desired)


def clamp_list_width(total_width: int, desired: int) -> int:
    """Clamp the list width so both panes keep at least a minimal width."""
    max_possible = max(1, total_width - 1)
    min_width = max(1, min(MIN_PANE_WIDTH, total_width // 2))
    max_width = max(min_width, total_width - MIN_PANE_WIDTH)
    max_width = min(max_width, max_possible)
    min_width = min(min_width, max_width)
    return max(min_width, min(desired, max_width))


@dataclass
class Layout:
    """Current terminal dimensions and derived pane geometry."""

    columns: int
    rows: int
    list_width: int

    @classmethod
    def for_size(cls, columns: int, rows: int, percent: float | None = None) -> Layout:
        columns = max(1, columns)
        rows = max(1, rows)
        return cls(columns=columns, rows=rows, list_width=compute_list_width(columns, percent))

    def resize(self, columns: int, rows: int, percent: float | None = None) -> None:
        """Adopt a new terminal size, keeping the list pane's share of the width."""
        if percent is None and self.columns > 0:
            percent = self.list_width * 100.0 / self.columns
        self.columns = max(1, columns)
        self.rows = max(1, rows)
        self.list_width = compute_list_width(self.columns, percent)

    def adjust_list_width(self, delta: int) -> bool:
        previous = self.list_width
        self.list_width = clamp_list_width(self.columns, self.list_width + delta)
        return self.list_width != previous

    @property
    def content_rows(self) -> int:
        return max(1, self.rows - 1)

    @property
    def detail_width(self) -> int:
        return max(1, self.columns - self.list_width)

    @property
    def list_box(self) -> BoundingBox:
        return BoundingBox(left=0, top=0, width=self.list_width, height=self.content_rows)

    @property
    def detail_box(self) -> BoundingBox:
        return BoundingBox(
            left=self.list_width,
            top=0,
            width=self.detail_width,
            height=self.content_rows,
        )

    @property
    def status_box(self) -> BoundingBox:
        return BoundingBox(left=0, top=self.rows - 1, width=self.columns, height=1)


__all__ = [
    "BoundingBox",
    "DEFAULT_LIST_PANE_PERCENT",
    "Layout",
    "clamp_list_width",
    "compute_list_width",
]
