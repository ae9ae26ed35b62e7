"""Shared in-memory feed store.

Holds item records, their display order, and the pagination cursor. The event
loop and the fetch worker both touch it, so every access goes through the
store lock; readers take a snapshot instead of holding references into the
live containers.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .types import FeedItem, NotFound


@dataclass(frozen=True)
class FeedSnapshot:
    """Consistent point-in-time view of the store."""

    order: tuple[str, ...]
    items: Mapping[str, FeedItem]
    page_cursor: str | None

    def __len__(self) -> int:
        return len(self.order)

    def item_at(self, index: int) -> FeedItem:
        item_id = self.order[index]
        try:
            return self.items[item_id]
        except KeyError:
            raise NotFound(item_id) from None


class FeedStore:
    """Mutex-guarded map of items plus ordered ids and the page cursor.

    Identifiers already present are overwritten in ``items`` but not appended
    to ``order`` again, so overlapping provider pages never produce duplicate
    rows and ``len(order) == len(items)`` holds after every merge.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: dict[str, FeedItem] = {}
        self._order: list[str] = []
        self._page_cursor: str | None = None

    def merge_page(self, new_items: Iterable[FeedItem], next_cursor: str | None) -> None:
        """Merge one provider page atomically and replace the page cursor."""
        batch = list(new_items)
        with self._lock:
            for item in batch:
                if item.id not in self._items:
                    self._order.append(item.id)
                self._items[item.id] = item
            self._page_cursor = next_cursor

    def get(self, item_id: str) -> FeedItem:
        with self._lock:
            try:
                return self._items[item_id]
            except KeyError:
                raise NotFound(item_id) from None

    def id_at(self, index: int) -> str:
        with self._lock:
            return self._order[index]

    @property
    def page_cursor(self) -> str | None:
        with self._lock:
            return self._page_cursor

    def snapshot(self) -> FeedSnapshot:
        with self._lock:
            return FeedSnapshot(
                order=tuple(self._order),
                items=MappingProxyType(dict(self._items)),
                page_cursor=self._page_cursor,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._order)


__all__ = ["FeedSnapshot", "FeedStore"]
