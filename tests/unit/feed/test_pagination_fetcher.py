"""Pagination worker tests: first page, continuation, lock, and failures."""

from __future__ import annotations

import queue
import threading
import unittest
from datetime import datetime, timedelta, timezone

from lazyfeed.events import FeedUpdated, LogError
from lazyfeed.feed.fetcher import PaginationFetcher
from lazyfeed.feed.store import FeedStore
from lazyfeed.feed.types import FeedItem, FeedPage, ProviderError

_BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
_WAIT_SECONDS = 5.0


def _page(start: int, count: int, next_cursor: str | None) -> FeedPage:
    items = tuple(
        FeedItem(
            id=f"id-{n}",
            created_at=_BASE_TIME - timedelta(minutes=n),
            text=f"post {n}",
            author_username="bob",
        )
        for n in range(start, start + count)
    )
    return FeedPage(items=items, next_cursor=next_cursor)


class _PagedProvider:
    """Hands out 20-item pages, using ``page-N`` cursors."""

    def __init__(self, pages: int = 3) -> None:
        self.pages = pages
        self.calls: list[tuple[str, str | None]] = []

    def fetch_page(self, user_id: str, cursor: str | None) -> FeedPage:
        self.calls.append((user_id, cursor))
        index = 0 if cursor is None else int(cursor.split("-")[1])
        next_cursor = f"page-{index + 1}" if index + 1 < self.pages else None
        return _page(index * 20, 20, next_cursor)


class _BlockingProvider:
    def __init__(self) -> None:
        self.started = threading.Event()
        self.release = threading.Event()

    def fetch_page(self, user_id: str, cursor: str | None) -> FeedPage:
        self.started.set()
        self.release.wait(_WAIT_SECONDS)
        return _page(100, 5, "after-block")


class _FailingProvider:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    def fetch_page(self, user_id: str, cursor: str | None) -> FeedPage:
        raise self.exc


class PaginationFetcherTests(unittest.TestCase):
    def setUp(self) -> None:
        self.events: queue.Queue = queue.Queue()
        self.store = FeedStore()

    def _fetcher(self, provider) -> PaginationFetcher:
        return PaginationFetcher(self.store, provider, "user-1", self.events.put)

    def _next_event(self):
        return self.events.get(timeout=_WAIT_SECONDS)

    def test_restart_load_fills_empty_store_with_first_page(self) -> None:
        provider = _PagedProvider()
        fetcher = self._fetcher(provider)

        fetcher.load(restart=True)

        self.assertEqual(self._next_event(), FeedUpdated())
        self.assertEqual(len(self.store), 20)
        self.assertEqual(self.store.page_cursor, "page-1")
        self.assertEqual(provider.calls, [("user-1", None)])
        self.assertFalse(fetcher.is_loading)

    def test_continuation_load_appends_next_page_after_existing_ids(self) -> None:
        provider = _PagedProvider()
        fetcher = self._fetcher(provider)
        fetcher.load(restart=True)
        self.assertEqual(self._next_event(), FeedUpdated())
        first_order = self.store.snapshot().order

        fetcher.load(restart=False)

        self.assertEqual(self._next_event(), FeedUpdated())
        order = self.store.snapshot().order
        self.assertEqual(len(order), 40)
        self.assertEqual(order[:20], first_order)
        self.assertEqual(order[20], "id-20")
        self.assertEqual(provider.calls[-1], ("user-1", "page-1"))

    def test_last_page_clears_cursor_and_further_loads_report_no_more_pages(self) -> None:
        fetcher = self._fetcher(_PagedProvider(pages=2))
        fetcher.load(restart=True)
        self._next_event()
        fetcher.load(restart=False)
        self._next_event()
        self.assertIsNone(self.store.page_cursor)

        fetcher.load(restart=False)

        self.assertEqual(self._next_event(), LogError("No more pages"))
        self.assertEqual(len(self.store), 40)

    def test_continuation_without_prior_fetch_reports_no_more_pages(self) -> None:
        provider = _PagedProvider()
        fetcher = self._fetcher(provider)

        fetcher.load(restart=False)

        self.assertEqual(self._next_event(), LogError("No more pages"))
        self.assertEqual(len(self.store), 0)
        self.assertIsNone(self.store.page_cursor)
        self.assertEqual(provider.calls, [])

    def test_second_load_while_in_flight_is_rejected_without_touching_store(self) -> None:
        provider = _BlockingProvider()
        fetcher = self._fetcher(provider)
        self.store.merge_page(_page(0, 3, "held").items, "held")
        before = self.store.snapshot()

        fetcher.load(restart=False)
        self.assertTrue(provider.started.wait(_WAIT_SECONDS))
        self.assertTrue(fetcher.is_loading)

        fetcher.load(restart=False)
        self.assertEqual(self._next_event(), LogError("A page is already loading"))
        during = self.store.snapshot()
        self.assertEqual(during.order, before.order)
        self.assertEqual(during.page_cursor, "held")

        provider.release.set()
        self.assertEqual(self._next_event(), FeedUpdated())
        self.assertEqual(self.store.page_cursor, "after-block")
        self.assertFalse(fetcher.is_loading)

    def test_provider_error_is_reported_as_log_line(self) -> None:
        fetcher = self._fetcher(_FailingProvider(ProviderError("HTTP 503")))

        fetcher.load(restart=True)

        self.assertEqual(self._next_event(), LogError("HTTP 503"))
        self.assertEqual(len(self.store), 0)
        self.assertFalse(fetcher.is_loading)

    def test_unexpected_error_is_reported_and_releases_lock(self) -> None:
        fetcher = self._fetcher(_FailingProvider(KeyError("boom")))

        fetcher.load(restart=True)

        event = self._next_event()
        self.assertIsInstance(event, LogError)
        self.assertTrue(event.message.startswith("Page load failed:"))
        self.assertFalse(fetcher.is_loading)


if __name__ == "__main__":
    unittest.main()
