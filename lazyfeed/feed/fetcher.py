"""Background pagination worker.

Each ``load`` call runs at most one provider request on a daemon thread and
reports the outcome on the internal event channel. Duplicate requests are
dropped, not queued.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from ..events import FeedUpdated, InternalEvent, LogError
from .provider import FeedProvider
from .store import FeedStore
from .types import AlreadyLoading, FeedError, NoMorePages

logger = logging.getLogger(__name__)


class PaginationFetcher:
    """Single-flight page loader bound to one store, provider, and user."""

    def __init__(
        self,
        store: FeedStore,
        provider: FeedProvider,
        user_id: str,
        emit: Callable[[InternalEvent], None],
    ) -> None:
        self._store = store
        self._provider = provider
        self._user_id = user_id
        self._emit = emit
        self._pagination_lock = threading.Lock()

    @property
    def is_loading(self) -> bool:
        return self._pagination_lock.locked()

    def load(self, restart: bool) -> None:
        """Start loading the first page (``restart``) or the next page.

        Returns immediately. ``FeedUpdated`` or ``LogError`` is emitted once the
        request completes or is rejected.
        """
        if not self._pagination_lock.acquire(blocking=False):
            logger.info("page load rejected: already loading")
            self._emit(LogError(str(AlreadyLoading())))
            return

        worker = threading.Thread(
            target=self._run_locked,
            args=(restart,),
            name="lazyfeed-page-fetch",
            daemon=True,
        )
        try:
            worker.start()
        except RuntimeError:
            self._pagination_lock.release()
            raise

    def _run_locked(self, restart: bool) -> None:
        event: InternalEvent
        try:
            self._fetch_and_merge(restart)
        except FeedError as exc:
            logger.warning("page load failed: %s", exc)
            event = LogError(str(exc))
        except Exception as exc:
            logger.exception("unexpected page load failure")
            event = LogError(f"Page load failed: {exc}")
        else:
            event = FeedUpdated()
        finally:
            self._pagination_lock.release()
        # Released first so a follow-up load triggered by this event is accepted.
        self._emit(event)

    def _fetch_and_merge(self, restart: bool) -> None:
        cursor: str | None = None
        if not restart:
            cursor = self._store.page_cursor
            if cursor is None:
                raise NoMorePages()

        logger.debug("fetching page user=%s cursor=%s", self._user_id, cursor)
        page = self._provider.fetch_page(self._user_id, cursor)
        self._store.merge_page(page.items, page.next_cursor)
        logger.info(
            "merged %d items, next cursor %s",
            len(page.items),
            "present" if page.next_cursor else "absent",
        )


__all__ = ["PaginationFetcher"]
