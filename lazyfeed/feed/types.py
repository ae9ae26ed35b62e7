"""Feed item records, provider pages, and feed error kinds.

Records are frozen once built so readers on the render path can share them
with the fetch worker without holding a lock.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

UNKNOWN_AUTHOR = "[unknown]"


@dataclass(frozen=True)
class FeedItem:
    """One feed entry keyed by a provider-stable identifier."""

    id: str
    created_at: datetime
    text: str
    author_username: str | None = None
    author_name: str | None = None

    @property
    def author_label(self) -> str:
        """Return ``@username [name]`` with placeholders for missing parts."""
        username = self.author_username or UNKNOWN_AUTHOR
        name = self.author_name or UNKNOWN_AUTHOR
        return f"@{username} [{name}]"

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "author_username": self.author_username,
            "author_name": self.author_name,
            "text": self.text,
        }


@dataclass(frozen=True)
class FeedPage:
    """One provider response: items plus the cursor for the following page."""

    items: tuple[FeedItem, ...]
    next_cursor: str | None = None


class FeedError(Exception):
    """Base class for recoverable and unrecoverable feed failures."""


class ProviderError(FeedError):
    """Network, auth, or parse failure reported by a feed provider."""


class AlreadyLoading(FeedError):
    """A page load was requested while another one is still in flight."""

    def __init__(self) -> None:
        super().__init__("A page is already loading")


class NoMorePages(FeedError):
    """A continuation load was requested without a page cursor."""

    def __init__(self) -> None:
        super().__init__("No more pages")


class NotFound(FeedError):
    """Lookup of an identifier that is not in the feed store."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Item not found: {item_id}")
        self.item_id = item_id


__all__ = [
    "AlreadyLoading",
    "FeedError",
    "FeedItem",
    "FeedPage",
    "NoMorePages",
    "NotFound",
    "ProviderError",
    "UNKNOWN_AUTHOR",
]
