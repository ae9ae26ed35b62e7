"""Feed data layer: records, the shared store, providers, and the page fetcher."""

from .fetcher import PaginationFetcher
from .provider import FeedProvider, FixtureFeedProvider, TwitterTimelineProvider
from .store import FeedSnapshot, FeedStore
from .types import (
    AlreadyLoading,
    FeedError,
    FeedItem,
    FeedPage,
    NoMorePages,
    NotFound,
    ProviderError,
)

__all__ = [
    "AlreadyLoading",
    "FeedError",
    "FeedItem",
    "FeedPage",
    "FeedProvider",
    "FeedSnapshot",
    "FeedStore",
    "FixtureFeedProvider",
    "NoMorePages",
    "NotFound",
    "PaginationFetcher",
    "ProviderError",
    "TwitterTimelineProvider",
]
