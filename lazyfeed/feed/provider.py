"""Feed providers: the paginated source of feed items.

``TwitterTimelineProvider`` talks to the Twitter API v2 home timeline over
HTTP. ``FixtureFeedProvider`` pages a local JSON file for offline use.
Both raise ``ProviderError`` for every network, auth, or parse failure.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

import requests

from .types import FeedItem, FeedPage, ProviderError

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.twitter.com/2"
DEFAULT_PAGE_SIZE = 20
MIN_PAGE_SIZE = 5
MAX_PAGE_SIZE = 100
REQUEST_TIMEOUT_SECONDS = 15.0


class FeedProvider(Protocol):
    """Source of feed pages for one user."""

    def fetch_page(self, user_id: str, cursor: str | None) -> FeedPage: ...


def clamp_page_size(value: int) -> int:
    return max(MIN_PAGE_SIZE, min(MAX_PAGE_SIZE, int(value)))


def parse_timestamp(raw: object) -> datetime:
    """Parse an ISO-8601 timestamp, accepting the trailing ``Z`` form."""
    if not isinstance(raw, str) or not raw:
        raise ProviderError(f"Invalid timestamp: {raw!r}")
    value = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise ProviderError(f"Invalid timestamp: {raw!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def item_from_dict(raw: Any) -> FeedItem:
    """Build one ``FeedItem`` from the flat JSON shape used by fixtures."""
    if not isinstance(raw, dict):
        raise ProviderError(f"Malformed item: {raw!r}")
    item_id = raw.get("id")
    text = raw.get("text")
    if not isinstance(item_id, str) or not item_id or not isinstance(text, str):
        raise ProviderError(f"Malformed item: {raw!r}")
    username = raw.get("author_username")
    name = raw.get("author_name")
    return FeedItem(
        id=item_id,
        created_at=parse_timestamp(raw.get("created_at")),
        text=text,
        author_username=username if isinstance(username, str) and username else None,
        author_name=name if isinstance(name, str) and name else None,
    )


class TwitterTimelineProvider:
    """Reverse-chronological home timeline client for the Twitter API v2."""

    def __init__(
        self,
        bearer_token: str,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        base_url: str = API_BASE_URL,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._page_size = clamp_page_size(page_size)
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {bearer_token}",
                "User-Agent": "lazyfeed",
            }
        )

    def _get_json(self, path: str, params: dict[str, object] | None = None) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else "?"
            raise ProviderError(f"Request to {path} failed with HTTP {status}") from exc
        except requests.RequestException as exc:
            raise ProviderError(f"Request to {path} failed: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(f"Response from {path} is not JSON") from exc
        if not isinstance(payload, dict):
            raise ProviderError(f"Response from {path} is not a JSON object")
        if "data" not in payload and payload.get("errors"):
            first = payload["errors"][0]
            detail = (first.get("detail") or first.get("message")) if isinstance(first, dict) else first
            raise ProviderError(f"Request to {path} failed: {detail}")
        return payload

    def _user_id_from(self, payload: dict[str, Any], path: str) -> str:
        data = payload.get("data")
        if not isinstance(data, dict) or not isinstance(data.get("id"), str):
            raise ProviderError(f"Response from {path} has no user id")
        return data["id"]

    def current_user_id(self) -> str:
        """Return the id of the user the bearer token belongs to."""
        return self._user_id_from(self._get_json("/users/me"), "/users/me")

    def resolve_user_id(self, username: str) -> str:
        path = f"/users/by/username/{username.lstrip('@')}"
        return self._user_id_from(self._get_json(path), path)

    def fetch_page(self, user_id: str, cursor: str | None) -> FeedPage:
        path = f"/users/{user_id}/timelines/reverse_chronological"
        params: dict[str, object] = {
            "max_results": self._page_size,
            "tweet.fields": "created_at,author_id",
            "expansions": "author_id",
            "user.fields": "username,name",
        }
        if cursor is not None:
            params["pagination_token"] = cursor
        payload = self._get_json(path, params)
        return self._parse_timeline(payload)

    @staticmethod
    def _parse_timeline(payload: dict[str, Any]) -> FeedPage:
        users: dict[str, dict[str, Any]] = {}
        includes = payload.get("includes")
        if isinstance(includes, dict):
            for user in includes.get("users") or []:
                if isinstance(user, dict) and isinstance(user.get("id"), str):
                    users[user["id"]] = user

        items: list[FeedItem] = []
        for tweet in payload.get("data") or []:
            if not isinstance(tweet, dict):
                raise ProviderError(f"Malformed tweet: {tweet!r}")
            author = users.get(str(tweet.get("author_id")), {})
            items.append(
                item_from_dict(
                    {
                        "id": tweet.get("id"),
                        "text": tweet.get("text"),
                        "created_at": tweet.get("created_at"),
                        "author_username": author.get("username"),
                        "author_name": author.get("name"),
                    }
                )
            )

        meta = payload.get("meta")
        next_token = meta.get("next_token") if isinstance(meta, dict) else None
        if not isinstance(next_token, str) or not next_token:
            next_token = None
        return FeedPage(items=tuple(items), next_cursor=next_token)


class FixtureFeedProvider:
    """Serve pages from a JSON file of items, using offsets as cursors.

    The file holds either a list of items or ``{"items": [...]}``; each item
    uses the ``FeedItem.to_dict`` shape.
    """

    def __init__(self, path: Path, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._path = path
        self._page_size = clamp_page_size(page_size)

    def _load_items(self) -> list[FeedItem]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ProviderError(f"Cannot read fixture {self._path}: {exc}") from exc
        if isinstance(data, dict):
            data = data.get("items")
        if not isinstance(data, list):
            raise ProviderError(f"Fixture {self._path} has no item list")
        return [item_from_dict(raw) for raw in data]

    def fetch_page(self, user_id: str, cursor: str | None) -> FeedPage:
        items = self._load_items()
        if cursor is None:
            start = 0
        else:
            try:
                start = int(cursor)
            except ValueError as exc:
                raise ProviderError(f"Invalid page cursor: {cursor!r}") from exc
            if start < 0 or start > len(items):
                raise ProviderError(f"Invalid page cursor: {cursor!r}")
        end = start + self._page_size
        next_cursor = str(end) if end < len(items) else None
        logger.debug("fixture page %d:%d of %d for %s", start, end, len(items), user_id)
        return FeedPage(items=tuple(items[start:end]), next_cursor=next_cursor)


__all__ = [
    "API_BASE_URL",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "MIN_PAGE_SIZE",
    "FeedProvider",
    "FixtureFeedProvider",
    "TwitterTimelineProvider",
    "clamp_page_size",
    "item_from_dict",
    "parse_timestamp",
]
