"""Command-line front door for lazyfeed.

Parses CLI options, configures logging, and builds the feed provider.
Then dispatches into the interactive runtime, or prints one page with --dump.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .config import LOG_PATH, load_page_size, load_pager, load_user_id
from .feed.provider import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
    FeedProvider,
    FixtureFeedProvider,
    TwitterTimelineProvider,
)
from .feed.types import ProviderError
from .render.panes import list_row_label
from .runtime import run_app

TOKEN_ENV_VAR = "LAZYFEED_BEARER_TOKEN"
DEBUG_ENV_VAR = "LAZYFEED_DEBUG"
FIXTURE_USER_ID = "fixture"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"


def _page_size(value: str) -> int:
    """argparse type for page sizes accepted by the provider."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < MIN_PAGE_SIZE or parsed > MAX_PAGE_SIZE:
        raise argparse.ArgumentTypeError(f"value must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}")
    return parsed


def configure_logging(log_file: Path | None, verbose: bool) -> Path:
    """Send log records to a file; the terminal itself belongs to the UI."""
    path = log_file if log_file is not None else LOG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    level = logging.DEBUG if verbose or os.environ.get(DEBUG_ENV_VAR) else logging.INFO
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Browse a social feed in a split-pane terminal viewer."
    )
    who = parser.add_mutually_exclusive_group()
    who.add_argument("--user-id", default=None, help="Timeline owner id (default: config or token owner).")
    who.add_argument("--username", default=None, help="Resolve the timeline owner from a handle.")
    parser.add_argument("--fixture", type=Path, default=None, help="Serve pages from a local JSON file.")
    parser.add_argument(
        "--page-size",
        type=_page_size,
        default=None,
        help=f"Items per page ({MIN_PAGE_SIZE}-{MAX_PAGE_SIZE}, default {DEFAULT_PAGE_SIZE}).",
    )
    parser.add_argument("--pager", default=None, help="Pager used by the inspect key (default: $PAGER or less).")
    parser.add_argument("--log-file", type=Path, default=None, help=f"Log file path (default: {LOG_PATH}).")
    parser.add_argument("--verbose", action="store_true", help="Log debug details.")
    parser.add_argument("--dump", action="store_true", help="Print the first page and exit.")
    return parser


def build_provider(args: argparse.Namespace) -> tuple[FeedProvider, str]:
    """Return the provider and the resolved timeline owner id."""
    page_size = args.page_size or load_page_size() or DEFAULT_PAGE_SIZE
    if args.fixture is not None:
        if not args.fixture.exists():
            raise SystemExit(f"Path not found: {args.fixture}")
        return FixtureFeedProvider(args.fixture, page_size=page_size), args.user_id or FIXTURE_USER_ID

    token = os.environ.get(TOKEN_ENV_VAR, "").strip()
    if not token:
        raise SystemExit(f"Set {TOKEN_ENV_VAR} or pass --fixture.")
    provider = TwitterTimelineProvider(token, page_size=page_size)
    try:
        if args.user_id:
            user_id = args.user_id
        elif args.username:
            user_id = provider.resolve_user_id(args.username)
        else:
            user_id = load_user_id() or provider.current_user_id()
    except ProviderError as exc:
        raise SystemExit(str(exc)) from exc
    return provider, user_id


def dump_first_page(provider: FeedProvider, user_id: str) -> str:
    try:
        page = provider.fetch_page(user_id, None)
    except ProviderError as exc:
        raise SystemExit(str(exc)) from exc
    return "".join(f"{list_row_label(item)}\n" for item in page.items)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the feed viewer."""
    args = build_parser().parse_args(argv)
    log_path = configure_logging(args.log_file, args.verbose)
    provider, user_id = build_provider(args)
    logging.getLogger(__name__).info("logging to %s", log_path)

    if args.dump:
        sys.stdout.write(dump_first_page(provider, user_id))
        return

    if not sys.stdin.isatty() or not sys.stdout.isatty():
        raise SystemExit("lazyfeed needs an interactive terminal (use --dump otherwise).")
    run_app(provider, user_id, pager=args.pager or load_pager())


if __name__ == "__main__":
    main()
