"""Print the latest unread message from a sender and the artists it announces."""
from __future__ import annotations

import argparse
import logging
import sys

from lineup.cli import configure_runtime
from lineup.ingestion.common.errors import FetchError
from lineup.ingestion.common.pipelines import retrieve_artists
from lineup.ingestion.gmail.service import GmailService, validate_page_size

logger = logging.getLogger(__name__)


def _page_size(value: str) -> int:
    try:
        return validate_page_size(int(value))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _non_negative(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError("must not be negative")
    return number


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--sender",
        default=None,
        help="Exact From header to match (fallback: TARGET_SENDER or [gmail] sender)",
    )
    parser.add_argument(
        "--credentials",
        default=None,
        help="Path to Google OAuth client credentials JSON (default: credentials.json)",
    )
    parser.add_argument(
        "--token",
        default=None,
        help="Path to store the OAuth token JSON (default: token.json)",
    )
    parser.add_argument(
        "--user-id",
        default=None,
        help="Gmail user id (default: me)",
    )
    parser.add_argument(
        "--label",
        dest="labels",
        action="append",
        default=None,
        help="Label to list messages from; repeat for several (default: INBOX)",
    )
    parser.add_argument(
        "--limit",
        type=_non_negative,
        default=None,
        help="Maximum number of messages to scan (default: all)",
    )
    parser.add_argument(
        "--page-size",
        type=_page_size,
        default=100,
        help="Number of message ids the Gmail API should list per request (1-500, default: 100)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Optional log level override (e.g. INFO, DEBUG)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    config = configure_runtime(
        args.sender,
        args.log_level,
        credentials=args.credentials,
        token=args.token,
    )
    if not config.sender:
        logger.error("No sender configured; pass --sender or set TARGET_SENDER")
        return 2

    service = GmailService(
        credentials_path=str(config.credentials_path),
        token_path=str(config.token_path),
        user_id=args.user_id or config.user_id,
    )
    try:
        result = retrieve_artists(
            service,
            config.sender,
            label_ids=args.labels or config.label_ids,
            limit=args.limit,
            page_size=args.page_size,
        )
    except FetchError as exc:
        logger.error("%s: %s", exc, exc.__cause__ or "no further detail")
        return 1

    if not result.matched:
        print("No matching message found.")
        return 0
    print(result.body)
    if result.artists:
        print("[" + " ".join(result.artists) + "]")
    else:
        print("No artists found!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
