"""Selection of the earliest qualifying message in a mailbox listing."""
from __future__ import annotations

import logging
from typing import AbstractSet, Callable, Iterable, Optional

from lineup.ingestion.common.models import MessageDetail, MessageSummary

logger = logging.getLogger(__name__)

INBOX_LABEL = "INBOX"
UNREAD_LABEL = "UNREAD"
FROM_HEADER = "From"

FetchFn = Callable[[str], MessageDetail]


def has_selectable_labels(labels: AbstractSet[str]) -> bool:
    # Messages outside the inbox pass regardless of read state.
    return INBOX_LABEL not in labels or UNREAD_LABEL in labels


def is_from_sender(detail: MessageDetail, sender: str) -> bool:
    return detail.header(FROM_HEADER) == sender


class MessageSelector:
    """Find the first message in listing order that passes the label and sender checks.

    The listing order is taken as the priority order: the earliest match
    wins and the remaining summaries are never fetched. A failing ``fetch``
    aborts selection; no message is skipped because of it.
    """

    def __init__(self, sender: str) -> None:
        self.sender = sender

    def matches(self, detail: MessageDetail) -> bool:
        if not has_selectable_labels(detail.labels):
            return False
        return is_from_sender(detail, self.sender)

    def select(self, messages: Iterable[MessageSummary], fetch: FetchFn) -> Optional[str]:
        scanned = 0
        for summary in messages:
            detail = fetch(summary.id)
            scanned += 1
            if self.matches(detail):
                logger.info(
                    "Selected message %s from %s after scanning %s message(s)",
                    detail.id,
                    self.sender,
                    scanned,
                )
                return detail.body
            logger.debug("Skipping message %s (labels=%s)", detail.id, sorted(detail.labels))
        logger.info("No unread message from %s among %s message(s)", self.sender, scanned)
        return None


def select_message(
    messages: Iterable[MessageSummary],
    fetch: FetchFn,
    sender: str,
) -> Optional[str]:
    return MessageSelector(sender).select(messages, fetch)
