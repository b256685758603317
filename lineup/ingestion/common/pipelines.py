"""Selection and extraction pipeline helpers."""
from __future__ import annotations

import logging
from typing import Sequence

from lineup.ingestion.common.models import RetrievalResult
from lineup.ingestion.common.selector import MessageSelector
from lineup.knowledge.artist_extractor import extract_artists

logger = logging.getLogger(__name__)


def retrieve_artists(
    service,
    sender: str,
    *,
    label_ids: Sequence[str] = ("INBOX",),
    limit: int | None = None,
    page_size: int | None = None,
) -> RetrievalResult:
    """Select the earliest qualifying message from ``sender`` and extract its artists.

    ``service`` must provide ``list_labels``, ``list_messages`` and
    ``fetch_message`` (see ``GmailService``). A ``FetchError`` raised by any of
    them propagates unchanged; no partial result is returned alongside it.
    """
    # Listing is lazy; building it first rejects bad arguments before any request.
    messages = service.list_messages(label_ids, limit=limit, page_size=page_size)

    labels = service.list_labels()
    if labels:
        logger.info("Mailbox labels: %s", ", ".join(labels))
    else:
        logger.info("No labels found.")

    body = MessageSelector(sender).select(messages, service.fetch_message)
    if body is None:
        return RetrievalResult(body=None)

    artists = extract_artists(body)
    logger.info("Found %s artist(s) in message from %s", len(artists), sender)
    return RetrievalResult(body=body, artists=artists)
