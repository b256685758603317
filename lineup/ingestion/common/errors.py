"""Errors raised by the ingestion layer."""
from __future__ import annotations


class FetchError(RuntimeError):
    """Raised when the mailbox cannot be listed or a message cannot be retrieved.

    Selection treats this as fatal for the whole run: it points at an
    authentication or transport problem rather than at a single message.
    """

    def __init__(self, message: str, *, message_id: str | None = None) -> None:
        super().__init__(message)
        self.message_id = message_id
