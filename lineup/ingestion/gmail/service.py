"""Gmail service implementation for listing and fetching messages."""
from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Sequence

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from lineup.ingestion.common.errors import FetchError
from lineup.ingestion.common.models import MessageDetail, MessageSummary

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/gmail.readonly"]

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 500

# HttpError covers API responses; OSError covers sockets, timeouts and
# httplib2 transport failures; GoogleAuthError covers token refresh.
TRANSPORT_ERRORS = (HttpError, OSError, GoogleAuthError)


def validate_page_size(page_size: int | None) -> int:
    max_results = DEFAULT_PAGE_SIZE if page_size is None else page_size
    if max_results <= 0 or max_results > MAX_PAGE_SIZE:
        raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")
    return max_results


class GmailService:
    def __init__(self, credentials_path: str, token_path: str, user_id: str = "me") -> None:
        self.credentials_path = Path(credentials_path)
        self.token_path = Path(token_path)
        self.user_id = user_id
        self._service = None

    @property
    def service(self):
        if self._service is None:
            try:
                self._service = self._authorize()
            except (OSError, GoogleAuthError) as exc:
                raise FetchError("Unable to authorize Gmail access") from exc
        return self._service

    def _authorize(self):
        creds = None
        if self.token_path.exists():
            creds = Credentials.from_authorized_user_file(str(self.token_path), SCOPES)
        if not creds or not creds.valid:
            if creds and creds.expired and creds.refresh_token:
                creds.refresh(Request())
            else:
                flow = InstalledAppFlow.from_client_secrets_file(
                    str(self.credentials_path), SCOPES
                )
                creds = flow.run_local_server(port=0)
            self.token_path.parent.mkdir(parents=True, exist_ok=True)
            self.token_path.write_text(creds.to_json(), encoding="utf-8")
            logger.info("Saved Gmail credentials to %s", self.token_path)
        return build("gmail", "v1", credentials=creds)

    def list_labels(self) -> List[str]:
        try:
            response = self.service.users().labels().list(userId=self.user_id).execute()
        except TRANSPORT_ERRORS as exc:
            raise FetchError("Unable to retrieve Gmail labels") from exc
        return [label["name"] for label in response.get("labels", [])]

    def list_messages(
        self,
        label_ids: Sequence[str] = ("INBOX",),
        *,
        limit: int | None = None,
        page_size: int | None = None,
    ) -> Iterable[MessageSummary]:
        """Return message summaries in the order Gmail lists them.

        Arguments are checked before anything is requested. Pages are then
        fetched lazily, so a consumer that stops early never triggers the
        next ``list`` call.
        """
        if limit is not None and limit < 0:
            raise ValueError("limit must not be negative")
        max_results = validate_page_size(page_size)
        if limit == 0:
            return iter(())
        return self._iter_messages(list(label_ids), limit, max_results)

    def _iter_messages(
        self, label_ids: List[str], limit: int | None, max_results: int
    ) -> Iterator[MessageSummary]:
        remaining = limit
        try:
            request = self.service.users().messages().list(
                userId=self.user_id,
                labelIds=label_ids,
                maxResults=max_results,
            )
            while request is not None:
                response = request.execute()
                for message_ref in response.get("messages", []):
                    yield MessageSummary(
                        id=message_ref["id"],
                        thread_id=message_ref.get("threadId"),
                    )
                    if remaining is not None:
                        remaining -= 1
                        if remaining <= 0:
                            return
                request = self.service.users().messages().list_next(request, response)
        except TRANSPORT_ERRORS as exc:
            raise FetchError("Unable to retrieve messages") from exc

    def fetch_message(self, message_id: str) -> MessageDetail:
        try:
            message_data = (
                self.service.users()
                .messages()
                .get(userId=self.user_id, id=message_id, format="full")
                .execute()
            )
        except TRANSPORT_ERRORS as exc:
            raise FetchError(
                f"Unable to retrieve message {message_id}", message_id=message_id
            ) from exc
        payload = message_data.get("payload", {})
        try:
            body = self._extract_body(payload)
        except (binascii.Error, ValueError) as exc:
            raise FetchError(
                f"Unable to decode body of message {message_id}", message_id=message_id
            ) from exc
        return MessageDetail(
            id=message_data.get("id", message_id),
            labels=frozenset(message_data.get("labelIds", [])),
            headers=self._extract_headers(payload),
            body=body,
        )

    @staticmethod
    def _extract_headers(payload) -> Dict[str, str]:
        """Map header names to values, keeping the first value of a repeated header.

        A message carrying several ``From`` headers is matched on the first one
        only; later duplicates never make it into the detail.
        """
        headers: Dict[str, str] = {}
        for header in payload.get("headers", []):
            headers.setdefault(header["name"], header["value"])
        return headers

    def _extract_body(self, payload) -> str:
        if "body" in payload and payload["body"].get("data"):
            return self._decode_body(payload["body"]["data"])

        for part in payload.get("parts", []):
            mime = part.get("mimeType", "")
            data = part.get("body", {}).get("data")
            if mime.startswith("text/plain") and data:
                return self._decode_body(data)
            if mime.startswith("multipart/"):
                nested = self._extract_body(part)
                if nested:
                    return nested
        return ""

    @staticmethod
    def _decode_body(data: str) -> str:
        return base64.urlsafe_b64decode(data + "==").decode("utf-8", errors="replace")
