from __future__ import annotations

import base64
from types import SimpleNamespace
from typing import Callable, Dict, Iterable, List

import pytest
from googleapiclient.errors import HttpError

from lineup.ingestion.common.models import MessageDetail, MessageSummary


def encode_body(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def http_error(status: int = 403, reason: str = "Forbidden") -> HttpError:
    return HttpError(SimpleNamespace(status=status, reason=reason), b"denied")


class FakeRequest:
    def __init__(self, response=None, error: Exception | None = None, **kwargs) -> None:
        self.response = response
        self.error = error
        self.kwargs = kwargs

    def execute(self):
        if self.error is not None:
            raise self.error
        return self.response


class FakeMessagesResource:
    def __init__(self, pages: List[List[str]], messages: Dict[str, dict]) -> None:
        self.pages = pages
        self.messages = messages
        self.list_calls: List[dict] = []
        self.get_calls: List[str] = []
        self.list_error: Exception | None = None
        self.get_errors: Dict[str, Exception] = {}

    def _page(self, index: int, kwargs: dict) -> FakeRequest:
        self.list_calls.append(kwargs)
        refs = [{"id": mid, "threadId": f"thread-{mid}"} for mid in self.pages[index]] if self.pages else []
        response = {"messages": refs}
        if index + 1 < len(self.pages):
            response["nextPageToken"] = str(index + 1)
        request = FakeRequest(response, error=self.list_error, **kwargs)
        request.page = index
        return request

    def list(self, **kwargs) -> FakeRequest:
        return self._page(0, kwargs)

    def list_next(self, request, response):
        token = response.get("nextPageToken")
        if token is None:
            return None
        return self._page(int(token), request.kwargs)

    def get(self, *, userId, id, format):
        self.get_calls.append(id)
        return FakeRequest(self.messages.get(id), error=self.get_errors.get(id))


class FakeLabelsResource:
    def __init__(self, names: Iterable[str]) -> None:
        self.names = list(names)
        self.error: Exception | None = None

    def list(self, *, userId):
        labels = [{"id": name, "name": name} for name in self.names]
        return FakeRequest({"labels": labels}, error=self.error)


class FakeGmailResource:
    """Stand-in for the object returned by ``googleapiclient.discovery.build``."""

    def __init__(self, pages: List[List[str]], messages: Dict[str, dict], labels: Iterable[str]) -> None:
        self.messages_resource = FakeMessagesResource(pages, messages)
        self.labels_resource = FakeLabelsResource(labels)

    def users(self):
        return SimpleNamespace(
            messages=lambda: self.messages_resource,
            labels=lambda: self.labels_resource,
        )


@pytest.fixture
def make_gmail_message() -> Callable[..., dict]:
    def _factory(
        message_id: str = "msg-1",
        sender: str = "Lineups <news@example.com>",
        body: str = "Alice Smith (US)",
        label_ids: Iterable[str] = ("INBOX", "UNREAD"),
    ) -> dict:
        return {
            "id": message_id,
            "threadId": f"thread-{message_id}",
            "labelIds": list(label_ids),
            "payload": {
                "mimeType": "text/plain",
                "headers": [
                    {"name": "From", "value": sender},
                    {"name": "Subject", "value": "This week's lineup"},
                ],
                "body": {"data": encode_body(body)},
            },
        }

    return _factory


@pytest.fixture
def fake_gmail() -> Callable[..., FakeGmailResource]:
    def _factory(
        messages: Iterable[dict] = (),
        *,
        pages: List[List[str]] | None = None,
        labels: Iterable[str] = ("INBOX", "UNREAD", "SENT"),
    ) -> FakeGmailResource:
        by_id = {message["id"]: message for message in messages}
        return FakeGmailResource(pages if pages is not None else [list(by_id)], by_id, labels)

    return _factory


@pytest.fixture
def make_detail() -> Callable[..., MessageDetail]:
    def _factory(
        message_id: str = "msg-1",
        sender: str = "news@example.com",
        labels: Iterable[str] = ("INBOX", "UNREAD"),
        body: str = "Alice Smith (US)",
    ) -> MessageDetail:
        return MessageDetail(
            id=message_id,
            labels=frozenset(labels),
            headers={"From": sender, "Subject": "Lineup"},
            body=body,
        )

    return _factory


class MailboxStub:
    """In-memory mailbox exposing the same operations as ``GmailService``."""

    def __init__(self, details: Iterable[MessageDetail], labels: Iterable[str] = ("INBOX",)) -> None:
        details = list(details)
        self.details = {detail.id: detail for detail in details}
        self.order = [detail.id for detail in details]
        self.labels = list(labels)
        self.fetched: List[str] = []
        self.failing: Dict[str, Exception] = {}
        self.list_calls: List[dict] = []

    def list_labels(self) -> List[str]:
        return list(self.labels)

    def list_messages(self, label_ids=("INBOX",), *, limit=None, page_size=None):
        self.list_calls.append({"label_ids": list(label_ids), "limit": limit, "page_size": page_size})
        for message_id in self.order:
            yield MessageSummary(id=message_id)

    def fetch_message(self, message_id: str) -> MessageDetail:
        self.fetched.append(message_id)
        if message_id in self.failing:
            raise self.failing[message_id]
        return self.details[message_id]


@pytest.fixture
def mailbox() -> Callable[..., MailboxStub]:
    def _factory(details: Iterable[MessageDetail], labels: Iterable[str] = ("INBOX",)) -> MailboxStub:
        return MailboxStub(list(details), labels)

    return _factory
