"""Shared test fixtures and utilities."""

from __future__ import annotations

from collections import deque
from typing import Any

import pytest

from dino_http import ApiClient, ResponseDescriptor


class FakeTransport:
    """Transport returning queued responses and recording every request."""

    def __init__(self, *responses: Any):
        self.responses = deque(responses)
        self.requests = []
        self.close_calls = 0

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    async def __call__(self, request):
        self.requests.append(request)
        item = self.responses.popleft() if self.responses else {"code": 0, "msg": "ok"}
        if isinstance(item, Exception):
            raise item
        if isinstance(item, ResponseDescriptor):
            return item
        return ResponseDescriptor(status=200, status_text="OK", body=item)

    @property
    def closed(self):
        return self.close_calls > 0

    async def aclose(self):
        self.close_calls += 1


class RecordingMessage:
    """Message surface collecting everything it is asked to show."""

    def __init__(self):
        self.records = []

    def success(self, text):
        self.records.append(("success", text))

    def info(self, text):
        self.records.append(("info", text))

    def warning(self, text):
        self.records.append(("warning", text))

    def error(self, text):
        self.records.append(("error", text))

    @property
    def errors(self):
        return [text for level, text in self.records if level == "error"]


@pytest.fixture
def transport():
    """Create a fake transport with an empty response queue."""
    return FakeTransport()


@pytest.fixture
def message():
    return RecordingMessage()


@pytest.fixture
def api(transport, message):
    """Create an ApiClient whose services all use the fake transport."""
    return ApiClient(message=message, transport_factory=lambda config: transport)


@pytest.fixture
def make_transport():
    """Factory for additional fake transports."""
    return FakeTransport
