from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from rooguys.config import ClientConfig
from rooguys.http.client import HttpClient
from rooguys.http.metadata import RateLimitInfo
from rooguys.sdk import Rooguys

BASE_URL = "https://api.rooguys.test/v1"


class RecordingTransport(httpx.MockTransport):
    """Mock transport that replays queued responses and keeps every request."""

    def __init__(self, responses: list[httpx.Response | Exception] | None = None) -> None:
        self.responses = list(responses or [])
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            return httpx.Response(200, json={"success": True, "data": {}})
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        # fresh copy so the last queued response can repeat
        return httpx.Response(item.status_code, headers=item.headers, content=item.content)

    def json_bodies(self) -> list[Any]:
        return [json.loads(request.content) if request.content else None for request in self.requests]


@pytest.fixture
def make_http() -> Callable[..., tuple[HttpClient, RecordingTransport]]:
    def _make(
        responses: list[httpx.Response | Exception] | None = None,
        *,
        on_rate_limit_warning: Callable[[RateLimitInfo], None] | None = None,
        **config: Any,
    ) -> tuple[HttpClient, RecordingTransport]:
        transport = RecordingTransport(responses)
        client = HttpClient(
            "test-key",
            ClientConfig(base_url=BASE_URL, **config),
            transport=transport,
            on_rate_limit_warning=on_rate_limit_warning,
        )
        return client, transport

    return _make


@pytest.fixture
def make_sdk() -> Callable[..., tuple[Rooguys, RecordingTransport]]:
    def _make(
        responses: list[httpx.Response | Exception] | None = None, **config: Any
    ) -> tuple[Rooguys, RecordingTransport]:
        transport = RecordingTransport(responses)
        client = Rooguys("test-key", ClientConfig(base_url=BASE_URL, **config), transport=transport)
        return client, transport

    return _make
