from __future__ import annotations

import httpx
import pytest

from src.domain.entities.errors import AlertDeliveryError
from src.infrastructure.gateways.email_gateway import HTTPEmailGateway


class _StubResponse:
    def __init__(self, status_code: int, json_data=None, content: bytes = b"{}"):
        self.status_code = status_code
        self._json = json_data if json_data is not None else {}
        self.content = content

    def json(self):
        return self._json

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            request = httpx.Request("POST", "http://mail/send")
            response = httpx.Response(self.status_code, request=request, text="error")
            raise httpx.HTTPStatusError("error", request=request, response=response)


class _StubAsyncClient:
    def __init__(self, response):
        self._response = response
        self.last_json = None

    async def __aenter__(self) -> "_StubAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def post(self, url: str, json: dict, headers: dict):
        self.last_json = json
        if isinstance(self._response, Exception):
            raise self._response
        return self._response


@pytest.mark.asyncio
async def test_send_email_posts_message(monkeypatch) -> None:
    client = _StubAsyncClient(_StubResponse(200, {"id": "msg-1"}))
    monkeypatch.setattr("httpx.AsyncClient", lambda timeout: client)
    gateway = HTTPEmailGateway("http://mail/send", default_sender="alerts@example.com")

    await gateway.send_email(["a@example.com"], "Subject", "<p>hi</p>", "hi")

    assert client.last_json == {
        "from": "alerts@example.com",
        "to": ["a@example.com"],
        "subject": "Subject",
        "html": "<p>hi</p>",
        "text": "hi",
    }


@pytest.mark.asyncio
async def test_send_email_with_explicit_sender(monkeypatch) -> None:
    client = _StubAsyncClient(_StubResponse(200, content=b""))
    monkeypatch.setattr("httpx.AsyncClient", lambda timeout: client)
    gateway = HTTPEmailGateway("http://mail/send", default_sender="alerts@example.com")

    await gateway.send_email(["a@example.com"], "S", "h", "t", sender="ops@example.com")

    assert client.last_json["from"] == "ops@example.com"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        _StubResponse(502),
        httpx.ConnectTimeout("timeout"),
        _StubResponse(200, {"error": "invalid recipient"}),
    ],
)
async def test_send_email_failures_raise_delivery_error(monkeypatch, response) -> None:
    monkeypatch.setattr("httpx.AsyncClient", lambda timeout: _StubAsyncClient(response))
    gateway = HTTPEmailGateway("http://mail/send", default_sender="alerts@example.com")

    with pytest.raises(AlertDeliveryError) as exc_info:
        await gateway.send_email(["a@example.com"], "S", "h", "t")

    assert exc_info.value.channel == "email"
