from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi import Request

from src.presentation.controllers.system_controller import health


def _request(started_at) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/health",
        "headers": [],
        "query_string": b"",
        "server": ("test", 80),
        "app": SimpleNamespace(state=SimpleNamespace(started_at=started_at)),
    }
    return Request(scope)


@pytest.mark.asyncio
async def test_health_reports_uptime() -> None:
    started_at = datetime.now(timezone.utc) - timedelta(seconds=30)

    body = await health(request=_request(started_at))

    assert body["status"] == "ok"
    assert body["uptime_seconds"] >= 30


@pytest.mark.asyncio
async def test_health_before_startup_has_no_uptime() -> None:
    body = await health(request=_request(None))

    assert body == {"status": "ok", "uptime_seconds": None}
