from __future__ import annotations

from datetime import date, timedelta

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from src.main.app import create_app
from src.main.config import AlertSettings, AppSettings
from src.main.container import get_container


@pytest.fixture()
def client(record_store_factory, report_rows, email_gateway):
    app = create_app(AppSettings(alerts=AlertSettings(monitoring_enabled=False)))
    container = get_container()

    rows = report_rows(
        days=30,
        end=date.today() - timedelta(days=1),
        sales=6000.0,
        gallons=1500.0,
        expenses=[{"amount": 900}],
    )
    container.record_store_gateway.override(providers.Object(record_store_factory(rows)))
    container.email_gateway.override(providers.Object(email_gateway))

    with TestClient(app) as test_client:
        yield test_client


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_forecast_is_cached_between_requests(client) -> None:
    payload = {"timeframe": "month", "forecast_days": 5, "model": "linear"}

    first = client.post("/forecasts/", json=payload)
    stats = client.get("/cache/stats").json()
    second = client.post("/forecasts/", json=payload)

    assert first.status_code == 200
    body = first.json()
    assert len(body["sales"]) == 5
    assert body["metadata"]["historical_days"] == 30
    assert body["sales"][0]["predicted"] == pytest.approx(6000.0)
    assert stats["total_entries"] == 1
    assert second.json() == body


def test_forecast_for_unknown_station_is_422(client) -> None:
    response = client.post("/forecasts/", json={"stations": ["Nowhere"]})

    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "insufficient_data"


def test_alert_threshold_lifecycle(client, email_gateway) -> None:
    created = client.post(
        "/alerts/thresholds",
        json={
            "name": "High Sales",
            "metric": "totalSales.current",
            "threshold": 1000,
            "operator": "greater_than",
            "recipients": ["manager@example.com"],
            "notification_methods": ["email"],
        },
    )
    assert created.status_code == 201
    threshold_id = created.json()["id"]

    check = client.post(
        "/alerts/check", json={"metrics": {"totalSales": {"current": 2500}}}
    )
    history = client.get("/alerts/history").json()

    assert threshold_id in check.json()["fired"]
    assert email_gateway.sent[0]["to"] == ["manager@example.com"]
    assert any(record["alert_id"] == threshold_id for record in history)

    assert client.delete(f"/alerts/thresholds/{threshold_id}").status_code == 204
    assert client.get(f"/alerts/thresholds/{threshold_id}").status_code == 404


def test_cache_category_invalidation(client) -> None:
    assert client.delete("/cache/forecast").json() == {"category": "forecast", "removed": 0}
    assert client.delete("/cache/bogus").status_code == 404


def test_forecast_with_unreachable_record_store_is_422(record_store_factory) -> None:
    app = create_app(AppSettings(alerts=AlertSettings(monitoring_enabled=False)))
    get_container().record_store_gateway.override(
        providers.Object(record_store_factory(fail=True))
    )

    with TestClient(app) as test_client:
        response = test_client.post("/forecasts/", json={"forecast_days": 3})

    assert response.status_code == 422
    assert response.json()["detail"]["available_days"] == 0
