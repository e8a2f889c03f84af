from __future__ import annotations

from datetime import datetime, timezone

from src.domain.entities.alert import (
    DEFAULT_COOLDOWN_MINUTES,
    AlertNotification,
    AlertOperator,
    AlertSeverity,
    AlertThreshold,
    NotificationMethod,
)


def test_threshold_defaults() -> None:
    threshold = AlertThreshold(
        metric="totalSales.current", threshold=10, operator=AlertOperator.EQUALS
    )

    assert threshold.id.startswith("alert_")
    assert len(threshold.id) == len("alert_") + 12
    assert threshold.severity is AlertSeverity.MEDIUM
    assert threshold.is_active is True
    assert threshold.cooldown_minutes == DEFAULT_COOLDOWN_MINUTES


def test_threshold_from_partial_payload() -> None:
    threshold = AlertThreshold.from_dict(
        {
            "id": "t1",
            "metric": "profitMargin.current",
            "threshold": "15",
            "operator": "less_than",
            "notification_methods": ["email", "sms"],
        }
    )

    assert threshold.threshold == 15.0
    assert threshold.operator is AlertOperator.LESS_THAN
    assert threshold.recipients == []
    assert threshold.notification_methods == [
        NotificationMethod.EMAIL,
        NotificationMethod.SMS,
    ]
    assert AlertThreshold.from_dict(threshold.to_dict()) == threshold


def test_operator_label() -> None:
    assert AlertOperator.NOT_EQUALS.label == "not equals"


def test_notification_serialization() -> None:
    notification = AlertNotification(
        alert_id="t1",
        message="Sales dropped",
        severity=AlertSeverity.HIGH,
        channels=[NotificationMethod.EMAIL],
        triggered_at=datetime(2024, 6, 3, 12, tzinfo=timezone.utc),
    )

    payload = notification.to_dict()

    assert payload["triggered_at"] == "2024-06-03T12:00:00+00:00"
    assert payload["acknowledged"] is False
    assert AlertNotification.from_dict(payload) == notification
