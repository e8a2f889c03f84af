"""
Domain Entities - Alerts

Threshold configuration and the notification history produced when a
threshold fires.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List
from uuid import uuid4

DEFAULT_COOLDOWN_MINUTES = 30


class AlertOperator(str, Enum):
    """Comparison applied between a metric value and a threshold."""

    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    # Needs a previous value to compare against; never breaches for now.
    PERCENTAGE_CHANGE = "percentage_change"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class NotificationMethod(str, Enum):
    EMAIL = "email"
    SMS = "sms"
    DASHBOARD = "dashboard"


def _new_alert_id() -> str:
    return f"alert_{uuid4().hex[:12]}"


@dataclass
class AlertThreshold:
    """A configured alert rule evaluated against the current metrics."""

    metric: str
    threshold: float
    operator: AlertOperator
    id: str = field(default_factory=_new_alert_id)
    name: str = ""
    severity: AlertSeverity = AlertSeverity.MEDIUM
    is_active: bool = True
    cooldown_minutes: int = DEFAULT_COOLDOWN_MINUTES
    recipients: List[str] = field(default_factory=list)
    notification_methods: List[NotificationMethod] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "metric": self.metric,
            "threshold": self.threshold,
            "operator": self.operator.value,
            "severity": self.severity.value,
            "is_active": self.is_active,
            "cooldown_minutes": self.cooldown_minutes,
            "recipients": list(self.recipients),
            "notification_methods": [m.value for m in self.notification_methods],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "AlertThreshold":
        return cls(
            id=str(payload["id"]),
            name=payload.get("name", ""),
            metric=str(payload["metric"]),
            threshold=float(payload["threshold"]),
            operator=AlertOperator(payload["operator"]),
            severity=AlertSeverity(payload.get("severity", AlertSeverity.MEDIUM)),
            is_active=bool(payload.get("is_active", True)),
            cooldown_minutes=int(
                payload.get("cooldown_minutes", DEFAULT_COOLDOWN_MINUTES)
            ),
            recipients=list(payload.get("recipients") or []),
            notification_methods=[
                NotificationMethod(m) for m in payload.get("notification_methods") or []
            ],
        )


@dataclass
class AlertNotification:
    """History record of one threshold firing."""

    alert_id: str
    message: str
    severity: AlertSeverity
    channels: List[NotificationMethod] = field(default_factory=list)
    id: str = field(default_factory=_new_alert_id)
    triggered_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    acknowledged: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "alert_id": self.alert_id,
            "message": self.message,
            "severity": self.severity.value,
            "triggered_at": self.triggered_at.isoformat(),
            "channels": [c.value for c in self.channels],
            "acknowledged": self.acknowledged,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "AlertNotification":
        return cls(
            id=str(payload["id"]),
            alert_id=str(payload["alert_id"]),
            message=payload.get("message", ""),
            severity=AlertSeverity(payload.get("severity", AlertSeverity.MEDIUM)),
            triggered_at=datetime.fromisoformat(payload["triggered_at"]),
            channels=[NotificationMethod(c) for c in payload.get("channels") or []],
            acknowledged=bool(payload.get("acknowledged", False)),
        )
