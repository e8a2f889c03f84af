"""
Alert DTOs - Application Layer

Data Transfer Objects for alert threshold management, alert history and
threshold checks.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from src.domain.entities.alert import (
    DEFAULT_COOLDOWN_MINUTES,
    AlertNotification,
    AlertOperator,
    AlertSeverity,
    AlertThreshold,
    NotificationMethod,
)


class AlertThresholdCreateDTO(BaseModel):
    """DTO for creating an alert threshold."""

    name: str = Field(default="", description="Human readable name")
    metric: str = Field(
        ..., min_length=1, description="Dotted path into the metrics object"
    )
    threshold: float = Field(..., description="Value the metric is compared to")
    operator: AlertOperator
    severity: AlertSeverity = AlertSeverity.MEDIUM
    is_active: bool = True
    cooldown_minutes: int = Field(default=DEFAULT_COOLDOWN_MINUTES, ge=0)
    recipients: List[str] = Field(default_factory=list)
    notification_methods: List[NotificationMethod] = Field(
        default_factory=lambda: [NotificationMethod.DASHBOARD]
    )

    def to_entity(self) -> AlertThreshold:
        return AlertThreshold(
            name=self.name,
            metric=self.metric,
            threshold=self.threshold,
            operator=self.operator,
            severity=self.severity,
            is_active=self.is_active,
            cooldown_minutes=self.cooldown_minutes,
            recipients=list(self.recipients),
            notification_methods=list(self.notification_methods),
        )

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Sales Drop Alert",
                "metric": "totalSales.current",
                "threshold": 5000,
                "operator": "less_than",
                "severity": "high",
                "is_active": True,
                "cooldown_minutes": 60,
                "recipients": ["manager@example.com"],
                "notification_methods": ["email", "dashboard"],
            }
        }
    }


class AlertThresholdUpdateDTO(BaseModel):
    """DTO for partially updating an alert threshold."""

    name: Optional[str] = None
    metric: Optional[str] = Field(default=None, min_length=1)
    threshold: Optional[float] = None
    operator: Optional[AlertOperator] = None
    severity: Optional[AlertSeverity] = None
    is_active: Optional[bool] = None
    cooldown_minutes: Optional[int] = Field(default=None, ge=0)
    recipients: Optional[List[str]] = None
    notification_methods: Optional[List[NotificationMethod]] = None


class AlertThresholdResponseDTO(BaseModel):
    id: str
    name: str
    metric: str
    threshold: float
    operator: AlertOperator
    severity: AlertSeverity
    is_active: bool
    cooldown_minutes: int
    recipients: List[str]
    notification_methods: List[NotificationMethod]

    @classmethod
    def from_entity(cls, threshold: AlertThreshold) -> "AlertThresholdResponseDTO":
        return cls(
            id=threshold.id,
            name=threshold.name,
            metric=threshold.metric,
            threshold=threshold.threshold,
            operator=threshold.operator,
            severity=threshold.severity,
            is_active=threshold.is_active,
            cooldown_minutes=threshold.cooldown_minutes,
            recipients=list(threshold.recipients),
            notification_methods=list(threshold.notification_methods),
        )


class AlertNotificationDTO(BaseModel):
    id: str
    alert_id: str
    message: str
    severity: AlertSeverity
    triggered_at: datetime
    channels: List[NotificationMethod]
    acknowledged: bool

    @classmethod
    def from_entity(cls, notification: AlertNotification) -> "AlertNotificationDTO":
        return cls(
            id=notification.id,
            alert_id=notification.alert_id,
            message=notification.message,
            severity=notification.severity,
            triggered_at=notification.triggered_at,
            channels=list(notification.channels),
            acknowledged=notification.acknowledged,
        )


class AlertCheckRequestDTO(BaseModel):
    """Metrics to evaluate against the active thresholds."""

    metrics: Dict[str, Any] = Field(
        ..., description="Nested metrics object, e.g. {'totalSales': {'current': 1}}"
    )
    dispatch: bool = Field(
        default=True, description="Send email/SMS notifications for fired alerts"
    )


class DispatchFailureDTO(BaseModel):
    alert_id: str
    channel: NotificationMethod
    error: str


class AlertCheckResponseDTO(BaseModel):
    fired: List[str] = Field(default_factory=list)
    failures: List[DispatchFailureDTO] = Field(default_factory=list)


class AlertTestRequestDTO(BaseModel):
    """Recipients of the synthetic test alert email."""

    recipients: List[str] = Field(default_factory=lambda: ["test@example.com"])
