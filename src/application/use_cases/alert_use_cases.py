"""
Alert Use Cases - Application Layer

This module contains the alert engine: threshold evaluation against the
current metrics with per-threshold cooldown, notification dispatch over
email and SMS, the bounded alert history and threshold management.
"""

import html
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

import structlog
from dependency_injector.wiring import Provide, inject

from src.domain.entities.alert import (
    AlertNotification,
    AlertOperator,
    AlertSeverity,
    AlertThreshold,
    NotificationMethod,
)
from src.domain.entities.errors import (
    AlertConfigParseError,
    AlertDeliveryError,
    AlertThresholdNotFoundError,
    DomainError,
)
from src.domain.gateways.notification_gateway import IEmailGateway, ISMSGateway
from src.domain.repositories.alert_repository import (
    IAlertHistoryRepository,
    IAlertThresholdRepository,
)
from src.domain.services.formatting import describe_condition, format_metric_value
from src.domain.services.metric_path import Found, NotFound, lookup_metric

from ..dtos.alert_dto import (
    AlertThresholdCreateDTO,
    AlertThresholdUpdateDTO,
    DispatchFailureDTO,
)

logger = structlog.get_logger(__name__)

HISTORY_LIMIT = 100
DEFAULT_HISTORY_PAGE = 50


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def default_alert_thresholds() -> List[AlertThreshold]:
    """Thresholds in effect until a configuration has been saved."""
    return [
        AlertThreshold(
            id="sales_drop_threshold",
            name="Sales Drop Alert",
            metric="totalSales.current",
            threshold=5000,
            operator=AlertOperator.LESS_THAN,
            severity=AlertSeverity.HIGH,
            cooldown_minutes=60,
            notification_methods=[NotificationMethod.DASHBOARD],
        ),
        AlertThreshold(
            id="expense_spike_threshold",
            name="Expense Spike Alert",
            metric="expenses.total",
            threshold=2000,
            operator=AlertOperator.GREATER_THAN,
            severity=AlertSeverity.MEDIUM,
            cooldown_minutes=120,
            notification_methods=[NotificationMethod.DASHBOARD],
        ),
        AlertThreshold(
            id="margin_low_threshold",
            name="Low Profit Margin Alert",
            metric="profitMargin.current",
            threshold=15,
            operator=AlertOperator.LESS_THAN,
            severity=AlertSeverity.HIGH,
            cooldown_minutes=240,
            notification_methods=[NotificationMethod.DASHBOARD],
        ),
    ]


def evaluate_threshold(value: float, threshold: float, operator: AlertOperator) -> bool:
    if operator == AlertOperator.GREATER_THAN:
        return value > threshold
    if operator == AlertOperator.LESS_THAN:
        return value < threshold
    if operator == AlertOperator.EQUALS:
        return value == threshold
    if operator == AlertOperator.NOT_EQUALS:
        return value != threshold
    # percentage_change has no previous value to compare against
    return False


def _current_value_label(threshold: AlertThreshold, metrics: Any) -> str:
    lookup = lookup_metric(metrics, threshold.metric)
    if isinstance(lookup, Found):
        return format_metric_value(lookup.value, threshold.metric)
    return "n/a"


def render_email_alert(
    threshold: AlertThreshold, current_value: str, triggered_at: datetime
) -> Tuple[str, str]:
    """Return the (html, text) bodies of an alert email."""
    metric = html.escape(threshold.metric)
    condition = html.escape(describe_condition(threshold))
    timestamp = triggered_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    title = threshold.name or "Analytics Alert Triggered"

    html_body = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background: #f8d7da; color: #721c24; padding: 15px; border-radius: 8px;">
    <h2 style="margin: 0;">{html.escape(title)}</h2>
  </div>
  <div style="background: #f9f9f9; padding: 20px; border-radius: 8px;">
    <h3 style="margin-top: 0;">Alert Details</h3>
    <p><strong>Metric:</strong> {metric}</p>
    <p><strong>Current Value:</strong> {html.escape(current_value)}</p>
    <p><strong>Threshold:</strong> {condition}</p>
    <p><strong>Severity:</strong> {threshold.severity.value}</p>
    <p><strong>Triggered At:</strong> {timestamp}</p>
  </div>
  <p>Please review your dashboard for more details and take appropriate action.</p>
</div>
""".strip()

    text_body = "\n".join(
        [
            title,
            "",
            "Alert Details:",
            f"- Metric: {threshold.metric}",
            f"- Current Value: {current_value}",
            f"- Threshold: {describe_condition(threshold)}",
            f"- Severity: {threshold.severity.value}",
            f"- Triggered At: {timestamp}",
            "",
            "Please review your dashboard for more details and take appropriate action.",
        ]
    )
    return html_body, text_body


def render_sms_alert(threshold: AlertThreshold, current_value: str) -> str:
    return (
        f"Alert: {threshold.metric} is {current_value} "
        f"(threshold: {describe_condition(threshold)}). "
        "Check dashboard for details."
    )


class AlertEngine:
    """Evaluates alert thresholds and manages their configuration and history."""

    @inject
    def __init__(
        self,
        threshold_repository: IAlertThresholdRepository = Provide[
            "alert_threshold_repository"
        ],
        history_repository: IAlertHistoryRepository = Provide[
            "alert_history_repository"
        ],
        email_gateway: IEmailGateway = Provide["email_gateway"],
        sms_gateway: ISMSGateway = Provide["sms_gateway"],
        history_limit: int = HISTORY_LIMIT,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.threshold_repository = threshold_repository
        self.history_repository = history_repository
        self.email_gateway = email_gateway
        self.sms_gateway = sms_gateway
        self.history_limit = history_limit
        self._clock = clock
        self._last_fired: Dict[str, datetime] = {}

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def is_in_cooldown(self, threshold: AlertThreshold, now: datetime) -> bool:
        last_fired = self._last_fired.get(threshold.id)
        if last_fired is None:
            return False
        return now - last_fired < timedelta(minutes=threshold.cooldown_minutes)

    async def check_thresholds(
        self,
        metrics: Dict[str, Any],
        thresholds: Optional[List[AlertThreshold]] = None,
    ) -> List[AlertThreshold]:
        """
        Evaluate thresholds against a metrics snapshot.

        Inactive and cooling-down thresholds are skipped, as are thresholds
        whose metric path does not resolve to a number. Each breach is
        appended to the history and restarts the threshold's cooldown.

        Args:
            metrics: Nested metrics object
            thresholds: Thresholds to evaluate; the configured ones if omitted

        Returns:
            The thresholds that fired
        """
        if thresholds is None:
            thresholds = await self.get_alert_thresholds()

        fired: List[AlertThreshold] = []
        for threshold in thresholds:
            try:
                if await self._check_one(threshold, metrics):
                    fired.append(threshold)
            except Exception as exc:
                logger.exception(
                    "alerts.check.threshold_failed",
                    threshold_id=threshold.id,
                    error=str(exc),
                )

        logger.info(
            "alerts.check.completed",
            evaluated=len(thresholds),
            fired=[threshold.id for threshold in fired],
        )
        return fired

    async def _check_one(self, threshold: AlertThreshold, metrics: Dict[str, Any]) -> bool:
        if not threshold.is_active:
            return False

        now = self._clock()
        if self.is_in_cooldown(threshold, now):
            logger.debug("alerts.check.cooldown", threshold_id=threshold.id)
            return False

        lookup = lookup_metric(metrics, threshold.metric)
        if not isinstance(lookup, Found):
            logger.debug(
                "alerts.check.metric_unavailable",
                threshold_id=threshold.id,
                metric=threshold.metric,
                reason="missing" if isinstance(lookup, NotFound) else "not_numeric",
            )
            return False

        if not evaluate_threshold(lookup.value, threshold.threshold, threshold.operator):
            return False

        self._last_fired[threshold.id] = now
        await self._log_alert(threshold, lookup.value, now)
        return True

    async def _log_alert(
        self, threshold: AlertThreshold, value: float, triggered_at: datetime
    ) -> None:
        notification = AlertNotification(
            alert_id=threshold.id,
            message=(
                f"Alert triggered: {threshold.metric} value "
                f"{format_metric_value(value, threshold.metric)} "
                f"{describe_condition(threshold)}"
            ),
            severity=threshold.severity,
            channels=list(threshold.notification_methods),
            triggered_at=triggered_at,
        )
        try:
            history = await self.history_repository.load()
            history.insert(0, notification)
            await self.history_repository.save(history[: self.history_limit])
        except DomainError as exc:
            logger.warning(
                "alerts.history.append_failed",
                threshold_id=threshold.id,
                error=exc.message,
            )
            return

        logger.warning(
            "alerts.triggered",
            threshold_id=threshold.id,
            metric=threshold.metric,
            value=value,
            severity=threshold.severity.value,
        )

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    async def send_email_alert(
        self, threshold: AlertThreshold, metrics: Dict[str, Any]
    ) -> None:
        """
        Email the threshold's recipients about a breach.

        Raises:
            AlertDeliveryError: When there are no recipients or the transport fails
        """
        if not threshold.recipients:
            raise AlertDeliveryError(
                channel=NotificationMethod.EMAIL.value,
                message=f"No recipients configured for alert {threshold.id}",
            )

        html_body, text_body = render_email_alert(
            threshold, _current_value_label(threshold, metrics), self._clock()
        )
        await self.email_gateway.send_email(
            to=list(threshold.recipients),
            subject=f"Analytics Alert: {threshold.metric}",
            html=html_body,
            text=text_body,
        )
        logger.info(
            "alerts.email.sent",
            threshold_id=threshold.id,
            recipients=len(threshold.recipients),
        )

    async def send_sms_alert(
        self, threshold: AlertThreshold, metrics: Dict[str, Any]
    ) -> None:
        """
        Send the SMS form of an alert.

        Raises:
            AlertDeliveryError: When the transport fails
        """
        message = render_sms_alert(threshold, _current_value_label(threshold, metrics))
        await self.sms_gateway.send_sms(list(threshold.recipients), message)
        logger.info("alerts.sms.sent", threshold_id=threshold.id)

    async def dispatch_alerts(
        self, fired: List[AlertThreshold], metrics: Dict[str, Any]
    ) -> List[DispatchFailureDTO]:
        """
        Deliver each fired alert on each of its channels.

        Channels are attempted independently; failures are collected and
        returned instead of interrupting the remaining deliveries.
        """
        failures: List[DispatchFailureDTO] = []
        for threshold in fired:
            for method in threshold.notification_methods:
                try:
                    if method == NotificationMethod.EMAIL:
                        await self.send_email_alert(threshold, metrics)
                    elif method == NotificationMethod.SMS:
                        await self.send_sms_alert(threshold, metrics)
                except DomainError as exc:
                    logger.error(
                        "alerts.dispatch.failed",
                        threshold_id=threshold.id,
                        channel=method.value,
                        error=exc.message,
                    )
                    failures.append(
                        DispatchFailureDTO(
                            alert_id=threshold.id, channel=method, error=exc.message
                        )
                    )
        return failures

    async def test_alert_system(self, recipients: Optional[List[str]] = None) -> None:
        """
        Send a synthetic alert email to verify the email transport.

        Raises:
            AlertDeliveryError: When the test email cannot be delivered
        """
        test_threshold = AlertThreshold(
            id="test_alert",
            name="Test Alert",
            metric="test.metric",
            threshold=100,
            operator=AlertOperator.GREATER_THAN,
            recipients=list(recipients or ["test@example.com"]),
            notification_methods=[NotificationMethod.EMAIL],
        )
        await self.send_email_alert(test_threshold, {"test": {"metric": 150}})
        logger.info("alerts.test.completed")

    # ------------------------------------------------------------------
    # Threshold management
    # ------------------------------------------------------------------

    async def get_alert_thresholds(self) -> List[AlertThreshold]:
        """Stored thresholds, or the defaults when none (or only garbage) is stored."""
        if not await self.threshold_repository.exists():
            return default_alert_thresholds()
        try:
            return await self.threshold_repository.find_all()
        except AlertConfigParseError as exc:
            logger.warning("alerts.thresholds.corrupt", error=exc.message)
            return default_alert_thresholds()

    async def get_alert_threshold(self, threshold_id: str) -> AlertThreshold:
        for threshold in await self.get_alert_thresholds():
            if threshold.id == threshold_id:
                return threshold
        raise AlertThresholdNotFoundError(threshold_id)

    async def create_alert_threshold(
        self, threshold_dto: AlertThresholdCreateDTO
    ) -> AlertThreshold:
        thresholds = await self.get_alert_thresholds()
        threshold = threshold_dto.to_entity()
        thresholds.append(threshold)
        await self.threshold_repository.save_all(thresholds)
        logger.info("alerts.threshold.created", threshold_id=threshold.id)
        return threshold

    async def update_alert_threshold(
        self, threshold_id: str, update_dto: AlertThresholdUpdateDTO
    ) -> AlertThreshold:
        """
        Apply a partial update to a threshold.

        Raises:
            AlertThresholdNotFoundError: If no threshold has the given ID
        """
        thresholds = await self.get_alert_thresholds()
        for threshold in thresholds:
            if threshold.id == threshold_id:
                break
        else:
            raise AlertThresholdNotFoundError(threshold_id)

        for field_name, value in update_dto.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            setattr(threshold, field_name, value)

        await self.threshold_repository.save_all(thresholds)
        logger.info("alerts.threshold.updated", threshold_id=threshold_id)
        return threshold

    async def delete_alert_threshold(self, threshold_id: str) -> None:
        thresholds = await self.get_alert_thresholds()
        remaining = [t for t in thresholds if t.id != threshold_id]
        await self.threshold_repository.save_all(remaining)
        self._last_fired.pop(threshold_id, None)
        logger.info(
            "alerts.threshold.deleted",
            threshold_id=threshold_id,
            existed=len(remaining) != len(thresholds),
        )

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    async def get_alert_history(
        self, limit: int = DEFAULT_HISTORY_PAGE
    ) -> List[AlertNotification]:
        history = await self.history_repository.load()
        return history[:limit]

    async def clear_alert_history(self) -> None:
        await self.history_repository.clear()
        logger.info("alerts.history.cleared")

    async def acknowledge_alert(self, notification_id: str) -> bool:
        """
        Mark a history record as acknowledged.

        Returns:
            Whether a record with the given ID exists
        """
        history = await self.history_repository.load()
        found = False
        for notification in history:
            if notification.id == notification_id:
                notification.acknowledged = True
                found = True

        if found:
            await self.history_repository.save(history)
        return found
