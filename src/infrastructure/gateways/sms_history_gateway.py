"""
Infrastructure Gateway - SMS History

SMS alerts are recorded as rows of the SMS history table in the record
store, where the messaging worker picks them up.
"""

from datetime import datetime, timezone
from typing import Callable, List

import structlog

from src.domain.entities.alert import NotificationMethod
from src.domain.entities.errors import AlertDeliveryError, RecordStoreError
from src.domain.gateways.notification_gateway import ISMSGateway
from src.domain.gateways.record_store_gateway import IRecordStoreGateway

logger = structlog.get_logger(__name__)

SMS_HISTORY_TABLE_ID = 12613
SYSTEM_USER_ID = 1


class SMSHistoryGateway(ISMSGateway):
    """Writes outgoing SMS alerts into the SMS history table."""

    def __init__(
        self,
        record_store: IRecordStoreGateway,
        table_id: int = SMS_HISTORY_TABLE_ID,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.record_store = record_store
        self.table_id = table_id
        self._clock = clock

    async def send_sms(self, recipients: List[str], message: str) -> None:
        row = {
            # System alerts are not tied to a license or contact
            "license_id": 0,
            "contact_id": 0,
            "mobile_number": ", ".join(recipients),
            "message_content": message,
            "sent_date": self._clock().isoformat(),
            "delivery_status": "Sent",
            "days_before_expiry": 0,
            "created_by": SYSTEM_USER_ID,
        }
        try:
            await self.record_store.create(self.table_id, row)
        except RecordStoreError as exc:
            raise AlertDeliveryError(
                channel=NotificationMethod.SMS.value,
                message=f"Failed to record SMS alert: {exc.message}",
                details=exc.details,
            ) from exc

        logger.info("sms.recorded", recipients=len(recipients), table_id=self.table_id)
