from __future__ import annotations

import pytest

from src.domain.entities.errors import AlertDeliveryError
from src.infrastructure.gateways.sms_history_gateway import SMSHistoryGateway


@pytest.mark.asyncio
async def test_send_sms_records_history_row(
    record_store_factory, fake_datetime_clock
) -> None:
    store = record_store_factory()
    gateway = SMSHistoryGateway(store, table_id=12613, clock=fake_datetime_clock)

    await gateway.send_sms(["+15550100", "+15550101"], "Alert: sales low")

    created = store.created[0]
    assert created.table_id == 12613
    assert created.data == {
        "license_id": 0,
        "contact_id": 0,
        "mobile_number": "+15550100, +15550101",
        "message_content": "Alert: sales low",
        "sent_date": fake_datetime_clock.now.isoformat(),
        "delivery_status": "Sent",
        "days_before_expiry": 0,
        "created_by": 1,
    }


@pytest.mark.asyncio
async def test_send_sms_wraps_record_store_errors(record_store_factory) -> None:
    gateway = SMSHistoryGateway(record_store_factory(fail=True))

    with pytest.raises(AlertDeliveryError) as exc_info:
        await gateway.send_sms(["+15550100"], "Alert")

    assert exc_info.value.channel == "sms"
