from __future__ import annotations

import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.domain.entities.alert import (
    AlertOperator,
    AlertSeverity,
    AlertThreshold,
    NotificationMethod,
)
from src.domain.entities.errors import (
    AlertDeliveryError,
    RecordStoreError,
    StorageUnavailableError,
)
from src.domain.gateways.notification_gateway import IEmailGateway, ISMSGateway
from src.domain.gateways.record_store_gateway import IRecordStoreGateway, RecordFilter
from src.domain.repositories.key_value_store import IKeyValueStore
from src.infrastructure.repositories.key_value_stores import InMemoryKeyValueStore


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeDateTimeClock:
    """Manually advanced clock returning aware datetimes."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 6, 3, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FailingKeyValueStore(IKeyValueStore):
    async def get_item(self, key: str) -> Optional[str]:
        raise StorageUnavailableError("storage down", details={"key": key})

    async def set_item(self, key: str, value: str) -> None:
        raise StorageUnavailableError("storage down", details={"key": key})

    async def remove_item(self, key: str) -> None:
        raise StorageUnavailableError("storage down", details={"key": key})


class StubRecordStore(IRecordStoreGateway):
    """Record store serving rows from memory with equality filters only."""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None, fail: bool = False):
        self.rows = list(rows or [])
        self.fail = fail
        self.queries: List[Dict[str, Any]] = []
        self.created: List[SimpleNamespace] = []

    async def query_page(
        self,
        table_id: int,
        page: int = 1,
        page_size: int = 1000,
        order_by: Optional[str] = None,
        is_asc: bool = True,
        filters: Optional[List[RecordFilter]] = None,
    ) -> List[Dict[str, Any]]:
        self.queries.append(
            {
                "table_id": table_id,
                "page": page,
                "page_size": page_size,
                "order_by": order_by,
                "filters": list(filters or []),
            }
        )
        if self.fail:
            raise RecordStoreError("record store down")

        matching = [row for row in self.rows if self._matches(row, filters or [])]
        start = (page - 1) * page_size
        return matching[start : start + page_size]

    async def create(self, table_id: int, data: Dict[str, Any]) -> None:
        if self.fail:
            raise RecordStoreError("record store down", details={"table_id": table_id})
        self.created.append(SimpleNamespace(table_id=table_id, data=data))

    @staticmethod
    def _matches(row: Dict[str, Any], filters: List[RecordFilter]) -> bool:
        for clause in filters:
            value = row.get(clause.name)
            if clause.op == "Equal" and value != clause.value:
                return False
            if clause.op == "GreaterThanOrEqual" and str(value) < str(clause.value):
                return False
            if clause.op == "LessThanOrEqual" and str(value) > str(clause.value):
                return False
        return True


class StubEmailGateway(IEmailGateway):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[Dict[str, Any]] = []

    async def send_email(
        self,
        to: List[str],
        subject: str,
        html: str,
        text: str,
        sender: Optional[str] = None,
    ) -> None:
        if self.fail:
            raise AlertDeliveryError(channel="email", message="smtp relay refused")
        self.sent.append({"to": to, "subject": subject, "html": html, "text": text})


class StubSMSGateway(ISMSGateway):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[Dict[str, Any]] = []

    async def send_sms(self, recipients: List[str], message: str) -> None:
        if self.fail:
            raise AlertDeliveryError(channel="sms", message="sms table unavailable")
        self.sent.append({"recipients": recipients, "message": message})


def make_report_rows(
    days: int,
    end: date,
    sales: float = 1000.0,
    gallons: float = 300.0,
    station: str = "Station A",
    expenses: Any = None,
) -> List[Dict[str, Any]]:
    """One daily report per day ending at ``end`` (inclusive)."""
    rows = []
    for offset in range(days):
        day = end - timedelta(days=days - 1 - offset)
        row: Dict[str, Any] = {
            "id": offset + 1,
            "report_date": day.isoformat(),
            "station": station,
            "total_sales": sales,
            "total_gallons": gallons,
        }
        if expenses is not None:
            row["expenses_data"] = expenses
        rows.append(row)
    return rows


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def fake_datetime_clock() -> FakeDateTimeClock:
    return FakeDateTimeClock()


@pytest.fixture()
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def failing_store() -> FailingKeyValueStore:
    return FailingKeyValueStore()


@pytest.fixture()
def email_gateway() -> StubEmailGateway:
    return StubEmailGateway()


@pytest.fixture()
def sms_gateway() -> StubSMSGateway:
    return StubSMSGateway()


@pytest.fixture()
def sales_drop_threshold() -> AlertThreshold:
    return AlertThreshold(
        id="sales_drop",
        name="Sales Drop",
        metric="totalSales.current",
        threshold=5000,
        operator=AlertOperator.LESS_THAN,
        severity=AlertSeverity.HIGH,
        cooldown_minutes=30,
        recipients=["manager@example.com"],
        notification_methods=[NotificationMethod.EMAIL, NotificationMethod.DASHBOARD],
    )


class FakeCollection:
    def __init__(self) -> None:
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.created_indexes: List[tuple[Any, ...]] = []

    def find_one(self, query: Dict[str, Any]) -> Dict[str, Any] | None:
        return self.documents.get(query.get("key"))

    def replace_one(
        self, query: Dict[str, Any], document: Dict[str, Any], upsert: bool = False
    ) -> Any:
        key = query["key"]
        matched = key in self.documents
        if matched or upsert:
            self.documents[key] = document
        return SimpleNamespace(matched_count=int(matched), acknowledged=True)

    def delete_one(self, query: Dict[str, Any]) -> Any:
        removed = self.documents.pop(query.get("key"), None)
        return SimpleNamespace(deleted_count=0 if removed is None else 1)

    def create_index(self, keys: Any, name: str | None = None, **kwargs: Any) -> Any:
        self.created_indexes.append((keys, name, kwargs))
        return name or keys


@pytest.fixture()
def record_store_factory():
    return StubRecordStore


@pytest.fixture()
def report_rows():
    return make_report_rows


@pytest.fixture()
def fake_collection() -> FakeCollection:
    return FakeCollection()


@pytest.fixture()
def failing_email_gateway() -> StubEmailGateway:
    return StubEmailGateway(fail=True)


@pytest.fixture()
def failing_sms_gateway() -> StubSMSGateway:
    return StubSMSGateway(fail=True)
