"""
Domain Entities - Daily Sales Records

Raw rows of the daily sales report table, normalised into typed records.
The expense breakdown is modelled explicitly: ``None`` means the row carries
a breakdown that cannot be decoded, an empty list means the row carries no
expenses (including rows without the field).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

import structlog

logger = structlog.get_logger(__name__)

# Split applied to total expenses when reporting or forecasting by category
EXPENSE_CATEGORY_SHARES: Dict[str, float] = {
    "Fuel Purchases": 0.4,
    "Inventory": 0.25,
    "Utilities": 0.15,
    "Maintenance": 0.1,
    "Other": 0.1,
}


@dataclass(slots=True)
class ExpenseItem:
    """One entry of a report's expense breakdown."""

    amount: float
    category: Optional[str] = None


@dataclass(slots=True)
class DailyRecord:
    """A single station's daily sales report."""

    report_date: date
    station: Optional[str]
    total_sales: float
    total_gallons: float
    expenses: Optional[List[ExpenseItem]] = None

    @property
    def has_breakdown(self) -> bool:
        return self.expenses is not None

    @property
    def expenses_total(self) -> float:
        if self.expenses is None:
            return 0.0
        return sum(item.amount for item in self.expenses)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Optional["DailyRecord"]:
        """Build a record from a raw table row, or ``None`` without a usable date."""
        report_date = parse_report_date(record.get("report_date"))
        if report_date is None:
            logger.warning("records.invalid_report_date", record_id=record.get("id"))
            return None

        return cls(
            report_date=report_date,
            station=record.get("station"),
            total_sales=to_float(record.get("total_sales")),
            total_gallons=to_float(record.get("total_gallons")),
            expenses=parse_expense_breakdown(record.get("expenses_data")),
        )


def to_float(value: Any) -> float:
    """Lenient numeric coercion; anything unparseable counts as zero."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    if result != result:  # NaN
        return 0.0
    return result


def parse_report_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def parse_expense_breakdown(value: Any) -> Optional[List[ExpenseItem]]:
    """
    Decode the JSON-encoded expense breakdown of a report.

    Args:
        value: JSON string (or already decoded list) of ``{amount, ...}``.

    Returns:
        The expense items (empty when the field is absent), or ``None``
        when it cannot be decoded.
    """
    if value is None or value == "":
        return []

    payload: Any = value
    if isinstance(value, str):
        try:
            payload = json.loads(value)
        except ValueError:
            logger.debug("records.malformed_expenses_data")
            return None

    if not isinstance(payload, list):
        return None

    items: List[ExpenseItem] = []
    for entry in payload:
        if not isinstance(entry, dict):
            continue
        category = entry.get("category")
        items.append(
            ExpenseItem(
                amount=to_float(entry.get("amount")),
                category=str(category) if category is not None else None,
            )
        )
    return items
