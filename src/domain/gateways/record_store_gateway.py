"""
Domain Gateway - Record Store

This module defines the gateway interface for the remote table API that
holds daily sales reports and the SMS history table.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class RecordFilter:
    """Filter clause of a table page query (e.g. ``report_date >= 2024-01-01``)."""

    name: str
    op: str
    value: Any

    def to_payload(self) -> Dict[str, Any]:
        return {"name": self.name, "op": self.op, "value": self.value}


class IRecordStoreGateway(ABC):
    """Interface for the paginated table query/create API."""

    @abstractmethod
    async def query_page(
        self,
        table_id: int,
        page: int = 1,
        page_size: int = 1000,
        order_by: Optional[str] = None,
        is_asc: bool = True,
        filters: Optional[List[RecordFilter]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Query one page of records from a table.

        Args:
            table_id: Identifier of the table
            page: 1-based page number
            page_size: Maximum number of records on the page
            order_by: Field used for ordering
            is_asc: Ascending order when True
            filters: Filter clauses combined with AND

        Returns:
            Raw records of the page

        Raises:
            RecordStoreError: When the query fails
        """
        pass

    @abstractmethod
    async def create(self, table_id: int, data: Dict[str, Any]) -> None:
        """
        Insert a record into a table.

        Raises:
            RecordStoreError: When the insert fails
        """
        pass

    async def query_all(
        self,
        table_id: int,
        page_size: int = 1000,
        order_by: Optional[str] = None,
        is_asc: bool = True,
        filters: Optional[List[RecordFilter]] = None,
    ) -> List[Dict[str, Any]]:
        """Read every page of a query; stops at the first short page."""
        rows: List[Dict[str, Any]] = []
        page = 1
        while True:
            batch = await self.query_page(
                table_id,
                page=page,
                page_size=page_size,
                order_by=order_by,
                is_asc=is_asc,
                filters=filters,
            )
            rows.extend(batch)
            if len(batch) < page_size:
                return rows
            page += 1
