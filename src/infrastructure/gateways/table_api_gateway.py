"""
Infrastructure Gateway - Table API Implementation

This module implements the record store gateway against the HTTP table
API that stores the daily sales reports and the SMS history.
"""

from typing import Any, Dict, List, Optional

import httpx
import structlog

from src.domain.entities.errors import RecordStoreError
from src.domain.gateways.record_store_gateway import IRecordStoreGateway, RecordFilter

logger = structlog.get_logger(__name__)


class TableAPIGateway(IRecordStoreGateway):
    """Record store gateway using an async HTTP client."""

    def __init__(self, base_url: str, api_token: Optional[str] = None, timeout: float = 30.0):
        """
        Initialize the table API gateway.

        Args:
            base_url: Base URL of the table API (e.g., "http://records:8080")
            api_token: Bearer token sent with every request
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    async def query_page(
        self,
        table_id: int,
        page: int = 1,
        page_size: int = 1000,
        order_by: Optional[str] = None,
        is_asc: bool = True,
        filters: Optional[List[RecordFilter]] = None,
    ) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/api/tables/{table_id}/page"
        payload: Dict[str, Any] = {
            "PageNo": page,
            "PageSize": page_size,
            "IsAsc": is_asc,
            "Filters": [item.to_payload() for item in filters or []],
        }
        if order_by:
            payload["OrderByField"] = order_by

        logger.debug("record_store.query", table_id=table_id, page=page)
        body = await self._post(url, payload, table_id)
        data = body.get("data") or {}
        rows = data.get("List") if isinstance(data, dict) else None
        return list(rows or [])

    async def create(self, table_id: int, data: Dict[str, Any]) -> None:
        url = f"{self.base_url}/api/tables/{table_id}/records"
        logger.debug("record_store.create", table_id=table_id)
        await self._post(url, data, table_id)

    async def _post(
        self, url: str, payload: Dict[str, Any], table_id: int
    ) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload, headers=self._headers())
                response.raise_for_status()
                body = response.json() if response.content else {}

        except httpx.HTTPStatusError as e:
            logger.error(
                "record_store.http_error",
                status_code=e.response.status_code,
                response_text=e.response.text,
                url=url,
            )
            raise RecordStoreError(
                f"Record store HTTP error {e.response.status_code}: {e.response.text}",
                details={"table_id": table_id},
            ) from e

        except httpx.RequestError as e:
            logger.error("record_store.request_error", error=str(e), url=url)
            raise RecordStoreError(
                f"Record store request failed: {str(e)}", details={"table_id": table_id}
            ) from e

        except ValueError as e:
            logger.error("record_store.invalid_json", error=str(e), url=url)
            raise RecordStoreError(
                "Record store returned an invalid JSON body",
                details={"table_id": table_id},
            ) from e

        if not isinstance(body, dict):
            raise RecordStoreError(
                "Record store returned an unexpected body",
                details={"table_id": table_id},
            )

        # The API reports application errors in the body with a 200 status
        if body.get("error"):
            logger.error("record_store.api_error", error=body["error"], url=url)
            raise RecordStoreError(
                f"Record store error: {body['error']}", details={"table_id": table_id}
            )
        return body
