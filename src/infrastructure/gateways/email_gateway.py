"""
Infrastructure Gateway - Email API Implementation

Sends alert emails through an HTTP email delivery API.
"""

from typing import Dict, List, Optional

import httpx
import structlog

from src.domain.entities.alert import NotificationMethod
from src.domain.entities.errors import AlertDeliveryError
from src.domain.gateways.notification_gateway import IEmailGateway

logger = structlog.get_logger(__name__)


class HTTPEmailGateway(IEmailGateway):
    """Email transport posting JSON messages to the delivery API."""

    def __init__(
        self,
        api_url: str,
        default_sender: str,
        api_token: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.api_url = api_url
        self.default_sender = default_sender
        self.api_token = api_token
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    async def send_email(
        self,
        to: List[str],
        subject: str,
        html: str,
        text: str,
        sender: Optional[str] = None,
    ) -> None:
        payload = {
            "from": sender or self.default_sender,
            "to": to,
            "subject": subject,
            "html": html,
            "text": text,
        }
        channel = NotificationMethod.EMAIL.value

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.api_url, json=payload, headers=self._headers()
                )
                response.raise_for_status()
                body = response.json() if response.content else {}

        except httpx.HTTPStatusError as e:
            logger.error(
                "email.http_error",
                status_code=e.response.status_code,
                response_text=e.response.text,
            )
            raise AlertDeliveryError(
                channel=channel,
                message=f"Email API HTTP error {e.response.status_code}",
                details={"response": e.response.text},
            ) from e

        except httpx.RequestError as e:
            logger.error("email.request_error", error=str(e))
            raise AlertDeliveryError(
                channel=channel, message=f"Email API request failed: {str(e)}"
            ) from e

        except ValueError as e:
            raise AlertDeliveryError(
                channel=channel, message="Email API returned an invalid JSON body"
            ) from e

        if isinstance(body, dict) and body.get("error"):
            logger.error("email.api_error", error=body["error"])
            raise AlertDeliveryError(
                channel=channel, message=f"Email API error: {body['error']}"
            )

        logger.info("email.sent", recipients=len(to), subject=subject)
