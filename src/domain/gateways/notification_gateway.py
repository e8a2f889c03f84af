"""
Domain Gateway - Notification Transports

Interfaces of the channels used to deliver alert notifications.
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class IEmailGateway(ABC):
    """Interface for the outbound email transport."""

    @abstractmethod
    async def send_email(
        self,
        to: List[str],
        subject: str,
        html: str,
        text: str,
        sender: Optional[str] = None,
    ) -> None:
        """
        Send an email.

        Raises:
            AlertDeliveryError: When the transport reports an error
        """
        pass


class ISMSGateway(ABC):
    """Interface for the SMS transport."""

    @abstractmethod
    async def send_sms(self, recipients: List[str], message: str) -> None:
        """
        Send (or record) an SMS message.

        Raises:
            AlertDeliveryError: When the transport reports an error
        """
        pass
