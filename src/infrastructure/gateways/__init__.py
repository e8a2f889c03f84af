"""
Gateways Package - Infrastructure Layer

This package contains concrete implementations of the gateway
interfaces defined in the domain layer. These implementations
handle the details of external service communications.
"""

from .email_gateway import HTTPEmailGateway
from .sales_metrics_provider import SalesMetricsProvider
from .sms_history_gateway import SMSHistoryGateway
from .table_api_gateway import TableAPIGateway

__all__ = [
    "HTTPEmailGateway",
    "SalesMetricsProvider",
    "SMSHistoryGateway",
    "TableAPIGateway",
]
