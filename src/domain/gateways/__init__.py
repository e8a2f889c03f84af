"""
Domain Gateways Package

Interfaces for the external systems the analytics engine consumes.
"""

from .metrics_provider import IMetricsProvider
from .notification_gateway import IEmailGateway, ISMSGateway
from .record_store_gateway import IRecordStoreGateway, RecordFilter

__all__ = [
    "IEmailGateway",
    "IMetricsProvider",
    "IRecordStoreGateway",
    "ISMSGateway",
    "RecordFilter",
]
