"""
Domain Errors

This module defines the error taxonomy of the analytics engine.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InsufficientHistoryError(DomainError):
    """Raised when too few distinct days of history exist to forecast."""

    def __init__(
        self,
        available_days: int,
        required_days: int,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.available_days = available_days
        self.required_days = required_days
        message = (
            "Insufficient historical data for forecasting: "
            f"{available_days} day(s) available, minimum {required_days} required"
        )
        super().__init__(message, details)


class StorageUnavailableError(DomainError):
    """Raised by key-value stores when the durable backend cannot be used."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class RecordStoreError(DomainError):
    """Raised when the record store cannot be queried or written."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class AlertThresholdNotFoundError(DomainError):
    """Raised when an alert threshold cannot be found."""

    def __init__(self, threshold_id: str, details: Optional[Dict[str, Any]] = None):
        self.threshold_id = threshold_id
        message = f"Alert threshold with ID {threshold_id} not found"
        super().__init__(message, details)


class AlertConfigParseError(DomainError):
    """Raised when persisted alert configuration cannot be decoded."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class AlertDeliveryError(DomainError):
    """Raised when a notification transport fails to deliver an alert."""

    def __init__(
        self,
        channel: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.channel = channel
        super().__init__(message, details)
