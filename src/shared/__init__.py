"""
Shared module - Cross-cutting concerns / Shared Layer

This module provides shared utilities, constants, and enums that are used
across multiple layers of the analytics engine:
- Environment names and log levels
- Storage keys shared by the cache and the alert repositories
- Structured logging bootstrap

It must not depend on Infrastructure or Frameworks.
"""

from .consts import (
    ALL_STATIONS,
    EnumEnvironment,
    EnumLogLevel,
    EnumStorageBackend,
)
from .logging import configure_logging, get_logger, update_logging_from_settings

__all__ = [
    "ALL_STATIONS",
    "EnumEnvironment",
    "EnumLogLevel",
    "EnumStorageBackend",
    "configure_logging",
    "get_logger",
    "update_logging_from_settings",
]
