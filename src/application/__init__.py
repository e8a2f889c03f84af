"""
Application Layer Package

This package contains the application-specific business rules
and use cases. It orchestrates the flow of data to and from
the domain entities and directs them to use their business logic
to achieve the application's goals.
"""

# Re-export submodules
from src.application import dtos, services, use_cases

__all__ = ["dtos", "services", "use_cases"]
