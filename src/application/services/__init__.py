"""
Services Package - Application Layer

Stateful application services shared by the use cases.
"""

from .analytics_cache import AnalyticsCache
from .result_cache import ResultCache, build_cache_key

__all__ = ["AnalyticsCache", "ResultCache", "build_cache_key"]
