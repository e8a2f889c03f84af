"""
Domain Service - Metric Path Lookup

Resolves dotted metric paths (``totalSales.current``) against a nested
metrics object. The result says explicitly whether a number was found,
the path does not exist, or it exists but does not hold a number, so a
missing metric is never confused with a zero-valued one.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class Found:
    value: float


@dataclass(frozen=True)
class NotFound:
    path: str
    missing_key: str


@dataclass(frozen=True)
class WrongType:
    path: str
    actual_type: str


MetricLookup = Union[Found, NotFound, WrongType]


def lookup_metric(metrics: Any, path: str) -> MetricLookup:
    current = metrics
    for key in path.split("."):
        if not isinstance(current, Mapping) or key not in current:
            return NotFound(path=path, missing_key=key)
        current = current[key]

    # bool is an int subclass but never a metric value
    if isinstance(current, bool) or not isinstance(current, (int, float)):
        return WrongType(path=path, actual_type=type(current).__name__)
    return Found(value=float(current))
