"""Retry and health tracking for the fetch layer."""

from .health import HealthMonitor, VenueHealth
from .retry import RetryPolicy, describe_http_error, is_retryable

__all__ = [
    "describe_http_error",
    "HealthMonitor",
    "is_retryable",
    "RetryPolicy",
    "VenueHealth",
]
