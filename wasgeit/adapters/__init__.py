"""
Venue adapters.

Each adapter implements:
- extract_date_time(fragment) -> RawDateTime
- extract_title(fragment) -> str
- extract_link(fragment) -> str
"""

from .adapter_set import AdapterSet, build_adapter_set
from .base import VenueAdapter
from .venues import ADAPTER_CLASSES

__all__ = [
    "ADAPTER_CLASSES",
    "AdapterSet",
    "VenueAdapter",
    "build_adapter_set",
]
