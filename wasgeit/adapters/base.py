"""
Base class for venue adapters.

An adapter binds one venue to:
- fragment_selector: CSS selector for one node per candidate event
- title_selector: CSS selector for the title inside a fragment
- date_time_format: strptime template for the extracted date-time text
- extract_date_time / extract_title / extract_link

Adapters are built once at startup and cannot be modified afterwards.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from bs4 import Tag

from ..errors import ExtractionError
from ..models import DateTimeFormat, RawDateTime, Venue
from ..normalize import clean_whitespace


def select_text(fragment: Tag, selector: str) -> str:
    """Concatenated text of every element matching selector (may be empty)."""
    return "".join(el.get_text() for el in fragment.select(selector))


def select_required(fragment: Tag, selector: str) -> Tag:
    """First element matching selector.

    Raises:
        ExtractionError: If nothing matches
    """
    element = fragment.select_one(selector)
    if element is None:
        raise ExtractionError(f"no element matches '{selector}'")
    return element


def select_attr(fragment: Tag, selector: str, attr: str) -> str:
    """Attribute of the first element matching selector, or ''."""
    element = fragment.select_one(selector)
    if element is None:
        return ""
    return element.get(attr) or ""


def optional_attr(tag: Optional[Tag], attr: str) -> str:
    if tag is None:
        return ""
    return tag.get(attr) or ""


class VenueAdapter(ABC):
    """Per-venue extraction strategy used by the crawl engine."""

    venue_key: str = ""
    fragment_selector: str = ""
    title_selector: str = ""
    date_time_format: DateTimeFormat

    def __init__(self, registry: Any):
        """Bind the adapter to its venue.

        Args:
            registry: VenueRegistry used to resolve venue_key

        Raises:
            ConfigurationError: If venue_key is not registered
        """
        self.venue: Venue = registry.require(self.venue_key)
        self._frozen = True

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, "_frozen", False):
            raise AttributeError(f"{type(self).__name__} is immutable")
        super().__setattr__(name, value)

    @abstractmethod
    def extract_date_time(self, fragment: Tag) -> RawDateTime:
        """Cut the date and clock text for one event out of its fragment."""

    def extract_title(self, fragment: Tag) -> str:
        return clean_whitespace(select_text(fragment, self.title_selector))

    def extract_link(self, fragment: Tag) -> str:
        """Event link, possibly relative; '' means use the venue URL."""
        return ""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} venue={self.venue_key!r}>"
