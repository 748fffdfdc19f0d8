"""
Pydantic models for venue and event data structures.

These models define the core data types used throughout the crawler:
- Venue: Static metadata for a crawled venue
- DateTimeFormat / RawDateTime: Per-venue parse template and extracted text
- Event: One normalized program entry
- ExtractionFailure / CrawlResult: Outcome of crawling one document
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field
from datetime import datetime
from typing import Optional
import hashlib


class Venue(BaseModel):
    """Represents a venue whose program page is crawled."""

    model_config = ConfigDict(frozen=True)

    short_name: str  # stable key, e.g. "dachstock"
    name: str
    url: str  # canonical base URL, also the fallback event link


class DateTimeFormat(BaseModel):
    """strptime directives for a venue's date text and optional clock text."""

    model_config = ConfigDict(frozen=True)

    date: str
    time: Optional[str] = None

    @property
    def pattern(self) -> str:
        """Full template, always date-then-time."""
        return self.date + (self.time or "")

    @property
    def has_year(self) -> bool:
        return "%Y" in self.date or "%y" in self.date


class RawDateTime(BaseModel):
    """Date and clock text as extracted from a fragment, before parsing."""

    model_config = ConfigDict(frozen=True)

    date_text: str
    time_text: str = ""

    @property
    def text(self) -> str:
        return self.date_text + self.time_text


class NormalizedDateTime(BaseModel):
    """Parsed timestamp plus whether the clock time came from the source."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    time_known: bool = True


class Event(BaseModel):
    """Represents a single normalized event from a venue program."""

    title: str
    start: datetime  # naive local time
    time_known: bool = True  # False means start is at the midnight sentinel
    link: str
    venue: Venue

    fetched_at: datetime = Field(default_factory=datetime.now)

    @computed_field
    @property
    def unique_key(self) -> str:
        """Generate unique key for deduplication."""
        normalized_title = " ".join(self.title.lower().split())
        date_str = self.start.strftime("%Y-%m-%d")
        key_string = f"{normalized_title}|{date_str}|{self.venue.short_name}"

        return hashlib.md5(key_string.encode()).hexdigest()


class ExtractionFailure(BaseModel):
    """Records one fragment that could not be turned into an event."""

    venue: str
    fragment_index: int
    snippet: str
    reason: str
    format: Optional[str] = None


class CrawlResult(BaseModel):
    """Events and per-fragment failures from crawling one document."""

    venue: str
    events: list[Event] = Field(default_factory=list)
    errors: list[ExtractionFailure] = Field(default_factory=list)

    @computed_field
    @property
    def ok(self) -> bool:
        """True when every candidate fragment produced an event."""
        return not self.errors


class VenueCrawlReport(BaseModel):
    """Result of fetching and crawling one venue."""

    venue: str
    result: Optional[CrawlResult] = None
    fetch_error: Optional[str] = None
    duration_ms: Optional[int] = None

    @computed_field
    @property
    def status(self) -> str:
        if self.fetch_error:
            return "error"
        if self.result and self.result.errors:
            return "partial"
        return "success"
