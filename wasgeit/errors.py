"""Exception types raised while configuring adapters and crawling pages."""

from typing import Optional


class WasgeitError(Exception):
    """Base class for all crawler errors."""
    pass


class ConfigurationError(WasgeitError):
    """Raised at startup when the venue or adapter tables are inconsistent.

    All problems found in one validation pass are reported together.
    """

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "invalid configuration")


class UnknownVenueError(WasgeitError, KeyError):
    """Raised when a crawl is requested for a venue without an adapter."""

    def __init__(self, venue_key: str):
        super().__init__(venue_key)
        self.venue_key = venue_key

    def __str__(self) -> str:
        return f"No adapter for venue '{self.venue_key}'"


class ExtractionError(WasgeitError):
    """Raised when a single event fragment yields unusable data."""

    def __init__(self, reason: str, raw_text: str = "", venue_key: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.raw_text = raw_text
        self.venue_key = venue_key


class DateTimeParseError(ExtractionError):
    """Raised when extracted date-time text does not match the venue format."""

    def __init__(self, raw_text: str, format: str, venue_key: Optional[str] = None):
        super().__init__(
            f"'{raw_text}' does not match format '{format}'",
            raw_text=raw_text,
            venue_key=venue_key,
        )
        self.format = format
