"""
Per-venue crawl health.

Two things go wrong with a venue: the page cannot be fetched, or it is
fetched but the adapter no longer matches the markup. The second shows up
as a high share of fragments failing extraction, usually after a site
relaunch moved the dates around.
"""

from datetime import datetime
from typing import Optional

import structlog
from pydantic import BaseModel, Field, computed_field

from ..models import VenueCrawlReport

logger = structlog.get_logger()

# Share of failed fragments above which a fetched venue counts as degraded
DEFAULT_ERROR_RATE_THRESHOLD = 0.5


class VenueHealth(BaseModel):
    """Latest crawl outcome of one venue."""

    venue: str
    fetched: bool
    events: int = 0
    extraction_errors: int = 0
    consecutive_fetch_failures: int = 0
    last_error: Optional[str] = None
    checked_at: datetime = Field(default_factory=datetime.now)

    @computed_field
    @property
    def error_rate(self) -> float:
        """Failed fragments over all candidate fragments (0.0 for an empty page)."""
        total = self.events + self.extraction_errors
        return self.extraction_errors / total if total else 0.0


class HealthMonitor:
    """Collects VenueHealth from crawl reports."""

    def __init__(self, error_rate_threshold: float = DEFAULT_ERROR_RATE_THRESHOLD):
        self.error_rate_threshold = error_rate_threshold
        self.venues: dict[str, VenueHealth] = {}

    def record(self, report: VenueCrawlReport) -> VenueHealth:
        """Update the venue's health from one report and return it."""
        previous = self.venues.get(report.venue)

        if report.fetch_error:
            failures = (previous.consecutive_fetch_failures if previous else 0) + 1
            health = VenueHealth(
                venue=report.venue,
                fetched=False,
                consecutive_fetch_failures=failures,
                last_error=report.fetch_error,
            )
            logger.warning(
                "venue_fetch_failing",
                venue=report.venue,
                consecutive_failures=failures,
                error=report.fetch_error,
            )
        else:
            result = report.result
            health = VenueHealth(
                venue=report.venue,
                fetched=True,
                events=len(result.events) if result else 0,
                extraction_errors=len(result.errors) if result else 0,
                last_error=result.errors[-1].reason if result and result.errors else None,
            )
            if health.error_rate > self.error_rate_threshold:
                logger.warning(
                    "venue_degraded",
                    venue=report.venue,
                    error_rate=round(health.error_rate, 2),
                    extraction_errors=health.extraction_errors,
                )

        self.venues[report.venue] = health
        return health

    def get(self, venue: str) -> Optional[VenueHealth]:
        return self.venues.get(venue)

    def is_healthy(self, venue: str) -> bool:
        """Fetched, with an error rate at or below the threshold.

        Venues that were never crawled count as healthy.
        """
        health = self.venues.get(venue)
        if health is None:
            return True
        return health.fetched and health.error_rate <= self.error_rate_threshold

    def failed_venues(self) -> list[str]:
        """Venues whose page could not be fetched."""
        return [name for name, h in self.venues.items() if not h.fetched]

    def degraded_venues(self) -> list[str]:
        """Fetched venues whose adapter fails on too many fragments."""
        return [
            name
            for name, h in self.venues.items()
            if h.fetched and h.error_rate > self.error_rate_threshold
        ]

    def summary(self) -> dict[str, int]:
        fetched = [h for h in self.venues.values() if h.fetched]
        return {
            "total": len(self.venues),
            "fetched": len(fetched),
            "failed": len(self.venues) - len(fetched),
            "degraded": len(self.degraded_venues()),
            "events": sum(h.events for h in fetched),
            "extraction_errors": sum(h.extraction_errors for h in fetched),
        }
