"""
Crawl engine: one parsed program page + one adapter -> events and errors.

The engine is synchronous and keeps no state between calls, so any number
of venues can be crawled in parallel by the caller.
"""

from datetime import datetime
from typing import Optional, Union
from urllib.parse import urljoin

import structlog
from bs4 import BeautifulSoup, Tag

from .adapters import AdapterSet, VenueAdapter
from .errors import DateTimeParseError, ExtractionError, UnknownVenueError
from .models import CrawlResult, Event, ExtractionFailure
from .normalize import clean_whitespace, normalize_date_time

logger = structlog.get_logger()

SNIPPET_LENGTH = 80

Document = Union[BeautifulSoup, Tag, str]


def crawl(
    adapter: VenueAdapter,
    document: Document,
    now: Optional[datetime] = None,
) -> CrawlResult:
    """
    Extract all events from one venue's program page.

    Args:
        adapter: Adapter of the venue the page belongs to
        document: Parsed page (an HTML string is parsed with html.parser)
        now: Reference time for year completion (defaults to now)

    Returns:
        CrawlResult with events and per-fragment failures in document order
    """
    if isinstance(document, str):
        document = BeautifulSoup(document, "html.parser")
    now = now or datetime.now()

    result = CrawlResult(venue=adapter.venue_key)
    fragments = document.select(adapter.fragment_selector)

    for index, fragment in enumerate(fragments):
        title = adapter.extract_title(fragment)
        if not title:
            logger.debug("fragment_skipped", venue=adapter.venue_key, index=index)
            continue

        try:
            event = _build_event(adapter, fragment, title, now)
        except ExtractionError as e:
            failure = _failure_from_error(adapter, index, fragment, e)
            logger.warning(
                "extraction_failed",
                venue=adapter.venue_key,
                index=index,
                reason=failure.reason,
                snippet=failure.snippet,
            )
            result.errors.append(failure)
            continue

        result.events.append(event)

    logger.info(
        "crawl_finished",
        venue=adapter.venue_key,
        fragments=len(fragments),
        events=len(result.events),
        errors=len(result.errors),
    )
    return result


def crawl_venue(
    adapters: AdapterSet,
    short_name: str,
    document: Document,
    now: Optional[datetime] = None,
) -> CrawlResult:
    """Crawl a document for the venue registered under short_name.

    Raises:
        UnknownVenueError: If no adapter exists for short_name
    """
    adapter = adapters.adapter_for(short_name)
    if adapter is None:
        raise UnknownVenueError(short_name)
    return crawl(adapter, document, now=now)


def _build_event(
    adapter: VenueAdapter, fragment: Tag, title: str, now: datetime
) -> Event:
    venue = adapter.venue

    try:
        raw = adapter.extract_date_time(fragment)
        normalized = normalize_date_time(
            raw, adapter.date_time_format, now=now, venue_key=venue.short_name
        )
        link = adapter.extract_link(fragment).strip()
    except ExtractionError:
        raise
    except (ValueError, IndexError, KeyError, AttributeError, TypeError) as e:
        # venue code indexing past the end of split() results and the like
        raise ExtractionError(
            f"{type(e).__name__}: {e}", venue_key=venue.short_name
        ) from e

    return Event(
        title=title,
        start=normalized.start,
        time_known=normalized.time_known,
        link=urljoin(venue.url, link) if link else venue.url,
        venue=venue,
    )


def _failure_from_error(
    adapter: VenueAdapter, index: int, fragment: Tag, error: ExtractionError
) -> ExtractionFailure:
    snippet = error.raw_text or clean_whitespace(fragment.get_text(" "))
    return ExtractionFailure(
        venue=adapter.venue_key,
        fragment_index=index,
        snippet=snippet[:SNIPPET_LENGTH],
        reason=error.reason,
        format=error.format if isinstance(error, DateTimeParseError) else None,
    )
