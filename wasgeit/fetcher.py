"""
Fetch layer: download program pages and hand them to the crawl engine.

Each venue is one fetch-then-crawl unit; units run concurrently and a
failing venue never affects the others. Retries happen here, never inside
the crawl engine.
"""

import asyncio
from datetime import datetime
from functools import partial
from typing import Any, Optional

import httpx
import structlog
from bs4 import BeautifulSoup

from .adapters import AdapterSet, VenueAdapter
from .config import get_default_config
from .crawler import crawl
from .errors import UnknownVenueError
from .models import VenueCrawlReport
from .resilience import HealthMonitor, RetryPolicy, describe_http_error

logger = structlog.get_logger()


async def fetch_document(client: httpx.AsyncClient, url: str) -> BeautifulSoup:
    """Download url and parse it.

    Raises:
        httpx.HTTPError: On transport errors or non-2xx responses
    """
    response = await client.get(url)
    response.raise_for_status()
    return BeautifulSoup(response.text, "html.parser")


async def _crawl_one(
    client: httpx.AsyncClient,
    adapter: VenueAdapter,
    policy: RetryPolicy,
    now: Optional[datetime],
) -> VenueCrawlReport:
    started = datetime.now()
    venue = adapter.venue

    try:
        document = await policy.fetch(partial(fetch_document, client), venue.url)
    except httpx.HTTPError as e:
        message = describe_http_error(e)
        logger.warning("venue_fetch_failed", venue=venue.short_name, url=venue.url, error=message)
        return VenueCrawlReport(
            venue=venue.short_name,
            fetch_error=message,
            duration_ms=int((datetime.now() - started).total_seconds() * 1000),
        )

    return VenueCrawlReport(
        venue=venue.short_name,
        result=crawl(adapter, document, now=now),
        duration_ms=int((datetime.now() - started).total_seconds() * 1000),
    )


async def crawl_venues(
    adapters: AdapterSet,
    keys: Optional[list[str]] = None,
    now: Optional[datetime] = None,
    fetch_settings: Optional[dict[str, Any]] = None,
    monitor: Optional[HealthMonitor] = None,
) -> list[VenueCrawlReport]:
    """
    Fetch and crawl several venues concurrently.

    Args:
        adapters: Adapter set built at startup
        keys: Venue short names to crawl; all venues if omitted
        now: Reference time for year completion
        fetch_settings: Overrides for the "fetch" config section
        monitor: HealthMonitor to record per-venue outcomes in

    Returns:
        One report per venue, in the order requested

    Raises:
        UnknownVenueError: If a requested key has no adapter
    """
    if keys is None:
        selected = list(adapters.all())
    else:
        selected = []
        for key in keys:
            adapter = adapters.adapter_for(key)
            if adapter is None:
                raise UnknownVenueError(key)
            selected.append(adapter)

    settings = {**get_default_config()["fetch"], **(fetch_settings or {})}
    policy = RetryPolicy.from_settings(settings)

    async with httpx.AsyncClient(
        timeout=settings["timeout"],
        headers={"User-Agent": settings["user_agent"]},
        follow_redirects=True,
    ) as client:
        reports = await asyncio.gather(
            *(_crawl_one(client, adapter, policy, now) for adapter in selected)
        )

    if monitor is not None:
        for report in reports:
            monitor.record(report)

    return list(reports)
