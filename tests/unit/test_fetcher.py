"""Tests for the fetch layer."""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from wasgeit.adapters import AdapterSet
from wasgeit.errors import UnknownVenueError
from wasgeit.fetcher import crawl_venues, fetch_document
from wasgeit.resilience import HealthMonitor


def html_response(url: str, html: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, text=html, request=httpx.Request("GET", url))


def mock_async_client(mock_client: MagicMock, get: AsyncMock) -> None:
    mock_client.return_value.__aenter__ = AsyncMock(return_value=mock_client.return_value)
    mock_client.return_value.__aexit__ = AsyncMock(return_value=None)
    mock_client.return_value.get = get


class TestFetchDocument:
    """Tests for fetch_document."""

    @pytest.mark.asyncio
    async def test_parses_response(self):
        client = MagicMock()
        client.get = AsyncMock(return_value=html_response("https://x.ch", "<h1>Programm</h1>"))

        document = await fetch_document(client, "https://x.ch")

        assert document.h1.get_text() == "Programm"

    @pytest.mark.asyncio
    async def test_raises_on_http_error(self):
        client = MagicMock()
        client.get = AsyncMock(return_value=html_response("https://x.ch", "", status_code=404))

        with pytest.raises(httpx.HTTPStatusError):
            await fetch_document(client, "https://x.ch")


class TestCrawlVenues:
    """Tests for crawl_venues."""

    @pytest.mark.asyncio
    async def test_successful_crawl(self, adapters: AdapterSet, venue_pages: dict, now: datetime):
        url = "https://www.dachstock.ch"
        get = AsyncMock(return_value=html_response(url, venue_pages["dachstock"][0]))
        monitor = HealthMonitor()

        with patch("httpx.AsyncClient") as mock_client:
            mock_async_client(mock_client, get)
            reports = await crawl_venues(adapters, keys=["dachstock"], now=now, monitor=monitor)

        assert len(reports) == 1
        report = reports[0]
        assert report.status == "success"
        assert report.result.events[0].title == "Bonaparte"
        get.assert_awaited_once_with(url)
        assert monitor.is_healthy("dachstock")

    @pytest.mark.asyncio
    async def test_failed_venue_does_not_affect_others(
        self, adapters: AdapterSet, venue_pages: dict, now: datetime
    ):
        async def fake_get(url):
            if "kairo" in url:
                raise httpx.ConnectError("connection refused")
            return html_response(url, venue_pages["ono"][0])

        monitor = HealthMonitor()

        with patch("httpx.AsyncClient") as mock_client:
            mock_async_client(mock_client, AsyncMock(side_effect=fake_get))
            reports = await crawl_venues(
                adapters,
                keys=["kairo", "ono"],
                now=now,
                fetch_settings={"max_attempts": 1},
                monitor=monitor,
            )

        assert [r.venue for r in reports] == ["kairo", "ono"]
        assert reports[0].status == "error"
        assert reports[0].fetch_error == "connection refused"
        assert reports[0].result is None
        assert reports[1].status == "success"
        assert monitor.failed_venues() == ["kairo"]

    @pytest.mark.asyncio
    async def test_http_status_reported(self, adapters: AdapterSet):
        url = "https://www.isc-club.ch"
        get = AsyncMock(return_value=html_response(url, "", status_code=503))

        with patch("httpx.AsyncClient") as mock_client:
            mock_async_client(mock_client, get)
            reports = await crawl_venues(
                adapters, keys=["isc"], fetch_settings={"max_attempts": 2, "base_delay": 0.0}
            )

        assert reports[0].fetch_error == "HTTP 503"
        assert get.await_count == 2

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self, adapters: AdapterSet, venue_pages: dict, now: datetime):
        url = "https://www.bierhuebeli.ch"
        get = AsyncMock(side_effect=[
            httpx.ReadTimeout("timed out"),
            html_response(url, venue_pages["bierhuebeli"][0]),
        ])

        with patch("httpx.AsyncClient") as mock_client:
            mock_async_client(mock_client, get)
            reports = await crawl_venues(
                adapters, keys=["bierhuebeli"], now=now,
                fetch_settings={"max_attempts": 3, "base_delay": 0.0},
            )

        assert reports[0].status == "success"
        assert len(reports[0].result.events) == 1
        assert get.await_count == 2

    @pytest.mark.asyncio
    async def test_extraction_errors_make_partial_report(self, adapters: AdapterSet, now: datetime):
        url = "https://www.dachstock.ch"
        html = '<div class="event event-list"><h3>Act</h3><div class="event-date">tba</div></div>'
        get = AsyncMock(return_value=html_response(url, html))
        monitor = HealthMonitor()

        with patch("httpx.AsyncClient") as mock_client:
            mock_async_client(mock_client, get)
            reports = await crawl_venues(adapters, keys=["dachstock"], now=now, monitor=monitor)

        assert reports[0].status == "partial"
        assert monitor.get("dachstock").extraction_errors == 1
        assert monitor.degraded_venues() == ["dachstock"]
        assert monitor.failed_venues() == []

    @pytest.mark.asyncio
    async def test_all_venues_by_default(self, adapters: AdapterSet):
        get = AsyncMock(side_effect=lambda url: html_response(url, "<p>Sommerpause</p>"))

        with patch("httpx.AsyncClient") as mock_client:
            mock_async_client(mock_client, get)
            reports = await crawl_venues(adapters)

        assert [r.venue for r in reports] == adapters.keys()
        assert all(r.status == "success" for r in reports)

    @pytest.mark.asyncio
    async def test_unknown_venue(self, adapters: AdapterSet):
        with pytest.raises(UnknownVenueError):
            await crawl_venues(adapters, keys=["moods"])

    @pytest.mark.asyncio
    async def test_not_found_is_not_retried(self, adapters: AdapterSet):
        url = "https://www.cafemarta.ch"
        get = AsyncMock(return_value=html_response(url, "", status_code=404))
        monitor = HealthMonitor()

        with patch("httpx.AsyncClient") as mock_client:
            mock_async_client(mock_client, get)
            reports = await crawl_venues(
                adapters,
                keys=["marta"],
                fetch_settings={"max_attempts": 3, "base_delay": 0.0},
                monitor=monitor,
            )

        assert reports[0].fetch_error == "HTTP 404"
        assert get.await_count == 1
        assert monitor.failed_venues() == ["marta"]

    @pytest.mark.asyncio
    async def test_monitor_is_optional(self, adapters: AdapterSet, venue_pages: dict, now: datetime):
        url = "https://www.onobern.ch"
        get = AsyncMock(return_value=html_response(url, venue_pages["ono"][0]))

        with patch("httpx.AsyncClient") as mock_client:
            mock_async_client(mock_client, get)
            reports = await crawl_venues(adapters, keys=["ono"], now=now)

        assert reports[0].status == "success"
