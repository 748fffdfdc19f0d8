"""
Retry policy for program page fetches.

A venue page either comes back, fails in transit, or comes back with an
error status. Only transit failures and the statuses a server uses for
"try again later" are retried; a 404 or 403 will not fix itself within one
crawl run.
"""

import asyncio
import random
from typing import Any, Awaitable, Callable, Optional

import httpx
import structlog

logger = structlog.get_logger()

RETRYABLE_STATUS = frozenset({408, 425, 429, 500, 502, 503, 504})


def describe_http_error(error: httpx.HTTPError) -> str:
    """Short form for reports: 'HTTP 503', or the transport error message."""
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code}"
    return str(error) or type(error).__name__


def is_retryable(error: httpx.HTTPError) -> bool:
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code in RETRYABLE_STATUS
    return isinstance(error, httpx.TransportError)


def retry_after(error: httpx.HTTPError) -> Optional[float]:
    """Seconds from a numeric Retry-After header, if the server sent one."""
    if not isinstance(error, httpx.HTTPStatusError):
        return None
    value = error.response.headers.get("Retry-After", "")
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None


class RetryPolicy:
    """How often and how patiently to re-request one venue page."""

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        jitter: bool = True,
    ):
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.jitter = jitter

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> "RetryPolicy":
        """Build from the "fetch" config section."""
        return cls(
            max_attempts=settings["max_attempts"],
            base_delay=settings["base_delay"],
        )

    def delay_for(self, attempt: int, error: httpx.HTTPError) -> float:
        """Wait before the attempt following `attempt` (1-based).

        A Retry-After header wins over the exponential schedule but is still
        capped at max_delay.
        """
        server_delay = retry_after(error)
        if server_delay is not None:
            return min(server_delay, self.max_delay)

        delay = min(self.base_delay * 2 ** (attempt - 1), self.max_delay)
        if self.jitter:
            delay *= 0.5 + random.random()
        return delay

    async def fetch(self, fetch: Callable[[str], Awaitable[Any]], url: str) -> Any:
        """Await fetch(url) until it succeeds or the policy gives up.

        Raises:
            httpx.HTTPError: The last error, once attempts run out or the
                error is not retryable
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await fetch(url)
            except httpx.HTTPError as e:
                if attempt >= self.max_attempts or not is_retryable(e):
                    raise
                delay = self.delay_for(attempt, e)
                logger.info(
                    "fetch_retry",
                    url=url,
                    attempt=attempt,
                    delay=round(delay, 2),
                    error=describe_http_error(e),
                )
                await asyncio.sleep(delay)

        raise ValueError("max_attempts must be at least 1")
