# llms_txt/crawler/fetcher.py
"""
Fetcher module: single HTTP requests with a fixed User-Agent and retry on transport failure.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from llms_txt import __version__
from llms_txt.logger import get_logger

USER_AGENT = f"llms-txt-bot/{__version__}"

SITEMAP_ACCEPT = "application/xml,text/xml;q=0.9,*/*;q=0.8"
PAGE_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"

DEFAULT_RETRIES = 3
DEFAULT_RETRY_DELAY = 1.0

_TRANSPORT_ERRORS = (ClientError, asyncio.TimeoutError, OSError)

logger = get_logger(__name__)


@dataclass(slots=True)
class FetchResponse:
    """Fully read HTTP response."""

    url: str
    status: int
    text: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def create_session(timeout: Optional[float] = None) -> ClientSession:
    """Build the shared session; ``timeout=None`` disables the total request timeout."""
    return ClientSession(
        timeout=ClientTimeout(total=timeout),
        headers={"User-Agent": USER_AGENT},
        raise_for_status=False,
    )


async def fetch_with_retry(
    session: ClientSession,
    url: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    retries: int = DEFAULT_RETRIES,
    delay: float = DEFAULT_RETRY_DELAY,
) -> FetchResponse:
    """
    GET *url* and read the body.

    Only transport failures are retried (``retries`` attempts in total, fixed
    ``delay`` seconds apart); HTTP error statuses are returned as they are.
    The last transport error propagates to the caller.
    """
    if retries < 1:
        raise ValueError("retries must be >= 1")

    request_headers = dict(headers or {})
    request_headers["User-Agent"] = USER_AGENT

    for attempt in range(1, retries + 1):
        try:
            async with session.get(url, headers=request_headers) as resp:
                text = await resp.text(errors="replace")
                return FetchResponse(url=url, status=resp.status, text=text, headers=dict(resp.headers))
        except _TRANSPORT_ERRORS as exc:
            if attempt == retries:
                raise
            logger.debug("Retry %d/%d for %s after %.2f s: %s", attempt, retries, url, delay, exc)
            await asyncio.sleep(delay)

    # unreachable
    raise RuntimeError(f"Failed to fetch {url} after {retries} attempts")


__all__ = [
    "USER_AGENT",
    "SITEMAP_ACCEPT",
    "PAGE_ACCEPT",
    "FetchResponse",
    "create_session",
    "fetch_with_retry",
]
