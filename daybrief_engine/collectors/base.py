"""Async HTTP helpers with logging and response time tracking.

Every helper raises TransportError for network/timeout/non-2xx failures and
DecodeError for bodies that cannot be parsed.
"""

import logging
import time
from contextlib import asynccontextmanager

import httpx

from daybrief_engine.errors import DecodeError, TransportError

logger = logging.getLogger(__name__)


async def _get(client: httpx.AsyncClient, url: str, params: dict | None = None, **kwargs) -> httpx.Response:
    t0 = time.monotonic()
    try:
        r = await client.get(url, params=params, **kwargs)
        elapsed = (time.monotonic() - t0) * 1000
        r.raise_for_status()
        logger.debug("GET %s → %d (%.0fms)", r.url, r.status_code, elapsed)
        return r
    except httpx.HTTPStatusError as e:
        elapsed = (time.monotonic() - t0) * 1000
        logger.warning("GET %s failed (%.0fms): HTTP %d", url, elapsed, e.response.status_code)
        raise TransportError(f"HTTP {e.response.status_code} from {e.request.url.host}",
                             status_code=e.response.status_code) from e
    except httpx.HTTPError as e:
        elapsed = (time.monotonic() - t0) * 1000
        logger.warning("GET %s failed (%.0fms): %s", url, elapsed, e)
        raise TransportError(f"HTTP error: {e}") from e


async def get_json(client: httpx.AsyncClient, url: str, params: dict | None = None, **kwargs):
    r = await _get(client, url, params, **kwargs)
    try:
        return r.json()
    except ValueError as e:
        raise DecodeError(f"JSON error: {e}") from e


async def get_text(client: httpx.AsyncClient, url: str, params: dict | None = None, **kwargs) -> str:
    r = await _get(client, url, params, **kwargs)
    try:
        return r.text
    except (UnicodeDecodeError, LookupError) as e:
        raise DecodeError(f"Text decode error: {e}") from e


async def get_bytes(client: httpx.AsyncClient, url: str, params: dict | None = None, **kwargs) -> bytes:
    r = await _get(client, url, params, **kwargs)
    return r.content


def new_client(timeout: float | None = None, **kwargs) -> httpx.AsyncClient:
    """Client with library default timeout unless one is given."""
    if timeout is not None:
        kwargs["timeout"] = httpx.Timeout(timeout)
    return httpx.AsyncClient(follow_redirects=True, **kwargs)


@asynccontextmanager
async def client_scope(client: httpx.AsyncClient | None = None, timeout: float | None = None, **kwargs):
    """Yield `client` as is, or a fresh one that is closed on exit."""
    if client is not None:
        yield client
        return
    async with new_client(timeout, **kwargs) as owned:
        yield owned
