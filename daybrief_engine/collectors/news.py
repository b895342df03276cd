"""Article fetcher: topic search, then one concurrent thumbnail sub-fetch per hit."""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable

import httpx

from daybrief_engine.collectors.base import client_scope, get_json
from daybrief_engine.collectors.thumbnails import fetch_thumbnail_or_placeholder, load_placeholder
from daybrief_engine.config import settings
from daybrief_engine.errors import DecodeError
from daybrief_engine.models.news import FRONT_PAGE_TOPIC, NewsRow, Thumbnail, topic_key

logger = logging.getLogger(__name__)

ThumbnailFetcher = Callable[[str, httpx.AsyncClient], Awaitable[Thumbnail]]


def is_front_page(topic: str) -> bool:
    return topic_key(topic) == FRONT_PAGE_TOPIC.lower()


def search_params(topic: str) -> dict:
    if is_front_page(topic):
        return {"tags": "front_page"}
    return {"query": topic, "tags": "story"}


def host_from_url(url: str) -> str:
    rest = url.split("://", 1)[1] if "://" in url else url
    return rest.split("/", 1)[0]


def format_published(raw: str | None) -> str:
    """RFC 3339 → local "YYYY-MM-DD HH:MM"; anything else is returned as is."""
    if not raw:
        return ""
    try:
        dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return raw
    if dt.tzinfo is None:
        return raw
    return dt.astimezone().strftime("%Y-%m-%d %H:%M")


def hit_to_row(hit: dict) -> NewsRow:
    url = hit.get("url")
    if not url:
        object_id = hit.get("objectID")
        url = f"{settings.news_item_url}{object_id}" if object_id else settings.news_home_url
    return NewsRow(
        title=hit.get("title") or "Untitled",
        source=host_from_url(url),
        published=format_published(hit.get("created_at")),
        url=url,
    )


async def search_articles(topic: str, count: int, client: httpx.AsyncClient | None = None) -> list[NewsRow]:
    async with client_scope(client) as c:
        data = await get_json(c, settings.news_search_url, params=search_params(topic))
    hits = data.get("hits") if isinstance(data, dict) else None
    if not isinstance(hits, list):
        raise DecodeError("JSON error: missing hits")
    return [hit_to_row(h) for h in hits[:count] if isinstance(h, dict)]


async def enrich_with_thumbnails(
    rows: list[NewsRow],
    client: httpx.AsyncClient,
    fetch_thumbnail: ThumbnailFetcher = fetch_thumbnail_or_placeholder,
) -> list[NewsRow]:
    """Attach a thumbnail to every row concurrently.

    Output is in completion order; each input row appears exactly once.
    """
    async def _one(row: NewsRow) -> NewsRow:
        try:
            thumb = await fetch_thumbnail(row.url, client)
        except Exception as e:
            logger.info("Thumbnail enrichment failed for %s: %s", row.url, e)
            thumb = load_placeholder()
        return row.with_thumbnail(thumb)

    out = []
    for fut in asyncio.as_completed([_one(r) for r in rows]):
        out.append(await fut)
    return out


async def fetch_news(
    topic: str,
    count: int,
    client: httpx.AsyncClient | None = None,
    thumbnail_client: httpx.AsyncClient | None = None,
    fetch_thumbnail: ThumbnailFetcher = fetch_thumbnail_or_placeholder,
) -> list[NewsRow]:
    rows = await search_articles(topic, count, client=client)
    async with client_scope(
        thumbnail_client,
        timeout=settings.thumbnail_timeout,
        headers={"User-Agent": settings.user_agent},
    ) as tc:
        enriched = await enrich_with_thumbnails(rows, tc, fetch_thumbnail)
    logger.info("News %r: %d articles", topic or FRONT_PAGE_TOPIC, len(enriched))
    return enriched


class TopicMemo:
    """Process-local memo of fetched articles per topic. Not persisted, never expires."""

    def __init__(self):
        self._rows: dict[tuple[str, int], list[NewsRow]] = {}

    @staticmethod
    def key(topic: str, count: int) -> tuple[str, int]:
        return (topic_key(topic), count)

    def get(self, topic: str, count: int) -> list[NewsRow] | None:
        rows = self._rows.get(self.key(topic, count))
        return list(rows) if rows is not None else None

    def put(self, topic: str, count: int, rows: list[NewsRow]) -> None:
        self._rows[self.key(topic, count)] = list(rows)

    def clear(self) -> None:
        self._rows.clear()


_memo = TopicMemo()


async def fetch_news_cached(topic: str, count: int, memo: TopicMemo | None = None, **kwargs) -> list[NewsRow]:
    memo = memo or _memo
    cached = memo.get(topic, count)
    if cached is not None:
        return cached
    rows = await fetch_news(topic, count, **kwargs)
    memo.put(topic, count, rows)
    return rows
