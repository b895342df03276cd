"""Article thumbnails: page metadata → image URL → decoded RGBA buffer.

Every failure degrades to the bundled placeholder (then to a blank buffer);
callers never see an exception from fetch_thumbnail_or_placeholder.
"""

import asyncio
import io
import logging
from functools import lru_cache
from urllib.parse import urlencode, urljoin, urlsplit, urlunsplit

import httpx
from bs4 import BeautifulSoup
from PIL import Image

from daybrief_engine.collectors.base import get_bytes, get_text
from daybrief_engine.config import settings
from daybrief_engine.errors import DecodeError
from daybrief_engine.models.news import Thumbnail

logger = logging.getLogger(__name__)

# Checked in order; first tag carrying a content attribute wins.
META_CANDIDATES = [
    {"property": "og:image"},
    {"property": "og:image:secure_url"},
    {"name": "twitter:image"},
    {"name": "twitter:image:src"},
]


def find_image_url(html: str) -> str | None:
    soup = BeautifulSoup(html, "html.parser")
    for attrs in META_CANDIDATES:
        tag = soup.find("meta", attrs=attrs)
        if tag and tag.get("content"):
            return tag["content"].strip()
    return None


def resolve_image_url(image_url: str, base_url: str, width: int | None = None, height: int | None = None) -> str:
    """Resolve against the article URL and append w/h size hints."""
    width = settings.thumbnail_width if width is None else width
    height = settings.thumbnail_height if height is None else height
    parts = urlsplit(urljoin(base_url, image_url))
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise DecodeError(f"Unusable image URL: {image_url!r}")
    hints = urlencode({"w": width, "h": height})
    query = f"{parts.query}&{hints}" if parts.query else hints
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def decode_image(data: bytes) -> Thumbnail:
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return Thumbnail.from_image(img)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Image decode error: {e}") from e


async def fetch_thumbnail(article_url: str, client: httpx.AsyncClient) -> Thumbnail:
    timeout = settings.thumbnail_timeout
    html = await get_text(client, article_url, timeout=timeout)

    image_url = find_image_url(html)
    logger.debug("Thumbnail candidate for %s -> %s", article_url, image_url)
    if not image_url:
        raise DecodeError("no image metadata")

    resolved = resolve_image_url(image_url, article_url)
    data = await get_bytes(client, resolved, timeout=timeout)
    logger.debug("Downloaded %d bytes for thumbnail %s", len(data), resolved)

    thumb = await asyncio.to_thread(decode_image, data)
    logger.debug("Decoded thumbnail size: %dx%d", thumb.width, thumb.height)
    return thumb


@lru_cache(maxsize=4)
def load_placeholder(path: str | None = None) -> Thumbnail:
    path = path or settings.placeholder_image
    try:
        with Image.open(path) as img:
            img.load()
            return Thumbnail.from_image(img, is_placeholder=True)
    except (OSError, ValueError) as e:
        logger.warning("Failed to load placeholder image %s: %s", path, e)
        return Thumbnail.blank()


async def fetch_thumbnail_or_placeholder(article_url: str, client: httpx.AsyncClient) -> Thumbnail:
    try:
        return await fetch_thumbnail(article_url, client)
    except Exception as e:
        logger.info("Thumbnail fetch failed for %s: %s", article_url, e)
        return load_placeholder()
