import base64
import io

import httpx
import pytest
from PIL import Image

from conftest import mock_client
from daybrief_engine.collectors.thumbnails import (
    decode_image, fetch_thumbnail, fetch_thumbnail_or_placeholder, find_image_url, load_placeholder,
    resolve_image_url,
)
from daybrief_engine.errors import DecodeError
from daybrief_engine.models.news import Thumbnail


def png_bytes(size=(4, 3), color="red") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def test_meta_priority_order():
    html = """
    <html><head>
      <meta name="twitter:image" content="https://cdn.example.com/tw.png">
      <meta property="og:image:secure_url" content="https://cdn.example.com/secure.png">
      <meta property="og:image" content="https://cdn.example.com/og.png">
    </head></html>
    """
    assert find_image_url(html) == "https://cdn.example.com/og.png"


def test_meta_falls_through_to_twitter_src():
    html = '<meta property="og:image"><meta name="twitter:image:src" content="/img/a.jpg">'
    assert find_image_url(html) == "/img/a.jpg"


def test_meta_missing():
    assert find_image_url("<html><head><title>x</title></head></html>") is None


def test_resolve_relative_and_size_hints():
    url = resolve_image_url("/img/a.jpg?v=2", "https://example.com/posts/1", 300, 150)
    assert url == "https://example.com/img/a.jpg?v=2&w=300&h=150"
    assert resolve_image_url("https://cdn.io/x.png", "https://example.com/", 10, 20) == "https://cdn.io/x.png?w=10&h=20"


def test_resolve_rejects_non_http():
    with pytest.raises(DecodeError):
        resolve_image_url("data:image/png;base64,AAAA", "https://example.com/", 1, 1)


def test_decode_image_to_rgba():
    thumb = decode_image(png_bytes((4, 3)))
    assert (thumb.width, thumb.height) == (4, 3)
    assert len(thumb.pixels) == 4 * 3 * 4
    assert thumb.pixels[:4] == bytes([255, 0, 0, 255])
    assert not thumb.is_placeholder


def test_decode_garbage_raises():
    with pytest.raises(DecodeError):
        decode_image(b"definitely not an image")


def test_placeholder_loading_and_blank_fallback(tmp_path):
    bundled = load_placeholder()
    assert bundled.is_placeholder
    assert bundled.width > 0
    blank = load_placeholder(str(tmp_path / "missing.png"))
    assert blank == Thumbnail.blank()
    assert len(blank.pixels) == 10 * 10 * 4


@pytest.mark.asyncio
async def test_fetch_thumbnail_end_to_end():
    seen = []

    def handler(request):
        seen.append(str(request.url))
        if request.url.path == "/article":
            return httpx.Response(200, html='<meta property="og:image" content="/pics/t.png">')
        return httpx.Response(200, content=png_bytes((6, 2)), headers={"content-type": "image/png"})

    async with mock_client(handler) as client:
        thumb = await fetch_thumbnail("https://news.example.com/article", client)
    assert (thumb.width, thumb.height) == (6, 2)
    assert seen[1] == "https://news.example.com/pics/t.png?w=300&h=150"


@pytest.mark.asyncio
async def test_any_failure_degrades_to_placeholder():
    def no_meta(request):
        return httpx.Response(200, html="<p>no metadata here</p>")

    def bad_image(request):
        if request.url.path == "/a":
            return httpx.Response(200, html='<meta property="og:image" content="/x.png">')
        return httpx.Response(200, content=b"GIF89a-broken")

    def offline(request):
        raise httpx.ConnectTimeout("slow", request=request)

    for handler in (no_meta, bad_image, offline, lambda r: httpx.Response(404)):
        async with mock_client(handler) as client:
            thumb = await fetch_thumbnail_or_placeholder("https://example.com/a", client)
        assert thumb.is_placeholder


def test_thumbnail_png_export_round_trips_pixels():
    thumb = decode_image(png_bytes((3, 3), "blue"))
    img = Image.open(io.BytesIO(base64.b64decode(thumb.to_png_base64())))
    assert img.size == (3, 3)
    assert img.convert("RGBA").getpixel((0, 0)) == (0, 0, 255, 255)
