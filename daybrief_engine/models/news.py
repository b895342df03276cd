import base64
import io

from PIL import Image
from pydantic import BaseModel, Field

FRONT_PAGE_TOPIC = "Top Stories"


def topic_key(topic: str | None) -> str:
    """Normalized topic; blank and "Top Stories" both name the front page."""
    topic = (topic or "").strip().lower()
    return topic or FRONT_PAGE_TOPIC.lower()


class Thumbnail(BaseModel):
    """Decoded RGBA pixel buffer for an article card."""

    model_config = {"frozen": True}

    width: int
    height: int
    pixels: bytes
    is_placeholder: bool = False

    @classmethod
    def blank(cls, width: int = 10, height: int = 10) -> "Thumbnail":
        return cls(width=width, height=height, pixels=bytes(width * height * 4), is_placeholder=True)

    @classmethod
    def from_image(cls, img: Image.Image, is_placeholder: bool = False) -> "Thumbnail":
        rgba = img.convert("RGBA")
        w, h = rgba.size
        return cls(width=w, height=h, pixels=rgba.tobytes(), is_placeholder=is_placeholder)

    def to_png_base64(self) -> str:
        img = Image.frombytes("RGBA", (self.width, self.height), self.pixels)
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return base64.b64encode(buf.getvalue()).decode("ascii")


class NewsRow(BaseModel):
    model_config = {"frozen": True, "extra": "ignore"}

    title: str
    source: str = ""
    published: str = ""
    url: str = ""
    # Never persisted: the on-disk cache keeps text fields only.
    thumbnail: Thumbnail | None = Field(default=None, exclude=True)

    def with_thumbnail(self, thumbnail: Thumbnail) -> "NewsRow":
        return self.model_copy(update={"thumbnail": thumbnail})

    def without_thumbnail(self) -> "NewsRow":
        return self if self.thumbnail is None else self.model_copy(update={"thumbnail": None})
