"""On-disk cache records: one per user and domain."""

from enum import Enum

from pydantic import BaseModel

from daybrief_engine.models.news import NewsRow, topic_key
from daybrief_engine.models.weather import WeatherRow


class Domain(str, Enum):
    WEATHER = "weather"
    NEWS = "news"


class CacheRecord(BaseModel):
    """Last successful fetch. Replaced as a whole, never merged."""

    model_config = {"frozen": True, "extra": "ignore"}

    ts: int
    units: str = ""
    city: str = ""
    topic: str = ""


class WeatherCache(CacheRecord):
    rows: tuple[WeatherRow, ...] = ()

    def matches(self, units: str, city: str) -> bool:
        return self.units == units and self.city.lower() == city.lower()


class NewsCache(CacheRecord):
    rows: tuple[NewsRow, ...] = ()

    def matches(self, topic: str) -> bool:
        return topic_key(self.topic) == topic_key(topic)


RECORD_TYPES: dict[Domain, type[CacheRecord]] = {
    Domain.WEATHER: WeatherCache,
    Domain.NEWS: NewsCache,
}
