from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "DAYBRIEF_", "env_file": ".env", "extra": "ignore"}

    data_dir: str = str(Path.home() / ".daybrief")

    # Open-Meteo base URLs
    geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    forecast_url: str = "https://api.open-meteo.com/v1/forecast"

    # Hacker News (Algolia)
    news_search_url: str = "https://hn.algolia.com/api/v1/search"
    news_item_url: str = "https://news.ycombinator.com/item?id="
    news_home_url: str = "https://news.ycombinator.com/"

    # Refresh policy
    cache_ttl_seconds: int = 900  # 15 min
    weather_hours: int = 8
    news_count: int = 12
    news_memo: bool = False  # reuse articles per topic for the process lifetime

    # Thumbnails
    thumbnail_timeout: float = 8.0
    thumbnail_width: int = 300
    thumbnail_height: int = 150
    user_agent: str = "news-thumbs/1.0"
    placeholder_image: str = str(Path(__file__).resolve().parent.parent / "daybrief_app" / "assets" / "no_image.png")

    clock_interval_seconds: int = 1


settings = Settings()
