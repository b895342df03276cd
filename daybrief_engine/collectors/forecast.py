"""Forecast resolver: free-text city → coordinates → next N hourly rows."""

import logging
from datetime import datetime

import httpx

from daybrief_engine.collectors.base import client_scope, get_json
from daybrief_engine.collectors.geocode import fetch_coords
from daybrief_engine.config import settings
from daybrief_engine.errors import DecodeError
from daybrief_engine.models.weather import ForecastResult, WeatherRow
from daybrief_engine.weather_codes import describe

logger = logging.getLogger(__name__)

HOURLY_VARIABLES = [
    "temperature_2m", "apparent_temperature", "precipitation_probability", "weather_code", "is_day",
]
TIME_FORMAT = "%Y-%m-%dT%H:%M"


def unit_glyph(use_celsius: bool) -> str:
    return "°C" if use_celsius else "°F"


def unit_key(use_celsius: bool) -> str:
    return "C" if use_celsius else "F"


def format_temperature(value, use_celsius: bool) -> str:
    text = f"{float(value or 0):.0f}"
    if text == "-0":
        text = "0"
    return f"{text}{unit_glyph(use_celsius)}"


def find_window_start(times: list[str], now: datetime) -> int:
    """Index of the first hour at or after `now`; 0 if there is none."""
    for i, t in enumerate(times):
        try:
            ts = datetime.strptime(t, TIME_FORMAT)
        except (TypeError, ValueError):
            continue
        if ts >= now:
            return i
    return 0


def _at(values: list, i: int, default=None):
    if i < len(values) and values[i] is not None:
        return values[i]
    return default


def build_rows(hourly: dict, count: int, use_celsius: bool, now: datetime) -> list[WeatherRow]:
    times = hourly.get("time") or []
    temps = hourly.get("temperature_2m") or []
    feels = hourly.get("apparent_temperature") or []
    precip = hourly.get("precipitation_probability") or []
    codes = hourly.get("weather_code") or []
    day_flags = hourly.get("is_day") or []

    start = find_window_start(times, now)
    rows = []
    for i in range(start, min(start + count, len(times))):
        if i == start:
            label = "Now"
        else:
            parts = str(times[i]).split("T")
            label = parts[1] if len(parts) > 1 else "00:00"
        description, icon = describe(_at(codes, i), bool(_at(day_flags, i, 1)))
        rows.append(WeatherRow(
            time=label,
            temperature=format_temperature(_at(temps, i, 0), use_celsius),
            description=description,
            feels_like=format_temperature(_at(feels, i, 0), use_celsius),
            precipitation=f"{int(round(float(_at(precip, i, 0))))}% precipitation",
            icon=icon,
        ))
    return rows


async def fetch_next_hours_at(
    lat: float,
    lon: float,
    count: int,
    use_celsius: bool,
    client: httpx.AsyncClient | None = None,
    now: datetime | None = None,
) -> list[WeatherRow]:
    params = {
        "latitude": lat,
        "longitude": lon,
        "hourly": ",".join(HOURLY_VARIABLES),
        "timezone": "auto",
        "forecast_days": 2,
        "temperature_unit": "celsius" if use_celsius else "fahrenheit",
    }
    async with client_scope(client) as c:
        data = await get_json(c, settings.forecast_url, params=params)

    hourly = data.get("hourly") if isinstance(data, dict) else None
    if not isinstance(hourly, dict) or not isinstance(hourly.get("time"), list):
        raise DecodeError("JSON error: missing hourly series")
    try:
        return build_rows(hourly, count, use_celsius, now or datetime.now())
    except (TypeError, ValueError) as e:
        raise DecodeError(f"JSON error: {e}") from e


async def resolve_forecast(
    city: str,
    count: int,
    use_celsius: bool,
    client: httpx.AsyncClient | None = None,
    now: datetime | None = None,
) -> ForecastResult:
    """Geocode then forecast. NotFoundError from geocoding stops before the forecast call."""
    async with client_scope(client) as c:
        loc = await fetch_coords(city, client=c)
        rows = await fetch_next_hours_at(loc.latitude, loc.longitude, count, use_celsius, client=c, now=now)
    logger.info("Forecast %s: %d rows (%s)", loc.label, len(rows), unit_key(use_celsius))
    return ForecastResult(label=loc.label, rows=tuple(rows))
