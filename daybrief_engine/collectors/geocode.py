import logging

import httpx
from pydantic import ValidationError

from daybrief_engine.collectors.base import client_scope, get_json
from daybrief_engine.config import settings
from daybrief_engine.errors import DecodeError, NotFoundError
from daybrief_engine.models.location import Location

logger = logging.getLogger(__name__)


async def fetch_coords(query: str, client: httpx.AsyncClient | None = None) -> Location:
    """Resolve free text to the first matching location. Raises NotFoundError on an empty result set."""
    params = {"name": query, "count": 1, "language": "en", "format": "json"}
    async with client_scope(client) as c:
        data = await get_json(c, settings.geocoding_url, params=params)

    results = (data or {}).get("results") if isinstance(data, dict) else None
    if not results:
        raise NotFoundError(f"No matching location found for {query!r}")
    item = results[0]
    try:
        loc = Location(
            name=item["name"],
            latitude=item["latitude"],
            longitude=item["longitude"],
            country=item.get("country") or "",
            admin1=item.get("admin1") or "",
        )
    except (KeyError, TypeError, ValidationError) as e:
        raise DecodeError(f"Malformed geocoding result: {e}") from e
    logger.debug("Geocoded %r → %s (%.3f, %.3f)", query, loc.label, loc.latitude, loc.longitude)
    return loc
