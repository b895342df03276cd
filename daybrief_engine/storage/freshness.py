"""Freshness store: the last successful fetch per (user, domain), as whole-file JSON.

Reads never fail the caller (missing or corrupt files read as "no cache").
Writes replace the file atomically so a reader sees either the old or the new record.
"""

import json
import logging
import os
import tempfile
import time
from pathlib import Path

from daybrief_engine.errors import StorageError
from daybrief_engine.models.cache import RECORD_TYPES, CacheRecord, Domain, NewsCache, WeatherCache
from daybrief_engine.models.news import NewsRow
from daybrief_engine.models.weather import WeatherRow
from daybrief_engine.storage.paths import data_root, user_root

logger = logging.getLogger(__name__)


class FreshnessStore:
    def __init__(self, root: Path | str | None = None):
        self.root = data_root(root)

    def path_for(self, user: str, domain: Domain) -> Path:
        return user_root(user, self.root) / f"{Domain(domain).value}.json"

    def get(self, user: str, domain: Domain) -> CacheRecord | None:
        path = self.path_for(user, domain)
        try:
            raw = path.read_text(encoding="utf-8")
            return RECORD_TYPES[Domain(domain)].model_validate_json(raw)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.debug("Ignoring unreadable cache %s: %s", path, e)
            return None

    def put(self, user: str, domain: Domain, record: CacheRecord) -> None:
        path = self.path_for(user, domain)
        data = json.dumps(record.model_dump(mode="json"), indent=2, ensure_ascii=False)
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp", delete=False,
            ) as fh:
                tmp_name = fh.name
                fh.write(data)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                try:
                    os.unlink(tmp_name)
                except OSError as cleanup:
                    logger.warning("Could not remove temp file %s: %s", tmp_name, cleanup)
            raise StorageError(f"Cannot write {path}: {e}") from e

    # ------------------------------------------------------------------
    # Domain helpers
    # ------------------------------------------------------------------

    def load_weather(self, user: str) -> WeatherCache | None:
        return self.get(user, Domain.WEATHER)

    def load_news(self, user: str) -> NewsCache | None:
        return self.get(user, Domain.NEWS)

    def save_weather(self, user: str, rows, units: str, city: str, now: float | None = None) -> WeatherCache:
        record = WeatherCache(
            ts=int(time.time() if now is None else now),
            units=units,
            city=city.lower(),
            rows=tuple(WeatherRow.model_validate(r) for r in rows),
        )
        self.put(user, Domain.WEATHER, record)
        return record

    def save_news(self, user: str, rows, topic: str, now: float | None = None) -> NewsCache:
        record = NewsCache(
            ts=int(time.time() if now is None else now),
            topic=topic,
            rows=tuple(NewsRow.model_validate(r).without_thumbnail() for r in rows),
        )
        self.put(user, Domain.NEWS, record)
        return record
