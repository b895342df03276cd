"""Refresh orchestrators: cache check, background revalidation, status text.

One refresh goes Idle → CacheCheck → (cached render) → NetworkInFlight →
Success | Failure → Settled. The cached render and the network attempt are
independent; a failure only degrades the status text and never clears rows
that are already on screen.

Superseded refreshes are not cancelled: when two overlap, the response that
lands last is the one rendered.
"""

import asyncio
import logging
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from daybrief_app.app_state import Synchronizer
from daybrief_app.runtime import Runtime
from daybrief_app.view_model import DashboardView, DomainPanel
from daybrief_engine.collectors.forecast import resolve_forecast, unit_glyph, unit_key
from daybrief_engine.collectors.news import fetch_news, fetch_news_cached
from daybrief_engine.collectors.thumbnails import load_placeholder
from daybrief_engine.config import settings
from daybrief_engine.errors import DaybriefError, NotFoundError, StorageError
from daybrief_engine.models.cache import CacheRecord, Domain
from daybrief_engine.models.news import NewsRow
from daybrief_engine.models.weather import ForecastResult
from daybrief_engine.resilience.staleness import age_minutes, is_fresh
from daybrief_engine.storage.freshness import FreshnessStore

logger = logging.getLogger("daybrief_app.refresh")

LOADING = "Loading…"
OFFLINE_PREFIX = "Offline • "


class Refresher:
    """Shared refresh state machine; subclasses supply the domain pieces."""

    domain: Domain

    def __init__(
        self,
        sync: Synchronizer,
        runtime: Runtime,
        store: FreshnessStore,
        ttl_seconds: int | None = None,
    ):
        self.sync = sync
        self.runtime = runtime
        self.store = store
        self.ttl_seconds = settings.cache_ttl_seconds if ttl_seconds is None else ttl_seconds

    # --- domain hooks -------------------------------------------------

    def panel(self, view: DashboardView) -> DomainPanel:
        raise NotImplementedError

    def read_params(self, view: DashboardView) -> Any:
        raise NotImplementedError

    def matches(self, record: CacheRecord, params: Any) -> bool:
        raise NotImplementedError

    def cached_rows(self, record: CacheRecord) -> tuple:
        return tuple(record.rows)

    def cached_status(self, record: CacheRecord, params: Any) -> str:
        raise NotImplementedError

    async def fetch(self, params: Any) -> Any:
        raise NotImplementedError

    def save(self, user: str, params: Any, result: Any) -> None:
        raise NotImplementedError

    def render_success(self, view: DashboardView, params: Any, result: Any) -> None:
        raise NotImplementedError

    def failure_status(self, params: Any, error: Exception) -> str:
        return f"Failed to load: {error}"

    # --- state machine ------------------------------------------------

    def refresh(self) -> Future:
        """Trigger a refresh. The returned future settles when the network phase has been presented."""
        done: Future = Future()
        self.sync.present(lambda view: self._begin(view, done), on_drop=done.cancel)
        return done

    def _begin(self, view: DashboardView, done: Future) -> None:
        user = self.sync.current_user()
        params = self.read_params(view)
        panel = self.panel(view)
        panel.status = LOADING

        record = self.store.get(user, self.domain)
        if record is not None and is_fresh(record.ts, self.ttl_seconds) and self.matches(record, params):
            panel.rows = self.cached_rows(record)
            panel.status = self.cached_status(record, params)
            logger.debug("%s cache hit for %s (%dm old)", self.domain.value, user, age_minutes(record.ts))

        net = self.runtime.submit(self._network(user, params))
        net.add_done_callback(lambda f: _settle(f, done))

    async def _network(self, user: str, params: Any) -> bool:
        try:
            result = await self.fetch(params)
        except Exception as e:
            if not isinstance(e, DaybriefError):
                logger.error("%s refresh crashed: %s", self.domain.value, e, exc_info=True)
            else:
                logger.warning("%s refresh failed: %s", self.domain.value, e)
            self.sync.present(lambda view, err=e: self._on_failure(view, params, err))
            return False

        try:
            await asyncio.to_thread(self.save, user, params, result)
        except StorageError as e:
            logger.warning("Cache write failed for %s/%s: %s", user, self.domain.value, e)
        self.sync.present(lambda view: self.render_success(view, params, result))
        return True

    def _on_failure(self, view: DashboardView, params: Any, error: Exception) -> None:
        panel = self.panel(view)
        if panel.status.startswith("Cached"):
            panel.status = OFFLINE_PREFIX + panel.status
        else:
            panel.status = self.failure_status(params, error)


def _settle(src: Future, dst: Future) -> None:
    if dst.done():
        return
    if src.cancelled():
        dst.cancel()
    elif src.exception() is not None:
        dst.set_exception(src.exception())
    else:
        dst.set_result(src.result())


# ----------------------------------------------------------------------
# Weather
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class WeatherParams:
    city: str
    use_celsius: bool

    @property
    def units(self) -> str:
        return unit_key(self.use_celsius)


class WeatherRefresher(Refresher):
    domain = Domain.WEATHER

    def __init__(self, *args, fetcher: Callable[..., Awaitable[ForecastResult]] = resolve_forecast,
                 hours: int | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.fetcher = fetcher
        self.hours = settings.weather_hours if hours is None else hours

    def panel(self, view):
        return view.weather

    def read_params(self, view):
        return WeatherParams(city=view.weather_city, use_celsius=view.use_celsius)

    def matches(self, record, params):
        return record.matches(params.units, params.city)

    def cached_status(self, record, params):
        return f"Cached ({unit_glyph(params.use_celsius)}) • updated {age_minutes(record.ts)}m ago"

    async def fetch(self, params):
        return await self.fetcher(params.city, self.hours, params.use_celsius)

    def save(self, user, params, result):
        self.store.save_weather(user, result.rows, params.units, params.city)

    def render_success(self, view, params, result):
        view.weather.rows = tuple(result.rows)
        view.weather.status = f"Updated ({unit_glyph(params.use_celsius)})"
        view.location_label = result.label

    def failure_status(self, params, error):
        if isinstance(error, NotFoundError):
            return f"City not found: {params.city}"
        return super().failure_status(params, error)


# ----------------------------------------------------------------------
# News
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class NewsParams:
    topic: str


class NewsRefresher(Refresher):
    domain = Domain.NEWS

    def __init__(self, *args, fetcher: Callable[..., Awaitable[list[NewsRow]]] | None = None,
                 count: int | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        if fetcher is None:
            fetcher = fetch_news_cached if settings.news_memo else fetch_news
        self.fetcher = fetcher
        self.count = settings.news_count if count is None else count

    def panel(self, view):
        return view.news

    def read_params(self, view):
        return NewsParams(topic=view.news_topic)

    def matches(self, record, params):
        return record.matches(params.topic)

    def cached_rows(self, record):
        placeholder = load_placeholder()
        return tuple(r.with_thumbnail(placeholder) for r in record.rows)

    def cached_status(self, record, params):
        return f"Cached • updated {age_minutes(record.ts)}m ago"

    async def fetch(self, params):
        return await self.fetcher(params.topic, self.count)

    def save(self, user, params, result):
        self.store.save_news(user, result, params.topic)

    def render_success(self, view, params, result):
        view.news.rows = tuple(result)
        view.news.status = "Updated"
