"""Application state and the synchronizer that owns it.

AppState is only touched under the synchronizer lock. UI-visible effects go
through `present`, which runs callbacks one at a time, in submission order, on
the presentation thread, and silently drops them once the view is gone.
"""

import dataclasses
import logging
import queue
import threading
import weakref
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from daybrief_engine.storage.paths import GUEST

logger = logging.getLogger("daybrief_app.state")


class Page(str, Enum):
    WEATHER = "weather"
    NEWS = "news"
    SETTINGS = "settings"
    ACCOUNT = "account"


@dataclass
class AppState:
    is_logged_in: bool = False
    current_page: Page = Page.WEATHER
    clock_text: str = ""
    current_user: str | None = None  # None = guest namespace


_STOP = object()


class _Flush:
    def __init__(self):
        self.done = threading.Event()


class Synchronizer:
    def __init__(self, state: AppState | None = None, view: Any = None):
        self._state = state or AppState()
        self._lock = threading.Lock()
        self._queue_lock = threading.Lock()
        self._view_ref: weakref.ref | None = None
        self._queue: queue.Queue = queue.Queue()
        self._closed = False
        self._thread = threading.Thread(target=self._present_loop, name="daybrief-presenter", daemon=True)
        self._thread.start()
        if view is not None:
            self.attach_view(view)

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    def mutate(self, fn: Callable[[AppState], Any]) -> Any:
        with self._lock:
            return fn(self._state)

    def snapshot(self) -> AppState:
        with self._lock:
            return dataclasses.replace(self._state)

    def current_user(self) -> str:
        with self._lock:
            return self._state.current_user or GUEST

    def is_logged_in(self) -> bool:
        with self._lock:
            return self._state.is_logged_in

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def attach_view(self, view: Any) -> None:
        self._view_ref = weakref.ref(view)

    def detach_view(self) -> None:
        self._view_ref = None

    def view_alive(self) -> bool:
        ref = self._view_ref
        return ref is not None and ref() is not None

    def present(self, fn: Callable[[Any], Any], on_drop: Callable[[], Any] | None = None) -> None:
        """Schedule fn(view) on the presentation thread. Never blocks, never raises."""
        with self._queue_lock:
            if not self._closed:
                self._queue.put((fn, on_drop))
                return
        self._dropped(on_drop)

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until everything presented so far has run."""
        if threading.current_thread() is self._thread:
            return True
        with self._queue_lock:
            closed = self._closed
            if not closed:
                marker = _Flush()
                self._queue.put(marker)
        if closed:
            self._thread.join(timeout)
            return not self._thread.is_alive()
        return marker.done.wait(timeout)

    def close(self, timeout: float | None = 2.0) -> None:
        # Nothing is enqueued after _STOP: present/flush check _closed under the same lock.
        with self._queue_lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_STOP)
        if threading.current_thread() is not self._thread:
            self._thread.join(timeout)

    def _present_loop(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                self._drain_dropped()
                break
            if isinstance(item, _Flush):
                item.done.set()
                continue
            fn, on_drop = item
            ref = self._view_ref
            view = ref() if ref is not None else None
            if view is None:
                self._dropped(on_drop)
                continue
            try:
                fn(view)
            except Exception as e:
                logger.error("Presentation callback failed: %s", e, exc_info=True)
            try:
                view.commit()
            except Exception as e:
                logger.error("View commit failed: %s", e, exc_info=True)
            del view

    def _dropped(self, on_drop) -> None:
        if on_drop is None:
            return
        try:
            on_drop()
        except Exception as e:
            logger.error("Drop callback failed: %s", e)

    def _drain_dropped(self) -> None:
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return
            if isinstance(item, _Flush):
                item.done.set()
            elif item is not _STOP:
                self._dropped(item[1])

    # ------------------------------------------------------------------
    # Centralized setters
    # ------------------------------------------------------------------

    def set_page(self, page: Page) -> None:
        self.mutate(lambda s: setattr(s, "current_page", page))
        self.present(lambda v: setattr(v, "current_page", page))

    def set_login(self, logged_in: bool) -> None:
        self.mutate(lambda s: setattr(s, "is_logged_in", logged_in))

        def _apply(v):
            v.is_logged_in = logged_in
            if logged_in:
                v.login_error = ""
        self.present(_apply)

    def set_clock(self, text: str) -> None:
        self.mutate(lambda s: setattr(s, "clock_text", text))
        self.present(lambda v: setattr(v, "clock_text", text))

    def set_current_user(self, user: str | None) -> None:
        self.mutate(lambda s: setattr(s, "current_user", user))
        label = user or GUEST
        self.present(lambda v: setattr(v, "current_user", label))

    def set_login_error(self, msg: str) -> None:
        self.present(lambda v: setattr(v, "login_error", msg))
