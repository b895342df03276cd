"""Worker pool: one asyncio event loop on a background thread.

Network calls run here; CPU-bound steps (PIN hashing, image decode) are pushed
further out with asyncio.to_thread so they do not stall concurrent I/O.
"""

import asyncio
import logging
import threading
from concurrent.futures import Future
from typing import Coroutine

logger = logging.getLogger("daybrief_app.runtime")


class Runtime:
    def __init__(self, name: str = "daybrief-worker"):
        self._loop = asyncio.new_event_loop()
        self._ready = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()
        self._ready.wait()

    def _run(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.call_soon(self._ready.set)
        try:
            self._loop.run_forever()
        finally:
            self._loop.close()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def submit(self, coro: Coroutine) -> Future:
        """Run `coro` on the worker loop; returns a thread-safe future."""
        return asyncio.run_coroutine_threadsafe(coro, self._loop)

    def shutdown(self, timeout: float = 5.0) -> None:
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout)
        logger.info("Worker runtime stopped")
