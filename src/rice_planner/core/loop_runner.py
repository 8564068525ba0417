# src/rice_planner/core/loop_runner.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from collections.abc import Coroutine
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BackgroundLoop:
    """
    One asyncio event loop in a daemon thread.

    Why a thread:
    - console REPL is blocking (input()).
    - backend calls are async, and fire-and-forget deletes need a loop that
      keeps running between commands.

    Every coroutine goes through this single loop, so store mutations stay
    serialized even though the caller is another thread.
    """

    def __init__(self) -> None:
        self._ready = threading.Event()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread = threading.Thread(target=self._run, name="rice-planner-loop", daemon=True)

    def _run(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._ready.set()
        try:
            loop.run_forever()
        finally:
            with contextlib.suppress(Exception):
                loop.run_until_complete(loop.shutdown_asyncgens())
            with contextlib.suppress(Exception):
                loop.close()

    def start(self) -> "BackgroundLoop":
        self._thread.start()
        if not self._ready.wait(timeout=5.0) or self._loop is None:
            raise RuntimeError("Background event loop did not initialize.")
        logger.debug("Background loop started.")
        return self

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            raise RuntimeError("Background loop is not running.")
        return self._loop

    def run(self, coro: Coroutine[Any, Any, T], timeout: float | None = None) -> T:
        """Submit `coro` to the loop and block until it finishes (exceptions propagate)."""
        fut = asyncio.run_coroutine_threadsafe(coro, self.loop)
        return fut.result(timeout=timeout)

    def stop(self, timeout: float | None = 10.0) -> None:
        loop = self._loop
        if loop is None or not self._thread.is_alive():
            return
        try:
            loop.call_soon_threadsafe(loop.stop)
        except Exception:
            logger.debug("Failed to signal loop stop.", exc_info=True)
        self._thread.join(timeout=timeout)
        logger.debug("Background loop stopped.")
