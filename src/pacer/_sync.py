"""Background event loop for calling wrapped functions from synchronous code.

Wrapped functions hand out asyncio futures, so they need a running loop.
Threads without one submit their calls to a single shared loop running in
a daemon thread; every blocking call therefore throttles, debounces or
serializes against the other blocking calls.
"""

import asyncio
import logging
import threading
from collections.abc import Coroutine
from typing import Any, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class _LoopThread:
    """Owns an event loop running forever in a daemon thread."""

    __slots__ = ("_lock", "_loop", "_ready", "_thread")

    def __init__(self) -> None:
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._ready = threading.Event()
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the loop thread (idempotent)."""
        with self._lock:
            if self._thread is None:
                self._thread = threading.Thread(target=self._serve, name="pacer-loop", daemon=True)
                self._thread.start()
        self._ready.wait()

    def _serve(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._ready.set()
        logger.debug("Background loop started in %s", threading.current_thread().name)
        try:
            loop.run_forever()
        finally:
            loop.close()

    def run_coroutine(self, coro: Coroutine[Any, Any, T], timeout: float | None = None) -> T:
        """Run *coro* on the background loop and block for its result."""
        if self._loop is None:
            self.start()
        loop = self._loop
        assert loop is not None
        if threading.current_thread() is self._thread:
            coro.close()
            raise RuntimeError("cannot block on the pacer loop from inside it; await the call instead")
        future = asyncio.run_coroutine_threadsafe(coro, loop)
        return future.result(timeout)

    def shutdown(self) -> None:
        """Stop the loop and join its thread."""
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = None
            self._thread = None
            self._ready.clear()
        if loop is not None:
            loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout=5.0)


_shared_loop = _LoopThread()


def get_shared_loop() -> _LoopThread:
    """Return the shared background loop thread, starting it if needed."""
    _shared_loop.start()
    return _shared_loop
