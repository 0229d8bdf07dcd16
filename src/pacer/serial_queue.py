"""FIFO execution chain that runs queued calls one at a time."""

import asyncio
import functools
import logging
import threading
from collections.abc import Awaitable
from typing import Any, TypeVar

from pacer._futures import Thunk, invoke, transfer

R = TypeVar("R")

logger = logging.getLogger(__name__)


def _wait_for(previous: asyncio.Task[None]) -> Awaitable[Any] | None:
    """Return an awaitable that completes with *previous*, if it can still finish.

    A unit owned by another running loop is awaited through that loop. A
    unit whose loop has stopped or closed can never finish, so it is skipped.
    """
    if previous.done():
        return None
    owner = previous.get_loop()
    if owner is asyncio.get_running_loop():
        return asyncio.wait((previous,))
    if owner.is_closed() or not owner.is_running():
        return None
    waiter = asyncio.wait((previous,))
    try:
        return asyncio.wrap_future(asyncio.run_coroutine_threadsafe(waiter, owner))
    except RuntimeError:
        waiter.close()
        return None


class SerialQueue:
    """Runs enqueued thunks strictly one after another.

    Each unit is an internal task that first waits for the previous unit
    to finish (successfully, with an error, or cancelled) and then runs
    its own thunk. The caller gets a separate future carrying only that
    unit's outcome, so:

    - a failure reaches its own caller and never stalls the chain;
    - cancelling a returned future does not let the next unit start
      before the current one has finished.

    Example::

        queue = SerialQueue()
        first = queue.enqueue(lambda: fetch("a"))
        second = queue.enqueue(lambda: fetch("b"))  # starts after "a" ends

    Complexity:
        Time:   O(1) per enqueue
        Memory: O(n) pending units
    """

    __slots__ = ("_lock", "_pending", "_tail")

    def __init__(self) -> None:
        self._tail: asyncio.Task[None] | None = None
        self._pending = 0
        self._lock = threading.Lock()

    @property
    def pending(self) -> int:
        """Number of enqueued units that have not finished yet."""
        return self._pending

    @property
    def idle(self) -> bool:
        return self._tail is None or self._tail.done()

    def enqueue(self, thunk: Thunk[R]) -> asyncio.Future[R]:
        """Queue *thunk* behind all previously enqueued work."""
        loop = asyncio.get_running_loop()
        result: asyncio.Future[R] = loop.create_future()
        with self._lock:
            task = loop.create_task(self._run(self._tail, thunk, result))
            self._tail = task
            self._pending += 1
        task.add_done_callback(functools.partial(self._finish, result))
        return result

    async def _run(
        self,
        previous: asyncio.Task[None] | None,
        thunk: Thunk[R],
        result: asyncio.Future[R],
    ) -> None:
        try:
            waiter = _wait_for(previous) if previous is not None else None
            if waiter is not None:
                await waiter
            execution = invoke(thunk)
            await asyncio.wait((execution,))
            if not execution.cancelled() and execution.exception() is not None:
                logger.debug("Queued call failed: %r", execution.exception())
            transfer(execution, result)
        except Exception as exc:
            logger.debug("Queue unit failed outside its call: %r", exc)
            if not result.done():
                result.set_exception(exc)

    def _finish(self, result: asyncio.Future[Any], task: asyncio.Task[None]) -> None:
        # Also reached when the unit is cancelled before it ever ran.
        with self._lock:
            self._pending -= 1
        if task.cancelled():
            result.cancel()

    def __repr__(self) -> str:
        return f"SerialQueue(pending={self._pending})"
