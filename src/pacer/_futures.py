"""Normalizes sync and async callables into a single future contract."""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

R = TypeVar("R")

Thunk = Callable[[], R | Awaitable[R]]


def invoke(thunk: Thunk[R]) -> asyncio.Future[R]:
    """Run *thunk* now and return a future for its outcome.

    A plain return value or a synchronous exception is stored in an
    already-completed future, and a raised ``CancelledError`` cancels it;
    an awaitable is scheduled on the running loop. Either way the caller
    observes the outcome the same way.
    """
    loop = asyncio.get_running_loop()
    try:
        result = thunk()
    except asyncio.CancelledError:
        future = loop.create_future()
        future.cancel()
        return future
    except Exception as exc:
        future = loop.create_future()
        future.set_exception(exc)
        return future

    if inspect.isawaitable(result):
        return asyncio.ensure_future(result)

    future = loop.create_future()
    future.set_result(result)
    return future


def transfer(source: asyncio.Future[Any], target: asyncio.Future[Any]) -> None:
    """Copy the outcome of a finished *source* into *target*.

    Does nothing if *target* already completed (e.g. a caller cancelled it).
    """
    if target.done():
        return
    if source.cancelled():
        target.cancel()
        return
    exc = source.exception()
    if exc is not None:
        target.set_exception(exc)
    else:
        target.set_result(source.result())
