"""pacer — throttle, debounce and serialize for sync and async Python functions.

Each decorator wraps a function and returns one with the same parameters
whose calls always return an :class:`asyncio.Future`.

Basic usage:

    from pacer import debounce, serialize, throttle

    @throttle(0.5)
    async def refresh() -> dict:
        return await api.get_state()

    @debounce(0.3)
    def search(query: str) -> list[str]:
        return index.lookup(query)

    @serialize(group="db")
    async def save(row: dict) -> None:
        await db.insert(row)

    state = await refresh()        # runs now
    same = await refresh()         # joins the open window
    hits = await search("py")      # runs 0.3s after the last call

Synchronous callers:

    hits = search.blocking("py")
"""

from pacer.config import (
    DebounceConfig,
    DelaySpec,
    Edge,
    Sequence,
    SerializeConfig,
    ThrottleConfig,
)
from pacer.core import Debouncer, Serializer, Throttler, queue_table
from pacer.decorator import debounce, serialize, throttle
from pacer.routing import GLOBAL, RoutingTable
from pacer.serial_queue import SerialQueue
from pacer.windows.base import BaseTimingWindow
from pacer.windows.debounce import DebounceWindow
from pacer.windows.throttle import ThrottleWindow
from pacer.wrapper import BoundControlledFunction, ControlledFunction

__all__ = [
    "GLOBAL",
    "BaseTimingWindow",
    "BoundControlledFunction",
    "ControlledFunction",
    "DebounceConfig",
    "DebounceWindow",
    "Debouncer",
    "DelaySpec",
    "Edge",
    "RoutingTable",
    "Sequence",
    "SerialQueue",
    "SerializeConfig",
    "Serializer",
    "ThrottleConfig",
    "ThrottleWindow",
    "Throttler",
    "debounce",
    "queue_table",
    "serialize",
    "throttle",
]

__version__ = "0.1.0"
