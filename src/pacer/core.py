"""Controllers that turn plain functions into rate-controlled wrappers."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pacer.config import DebounceConfig, Edge, Sequence, SerializeConfig, ThrottleConfig
from pacer.routing import DEFAULT_GROUP, GLOBAL, RoutingTable
from pacer.serial_queue import SerialQueue
from pacer.windows.registry import build_window
from pacer.wrapper import ControlledFunction

if TYPE_CHECKING:
    from pacer._futures import Thunk
    from pacer.windows.base import BaseTimingWindow

# Process-wide: a group key names the same queue for every function using it.
_QUEUES: RoutingTable[SerialQueue] = RoutingTable()


def queue_table() -> RoutingTable[SerialQueue]:
    """Return the process-wide table of serialization queues."""
    return _QUEUES


class _WindowController:
    """Shared plumbing of :class:`Throttler` and :class:`Debouncer`.

    Each decorated function gets its own routing table keyed by receiver,
    so every instance of a decorated method has independent windows and
    resolves its own delay.
    """

    __slots__ = ("_config",)

    def __init__(self, config: ThrottleConfig | DebounceConfig) -> None:
        self._config = config

    @property
    def delay(self) -> Any:
        return self._config.delay

    @property
    def sequence(self) -> Sequence:
        return self._config.sequence

    def __call__(self, fn: Callable[..., Any]) -> ControlledFunction[Any, Any]:
        config = self._config
        routes: RoutingTable[BaseTimingWindow[Any]] = RoutingTable()

        def dispatch(receiver: Any, thunk: Thunk[Any]) -> asyncio.Future[Any]:
            def open_window(release: Callable[[], None]) -> BaseTimingWindow[Any]:
                delay = config.resolve_delay(None if receiver is GLOBAL else receiver)
                return build_window(config, delay, release)

            # Windows are bound to the loop that opened them.
            loop = asyncio.get_running_loop()
            window = routes.get_or_create(
                receiver,
                DEFAULT_GROUP,
                open_window,
                stale=lambda current: current.loop is not loop,
            )
            window.admit(thunk)
            return window.future

        return ControlledFunction(fn, dispatch, controller=self, routes=routes)


class Throttler(_WindowController):
    """Decorator object limiting a function to one run per window.

    The first call runs the function immediately; every call until the
    window closes shares that run's future.

    Example::

        throttler = Throttler(config=ThrottleConfig(delay=0.1))

        @throttler
        async def refresh() -> State: ...
    """

    __slots__ = ()

    def __init__(self, *, config: ThrottleConfig) -> None:
        super().__init__(config)

    @property
    def config(self) -> ThrottleConfig:
        return self._config  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f"Throttler(delay={self._config.delay!r}, sequence={self._config.sequence.value})"


class Debouncer(_WindowController):
    """Decorator object running a function once per burst of calls.

    Example::

        debouncer = Debouncer(config=DebounceConfig(delay=0.2))

        @debouncer
        def save(draft: str) -> None: ...
    """

    __slots__ = ()

    def __init__(self, *, config: DebounceConfig) -> None:
        super().__init__(config)

    @property
    def config(self) -> DebounceConfig:
        return self._config  # type: ignore[return-value]

    @property
    def edge(self) -> Edge:
        return self.config.edge

    def __repr__(self) -> str:
        return (
            f"Debouncer(delay={self._config.delay!r}, "
            f"edge={self.config.edge.value}, "
            f"sequence={self._config.sequence.value})"
        )


class _AnonymousGroup:
    """Group key private to one decorated function."""

    __slots__ = ("_name",)

    def __init__(self, fn: Callable[..., Any]) -> None:
        self._name = getattr(fn, "__qualname__", repr(fn))

    def __repr__(self) -> str:
        return f"<anonymous group of {self._name}>"


class Serializer:
    """Decorator object queueing calls so they run one at a time.

    Queues live in one process-wide table, so functions and methods
    decorated with the same ``group`` share a queue. Without a group each
    decorated function is serialized only with itself. With
    ``per_instance`` the queues are scoped to the bound instance.

    Example::

        db = Serializer(config=SerializeConfig(group="db"))

        @db
        async def save(row: Row) -> None: ...

        @db
        async def load(key: str) -> Row: ...
    """

    __slots__ = ("_config",)

    def __init__(self, *, config: SerializeConfig | None = None) -> None:
        self._config = config or SerializeConfig()

    @property
    def config(self) -> SerializeConfig:
        return self._config

    def __call__(self, fn: Callable[..., Any]) -> ControlledFunction[Any, Any]:
        group = self._config.group
        if group is None:
            group = _AnonymousGroup(fn)
        per_instance = self._config.per_instance

        def dispatch(receiver: Any, thunk: Thunk[Any]) -> asyncio.Future[Any]:
            owner = receiver if per_instance else GLOBAL
            queue = _QUEUES.get_or_create(owner, group, lambda release: SerialQueue())
            return queue.enqueue(thunk)

        return ControlledFunction(fn, dispatch, controller=self, routes=_QUEUES)

    def __repr__(self) -> str:
        return f"Serializer(group={self._config.group!r}, per_instance={self._config.per_instance})"
