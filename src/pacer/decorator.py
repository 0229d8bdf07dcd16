"""Decorator API: ``throttle``, ``debounce`` and ``serialize``."""

from collections.abc import Callable, Hashable
from typing import Any, TypeVar, overload

from pacer.config import (
    DebounceConfig,
    DelaySpec,
    Edge,
    Sequence,
    SerializeConfig,
    ThrottleConfig,
)
from pacer.core import Debouncer, Serializer, Throttler
from pacer.wrapper import ControlledFunction

F = TypeVar("F", bound=Callable[..., Any])


def throttle(delay: DelaySpec, *, sequence: Sequence | str = Sequence.SERIAL) -> Throttler:
    """Return a decorator that runs a function at most once per window.

    The wrapped function always returns a future. The first call runs the
    function immediately; every call made while the window is open gets
    the *same* future, resolving (or failing) with that single run.

    Args:
        delay: Window length in seconds, or a callable computing it from
            the bound instance (``None`` for plain functions).
        sequence: How long-running calls affect the window:

            - ``"serial"``: the next run waits for the delay *and* for the
              previous run to finish.
            - ``"concurrent"``: the next run may start once the delay has
              elapsed, even if the previous one is still running.
            - ``"gap"``: the next run waits for the previous one to finish,
              then for a further ``delay``.

    Examples:
    ```python
        @throttle(0.5)
        async def refresh() -> dict: ...

        class Player:
            @throttle(lambda self: self.tick, sequence="gap")
            async def poll(self) -> None: ...
    ```
    """
    return Throttler(config=ThrottleConfig(delay=delay, sequence=Sequence(sequence)))


def debounce(
    delay: DelaySpec,
    *,
    edge: Edge | str = Edge.TRAILING,
    sequence: Sequence | str = Sequence.SERIAL,
) -> Debouncer:
    """Return a decorator that runs a function once per burst of calls.

    Every call within a burst returns the *same* future. Each call restarts
    the ``delay`` timer.

    Args:
        delay: Quiet period in seconds, or a callable computing it from the
            bound instance.
        edge: ``"trailing"`` runs the last call's arguments once calls stop
            for ``delay``; ``"leading"`` runs the first call immediately.
        sequence: Only matters when the function outlasts the delay.
            ``"serial"`` keeps the burst open until the run finishes;
            ``"concurrent"`` closes it on the delay, so the next call starts
            a new run with a new future.

    Examples:
    ```python
        @debounce(0.3)
        def search(query: str) -> list[str]: ...

        results = await search("py")
    ```
    """
    return Debouncer(config=DebounceConfig(delay=delay, edge=Edge(edge), sequence=Sequence(sequence)))


@overload
def serialize(
    func: F,
    /,
) -> ControlledFunction[Any, Any]: ...


@overload
def serialize(
    *,
    group: Hashable | object | None = None,
    per_instance: bool = False,
) -> Serializer: ...


def serialize(
    func: F | None = None,
    /,
    *,
    group: Hashable | object | None = None,
    per_instance: bool = False,
) -> ControlledFunction[Any, Any] | Serializer:
    """Queue calls so they run strictly one at a time, in call order.

    Each call gets its own future. A failing call only fails its own
    future; the next queued call still runs.

    Args:
        func: The function to decorate (when used without parentheses).
        group: Key of a queue shared by every function decorated with it,
            across the functional and decorator forms. Hashable keys
            compare by value, other objects by identity. Without a group
            each decorated function has its own queue.
        per_instance: Scope queues to the bound instance, so methods of
            different objects run concurrently.

    Examples:
    ```python
        @serialize
        async def write(line: str) -> None: ...

        db = serialize(group="db")
        save = db(save_row)
        load = db(load_row)

        class Player:
            @serialize(per_instance=True)
            async def play(self, track: str) -> None: ...
    ```
    """
    serializer = Serializer(config=SerializeConfig(group=group, per_instance=per_instance))

    if func is not None:
        return serializer(func)

    return serializer
