"""Configuration types for the pacer library."""

from collections.abc import Callable, Hashable
from dataclasses import dataclass
from enum import StrEnum
from numbers import Real
from typing import Any

DelaySpec = float | Callable[[Any], float]


class Sequence(StrEnum):
    """Policies deciding when a timing window stops accepting joiners.

    SERIAL:     The window stays open until the delay has elapsed *and*
                the wrapped call has settled.
    CONCURRENT: The window closes as soon as the delay elapses, even if
                the wrapped call is still running.
    GAP:        Throttle only. The delay starts counting when the wrapped
                call settles, enforcing an idle gap between runs.
    """

    SERIAL = "serial"
    CONCURRENT = "concurrent"
    GAP = "gap"


class Edge(StrEnum):
    """Which end of a burst a debounced function runs on."""

    LEADING = "leading"
    TRAILING = "trailing"


def _check_delay(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValueError(f"delay must be a number of seconds, got {value!r}")
    if value < 0:
        raise ValueError(f"delay must be non-negative, got {value}")
    return float(value)


def resolve_delay(delay: DelaySpec, receiver: Any = None) -> float:
    """Return the delay in seconds, computing it from *receiver* if callable."""
    if callable(delay):
        return _check_delay(delay(receiver))
    return _check_delay(delay)


@dataclass(frozen=True, slots=True)
class ThrottleConfig:
    """Configuration for a Throttler.

    Attributes:
        delay: Window length in seconds, or a callable receiving the bound
               instance (``None`` for plain functions) and returning it.
        sequence: How the window closes relative to the running call.
    """

    delay: DelaySpec
    sequence: Sequence = Sequence.SERIAL

    def __post_init__(self) -> None:
        if not callable(self.delay):
            _check_delay(self.delay)
        object.__setattr__(self, "sequence", Sequence(self.sequence))

    def resolve_delay(self, receiver: Any = None) -> float:
        return resolve_delay(self.delay, receiver)


@dataclass(frozen=True, slots=True)
class DebounceConfig:
    """Configuration for a Debouncer.

    Attributes:
        delay: Quiet period in seconds, or a callable computing it from the
               bound instance.
        edge: Run on the first call of a burst (leading) or after the
              quiet period (trailing).
        sequence: Whether the window stays open while the call is running
                  (serial) or closes strictly on the delay (concurrent).
    """

    delay: DelaySpec
    edge: Edge = Edge.TRAILING
    sequence: Sequence = Sequence.SERIAL

    def __post_init__(self) -> None:
        if not callable(self.delay):
            _check_delay(self.delay)
        object.__setattr__(self, "edge", Edge(self.edge))
        object.__setattr__(self, "sequence", Sequence(self.sequence))
        if self.sequence is Sequence.GAP:
            raise ValueError("debounce sequence must be 'serial' or 'concurrent', got 'gap'")

    def resolve_delay(self, receiver: Any = None) -> float:
        return resolve_delay(self.delay, receiver)


@dataclass(frozen=True, slots=True)
class SerializeConfig:
    """Configuration for a Serializer.

    Attributes:
        group: Key of a queue shared by every function using it. ``None``
               gives each decorated function a queue of its own.
        per_instance: Scope queues to the bound instance, so methods of
                      different objects run concurrently.
    """

    group: Hashable | object | None = None
    per_instance: bool = False
