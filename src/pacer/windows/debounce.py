"""Debounce window: run once per burst, on its leading or trailing edge."""

from collections.abc import Callable
from typing import TypeVar

from pacer._futures import Thunk
from pacer.config import Edge, Sequence
from pacer.windows.base import BaseTimingWindow

R = TypeVar("R")


class DebounceWindow(BaseTimingWindow[R]):
    """Window that re-arms its timer on every call.

    How it works:
        - Each call plans the latest thunk and restarts the timer.
        - ``LEADING`` runs the first call's thunk immediately.
        - ``TRAILING`` runs the most recent thunk once the timer expires
          without another call.
        - ``SERIAL`` keeps absorbing calls until the run settles;
          ``CONCURRENT`` closes as soon as the timer expires.

    Example::

        delay=20ms, edge=trailing, fn returns its argument

        t=0   fn(0)  -> timer (20ms)
        t=10  fn(10) -> reset timer
        t=20  fn(20) -> reset timer
        t=40  timer fires -> run fn(20); all three resolve to 20
    """

    __slots__ = ("_thunk", "edge")

    def __init__(
        self,
        delay: float,
        sequence: Sequence,
        on_close: Callable[[], None],
        *,
        edge: Edge = Edge.TRAILING,
    ) -> None:
        if Sequence(sequence) is Sequence.GAP:
            raise ValueError("debounce sequence must be 'serial' or 'concurrent', got 'gap'")
        super().__init__(delay, sequence, on_close)
        self.edge = Edge(edge)
        self._thunk: Thunk[R] | None = None

    def plan(self, thunk: Thunk[R]) -> None:
        """Record *thunk* as the latest call and restart the timer."""
        first_call = self._thunk is None
        self._thunk = thunk
        self.arm()
        if first_call and self.edge is Edge.LEADING:
            self.execute(thunk)

    def admit(self, thunk: Thunk[R]) -> None:
        self.plan(thunk)

    def on_timeout(self) -> None:
        if self.edge is Edge.TRAILING and self._thunk is not None:
            self.execute(self._thunk)

    def on_settled(self) -> None:
        pass

    def __repr__(self) -> str:
        return f"{super().__repr__()[:-1]}, edge={self.edge.value})"
