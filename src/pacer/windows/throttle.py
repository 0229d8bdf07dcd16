"""Throttle window: run on the first call, share the result until closed."""

from typing import TypeVar

from pacer._futures import Thunk
from pacer.config import Sequence
from pacer.windows.base import BaseTimingWindow

R = TypeVar("R")


class ThrottleWindow(BaseTimingWindow[R]):
    """Leading-edge window that runs the wrapped call exactly once.

    How it works:
        - The first call starts the window and runs immediately.
        - Every call while the window is open gets the same future.
        - ``sequence`` decides when the next run may start.

    Example::

        delay=30ms, sequence=serial, fn returns its argument

        t=0   fn(0)  -> run, timer (30ms)
        t=20  fn(20) -> joins, resolves to 0
        t=30  timer fires, fn already settled -> close
        t=40  fn(40) -> new window, resolves to 40

    ========== ======================= ===================== ======================
    sequence   timer starts            on settle             closes when
    ========== ======================= ===================== ======================
    serial     at start                --                    timed out and settled
    concurrent at start                --                    timed out
    gap        after the call settles  arm the timer         timed out and settled
    ========== ======================= ===================== ======================
    """

    __slots__ = ()

    def start(self, thunk: Thunk[R]) -> None:
        """Run *thunk* and start the window clock."""
        if self.sequence is not Sequence.GAP:
            self.arm()
        self.execute(thunk)

    def admit(self, thunk: Thunk[R]) -> None:
        """Start on the first call; later callers only join."""
        if not self.fired:
            self.start(thunk)

    def on_timeout(self) -> None:
        pass

    def on_settled(self) -> None:
        # Failures take this path too, so a failed run still gets its gap.
        if self.sequence is Sequence.GAP:
            self.arm()
