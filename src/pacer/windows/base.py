"""Abstract timing window shared by throttle and debounce."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Generic, TypeVar

from pacer._futures import Thunk, invoke, transfer
from pacer.config import Sequence

R = TypeVar("R")

logger = logging.getLogger(__name__)


class BaseTimingWindow(ABC, Generic[R]):
    """Base class for timing windows.

    A window owns a single shared future, a single timer and the
    bookkeeping of one execution of the wrapped function. Every caller
    that joins the window gets the same future.

    Two events drive the window, in either order:

    - **timeout**: the delay elapses (see :meth:`arm`).
    - **settle**: the wrapped call returns or fails (see :meth:`execute`).

    The window closes once it has timed out and, unless ``sequence`` is
    ``CONCURRENT``, the call has settled. Closing cancels the timer and
    calls *on_close* exactly once.

    Subclasses decide *when* to arm and execute by implementing
    :meth:`admit`, :meth:`on_timeout` and :meth:`on_settled`.

    Args:
        delay: Window length in seconds. Must be non-negative.
        sequence: Closing policy.
        on_close: Called once when the window stops accepting joiners.
    """

    __slots__ = (
        "_closed",
        "_fired",
        "_future",
        "_loop",
        "_on_close",
        "_settled",
        "_timed_out",
        "_timer",
        "delay",
        "sequence",
    )

    def __init__(self, delay: float, sequence: Sequence, on_close: Callable[[], None]) -> None:
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")

        self.delay = delay
        self.sequence = Sequence(sequence)
        self._on_close = on_close
        self._loop = asyncio.get_running_loop()
        self._future: asyncio.Future[R] = self._loop.create_future()
        self._timer: asyncio.TimerHandle | None = None
        self._timed_out = False
        self._fired = False
        self._settled = False
        self._closed = False

    @property
    def future(self) -> asyncio.Future[R]:
        """The future shared by every caller that joined this window."""
        return self._future

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        """The event loop that owns the timer and the shared future."""
        return self._loop

    @property
    def timed_out(self) -> bool:
        return self._timed_out

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def settled(self) -> bool:
        return self._settled

    @property
    def closed(self) -> bool:
        return self._closed

    def arm(self) -> None:
        """(Re)start the window timer, replacing any pending one."""
        if self._closed:
            return
        self._cancel_timer()
        self._timer = self._loop.call_later(self.delay, self._handle_timeout)

    def execute(self, thunk: Thunk[R]) -> None:
        """Run *thunk* unless this window already ran one."""
        if self._fired:
            return
        self._fired = True
        invoke(thunk).add_done_callback(self._handle_settled)

    def close_if_ready(self) -> bool:
        """Close the window if its policy allows it. Returns ``closed``."""
        if self._closed:
            return True
        if self._timed_out and (self.sequence is Sequence.CONCURRENT or self._settled):
            self._closed = True
            self._cancel_timer()
            logger.debug("Closing %r", self)
            self._on_close()
        return self._closed

    @abstractmethod
    def admit(self, thunk: Thunk[R]) -> None:
        """Accept a call routed to this window."""

    @abstractmethod
    def on_timeout(self) -> None:
        """Called when the delay expires, before the close check."""

    @abstractmethod
    def on_settled(self) -> None:
        """Called after the wrapped call settles, before the close check."""

    def _handle_timeout(self) -> None:
        self._timer = None
        self._timed_out = True
        self.on_timeout()
        self.close_if_ready()

    def _handle_settled(self, execution: asyncio.Future[R]) -> None:
        transfer(execution, self._future)
        self._settled = True
        self.on_settled()
        self.close_if_ready()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(delay={self.delay}, "
            f"sequence={self.sequence.value}, "
            f"timed_out={self._timed_out}, "
            f"settled={self._settled}, "
            f"closed={self._closed})"
        )
