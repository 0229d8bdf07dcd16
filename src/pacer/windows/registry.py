"""Maps each config type to a callable that builds a timing window.

When you add a new window kind:

1. Add its config dataclass to ``config.py``.
2. Add an entry to ``REGISTRY`` pointing to a factory that constructs the
   window from the config, a resolved delay and the close callback.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pacer.config import DebounceConfig, ThrottleConfig
from pacer.windows.base import BaseTimingWindow
from pacer.windows.debounce import DebounceWindow
from pacer.windows.throttle import ThrottleWindow

WindowFactory = Callable[[Any, float, Callable[[], None]], BaseTimingWindow[Any]]

REGISTRY: dict[type, WindowFactory] = {
    ThrottleConfig: lambda cfg, delay, on_close: ThrottleWindow(
        delay,
        cfg.sequence,
        on_close,
    ),
    DebounceConfig: lambda cfg, delay, on_close: DebounceWindow(
        delay,
        cfg.sequence,
        on_close,
        edge=cfg.edge,
    ),
}


def build_window(
    config: ThrottleConfig | DebounceConfig,
    delay: float,
    on_close: Callable[[], None],
) -> BaseTimingWindow[Any]:
    """Build the window kind registered for ``type(config)``."""
    factory = REGISTRY.get(type(config))
    if not factory:
        raise ValueError(
            f"Unknown window config: {type(config).__name__}. "
            f"Registered: {', '.join(t.__name__ for t in REGISTRY)}"
        )
    return factory(config, delay, on_close)
