from pacer.windows.base import BaseTimingWindow
from pacer.windows.debounce import DebounceWindow
from pacer.windows.registry import build_window
from pacer.windows.throttle import ThrottleWindow

__all__ = [
    "BaseTimingWindow",
    "DebounceWindow",
    "ThrottleWindow",
    "build_window",
]
