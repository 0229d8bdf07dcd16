"""Tests for the window registry."""

import asyncio

import pytest

from pacer.config import DebounceConfig, Edge, Sequence, SerializeConfig, ThrottleConfig
from pacer.windows.debounce import DebounceWindow
from pacer.windows.registry import REGISTRY, build_window
from pacer.windows.throttle import ThrottleWindow


class TestBuildWindow:
    async def test_throttle_config_returns_throttle_window(self, throttle_config, closes):
        window = build_window(throttle_config, 0.5, closes)
        assert isinstance(window, ThrottleWindow)

    async def test_debounce_config_returns_debounce_window(self, debounce_config, closes):
        window = build_window(debounce_config, 0.5, closes)
        assert isinstance(window, DebounceWindow)

    async def test_throttle_passes_config_values(self, closes):
        cfg = ThrottleConfig(delay=lambda self: 9.0, sequence="gap")
        window = build_window(cfg, 1.5, closes)
        assert window.delay == 1.5
        assert window.sequence is Sequence.GAP

    async def test_debounce_passes_config_values(self, debounce_config, closes):
        window = build_window(debounce_config, 0.25, closes)
        assert window.delay == 0.25
        assert window.sequence is Sequence.CONCURRENT
        assert window.edge is Edge.LEADING

    async def test_close_callback_wired(self, closes):
        window = build_window(ThrottleConfig(delay=0), 0, closes)
        window.start(lambda: None)
        await window.future
        await asyncio.sleep(0.01)
        assert window.closed
        assert closes.calls == [1]

    def test_unknown_config_raises(self, serialize_config, closes):
        with pytest.raises(ValueError, match="Unknown window config: SerializeConfig"):
            build_window(serialize_config, 0.5, closes)

    def test_registry_keys(self):
        assert set(REGISTRY) == {ThrottleConfig, DebounceConfig}
        assert SerializeConfig not in REGISTRY

    def test_debounce_config_subclass_not_registered(self, closes):
        class Custom(DebounceConfig):
            pass

        with pytest.raises(ValueError, match="Registered: ThrottleConfig, DebounceConfig"):
            build_window(Custom(delay=1), 1, closes)
