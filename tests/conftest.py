"""Shared fixtures for pacer tests."""

import pytest

from helpers import Recorder
from pacer.config import DebounceConfig, SerializeConfig, ThrottleConfig
from pacer.core import queue_table


@pytest.fixture
def throttle_config():
    return ThrottleConfig(delay=0.5)


@pytest.fixture
def debounce_config():
    return DebounceConfig(delay=0.5, edge="leading", sequence="concurrent")


@pytest.fixture
def serialize_config():
    return SerializeConfig(group="db", per_instance=True)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def closes():
    """A close callback that records how often it was called."""
    calls: list[int] = []

    def on_close() -> None:
        calls.append(1)

    on_close.calls = calls  # type: ignore[attr-defined]
    return on_close


@pytest.fixture(autouse=True)
def _fresh_queues():
    # Serialization queues are process-wide; keep tests from sharing them.
    yield
    queue_table().clear()
