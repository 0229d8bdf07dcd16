"""Timing and concurrency helpers for the pacer tests.

Timing tests are written in ticks so the scenarios read like timelines;
``TICK`` converts them to seconds.
"""

import asyncio
from collections import defaultdict
from collections.abc import Callable
from typing import Any

TICK = 0.005


def ticks(n: float) -> float:
    return n * TICK


async def sleep_ticks(n: float) -> None:
    await asyncio.sleep(n * TICK)


async def seq_futures(fn: Callable[[int], Any], call_ticks: list[int]) -> list[asyncio.Future[Any]]:
    """Call ``fn(t)`` at each tick ``t`` and return the futures in call order."""
    futures: dict[int, asyncio.Future[Any]] = {}

    async def call_at(t: int) -> None:
        await sleep_ticks(t)
        futures[t] = fn(t)

    await asyncio.gather(*(call_at(t) for t in call_ticks))
    return [futures[t] for t in call_ticks]


async def seq_results(fn: Callable[[int], Any], call_ticks: list[int]) -> list[Any]:
    """Like :func:`seq_futures` but awaits and returns the results."""
    futures = await seq_futures(fn, call_ticks)
    return list(await asyncio.gather(*futures))


class Recorder:
    """Tracks how many recorded calls run at once, overall and per label."""

    def __init__(self) -> None:
        self.active = 0
        self.max_active = 0
        self.by_label: dict[str, int] = defaultdict(int)
        self.max_by_label: dict[str, int] = defaultdict(int)
        self.results: list[str] = []

    def enter(self, label: str) -> None:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        self.by_label[label] += 1
        self.max_by_label[label] = max(self.max_by_label[label], self.by_label[label])

    def exit(self, label: str, result: str) -> None:
        self.active -= 1
        self.by_label[label] -= 1
        self.results.append(result)

    def max_concurrency(self, label: str | None = None) -> int:
        if label is None:
            return self.max_active
        return self.max_by_label[label]

    def func(self, label: str, duration: int) -> Callable[[Any], Any]:
        """An async function that records itself while sleeping *duration* ticks."""

        async def run(x: Any) -> str:
            self.enter(label)
            await sleep_ticks(duration)
            result = f"{label}:{x}"
            self.exit(label, result)
            return result

        return run
