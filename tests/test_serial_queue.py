"""Tests for SerialQueue."""

import asyncio

import pytest

from helpers import sleep_ticks
from pacer.serial_queue import SerialQueue


class TestSerialQueueOrdering:
    async def test_runs_one_at_a_time_in_order(self, recorder):
        queue = SerialQueue()
        work = recorder.func("q", 5)
        futures = [queue.enqueue(lambda i=i: work(i)) for i in range(3)]
        assert await asyncio.gather(*futures) == ["q:0", "q:1", "q:2"]
        assert recorder.max_concurrency() == 1
        assert recorder.results == ["q:0", "q:1", "q:2"]

    async def test_each_caller_gets_own_future(self):
        queue = SerialQueue()
        f1 = queue.enqueue(lambda: 1)
        f2 = queue.enqueue(lambda: 2)
        assert f1 is not f2
        assert await f1 == 1
        assert await f2 == 2

    async def test_sync_thunks_supported(self):
        queue = SerialQueue()
        assert await queue.enqueue(lambda: "sync") == "sync"

    async def test_work_does_not_start_before_previous_finishes(self):
        queue = SerialQueue()
        events = []

        async def first():
            events.append("first:start")
            await sleep_ticks(5)
            events.append("first:end")

        def second():
            events.append("second:start")

        await asyncio.gather(queue.enqueue(first), queue.enqueue(second))
        assert events == ["first:start", "first:end", "second:start"]


class TestSerialQueueFailures:
    async def test_failure_isolated_from_next_unit(self):
        queue = SerialQueue()
        events = []

        async def fails():
            events.append("u1:start")
            await sleep_ticks(5)
            events.append("u1:end")
            raise RuntimeError("u1")

        def succeeds():
            events.append("u2:start")
            return "u2"

        f1 = queue.enqueue(fails)
        f2 = queue.enqueue(succeeds)
        with pytest.raises(RuntimeError, match="u1"):
            await f1
        assert await f2 == "u2"
        assert events == ["u1:start", "u1:end", "u2:start"]

    async def test_sync_failure_isolated(self):
        queue = SerialQueue()

        def boom():
            raise ValueError("sync")

        f1 = queue.enqueue(boom)
        f2 = queue.enqueue(lambda: "ok")
        with pytest.raises(ValueError, match="sync"):
            await f1
        assert await f2 == "ok"

    async def test_many_failures_do_not_poison_queue(self):
        queue = SerialQueue()

        def boom():
            raise ValueError("x")

        failures = [queue.enqueue(boom) for _ in range(5)]
        results = await asyncio.gather(*failures, return_exceptions=True)
        assert all(isinstance(r, ValueError) for r in results)
        assert await queue.enqueue(lambda: "still works") == "still works"

    async def test_cancelled_caller_future_does_not_release_next(self):
        queue = SerialQueue()
        events = []

        async def long():
            await sleep_ticks(6)
            events.append("long:end")

        def after():
            events.append("after")

        f1 = queue.enqueue(long)
        f2 = queue.enqueue(after)
        f1.cancel()
        await f2
        assert events == ["long:end", "after"]


class TestSerialQueueState:
    async def test_new_queue_is_idle(self):
        queue = SerialQueue()
        assert queue.idle
        assert queue.pending == 0

    async def test_pending_counts_unfinished_units(self):
        queue = SerialQueue()
        f1 = queue.enqueue(lambda: sleep_ticks(2))
        f2 = queue.enqueue(lambda: None)
        assert queue.pending == 2
        assert not queue.idle
        await asyncio.gather(f1, f2)
        await asyncio.sleep(0)
        assert queue.pending == 0
        assert queue.idle

    def test_repr(self):
        assert repr(SerialQueue()) == "SerialQueue(pending=0)"


class TestSerialQueueAcrossLoops:
    def test_successive_event_loops(self):
        queue = SerialQueue()

        async def call(value):
            return await asyncio.wait_for(queue.enqueue(lambda: value), 1.0)

        assert asyncio.run(call(1)) == 1
        assert asyncio.run(call(2)) == 2
        assert queue.pending == 0

    def test_unit_abandoned_with_its_loop_does_not_block_next(self):
        queue = SerialQueue()

        async def abandon():
            queue.enqueue(lambda: asyncio.sleep(10))

        async def call():
            return await asyncio.wait_for(queue.enqueue(lambda: "next"), 1.0)

        asyncio.run(abandon())
        assert asyncio.run(call()) == "next"
        assert queue.pending == 0

    async def test_waits_for_unit_on_another_running_loop(self):
        queue = SerialQueue()
        events = []

        async def on_loop():
            events.append("loop:start")
            await sleep_ticks(6)
            events.append("loop:end")

        def on_thread():
            async def enqueue():
                return await queue.enqueue(lambda: events.append("thread") or "thread")

            return asyncio.run(enqueue())

        first = queue.enqueue(on_loop)
        assert await asyncio.to_thread(on_thread) == "thread"
        await first
        assert events == ["loop:start", "loop:end", "thread"]

    async def test_cancelled_unit_cancels_caller_future(self):
        queue = SerialQueue()
        blocker = queue.enqueue(lambda: sleep_ticks(4))
        waiting = queue.enqueue(lambda: "never")
        queue._tail.cancel()
        await blocker
        await asyncio.sleep(0)
        assert waiting.cancelled()
        assert queue.pending == 0
