"""
Tests for gardennav/scheduler.py

The loop is driven with asyncio.run and a zero frame interval so each frame
is a single event-loop turn.
"""
import asyncio

from gardennav.drag import DragController
from gardennav.scheduler import TickLoop
from gardennav.simulation import build_simulation


async def wait_until(predicate, turns=5000):
    for _ in range(turns):
        if predicate():
            return True
        await asyncio.sleep(0)
    return predicate()


def make_state(config, rng, alpha=0.01):
    state = build_simulation("a", ["a", "b", "c"], [("a", "b"), ("b", "c")], config, rng)
    state.alpha = alpha
    return state


class TestTickLoop:
    """Test frame scheduling, idling and cancellation."""

    def test_runs_until_idle_then_waits(self, config, rng):
        state = make_state(config, rng)
        frames = []

        async def scenario():
            loop = TickLoop(state, on_tick=lambda s: frames.append(s.alpha), frame_interval=0)
            loop.start()
            assert await wait_until(lambda: state.idle)
            ticks = state.tick_count
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            still_running = loop.running
            loop.stop()
            return ticks, still_running

        ticks, still_running = asyncio.run(scenario())

        assert still_running
        assert ticks == len(frames)
        assert state.tick_count == ticks
        assert frames == sorted(frames, reverse=True)

    def test_wake_resumes_after_reheat(self, config, rng):
        state = make_state(config, rng)

        async def scenario():
            loop = TickLoop(state, frame_interval=0)
            loop.start()
            await wait_until(lambda: state.idle)
            idle_ticks = state.tick_count

            state.alpha = 0.01
            loop.wake()
            await wait_until(lambda: state.idle)
            loop.stop()
            return idle_ticks

        idle_ticks = asyncio.run(scenario())
        assert state.tick_count > idle_ticks

    def test_stop_cancels_ticking(self, config, rng):
        state = make_state(config, rng, alpha=1.0)

        async def scenario():
            loop = TickLoop(state, frame_interval=0)
            loop.start()
            await wait_until(lambda: state.tick_count >= 3)
            loop.stop()
            stopped_at = state.tick_count
            for _ in range(20):
                await asyncio.sleep(0)
            return stopped_at, loop.running

        stopped_at, running = asyncio.run(scenario())
        assert not running
        assert state.tick_count == stopped_at
        assert not state.idle

    def test_start_is_idempotent(self, config, rng):
        state = make_state(config, rng)

        async def scenario():
            loop = TickLoop(state, frame_interval=0)
            first = loop.start()
            second = loop.start()
            loop.stop()
            return first is second

        assert asyncio.run(scenario())

    def test_stop_before_start(self, config, rng):
        loop = TickLoop(make_state(config, rng))
        loop.stop()
        assert not loop.running

    def test_frame_interval_from_config(self, config, rng):
        loop = TickLoop(make_state(config, rng))
        assert loop.frame_interval == config.frame_interval

    def test_drag_wakes_loop(self, config, rng):
        """A drag on an idle layout restarts frames through on_reheat."""
        state = make_state(config, rng)

        async def scenario():
            loop = TickLoop(state, frame_interval=0)
            drag = DragController(state, on_reheat=loop.wake)
            loop.start()
            await wait_until(lambda: state.idle)
            before = state.tick_count

            drag.pointer_down(1)
            drag.pointer_move(20.0, 20.0)
            await wait_until(lambda: state.tick_count > before)
            dragged = (state.nodes[1].x, state.nodes[1].y)
            drag.pointer_up()
            loop.stop()
            return before, dragged

        before, dragged = asyncio.run(scenario())
        assert state.tick_count > before
        assert dragged == (20.0, 20.0)
