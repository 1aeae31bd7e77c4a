"""
Cooperative frame loop driving a layout simulation.

The loop runs as an asyncio task on the page's event loop. Pointer handlers
run on the same loop between frames, so their updates apply on the next
tick and never interleave with force integration.
"""
import asyncio
import logging
from typing import Callable, Optional

from gardennav.simulation import SimulationState, tick

logger = logging.getLogger(__name__)


class TickLoop:
    """
    Advance a simulation once per frame until it goes idle.

    While idle the task sleeps on an event instead of polling; wake()
    resumes it after a reheat. stop() cancels the task, which must happen
    when the page is torn down or the visualizer replaced.
    """

    def __init__(
        self,
        state: SimulationState,
        on_tick: Optional[Callable[[SimulationState], None]] = None,
        frame_interval: Optional[float] = None,
    ):
        self.state = state
        self.on_tick = on_tick
        self.frame_interval = (
            frame_interval if frame_interval is not None else state.config.frame_interval
        )
        self._task: Optional[asyncio.Task] = None
        self._wake: Optional[asyncio.Event] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Schedule the loop on the running event loop."""
        if self.running:
            return self._task
        self._wake = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(self.run())
        logger.debug("Tick loop started")
        return self._task

    def wake(self):
        """Resume frames after the simulation was reheated."""
        if self._wake is not None:
            self._wake.set()

    def stop(self):
        """Cancel the loop; safe to call more than once."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug("Tick loop stopped")
        self._task = None

    async def run(self):
        if self._wake is None:
            self._wake = asyncio.Event()
        while True:
            if self.state.idle:
                self._wake.clear()
                await self._wake.wait()
                continue
            tick(self.state)
            if self.on_tick is not None:
                self.on_tick(self.state)
            await asyncio.sleep(self.frame_interval)
