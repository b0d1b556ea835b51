import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

class Poller:
    """Runs a tick coroutine at a fixed interval on the running event loop

    Ticks never overlap: the next wait only starts once a tick has returned.
    The first tick fires one interval after ``start``.
    """

    def __init__(self, tick: Callable[[], Awaitable[None]], interval_seconds: float):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.tick = tick
        self.interval = interval_seconds
        self.tick_count = 0
        self._task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> bool:
        """Start polling; a second start while running is a no-op

        Returns:
            bool: True if a new polling task was created
        """
        if self.is_running:
            logger.debug("Poller already running, ignoring start")
            return False

        self._stop_event = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(self._run(self._stop_event))
        logger.info(f"Polling every {self.interval}s")
        return True

    async def stop(self) -> None:
        """Stop polling and wait for an in-flight tick to finish"""
        self._stop_event.set()
        task, self._task = self._task, None
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Stopped polling session state.")

    async def _run(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            # Wait for next interval or stop
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
                break
            except asyncio.TimeoutError:
                pass

            try:
                await self.tick()
                self.tick_count += 1
            except Exception as e:
                logger.error(f"Error in poll tick: {e}", exc_info=True)
