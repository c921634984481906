import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class PollingScheduler:
    """
    Runs a callback immediately and then with a fixed delay between the end of
    one run and the start of the next.

    Stopping wakes a sleeping loop right away. A run already in progress is
    never cancelled; stop() waits for it to finish.
    """

    def __init__(self, interval: float, callback: Callable[[], Awaitable[object]], name: str = "polling"):
        self.interval = interval
        self.callback = callback
        self.name = name
        self._task: Optional[asyncio.Task] = None
        self._stopped: Optional[asyncio.Event] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return

        logger.info(f"Starting {self.name} loop (Interval: {self.interval}s)")
        self._stopped = asyncio.Event()
        self._task = asyncio.create_task(self._run(self._stopped))

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return

        self._stopped.set()
        # A callback stopping its own scheduler must not wait for itself
        if task is not asyncio.current_task():
            await task
        logger.info(f"Stopped {self.name} loop")

    async def _run(self, stopped: asyncio.Event) -> None:
        while not stopped.is_set():
            try:
                await self.callback()
            except Exception as e:
                logger.error(f"Error in {self.name} loop: {e}", exc_info=True)

            try:
                await asyncio.wait_for(stopped.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
