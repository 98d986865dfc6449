import asyncio
import logging
from typing import Callable


class Countdown:
    """Repeating tick task with a single owner.

    ``cancel`` may be called any number of times, from any path (including from
    inside ``on_tick``); only the first call stops the task.
    """

    def __init__(self, on_tick: Callable[[], None], interval: float = 1.0):
        self.on_tick = on_tick
        self.interval = interval
        self._task: asyncio.Task | None = None
        self._cancelled = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._cancelled and not self._task.done()

    def start(self) -> None:
        if self._task is not None:
            raise RuntimeError("Countdown already started")
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while not self._cancelled:
            await asyncio.sleep(self.interval)
            if self._cancelled:
                break
            self.on_tick()

    def cancel(self) -> bool:
        """Stop ticking.

        Returns:
            bool: True if this call stopped the task, False if it was already stopped
        """
        if self._task is None or self._cancelled:
            return False
        self._cancelled = True
        self._task.cancel()
        logging.debug("Countdown cancelled")
        return True
