"""Background maintenance loops."""

import asyncio
import contextlib
from collections.abc import Callable

import structlog

logger = structlog.get_logger(__name__)


class PeriodicTask:
    """Runs a synchronous callback every `interval` seconds on the event loop.

    One asyncio task per instance, so two runs of the same callback never overlap.
    """

    def __init__(self, name: str, interval: float, callback: Callable[[], object]) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.name = name
        self.interval = interval
        self._callback = callback
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.debug("periodic_task_started", task=self.name, interval=self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.debug("periodic_task_stopped", task=self.name)

    def run_once(self) -> None:
        try:
            result = self._callback()
        except Exception:
            logger.exception("periodic_task_failed", task=self.name)
            return
        logger.debug("periodic_task_ran", task=self.name, result=result)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.run_once()
