"""
Latest-wins debouncing for search-as-you-type.

Keystrokes are coalesced: a run only starts after a quiet period with no
newer input, and a run superseded by newer input never delivers its
result.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class Debouncer(Generic[T]):
    def __init__(
        self,
        callback: Callable[[T], Awaitable[Any]],
        delay: float = 0.3,
        deliver: Optional[Callable[[Any], Awaitable[None]]] = None,
    ):
        """
        Args:
            callback: async function computing a result for one input
            delay: quiet period in seconds before a scheduled run starts
            deliver: async function receiving results; skipped for superseded runs
        """
        self.callback = callback
        self.delay = delay
        self.deliver = deliver
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def _replace(self, value: T, delay: float) -> asyncio.Task:
        self.cancel()
        self._generation += 1
        self._task = asyncio.create_task(self._run(value, delay, self._generation))
        return self._task

    def schedule(self, value: T) -> asyncio.Task:
        """Run after the quiet period unless newer input arrives first"""
        return self._replace(value, self.delay)

    def submit(self, value: T) -> asyncio.Task:
        """Run immediately, superseding anything pending"""
        return self._replace(value, 0)

    def cancel(self) -> None:
        if self.pending:
            self._task.cancel()

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _run(self, value: T, delay: float, generation: int) -> Any:
        if delay > 0:
            await asyncio.sleep(delay)
        result = await self.callback(value)
        if not self.is_current(generation):
            logger.debug("Discarding superseded result")
            return None
        if self.deliver is not None:
            await self.deliver(result)
        return result

    async def wait(self) -> Any:
        """Wait for the latest run; returns None if it was cancelled"""
        task = self._task
        if task is None:
            return None
        try:
            return await task
        except asyncio.CancelledError:
            if task.cancelled():
                return None
            raise
