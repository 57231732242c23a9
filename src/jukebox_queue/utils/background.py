"""Tracked fire-and-forget tasks.

asyncio only keeps weak references to tasks, so anything scheduled without
being awaited must be held somewhere until it finishes. Failures are logged
here because nobody awaits these tasks.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

from jukebox_queue.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BackgroundTasks:
    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    def spawn(self, coro: Coroutine[Any, Any, T], *, name: str | None = None) -> asyncio.Task[T]:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(LogTemplates.BACKGROUND_TASK_FAILED, task.get_name(), exc_info=exc)

    async def drain(self, timeout: float | None = 10.0) -> None:
        """Wait for every outstanding task, including ones spawned while waiting."""
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout

        while self._tasks:
            remaining = None if deadline is None else deadline - loop.time()
            if remaining is not None and remaining <= 0:
                logger.warning(LogTemplates.BACKGROUND_DRAIN_TIMEOUT, len(self._tasks))
                for task in list(self._tasks):
                    task.cancel()
                return
            await asyncio.wait(list(self._tasks), timeout=remaining)

    def __len__(self) -> int:
        return len(self._tasks)
