"""
Background asyncio tasks owned by a Qt object.

Holds a reference to every task until it finishes and logs any exception it
ended with.
"""

import asyncio
import logging
from typing import Coroutine, Optional


logger = logging.getLogger(__name__)


class BackgroundTasks:
    """Set of running tasks started on behalf of one owner."""

    def __init__(self, owner: str):
        self._owner = owner
        self._tasks: set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine) -> Optional[asyncio.Task]:
        """Run a coroutine on the running loop; dropped when there is none."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running event loop; not scheduling {coro.__qualname__}")
            coro.close()
            return None

        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._finished)
        return task

    def _finished(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"{self._owner} task {task.get_coro().__qualname__} failed: {error}", exc_info=error)

    def cancel_all(self) -> None:
        """Cancel every task except the one currently running this call."""
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        for task in list(self._tasks):
            if task is not current:
                task.cancel()
