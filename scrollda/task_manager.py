"""De-duplication of concurrent work items with a bounded result cache."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Hashable
from typing import Any

logger = logging.getLogger(__name__)

_PENDING = object()


class TaskManager:
    """Remembers up to ``cap`` tasks; callers of a known task wait for its result."""

    def __init__(self, cap: int, poll_interval: float = 5.0) -> None:
        self.cap = cap
        self.poll_interval = poll_interval
        self._results: dict[Hashable, Any] = {}
        self._order: deque[Hashable] = deque()
        self._lock = asyncio.Lock()

    async def _add_task(self, task: Hashable) -> tuple[bool, Any]:
        async with self._lock:
            if task in self._results:
                found = (True, self._results[task])
            else:
                self._results[task] = _PENDING
                self._order.append(task)
                found = (False, None)
            while len(self._order) > self.cap:
                evicted = self._order.popleft()
                self._results.pop(evicted, None)
            return found

    async def process_task(self, task: Hashable) -> Any | None:
        """Return the result of a known task, waiting for it if needed.

        Returns None when the task is new: the caller is then responsible for
        computing it and calling :meth:`update_task`.
        """
        while True:
            known, result = await self._add_task(task)
            if not known:
                return None
            if result is not _PENDING:
                return result
            logger.info("polling task result: %r", task)
            await asyncio.sleep(self.poll_interval)

    async def update_task(self, task: Hashable, result: Any) -> bool:
        """Record the result of a task; False if the task is not known."""
        async with self._lock:
            if task not in self._results:
                return False
            self._results[task] = result
            return True