"""
Deduplication of concurrent refreshes for the same resource.
"""

import asyncio
from typing import Any, Awaitable, Callable


class InflightRequests:
    """Map of resource key -> pending refresh task.

    The first caller for a key starts the refresh; callers arriving while it
    is pending await the same task and receive its result or exception.
    """

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Task] = {}

    async def run(self, key: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        """Run factory() for key unless a refresh for key is already pending.

        Args:
            key: Resource key.
            factory: Zero-argument coroutine function performing the refresh.

        Returns:
            The shared refresh result.
        """
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._pending[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))

        # Shielded so one cancelled waiter does not cancel the shared refresh
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    def __len__(self) -> int:
        return len(self._pending)
