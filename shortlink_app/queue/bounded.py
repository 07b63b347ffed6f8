"""
Bounded in-process queue for click events.

Sits between the redirect handler and the click workers. Publishing never
blocks: when the backlog is at capacity the event is dropped and counted, so a
redirect burst cannot grow memory or store connections without limit.

Must be used from the event loop thread (asyncio.Queue is not thread-safe).
"""

import asyncio

from .models import ClickEvent


class BoundedClickQueue:

    def __init__(self, maxsize: int):
        if maxsize < 1:
            raise ValueError(f"Queue size must be positive, got {maxsize}")
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.maxsize = maxsize
        self.dropped = 0

    def publish(self, event: ClickEvent) -> bool:
        """Enqueue without waiting. Returns False if the backlog is full."""
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            return False
        return True

    async def consume(self) -> ClickEvent:
        """Wait for the next event"""
        return await self._queue.get()

    def ack(self) -> None:
        """Mark the last consumed event as processed"""
        self._queue.task_done()

    async def join(self) -> None:
        """Wait until every published event has been acknowledged"""
        await self._queue.join()

    def get_queue_length(self) -> int:
        return self._queue.qsize()
