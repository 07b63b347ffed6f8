"""
Click Recorder

Records one click per successful redirect without delaying the redirect.

Architecture:
- The redirect handler calls ClickRecorder.record(), which only enqueues an
  event on a bounded in-process queue and returns
- A fixed pool of worker tasks consumes events, parses the user agent and
  appends one row to the click store (in a thread, the store is blocking)
- Full backlog: the click is dropped and logged, never retried
- A failed write is logged and dropped; it never reaches the caller

Workers belong to the application lifespan, not to a request, so a request
that is cancelled after record() returns still gets its click written.
"""

import asyncio
import logging
from typing import List, Optional

from shortlink_app.click_processor.user_agent import parse_user_agent
from shortlink_app.config import settings
from shortlink_app.models.click import Click
from shortlink_app.queue.bounded import BoundedClickQueue
from shortlink_app.queue.models import ClickEvent
from shortlink_app.storage.strategies import ClickStorageStrategy

logger = logging.getLogger(__name__)


class ClickRecorder:
    """
    Fire-and-forget click ingestion with a bounded worker pool.

    At most `workers` click writes are in flight at once and at most
    `queue.maxsize` clicks wait in memory.
    """

    def __init__(
        self,
        storage: ClickStorageStrategy,
        queue: Optional[BoundedClickQueue] = None,
        workers: Optional[int] = None
    ):
        self.storage = storage
        self.queue = queue or BoundedClickQueue(settings.click_queue_size)
        self.worker_count = workers or settings.click_workers
        self.processed_count = 0
        self.failed_count = 0
        self._tasks: List[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    def record(
        self,
        code: str,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
        referer: Optional[str] = None
    ) -> bool:
        """
        Queue a click and return immediately.

        Returns False when the click was dropped because the backlog is full.
        Must be called from the event loop thread.
        """
        event = ClickEvent(
            code=code,
            ip_address=ip or None,
            user_agent=user_agent or None,
            referer=referer or None,
        )
        if not self.queue.publish(event):
            logger.warning("Click backlog full (%d), dropping click for %s",
                           self.queue.maxsize, code)
            return False
        return True

    async def start(self):
        """Spawn the worker tasks on the running loop"""
        if self._tasks:
            return
        for worker_id in range(self.worker_count):
            task = asyncio.create_task(self._run(worker_id), name=f"click-worker-{worker_id}")
            self._tasks.append(task)
        logger.info("Click recorder started: %d workers, backlog %d",
                    self.worker_count, self.queue.maxsize)

    async def stop(self, timeout: Optional[float] = None):
        """Drain the backlog (bounded by `timeout`), then stop the workers"""
        if not self._tasks:
            return
        timeout = settings.click_shutdown_timeout if timeout is None else timeout

        try:
            await asyncio.wait_for(self.queue.join(), timeout)
        except asyncio.TimeoutError:
            logger.warning("Click recorder stopping with %d clicks pending",
                           self.queue.get_queue_length())

        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()

        logger.info("Click recorder stopped: %d recorded, %d failed, %d dropped",
                    self.processed_count, self.failed_count, self.queue.dropped)

    async def _run(self, worker_id: int):
        while True:
            event = await self.queue.consume()
            try:
                await self._persist(event)
                self.processed_count += 1
            except Exception:
                self.failed_count += 1
                logger.exception("Worker %d failed to record click for %s", worker_id, event.code)
            finally:
                self.queue.ack()

    async def _persist(self, event: ClickEvent):
        info = parse_user_agent(event.user_agent)
        click = Click(
            code=event.code,
            created_at=event.timestamp,
            ip=event.ip_address,
            browser=info.browser,
            os=info.os,
            device=info.device,
            raw_ua=event.user_agent,
            referer=event.referer,
        )
        await asyncio.to_thread(self.storage.store_click, click)
