# paper_soccer/services/event_dispatcher.py

import asyncio
import logging
from typing import Awaitable, Callable, Optional
from pydantic import BaseModel

logger = logging.getLogger(__name__)

EventHandler = Callable[[BaseModel], Awaitable[None]]


class EventDispatcher:
    """
    Queue-based bridge between the synchronous engine and asynchronous consumers.

    The engine hands events to ``publish`` as soon as a move commits; a
    separate asyncio task started with ``start`` feeds them one at a time to
    the handler (typically the line/ball animation), so no engine state
    depends on how long an animation takes.
    """

    _STOP = object()

    def __init__(self, handler: EventHandler):
        self.handler = handler
        self.queue: asyncio.Queue = asyncio.Queue()
        self.is_running = False
        self._in_flight = 0

    @property
    def pending(self) -> int:
        """Events published but not yet fully handled"""
        return self.queue.qsize() + self._in_flight

    @property
    def is_idle(self) -> bool:
        return self.pending == 0

    def publish(self, event: BaseModel):
        """Engine listener: enqueue without blocking the caller"""
        self.queue.put_nowait(event)

    async def start(self):
        """Consume events until stopped"""
        if self.is_running:
            logger.warning("EventDispatcher is already running")
            return

        self.is_running = True
        logger.info("EventDispatcher started")

        try:
            while self.is_running:
                event = await self.queue.get()
                try:
                    if event is self._STOP:
                        break
                    self._in_flight += 1
                    await self.handler(event)
                except Exception as e:
                    logger.error(f"Error handling {type(event).__name__}: {e}", exc_info=True)
                finally:
                    if event is not self._STOP:
                        self._in_flight -= 1
                    self.queue.task_done()
        finally:
            self.is_running = False
            logger.info("EventDispatcher stopped")

    def stop(self):
        """Ask the consumer loop to finish once the events queued so far are handled"""
        self.queue.put_nowait(self._STOP)

    async def drain(self, timeout: Optional[float] = None):
        """Wait until every published event has been handled"""
        await asyncio.wait_for(self.queue.join(), timeout=timeout)
