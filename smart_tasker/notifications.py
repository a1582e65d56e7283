"""Live-update fan-out.

Every task mutation is pushed to all websocket subscribers connected at the
moment of the broadcast. There is no replay, acknowledgment or ordering
across subscribers; a subscriber that is gone or failing simply misses the
event.
"""
import asyncio
import json
import logging
import threading
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

TASK_ADDED = "TASK_ADDED"
TASK_UPDATED = "TASK_UPDATED"
TASK_DELETED = "TASK_DELETED"

EVENT_TYPES = (TASK_ADDED, TASK_UPDATED, TASK_DELETED)

# Events queued for one connection before it is dropped as too slow.
MAX_PENDING_EVENTS = 256


class Subscriber:
    """Outbound queue for one websocket connection.

    ``push`` may be called from any thread (sync endpoints run in the
    threadpool); messages are handed to the connection's event loop and
    drained by the websocket endpoint with ``next_message``. A connection
    that falls ``maxsize`` events behind is closed; ``next_message`` then
    returns ``None``.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, maxsize: int = MAX_PENDING_EVENTS):
        self._loop = loop
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize + 1)
        self._maxsize = maxsize
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open and not self._loop.is_closed()

    def close(self) -> None:
        self._open = False

    def push(self, message: str) -> None:
        self._loop.call_soon_threadsafe(self._enqueue, message)

    def _enqueue(self, message: str) -> None:
        if not self._open:
            return
        if self._queue.qsize() >= self._maxsize:
            logger.warning("Live-update subscriber fell %d events behind; closing it", self._maxsize)
            self._open = False
            while not self._queue.empty():
                self._queue.get_nowait()
            self._queue.put_nowait(None)
            return
        self._queue.put_nowait(message)

    async def next_message(self) -> Optional[str]:
        return await self._queue.get()


class ConnectionManager:
    """Registry of currently connected subscribers."""

    def __init__(self):
        self._subscribers: List[Any] = []
        self._lock = threading.Lock()

    def register(self, subscriber) -> None:
        with self._lock:
            self._subscribers.append(subscriber)
            count = len(self._subscribers)
        logger.info("Live-update subscriber connected (%d open)", count)

    def deregister(self, subscriber) -> None:
        with self._lock:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)
            count = len(self._subscribers)
        logger.info("Live-update subscriber disconnected (%d open)", count)

    def subscribers(self) -> List[Any]:
        with self._lock:
            return list(self._subscribers)

    def clear(self) -> None:
        with self._lock:
            self._subscribers.clear()

    def broadcast(self, event_type: str, task: dict) -> int:
        """Push ``{"type", "task"}`` to every open subscriber.

        Returns the number of subscribers the event was handed to. Failures
        are logged per subscriber and never raised.
        """
        if event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown event type: {event_type}")

        message = json.dumps({"type": event_type, "task": task})
        delivered = 0
        for subscriber in self.subscribers():
            if not subscriber.is_open:
                continue
            try:
                subscriber.push(message)
                delivered += 1
            except Exception:
                logger.exception("Failed to push %s to a live-update subscriber", event_type)

        logger.debug("Broadcast %s for task %s to %d subscriber(s)", event_type, task.get("id"), delivered)
        return delivered


manager = ConnectionManager()
