"""EventBus - dashboard change notifications.

Reducers in AppState mutate state synchronously and then announce the change
here; UI components and services subscribe by topic. Every handler runs in its
own task, so a slow or failing subscriber never blocks the publisher.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeAlias

EventPayload: TypeAlias = Dict[str, Any]
EventHandler: TypeAlias = Callable[[EventPayload], Awaitable[None]]

logger = logging.getLogger(__name__)


class EventBus:
    """Topic-based pub/sub for dashboard state changes."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending_tasks: set[asyncio.Task] = set()

    def _subscription_lock(self) -> asyncio.Lock:
        # Locks are bound to the loop they were first awaited on
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def subscribe(self, topic: str, handler: EventHandler) -> None:
        """Register an async handler for ``topic``. Re-registering is a no-op."""
        async with self._subscription_lock():
            handlers = self._subscribers[topic]
            if handler not in handlers:
                handlers.append(handler)

    async def unsubscribe(self, topic: str, handler: EventHandler) -> None:
        async with self._subscription_lock():
            handlers = self._subscribers.get(topic)
            if handlers and handler in handlers:
                handlers.remove(handler)

    async def publish(self, topic: str, payload: EventPayload) -> None:
        """Publish from a coroutine."""
        async with self._subscription_lock():
            handlers = list(self._subscribers.get(topic, ()))
        self._schedule(topic, handlers, payload)

    def publish_nowait(self, topic: str, payload: EventPayload) -> None:
        """Publish from synchronous code without yielding to the loop.

        Outside a running loop nobody can receive the event, so it is dropped
        with a debug log.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"EventBus: no running loop, dropping '{topic}'")
            return
        self._schedule(topic, list(self._subscribers.get(topic, ())), payload)

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, ()))

    def _schedule(self, topic: str, handlers: List[EventHandler], payload: EventPayload) -> None:
        if not handlers:
            logger.debug(f"EventBus: '{topic}' has no subscribers")
            return

        logger.debug(f"EventBus: '{topic}' -> {len(handlers)} handler(s)")
        for handler in handlers:
            task = asyncio.create_task(self._deliver(topic, handler, payload))
            self._pending_tasks.add(task)
            task.add_done_callback(self._pending_tasks.discard)

    async def _deliver(self, topic: str, handler: EventHandler, payload: EventPayload) -> None:
        try:
            await handler(payload)
        except Exception:
            name = getattr(handler, "__qualname__", repr(handler))
            logger.exception(f"EventBus: handler '{name}' failed on '{topic}'")

    async def wait_until_idle(self, timeout: float = 60.0) -> bool:
        """Wait until no handler task is pending.

        Handlers may publish further events; those are waited for too.

        Returns:
            True when idle, False if ``timeout`` seconds passed first
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while self._pending_tasks:
            remaining = deadline - loop.time()
            if remaining <= 0:
                logger.warning(f"EventBus: {len(self._pending_tasks)} handler task(s) still pending after {timeout}s")
                return False
            await asyncio.wait(list(self._pending_tasks), timeout=remaining)
            await asyncio.sleep(0)
        return True

    def clear(self) -> None:
        """Drop every subscription. Pending deliveries still complete."""
        self._subscribers.clear()
