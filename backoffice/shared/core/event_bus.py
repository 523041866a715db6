"""In-process event bus.

Session changes, cache invalidations and mutation outcomes are announced
here so the console (activity feed, logs) can react without the domain
objects knowing about it. Handlers run as tasks on the publisher's loop; a
failing handler is logged and never reaches the publisher.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, TypeAlias, Union

EventPayload: TypeAlias = Dict[str, Any]
EventHandler: TypeAlias = Callable[[EventPayload], Union[Awaitable[None], None]]

logger = logging.getLogger(__name__)


class EventBus:
    """Topic-based pub/sub for session and cache notifications."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._pending: set[asyncio.Task] = set()

    def subscribe(self, topic: str, handler: EventHandler) -> Callable[[], None]:
        """Register a handler (sync or async) for ``topic``.

        Returns:
            A callable that removes the subscription again
        """
        handlers = self._subscribers[topic]
        if handler not in handlers:
            handlers.append(handler)
        return lambda: self.unsubscribe(topic, handler)

    def unsubscribe(self, topic: str, handler: EventHandler) -> None:
        handlers = self._subscribers.get(topic)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, ()))

    async def publish(self, topic: str, payload: EventPayload) -> int:
        """Schedule every handler of ``topic`` with ``payload``.

        Does not wait for the handlers; use ``wait_until_idle`` for that.

        Returns:
            Number of handlers scheduled
        """
        handlers = list(self._subscribers.get(topic, ()))
        if not handlers:
            logger.debug(f"No subscribers for '{topic}'")
            return 0

        for handler in handlers:
            task = asyncio.create_task(self._dispatch(topic, handler, payload))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        logger.debug(f"Published '{topic}' to {len(handlers)} handler(s)")
        return len(handlers)

    async def wait_until_idle(self, timeout: float = 10.0) -> bool:
        """Wait until no handler tasks remain, including ones scheduled meanwhile.

        Returns:
            False if ``timeout`` seconds passed first
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while self._pending:
            remaining = deadline - loop.time()
            if remaining <= 0:
                logger.warning(f"{len(self._pending)} event handler(s) still running after {timeout}s")
                return False
            await asyncio.wait(list(self._pending), timeout=remaining)
        return True

    async def _dispatch(self, topic: str, handler: EventHandler, payload: EventPayload) -> None:
        name = getattr(handler, "__qualname__", repr(handler))
        try:
            result = handler(payload)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception(f"Event handler '{name}' failed on '{topic}'")

    def clear(self) -> None:
        """Drop all subscriptions."""
        self._subscribers.clear()

