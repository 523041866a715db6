"""Process-wide runtime for the Streamlit console.

Streamlit re-executes the app script on a worker thread for every
interaction, while the session store, API client and query cache are async
and must all live on one event loop. ``AsyncRuntime`` owns that loop on a
daemon thread; pages submit coroutines to it and block on the result.
``get_runtime`` builds everything once per process via ``st.cache_resource``.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections import deque
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Coroutine, Deque, Dict, List, Optional, TypeVar

import streamlit as st

from backoffice.shared.core import events
from backoffice.shared.core.configuration import SystemConfig, ValidationLevel, get_config
from backoffice.shared.core.event_bus import EventPayload
from backoffice.shared.core.logging_setup import configure_logging
from backoffice.shared.core.service_registry import Services, build_services, register_cleanup_handler
from backoffice.shared.domain.query.cache import Fetcher, Mutation, QueryKey, QueryResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncRuntime:
    """A dedicated event loop running on a background thread."""

    def __init__(self, name: str = "backoffice-loop") -> None:
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run_loop, name=name, daemon=True)
        self._thread.start()

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def run(self, coro: Coroutine[Any, Any, T], timeout: Optional[float] = None) -> T:
        """Run ``coro`` on the loop and wait for its result from the calling thread."""
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        try:
            return future.result(timeout)
        except FutureTimeoutError:
            # The coroutine keeps running on the loop; its result is discarded
            logger.warning(f"Runtime call timed out after {timeout}s")
            raise

    def stop(self) -> None:
        if self.loop.is_running():
            self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout=5)


class ActivityFeed:
    """Bounded list of recent session and mutation events for the dashboard."""

    def __init__(self, maxlen: int = 20) -> None:
        self._entries: Deque[Dict[str, Any]] = deque(maxlen=maxlen)

    def attach(self, services: Services) -> None:
        services.bus.subscribe(events.TOPIC_SESSION_CHANGED, self._on_session_changed)
        services.bus.subscribe(events.TOPIC_MUTATION_SUCCEEDED, self._on_mutation_succeeded)
        services.bus.subscribe(events.TOPIC_MUTATION_FAILED, self._on_mutation_failed)

    def entries(self) -> List[Dict[str, Any]]:
        """Newest first."""
        return list(reversed(self._entries))

    def _add(self, message: str, level: str) -> None:
        self._entries.append({"message": message, "level": level, "ts": time.time()})

    async def _on_session_changed(self, payload: EventPayload) -> None:
        reason = payload.get("reason")
        if reason == "login":
            self._add(f"Signed in as {payload.get('username')}", "info")
        elif reason == "logout":
            self._add("Signed out", "info")

    async def _on_mutation_succeeded(self, payload: EventPayload) -> None:
        self._add(f"{_humanize(payload.get('name', 'action'))} completed", "success")

    async def _on_mutation_failed(self, payload: EventPayload) -> None:
        self._add(f"{_humanize(payload.get('name', 'action'))} failed: {payload.get('error')}", "error")


def _humanize(name: str) -> str:
    return str(name).replace("_", " ").capitalize()


class ConsoleRuntime:
    """Services plus the loop they run on, shared by every browser tab."""

    def __init__(self, config: SystemConfig, services: Optional[Services] = None) -> None:
        self.config = config
        self.loop = AsyncRuntime()
        self.services = services or build_services(config)
        self.activity = ActivityFeed(config.ui.activity_feed_size)
        self.activity.attach(self.services)

    def run(self, coro: Coroutine[Any, Any, T], timeout: Optional[float] = None) -> T:
        return self.loop.run(coro, timeout)

    def query(self, key: QueryKey, fetcher: Fetcher) -> QueryResult:
        """Observe a query key from the Streamlit thread."""
        timeout = self.config.api.timeout + 5
        return self.run(self.services.cache.query(key, fetcher), timeout=timeout)

    def mutate(self, mutation: Mutation[T], *args: Any, **kwargs: Any) -> T:
        return self.run(mutation.mutate(*args, **kwargs), timeout=self.config.api.timeout + 5)

    def invalidate(self, *keys: QueryKey) -> None:
        self.run(self.services.cache.invalidate_and_notify(*keys))

    def initialize_session(self) -> None:
        self.run(self.services.session.initialize())

    def logout(self) -> None:
        self.run(self._logout())

    async def _logout(self) -> None:
        await self.services.session.logout()
        # Cached payloads belong to the previous operator
        self.services.cache.clear()

    def shutdown(self) -> None:
        try:
            self.run(self.services.aclose(), timeout=5)
        finally:
            self.loop.stop()


@st.cache_resource(show_spinner=False)
def get_runtime() -> ConsoleRuntime:
    """Build the process-wide runtime once; Streamlit reruns reuse it."""
    config = get_config(ValidationLevel.LENIENT)
    configure_logging(config.logging)

    runtime = ConsoleRuntime(config)
    register_cleanup_handler(runtime.shutdown)

    runtime.initialize_session()
    logger.info("Console runtime ready")
    return runtime
