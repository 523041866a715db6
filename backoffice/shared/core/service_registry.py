"""Service wiring from configuration, plus process exit cleanup."""

from __future__ import annotations

import atexit
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import httpx

from backoffice.shared.core.configuration import SystemConfig
from backoffice.shared.core.event_bus import EventBus
from backoffice.shared.domain.query.cache import QueryCache
from backoffice.shared.domain.session.credentials import (
    BackendCredentialVerifier,
    CredentialVerifier,
    StaticCredentialVerifier,
)
from backoffice.shared.domain.session.session_store import SessionStore
from backoffice.shared.infrastructure.api.client import ApiClient
from backoffice.shared.infrastructure.api.fixtures import FixtureAnnouncementApi
from backoffice.shared.infrastructure.api.resources import ResourceClient
from backoffice.shared.infrastructure.storage.local_storage import FileStorage, KeyValueStorage

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything a page needs, built once per process."""
    config: SystemConfig
    bus: EventBus
    storage: KeyValueStorage
    session: SessionStore
    api: ResourceClient
    cache: QueryCache

    async def aclose(self) -> None:
        await self.api.aclose()


def build_services(
    config: SystemConfig,
    storage: Optional[KeyValueStorage] = None,
    event_bus: Optional[EventBus] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Services:
    """Wire storage, session store, API client and cache from configuration.

    Args:
        config: Merged system configuration
        storage: Durable storage override (defaults to ``FileStorage`` at ``storage.path``)
        event_bus: Shared bus (a new one when omitted)
        transport: httpx transport override, used by tests
    """
    bus = event_bus or EventBus()
    storage = storage or FileStorage(config.storage.path)

    client = ApiClient(config.api.base_url, timeout=config.api.timeout, transport=transport)

    verifier: CredentialVerifier
    if config.auth.mode == "backend":
        verifier = BackendCredentialVerifier(client, login_path=config.auth.login_path)
    else:
        verifier = StaticCredentialVerifier(config.auth.demo_username, config.auth.demo_password)

    session = SessionStore(
        storage,
        verifier,
        event_bus=bus,
        token_key=config.storage.token_key,
        user_key=config.storage.user_key,
    )
    # Every request reads the token at send time, so login/logout apply immediately
    client.set_token_provider(lambda: session.token)

    announcements = FixtureAnnouncementApi() if config.announcements.use_fixtures else None
    api = ResourceClient(client, announcements=announcements)

    logger.info(
        f"Services built: api={config.api.base_url}, auth={config.auth.mode}, "
        f"announcements={'fixtures' if announcements else 'backend'}"
    )
    return Services(config=config, bus=bus, storage=storage, session=session, api=api, cache=QueryCache(bus))


# Global cleanup management
_cleanup_registered = False
_cleanup_handlers: List[Callable[[], None]] = []


def register_cleanup_handler(handler: Callable[[], None]) -> None:
    """Register a cleanup handler to be called on application exit."""
    global _cleanup_registered
    _cleanup_handlers.append(handler)
    if not _cleanup_registered:
        atexit.register(_cleanup_all)
        _cleanup_registered = True
        logger.debug("Registered atexit cleanup handler")


def _cleanup_all() -> None:
    """Clean up all registered handlers."""
    logger.info("Running application cleanup...")
    for handler in _cleanup_handlers:
        try:
            handler()
        except Exception as e:
            logger.warning(f"Error in cleanup handler: {e}")
    logger.info("Application cleanup completed")
