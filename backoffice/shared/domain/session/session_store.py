"""Session Store - single process-wide authority on who is logged in.

The store owns one immutable ``SessionState`` snapshot and replaces it
wholesale on every transition. Durable storage holds two keys, the token as
plain text and the user record as JSON, so a session survives restarts.
Observers subscribe through the event bus topic ``session.changed``.
"""

from __future__ import annotations

import json
import logging
from typing import Callable, Optional

from pydantic import ValidationError

from backoffice.shared.core import events
from backoffice.shared.core.event_bus import EventBus, EventHandler
from backoffice.shared.domain.session.credentials import CredentialVerifier
from backoffice.shared.domain.session.models import AdminUser, SessionState
from backoffice.shared.infrastructure.storage.local_storage import KeyValueStorage

logger = logging.getLogger(__name__)


class SessionStore:
    """Authentication state with an explicit initialize/login/logout lifecycle.

    Usage:
        store = SessionStore(FileStorage(path), StaticCredentialVerifier(), bus)
        await store.initialize()
        if await store.login("admin", "admin123"):
            ...
        await store.logout()
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        verifier: CredentialVerifier,
        event_bus: Optional[EventBus] = None,
        token_key: str = "admin_token",
        user_key: str = "admin_user",
    ) -> None:
        self.storage = storage
        self.verifier = verifier
        self.bus = event_bus or EventBus()
        self.token_key = token_key
        self.user_key = user_key

        self._state = SessionState()
        self._initialized = False

    # --- Observation ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def token(self) -> Optional[str]:
        """Current bearer token; used as the API client's token provider."""
        return self._state.token

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        return self.bus.subscribe(events.TOPIC_SESSION_CHANGED, handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        self.bus.unsubscribe(events.TOPIC_SESSION_CHANGED, handler)

    # --- Lifecycle ---

    async def initialize(self) -> SessionState:
        """Rehydrate the session from durable storage.

        Runs once per store; later calls return the current state untouched.
        Corrupt user data clears both durable keys and leaves the store logged
        out without raising.
        """
        if self._initialized:
            return self._state
        self._initialized = True

        restored = SessionState.logged_out()
        try:
            stored_token = self.storage.get_item(self.token_key)
            user_data = self.storage.get_item(self.user_key)

            if stored_token and user_data:
                try:
                    user = AdminUser.model_validate(json.loads(user_data))
                except (ValueError, TypeError, ValidationError) as e:
                    logger.warning(f"Stored session user is unreadable, clearing session keys: {e}")
                    self._clear_storage()
                else:
                    restored = SessionState.logged_in(stored_token, user)
                    logger.info(f"Session restored from storage for user: {user.username}")
        finally:
            # is_loading flips exactly once, even if storage itself failed
            self._state = restored

        await self._publish("initialize")
        return self._state

    async def login(self, username: str, password: str) -> bool:
        """Validate credentials and start a session.

        Returns:
            True on success; False when the credentials are rejected, in
            which case state is left exactly as it was

        Raises:
            Storage or transport errors from the verifier. Bad credentials
            never raise.
        """
        issued = await self.verifier.verify(username, password)
        if issued is None:
            logger.info(f"Login rejected for '{username}'")
            return False

        self._persist(issued.token, issued.user)
        self._state = SessionState.logged_in(issued.token, issued.user)
        self._initialized = True
        logger.info(f"Operator logged in: {issued.user.username}")

        await self._publish("login")
        return True

    async def logout(self) -> None:
        """Clear durable keys and in-memory state. Safe to call when logged out."""
        was_authenticated = self._state.is_authenticated
        self._clear_storage()
        self._state = SessionState.logged_out()

        if was_authenticated:
            logger.info("Operator logged out")
            await self._publish("logout")

    # --- Internals ---

    def _persist(self, token: str, user: AdminUser) -> None:
        self.storage.set_item(self.token_key, token)
        try:
            self.storage.set_item(self.user_key, user.model_dump_json())
        except Exception:
            # Never leave a token on disk without its user record
            self.storage.remove_item(self.token_key)
            raise

    def _clear_storage(self) -> None:
        self.storage.remove_item(self.token_key)
        self.storage.remove_item(self.user_key)

    async def _publish(self, reason: str) -> None:
        await self.bus.publish(
            events.TOPIC_SESSION_CHANGED,
            events.create_session_changed_event(
                reason,  # type: ignore[arg-type]
                self._state.is_authenticated,
                self._state.username,
            ),
        )
