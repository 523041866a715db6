"""Canonical event definitions for the Backoffice console."""

from __future__ import annotations

import time
from typing import Any, Iterable, Literal, Optional

from .event_bus import EventPayload

# Session lifecycle
TOPIC_SESSION_CHANGED = "session.changed"

# Query / mutation cache
TOPIC_QUERY_INVALIDATED = "query.invalidated"
TOPIC_MUTATION_SUCCEEDED = "mutation.succeeded"
TOPIC_MUTATION_FAILED = "mutation.failed"


def create_session_changed_event(
    reason: Literal["initialize", "login", "logout"],
    is_authenticated: bool,
    username: Optional[str] = None,
) -> EventPayload:
    """Create a session changed event."""
    return {
        "reason": reason,
        "is_authenticated": is_authenticated,
        "username": username,
        "ts": time.time(),
    }


def create_query_invalidated_event(keys: Iterable[Any]) -> EventPayload:
    """Create a query invalidated event listing the concrete keys marked stale."""
    return {
        "keys": list(keys),
    }


def create_mutation_event(
    name: str,
    invalidated: Iterable[Any] = (),
    error: Optional[str] = None,
    status_code: Optional[int] = None,
) -> EventPayload:
    """Create a mutation outcome event.

    Args:
        name: Mutation name (usually the wrapped function name)
        invalidated: Keys invalidated on success
        error: Human-readable error message on failure
        status_code: HTTP status of the failure, when known
    """
    event: EventPayload = {
        "name": name,
        "invalidated": list(invalidated),
    }
    if error is not None:
        event["error"] = error
        event["status_code"] = status_code
    return event

