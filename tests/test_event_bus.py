"""Tests for the async event bus."""

import asyncio

import pytest

from backoffice.shared.core import events
from backoffice.shared.core.event_bus import EventBus


@pytest.mark.asyncio
async def test__publish__delivers_to_subscribers() -> None:
    bus = EventBus()
    received = []

    async def handler(payload):
        received.append(payload)

    bus.subscribe(events.TOPIC_QUERY_INVALIDATED, handler)
    await bus.publish(events.TOPIC_QUERY_INVALIDATED, events.create_query_invalidated_event(["users"]))
    assert await bus.wait_until_idle() is True

    assert received == [{"keys": ["users"]}]


@pytest.mark.asyncio
async def test__publish__failing_handler_is_isolated() -> None:
    bus = EventBus()
    received = []

    async def broken(payload):
        raise RuntimeError("handler bug")

    async def healthy(payload):
        received.append(payload["reason"])

    bus.subscribe(events.TOPIC_SESSION_CHANGED, broken)
    bus.subscribe(events.TOPIC_SESSION_CHANGED, healthy)
    await bus.publish(events.TOPIC_SESSION_CHANGED, events.create_session_changed_event("logout", False))
    await bus.wait_until_idle()

    assert received == ["logout"]


@pytest.mark.asyncio
async def test__unsubscribe__stops_delivery() -> None:
    bus = EventBus()
    received = []

    async def handler(payload):
        received.append(payload)

    bus.subscribe("topic", handler)
    bus.subscribe("topic", handler)
    assert bus.subscriber_count("topic") == 1

    bus.unsubscribe("topic", handler)
    await bus.publish("topic", {})
    await bus.wait_until_idle()

    assert received == []
    assert bus.subscriber_count("topic") == 0


@pytest.mark.asyncio
async def test__publish__sync_handler_and_count() -> None:
    bus = EventBus()
    received = []

    bus.subscribe("topic", received.append)

    assert await bus.publish("topic", {"n": 1}) == 1
    assert await bus.publish("other", {"n": 2}) == 0
    await bus.wait_until_idle()

    assert received == [{"n": 1}]


@pytest.mark.asyncio
async def test__subscribe__returns_unsubscriber() -> None:
    bus = EventBus()
    received = []

    remove = bus.subscribe("topic", received.append)
    remove()
    await bus.publish("topic", {})
    await bus.wait_until_idle()

    assert received == []


@pytest.mark.asyncio
async def test__wait_until_idle__times_out() -> None:
    bus = EventBus()
    release = asyncio.Event()

    async def slow(payload):
        await release.wait()

    bus.subscribe("topic", slow)
    await bus.publish("topic", {})

    assert await bus.wait_until_idle(timeout=0.05) is False
    release.set()
    assert await bus.wait_until_idle() is True


def test__mutation_event__error_fields_only_on_failure() -> None:
    assert events.create_mutation_event("ban_user", ("users",)) == {"name": "ban_user", "invalidated": ["users"]}
    failed = events.create_mutation_event("ban_user", error="boom", status_code=500)
    assert failed == {"name": "ban_user", "invalidated": [], "error": "boom", "status_code": 500}
