"""Shared fixtures: in-memory storage, a fresh event bus and a stubbed API client."""

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from backoffice.shared.core.event_bus import EventBus
from backoffice.shared.infrastructure.api.client import ApiClient
from backoffice.shared.infrastructure.storage.local_storage import MemoryStorage

BASE_URL = "http://backend.test/api"


class RecordingBackend:
    """httpx.MockTransport handler that records requests and serves canned responses.

    Routes are keyed by ``"METHOD /path"`` (path relative to the API root);
    unknown routes answer 404.
    """

    def __init__(self, routes: Dict[str, Any] | None = None) -> None:
        self.routes: Dict[str, Any] = dict(routes or {})
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        route = self.routes.get(f"{request.method} {path}")
        if route is None:
            return httpx.Response(404, json={"message": "Not found"})
        if isinstance(route, httpx.Response):
            return route
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def body(self, index: int = -1) -> Any:
        content = self.requests[index].content
        return json.loads(content) if content else None


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def make_client(backend: RecordingBackend) -> Callable[..., ApiClient]:
    """Build an ApiClient whose transport is the recording backend."""

    def _make(token_provider=None, handler=None) -> ApiClient:
        return ApiClient(
            BASE_URL,
            token_provider=token_provider,
            transport=httpx.MockTransport(handler or backend),
        )

    return _make
