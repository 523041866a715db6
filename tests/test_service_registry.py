"""Tests for service wiring from configuration."""

import httpx
import pytest

from backoffice.shared.core.configuration import SystemConfig
from backoffice.shared.core.service_registry import build_services
from backoffice.shared.domain.session.credentials import BackendCredentialVerifier, StaticCredentialVerifier
from backoffice.shared.infrastructure.api.fixtures import FixtureAnnouncementApi
from backoffice.shared.infrastructure.api.resources import AnnouncementApi


def config(**sections) -> SystemConfig:
    return SystemConfig.model_validate(sections)


@pytest.mark.asyncio
async def test__build_services__requests_carry_session_token(storage, backend) -> None:
    backend.routes["GET /admin/users"] = []
    services = build_services(
        config(api={"base_url": "http://backend.test/api"}),
        storage=storage,
        transport=httpx.MockTransport(backend),
    )
    await services.session.initialize()

    await services.api.users.list_users()
    await services.session.login("admin", "admin123")
    token = services.session.token
    await services.api.users.list_users()
    await services.session.logout()
    await services.api.users.list_users()

    assert "Authorization" not in backend.requests[0].headers
    assert backend.requests[1].headers["Authorization"] == f"Bearer {token}"
    assert "Authorization" not in backend.requests[2].headers
    await services.aclose()


@pytest.mark.asyncio
async def test__build_services__auth_mode_selects_verifier(storage) -> None:
    static = build_services(config(), storage=storage)
    backend = build_services(config(auth={"mode": "backend"}), storage=storage)

    assert isinstance(static.session.verifier, StaticCredentialVerifier)
    assert isinstance(backend.session.verifier, BackendCredentialVerifier)
    await static.aclose()
    await backend.aclose()


@pytest.mark.asyncio
async def test__build_services__announcement_source(storage) -> None:
    live = build_services(config(), storage=storage)
    fixtures = build_services(config(announcements={"use_fixtures": True}), storage=storage)

    assert isinstance(live.api.announcements, AnnouncementApi)
    assert isinstance(fixtures.api.announcements, FixtureAnnouncementApi)
    await live.aclose()
    await fixtures.aclose()
