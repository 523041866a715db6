"""Tests for static and backend credential verifiers."""

import httpx
import pytest

from backoffice.shared.domain.session.credentials import BackendCredentialVerifier, StaticCredentialVerifier
from backoffice.shared.infrastructure.api.client import ApiError

LOGIN = "POST /auth/login"
ADMIN = {"id": 7, "username": "ops", "role": "admin", "email": "ops@example.com"}


class TestStaticCredentialVerifier:

    @pytest.mark.asyncio
    async def test__verify__demo_pair_accepted(self) -> None:
        issued = await StaticCredentialVerifier().verify("admin", "admin123")

        assert issued is not None
        assert issued.token.startswith("admin-token-")
        assert issued.user.id == 1
        assert issued.user.role == "admin"
        assert issued.user.email == "admin@example.com"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username,password", [("admin", "nope"), ("root", "admin123"), ("", "")])
    async def test__verify__anything_else_rejected(self, username, password) -> None:
        assert await StaticCredentialVerifier().verify(username, password) is None

    @pytest.mark.asyncio
    async def test__verify__configured_pair(self) -> None:
        verifier = StaticCredentialVerifier("ops", "s3cret")

        assert await verifier.verify("admin", "admin123") is None
        issued = await verifier.verify("ops", "s3cret")
        assert issued.user.username == "ops"


class TestBackendCredentialVerifier:

    @pytest.mark.asyncio
    async def test__verify__posts_credentials_and_reads_token(self, backend, make_client) -> None:
        backend.routes[LOGIN] = {"token": "jwt-1", "user": ADMIN}
        verifier = BackendCredentialVerifier(make_client())

        issued = await verifier.verify("ops", "pw")

        assert issued.token == "jwt-1"
        assert issued.user.username == "ops"
        assert backend.body() == {"username": "ops", "password": "pw"}

    @pytest.mark.asyncio
    async def test__verify__accepts_enveloped_response(self, backend, make_client) -> None:
        backend.routes[LOGIN] = {"success": True, "data": {"token": "jwt-2", "user": ADMIN}}

        issued = await BackendCredentialVerifier(make_client()).verify("ops", "pw")

        assert issued.token == "jwt-2"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 403])
    async def test__verify__rejection_status_returns_none(self, backend, make_client, status) -> None:
        backend.routes[LOGIN] = httpx.Response(status, json={"message": "Invalid credentials"})

        assert await BackendCredentialVerifier(make_client()).verify("ops", "bad") is None

    @pytest.mark.asyncio
    async def test__verify__server_error_propagates(self, backend, make_client) -> None:
        backend.routes[LOGIN] = httpx.Response(500, json={"message": "boom"})

        with pytest.raises(ApiError) as exc_info:
            await BackendCredentialVerifier(make_client()).verify("ops", "pw")
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test__verify__missing_token_is_an_error(self, backend, make_client) -> None:
        backend.routes[LOGIN] = {"user": ADMIN}

        with pytest.raises(ApiError, match="token"):
            await BackendCredentialVerifier(make_client()).verify("ops", "pw")

    @pytest.mark.asyncio
    async def test__verify__missing_user_is_an_error(self, backend, make_client) -> None:
        backend.routes[LOGIN] = {"token": "jwt-3"}

        with pytest.raises(ApiError, match="user record"):
            await BackendCredentialVerifier(make_client()).verify("ops", "pw")
