"""Credential verification strategies for operator login.

A verifier answers "are these credentials valid, and if so which token and
user do they map to". Rejection is a normal outcome (``None``), never an
exception; only unexpected failures raise.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional, Protocol

from pydantic import ValidationError

from backoffice.shared.domain.session.models import AdminUser
from backoffice.shared.infrastructure.api.client import ApiClient, ApiError
from backoffice.shared.infrastructure.api.resources import unwrap_object

logger = logging.getLogger(__name__)

# Statuses that mean "wrong credentials" rather than "something broke"
REJECTION_STATUSES = frozenset({400, 401, 403})


@dataclass(frozen=True)
class IssuedCredentials:
    token: str
    user: AdminUser


class CredentialVerifier(Protocol):
    async def verify(self, username: str, password: str) -> Optional[IssuedCredentials]: ...


class StaticCredentialVerifier:
    """Single hardcoded credential pair for demos and local development.

    This is a placeholder, not a security mechanism. Production deployments
    use ``BackendCredentialVerifier``.
    """

    def __init__(self, username: str = "admin", password: str = "admin123") -> None:
        self.username = username
        self.password = password

    async def verify(self, username: str, password: str) -> Optional[IssuedCredentials]:
        if username != self.username or password != self.password:
            return None
        user = AdminUser(id=1, username=self.username, role="admin", email=f"{self.username}@example.com")
        token = f"admin-token-{int(time.time() * 1000)}"
        return IssuedCredentials(token=token, user=user)


class BackendCredentialVerifier:
    """Delegate the credential check to the backend login endpoint."""

    def __init__(self, client: ApiClient, login_path: str = "/auth/login") -> None:
        self.client = client
        self.login_path = login_path

    async def verify(self, username: str, password: str) -> Optional[IssuedCredentials]:
        try:
            payload = await self.client.post(self.login_path, json={"username": username, "password": password})
        except ApiError as e:
            if e.status_code in REJECTION_STATUSES:
                logger.info(f"Backend rejected login for '{username}' ({e.status_code})")
                return None
            raise

        body = unwrap_object(payload)
        token = body.get("token")
        try:
            user = AdminUser.model_validate(body.get("user"))
        except ValidationError as e:
            raise ApiError(f"Login response has no usable user record: {e}", payload=payload) from e
        if not token:
            raise ApiError("Login response did not include a token", payload=payload)
        return IssuedCredentials(token=str(token), user=user)
