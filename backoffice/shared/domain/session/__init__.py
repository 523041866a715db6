"""Operator session: state, credential verification and the session store."""

from backoffice.shared.domain.session.credentials import (
    BackendCredentialVerifier,
    CredentialVerifier,
    IssuedCredentials,
    StaticCredentialVerifier,
)
from backoffice.shared.domain.session.models import AdminUser, SessionState
from backoffice.shared.domain.session.session_store import SessionStore

__all__ = [
    "AdminUser",
    "BackendCredentialVerifier",
    "CredentialVerifier",
    "IssuedCredentials",
    "SessionState",
    "SessionStore",
    "StaticCredentialVerifier",
]
