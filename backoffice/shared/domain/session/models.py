"""Session data types."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator


class AdminUser(BaseModel):
    """The operator identity held by the running console."""
    model_config = ConfigDict(frozen=True, extra='allow')

    id: Union[int, str]
    username: str
    role: str
    email: Optional[str] = None


class SessionState(BaseModel):
    """Immutable snapshot of authentication state.

    A new snapshot replaces the old one on every transition, so observers
    never see a half-applied login or logout.
    """
    model_config = ConfigDict(frozen=True)

    token: Optional[str] = None
    user: Optional[AdminUser] = None
    is_authenticated: bool = False
    is_loading: bool = True

    @model_validator(mode='after')
    def _check_authenticated(self) -> 'SessionState':
        expected = self.token is not None and self.user is not None
        if self.is_authenticated != expected:
            raise ValueError("is_authenticated must be true exactly when both token and user are set")
        return self

    @classmethod
    def logged_out(cls) -> 'SessionState':
        return cls(is_loading=False)

    @classmethod
    def logged_in(cls, token: str, user: AdminUser) -> 'SessionState':
        return cls(token=token, user=user, is_authenticated=True, is_loading=False)

    @property
    def username(self) -> Optional[str]:
        return self.user.username if self.user else None
