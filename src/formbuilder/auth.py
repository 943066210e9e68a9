from __future__ import annotations

from typing import Protocol

from fastapi import Request

from formbuilder.config import Settings
from formbuilder.errors import MissingIdentityError


class AuthProvider(Protocol):
    def current_identity(self, request: Request) -> str | None: ...


class HeaderAuthProvider:
    """Trusts the identity a fronting proxy puts in a request header."""

    def __init__(self, header: str) -> None:
        self._header = header

    def current_identity(self, request: Request) -> str | None:
        value = request.headers.get(self._header, "").strip()
        return value or None


class SingleUserAuthProvider:
    def __init__(self, user_id: str) -> None:
        self._user_id = user_id

    def current_identity(self, request: Request) -> str | None:
        return self._user_id


def get_auth_provider(settings: Settings) -> AuthProvider:
    if settings.auth_mode == "single":
        return SingleUserAuthProvider(settings.single_user_id)
    return HeaderAuthProvider(settings.auth_header)


def require_identity(request: Request) -> str:
    owner_id = request.app.state.auth_provider.current_identity(request)
    if not owner_id:
        raise MissingIdentityError()
    return owner_id
