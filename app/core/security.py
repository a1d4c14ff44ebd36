"""JWT bearer authentication and role guards."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Callable
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, Request, status
from jwt import ExpiredSignatureError, InvalidTokenError

from app.core.config import AuthSettings, get_settings


class AuthenticationError(Exception):
    """Raised when authentication or token validation fails."""


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    """Representation of the authenticated principal."""

    user_id: UUID | None
    roles: tuple[str, ...] = ()
    email: str | None = None

    def has_any_role(self, allowed: tuple[str, ...] | frozenset[str]) -> bool:
        return any(role in allowed for role in self.roles)


class SecurityProvider:
    """Issue and verify signed access tokens."""

    def __init__(self, settings: AuthSettings) -> None:
        self._settings = settings

    @property
    def is_enabled(self) -> bool:
        return self._settings.enabled

    @property
    def token_ttl_seconds(self) -> int:
        """Return the access token lifetime in seconds."""

        return int(self._settings.access_token_expire_minutes * 60)

    def default_admin_user(self) -> AuthenticatedUser:
        return AuthenticatedUser(user_id=None, roles=("admin",))

    def create_access_token(
        self, user: AuthenticatedUser, *, expires_in: timedelta | None = None
    ) -> str:
        """Create a signed JWT for ``user``.

        Login flows live elsewhere; this exists for local tooling and tests.
        """

        now = datetime.now(tz=timezone.utc)
        expires = now + (
            expires_in
            if expires_in is not None
            else timedelta(minutes=self._settings.access_token_expire_minutes)
        )
        payload: dict[str, object] = {
            "iat": int(now.timestamp()),
            "exp": int(expires.timestamp()),
            "roles": list(user.roles),
        }
        if user.user_id is not None:
            payload["sub"] = str(user.user_id)
        if user.email:
            payload["email"] = user.email
        return jwt.encode(payload, self._settings.secret_key, algorithm=self._settings.algorithm)

    def decode_token(self, token: str) -> AuthenticatedUser:
        """Decode a JWT and return the corresponding ``AuthenticatedUser``."""

        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key,
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError as exc:
            raise AuthenticationError("Token expired") from exc
        except InvalidTokenError as exc:
            raise AuthenticationError("Invalid token") from exc

        subject = payload.get("sub")
        if not isinstance(subject, str):
            raise AuthenticationError("Token payload missing subject claim")
        try:
            user_id = UUID(subject)
        except ValueError as exc:
            raise AuthenticationError("Token subject claim invalid") from exc

        roles_payload = payload.get("roles")
        resolved_roles: tuple[str, ...] = ()
        if isinstance(roles_payload, list) and all(isinstance(r, str) for r in roles_payload):
            resolved_roles = tuple(sorted({role.lower() for role in roles_payload}))

        email = payload.get("email")
        return AuthenticatedUser(
            user_id=user_id,
            roles=resolved_roles,
            email=email if isinstance(email, str) else None,
        )


@lru_cache(maxsize=1)
def get_security_provider() -> SecurityProvider:
    """Return a cached security provider instance."""

    return SecurityProvider(get_settings().auth)


def extract_bearer_token(header_value: str | None) -> str | None:
    """Return the token part of an ``Authorization: Bearer`` header."""

    if not header_value:
        return None
    scheme, _, credentials = header_value.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        return None
    return credentials.strip()


def get_authenticated_user(request: Request) -> AuthenticatedUser:
    """Retrieve the authenticated user from the request context."""

    security = get_security_provider()
    if not security.is_enabled:
        return security.default_admin_user()

    user = getattr(request.state, "user", None)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_roles(*roles: str) -> Callable[..., AuthenticatedUser]:
    """Build a dependency that admits users holding any of ``roles``."""

    allowed = frozenset(role.lower() for role in roles)

    def _dependency(
        user: AuthenticatedUser = Depends(get_authenticated_user),
    ) -> AuthenticatedUser:
        if not user.has_any_role(allowed):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return _dependency


__all__ = [
    "AuthenticatedUser",
    "AuthenticationError",
    "SecurityProvider",
    "extract_bearer_token",
    "get_authenticated_user",
    "get_security_provider",
    "require_roles",
]
