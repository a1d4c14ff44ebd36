"""Middleware resolving the bearer token into a request principal."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.logger import get_logger, log_context
from app.core.security import (
    AuthenticatedUser,
    AuthenticationError,
    SecurityProvider,
    extract_bearer_token,
)

LOGGER = get_logger(__name__)


class AuthMiddleware(BaseHTTPMiddleware):
    """Attach the decoded principal to ``request.state.user``.

    Missing or invalid tokens leave ``user`` unset; route dependencies decide
    whether that is a 401.
    """

    def __init__(
        self,
        app,
        security_provider: SecurityProvider,
        *,
        request_id_header: str = "X-Request-ID",
    ) -> None:
        super().__init__(app)
        self._security_provider = security_provider
        self._request_id_header = request_id_header

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        token = extract_bearer_token(request.headers.get("Authorization"))
        user: AuthenticatedUser | None = None

        if token:
            try:
                user = self._security_provider.decode_token(token)
            except AuthenticationError as exc:
                LOGGER.info("Failed to decode access token: %s", exc)

        request.state.user = user
        request_id = request.headers.get(self._request_id_header) or uuid4().hex[:12]

        with log_context.scope(
            request_id=request_id,
            user_id=user.user_id if user is not None else None,
        ):
            response = await call_next(request)
        response.headers[self._request_id_header] = request_id
        return response


__all__ = ["AuthMiddleware"]
