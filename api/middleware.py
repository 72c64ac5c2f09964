"""Caller identity middleware using ContextVar.

Extracts the bearer credential from the Authorization header (or falls back
to the token cookie), verifies it and stores the claimed user id in a
ContextVar, so downstream code can call get_current_user_id() without
explicit parameter passing. Requests without a valid token simply carry no
identity; protected routes reject them via api.deps.get_current_user.
"""

from contextvars import ContextVar
from uuid import UUID

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from core.config import get_settings
from core.errors import Unauthorized
from core.security import decode_access_token

# ---------------------------------------------------------------------------
# Per-request identity
# ---------------------------------------------------------------------------

_current_user_id: ContextVar[UUID | None] = ContextVar("current_user_id", default=None)


def get_current_user_id() -> UUID | None:
    """Return the verified user id for the current request, if any."""
    return _current_user_id.get()


def extract_token(request: Request, cookie_name: str) -> str | None:
    """Bearer header first, then cookie."""
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer"):
        parts = header.split(" ", 1)
        if len(parts) == 2 and parts[1].strip():
            return parts[1].strip()
    return request.cookies.get(cookie_name) or None


def resolve_user_id(token: str | None) -> UUID | None:
    if not token:
        return None
    try:
        claims = decode_access_token(token)
        return UUID(claims["sub"])
    except (Unauthorized, ValueError):
        return None


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

class AuthMiddleware(BaseHTTPMiddleware):
    """Resolve the request's credential to a user id.

    Priority:
    1. Authorization: Bearer <token>
    2. token cookie
    3. No identity
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        cookie_name = get_settings().auth.cookie_name
        user_id = resolve_user_id(extract_token(request, cookie_name))

        token = _current_user_id.set(user_id)
        try:
            response = await call_next(request)
            return response
        finally:
            _current_user_id.reset(token)
