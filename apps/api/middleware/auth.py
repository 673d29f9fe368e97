"""API key authentication against tokens issued by the identity provider."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import msgspec
from litestar.connection import ASGIConnection
from litestar.exceptions import NotAuthorizedException
from litestar.middleware.authentication import AbstractAuthenticationMiddleware, AuthenticationResult

if TYPE_CHECKING:
    from asyncpg import Pool

log = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-KEY"

_TOKEN_OWNER_QUERY = """
    SELECT t.api_key, t.is_admin, t.scopes, u.id AS user_id, u.username, u.email
    FROM public.api_tokens t
    JOIN public.auth_users u ON u.id = t.user_id
    WHERE t.api_key = $1
"""


class AuthUser(msgspec.Struct):
    """Signed-in user as known to the identity provider."""

    id: str
    username: str
    email: str | None = None


class AuthToken(msgspec.Struct):
    api_key: str
    is_admin: bool = False
    scopes: tuple[str, ...] = ()


def _sign_in_required(detail: str) -> NotAuthorizedException:
    return NotAuthorizedException(detail, extra={"category": "authentication_required"})


async def lookup_api_key(pool: Pool, api_key: str) -> AuthenticationResult | None:
    """Return the user and token behind ``api_key``, or None if no such key was issued."""
    row = await pool.fetchrow(_TOKEN_OWNER_QUERY, api_key)
    if row is None:
        return None
    return AuthenticationResult(
        user=AuthUser(id=row["user_id"], username=row["username"], email=row["email"]),
        auth=AuthToken(api_key=row["api_key"], is_admin=bool(row["is_admin"]), scopes=tuple(row["scopes"] or ())),
    )


class CustomAuthenticationMiddleware(AbstractAuthenticationMiddleware):
    async def authenticate_request(self, connection: ASGIConnection) -> AuthenticationResult:
        """Resolve the API key header to the user the identity provider issued it to.

        Raises:
            NotAuthorizedException: If the header is missing, blank or carries an unknown key.
        """
        api_key = (connection.headers.get(API_KEY_HEADER) or "").strip()
        if not api_key:
            raise _sign_in_required("Sign in required")

        result = await lookup_api_key(connection.app.state["db_pool"], api_key)
        if result is None:
            log.debug("Rejected unknown API key on %s", connection.url.path)
            raise _sign_in_required("Invalid API key")
        return result
