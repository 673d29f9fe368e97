from litestar.connection import ASGIConnection
from litestar.exceptions import NotAuthorizedException, PermissionDeniedException
from litestar.handlers import BaseRouteHandler

from middleware.auth import AuthToken


def admin_guard(connection: ASGIConnection, route_handler: BaseRouteHandler) -> None:
    """Allow only tokens flagged as administrator."""
    auth: AuthToken | None = connection.scope.get("auth")
    if auth is None:
        raise NotAuthorizedException(detail="Sign in required", extra={"category": "authentication_required"})
    if not auth.is_admin:
        raise PermissionDeniedException(detail="Admin access required", extra={"category": "forbidden"})
