import re
import typing
from logging import getLogger
from typing import Optional

from litestar import Request, Response
from litestar.exceptions import HTTPException
from litestar.status_codes import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
)

log = getLogger(__name__)

__all__ = [
    "CATEGORY_STATUS_CODES",
    "CustomHTTPException",
    "DomainError",
    "ErrorCategory",
    "domain_error_handler",
    "parse_pg_detail",
    "to_http_exception",
]

ErrorCategory = typing.Literal[
    "validation",
    "authentication_required",
    "forbidden",
    "banned",
    "not_found",
    "conflict",
]

CATEGORY_STATUS_CODES: dict[str, int] = {
    "validation": HTTP_400_BAD_REQUEST,
    "authentication_required": HTTP_401_UNAUTHORIZED,
    "forbidden": HTTP_403_FORBIDDEN,
    "banned": HTTP_403_FORBIDDEN,
    "not_found": HTTP_404_NOT_FOUND,
    "conflict": HTTP_409_CONFLICT,
}


def parse_pg_detail(detail: str | None) -> Optional[dict[str, str]]:
    """Extract column names and values from a Postgres error 'detail' string.

    "Key (court_id, suggested_by)=(1, 2) already exists."
    Returns a dict: {'court_id': '1', 'suggested_by': '2'}
    Returns None if no match is found.
    """
    if detail is None:
        return None
    match = re.search(r"\((.*?)\)=\((.*?)\)", detail)
    if not match:
        return None
    columns = [col.strip() for col in match.group(1).split(",")]
    values = [val.strip() for val in match.group(2).split(",")]
    return dict(zip(columns, values))


class CustomHTTPException(HTTPException): ...


class DomainError(Exception):
    """Base exception for domain-level business rule violations.

    Subclasses set ``category``, which decides the HTTP status the error maps to.

    Attributes:
        message: Human-readable error message.
        context: Additional context about the error.
    """

    category: typing.ClassVar[ErrorCategory] = "validation"

    def __init__(self, message: str, **context: typing.Any) -> None:  # noqa: ANN401
        super().__init__(message)
        self.message = message
        self.context = context

    @property
    def status_code(self) -> int:
        return CATEGORY_STATUS_CODES[self.category]


def to_http_exception(error: DomainError) -> CustomHTTPException:
    """Translate a domain error into the HTTP exception returned to clients."""
    extra = {"category": error.category}
    extra.update({key: value for key, value in error.context.items() if value is not None})
    return CustomHTTPException(detail=error.message, status_code=error.status_code, extra=extra)


def domain_error_handler(request: Request, exc: DomainError) -> Response:
    """Application-level handler for domain errors that controllers let propagate."""
    http_exc = to_http_exception(exc)
    log.debug("%s %s -> %s: %s", request.method, request.url.path, http_exc.status_code, exc.message)
    return Response(
        content={
            "status_code": http_exc.status_code,
            "detail": http_exc.detail,
            "extra": http_exc.extra,
        },
        status_code=http_exc.status_code,
    )
