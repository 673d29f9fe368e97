"""Domain exceptions for user bans."""

from __future__ import annotations

from uuid import UUID

from utilities.errors import DomainError


class BansError(DomainError):
    """Base exception for bans domain."""


class BanValidationError(BansError):
    def __init__(self, message: str, field: str = "unknown") -> None:
        super().__init__(message, field=field)


class BanNotFoundError(BansError):
    category = "not_found"

    def __init__(self, ban_id: UUID | None = None, user_id: str | None = None) -> None:
        super().__init__("Ban not found.", ban_id=ban_id, user_id=user_id)


class UserBannedError(BansError):
    """User holds an active ban covering the attempted action."""

    category = "banned"

    def __init__(self, user_id: str, category: str) -> None:
        super().__init__(
            f"Your account is banned from {category}.",
            user_id=user_id,
            ban_category=category,
        )
