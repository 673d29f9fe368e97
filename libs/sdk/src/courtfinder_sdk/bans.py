"""User ban models."""

from __future__ import annotations

import datetime as dt
from typing import Literal
from uuid import UUID

from msgspec import UNSET, Struct, UnsetType

__all__ = (
    "BAN_TYPES",
    "AdminCheckResponse",
    "BanStatusResponse",
    "BanType",
    "UserBanCreateRequest",
    "UserBanCreatedEvent",
    "UserBanResponse",
    "UserBanUpdateRequest",
)

BanType = Literal["full", "reviews", "suggestions", "photos"]
BAN_TYPES: tuple[str, ...] = ("full", "reviews", "suggestions", "photos")


class UserBanCreateRequest(Struct, rename="camel"):
    """Payload for banning a user.

    Attributes:
        user_id: User to ban.
        ban_reason: Reason shown to moderators.
        ban_type: Category of the ban. ``full`` covers every category.
        user_name: Display name of the banned user, if known.
        user_email: Email of the banned user, if known.
        expires_at: When the ban lapses. None means it never does.
    """

    user_id: str
    ban_reason: str
    ban_type: str = "full"
    user_name: str | None = None
    user_email: str | None = None
    expires_at: dt.datetime | None = None


class UserBanUpdateRequest(Struct, rename="camel"):
    """Partial ban update."""

    ban_id: UUID
    ban_reason: str | UnsetType = UNSET
    expires_at: dt.datetime | None | UnsetType = UNSET
    is_active: bool | UnsetType = UNSET


class UserBanResponse(Struct, rename="camel"):
    """A ban record."""

    id: UUID
    user_id: str
    user_name: str | None
    user_email: str | None
    banned_by: str
    banned_by_user_name: str | None
    ban_reason: str
    ban_type: BanType
    is_active: bool
    expires_at: dt.datetime | None
    created_at: dt.datetime
    updated_at: dt.datetime


class BanStatusResponse(Struct, rename="camel"):
    """Whether the current user is banned, and from what."""

    is_banned: bool
    user_id: str
    categories: list[BanType] = []


class AdminCheckResponse(Struct, rename="camel"):
    """Whether the current user is an administrator."""

    is_admin: bool


class UserBanCreatedEvent(Struct):
    """Published when a ban is created or reactivated."""

    ban_id: UUID
    user_id: str
    ban_type: BanType
