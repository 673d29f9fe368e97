"""Service for user bans and the ban gate consulted by submission endpoints."""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Iterable

from asyncpg import Pool
from courtfinder_sdk.bans import (
    BAN_TYPES,
    BanStatusResponse,
    UserBanCreatedEvent,
    UserBanCreateRequest,
    UserBanResponse,
    UserBanUpdateRequest,
)
from litestar.datastructures import Headers, State
from msgspec import UNSET

from middleware.auth import AuthUser
from repository.bans_repository import BansRepository
from services.exceptions.bans import BanNotFoundError, BanValidationError, UserBannedError

from .base import BaseService

log = logging.getLogger(__name__)


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _as_utc(value: dt.datetime | None) -> dt.datetime | None:
    """Treat naive timestamps as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=dt.timezone.utc)


def blocked_categories(bans: Iterable[dict], now: dt.datetime) -> list[str]:
    """Return every category the given bans block at ``now``.

    Inactive bans and bans whose ``expires_at`` has passed block nothing. A ``full``
    ban blocks every category.
    """
    categories: set[str] = set()
    for ban in bans:
        if not ban["is_active"]:
            continue
        expires_at = ban["expires_at"]
        if expires_at is not None and expires_at <= now:
            continue
        if ban["ban_type"] == "full":
            return list(BAN_TYPES)
        categories.add(ban["ban_type"])
    return [category for category in BAN_TYPES if category in categories]


class BansService(BaseService):
    """Service for bans business logic."""

    def __init__(self, pool: Pool, state: State, bans_repo: BansRepository) -> None:
        super().__init__(pool, state)
        self._bans_repo = bans_repo

    # Ban gate

    async def is_banned(self, user_id: str, category: str, *, now: dt.datetime | None = None) -> bool:
        """Whether the user holds an unexpired ban covering ``category``."""
        bans = await self._bans_repo.fetch_active_bans(user_id)
        return category in blocked_categories(bans, now or _utcnow())

    async def ensure_not_banned(self, user_id: str, category: str) -> None:
        """Refuse a submission from a banned user.

        Raises:
            UserBannedError: If the user is banned from ``category``.
        """
        if await self.is_banned(user_id, category):
            log.info("Blocked %s submission from banned user %s", category, user_id)
            raise UserBannedError(user_id, category)

    async def get_ban_status(self, user_id: str) -> BanStatusResponse:
        bans = await self._bans_repo.fetch_active_bans(user_id)
        categories = blocked_categories(bans, _utcnow())
        return BanStatusResponse(is_banned=bool(categories), user_id=user_id, categories=categories)

    # Administration

    async def list_bans(self, user_id: str | None = None) -> list[UserBanResponse]:
        rows = await self._bans_repo.fetch_bans(user_id=user_id)
        return [UserBanResponse(**row) for row in rows]

    async def create_ban(
        self,
        data: UserBanCreateRequest,
        admin: AuthUser,
        headers: Headers,
    ) -> UserBanResponse:
        """Ban a user, or refresh their active ban of the same type.

        Args:
            data: Ban details.
            admin: Administrator issuing the ban.
            headers: Request headers for event publishing.

        Raises:
            BanValidationError: If the ban type is unknown, the reason is blank, or the
                expiry is in the past.
        """
        if data.ban_type not in BAN_TYPES:
            raise BanValidationError(
                f"Invalid ban type. Must be one of: {', '.join(BAN_TYPES)}.",
                field="banType",
            )
        reason = data.ban_reason.strip()
        if not reason:
            raise BanValidationError("Ban reason is required.", field="banReason")
        if data.user_id == admin.id:
            raise BanValidationError("You cannot ban yourself.", field="userId")
        expires_at = _as_utc(data.expires_at)
        if expires_at is not None and expires_at <= _utcnow():
            raise BanValidationError("Ban expiry must be in the future.", field="expiresAt")

        row = await self._bans_repo.upsert_ban(
            user_id=data.user_id,
            user_name=data.user_name,
            user_email=data.user_email,
            banned_by=admin.id,
            banned_by_user_name=admin.username,
            ban_reason=reason,
            ban_type=data.ban_type,
            expires_at=expires_at,
        )
        ban = UserBanResponse(**row)
        log.info("User %s banned from %s by %s", ban.user_id, ban.ban_type, admin.id)

        await self.publish_message(
            routing_key="api.user_ban.created",
            data=UserBanCreatedEvent(ban_id=ban.id, user_id=ban.user_id, ban_type=ban.ban_type),
            headers=headers,
            idempotency_key=f"user_ban:created:{ban.id}:{ban.updated_at.isoformat()}",
        )
        return ban

    async def update_ban(self, data: UserBanUpdateRequest) -> UserBanResponse:
        changes: dict[str, object] = {}
        if data.ban_reason is not UNSET:
            if not data.ban_reason.strip():
                raise BanValidationError("Ban reason cannot be blank.", field="banReason")
            changes["ban_reason"] = data.ban_reason.strip()
        if data.expires_at is not UNSET:
            changes["expires_at"] = _as_utc(data.expires_at)
        if data.is_active is not UNSET:
            changes["is_active"] = data.is_active

        row = await self._bans_repo.update_ban(data.ban_id, changes)
        if row is None:
            raise BanNotFoundError(ban_id=data.ban_id)
        return UserBanResponse(**row)

    async def remove_bans(self, user_id: str, ban_type: str | None = None) -> int:
        """Deactivate a user's bans.

        Args:
            user_id: Banned user.
            ban_type: Only deactivate bans of this type. All types when None.

        Returns:
            Number of bans deactivated.

        Raises:
            BanNotFoundError: If the user has no matching active ban.
        """
        if ban_type is not None and ban_type not in BAN_TYPES:
            raise BanValidationError(
                f"Invalid ban type. Must be one of: {', '.join(BAN_TYPES)}.",
                field="banType",
            )
        removed = await self._bans_repo.deactivate_bans(user_id, ban_type)
        if not removed:
            raise BanNotFoundError(user_id=user_id)
        log.info("Deactivated %d ban(s) for user %s", removed, user_id)
        return removed


async def provide_bans_service(state: State, bans_repo: BansRepository) -> BansService:
    """Litestar DI provider for service.

    Args:
        state: Application state.
        bans_repo: Bans repository instance.

    Returns:
        BansService instance.
    """
    return BansService(state.db_pool, state, bans_repo)
