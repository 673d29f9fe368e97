"""Repository for user bans."""

from __future__ import annotations

import datetime as dt
from typing import Any
from uuid import UUID

from asyncpg import Connection
from litestar.datastructures import State

from .base import BaseRepository

BAN_COLUMNS = """
    id, user_id, user_name, user_email, banned_by, banned_by_user_name,
    ban_reason, ban_type, is_active, expires_at, created_at, updated_at
"""

UPDATABLE_BAN_COLUMNS = frozenset({"ban_reason", "expires_at", "is_active"})


class BansRepository(BaseRepository):
    """Repository for user bans."""

    async def fetch_active_bans(self, user_id: str, *, conn: Connection | None = None) -> list[dict]:
        """Fetch bans flagged active for a user, expired ones included."""
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            f"SELECT {BAN_COLUMNS} FROM public.user_bans WHERE user_id = $1 AND is_active",
            user_id,
        )
        return [dict(row) for row in rows]

    async def fetch_bans(self, *, user_id: str | None = None, conn: Connection | None = None) -> list[dict]:
        _conn = self._get_connection(conn)
        if user_id is None:
            rows = await _conn.fetch(f"SELECT {BAN_COLUMNS} FROM public.user_bans ORDER BY created_at DESC")
        else:
            rows = await _conn.fetch(
                f"SELECT {BAN_COLUMNS} FROM public.user_bans WHERE user_id = $1 ORDER BY created_at DESC",
                user_id,
            )
        return [dict(row) for row in rows]

    async def fetch_ban(self, ban_id: UUID, *, conn: Connection | None = None) -> dict | None:
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(f"SELECT {BAN_COLUMNS} FROM public.user_bans WHERE id = $1", ban_id)
        return dict(row) if row else None

    async def upsert_ban(  # noqa: PLR0913
        self,
        user_id: str,
        user_name: str | None,
        user_email: str | None,
        banned_by: str,
        banned_by_user_name: str | None,
        ban_reason: str,
        ban_type: str,
        expires_at: dt.datetime | None,
        *,
        conn: Connection | None = None,
    ) -> dict:
        """Create a ban, or refresh the user's active ban of the same type.

        Returns:
            The created or updated ban row.
        """
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(
            f"""
            INSERT INTO public.user_bans (
                user_id, user_name, user_email, banned_by, banned_by_user_name,
                ban_reason, ban_type, expires_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            ON CONFLICT (user_id, ban_type) WHERE is_active DO UPDATE
            SET
                user_name = coalesce(EXCLUDED.user_name, user_bans.user_name),
                user_email = coalesce(EXCLUDED.user_email, user_bans.user_email),
                banned_by = EXCLUDED.banned_by,
                banned_by_user_name = EXCLUDED.banned_by_user_name,
                ban_reason = EXCLUDED.ban_reason,
                expires_at = EXCLUDED.expires_at,
                updated_at = now()
            RETURNING {BAN_COLUMNS}
            """,
            user_id,
            user_name,
            user_email,
            banned_by,
            banned_by_user_name,
            ban_reason,
            ban_type,
            expires_at,
        )
        return dict(row)

    async def update_ban(
        self,
        ban_id: UUID,
        data: dict[str, Any],
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Update the given ban columns.

        Returns:
            Updated ban row, or None if the ban does not exist.
        """
        _conn = self._get_connection(conn)
        unknown = set(data) - UPDATABLE_BAN_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update ban columns: {', '.join(sorted(unknown))}")
        if not data:
            return await self.fetch_ban(ban_id, conn=conn)

        set_clauses = [f"{column} = ${idx}" for idx, column in enumerate(data, start=2)]
        row = await _conn.fetchrow(
            f"""
            UPDATE public.user_bans
            SET {", ".join(set_clauses)}, updated_at = now()
            WHERE id = $1
            RETURNING {BAN_COLUMNS}
            """,
            ban_id,
            *data.values(),
        )
        return dict(row) if row else None

    async def deactivate_bans(
        self,
        user_id: str,
        ban_type: str | None = None,
        *,
        conn: Connection | None = None,
    ) -> int:
        """Deactivate a user's active bans, optionally only those of one type.

        Returns:
            Number of bans deactivated.
        """
        _conn = self._get_connection(conn)
        query = "UPDATE public.user_bans SET is_active = false, updated_at = now() WHERE user_id = $1 AND is_active"
        args: list[Any] = [user_id]
        if ban_type is not None:
            query += " AND ban_type = $2"
            args.append(ban_type)
        rows = await _conn.fetch(query + " RETURNING id", *args)
        return len(rows)


async def provide_bans_repository(state: State) -> BansRepository:
    """Litestar DI provider for repository."""
    return BansRepository(state.db_pool)
