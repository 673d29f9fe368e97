"""Repository for suggested new courts."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from asyncpg import Connection
from litestar.datastructures import State

from .base import BaseRepository

COURT_SUGGESTION_COLUMNS = """
    id, suggested_by, suggested_by_name, name, address, city, state, zip,
    latitude, longitude, court_type, number_of_courts, surface, court_condition,
    hitting_wall, lighted, membership_required, parking,
    status, reviewed_by, reviewed_by_name, review_note, reviewed_at,
    court_id, created_at
"""

INSERTABLE_COLUMNS: tuple[str, ...] = (
    "name",
    "address",
    "city",
    "state",
    "zip",
    "latitude",
    "longitude",
    "court_type",
    "number_of_courts",
    "surface",
    "court_condition",
    "hitting_wall",
    "lighted",
    "membership_required",
    "parking",
)


class CourtSuggestionsRepository(BaseRepository):
    """Repository for suggested new courts."""

    async def find_pending_by_address(self, address: str, *, conn: Connection | None = None) -> UUID | None:
        _conn = self._get_connection(conn)
        return await _conn.fetchval(
            """
            SELECT id
            FROM public.court_suggestions
            WHERE lower(address) = lower($1) AND status = 'pending'
            LIMIT 1
            """,
            address,
        )

    async def create_suggestion(
        self,
        suggested_by: str,
        suggested_by_name: str,
        data: dict[str, Any],
        *,
        conn: Connection | None = None,
    ) -> dict:
        """Insert a pending new-court suggestion.

        Args:
            suggested_by: Submitting user ID.
            suggested_by_name: Submitting user's display name.
            data: Column values; see ``INSERTABLE_COLUMNS``.
            conn: Optional connection for transaction participation.

        Returns:
            Created row as dict.
        """
        _conn = self._get_connection(conn)
        columns = ["suggested_by", "suggested_by_name", *INSERTABLE_COLUMNS]
        args = [suggested_by, suggested_by_name, *(data.get(column) for column in INSERTABLE_COLUMNS)]
        placeholders = ", ".join(f"${idx}" for idx in range(1, len(args) + 1))
        row = await _conn.fetchrow(
            f"""
            INSERT INTO public.court_suggestions ({", ".join(columns)})
            VALUES ({placeholders})
            RETURNING {COURT_SUGGESTION_COLUMNS}
            """,
            *args,
        )
        return dict(row)

    async def fetch_suggestion(
        self,
        suggestion_id: UUID,
        *,
        for_update: bool = False,
        conn: Connection | None = None,
    ) -> dict | None:
        _conn = self._get_connection(conn)
        query = f"SELECT {COURT_SUGGESTION_COLUMNS} FROM public.court_suggestions WHERE id = $1"
        if for_update:
            query += " FOR UPDATE"
        row = await _conn.fetchrow(query, suggestion_id)
        return dict(row) if row else None

    async def fetch_suggestions(
        self,
        *,
        status: str | None = None,
        user_id: str | None = None,
        conn: Connection | None = None,
    ) -> list[dict]:
        """Fetch new-court suggestions, newest first."""
        _conn = self._get_connection(conn)
        filters: list[str] = []
        args: list[Any] = []
        if status is not None:
            args.append(status)
            filters.append(f"status = ${len(args)}")
        if user_id is not None:
            args.append(user_id)
            filters.append(f"suggested_by = ${len(args)}")
        query = f"SELECT {COURT_SUGGESTION_COLUMNS} FROM public.court_suggestions"
        if filters:
            query += " WHERE " + " AND ".join(filters)
        query += " ORDER BY created_at DESC"
        rows = await _conn.fetch(query, *args)
        return [dict(row) for row in rows]

    async def resolve_suggestion(  # noqa: PLR0913
        self,
        suggestion_id: UUID,
        status: str,
        reviewed_by: str,
        reviewed_by_name: str | None,
        review_note: str | None,
        court_id: UUID | None = None,
        *,
        conn: Connection | None = None,
    ) -> dict:
        """Mark a suggestion approved or rejected; approved ones link to the created court."""
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(
            f"""
            UPDATE public.court_suggestions
            SET
                status = $2,
                reviewed_by = $3,
                reviewed_by_name = $4,
                review_note = $5,
                court_id = $6,
                reviewed_at = now()
            WHERE id = $1
            RETURNING {COURT_SUGGESTION_COLUMNS}
            """,
            suggestion_id,
            status,
            reviewed_by,
            reviewed_by_name,
            review_note,
            court_id,
        )
        return dict(row)


async def provide_court_suggestions_repository(state: State) -> CourtSuggestionsRepository:
    """Litestar DI provider for repository."""
    return CourtSuggestionsRepository(state.db_pool)
