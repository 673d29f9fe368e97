"""Repository for courts data access."""

from __future__ import annotations

from typing import Any
from uuid import UUID

import asyncpg
from asyncpg import Connection
from litestar.datastructures import State

from .base import BaseRepository
from .exceptions import translate_integrity_error

COURT_COLUMNS = """
    id, name, address, city, state, zip, latitude, longitude,
    court_type, number_of_courts, surface, court_condition,
    hitting_wall, lighted, is_public, membership_required, parking,
    created_at, updated_at
"""

WRITABLE_COURT_COLUMNS = frozenset(
    {
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
        "is_public",
        "membership_required",
        "parking",
    }
)


class CourtsRepository(BaseRepository):
    """Repository for courts data access."""

    async def fetch_courts(self, *, conn: Connection | None = None) -> list[dict]:
        """Fetch every court with its review aggregate.

        Args:
            conn: Optional connection for transaction participation.

        Returns:
            Court rows with ``average_rating`` and ``review_count``.
        """
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            """
            SELECT
                c.id, c.name, c.address, c.city, c.state, c.zip, c.latitude, c.longitude,
                c.court_type, c.number_of_courts, c.surface, c.court_condition,
                c.hitting_wall, c.lighted, c.is_public, c.membership_required, c.parking,
                c.created_at, c.updated_at,
                coalesce(round(avg(r.rating)::numeric, 1), 0)::float8 AS average_rating,
                count(r.id)::int AS review_count
            FROM public.courts c
            LEFT JOIN public.reviews r ON r.court_id = c.id AND NOT r.is_deleted
            GROUP BY c.id
            ORDER BY c.name
            """
        )
        return [dict(row) for row in rows]

    async def fetch_court(
        self,
        court_id: UUID,
        *,
        for_update: bool = False,
        conn: Connection | None = None,
    ) -> dict | None:
        """Fetch a single court.

        Args:
            court_id: Court ID.
            for_update: Lock the row until the surrounding transaction ends.
            conn: Optional connection for transaction participation.

        Returns:
            Court row as dict, or None if not found.
        """
        _conn = self._get_connection(conn)
        query = f"SELECT {COURT_COLUMNS} FROM public.courts WHERE id = $1"
        if for_update:
            query += " FOR UPDATE"
        row = await _conn.fetchrow(query, court_id)
        return dict(row) if row else None

    async def court_exists(self, court_id: UUID, *, conn: Connection | None = None) -> bool:
        _conn = self._get_connection(conn)
        return bool(await _conn.fetchval("SELECT EXISTS(SELECT 1 FROM public.courts WHERE id = $1)", court_id))

    async def find_court_by_address(
        self,
        address: str,
        city: str,
        state: str,
        zip_code: str,
        *,
        conn: Connection | None = None,
    ) -> UUID | None:
        """Find a court at the given address (case-insensitive).

        Returns:
            Court ID if one exists, else None.
        """
        _conn = self._get_connection(conn)
        return await _conn.fetchval(
            """
            SELECT id
            FROM public.courts
            WHERE lower(address) = lower($1)
              AND lower(coalesce(city, '')) = lower($2)
              AND lower(coalesce(state, '')) = lower($3)
              AND coalesce(zip, '') = $4
            LIMIT 1
            """,
            address,
            city,
            state,
            zip_code,
        )

    async def create_court(self, data: dict[str, Any], *, conn: Connection | None = None) -> dict:
        """Insert a court.

        Args:
            data: Column values. ``name`` and ``address`` are required.
            conn: Optional connection for transaction participation.

        Returns:
            Created court row as dict.
        """
        _conn = self._get_connection(conn)
        columns = [column for column in data if column in WRITABLE_COURT_COLUMNS]
        placeholders = ", ".join(f"${idx}" for idx in range(1, len(columns) + 1))
        try:
            row = await _conn.fetchrow(
                f"""
                INSERT INTO public.courts ({", ".join(columns)})
                VALUES ({placeholders})
                RETURNING {COURT_COLUMNS}
                """,
                *(data[column] for column in columns),
            )
        except (asyncpg.UniqueViolationError, asyncpg.CheckViolationError) as e:
            raise translate_integrity_error(e, "public.courts") from e
        return dict(row)

    async def update_court(
        self,
        court_id: UUID,
        data: dict[str, Any],
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Update only the given court columns.

        Columns not present in ``data`` keep their current value.

        Args:
            court_id: Court ID.
            data: Column -> new value.
            conn: Optional connection for transaction participation.

        Returns:
            Updated court row, or None if the court does not exist.

        Raises:
            ValueError: If ``data`` names a column that cannot be written.
        """
        _conn = self._get_connection(conn)
        unknown = set(data) - WRITABLE_COURT_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update court columns: {', '.join(sorted(unknown))}")
        if not data:
            return await self.fetch_court(court_id, conn=conn)

        set_clauses = []
        values: list[Any] = []
        for param_idx, (column, value) in enumerate(data.items(), start=1):
            set_clauses.append(f"{column} = ${param_idx}")
            values.append(value)
        values.append(court_id)

        query = f"""
            UPDATE public.courts
            SET {", ".join(set_clauses)}, updated_at = now()
            WHERE id = ${len(values)}
            RETURNING {COURT_COLUMNS}
        """
        try:
            row = await _conn.fetchrow(query, *values)
        except asyncpg.CheckViolationError as e:
            raise translate_integrity_error(e, "public.courts") from e
        return dict(row) if row else None

    async def delete_court(self, court_id: UUID, *, conn: Connection | None = None) -> bool:
        """Delete a court. Reviews, photos, suggestions and reports cascade.

        Returns:
            True if a court was deleted.
        """
        _conn = self._get_connection(conn)
        deleted = await _conn.fetchval("DELETE FROM public.courts WHERE id = $1 RETURNING id", court_id)
        return deleted is not None

    async def fetch_court_media_urls(self, court_id: UUID, *, conn: Connection | None = None) -> list[str]:
        """Fetch every stored photo URL attached to a court, its photos and its reviews."""
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            """
            SELECT photo_url AS url FROM public.court_photos WHERE court_id = $1
            UNION
            SELECT unnest(photos) AS url FROM public.reviews WHERE court_id = $1
            """,
            court_id,
        )
        return [row["url"] for row in rows]


async def provide_courts_repository(state: State) -> CourtsRepository:
    """Litestar DI provider for repository."""
    return CourtsRepository(state.db_pool)
