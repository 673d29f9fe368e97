"""Repository for court edit suggestions and their per-field reviews."""

from __future__ import annotations

from typing import Any
from uuid import UUID

import asyncpg
from asyncpg import Connection
from courtfinder_sdk.suggestions import SUGGESTION_FIELDS
from litestar.datastructures import State

from .base import BaseRepository
from .exceptions import translate_integrity_error

SUGGESTED_COLUMNS: tuple[str, ...] = tuple(spec.suggestion_column for spec in SUGGESTION_FIELDS.values())

SUGGESTION_COLUMNS = """
    s.id, s.court_id, s.suggested_by, s.suggested_by_name, s.reason, s.status,
    s.review_note, s.reviewed_by, s.reviewed_by_name, s.reviewed_at,
    s.created_at, s.updated_at,
""" + ", ".join(f"s.{column}" for column in SUGGESTED_COLUMNS)


class EditSuggestionsRepository(BaseRepository):
    """Repository for court edit suggestions."""

    async def fetch_pending_suggestion_id(
        self,
        court_id: UUID,
        user_id: str,
        *,
        conn: Connection | None = None,
    ) -> UUID | None:
        """Return the user's pending suggestion for a court, if any."""
        _conn = self._get_connection(conn)
        return await _conn.fetchval(
            """
            SELECT id
            FROM public.court_edit_suggestions
            WHERE court_id = $1 AND suggested_by = $2 AND status = 'pending'
            """,
            court_id,
            user_id,
        )

    async def create_suggestion(  # noqa: PLR0913
        self,
        court_id: UUID,
        suggested_by: str,
        suggested_by_name: str | None,
        reason: str,
        values: dict[str, Any],
        *,
        conn: Connection | None = None,
    ) -> UUID:
        """Insert a pending suggestion.

        Args:
            court_id: Court the suggestion targets.
            suggested_by: Submitting user ID.
            suggested_by_name: Submitting user's display name.
            reason: Submitter's rationale.
            values: ``suggested_*`` column -> proposed value.
            conn: Optional connection for transaction participation.

        Returns:
            ID of the new suggestion.

        Raises:
            UniqueConstraintViolationError: If the user already has a pending suggestion for the court.
            ForeignKeyViolationError: If the court does not exist.
        """
        _conn = self._get_connection(conn)
        columns = ["court_id", "suggested_by", "suggested_by_name", "reason"]
        args: list[Any] = [court_id, suggested_by, suggested_by_name, reason]
        for column in SUGGESTED_COLUMNS:
            if column in values:
                columns.append(column)
                args.append(values[column])
        placeholders = ", ".join(f"${idx}" for idx in range(1, len(args) + 1))
        try:
            return await _conn.fetchval(
                f"""
                INSERT INTO public.court_edit_suggestions ({", ".join(columns)})
                VALUES ({placeholders})
                RETURNING id
                """,
                *args,
            )
        except (asyncpg.UniqueViolationError, asyncpg.ForeignKeyViolationError) as e:
            raise translate_integrity_error(e, "public.court_edit_suggestions") from e

    async def fetch_suggestion(
        self,
        suggestion_id: UUID,
        *,
        for_update: bool = False,
        conn: Connection | None = None,
    ) -> dict | None:
        """Fetch one suggestion with the name of its court.

        Args:
            suggestion_id: Suggestion ID.
            for_update: Lock the suggestion row until the surrounding transaction ends.
            conn: Optional connection for transaction participation.

        Returns:
            Suggestion row as dict, or None if not found.
        """
        _conn = self._get_connection(conn)
        query = f"""
            SELECT {SUGGESTION_COLUMNS}, c.name AS court_name
            FROM public.court_edit_suggestions s
            JOIN public.courts c ON c.id = s.court_id
            WHERE s.id = $1
        """
        if for_update:
            query += " FOR UPDATE OF s"
        row = await _conn.fetchrow(query, suggestion_id)
        return dict(row) if row else None

    async def fetch_suggestions(
        self,
        *,
        court_id: UUID | None = None,
        status: str | None = None,
        user_id: str | None = None,
        limit: int | None = None,
        conn: Connection | None = None,
    ) -> list[dict]:
        """Fetch suggestions, newest first, matching every given filter."""
        _conn = self._get_connection(conn)
        filters: list[str] = []
        args: list[Any] = []
        for clause, value in (
            ("s.court_id = ${}", court_id),
            ("s.status = ${}", status),
            ("s.suggested_by = ${}", user_id),
        ):
            if value is not None:
                args.append(value)
                filters.append(clause.format(len(args)))

        query = f"""
            SELECT {SUGGESTION_COLUMNS}, c.name AS court_name
            FROM public.court_edit_suggestions s
            JOIN public.courts c ON c.id = s.court_id
        """
        if filters:
            query += " WHERE " + " AND ".join(filters)
        query += " ORDER BY s.created_at DESC"
        if limit is not None:
            args.append(limit)
            query += f" LIMIT ${len(args)}"

        rows = await _conn.fetch(query, *args)
        return [dict(row) for row in rows]

    async def update_suggestion_content(
        self,
        suggestion_id: UUID,
        reason: str,
        values: dict[str, Any],
        *,
        conn: Connection | None = None,
    ) -> None:
        """Replace a suggestion's reason and proposed values.

        Every ``suggested_*`` column missing from ``values`` is cleared.
        """
        _conn = self._get_connection(conn)
        set_clauses = ["reason = $2", "updated_at = now()"]
        args: list[Any] = [suggestion_id, reason]
        for column in SUGGESTED_COLUMNS:
            args.append(values.get(column))
            set_clauses.append(f"{column} = ${len(args)}")
        await _conn.execute(
            f"UPDATE public.court_edit_suggestions SET {', '.join(set_clauses)} WHERE id = $1",
            *args,
        )

    async def delete_suggestion(self, suggestion_id: UUID, *, conn: Connection | None = None) -> bool:
        _conn = self._get_connection(conn)
        deleted = await _conn.fetchval(
            "DELETE FROM public.court_edit_suggestions WHERE id = $1 RETURNING id",
            suggestion_id,
        )
        return deleted is not None

    async def fetch_field_reviews(
        self,
        suggestion_ids: list[UUID],
        *,
        conn: Connection | None = None,
    ) -> list[dict]:
        """Fetch the per-field decisions recorded for the given suggestions."""
        _conn = self._get_connection(conn)
        if not suggestion_ids:
            return []
        rows = await _conn.fetch(
            """
            SELECT suggestion_id, field, status, reviewed_by, reviewed_by_name, review_note, reviewed_at
            FROM public.court_edit_suggestion_field_reviews
            WHERE suggestion_id = ANY($1::uuid[])
            ORDER BY reviewed_at
            """,
            suggestion_ids,
        )
        return [dict(row) for row in rows]

    async def insert_field_reviews(  # noqa: PLR0913
        self,
        suggestion_id: UUID,
        fields: list[str],
        status: str,
        reviewed_by: str,
        reviewed_by_name: str | None,
        review_note: str | None,
        *,
        conn: Connection | None = None,
    ) -> None:
        """Record the same decision for each of the given fields.

        Raises:
            UniqueConstraintViolationError: If one of the fields already has a decision.
        """
        _conn = self._get_connection(conn)
        try:
            await _conn.executemany(
                """
                INSERT INTO public.court_edit_suggestion_field_reviews (
                    suggestion_id, field, status, reviewed_by, reviewed_by_name, review_note
                )
                VALUES ($1, $2, $3, $4, $5, $6)
                """,
                [(suggestion_id, field, status, reviewed_by, reviewed_by_name, review_note) for field in fields],
            )
        except asyncpg.UniqueViolationError as e:
            raise translate_integrity_error(e, "public.court_edit_suggestion_field_reviews") from e

    async def resolve_suggestion(  # noqa: PLR0913
        self,
        suggestion_id: UUID,
        status: str,
        reviewed_by: str,
        reviewed_by_name: str | None,
        review_note: str | None,
        *,
        conn: Connection | None = None,
    ) -> None:
        """Move a suggestion to a terminal status and stamp the reviewer."""
        _conn = self._get_connection(conn)
        await _conn.execute(
            """
            UPDATE public.court_edit_suggestions
            SET
                status = $2,
                reviewed_by = $3,
                reviewed_by_name = $4,
                review_note = $5,
                reviewed_at = now(),
                updated_at = now()
            WHERE id = $1
            """,
            suggestion_id,
            status,
            reviewed_by,
            reviewed_by_name,
            review_note,
        )

    async def touch_suggestion(self, suggestion_id: UUID, *, conn: Connection | None = None) -> None:
        """Bump ``updated_at`` after a field decision that leaves the suggestion pending."""
        _conn = self._get_connection(conn)
        await _conn.execute(
            "UPDATE public.court_edit_suggestions SET updated_at = now() WHERE id = $1",
            suggestion_id,
        )


async def provide_edit_suggestions_repository(state: State) -> EditSuggestionsRepository:
    """Litestar DI provider for repository."""
    return EditSuggestionsRepository(state.db_pool)
