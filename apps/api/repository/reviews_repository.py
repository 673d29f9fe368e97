"""Repository for court reviews and review reports."""

from __future__ import annotations

from uuid import UUID

import asyncpg
from asyncpg import Connection
from litestar.datastructures import State

from .base import BaseRepository
from .exceptions import translate_integrity_error

REVIEW_COLUMNS = "id, court_id, user_id, user_name, rating, text, photos, created_at, updated_at"

REPORT_COLUMNS = """
    rr.id, rr.review_id, rr.reported_by, rr.reported_by_name, rr.reason, rr.status,
    rr.resolved_by, rr.resolution_note, rr.resolved_at, rr.created_at
"""


class ReviewsRepository(BaseRepository):
    """Repository for reviews and the reports filed against them."""

    async def fetch_reviews(self, court_id: UUID, *, conn: Connection | None = None) -> list[dict]:
        """Fetch visible reviews for a court, newest first."""
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            f"""
            SELECT {REVIEW_COLUMNS}
            FROM public.reviews
            WHERE court_id = $1 AND NOT is_deleted
            ORDER BY created_at DESC
            """,
            court_id,
        )
        return [dict(row) for row in rows]

    async def fetch_review(self, review_id: UUID, *, conn: Connection | None = None) -> dict | None:
        """Fetch a visible review."""
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(
            f"SELECT {REVIEW_COLUMNS} FROM public.reviews WHERE id = $1 AND NOT is_deleted",
            review_id,
        )
        return dict(row) if row else None

    async def create_review(  # noqa: PLR0913
        self,
        court_id: UUID,
        user_id: str,
        user_name: str | None,
        rating: int,
        text: str | None,
        photos: list[str],
        *,
        conn: Connection | None = None,
    ) -> dict:
        """Insert a review.

        Raises:
            ForeignKeyViolationError: If the court does not exist.
        """
        _conn = self._get_connection(conn)
        try:
            row = await _conn.fetchrow(
                f"""
                INSERT INTO public.reviews (court_id, user_id, user_name, rating, text, photos)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING {REVIEW_COLUMNS}
                """,
                court_id,
                user_id,
                user_name,
                rating,
                text,
                photos,
            )
        except asyncpg.ForeignKeyViolationError as e:
            raise translate_integrity_error(e, "public.reviews") from e
        return dict(row)

    async def update_review(
        self,
        review_id: UUID,
        rating: int,
        text: str | None,
        photos: list[str],
        *,
        conn: Connection | None = None,
    ) -> dict:
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(
            f"""
            UPDATE public.reviews
            SET rating = $2, text = $3, photos = $4, updated_at = now()
            WHERE id = $1
            RETURNING {REVIEW_COLUMNS}
            """,
            review_id,
            rating,
            text,
            photos,
        )
        return dict(row)

    async def delete_review(self, review_id: UUID, *, conn: Connection | None = None) -> None:
        """Hard delete a review; its reports cascade."""
        _conn = self._get_connection(conn)
        await _conn.execute("DELETE FROM public.reviews WHERE id = $1", review_id)

    async def soft_delete_review(
        self,
        review_id: UUID,
        deleted_by: str,
        reason: str | None,
        *,
        conn: Connection | None = None,
    ) -> None:
        _conn = self._get_connection(conn)
        await _conn.execute(
            """
            UPDATE public.reviews
            SET is_deleted = true, deleted_by = $2, deletion_reason = $3, deleted_at = now()
            WHERE id = $1
            """,
            review_id,
            deleted_by,
            reason,
        )

    async def remove_review_photo(
        self,
        review_id: UUID,
        photo_url: str,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Drop one photo URL from a review.

        Returns:
            The updated review, or None if the review does not carry that URL.
        """
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(
            f"""
            UPDATE public.reviews
            SET photos = array_remove(photos, $2), updated_at = now()
            WHERE id = $1 AND NOT is_deleted AND $2 = ANY(photos)
            RETURNING {REVIEW_COLUMNS}
            """,
            review_id,
            photo_url,
        )
        return dict(row) if row else None

    # Reports

    async def create_report(
        self,
        review_id: UUID,
        reported_by: str,
        reported_by_name: str | None,
        reason: str,
        *,
        conn: Connection | None = None,
    ) -> dict:
        """File a report against a review.

        Raises:
            UniqueConstraintViolationError: If the user already reported this review.
        """
        _conn = self._get_connection(conn)
        try:
            row = await _conn.fetchrow(
                """
                INSERT INTO public.review_reports AS rr (review_id, reported_by, reported_by_name, reason)
                VALUES ($1, $2, $3, $4)
                RETURNING
                    rr.id, rr.review_id, rr.reported_by, rr.reported_by_name, rr.reason, rr.status,
                    rr.resolved_by, rr.resolution_note, rr.resolved_at, rr.created_at
                """,
                review_id,
                reported_by,
                reported_by_name,
                reason,
            )
        except asyncpg.UniqueViolationError as e:
            raise translate_integrity_error(e, "public.review_reports") from e
        return dict(row)

    async def fetch_pending_reports(self, *, conn: Connection | None = None) -> list[dict]:
        """Fetch pending review reports with the review and court they concern."""
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            f"""
            SELECT
                {REPORT_COLUMNS},
                r.text AS review_text,
                r.rating AS review_rating,
                r.user_id AS review_user_id,
                r.user_name AS review_user_name,
                r.photos AS review_photos,
                c.id AS court_id,
                c.name AS court_name
            FROM public.review_reports rr
            JOIN public.reviews r ON r.id = rr.review_id
            JOIN public.courts c ON c.id = r.court_id
            WHERE rr.status = 'pending'
            ORDER BY rr.created_at DESC
            """
        )
        return [dict(row) for row in rows]

    async def fetch_report(
        self,
        report_id: UUID,
        *,
        for_update: bool = False,
        conn: Connection | None = None,
    ) -> dict | None:
        _conn = self._get_connection(conn)
        query = f"SELECT {REPORT_COLUMNS} FROM public.review_reports rr WHERE rr.id = $1"
        if for_update:
            query += " FOR UPDATE"
        row = await _conn.fetchrow(query, report_id)
        return dict(row) if row else None

    async def resolve_report(
        self,
        report_id: UUID,
        status: str,
        resolved_by: str,
        resolution_note: str | None,
        *,
        conn: Connection | None = None,
    ) -> None:
        _conn = self._get_connection(conn)
        await _conn.execute(
            """
            UPDATE public.review_reports
            SET status = $2, resolved_by = $3, resolution_note = $4, resolved_at = now()
            WHERE id = $1
            """,
            report_id,
            status,
            resolved_by,
            resolution_note,
        )

    async def resolve_pending_reports_for_review(
        self,
        review_id: UUID,
        resolved_by: str,
        resolution_note: str | None,
        *,
        conn: Connection | None = None,
    ) -> int:
        """Mark every pending report on a review as resolved.

        Returns:
            Number of reports resolved.
        """
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            """
            UPDATE public.review_reports
            SET status = 'resolved', resolved_by = $2, resolution_note = $3, resolved_at = now()
            WHERE review_id = $1 AND status = 'pending'
            RETURNING id
            """,
            review_id,
            resolved_by,
            resolution_note,
        )
        return len(rows)

    async def dismiss_all_pending_reports(
        self,
        resolved_by: str,
        resolution_note: str,
        *,
        conn: Connection | None = None,
    ) -> int:
        """Dismiss every pending review report. Returns the number dismissed."""
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            """
            UPDATE public.review_reports
            SET status = 'dismissed', resolved_by = $1, resolution_note = $2, resolved_at = now()
            WHERE status = 'pending'
            RETURNING id
            """,
            resolved_by,
            resolution_note,
        )
        return len(rows)


async def provide_reviews_repository(state: State) -> ReviewsRepository:
    """Litestar DI provider for repository."""
    return ReviewsRepository(state.db_pool)
