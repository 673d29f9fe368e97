"""Repository for court photos and photo reports."""

from __future__ import annotations

from uuid import UUID

import asyncpg
from asyncpg import Connection
from litestar.datastructures import State

from .base import BaseRepository
from .exceptions import translate_integrity_error

PHOTO_COLUMNS = "id, court_id, photo_url, caption, uploaded_by, uploaded_by_name, created_at"

PHOTO_REPORT_COLUMNS = """
    id, photo_id, reported_by, reported_by_name, reason, status,
    resolved_by, resolution_note, resolved_at, created_at
"""


class PhotosRepository(BaseRepository):
    """Repository for court photos and the reports filed against them."""

    async def fetch_photos(self, court_id: UUID, *, conn: Connection | None = None) -> list[dict]:
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            f"""
            SELECT {PHOTO_COLUMNS}
            FROM public.court_photos
            WHERE court_id = $1 AND NOT is_deleted
            ORDER BY created_at DESC
            """,
            court_id,
        )
        return [dict(row) for row in rows]

    async def fetch_photo(self, photo_id: UUID, *, conn: Connection | None = None) -> dict | None:
        """Fetch a photo that has not been deleted."""
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(
            f"SELECT {PHOTO_COLUMNS} FROM public.court_photos WHERE id = $1 AND NOT is_deleted",
            photo_id,
        )
        return dict(row) if row else None

    async def create_photo(  # noqa: PLR0913
        self,
        court_id: UUID,
        photo_url: str,
        caption: str | None,
        uploaded_by: str,
        uploaded_by_name: str | None,
        *,
        conn: Connection | None = None,
    ) -> dict:
        """Attach a photo to a court.

        Raises:
            ForeignKeyViolationError: If the court does not exist.
        """
        _conn = self._get_connection(conn)
        try:
            row = await _conn.fetchrow(
                f"""
                INSERT INTO public.court_photos (court_id, photo_url, caption, uploaded_by, uploaded_by_name)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING {PHOTO_COLUMNS}
                """,
                court_id,
                photo_url,
                caption,
                uploaded_by,
                uploaded_by_name,
            )
        except asyncpg.ForeignKeyViolationError as e:
            raise translate_integrity_error(e, "public.court_photos") from e
        return dict(row)

    async def update_caption(self, photo_id: UUID, caption: str | None, *, conn: Connection | None = None) -> dict:
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(
            f"UPDATE public.court_photos SET caption = $2 WHERE id = $1 RETURNING {PHOTO_COLUMNS}",
            photo_id,
            caption,
        )
        return dict(row)

    async def soft_delete_photo(
        self,
        photo_id: UUID,
        deleted_by: str,
        reason: str | None,
        *,
        conn: Connection | None = None,
    ) -> None:
        _conn = self._get_connection(conn)
        await _conn.execute(
            """
            UPDATE public.court_photos
            SET is_deleted = true, deleted_by = $2, deletion_reason = $3, deleted_at = now()
            WHERE id = $1
            """,
            photo_id,
            deleted_by,
            reason,
        )

    # Reports

    async def create_report(
        self,
        photo_id: UUID,
        reported_by: str,
        reported_by_name: str | None,
        reason: str,
        *,
        conn: Connection | None = None,
    ) -> dict:
        """File a report against a photo.

        Raises:
            UniqueConstraintViolationError: If the user already has a pending report on this photo.
        """
        _conn = self._get_connection(conn)
        try:
            row = await _conn.fetchrow(
                f"""
                INSERT INTO public.court_photo_reports (photo_id, reported_by, reported_by_name, reason)
                VALUES ($1, $2, $3, $4)
                RETURNING {PHOTO_REPORT_COLUMNS}
                """,
                photo_id,
                reported_by,
                reported_by_name,
                reason,
            )
        except asyncpg.UniqueViolationError as e:
            raise translate_integrity_error(e, "public.court_photo_reports") from e
        return dict(row)

    async def fetch_reported_photos(self, *, conn: Connection | None = None) -> list[dict]:
        """Fetch photos with at least one pending report, with the court name."""
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            """
            SELECT
                p.id, p.court_id, p.photo_url, p.caption, p.uploaded_by, p.uploaded_by_name, p.created_at,
                c.name AS court_name
            FROM public.court_photos p
            JOIN public.courts c ON c.id = p.court_id
            WHERE NOT p.is_deleted
              AND EXISTS (
                  SELECT 1 FROM public.court_photo_reports pr
                  WHERE pr.photo_id = p.id AND pr.status = 'pending'
              )
            ORDER BY p.created_at DESC
            """
        )
        return [dict(row) for row in rows]

    async def fetch_pending_reports(
        self,
        photo_ids: list[UUID],
        *,
        conn: Connection | None = None,
    ) -> list[dict]:
        _conn = self._get_connection(conn)
        if not photo_ids:
            return []
        rows = await _conn.fetch(
            f"""
            SELECT {PHOTO_REPORT_COLUMNS}
            FROM public.court_photo_reports
            WHERE photo_id = ANY($1::uuid[]) AND status = 'pending'
            ORDER BY created_at
            """,
            photo_ids,
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
        query = f"SELECT {PHOTO_REPORT_COLUMNS} FROM public.court_photo_reports WHERE id = $1"
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
            UPDATE public.court_photo_reports
            SET status = $2, resolved_by = $3, resolution_note = $4, resolved_at = now()
            WHERE id = $1
            """,
            report_id,
            status,
            resolved_by,
            resolution_note,
        )

    async def resolve_pending_reports_for_photo(
        self,
        photo_id: UUID,
        resolved_by: str,
        resolution_note: str | None,
        *,
        conn: Connection | None = None,
    ) -> int:
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            """
            UPDATE public.court_photo_reports
            SET status = 'resolved', resolved_by = $2, resolution_note = $3, resolved_at = now()
            WHERE photo_id = $1 AND status = 'pending'
            RETURNING id
            """,
            photo_id,
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
        """Dismiss every pending photo report. Returns the number dismissed."""
        _conn = self._get_connection(conn)
        rows = await _conn.fetch(
            """
            UPDATE public.court_photo_reports
            SET status = 'dismissed', resolved_by = $1, resolution_note = $2, resolved_at = now()
            WHERE status = 'pending'
            RETURNING id
            """,
            resolved_by,
            resolution_note,
        )
        return len(rows)


async def provide_photos_repository(state: State) -> PhotosRepository:
    """Litestar DI provider for repository."""
    return PhotosRepository(state.db_pool)
