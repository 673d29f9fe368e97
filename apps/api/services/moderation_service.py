"""Service for the admin moderation dashboards."""

from __future__ import annotations

import asyncio
import logging
from uuid import UUID

from asyncpg import Pool
from courtfinder_sdk.courts import CourtResponse
from courtfinder_sdk.moderation import (
    ClearReportsResponse,
    CourtPhotoResponse,
    ModerationActionResponse,
    PhotoReportActionRequest,
    PhotoReportResponse,
    ReportedPhotoResponse,
    ReviewReportActionRequest,
    ReviewReportResponse,
)
from litestar.datastructures import State

from middleware.auth import AuthUser
from repository.photos_repository import PhotosRepository
from repository.reviews_repository import ReviewsRepository
from services.exceptions.moderation import (
    ModerationValidationError,
    PhotoNotFoundError,
    ReportAlreadyResolvedError,
    ReportNotFoundError,
    ReviewPhotoNotFoundError,
)
from services.photo_storage_service import PhotoStorageService
from utilities.court_cache import CourtListCache

from .base import BaseService

log = logging.getLogger(__name__)

REVIEW_REPORT_ACTIONS = ("dismiss", "delete_review", "delete_photo")
PHOTO_REPORT_ACTIONS = ("dismiss_report", "delete_photo")
CLEAR_REPORTS_NOTE = "Bulk cleared by admin"


class ModerationService(BaseService):
    """Service for moderating reported reviews and photos."""

    def __init__(  # noqa: PLR0913
        self,
        pool: Pool,
        state: State,
        reviews_repo: ReviewsRepository,
        photos_repo: PhotosRepository,
        court_cache: CourtListCache[CourtResponse],
    ) -> None:
        super().__init__(pool, state)
        self._reviews_repo = reviews_repo
        self._photos_repo = photos_repo
        self._court_cache = court_cache

    # Review reports

    async def list_review_reports(self) -> list[ReviewReportResponse]:
        rows = await self._reviews_repo.fetch_pending_reports()
        return [ReviewReportResponse(**row) for row in rows]

    async def act_on_review_report(
        self,
        admin: AuthUser,
        data: ReviewReportActionRequest,
        photo_storage: PhotoStorageService,
    ) -> ModerationActionResponse:
        """Dismiss a review report, delete the reported review, or strip one of its photos.

        Deleting the review resolves every pending report filed against it. Deleting a
        photo resolves only this report, keeps the review and removes the stored object
        best effort.

        Raises:
            ModerationValidationError: If the action is unknown, or ``delete_photo`` has no photo URL.
            ReportNotFoundError: If the report does not exist.
            ReportAlreadyResolvedError: If the report is no longer pending.
            ReviewPhotoNotFoundError: If the reported review does not carry the photo.
        """
        if data.action not in REVIEW_REPORT_ACTIONS:
            raise ModerationValidationError(
                f"Action must be one of: {', '.join(REVIEW_REPORT_ACTIONS)}.",
                field="action",
            )
        photo_url = (data.photo_url or "").strip()
        if data.action == "delete_photo" and not photo_url:
            raise ModerationValidationError("photoUrl is required to delete a review photo.", field="photoUrl")
        note = (data.resolution_note or "").strip() or None

        async with self._pool.acquire() as conn, conn.transaction():
            report = await self._reviews_repo.fetch_report(data.report_id, for_update=True, conn=conn)  # type: ignore[arg-type]
            if report is None:
                raise ReportNotFoundError(data.report_id)
            if report["status"] != "pending":
                raise ReportAlreadyResolvedError(data.report_id, report["status"])

            if data.action == "dismiss":
                await self._reviews_repo.resolve_report(data.report_id, "dismissed", admin.id, note, conn=conn)  # type: ignore[arg-type]
            elif data.action == "delete_photo":
                review = await self._reviews_repo.remove_review_photo(report["review_id"], photo_url, conn=conn)  # type: ignore[arg-type]
                if review is None:
                    raise ReviewPhotoNotFoundError(report["review_id"], photo_url)
                await self._reviews_repo.resolve_report(data.report_id, "resolved", admin.id, note, conn=conn)  # type: ignore[arg-type]
            else:
                await self._reviews_repo.soft_delete_review(report["review_id"], admin.id, note, conn=conn)  # type: ignore[arg-type]
                await self._reviews_repo.resolve_pending_reports_for_review(
                    report["review_id"],
                    admin.id,
                    note,
                    conn=conn,  # type: ignore[arg-type]
                )

        if data.action == "dismiss":
            log.info("Admin %s dismissed review report %s", admin.id, data.report_id)
            return ModerationActionResponse(success=True, message="Report dismissed.")

        if data.action == "delete_photo":
            log.info("Admin %s removed a photo from review %s (report %s)", admin.id, report["review_id"], data.report_id)
            await asyncio.to_thread(photo_storage.delete_photos, [photo_url])
            return ModerationActionResponse(success=True, message="Review photo deleted.")

        self._court_cache.invalidate()
        log.info("Admin %s deleted review %s (report %s)", admin.id, report["review_id"], data.report_id)
        return ModerationActionResponse(success=True, message="Review deleted.")

    # Photo reports

    async def list_reported_photos(self) -> list[ReportedPhotoResponse]:
        """Photos with pending reports, each with the reports filed against it."""
        photos = await self._photos_repo.fetch_reported_photos()
        reports = await self._photos_repo.fetch_pending_reports([photo["id"] for photo in photos])
        by_photo: dict[UUID, list[PhotoReportResponse]] = {}
        for report in reports:
            by_photo.setdefault(report["photo_id"], []).append(PhotoReportResponse(**report))

        result = []
        for photo in photos:
            court_name = photo.pop("court_name")
            result.append(
                ReportedPhotoResponse(
                    photo=CourtPhotoResponse(**photo),
                    court_name=court_name,
                    reports=by_photo.get(photo["id"], []),
                )
            )
        return result

    async def act_on_photo(
        self,
        admin: AuthUser,
        data: PhotoReportActionRequest,
        photo_storage: PhotoStorageService,
    ) -> ModerationActionResponse:
        """Dismiss a photo report, or delete the photo.

        Dismissing leaves the photo untouched. Deleting soft deletes the photo, resolves
        its pending reports and then removes the stored object best effort.

        Raises:
            ModerationValidationError: If the action is unknown or its target id is missing.
            ReportNotFoundError: If the report to dismiss does not exist.
            ReportAlreadyResolvedError: If the report is no longer pending.
            PhotoNotFoundError: If the photo to delete does not exist.
        """
        if data.action not in PHOTO_REPORT_ACTIONS:
            raise ModerationValidationError(
                f"Action must be one of: {', '.join(PHOTO_REPORT_ACTIONS)}.",
                field="action",
            )
        reason = (data.reason or "").strip() or None

        if data.action == "dismiss_report":
            if data.report_id is None:
                raise ModerationValidationError("reportId is required to dismiss a report.", field="reportId")
            async with self._pool.acquire() as conn, conn.transaction():
                report = await self._photos_repo.fetch_report(data.report_id, for_update=True, conn=conn)  # type: ignore[arg-type]
                if report is None:
                    raise ReportNotFoundError(data.report_id)
                if report["status"] != "pending":
                    raise ReportAlreadyResolvedError(data.report_id, report["status"])
                await self._photos_repo.resolve_report(data.report_id, "dismissed", admin.id, reason, conn=conn)  # type: ignore[arg-type]
            log.info("Admin %s dismissed photo report %s", admin.id, data.report_id)
            return ModerationActionResponse(success=True, message="Report dismissed.")

        if data.photo_id is None:
            raise ModerationValidationError("photoId is required to delete a photo.", field="photoId")
        photo = await self._photos_repo.fetch_photo(data.photo_id)
        if photo is None:
            raise PhotoNotFoundError(data.photo_id)
        async with self._pool.acquire() as conn, conn.transaction():
            await self._photos_repo.soft_delete_photo(data.photo_id, admin.id, reason, conn=conn)  # type: ignore[arg-type]
            resolved = await self._photos_repo.resolve_pending_reports_for_photo(
                data.photo_id,
                admin.id,
                reason,
                conn=conn,  # type: ignore[arg-type]
            )
        log.info("Admin %s deleted photo %s, resolving %d report(s)", admin.id, data.photo_id, resolved)
        await asyncio.to_thread(photo_storage.delete_photos, [photo["photo_url"]])
        return ModerationActionResponse(success=True, message="Photo deleted.")

    # Bulk

    async def clear_reports(self, admin: AuthUser) -> ClearReportsResponse:
        """Dismiss every pending review and photo report."""
        async with self._pool.acquire() as conn, conn.transaction():
            review_reports = await self._reviews_repo.dismiss_all_pending_reports(
                admin.id,
                CLEAR_REPORTS_NOTE,
                conn=conn,  # type: ignore[arg-type]
            )
            photo_reports = await self._photos_repo.dismiss_all_pending_reports(
                admin.id,
                CLEAR_REPORTS_NOTE,
                conn=conn,  # type: ignore[arg-type]
            )
        log.warning(
            "Admin %s cleared %d review report(s) and %d photo report(s)",
            admin.id,
            review_reports,
            photo_reports,
        )
        return ClearReportsResponse(review_reports=review_reports, photo_reports=photo_reports)


async def provide_moderation_service(
    state: State,
    reviews_repo: ReviewsRepository,
    photos_repo: PhotosRepository,
) -> ModerationService:
    """Litestar DI provider for service."""
    return ModerationService(state.db_pool, state, reviews_repo, photos_repo, state.court_cache)
