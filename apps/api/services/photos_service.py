"""Service for court photos, uploads and photo reports."""

from __future__ import annotations

import asyncio
import logging
from uuid import UUID

from asyncpg import Pool
from botocore.exceptions import BotoCoreError, ClientError
from courtfinder_sdk.moderation import (
    CourtPhotoCreateRequest,
    CourtPhotoResponse,
    CourtPhotoUpdateRequest,
    PhotoReportResponse,
    ReportCreateRequest,
    UploadResponse,
)
from litestar.datastructures import State

from middleware.auth import AuthUser
from repository.exceptions import ForeignKeyViolationError, UniqueConstraintViolationError
from repository.photos_repository import PhotosRepository
from services.bans_service import BansService
from services.exceptions.courts import CourtNotFoundError
from services.exceptions.moderation import (
    AlreadyReportedError,
    ModerationValidationError,
    NotContentOwnerError,
    PhotoNotFoundError,
    PhotoStorageError,
)
from services.photo_storage_service import ALLOWED_CONTENT_TYPES, MAX_UPLOAD_BYTES, PhotoStorageService
from services.reviews_service import clean_report_reason

from .base import BaseService

log = logging.getLogger(__name__)

MAX_CAPTION_LENGTH = 500


def _clean_caption(caption: str | None) -> str | None:
    caption = (caption or "").strip() or None
    if caption is not None and len(caption) > MAX_CAPTION_LENGTH:
        raise ModerationValidationError(f"Caption must be {MAX_CAPTION_LENGTH} characters or fewer.", field="caption")
    return caption


class PhotosService(BaseService):
    """Service for court photos."""

    def __init__(
        self,
        pool: Pool,
        state: State,
        photos_repo: PhotosRepository,
        bans_service: BansService,
    ) -> None:
        super().__init__(pool, state)
        self._photos_repo = photos_repo
        self._bans_service = bans_service

    async def upload(
        self,
        user: AuthUser,
        content: bytes,
        content_type: str,
        photo_storage: PhotoStorageService,
    ) -> UploadResponse:
        """Store an image and return its public URL.

        Raises:
            UserBannedError: If the user is banned from photos.
            ModerationValidationError: If the file is empty, too large or not an image.
            PhotoStorageError: If object storage rejects the upload.
        """
        await self._bans_service.ensure_not_banned(user.id, "photos")
        if content_type.lower() not in ALLOWED_CONTENT_TYPES:
            raise ModerationValidationError("Only image uploads are allowed.", field="file")
        if not content:
            raise ModerationValidationError("Uploaded file is empty.", field="file")
        if len(content) > MAX_UPLOAD_BYTES:
            raise ModerationValidationError(
                f"Uploaded file must be {MAX_UPLOAD_BYTES // (1024 * 1024)} MB or smaller.",
                field="file",
            )
        try:
            url = await asyncio.to_thread(photo_storage.upload_photo, content, content_type.lower())
        except (BotoCoreError, ClientError) as e:
            log.exception("Photo upload by %s failed", user.id)
            raise PhotoStorageError() from e
        return UploadResponse(url=url)

    async def list_photos(self, court_id: UUID) -> list[CourtPhotoResponse]:
        rows = await self._photos_repo.fetch_photos(court_id)
        return [CourtPhotoResponse(**row) for row in rows]

    async def add_photo(self, court_id: UUID, user: AuthUser, data: CourtPhotoCreateRequest) -> CourtPhotoResponse:
        await self._bans_service.ensure_not_banned(user.id, "photos")
        photo_url = (data.photo_url or "").strip()
        if not photo_url:
            raise ModerationValidationError("Photo URL is required.", field="photoUrl")
        try:
            row = await self._photos_repo.create_photo(
                court_id,
                photo_url,
                _clean_caption(data.caption),
                user.id,
                user.username,
            )
        except ForeignKeyViolationError as e:
            raise CourtNotFoundError(court_id) from e
        return CourtPhotoResponse(**row)

    async def update_photo(
        self,
        court_id: UUID,
        photo_id: UUID,
        user: AuthUser,
        is_admin: bool,
        data: CourtPhotoUpdateRequest,
    ) -> CourtPhotoResponse:
        await self._get_editable_photo(court_id, photo_id, user, is_admin)
        row = await self._photos_repo.update_caption(photo_id, _clean_caption(data.caption))
        return CourtPhotoResponse(**row)

    async def delete_photo(  # noqa: PLR0913
        self,
        court_id: UUID,
        photo_id: UUID,
        user: AuthUser,
        is_admin: bool,
        photo_storage: PhotoStorageService,
        reason: str | None = None,
    ) -> None:
        """Soft delete a photo, then remove the stored object best effort.

        Raises:
            PhotoNotFoundError: If the photo does not exist on this court.
            NotContentOwnerError: If the caller is neither the uploader nor an admin.
        """
        photo = await self._get_editable_photo(court_id, photo_id, user, is_admin)
        async with self._pool.acquire() as conn, conn.transaction():
            await self._photos_repo.soft_delete_photo(photo_id, user.id, reason, conn=conn)  # type: ignore[arg-type]
            await self._photos_repo.resolve_pending_reports_for_photo(
                photo_id,
                user.id,
                reason or "Photo deleted",
                conn=conn,  # type: ignore[arg-type]
            )
        await asyncio.to_thread(photo_storage.delete_photos, [photo["photo_url"]])

    async def _get_editable_photo(self, court_id: UUID, photo_id: UUID, user: AuthUser, is_admin: bool) -> dict:
        photo = await self._photos_repo.fetch_photo(photo_id)
        if photo is None or photo["court_id"] != court_id:
            raise PhotoNotFoundError(photo_id)
        if photo["uploaded_by"] != user.id and not is_admin:
            raise NotContentOwnerError("photos")
        return photo

    async def report_photo(
        self,
        court_id: UUID,
        photo_id: UUID,
        user: AuthUser,
        data: ReportCreateRequest,
    ) -> PhotoReportResponse:
        """Report a photo. A user may hold one pending report per photo."""
        reason = clean_report_reason(data.reason)
        photo = await self._photos_repo.fetch_photo(photo_id)
        if photo is None or photo["court_id"] != court_id:
            raise PhotoNotFoundError(photo_id)
        try:
            row = await self._photos_repo.create_report(photo_id, user.id, user.username, reason)
        except UniqueConstraintViolationError as e:
            raise AlreadyReportedError("photo") from e
        log.info("User %s reported photo %s", user.id, photo_id)
        return PhotoReportResponse(**row)


async def provide_photos_service(
    state: State,
    photos_repo: PhotosRepository,
    bans_service: BansService,
) -> PhotosService:
    """Litestar DI provider for service."""
    return PhotosService(state.db_pool, state, photos_repo, bans_service)
