"""Court photo and image upload routes."""

from __future__ import annotations

from typing import Annotated, Any
from uuid import UUID

from courtfinder_sdk.moderation import (
    CourtPhotoCreateRequest,
    CourtPhotoResponse,
    CourtPhotoUpdateRequest,
    PhotoReportResponse,
    ReportCreateRequest,
    UploadResponse,
)
from litestar import Controller, Request, delete, get, post, put
from litestar.datastructures import UploadFile
from litestar.di import Provide
from litestar.enums import RequestEncodingType
from litestar.params import Body

from middleware.auth import AuthToken, AuthUser
from repository.bans_repository import provide_bans_repository
from repository.photos_repository import provide_photos_repository
from services.bans_service import provide_bans_service
from services.photo_storage_service import MAX_UPLOAD_BYTES, PhotoStorageService, provide_photo_storage_service
from services.photos_service import PhotosService, provide_photos_service

_photo_dependencies = {
    "photos_repo": Provide(provide_photos_repository),
    "bans_repo": Provide(provide_bans_repository),
    "bans_service": Provide(provide_bans_service),
    "photos_service": Provide(provide_photos_service),
}


class UploadController(Controller):
    """Image uploads to object storage."""

    tags = ["Photos"]
    path = "/upload"
    dependencies = _photo_dependencies

    @post(
        "/",
        dependencies={"photo_storage": Provide(provide_photo_storage_service)},
        summary="Upload Image",
        description="Upload an image file as multipart/form-data and get back its public URL.",
        request_max_body_size=MAX_UPLOAD_BYTES + 1024 * 1024,
    )
    async def upload_image(
        self,
        request: Request[AuthUser, AuthToken, Any],
        data: Annotated[UploadFile, Body(media_type=RequestEncodingType.MULTI_PART)],
        photos_service: PhotosService,
        photo_storage: PhotoStorageService,
    ) -> UploadResponse:
        content = await data.read()
        return await photos_service.upload(request.user, content, data.content_type, photo_storage)


class PhotosController(Controller):
    """Photos attached to a court."""

    tags = ["Photos"]
    path = "/tennis-courts/{court_id:uuid}/photos"
    dependencies = _photo_dependencies

    @get(
        "/",
        summary="List Photos",
        description="List the photos of a court. Removed photos are not shown.",
        opt={"exclude_from_auth": True},
    )
    async def list_photos(self, court_id: UUID, photos_service: PhotosService) -> list[CourtPhotoResponse]:
        return await photos_service.list_photos(court_id)

    @post(
        "/",
        summary="Add Photo",
        description="Attach a previously uploaded image to a court.",
    )
    async def add_photo(
        self,
        request: Request[AuthUser, AuthToken, Any],
        court_id: UUID,
        data: Annotated[CourtPhotoCreateRequest, Body(title="Photo")],
        photos_service: PhotosService,
    ) -> CourtPhotoResponse:
        return await photos_service.add_photo(court_id, request.user, data)

    @put(
        "/{photo_id:uuid}",
        summary="Update Photo",
        description="Change a photo caption. Allowed for the uploader and admins.",
    )
    async def update_photo(
        self,
        request: Request[AuthUser, AuthToken, Any],
        court_id: UUID,
        photo_id: UUID,
        data: Annotated[CourtPhotoUpdateRequest, Body(title="Photo")],
        photos_service: PhotosService,
    ) -> CourtPhotoResponse:
        return await photos_service.update_photo(court_id, photo_id, request.user, request.auth.is_admin, data)

    @delete(
        "/{photo_id:uuid}",
        dependencies={"photo_storage": Provide(provide_photo_storage_service)},
        summary="Delete Photo",
        description="Remove a photo. Allowed for the uploader and admins.",
    )
    async def delete_photo(  # noqa: PLR0913
        self,
        request: Request[AuthUser, AuthToken, Any],
        court_id: UUID,
        photo_id: UUID,
        photos_service: PhotosService,
        photo_storage: PhotoStorageService,
        reason: str | None = None,
    ) -> None:
        await photos_service.delete_photo(
            court_id,
            photo_id,
            request.user,
            request.auth.is_admin,
            photo_storage,
            reason=reason,
        )

    @post(
        "/{photo_id:uuid}/report",
        summary="Report Photo",
        description="Flag a photo for moderation. A user may hold one pending report per photo.",
    )
    async def report_photo(
        self,
        request: Request[AuthUser, AuthToken, Any],
        court_id: UUID,
        photo_id: UUID,
        data: Annotated[ReportCreateRequest, Body(title="Report")],
        photos_service: PhotosService,
    ) -> PhotoReportResponse:
        return await photos_service.report_photo(court_id, photo_id, request.user, data)
