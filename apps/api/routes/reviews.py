"""Court review routes."""

from __future__ import annotations

from typing import Annotated, Any
from uuid import UUID

from courtfinder_sdk.moderation import (
    ReportCreateRequest,
    ReviewCreateRequest,
    ReviewReportResponse,
    ReviewResponse,
    ReviewUpdateRequest,
)
from litestar import Controller, Request, delete, get, post, put
from litestar.di import Provide
from litestar.params import Body

from middleware.auth import AuthToken, AuthUser
from repository.bans_repository import provide_bans_repository
from repository.reviews_repository import provide_reviews_repository
from services.bans_service import provide_bans_service
from services.photo_storage_service import PhotoStorageService, provide_photo_storage_service
from services.reviews_service import ReviewsService, provide_reviews_service


class ReviewsController(Controller):
    """Reviews of a court and reports against them."""

    tags = ["Reviews"]
    path = "/tennis-courts/{court_id:uuid}/reviews"
    dependencies = {
        "reviews_repo": Provide(provide_reviews_repository),
        "bans_repo": Provide(provide_bans_repository),
        "bans_service": Provide(provide_bans_service),
        "reviews_service": Provide(provide_reviews_service),
    }

    @get(
        "/",
        summary="List Reviews",
        description="List the reviews of a court, newest first. Removed reviews are not shown.",
        opt={"exclude_from_auth": True},
    )
    async def list_reviews(self, court_id: UUID, reviews_service: ReviewsService) -> list[ReviewResponse]:
        return await reviews_service.list_reviews(court_id)

    @post(
        "/",
        summary="Create Review",
        description="Rate a court from 1 to 5 with optional text and photo URLs.",
    )
    async def create_review(
        self,
        request: Request[AuthUser, AuthToken, Any],
        court_id: UUID,
        data: Annotated[ReviewCreateRequest, Body(title="Review")],
        reviews_service: ReviewsService,
    ) -> ReviewResponse:
        return await reviews_service.create_review(court_id, request.user, data)

    @put(
        "/{review_id:uuid}",
        summary="Update Review",
        description="Replace your own review.",
    )
    async def update_review(
        self,
        request: Request[AuthUser, AuthToken, Any],
        court_id: UUID,
        review_id: UUID,
        data: Annotated[ReviewUpdateRequest, Body(title="Review")],
        reviews_service: ReviewsService,
    ) -> ReviewResponse:
        return await reviews_service.update_review(court_id, review_id, request.user, data)

    @delete(
        "/{review_id:uuid}",
        summary="Delete Review",
        description="Delete your own review along with its uploaded photos.",
        dependencies={"photo_storage": Provide(provide_photo_storage_service)},
    )
    async def delete_review(
        self,
        request: Request[AuthUser, AuthToken, Any],
        court_id: UUID,
        review_id: UUID,
        reviews_service: ReviewsService,
        photo_storage: PhotoStorageService,
    ) -> None:
        await reviews_service.delete_review(court_id, review_id, request.user, photo_storage)

    @post(
        "/{review_id:uuid}/report",
        summary="Report Review",
        description="Flag a review for moderation. Each user may report a review once.",
    )
    async def report_review(
        self,
        request: Request[AuthUser, AuthToken, Any],
        court_id: UUID,
        review_id: UUID,
        data: Annotated[ReportCreateRequest, Body(title="Report")],
        reviews_service: ReviewsService,
    ) -> ReviewReportResponse:
        return await reviews_service.report_review(court_id, review_id, request.user, data)
