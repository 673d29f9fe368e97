"""Service for court reviews and reports against them."""

from __future__ import annotations

import asyncio
import logging
from uuid import UUID

from asyncpg import Pool
from courtfinder_sdk.courts import CourtResponse
from courtfinder_sdk.moderation import (
    MAX_PHOTOS_PER_REVIEW,
    MAX_REPORT_REASON_LENGTH,
    MAX_REVIEW_TEXT_LENGTH,
    ReportCreateRequest,
    ReviewCreateRequest,
    ReviewReportResponse,
    ReviewResponse,
    ReviewUpdateRequest,
)
from litestar.datastructures import State

from middleware.auth import AuthUser
from repository.exceptions import ForeignKeyViolationError, UniqueConstraintViolationError
from repository.reviews_repository import ReviewsRepository
from services.bans_service import BansService
from services.exceptions.courts import CourtNotFoundError
from services.exceptions.moderation import (
    AlreadyReportedError,
    ModerationValidationError,
    NotContentOwnerError,
    ReviewNotFoundError,
)
from services.photo_storage_service import PhotoStorageService
from utilities.court_cache import CourtListCache

from .base import BaseService

log = logging.getLogger(__name__)


def clean_report_reason(reason: str) -> str:
    reason = (reason or "").strip()
    if not reason:
        raise ModerationValidationError("A reason for the report is required.", field="reason")
    if len(reason) > MAX_REPORT_REASON_LENGTH:
        raise ModerationValidationError(
            f"Reason must be {MAX_REPORT_REASON_LENGTH} characters or fewer.",
            field="reason",
        )
    return reason


def _clean_review(data: ReviewCreateRequest) -> tuple[int, str | None, list[str]]:
    if not 1 <= data.rating <= 5:  # noqa: PLR2004
        raise ModerationValidationError("Rating must be between 1 and 5.", field="rating")
    text = (data.text or "").strip() or None
    if text is not None and len(text) > MAX_REVIEW_TEXT_LENGTH:
        raise ModerationValidationError(
            f"Review text must be {MAX_REVIEW_TEXT_LENGTH} characters or fewer.",
            field="text",
        )
    photos = [url for url in data.photos if url]
    if len(photos) > MAX_PHOTOS_PER_REVIEW:
        raise ModerationValidationError(f"A review can have at most {MAX_PHOTOS_PER_REVIEW} photos.", field="photos")
    return data.rating, text, photos


class ReviewsService(BaseService):
    """Service for reviews business logic."""

    def __init__(
        self,
        pool: Pool,
        state: State,
        reviews_repo: ReviewsRepository,
        bans_service: BansService,
        court_cache: CourtListCache[CourtResponse],
    ) -> None:
        super().__init__(pool, state)
        self._reviews_repo = reviews_repo
        self._bans_service = bans_service
        self._court_cache = court_cache

    async def list_reviews(self, court_id: UUID) -> list[ReviewResponse]:
        rows = await self._reviews_repo.fetch_reviews(court_id)
        return [ReviewResponse(**row) for row in rows]

    async def create_review(self, court_id: UUID, user: AuthUser, data: ReviewCreateRequest) -> ReviewResponse:
        """Review a court.

        Raises:
            UserBannedError: If the user is banned from reviews.
            ModerationValidationError: If the rating, text or photos are invalid.
            CourtNotFoundError: If the court does not exist.
        """
        await self._bans_service.ensure_not_banned(user.id, "reviews")
        rating, text, photos = _clean_review(data)
        try:
            row = await self._reviews_repo.create_review(court_id, user.id, user.username, rating, text, photos)
        except ForeignKeyViolationError as e:
            raise CourtNotFoundError(court_id) from e
        self._court_cache.invalidate()
        return ReviewResponse(**row)

    async def update_review(
        self,
        court_id: UUID,
        review_id: UUID,
        user: AuthUser,
        data: ReviewUpdateRequest,
    ) -> ReviewResponse:
        await self._get_own_review(court_id, review_id, user)
        rating, text, photos = _clean_review(data)
        row = await self._reviews_repo.update_review(review_id, rating, text, photos)
        self._court_cache.invalidate()
        return ReviewResponse(**row)

    async def delete_review(
        self,
        court_id: UUID,
        review_id: UUID,
        user: AuthUser,
        photo_storage: PhotoStorageService,
    ) -> None:
        """Delete the caller's review; its attached photos are removed from storage best effort."""
        review = await self._get_own_review(court_id, review_id, user)
        await self._reviews_repo.delete_review(review_id)
        self._court_cache.invalidate()
        if review["photos"]:
            await asyncio.to_thread(photo_storage.delete_photos, review["photos"])

    async def _get_own_review(self, court_id: UUID, review_id: UUID, user: AuthUser) -> dict:
        review = await self._reviews_repo.fetch_review(review_id)
        if review is None or review["court_id"] != court_id:
            raise ReviewNotFoundError(review_id)
        if review["user_id"] != user.id:
            raise NotContentOwnerError("reviews")
        return review

    async def report_review(
        self,
        court_id: UUID,
        review_id: UUID,
        user: AuthUser,
        data: ReportCreateRequest,
    ) -> ReviewReportResponse:
        """Report a review for moderation. Each user may report a review once.

        Raises:
            ModerationValidationError: If the reason is blank or too long.
            ReviewNotFoundError: If the review does not exist.
            AlreadyReportedError: If the user already reported this review.
        """
        reason = clean_report_reason(data.reason)
        review = await self._reviews_repo.fetch_review(review_id)
        if review is None or review["court_id"] != court_id:
            raise ReviewNotFoundError(review_id)
        try:
            row = await self._reviews_repo.create_report(review_id, user.id, user.username, reason)
        except UniqueConstraintViolationError as e:
            raise AlreadyReportedError("review") from e
        log.info("User %s reported review %s", user.id, review_id)
        return ReviewReportResponse(**row)


async def provide_reviews_service(
    state: State,
    reviews_repo: ReviewsRepository,
    bans_service: BansService,
) -> ReviewsService:
    """Litestar DI provider for service."""
    return ReviewsService(state.db_pool, state, reviews_repo, bans_service, state.court_cache)
