"""Reviews, court photos, reports and admin moderation actions."""

from __future__ import annotations

import datetime as dt
from typing import Literal
from uuid import UUID

from msgspec import Struct

__all__ = (
    "MAX_PHOTOS_PER_REVIEW",
    "MAX_REPORT_REASON_LENGTH",
    "MAX_REVIEW_TEXT_LENGTH",
    "ClearReportsResponse",
    "CourtPhotoCreateRequest",
    "CourtPhotoResponse",
    "CourtPhotoUpdateRequest",
    "ModerationActionResponse",
    "PhotoReportActionRequest",
    "PhotoReportResponse",
    "ReportCreateRequest",
    "ReportStatus",
    "ReportedPhotoResponse",
    "ReviewCreateRequest",
    "ReviewReportActionRequest",
    "ReviewReportResponse",
    "ReviewResponse",
    "ReviewUpdateRequest",
    "UploadResponse",
)

MAX_REVIEW_TEXT_LENGTH = 2000
MAX_REPORT_REASON_LENGTH = 500
MAX_PHOTOS_PER_REVIEW = 5

ReportStatus = Literal["pending", "resolved", "dismissed"]


class ReviewCreateRequest(Struct, rename="camel"):
    """Payload for reviewing a court."""

    rating: int
    text: str | None = None
    photos: list[str] = []


class ReviewUpdateRequest(ReviewCreateRequest):
    """Payload for the author editing their review."""


class ReviewResponse(Struct, rename="camel"):
    """A court review."""

    id: UUID
    court_id: UUID
    user_id: str
    user_name: str | None
    rating: int
    text: str | None
    photos: list[str]
    created_at: dt.datetime
    updated_at: dt.datetime


class ReportCreateRequest(Struct, rename="camel"):
    """Payload for reporting a review or a photo."""

    reason: str


class ReviewReportResponse(Struct, rename="camel"):
    """A report filed against a review, enriched with the review it targets."""

    id: UUID
    review_id: UUID
    reported_by: str
    reported_by_name: str | None
    reason: str
    status: ReportStatus
    resolved_by: str | None
    resolution_note: str | None
    resolved_at: dt.datetime | None
    created_at: dt.datetime
    review_text: str | None = None
    review_rating: int | None = None
    review_user_id: str | None = None
    review_user_name: str | None = None
    review_photos: list[str] = []
    court_id: UUID | None = None
    court_name: str | None = None


class CourtPhotoCreateRequest(Struct, rename="camel"):
    """Payload for attaching an uploaded photo to a court."""

    photo_url: str
    caption: str | None = None


class CourtPhotoUpdateRequest(Struct, rename="camel"):
    """Payload for editing a photo caption."""

    caption: str | None = None


class CourtPhotoResponse(Struct, rename="camel"):
    """A photo attached to a court."""

    id: UUID
    court_id: UUID
    photo_url: str
    caption: str | None
    uploaded_by: str
    uploaded_by_name: str | None
    created_at: dt.datetime


class PhotoReportResponse(Struct, rename="camel"):
    """A report filed against a court photo."""

    id: UUID
    photo_id: UUID
    reported_by: str
    reported_by_name: str | None
    reason: str
    status: ReportStatus
    resolved_by: str | None
    resolution_note: str | None
    resolved_at: dt.datetime | None
    created_at: dt.datetime


class ReportedPhotoResponse(Struct, rename="camel"):
    """A reported photo with its pending reports, as listed for moderators."""

    photo: CourtPhotoResponse
    court_name: str | None
    reports: list[PhotoReportResponse]


class ReviewReportActionRequest(Struct, rename="camel"):
    """Admin action on a review report: ``dismiss``, ``delete_review`` or ``delete_photo``.

    ``delete_photo`` removes ``photo_url`` from the reported review and keeps the review.
    """

    report_id: UUID
    action: str
    resolution_note: str | None = None
    photo_url: str | None = None


class PhotoReportActionRequest(Struct, rename="camel"):
    """Admin action on a photo: ``dismiss_report`` or ``delete_photo``.

    Attributes:
        action: Action to take.
        photo_id: Photo to delete. Required for ``delete_photo``.
        report_id: Report to dismiss. Required for ``dismiss_report``.
        reason: Optional resolution note.
    """

    action: str
    photo_id: UUID | None = None
    report_id: UUID | None = None
    reason: str | None = None


class ModerationActionResponse(Struct, rename="camel"):
    """Outcome of a moderation action."""

    success: bool
    message: str


class ClearReportsResponse(Struct, rename="camel"):
    """Counts of reports dismissed by a bulk clear."""

    review_reports: int
    photo_reports: int


class UploadResponse(Struct, rename="camel"):
    """Public location of an uploaded file."""

    url: str
