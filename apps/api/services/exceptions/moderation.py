"""Domain exceptions for reviews, photos and reports."""

from __future__ import annotations

from uuid import UUID

from utilities.errors import DomainError


class ModerationError(DomainError):
    """Base exception for reviews, photos and their reports."""


class ModerationValidationError(ModerationError):
    def __init__(self, message: str, field: str = "unknown") -> None:
        super().__init__(message, field=field)


class ReviewNotFoundError(ModerationError):
    category = "not_found"

    def __init__(self, review_id: UUID) -> None:
        super().__init__(f"Review not found: {review_id}", review_id=review_id)


class PhotoNotFoundError(ModerationError):
    category = "not_found"

    def __init__(self, photo_id: UUID) -> None:
        super().__init__(f"Photo not found: {photo_id}", photo_id=photo_id)


class ReviewPhotoNotFoundError(ModerationError):
    category = "not_found"

    def __init__(self, review_id: UUID, photo_url: str) -> None:
        super().__init__("Photo not found on review.", review_id=review_id, photo_url=photo_url)


class ReportNotFoundError(ModerationError):
    category = "not_found"

    def __init__(self, report_id: UUID) -> None:
        super().__init__(f"Report not found: {report_id}", report_id=report_id)


class NotContentOwnerError(ModerationError):
    """Only the author (or an admin, for photos) may change this content."""

    category = "forbidden"

    def __init__(self, what: str) -> None:
        super().__init__(f"You can only modify your own {what}.")


class AlreadyReportedError(ModerationError):
    category = "conflict"

    def __init__(self, what: str) -> None:
        super().__init__(f"You have already reported this {what}.")


class ReportAlreadyResolvedError(ModerationError):
    category = "conflict"

    def __init__(self, report_id: UUID, status: str) -> None:
        super().__init__(f"Report has already been {status}.", report_id=report_id, status=status)


class PhotoStorageError(ModerationError):
    """Upload to object storage failed."""

    def __init__(self, message: str = "Failed to upload file.") -> None:
        super().__init__(message)
