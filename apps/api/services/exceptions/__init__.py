"""Service-layer domain exceptions."""

from .bans import (  # noqa: I001
    BanNotFoundError,
    BansError,
    BanValidationError,
    UserBannedError,
)
from .courts import (
    CourtNotFoundError,
    CourtsError,
    CourtSuggestionAlreadyReviewedError,
    CourtSuggestionNotFoundError,
    CourtValidationError,
    DuplicateCourtAddressError,
)
from .moderation import (
    AlreadyReportedError,
    ModerationError,
    ModerationValidationError,
    NotContentOwnerError,
    PhotoNotFoundError,
    PhotoStorageError,
    ReportAlreadyResolvedError,
    ReportNotFoundError,
    ReviewNotFoundError,
    ReviewPhotoNotFoundError,
)
from .suggestions import (
    DuplicatePendingSuggestionError,
    FieldAlreadyReviewedError,
    FieldNotProposedError,
    NoProposedChangesError,
    NotSuggestionAuthorError,
    SelfReviewError,
    SuggestionNotFoundError,
    SuggestionNotPendingError,
    SuggestionPartiallyReviewedError,
    SuggestionsError,
    SuggestionValidationError,
)

__all__ = [
    "AlreadyReportedError",
    "BanNotFoundError",
    "BanValidationError",
    "BansError",
    "CourtNotFoundError",
    "CourtSuggestionAlreadyReviewedError",
    "CourtSuggestionNotFoundError",
    "CourtValidationError",
    "CourtsError",
    "DuplicateCourtAddressError",
    "DuplicatePendingSuggestionError",
    "FieldAlreadyReviewedError",
    "FieldNotProposedError",
    "ModerationError",
    "ModerationValidationError",
    "NoProposedChangesError",
    "NotContentOwnerError",
    "NotSuggestionAuthorError",
    "PhotoNotFoundError",
    "PhotoStorageError",
    "ReportAlreadyResolvedError",
    "ReportNotFoundError",
    "ReviewNotFoundError",
    "ReviewPhotoNotFoundError",
    "SelfReviewError",
    "SuggestionNotFoundError",
    "SuggestionNotPendingError",
    "SuggestionPartiallyReviewedError",
    "SuggestionValidationError",
    "SuggestionsError",
    "UserBannedError",
]
