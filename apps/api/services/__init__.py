"""Service layer for business logic."""

from services.bans_service import BansService, provide_bans_service
from services.court_suggestions_service import CourtSuggestionsService, provide_court_suggestions_service
from services.courts_service import CourtsService, provide_courts_service
from services.edit_suggestions_service import EditSuggestionsService, provide_edit_suggestions_service
from services.moderation_service import ModerationService, provide_moderation_service
from services.photo_storage_service import PhotoStorageService, provide_photo_storage_service
from services.photos_service import PhotosService, provide_photos_service
from services.reviews_service import ReviewsService, provide_reviews_service

__all__ = [
    "BansService",
    "CourtSuggestionsService",
    "CourtsService",
    "EditSuggestionsService",
    "ModerationService",
    "PhotoStorageService",
    "PhotosService",
    "ReviewsService",
    "provide_bans_service",
    "provide_court_suggestions_service",
    "provide_courts_service",
    "provide_edit_suggestions_service",
    "provide_moderation_service",
    "provide_photo_storage_service",
    "provide_photos_service",
    "provide_reviews_service",
]
