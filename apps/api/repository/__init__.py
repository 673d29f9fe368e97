"""Repository layer for data access."""

from repository.bans_repository import BansRepository, provide_bans_repository
from repository.court_suggestions_repository import (
    CourtSuggestionsRepository,
    provide_court_suggestions_repository,
)
from repository.courts_repository import CourtsRepository, provide_courts_repository
from repository.edit_suggestions_repository import (
    EditSuggestionsRepository,
    provide_edit_suggestions_repository,
)
from repository.photos_repository import PhotosRepository, provide_photos_repository
from repository.reviews_repository import ReviewsRepository, provide_reviews_repository

__all__ = [
    "BansRepository",
    "CourtSuggestionsRepository",
    "CourtsRepository",
    "EditSuggestionsRepository",
    "PhotosRepository",
    "ReviewsRepository",
    "provide_bans_repository",
    "provide_court_suggestions_repository",
    "provide_courts_repository",
    "provide_edit_suggestions_repository",
    "provide_photos_repository",
    "provide_reviews_repository",
]
