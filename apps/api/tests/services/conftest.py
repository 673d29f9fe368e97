"""Shared fixtures for service unit tests.

This module provides mock fixtures for repositories, pools, and state objects
used across service unit tests, plus row factories shaped like the rows the
repositories return.
"""

import datetime as dt
from typing import Any
from uuid import UUID, uuid4

import pytest
from asyncpg import Pool
from courtfinder_sdk.suggestions import SUGGESTION_FIELDS
from faker import Faker
from litestar.datastructures import Headers, State

from middleware.auth import AuthUser
from repository.bans_repository import BansRepository
from repository.court_suggestions_repository import CourtSuggestionsRepository
from repository.courts_repository import CourtsRepository
from repository.edit_suggestions_repository import EditSuggestionsRepository
from repository.photos_repository import PhotosRepository
from repository.reviews_repository import ReviewsRepository
from services.bans_service import BansService
from services.photo_storage_service import PhotoStorageService
from utilities.court_cache import CourtListCache

fake = Faker()

NOW = dt.datetime(2025, 6, 1, 12, 0, tzinfo=dt.timezone.utc)


@pytest.fixture
def mock_pool(mocker):
    """Mock AsyncPG connection pool.

    Returns:
        MagicMock pool with acquire() and transaction() context managers configured.
    """
    pool = mocker.MagicMock(spec=Pool)
    conn = mocker.MagicMock()

    async def mock_acquire_aenter(self):
        return conn

    async def mock_acquire_aexit(self, exc_type, exc_val, exc_tb):
        return None

    acquire_cm = mocker.MagicMock()
    acquire_cm.__aenter__ = mock_acquire_aenter
    acquire_cm.__aexit__ = mock_acquire_aexit
    pool.acquire.return_value = acquire_cm

    async def mock_transaction_aenter(self):
        return None

    async def mock_transaction_aexit(self, exc_type, exc_val, exc_tb):
        return None

    transaction_cm = mocker.MagicMock()
    transaction_cm.__aenter__ = mock_transaction_aenter
    transaction_cm.__aexit__ = mock_transaction_aexit
    conn.transaction.return_value = transaction_cm

    return pool


@pytest.fixture
def mock_state(mocker):
    """Mock Litestar State.

    Returns:
        Mock State with mq_channel_pool configured for BaseService.publish_message.
    """
    state = mocker.Mock(spec=State)
    state.mq_channel_pool = mocker.AsyncMock()
    return state


@pytest.fixture
def test_headers():
    """Request headers that skip event publishing."""
    return Headers({"x-pytest-enabled": "1"})


@pytest.fixture
def court_cache(mocker):
    """Court list cache with a spied ``invalidate``."""
    cache = CourtListCache(ttl=60)
    mocker.spy(cache, "invalidate")
    return cache


# Users


@pytest.fixture
def alice():
    return AuthUser(id="user_alice", username="Alice", email="alice@example.com")


@pytest.fixture
def bob():
    return AuthUser(id="user_bob", username="Bob", email="bob@example.com")


@pytest.fixture
def admin():
    return AuthUser(id="user_admin", username="Admin", email="admin@example.com")


# Repository Fixtures


@pytest.fixture
def mock_courts_repo(mocker):
    """Mock CourtsRepository."""
    return mocker.AsyncMock(spec=CourtsRepository)


@pytest.fixture
def mock_edit_suggestions_repo(mocker):
    """Mock EditSuggestionsRepository."""
    return mocker.AsyncMock(spec=EditSuggestionsRepository)


@pytest.fixture
def mock_court_suggestions_repo(mocker):
    """Mock CourtSuggestionsRepository."""
    return mocker.AsyncMock(spec=CourtSuggestionsRepository)


@pytest.fixture
def mock_reviews_repo(mocker):
    """Mock ReviewsRepository."""
    return mocker.AsyncMock(spec=ReviewsRepository)


@pytest.fixture
def mock_photos_repo(mocker):
    """Mock PhotosRepository."""
    return mocker.AsyncMock(spec=PhotosRepository)


@pytest.fixture
def mock_bans_repo(mocker):
    """Mock BansRepository. Nobody is banned unless a test says so."""
    repo = mocker.AsyncMock(spec=BansRepository)
    repo.fetch_active_bans.return_value = []
    return repo


@pytest.fixture
def mock_bans_service(mocker):
    """Mock BansService that lets every submission through."""
    return mocker.AsyncMock(spec=BansService)


@pytest.fixture
def mock_photo_storage(mocker):
    """Mock PhotoStorageService."""
    storage = mocker.Mock(spec=PhotoStorageService)
    storage.delete_photos.return_value = 1
    storage.upload_photo.return_value = "https://cdn.example.com/court-photos/2025/06/01/abc.png"
    return storage


# Row factories


def make_court_row(court_id: UUID | None = None, **overrides: Any) -> dict[str, Any]:
    """A ``courts`` row as returned by CourtsRepository."""
    row = {
        "id": court_id or uuid4(),
        "name": "Riverside Park Courts",
        "address": "100 Riverside Dr",
        "city": "Springfield",
        "state": "IL",
        "zip": "62701",
        "latitude": 39.78,
        "longitude": -89.65,
        "court_type": "Outdoor",
        "number_of_courts": 6,
        "surface": "Hard",
        "court_condition": "Good",
        "hitting_wall": True,
        "lighted": True,
        "is_public": True,
        "membership_required": False,
        "parking": True,
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


def make_suggestion_row(
    court_id: UUID,
    suggestion_id: UUID | None = None,
    *,
    suggested_by: str = "user_alice",
    status: str = "pending",
    **suggested: Any,
) -> dict[str, Any]:
    """A ``court_edit_suggestions`` row. Keyword arguments set ``suggested_*`` columns."""
    row = {
        "id": suggestion_id or uuid4(),
        "court_id": court_id,
        "suggested_by": suggested_by,
        "suggested_by_name": "Alice",
        "reason": fake.sentence(),
        "status": status,
        "review_note": None,
        "reviewed_by": None,
        "reviewed_by_name": None,
        "reviewed_at": None,
        "created_at": NOW,
        "updated_at": NOW,
        "court_name": "Riverside Park Courts",
    }
    for spec in SUGGESTION_FIELDS.values():
        row[spec.suggestion_column] = None
    row.update(suggested)
    return row


def make_field_review_row(suggestion_id: UUID, field: str, status: str, reviewed_by: str = "user_bob") -> dict:
    return {
        "suggestion_id": suggestion_id,
        "field": field,
        "status": status,
        "reviewed_by": reviewed_by,
        "reviewed_by_name": "Bob",
        "review_note": None,
        "reviewed_at": NOW,
    }


def make_ban_row(user_id: str = "user_alice", ban_type: str = "full", **overrides: Any) -> dict[str, Any]:
    row = {
        "id": uuid4(),
        "user_id": user_id,
        "user_name": "Alice",
        "user_email": None,
        "banned_by": "user_admin",
        "banned_by_user_name": "Admin",
        "ban_reason": "Spam",
        "ban_type": ban_type,
        "is_active": True,
        "expires_at": None,
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


def make_review_row(court_id: UUID, review_id: UUID | None = None, **overrides: Any) -> dict[str, Any]:
    row = {
        "id": review_id or uuid4(),
        "court_id": court_id,
        "user_id": "user_alice",
        "user_name": "Alice",
        "rating": 4,
        "text": "Nice courts",
        "photos": [],
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


def make_report_row(report_id: UUID | None = None, **overrides: Any) -> dict[str, Any]:
    row = {
        "id": report_id or uuid4(),
        "review_id": uuid4(),
        "reported_by": "user_bob",
        "reported_by_name": "Bob",
        "reason": "Offensive",
        "status": "pending",
        "resolved_by": None,
        "resolution_note": None,
        "resolved_at": None,
        "created_at": NOW,
    }
    row.update(overrides)
    return row


def make_photo_row(court_id: UUID, photo_id: UUID | None = None, **overrides: Any) -> dict[str, Any]:
    row = {
        "id": photo_id or uuid4(),
        "court_id": court_id,
        "photo_url": "https://cdn.example.com/court-photos/2025/06/01/abc.png",
        "caption": None,
        "uploaded_by": "user_alice",
        "uploaded_by_name": "Alice",
        "created_at": NOW,
    }
    row.update(overrides)
    return row


@pytest.fixture
def court_row():
    """Factory for ``courts`` rows."""
    return make_court_row


@pytest.fixture
def suggestion_row():
    """Factory for ``court_edit_suggestions`` rows."""
    return make_suggestion_row


@pytest.fixture
def field_review_row():
    """Factory for ``court_edit_suggestion_field_reviews`` rows."""
    return make_field_review_row


@pytest.fixture
def ban_row():
    """Factory for ``user_bans`` rows."""
    return make_ban_row


@pytest.fixture
def review_row():
    """Factory for ``reviews`` rows."""
    return make_review_row


@pytest.fixture
def report_row():
    """Factory for ``review_reports`` rows."""
    return make_report_row


@pytest.fixture
def photo_row():
    """Factory for ``court_photos`` rows."""
    return make_photo_row
