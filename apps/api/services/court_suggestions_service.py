"""Service for suggestions of courts that are not in the directory yet."""

from __future__ import annotations

import logging
from uuid import UUID

from asyncpg import Pool
from courtfinder_sdk.courts import (
    CourtResponse,
    NewCourtSuggestionCreateRequest,
    NewCourtSuggestionResponse,
    NewCourtSuggestionReviewRequest,
)
from litestar.datastructures import State

from middleware.auth import AuthUser
from repository.court_suggestions_repository import INSERTABLE_COLUMNS, CourtSuggestionsRepository
from repository.courts_repository import CourtsRepository
from services.bans_service import BansService
from services.courts_service import clean_court_values
from services.exceptions.courts import (
    CourtSuggestionAlreadyReviewedError,
    CourtSuggestionNotFoundError,
    CourtValidationError,
    DuplicateCourtAddressError,
)
from utilities.court_cache import CourtListCache

from .base import BaseService

log = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "address", "city", "state", "zip")
REVIEW_ACTIONS = {"approve": "approved", "reject": "rejected"}
LIST_STATUSES = ("pending", "approved", "rejected", "all")


class CourtSuggestionsService(BaseService):
    """Service for new-court suggestions."""

    def __init__(  # noqa: PLR0913
        self,
        pool: Pool,
        state: State,
        court_suggestions_repo: CourtSuggestionsRepository,
        courts_repo: CourtsRepository,
        bans_service: BansService,
        court_cache: CourtListCache[CourtResponse],
    ) -> None:
        super().__init__(pool, state)
        self._court_suggestions_repo = court_suggestions_repo
        self._courts_repo = courts_repo
        self._bans_service = bans_service
        self._court_cache = court_cache

    async def submit(self, user: AuthUser, data: NewCourtSuggestionCreateRequest) -> NewCourtSuggestionResponse:
        """Suggest a new court.

        Raises:
            UserBannedError: If the user is banned from suggestions.
            CourtValidationError: If a required field is missing or a value is invalid.
            DuplicateCourtAddressError: If the address is already a court or a pending suggestion.
        """
        await self._bans_service.ensure_not_banned(user.id, "suggestions")

        values = {column: getattr(data, column) for column in INSERTABLE_COLUMNS}
        missing = [column for column in REQUIRED_FIELDS if not (values[column] or "").strip()]
        if missing:
            raise CourtValidationError(f"Missing required fields: {', '.join(missing)}.", field=missing[0])
        values.update({column: values[column].strip() for column in REQUIRED_FIELDS})
        values = clean_court_values(values)

        if await self._courts_repo.find_court_by_address(
            values["address"], values["city"], values["state"], values["zip"]
        ):
            raise DuplicateCourtAddressError(values["address"])
        if await self._court_suggestions_repo.find_pending_by_address(values["address"]):
            raise DuplicateCourtAddressError(values["address"], pending=True)

        row = await self._court_suggestions_repo.create_suggestion(user.id, user.username, values)
        log.info("User %s suggested new court %s at %s", user.id, row["name"], row["address"])
        return NewCourtSuggestionResponse(**row)

    async def list_user_suggestions(self, user_id: str) -> list[NewCourtSuggestionResponse]:
        rows = await self._court_suggestions_repo.fetch_suggestions(user_id=user_id)
        return [NewCourtSuggestionResponse(**row) for row in rows]

    async def list_suggestions(self, status: str = "pending") -> list[NewCourtSuggestionResponse]:
        if status not in LIST_STATUSES:
            raise CourtValidationError(f"Status must be one of: {', '.join(LIST_STATUSES)}.", field="status")
        rows = await self._court_suggestions_repo.fetch_suggestions(status=None if status == "all" else status)
        return [NewCourtSuggestionResponse(**row) for row in rows]

    async def review(
        self,
        suggestion_id: UUID,
        admin: AuthUser,
        data: NewCourtSuggestionReviewRequest,
    ) -> NewCourtSuggestionResponse:
        """Approve (creating the court) or reject a suggested court.

        Raises:
            CourtValidationError: If the action is unknown.
            CourtSuggestionNotFoundError: If the suggestion does not exist.
            CourtSuggestionAlreadyReviewedError: If it was already approved or rejected.
        """
        status = REVIEW_ACTIONS.get(data.action)
        if status is None:
            raise CourtValidationError("Action must be 'approve' or 'reject'.", field="action")
        note = (data.review_note or "").strip() or None

        async with self._pool.acquire() as conn, conn.transaction():
            row = await self._court_suggestions_repo.fetch_suggestion(suggestion_id, for_update=True, conn=conn)  # type: ignore[arg-type]
            if row is None:
                raise CourtSuggestionNotFoundError(suggestion_id)
            if row["status"] != "pending":
                raise CourtSuggestionAlreadyReviewedError(suggestion_id, row["status"])

            court_id = None
            if status == "approved":
                court = await self._courts_repo.create_court(
                    {column: row[column] for column in INSERTABLE_COLUMNS},
                    conn=conn,  # type: ignore[arg-type]
                )
                court_id = court["id"]

            updated = await self._court_suggestions_repo.resolve_suggestion(
                suggestion_id,
                status,
                admin.id,
                admin.username,
                note,
                court_id,
                conn=conn,  # type: ignore[arg-type]
            )

        if court_id is not None:
            self._court_cache.invalidate()
            log.info("Court suggestion %s approved by %s as court %s", suggestion_id, admin.id, court_id)
        else:
            log.info("Court suggestion %s rejected by %s", suggestion_id, admin.id)
        return NewCourtSuggestionResponse(**updated)


async def provide_court_suggestions_service(
    state: State,
    court_suggestions_repo: CourtSuggestionsRepository,
    courts_repo: CourtsRepository,
    bans_service: BansService,
) -> CourtSuggestionsService:
    """Litestar DI provider for service."""
    return CourtSuggestionsService(
        state.db_pool,
        state,
        court_suggestions_repo,
        courts_repo,
        bans_service,
        state.court_cache,
    )
