"""Service for court edit suggestions: submission, author edits and review."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any
from uuid import UUID

from asyncpg import Pool
from courtfinder_sdk.courts import CourtResponse, normalize_number_of_courts
from courtfinder_sdk.suggestions import (
    FIELD_DECISIONS,
    MAX_REASON_LENGTH,
    MAX_REVIEW_NOTE_LENGTH,
    SUGGESTION_FIELDS,
    EditSuggestionCreatedEvent,
    EditSuggestionCreateRequest,
    EditSuggestionDetailResponse,
    EditSuggestionResolvedEvent,
    EditSuggestionResponse,
    EditSuggestionReviewRequest,
    EditSuggestionReviewResponse,
    EditSuggestionUpdateRequest,
    FieldReviewResponse,
    SuggestionField,
    SuggestionFieldChange,
    format_field_value,
)
from litestar.datastructures import Headers, State

from middleware.auth import AuthUser
from repository.courts_repository import CourtsRepository
from repository.edit_suggestions_repository import SUGGESTED_COLUMNS, EditSuggestionsRepository
from repository.exceptions import ForeignKeyViolationError, UniqueConstraintViolationError
from services.bans_service import BansService
from services.exceptions.courts import CourtNotFoundError
from services.exceptions.suggestions import (
    DuplicatePendingSuggestionError,
    FieldAlreadyReviewedError,
    FieldNotProposedError,
    NoProposedChangesError,
    NotSuggestionAuthorError,
    SelfReviewError,
    SuggestionNotFoundError,
    SuggestionNotPendingError,
    SuggestionPartiallyReviewedError,
    SuggestionValidationError,
)
from utilities.court_cache import CourtListCache

from .base import BaseService

log = logging.getLogger(__name__)

SUGGESTION_STATUSES = ("pending", "approved", "rejected")
MAX_LIST_LIMIT = 100


def proposed_fields(row: Mapping[str, Any]) -> list[SuggestionField]:
    """Fields the suggestion row proposes a value for, in catalogue order."""
    return [field for field, spec in SUGGESTION_FIELDS.items() if row[spec.suggestion_column] is not None]


def derive_status(proposed: Iterable[SuggestionField], decisions: Mapping[SuggestionField, str]) -> str | None:
    """Overall status once every proposed field has a decision.

    Returns:
        ``approved`` if any field was approved, ``rejected`` if all were rejected,
        or None while a proposed field is still undecided.
    """
    proposed = list(proposed)
    if any(field not in decisions for field in proposed):
        return None
    if any(decisions[field] == "approved" for field in proposed):
        return "approved"
    return "rejected"


def _clean_reason(reason: str) -> str:
    reason = (reason or "").strip()
    if not reason:
        raise SuggestionValidationError("A reason for the suggested changes is required.", field="reason")
    if len(reason) > MAX_REASON_LENGTH:
        raise SuggestionValidationError(
            f"Reason must be {MAX_REASON_LENGTH} characters or fewer.",
            field="reason",
        )
    return reason


def _clean_review_note(note: str | None) -> str | None:
    note = (note or "").strip() or None
    if note is not None and len(note) > MAX_REVIEW_NOTE_LENGTH:
        raise SuggestionValidationError(
            f"Review note must be {MAX_REVIEW_NOTE_LENGTH} characters or fewer.",
            field="reviewNote",
        )
    return note


def suggestion_column_values(data: EditSuggestionCreateRequest) -> dict[str, Any]:
    """Validate the proposed values and key them by suggestion column.

    A blank or zero number of courts means "unknown" and is not a proposed change.

    Raises:
        SuggestionValidationError: If the number of courts is not a whole number in range.
        NoProposedChangesError: If nothing is proposed.
    """
    values = data.to_field_values()
    if SuggestionField.NUMBER_OF_COURTS in values:
        try:
            number = normalize_number_of_courts(values[SuggestionField.NUMBER_OF_COURTS])  # type: ignore[arg-type]
        except ValueError as e:
            raise SuggestionValidationError(str(e), field=SuggestionField.NUMBER_OF_COURTS.value) from e
        if number is None:
            del values[SuggestionField.NUMBER_OF_COURTS]
        else:
            values[SuggestionField.NUMBER_OF_COURTS] = number
    if not values:
        raise NoProposedChangesError()
    return {SUGGESTION_FIELDS[field].suggestion_column: value for field, value in values.items()}


class EditSuggestionsService(BaseService):
    """Service for court edit suggestions."""

    def __init__(  # noqa: PLR0913
        self,
        pool: Pool,
        state: State,
        edit_suggestions_repo: EditSuggestionsRepository,
        courts_repo: CourtsRepository,
        bans_service: BansService,
        court_cache: CourtListCache[CourtResponse],
    ) -> None:
        super().__init__(pool, state)
        self._suggestions_repo = edit_suggestions_repo
        self._courts_repo = courts_repo
        self._bans_service = bans_service
        self._court_cache = court_cache

    # Submission

    async def submit(
        self,
        court_id: UUID,
        user: AuthUser,
        data: EditSuggestionCreateRequest,
        headers: Headers,
    ) -> EditSuggestionResponse:
        """Create a pending suggestion for a court.

        Args:
            court_id: Court the suggestion targets.
            user: Submitting user.
            data: Proposed values and reason.
            headers: Request headers for event publishing.

        Returns:
            The created suggestion.

        Raises:
            UserBannedError: If the user is banned from suggestions.
            CourtNotFoundError: If the court does not exist.
            SuggestionValidationError: If the reason or a value is invalid.
            NoProposedChangesError: If no field is proposed.
            DuplicatePendingSuggestionError: If the user already has a pending suggestion for the court.
        """
        await self._bans_service.ensure_not_banned(user.id, "suggestions")

        if not await self._courts_repo.court_exists(court_id):
            raise CourtNotFoundError(court_id)

        reason = _clean_reason(data.reason)
        values = suggestion_column_values(data)

        existing_id = await self._suggestions_repo.fetch_pending_suggestion_id(court_id, user.id)
        if existing_id is not None:
            raise DuplicatePendingSuggestionError(court_id, existing_id)

        try:
            suggestion_id = await self._suggestions_repo.create_suggestion(
                court_id=court_id,
                suggested_by=user.id,
                suggested_by_name=user.username,
                reason=reason,
                values=values,
            )
        except UniqueConstraintViolationError as e:
            existing_id = await self._suggestions_repo.fetch_pending_suggestion_id(court_id, user.id)
            raise DuplicatePendingSuggestionError(court_id, existing_id) from e
        except ForeignKeyViolationError as e:
            raise CourtNotFoundError(court_id) from e

        log.info("User %s suggested changes to court %s (%s)", user.id, court_id, ", ".join(values))
        suggestion = await self.get_suggestion(court_id, suggestion_id)

        await self.publish_message(
            routing_key="api.court_edit_suggestion.created",
            data=EditSuggestionCreatedEvent(suggestion_id=suggestion_id, court_id=court_id, submitted_by=user.id),
            headers=headers,
            idempotency_key=f"court_edit_suggestion:created:{suggestion_id}",
        )
        return suggestion

    async def update(
        self,
        court_id: UUID,
        suggestion_id: UUID,
        user: AuthUser,
        data: EditSuggestionUpdateRequest,
    ) -> EditSuggestionResponse:
        """Replace a pending suggestion's content. Author only; status is unchanged.

        Raises:
            SuggestionNotFoundError: If the suggestion does not exist on this court.
            NotSuggestionAuthorError: If the caller is not the author.
            SuggestionNotPendingError: If the suggestion was already resolved.
            SuggestionPartiallyReviewedError: If a field already has a decision.
        """
        reason = _clean_reason(data.reason)
        values = suggestion_column_values(data)

        async with self._pool.acquire() as conn, conn.transaction():
            await self._lock_for_author(court_id, suggestion_id, user, conn=conn)
            await self._suggestions_repo.update_suggestion_content(
                suggestion_id,
                reason,
                values,
                conn=conn,  # type: ignore[arg-type]
            )
        return await self.get_suggestion(court_id, suggestion_id)

    async def delete(self, court_id: UUID, suggestion_id: UUID, user: AuthUser) -> None:
        """Withdraw a pending suggestion. Author only, and only before any field decision."""
        async with self._pool.acquire() as conn, conn.transaction():
            await self._lock_for_author(court_id, suggestion_id, user, conn=conn)
            await self._suggestions_repo.delete_suggestion(suggestion_id, conn=conn)  # type: ignore[arg-type]
        log.info("User %s withdrew edit suggestion %s", user.id, suggestion_id)

    async def _lock_for_author(
        self,
        court_id: UUID,
        suggestion_id: UUID,
        user: AuthUser,
        *,
        conn: Any,  # noqa: ANN401
    ) -> dict:
        row = await self._suggestions_repo.fetch_suggestion(suggestion_id, for_update=True, conn=conn)
        if row is None or row["court_id"] != court_id:
            raise SuggestionNotFoundError(suggestion_id)
        if row["suggested_by"] != user.id:
            raise NotSuggestionAuthorError()
        if row["status"] != "pending":
            raise SuggestionNotPendingError(suggestion_id, row["status"])
        if await self._suggestions_repo.fetch_field_reviews([suggestion_id], conn=conn):
            raise SuggestionPartiallyReviewedError(suggestion_id)
        return row

    async def admin_delete(self, suggestion_id: UUID, admin: AuthUser, reason: str | None = None) -> None:
        """Remove any suggestion regardless of status."""
        deleted = await self._suggestions_repo.delete_suggestion(suggestion_id)
        if not deleted:
            raise SuggestionNotFoundError(suggestion_id)
        log.info("Admin %s deleted edit suggestion %s: %s", admin.id, suggestion_id, reason or "no reason given")

    # Queries

    async def get_suggestion(self, court_id: UUID, suggestion_id: UUID) -> EditSuggestionResponse:
        row = await self._suggestions_repo.fetch_suggestion(suggestion_id)
        if row is None or row["court_id"] != court_id:
            raise SuggestionNotFoundError(suggestion_id)
        reviews = await self._suggestions_repo.fetch_field_reviews([suggestion_id])
        return self._row_to_response(row, reviews)

    async def get_detail(self, court_id: UUID, suggestion_id: UUID) -> EditSuggestionDetailResponse:
        """A suggestion with each proposed field compared against the court's current value."""
        suggestion = await self.get_suggestion(court_id, suggestion_id)
        court_row = await self._courts_repo.fetch_court(court_id)
        if court_row is None:
            raise CourtNotFoundError(court_id)

        decisions = {review.field: review.status for review in suggestion.field_reviews}
        changes = []
        for field in suggestion.proposed_fields:
            spec = SUGGESTION_FIELDS[field]
            current = court_row[spec.court_column]
            suggested = getattr(suggestion, spec.suggestion_column)
            changes.append(
                SuggestionFieldChange(
                    field=field,
                    label=spec.label,
                    current_value=current,
                    suggested_value=suggested,
                    current_display=format_field_value(field, current),
                    suggested_display=format_field_value(field, suggested),
                    status=decisions.get(field, "pending"),
                )
            )
        return EditSuggestionDetailResponse(suggestion=suggestion, court=CourtResponse(**court_row), changes=changes)

    async def list_suggestions(
        self,
        *,
        court_id: UUID | None = None,
        status: str | None = None,
        user_id: str | None = None,
        limit: int | None = None,
    ) -> list[EditSuggestionResponse]:
        """List suggestions matching the filters, newest first."""
        if status is not None and status not in SUGGESTION_STATUSES:
            raise SuggestionValidationError(
                f"Status must be one of: {', '.join(SUGGESTION_STATUSES)}.",
                field="status",
            )
        if limit is not None and not 1 <= limit <= MAX_LIST_LIMIT:
            raise SuggestionValidationError(f"Limit must be between 1 and {MAX_LIST_LIMIT}.", field="limit")

        rows = await self._suggestions_repo.fetch_suggestions(
            court_id=court_id,
            status=status,
            user_id=user_id,
            limit=limit,
        )
        reviews = await self._suggestions_repo.fetch_field_reviews([row["id"] for row in rows])
        by_suggestion: dict[UUID, list[dict]] = {}
        for review in reviews:
            by_suggestion.setdefault(review["suggestion_id"], []).append(review)
        return [self._row_to_response(row, by_suggestion.get(row["id"], [])) for row in rows]

    # Review

    async def review(
        self,
        court_id: UUID,
        suggestion_id: UUID,
        reviewer: AuthUser,
        data: EditSuggestionReviewRequest,
        headers: Headers,
    ) -> EditSuggestionReviewResponse:
        """Approve or reject a whole suggestion or one of its fields.

        Approving copies the decided field values onto the court and leaves every other
        court column untouched. A field-scoped decision leaves the suggestion pending
        until every proposed field has a decision; a whole-suggestion decision resolves
        all fields that are still undecided.

        Args:
            court_id: Court the suggestion belongs to.
            suggestion_id: Suggestion to review.
            reviewer: Reviewing user.
            data: Decision, optional note and optional field.
            headers: Request headers for event publishing.

        Returns:
            The suggestion after the decision and the court after any applied changes.

        Raises:
            SuggestionValidationError: If the decision, note or field name is invalid.
            SuggestionNotFoundError: If the suggestion does not exist on this court.
            SelfReviewError: If the reviewer submitted the suggestion.
            SuggestionNotPendingError: If the suggestion was already resolved.
            FieldNotProposedError: If the field is not part of the suggestion.
            FieldAlreadyReviewedError: If the field already has a decision.
        """
        decision = data.status
        if decision not in FIELD_DECISIONS:
            raise SuggestionValidationError("Status must be 'approved' or 'rejected'.", field="status")
        note = _clean_review_note(data.review_note)
        field: SuggestionField | None = None
        if data.field is not None:
            try:
                field = SuggestionField(data.field)
            except ValueError:
                raise SuggestionValidationError(f"Unknown field '{data.field}'.", field="field") from None

        async with self._pool.acquire() as conn, conn.transaction():
            row = await self._suggestions_repo.fetch_suggestion(suggestion_id, for_update=True, conn=conn)  # type: ignore[arg-type]
            if row is None or row["court_id"] != court_id:
                raise SuggestionNotFoundError(suggestion_id)
            if row["suggested_by"] == reviewer.id:
                raise SelfReviewError()
            if row["status"] != "pending":
                raise SuggestionNotPendingError(suggestion_id, row["status"])

            proposed = proposed_fields(row)
            existing = await self._suggestions_repo.fetch_field_reviews([suggestion_id], conn=conn)  # type: ignore[arg-type]
            decisions: dict[SuggestionField, str] = {SuggestionField(r["field"]): r["status"] for r in existing}

            if field is not None:
                if field not in proposed:
                    raise FieldNotProposedError(field.value)
                if field in decisions:
                    raise FieldAlreadyReviewedError(field.value, decisions[field])
                targets = [field]
            else:
                targets = [f for f in proposed if f not in decisions]

            court_changes: dict[str, Any] = {}
            if decision == "approved":
                for target in targets:
                    spec = SUGGESTION_FIELDS[target]
                    court_changes[spec.court_column] = row[spec.suggestion_column]

            if court_changes:
                court_row = await self._courts_repo.update_court(court_id, court_changes, conn=conn)  # type: ignore[arg-type]
            else:
                court_row = await self._courts_repo.fetch_court(court_id, conn=conn)  # type: ignore[arg-type]
            if court_row is None:
                raise CourtNotFoundError(court_id)

            if targets:
                try:
                    await self._suggestions_repo.insert_field_reviews(
                        suggestion_id,
                        [target.value for target in targets],
                        decision,
                        reviewer.id,
                        reviewer.username,
                        note,
                        conn=conn,  # type: ignore[arg-type]
                    )
                except UniqueConstraintViolationError as e:
                    raise FieldAlreadyReviewedError(targets[0].value, decision) from e
                decisions.update(dict.fromkeys(targets, decision))

            overall = derive_status(proposed, decisions) if proposed else decision
            if overall is not None:
                await self._suggestions_repo.resolve_suggestion(
                    suggestion_id,
                    overall,
                    reviewer.id,
                    reviewer.username,
                    note,
                    conn=conn,  # type: ignore[arg-type]
                )
            else:
                await self._suggestions_repo.touch_suggestion(suggestion_id, conn=conn)  # type: ignore[arg-type]

            updated = await self._suggestions_repo.fetch_suggestion(suggestion_id, conn=conn)  # type: ignore[arg-type]
            reviews = await self._suggestions_repo.fetch_field_reviews([suggestion_id], conn=conn)  # type: ignore[arg-type]

        if court_changes:
            self._court_cache.invalidate()

        log.info(
            "Reviewer %s %s %s of edit suggestion %s (overall: %s)",
            reviewer.id,
            decision,
            field.value if field else "all fields",
            suggestion_id,
            overall or "pending",
        )

        suggestion = self._row_to_response(updated, reviews)  # type: ignore[arg-type]
        await self.publish_message(
            routing_key="api.court_edit_suggestion.resolved",
            data=EditSuggestionResolvedEvent(
                suggestion_id=suggestion_id,
                court_id=court_id,
                status=suggestion.status,
                reviewed_by=reviewer.id,
                field=field,
            ),
            headers=headers,
            idempotency_key=f"court_edit_suggestion:resolved:{suggestion_id}:{field.value if field else 'all'}",
        )
        return EditSuggestionReviewResponse(suggestion=suggestion, court=CourtResponse(**court_row))

    @staticmethod
    def _row_to_response(row: Mapping[str, Any], reviews: Iterable[Mapping[str, Any]]) -> EditSuggestionResponse:
        return EditSuggestionResponse(
            id=row["id"],
            court_id=row["court_id"],
            submitted_by_user_id=row["suggested_by"],
            submitted_by_user_name=row["suggested_by_name"],
            reason=row["reason"],
            status=row["status"],
            review_note=row["review_note"],
            reviewed_by_user_id=row["reviewed_by"],
            reviewed_by_user_name=row["reviewed_by_name"],
            reviewed_at=row["reviewed_at"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            court_name=row.get("court_name"),
            proposed_fields=proposed_fields(row),
            field_reviews=[
                FieldReviewResponse(
                    field=SuggestionField(review["field"]),
                    status=review["status"],
                    reviewed_by=review["reviewed_by"],
                    reviewed_by_name=review["reviewed_by_name"],
                    review_note=review["review_note"],
                    reviewed_at=review["reviewed_at"],
                )
                for review in reviews
            ],
            **{column: row[column] for column in SUGGESTED_COLUMNS},
        )


async def provide_edit_suggestions_service(
    state: State,
    edit_suggestions_repo: EditSuggestionsRepository,
    courts_repo: CourtsRepository,
    bans_service: BansService,
) -> EditSuggestionsService:
    """Litestar DI provider for service.

    Args:
        state: Application state.
        edit_suggestions_repo: Edit suggestions repository instance.
        courts_repo: Courts repository instance.
        bans_service: Ban gate.

    Returns:
        EditSuggestionsService instance.
    """
    return EditSuggestionsService(
        state.db_pool,
        state,
        edit_suggestions_repo,
        courts_repo,
        bans_service,
        state.court_cache,
    )
