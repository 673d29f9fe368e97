"""Court edit suggestion routes."""

from __future__ import annotations

from typing import Annotated, Any
from uuid import UUID

from courtfinder_sdk.suggestions import (
    EditSuggestionCreateRequest,
    EditSuggestionDetailResponse,
    EditSuggestionResponse,
    EditSuggestionReviewRequest,
    EditSuggestionReviewResponse,
    EditSuggestionUpdateRequest,
)
from litestar import Controller, Request, delete, get, patch, post, put
from litestar.di import Provide
from litestar.params import Body, Parameter

from middleware.auth import AuthToken, AuthUser
from repository.bans_repository import provide_bans_repository
from repository.courts_repository import provide_courts_repository
from repository.edit_suggestions_repository import provide_edit_suggestions_repository
from services.bans_service import provide_bans_service
from services.edit_suggestions_service import EditSuggestionsService, provide_edit_suggestions_service


class EditSuggestionsController(Controller):
    """Suggest, edit, withdraw and review changes to a court."""

    tags = ["Edit Suggestions"]
    path = "/tennis-courts/{court_id:uuid}/edit-suggestions"
    dependencies = {
        "edit_suggestions_repo": Provide(provide_edit_suggestions_repository),
        "courts_repo": Provide(provide_courts_repository),
        "bans_repo": Provide(provide_bans_repository),
        "bans_service": Provide(provide_bans_service),
        "edit_suggestions_service": Provide(provide_edit_suggestions_service),
    }

    @post(
        "/",
        summary="Submit Edit Suggestion",
        description=(
            "Propose new values for one or more court fields. A user may have only one pending "
            "suggestion per court; a second one is rejected with 409 and the existing suggestion id."
        ),
    )
    async def create_suggestion(
        self,
        request: Request[AuthUser, AuthToken, Any],
        court_id: UUID,
        data: Annotated[EditSuggestionCreateRequest, Body(title="Edit suggestion")],
        edit_suggestions_service: EditSuggestionsService,
    ) -> EditSuggestionResponse:
        return await edit_suggestions_service.submit(court_id, request.user, data, request.headers)

    @get(
        "/",
        summary="List Edit Suggestions",
        description="List suggestions for a court, optionally filtered by status and author.",
    )
    async def list_suggestions(
        self,
        court_id: UUID,
        edit_suggestions_service: EditSuggestionsService,
        status: str | None = None,
        user_id: Annotated[str | None, Parameter(query="userId")] = None,
        limit: int | None = None,
    ) -> list[EditSuggestionResponse]:
        return await edit_suggestions_service.list_suggestions(
            court_id=court_id,
            status=status,
            user_id=user_id,
            limit=limit,
        )

    @get(
        "/{suggestion_id:uuid}",
        summary="Get Edit Suggestion",
        description="Get a suggestion with each proposed field compared against the court's current value.",
    )
    async def get_suggestion(
        self,
        court_id: UUID,
        suggestion_id: UUID,
        edit_suggestions_service: EditSuggestionsService,
    ) -> EditSuggestionDetailResponse:
        return await edit_suggestions_service.get_detail(court_id, suggestion_id)

    @patch(
        "/{suggestion_id:uuid}",
        summary="Update Edit Suggestion",
        description="Replace the content of your own pending suggestion.",
    )
    async def update_suggestion(
        self,
        request: Request[AuthUser, AuthToken, Any],
        court_id: UUID,
        suggestion_id: UUID,
        data: Annotated[EditSuggestionUpdateRequest, Body(title="Edit suggestion")],
        edit_suggestions_service: EditSuggestionsService,
    ) -> EditSuggestionResponse:
        return await edit_suggestions_service.update(court_id, suggestion_id, request.user, data)

    @put(
        "/{suggestion_id:uuid}",
        summary="Review Edit Suggestion",
        description=(
            "Approve or reject a suggestion, or one of its fields when `field` is given. "
            "Approved values are copied onto the court."
        ),
    )
    async def review_suggestion(
        self,
        request: Request[AuthUser, AuthToken, Any],
        court_id: UUID,
        suggestion_id: UUID,
        data: Annotated[EditSuggestionReviewRequest, Body(title="Review decision")],
        edit_suggestions_service: EditSuggestionsService,
    ) -> EditSuggestionReviewResponse:
        return await edit_suggestions_service.review(court_id, suggestion_id, request.user, data, request.headers)

    @delete(
        "/{suggestion_id:uuid}",
        summary="Withdraw Edit Suggestion",
        description="Delete your own pending suggestion.",
    )
    async def delete_suggestion(
        self,
        request: Request[AuthUser, AuthToken, Any],
        court_id: UUID,
        suggestion_id: UUID,
        edit_suggestions_service: EditSuggestionsService,
    ) -> None:
        await edit_suggestions_service.delete(court_id, suggestion_id, request.user)
