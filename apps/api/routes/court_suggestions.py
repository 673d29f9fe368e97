"""New-court suggestion routes."""

from __future__ import annotations

from typing import Annotated, Any

from courtfinder_sdk.courts import NewCourtSuggestionCreateRequest, NewCourtSuggestionResponse
from litestar import Controller, Request, get, post
from litestar.di import Provide
from litestar.params import Body

from middleware.auth import AuthToken, AuthUser
from repository.bans_repository import provide_bans_repository
from repository.court_suggestions_repository import provide_court_suggestions_repository
from repository.courts_repository import provide_courts_repository
from services.bans_service import provide_bans_service
from services.court_suggestions_service import CourtSuggestionsService, provide_court_suggestions_service


class CourtSuggestionsController(Controller):
    """Suggest courts that are missing from the directory."""

    tags = ["Court Suggestions"]
    path = "/court-suggestions"
    dependencies = {
        "court_suggestions_repo": Provide(provide_court_suggestions_repository),
        "courts_repo": Provide(provide_courts_repository),
        "bans_repo": Provide(provide_bans_repository),
        "bans_service": Provide(provide_bans_service),
        "court_suggestions_service": Provide(provide_court_suggestions_service),
    }

    @post(
        "/",
        summary="Suggest Court",
        description="Suggest a new court. Rejected with 409 when the address is already known.",
    )
    async def create_suggestion(
        self,
        request: Request[AuthUser, AuthToken, Any],
        data: Annotated[NewCourtSuggestionCreateRequest, Body(title="Court suggestion")],
        court_suggestions_service: CourtSuggestionsService,
    ) -> NewCourtSuggestionResponse:
        return await court_suggestions_service.submit(request.user, data)

    @get(
        "/",
        summary="List My Court Suggestions",
        description="List the new-court suggestions submitted by the caller.",
    )
    async def list_own_suggestions(
        self,
        request: Request[AuthUser, AuthToken, Any],
        court_suggestions_service: CourtSuggestionsService,
    ) -> list[NewCourtSuggestionResponse]:
        return await court_suggestions_service.list_user_suggestions(request.user.id)
