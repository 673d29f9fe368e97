"""Routes scoped to the signed-in user."""

from __future__ import annotations

from typing import Any

from courtfinder_sdk.bans import BanStatusResponse
from courtfinder_sdk.suggestions import EditSuggestionResponse
from litestar import Controller, Request, get
from litestar.di import Provide

from middleware.auth import AuthToken, AuthUser
from repository.bans_repository import provide_bans_repository
from repository.courts_repository import provide_courts_repository
from repository.edit_suggestions_repository import provide_edit_suggestions_repository
from services.bans_service import BansService, provide_bans_service
from services.edit_suggestions_service import EditSuggestionsService, provide_edit_suggestions_service


class UserController(Controller):
    """The caller's own suggestions and ban status."""

    tags = ["User"]
    path = "/user"
    dependencies = {
        "bans_repo": Provide(provide_bans_repository),
        "bans_service": Provide(provide_bans_service),
        "edit_suggestions_repo": Provide(provide_edit_suggestions_repository),
        "courts_repo": Provide(provide_courts_repository),
        "edit_suggestions_service": Provide(provide_edit_suggestions_service),
    }

    @get(
        "/edit-suggestions",
        summary="List My Edit Suggestions",
        description="List the edit suggestions the caller submitted, across every court.",
    )
    async def list_own_edit_suggestions(
        self,
        request: Request[AuthUser, AuthToken, Any],
        edit_suggestions_service: EditSuggestionsService,
        status: str | None = None,
    ) -> list[EditSuggestionResponse]:
        return await edit_suggestions_service.list_suggestions(user_id=request.user.id, status=status)

    @get(
        "/ban-status",
        summary="Get Ban Status",
        description="Whether the caller is banned and which submission categories are blocked.",
    )
    async def get_ban_status(
        self,
        request: Request[AuthUser, AuthToken, Any],
        bans_service: BansService,
    ) -> BanStatusResponse:
        return await bans_service.get_ban_status(request.user.id)
