"""Administrator routes.

Every controller here except ``AdminCheckController`` is guarded by ``admin_guard``.
"""

from __future__ import annotations

from typing import Annotated, Any
from uuid import UUID

from courtfinder_sdk.bans import AdminCheckResponse, UserBanCreateRequest, UserBanResponse, UserBanUpdateRequest
from courtfinder_sdk.courts import (
    CourtCreateRequest,
    CourtPatchRequest,
    CourtResponse,
    NewCourtSuggestionResponse,
    NewCourtSuggestionReviewRequest,
)
from courtfinder_sdk.moderation import (
    ClearReportsResponse,
    ModerationActionResponse,
    PhotoReportActionRequest,
    ReportedPhotoResponse,
    ReviewReportActionRequest,
    ReviewReportResponse,
)
from courtfinder_sdk.suggestions import EditSuggestionResponse
from litestar import Controller, Request, delete, get, post, put
from litestar.di import Provide
from litestar.params import Body, Parameter
from litestar.status_codes import HTTP_200_OK

from middleware.auth import AuthToken, AuthUser
from middleware.guards import admin_guard
from repository.bans_repository import provide_bans_repository
from repository.court_suggestions_repository import provide_court_suggestions_repository
from repository.courts_repository import provide_courts_repository
from repository.edit_suggestions_repository import provide_edit_suggestions_repository
from repository.photos_repository import provide_photos_repository
from repository.reviews_repository import provide_reviews_repository
from services.bans_service import BansService, provide_bans_service
from services.court_suggestions_service import CourtSuggestionsService, provide_court_suggestions_service
from services.courts_service import CourtsService, provide_courts_service
from services.edit_suggestions_service import EditSuggestionsService, provide_edit_suggestions_service
from services.moderation_service import ModerationService, provide_moderation_service
from services.photo_storage_service import PhotoStorageService, provide_photo_storage_service

_moderation_dependencies = {
    "reviews_repo": Provide(provide_reviews_repository),
    "photos_repo": Provide(provide_photos_repository),
    "moderation_service": Provide(provide_moderation_service),
}


class AdminCheckController(Controller):
    """Lets a client decide whether to show admin tooling."""

    tags = ["Admin"]
    path = "/admin/check"

    @get("/", summary="Check Admin", description="Whether the caller's token carries admin rights.")
    async def check_admin(self, request: Request[AuthUser, AuthToken, Any]) -> AdminCheckResponse:
        return AdminCheckResponse(is_admin=request.auth.is_admin)


class AdminCourtsController(Controller):
    """Direct court management."""

    tags = ["Admin"]
    path = "/admin/courts"
    guards = [admin_guard]
    dependencies = {
        "courts_repo": Provide(provide_courts_repository),
        "courts_service": Provide(provide_courts_service),
    }

    @post("/", summary="Create Court", description="Add a court to the directory.")
    async def create_court(
        self,
        data: Annotated[CourtCreateRequest, Body(title="Court")],
        courts_service: CourtsService,
    ) -> CourtResponse:
        return await courts_service.create_court(data)

    @put(
        "/{court_id:uuid}",
        summary="Update Court",
        description="Partially update a court. Only the fields present in the body are written.",
    )
    async def update_court(
        self,
        court_id: UUID,
        data: Annotated[CourtPatchRequest, Body(title="Court changes")],
        courts_service: CourtsService,
    ) -> CourtResponse:
        return await courts_service.update_court(court_id, data)

    @delete(
        "/{court_id:uuid}",
        dependencies={"photo_storage": Provide(provide_photo_storage_service)},
        summary="Delete Court",
        description="Delete a court together with its reviews, photos, suggestions and reports.",
    )
    async def delete_court(
        self,
        court_id: UUID,
        courts_service: CourtsService,
        photo_storage: PhotoStorageService,
    ) -> None:
        await courts_service.delete_court(court_id, photo_storage)


class AdminReportsController(Controller):
    """Reported reviews."""

    tags = ["Admin"]
    path = "/admin/reports"
    guards = [admin_guard]
    dependencies = _moderation_dependencies

    @get("/", summary="List Review Reports", description="List pending review reports, oldest first.")
    async def list_reports(self, moderation_service: ModerationService) -> list[ReviewReportResponse]:
        return await moderation_service.list_review_reports()

    @post(
        "/",
        dependencies={"photo_storage": Provide(provide_photo_storage_service)},
        summary="Act On Review Report",
        description=(
            "Dismiss a report, delete the reported review and resolve every report on it, "
            "or remove one photo from the reported review."
        ),
        status_code=HTTP_200_OK,
    )
    async def act_on_report(
        self,
        request: Request[AuthUser, AuthToken, Any],
        data: Annotated[ReviewReportActionRequest, Body(title="Report action")],
        moderation_service: ModerationService,
        photo_storage: PhotoStorageService,
    ) -> ModerationActionResponse:
        return await moderation_service.act_on_review_report(request.user, data, photo_storage)


class AdminPhotosController(Controller):
    """Reported photos."""

    tags = ["Admin"]
    path = "/admin/court-photos"
    guards = [admin_guard]
    dependencies = _moderation_dependencies

    @get("/", summary="List Reported Photos", description="List photos with pending reports.")
    async def list_reported_photos(self, moderation_service: ModerationService) -> list[ReportedPhotoResponse]:
        return await moderation_service.list_reported_photos()

    @post(
        "/",
        dependencies={"photo_storage": Provide(provide_photo_storage_service)},
        summary="Act On Photo",
        description="Dismiss a photo report, or delete the photo and resolve every report on it.",
        status_code=HTTP_200_OK,
    )
    async def act_on_photo(
        self,
        request: Request[AuthUser, AuthToken, Any],
        data: Annotated[PhotoReportActionRequest, Body(title="Photo action")],
        moderation_service: ModerationService,
        photo_storage: PhotoStorageService,
    ) -> ModerationActionResponse:
        return await moderation_service.act_on_photo(request.user, data, photo_storage)


class AdminClearReportsController(Controller):
    """Bulk report dismissal."""

    tags = ["Admin"]
    path = "/admin/clear-reports"
    guards = [admin_guard]
    dependencies = _moderation_dependencies

    @delete(
        "/",
        summary="Clear Reports",
        description="Dismiss every pending review and photo report.",
        status_code=HTTP_200_OK,
    )
    async def clear_reports(
        self,
        request: Request[AuthUser, AuthToken, Any],
        moderation_service: ModerationService,
    ) -> ClearReportsResponse:
        return await moderation_service.clear_reports(request.user)


class AdminCourtSuggestionsController(Controller):
    """Review of suggested new courts."""

    tags = ["Admin"]
    path = "/admin/court-suggestions"
    guards = [admin_guard]
    dependencies = {
        "court_suggestions_repo": Provide(provide_court_suggestions_repository),
        "courts_repo": Provide(provide_courts_repository),
        "bans_repo": Provide(provide_bans_repository),
        "bans_service": Provide(provide_bans_service),
        "court_suggestions_service": Provide(provide_court_suggestions_service),
    }

    @get(
        "/",
        summary="List Court Suggestions",
        description="List new-court suggestions by status. `all` returns every suggestion.",
    )
    async def list_suggestions(
        self,
        court_suggestions_service: CourtSuggestionsService,
        status: str = "pending",
    ) -> list[NewCourtSuggestionResponse]:
        return await court_suggestions_service.list_suggestions(status)

    @put(
        "/{suggestion_id:uuid}",
        summary="Review Court Suggestion",
        description="Approve a suggestion, creating the court, or reject it.",
    )
    async def review_suggestion(
        self,
        request: Request[AuthUser, AuthToken, Any],
        suggestion_id: UUID,
        data: Annotated[NewCourtSuggestionReviewRequest, Body(title="Review decision")],
        court_suggestions_service: CourtSuggestionsService,
    ) -> NewCourtSuggestionResponse:
        return await court_suggestions_service.review(suggestion_id, request.user, data)


class AdminEditSuggestionsController(Controller):
    """Edit suggestion dashboard."""

    tags = ["Admin"]
    path = "/admin/edit-suggestions"
    guards = [admin_guard]
    dependencies = {
        "edit_suggestions_repo": Provide(provide_edit_suggestions_repository),
        "courts_repo": Provide(provide_courts_repository),
        "bans_repo": Provide(provide_bans_repository),
        "bans_service": Provide(provide_bans_service),
        "edit_suggestions_service": Provide(provide_edit_suggestions_service),
    }

    @get("/", summary="List Edit Suggestions", description="List edit suggestions across every court.")
    async def list_suggestions(
        self,
        edit_suggestions_service: EditSuggestionsService,
        status: str | None = "pending",
        limit: int | None = None,
    ) -> list[EditSuggestionResponse]:
        return await edit_suggestions_service.list_suggestions(status=status, limit=limit)

    @delete(
        "/{suggestion_id:uuid}",
        summary="Delete Edit Suggestion",
        description="Remove an edit suggestion regardless of its status.",
    )
    async def delete_suggestion(
        self,
        request: Request[AuthUser, AuthToken, Any],
        suggestion_id: UUID,
        edit_suggestions_service: EditSuggestionsService,
        reason: str | None = None,
    ) -> None:
        await edit_suggestions_service.admin_delete(suggestion_id, request.user, reason)


class AdminUserBansController(Controller):
    """User bans."""

    tags = ["Admin"]
    path = "/admin/user-bans"
    guards = [admin_guard]
    dependencies = {
        "bans_repo": Provide(provide_bans_repository),
        "bans_service": Provide(provide_bans_service),
    }

    @get("/", summary="List Bans", description="List bans, optionally for a single user.")
    async def list_bans(
        self,
        bans_service: BansService,
        user_id: Annotated[str | None, Parameter(query="userId")] = None,
    ) -> list[UserBanResponse]:
        return await bans_service.list_bans(user_id)

    @post(
        "/",
        summary="Ban User",
        description="Ban a user. Banning again with the same type updates the existing active ban.",
    )
    async def create_ban(
        self,
        request: Request[AuthUser, AuthToken, Any],
        data: Annotated[UserBanCreateRequest, Body(title="Ban")],
        bans_service: BansService,
    ) -> UserBanResponse:
        return await bans_service.create_ban(data, request.user, request.headers)

    @put("/", summary="Update Ban", description="Change the reason, expiry or active flag of a ban.")
    async def update_ban(
        self,
        data: Annotated[UserBanUpdateRequest, Body(title="Ban changes")],
        bans_service: BansService,
    ) -> UserBanResponse:
        return await bans_service.update_ban(data)

    @delete(
        "/",
        summary="Unban User",
        description="Deactivate a user's bans, or only those of `banType`.",
    )
    async def remove_bans(
        self,
        bans_service: BansService,
        user_id: Annotated[str, Parameter(query="userId")],
        ban_type: Annotated[str | None, Parameter(query="banType")] = None,
    ) -> None:
        await bans_service.remove_bans(user_id, ban_type)
