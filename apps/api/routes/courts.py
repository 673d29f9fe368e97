"""Public court directory routes."""

from __future__ import annotations

from uuid import UUID

from courtfinder_sdk.courts import CourtResponse
from litestar import Controller, get
from litestar.di import Provide

from repository.courts_repository import provide_courts_repository
from services.courts_service import CourtsService, provide_courts_service


class CourtsController(Controller):
    """Court list and detail."""

    tags = ["Courts"]
    path = "/"
    dependencies = {
        "courts_repo": Provide(provide_courts_repository),
        "courts_service": Provide(provide_courts_service),
    }

    @get(
        "/courts",
        summary="List Courts",
        description="List every court with its average rating and review count.",
        opt={"exclude_from_auth": True},
    )
    async def list_courts(self, courts_service: CourtsService) -> list[CourtResponse]:
        return await courts_service.list_courts()

    @get(
        "/tennis-courts/{court_id:uuid}",
        summary="Get Court",
        description="Get a single court.",
        opt={"exclude_from_auth": True},
    )
    async def get_court(self, court_id: UUID, courts_service: CourtsService) -> CourtResponse:
        return await courts_service.get_court(court_id)
