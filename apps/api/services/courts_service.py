"""Service for courts business logic."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from uuid import UUID

from asyncpg import Pool
from courtfinder_sdk.courts import (
    CourtCreateRequest,
    CourtPatchRequest,
    CourtResponse,
    normalize_number_of_courts,
)
from litestar.datastructures import State

from repository.courts_repository import CourtsRepository
from repository.exceptions import CheckConstraintViolationError
from services.exceptions.courts import CourtNotFoundError, CourtValidationError
from services.photo_storage_service import PhotoStorageService
from utilities.court_cache import CourtListCache

from .base import BaseService

log = logging.getLogger(__name__)


def clean_court_values(values: dict[str, Any]) -> dict[str, Any]:
    """Validate and normalize court column values before they are written.

    Raises:
        CourtValidationError: If a required text column is blank or the number of
            courts is invalid.
    """
    cleaned = dict(values)
    for column in ("name", "address"):
        if column in cleaned:
            text = (cleaned[column] or "").strip()
            if not text:
                raise CourtValidationError(f"Court {column} is required.", field=column)
            cleaned[column] = text
    if "number_of_courts" in cleaned:
        try:
            cleaned["number_of_courts"] = normalize_number_of_courts(cleaned["number_of_courts"])
        except ValueError as e:
            raise CourtValidationError(str(e), field="numberOfCourts") from e
    return cleaned


class CourtsService(BaseService):
    """Service for courts business logic."""

    def __init__(
        self,
        pool: Pool,
        state: State,
        courts_repo: CourtsRepository,
        court_cache: CourtListCache[CourtResponse],
    ) -> None:
        super().__init__(pool, state)
        self._courts_repo = courts_repo
        self._court_cache = court_cache

    async def list_courts(self) -> list[CourtResponse]:
        """List every court with its rating summary, served from the court cache."""
        return await self._court_cache.get(self._load_courts)

    async def _load_courts(self) -> list[CourtResponse]:
        rows = await self._courts_repo.fetch_courts()
        log.debug("Loaded %d courts into the court cache", len(rows))
        return [CourtResponse(**row) for row in rows]

    async def get_court(self, court_id: UUID) -> CourtResponse:
        row = await self._courts_repo.fetch_court(court_id)
        if row is None:
            raise CourtNotFoundError(court_id)
        return CourtResponse(**row)

    async def create_court(self, data: CourtCreateRequest) -> CourtResponse:
        values = clean_court_values({field: getattr(data, field) for field in data.__struct_fields__})
        try:
            row = await self._courts_repo.create_court(values)
        except CheckConstraintViolationError as e:
            raise CourtValidationError("Court values violate a database constraint.", field=e.constraint_name) from e
        self._court_cache.invalidate()
        log.info("Created court %s (%s)", row["id"], row["name"])
        return CourtResponse(**row)

    async def update_court(self, court_id: UUID, data: CourtPatchRequest) -> CourtResponse:
        """Apply a partial update. Fields absent from the request are left untouched.

        Raises:
            CourtNotFoundError: If the court does not exist.
            CourtValidationError: If a value is invalid.
        """
        values = clean_court_values(data.to_update_dict())
        try:
            row = await self._courts_repo.update_court(court_id, values)
        except CheckConstraintViolationError as e:
            raise CourtValidationError("Court values violate a database constraint.", field=e.constraint_name) from e
        if row is None:
            raise CourtNotFoundError(court_id)
        self._court_cache.invalidate()
        return CourtResponse(**row)

    async def delete_court(self, court_id: UUID, photo_storage: PhotoStorageService) -> None:
        """Delete a court and everything attached to it.

        Stored photo objects are removed after the database delete, best effort.

        Raises:
            CourtNotFoundError: If the court does not exist.
        """
        async with self._pool.acquire() as conn, conn.transaction():
            urls = await self._courts_repo.fetch_court_media_urls(court_id, conn=conn)  # type: ignore[arg-type]
            deleted = await self._courts_repo.delete_court(court_id, conn=conn)  # type: ignore[arg-type]
        if not deleted:
            raise CourtNotFoundError(court_id)
        self._court_cache.invalidate()
        log.info("Deleted court %s", court_id)

        if urls:
            removed = await asyncio.to_thread(photo_storage.delete_photos, urls)
            log.info("Removed %d of %d stored photo(s) for court %s", removed, len(urls), court_id)


async def provide_courts_service(state: State, courts_repo: CourtsRepository) -> CourtsService:
    """Litestar DI provider for service.

    Args:
        state: Application state.
        courts_repo: Courts repository instance.

    Returns:
        CourtsService instance.
    """
    return CourtsService(state.db_pool, state, courts_repo, state.court_cache)
