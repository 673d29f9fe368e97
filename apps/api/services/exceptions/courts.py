"""Domain exceptions for courts and new-court suggestions."""

from __future__ import annotations

from uuid import UUID

from utilities.errors import DomainError


class CourtsError(DomainError):
    """Base exception for courts domain."""


class CourtValidationError(CourtsError):
    """Court payload failed validation."""

    def __init__(self, message: str, field: str = "unknown") -> None:
        super().__init__(message, field=field)


class CourtNotFoundError(CourtsError):
    """Court does not exist."""

    category = "not_found"

    def __init__(self, court_id: UUID) -> None:
        super().__init__(f"Court not found: {court_id}", court_id=court_id)


class CourtSuggestionNotFoundError(CourtsError):
    """Suggested new court does not exist."""

    category = "not_found"

    def __init__(self, suggestion_id: UUID) -> None:
        super().__init__(f"Court suggestion not found: {suggestion_id}", suggestion_id=suggestion_id)


class DuplicateCourtAddressError(CourtsError):
    """A court or a pending suggestion already exists at this address."""

    category = "conflict"

    def __init__(self, address: str, *, pending: bool = False) -> None:
        where = "A pending suggestion" if pending else "A court"
        super().__init__(f"{where} already exists at this address.", address=address)


class CourtSuggestionAlreadyReviewedError(CourtsError):
    """Suggested new court was already approved or rejected."""

    category = "conflict"

    def __init__(self, suggestion_id: UUID, status: str) -> None:
        super().__init__(
            f"Court suggestion has already been {status}.",
            suggestion_id=suggestion_id,
            status=status,
        )
