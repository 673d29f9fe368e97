"""Domain exceptions for court edit suggestions.

These exceptions represent business rule violations.
They are raised by services and translated to HTTP responses by the app.
"""

from __future__ import annotations

from uuid import UUID

from utilities.errors import DomainError


class SuggestionsError(DomainError):
    """Base exception for edit suggestion domain."""


# Validation errors


class SuggestionValidationError(SuggestionsError):
    """Suggestion payload or review request failed validation."""

    def __init__(self, message: str, field: str = "unknown") -> None:
        super().__init__(message, field=field)


class NoProposedChangesError(SuggestionsError):
    """Suggestion does not propose any field."""

    def __init__(self) -> None:
        super().__init__("At least one suggested change is required.")


class FieldNotProposedError(SuggestionsError):
    """A field decision targets a field the suggestion does not propose."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Field '{field}' is not part of this suggestion.", field=field)


# Lookup errors


class SuggestionNotFoundError(SuggestionsError):
    """Suggestion does not exist."""

    category = "not_found"

    def __init__(self, suggestion_id: UUID) -> None:
        super().__init__(f"Edit suggestion not found: {suggestion_id}", suggestion_id=suggestion_id)


# State errors


class DuplicatePendingSuggestionError(SuggestionsError):
    """User already has a pending suggestion for this court."""

    category = "conflict"

    def __init__(self, court_id: UUID, existing_suggestion_id: UUID | None = None) -> None:
        super().__init__(
            "You already have a pending edit suggestion for this court.",
            court_id=court_id,
            existing_suggestion_id=existing_suggestion_id,
        )


class SuggestionNotPendingError(SuggestionsError):
    """Suggestion was already resolved."""

    category = "conflict"

    def __init__(self, suggestion_id: UUID, status: str) -> None:
        super().__init__(
            f"Edit suggestion has already been {status}.",
            suggestion_id=suggestion_id,
            status=status,
        )


class FieldAlreadyReviewedError(SuggestionsError):
    """A decision was already recorded for this field."""

    category = "conflict"

    def __init__(self, field: str, status: str) -> None:
        super().__init__(f"Field '{field}' has already been {status}.", field=field, status=status)


class SuggestionPartiallyReviewedError(SuggestionsError):
    """Suggestion cannot change once any of its fields has a decision."""

    category = "conflict"

    def __init__(self, suggestion_id: UUID) -> None:
        super().__init__(
            "Edit suggestion is already under review and can no longer be changed.",
            suggestion_id=suggestion_id,
        )


# Permission errors


class NotSuggestionAuthorError(SuggestionsError):
    """Only the author may change or withdraw a suggestion."""

    category = "forbidden"

    def __init__(self) -> None:
        super().__init__("You can only modify your own edit suggestions.")


class SelfReviewError(SuggestionsError):
    """Admins may not review their own suggestions."""

    category = "forbidden"

    def __init__(self) -> None:
        super().__init__("You cannot review your own edit suggestion.")
