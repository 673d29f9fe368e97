"""Court models shared by the API and its clients."""

from __future__ import annotations

import datetime as dt
from typing import Literal
from uuid import UUID

from msgspec import UNSET, Struct, UnsetType

__all__ = (
    "MAX_NUMBER_OF_COURTS",
    "CourtCreateRequest",
    "CourtPatchRequest",
    "CourtResponse",
    "NewCourtSuggestionCreateRequest",
    "NewCourtSuggestionResponse",
    "NewCourtSuggestionReviewRequest",
    "normalize_number_of_courts",
)

MAX_NUMBER_OF_COURTS = 1000


def normalize_number_of_courts(value: int | str | None) -> int | None:
    """Normalize a submitted number of courts.

    A blank string, ``None`` or zero all mean "unknown" and normalize to ``None``;
    zero is never a meaningful count of courts.

    Args:
        value: Raw value from a request body. Numeric strings are accepted.

    Returns:
        The positive court count, or None when unknown.

    Raises:
        ValueError: If the value is not a whole number between 0 and ``MAX_NUMBER_OF_COURTS``.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("Number of courts must be a whole number.")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            value = int(value)
        except ValueError:
            raise ValueError("Number of courts must be a whole number.") from None
    if value < 0 or value > MAX_NUMBER_OF_COURTS:
        raise ValueError(f"Number of courts must be between 0 and {MAX_NUMBER_OF_COURTS}.")
    return value or None


class CourtResponse(Struct, rename="camel"):
    """A court as returned by the API.

    Attributes:
        id: Court identifier.
        name: Court or park name.
        address: Street address.
        city: City.
        state: State or region.
        zip: Postal code.
        latitude: Latitude, if geocoded.
        longitude: Longitude, if geocoded.
        court_type: Free-text court type (e.g. "Outdoor").
        number_of_courts: Number of courts; None means unknown.
        surface: Surface (e.g. "Hard", "Clay").
        court_condition: Reported condition.
        hitting_wall: Whether a hitting wall is available.
        lighted: Whether the courts are lighted.
        is_public: Whether the courts are open to the public.
        membership_required: Whether a membership is required.
        parking: Whether parking is available.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
        average_rating: Average review rating (list view only).
        review_count: Number of reviews (list view only).
    """

    id: UUID
    name: str
    address: str
    city: str | None
    state: str | None
    zip: str | None
    latitude: float | None
    longitude: float | None
    court_type: str | None
    number_of_courts: int | None
    surface: str | None
    court_condition: str | None
    hitting_wall: bool | None
    lighted: bool | None
    is_public: bool | None
    membership_required: bool | None
    parking: bool | None
    created_at: dt.datetime
    updated_at: dt.datetime
    average_rating: float = 0.0
    review_count: int = 0


class CourtCreateRequest(Struct, rename="camel"):
    """Payload for an admin creating a court directly."""

    name: str
    address: str
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    court_type: str | None = None
    number_of_courts: int | str | None = None
    surface: str | None = None
    court_condition: str | None = None
    hitting_wall: bool | None = None
    lighted: bool | None = None
    is_public: bool | None = None
    membership_required: bool | None = None
    parking: bool | None = None


class CourtPatchRequest(Struct, rename="camel"):
    """Partial court update. Only fields that are set are written."""

    name: str | UnsetType = UNSET
    address: str | UnsetType = UNSET
    city: str | None | UnsetType = UNSET
    state: str | None | UnsetType = UNSET
    zip: str | None | UnsetType = UNSET
    latitude: float | None | UnsetType = UNSET
    longitude: float | None | UnsetType = UNSET
    court_type: str | None | UnsetType = UNSET
    number_of_courts: int | str | None | UnsetType = UNSET
    surface: str | None | UnsetType = UNSET
    court_condition: str | None | UnsetType = UNSET
    hitting_wall: bool | None | UnsetType = UNSET
    lighted: bool | None | UnsetType = UNSET
    is_public: bool | None | UnsetType = UNSET
    membership_required: bool | None | UnsetType = UNSET
    parking: bool | None | UnsetType = UNSET

    def to_update_dict(self) -> dict[str, object]:
        """Return the set fields keyed by database column name."""
        return {field: value for field in self.__struct_fields__ if (value := getattr(self, field)) is not UNSET}


class NewCourtSuggestionCreateRequest(Struct, rename="camel"):
    """Payload for suggesting a court that is not in the directory yet."""

    name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    latitude: float | None = None
    longitude: float | None = None
    court_type: str | None = None
    number_of_courts: int | str | None = None
    surface: str | None = None
    court_condition: str | None = None
    hitting_wall: bool | None = None
    lighted: bool | None = None
    membership_required: bool | None = None
    parking: bool | None = None


class NewCourtSuggestionResponse(Struct, rename="camel"):
    """A suggested new court and its review state."""

    id: UUID
    suggested_by: str
    suggested_by_name: str
    name: str
    address: str
    city: str
    state: str
    zip: str
    latitude: float | None
    longitude: float | None
    court_type: str | None
    number_of_courts: int | None
    surface: str | None
    court_condition: str | None
    hitting_wall: bool | None
    lighted: bool | None
    membership_required: bool | None
    parking: bool | None
    status: Literal["pending", "approved", "rejected"]
    reviewed_by: str | None
    reviewed_by_name: str | None
    review_note: str | None
    reviewed_at: dt.datetime | None
    created_at: dt.datetime
    court_id: UUID | None = None


class NewCourtSuggestionReviewRequest(Struct, rename="camel"):
    """Admin decision on a suggested new court."""

    action: str
    review_note: str | None = None
