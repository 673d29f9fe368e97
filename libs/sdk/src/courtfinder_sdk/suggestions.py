"""Court edit suggestion models and the catalogue of suggestable fields."""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any, Literal
from uuid import UUID

from msgspec import Struct

from .courts import CourtResponse

__all__ = (
    "FIELD_DECISIONS",
    "MAX_REASON_LENGTH",
    "MAX_REVIEW_NOTE_LENGTH",
    "SUGGESTION_FIELDS",
    "EditSuggestionCreateRequest",
    "EditSuggestionCreatedEvent",
    "EditSuggestionDetailResponse",
    "EditSuggestionResolvedEvent",
    "EditSuggestionResponse",
    "EditSuggestionReviewRequest",
    "EditSuggestionReviewResponse",
    "EditSuggestionUpdateRequest",
    "FieldDecision",
    "FieldReviewResponse",
    "FieldSpec",
    "SuggestionField",
    "SuggestionFieldChange",
    "SuggestionStatus",
    "format_field_value",
)

MAX_REASON_LENGTH = 500
MAX_REVIEW_NOTE_LENGTH = 500

SuggestionStatus = Literal["pending", "approved", "rejected"]
FieldDecision = Literal["approved", "rejected"]
FIELD_DECISIONS: tuple[str, ...] = ("approved", "rejected")


class SuggestionField(str, Enum):
    """Court attributes a user can propose a new value for."""

    NAME = "name"
    ADDRESS = "address"
    CITY = "city"
    STATE = "state"
    ZIP = "zip"
    COURT_TYPE = "courtType"
    NUMBER_OF_COURTS = "numberOfCourts"
    SURFACE = "surface"
    CONDITION = "condition"
    TYPE = "type"
    HITTING_WALL = "hittingWall"
    LIGHTS = "lights"
    IS_PUBLIC = "isPublic"


class FieldSpec(Struct, frozen=True):
    """How a suggestable field is stored and displayed.

    Attributes:
        suggestion_column: Column on ``court_edit_suggestions`` holding the proposed value.
        court_column: Column on ``courts`` the value is applied to.
        label: Human readable label.
        kind: Value kind, one of ``text``, ``int`` or ``bool``.
    """

    suggestion_column: str
    court_column: str
    label: str
    kind: Literal["text", "int", "bool"] = "text"


SUGGESTION_FIELDS: dict[SuggestionField, FieldSpec] = {
    SuggestionField.NAME: FieldSpec("suggested_name", "name", "Name"),
    SuggestionField.ADDRESS: FieldSpec("suggested_address", "address", "Address"),
    SuggestionField.CITY: FieldSpec("suggested_city", "city", "City"),
    SuggestionField.STATE: FieldSpec("suggested_state", "state", "State"),
    SuggestionField.ZIP: FieldSpec("suggested_zip", "zip", "ZIP Code"),
    SuggestionField.COURT_TYPE: FieldSpec("suggested_court_type", "court_type", "Court Type"),
    SuggestionField.NUMBER_OF_COURTS: FieldSpec(
        "suggested_number_of_courts", "number_of_courts", "Number of Courts", "int"
    ),
    SuggestionField.SURFACE: FieldSpec("suggested_surface", "surface", "Surface"),
    SuggestionField.CONDITION: FieldSpec("suggested_condition", "court_condition", "Condition"),
    SuggestionField.TYPE: FieldSpec("suggested_type", "court_type", "Type"),
    SuggestionField.HITTING_WALL: FieldSpec("suggested_hitting_wall", "hitting_wall", "Hitting Wall", "bool"),
    SuggestionField.LIGHTS: FieldSpec("suggested_lights", "lighted", "Lights", "bool"),
    SuggestionField.IS_PUBLIC: FieldSpec("suggested_is_public", "is_public", "Public Access", "bool"),
}


def format_field_value(field: SuggestionField, value: object) -> str:
    """Render a field value for display in a review screen.

    Args:
        field: Field the value belongs to.
        value: Stored value, possibly None.

    Returns:
        Display string. Unknown court counts render as ``Unknown``, booleans as
        ``Yes``/``No`` and missing text as ``Not specified``.
    """
    kind = SUGGESTION_FIELDS[field].kind
    if kind == "int":
        return "Unknown" if value is None else str(value)
    if kind == "bool":
        if value is None:
            return "Not specified"
        return "Yes" if value else "No"
    if value is None or (isinstance(value, str) and not value.strip()):
        return "Not specified"
    return str(value)


class EditSuggestionCreateRequest(Struct, rename="camel"):
    """Payload for proposing changes to an existing court.

    Every ``suggested_*`` attribute is optional; omitted or null means no change is
    proposed for that field. At least one must be provided.
    """

    reason: str
    suggested_name: str | None = None
    suggested_address: str | None = None
    suggested_city: str | None = None
    suggested_state: str | None = None
    suggested_zip: str | None = None
    suggested_court_type: str | None = None
    suggested_number_of_courts: int | str | None = None
    suggested_surface: str | None = None
    suggested_condition: str | None = None
    suggested_type: str | None = None
    suggested_hitting_wall: bool | None = None
    suggested_lights: bool | None = None
    suggested_is_public: bool | None = None

    def to_field_values(self) -> dict[SuggestionField, object]:
        """Return the proposed values keyed by field, skipping unset ones."""
        values: dict[SuggestionField, object] = {}
        for field, spec in SUGGESTION_FIELDS.items():
            value = getattr(self, spec.suggestion_column)
            if value is None:
                continue
            if isinstance(value, str) and spec.kind == "text":
                value = value.strip()
                if not value:
                    continue
            values[field] = value
        return values


class EditSuggestionUpdateRequest(EditSuggestionCreateRequest):
    """Payload for the author replacing a pending suggestion's content."""


class EditSuggestionReviewRequest(Struct, rename="camel"):
    """Admin decision on a suggestion or on one of its fields.

    Attributes:
        status: ``approved`` or ``rejected``.
        review_note: Optional note shown to the author.
        field: When set, the decision applies to this field only.
    """

    status: str
    review_note: str | None = None
    field: str | None = None


class FieldReviewResponse(Struct, rename="camel"):
    """Decision recorded for a single field of a suggestion."""

    field: SuggestionField
    status: FieldDecision
    reviewed_by: str
    reviewed_by_name: str | None
    review_note: str | None
    reviewed_at: dt.datetime


class EditSuggestionResponse(Struct, rename="camel"):
    """A court edit suggestion."""

    id: UUID
    court_id: UUID
    submitted_by_user_id: str
    submitted_by_user_name: str | None
    reason: str
    status: SuggestionStatus
    review_note: str | None
    reviewed_by_user_id: str | None
    reviewed_by_user_name: str | None
    reviewed_at: dt.datetime | None
    created_at: dt.datetime
    updated_at: dt.datetime
    suggested_name: str | None = None
    suggested_address: str | None = None
    suggested_city: str | None = None
    suggested_state: str | None = None
    suggested_zip: str | None = None
    suggested_court_type: str | None = None
    suggested_number_of_courts: int | None = None
    suggested_surface: str | None = None
    suggested_condition: str | None = None
    suggested_type: str | None = None
    suggested_hitting_wall: bool | None = None
    suggested_lights: bool | None = None
    suggested_is_public: bool | None = None
    court_name: str | None = None
    proposed_fields: list[SuggestionField] = []
    field_reviews: list[FieldReviewResponse] = []


class SuggestionFieldChange(Struct, rename="camel"):
    """One proposed change compared against the court's current value."""

    field: SuggestionField
    label: str
    current_value: Any
    suggested_value: Any
    current_display: str
    suggested_display: str
    status: SuggestionStatus


class EditSuggestionDetailResponse(Struct, rename="camel"):
    """A suggestion together with a per-field comparison to the court."""

    suggestion: EditSuggestionResponse
    court: CourtResponse
    changes: list[SuggestionFieldChange]


class EditSuggestionReviewResponse(Struct, rename="camel"):
    """Result of a review: the updated suggestion and the court after any applied changes."""

    suggestion: EditSuggestionResponse
    court: CourtResponse


class EditSuggestionCreatedEvent(Struct):
    """Published when a new edit suggestion is submitted."""

    suggestion_id: UUID
    court_id: UUID
    submitted_by: str


class EditSuggestionResolvedEvent(Struct):
    """Published after an admin reviews a suggestion or one of its fields."""

    suggestion_id: UUID
    court_id: UUID
    status: SuggestionStatus
    reviewed_by: str
    field: SuggestionField | None = None
