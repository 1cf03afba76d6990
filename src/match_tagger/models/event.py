"""Pydantic v2 models for tagged match events and the export payload.

One tagged-variant record covers every event type: ``event_type`` is the
discriminant and type-specific values (xG, onTarget, assistPlayerId, ...)
live in ``metadata``. Which of them matter for a given type is described by
``match_tagger.taxonomy``.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from typing_extensions import Self

from match_tagger.geometry import calculate_direction, calculate_distance

from .base import CamelModel, FieldCoordinates
from .match import Match, TeamSide

EventOutcome = Literal["successful", "unsuccessful", "neutral"]

MatchPeriod = Literal[
    "first_half",
    "second_half",
    "extra_time_first",
    "extra_time_second",
    "penalty_shootout",
]

# Variant keys that older exports carry at the top level of an event record
# (one typed interface per event kind). They are folded into ``metadata``.
VARIANT_FIELDS = frozenset({
    "passType",
    "endCoordinates",
    "progressive",
    "bodyPart",
    "onTarget",
    "goalMouthLocation",
    "xG",
    "blocked",
    "assistPlayerId",
    "goalType",
    "tackleType",
    "wonPossession",
    "foul",
    "opponentId",
    "foulType",
    "cardGiven",
    "victimPlayerId",
    "playerOutId",
    "playerInId",
    "reason",
    "subAction",
    "subEvent",
})


class EventDraft(CamelModel):
    """An event before the store assigns identity and timestamps."""

    match_id: str = Field(min_length=1)
    timestamp: float  # video seconds; range is a soft (warning) check
    event_type: str = Field(min_length=1)
    team: TeamSide
    player_id: str = Field(min_length=1)
    secondary_player_ids: list[str] | None = None
    coordinates: FieldCoordinates
    # Dual-position events (pass, shot, cross, ...)
    origin_coordinates: FieldCoordinates | None = None
    destination_coordinates: FieldCoordinates | None = None
    receiver_id: str | None = None
    distance: float | None = None  # meters, derived
    direction: int | None = None  # degrees [0, 360), derived
    outcome: EventOutcome = "successful"
    period: MatchPeriod = "first_half"
    minute: int = Field(default=0, ge=0)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def fold_variant_fields(cls, data: Any) -> Any:
        """Move top-level variant keys (e.g. ``xG``) into ``metadata``."""
        if not isinstance(data, dict):
            return data
        variant = {k: v for k, v in data.items() if k in VARIANT_FIELDS}
        if not variant:
            return data
        folded = {k: v for k, v in data.items() if k not in VARIANT_FIELDS}
        metadata = dict(folded.get("metadata") or {})
        for key, value in variant.items():
            metadata.setdefault(key, value)
        folded["metadata"] = metadata
        return folded

    @model_validator(mode="after")
    def derive_geometry(self) -> Self:
        """distance/direction always follow origin and destination when both exist."""
        if self.origin_coordinates is not None and self.destination_coordinates is not None:
            self.distance = calculate_distance(
                self.origin_coordinates, self.destination_coordinates
            )
            self.direction = calculate_direction(
                self.origin_coordinates, self.destination_coordinates
            )
        return self

    def detail(self, key: str, default: Any = None) -> Any:
        """Read a variant value from ``metadata``."""
        return self.metadata.get(key, default)

    @property
    def is_dual_position(self) -> bool:
        return (
            self.origin_coordinates is not None
            and self.destination_coordinates is not None
        )


class LiveEvent(EventDraft):
    """A recorded event as held by the event store."""

    id: str = Field(min_length=1)
    created_at: datetime
    updated_at: datetime


class ExportPayload(CamelModel):
    """The JSON export shape: ``{match, events, exportedAt}``.

    Unknown top-level keys are rejected so that arbitrary JSON is not
    mistaken for an export.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    match: Match | None = None
    events: list[LiveEvent]
    exported_at: datetime
