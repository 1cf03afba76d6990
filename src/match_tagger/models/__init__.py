"""Pydantic v2 models for the match tagger domain.

Re-exports all model classes for convenient import::

    from match_tagger.models import Match, LiveEvent, MatchStatistics, ...
"""

from .base import CamelModel, FieldCoordinates
from .event import (
    VARIANT_FIELDS,
    EventDraft,
    EventOutcome,
    ExportPayload,
    LiveEvent,
    MatchPeriod,
)
from .match import Match, MatchStatus, Player, PlayerPosition, Team, TeamSide
from .statistics import (
    HeatMap,
    HeatMapZone,
    MatchStatistics,
    PlayerStatistics,
    TeamStatistics,
)
from .validation import Severity, ValidationIssue, ValidationResult

__all__ = [
    "CamelModel",
    "FieldCoordinates",
    "Player",
    "PlayerPosition",
    "Team",
    "TeamSide",
    "Match",
    "MatchStatus",
    "EventDraft",
    "LiveEvent",
    "EventOutcome",
    "MatchPeriod",
    "ExportPayload",
    "VARIANT_FIELDS",
    "TeamStatistics",
    "MatchStatistics",
    "PlayerStatistics",
    "HeatMap",
    "HeatMapZone",
    "ValidationIssue",
    "ValidationResult",
    "Severity",
]
