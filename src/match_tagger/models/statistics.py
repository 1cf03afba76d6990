"""Pydantic v2 models for derived statistics snapshots.

These are read-only views recomputed from the event log; they carry no
cross-field validators so that inconsistent snapshots can still be built
and reported by the validation rules.
"""

from datetime import datetime

from pydantic import Field

from .base import CamelModel
from .match import TeamSide


class TeamStatistics(CamelModel):
    """Aggregated statistics for one team."""

    team_id: str
    possession: float = 0.0  # successful-pass share, percent
    # Passing
    total_passes: int = 0
    successful_passes: int = 0
    pass_accuracy: float = 0.0
    forward_passes: int = 0
    backward_passes: int = 0
    long_passes: int = 0
    short_passes: int = 0
    # Shooting
    shots: int = 0
    shots_on_target: int = 0
    shots_off_target: int = 0  # derived, can go negative on inconsistent data
    blocked_shots: int = 0
    goals: int = 0
    xg: float = Field(default=0.0, alias="xG")
    # Attacking
    crosses: int = 0
    successful_crosses: int = 0
    corners: int = 0
    offsides: int = 0
    dribbles: int = 0
    successful_dribbles: int = 0
    # Defending
    tackles: int = 0
    successful_tackles: int = 0
    interceptions: int = 0
    clearances: int = 0
    # Discipline
    fouls: int = 0
    fouls_suffered: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    # Duels
    aerial_duels: int = 0
    aerial_duels_won: int = 0
    ground_duels: int = 0
    ground_duels_won: int = 0
    # Set pieces
    free_kicks: int = 0
    penalties: int = 0
    penalties_scored: int = 0
    throw_ins: int = 0
    goal_kicks: int = 0


class MatchStatistics(CamelModel):
    """Both teams' statistics at a point in time."""

    match_id: str
    home_team: TeamStatistics
    away_team: TeamStatistics
    computed_at: datetime

    def team(self, side: TeamSide) -> TeamStatistics:
        return self.home_team if side == "home" else self.away_team


class PlayerStatistics(CamelModel):
    """Aggregated statistics for one player.

    ``minutes_played`` and ``touches_in_box`` cannot be derived from the
    current event vocabulary and stay ``None``.
    """

    player_id: str
    match_id: str
    minutes_played: int | None = None
    # Passing
    passes: int = 0
    passes_completed: int = 0
    pass_accuracy: float = 0.0
    key_passes: int = 0
    assists: int = 0
    # Shooting
    shots: int = 0
    shots_on_target: int = 0
    goals: int = 0
    xg: float = Field(default=0.0, alias="xG")
    # Defending
    tackles: int = 0
    interceptions: int = 0
    clearances: int = 0
    # Attacking
    dribbles: int = 0
    successful_dribbles: int = 0
    crosses: int = 0
    # Discipline
    fouls: int = 0
    fouls_suffered: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    # Duels
    duels_won: int = 0
    duels_lost: int = 0
    aerial_duels_won: int = 0
    # Touches
    touches: int = 0
    touches_in_box: int | None = None
    distance_covered: float | None = None  # kilometers


class HeatMapZone(CamelModel):
    """One grid cell of a heat map, in field percentages."""

    x: float
    y: float
    width: float
    height: float
    touches: int = 0
    intensity: float = 0.0  # 0-1, relative to the busiest zone


class HeatMap(CamelModel):
    player_id: str
    match_id: str
    zones: list[HeatMapZone] = Field(default_factory=list)
