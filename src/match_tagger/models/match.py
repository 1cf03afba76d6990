"""Pydantic v2 models for match setup: players, teams and the match."""

import warnings
from datetime import datetime
from typing import Literal

from pydantic import Field, model_validator
from typing_extensions import Self

from .base import CamelModel, FieldCoordinates

TeamSide = Literal["home", "away"]

PlayerPosition = Literal[
    "GK",   # Goalkeeper
    "CB",   # Center back
    "LB",   # Left back
    "RB",   # Right back
    "CDM",  # Defensive midfielder
    "CM",   # Central midfielder
    "CAM",  # Attacking midfielder
    "LW",   # Left winger
    "RW",   # Right winger
    "ST",   # Striker
]

MatchStatus = Literal[
    "not_started",
    "first_half",
    "half_time",
    "second_half",
    "extra_time_first_half",
    "extra_time_second_half",
    "penalty_shootout",
    "finished",
]


class Player(CamelModel):
    """A player on one of the two rosters."""

    id: str = Field(min_length=1)
    name: str
    jersey_number: int = Field(ge=0)
    team: TeamSide
    position: PlayerPosition
    field_position: FieldCoordinates = Field(
        default_factory=lambda: FieldCoordinates(x=50.0, y=50.0)
    )


class Team(CamelModel):
    """A team with its roster and formation label (e.g. "4-3-3")."""

    id: str = Field(min_length=1)
    name: str
    formation: str = "4-4-2"
    players: list[Player] = Field(default_factory=list)
    logo: str | None = None

    def find_player(self, player_id: str) -> Player | None:
        for player in self.players:
            if player.id == player_id:
                return player
        return None


class Match(CamelModel):
    """The match being tagged. Duration and timestamps are in seconds."""

    id: str = Field(min_length=1)
    home_team: Team
    away_team: Team
    date: datetime
    venue: str = ""
    competition: str = ""
    duration: float = Field(default=90 * 60, ge=0)
    status: MatchStatus = "not_started"
    current_timestamp: float = Field(default=0.0, ge=0)
    video_url: str | None = None

    def team(self, side: TeamSide) -> Team:
        return self.home_team if side == "home" else self.away_team

    def find_player(self, player_id: str) -> Player | None:
        """Look a player up in either roster."""
        return self.home_team.find_player(player_id) or self.away_team.find_player(
            player_id
        )

    @model_validator(mode="after")
    def check_teams_different(self) -> Self:
        """Home and away teams must have different IDs."""
        if self.home_team.id == self.away_team.id:
            raise ValueError(
                f"home_team and away_team ids are identical ({self.home_team.id})"
            )
        return self

    @model_validator(mode="after")
    def warn_roster_side_mismatch(self) -> Self:
        """Warn when a player's declared side differs from the roster holding it."""
        for side in ("home", "away"):
            for player in self.team(side).players:
                if player.team != side:
                    warnings.warn(
                        f"Player {player.id} declares team={player.team!r} "
                        f"but is listed in the {side} roster of match {self.id}",
                        stacklevel=2,
                    )
        return self
