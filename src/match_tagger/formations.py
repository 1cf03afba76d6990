"""Formation templates for laying out a roster on the tactical board.

Slot coordinates are for a team attacking left to right (toward x = 100);
the away side is mirrored.
"""

import logging
from dataclasses import dataclass

from match_tagger.event_store import EventStore
from match_tagger.exceptions import UnknownFormationError
from match_tagger.models import FieldCoordinates, TeamSide

logger = logging.getLogger(__name__)

# Player position -> formation line
_LINES = {
    "GK": "GK",
    "CB": "DEF",
    "LB": "DEF",
    "RB": "DEF",
    "CDM": "MID",
    "CM": "MID",
    "CAM": "MID",
    "LW": "MID",
    "RW": "MID",
    "ST": "FWD",
}


@dataclass(frozen=True)
class Formation:
    name: str
    description: str
    gk: tuple[float, float]
    defenders: tuple[tuple[float, float], ...]
    midfielders: tuple[tuple[float, float], ...]
    forwards: tuple[tuple[float, float], ...]

    def slots(self, line: str) -> tuple[tuple[float, float], ...]:
        """Slot coordinates for one line (GK, DEF, MID or FWD)."""
        return {
            "GK": (self.gk,),
            "DEF": self.defenders,
            "MID": self.midfielders,
            "FWD": self.forwards,
        }[line]


FORMATIONS: dict[str, Formation] = {
    f.name: f
    for f in (
        Formation(
            name="4-4-2",
            description="Classic balanced formation",
            gk=(10, 50),
            defenders=((25, 15), (25, 35), (25, 65), (25, 85)),
            midfielders=((50, 15), (50, 35), (50, 65), (50, 85)),
            forwards=((75, 40), (75, 60)),
        ),
        Formation(
            name="4-3-3",
            description="Attacking formation",
            gk=(10, 50),
            defenders=((25, 15), (25, 35), (25, 65), (25, 85)),
            midfielders=((50, 25), (50, 50), (50, 75)),
            forwards=((75, 20), (75, 50), (75, 80)),
        ),
        Formation(
            name="3-5-2",
            description="Defensive with wing-backs",
            gk=(10, 50),
            defenders=((25, 25), (25, 50), (25, 75)),
            midfielders=((45, 10), (50, 30), (50, 50), (50, 70), (45, 90)),
            forwards=((75, 40), (75, 60)),
        ),
        Formation(
            name="4-2-3-1",
            description="Modern balanced formation",
            gk=(10, 50),
            defenders=((25, 15), (25, 35), (25, 65), (25, 85)),
            midfielders=((45, 35), (45, 65), (65, 20), (65, 50), (65, 80)),
            forwards=((80, 50),),
        ),
        Formation(
            name="5-3-2",
            description="Ultra defensive formation",
            gk=(10, 50),
            defenders=((25, 10), (25, 30), (25, 50), (25, 70), (25, 90)),
            midfielders=((50, 30), (50, 50), (50, 70)),
            forwards=((75, 40), (75, 60)),
        ),
    )
}


def formation_names() -> list[str]:
    return list(FORMATIONS)


def get_formation(name: str) -> Formation:
    """Look up a template by name, raising UnknownFormationError if absent."""
    try:
        return FORMATIONS[name]
    except KeyError:
        raise UnknownFormationError(name, formation_names()) from None


def apply_formation(store: EventStore, formation: str, side: TeamSide) -> int:
    """Move one team's players onto a formation's slots.

    Players fill their line's slots in roster order; players beyond the
    available slots keep their position. The team's ``formation`` label is
    updated as well.

    Returns:
        Number of players moved.

    Raises:
        UnknownFormationError: If ``formation`` is not a known template.
        NoMatchInitializedError: If the store has no match.
    """
    template = get_formation(formation)
    team = store.require_match("apply_formation").team(side)

    used = {line: 0 for line in ("GK", "DEF", "MID", "FWD")}
    moved = 0
    for player in team.players:
        line = _LINES[player.position]
        slots = template.slots(line)
        if used[line] >= len(slots):
            continue
        x, y = slots[used[line]]
        used[line] += 1
        if side == "away":
            x = 100 - x
        if store.update_player_position(player.id, FieldCoordinates(x=x, y=y)):
            moved += 1

    attr = "home_team" if side == "home" else "away_team"
    current = store.require_match("apply_formation").team(side)
    store.update_match({attr: current.model_copy(update={"formation": formation})})
    logger.info("Applied formation %s to %s team (%d players moved)", formation, side, moved)
    return moved
