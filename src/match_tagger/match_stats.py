"""Statistics aggregation: derive team, player and heat map snapshots.

Every function is a pure read over a match and its event log. Snapshots are
recomputed on request; nothing is cached or updated incrementally. Events
are counted under their ``taxonomy.stat_key`` so that action-vocabulary
events (e.g. ``card`` / ``yellow``) feed the same counters as their legacy
equivalents (``yellow_card``).

Usage::

    stats = compute_match_statistics(store.match, store.events)
    stats.home_team.pass_accuracy
"""

import logging
import math
from collections import Counter
from datetime import datetime, timezone
from typing import Iterable

from match_tagger.config import TaggerConfig
from match_tagger.geometry import pass_length_band
from match_tagger.models import (
    HeatMap,
    HeatMapZone,
    LiveEvent,
    Match,
    MatchStatistics,
    PlayerStatistics,
    TeamSide,
    TeamStatistics,
)
from match_tagger.taxonomy import SHOT_TYPES, requires_pitch_position, stat_key

logger = logging.getLogger(__name__)

# Periods in which the home team attacks toward x = 100
_HOME_ATTACKS_RIGHT = {"first_half", "extra_time_first"}

_DUEL_KEYS = {"tackle", "aerial_duel"}


def event_key(event: LiveEvent) -> str:
    """Counter name for an event (its type normalized through the taxonomy)."""
    return stat_key(event.event_type, event.detail("subAction"))


def _xg(event: LiveEvent) -> float:
    """Expected-goals value from the shot metadata; 0 when absent or unusable."""
    value = event.detail("xG")
    if value is None:
        return 0.0
    try:
        xg = float(value)
    except (TypeError, ValueError):
        xg = math.nan
    if not math.isfinite(xg):
        logger.warning("Ignoring non-numeric xG %r on event %s", value, event.id)
        return 0.0
    return xg


def _percentage(part: int, whole: int) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def attack_sign(team: TeamSide, period: str) -> int:
    """+1 if ``team`` attacks toward x = 100 in ``period``, else -1."""
    home_right = period in _HOME_ATTACKS_RIGHT
    if team == "home":
        return 1 if home_right else -1
    return -1 if home_right else 1


def compute_team_statistics(
    team: TeamSide, events: Iterable[LiveEvent], match: Match
) -> TeamStatistics:
    """Statistics for one side. Possession is left at 0 (it needs both teams)."""
    totals: Counter[str] = Counter()
    successes: Counter[str] = Counter()
    fouls_suffered = 0
    shots_on_target = 0
    blocked_shots = 0
    xg = 0.0
    forward = backward = short = long = 0

    for event in events:
        key = event_key(event)
        if event.team != team:
            if key == "foul":
                fouls_suffered += 1
            continue

        totals[key] += 1
        if event.outcome == "successful":
            successes[key] += 1

        if key in SHOT_TYPES:
            xg += _xg(event)
            if event.detail("onTarget") is True:
                shots_on_target += 1
            if key == "shot" and event.detail("blocked") is True:
                blocked_shots += 1

        elif key == "pass" and event.is_dual_position:
            if pass_length_band(event.distance) == "short":
                short += 1
            else:
                long += 1
            dx = event.destination_coordinates.x - event.origin_coordinates.x
            progress = dx * attack_sign(team, event.period)
            if progress > 0:
                forward += 1
            elif progress < 0:
                backward += 1

    shots = totals["shot"] + totals["goal"]
    stats = TeamStatistics(
        team_id=match.team(team).id,
        # Passing
        total_passes=totals["pass"],
        successful_passes=successes["pass"],
        pass_accuracy=_percentage(successes["pass"], totals["pass"]),
        forward_passes=forward,
        backward_passes=backward,
        long_passes=long,
        short_passes=short,
        # Shooting
        shots=shots,
        shots_on_target=shots_on_target,
        # Not clamped: a negative value flags inconsistent shot flags
        shots_off_target=shots - shots_on_target - blocked_shots,
        blocked_shots=blocked_shots,
        goals=totals["goal"],
        xg=xg,
        # Attacking
        crosses=totals["cross"],
        successful_crosses=successes["cross"],
        corners=totals["corner"],
        offsides=totals["offside"],
        dribbles=totals["dribble"],
        successful_dribbles=successes["dribble"],
        # Defending
        tackles=totals["tackle"],
        successful_tackles=successes["tackle"],
        interceptions=totals["interception"],
        clearances=totals["clearance"],
        # Discipline
        fouls=totals["foul"],
        fouls_suffered=fouls_suffered,
        yellow_cards=totals["yellow_card"],
        red_cards=totals["red_card"],
        # Duels
        aerial_duels=totals["aerial_duel"],
        aerial_duels_won=successes["aerial_duel"],
        ground_duels=totals["ground_duel"],
        ground_duels_won=successes["ground_duel"],
        # Set pieces
        free_kicks=totals["free_kick"],
        penalties=totals["penalty"],
        penalties_scored=successes["penalty"],
        throw_ins=totals["throw_in"],
        goal_kicks=totals["goal_kick"],
    )
    return stats


def compute_match_statistics(match: Match, events: Iterable[LiveEvent]) -> MatchStatistics:
    """Both teams' statistics plus the successful-pass possession proxy.

    Possession is ``successful passes / both teams' successful passes``;
    with no successful passes at all both sides stay at 0.
    """
    events = list(events)
    home = compute_team_statistics("home", events, match)
    away = compute_team_statistics("away", events, match)

    total = home.successful_passes + away.successful_passes
    if total > 0:
        home.possession = home.successful_passes / total * 100
        away.possession = away.successful_passes / total * 100

    logger.debug(
        "Computed statistics for match %s over %d events", match.id, len(events)
    )
    return MatchStatistics(
        match_id=match.id,
        home_team=home,
        away_team=away,
        computed_at=datetime.now(timezone.utc),
    )


def compute_player_statistics(
    player_id: str, match_id: str, events: Iterable[LiveEvent]
) -> PlayerStatistics:
    """Statistics for one player.

    Assists and fouls suffered come from other players' events (goal
    ``assistPlayerId`` and foul ``victimPlayerId``), so the full log is
    needed, not just the player's own events.
    """
    totals: Counter[str] = Counter()
    successes: Counter[str] = Counter()
    assists = fouls_suffered = 0
    shots_on_target = key_passes = duels_lost = touches = 0
    xg = 0.0

    for event in events:
        key = event_key(event)
        if key == "goal" and event.detail("assistPlayerId") == player_id:
            assists += 1
        if key == "foul" and event.detail("victimPlayerId") == player_id:
            fouls_suffered += 1
        if event.player_id != player_id:
            continue

        touches += 1
        totals[key] += 1
        if event.outcome == "successful":
            successes[key] += 1

        if key in SHOT_TYPES:
            xg += _xg(event)
            if event.detail("onTarget") is True:
                shots_on_target += 1
        elif key == "pass" and (
            event.detail("subAction") == "key_chance_creating"
            or event.detail("subEvent") == "primary_assist"
        ):
            key_passes += 1
        if key in _DUEL_KEYS and event.outcome == "unsuccessful":
            duels_lost += 1

    return PlayerStatistics(
        player_id=player_id,
        match_id=match_id,
        # Passing
        passes=totals["pass"],
        passes_completed=successes["pass"],
        pass_accuracy=_percentage(successes["pass"], totals["pass"]),
        key_passes=key_passes,
        assists=assists,
        # Shooting
        shots=totals["shot"] + totals["goal"],
        shots_on_target=shots_on_target,
        goals=totals["goal"],
        xg=xg,
        # Defending
        tackles=totals["tackle"],
        interceptions=totals["interception"],
        clearances=totals["clearance"],
        # Attacking
        dribbles=totals["dribble"],
        successful_dribbles=successes["dribble"],
        crosses=totals["cross"],
        # Discipline
        fouls=totals["foul"],
        fouls_suffered=fouls_suffered,
        yellow_cards=totals["yellow_card"],
        red_cards=totals["red_card"],
        # Duels
        duels_won=sum(successes[k] for k in _DUEL_KEYS),
        duels_lost=duels_lost,
        aerial_duels_won=successes["aerial_duel"],
        touches=touches,
    )


def compute_heat_map(
    player_id: str,
    match_id: str,
    events: Iterable[LiveEvent],
    columns: int = TaggerConfig.heat_map_columns,
    rows: int = TaggerConfig.heat_map_rows,
) -> HeatMap:
    """Touch counts per grid zone for one player.

    The pitch is split into ``columns`` x ``rows`` zones (row-major,
    top-left first). Events of position-less types are skipped;
    out-of-range coordinates are clamped into the edge zones. Intensity is
    relative to the player's busiest zone.
    """
    if columns < 1 or rows < 1:
        raise ValueError(f"Heat map grid must be at least 1x1, got {columns}x{rows}")
    width, height = 100 / columns, 100 / rows

    touches: Counter[tuple[int, int]] = Counter()
    for event in events:
        if event.player_id != player_id or not requires_pitch_position(event.event_type):
            continue
        point = event.coordinates.clamped()
        col = min(int(point.x // width), columns - 1)
        row = min(int(point.y // height), rows - 1)
        touches[(row, col)] += 1

    busiest = max(touches.values(), default=0)
    zones = [
        HeatMapZone(
            x=col * width,
            y=row * height,
            width=width,
            height=height,
            touches=touches[(row, col)],
            intensity=touches[(row, col)] / busiest if busiest else 0.0,
        )
        for row in range(rows)
        for col in range(columns)
    ]
    return HeatMap(player_id=player_id, match_id=match_id, zones=zones)
