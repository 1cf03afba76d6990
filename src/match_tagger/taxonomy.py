"""Event type taxonomy: what each event type needs and how it is counted.

A single data table drives the capture wizard (which steps a type needs),
the statistics engine (which counter an event feeds) and the sub-action /
sub-event vocabularies offered in the details step. It replaces a class per
event kind.

Two vocabularies coexist:

* the **action** vocabulary (``pass``, ``duel``, ``defensive_action``, ...)
  with sub-actions and sub-events, used by the data-driven wizard;
* the **legacy** vocabulary (``tackle``, ``yellow_card``, ``substitution``,
  ...) that statistics are counted in.

``stat_key`` maps an action plus its sub-action onto the legacy counter.
"""

from dataclasses import dataclass, field

DUAL_POSITION_TYPES = frozenset({
    "pass",
    "shot",
    "goal",
    "cross",
    "corner",
    "throw_in",
    "free_kick",
    "penalty",
})

SHOT_TYPES = frozenset({"shot", "goal"})


@dataclass(frozen=True)
class EventTypeSpec:
    """Per-type metadata for one event type."""

    name: str
    label: str
    pitch_position: bool = True
    dual_position: bool = False
    has_receiver: bool = False
    legacy: bool = False
    # Counter this type feeds; None means the type name itself
    stat_key: str | None = None
    # Sub-actions that feed a different counter than the type itself
    sub_action_stat_keys: dict[str, str] = field(default_factory=dict)
    sub_actions: tuple[str, ...] = ()
    sub_events: tuple[str, ...] = ()
    default_coordinates: tuple[float, float] = (0.0, 0.0)

    @property
    def position_steps(self) -> int:
        """How many field positions the wizard collects for this type."""
        if not self.pitch_position:
            return 0
        return 2 if self.dual_position else 1


def _spec(name: str, label: str, **kwargs) -> EventTypeSpec:
    kwargs.setdefault("dual_position", name in DUAL_POSITION_TYPES)
    return EventTypeSpec(name=name, label=label, **kwargs)


_ACTION_SPECS = [
    _spec(
        "pass", "Pass",
        has_receiver=True,
        sub_actions=(
            "short", "long", "back", "cross", "deep_cross", "head", "smart",
            "through_ball", "deep_pass", "switch_of_play", "final_3rd",
            "throw_in", "into_penalty", "key_chance_creating",
            "line_breaking_pass", "progressive",
        ),
        sub_events=(
            "succ", "failed", "succ_under_pressure", "failed_under_pressure",
            "primary_assist",
        ),
    ),
    _spec(
        "duel", "Duel",
        sub_action_stat_keys={
            "ground": "ground_duel",
            "ground_2nd_ball": "ground_duel",
            "aerial": "aerial_duel",
            "aerial_2nd_ball": "aerial_duel",
        },
        sub_actions=("ground", "aerial", "ground_2nd_ball", "aerial_2nd_ball"),
        sub_events=("won", "lost"),
    ),
    _spec(
        "defensive_action", "Defensive Action",
        sub_action_stat_keys={
            "clearance": "clearance",
            "interception": "interception",
            "tackle": "tackle",
            "slide_tackle": "tackle",
        },
        sub_actions=(
            "clearance", "interception", "defensive_header", "tackle",
            "slide_tackle", "block_shot", "block_cross",
        ),
        sub_events=("succ", "unsucc"),
    ),
    _spec(
        "dribbling", "Dribbling",
        stat_key="dribble",
        sub_actions=("attempt",),
        sub_events=("succ", "unsucc"),
    ),
    _spec(
        "progressive_carry", "Progressive Carry",
        sub_actions=("acceleration", "no_acceleration"),
        sub_events=("succ", "unsucc"),
    ),
    _spec(
        "reception", "Reception",
        sub_actions=("under_pressure", "no_pressure"),
        sub_events=("succ", "missed_control"),
    ),
    _spec(
        "press", "Press",
        sub_actions=("pressing", "counter_pressing"),
        sub_events=("attempt",),
    ),
    _spec(
        "shot", "Shot",
        sub_actions=("head", "rf", "lf"),
        sub_events=("goal", "off_target", "on_target", "blocked"),
    ),
    _spec(
        "shot_direction", "Shot Direction",
        sub_actions=(
            "bottom_right", "bottom_left", "bottom_centre", "top_right",
            "top_left", "top_centre", "mid_right", "mid_left", "mid_centre",
        ),
        sub_events=("no_pressure", "under_pressure"),
    ),
    _spec(
        "shot_under_pressure", "Shot Under Pressure",
        stat_key="shot",
        sub_actions=("head", "rf", "lf"),
        sub_events=("goal", "off_target", "on_target", "blocked"),
    ),
    _spec(
        "turn_over", "Turn Over",
        sub_actions=("transition",),
        sub_events=(
            "won_possession", "lost_possession", "counter_attack_won",
            "counter_attack_against",
        ),
    ),
    _spec(
        "foul", "Foul",
        sub_actions=("regular", "aggressive"),
        sub_events=("won", "against", "penalty_won", "penalty_against"),
    ),
    _spec(
        "sub", "Substitution",
        pitch_position=False,
        stat_key="substitution",
        sub_actions=("injury", "tactical"),
        sub_events=("in", "out"),
    ),
    _spec(
        "free_kick", "Free Kick",
        sub_actions=("cross", "long", "shot", "direct"),
        sub_events=(
            "blocked_intercepted", "completed", "on_target", "off_target",
            "goal", "assist", "failed_trajectory", "resulted_in_shot",
        ),
    ),
    _spec(
        "corner", "Corner",
        sub_actions=("far_post", "near_post", "centre_box", "short", "direct_goal"),
        sub_events=("in_swing", "out_swing", "straight"),
    ),
    _spec(
        "goalkeeper_action", "Goalkeeper Action",
        sub_actions=(
            "through_ball_pass_against", "shot_against", "cross_against",
            "corner_against", "penalty_against", "1_on_1",
        ),
        sub_events=("goal_conceeded", "catch", "hand_save", "feet_reflex", "hit_the_bar"),
    ),
    _spec(
        "gk_distribution", "GK Distribution",
        sub_action_stat_keys={"goal_kick": "goal_kick"},
        sub_actions=(
            "feet_progressive_ground", "feet_short", "hand_progressive_long_pass",
            "hand_short", "goal_kick", "hand_to_final_3rd", "feet_to_final_3rd",
        ),
        sub_events=("succ", "unsucc", "assist", "key_into_penalty_area"),
    ),
    _spec(
        "card", "Card",
        sub_action_stat_keys={"yellow": "yellow_card", "red": "red_card"},
        sub_actions=("yellow", "red"),
        sub_events=("against",),
    ),
    _spec(
        "game_event", "Game Event",
        pitch_position=False,
        sub_action_stat_keys={"offside": "offside"},
        sub_actions=(
            "dead_time", "1st_half", "2nd_half", "offside", "own_goal",
            "extra_time", "extra_time_1", "extra_time_2",
        ),
        sub_events=("start", "end", "against", "won"),
    ),
    _spec(
        "counter_attack", "Counter Attack",
        sub_actions=("ball_pressing", "no_pressing"),
        sub_events=("succ", "unsucc"),
    ),
    _spec(
        "penalty", "Penalty",
        sub_actions=("left_foot", "right_foot"),
        sub_events=("goal", "missed", "off_target", "hit_the_bar"),
    ),
]

_LEGACY_SPECS = [
    _spec("goal", "Goal", legacy=True),
    _spec("save", "Save", legacy=True),
    _spec("tackle", "Tackle", legacy=True),
    _spec("interception", "Interception", legacy=True),
    _spec("clearance", "Clearance", legacy=True),
    _spec("cross", "Cross", legacy=True),
    _spec("throw_in", "Throw In", legacy=True),
    _spec("goal_kick", "Goal Kick", legacy=True),
    _spec("offside", "Offside", legacy=True),
    _spec("yellow_card", "Yellow Card", legacy=True),
    _spec("red_card", "Red Card", legacy=True),
    _spec("substitution", "Substitution", legacy=True, pitch_position=False),
    _spec("dribble", "Dribble", legacy=True),
    _spec("aerial_duel", "Aerial Duel", legacy=True),
    _spec("ball_recovery", "Ball Recovery", legacy=True),
]

EVENT_TYPES: dict[str, EventTypeSpec] = {
    spec.name: spec for spec in _ACTION_SPECS + _LEGACY_SPECS
}


def get_event_type(name: str) -> EventTypeSpec:
    """Spec for ``name``; unknown types are treated as single-position."""
    spec = EVENT_TYPES.get(name)
    if spec is None:
        return EventTypeSpec(name=name, label=name.replace("_", " ").title())
    return spec


def action_types() -> list[EventTypeSpec]:
    """Types offered by the data-driven capture wizard, in display order."""
    return list(_ACTION_SPECS)


def legacy_action_types() -> list[EventTypeSpec]:
    """Types offered by the fixed-step (legacy) capture wizard."""
    names = (
        "pass", "shot", "goal", "tackle", "interception", "cross", "corner",
        "foul", "save", "clearance", "dribble", "throw_in",
    )
    return [EVENT_TYPES[name] for name in names]


def requires_dual_position(event_type: str) -> bool:
    return get_event_type(event_type).dual_position


def requires_pitch_position(event_type: str) -> bool:
    return get_event_type(event_type).pitch_position


def stat_key(event_type: str, sub_action: str | None = None) -> str:
    """Counter an event feeds, e.g. ``("card", "yellow") -> "yellow_card"``."""
    spec = EVENT_TYPES.get(event_type)
    if spec is None:
        return event_type
    if sub_action is not None and sub_action in spec.sub_action_stat_keys:
        return spec.sub_action_stat_keys[sub_action]
    return spec.stat_key or spec.name
