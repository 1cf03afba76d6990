"""Multi-step capture wizard that builds exactly one LiveEvent at a time.

The step sequence is a pure function of the selected event type and the
active step policy:

* **data_driven** (canonical), keyed off the taxonomy table:

  ========================  ==================================================
  position-less (sub, ...)  type -> player -> details
  single position           type -> player -> position -> details
  dual position             type -> player -> origin -> destination -> details
  pass                      type -> player -> origin -> receiver ->
                            destination -> details
  ========================  ==================================================

* **legacy**: the older fixed 4/6-step wizard, kept for compatibility.

Each step has a completion predicate; ``next_step`` only advances when it
holds and ``save_event`` is a silent no-op until the final step is reached
with every required field present. The same predicate is what a UI uses to
enable its "next" and "save" controls.
"""

import logging
from enum import Enum
from typing import Any, Callable

from match_tagger.config import TaggerConfig
from match_tagger.event_store import EventStore
from match_tagger.geometry import calculate_direction, calculate_distance
from match_tagger.models import (
    EventDraft,
    EventOutcome,
    FieldCoordinates,
    LiveEvent,
    MatchPeriod,
    TeamSide,
)
from match_tagger.taxonomy import (
    EventTypeSpec,
    action_types,
    get_event_type,
    legacy_action_types,
    stat_key,
)
from match_tagger.timing import VideoClock

logger = logging.getLogger(__name__)


class StepKind(Enum):
    """What a wizard step collects."""
    TYPE = "type"
    PLAYER = "player"
    POSITION = "position"
    ORIGIN = "origin"
    RECEIVER = "receiver"
    DESTINATION = "destination"
    REVIEW = "review"
    DETAILS = "details"


# Inputs a step needs before the wizard may move past it
REQUIRED_FIELDS: dict[StepKind, tuple[str, ...]] = {
    StepKind.TYPE: ("event_type",),
    StepKind.PLAYER: ("player_id",),
    StepKind.POSITION: ("coordinates",),
    StepKind.ORIGIN: ("origin",),
    StepKind.RECEIVER: (),  # optional, can be skipped
    StepKind.DESTINATION: ("destination",),
    StepKind.REVIEW: ("destination",),
    StepKind.DETAILS: (),
}

StepPolicy = Callable[[EventTypeSpec | None], tuple[StepKind, ...]]

_SINGLE = (StepKind.TYPE, StepKind.PLAYER, StepKind.POSITION, StepKind.DETAILS)


def data_driven_steps(spec: EventTypeSpec | None) -> tuple[StepKind, ...]:
    """Steps for ``spec`` under the taxonomy-driven policy."""
    if spec is None:
        return _SINGLE
    if not spec.pitch_position:
        return (StepKind.TYPE, StepKind.PLAYER, StepKind.DETAILS)
    if not spec.dual_position:
        return _SINGLE
    if spec.has_receiver:
        return (
            StepKind.TYPE, StepKind.PLAYER, StepKind.ORIGIN, StepKind.RECEIVER,
            StepKind.DESTINATION, StepKind.DETAILS,
        )
    return (
        StepKind.TYPE, StepKind.PLAYER, StepKind.ORIGIN, StepKind.DESTINATION,
        StepKind.DETAILS,
    )


def legacy_steps(spec: EventTypeSpec | None) -> tuple[StepKind, ...]:
    """Steps for ``spec`` under the fixed 4-step / 6-step policy."""
    if spec is None or not spec.dual_position:
        return _SINGLE
    if spec.name == "pass":
        return (
            StepKind.TYPE, StepKind.PLAYER, StepKind.ORIGIN, StepKind.RECEIVER,
            StepKind.DESTINATION, StepKind.DETAILS,
        )
    return (
        StepKind.TYPE, StepKind.PLAYER, StepKind.ORIGIN, StepKind.DESTINATION,
        StepKind.REVIEW, StepKind.DETAILS,
    )


STEP_POLICIES: dict[str, StepPolicy] = {
    "data_driven": data_driven_steps,
    "legacy": legacy_steps,
}

# Shot sub-events that imply the shot flags counted by statistics
_ON_TARGET_SUB_EVENTS = {"on_target", "goal"}
_BLOCKED_SUB_EVENTS = {"blocked"}


class CaptureStateMachine:
    """Collects the fields of one event step by step, then saves it.

    Usage::

        wizard = CaptureStateMachine(store, clock)
        wizard.select_action("pass")
        wizard.next_step()
        wizard.select_player("h7")
        wizard.next_step()
        wizard.set_coordinates(FieldCoordinates(x=20, y=50))
        wizard.next_step()
        wizard.skip_receiver()
        wizard.set_coordinates(FieldCoordinates(x=60, y=50))
        wizard.next_step()
        event = wizard.save_event()
    """

    def __init__(
        self,
        store: EventStore,
        clock: VideoClock,
        policy: str = TaggerConfig.step_policy,
    ) -> None:
        if policy not in STEP_POLICIES:
            raise ValueError(
                f"Unknown step policy {policy!r}. "
                f"Valid policies: {list(STEP_POLICIES)}"
            )
        self._store = store
        self._clock = clock
        self.policy = policy
        self._steps_for = STEP_POLICIES[policy]
        self.team: TeamSide = "home"
        self.period: MatchPeriod = "first_half"
        self._reset()

    # ------------------------------------------------------------------
    # Step bookkeeping
    # ------------------------------------------------------------------

    @property
    def spec(self) -> EventTypeSpec | None:
        return get_event_type(self.event_type) if self.event_type else None

    @property
    def steps(self) -> tuple[StepKind, ...]:
        return self._steps_for(self.spec)

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def step_kind(self) -> StepKind:
        return self.steps[self.current_step - 1]

    def required_fields_for_step(self, step: int) -> tuple[str, ...]:
        """Names of the inputs step ``step`` (1-based) needs."""
        if not 1 <= step <= self.total_steps:
            raise ValueError(f"step must be in 1..{self.total_steps}, got {step}")
        return REQUIRED_FIELDS[self.steps[step - 1]]

    def _has(self, name: str) -> bool:
        return getattr(self, name) is not None

    def can_proceed(self) -> bool:
        """Completion predicate of the current step."""
        return all(self._has(name) for name in REQUIRED_FIELDS[self.step_kind])

    def next_step(self) -> bool:
        """Advance one step if the current step is complete."""
        if self.can_proceed() and self.current_step < self.total_steps:
            self.current_step += 1
            logger.debug("Capture step %d/%d (%s)",
                         self.current_step, self.total_steps, self.step_kind.value)
            return True
        return False

    def previous_step(self) -> bool:
        if self.current_step > 1:
            self.current_step -= 1
            return True
        return False

    def available_actions(self) -> list[EventTypeSpec]:
        """Event types offered in the type step under the active policy."""
        if self.policy == "legacy":
            return legacy_action_types()
        return action_types()

    def available_players(self) -> list:
        """Roster of the selected team, empty without a match."""
        match = self._store.match
        if match is None:
            return []
        return list(match.team(self.team).players)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def select_action(self, event_type: str) -> None:
        """Choose the event type; clears type-specific progress."""
        self.event_type = event_type
        self.coordinates = None
        self.origin = None
        self.destination = None
        self.receiver_id = None
        self.sub_action = None
        self.sub_event = None
        self.details = {}
        if self.current_step > self.total_steps:
            self.current_step = self.total_steps

    def select_team(self, team: TeamSide) -> None:
        if team != self.team:
            self.player_id = None
            self.receiver_id = None
        self.team = team

    def select_player(self, player_id: str) -> None:
        """Choose the acting player; the team follows the roster holding them."""
        self.player_id = player_id
        match = self._store.match
        if match is None:
            return
        for side in ("home", "away"):
            if match.team(side).find_player(player_id) is not None:
                self.team = side
                break

    def select_receiver(self, player_id: str) -> None:
        self.receiver_id = player_id

    def skip_receiver(self) -> bool:
        """Clear the receiver and move on to the destination step."""
        self.receiver_id = None
        return self.next_step()

    def set_coordinates(self, coords: FieldCoordinates | dict) -> bool:
        """Record a field click for the current position step.

        The point is clamped to [0, 100]. Returns False (and ignores the
        click) when the current step does not collect a position.
        """
        if not isinstance(coords, FieldCoordinates):
            coords = FieldCoordinates.model_validate(coords)
        coords = coords.clamped()
        kind = self.step_kind
        if kind is StepKind.POSITION:
            self.coordinates = coords
        elif kind is StepKind.ORIGIN:
            self.origin = coords
        elif kind is StepKind.DESTINATION:
            self.destination = coords
        else:
            logger.debug("Ignoring field click at step %s", kind.value)
            return False
        return True

    def set_outcome(self, outcome: EventOutcome) -> None:
        self.outcome = outcome

    def set_period(self, period: MatchPeriod) -> None:
        """Period sticks across saves, like the team selection."""
        self.period = period

    def select_sub_action(self, sub_action: str | None) -> None:
        self.sub_action = self._check_vocabulary(sub_action, "sub_actions")

    def select_sub_event(self, sub_event: str | None) -> None:
        self.sub_event = self._check_vocabulary(sub_event, "sub_events")

    def _check_vocabulary(self, value: str | None, attr: str) -> str | None:
        spec = self.spec
        if value is None:
            return None
        if spec is None:
            raise ValueError("Select an event type first")
        allowed = getattr(spec, attr)
        if value not in allowed:
            raise ValueError(
                f"{value!r} is not a valid {attr[:-1].replace('_', '-')} "
                f"for {spec.name!r}. Valid values: {list(allowed)}"
            )
        return value

    def set_detail(self, key: str, value: Any) -> None:
        """Set a variant value (``onTarget``, ``xG``, ``assistPlayerId`` ...)."""
        self.details[key] = value

    # ------------------------------------------------------------------
    # Terminal actions
    # ------------------------------------------------------------------

    def can_save(self) -> bool:
        """On the final step, every step complete, and a match to save into."""
        if self._store.match is None or self.current_step != self.total_steps:
            return False
        return all(
            self._has(name)
            for kind in self.steps
            for name in REQUIRED_FIELDS[kind]
        )

    def save_event(self) -> LiveEvent | None:
        """Build the event, add it to the store and reset to step 1.

        Returns None without side effects when ``can_save()`` is False.
        """
        if not self.can_save():
            logger.debug("save_event ignored: capture incomplete at step %d/%d",
                         self.current_step, self.total_steps)
            return None

        event = self._store.add_event(self._build_draft())
        logger.info("Captured %s by %s at %.1fs",
                    event.event_type, event.player_id, event.timestamp)
        self._reset()
        return event

    def cancel(self) -> None:
        self._reset()

    def _build_draft(self) -> EventDraft:
        match = self._store.require_match("save_event")
        spec = self.spec
        timestamp = self._clock.get_current_timestamp()

        metadata = dict(self.details)
        if self.sub_action is not None:
            metadata["subAction"] = self.sub_action
        if self.sub_event is not None:
            metadata["subEvent"] = self.sub_event
            if stat_key(spec.name) == "shot":
                if self.sub_event in _ON_TARGET_SUB_EVENTS:
                    metadata.setdefault("onTarget", True)
                elif self.sub_event in _BLOCKED_SUB_EVENTS:
                    metadata.setdefault("blocked", True)
                    metadata.setdefault("onTarget", False)

        if self.coordinates is not None:
            coordinates = self.coordinates
        elif self.origin is not None:
            coordinates = self.origin
        else:
            x, y = spec.default_coordinates
            coordinates = FieldCoordinates(x=x, y=y)

        fields: dict[str, Any] = {
            "match_id": match.id,
            "timestamp": timestamp,
            "event_type": self.event_type,
            "team": self.team,
            "player_id": self.player_id,
            "coordinates": coordinates,
            "outcome": self.outcome,
            "period": self.period,
            "minute": self._clock.get_match_minute(timestamp),
            "metadata": metadata,
        }
        if self.origin is not None and self.destination is not None:
            fields.update(
                origin_coordinates=self.origin,
                destination_coordinates=self.destination,
                receiver_id=self.receiver_id,
                distance=calculate_distance(self.origin, self.destination),
                direction=calculate_direction(self.origin, self.destination),
            )
        return EventDraft.model_validate(fields)

    def _reset(self) -> None:
        self.current_step = 1
        self.event_type: str | None = None
        self.player_id: str | None = None
        self.coordinates: FieldCoordinates | None = None
        self.origin: FieldCoordinates | None = None
        self.destination: FieldCoordinates | None = None
        self.receiver_id: str | None = None
        self.outcome: EventOutcome = "successful"
        self.sub_action: str | None = None
        self.sub_event: str | None = None
        self.details: dict[str, Any] = {}
