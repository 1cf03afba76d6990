"""In-memory event store: the current match, its event log and recording flag.

Everything downstream (capture wizard, statistics, validation, exports)
reads through one ``EventStore``. Each mutation is applied as a single step
under a re-entrant lock and subscribers are notified afterwards with the
store itself, so they always observe a fully-applied snapshot.

Usage::

    store = EventStore()
    store.initialize_match(match)
    event = store.add_event(draft)
    store.update_event(event.id, outcome="unsuccessful")
    payload = store.export_events()
"""

import json
import logging
import threading
import time
import uuid
import warnings
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from pydantic import BaseModel, ValidationError

from match_tagger.exceptions import InvalidPayloadError, NoMatchInitializedError
from match_tagger.models import (
    VARIANT_FIELDS,
    EventDraft,
    ExportPayload,
    FieldCoordinates,
    LiveEvent,
    Match,
    TeamSide,
)

logger = logging.getLogger(__name__)

Subscriber = Callable[["EventStore"], None]

# Fields that identify an event and never change after creation
_IMMUTABLE_FIELDS = {"id", "created_at"}


def generate_event_id() -> str:
    """Millisecond timestamp plus 48 random bits, e.g. ``evt_1718..._3fa9c2d10b7e``."""
    return f"evt_{int(time.time() * 1000)}_{uuid.uuid4().hex[:12]}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _field_names(model_cls: type[BaseModel], data: Mapping[str, Any]) -> dict:
    """Translate camelCase aliases in ``data`` to attribute names."""
    by_alias = {
        info.alias: name
        for name, info in model_cls.model_fields.items()
        if info.alias is not None
    }
    return {by_alias.get(key, key): value for key, value in data.items()}


class EventStore:
    """Authoritative holder of the current Match and its LiveEvent log.

    The log keeps insertion order regardless of event timestamps. Updating
    or deleting an unknown event id is a silent no-op (see ``update_event``
    and ``delete_event`` return values), keeping interactive flows resilient
    to stale references.
    """

    def __init__(self) -> None:
        self._match: Match | None = None
        self._events: list[LiveEvent] = []
        self._recording = False
        self._subscribers: list[Subscriber] = []
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def match(self) -> Match | None:
        return self._match

    @property
    def events(self) -> list[LiveEvent]:
        """Copy of the log in insertion order."""
        return list(self._events)

    @property
    def event_count(self) -> int:
        return len(self._events)

    @property
    def is_recording(self) -> bool:
        return self._recording

    def require_match(self, operation: str) -> Match:
        """Return the current match or raise NoMatchInitializedError."""
        if self._match is None:
            raise NoMatchInitializedError(operation)
        return self._match

    # ------------------------------------------------------------------
    # Observer contract
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback(store)`` for every mutation; returns an unsubscribe."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            try:
                callback(self)
            except Exception:
                logger.exception("Event store subscriber %r failed", callback)

    # ------------------------------------------------------------------
    # Match lifecycle
    # ------------------------------------------------------------------

    def initialize_match(self, match: Match) -> None:
        """Replace the current match and clear the log and recording flag."""
        with self._lock:
            self._match = match
            self._events = []
            self._recording = False
        logger.info(
            "Initialized match %s (%s vs %s)",
            match.id, match.home_team.name, match.away_team.name,
        )
        self._notify()

    def update_match(self, updates: Mapping[str, Any] | None = None, **fields: Any) -> Match:
        """Merge roster-editor edits into the current match (shallow replace).

        Raises:
            NoMatchInitializedError: If no match is set.
            pydantic.ValidationError: If the merged match is invalid; the
                current match is kept in that case.
        """
        changes = _field_names(Match, {**(updates or {}), **fields})
        with self._lock:
            current = self.require_match("update_match")
            merged = {name: getattr(current, name) for name in Match.model_fields}
            merged.update(changes)
            self._match = Match.model_validate(merged)
            match = self._match
        logger.debug("Updated match %s fields: %s", match.id, sorted(changes))
        self._notify()
        return match

    def start_recording(self) -> None:
        """Set the recording flag. Raises NoMatchInitializedError without a match."""
        with self._lock:
            self.require_match("start_recording")
            self._recording = True
        self._notify()

    def stop_recording(self) -> None:
        with self._lock:
            self._recording = False
        self._notify()

    # ------------------------------------------------------------------
    # Event CRUD
    # ------------------------------------------------------------------

    def add_event(self, draft: EventDraft | Mapping[str, Any]) -> LiveEvent:
        """Assign identity and timestamps to ``draft`` and append it to the log."""
        if not isinstance(draft, EventDraft):
            draft = EventDraft.model_validate(draft)
        now = _utcnow()
        event = LiveEvent.model_validate({
            **{name: getattr(draft, name) for name in EventDraft.model_fields},
            "id": generate_event_id(),
            "created_at": now,
            "updated_at": now,
        })
        with self._lock:
            self._events.append(event)
        logger.debug(
            "Added %s event %s (team=%s, player=%s, t=%.1fs)",
            event.event_type, event.id, event.team, event.player_id, event.timestamp,
        )
        self._notify()
        return event

    def get_event(self, event_id: str) -> LiveEvent | None:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def update_event(
        self, event_id: str, updates: Mapping[str, Any] | None = None, **fields: Any
    ) -> LiveEvent | None:
        """Merge fields into an event and refresh ``updated_at``.

        Variant keys (``xG``, ``onTarget`` ...) are merged into ``metadata``.
        Distance and direction are re-derived when coordinates change.

        Returns:
            The updated event, or ``None`` if no event has ``event_id``
            (silent no-op).
        """
        changes = _field_names(LiveEvent, {**(updates or {}), **fields})
        for name in _IMMUTABLE_FIELDS & changes.keys():
            logger.debug("Ignoring update of immutable field %r on %s", name, event_id)
            del changes[name]

        with self._lock:
            index = next(
                (i for i, e in enumerate(self._events) if e.id == event_id), None
            )
            if index is None:
                logger.debug("update_event: no event %s, ignoring", event_id)
                return None

            current = self._events[index]
            variant = {k: changes.pop(k) for k in list(changes) if k in VARIANT_FIELDS}
            merged = {name: getattr(current, name) for name in LiveEvent.model_fields}
            merged.update(changes)
            merged["metadata"] = {
                **current.metadata,
                **(changes.get("metadata") or {}),
                **variant,
            }
            merged["updated_at"] = _utcnow()
            updated = LiveEvent.model_validate(merged)
            self._events[index] = updated

        logger.debug("Updated event %s", event_id)
        self._notify()
        return updated

    def delete_event(self, event_id: str) -> bool:
        """Remove an event; returns False (no-op) if the id is unknown."""
        with self._lock:
            remaining = [e for e in self._events if e.id != event_id]
            removed = len(remaining) != len(self._events)
            self._events = remaining
        if not removed:
            logger.debug("delete_event: no event %s, ignoring", event_id)
            return False
        logger.debug("Deleted event %s", event_id)
        self._notify()
        return True

    def clear_events(self) -> None:
        with self._lock:
            self._events = []
        logger.info("Cleared event log")
        self._notify()

    # ------------------------------------------------------------------
    # Queries (pure filters over the current log)
    # ------------------------------------------------------------------

    def get_events_by_type(self, event_type: str) -> list[LiveEvent]:
        return [e for e in self._events if e.event_type == event_type]

    def get_events_by_player(self, player_id: str) -> list[LiveEvent]:
        return [e for e in self._events if e.player_id == player_id]

    def get_events_by_team(self, team: TeamSide) -> list[LiveEvent]:
        return [e for e in self._events if e.team == team]

    def get_events_by_time_range(self, start: float, end: float) -> list[LiveEvent]:
        """Events with ``start <= timestamp <= end``, in log order."""
        return [e for e in self._events if start <= e.timestamp <= end]

    def sorted_events(self) -> list[LiveEvent]:
        """Events ordered by video timestamp (ties keep log order)."""
        return sorted(self._events, key=lambda e: e.timestamp)

    # ------------------------------------------------------------------
    # Roster edits
    # ------------------------------------------------------------------

    def update_player_position(
        self, player_id: str, position: FieldCoordinates | Mapping[str, float]
    ) -> bool:
        """Move a player on the tactical board; no-op if the player is unknown.

        The position is clamped to the field before it is stored.

        Returns:
            True if a player was moved.
        """
        if not isinstance(position, FieldCoordinates):
            position = FieldCoordinates.model_validate(position)
        position = position.clamped()

        with self._lock:
            match = self._match
            if match is None:
                return False
            for attr in ("home_team", "away_team"):
                team = getattr(match, attr)
                if team.find_player(player_id) is None:
                    continue
                players = [
                    p.model_copy(update={"field_position": position})
                    if p.id == player_id else p
                    for p in team.players
                ]
                self._match = match.model_copy(
                    update={attr: team.model_copy(update={"players": players})}
                )
                break
            else:
                return False
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def export_events(self) -> str:
        """Serialize ``{match, events, exportedAt}`` as indented JSON."""
        payload = ExportPayload(
            match=self._match,
            events=list(self._events),
            exported_at=_utcnow(),
        )
        logger.info("Exporting %d events", len(payload.events))
        return payload.model_dump_json(by_alias=True, indent=2)

    def import_events(self, payload: str | bytes | Mapping[str, Any]) -> ExportPayload:
        """Replace match and/or log from an export payload, all-or-nothing.

        The match is replaced only when the payload carries one. Soft model
        warnings (e.g. a roster side mismatch) are logged, not raised.

        Raises:
            InvalidPayloadError: If the payload is not valid JSON or does not
                match the export shape. The store is left untouched.
        """
        try:
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always")
                if isinstance(payload, (str, bytes, bytearray)):
                    parsed = ExportPayload.model_validate_json(payload)
                elif isinstance(payload, Mapping):
                    parsed = ExportPayload.model_validate(dict(payload))
                else:
                    raise InvalidPayloadError(
                        f"Unsupported payload type {type(payload).__name__}"
                    )
        except ValidationError as e:
            logger.error("Import rejected: %s", e)
            raise InvalidPayloadError("Invalid export payload", details=str(e)) from e

        for w in caught:
            logger.warning("Import warning: %s", w.message)

        with self._lock:
            if parsed.match is not None:
                self._match = parsed.match
            self._events = list(parsed.events)
        logger.info(
            "Imported %d events (exported at %s)",
            len(parsed.events), parsed.exported_at.isoformat(),
        )
        self._notify()
        return parsed

    def snapshot(self) -> dict[str, Any]:
        """JSON-safe dict of the current export payload."""
        return json.loads(self.export_events())
