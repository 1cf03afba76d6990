"""Shared fixtures: a small two-team match and an event factory."""

import logging

import pytest

from match_tagger.event_store import EventStore
from match_tagger.models import EventDraft, Match


def _player(pid: str, name: str, number: int, team: str, position: str) -> dict:
    return {
        "id": pid,
        "name": name,
        "jerseyNumber": number,
        "team": team,
        "position": position,
    }


@pytest.fixture
def match_data() -> dict:
    """Camel-cased match record as found in an export file."""
    return {
        "id": "m1",
        "homeTeam": {
            "id": "t-home",
            "name": "Rovers",
            "formation": "4-4-2",
            "players": [
                _player("h1", "Keeper", 1, "home", "GK"),
                _player("h2", "Stopper", 4, "home", "CB"),
                _player("h3", "Playmaker", 8, "home", "CM"),
                _player("h4", "Striker", 9, "home", "ST"),
            ],
        },
        "awayTeam": {
            "id": "t-away",
            "name": "United",
            "formation": "4-3-3",
            "players": [
                _player("a1", "Goalie", 1, "away", "GK"),
                _player("a2", "Back", 5, "away", "CB"),
                _player("a3", "Engine", 6, "away", "CDM"),
                _player("a4", "Forward", 11, "away", "ST"),
            ],
        },
        "date": "2026-03-14T15:00:00Z",
        "venue": "Riverside",
        "competition": "League",
        "duration": 5400,
    }


@pytest.fixture
def match(match_data) -> Match:
    return Match.model_validate(match_data)


@pytest.fixture
def store(match) -> EventStore:
    """Event store with ``match`` initialized and an empty log."""
    s = EventStore()
    s.initialize_match(match)
    return s


@pytest.fixture
def make_draft():
    """Factory for EventDraft with sensible defaults; overrides by field name."""

    def factory(**overrides) -> EventDraft:
        data = {
            "match_id": "m1",
            "timestamp": 60.0,
            "event_type": "tackle",
            "team": "home",
            "player_id": "h2",
            "coordinates": {"x": 40, "y": 50},
            "outcome": "successful",
        }
        data.update(overrides)
        return EventDraft.model_validate(data)

    return factory


@pytest.fixture
def restore_root_logging():
    """setup_logging() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
