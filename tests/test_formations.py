"""Tests for formation templates and applying them to a roster."""

import pytest

from match_tagger.event_store import EventStore
from match_tagger.exceptions import NoMatchInitializedError, UnknownFormationError
from match_tagger.formations import (
    FORMATIONS,
    apply_formation,
    formation_names,
    get_formation,
)


def _position(store, player_id):
    p = store.match.find_player(player_id).field_position
    return (p.x, p.y)


class TestTemplates:
    def test_names(self):
        assert formation_names() == ["4-4-2", "4-3-3", "3-5-2", "4-2-3-1", "5-3-2"]

    @pytest.mark.parametrize("name", list(FORMATIONS))
    def test_ten_outfield_slots(self, name):
        formation = FORMATIONS[name]
        outfield = len(formation.defenders) + len(formation.midfielders) + len(formation.forwards)
        assert outfield == 10
        assert formation.gk == (10, 50)

    def test_unknown_formation(self):
        with pytest.raises(UnknownFormationError) as exc_info:
            get_formation("2-3-5")
        assert isinstance(exc_info.value, KeyError)
        assert "2-3-5" in str(exc_info.value)


class TestApplyFormation:
    def test_home_players_moved(self, store):
        moved = apply_formation(store, "4-3-3", "home")
        assert moved == 4
        assert _position(store, "h1") == (10, 50)  # GK
        assert _position(store, "h2") == (25, 15)  # first DEF slot
        assert _position(store, "h3") == (50, 25)  # first MID slot
        assert _position(store, "h4") == (75, 20)  # first FWD slot
        assert store.match.home_team.formation == "4-3-3"

    def test_away_mirrored(self, store):
        apply_formation(store, "4-4-2", "away")
        assert _position(store, "a1") == (90, 50)
        assert _position(store, "a4") == (25, 40)
        assert store.match.away_team.formation == "4-4-2"
        # Home side untouched
        assert _position(store, "h1") == (50, 50)

    def test_players_beyond_slots_keep_position(self, store):
        store.update_match({
            "home_team": store.match.home_team.model_copy(update={
                "players": [
                    *store.match.home_team.players,
                    store.match.home_team.players[0].model_copy(update={"id": "h99"}),
                ],
            }),
        })
        moved = apply_formation(store, "4-4-2", "home")
        assert moved == 4
        assert _position(store, "h99") == (50, 50)

    def test_unknown_formation_leaves_roster(self, store):
        before = store.match
        with pytest.raises(UnknownFormationError):
            apply_formation(store, "1-1-8", "home")
        assert store.match == before

    def test_requires_match(self):
        with pytest.raises(NoMatchInitializedError):
            apply_formation(EventStore(), "4-4-2", "home")
