"""Unit tests for the event type taxonomy table."""

import pytest

from match_tagger.taxonomy import (
    DUAL_POSITION_TYPES,
    EVENT_TYPES,
    action_types,
    get_event_type,
    legacy_action_types,
    requires_dual_position,
    requires_pitch_position,
    stat_key,
)


class TestPositionRequirements:
    @pytest.mark.parametrize("name", sorted(DUAL_POSITION_TYPES))
    def test_dual_position_types(self, name):
        assert requires_dual_position(name) is True
        assert requires_pitch_position(name) is True

    @pytest.mark.parametrize("name", ["tackle", "duel", "foul", "save", "card"])
    def test_single_position_types(self, name):
        assert requires_dual_position(name) is False
        assert requires_pitch_position(name) is True

    @pytest.mark.parametrize("name", ["sub", "substitution", "game_event"])
    def test_position_less_types(self, name):
        spec = get_event_type(name)
        assert spec.pitch_position is False
        assert spec.position_steps == 0
        assert spec.default_coordinates == (0.0, 0.0)

    def test_only_pass_has_receiver(self):
        assert [s.name for s in EVENT_TYPES.values() if s.has_receiver] == ["pass"]

    def test_unknown_type_is_single_position(self):
        spec = get_event_type("nutmeg")
        assert spec.position_steps == 1
        assert spec.label == "Nutmeg"
        assert spec.sub_actions == ()


class TestStatKey:
    @pytest.mark.parametrize(
        "event_type, sub_action, expected",
        [
            ("pass", None, "pass"),
            ("tackle", None, "tackle"),
            ("defensive_action", "tackle", "tackle"),
            ("defensive_action", "slide_tackle", "tackle"),
            ("defensive_action", "interception", "interception"),
            ("defensive_action", "block_shot", "defensive_action"),
            ("duel", "aerial", "aerial_duel"),
            ("duel", "ground_2nd_ball", "ground_duel"),
            ("card", "yellow", "yellow_card"),
            ("card", "red", "red_card"),
            ("sub", None, "substitution"),
            ("shot_under_pressure", "rf", "shot"),
            ("dribbling", "attempt", "dribble"),
            ("game_event", "offside", "offside"),
            ("gk_distribution", "goal_kick", "goal_kick"),
            ("made_up", "x", "made_up"),
        ],
    )
    def test_normalization(self, event_type, sub_action, expected):
        assert stat_key(event_type, sub_action) == expected


class TestActionLists:
    def test_action_types_carry_vocabularies(self):
        by_name = {s.name: s for s in action_types()}
        assert "primary_assist" in by_name["pass"].sub_events
        assert by_name["shot"].sub_events == ("goal", "off_target", "on_target", "blocked")
        assert by_name["card"].sub_actions == ("yellow", "red")

    def test_legacy_action_types(self):
        names = [s.name for s in legacy_action_types()]
        assert names[:3] == ["pass", "shot", "goal"]
        assert len(names) == 12
