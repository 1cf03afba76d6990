"""Tests for the validation rule engine and the built-in rules."""

import logging
from datetime import datetime, timezone

import pytest

from match_tagger.config import TaggerConfig
from match_tagger.models import (
    MatchStatistics,
    TeamStatistics,
    ValidationIssue,
    ValidationResult,
)
from match_tagger.validation import (
    DEFAULT_RULES,
    ValidationContext,
    ValidationEngine,
    ValidationRule,
    check_field_boundaries,
    default_rules,
)


def _stats(home: dict | None = None, away: dict | None = None) -> MatchStatistics:
    """Statistics snapshot with a valid 50/50 possession split by default."""
    return MatchStatistics(
        match_id="m1",
        home_team=TeamStatistics(team_id="t-home", **{"possession": 50.0, **(home or {})}),
        away_team=TeamStatistics(team_id="t-away", **{"possession": 50.0, **(away or {})}),
        computed_at=datetime(2026, 3, 14, tzinfo=timezone.utc),
    )


def _rule(rule_id: str, result: ValidationResult, category: str = "statistical"):
    return ValidationRule(
        id=rule_id,
        name=rule_id.title(),
        description="test rule",
        severity="error",
        category=category,
        check=lambda context: result,
    )


@pytest.fixture
def engine() -> ValidationEngine:
    return ValidationEngine()


class TestStatisticsRules:
    def test_consistent_statistics_pass(self, engine, match):
        stats = _stats(
            {"total_passes": 10, "successful_passes": 7, "shots": 3, "shots_on_target": 2, "goals": 1},
        )
        result = engine.validate_statistics(stats, match, [])
        assert result.valid is True
        assert result.errors == []

    def test_shots_on_target_exceed_shots(self, engine, match):
        result = engine.validate_statistics(
            _stats({"shots": 3, "shots_on_target": 5}), match, []
        )
        assert result.valid is False
        assert [e.rule_id for e in result.errors] == ["shots_consistency"]
        assert result.errors[0].message == "Home team shots on target exceed total shots"

    def test_successful_passes_exceed_total(self, engine, match):
        result = engine.validate_statistics(
            _stats(away={"total_passes": 2, "successful_passes": 3}), match, []
        )
        assert [e.rule_id for e in result.errors] == ["passes_consistency"]
        assert "Away team" in result.errors[0].message

    def test_goals_exceed_shots(self, engine, match):
        result = engine.validate_statistics(_stats({"goals": 1}), match, [])
        assert [e.rule_id for e in result.errors] == ["goals_vs_shots"]

    @pytest.mark.parametrize(
        "home, away, valid",
        [(60.0, 40.0, True), (60.05, 40.0, True), (60.2, 40.0, False), (0.0, 0.0, False)],
    )
    def test_possession_total(self, engine, match, home, away, valid):
        stats = _stats({"possession": home}, {"possession": away})
        result = engine.validate_statistics(stats, match, [])
        assert result.valid is valid
        if not valid:
            assert result.errors[0].rule_id == "possession_total"

    def test_possession_tolerance_from_config(self, match):
        engine = ValidationEngine(default_rules(TaggerConfig(possession_tolerance=1.0)))
        stats = _stats({"possession": 60.5}, {"possession": 40.0})
        assert engine.validate_statistics(stats, match, []).valid is True

    def test_several_failures_in_rule_order(self, engine, match):
        stats = _stats(
            {"total_passes": 1, "successful_passes": 2, "goals": 2, "possession": 10.0},
        )
        result = engine.validate_statistics(stats, match, [])
        assert [e.rule_id for e in result.errors] == [
            "passes_consistency", "possession_total", "goals_vs_shots",
        ]


class TestEventRules:
    def test_valid_event(self, engine, store, make_draft):
        event = store.add_event(make_draft())
        result = engine.validate_event(event, store.match, store.events)
        assert result.valid is True
        assert result.warnings == []

    def test_out_of_bounds_coordinates(self, engine, store, make_draft):
        event = store.add_event(make_draft(coordinates={"x": 101, "y": 50}))
        result = engine.validate_event(event, store.match, store.events)
        assert result.valid is False
        assert result.errors[0].rule_id == "field_boundaries"
        assert result.errors[0].field == "coordinates"

    def test_out_of_bounds_destination(self, store, make_draft):
        event = store.add_event(make_draft(
            event_type="pass",
            origin_coordinates={"x": 50, "y": 50},
            destination_coordinates={"x": 50, "y": -1},
        ))
        result = check_field_boundaries(ValidationContext(event=event))
        assert [e.field for e in result.errors] == ["destinationCoordinates"]

    def test_player_on_wrong_team(self, engine, store, make_draft):
        event = store.add_event(make_draft(team="away", player_id="h2"))
        result = engine.validate_event(event, store.match, store.events)
        assert [e.rule_id for e in result.errors] == ["player_team_assignment"]
        assert result.errors[0].message == "Player h2 not found in away team"

    def test_player_rule_skipped_without_match(self, engine, store, make_draft):
        event = store.add_event(make_draft(team="away", player_id="h2"))
        assert engine.validate_event(event, None).valid is True

    def test_timestamp_outside_duration_is_warning(self, engine, store, make_draft):
        event = store.add_event(make_draft(timestamp=6000))
        result = engine.validate_event(event, store.match, store.events)
        assert result.valid is True
        assert [w.rule_id for w in result.warnings] == ["temporal_order"]
        assert result.warnings[0].severity == "warning"

    def test_validate_all_events(self, engine, store, make_draft):
        store.add_event(make_draft())
        store.add_event(make_draft(coordinates={"x": -5, "y": 50}))
        store.add_event(make_draft(team="away", player_id="h3", timestamp=-1))
        result = engine.validate_all_events(store.match, store.events)
        assert result.valid is False
        assert [e.rule_id for e in result.errors] == [
            "field_boundaries", "player_team_assignment",
        ]
        assert [w.rule_id for w in result.warnings] == ["temporal_order"]

    def test_no_events_is_valid(self, engine, match):
        assert engine.validate_all_events(match, []).valid is True


class TestRuleManagement:
    def test_default_rules(self, engine):
        ids = [r.id for r in engine.get_rules()]
        assert ids == [
            "passes_consistency", "shots_consistency", "possession_total",
            "field_boundaries", "player_team_assignment", "temporal_order",
            "goals_vs_shots",
        ]
        assert len(DEFAULT_RULES) == 7

    def test_engines_do_not_share_rules(self):
        first, second = ValidationEngine(), ValidationEngine()
        first.remove_rule("temporal_order")
        assert len(second.get_rules()) == 7

    def test_get_rules_returns_copy(self, engine):
        engine.get_rules().clear()
        assert len(engine.get_rules()) == 7

    def test_rules_by_category(self, engine):
        ids = [r.id for r in engine.get_rules_by_category("data_consistency")]
        assert ids == ["passes_consistency", "shots_consistency"]

    def test_remove_unknown_rule_is_noop(self, engine):
        engine.remove_rule("nope")
        assert len(engine.get_rules()) == 7

    def test_custom_rules_merge_in_registration_order(self, match):
        engine = ValidationEngine(rules=[])
        engine.add_rule(_rule("first", ValidationResult(
            valid=False, errors=[ValidationIssue(rule_id="first", message="a")],
        )))
        engine.add_rule(_rule("second", ValidationResult(
            warnings=[ValidationIssue(rule_id="second", message="b", severity="info")],
        )))
        engine.add_rule(_rule("third", ValidationResult(
            valid=False, errors=[ValidationIssue(rule_id="third", message="c")],
        )))
        result = engine.validate_statistics(_stats(), match, [])
        assert result.valid is False
        assert [e.rule_id for e in result.errors] == ["first", "third"]
        assert [w.rule_id for w in result.warnings] == ["second"]

    def test_crashing_rule_reported_as_error(self, match, caplog):
        def explode(context):
            raise ZeroDivisionError("division by zero")

        engine = ValidationEngine(rules=[
            ValidationRule(
                id="explodes",
                name="Explodes",
                description="always fails",
                severity="error",
                category="statistical",
                check=explode,
            ),
        ])
        with caplog.at_level(logging.ERROR, logger="match_tagger.validation"):
            result = engine.validate_statistics(_stats(), match, [])
        assert result.valid is False
        assert result.errors[0].rule_id == "explodes"
        assert "ZeroDivisionError" in result.errors[0].message
        assert "explodes" in caplog.text
