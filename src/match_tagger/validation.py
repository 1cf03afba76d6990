"""Validation rule engine for tagged events and statistics snapshots.

Rules are plain data: an id, a severity, a category and a ``check``
callable taking a ``ValidationContext``. Problems are reported as
``ValidationResult`` values and never raised; a rule that crashes is
itself reported as an error so one bad rule cannot abort a run.

Usage::

    engine = ValidationEngine()
    result = engine.validate_all_events(store.match, store.events)
    stats = compute_match_statistics(store.match, store.events)
    result = ValidationResult.merge([
        result, engine.validate_statistics(stats, store.match, store.events),
    ])
    if not result.valid:
        for issue in result.errors:
            print(issue.rule_id, issue.message)
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Literal, Sequence

from match_tagger.config import TaggerConfig
from match_tagger.models import (
    LiveEvent,
    Match,
    MatchStatistics,
    Severity,
    ValidationIssue,
    ValidationResult,
)

logger = logging.getLogger(__name__)

ValidationCategory = Literal[
    "data_consistency",
    "logical_constraint",
    "field_boundary",
    "team_assignment",
    "temporal",
    "statistical",
]

_SIDES = (("home", "Home"), ("away", "Away"))


@dataclass
class ValidationContext:
    """What a rule may look at. Rules ignore subjects that are absent."""

    event: LiveEvent | None = None
    all_events: Sequence[LiveEvent] = ()
    match: Match | None = None
    statistics: MatchStatistics | None = None


@dataclass
class ValidationRule:
    id: str
    name: str
    description: str
    severity: Severity
    category: ValidationCategory
    check: Callable[[ValidationContext], ValidationResult]


def _errors(issues: list[ValidationIssue]) -> ValidationResult:
    return ValidationResult(valid=not issues, errors=issues)


# ----------------------------------------------------------------------
# Built-in rules
# ----------------------------------------------------------------------


def check_passes_consistency(context: ValidationContext) -> ValidationResult:
    """Successful passes must not exceed total passes."""
    stats = context.statistics
    if stats is None:
        return ValidationResult()
    issues = [
        ValidationIssue(
            rule_id="passes_consistency",
            message=f"{label} team successful passes exceed total passes",
        )
        for side, label in _SIDES
        if stats.team(side).successful_passes > stats.team(side).total_passes
    ]
    return _errors(issues)


def check_shots_consistency(context: ValidationContext) -> ValidationResult:
    """Shots on target must not exceed total shots."""
    stats = context.statistics
    if stats is None:
        return ValidationResult()
    issues = [
        ValidationIssue(
            rule_id="shots_consistency",
            message=f"{label} team shots on target exceed total shots",
        )
        for side, label in _SIDES
        if stats.team(side).shots_on_target > stats.team(side).shots
    ]
    return _errors(issues)


def make_possession_total_check(
    tolerance: float = TaggerConfig.possession_tolerance,
) -> Callable[[ValidationContext], ValidationResult]:
    """Build the possession check for a given tolerance (percentage points).

    A 0/0 split (no successful passes yet) does not sum to 100 and is
    reported like any other mismatch.
    """

    def check(context: ValidationContext) -> ValidationResult:
        stats = context.statistics
        if stats is None:
            return ValidationResult()
        total = stats.home_team.possession + stats.away_team.possession
        if abs(total - 100) <= tolerance:
            return ValidationResult()
        return _errors([
            ValidationIssue(
                rule_id="possession_total",
                message=f"Possession totals {total:g}% instead of 100%",
            )
        ])

    return check


def check_field_boundaries(context: ValidationContext) -> ValidationResult:
    """Every coordinate pair on the event must lie within [0, 100]."""
    event = context.event
    if event is None:
        return ValidationResult()
    issues = []
    for name, alias in (
        ("coordinates", "coordinates"),
        ("origin_coordinates", "originCoordinates"),
        ("destination_coordinates", "destinationCoordinates"),
    ):
        point = getattr(event, name)
        if point is not None and not point.in_bounds:
            issues.append(ValidationIssue(
                rule_id="field_boundaries",
                message=(
                    f"Event {alias} ({point.x:g}, {point.y:g}) are outside "
                    "field boundaries"
                ),
                field=alias,
            ))
    return _errors(issues)


def check_player_team_assignment(context: ValidationContext) -> ValidationResult:
    """The event's player must be on the roster of the event's team."""
    event, match = context.event, context.match
    if event is None or match is None:
        return ValidationResult()
    if match.team(event.team).find_player(event.player_id) is not None:
        return ValidationResult()
    return _errors([
        ValidationIssue(
            rule_id="player_team_assignment",
            message=f"Player {event.player_id} not found in {event.team} team",
            field="playerId",
        )
    ])


def check_temporal_order(context: ValidationContext) -> ValidationResult:
    """Warn when an event timestamp falls outside ``[0, match.duration]``."""
    event, match = context.event, context.match
    if event is None or match is None:
        return ValidationResult()
    if 0 <= event.timestamp <= match.duration:
        return ValidationResult()
    return ValidationResult(warnings=[
        ValidationIssue(
            rule_id="temporal_order",
            message=f"Event timestamp {event.timestamp:g}s is outside match duration",
            field="timestamp",
            severity="warning",
        )
    ])


def check_goals_vs_shots(context: ValidationContext) -> ValidationResult:
    stats = context.statistics
    if stats is None:
        return ValidationResult()
    issues = [
        ValidationIssue(
            rule_id="goals_vs_shots",
            message=f"{label} team goals exceed total shots",
        )
        for side, label in _SIDES
        if stats.team(side).goals > stats.team(side).shots
    ]
    return _errors(issues)


def default_rules(config: TaggerConfig | None = None) -> list[ValidationRule]:
    """Fresh list of the built-in rules, in evaluation order."""
    if config is None:
        config = TaggerConfig()
    return [
        ValidationRule(
            id="passes_consistency",
            name="Pass Consistency",
            description="Successful passes must be less than or equal to total passes",
            severity="error",
            category="data_consistency",
            check=check_passes_consistency,
        ),
        ValidationRule(
            id="shots_consistency",
            name="Shots Consistency",
            description="Shots on target must be less than or equal to total shots",
            severity="error",
            category="data_consistency",
            check=check_shots_consistency,
        ),
        ValidationRule(
            id="possession_total",
            name="Possession Total",
            description="Home and away possession must sum to 100%",
            severity="error",
            category="statistical",
            check=make_possession_total_check(config.possession_tolerance),
        ),
        ValidationRule(
            id="field_boundaries",
            name="Field Boundaries",
            description="Event coordinates must be within field boundaries (0-100)",
            severity="error",
            category="field_boundary",
            check=check_field_boundaries,
        ),
        ValidationRule(
            id="player_team_assignment",
            name="Player Team Assignment",
            description="Player must belong to the team specified in the event",
            severity="error",
            category="team_assignment",
            check=check_player_team_assignment,
        ),
        ValidationRule(
            id="temporal_order",
            name="Temporal Order",
            description="Event timestamp must be within match duration",
            severity="warning",
            category="temporal",
            check=check_temporal_order,
        ),
        ValidationRule(
            id="goals_vs_shots",
            name="Goals vs Shots",
            description="Goals must be less than or equal to shots",
            severity="error",
            category="logical_constraint",
            check=check_goals_vs_shots,
        ),
    ]


DEFAULT_RULES: tuple[ValidationRule, ...] = tuple(default_rules())


# ----------------------------------------------------------------------
# Engine
# ----------------------------------------------------------------------


class ValidationEngine:
    """Runs an ordered, per-instance rule list over a context.

    Results of all rules are merged: ``valid`` is the AND of every rule,
    errors and warnings are concatenated in rule registration order.
    """

    def __init__(self, rules: Iterable[ValidationRule] | None = None) -> None:
        self._rules: list[ValidationRule] = list(
            DEFAULT_RULES if rules is None else rules
        )

    def add_rule(self, rule: ValidationRule) -> None:
        self._rules.append(rule)

    def remove_rule(self, rule_id: str) -> None:
        """Remove every rule with ``rule_id``; unknown ids are ignored."""
        self._rules = [r for r in self._rules if r.id != rule_id]

    def get_rules(self) -> list[ValidationRule]:
        return list(self._rules)

    def get_rules_by_category(self, category: str) -> list[ValidationRule]:
        return [r for r in self._rules if r.category == category]

    def validate_event(
        self,
        event: LiveEvent,
        match: Match | None,
        all_events: Sequence[LiveEvent] = (),
    ) -> ValidationResult:
        context = ValidationContext(event=event, all_events=all_events, match=match)
        return self._run(context)

    def validate_statistics(
        self,
        statistics: MatchStatistics,
        match: Match | None,
        all_events: Sequence[LiveEvent] = (),
    ) -> ValidationResult:
        context = ValidationContext(
            all_events=all_events, match=match, statistics=statistics
        )
        return self._run(context)

    def validate_all_events(
        self, match: Match | None, events: Sequence[LiveEvent]
    ) -> ValidationResult:
        """Validate each event in log order and merge the results."""
        result = ValidationResult.merge(
            self.validate_event(event, match, events) for event in events
        )
        logger.info(
            "Validated %d events: %d errors, %d warnings",
            len(events), len(result.errors), len(result.warnings),
        )
        return result

    def _run(self, context: ValidationContext) -> ValidationResult:
        return ValidationResult.merge(
            self._run_rule(rule, context) for rule in self._rules
        )

    @staticmethod
    def _run_rule(rule: ValidationRule, context: ValidationContext) -> ValidationResult:
        try:
            return rule.check(context)
        except Exception as e:
            logger.exception("Validation rule %s failed", rule.id)
            return ValidationResult(valid=False, errors=[
                ValidationIssue(
                    rule_id=rule.id,
                    message=f"Rule {rule.name!r} raised {type(e).__name__}: {e}",
                )
            ])
