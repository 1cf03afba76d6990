"""CLI entry point for working with match tagger exports.

Provides ``main()`` for the ``match-tagger`` console script. Every
subcommand loads an export file (``{match, events, exportedAt}``) into an
``EventStore`` and works from there.

Usage::

    match-tagger stats export.json                     # team statistics
    match-tagger stats export.json --player p7         # one player
    match-tagger stats export.json --save              # also store statistics.json
    match-tagger validate export.json                  # exit 1 on errors
    match-tagger archive export.json --label half-time
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from match_tagger.config import TaggerConfig
from match_tagger.event_store import EventStore
from match_tagger.exceptions import MatchTaggerError
from match_tagger.logging_config import setup_logging
from match_tagger.match_stats import (
    compute_heat_map,
    compute_match_statistics,
    compute_player_statistics,
)
from match_tagger.models import ValidationResult
from match_tagger.storage import ExportStorage
from match_tagger.validation import ValidationEngine, default_rules

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the match-tagger CLI."""
    parser = argparse.ArgumentParser(
        prog="match-tagger",
        description="Statistics, validation and archiving for tagged football matches",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default="data",
        help="Data directory for archives, saved statistics and logs (default: data)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show DEBUG output on the console",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    stats = subparsers.add_parser("stats", help="Print match or player statistics")
    stats.add_argument("export", type=Path, help="Path to an export JSON file")
    stats.add_argument(
        "--player",
        type=str,
        default=None,
        help="Print statistics for this player ID instead of both teams",
    )
    stats.add_argument(
        "--heat-map",
        action="store_true",
        help="With --player, also print the player's heat map",
    )
    stats.add_argument(
        "--save",
        action="store_true",
        help="Store match statistics as statistics.json under the data directory",
    )

    validate = subparsers.add_parser(
        "validate", help="Run validation rules over events and statistics"
    )
    validate.add_argument("export", type=Path, help="Path to an export JSON file")

    archive = subparsers.add_parser(
        "archive", help="Store a gzipped copy of an export under the data directory"
    )
    archive.add_argument("export", type=Path, help="Path to an export JSON file")
    archive.add_argument(
        "--label",
        type=str,
        required=True,
        help="Archive label, e.g. half-time",
    )
    return parser


def load_store(path: Path) -> EventStore:
    """Read an export file into a fresh EventStore.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        InvalidPayloadError: If the file is not a valid export.
    """
    store = EventStore()
    store.import_events(path.read_text(encoding="utf-8"))
    return store


def _format_validation(result: ValidationResult) -> str:
    """Format a validation result into a human-readable summary string."""
    lines = [
        "=" * 60,
        "Validation " + ("passed" if result.valid else "FAILED"),
        "-" * 60,
        f"Errors:      {len(result.errors)}",
        f"Warnings:    {len(result.warnings)}",
    ]
    for issue in result.errors + result.warnings:
        field = f" [{issue.field}]" if issue.field else ""
        lines.append(f"  {issue.severity:<7} {issue.rule_id}{field}: {issue.message}")
    lines.append("=" * 60)
    return "\n".join(lines)


def run_stats(args: argparse.Namespace, config: TaggerConfig) -> int:
    store = load_store(args.export)
    match = store.require_match("stats")

    if args.player is not None:
        output = {
            "player": compute_player_statistics(
                args.player, match.id, store.events
            ).to_json_dict()
        }
        if args.heat_map:
            output["heatMap"] = compute_heat_map(
                args.player,
                match.id,
                store.events,
                columns=config.heat_map_columns,
                rows=config.heat_map_rows,
            ).to_json_dict()
        print(json.dumps(output, indent=2))
        return 0

    stats = compute_match_statistics(match, store.events)
    text = stats.model_dump_json(by_alias=True, indent=2)
    if args.save:
        path = ExportStorage(config.data_dir).save(text, match.id, kind="statistics")
        logger.info("Statistics saved to %s", path)
    print(text)
    return 0


def run_validate(args: argparse.Namespace, config: TaggerConfig) -> int:
    store = load_store(args.export)
    match = store.require_match("validate")
    events = store.events

    engine = ValidationEngine(default_rules(config))
    stats = compute_match_statistics(match, events)
    result = ValidationResult.merge([
        engine.validate_all_events(match, events),
        engine.validate_statistics(stats, match, events),
    ])
    print(_format_validation(result))
    return 0 if result.valid else 1


def run_archive(args: argparse.Namespace, config: TaggerConfig) -> int:
    store = load_store(args.export)
    match = store.require_match("archive")
    path = ExportStorage(config.data_dir).save(
        store.export_events(), match.id, kind="archive", label=args.label
    )
    print(path)
    return 0


_COMMANDS = {
    "stats": run_stats,
    "validate": run_validate,
    "archive": run_archive,
}


def main(argv: list[str] | None = None) -> int:
    """Entry point for the match-tagger console script.

    Returns the process exit code: 0 on success, 1 when validation finds
    errors, 2 when the export cannot be loaded, used or saved.
    """
    args = build_parser().parse_args(argv)
    log_file = setup_logging(
        data_dir=args.data_dir,
        console_level=logging.DEBUG if args.verbose else logging.INFO,
    )
    config = TaggerConfig(data_dir=args.data_dir)
    logger.debug("Running %s on %s (log: %s)", args.command, args.export, log_file)

    try:
        return _COMMANDS[args.command](args, config)
    except (FileNotFoundError, ValueError, MatchTaggerError) as e:
        logger.error("%s: %s", args.command, e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
