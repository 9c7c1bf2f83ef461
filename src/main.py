"""
Artemis archery practice tracker — entry point.

Usage:
    python -m src.main record                     # Simulated practice, instant
    python -m src.main record --preset beginner --ends 6 --notes "windy"
    python -m src.main record --live              # Shots arrive on a timer
    python -m src.main history                    # List saved practices
    python -m src.main stats --last 5             # Aggregate statistics
    python -m src.main export [PATH]              # CSV export
    python -m src.main notes ROUND_ID "text"      # Edit a practice's notes
    python -m src.main delete ROUND_ID
    python -m src.main import-json FILE           # Load rounds from JSON documents
    python -m src.main export-json FILE
"""

import argparse
import json
import logging
import signal
import sys
from pathlib import Path

from PyQt6.QtCore import QCoreApplication, QTimer

from src.database.db import Database
from src.database.serialization import round_to_document, rounds_from_documents
from src.database.store import PersistenceError
from src.export import export_csv, format_date
from src.mock_archer import PRESETS, MockArcher
from src.models.session import PracticeSession
from src.recorder import PracticeRecorder
from src.stats import compute_aggregate_stats, summarize_rounds
from src.utils.config import Config
from src.utils.constants import MAX_ENDS, MIN_ENDS, SHOTS_PER_END

# Upper bound on simulated placements per end before giving up (IGNORE policy)
MAX_ATTEMPTS_PER_SHOT = 50


def setup_logging(verbose: bool = False):
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def open_database(args) -> Database:
    return Database(Path(args.db) if args.db else None)


def create_recorder(args, db: Database) -> PracticeRecorder:
    config = Config()
    session = PracticeSession(
        ends_per_round=args.ends or config.get("ends_per_round"),
        off_target_policy=config.get("off_target_policy", "record"),
    )
    return PracticeRecorder(db, args.user, session=session)


def print_round(round_):
    print(f"\n{'='*60}")
    print(f"  Practice {round_.id}")
    print(f"{'='*60}")
    for index, end in enumerate(round_.ends, start=1):
        scores = " ".join(f"{s.score:>2}" for s in end.shots)
        print(f"  End {index:>2}:  {scores}   = {end.end_score:>3}   "
              f"group {end.precision:5.2f}")
    print(f"{'-'*60}")
    print(f"  Total:         {round_.total_score}")
    if round_.notes:
        print(f"  Notes:         {round_.notes}")
    print(f"{'='*60}")


def run_record(args) -> int:
    """Record one simulated practice and save it."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    db = open_database(args)
    recorder = create_recorder(args, db)
    archer = MockArcher(
        preset=args.preset,
        shot_interval=(args.interval_min, args.interval_max),
        shots_per_end=SHOTS_PER_END,
    )

    def on_shot(shot):
        end = recorder.session.current_end_index + 1
        print(f"  End {end:>2}  shot at ({shot.x:+.3f}, {shot.y:+.3f})  -> {shot.score}")

    recorder.shot_recorded.connect(on_shot)
    recorder.save_failed.connect(lambda msg: print(f"\n❌ Error: {msg}"))
    archer.shot_placed.connect(recorder.on_shot_placed)

    if args.live:
        return _record_live(args, app, recorder, archer)

    budget = recorder.session.ends_per_round * SHOTS_PER_END * MAX_ATTEMPTS_PER_SHOT
    while not recorder.session.is_complete and budget > 0:
        archer.trigger_shot()
        budget -= 1

    round_ = recorder.save_round(args.notes)
    if round_ is None:
        return 1
    print_round(round_)
    return 0


def _record_live(args, app, recorder: PracticeRecorder, archer: MockArcher) -> int:
    result = [1]

    def on_complete():
        archer.stop()
        round_ = recorder.save_round(args.notes)
        if round_ is not None:
            print_round(round_)
            result[0] = 0
        app.quit()

    recorder.round_completed.connect(on_complete)
    archer.started_shooting.connect(
        lambda: print(f"\n🏹 Shooting {recorder.session.ends_per_round} ends "
                      f"(preset={args.preset})... (Ctrl+C to quit)\n")
    )

    # Handle Ctrl+C gracefully
    def signal_handler(sig, frame):
        print("\n\nShutting down...")
        archer.stop()
        archer.wait(3000)
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    archer.start()

    # Keep the event loop waking up so SIGINT is noticed
    timer = QTimer()
    timer.timeout.connect(lambda: None)
    timer.start(100)

    app.exec()
    archer.wait(3000)
    return result[0]


def run_history(args) -> int:
    rounds = open_database(args).load_rounds(args.user)
    if not rounds:
        print("No practices recorded yet.")
        return 0
    for summary in summarize_rounds(rounds):
        precision = (f"{summary.average_precision:.2f}"
                     if summary.average_precision is not None else "N/A")
        print(f"  #{summary.practice_number:<4} {format_date(summary.created_at):<24} "
              f"total {summary.total_score:>4}  best end {summary.best_end:>3}  "
              f"group {precision:>5}  [{summary.round_id}]")
        if summary.notes:
            print(f"        {summary.notes}")
    return 0


def run_stats(args) -> int:
    rounds = open_database(args).load_rounds(args.user)
    if args.last:
        rounds = rounds[:args.last]
    stats = compute_aggregate_stats(rounds)
    print(f"  Practices:            {len(rounds)}")
    print(f"  Shots:                {stats.shot_count}")
    print(f"  Average score:        {stats.average_score:.2f}")
    print(f"  Avg dist. from centre:{stats.average_distance_from_center:7.2f}")
    print(f"  Missed shots:         {stats.missed_shots}")
    print(f"  Average grouping:     {stats.average_precision:.2f}")
    return 0


def run_export(args) -> int:
    rounds = open_database(args).load_rounds(args.user)
    target = Path(args.path) if args.path else Config.get_export_dir()
    path = export_csv(rounds, target)
    print(f"Exported {len(rounds)} practices to {path}")
    return 0


def run_notes(args) -> int:
    open_database(args).update_notes(args.user, args.round_id, args.text)
    print(f"Notes updated for {args.round_id}")
    return 0


def run_delete(args) -> int:
    open_database(args).delete_round(args.user, args.round_id)
    print(f"Deleted {args.round_id}")
    return 0


def run_import_json(args) -> int:
    docs = json.loads(Path(args.file).read_text(encoding="utf-8"))
    if not isinstance(docs, list):
        docs = [docs]
    rounds = rounds_from_documents(docs)
    open_database(args).save_rounds(args.user, rounds)
    print(f"Imported {len(rounds)} practices")
    return 0


def run_export_json(args) -> int:
    rounds = open_database(args).load_rounds(args.user)
    docs = [round_to_document(r) for r in rounds]
    Path(args.file).write_text(json.dumps(docs, indent=2), encoding="utf-8")
    print(f"Wrote {len(docs)} practices to {args.file}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Artemis archery practice tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--user", type=str, default=None,
        help="User whose practices to use (default: from config / ARTEMIS_USER)",
    )
    parser.add_argument(
        "--db", type=str, default=None,
        help="SQLite database path (default: ~/.artemis/artemis.db)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    record = sub.add_parser("record", help="Record a simulated practice")
    record.add_argument(
        "--preset", type=str, default=None, choices=sorted(PRESETS),
        help="Archer preset (default: from config)",
    )
    record.add_argument(
        "--ends", type=int, default=None,
        help=f"Ends per round, {MIN_ENDS}-{MAX_ENDS} (default: from config)",
    )
    record.add_argument("--notes", type=str, default="", help="Notes for the practice")
    record.add_argument(
        "--live", action="store_true",
        help="Place shots on a timer instead of all at once",
    )
    record.add_argument(
        "--interval-min", type=float, default=1.0,
        help="Minimum seconds between live shots (default: 1.0)",
    )
    record.add_argument(
        "--interval-max", type=float, default=3.0,
        help="Maximum seconds between live shots (default: 3.0)",
    )
    record.set_defaults(func=run_record)

    sub.add_parser("history", help="List saved practices").set_defaults(func=run_history)

    stats = sub.add_parser("stats", help="Aggregate statistics")
    stats.add_argument("--last", type=int, default=None, help="Only the N newest practices")
    stats.set_defaults(func=run_stats)

    export = sub.add_parser("export", help="Export practices to CSV")
    export.add_argument("path", nargs="?", default=None, help="File or directory")
    export.set_defaults(func=run_export)

    notes = sub.add_parser("notes", help="Replace a practice's notes")
    notes.add_argument("round_id")
    notes.add_argument("text")
    notes.set_defaults(func=run_notes)

    delete = sub.add_parser("delete", help="Delete a practice")
    delete.add_argument("round_id")
    delete.set_defaults(func=run_delete)

    imp = sub.add_parser("import-json", help="Import practices from JSON documents")
    imp.add_argument("file")
    imp.set_defaults(func=run_import_json)

    exp = sub.add_parser("export-json", help="Export practices as JSON documents")
    exp.add_argument("file")
    exp.set_defaults(func=run_export_json)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.user is None:
        args.user = Config.get_user_id()
    if getattr(args, "preset", "") is None:
        args.preset = Config().get("mock_preset", "club_archer")

    try:
        code = args.func(args)
    except (PersistenceError, OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}")
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
