"""
Oneiro command line: analyze a dream and manage the local dream journal.
"""

from __future__ import annotations
import argparse
import asyncio
import json
import sys
from datetime import datetime
from typing import List, Optional

from shared.config import settings
from shared.journal import DreamJournal
from shared.log_setup import setup_logging
from shared.models import DreamAnalysisResult, JournalEntry
from agents.dream_analysis import DreamAnalysisError, DreamAnalyzer


def format_report(result: DreamAnalysisResult) -> str:
    state = result.psychologicalState
    health = result.healthReport
    lines = [
        result.title,
        "=" * len(result.title),
        f"Intensity level {result.dreamLevel}/5 - {result.dreamLevelLabel}",
        "",
        result.summary,
        "",
        "Interpretation",
        "--------------",
        result.interpretation,
        "",
        "Symbols",
        "-------",
    ]
    for s in result.symbols:
        lines.append(f"* {s.name} ({s.archetype}): {s.meaning}")
    lines += [
        "",
        "Psychological state",
        "-------------------",
        f"Stress level: {state.stressLevel}/100",
        f"Burnout risk: {state.burnoutRisk}",
        f"Emotions: {', '.join(state.emotions)}",
        "",
        "Health report",
        "-------------",
        f"Sleep quality: {health.sleepQualityLikelihood}",
        f"Bedtime routine: {health.suggestedBedtimeRoutine}",
        f"Waking life: {health.wakingLifeCorrelation}",
    ]
    return "\n".join(lines)


def _format_entry_line(entry: JournalEntry) -> str:
    day = datetime.fromtimestamp(entry.timestamp / 1000).strftime("%Y-%m-%d")
    return f"{entry.id}  {day}  L{entry.dreamLevel}  {entry.title}"


def _emit(result: DreamAnalysisResult, as_json: bool):
    if as_json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
    else:
        print(format_report(result))


def analyze_command(args, analyzer: Optional[DreamAnalyzer] = None) -> int:
    text = args.text if args.text is not None else sys.stdin.read()
    if not text.strip():
        print("Error: dream text is required.", file=sys.stderr)
        return 2

    analyzer = analyzer or DreamAnalyzer()
    try:
        result = asyncio.run(analyzer.analyze(text, args.context, args.sleep_quality))
    except DreamAnalysisError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.save:
        result = DreamJournal(args.journal).save(result)
    _emit(result, args.json)
    if args.save:
        print(f"\nSaved to journal as {result.id}", file=sys.stderr)
    return 0


def journal_command(args) -> int:
    journal = DreamJournal(args.journal)

    if args.journal_action == "list":
        entries = journal.entries()
        if not entries:
            print("No dreams recorded yet.")
        for entry in entries:
            print(_format_entry_line(entry))
        return 0

    if args.journal_action == "show":
        entry = journal.get(args.id)
        if entry is None:
            print(f"Error: no journal entry {args.id}", file=sys.stderr)
            return 1
        _emit(entry, args.json)
        return 0

    if args.journal_action == "delete":
        if not journal.delete(args.id):
            print(f"Error: no journal entry {args.id}", file=sys.stderr)
            return 1
        print(f"Deleted {args.id}")
        return 0

    return 2


def _sleep_quality(value: str) -> int:
    n = int(value)
    if not 1 <= n <= 5:
        raise argparse.ArgumentTypeError("sleep quality must be between 1 and 5")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Oneiro - AI dream analysis and local dream journal",
        prog="oneiro",
    )
    parser.add_argument(
        "--journal",
        default=settings.journal_path,
        help=f"Journal file (default: {settings.journal_path})",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser("analyze", help="Analyze a dream")
    analyze_parser.add_argument(
        "text",
        nargs="?",
        help="Dream description (if not provided, reads from stdin)",
    )
    analyze_parser.add_argument("--context", help="Waking-life context for the dream")
    analyze_parser.add_argument(
        "--sleep-quality",
        type=_sleep_quality,
        help="Sleep quality before the dream: 1 (Poor) to 5 (Excellent)",
    )
    analyze_parser.add_argument("--save", action="store_true", help="Save the analysis to the journal")
    analyze_parser.add_argument("--json", action="store_true", help="Print raw JSON")

    journal_parser = subparsers.add_parser("journal", help="Manage saved dreams")
    journal_sub = journal_parser.add_subparsers(dest="journal_action", required=True)
    journal_sub.add_parser("list", help="List saved dreams, newest first")
    show_parser = journal_sub.add_parser("show", help="Show a saved dream")
    show_parser.add_argument("id")
    show_parser.add_argument("--json", action="store_true", help="Print raw JSON")
    delete_parser = journal_sub.add_parser("delete", help="Delete a saved dream")
    delete_parser.add_argument("id")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    setup_logging()

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "analyze":
        return analyze_command(args)
    if args.command == "journal":
        return journal_command(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
