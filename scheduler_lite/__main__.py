"""Command-line entry for scheduler_lite.

This module provides a small, import-light CLI that parses arguments and
hands them to the package's run_cli() entrypoint.
"""

from __future__ import annotations

import argparse
import sys
from typing import NoReturn, Optional

from . import run_cli
from .cli_commands import (
    parse_count_arg,
    parse_date_arg,
    parse_datetime_arg,
    parse_interval_arg,
    parse_minutes_arg,
    parse_month_arg,
)


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for scheduler_lite CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="scheduler_lite",
        description="Scheduler Lite - personal calendar with recurring events and reminders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m scheduler_lite day                  # Today's events
  python -m scheduler_lite week 2026-01-05      # The week containing 5 Jan 2026
  python -m scheduler_lite month 2026-02        # February 2026
  python -m scheduler_lite next-reminder        # The next reminder due
  python -m scheduler_lite add "Gym" 2026-01-05T18:00 2026-01-05T19:00 --every 1w
  python -m scheduler_lite search --title gym   # Events whose title contains "gym"
        """,
    )

    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Config file (default: ./scheduler_lite/config.yaml)",
    )
    parser.add_argument(
        "--data-dir",
        metavar="DIR",
        help="Directory with the CSV data files (default: data, or SCHEDULER_DATA_DIR)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level (default: INFO, or SCHEDULER_LOG_LEVEL)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable DEBUG logging for every logger",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    day = subparsers.add_parser("day", help="Show one day")
    day.add_argument("date", nargs="?", type=parse_date_arg, help="YYYY-MM-DD (default: today)")

    week = subparsers.add_parser("week", help="Show the week containing a date")
    week.add_argument("date", nargs="?", type=parse_date_arg, help="YYYY-MM-DD (default: today)")

    month = subparsers.add_parser("month", help="Show a month grid and its events")
    month.add_argument("month", nargs="?", type=parse_month_arg, help="YYYY-MM (default: this month)")

    subparsers.add_parser("next-reminder", help="Show the next upcoming reminder")

    backup = subparsers.add_parser("backup", help="Write all data into one backup file")
    backup.add_argument("path", nargs="?", help="Backup file (default: from config)")

    restore = subparsers.add_parser("restore", help="Merge a backup file into the data files")
    restore.add_argument("path", nargs="?", help="Backup file (default: from config)")

    add = subparsers.add_parser("add", help="Add an event unless it overlaps another")
    add.add_argument("title")
    add.add_argument("start", type=parse_datetime_arg, help="YYYY-MM-DDTHH:MM")
    add.add_argument("end", type=parse_datetime_arg, help="YYYY-MM-DDTHH:MM")
    add.add_argument("--description", default="")
    _add_additional_arguments(add)
    _add_repeat_arguments(add)
    add.add_argument(
        "--remind", type=parse_minutes_arg, metavar="MINUTES", help="Reminder offset in minutes"
    )

    update = subparsers.add_parser("update", help="Change fields of an event")
    update.add_argument("event_id", type=int, metavar="ID")
    update.add_argument("--title")
    update.add_argument("--description")
    update.add_argument("--start", type=parse_datetime_arg, help="YYYY-MM-DDTHH:MM")
    update.add_argument("--end", type=parse_datetime_arg, help="YYYY-MM-DDTHH:MM")
    _add_additional_arguments(update)

    delete = subparsers.add_parser("delete", help="Delete an event and its linked records")
    delete.add_argument("event_id", type=int, metavar="ID")

    search = subparsers.add_parser("search", help="Find stored events")
    criteria = search.add_mutually_exclusive_group(required=True)
    criteria.add_argument("--title", metavar="KEYWORD")
    criteria.add_argument("--date", type=parse_date_arg, help="YYYY-MM-DD")
    criteria.add_argument(
        "--range", nargs=2, type=parse_date_arg, metavar=("FROM", "TO"), help="Inclusive dates"
    )
    criteria.add_argument("--location", metavar="KEYWORD")
    criteria.add_argument("--category", metavar="KEYWORD")

    remind = subparsers.add_parser("remind", help="Set or remove the reminder of an event")
    remind.add_argument("event_id", type=int, metavar="ID")
    remind_action = remind.add_mutually_exclusive_group(required=True)
    remind_action.add_argument("--minutes", type=parse_minutes_arg, help="Minutes before the event")
    remind_action.add_argument("--remove", action="store_true")

    recur = subparsers.add_parser("recur", help="Set or remove the recurrence of an event")
    recur.add_argument("event_id", type=int, metavar="ID")
    recur_action = recur.add_mutually_exclusive_group(required=True)
    recur_action.add_argument(
        "--every", type=parse_interval_arg, metavar="INTERVAL", help="e.g. 1d, 2w, 1m, 1y"
    )
    recur_action.add_argument("--remove", action="store_true")
    _add_limit_arguments(recur)

    return parser


def _add_additional_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--location")
    parser.add_argument("--category")


def _add_limit_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--count", type=parse_count_arg, help="Total occurrences, the first one included"
    )
    parser.add_argument("--until", type=parse_date_arg, help="Last date (YYYY-MM-DD)")


def _add_repeat_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--every", type=parse_interval_arg, metavar="INTERVAL", help="e.g. 1d, 2w, 1m, 1y"
    )
    _add_limit_arguments(parser)


def main(argv: Optional[list[str]] = None) -> NoReturn:
    """Run the scheduler_lite CLI."""
    parser = _create_parser()
    args = parser.parse_args(argv)
    sys.exit(run_cli(args))


if __name__ == "__main__":
    main()
