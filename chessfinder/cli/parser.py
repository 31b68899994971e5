"""
Command-line arguments and their translation into a GameFinder.
"""

from __future__ import annotations

import argparse
from datetime import date, datetime, timezone
from typing import Sequence

from chessfinder.api import SUPPORTED_APIS
from chessfinder.finder import GameFinder

VERSION = "0.4.0"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cgf",
        description="Finds games using online chess APIs.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "player_or_id",
        metavar="PLAYER_OR_ID",
        help=(
            "A game ID or a player's username whose game to look for. If it contains "
            "only digits it is taken as a game ID unless --player is used."
        ),
    )
    parser.add_argument(
        "--player",
        action="store_true",
        help="Force search by player username instead of game ID.",
    )
    parser.add_argument(
        "-a", "--api",
        choices=SUPPORTED_APIS,
        default=None,
        help="Choose the API where to find your chess games (default: chess.com).",
    )

    pieces = parser.add_mutually_exclusive_group()
    pieces.add_argument(
        "--white", dest="pieces", action="store_const", const="white",
        help="Fetch games with white pieces.",
    )
    pieces.add_argument(
        "--black", dest="pieces", action="store_const", const="black",
        help="Fetch games with black pieces.",
    )
    parser.add_argument("--vs", dest="opponent", metavar="OPPONENT",
                        help="Only games against this opponent.")

    output = parser.add_mutually_exclusive_group()
    output.add_argument("--table", dest="output", action="store_const", const="table",
                        help="Output a summary table (default).")
    output.add_argument("--json", dest="output", action="store_const", const="json",
                        help="Output game as JSON.")
    output.add_argument("--json-pretty", dest="output", action="store_const", const="json-pretty",
                        help="Output game as pretty JSON.")
    output.add_argument("--pgn", dest="output", action="store_const", const="pgn",
                        help="Output game PGN string.")

    parser.add_argument("-y", "--year", type=int, help="Fetch games from a specific year.")
    parser.add_argument("-m", "--month", type=_bounded(1, 12, "month"),
                        help="Fetch games from a specific month (1-12).")
    parser.add_argument("-d", "--day", type=_bounded(1, 31, "day"),
                        help="Fetch games from a specific day of the month (1-31).")
    parser.add_argument("--date", type=_iso_date,
                        help="Fetch games from a specific date (YYYY-MM-DD or RFC 3339).")

    parser.add_argument("-c", "--config", default=None,
                        help="Path to a YAML config file (default: ./cgf.yaml if present).")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Log progress to stderr; repeat for debug output.")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.date is not None and any(
        value is not None for value in (args.year, args.month, args.day)
    ):
        parser.error("--date cannot be combined with --year, --month or --day")
    return args


def finder_from_args(args: argparse.Namespace, default_api: str = "chess.com") -> GameFinder:
    api = args.api or default_api
    value: str = args.player_or_id
    if args.player or not value.isdigit():
        finder = GameFinder.by_player(value, api)
    else:
        finder = GameFinder.by_id(value, api)

    finder.pieces = args.pieces
    finder.opponent = args.opponent
    if args.date is not None:
        finder.on_date(args.date)
    else:
        finder.year, finder.month, finder.day = args.year, args.month, args.day
    return finder


def _bounded(low: int, high: int, name: str):
    def parse(text: str) -> int:
        try:
            value = int(text)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid {name}: {text!r}") from None
        if not low <= value <= high:
            raise argparse.ArgumentTypeError(f"{name} must be between {low} and {high}")
        return value
    return parse


def _iso_date(text: str) -> date:
    # fromisoformat() only accepts a trailing "Z" from Python 3.11 on.
    normalized = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date: {text!r}") from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()
