"""
PGN assembly for chess.com live games.

Drives the token stream → move resolver → board pipeline ply by ply and
wraps the SAN it produces in a header block, move numbers, optional clock
comments and the result token.

Two move-text layouts:
  plain        1. e4 e5 2. Nf3 Nc6 1-0
  timestamped  1. e4 {[%clk 0:02:59.9]} 1... e5 {[%clk 0:02:58.7]} 1-0

The timestamped layout repeats the move number before Black's SAN, because a
comment between the two halves of a move requires it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Mapping

import chess

from chessfinder.board import ChessBoard
from chessfinder.decoder.errors import MalformedTimestampError, TimestampCountMismatchError
from chessfinder.decoder.moves import TokenStream, next_ply

logger = logging.getLogger(__name__)

LIVE_GAME_LINK = "https://www.chess.com/game/live/{}"


@dataclass(frozen=True)
class PgnHeaders:
    event: str = "?"
    site: str = "?"
    date: str = "????.??.??"
    white: str = "?"
    black: str = "?"
    result: str = "*"
    eco: str = "?"
    white_elo: int | None = None
    black_elo: int | None = None
    time_control: str = "-"
    end_time: str = "?"
    termination: str = "?"
    fen: str = chess.STARTING_FEN
    variant: str | None = None

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> PgnHeaders:
        """Build from chess.com's PascalCase `pgnHeaders` object."""
        defaults = cls()
        return cls(
            event=str(raw.get("Event", defaults.event)),
            site=str(raw.get("Site", defaults.site)),
            date=str(raw.get("Date", defaults.date)),
            white=str(raw.get("White", defaults.white)),
            black=str(raw.get("Black", defaults.black)),
            result=str(raw.get("Result", defaults.result)),
            eco=str(raw.get("ECO", defaults.eco)),
            white_elo=_optional_int(raw.get("WhiteElo")),
            black_elo=_optional_int(raw.get("BlackElo")),
            time_control=str(raw.get("TimeControl", defaults.time_control)),
            end_time=str(raw.get("EndTime", defaults.end_time)),
            termination=str(raw.get("Termination", defaults.termination)),
            fen=str(raw.get("FEN") or defaults.fen),
            variant=raw.get("Variant"),
        )


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def _tag(name: str, value: object) -> str:
    text = "?" if value is None else str(value)
    text = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'[{name} "{text}"]'


def render_headers(headers: PgnHeaders, link_id: str | int | None = None) -> str:
    """
    Header block in fixed tag order, terminated by the blank separator line.

    Not built with chess.pgn.Headers: that always carries the full Seven Tag
    Roster (adding Round) in its own order, whereas chess.com's live layout
    has no Round tag and puts Variant right after Result.
    """
    lines = [
        _tag("Event", headers.event),
        _tag("Site", headers.site),
        _tag("Date", headers.date),
        _tag("White", headers.white),
        _tag("Black", headers.black),
        _tag("Result", headers.result),
    ]
    if headers.variant:
        lines.append(_tag("Variant", headers.variant))
    lines += [
        _tag("ECO", headers.eco),
        _tag("WhiteElo", headers.white_elo),
        _tag("BlackElo", headers.black_elo),
        _tag("TimeControl", headers.time_control),
        _tag("EndTime", headers.end_time),
        _tag("Termination", headers.termination),
    ]
    if headers.fen != chess.STARTING_FEN:
        lines.append(_tag("SetUp", "1"))
        lines.append(_tag("FEN", headers.fen))
    if link_id is not None:
        lines.append(_tag("Link", LIVE_GAME_LINK.format(link_id)))
    return "\n".join(lines) + "\n\n"


# ------------------------------------------------------------------ #
# Clock timestamps                                                     #
# ------------------------------------------------------------------ #

def time_from_timestamp(ts: int) -> tuple[int, int, int, int]:
    """Split a clock reading in tenths of a second into (h, m, s, tenths)."""
    tenths = ts % 10
    seconds_total = ts // 10
    minutes_total = seconds_total // 60
    return minutes_total // 60, minutes_total % 60, seconds_total % 60, tenths


def format_clock(ts: int) -> str:
    hours, minutes, seconds, tenths = time_from_timestamp(ts)
    return f"{hours}:{minutes:02}:{seconds:02}.{tenths}"


def parse_timestamps(text: str) -> list[int]:
    """Parse chess.com's comma-separated `moveTimestamps` field."""
    if not text.strip():
        return []
    values: list[int] = []
    for item in text.split(","):
        item = item.strip()
        # str.isdigit() also accepts non-ASCII digits such as "²".
        if not (item.isascii() and item.isdigit()):
            raise MalformedTimestampError(item)
        values.append(int(item))
    return values


# ------------------------------------------------------------------ #
# Assembly                                                             #
# ------------------------------------------------------------------ #

def assemble(
    headers: PgnHeaders,
    move_tokens: str,
    timestamps: str | None = None,
    starting_fen: str | None = None,
    result: str | None = None,
    link_id: str | int | None = None,
) -> str:
    """
    Decode a compact move list into a complete PGN string.

    Raises a chessfinder.decoder.errors.DecodeError subclass on any malformed
    input; no partial PGN is returned.
    """
    fen = starting_fen or headers.fen or chess.STARTING_FEN
    board = ChessBoard(fen)
    tokens = TokenStream(move_tokens)

    clocks: list[int] | None = None
    if timestamps is not None:
        clocks = parse_timestamps(timestamps)
        if len(clocks) != tokens.ply_count:
            raise TimestampCountMismatchError(tokens.ply_count, len(clocks))

    parts = [render_headers(replace(headers, fen=fen), link_id)]
    move_number = 1
    ply = 0
    while (move := next_ply(tokens, board)) is not None:
        san = board.apply(move)
        white_just_moved = board.turn == chess.BLACK

        if clocks is None:
            if white_just_moved:
                parts.append(f"{move_number}. ")
                move_number += 1
            parts.append(f"{san} ")
        else:
            parts.append(f"{move_number}. " if white_just_moved else f"{move_number}... ")
            parts.append(san)
            parts.append(f" {{[%clk {format_clock(clocks[ply])}]}} ")
            if not white_just_moved:
                move_number += 1
        ply += 1

    logger.debug("Decoded %d plies", ply)
    parts.append(result if result is not None else headers.result)
    return "".join(parts)


@dataclass(frozen=True)
class LiveTranscript:
    """Everything a chess.com live game payload contributes to its PGN."""

    headers: PgnHeaders
    move_list: str
    move_timestamps: str | None = None
    game_id: str | None = None

    def render(self) -> str:
        return assemble(
            self.headers,
            self.move_list,
            timestamps=self.move_timestamps,
            starting_fen=self.headers.fen,
            result=self.headers.result,
            link_id=self.game_id,
        )
