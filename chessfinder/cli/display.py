"""
Rich-based game output.

This is the ONLY place where a found game is turned into terminal output.
Four formats: a summary table, compact JSON, pretty JSON and PGN.
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console, RenderableType
from rich.markup import escape
from rich.table import Table

from chessfinder.models import Game, Player

OUTPUTS = ("table", "json", "json-pretty", "pgn")

console = Console(legacy_windows=False)


class UnsupportedOutputError(ValueError):
    def __init__(self, output: str) -> None:
        self.output = output
        super().__init__(f"{output} output is not supported")


def display_game(game: Game, output: str, *, out: Console | None = None) -> None:
    """Render a game in the requested format and print it."""
    target = out or console
    rendered = render_game(game, output)
    if isinstance(rendered, str):
        # PGN tags look like Rich markup and clocks like emoji codes; print verbatim.
        target.print(rendered, markup=False, highlight=False, emoji=False, soft_wrap=True)
    else:
        target.print(rendered)


def render_game(game: Game, output: str) -> RenderableType:
    match output:
        case "table":
            return game_table(game)
        case "json":
            return json.dumps(game_to_dict(game), ensure_ascii=False)
        case "json-pretty":
            return json.dumps(game_to_dict(game), ensure_ascii=False, indent=2)
        case "pgn":
            return game.pgn()
        case _:
            raise UnsupportedOutputError(output)


# --------------------------------------------------------------------------- #
# Formats                                                                      #
# --------------------------------------------------------------------------- #

def game_table(game: Game) -> Table:
    table = Table(show_header=False, show_lines=True)
    table.add_column(style="bold")
    table.add_column()
    table.add_column()

    table.add_row(
        "Players",
        f"{_label(game.white)} ♔",
        f"{_label(game.black)} ♚",
    )
    if game.white.result is not None and game.black.result is not None:
        table.add_row("Result", game.white.result, game.black.result)
    table.add_row("URL", game.url, "")
    return table


def _label(player: Player) -> str:
    rating = player.rating if player.rating is not None else "?"
    name = f"{player.title} {player.name}" if player.title else player.name
    return escape(f"{name} ({rating})")


def game_to_dict(game: Game) -> dict[str, Any]:
    """JSON-safe view of a game; includes the (possibly decoded) PGN."""
    return {
        "provider": game.provider.value,
        "id": game.id,
        "url": game.url,
        "end_time": game.end_time.isoformat(),
        "white": _player_dict(game.white),
        "black": _player_dict(game.black),
        "pgn": game.pgn(),
    }


def _player_dict(player: Player) -> dict[str, Any]:
    return {
        "name": player.name,
        "rating": player.rating,
        "title": player.title,
        "url": player.url,
        "result": player.result,
    }
