"""
chess.com API.

Two different backends are involved:
  * the public API (api.chess.com/pub) for a player's monthly archives, whose
    games already carry a PGN;
  * the live-game callback (www.chess.com/callback/live/game/{id}) for a
    single game, which only carries the compact move list. Its PGN is decoded
    on demand by chessfinder.decoder.
"""

from __future__ import annotations

import logging
import urllib.parse
from typing import Any, Iterable, Mapping

from chessfinder.api.base import ChessApi, from_epoch_seconds
from chessfinder.decoder.pgn import LiveTranscript, PgnHeaders
from chessfinder.models import Color, Game, Player, Provider

logger = logging.getLogger(__name__)

PUB_API = "https://api.chess.com/pub"
LIVE_GAME_CALLBACK = "https://www.chess.com/callback/live/game/{}"
LIVE_GAME_PAGE = "https://www.chess.com/live/game/{}"
MEMBER_PAGE = "https://www.chess.com/member/{}"

_DRAW_CODES = {
    "Game drawn by repetition": "repetition",
    "Game drawn by insufficient material": "insufficient",
    "Game drawn by agreement": "agreed",
}


class ChessComApi(ChessApi):
    name = Provider.CHESS_COM.value
    supports_archives = True

    def game_url(self, game_id: str) -> str:
        return LIVE_GAME_CALLBACK.format(game_id)

    def archives_url(self, username: str) -> str:
        return f"{PUB_API}/player/{username}/games/archives"

    def month_games_url(self, username: str, year: int, month: int) -> str:
        return f"{PUB_API}/player/{username}/games/{year}/{month:02}"

    def fetch_game(self, game_id: str) -> Game:
        logger.info("Requesting game id %s", game_id)
        payload = self._get_json(self.game_url(game_id))
        return self._parse(parse_live_game, payload)

    def fetch_archives(self, username: str) -> list[tuple[int, int]]:
        logger.info("Requesting archives for %s", username)
        payload = self._get_json(self.archives_url(username))
        return self._parse(lambda p: archive_months(p["archives"]), payload)

    def fetch_month_games(self, username: str, year: int, month: int) -> list[Game]:
        logger.info("Requesting games for %s at %02d/%d", username, month, year)
        payload = self._get_json(self.month_games_url(username, year, month))
        return self._parse(lambda p: [parse_archive_game(g) for g in p["games"]], payload)


# --------------------------------------------------------------------------- #
# Payload mapping                                                              #
# --------------------------------------------------------------------------- #

def archive_months(urls: Iterable[str]) -> list[tuple[int, int]]:
    """Extract (year, month) from archive URLs ending in /games/{YYYY}/{MM}."""
    months: list[tuple[int, int]] = []
    for url in urls:
        segments = urllib.parse.urlsplit(url).path.rstrip("/").split("/")
        try:
            year, month = int(segments[-2]), int(segments[-1])
        except (IndexError, ValueError):
            logger.warning("Skipping unrecognised archive URL %s", url)
            continue
        months.append((year, month))
    return months


def parse_archive_game(raw: Mapping[str, Any]) -> Game:
    """Map one entry of a monthly archive (public API, snake_case)."""
    url = raw["url"]
    return Game(
        provider=Provider.CHESS_COM,
        id=url.rstrip("/").rsplit("/", 1)[-1],
        white=_archive_player(raw["white"]),
        black=_archive_player(raw["black"]),
        url=url,
        end_time=from_epoch_seconds(raw["end_time"]),
        pgn_text=raw.get("pgn", ""),
    )


def _archive_player(raw: Mapping[str, Any]) -> Player:
    return Player(
        name=raw["username"],
        rating=raw.get("rating"),
        url=raw.get("@id"),
        result=raw.get("result"),
    )


def parse_live_game(payload: Mapping[str, Any]) -> Game:
    """Map the live-game callback payload (camelCase, players as top/bottom)."""
    game = payload["game"]
    game_id = str(game["id"])
    return Game(
        provider=Provider.CHESS_COM,
        id=game_id,
        white=_live_player(payload, "white"),
        black=_live_player(payload, "black"),
        url=LIVE_GAME_PAGE.format(game_id),
        end_time=from_epoch_seconds(game["endTime"]),
        transcript=LiveTranscript(
            headers=PgnHeaders.from_json(game.get("pgnHeaders") or {}),
            move_list=game.get("moveList", ""),
            move_timestamps=game.get("moveTimestamps"),
            game_id=game_id,
        ),
    )


def _seat(payload: Mapping[str, Any], color: Color) -> Mapping[str, Any]:
    players = payload["players"]
    return players["top"] if players["top"].get("color") == color else players["bottom"]


def _live_player(payload: Mapping[str, Any], color: Color) -> Player:
    raw = _seat(payload, color)
    return Player(
        name=raw["username"],
        rating=raw.get("rating"),
        title=raw.get("chessTitle"),
        url=MEMBER_PAGE.format(raw["username"]),
        result=live_result_code(payload, color),
    )


def live_result_code(payload: Mapping[str, Any], color: Color) -> str | None:
    """
    Result code for one side of a live game, in the public API's vocabulary
    (win, checkmated, timeout, resigned, stalemate, repetition, …).

    None while the game is still being played.
    """
    game = payload["game"]
    if not game.get("isFinished", True):
        return None

    winner = game.get("colorOfWinner")
    message = game.get("resultMessage", "")
    if winner:
        if winner == color:
            return "win"
        if game.get("isCheckmate"):
            return "checkmated"
        if _seat(payload, color).get("turnTimeRemaining") == "Out of time":
            return "timeout"
        if "resignation" in message:
            return "resigned"
        return "lose"

    if game.get("isStalemate"):
        return "stalemate"
    # Variant-specific draws are not distinguished.
    return _DRAW_CODES.get(message, "timevsinsufficient")
