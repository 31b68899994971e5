"""
lichess.org API.

Games come with their PGN embedded (pgnInJson), so nothing needs decoding.
A player's games are searched with one NDJSON query; lichess has no monthly
archives.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from chessfinder.api.base import ChessApi, UserGamesQuery, from_epoch_millis, to_epoch_millis
from chessfinder.models import Color, Game, Player, Provider

logger = logging.getLogger(__name__)

SITE = "https://lichess.org"

# Export options shared by single-game and user-games requests.
_EXPORT_PARAMS = {
    "evals": True,
    "pgnInJson": True,
    "clocks": True,
    "opening": True,
}

_LOSS_CODES = {
    "mate": "checkmated",
    "resign": "resigned",
    "outoftime": "timeout",
    "timeout": "abandoned",
    "noStart": "abandoned",
}
_DRAW_CODES = {
    "stalemate": "stalemate",
    "draw": "agreed",
    "aborted": "aborted",
}
_UNFINISHED = {"created", "started"}


class LichessApi(ChessApi):
    name = Provider.LICHESS.value
    supports_archives = False

    def game_url(self, game_id: str) -> str:
        return f"{SITE}/game/export/{game_id}"

    def user_games_url(self, username: str) -> str:
        return f"{SITE}/api/games/user/{username}"

    def user_games_params(self, query: UserGamesQuery) -> dict[str, object]:
        params: dict[str, object] = dict(_EXPORT_PARAMS)
        if query.since is not None:
            params["since"] = to_epoch_millis(query.since)
        if query.until is not None:
            params["until"] = to_epoch_millis(query.until)
        if query.max_games is not None:
            params["max"] = query.max_games
        if query.color is not None:
            params["color"] = query.color
        if query.opponent:
            params["vs"] = query.opponent
        return params

    def fetch_game(self, game_id: str) -> Game:
        logger.info("Requesting game id %s", game_id)
        payload = self._get_json(self.game_url(game_id), _EXPORT_PARAMS)
        return self._parse(parse_game, payload)

    def fetch_user_games(self, query: UserGamesQuery) -> list[Game]:
        logger.info("Requesting user games for %s", query.username)
        items = self._get_ndjson(
            self.user_games_url(query.username), self.user_games_params(query)
        )
        return self._parse(lambda games: [parse_game(g) for g in games], items)


# --------------------------------------------------------------------------- #
# Payload mapping                                                              #
# --------------------------------------------------------------------------- #

def parse_game(raw: Mapping[str, Any]) -> Game:
    game_id = raw["id"]
    players = raw.get("players") or {}
    return Game(
        provider=Provider.LICHESS,
        id=game_id,
        white=_player(raw, players.get("white") or {}, "white"),
        black=_player(raw, players.get("black") or {}, "black"),
        url=f"{SITE}/{game_id}",
        end_time=from_epoch_millis(raw.get("lastMoveAt") or raw["createdAt"]),
        pgn_text=raw.get("pgn", ""),
    )


def _player(game: Mapping[str, Any], raw: Mapping[str, Any], color: Color) -> Player:
    user = raw.get("user")
    if user:
        return Player(
            name=user["name"],
            rating=raw.get("rating"),
            title=user.get("title"),
            url=f"{SITE}/@/{user['id']}",
            result=result_code(game, color),
        )
    # Fields are missing for anonymous players and the computer opponent.
    name = f"Stockfish level {raw['aiLevel']}" if "aiLevel" in raw else "Anonymous"
    return Player(name=name, rating=raw.get("rating"), result=result_code(game, color))


def result_code(game: Mapping[str, Any], color: Color) -> str | None:
    status = game.get("status")
    if status in _UNFINISHED:
        return None
    winner = game.get("winner")
    if winner:
        return "win" if winner == color else _LOSS_CODES.get(status, "lose")
    return _DRAW_CODES.get(status, "draw")
