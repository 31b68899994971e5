"""
Game search: by id, or the most recent game of a player matching filters.

The finder is API-agnostic. APIs with monthly archives (chess.com) are walked
newest month first; APIs with a search endpoint (lichess.org) get the filters
pushed down into a single query. Either way the same local matching decides
which game is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Literal

from chessfinder.api.base import ApiError, ChessApi, UserGamesQuery
from chessfinder.models import Color, Game

logger = logging.getLogger(__name__)

SearchKind = Literal["player", "id"]

# Upper bound on games requested from search-capable APIs per lookup.
QUERY_LIMIT = 50


class GameNotFoundError(Exception):
    def __init__(self, search: Search, api: str) -> None:
        self.search = search
        self.api = api
        super().__init__(
            f"no game found on {api} that matches {search.kind} {search.value!r}"
        )


@dataclass(frozen=True)
class Search:
    kind: SearchKind
    value: str


@dataclass
class GameFinder:
    search: Search
    api: str = "chess.com"
    pieces: Color | None = None
    year: int | None = None
    month: int | None = None
    day: int | None = None
    opponent: str | None = None

    @classmethod
    def by_player(cls, player: str, api: str = "chess.com") -> GameFinder:
        return cls(search=Search("player", player), api=api)

    @classmethod
    def by_id(cls, game_id: str, api: str = "chess.com") -> GameFinder:
        return cls(search=Search("id", game_id), api=api)

    def on_date(self, value: date) -> GameFinder:
        self.year, self.month, self.day = value.year, value.month, value.day
        return self

    def today(self) -> GameFinder:
        return self.on_date(datetime.now(timezone.utc).date())

    # ------------------------------------------------------------------ #
    # Search                                                               #
    # ------------------------------------------------------------------ #

    def find(self, api: ChessApi) -> Game:
        if self.search.kind == "id":
            return self.find_by_id(api)
        return self.find_by_player(api)

    def find_by_id(self, api: ChessApi) -> Game:
        logger.info("Getting game by id")
        try:
            return api.fetch_game(self.search.value)
        except ApiError as exc:
            if exc.status == 404:
                raise GameNotFoundError(self.search, api.name) from exc
            raise

    def find_by_player(self, api: ChessApi) -> Game:
        player = self.search.value
        if api.supports_archives:
            logger.info("Getting game archives")
            archives = self.year_month_archives(api.fetch_archives(player))
            logger.info("Looking for game, iterating through %d archives", len(archives))
            for year, month in reversed(archives):
                logger.info("At %02d/%d", month, year)
                games = api.fetch_month_games(player, year, month)
                found = self._first_match(games)
                if found is not None:
                    return found
        else:
            logger.info("Getting user games")
            since, until = self.date_window()
            query = UserGamesQuery(
                username=player,
                since=since,
                until=until,
                color=self.pieces,
                opponent=self.opponent,
                max_games=QUERY_LIMIT,
            )
            found = self._first_match(api.fetch_user_games(query))
            if found is not None:
                return found

        raise GameNotFoundError(self.search, api.name)

    def _first_match(self, games: list[Game]) -> Game | None:
        for game in sorted(games, key=lambda g: g.end_time, reverse=True):
            if self.matches(game):
                return game
        return None

    # ------------------------------------------------------------------ #
    # Filters                                                              #
    # ------------------------------------------------------------------ #

    def year_month_archives(self, archives: list[tuple[int, int]]) -> list[tuple[int, int]]:
        """Keep the (year, month) archives allowed by the year/month filters."""
        return [
            (y, m)
            for y, m in archives
            if (self.year is None or y == self.year)
            and (self.month is None or m == self.month)
        ]

    def date_window(self, today: date | None = None) -> tuple[datetime | None, datetime | None]:
        """
        UTC [since, until) window covering the requested year/month/day.

        A month or day given without its year (or a day without its month)
        refers to the current one.
        """
        if self.year is None and self.month is None and self.day is None:
            return None, None
        today = today or datetime.now(timezone.utc).date()
        year = self.year or today.year

        if self.month is None and self.day is None:
            return _utc(year, 1, 1), _utc(year + 1, 1, 1)

        month = self.month or today.month
        if self.day is None:
            start = _utc(year, month, 1)
            return start, first_day_next_month(start)

        start = _utc(year, month, self.day)
        return start, start + timedelta(days=1)

    def matches(self, game: Game) -> bool:
        return self.players_had_correct_colors(game) and self.played_on_expected_day(game)

    def played_on_expected_day(self, game: Game) -> bool:
        return self.day is None or game.end_time.day == self.day

    def players_had_correct_colors(self, game: Game) -> bool:
        if self.search.kind != "player":
            return True
        player = self.search.value.lower()
        white = game.white.name.lower()
        black = game.black.name.lower()

        match self.pieces:
            case "white":
                sides = [(white, black)]
            case "black":
                sides = [(black, white)]
            case _:
                sides = [(white, black), (black, white)]

        opponent = self.opponent.lower() if self.opponent else None
        return any(
            mine == player and (opponent is None or theirs == opponent)
            for mine, theirs in sides
        )


def _utc(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def first_day_next_month(value: datetime) -> datetime:
    if value.month == 12:
        return _utc(value.year + 1, 1, 1)
    return _utc(value.year, value.month + 1, 1)
