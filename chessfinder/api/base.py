"""
Abstract chess API interface.

Every concrete API (chess.com, lichess.org) implements ChessApi and maps its
JSON payloads onto the provider-neutral Game/Player models. Transport and
payload problems surface uniformly as ApiError.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, TypeVar

from chessfinder.http import HttpClient, HttpError
from chessfinder.models import Color, Game

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ApiError(Exception):
    """Raised when an API call fails or returns a payload we cannot map."""

    def __init__(
        self,
        api: str,
        message: str,
        status: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.api = api
        self.status = status
        self.cause = cause
        super().__init__(f"[{api}] {message}")


class EndpointNotImplementedError(ApiError):
    def __init__(self, api: str, endpoint: str) -> None:
        self.endpoint = endpoint
        super().__init__(api, f"endpoint {endpoint!r} is not implemented")


@dataclass(frozen=True)
class UserGamesQuery:
    """Server-side filters for APIs that can search a player's games directly."""

    username: str
    since: datetime | None = None
    until: datetime | None = None
    color: Color | None = None
    opponent: str | None = None
    max_games: int | None = None


class ChessApi(ABC):
    """Abstract base for all chess website backends."""

    name: str = ""
    # True: a player's games are browsed month by month via archives.
    # False: fetch_user_games() accepts a UserGamesQuery instead.
    supports_archives: bool = False

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    @abstractmethod
    def game_url(self, game_id: str) -> str:
        """Endpoint returning a single game by id."""
        ...

    @abstractmethod
    def fetch_game(self, game_id: str) -> Game:
        """
        Fetch a single game by id.

        Raises:
            ApiError: transport failure (status 404 when the game is unknown)
                      or an unexpected payload.
        """
        ...

    def fetch_archives(self, username: str) -> list[tuple[int, int]]:
        """(year, month) pairs for which the player has games, oldest first."""
        raise EndpointNotImplementedError(self.name, "/{user}/games/archives")

    def fetch_month_games(self, username: str, year: int, month: int) -> list[Game]:
        raise EndpointNotImplementedError(self.name, "/{user}/games/{year}/{month}")

    def fetch_user_games(self, query: UserGamesQuery) -> list[Game]:
        raise EndpointNotImplementedError(self.name, "/api/games/user/{user}")

    # ------------------------------------------------------------------ #
    # Helpers for subclasses                                               #
    # ------------------------------------------------------------------ #

    def _get_json(self, url: str, params: Mapping[str, object] | None = None) -> Any:
        try:
            return self._http.get_json(url, params)
        except HttpError as exc:
            raise ApiError(self.name, str(exc), status=exc.status, cause=exc) from exc

    def _get_ndjson(self, url: str, params: Mapping[str, object] | None = None) -> list[Any]:
        try:
            return self._http.get_ndjson(url, params)
        except HttpError as exc:
            raise ApiError(self.name, str(exc), status=exc.status, cause=exc) from exc

    def _parse(self, parser: Callable[[Any], T], payload: Any) -> T:
        """Run a payload mapper, turning shape mismatches into ApiError."""
        try:
            return parser(payload)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise ApiError(self.name, f"unexpected payload: {exc!r}", cause=exc) from exc


def from_epoch_seconds(value: int | float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


def from_epoch_millis(value: int | float) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def to_epoch_millis(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)
