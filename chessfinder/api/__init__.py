"""
API factory.

create_api() is the single entry point for instantiating any ChessApi.

To add a new website:
  1. Create chessfinder/api/<name>.py implementing ChessApi
  2. Add a case here in create_api()
  3. Add the name to SUPPORTED_APIS so the CLI and config accept it
"""

from __future__ import annotations

from chessfinder.api.base import ApiError, ChessApi, EndpointNotImplementedError, UserGamesQuery
from chessfinder.api.chessdotcom import ChessComApi
from chessfinder.api.lichess import LichessApi
from chessfinder.http import HttpClient

__all__ = [
    "ApiError",
    "ChessApi",
    "ChessComApi",
    "EndpointNotImplementedError",
    "LichessApi",
    "SUPPORTED_APIS",
    "UserGamesQuery",
    "create_api",
]

SUPPORTED_APIS = ("chess.com", "lichess.org")


def create_api(name: str, http: HttpClient | None = None) -> ChessApi:
    """Instantiate the ChessApi for the given website name."""
    http = http or HttpClient()
    match name:
        case "chess.com":
            return ChessComApi(http)
        case "lichess.org":
            return LichessApi(http)
        case _:
            raise ValueError(
                f"Unknown API: '{name}'. Supported: {', '.join(SUPPORTED_APIS)}"
            )
