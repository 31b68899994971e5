"""
Provider-neutral game model — the shared language between the API layer,
the finder and the CLI.

chess.com and lichess.org payloads are mapped onto the same Game/Player
dataclasses; the provider is a tag on the game rather than a separate type.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from chessfinder.decoder.pgn import LiveTranscript

Color = Literal["white", "black"]


class Provider(str, Enum):
    CHESS_COM = "chess.com"
    LICHESS = "lichess.org"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Player:
    name: str
    rating: int | None = None
    title: str | None = None
    url: str | None = None
    result: str | None = None  # provider result code, e.g. "win", "resigned"


@dataclass
class Game:
    provider: Provider
    id: str
    white: Player
    black: Player
    url: str
    end_time: datetime  # timezone-aware, UTC
    pgn_text: str | None = None
    transcript: LiveTranscript | None = None  # live games carry moves, not PGN

    def pgn(self) -> str:
        """
        The game's PGN.

        Live chess.com games are decoded from their compact move list on every
        call, so this can raise chessfinder.decoder.errors.DecodeError.
        """
        if self.transcript is not None:
            return self.transcript.render()
        return self.pgn_text or ""

    def player(self, color: Color) -> Player:
        return self.white if color == "white" else self.black

    @property
    def source(self) -> str:
        """Identifier used when reporting problems with this game's payload."""
        return f"{self.provider.value} game {self.id} ({self.url})"
