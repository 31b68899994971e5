"""
Decode failures for the live-game move stream.

Every failure is local to one decode and carries the offending value, so the
caller can report it next to the game it came from. Nothing here is retried:
the input is either well-formed or the decode aborts.
"""

from __future__ import annotations


class DecodeError(Exception):
    """Base class for everything the move-stream decoder can raise."""


class UnknownTokenError(DecodeError):
    """A character outside both the square and the promotion alphabets."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"unknown move token {token!r}")


class OddTokenStreamError(DecodeError):
    """A trailing token with no partner; every ply consumes two."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"move list ends with an unpaired token {token!r}")


class EmptySourceSquareError(DecodeError):
    """The source square of a ply is empty, so the encoding is corrupt."""

    def __init__(self, square: str) -> None:
        self.square = square
        super().__init__(f"no piece on source square {square}")


class InvalidStartingPositionError(DecodeError):
    def __init__(self, fen: str, cause: Exception | None = None) -> None:
        self.fen = fen
        self.cause = cause
        super().__init__(f"invalid starting position {fen!r}")


class TimestampCountMismatchError(DecodeError):
    def __init__(self, plies: int, timestamps: int) -> None:
        self.plies = plies
        self.timestamps = timestamps
        super().__init__(
            f"move list has {plies} plies but {timestamps} timestamps were given"
        )


class MalformedTimestampError(DecodeError):
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"timestamp {value!r} is not a non-negative integer")


class IllegalMoveError(DecodeError):
    """The rules engine refused a move the resolver built."""

    def __init__(self, move: object, fen: str) -> None:
        self.move = move
        self.fen = fen
        super().__init__(f"illegal move {move} in position {fen}")
