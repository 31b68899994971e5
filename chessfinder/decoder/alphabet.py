"""
Token alphabet of chess.com's compact move lists.

Each ply is two characters. The first is always a square token; the second
is either a square token or one of twelve promotion hints that encode the
promoted piece and the direction the pawn moved in.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Literal, Mapping

import chess

from chessfinder.decoder.errors import UnknownTokenError

Direction = Literal["left", "center", "right"]

# Index in this string is the square number, a1=0 … h8=63.
SQUARE_ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789!?"

_SQUARES: Mapping[str, int] = MappingProxyType(
    {token: square for square, token in enumerate(SQUARE_ALPHABET)}
)

PROMOTION_HINTS: Mapping[str, tuple[Direction, chess.PieceType]] = MappingProxyType({
    "{": ("left", chess.QUEEN),
    "~": ("center", chess.QUEEN),
    "}": ("right", chess.QUEEN),
    "(": ("left", chess.KNIGHT),
    "^": ("center", chess.KNIGHT),
    ")": ("right", chess.KNIGHT),
    "[": ("left", chess.ROOK),
    "_": ("center", chess.ROOK),
    "]": ("right", chess.ROOK),
    "@": ("left", chess.BISHOP),
    "#": ("center", chess.BISHOP),
    "$": ("right", chess.BISHOP),
})

# Left/right are board files as seen from White; the sign flips with the mover.
_OFFSETS: Mapping[chess.Color, Mapping[Direction, int]] = MappingProxyType({
    chess.WHITE: MappingProxyType({"left": 7, "center": 8, "right": 9}),
    chess.BLACK: MappingProxyType({"left": -9, "center": -8, "right": -7}),
})


def square_of(token: str) -> chess.Square:
    try:
        return _SQUARES[token]
    except KeyError:
        raise UnknownTokenError(token) from None


def token_of(square: chess.Square) -> str:
    return SQUARE_ALPHABET[square]


def is_square_token(token: str) -> bool:
    return token in _SQUARES


def promotion_hint_of(token: str) -> tuple[Direction, chess.PieceType]:
    try:
        return PROMOTION_HINTS[token]
    except KeyError:
        raise UnknownTokenError(token) from None


def resolve_destination(
    turn: chess.Color,
    from_square: chess.Square,
    direction: Direction,
) -> int:
    """
    Destination of a promoting pawn move.

    Plain arithmetic: the result may fall off the board (or wrap to the other
    edge) for a corrupt stream. The board facade is the legality authority and
    rejects such moves when they are applied.
    """
    return from_square + _OFFSETS[turn][direction]


_HINT_TOKENS: Mapping[tuple[Direction, chess.PieceType], str] = MappingProxyType(
    {hint: token for token, hint in PROMOTION_HINTS.items()}
)
_DIRECTIONS: tuple[Direction, Direction, Direction] = ("left", "center", "right")


def encode_move(move: chess.Move) -> str:
    """
    Two-token encoding of a python-chess move, the inverse of the decoder.

    Castles must be given in standard king-moves-two-files form (e1g1), which
    is what chess.Board produces outside Chess960.
    """
    if move.promotion is None:
        return token_of(move.from_square) + token_of(move.to_square)
    file_delta = chess.square_file(move.to_square) - chess.square_file(move.from_square)
    direction = _DIRECTIONS[file_delta + 1]
    return token_of(move.from_square) + _HINT_TOKENS[(direction, move.promotion)]
