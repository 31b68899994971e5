"""
Move resolver: turns one ply's token pair into a fully-specified move.

The resolver only reads the board. Applying the move (and producing SAN)
is the board facade's job, done by the caller right after each ply so the
next ply is classified against the right side to move.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

import chess

from chessfinder.decoder.alphabet import (
    is_square_token,
    promotion_hint_of,
    resolve_destination,
    square_of,
)
from chessfinder.decoder.errors import EmptySourceSquareError, OddTokenStreamError

if TYPE_CHECKING:
    from chessfinder.board import ChessBoard

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalMove:
    role: chess.PieceType
    from_square: chess.Square
    to_square: int  # may be off-board for a corrupt promotion hint
    captured: chess.PieceType | None = None
    promotion: chess.PieceType | None = None

    def __str__(self) -> str:
        return f"{chess.piece_symbol(self.role).upper()}{_name(self.from_square)}{_name(self.to_square)}"


@dataclass(frozen=True)
class CastleMove:
    king_square: chess.Square
    rook_square: chess.Square

    def __str__(self) -> str:
        return f"castle {_name(self.king_square)}{_name(self.rook_square)}"


MoveDescriptor = Union[NormalMove, CastleMove]


def _name(square: int) -> str:
    return chess.square_name(square) if 0 <= square < 64 else f"#{square}"


class TokenStream:
    """
    Forward cursor over an encoded move list.

    Consumed destructively: a stream that raised part-way through is spent,
    build a new one from the raw string to decode again.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def __len__(self) -> int:
        return len(self._text) - self._pos

    def __bool__(self) -> bool:
        return self._pos < len(self._text)

    @property
    def remaining(self) -> str:
        return self._text[self._pos:]

    @property
    def ply_count(self) -> int:
        """Complete plies in the whole list, consumed or not."""
        return len(self._text) // 2

    def pop(self) -> str:
        if not self:
            raise IndexError("pop from exhausted token stream")
        token = self._text[self._pos]
        self._pos += 1
        return token


def next_ply(tokens: TokenStream, board: ChessBoard) -> MoveDescriptor | None:
    """
    Resolve the next ply, or return None at the clean end of the stream.

    Raises:
        OddTokenStreamError: a single token is left.
        UnknownTokenError: a token is in neither alphabet.
        EmptySourceSquareError: the source square holds no piece.
    """
    if not tokens:
        return None
    if len(tokens) == 1:
        raise OddTokenStreamError(tokens.remaining)

    from_square = square_of(tokens.pop())
    end = tokens.pop()

    promotion: chess.PieceType | None = None
    if is_square_token(end):
        to_square = square_of(end)
    else:
        direction, promotion = promotion_hint_of(end)
        to_square = resolve_destination(board.turn, from_square, direction)
    logger.debug("Squares: %s, %s", _name(from_square), _name(to_square))

    piece = board.piece_at(from_square)
    if piece is None:
        raise EmptySourceSquareError(chess.square_name(from_square))

    move: MoveDescriptor
    if piece.piece_type == chess.KING and _is_castle(from_square, to_square):
        # A king only travels more than one file along its rank when castling.
        back_rank = 0 if board.turn == chess.WHITE else 7
        corner_file = 7 if chess.square_file(to_square) > chess.square_file(from_square) else 0
        move = CastleMove(from_square, chess.square(corner_file, back_rank))
    else:
        captured = board.piece_at(to_square) if 0 <= to_square < 64 else None
        move = NormalMove(
            role=piece.piece_type,
            from_square=from_square,
            to_square=to_square,
            captured=captured.piece_type if captured else None,
            promotion=promotion,
        )
    logger.debug("Move: %r", move)
    return move


def _is_castle(from_square: chess.Square, to_square: int) -> bool:
    if not 0 <= to_square < 64:
        return False
    same_rank = chess.square_rank(from_square) == chess.square_rank(to_square)
    file_distance = abs(chess.square_file(from_square) - chess.square_file(to_square))
    return same_rank and file_distance > 1
