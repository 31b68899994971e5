"""
Thin facade over python-chess Board.

Provides the exact interface the move-stream decoder needs without leaking
python-chess internals into the rest of the codebase: whose turn it is, what
stands on a square, and applying an already fully-specified move while
producing its SAN.
"""

from __future__ import annotations

import logging

import chess

from chessfinder.decoder.errors import IllegalMoveError, InvalidStartingPositionError
from chessfinder.decoder.moves import CastleMove, MoveDescriptor, NormalMove

logger = logging.getLogger(__name__)


class ChessBoard:
    """Facade over chess.Board, advanced one ply at a time and never rolled back."""

    def __init__(self, fen: str | None = None) -> None:
        fen = fen or chess.STARTING_FEN
        try:
            self._board = chess.Board(fen)
        except ValueError as exc:
            raise InvalidStartingPositionError(fen, exc) from exc

    # ------------------------------------------------------------------ #
    # State queries                                                        #
    # ------------------------------------------------------------------ #

    @property
    def fen(self) -> str:
        return self._board.fen()

    @property
    def turn(self) -> chess.Color:
        return self._board.turn

    @property
    def is_checkmate(self) -> bool:
        return self._board.is_checkmate()

    def piece_at(self, square: chess.Square) -> chess.Piece | None:
        return self._board.piece_at(square)

    # ------------------------------------------------------------------ #
    # Move application                                                    #
    # ------------------------------------------------------------------ #

    def apply(self, descriptor: MoveDescriptor) -> str:
        """
        Apply a resolved move and return its SAN, check/mate suffix included.

        Raises:
            IllegalMoveError: the move points off the board or python-chess
                does not accept it here (e.g. a promotion on a non-pawn).
        """
        move = self._to_chess_move(descriptor)
        if not self._board.is_legal(move):
            raise IllegalMoveError(descriptor, self.fen)
        san = self._board.san(move)
        self._board.push(move)
        logger.debug("Applied %s as %s", move.uci(), san)
        return san

    def _to_chess_move(self, descriptor: MoveDescriptor) -> chess.Move:
        match descriptor:
            case CastleMove(king_square=king, rook_square=rook):
                # Standard chess encodes a castle as the king's two-file step.
                step = 2 if chess.square_file(rook) > chess.square_file(king) else -2
                from_square, to_square, promotion = king, king + step, None
            case NormalMove():
                from_square = descriptor.from_square
                to_square = descriptor.to_square
                promotion = descriptor.promotion
            case _:
                raise TypeError(f"not a move descriptor: {descriptor!r}")

        if not (0 <= from_square < 64 and 0 <= to_square < 64):
            raise IllegalMoveError(descriptor, self.fen)
        return chess.Move(from_square, to_square, promotion=promotion)
