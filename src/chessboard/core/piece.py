"""Piece record."""

from __future__ import annotations

from dataclasses import dataclass

from chessboard.core.enums import Color, PieceType
from chessboard.core.types import Square

_CHARS: dict[PieceType, str] = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}

_UNICODE: dict[tuple[Color, PieceType], str] = {
    (Color.WHITE, PieceType.PAWN): "♙",
    (Color.WHITE, PieceType.KNIGHT): "♘",
    (Color.WHITE, PieceType.BISHOP): "♗",
    (Color.WHITE, PieceType.ROOK): "♖",
    (Color.WHITE, PieceType.QUEEN): "♕",
    (Color.WHITE, PieceType.KING): "♔",
    (Color.BLACK, PieceType.PAWN): "♟",
    (Color.BLACK, PieceType.KNIGHT): "♞",
    (Color.BLACK, PieceType.BISHOP): "♝",
    (Color.BLACK, PieceType.ROOK): "♜",
    (Color.BLACK, PieceType.QUEEN): "♛",
    (Color.BLACK, PieceType.KING): "♚",
}


@dataclass(eq=False, slots=True)
class Piece:
    """A piece on the board.

    Pieces are compared by identity: the same piece is relocated and promoted
    in place rather than replaced.  ``handle`` is assigned by the
    :class:`~chessboard.core.store.PieceStore` that owns the piece and stays
    stable for the piece's whole life on the board.
    """

    kind: PieceType
    color: Color
    file: int
    rank: int
    handle: int = -1

    @property
    def square(self) -> Square:
        return Square(self.file, self.rank)

    @property
    def symbol(self) -> str:
        """Unicode chess symbol, e.g. ♞."""
        return _UNICODE[(self.color, self.kind)]

    def __str__(self) -> str:
        """Letter (uppercase = white, lowercase = black)."""
        char = _CHARS[self.kind]
        return char.upper() if self.color == Color.WHITE else char

    def __repr__(self) -> str:
        return (
            f"Piece({self.color} {self.kind} at {self.square}, handle={self.handle})"
        )
