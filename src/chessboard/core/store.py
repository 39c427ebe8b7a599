"""PieceStore - the live pieces on an 8x8 board."""

from __future__ import annotations

from collections.abc import Iterator

from chessboard.core.enums import Color, PieceType
from chessboard.core.errors import InvalidOperationError
from chessboard.core.piece import Piece
from chessboard.core.types import Square


class PieceStore:
    """Ordered collection of live pieces with at most one piece per square.

    Pieces are kept in insertion order and addressed by the ``handle`` the
    store assigns on :meth:`insert`.  The store holds no rule logic.
    """

    __slots__ = ("_pieces", "_squares", "_next_handle")

    def __init__(self) -> None:
        # handle -> piece, in insertion order.
        self._pieces: dict[int, Piece] = {}
        # square -> occupant.
        self._squares: dict[Square, Piece] = {}
        self._next_handle = 0

    # -- Element access -----------------------------------------------------

    def __len__(self) -> int:
        return len(self._pieces)

    def __iter__(self) -> Iterator[Piece]:
        return iter(list(self._pieces.values()))

    def __contains__(self, piece: object) -> bool:
        if not isinstance(piece, Piece):
            return False
        return self._pieces.get(piece.handle) is piece

    def at(self, sq: Square) -> Piece | None:
        return self._squares.get(sq)

    def is_empty(self, sq: Square) -> bool:
        return sq not in self._squares

    def by_handle(self, handle: int) -> Piece | None:
        return self._pieces.get(handle)

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color | None = None) -> list[Piece]:
        """Live pieces (of *color*, when given) in insertion order."""
        if color is None:
            return list(self._pieces.values())
        return [p for p in self._pieces.values() if p.color == color]

    def king(self, color: Color) -> Piece | None:
        """The first king of *color*, or ``None`` when it is off the board."""
        for piece in self._pieces.values():
            if piece.kind == PieceType.KING and piece.color == color:
                return piece
        return None

    # -- Mutation -----------------------------------------------------------

    def insert(self, piece: Piece) -> Piece:
        """Place *piece* on its own square and assign it a handle."""
        sq = piece.square
        if sq in self._squares:
            raise InvalidOperationError(f"Square {sq} is already occupied")
        if piece in self:
            raise InvalidOperationError(f"{piece!r} is already on the board")
        piece.handle = self._next_handle
        self._next_handle += 1
        self._pieces[piece.handle] = piece
        self._squares[sq] = piece
        return piece

    def discard(self, piece: Piece) -> bool:
        """Remove *piece* if present. Returns whether anything was removed."""
        if piece not in self:
            return False
        del self._pieces[piece.handle]
        del self._squares[piece.square]
        return True

    def relocate(self, piece: Piece, sq: Square) -> None:
        """Move *piece* to the empty square *sq*."""
        if piece not in self:
            raise InvalidOperationError(f"{piece!r} is not on the board")
        occupant = self._squares.get(sq)
        if occupant is not None and occupant is not piece:
            raise InvalidOperationError(f"Square {sq} is already occupied")
        del self._squares[piece.square]
        piece.file, piece.rank = sq
        self._squares[sq] = piece

    def clear(self) -> None:
        self._pieces.clear()
        self._squares.clear()

    # -- Dunder helpers -----------------------------------------------------

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self._squares.get(Square(file, rank))
                row.append(str(p) if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
