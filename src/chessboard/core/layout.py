"""Layout - immutable occupancy snapshot used for move simulation."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from chessboard.core.enums import Color, PieceType
from chessboard.core.errors import InvalidOperationError
from chessboard.core.piece import Piece
from chessboard.core.types import Square


class Layout:
    """Square → piece snapshot of a board.

    A layout is never mutated after construction.  :meth:`apply` returns a
    new layout with one hypothetical move played, so the live store is never
    used as scratch space.  Pieces are located by their store handle, not by
    their own ``file``/``rank`` attributes, which always describe the live
    board.
    """

    __slots__ = ("_squares", "_where")

    def __init__(self, squares: Mapping[Square, Piece]) -> None:
        self._squares: dict[Square, Piece] = dict(squares)
        # handle -> square
        self._where: dict[int, Square] = {
            piece.handle: sq for sq, piece in self._squares.items()
        }

    @classmethod
    def from_pieces(cls, pieces: Iterable[Piece]) -> Layout:
        return cls({piece.square: piece for piece in pieces})

    # -- Queries ------------------------------------------------------------

    def at(self, sq: Square) -> Piece | None:
        return self._squares.get(sq)

    def square_of(self, piece: Piece) -> Square | None:
        sq = self._where.get(piece.handle)
        if sq is None or self._squares[sq] is not piece:
            return None
        return sq

    def pieces(self, color: Color | None = None) -> list[Piece]:
        found = [self._squares[sq] for sq in self._where.values()]
        if color is None:
            return found
        return [p for p in found if p.color == color]

    def king(self, color: Color) -> Piece | None:
        for piece in self.pieces(color):
            if piece.kind == PieceType.KING:
                return piece
        return None

    def __len__(self) -> int:
        return len(self._squares)

    # -- Simulation ---------------------------------------------------------

    def apply(self, piece: Piece, to: Square, capture: Piece | None = None) -> Layout:
        """Return a new layout with *capture* lifted and *piece* moved to *to*."""
        from_sq = self.square_of(piece)
        if from_sq is None:
            raise InvalidOperationError(f"{piece!r} is not in the layout")

        squares = dict(self._squares)
        if capture is not None:
            capture_sq = self.square_of(capture)
            if capture_sq is None:
                raise InvalidOperationError(f"{capture!r} is not in the layout")
            del squares[capture_sq]

        occupant = squares.get(to)
        if occupant is not None and occupant is not piece:
            raise InvalidOperationError(f"Square {to} is already occupied")
        del squares[from_sq]
        squares[to] = piece

        layout = Layout.__new__(Layout)
        layout._squares = squares
        where = dict(self._where)
        if capture is not None:
            del where[capture.handle]
        where[piece.handle] = to
        layout._where = where
        return layout
