"""Per-piece move generation, attack detection and the self-check filter."""

from __future__ import annotations

from chessboard.core.enums import PieceType
from chessboard.core.errors import InvalidOperationError
from chessboard.core.layout import Layout
from chessboard.core.move import CandidateMove, MoveRecord
from chessboard.core.piece import Piece
from chessboard.core.types import Square, in_bounds

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (1, 2),
    (2, 1),
    (-1, 2),
    (-2, 1),
    (1, -2),
    (2, -1),
    (-1, -2),
    (-2, -1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
    (0, -1),
    (1, -1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((1, 0), (0, 1), (-1, 0), (0, -1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = KING_OFFSETS

_SLIDING_DIRS: dict[PieceType, tuple[tuple[int, int], ...]] = {
    PieceType.BISHOP: BISHOP_DIRS,
    PieceType.ROOK: ROOK_DIRS,
    PieceType.QUEEN: QUEEN_DIRS,
}


class MoveGenerator:
    """Generates candidate moves for pieces of a :class:`Layout`.

    ``last_move`` is the most recent history entry; it only feeds en passant.
    Hypothetical moves are played on new layouts via :meth:`Layout.apply`, so
    the generator never mutates anything.
    """

    __slots__ = ("_layout", "_last_move")

    def __init__(self, layout: Layout, last_move: MoveRecord | None = None) -> None:
        self._layout = layout
        self._last_move = last_move

    @property
    def layout(self) -> Layout:
        return self._layout

    # -- Public API ---------------------------------------------------------

    def legal_moves(
        self, piece: Piece, skip_check_filter: bool = False
    ) -> list[CandidateMove]:
        """Candidate moves for *piece*.

        With ``skip_check_filter`` the raw move set is returned, which may
        leave the mover's own king attacked.  Attack detection relies on that
        mode so it never has to ask whether a king move is legal.
        """
        sq = self._square_of(piece)

        if piece.kind == PieceType.KING:
            return self._gen_king(piece, sq, skip_check_filter)

        if piece.kind == PieceType.PAWN:
            moves = self._gen_pawn(piece, sq)
        elif piece.kind == PieceType.KNIGHT:
            moves = self._gen_knight(piece, sq)
        else:
            moves = self._gen_sliding(piece, sq, _SLIDING_DIRS[piece.kind])

        if skip_check_filter:
            return moves
        return self._filter_self_check(piece, moves)

    # -- Attack detection ---------------------------------------------------

    def attackers(self, target: Piece) -> list[Piece]:
        """Enemy pieces whose raw move set reaches *target*'s square."""
        sq = self._square_of(target)
        found: list[Piece] = []
        for enemy in self._layout.pieces(target.color.opposite):
            moves = self.legal_moves(enemy, skip_check_filter=True)
            if any(move.to == sq for move in moves):
                found.append(enemy)
        return found

    def is_attacked(self, target: Piece) -> bool:
        return bool(self.attackers(target))

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, piece: Piece, sq: Square) -> list[CandidateMove]:
        layout = self._layout
        moves: list[CandidateMove] = []
        file, rank = sq
        direction = piece.color.forward

        # Forward
        one_step = Square(file, rank + direction)
        if in_bounds(*one_step) and layout.at(one_step) is None:
            moves.append(CandidateMove(one_step))

            if rank == piece.color.pawn_rank:
                two_step = Square(file, rank + 2 * direction)
                if layout.at(two_step) is None:
                    moves.append(CandidateMove(two_step))

        # Diagonal capture
        for df in (-1, 1):
            cap_sq = Square(file + df, rank + direction)
            if not in_bounds(*cap_sq):
                continue
            target = layout.at(cap_sq)
            if target is not None and target.color != piece.color:
                moves.append(CandidateMove(cap_sq, target))

        # En passant
        ep = self._en_passant_victim(piece, sq)
        if ep is not None:
            victim, victim_sq = ep
            ep_sq = Square(victim_sq.file, rank + direction)
            if layout.at(ep_sq) is None:
                moves.append(CandidateMove(ep_sq, victim))

        return moves

    def _en_passant_victim(
        self, piece: Piece, sq: Square
    ) -> tuple[Piece, Square] | None:
        last = self._last_move
        if last is None or last.piece.kind != PieceType.PAWN:
            return None
        if abs(last.rank_delta) != 2 or last.to_sq.rank != sq.rank:
            return None
        if abs(last.to_sq.file - sq.file) != 1:
            return None
        # The pawn that just advanced must still stand where it landed.
        victim = last.piece
        if victim.color == piece.color or self._layout.at(last.to_sq) is not victim:
            return None
        return victim, last.to_sq

    def _gen_knight(self, piece: Piece, sq: Square) -> list[CandidateMove]:
        moves: list[CandidateMove] = []
        for df, dr in KNIGHT_OFFSETS:
            to_sq = sq.offset(df, dr)
            if not in_bounds(*to_sq):
                continue
            target = self._layout.at(to_sq)
            if target is None:
                moves.append(CandidateMove(to_sq))
            elif target.color != piece.color:
                moves.append(CandidateMove(to_sq, target))
        return moves

    def _gen_sliding(
        self,
        piece: Piece,
        sq: Square,
        directions: tuple[tuple[int, int], ...],
    ) -> list[CandidateMove]:
        moves: list[CandidateMove] = []
        for df, dr in directions:
            to_sq = sq.offset(df, dr)
            while in_bounds(*to_sq):
                target = self._layout.at(to_sq)
                if target is None:
                    moves.append(CandidateMove(to_sq))
                    to_sq = to_sq.offset(df, dr)
                    continue
                if target.color != piece.color:
                    moves.append(CandidateMove(to_sq, target))
                break
        return moves

    def _gen_king(
        self, piece: Piece, sq: Square, skip_check_filter: bool
    ) -> list[CandidateMove]:
        moves: list[CandidateMove] = []
        for df, dr in KING_OFFSETS:
            to_sq = sq.offset(df, dr)
            if not in_bounds(*to_sq):
                continue
            target = self._layout.at(to_sq)
            if target is not None and target.color == piece.color:
                continue
            move = CandidateMove(to_sq, target)
            if not skip_check_filter and self._exposes(piece, piece, move):
                continue
            moves.append(move)
        return moves

    # -- Self-check filter ----------------------------------------------------

    def _filter_self_check(
        self, piece: Piece, moves: list[CandidateMove]
    ) -> list[CandidateMove]:
        king = self._layout.king(piece.color)
        if king is None:
            return moves
        return [move for move in moves if not self._exposes(piece, king, move)]

    def _exposes(self, piece: Piece, king: Piece, move: CandidateMove) -> bool:
        """Whether playing *move* with *piece* leaves *king* attacked."""
        after = self._layout.apply(piece, move.to, move.capture)
        return MoveGenerator(after, self._last_move).is_attacked(king)

    def _square_of(self, piece: Piece) -> Square:
        sq = self._layout.square_of(piece)
        if sq is None:
            raise InvalidOperationError(f"{piece!r} is not on the board")
        return sq
