"""RulesEngine - board state, move history and rule queries for one game."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from chessboard.core.enums import PROMOTION_TYPES, Color, PieceType
from chessboard.core.errors import InvalidOperationError
from chessboard.core.layout import Layout
from chessboard.core.move import CandidateMove, MoveRecord
from chessboard.core.move_generator import MoveGenerator
from chessboard.core.piece import Piece
from chessboard.core.rules import Rules
from chessboard.core.store import PieceStore
from chessboard.core.types import Square, in_bounds

_LOGGER = logging.getLogger(__name__)

BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.KING,
    PieceType.QUEEN,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class RulesEngine:
    """Owns the pieces of one game and answers rule queries about them.

    Queries (:meth:`legal_moves`, :meth:`attackers`, :meth:`is_checkmated`,
    :meth:`is_stalemated`) are side-effect free: hypothetical moves are played
    on immutable :class:`Layout` snapshots.  Mutations (:meth:`add_piece`,
    :meth:`remove_piece`, :meth:`move_piece`, :meth:`promote_piece`,
    :meth:`reset`) only touch the store and the move history; rendering the
    result is up to the caller.

    Not thread-safe: use one engine per game from a single thread.
    """

    __slots__ = ("_store", "_history")

    def __init__(self) -> None:
        self._store = PieceStore()
        self._history: list[MoveRecord] = []

    @classmethod
    def initial(cls) -> RulesEngine:
        """Engine holding the standard starting position."""
        engine = cls()
        engine.reset()
        return engine

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def history(self) -> tuple[MoveRecord, ...]:
        return tuple(self._history)

    def last_move(self) -> MoveRecord | None:
        return self._history[-1] if self._history else None

    def piece_at(self, file: int, rank: int) -> Piece | None:
        if not in_bounds(file, rank):
            return None
        return self._store.at(Square(file, rank))

    def pieces(self, color: Color | None = None) -> list[Piece]:
        return self._store.pieces(color)

    def find_king(self, color: Color) -> Piece | None:
        """The king of *color*, or ``None`` while it is off the board."""
        return self._store.king(color)

    def layout(self) -> Layout:
        """Immutable snapshot of the current occupancy."""
        return Layout.from_pieces(self._store)

    def generator(self) -> MoveGenerator:
        return MoveGenerator(self.layout(), self.last_move())

    def legal_moves(
        self, piece: Piece, skip_check_filter: bool = False
    ) -> list[CandidateMove]:
        """Candidate moves for *piece* in the current position.

        Unless *skip_check_filter* is set, moves that would leave the mover's
        own king attacked are dropped.
        """
        self._require(piece)
        return self.generator().legal_moves(piece, skip_check_filter)

    def attackers(self, piece: Piece) -> list[Piece]:
        """Enemy pieces attacking *piece*, in board order."""
        self._require(piece)
        return self.generator().attackers(piece)

    def is_attacked(self, piece: Piece) -> bool:
        return bool(self.attackers(piece))

    def is_checkmated(self, king: Piece) -> bool:
        self._require(king)
        return Rules.is_checkmated(self.generator(), king)

    def is_stalemated(self, king: Piece) -> bool:
        self._require(king)
        return Rules.is_stalemated(self.generator(), king)

    # ── Mutations ────────────────────────────────────────────────────────

    def add_piece(self, kind: PieceType, color: Color, file: int, rank: int) -> Piece:
        """Create a piece on the empty square (*file*, *rank*)."""
        self._check_bounds(file, rank)
        piece = self._store.insert(Piece(kind, color, file, rank))
        _LOGGER.debug("add %r", piece)
        return piece

    def remove_piece(self, piece: Piece) -> None:
        """Take *piece* off the board. Removing an absent piece does nothing."""
        if self._store.discard(piece):
            _LOGGER.debug("remove %r", piece)

    def move_piece(self, piece: Piece, file: int, rank: int) -> MoveRecord:
        """Relocate *piece* and record the move.

        A captured occupant is not removed here; the caller removes it first
        with :meth:`remove_piece`.
        """
        self._require(piece)
        self._check_bounds(file, rank)
        to_sq = Square(file, rank)
        occupant = self._store.at(to_sq)
        if occupant is not None and occupant is not piece:
            raise InvalidOperationError(f"Square {to_sq} is occupied by {occupant!r}")

        record = MoveRecord(piece, piece.square, to_sq)
        self._history.append(record)
        self._store.relocate(piece, to_sq)
        _LOGGER.debug("move %s", record)
        return record

    def promote_piece(self, piece: Piece, new_kind: PieceType) -> None:
        """Change the kind of *piece* in place."""
        self._require(piece)
        if new_kind not in PROMOTION_TYPES:
            raise InvalidOperationError(f"Cannot promote to {new_kind}")
        piece.kind = new_kind
        _LOGGER.debug("promote %r", piece)

    def clear(self) -> None:
        """Remove every piece and forget the move history."""
        self._store.clear()
        self._history.clear()

    def reset(self) -> None:
        """Clear the board, then set up the standard starting position."""
        self.clear()
        for file, kind in enumerate(BACK_RANK):
            for color in (Color.WHITE, Color.BLACK):
                self.add_piece(PieceType.PAWN, color, file, color.pawn_rank)
                self.add_piece(kind, color, file, color.back_rank)
        _LOGGER.debug("reset to starting position")

    # ── Dunder helpers ───────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._store)

    def __iter__(self) -> Iterator[Piece]:
        return iter(self._store)

    def __contains__(self, piece: object) -> bool:
        return piece in self._store

    def __repr__(self) -> str:
        return repr(self._store)

    # ── Internal ─────────────────────────────────────────────────────────

    def _require(self, piece: Piece) -> None:
        if piece not in self._store:
            raise InvalidOperationError(f"{piece!r} is not on the board")

    @staticmethod
    def _check_bounds(file: int, rank: int) -> None:
        if not in_bounds(file, rank):
            raise InvalidOperationError(f"Square ({file}, {rank}) is off the board")
