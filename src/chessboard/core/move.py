"""Move value objects: generated candidates and applied-move records."""

from __future__ import annotations

from dataclasses import dataclass

from chessboard.core.piece import Piece
from chessboard.core.types import Square


@dataclass(frozen=True, slots=True)
class CandidateMove:
    """A destination a piece may move to, with the piece it would capture.

    For en passant ``capture`` stands on a different square than ``to``.
    """

    to: Square
    capture: Piece | None = None

    @property
    def is_capture(self) -> bool:
        return self.capture is not None

    def __str__(self) -> str:
        return f"x{self.to}" if self.capture is not None else str(self.to)


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """A single entry in the move history."""

    piece: Piece
    from_sq: Square
    to_sq: Square

    @property
    def rank_delta(self) -> int:
        return self.to_sq.rank - self.from_sq.rank

    def __str__(self) -> str:
        return f"{self.piece}{self.from_sq}{self.to_sq}"
