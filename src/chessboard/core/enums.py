"""Core enumerations for the chess domain."""

from __future__ import annotations

from enum import IntEnum


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    @property
    def forward(self) -> int:
        """Rank step of a pawn advance: +1 for white, -1 for black."""
        return 1 if self == Color.WHITE else -1

    @property
    def pawn_rank(self) -> int:
        """Rank the pawns of this color start on."""
        return 1 if self == Color.WHITE else 6

    @property
    def back_rank(self) -> int:
        return 0 if self == Color.WHITE else 7

    @property
    def last_rank(self) -> int:
        """Rank a pawn of this color promotes on."""
        return 7 if self == Color.WHITE else 0

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece kinds ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    def __str__(self) -> str:
        return self.name.lower()


PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)
