"""Square type and coordinate helpers.

Squares are ``(file, rank)`` pairs:
    file 0–7 maps to columns a–h
    rank 0–7 maps to rows 1–8
"""

from __future__ import annotations

from typing import NamedTuple


class Square(NamedTuple):
    file: int
    rank: int

    def offset(self, df: int, dr: int) -> Square:
        return Square(self.file + df, self.rank + dr)

    def __str__(self) -> str:
        return square_name(self)


def in_bounds(file: int, rank: int) -> bool:
    """Whether both coordinates lie on the 8x8 board."""
    return 0 <= file <= 7 and 0 <= rank <= 7


def square_name(sq: Square) -> str:
    """Human-readable name, e.g. (0, 0) → 'a1', (7, 7) → 'h8'."""
    return chr(ord("a") + sq.file) + str(sq.rank + 1)


def parse_square(name: str) -> Square:
    """Parse square name, e.g. 'e4' → Square(4, 3)."""
    if len(name) != 2 or name[0] not in "abcdefgh" or name[1] not in "12345678":
        raise ValueError(f"Invalid square name: {name!r}")
    return Square(ord(name[0]) - ord("a"), int(name[1]) - 1)


# ── Named square constants ──────────────────────────────────────────────────

A1, B1, C1, D1, E1, F1, G1, H1 = (Square(f, 0) for f in range(8))
A2, B2, C2, D2, E2, F2, G2, H2 = (Square(f, 1) for f in range(8))
A3, B3, C3, D3, E3, F3, G3, H3 = (Square(f, 2) for f in range(8))
A4, B4, C4, D4, E4, F4, G4, H4 = (Square(f, 3) for f in range(8))
A5, B5, C5, D5, E5, F5, G5, H5 = (Square(f, 4) for f in range(8))
A6, B6, C6, D6, E6, F6, G6, H6 = (Square(f, 5) for f in range(8))
A7, B7, C7, D7, E7, F7, G7, H7 = (Square(f, 6) for f in range(8))
A8, B8, C8, D8, E8, F8, G8, H8 = (Square(f, 7) for f in range(8))
