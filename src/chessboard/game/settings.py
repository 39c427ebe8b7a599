"""User-configurable game behaviour."""

from __future__ import annotations

from dataclasses import dataclass

from chessboard.core.enums import Color


@dataclass
class GameSettings:
    """All user-configurable settings of a :class:`GameController`."""

    first_to_move: Color = Color.WHITE

    # Game over: checkmate takes the mated king off the board, stalemate
    # takes both kings off.
    remove_kings_on_game_over: bool = True
    # Start a fresh game as soon as one ends.
    auto_reset: bool = True
