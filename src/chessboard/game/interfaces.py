"""Game-layer enumerations shared by the controller and its observers."""

from __future__ import annotations

from enum import IntEnum, auto

from chessboard.core.enums import Color


class GamePhase(IntEnum):
    """Finite-state-machine states for a game."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    AWAITING_PROMOTION = auto()  # a pawn reached the last rank
    GAME_OVER = auto()


class GameResult(IntEnum):
    """Outcome of a game."""

    IN_PROGRESS = 0
    WHITE_WINS = 1
    BLACK_WINS = 2
    DRAW = 3

    @classmethod
    def win_for(cls, color: Color) -> GameResult:
        return cls.WHITE_WINS if color == Color.WHITE else cls.BLACK_WINS


class GameEndReason(IntEnum):
    """Why a finished game ended."""

    CHECKMATE = auto()
    STALEMATE = auto()
