"""Game management layer — controller, turn order, promotion, game over.

Quick start::

    from chessboard.game import GameController

    ctrl = GameController()
    ctrl.new_game()
    ctrl.click(4, 1)  # select the e2 pawn
    ctrl.click(4, 3)  # play it to e4

Qt applications can mirror the controller's events as signals with
:class:`chessboard.game.qt_bridge.BoardSignals`.
"""

from chessboard.game.controller import GameController, GameEvents
from chessboard.game.errors import (
    GameError,
    GameFinishedError,
    IllegalMoveError,
    PromotionPendingError,
    WrongTurnError,
)
from chessboard.game.interfaces import GameEndReason, GamePhase, GameResult
from chessboard.game.settings import GameSettings

__all__ = [
    # Enums
    "GameEndReason",
    "GamePhase",
    "GameResult",
    # Errors
    "GameError",
    "GameFinishedError",
    "IllegalMoveError",
    "PromotionPendingError",
    "WrongTurnError",
    # Concrete
    "GameController",
    "GameEvents",
    "GameSettings",
]
