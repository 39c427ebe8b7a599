"""Errors raised by the game layer."""

from __future__ import annotations


class GameError(Exception):
    """Base class for game-related errors."""


class IllegalMoveError(GameError):
    """Raised when a destination is not among the piece's legal moves."""


class WrongTurnError(GameError):
    """Raised when a piece is moved while it is not that side's turn."""


class PromotionPendingError(GameError):
    """Raised when a move is attempted before a pending promotion is chosen."""


class GameFinishedError(GameError):
    """Raised when trying to play on a finished game."""
