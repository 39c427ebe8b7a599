"""Exceptions raised by the rules engine."""

from __future__ import annotations


class InvalidOperationError(ValueError):
    """A mutation or query broke one of the engine's preconditions.

    Examples: adding or moving onto an occupied square, coordinates off the
    board, or passing a piece that is not on the board.
    """
