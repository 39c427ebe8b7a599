"""High-level chess rules: check, checkmate and stalemate detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chessboard.core.move_generator import MoveGenerator
    from chessboard.core.piece import Piece


class Rules:
    """Static rule-checker that operates on a :class:`MoveGenerator`."""

    # Not covered: castling, fifty-move rule, threefold repetition.

    @staticmethod
    def is_in_check(gen: MoveGenerator, king: Piece) -> bool:
        return gen.is_attacked(king)

    @staticmethod
    def has_legal_move(gen: MoveGenerator, piece: Piece) -> bool:
        return len(gen.legal_moves(piece)) > 0

    @staticmethod
    def is_checkmated(gen: MoveGenerator, king: Piece) -> bool:
        if not Rules.is_in_check(gen, king):
            return False
        if Rules.has_legal_move(gen, king):
            return False
        # Every ally move is already self-check filtered, so any remaining
        # move resolves the check.
        allies = [p for p in gen.layout.pieces(king.color) if p is not king]
        return not any(Rules.has_legal_move(gen, p) for p in allies)

    @staticmethod
    def is_stalemated(gen: MoveGenerator, king: Piece) -> bool:
        if Rules.is_in_check(gen, king):
            return False
        return not any(
            Rules.has_legal_move(gen, p) for p in gen.layout.pieces(king.color)
        )
