"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from chessboard.core import RulesEngine

    engine = RulesEngine.initial()
    pawn = engine.piece_at(4, 1)
    for move in engine.legal_moves(pawn):
        print(move)
"""

from chessboard.core.engine import BACK_RANK, RulesEngine
from chessboard.core.enums import PROMOTION_TYPES, Color, PieceType
from chessboard.core.errors import InvalidOperationError
from chessboard.core.layout import Layout
from chessboard.core.move import CandidateMove, MoveRecord
from chessboard.core.move_generator import MoveGenerator
from chessboard.core.piece import Piece
from chessboard.core.rules import Rules
from chessboard.core.store import PieceStore
from chessboard.core.types import Square, in_bounds, parse_square, square_name

__all__ = [
    # Enums
    "Color",
    "PieceType",
    "PROMOTION_TYPES",
    # Types / helpers
    "Square",
    "in_bounds",
    "parse_square",
    "square_name",
    # Domain objects
    "BACK_RANK",
    "CandidateMove",
    "InvalidOperationError",
    "Layout",
    "MoveGenerator",
    "MoveRecord",
    "Piece",
    "PieceStore",
    "Rules",
    "RulesEngine",
]
