"""GameController — turn-taking input layer on top of the rules engine.

Coordinates: RulesEngine, selection, turn order, promotion hand-off and
game-over handling.  Emits events via simple callbacks so a presentation
layer (or tests) can animate each mutation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from chessboard.core.engine import RulesEngine
from chessboard.core.enums import Color, PieceType
from chessboard.core.move import CandidateMove, MoveRecord
from chessboard.core.piece import Piece
from chessboard.core.types import Square, in_bounds
from chessboard.game.errors import (
    GameError,
    GameFinishedError,
    IllegalMoveError,
    PromotionPendingError,
    WrongTurnError,
)
from chessboard.game.interfaces import GameEndReason, GamePhase, GameResult
from chessboard.game.settings import GameSettings

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

PieceCallback = Callable[[Piece], None]
MoveCallback = Callable[[Piece, MoveRecord], None]
ResetCallback = Callable[[], None]
SelectionCallback = Callable[[Piece | None, list[CandidateMove]], None]
TurnCallback = Callable[[Color], None]
GameOverCallback = Callable[[GameResult, GameEndReason], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_piece_added: list[PieceCallback] = field(default_factory=list)
    on_piece_removed: list[PieceCallback] = field(default_factory=list)
    on_piece_moved: list[MoveCallback] = field(default_factory=list)
    on_piece_promoted: list[PieceCallback] = field(default_factory=list)
    on_board_reset: list[ResetCallback] = field(default_factory=list)
    on_selection_changed: list[SelectionCallback] = field(default_factory=list)
    on_turn_changed: list[TurnCallback] = field(default_factory=list)
    on_promotion_required: list[PieceCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController:
    """Runs a two-player game on a :class:`RulesEngine`.

    The turn colour and the selection live on the controller instance; the
    engine only knows about pieces.  Capture removal happens before the
    mover is relocated, and promotion eligibility is decided here, not in the
    engine.

    Thread-safety: methods are designed to be called from a single thread
    (the main/UI thread).
    """

    __slots__ = (
        "_engine",
        "_settings",
        "_turn",
        "_phase",
        "_result",
        "_end_reason",
        "_selected",
        "_pending_promotion",
        "events",
    )

    def __init__(
        self,
        engine: RulesEngine | None = None,
        settings: GameSettings | None = None,
    ) -> None:
        self._engine = engine if engine is not None else RulesEngine()
        self._settings = settings if settings is not None else GameSettings()
        self._turn = self._settings.first_to_move
        self._phase = GamePhase.NOT_STARTED
        self._result = GameResult.IN_PROGRESS
        self._end_reason: GameEndReason | None = None
        self._selected: Piece | None = None
        self._pending_promotion: Piece | None = None
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def engine(self) -> RulesEngine:
        return self._engine

    @property
    def settings(self) -> GameSettings:
        return self._settings

    @property
    def turn(self) -> Color:
        return self._turn

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def result(self) -> GameResult:
        return self._result

    @property
    def end_reason(self) -> GameEndReason | None:
        return self._end_reason

    @property
    def selected(self) -> Piece | None:
        return self._selected

    @property
    def pending_promotion(self) -> Piece | None:
        return self._pending_promotion

    @property
    def is_game_over(self) -> bool:
        return self._phase == GamePhase.GAME_OVER

    # ── Game lifecycle ───────────────────────────────────────────────────

    def new_game(self) -> None:
        """Set up the starting position and hand the move to the first side."""
        self._engine.reset()
        self._emit_reset()
        for piece in self._engine:
            self._emit_added(piece)
        self.start(self._settings.first_to_move)

    def start(self, turn: Color | None = None) -> None:
        """Begin play from whatever position the engine currently holds."""
        self._turn = self._settings.first_to_move if turn is None else turn
        self._phase = GamePhase.AWAITING_MOVE
        self._result = GameResult.IN_PROGRESS
        self._end_reason = None
        self._pending_promotion = None
        self._selected = None
        _LOGGER.debug("game started, %s to move", self._turn)
        self._emit_turn()

    # ── Selection ────────────────────────────────────────────────────────

    def legal_targets(self) -> list[CandidateMove]:
        """Legal moves of the selected piece (empty without a selection)."""
        if self._selected is None:
            return []
        return self._engine.legal_moves(self._selected)

    def select(self, file: int, rank: int) -> bool:
        """Select the piece of the side to move on (*file*, *rank*).

        Re-selecting the selected piece, or pointing at anything else,
        clears the selection.  Returns whether a piece is now selected.
        """
        if self._phase != GamePhase.AWAITING_MOVE:
            return False
        piece = self._engine.piece_at(file, rank)
        if piece is None or piece.color != self._turn or piece is self._selected:
            self.deselect()
            return False
        self._selected = piece
        self._emit_selection()
        return True

    def deselect(self) -> None:
        if self._selected is None:
            return
        self._selected = None
        self._emit_selection()

    def click(self, file: int, rank: int) -> CandidateMove | None:
        """Handle a click on a board square.

        Own piece → select it; a legal destination of the selected piece →
        play the move; anything else → deselect.  Returns the move played.
        """
        if self._phase != GamePhase.AWAITING_MOVE or not in_bounds(file, rank):
            self.deselect()
            return None

        piece = self._engine.piece_at(file, rank)
        if piece is not None and piece is self._selected:
            self.deselect()
            return None
        if piece is not None and piece.color == self._turn:
            self.select(file, rank)
            return None

        selected = self._selected
        if selected is None:
            return None
        to_sq = Square(file, rank)
        if not any(m.to == to_sq for m in self._engine.legal_moves(selected)):
            self.deselect()
            return None
        return self.apply_move(selected, file, rank)

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(self, piece: Piece, file: int, rank: int) -> CandidateMove:
        """Play *piece* to (*file*, *rank*) and return the candidate used."""
        if self._phase == GamePhase.NOT_STARTED:
            raise GameError("The game has not started")
        if self._phase == GamePhase.GAME_OVER:
            raise GameFinishedError("The game is over")
        if self._phase == GamePhase.AWAITING_PROMOTION:
            raise PromotionPendingError("Choose a promotion piece first")
        if piece.color != self._turn:
            _LOGGER.warning("rejected %r: %s to move", piece, self._turn)
            raise WrongTurnError(f"It is {self._turn}'s turn")

        to_sq = Square(file, rank)
        move = next(
            (m for m in self._engine.legal_moves(piece) if m.to == to_sq), None
        )
        if move is None:
            _LOGGER.warning("rejected %r to %s: not a legal move", piece, to_sq)
            raise IllegalMoveError(f"{piece!r} cannot move to {to_sq}")

        self.deselect()
        if move.capture is not None:
            self._engine.remove_piece(move.capture)
            self._emit_removed(move.capture)
        record = self._engine.move_piece(piece, file, rank)
        self._emit_moved(piece, record)

        if self.needs_promotion(piece):
            self._pending_promotion = piece
            self._phase = GamePhase.AWAITING_PROMOTION
            for cb in self.events.on_promotion_required:
                cb(piece)
            return move

        self._finish_turn()
        return move

    def promote(self, kind: PieceType) -> None:
        """Complete a pending promotion with *kind* and pass the turn."""
        piece = self._pending_promotion
        if piece is None:
            raise GameError("No promotion is pending")
        self._engine.promote_piece(piece, kind)
        self._pending_promotion = None
        self._phase = GamePhase.AWAITING_MOVE
        for cb in self.events.on_piece_promoted:
            cb(piece)
        self._finish_turn()

    @staticmethod
    def needs_promotion(piece: Piece) -> bool:
        """Whether *piece* is a pawn standing on its last rank."""
        return piece.kind == PieceType.PAWN and piece.rank == piece.color.last_rank

    # ── Internal helpers ─────────────────────────────────────────────────

    def _finish_turn(self) -> None:
        self._turn = self._turn.opposite
        _LOGGER.debug("%s to move", self._turn)
        self._emit_turn()

        king = self._engine.find_king(self._turn)
        if king is None:
            return
        if self._engine.is_checkmated(king):
            self._end_game(
                GameResult.win_for(self._turn.opposite),
                GameEndReason.CHECKMATE,
                [king],
            )
        elif self._engine.is_stalemated(king):
            kings = [king]
            other = self._engine.find_king(self._turn.opposite)
            if other is not None:
                kings.append(other)
            self._end_game(GameResult.DRAW, GameEndReason.STALEMATE, kings)

    def _end_game(
        self, result: GameResult, reason: GameEndReason, kings: list[Piece]
    ) -> None:
        self._result = result
        self._end_reason = reason
        self._phase = GamePhase.GAME_OVER
        _LOGGER.info("game over: %s by %s", result.name, reason.name)
        for cb in self.events.on_game_over:
            cb(result, reason)

        if self._settings.remove_kings_on_game_over:
            for king in kings:
                if king in self._engine:
                    self._engine.remove_piece(king)
                    self._emit_removed(king)

        if self._settings.auto_reset:
            self.new_game()

    def _emit_added(self, piece: Piece) -> None:
        for cb in self.events.on_piece_added:
            cb(piece)

    def _emit_removed(self, piece: Piece) -> None:
        for cb in self.events.on_piece_removed:
            cb(piece)

    def _emit_moved(self, piece: Piece, record: MoveRecord) -> None:
        for cb in self.events.on_piece_moved:
            cb(piece, record)

    def _emit_reset(self) -> None:
        for cb in self.events.on_board_reset:
            cb()

    def _emit_selection(self) -> None:
        moves = self.legal_targets()
        for cb in self.events.on_selection_changed:
            cb(self._selected, moves)

    def _emit_turn(self) -> None:
        for cb in self.events.on_turn_changed:
            cb(self._turn)
