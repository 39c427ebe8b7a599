"""Tests for GameController — selection, turns, promotion and game over."""

from __future__ import annotations

import pytest

from chessboard.core.engine import RulesEngine
from chessboard.core.enums import Color, PieceType
from chessboard.core.move import CandidateMove
from chessboard.core.types import E2, E4, Square
from chessboard.game.controller import GameController
from chessboard.game.errors import (
    GameError,
    GameFinishedError,
    IllegalMoveError,
    PromotionPendingError,
    WrongTurnError,
)
from chessboard.game.interfaces import GameEndReason, GamePhase, GameResult
from chessboard.game.settings import GameSettings


def _recording(ctrl: GameController) -> list[tuple]:
    """Attach a recorder to every event list and return the log."""
    log: list[tuple] = []
    ev = ctrl.events
    ev.on_piece_added.append(lambda p: log.append(("added", p)))
    ev.on_piece_removed.append(lambda p: log.append(("removed", p)))
    ev.on_piece_moved.append(lambda p, r: log.append(("moved", p, r)))
    ev.on_piece_promoted.append(lambda p: log.append(("promoted", p)))
    ev.on_board_reset.append(lambda: log.append(("reset",)))
    ev.on_selection_changed.append(lambda p, m: log.append(("selected", p, m)))
    ev.on_turn_changed.append(lambda c: log.append(("turn", c)))
    ev.on_promotion_required.append(lambda p: log.append(("promotion", p)))
    ev.on_game_over.append(lambda r, why: log.append(("over", r, why)))
    return log


def _kinds(log: list[tuple]) -> list[str]:
    return [entry[0] for entry in log]


def _started(settings: GameSettings | None = None) -> GameController:
    ctrl = GameController(settings=settings)
    ctrl.new_game()
    return ctrl


def _play(ctrl: GameController, *moves: tuple[int, int, int, int]) -> None:
    for ff, fr, tf, tr in moves:
        piece = ctrl.engine.piece_at(ff, fr)
        assert piece is not None
        ctrl.apply_move(piece, tf, tr)


class TestNewGame:
    def test_events(self) -> None:
        ctrl = GameController()
        log = _recording(ctrl)
        ctrl.new_game()
        kinds = _kinds(log)
        assert kinds[0] == "reset"
        assert kinds.count("reset") == 1
        assert kinds.count("added") == 32
        assert kinds[-1] == "turn"
        assert log[-1][1] == Color.WHITE

    def test_state(self) -> None:
        ctrl = _started()
        assert ctrl.phase == GamePhase.AWAITING_MOVE
        assert ctrl.turn == Color.WHITE
        assert ctrl.result == GameResult.IN_PROGRESS
        assert ctrl.end_reason is None
        assert len(ctrl.engine) == 32

    def test_first_to_move_setting(self) -> None:
        ctrl = GameController(settings=GameSettings(first_to_move=Color.BLACK))
        ctrl.new_game()
        assert ctrl.turn == Color.BLACK

    def test_not_started_rejects_moves(self) -> None:
        engine = RulesEngine.initial()
        ctrl = GameController(engine)
        pawn = engine.piece_at(*E2)
        assert pawn is not None
        assert ctrl.phase == GamePhase.NOT_STARTED
        with pytest.raises(GameError):
            ctrl.apply_move(pawn, *E4)


class TestSelection:
    def test_select_own_piece(self) -> None:
        ctrl = _started()
        log = _recording(ctrl)
        assert ctrl.select(*E2)
        assert ctrl.selected is ctrl.engine.piece_at(*E2)
        assert {m.to for m in ctrl.legal_targets()} == {Square(4, 2), E4}
        assert log[-1][0] == "selected"
        assert log[-1][1] is ctrl.selected
        assert len(log[-1][2]) == 2

    def test_select_enemy_piece_fails(self) -> None:
        ctrl = _started()
        assert not ctrl.select(4, 6)
        assert ctrl.selected is None
        assert ctrl.legal_targets() == []

    def test_select_empty_square_clears(self) -> None:
        ctrl = _started()
        ctrl.select(*E2)
        assert not ctrl.select(4, 4)
        assert ctrl.selected is None

    def test_reselect_toggles_off(self) -> None:
        ctrl = _started()
        log = _recording(ctrl)
        ctrl.select(*E2)
        assert not ctrl.select(*E2)
        assert ctrl.selected is None
        assert log[-1] == ("selected", None, [])

    def test_deselect_without_selection_is_silent(self) -> None:
        ctrl = _started()
        log = _recording(ctrl)
        ctrl.deselect()
        assert log == []


class TestClick:
    def test_select_then_move(self) -> None:
        ctrl = _started()
        assert ctrl.click(*E2) is None
        assert ctrl.selected is not None
        move = ctrl.click(*E4)
        assert move == CandidateMove(E4)
        assert ctrl.selected is None
        assert ctrl.turn == Color.BLACK
        pawn = ctrl.engine.piece_at(*E4)
        assert pawn is not None and pawn.kind == PieceType.PAWN

    def test_click_switches_selection(self) -> None:
        ctrl = _started()
        ctrl.click(*E2)
        ctrl.click(3, 1)
        assert ctrl.selected is ctrl.engine.piece_at(3, 1)

    def test_click_illegal_square_deselects(self) -> None:
        ctrl = _started()
        ctrl.click(*E2)
        assert ctrl.click(4, 5) is None
        assert ctrl.selected is None
        assert ctrl.turn == Color.WHITE

    def test_click_off_board(self) -> None:
        ctrl = _started()
        ctrl.click(*E2)
        assert ctrl.click(9, 9) is None
        assert ctrl.selected is None

    def test_click_empty_without_selection(self) -> None:
        ctrl = _started()
        assert ctrl.click(4, 4) is None
        assert ctrl.turn == Color.WHITE


class TestApplyMove:
    def test_wrong_turn(self) -> None:
        ctrl = _started()
        pawn = ctrl.engine.piece_at(4, 6)
        assert pawn is not None
        with pytest.raises(WrongTurnError):
            ctrl.apply_move(pawn, 4, 4)
        assert ctrl.engine.history == ()

    def test_illegal_destination(self) -> None:
        ctrl = _started()
        pawn = ctrl.engine.piece_at(*E2)
        assert pawn is not None
        with pytest.raises(IllegalMoveError):
            ctrl.apply_move(pawn, 4, 4)
        assert pawn.square == E2
        assert ctrl.turn == Color.WHITE

    def test_errors_share_base(self) -> None:
        ctrl = _started()
        pawn = ctrl.engine.piece_at(4, 6)
        assert pawn is not None
        with pytest.raises(GameError):
            ctrl.apply_move(pawn, 4, 4)

    def test_turns_alternate(self) -> None:
        ctrl = _started()
        _play(ctrl, (4, 1, 4, 3), (4, 6, 4, 4), (6, 0, 5, 2))
        assert ctrl.turn == Color.BLACK
        assert len(ctrl.engine.history) == 3

    def test_capture_removed_before_move(self) -> None:
        engine = RulesEngine()
        rook = engine.add_piece(PieceType.ROOK, Color.WHITE, 0, 0)
        pawn = engine.add_piece(PieceType.PAWN, Color.BLACK, 0, 4)
        engine.add_piece(PieceType.KING, Color.WHITE, 7, 0)
        engine.add_piece(PieceType.KING, Color.BLACK, 7, 7)
        ctrl = GameController(engine)
        ctrl.start(Color.WHITE)
        log = _recording(ctrl)

        move = ctrl.apply_move(rook, 0, 4)

        assert move.capture is pawn
        assert _kinds(log)[:2] == ["removed", "moved"]
        assert log[0][1] is pawn
        assert pawn not in engine
        assert engine.piece_at(0, 4) is rook

    def test_en_passant_through_controller(self) -> None:
        engine = RulesEngine()
        white = engine.add_piece(PieceType.PAWN, Color.WHITE, 4, 4)
        black = engine.add_piece(PieceType.PAWN, Color.BLACK, 3, 6)
        engine.add_piece(PieceType.KING, Color.WHITE, 7, 0)
        engine.add_piece(PieceType.KING, Color.BLACK, 0, 7)
        ctrl = GameController(engine)
        ctrl.start(Color.BLACK)

        ctrl.apply_move(black, 3, 4)
        move = ctrl.apply_move(white, 3, 5)

        assert move.capture is black
        assert black not in engine
        assert engine.piece_at(3, 4) is None
        assert engine.piece_at(3, 5) is white


class TestPromotion:
    @pytest.fixture
    def ctrl(self) -> GameController:
        engine = RulesEngine()
        engine.add_piece(PieceType.PAWN, Color.WHITE, 0, 6)
        engine.add_piece(PieceType.KING, Color.WHITE, 7, 0)
        engine.add_piece(PieceType.KING, Color.BLACK, 7, 7)
        ctrl = GameController(engine)
        ctrl.start(Color.WHITE)
        return ctrl

    def test_reaching_last_rank_waits_for_choice(self, ctrl: GameController) -> None:
        log = _recording(ctrl)
        pawn = ctrl.engine.piece_at(0, 6)
        assert pawn is not None
        ctrl.apply_move(pawn, 0, 7)
        assert ctrl.phase == GamePhase.AWAITING_PROMOTION
        assert ctrl.pending_promotion is pawn
        assert ctrl.turn == Color.WHITE
        assert log[-1] == ("promotion", pawn)

    def test_moves_blocked_while_pending(self, ctrl: GameController) -> None:
        pawn = ctrl.engine.piece_at(0, 6)
        king = ctrl.engine.find_king(Color.WHITE)
        assert pawn is not None and king is not None
        ctrl.apply_move(pawn, 0, 7)
        with pytest.raises(PromotionPendingError):
            ctrl.apply_move(king, 6, 0)

    def test_promote_passes_turn(self, ctrl: GameController) -> None:
        log = _recording(ctrl)
        pawn = ctrl.engine.piece_at(0, 6)
        assert pawn is not None
        ctrl.apply_move(pawn, 0, 7)
        ctrl.promote(PieceType.QUEEN)

        assert pawn.kind == PieceType.QUEEN
        assert ctrl.pending_promotion is None
        assert ctrl.phase == GamePhase.AWAITING_MOVE
        assert ctrl.turn == Color.BLACK
        assert ("promoted", pawn) in log
        black_king = ctrl.engine.find_king(Color.BLACK)
        assert black_king is not None
        assert ctrl.engine.is_attacked(black_king)

    def test_promote_without_pending(self, ctrl: GameController) -> None:
        with pytest.raises(GameError, match="No promotion"):
            ctrl.promote(PieceType.QUEEN)

    def test_needs_promotion(self) -> None:
        engine = RulesEngine()
        white = engine.add_piece(PieceType.PAWN, Color.WHITE, 0, 7)
        black = engine.add_piece(PieceType.PAWN, Color.BLACK, 1, 0)
        rook = engine.add_piece(PieceType.ROOK, Color.WHITE, 2, 7)
        stuck = engine.add_piece(PieceType.PAWN, Color.BLACK, 3, 7)
        assert GameController.needs_promotion(white)
        assert GameController.needs_promotion(black)
        assert not GameController.needs_promotion(rook)
        assert not GameController.needs_promotion(stuck)


class TestGameOver:
    # 1. d4 b5 2. a3 c6 3. Qa5#  (queen starts on e1, black king on d8)
    MATE = ((3, 1, 3, 3), (1, 6, 1, 4), (0, 1, 0, 2), (2, 6, 2, 5), (4, 0, 0, 4))
    KEEP = GameSettings(auto_reset=False)

    def test_checkmate(self) -> None:
        ctrl = _started(self.KEEP)
        log = _recording(ctrl)
        black_king = ctrl.engine.find_king(Color.BLACK)
        _play(ctrl, *self.MATE)

        assert ctrl.is_game_over
        assert ctrl.result == GameResult.WHITE_WINS
        assert ctrl.end_reason == GameEndReason.CHECKMATE
        assert ("over", GameResult.WHITE_WINS, GameEndReason.CHECKMATE) in log
        assert log[-1] == ("removed", black_king)
        assert ctrl.engine.find_king(Color.BLACK) is None
        assert ctrl.engine.find_king(Color.WHITE) is not None
        assert len(ctrl.engine) == 31

    def test_checkmate_resets_by_default(self) -> None:
        ctrl = _started()
        log = _recording(ctrl)
        _play(ctrl, *self.MATE)

        assert ("over", GameResult.WHITE_WINS, GameEndReason.CHECKMATE) in log
        kinds = _kinds(log)
        assert kinds.index("over") < kinds.index("removed") < kinds.index("reset")
        assert len(ctrl.engine) == 32
        assert ctrl.engine.history == ()
        assert ctrl.turn == Color.WHITE
        assert ctrl.phase == GamePhase.AWAITING_MOVE
        assert ctrl.result == GameResult.IN_PROGRESS
        assert ctrl.engine.find_king(Color.BLACK) is not None

    def test_kings_kept_when_disabled(self) -> None:
        ctrl = _started(
            GameSettings(remove_kings_on_game_over=False, auto_reset=False)
        )
        _play(ctrl, *self.MATE)
        assert ctrl.is_game_over
        assert ctrl.engine.find_king(Color.BLACK) is not None
        assert len(ctrl.engine) == 32

    def test_moves_rejected_after_game_over(self) -> None:
        ctrl = _started(self.KEEP)
        _play(ctrl, *self.MATE)
        pawn = ctrl.engine.piece_at(7, 6)
        assert pawn is not None
        with pytest.raises(GameFinishedError):
            ctrl.apply_move(pawn, 7, 5)
        assert not ctrl.select(7, 6)
        assert ctrl.click(7, 6) is None

    def _stalemate(self, settings: GameSettings | None = None) -> GameController:
        engine = RulesEngine()
        engine.add_piece(PieceType.KING, Color.BLACK, 7, 7)
        engine.add_piece(PieceType.KING, Color.WHITE, 5, 5)
        engine.add_piece(PieceType.QUEEN, Color.WHITE, 6, 4)
        ctrl = GameController(engine, settings)
        ctrl.start(Color.WHITE)
        return ctrl

    def test_stalemate_removes_both_kings(self) -> None:
        ctrl = self._stalemate(self.KEEP)
        log = _recording(ctrl)
        _play(ctrl, (6, 4, 6, 5))

        assert ctrl.result == GameResult.DRAW
        assert ctrl.end_reason == GameEndReason.STALEMATE
        assert _kinds(log).count("removed") == 2
        assert ctrl.engine.find_king(Color.WHITE) is None
        assert ctrl.engine.find_king(Color.BLACK) is None
        assert len(ctrl.engine) == 1

    def test_stalemate_resets_by_default(self) -> None:
        ctrl = self._stalemate()
        log = _recording(ctrl)
        _play(ctrl, (6, 4, 6, 5))

        kinds = _kinds(log)
        assert ("over", GameResult.DRAW, GameEndReason.STALEMATE) in log
        assert kinds.index("over") < kinds.index("reset")
        assert ctrl.phase == GamePhase.AWAITING_MOVE
        assert ctrl.result == GameResult.IN_PROGRESS
        assert ctrl.turn == Color.WHITE
        assert len(ctrl.engine) == 32
        assert ctrl.engine.history == ()

    def test_no_king_no_verdict(self) -> None:
        engine = RulesEngine()
        rook = engine.add_piece(PieceType.ROOK, Color.WHITE, 0, 0)
        ctrl = GameController(engine)
        ctrl.start()
        ctrl.apply_move(rook, 0, 5)
        assert ctrl.phase == GamePhase.AWAITING_MOVE
        assert ctrl.turn == Color.BLACK

    def test_new_game_after_game_over(self) -> None:
        ctrl = _started(self.KEEP)
        _play(ctrl, *self.MATE)
        assert ctrl.is_game_over
        ctrl.new_game()
        assert not ctrl.is_game_over
        assert ctrl.result == GameResult.IN_PROGRESS
        assert ctrl.end_reason is None
        assert len(ctrl.engine) == 32
