"""Qt bridge that re-emits game events as signals for the presentation layer."""

from __future__ import annotations

from collections.abc import Callable

from PyQt6.QtCore import QObject, pyqtSignal

from chessboard.game.controller import GameController

_Handler = Callable[..., None]
_Route = tuple[list[_Handler], _Handler]


class BoardSignals(QObject):
    """Signals mirroring :class:`GameEvents`, one emission per mutation.

    The presentation layer connects its animations to these signals and only
    ever reads piece state; it never mutates the engine.
    """

    piece_added = pyqtSignal(object)
    piece_removed = pyqtSignal(object)
    piece_moved = pyqtSignal(object, object)  # piece, MoveRecord
    piece_promoted = pyqtSignal(object)
    board_reset = pyqtSignal()
    selection_changed = pyqtSignal(object, object)  # piece | None, moves
    turn_changed = pyqtSignal(object)
    promotion_required = pyqtSignal(object)
    game_over = pyqtSignal(object, object)  # GameResult, GameEndReason

    def __init__(self, controller: GameController | None = None) -> None:
        super().__init__()
        self._controller: GameController | None = None
        self._installed: list[_Route] = []
        if controller is not None:
            self.attach(controller)

    @property
    def controller(self) -> GameController | None:
        return self._controller

    def attach(self, controller: GameController) -> None:
        """Forward *controller*'s events, detaching from any previous one."""
        self.detach()
        self._installed = self._routes(controller)
        for handlers, handler in self._installed:
            handlers.append(handler)
        self._controller = controller

    def detach(self) -> None:
        for handlers, handler in self._installed:
            for i, installed in enumerate(handlers):
                if installed is handler:
                    del handlers[i]
                    break
        self._installed = []
        self._controller = None

    def _routes(self, controller: GameController) -> list[_Route]:
        events = controller.events
        return [
            (events.on_piece_added, self.piece_added.emit),
            (events.on_piece_removed, self.piece_removed.emit),
            (events.on_piece_moved, self.piece_moved.emit),
            (events.on_piece_promoted, self.piece_promoted.emit),
            (events.on_board_reset, self.board_reset.emit),
            (events.on_selection_changed, self.selection_changed.emit),
            (events.on_turn_changed, self.turn_changed.emit),
            (events.on_promotion_required, self.promotion_required.emit),
            (events.on_game_over, self.game_over.emit),
        ]
