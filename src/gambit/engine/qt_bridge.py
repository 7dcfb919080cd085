"""Qt bridge to run a move strategy in a worker thread."""

from __future__ import annotations

import logging
import threading

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from gambit.engine.strategies import MinimaxStrategy
from gambit.game.controller import FALLBACK_DEPTH, GameController

logger = logging.getLogger(__name__)


class MoveWorker(QObject):
    """Thread-affine worker that picks strategy moves on demand.

    The worker never plays the move; it reports it and the owner applies it
    on its own thread.
    """

    move_ready = pyqtSignal(int, object)
    no_move = pyqtSignal(int)
    cancelled = pyqtSignal(int)
    failed = pyqtSignal(int, str)

    __slots__ = ("_cancel_event",)

    def __init__(self) -> None:
        super().__init__()
        self._cancel_event = threading.Event()

    @pyqtSlot(object, int)
    def request_move(self, controller_obj: object, request_id: int) -> None:
        """Ask the side-to-move's strategy of *controller_obj* for a move."""
        if not isinstance(controller_obj, GameController):
            self.failed.emit(request_id, "Worker received invalid controller")
            return

        snapshot = controller_obj.copy()
        strategy = snapshot.strategy(snapshot.side_to_move)
        if strategy is None:
            strategy = MinimaxStrategy(FALLBACK_DEPTH)

        self._cancel_event.clear()
        try:
            move = strategy.choose_move(
                snapshot, is_cancelled=self._cancel_event.is_set
            )
        except Exception as exc:
            logger.exception("Strategy failed for request %d", request_id)
            self.failed.emit(request_id, str(exc))
            return

        if self._cancel_event.is_set():
            self.cancelled.emit(request_id)
            return

        if move is None:
            self.no_move.emit(request_id)
            return

        self.move_ready.emit(request_id, move)

    @pyqtSlot()
    def cancel(self) -> None:
        """Request cancellation of the current computation."""
        self._cancel_event.set()
