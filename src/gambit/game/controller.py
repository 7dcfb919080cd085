"""GameController — the central orchestrator of a chess game.

Coordinates: GameState, MoveGenerator, per-color move strategies.
Emits events via simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gambit.core.enums import Color, GameStatus
from gambit.core.move import Move
from gambit.core.move_generator import MoveGenerator
from gambit.core.notation import position_to_fen
from gambit.core.types import DEFAULT_BOARD_SIZE, Square
from gambit.game.state import GameState

if TYPE_CHECKING:
    from gambit.core.position import Position
    from gambit.engine.search import Strategy

logger = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, str, "GameState"], None]  # move, san, state
GameOverCallback = Callable[[GameStatus], None]

FALLBACK_DEPTH = 1


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController:
    """Owns one game: validates and applies moves, reports status,
    and asks the side-to-move's strategy for a move on request.

    Thread-safety: methods are designed to be called from a single thread.
    Search runs on :meth:`copy` snapshots, never on the live controller.
    """

    __slots__ = ("_state", "_strategies", "events")

    def __init__(self, fen: str | None = None, size: int = DEFAULT_BOARD_SIZE) -> None:
        self._state = GameState()
        self._state.setup(fen, size)
        self._strategies: dict[Color, Strategy] = {}
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def position(self) -> Position:
        """Snapshot of the current position; mutating it has no effect here."""
        return self._state.position.copy()

    @property
    def fen(self) -> str:
        return position_to_fen(self._state.position)

    @property
    def size(self) -> int:
        return self._state.position.size

    @property
    def side_to_move(self) -> Color:
        return self._state.side_to_move

    @property
    def move_history(self) -> list[str]:
        """Moves played so far in coordinate form (``e2e4``, ``e7e8q``)."""
        return [record.move.uci for record in self._state.move_history]

    @property
    def san_history(self) -> list[str]:
        return [record.san for record in self._state.move_history]

    def status(self) -> GameStatus:
        return self._state.status

    def legal_moves(self, square: Square) -> set[Move]:
        """Legal moves of the piece on *square* (empty for the idle side)."""
        return MoveGenerator(self._state.position).legal_moves(square)

    def all_legal_moves(self) -> list[Move]:
        return self._state.legal_moves()

    # ── Moves ────────────────────────────────────────────────────────────

    def apply_move(self, move: Move) -> bool:
        """Play *move* if it is legal. Returns True if it was applied."""
        if move not in self.legal_moves(move.from_sq):
            logger.debug("Rejected illegal move %s in %s", move, self.fen)
            return False

        record = self._state.apply_move(move)
        logger.debug("Applied %s (%s)", move, record.san)
        self._emit_move(move, record.san)

        status = self._state.status
        if status.is_terminal:
            logger.debug("Game over: %s after %s", status, record.san)
            self._emit_game_over(status)
        return True

    def push_move(self, move: Move) -> None:
        """Play a move taken from :meth:`all_legal_moves` without validation.

        No history record is written and no events fire.  Search uses this
        on its copies.
        """
        self._state.position.make_move(move)

    def copy(self, keep_history: bool = True) -> GameController:
        """Independent controller for look-ahead; listeners are not copied."""
        clone = object.__new__(GameController)
        clone._state = self._state.copy(keep_history)
        clone._strategies = dict(self._strategies)
        clone.events = GameEvents()
        return clone

    # ── Strategies ───────────────────────────────────────────────────────

    def set_strategy(self, color: Color, strategy: Strategy | None) -> None:
        """Assign the move-choice policy for *color* (None clears it)."""
        if strategy is None:
            self._strategies.pop(color, None)
        else:
            self._strategies[color] = strategy

    def strategy(self, color: Color) -> Strategy | None:
        return self._strategies.get(color)

    def make_strategy_move(self) -> bool:
        """Let the side to move's strategy play one move.

        Without an assigned strategy a depth-1 minimax is used.  Returns
        False when the strategy has nothing to play.
        """
        strategy = self._strategies.get(self.side_to_move)
        if strategy is None:
            from gambit.engine.strategies import MinimaxStrategy

            strategy = MinimaxStrategy(FALLBACK_DEPTH)

        move = strategy.choose_move(self)
        if move is None:
            logger.debug("%s strategy found no move", self.side_to_move)
            return False
        return self.apply_move(move)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _emit_move(self, move: Move, san: str) -> None:
        for cb in self.events.on_move:
            cb(move, san, self._state)

    def _emit_game_over(self, status: GameStatus) -> None:
        for cb in self.events.on_game_over:
            cb(status)
