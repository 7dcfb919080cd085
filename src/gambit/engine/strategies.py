"""Move-choice strategies: random, capture-preferring, minimax, advisor."""

from __future__ import annotations

import logging
import math
import random
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from gambit.core.enums import Color
from gambit.core.move import Move
from gambit.core.move_generator import MoveGenerator
from gambit.engine.advisor import AdvisorSettings, UciAdvisor
from gambit.engine.evaluate import evaluate
from gambit.engine.search import (
    CancelCheck,
    SearchLimits,
    Strategy,
    StrategyKind,
    StrategySpec,
    never_cancelled,
)

if TYPE_CHECKING:
    from gambit.game.controller import GameController

logger = logging.getLogger(__name__)

MATE_SCORE = 20_000


class RandomStrategy:
    """Uniform choice over all legal moves."""

    __slots__ = ("_rng",)

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def choose_move(
        self,
        controller: GameController,
        is_cancelled: CancelCheck | None = None,
    ) -> Move | None:
        moves = controller.all_legal_moves()
        if not moves:
            return None
        return self._rng.choice(moves)


class CapturePreferringStrategy:
    """Uniform choice over captures when any exist, else over quiet moves."""

    __slots__ = ("_rng",)

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def choose_move(
        self,
        controller: GameController,
        is_cancelled: CancelCheck | None = None,
    ) -> Move | None:
        position = controller.state.position
        moves = controller.all_legal_moves()
        captures = [m for m in moves if position.is_capture(m)]
        pool = captures or moves
        if not pool:
            return None
        return self._rng.choice(pool)


class MinimaxStrategy:
    """Fixed-depth minimax with alpha-beta pruning.

    White maximizes and Black minimizes the :func:`evaluate` score.  Every
    node works on its own history-free controller copy.  Leaves at depth 0
    take the static evaluation; a node that runs out of moves earlier in
    the search scores as mate or stalemate.
    """

    __slots__ = ("_limits",)

    def __init__(self, depth: int = 2) -> None:
        self._limits = SearchLimits(max_depth=depth)

    @property
    def depth(self) -> int:
        return self._limits.max_depth

    def choose_move(
        self,
        controller: GameController,
        is_cancelled: CancelCheck | None = None,
    ) -> Move | None:
        cancelled = is_cancelled or never_cancelled
        moves = controller.all_legal_moves()
        if not moves:
            return None

        maximizing = controller.side_to_move == Color.WHITE
        best_move = moves[0]
        best_score = -math.inf if maximizing else math.inf

        for move in moves:
            if cancelled():
                break
            child = controller.copy(keep_history=False)
            child.push_move(move)
            score = self._minimax(child, self.depth - 1, -math.inf, math.inf)
            if (maximizing and score > best_score) or (
                not maximizing and score < best_score
            ):
                best_score = score
                best_move = move

        logger.debug("Minimax depth %d chose %s (%.1f)", self.depth, best_move, best_score)
        return best_move

    def _minimax(
        self,
        controller: GameController,
        depth: int,
        alpha: float,
        beta: float,
    ) -> float:
        position = controller.state.position
        if depth <= 0:
            return evaluate(position)

        maximizing = position.side_to_move == Color.WHITE
        moves = controller.all_legal_moves()
        if not moves:
            if MoveGenerator(position).is_in_check(position.side_to_move):
                return -MATE_SCORE if maximizing else MATE_SCORE
            return 0.0

        if maximizing:
            best = -math.inf
            for move in moves:
                child = controller.copy(keep_history=False)
                child.push_move(move)
                score = self._minimax(child, depth - 1, alpha, beta)
                best = max(best, score)
                alpha = max(alpha, score)
                if beta <= alpha:
                    break
            return best

        best = math.inf
        for move in moves:
            child = controller.copy(keep_history=False)
            child.push_move(move)
            score = self._minimax(child, depth - 1, alpha, beta)
            best = min(best, score)
            beta = min(beta, score)
            if beta <= alpha:
                break
        return best


class AdvisorMode(IntEnum):
    """How an :class:`AdvisorStrategy` restricts the engine's choice."""

    EXPERT = auto()  # unrestricted
    BERSERK = auto()  # captures only
    PACIFIST = auto()  # non-captures only


class AdvisorStrategy:
    """Delegates the choice to an external UCI engine.

    ``BERSERK`` and ``PACIFIST`` narrow the engine to capturing or quiet
    moves.  A single candidate is played without asking; an empty candidate
    list falls back to the unrestricted engine move.
    """

    __slots__ = ("_advisor", "_mode")

    def __init__(
        self,
        advisor: UciAdvisor,
        mode: AdvisorMode = AdvisorMode.EXPERT,
    ) -> None:
        self._advisor = advisor
        self._mode = mode

    @property
    def mode(self) -> AdvisorMode:
        return self._mode

    def choose_move(
        self,
        controller: GameController,
        is_cancelled: CancelCheck | None = None,
    ) -> Move | None:
        position = controller.state.position
        legal = controller.all_legal_moves()
        if not legal:
            return None

        if self._mode == AdvisorMode.BERSERK:
            candidates = [m for m in legal if position.is_capture(m)]
        elif self._mode == AdvisorMode.PACIFIST:
            candidates = [m for m in legal if not position.is_capture(m)]
        else:
            candidates = []

        if len(candidates) == 1:
            return candidates[0]

        fen = controller.fen
        if candidates:
            uci = self._advisor.best_move_from_list(
                fen, [m.uci for m in candidates], is_cancelled=is_cancelled
            )
        else:
            uci = self._advisor.best_move(fen, is_cancelled=is_cancelled)
        if uci is None:
            return None

        try:
            move = Move.from_uci(uci, controller.size)
        except ValueError:
            logger.warning("Advisor suggested unparsable move %r", uci)
            return None
        if move not in legal:
            logger.warning("Advisor suggested illegal move %s in %s", uci, fen)
            return None
        return move


# ── Dispatch ─────────────────────────────────────────────────────────────────


def create_strategy(spec: StrategySpec) -> Strategy:
    """Build the strategy described by *spec*."""
    kind = spec.kind
    if kind == StrategyKind.RANDOM:
        return RandomStrategy(random.Random(spec.seed))
    if kind == StrategyKind.CAPTURE:
        return CapturePreferringStrategy(random.Random(spec.seed))
    if kind == StrategyKind.MINIMAX:
        return MinimaxStrategy(spec.limits.max_depth)

    advisor = UciAdvisor(spec.advisor or AdvisorSettings())
    return AdvisorStrategy(advisor, AdvisorMode[kind.name])
