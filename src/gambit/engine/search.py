"""Shared strategy models and protocol."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gambit.core.move import Move
    from gambit.engine.advisor import AdvisorSettings
    from gambit.game.controller import GameController

CancelCheck = Callable[[], bool]


def never_cancelled() -> bool:
    return False


@dataclass(slots=True, frozen=True)
class SearchLimits:
    """Search constraints for a single move computation."""

    max_depth: int = 2

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError("Search depth must be >= 1")


class StrategyKind(IntEnum):
    """Every move-choice policy a side can be assigned."""

    RANDOM = auto()
    CAPTURE = auto()
    MINIMAX = auto()
    EXPERT = auto()
    BERSERK = auto()
    PACIFIST = auto()


@dataclass(slots=True, frozen=True)
class StrategySpec:
    """Declarative description of a strategy, turned into one by
    :func:`gambit.engine.strategies.create_strategy`.

    Args:
        kind: Which policy to build.
        limits: Depth bound for ``MINIMAX``.
        seed: Seed for the random generator of ``RANDOM`` / ``CAPTURE``
            (None draws from OS entropy).
        advisor: Engine settings for the advisor-backed kinds.
    """

    kind: StrategyKind
    limits: SearchLimits = SearchLimits()
    seed: int | None = None
    advisor: AdvisorSettings | None = None


class Strategy(Protocol):
    """Protocol for move-choice policies used by the game layer."""

    def choose_move(
        self,
        controller: GameController,
        is_cancelled: CancelCheck | None = None,
    ) -> Move | None:
        """Pick a legal move for the side to move; None iff there is none
        (or an external advisor could not supply one)."""
        ...
