"""High-level chess rules: check, checkmate, stalemate."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gambit.core.enums import GameStatus
from gambit.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from gambit.core.position import Position


class Rules:
    """Static rule-checker that operates on a :class:`Position`.

    Checkmate and stalemate are the only game-ending outcomes.
    """

    @staticmethod
    def is_in_check(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move)

    @staticmethod
    def status(position: Position) -> GameStatus:
        """Classify the position for the side to move."""
        gen = MoveGenerator(position)
        in_check = gen.is_in_check(position.side_to_move)
        if not gen.has_legal_move():
            return GameStatus.CHECKMATE if in_check else GameStatus.STALEMATE
        return GameStatus.CHECK if in_check else GameStatus.ACTIVE
