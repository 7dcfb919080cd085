"""Game management layer — controller and state.

Quick start::

    from gambit.game import GameController
    from gambit.core import Move

    ctrl = GameController()
    ctrl.apply_move(Move.from_uci("e2e4"))
    print(ctrl.fen, ctrl.status())
"""

from gambit.game.controller import GameController, GameEvents
from gambit.game.state import GameState, MoveRecord

__all__ = [
    "GameController",
    "GameEvents",
    "GameState",
    "MoveRecord",
]
