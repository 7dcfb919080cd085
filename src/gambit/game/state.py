"""Game state — the position being played plus its move history."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gambit.core.enums import Color, GameStatus
from gambit.core.move_generator import MoveGenerator
from gambit.core.notation import (
    STARTING_FEN,
    move_to_san,
    position_from_fen,
    position_to_fen,
)
from gambit.core.rules import Rules
from gambit.core.types import DEFAULT_BOARD_SIZE

if TYPE_CHECKING:
    from gambit.core.move import Move
    from gambit.core.position import Position


@dataclass
class MoveRecord:
    """A single entry in the move history."""

    move: Move
    san: str
    fen_after: str
    was_check: bool = False
    was_capture: bool = False


@dataclass
class GameState:
    """Owns the position and the record of every move applied to it.

    This is a pure data/logic class — no threading, no UI.
    """

    position: Position = field(init=False)
    start_fen: str = field(default=STARTING_FEN, init=False)
    move_history: list[MoveRecord] = field(default_factory=list, init=False)

    # ── Initialisation ───────────────────────────────────────────────────

    def setup(self, fen: str | None = None, size: int = DEFAULT_BOARD_SIZE) -> None:
        """Initialise (or reset) the game from *fen* on a *size* board."""
        if fen is None and size != DEFAULT_BOARD_SIZE:
            raise ValueError(f"A FEN is required for a {size}x{size} board")
        self.start_fen = fen or STARTING_FEN
        self.position = position_from_fen(self.start_fen, size)
        self.move_history.clear()

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(self, move: Move) -> MoveRecord:
        """Apply a validated move and return the history record.

        Caller is responsible for legality check.
        """
        was_capture = self.position.is_capture(move)

        san = move_to_san(self.position, move)
        self.position.make_move(move)

        fen_after = position_to_fen(self.position)
        was_check = Rules.is_in_check(self.position)

        record = MoveRecord(
            move=move,
            san=san,
            fen_after=fen_after,
            was_check=was_check,
            was_capture=was_capture,
        )
        self.move_history.append(record)
        return record

    def copy(self, keep_history: bool = True) -> GameState:
        """Independent copy: mutating one never affects the other.

        With *keep_history* False the clone starts with an empty history.
        """
        clone = GameState()
        clone.position = self.position.copy()
        clone.start_fen = self.start_fen
        if keep_history:
            clone.move_history = list(self.move_history)
        return clone

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return self.position.side_to_move

    @property
    def status(self) -> GameStatus:
        return Rules.status(self.position)

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.move_history)

    def legal_moves(self) -> list[Move]:
        """Legal moves in the current position."""
        gen = MoveGenerator(self.position)
        return gen.generate_legal_moves()
