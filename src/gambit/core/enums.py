"""Core enumerations and flags for the rules engine."""

from __future__ import annotations

from enum import IntEnum, IntFlag, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class MoveFlag(IntEnum):
    """Special move classification, derived from the position a move is played in."""

    NORMAL = 0
    DOUBLE_PAWN = 1
    EN_PASSANT = 2
    CASTLE_KINGSIDE = 3
    CASTLE_QUEENSIDE = 4
    PROMOTION = 5


class CastlingRights(IntFlag):
    """Bitmask for castling availability."""

    NONE = 0
    WHITE_KINGSIDE = auto()
    WHITE_QUEENSIDE = auto()
    BLACK_KINGSIDE = auto()
    BLACK_QUEENSIDE = auto()

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH


class GameStatus(IntEnum):
    """Status of the side to move, recomputed on every query."""

    ACTIVE = 0
    CHECK = 1
    CHECKMATE = 2
    STALEMATE = 3

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.CHECKMATE, GameStatus.STALEMATE)

    def __str__(self) -> str:
        return self.name.lower()
