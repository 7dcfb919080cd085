"""Static position evaluation: material, piece-square tables, mobility.

Scores are in centipawns from White's point of view.  The piece-square
tables are 8x8 and are read from White's side of the board, row 0 being the
far (eighth) rank.  Other board sizes sample them by scaling each coordinate
with ``floor(i * 8 / size)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gambit.core.enums import Color, PieceType
from gambit.core.move_generator import MoveGenerator
from gambit.core.types import file_of, rank_of

if TYPE_CHECKING:
    from gambit.core.position import Position

PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 20_000,
}

ENDGAME_MATERIAL = 1500  # roughly queen + rook
MOBILITY_WEIGHT = 0.1

_Table = tuple[tuple[int, ...], ...]

_PAWN_TABLE: _Table = (
    (0, 0, 0, 0, 0, 0, 0, 0),
    (50, 50, 50, 50, 50, 50, 50, 50),
    (10, 10, 20, 30, 30, 20, 10, 10),
    (5, 5, 10, 25, 25, 10, 5, 5),
    (0, 0, 0, 20, 20, 0, 0, 0),
    (5, -5, -10, 0, 0, -10, -5, 5),
    (5, 10, 10, -20, -20, 10, 10, 5),
    (0, 0, 0, 0, 0, 0, 0, 0),
)

_KNIGHT_TABLE: _Table = (
    (-50, -40, -30, -30, -30, -30, -40, -50),
    (-40, -20, 0, 0, 0, 0, -20, -40),
    (-30, 0, 10, 15, 15, 10, 0, -30),
    (-30, 5, 15, 20, 20, 15, 5, -30),
    (-30, 0, 15, 20, 20, 15, 0, -30),
    (-30, 5, 10, 15, 15, 10, 5, -30),
    (-40, -20, 0, 5, 5, 0, -20, -40),
    (-50, -40, -30, -30, -30, -30, -40, -50),
)

_BISHOP_TABLE: _Table = (
    (-20, -10, -10, -10, -10, -10, -10, -20),
    (-10, 0, 0, 0, 0, 0, 0, -10),
    (-10, 0, 5, 10, 10, 5, 0, -10),
    (-10, 5, 5, 10, 10, 5, 5, -10),
    (-10, 0, 10, 10, 10, 10, 0, -10),
    (-10, 10, 10, 10, 10, 10, 10, -10),
    (-10, 5, 0, 0, 0, 0, 5, -10),
    (-20, -10, -10, -10, -10, -10, -10, -20),
)

_ROOK_TABLE: _Table = (
    (0, 0, 0, 0, 0, 0, 0, 0),
    (5, 10, 10, 10, 10, 10, 10, 5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (0, 0, 0, 5, 5, 0, 0, 0),
)

_QUEEN_TABLE: _Table = (
    (-20, -10, -10, -5, -5, -10, -10, -20),
    (-10, 0, 0, 0, 0, 0, 0, -10),
    (-10, 0, 5, 5, 5, 5, 0, -10),
    (-5, 0, 5, 5, 5, 5, 0, -5),
    (0, 0, 5, 5, 5, 5, 0, -5),
    (-10, 5, 5, 5, 5, 5, 0, -10),
    (-10, 0, 5, 0, 0, 0, 0, -10),
    (-20, -10, -10, -5, -5, -10, -10, -20),
)

_KING_MIDDLE_GAME_TABLE: _Table = (
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-20, -30, -30, -40, -40, -30, -30, -20),
    (-10, -20, -20, -20, -20, -20, -20, -10),
    (20, 20, 0, 0, 0, 0, 20, 20),
    (20, 30, 10, 0, 0, 10, 30, 20),
)

_KING_END_GAME_TABLE: _Table = (
    (-50, -40, -30, -20, -20, -30, -40, -50),
    (-30, -20, -10, 0, 0, -10, -20, -30),
    (-30, -10, 20, 30, 30, 20, -10, -30),
    (-30, -10, 30, 40, 40, 30, -10, -30),
    (-30, -10, 30, 40, 40, 30, -10, -30),
    (-30, -10, 20, 30, 30, 20, -10, -30),
    (-30, -30, 0, 0, 0, 0, -30, -30),
    (-50, -30, -30, -30, -30, -30, -30, -50),
)

_PIECE_SQUARE_TABLES: dict[PieceType, _Table] = {
    PieceType.PAWN: _PAWN_TABLE,
    PieceType.KNIGHT: _KNIGHT_TABLE,
    PieceType.BISHOP: _BISHOP_TABLE,
    PieceType.ROOK: _ROOK_TABLE,
    PieceType.QUEEN: _QUEEN_TABLE,
    PieceType.KING: _KING_MIDDLE_GAME_TABLE,
}


def is_endgame(position: Position) -> bool:
    """Whether the non-king material left on the board is at most a queen + rook."""
    board = position.board
    material = 0
    for color in (Color.WHITE, Color.BLACK):
        for piece_type in (
            PieceType.PAWN,
            PieceType.KNIGHT,
            PieceType.BISHOP,
            PieceType.ROOK,
            PieceType.QUEEN,
        ):
            count = board.pieces_bitboard(color, piece_type).bit_count()
            material += count * PIECE_VALUES[piece_type]
    return material <= ENDGAME_MATERIAL


def mobility(position: Position, color: Color) -> int:
    """Number of legal moves *color* would have if it were to move."""
    return len(MoveGenerator(position.with_side_to_move(color)).generate_legal_moves())


def evaluate(position: Position) -> float:
    """Score *position* in centipawns; positive favours White."""
    board = position.board
    size = board.size
    king_table = _KING_END_GAME_TABLE if is_endgame(position) else None

    score = 0.0
    for sq in board.squares:
        piece = board[sq]
        if piece is None:
            continue

        table = _PIECE_SQUARE_TABLES[piece.piece_type]
        if piece.piece_type == PieceType.KING and king_table is not None:
            table = king_table

        # Tables are written from White's side: row 0 is the far rank.
        if piece.color == Color.WHITE:
            row = size - 1 - rank_of(sq)
        else:
            row = rank_of(sq)
        value = PIECE_VALUES[piece.piece_type] + table[row * 8 // size][
            file_of(sq) * 8 // size
        ]

        if piece.color == Color.WHITE:
            score += value
        else:
            score -= value

    score += MOBILITY_WEIGHT * (
        mobility(position, Color.WHITE) - mobility(position, Color.BLACK)
    )
    return score
