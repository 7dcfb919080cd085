"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from gambit.core import MoveGenerator, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    gen = MoveGenerator(pos)
    for move in gen.generate_legal_moves():
        print(move)
"""

from gambit.core.board import Board
from gambit.core.enums import CastlingRights, Color, GameStatus, MoveFlag, PieceType
from gambit.core.errors import FormatError
from gambit.core.move import Move
from gambit.core.move_generator import MoveGenerator
from gambit.core.notation import (
    STARTING_FEN,
    move_to_san,
    parse_san,
    position_from_fen,
    position_to_fen,
)
from gambit.core.piece import Piece
from gambit.core.position import Position
from gambit.core.rules import Rules
from gambit.core.types import (
    Square,
    coords_to_square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
    square_to_coords,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameStatus",
    "MoveFlag",
    "PieceType",
    # Types / helpers
    "Square",
    "coords_to_square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    "square_to_coords",
    # Domain objects
    "Board",
    "FormatError",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "Rules",
    # Notation
    "STARTING_FEN",
    "move_to_san",
    "parse_san",
    "position_from_fen",
    "position_to_fen",
]
