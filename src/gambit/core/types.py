"""Square type alias and coordinate helpers.

Squares use a fixed 16-wide layout so that a square keeps its name on every
supported board size (5x5 up to 16x16):
    a1=0,  b1=1,  ..., p1=15
    a2=16, b2=17, ...
    ...

Rank 0 is the first rank (White's back rank).  The *(row, col)* coordinate
pair used by :func:`square_to_coords` counts rows from the top instead, so
row 0 is the last rank of a board of the given size.
"""

from __future__ import annotations

from typing import TypeAlias

Square: TypeAlias = int

BOARD_STRIDE = 16
MIN_BOARD_SIZE = 5
MAX_BOARD_SIZE = 16
DEFAULT_BOARD_SIZE = 8

_FILE_LETTERS = "abcdefghijklmnop"


def file_of(sq: Square) -> int:
    """File index (0 = a)."""
    return sq & 15


def rank_of(sq: Square) -> int:
    """Rank index (0 = rank 1)."""
    return sq >> 4


def make_square(file: int, rank: int) -> Square:
    """Create square from file and rank indexes."""
    return rank * BOARD_STRIDE + file


def square_name(sq: Square) -> str:
    """Human-readable name, e.g. 0 -> 'a1', make_square(7, 7) -> 'h8'."""
    return _FILE_LETTERS[file_of(sq)] + str(rank_of(sq) + 1)


def parse_square(name: str, size: int = DEFAULT_BOARD_SIZE) -> Square:
    """Parse square name, e.g. 'e4'.  Raises ``ValueError`` when off-board."""
    if len(name) < 2 or not name[1:].isdigit() or name[1] == "0":
        raise ValueError(f"Invalid square name: {name!r}")
    file = _FILE_LETTERS.find(name[0])
    rank = int(name[1:]) - 1
    if not (0 <= file < size and 0 <= rank < size):
        raise ValueError(f"Invalid square name: {name!r}")
    return make_square(file, rank)


def is_valid_square(sq: int, size: int = DEFAULT_BOARD_SIZE) -> bool:
    """Check whether integer is a square on a board of *size*."""
    return sq >= 0 and file_of(sq) < size and rank_of(sq) < size


def square_to_coords(sq: Square, size: int = DEFAULT_BOARD_SIZE) -> tuple[int, int]:
    """Zero-based ``(row, col)`` with row 0 at the top of the board."""
    if not is_valid_square(sq, size):
        raise ValueError(f"Square {sq} is off a {size}x{size} board")
    return size - 1 - rank_of(sq), file_of(sq)


def coords_to_square(row: int, col: int, size: int = DEFAULT_BOARD_SIZE) -> Square:
    """Inverse of :func:`square_to_coords`."""
    if not (0 <= row < size and 0 <= col < size):
        raise ValueError(f"Coordinates ({row}, {col}) are off a {size}x{size} board")
    return make_square(col, size - 1 - row)


def board_squares(size: int = DEFAULT_BOARD_SIZE) -> tuple[Square, ...]:
    """All squares of a *size* board, a1 first, rank by rank."""
    return tuple(make_square(f, r) for r in range(size) for f in range(size))


# ── Named square constants (standard board) ─────────────────────────────────

A1, B1, C1, D1, E1, F1, G1, H1 = (make_square(f, 0) for f in range(8))
A2, B2, C2, D2, E2, F2, G2, H2 = (make_square(f, 1) for f in range(8))
A3, B3, C3, D3, E3, F3, G3, H3 = (make_square(f, 2) for f in range(8))
A4, B4, C4, D4, E4, F4, G4, H4 = (make_square(f, 3) for f in range(8))
A5, B5, C5, D5, E5, F5, G5, H5 = (make_square(f, 4) for f in range(8))
A6, B6, C6, D6, E6, F6, G6, H6 = (make_square(f, 5) for f in range(8))
A7, B7, C7, D7, E7, F7, G7, H7 = (make_square(f, 6) for f in range(8))
A8, B8, C8, D8, E8, F8, G8, H8 = (make_square(f, 7) for f in range(8))
