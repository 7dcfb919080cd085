"""Board - piece placement on an N x N board."""

from __future__ import annotations

from functools import lru_cache

from gambit.core.enums import Color, PieceType
from gambit.core.piece import Piece
from gambit.core.types import (
    BOARD_STRIDE,
    DEFAULT_BOARD_SIZE,
    MAX_BOARD_SIZE,
    MIN_BOARD_SIZE,
    Square,
    board_squares,
    file_of,
    make_square,
    rank_of,
)

_PIECE_TYPE_COUNT = 6
_COLOR_COUNT = 2
_CELL_COUNT = MAX_BOARD_SIZE * BOARD_STRIDE

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


@lru_cache(maxsize=None)
def _squares_for(size: int) -> tuple[Square, ...]:
    return board_squares(size)


class Board:
    """Mutable square-centric board with incremental piece indexes.

    Cells are addressed by :data:`~gambit.core.types.Square` indexes; only
    the ``size`` x ``size`` corner starting at a1 is on the board.
    """

    __slots__ = (
        "size",
        "_squares",
        "_piece_bitboards",
        "_color_bitboards",
        "_king_squares",
    )

    def __init__(self, size: int = DEFAULT_BOARD_SIZE) -> None:
        if not (MIN_BOARD_SIZE <= size <= MAX_BOARD_SIZE):
            raise ValueError(
                f"Board size must be between {MIN_BOARD_SIZE} and "
                f"{MAX_BOARD_SIZE}, got {size}"
            )
        self.size = size
        self._squares: list[Piece | None] = [None] * _CELL_COUNT
        # [color][piece_type-1] -> bitboard of occupied squares.
        self._piece_bitboards: list[list[int]] = [
            [0] * _PIECE_TYPE_COUNT for _ in range(_COLOR_COUNT)
        ]
        # [color] -> bitboard of all occupied squares for that color.
        self._color_bitboards: list[int] = [0] * _COLOR_COUNT
        # [color] -> king square cache (None if king missing).
        self._king_squares: list[Square | None] = [None] * _COLOR_COUNT

    @staticmethod
    def _piece_type_index(piece_type: PieceType) -> int:
        return int(piece_type) - 1

    @staticmethod
    def _squares_from_bitboard(bitboard: int) -> list[Square]:
        squares: list[Square] = []
        while bitboard:
            lsb = bitboard & -bitboard
            squares.append(lsb.bit_length() - 1)
            bitboard ^= lsb
        return squares

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        old_piece = self._squares[sq]
        if old_piece == piece:
            return

        mask = 1 << sq

        if old_piece is not None:
            old_color_idx = int(old_piece.color)
            old_piece_idx = self._piece_type_index(old_piece.piece_type)
            self._piece_bitboards[old_color_idx][old_piece_idx] &= ~mask
            self._color_bitboards[old_color_idx] &= ~mask
            if (
                old_piece.piece_type == PieceType.KING
                and self._king_squares[old_color_idx] == sq
            ):
                remaining = self._piece_bitboards[old_color_idx][old_piece_idx]
                self._king_squares[old_color_idx] = (
                    (remaining & -remaining).bit_length() - 1 if remaining else None
                )

        self._squares[sq] = piece

        if piece is None:
            return

        color_idx = int(piece.color)
        piece_idx = self._piece_type_index(piece.piece_type)
        self._piece_bitboards[color_idx][piece_idx] |= mask
        self._color_bitboards[color_idx] |= mask
        if piece.piece_type == PieceType.KING:
            self._king_squares[color_idx] = sq

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    def contains(self, sq: Square) -> bool:
        return sq >= 0 and file_of(sq) < self.size and rank_of(sq) < self.size

    @property
    def squares(self) -> tuple[Square, ...]:
        """Every on-board square, a1 first."""
        return _squares_for(self.size)

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        bitboard = self._piece_bitboards[int(color)][self._piece_type_index(piece_type)]
        return self._squares_from_bitboard(bitboard)

    def pieces_bitboard(self, color: Color, piece_type: PieceType) -> int:
        """Bitboard of squares occupied by *color*'s *piece_type*."""
        return self._piece_bitboards[int(color)][self._piece_type_index(piece_type)]

    def all_pieces_bitboard(self, color: Color) -> int:
        """Bitboard of all squares occupied by *color*."""
        return self._color_bitboards[int(color)]

    def all_pieces(self, color: Color) -> list[Square]:
        """All squares occupied by *color*."""
        return self._squares_from_bitboard(self.all_pieces_bitboard(color))

    def find_king(self, color: Color) -> Square | None:
        """King square for *color*, or ``None`` when it has no king."""
        return self._king_squares[int(color)]

    def king_square(self, color: Color) -> Square:
        """Return the single king square for *color*."""
        sq = self._king_squares[int(color)]
        if sq is None:
            raise ValueError(f"No {color.name} king on board")
        return sq

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board(self.size)
        b._squares = self._squares.copy()
        b._piece_bitboards = [row.copy() for row in self._piece_bitboards]
        b._color_bitboards = self._color_bitboards.copy()
        b._king_squares = self._king_squares.copy()
        return b

    def clear(self) -> None:
        self._squares = [None] * _CELL_COUNT
        self._piece_bitboards = [[0] * _PIECE_TYPE_COUNT for _ in range(_COLOR_COUNT)]
        self._color_bitboards = [0] * _COLOR_COUNT
        self._king_squares = [None] * _COLOR_COUNT

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls(DEFAULT_BOARD_SIZE)
        for f in range(8):
            b[make_square(f, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[make_square(f, 6)] = Piece(Color.BLACK, PieceType.PAWN)

        for f, pt in enumerate(_BACK_RANK):
            b[make_square(f, 0)] = Piece(Color.WHITE, pt)
            b[make_square(f, 7)] = Piece(Color.BLACK, pt)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.size == other.size and self._squares == other._squares

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(self.size - 1, -1, -1):
            row = []
            for file in range(self.size):
                p = self[make_square(file, rank)]
                row.append(str(p) if p else ".")
            rows.append(f"{rank + 1:>2} {' '.join(row)}")
        rows.append("   " + " ".join("abcdefghijklmnop"[: self.size]))
        return "\n".join(rows)
