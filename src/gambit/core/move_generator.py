"""Legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from gambit.core.enums import Color, PieceType
from gambit.core.move import Move
from gambit.core.position import castle_layout
from gambit.core.types import BOARD_STRIDE, MAX_BOARD_SIZE, Square, make_square

if TYPE_CHECKING:
    from gambit.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

_PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)
_COLOR_OPPOSITE: tuple[Color, Color] = (Color.BLACK, Color.WHITE)
_CELL_COUNT = MAX_BOARD_SIZE * BOARD_STRIDE


# -- Precomputed lookup tables (one set per board size) ---------------------


@dataclass(frozen=True, slots=True)
class _Tables:
    knight_targets: tuple[tuple[Square, ...], ...]
    king_targets: tuple[tuple[Square, ...], ...]
    knight_masks: tuple[int, ...]
    king_masks: tuple[int, ...]
    # [color][sq] -> squares holding a *color* pawn that would attack sq
    pawn_attacker_masks: tuple[tuple[int, ...], tuple[int, ...]]
    bishop_rays: tuple[tuple[tuple[Square, ...], ...], ...]
    rook_rays: tuple[tuple[tuple[Square, ...], ...], ...]
    queen_rays: tuple[tuple[tuple[Square, ...], ...], ...]


def _build_targets(
    size: int,
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = [()] * _CELL_COUNT
    for rank_idx in range(size):
        for file_idx in range(size):
            moves: list[Square] = []
            for df, dr in offsets:
                af = file_idx + df
                ar = rank_idx + dr
                if 0 <= af < size and 0 <= ar < size:
                    moves.append(make_square(af, ar))
            targets[make_square(file_idx, rank_idx)] = tuple(moves)
    return tuple(targets)


def _build_attack_masks(targets: tuple[tuple[Square, ...], ...]) -> tuple[int, ...]:
    masks: list[int] = [0] * _CELL_COUNT
    for sq, square_targets in enumerate(targets):
        mask = 0
        for to_sq in square_targets:
            mask |= 1 << to_sq
        masks[sq] = mask
    return tuple(masks)


def _build_pawn_attacker_masks(size: int) -> tuple[tuple[int, ...], tuple[int, ...]]:
    white_masks: list[int] = [0] * _CELL_COUNT
    black_masks: list[int] = [0] * _CELL_COUNT

    for rank_idx in range(size):
        for file_idx in range(size):
            white_mask = 0
            if rank_idx > 0:
                if file_idx > 0:
                    white_mask |= 1 << make_square(file_idx - 1, rank_idx - 1)
                if file_idx < size - 1:
                    white_mask |= 1 << make_square(file_idx + 1, rank_idx - 1)

            black_mask = 0
            if rank_idx < size - 1:
                if file_idx > 0:
                    black_mask |= 1 << make_square(file_idx - 1, rank_idx + 1)
                if file_idx < size - 1:
                    black_mask |= 1 << make_square(file_idx + 1, rank_idx + 1)

            sq = make_square(file_idx, rank_idx)
            white_masks[sq] = white_mask
            black_masks[sq] = black_mask

    return (tuple(white_masks), tuple(black_masks))


def _build_rays(
    size: int,
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = [()] * _CELL_COUNT
    for rank_idx in range(size):
        for file_idx in range(size):
            square_rays: list[tuple[Square, ...]] = []
            for df, dr in directions:
                af = file_idx + df
                ar = rank_idx + dr
                ray: list[Square] = []
                while 0 <= af < size and 0 <= ar < size:
                    ray.append(make_square(af, ar))
                    af += df
                    ar += dr
                square_rays.append(tuple(ray))
            rays_per_square[make_square(file_idx, rank_idx)] = tuple(square_rays)
    return tuple(rays_per_square)


@lru_cache(maxsize=None)
def _tables(size: int) -> _Tables:
    knight_targets = _build_targets(size, KNIGHT_OFFSETS)
    king_targets = _build_targets(size, KING_OFFSETS)
    return _Tables(
        knight_targets=knight_targets,
        king_targets=king_targets,
        knight_masks=_build_attack_masks(knight_targets),
        king_masks=_build_attack_masks(king_targets),
        pawn_attacker_masks=_build_pawn_attacker_masks(size),
        bishop_rays=_build_rays(size, BISHOP_DIRS),
        rook_rays=_build_rays(size, ROOK_DIRS),
        queen_rays=_build_rays(size, QUEEN_DIRS),
    )


class MoveGenerator:
    """Generates legal moves for a given :class:`Position`.

    The generator mutates the position via ``make_move`` / ``unmake_move``
    internally but always restores it before returning.
    """

    __slots__ = ("_pos", "_board", "_size", "_tables")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board
        self._size = position.board.size
        self._tables = _tables(self._size)

    # -- Public API ---------------------------------------------------------

    def legal_moves(self, sq: Square) -> set[Move]:
        """Legal moves of the piece on *sq*.

        Empty when the square is empty or holds a piece of the side that is
        not to move.
        """
        piece = self._board[sq]
        if piece is None or piece.color != self._pos.side_to_move:
            return set()
        pseudo: list[Move] = []
        self._gen_piece(sq, piece.piece_type, piece.color, pseudo)
        return set(self._filter_legal(pseudo))

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        return self._filter_legal(self.generate_pseudo_legal_moves())

    def has_legal_move(self) -> bool:
        """Whether the side to move has at least one legal move."""
        moving_color = self._pos.side_to_move
        for move in self.generate_pseudo_legal_moves():
            self._pos.make_move(move)
            safe = not self.is_in_check(moving_color)
            self._pos.unmake_move(move)
            if safe:
                return True
        return False

    def capture_moves(self) -> list[Move]:
        """Legal moves that capture (en passant included)."""
        return [m for m in self.generate_legal_moves() if self._pos.is_capture(m)]

    def quiet_moves(self) -> list[Move]:
        """Legal moves that capture nothing."""
        return [m for m in self.generate_legal_moves() if not self._pos.is_capture(m)]

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        color = self._pos.side_to_move
        board = self._board

        for piece_type in PieceType:
            bitboard = board.pieces_bitboard(color, piece_type)
            while bitboard:
                lsb = bitboard & -bitboard
                self._gen_piece(lsb.bit_length() - 1, piece_type, color, moves)
                bitboard ^= lsb

        return moves

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?

        A side without a king is never in check.
        """
        king_sq = self._board.find_king(color)
        if king_sq is None:
            return False
        return self.is_square_attacked(king_sq, _COLOR_OPPOSITE[int(color)])

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?

        Castling never attacks, so no castling moves are generated here.
        """
        board = self._board
        tables = self._tables
        by_idx = int(by_color)

        if (
            board.pieces_bitboard(by_color, PieceType.PAWN)
            & tables.pawn_attacker_masks[by_idx][sq]
        ):
            return True

        if board.pieces_bitboard(by_color, PieceType.KNIGHT) & tables.knight_masks[sq]:
            return True

        if board.pieces_bitboard(by_color, PieceType.KING) & tables.king_masks[sq]:
            return True

        if board.pieces_bitboard(by_color, PieceType.BISHOP) or board.pieces_bitboard(
            by_color, PieceType.QUEEN
        ):
            for ray in tables.bishop_rays[sq]:
                for to_sq in ray:
                    piece = board[to_sq]
                    if piece is None:
                        continue
                    if piece.color == by_color and piece.piece_type in (
                        PieceType.BISHOP,
                        PieceType.QUEEN,
                    ):
                        return True
                    break

        if board.pieces_bitboard(by_color, PieceType.ROOK) or board.pieces_bitboard(
            by_color, PieceType.QUEEN
        ):
            for ray in tables.rook_rays[sq]:
                for to_sq in ray:
                    piece = board[to_sq]
                    if piece is None:
                        continue
                    if piece.color == by_color and piece.piece_type in (
                        PieceType.ROOK,
                        PieceType.QUEEN,
                    ):
                        return True
                    break

        return False

    def attackers_of(self, sq: Square, by_color: Color) -> list[Square]:
        """Squares of every *by_color* piece attacking *sq*."""
        board = self._board
        tables = self._tables
        attackers: list[Square] = []

        for piece_type, mask in (
            (PieceType.PAWN, tables.pawn_attacker_masks[int(by_color)][sq]),
            (PieceType.KNIGHT, tables.knight_masks[sq]),
            (PieceType.KING, tables.king_masks[sq]),
        ):
            hits = board.pieces_bitboard(by_color, piece_type) & mask
            attackers.extend(board._squares_from_bitboard(hits))

        for rays, sliders in (
            (tables.bishop_rays[sq], (PieceType.BISHOP, PieceType.QUEEN)),
            (tables.rook_rays[sq], (PieceType.ROOK, PieceType.QUEEN)),
        ):
            for ray in rays:
                for to_sq in ray:
                    piece = board[to_sq]
                    if piece is None:
                        continue
                    if piece.color == by_color and piece.piece_type in sliders:
                        attackers.append(to_sq)
                    break

        return attackers

    # -- Legality filter (private) -----------------------------------------

    def _filter_legal(self, pseudo: list[Move]) -> list[Move]:
        legal: list[Move] = []
        moving_color = self._pos.side_to_move
        append_legal = legal.append

        for move in pseudo:
            self._pos.make_move(move)
            if not self.is_in_check(moving_color):
                append_legal(move)
            self._pos.unmake_move(move)
        return legal

    # -- Piece-specific generators (private) -------------------------------

    def _gen_piece(
        self,
        sq: Square,
        piece_type: PieceType,
        color: Color,
        moves: list[Move],
    ) -> None:
        tables = self._tables
        if piece_type == PieceType.PAWN:
            self._gen_pawn(sq, color, moves)
        elif piece_type == PieceType.KNIGHT:
            self._gen_steps(sq, color, tables.knight_targets[sq], moves)
        elif piece_type == PieceType.BISHOP:
            self._gen_sliding(sq, color, tables.bishop_rays[sq], moves)
        elif piece_type == PieceType.ROOK:
            self._gen_sliding(sq, color, tables.rook_rays[sq], moves)
        elif piece_type == PieceType.QUEEN:
            self._gen_sliding(sq, color, tables.queen_rays[sq], moves)
        else:
            self._gen_steps(sq, color, tables.king_targets[sq], moves)
            self._gen_castling(sq, color, moves)

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        size = self._size
        file_idx = sq & 15
        rank_idx = sq >> 4

        if color == Color.WHITE:
            step = BOARD_STRIDE
            start_rank = 1
            last_rank = size - 1
        else:
            step = -BOARD_STRIDE
            start_rank = size - 2
            last_rank = 0

        next_rank = rank_idx + (1 if color == Color.WHITE else -1)
        if not (0 <= next_rank < size):
            return
        promotes = next_rank == last_rank

        one_step = sq + step
        if board.is_empty(one_step):
            self._add_pawn_move(sq, one_step, promotes, moves)
            if rank_idx == start_rank and not promotes:
                two_step = one_step + step
                if board.is_empty(two_step):
                    moves.append(Move(sq, two_step))

        for df in (-1, 1):
            cap_file = file_idx + df
            if not (0 <= cap_file < size):
                continue
            cap_sq = make_square(cap_file, next_rank)
            target = board[cap_sq]
            if target is not None:
                if target.color != color:
                    self._add_pawn_move(sq, cap_sq, promotes, moves)
            elif cap_sq == self._pos.en_passant:
                victim = board[make_square(cap_file, rank_idx)]
                if (
                    victim is not None
                    and victim.color != color
                    and victim.piece_type == PieceType.PAWN
                ):
                    moves.append(Move(sq, cap_sq))

    @staticmethod
    def _add_pawn_move(
        from_sq: Square, to_sq: Square, promotes: bool, moves: list[Move]
    ) -> None:
        if promotes:
            for pt in _PROMOTION_TYPES:
                moves.append(Move(from_sq, to_sq, pt))
        else:
            moves.append(Move(from_sq, to_sq))

    def _gen_steps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None or target.color != color:
                moves.append(Move(sq, to_sq))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        castling = self._pos.castling
        if not castling:
            return

        checked_in_place = False
        for kingside in (True, False):
            layout = castle_layout(self._size, color, kingside)
            if layout is None:
                continue
            if not castling & layout.right or king_sq != layout.king_from:
                continue
            if not self._castling_path_clear(color, layout.rook_from, king_sq):
                continue
            if not checked_in_place:
                if self.is_in_check(color):
                    return
                checked_in_place = True
            if self._king_path_safe(color, king_sq, layout.king_to):
                moves.append(Move(king_sq, layout.king_to))

    def _castling_path_clear(
        self, color: Color, rook_sq: Square, king_sq: Square
    ) -> bool:
        rook = self._board[rook_sq]
        if rook is None or rook.color != color or rook.piece_type != PieceType.ROOK:
            return False
        low, high = sorted((rook_sq, king_sq))
        return all(self._board.is_empty(sq) for sq in range(low + 1, high))

    def _king_path_safe(self, color: Color, king_sq: Square, king_to: Square) -> bool:
        opponent = _COLOR_OPPOSITE[int(color)]
        step = 1 if king_to > king_sq else -1
        return not any(
            self.is_square_attacked(sq, opponent)
            for sq in range(king_sq + step, king_to + step, step)
        )
