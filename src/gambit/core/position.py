"""Position — complete game state (board + metadata) with make/unmake."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import NamedTuple

from gambit.core.board import Board
from gambit.core.enums import CastlingRights, Color, MoveFlag, PieceType
from gambit.core.move import Move
from gambit.core.piece import Piece
from gambit.core.types import Square, file_of, make_square, rank_of


class CastleLayout(NamedTuple):
    """Squares involved in one castling move."""

    right: CastlingRights
    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square


_RIGHTS: dict[tuple[Color, bool], CastlingRights] = {
    (Color.WHITE, True): CastlingRights.WHITE_KINGSIDE,
    (Color.WHITE, False): CastlingRights.WHITE_QUEENSIDE,
    (Color.BLACK, True): CastlingRights.BLACK_KINGSIDE,
    (Color.BLACK, False): CastlingRights.BLACK_QUEENSIDE,
}


@lru_cache(maxsize=None)
def castle_layout(size: int, color: Color, kingside: bool) -> CastleLayout | None:
    """King and rook squares for castling on a *size* board.

    The king starts on file ``size // 2`` (e-file on 8x8) and the rooks in
    the corners; the king moves two files toward the rook, which lands on
    the square the king crossed.  ``None`` on boards too narrow for that.
    """
    rank = 0 if color == Color.WHITE else size - 1
    king_file = size // 2
    direction = 1 if kingside else -1
    king_to_file = king_file + 2 * direction
    if not (0 < king_to_file < size - 1):
        return None
    return CastleLayout(
        _RIGHTS[(color, kingside)],
        make_square(king_file, rank),
        make_square(king_to_file, rank),
        make_square(size - 1 if kingside else 0, rank),
        make_square(king_file + direction, rank),
    )


@lru_cache(maxsize=None)
def rook_corners(size: int) -> dict[Square, tuple[Color, CastlingRights]]:
    """Home corner of each castling rook → (owner, right lost when it leaves)."""
    corners: dict[Square, tuple[Color, CastlingRights]] = {}
    for color in (Color.WHITE, Color.BLACK):
        for kingside in (True, False):
            layout = castle_layout(size, color, kingside)
            if layout is not None:
                corners[layout.rook_from] = (color, layout.right)
    return corners


@dataclass(slots=True)
class _PositionState:
    """Snapshot saved before each move so we can undo it."""

    flag: MoveFlag
    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int
    captured_piece: Piece | None


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    Supports efficient :meth:`make_move` / :meth:`unmake_move` via an internal
    history stack.  Moves are assumed legal; use
    :class:`~gambit.core.move_generator.MoveGenerator` to check first.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "_history",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self._history: list[_PositionState] = []

    @property
    def size(self) -> int:
        return self.board.size

    # ── Move classification ──────────────────────────────────────────────

    def classify(self, move: Move) -> MoveFlag:
        """Derive the special-move flag of *move* in this position."""
        piece = self.board[move.from_sq]
        if piece is None:
            return MoveFlag.NORMAL

        if piece.piece_type == PieceType.PAWN:
            if move.promotion is not None:
                return MoveFlag.PROMOTION
            if (
                move.to_sq == self.en_passant
                and file_of(move.to_sq) != file_of(move.from_sq)
                and self.board[move.to_sq] is None
            ):
                return MoveFlag.EN_PASSANT
            if abs(rank_of(move.to_sq) - rank_of(move.from_sq)) == 2:
                return MoveFlag.DOUBLE_PAWN
            return MoveFlag.NORMAL

        if (
            piece.piece_type == PieceType.KING
            and rank_of(move.to_sq) == rank_of(move.from_sq)
            and abs(file_of(move.to_sq) - file_of(move.from_sq)) == 2
        ):
            kingside = file_of(move.to_sq) > file_of(move.from_sq)
            layout = castle_layout(self.size, piece.color, kingside)
            if layout is not None and layout.king_from == move.from_sq:
                if kingside:
                    return MoveFlag.CASTLE_KINGSIDE
                return MoveFlag.CASTLE_QUEENSIDE

        return MoveFlag.NORMAL

    def is_capture(self, move: Move) -> bool:
        """Whether *move* removes an enemy piece (en passant included)."""
        return (
            self.board[move.to_sq] is not None
            or self.classify(move) == MoveFlag.EN_PASSANT
        )

    # ── Core move operations ─────────────────────────────────────────────

    def make_move(self, move: Move) -> MoveFlag:
        """Apply *move*, pushing undo state onto the history stack.

        Returns the flag the move was classified with.
        """
        piece = self.board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        flag = self.classify(move)
        captured = self.board[move.to_sq]
        capture_sq = move.to_sq

        # En passant: the captured pawn sits on a different square
        if flag == MoveFlag.EN_PASSANT:
            capture_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
            captured = self.board[capture_sq]

        self._history.append(
            _PositionState(
                flag=flag,
                castling=self.castling,
                en_passant=self.en_passant,
                halfmove_clock=self.halfmove_clock,
                captured_piece=captured,
            )
        )

        self.board[move.from_sq] = None
        if captured is not None:
            self.board[capture_sq] = None

        placed_piece = piece
        if flag == MoveFlag.PROMOTION and move.promotion is not None:
            placed_piece = Piece(piece.color, move.promotion)
        self.board[move.to_sq] = placed_piece

        # Slide the rook for castling
        if flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE):
            layout = castle_layout(
                self.size, piece.color, flag == MoveFlag.CASTLE_KINGSIDE
            )
            assert layout is not None
            self.board[layout.rook_to] = self.board[layout.rook_from]
            self.board[layout.rook_from] = None

        # En passant target for the opponent
        if flag == MoveFlag.DOUBLE_PAWN:
            self.en_passant = make_square(
                file_of(move.from_sq),
                (rank_of(move.from_sq) + rank_of(move.to_sq)) // 2,
            )
        else:
            self.en_passant = None

        self._update_castling(move, piece, captured)

        # Clocks
        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1

        self.side_to_move = self.side_to_move.opposite
        return flag

    def unmake_move(self, move: Move) -> None:
        """Undo the last :meth:`make_move`."""
        state = self._history.pop()
        flag = state.flag

        self.side_to_move = self.side_to_move.opposite
        if self.side_to_move == Color.BLACK:
            self.fullmove_number -= 1

        piece = self.board[move.to_sq]
        assert piece is not None

        # Restore pawn for promotion
        if flag == MoveFlag.PROMOTION:
            piece = Piece(piece.color, PieceType.PAWN)

        # Put the piece back; restore captured piece (or None)
        self.board[move.from_sq] = piece
        if flag == MoveFlag.EN_PASSANT:
            self.board[move.to_sq] = None
            ep_capture_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
            self.board[ep_capture_sq] = state.captured_piece
        else:
            self.board[move.to_sq] = state.captured_piece

        # Undo rook slide for castling
        if flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE):
            layout = castle_layout(
                self.size, piece.color, flag == MoveFlag.CASTLE_KINGSIDE
            )
            assert layout is not None
            self.board[layout.rook_from] = self.board[layout.rook_to]
            self.board[layout.rook_to] = None

        self.castling = state.castling
        self.en_passant = state.en_passant
        self.halfmove_clock = state.halfmove_clock

    # ── Castling bookkeeping ─────────────────────────────────────────────

    def _update_castling(
        self, move: Move, piece: Piece, captured: Piece | None
    ) -> None:
        if not self.castling:
            return

        if piece.piece_type == PieceType.KING:
            if piece.color == Color.WHITE:
                self.castling &= ~CastlingRights.WHITE_BOTH
            else:
                self.castling &= ~CastlingRights.BLACK_BOTH

        corners = rook_corners(self.size)
        if piece.piece_type == PieceType.ROOK and move.from_sq in corners:
            owner, right = corners[move.from_sq]
            if owner == piece.color:
                self.castling &= ~right

        if (
            captured is not None
            and captured.piece_type == PieceType.ROOK
            and move.to_sq in corners
        ):
            owner, right = corners[move.to_sq]
            if owner == captured.color:
                self.castling &= ~right

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        """Deep copy without history."""
        return Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )

    def with_side_to_move(self, color: Color) -> Position:
        """Copy of this position with *color* to move."""
        pos = self.copy()
        pos.side_to_move = color
        return pos

    def __repr__(self) -> str:
        from gambit.core.notation.fen import position_to_fen

        return f"Position({position_to_fen(self)!r})"
