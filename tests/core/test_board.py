"""Tests for Board."""

import pytest

from gambit.core.board import Board
from gambit.core.enums import Color, PieceType
from gambit.core.piece import Piece
from gambit.core.types import (
    A1, B1, C1, D1, E1, F1, G1, H1,
    E2,
    A8, B8, C8, D8, E8, F8, G8, H8,
    E4,
    make_square,
)


class TestBoardInitial:
    def test_white_king_position(self) -> None:
        board = Board.initial()
        assert board[E1] == Piece(Color.WHITE, PieceType.KING)

    def test_black_king_position(self) -> None:
        board = Board.initial()
        assert board[E8] == Piece(Color.BLACK, PieceType.KING)

    def test_white_back_rank(self) -> None:
        board = Board.initial()
        expected = [
            (A1, PieceType.ROOK), (B1, PieceType.KNIGHT), (C1, PieceType.BISHOP),
            (D1, PieceType.QUEEN), (E1, PieceType.KING), (F1, PieceType.BISHOP),
            (G1, PieceType.KNIGHT), (H1, PieceType.ROOK),
        ]
        for sq, pt in expected:
            assert board[sq] == Piece(Color.WHITE, pt), f"Mismatch at square {sq}"

    def test_black_back_rank(self) -> None:
        board = Board.initial()
        expected = [
            (A8, PieceType.ROOK), (B8, PieceType.KNIGHT), (C8, PieceType.BISHOP),
            (D8, PieceType.QUEEN), (E8, PieceType.KING), (F8, PieceType.BISHOP),
            (G8, PieceType.KNIGHT), (H8, PieceType.ROOK),
        ]
        for sq, pt in expected:
            assert board[sq] == Piece(Color.BLACK, pt), f"Mismatch at square {sq}"

    def test_pawn_ranks(self) -> None:
        board = Board.initial()
        white = board.pieces(Color.WHITE, PieceType.PAWN)
        black = board.pieces(Color.BLACK, PieceType.PAWN)
        assert sorted(white) == [make_square(f, 1) for f in range(8)]
        assert sorted(black) == [make_square(f, 6) for f in range(8)]

    def test_empty_middle(self) -> None:
        board = Board.initial()
        for rank in range(2, 6):
            for file in range(8):
                assert board[make_square(file, rank)] is None


class TestBoardSize:
    @pytest.mark.parametrize("size", [5, 8, 12, 16])
    def test_supported_sizes(self, size: int) -> None:
        board = Board(size)
        assert board.size == size
        assert len(board.squares) == size * size

    @pytest.mark.parametrize("size", [0, 4, 17])
    def test_unsupported_sizes_raise(self, size: int) -> None:
        with pytest.raises(ValueError, match="Board size"):
            Board(size)

    def test_contains(self) -> None:
        board = Board(5)
        assert board.contains(make_square(4, 4))
        assert not board.contains(make_square(5, 0))
        assert not board.contains(make_square(0, 5))


class TestBoardOperations:
    def test_set_and_get(self) -> None:
        board = Board()
        piece = Piece(Color.WHITE, PieceType.PAWN)
        board[E4] = piece
        assert board[E4] == piece
        assert board.is_empty(E2)

    def test_copy_independence(self) -> None:
        board = Board.initial()
        copy = board.copy()
        assert board == copy
        copy[E1] = None
        assert board != copy
        assert board[E1] == Piece(Color.WHITE, PieceType.KING)

    def test_king_square(self) -> None:
        board = Board.initial()
        assert board.king_square(Color.WHITE) == E1
        assert board.king_square(Color.BLACK) == E8

    def test_king_square_missing_raises(self) -> None:
        board = Board()
        with pytest.raises(ValueError, match="No WHITE king"):
            board.king_square(Color.WHITE)

    def test_find_king_missing_is_none(self) -> None:
        board = Board()
        assert board.find_king(Color.BLACK) is None

    def test_king_cache_follows_moves(self) -> None:
        board = Board()
        king = Piece(Color.WHITE, PieceType.KING)
        board[E1] = king
        board[E1] = None
        assert board.find_king(Color.WHITE) is None
        board[E2] = king
        assert board.find_king(Color.WHITE) == E2

    def test_all_pieces_count(self) -> None:
        board = Board.initial()
        assert len(board.all_pieces(Color.WHITE)) == 16
        assert len(board.all_pieces(Color.BLACK)) == 16

    def test_clear(self) -> None:
        board = Board.initial()
        board.clear()
        assert all(board[sq] is None for sq in board.squares)

    def test_repr_not_empty(self) -> None:
        board = Board.initial()
        text = repr(board)
        assert "K" in text
        assert "a b c d e f g h" in text
