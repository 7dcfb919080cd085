"""Tests for square helpers and the Move / Piece value objects."""

import pytest

from gambit.core.enums import Color, PieceType
from gambit.core.move import Move
from gambit.core.piece import Piece
from gambit.core.types import (
    A1, E2, E4, E7, E8, H8,
    coords_to_square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
    square_to_coords,
)


class TestSquares:
    def test_names(self) -> None:
        assert square_name(A1) == "a1"
        assert square_name(H8) == "h8"
        assert square_name(make_square(15, 15)) == "p16"

    def test_parse_round_trip(self) -> None:
        assert parse_square("e4") == E4
        assert parse_square("j10", 10) == make_square(9, 9)

    def test_file_and_rank(self) -> None:
        assert file_of(E4) == 4
        assert rank_of(E4) == 3

    @pytest.mark.parametrize("name", ["", "e", "e0", "i1", "e9", "E4", "e4x"])
    def test_parse_invalid(self, name: str) -> None:
        with pytest.raises(ValueError):
            parse_square(name)

    def test_parse_respects_board_size(self) -> None:
        with pytest.raises(ValueError):
            parse_square("f5", 5)
        assert parse_square("e5", 5) == make_square(4, 4)


class TestCoordinates:
    def test_top_left_is_last_rank(self) -> None:
        assert square_to_coords(parse_square("a8")) == (0, 0)
        assert square_to_coords(A1) == (7, 0)
        assert square_to_coords(parse_square("a10", 10), 10) == (0, 0)

    @pytest.mark.parametrize("size", [5, 8, 11, 16])
    def test_inverse(self, size: int) -> None:
        for row in range(size):
            for col in range(size):
                sq = coords_to_square(row, col, size)
                assert square_to_coords(sq, size) == (row, col)

    def test_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            coords_to_square(8, 0)
        with pytest.raises(ValueError):
            square_to_coords(make_square(8, 0))


class TestMove:
    def test_uci(self) -> None:
        assert Move(E2, E4).uci == "e2e4"
        assert str(Move(E7, E8, PieceType.QUEEN)) == "e7e8q"

    def test_from_uci(self) -> None:
        assert Move.from_uci("e2e4") == Move(E2, E4)
        assert Move.from_uci("e7e8n") == Move(E7, E8, PieceType.KNIGHT)
        assert Move.from_uci("a10b11", 12) == Move(
            make_square(0, 9), make_square(1, 10)
        )

    @pytest.mark.parametrize("text", ["", "e2", "e2e9", "zz", "e2e4k"])
    def test_from_uci_invalid(self, text: str) -> None:
        with pytest.raises(ValueError):
            Move.from_uci(text, 8)

    def test_structural_equality(self) -> None:
        assert Move(E2, E4) == Move(E2, E4)
        assert len({Move(E2, E4), Move(E2, E4)}) == 1
        assert Move(E7, E8, PieceType.QUEEN) != Move(E7, E8, PieceType.ROOK)


class TestPiece:
    def test_fen_chars(self) -> None:
        assert str(Piece(Color.WHITE, PieceType.KNIGHT)) == "N"
        assert Piece.from_char("q") == Piece(Color.BLACK, PieceType.QUEEN)

    def test_invalid_char(self) -> None:
        with pytest.raises(ValueError):
            Piece.from_char("x")
