"""FEN parsing and serialization."""

from __future__ import annotations

from gambit.core.board import Board
from gambit.core.enums import CastlingRights, Color
from gambit.core.errors import FormatError
from gambit.core.piece import Piece
from gambit.core.position import Position
from gambit.core.types import (
    DEFAULT_BOARD_SIZE,
    MAX_BOARD_SIZE,
    MIN_BOARD_SIZE,
    Square,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: tuple[tuple[str, CastlingRights], ...] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)
_CASTLING_RIGHTS: dict[str, CastlingRights] = dict(_CASTLING_CHARS)


def position_from_fen(fen: str, size: int = DEFAULT_BOARD_SIZE) -> Position:
    """Parse a FEN string into a :class:`Position` on a *size* board.

    Raises :class:`~gambit.core.errors.FormatError` on any malformed field.
    """
    if not (MIN_BOARD_SIZE <= size <= MAX_BOARD_SIZE):
        raise ValueError(f"Unsupported board size: {size}")

    parts = fen.split()
    if len(parts) != 6:
        raise FormatError("Invalid FEN (need exactly 6 fields)", fen)

    placement, side_part, castling_part, ep_part, half_part, full_part = parts

    board = _parse_placement(placement, size, fen)

    # Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise FormatError("Invalid FEN side-to-move field", side_part)

    # Castling
    castling = CastlingRights.NONE
    if castling_part != "-":
        seen: set[str] = set()
        for ch in castling_part:
            right = _CASTLING_RIGHTS.get(ch)
            if right is None or ch in seen:
                raise FormatError("Invalid FEN castling field", castling_part)
            seen.add(ch)
            castling |= right

    # En passant
    ep: Square | None = None
    if ep_part != "-":
        try:
            ep = parse_square(ep_part, size)
        except ValueError:
            raise FormatError("Invalid FEN en-passant square", ep_part) from None
        if rank_of(ep) not in (2, size - 3):
            raise FormatError(
                "Invalid FEN en-passant square (must be on the third or sixth rank)",
                ep_part,
            )

    halfmove = _parse_count(half_part, "halfmove clock")
    fullmove = _parse_count(full_part, "fullmove number")
    if fullmove < 1:
        raise FormatError("Invalid FEN fullmove number (must be >= 1)", full_part)

    return Position(board, side, castling, ep, halfmove, fullmove)


def _parse_placement(placement: str, size: int, fen: str) -> Board:
    ranks = placement.split("/")
    if len(ranks) != size:
        raise FormatError(f"Invalid FEN board (must contain {size} ranks)", fen)

    board = Board(size)
    for rank_idx, rank_text in enumerate(ranks):
        rank = size - 1 - rank_idx
        file = 0
        run = ""
        for ch in rank_text + "/":
            if ch.isascii() and ch.isdigit():
                if not run and ch == "0":
                    raise FormatError("Invalid FEN empty-square run", fen)
                run += ch
                continue
            if run:
                file += int(run)
                run = ""
            if ch == "/":
                break
            if not Piece.is_piece_char(ch):
                raise FormatError(f"Invalid FEN piece character {ch!r}", fen)
            if file < size:
                board[make_square(file, rank)] = Piece.from_char(ch)
            file += 1
        if file != size:
            raise FormatError(f"Invalid FEN rank width (must be {size})", fen)
    return board


def _parse_count(text: str, label: str) -> int:
    if not (text.isascii() and text.isdigit()):
        raise FormatError(f"Invalid FEN {label}", text)
    return int(text)


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    size = pos.board.size

    # 1. Board
    rows: list[str] = []
    for rank in range(size - 1, -1, -1):
        empty = 0
        row = ""
        for file in range(size):
            piece = pos.board[make_square(file, rank)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    board_str = "/".join(rows)

    # 2. Side
    side_str = "w" if pos.side_to_move == Color.WHITE else "b"

    # 3. Castling
    castling_str = "".join(ch for ch, right in _CASTLING_CHARS if pos.castling & right)
    if not castling_str:
        castling_str = "-"

    # 4. En passant
    ep_str = square_name(pos.en_passant) if pos.en_passant is not None else "-"

    return (
        f"{board_str} {side_str} {castling_str} {ep_str} "
        f"{pos.halfmove_clock} {pos.fullmove_number}"
    )
