"""SAN (Standard Algebraic Notation) conversion and parsing."""

from __future__ import annotations

import re

from gambit.core.enums import MoveFlag, PieceType
from gambit.core.move import Move
from gambit.core.move_generator import MoveGenerator
from gambit.core.position import Position
from gambit.core.types import file_of, parse_square, rank_of, square_name

_SAN_PIECE: dict[PieceType, str] = {
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_SAN_PIECE_REV: dict[str, PieceType] = {v: k for k, v in _SAN_PIECE.items()}

_SAN_RE = re.compile(
    r"^(?P<piece>[NBRQK])?"
    r"(?P<from_file>[a-p])?(?P<from_rank>[1-9][0-9]?)?"
    r"x?"
    r"(?P<to>[a-p][1-9][0-9]?)"
    r"(?:=(?P<promo>[NBRQ]))?$"
)


def move_to_san(position: Position, move: Move) -> str:
    """Convert a legal *move* to SAN given the *position* before the move."""
    board = position.board
    piece = board[move.from_sq]
    assert piece is not None
    flag = position.classify(move)

    if flag == MoveFlag.CASTLE_KINGSIDE:
        san = "O-O"
    elif flag == MoveFlag.CASTLE_QUEENSIDE:
        san = "O-O-O"
    else:
        san = ""
        is_capture = board[move.to_sq] is not None or flag == MoveFlag.EN_PASSANT

        if piece.piece_type == PieceType.PAWN:
            if is_capture:
                san += square_name(move.from_sq)[0]
        else:
            san += _SAN_PIECE[piece.piece_type]

            # Disambiguation
            legal = MoveGenerator(position).generate_legal_moves()
            ambiguous = [
                m
                for m in legal
                if m.to_sq == move.to_sq
                and m.from_sq != move.from_sq
                and board[m.from_sq] == piece
            ]
            if ambiguous:
                same_file = any(
                    file_of(m.from_sq) == file_of(move.from_sq) for m in ambiguous
                )
                same_rank = any(
                    rank_of(m.from_sq) == rank_of(move.from_sq) for m in ambiguous
                )
                if not same_file:
                    san += square_name(move.from_sq)[0]
                elif not same_rank:
                    san += str(rank_of(move.from_sq) + 1)
                else:
                    san += square_name(move.from_sq)

        if is_capture:
            san += "x"

        san += square_name(move.to_sq)

        if flag == MoveFlag.PROMOTION and move.promotion is not None:
            san += "=" + _SAN_PIECE[move.promotion]

    # Check / checkmate suffix
    position.make_move(move)
    gen_after = MoveGenerator(position)
    if gen_after.is_in_check(position.side_to_move):
        san += "+" if gen_after.has_legal_move() else "#"
    position.unmake_move(move)

    return san


def parse_san(position: Position, san: str) -> Move:
    """Parse a SAN string into a :class:`Move` given the current *position*."""
    legal = MoveGenerator(position).generate_legal_moves()
    clean = san.rstrip("+#!?")

    if clean in ("O-O", "0-0", "O-O-O", "0-0-0"):
        wanted = (
            MoveFlag.CASTLE_KINGSIDE
            if clean in ("O-O", "0-0")
            else MoveFlag.CASTLE_QUEENSIDE
        )
        for m in legal:
            if position.classify(m) == wanted:
                return m
        raise ValueError(f"Illegal move: {san}")

    match = _SAN_RE.match(clean)
    if match is None:
        raise ValueError(f"Invalid SAN: {san!r}")

    piece_type = _SAN_PIECE_REV.get(match["piece"] or "", PieceType.PAWN)
    to_sq = parse_square(match["to"], position.size)
    promotion = _SAN_PIECE_REV[match["promo"]] if match["promo"] else None
    from_file = ord(match["from_file"]) - ord("a") if match["from_file"] else None
    from_rank = int(match["from_rank"]) - 1 if match["from_rank"] else None

    candidates: list[Move] = []
    for m in legal:
        p = position.board[m.from_sq]
        if p is None or p.piece_type != piece_type:
            continue
        if m.to_sq != to_sq or m.promotion != promotion:
            continue
        if from_file is not None and file_of(m.from_sq) != from_file:
            continue
        if from_rank is not None and rank_of(m.from_sq) != from_rank:
            continue
        candidates.append(m)

    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise ValueError(f"Illegal move: {san}")
    raise ValueError(f"Ambiguous move: {san} -> {candidates}")
