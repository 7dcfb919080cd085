"""Perft — exhaustive move-tree node counting for move-generator verification.

Counts follow the Chess Programming Wiki tables: every statistic is tallied
on the moves of the last ply, and captures include en-passant captures.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from multiprocessing import Pool

from gambit.core.enums import MoveFlag
from gambit.core.move import Move
from gambit.core.move_generator import MoveGenerator
from gambit.core.notation import position_from_fen, position_to_fen
from gambit.core.position import Position, castle_layout

logger = logging.getLogger(__name__)

_CASTLES = (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)


@dataclass(slots=True)
class PerftResult:
    """Leaf statistics of a perft run.

    ``discovery_checks`` and ``double_checks`` stay zero unless the run was
    made with ``track_discovery=True``.
    """

    nodes: int = 0
    captures: int = 0
    en_passant: int = 0
    castles: int = 0
    promotions: int = 0
    checks: int = 0
    discovery_checks: int = 0
    double_checks: int = 0
    checkmates: int = 0

    def __iadd__(self, other: PerftResult) -> PerftResult:
        for f in fields(self):
            setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))
        return self


def perft(
    position: Position,
    depth: int,
    *,
    track_discovery: bool = False,
    workers: int | None = None,
) -> PerftResult:
    """Walk the legal move tree of *position* to *depth* plies.

    With ``workers > 1`` the root moves are split across a process pool;
    each worker rebuilds the position from FEN.  *position* is left
    unchanged either way.
    """
    if depth < 0:
        raise ValueError("Perft depth must be >= 0")
    if depth == 0:
        return PerftResult(nodes=1)

    if workers is not None and workers > 1:
        return _perft_parallel(position, depth, track_discovery, workers)

    result = PerftResult()
    _perft(position.copy(), depth, track_discovery, result)
    return result


def divide(position: Position, depth: int) -> dict[str, int]:
    """Node count below each root move, keyed by its UCI text."""
    if depth < 1:
        raise ValueError("Divide depth must be >= 1")

    pos = position.copy()
    counts: dict[str, int] = {}
    for move in MoveGenerator(pos).generate_legal_moves():
        pos.make_move(move)
        counts[move.uci] = perft(pos, depth - 1).nodes
        pos.unmake_move(move)
    return counts


# ── Internal ────────────────────────────────────────────────────────────────


def _perft(pos: Position, depth: int, track: bool, result: PerftResult) -> None:
    moves = MoveGenerator(pos).generate_legal_moves()
    if depth == 1:
        for move in moves:
            _tally_leaf(pos, move, track, result)
        return

    for move in moves:
        pos.make_move(move)
        _perft(pos, depth - 1, track, result)
        pos.unmake_move(move)


def _tally_leaf(pos: Position, move: Move, track: bool, result: PerftResult) -> None:
    result.nodes += 1

    flag = pos.classify(move)
    if flag == MoveFlag.EN_PASSANT:
        result.captures += 1
        result.en_passant += 1
    elif pos.board[move.to_sq] is not None:
        result.captures += 1
    if flag in _CASTLES:
        result.castles += 1
    elif flag == MoveFlag.PROMOTION:
        result.promotions += 1

    mover = pos.side_to_move
    checkers_moved = {move.to_sq}
    if flag in _CASTLES:
        layout = castle_layout(pos.size, mover, flag == MoveFlag.CASTLE_KINGSIDE)
        assert layout is not None
        checkers_moved.add(layout.rook_to)

    pos.make_move(move)
    gen = MoveGenerator(pos)
    defender = pos.side_to_move
    if gen.is_in_check(defender):
        result.checks += 1
        if track:
            king_sq = pos.board.king_square(defender)
            attackers = gen.attackers_of(king_sq, mover)
            if len(attackers) > 1:
                result.double_checks += 1
            elif attackers[0] not in checkers_moved:
                result.discovery_checks += 1
        if not gen.has_legal_move():
            result.checkmates += 1
    pos.unmake_move(move)


def _perft_parallel(
    position: Position, depth: int, track: bool, workers: int
) -> PerftResult:
    fen = position_to_fen(position)
    size = position.size
    jobs = [
        (fen, size, move.uci, depth, track)
        for move in MoveGenerator(position).generate_legal_moves()
    ]
    logger.debug("Perft depth %d: %d root moves on %d workers", depth, len(jobs), workers)

    result = PerftResult()
    with Pool(processes=workers) as pool:
        for partial in pool.map(_perft_root_move, jobs):
            result += partial
    return result


def _perft_root_move(job: tuple[str, int, str, int, bool]) -> PerftResult:
    fen, size, uci, depth, track = job
    pos = position_from_fen(fen, size)
    move = Move.from_uci(uci, size)

    result = PerftResult()
    if depth == 1:
        _tally_leaf(pos, move, track, result)
    else:
        pos.make_move(move)
        _perft(pos, depth - 1, track, result)
    return result
