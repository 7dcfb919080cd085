"""Outbound adapter to an external UCI engine (Stockfish or compatible).

The advisor is best-effort.  A missing binary, an engine crash, a protocol
error or a cancelled query is logged and reported as ``None``.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Sequence
from dataclasses import dataclass

import chess
import chess.engine

from gambit.engine.search import CancelCheck, never_cancelled

logger = logging.getLogger(__name__)

_ENGINE_CANDIDATES: tuple[str, ...] = (
    "stockfish",
    "/usr/local/bin/stockfish",
    "/usr/bin/stockfish",
    "/usr/games/stockfish",
    "/opt/homebrew/bin/stockfish",
)


@dataclass(slots=True, frozen=True)
class AdvisorSettings:
    """How to run the external engine.

    Args:
        engine_path: Path to the UCI binary (None = auto-detect).
        think_time_ms: Time budget for an unrestricted best-move query.
        candidate_time_ms: Time budget when choosing from a move list.
        threads: Value for the engine's ``Threads`` option.
    """

    engine_path: str | None = None
    think_time_ms: int = 100
    candidate_time_ms: int = 100
    threads: int = 1


def find_engine() -> str | None:
    """Auto-detect a Stockfish binary on ``PATH`` or in the usual places."""
    for candidate in _ENGINE_CANDIDATES:
        path = shutil.which(candidate)
        if path:
            return path
    return None


class UciAdvisor:
    """Asks a UCI engine for the best move of a FEN position.

    A fresh engine process is started per query, so one advisor may be
    shared between threads.
    """

    __slots__ = ("_settings",)

    def __init__(self, settings: AdvisorSettings | None = None) -> None:
        self._settings = settings or AdvisorSettings()

    @property
    def settings(self) -> AdvisorSettings:
        return self._settings

    def best_move(
        self,
        fen: str,
        think_time_ms: int | None = None,
        is_cancelled: CancelCheck | None = None,
    ) -> str | None:
        """Best move for *fen* in UCI notation, or None."""
        if think_time_ms is None:
            think_time_ms = self._settings.think_time_ms
        return self._query(fen, None, think_time_ms, is_cancelled)

    def best_move_from_list(
        self,
        fen: str,
        moves: Sequence[str],
        think_time_ms: int | None = None,
        is_cancelled: CancelCheck | None = None,
    ) -> str | None:
        """Best of the UCI *moves* for *fen*, or None.

        The engine only searches the listed root moves.
        """
        if not moves:
            return None
        if think_time_ms is None:
            think_time_ms = self._settings.candidate_time_ms
        return self._query(fen, list(moves), think_time_ms, is_cancelled)

    # ── Internal ─────────────────────────────────────────────────────────

    def _engine_path(self) -> str | None:
        return self._settings.engine_path or find_engine()

    def _query(
        self,
        fen: str,
        root_moves: list[str] | None,
        think_time_ms: int,
        is_cancelled: CancelCheck | None,
    ) -> str | None:
        cancelled = is_cancelled or never_cancelled
        path = self._engine_path()
        if path is None:
            logger.warning("No UCI engine found; install Stockfish or set engine_path")
            return None

        try:
            board = chess.Board(fen)
            root = (
                [chess.Move.from_uci(m) for m in root_moves]
                if root_moves is not None
                else None
            )
            limit = chess.engine.Limit(time=max(think_time_ms, 1) / 1000.0)

            with chess.engine.SimpleEngine.popen_uci(path) as engine:
                if "Threads" in engine.options:
                    engine.configure({"Threads": self._settings.threads})
                with engine.analysis(board, limit, root_moves=root) as analysis:
                    for _info in analysis:
                        if cancelled():
                            analysis.stop()
                            break
                    best = analysis.wait()
        except chess.engine.EngineTerminatedError as exc:
            logger.warning("UCI engine %s terminated unexpectedly: %s", path, exc)
            return None
        except (chess.engine.EngineError, OSError, TimeoutError, ValueError) as exc:
            logger.warning("UCI engine %s query failed: %s", path, exc)
            return None

        if cancelled():
            logger.debug("UCI query for %s cancelled", fen)
            return None
        if best.move is None:
            logger.debug("UCI engine returned no move for %s", fen)
            return None
        return best.move.uci()
