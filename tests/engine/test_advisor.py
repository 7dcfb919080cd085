"""Tests for the UCI advisor with the engine process mocked out."""

from __future__ import annotations

from unittest.mock import MagicMock

import chess
import chess.engine
import pytest

from gambit.core.notation import STARTING_FEN
from gambit.engine import advisor as advisor_module
from gambit.engine.advisor import AdvisorSettings, UciAdvisor, find_engine

ENGINE_PATH = "/opt/engines/stockfish"


def _fake_engine(monkeypatch, answer: str | None = "e2e4", options=None):
    popen = MagicMock()
    engine = popen.return_value.__enter__.return_value
    engine.options = options or {}
    analysis = engine.analysis.return_value.__enter__.return_value
    analysis.__iter__.return_value = iter([{"depth": 1}, {"depth": 2}])
    analysis.wait.return_value.move = (
        chess.Move.from_uci(answer) if answer is not None else None
    )
    monkeypatch.setattr(chess.engine.SimpleEngine, "popen_uci", popen)
    return popen, engine, analysis


def _advisor(**kwargs) -> UciAdvisor:
    return UciAdvisor(AdvisorSettings(engine_path=ENGINE_PATH, **kwargs))


class TestBestMove:
    def test_returns_engine_move(self, monkeypatch) -> None:
        popen, engine, _ = _fake_engine(monkeypatch)
        assert _advisor().best_move(STARTING_FEN) == "e2e4"
        popen.assert_called_once_with(ENGINE_PATH)
        board, limit = engine.analysis.call_args.args
        assert board.fen() == STARTING_FEN
        assert limit == chess.engine.Limit(time=0.1)
        assert engine.analysis.call_args.kwargs["root_moves"] is None

    def test_think_time_override(self, monkeypatch) -> None:
        _, engine, _ = _fake_engine(monkeypatch)
        _advisor().best_move(STARTING_FEN, think_time_ms=250)
        assert engine.analysis.call_args.args[1] == chess.engine.Limit(time=0.25)

    def test_threads_option(self, monkeypatch) -> None:
        _, engine, _ = _fake_engine(monkeypatch, options={"Threads": object()})
        _advisor(threads=4).best_move(STARTING_FEN)
        engine.configure.assert_called_once_with({"Threads": 4})

    def test_no_move_from_engine(self, monkeypatch) -> None:
        _fake_engine(monkeypatch, answer=None)
        assert _advisor().best_move(STARTING_FEN) is None

    def test_cancelled_query(self, monkeypatch) -> None:
        _, _, analysis = _fake_engine(monkeypatch)
        result = _advisor().best_move(STARTING_FEN, is_cancelled=lambda: True)
        assert result is None
        analysis.stop.assert_called_once()

    @pytest.mark.parametrize(
        "error",
        [
            FileNotFoundError("missing"),
            chess.engine.EngineTerminatedError("crashed"),
            chess.engine.EngineError("protocol"),
        ],
    )
    def test_engine_failures(self, monkeypatch, error: Exception) -> None:
        popen, _, _ = _fake_engine(monkeypatch)
        popen.side_effect = error
        assert _advisor().best_move(STARTING_FEN) is None

    def test_non_standard_board(self, monkeypatch) -> None:
        popen, _, _ = _fake_engine(monkeypatch)
        fen = "rnbqkbnrr/ppppppppp/9/9/9/9/9/PPPPPPPPP/RNBQKBNRR w - - 0 1"
        assert _advisor().best_move(fen) is None
        popen.assert_not_called()


class TestBestMoveFromList:
    def test_restricts_root_moves(self, monkeypatch) -> None:
        _, engine, _ = _fake_engine(monkeypatch, answer="d2d4")
        result = _advisor(candidate_time_ms=50).best_move_from_list(
            STARTING_FEN, ["e2e4", "d2d4"]
        )
        assert result == "d2d4"
        assert engine.analysis.call_args.kwargs["root_moves"] == [
            chess.Move.from_uci("e2e4"),
            chess.Move.from_uci("d2d4"),
        ]
        assert engine.analysis.call_args.args[1] == chess.engine.Limit(time=0.05)

    def test_empty_list(self, monkeypatch) -> None:
        popen, _, _ = _fake_engine(monkeypatch)
        assert _advisor().best_move_from_list(STARTING_FEN, []) is None
        popen.assert_not_called()

    def test_malformed_move(self, monkeypatch) -> None:
        _fake_engine(monkeypatch)
        assert _advisor().best_move_from_list(STARTING_FEN, ["nonsense"]) is None


class TestEngineDiscovery:
    def test_no_engine_installed(self, monkeypatch) -> None:
        popen, _, _ = _fake_engine(monkeypatch)
        monkeypatch.setattr(advisor_module.shutil, "which", lambda _name: None)
        assert find_engine() is None
        assert UciAdvisor().best_move(STARTING_FEN) is None
        popen.assert_not_called()

    def test_found_on_path(self, monkeypatch) -> None:
        monkeypatch.setattr(
            advisor_module.shutil,
            "which",
            lambda name: "/usr/bin/stockfish" if name == "stockfish" else None,
        )
        assert find_engine() == "/usr/bin/stockfish"

    def test_default_settings(self) -> None:
        settings = UciAdvisor().settings
        assert settings.engine_path is None
        assert settings.think_time_ms == 100
        assert settings.threads == 1
