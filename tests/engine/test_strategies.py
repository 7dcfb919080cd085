"""Tests for move-choice strategies."""

from __future__ import annotations

import logging
import random

import pytest

from gambit.core.enums import GameStatus
from gambit.core.move import Move
from gambit.core.notation import STARTING_FEN
from gambit.engine.advisor import AdvisorSettings
from gambit.engine.search import SearchLimits, StrategyKind, StrategySpec
from gambit.engine.strategies import (
    AdvisorMode,
    AdvisorStrategy,
    CapturePreferringStrategy,
    MinimaxStrategy,
    RandomStrategy,
    create_strategy,
)
from gambit.game.controller import GameController

ONE_CAPTURE = "rnbqkbnr/ppp1pppp/8/3p4/4P3/8/PPPP1PPP/RNBQKBNR w KQkq - 0 1"
STALEMATE = "7k/8/5KQ1/8/8/8/8/8 b - - 0 1"
CHECKMATED = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


class _FakeAdvisor:
    def __init__(self, answer: str | None) -> None:
        self.answer = answer
        self.calls: list[tuple[str, str, list[str] | None]] = []

    def best_move(self, fen, think_time_ms=None, is_cancelled=None):
        self.calls.append(("best_move", fen, None))
        return self.answer

    def best_move_from_list(self, fen, moves, think_time_ms=None, is_cancelled=None):
        self.calls.append(("best_move_from_list", fen, list(moves)))
        return self.answer


class TestRandomStrategy:
    def test_same_seed_same_move(self) -> None:
        ctrl = GameController()
        first = RandomStrategy(random.Random(3)).choose_move(ctrl)
        second = RandomStrategy(random.Random(3)).choose_move(ctrl)
        assert first == second
        assert first in ctrl.all_legal_moves()

    @pytest.mark.parametrize("fen", [STALEMATE, CHECKMATED])
    def test_none_without_moves(self, fen: str) -> None:
        assert RandomStrategy().choose_move(GameController(fen)) is None


class TestCapturePreferringStrategy:
    @pytest.mark.parametrize("seed", range(5))
    def test_prefers_capture(self, seed: int) -> None:
        ctrl = GameController(ONE_CAPTURE)
        move = CapturePreferringStrategy(random.Random(seed)).choose_move(ctrl)
        assert move == Move.from_uci("e4d5")

    def test_falls_back_to_quiet_moves(self) -> None:
        ctrl = GameController()
        move = CapturePreferringStrategy(random.Random(1)).choose_move(ctrl)
        assert move in ctrl.all_legal_moves()

    def test_captures_en_passant(self) -> None:
        ctrl = GameController(
            "rnbqkbnr/ppp1p1pp/8/3pPp2/8/8/PPPP1PPP/RNBQKBNR w KQkq f6 0 1"
        )
        move = CapturePreferringStrategy(random.Random(0)).choose_move(ctrl)
        assert move == Move.from_uci("e5f6")

    @pytest.mark.parametrize("fen", [STALEMATE, CHECKMATED])
    def test_none_without_moves(self, fen: str) -> None:
        assert CapturePreferringStrategy().choose_move(GameController(fen)) is None


class TestMinimaxStrategy:
    def test_depth(self) -> None:
        assert MinimaxStrategy().depth == 2
        assert MinimaxStrategy(3).depth == 3

    def test_depth_below_one_raises(self) -> None:
        with pytest.raises(ValueError):
            MinimaxStrategy(0)
        with pytest.raises(ValueError):
            SearchLimits(max_depth=0)

    def test_white_takes_free_queen(self) -> None:
        ctrl = GameController("4k3/8/8/3q4/4P3/8/8/4K3 w - - 0 1")
        assert MinimaxStrategy(1).choose_move(ctrl) == Move.from_uci("e4d5")

    def test_black_takes_free_queen(self) -> None:
        ctrl = GameController("4k3/8/8/4p3/3Q4/8/8/4K3 b - - 0 1")
        assert MinimaxStrategy(1).choose_move(ctrl) == Move.from_uci("e5d4")

    def test_black_mate_in_one_at_depth_two(self) -> None:
        ctrl = GameController(
            "4r2k/1p3rbp/2p1N1p1/p3n3/P2NB1nq/1P6/4R1P1/B1Q2RK1 b - - 4 32"
        )
        move = MinimaxStrategy(2).choose_move(ctrl)
        assert move == Move.from_uci("h4h2")
        assert ctrl.apply_move(move)
        assert ctrl.status() == GameStatus.CHECKMATE

    def test_white_back_rank_mate_at_depth_two(self) -> None:
        ctrl = GameController("6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1")
        assert MinimaxStrategy(2).choose_move(ctrl) == Move.from_uci("a1a8")

    def test_depth_one_scores_leaves_statically(self) -> None:
        # Ra8 mates, but at depth 1 the reply is never searched and winning
        # the queen evaluates higher.
        ctrl = GameController("6k1/5ppp/8/8/1P6/1q6/2P5/R5K1 w - - 0 1")
        assert MinimaxStrategy(1).choose_move(ctrl) == Move.from_uci("c2b3")

    def test_depth_two_finds_mate_over_material(self) -> None:
        ctrl = GameController("6k1/5ppp/8/8/1P6/1q6/2P5/R5K1 w - - 0 1")
        assert MinimaxStrategy(2).choose_move(ctrl) == Move.from_uci("a1a8")

    @pytest.mark.parametrize("fen", [STALEMATE, CHECKMATED])
    def test_none_without_moves(self, fen: str) -> None:
        assert MinimaxStrategy().choose_move(GameController(fen)) is None

    def test_cancelled_search_returns_first_move(self) -> None:
        ctrl = GameController()
        move = MinimaxStrategy(3).choose_move(ctrl, is_cancelled=lambda: True)
        assert move == ctrl.all_legal_moves()[0]

    def test_does_not_touch_controller(self) -> None:
        ctrl = GameController(ONE_CAPTURE)
        MinimaxStrategy(2).choose_move(ctrl)
        assert ctrl.fen == ONE_CAPTURE
        assert ctrl.move_history == []

    def test_search_is_silent(self, caplog) -> None:
        ctrl = GameController("6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1")
        finished = []
        ctrl.events.on_game_over.append(finished.append)
        with caplog.at_level(logging.INFO, logger="gambit"):
            MinimaxStrategy(2).choose_move(ctrl)
        assert finished == []
        assert caplog.records == []


class TestAdvisorStrategy:
    def test_expert_asks_unrestricted(self) -> None:
        advisor = _FakeAdvisor("e2e4")
        strategy = AdvisorStrategy(advisor, AdvisorMode.EXPERT)
        assert strategy.choose_move(GameController()) == Move.from_uci("e2e4")
        assert advisor.calls == [("best_move", STARTING_FEN, None)]

    def test_berserk_single_capture_skips_advisor(self) -> None:
        advisor = _FakeAdvisor(None)
        strategy = AdvisorStrategy(advisor, AdvisorMode.BERSERK)
        move = strategy.choose_move(GameController(ONE_CAPTURE))
        assert move == Move.from_uci("e4d5")
        assert advisor.calls == []

    def test_berserk_without_captures_falls_back(self) -> None:
        advisor = _FakeAdvisor("g1f3")
        strategy = AdvisorStrategy(advisor, AdvisorMode.BERSERK)
        assert strategy.choose_move(GameController()) == Move.from_uci("g1f3")
        assert advisor.calls[0][0] == "best_move"

    def test_pacifist_restricts_to_quiet_moves(self) -> None:
        advisor = _FakeAdvisor("g1f3")
        strategy = AdvisorStrategy(advisor, AdvisorMode.PACIFIST)
        assert strategy.choose_move(GameController(ONE_CAPTURE)) == Move.from_uci(
            "g1f3"
        )
        name, _fen, moves = advisor.calls[0]
        assert name == "best_move_from_list"
        assert moves is not None
        assert "e4d5" not in moves
        assert "e4e5" in moves

    @pytest.mark.parametrize("answer", [None, "e2e5", "zz"])
    def test_unusable_answer(self, answer: str | None) -> None:
        strategy = AdvisorStrategy(_FakeAdvisor(answer))
        assert strategy.choose_move(GameController()) is None

    def test_none_without_moves(self) -> None:
        advisor = _FakeAdvisor("e2e4")
        strategy = AdvisorStrategy(advisor)
        assert strategy.choose_move(GameController(CHECKMATED)) is None
        assert advisor.calls == []


class TestCreateStrategy:
    def test_random(self) -> None:
        spec = StrategySpec(StrategyKind.RANDOM, seed=5)
        ctrl = GameController()
        first = create_strategy(spec).choose_move(ctrl)
        second = create_strategy(spec).choose_move(ctrl)
        assert isinstance(create_strategy(spec), RandomStrategy)
        assert first == second

    def test_capture(self) -> None:
        spec = StrategySpec(StrategyKind.CAPTURE)
        assert isinstance(create_strategy(spec), CapturePreferringStrategy)

    def test_minimax_depth(self) -> None:
        spec = StrategySpec(StrategyKind.MINIMAX, limits=SearchLimits(max_depth=3))
        strategy = create_strategy(spec)
        assert isinstance(strategy, MinimaxStrategy)
        assert strategy.depth == 3

    @pytest.mark.parametrize(
        ("kind", "mode"),
        [
            (StrategyKind.EXPERT, AdvisorMode.EXPERT),
            (StrategyKind.BERSERK, AdvisorMode.BERSERK),
            (StrategyKind.PACIFIST, AdvisorMode.PACIFIST),
        ],
    )
    def test_advisor_kinds(self, kind: StrategyKind, mode: AdvisorMode) -> None:
        spec = StrategySpec(kind, advisor=AdvisorSettings(engine_path="/bin/false"))
        strategy = create_strategy(spec)
        assert isinstance(strategy, AdvisorStrategy)
        assert strategy.mode == mode
