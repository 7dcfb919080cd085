"""Engine package: evaluation, strategies, perft, advisor and Qt worker bridge."""

from gambit.engine.advisor import AdvisorSettings, UciAdvisor
from gambit.engine.evaluate import evaluate
from gambit.engine.perft import PerftResult, divide, perft
from gambit.engine.qt_bridge import MoveWorker
from gambit.engine.search import (
    CancelCheck,
    SearchLimits,
    Strategy,
    StrategyKind,
    StrategySpec,
)
from gambit.engine.strategies import (
    AdvisorMode,
    AdvisorStrategy,
    CapturePreferringStrategy,
    MinimaxStrategy,
    RandomStrategy,
    create_strategy,
)

__all__ = [
    "AdvisorMode",
    "AdvisorSettings",
    "AdvisorStrategy",
    "CancelCheck",
    "CapturePreferringStrategy",
    "MinimaxStrategy",
    "MoveWorker",
    "PerftResult",
    "RandomStrategy",
    "SearchLimits",
    "Strategy",
    "StrategyKind",
    "StrategySpec",
    "UciAdvisor",
    "create_strategy",
    "divide",
    "evaluate",
    "perft",
]
