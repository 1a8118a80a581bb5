# ─── Standard library imports ───
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

# ─── Project imports ───
from .logger import get_logger
from .telemetry import tlog
from .strategies import Strategy
from .utils import Timer


logger = get_logger("executor")


@dataclass(frozen=True)
class StrategyOutcome:
    name: str
    success: bool
    elapsed_s: float


@dataclass(frozen=True)
class ExecutionResult:
    success: bool
    winner: Optional[Strategy]
    outcomes: tuple[StrategyOutcome, ...]

    @property
    def winner_name(self) -> Optional[str]:
        return self.winner.name if self.winner else None


def execute_plan(plan: Sequence[Strategy]) -> ExecutionResult:
    """
    Run the planned strategies in order until one reports success.

    Invariants:
      - strategies run in plan order, each at most once
      - nothing after the first success is invoked
      - a strategy that raises counts as a failed strategy
    """
    timer = Timer(logger)
    timer.start_cycle()
    outcomes: list[StrategyOutcome] = []
    total = len(plan)

    for step, strategy in enumerate(plan, start=1):
        tlog(logger, "🔧", "RECOVERY", "ATTEMPT", primary=strategy.name,
             meta=f"step={step}/{total} tier={strategy.tier}")

        try:
            success = strategy.attempt()
        except Exception as e:
            logger.exception(f"Strategy {strategy.name} raised: {e}")
            success = False

        elapsed = timer.lap(strategy.name)
        outcomes.append(StrategyOutcome(strategy.name, success, elapsed))

        if success:
            tlog(logger, "🟢", "RECOVERY", "RECOVERED", primary=strategy.name,
                 meta=f"step={step}/{total}")
            timer.end_cycle()
            return ExecutionResult(True, strategy, tuple(outcomes))

        tlog(logger, "🔴", "RECOVERY", "FAILED", primary=strategy.name,
             meta=f"step={step}/{total}", level=logging.WARNING)

    timer.end_cycle()
    return ExecutionResult(False, None, tuple(outcomes))
