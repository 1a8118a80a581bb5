# --- Standard library imports ---
from typing import Sequence

# --- Project imports ---
from .recovery_policy import Thresholds
from .strategies import Strategy, Tier


def select_tier(failure_count: int, thresholds: Thresholds) -> Tier:
    if failure_count < thresholds.max_consecutive_failures:
        return Tier.STANDARD
    return Tier.AGGRESSIVE


def plan_recovery(
    failure_count: int,
    thresholds: Thresholds,
    catalog: Sequence[Strategy],
) -> tuple[Strategy, ...]:
    """
    Select the strategies to attempt this run, in catalog order.

    Below `max_consecutive_failures` only the standard tier is used;
    at or above it the whole catalog is. Pure: no I/O, no state.
    """
    if select_tier(failure_count, thresholds) is Tier.AGGRESSIVE:
        return tuple(catalog)
    return tuple(s for s in catalog if s.tier is Tier.STANDARD)
