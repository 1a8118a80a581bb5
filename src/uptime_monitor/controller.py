# --- Standard library imports ---
import logging
from enum import Enum, auto
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

# --- Project imports ---
from .logger import get_logger
from .planner import plan_recovery, select_tier
from .executor import execute_plan
from .probe import ConnectivityProbe, LinkState, ReachabilityCheck
from .reboot import RebootCoordinator, RebootResult, boot_time
from .recovery_policy import Thresholds
from .state_store import FailureStateStore, RebootMarker
from .strategies import Strategy


EXIT_OK = 0
EXIT_ESCALATED = 1
EXIT_REBOOT_PENDING = 2

# Slack on top of the shutdown delay before a pending order is presumed lost
PENDING_REBOOT_GRACE = timedelta(minutes=5)


class HealthState(Enum):
    HEALTHY = auto()
    INTERFACE_DOWN = auto()
    NO_INTERNET = auto()
    RECOVERING = auto()
    RECOVERED = auto()
    ESCALATED = auto()
    REBOOT_PENDING = auto()

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


@dataclass(frozen=True)
class RunOutcome:
    """Terminal state of one invocation."""
    state: HealthState
    failure_count: int
    winner: Optional[str] = None
    reboot: Optional[RebootResult] = None

    @property
    def exit_code(self) -> int:
        if self.state in (HealthState.HEALTHY, HealthState.RECOVERED):
            return EXIT_OK
        if self.state is HealthState.REBOOT_PENDING:
            return EXIT_REBOOT_PENDING
        return EXIT_ESCALATED


class EscalationController:
    """
    Top-level recovery state machine, one traversal per invocation.

    Healthy → reset counter. Unhealthy → plan from the pre-increment
    counter, execute; success resets, failure increments and may
    order a reboot once the counter reaches the reboot threshold.

    The persisted counter is the only memory between runs.
    """

    def __init__(
        self,
        probe: ConnectivityProbe,
        catalog: Sequence[Strategy],
        thresholds: Thresholds,
        store: FailureStateStore,
        marker: RebootMarker,
        reboot: RebootCoordinator,
        reachability: ReachabilityCheck,
        booted_at: Callable[[], Optional[datetime]] = boot_time,
    ):
        self.probe = probe
        self.catalog = tuple(catalog)
        self.thresholds = thresholds
        self.store = store
        self.marker = marker
        self.reboot = reboot
        self.reachability = reachability
        self.booted_at = booted_at
        self.logger = get_logger("controller")

    # ──────────────────────────────────────────────────────────────
    # Entry: reboot marker
    # ──────────────────────────────────────────────────────────────

    def _consume_marker(self) -> Optional[datetime]:
        """
        Consume the reboot marker.

        Returns the order time when a reboot ordered during *this* boot
        session is still expected to happen, else None.
        """
        ordered_at = self.marker.consume()
        if ordered_at is None:
            return None

        booted = self.booted_at()
        if booted is None or ordered_at < booted:
            self.logger.info(f"📋 Resumed after forced reboot (ordered {ordered_at})")
            return None

        deadline = ordered_at + timedelta(minutes=self.reboot.delay_minutes) + PENDING_REBOOT_GRACE
        if datetime.now() > deadline:
            self.logger.warning(
                f"Reboot ordered at {ordered_at} never happened; order presumed lost"
            )
            return None

        self.logger.warning(f"Reboot ordered at {ordered_at} is still pending")
        return ordered_at

    # ──────────────────────────────────────────────────────────────
    # Health classification
    # ──────────────────────────────────────────────────────────────

    def classify(self) -> HealthState:
        iface = self.probe.interface
        link = self.probe.link_state()

        if link is not LinkState.OK:
            messages = {
                LinkState.MISSING: f"{iface} interface does not exist",
                LinkState.DOWN: f"{iface} interface exists but is not UP",
                LinkState.NO_ADDRESS: f"{iface} interface is UP but has no IP address",
            }
            self.logger.error(messages[link])
            if self.logger.isEnabledFor(logging.DEBUG):
                self.logger.debug(f"📊 Interface status:\n{self.probe.status_dump()}")
            return HealthState.INTERFACE_DOWN

        self.logger.info(f"{iface} interface is UP with IP: {self.probe.interface_address()}")

        check = self.reachability
        if not self.probe.internet_reachable(
            check.targets, check.required_successes, check.per_target_timeout
        ):
            self.logger.error("Internet connectivity failed")
            return HealthState.NO_INTERNET

        self.logger.success("Internet connectivity confirmed")
        return HealthState.HEALTHY

    # ──────────────────────────────────────────────────────────────
    # One traversal
    # ──────────────────────────────────────────────────────────────

    def run(self) -> RunOutcome:
        pending_since = self._consume_marker()
        try:
            return self._traverse(pending_since)
        finally:
            # the shutdown order is still in flight whatever this run concluded
            if pending_since is not None:
                self.marker.write(pending_since)

    def _traverse(self, pending_since: Optional[datetime]) -> RunOutcome:
        state = self.classify()
        if state is HealthState.HEALTHY:
            self.store.reset()
            return RunOutcome(HealthState.HEALTHY, 0)

        # ─── Recovering ───
        count = self.store.get()
        tier = select_tier(count, self.thresholds)
        plan = plan_recovery(count, self.thresholds, self.catalog)
        self.logger.warning(
            f"⚠️  {state.label} → {HealthState.RECOVERING.label}: attempting {tier} "
            f"recovery ({len(plan)} strategies, failure count {count})"
        )

        result = execute_plan(plan)
        if result.success:
            self.logger.success(f"Recovered via {result.winner_name}")
            self.store.reset()
            return RunOutcome(HealthState.RECOVERED, 0, winner=result.winner_name)

        # ─── Escalated ───
        new_count = self.store.increment()
        self.logger.error(f"☠️ All {tier} recovery attempts failed")
        self.logger.warning(f"Consecutive failure count: {new_count}")

        if new_count < self.thresholds.reboot_threshold:
            return RunOutcome(HealthState.ESCALATED, new_count)

        # ─── Reboot pending ───
        if pending_since is not None:
            self.logger.warning("Reboot already ordered this session; not ordering another")
            return RunOutcome(HealthState.REBOOT_PENDING, new_count)

        reboot = self.reboot.schedule_reboot(
            f"Network recovery reboot after {new_count} consecutive failures"
        )
        return RunOutcome(HealthState.REBOOT_PENDING, new_count, reboot=reboot)
