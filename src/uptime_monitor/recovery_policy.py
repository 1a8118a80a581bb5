# ─── Future imports ───
from __future__ import annotations

# ─── Standard library imports ───
from dataclasses import dataclass

# ─── Project imports ───
from .config import Config


@dataclass(frozen=True)
class Thresholds:
    """
    Policy governing escalation and destructive self-healing behavior
    for network recovery.

    The two counters are independent on purpose: a reboot threshold
    below the aggressive-tier boundary is a valid (if undesirable)
    configuration where the host reboots before the aggressive
    strategies are ever tried.
    """

    # Failure count at which the full (aggressive) ladder is used
    max_consecutive_failures: int = 3

    # Failure count at which a reboot is ordered
    reboot_threshold: int = 3

    # Upper bound on a single DHCP lease request, seconds
    dhcp_timeout: int = 30

    @classmethod
    def from_config(cls) -> Thresholds:
        return cls(
            max_consecutive_failures=Config.MAX_CONSECUTIVE_FAILURES,
            reboot_threshold=Config.REBOOT_THRESHOLD,
            dhcp_timeout=Config.DHCP_TIMEOUT,
        )

    @property
    def reboots_before_aggressive(self) -> bool:
        """True when a reboot fires before the aggressive tier is reachable."""
        return self.reboot_threshold < self.max_consecutive_failures

    # ─── Introspection / debugging helpers ───────────────────────────────

    def summary(self) -> dict[str, int]:
        """
        Return a structured summary of the effective policy values.
        Useful for logs and startup diagnostics.
        """
        return {
            "max_consecutive_failures": self.max_consecutive_failures,
            "reboot_threshold": self.reboot_threshold,
            "dhcp_timeout": self.dhcp_timeout,
        }
