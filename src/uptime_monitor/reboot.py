# ─── Standard library imports ───
import logging
import os
from pathlib import Path
from datetime import datetime
from dataclasses import dataclass
from typing import Callable, Optional

# ─── Project imports ───
from .config import Config
from .logger import get_logger
from .telemetry import tlog
from .state_store import RebootMarker
from .utils import run_command, privileged


logger = get_logger("reboot")

PROC_STAT = Path("/proc/stat")


def boot_time(proc_stat: Path = PROC_STAT) -> Optional[datetime]:
    """Local time the host booted (from `btime` in /proc/stat), or None."""
    try:
        for line in proc_stat.read_text().splitlines():
            if line.startswith("btime "):
                return datetime.fromtimestamp(int(line.split()[1]))
    except (OSError, ValueError, IndexError):
        pass
    return None


@dataclass(frozen=True)
class RebootResult:
    requested: bool
    scheduled_at: datetime
    delay_minutes: int
    reason: str


class RebootCoordinator:
    """
    Terminal escalation: order a delayed restart of the host.

    Fire-and-forget. The result tells the caller what was ordered;
    the caller is expected to exit with a failure status right after.
    """

    def __init__(
        self,
        marker: RebootMarker,
        delay_minutes: int = Config.REBOOT_DELAY_MIN,
        runner: Callable[..., bool] = run_command,
        sync: Callable[[], None] = os.sync,
    ):
        # Non-zero so this call (and caller cleanup) finishes before shutdown
        self.delay_minutes = max(1, delay_minutes)
        self.marker = marker
        self.run = runner
        self.sync = sync

    def schedule_reboot(self, reason: str) -> RebootResult:
        tlog(logger, "🚨", "REBOOT", "TRIGGER", primary=reason,
             meta=f"delay={self.delay_minutes}m", level=logging.CRITICAL)

        # 1. evidence for the next boot
        scheduled_at = self.marker.write()

        # 2. flush marker and counter to disk before the OS goes down
        self.sync()

        # 3. delayed restart
        requested = self.run(
            privileged(["shutdown", "-r", f"+{self.delay_minutes}", reason])
        )
        if requested:
            logger.critical(
                f"🔄 System reboot scheduled in {self.delay_minutes} minute(s)"
            )
        else:
            logger.error("Reboot command failed; host will keep running")

        return RebootResult(
            requested=requested,
            scheduled_at=scheduled_at,
            delay_minutes=self.delay_minutes,
            reason=reason,
        )
