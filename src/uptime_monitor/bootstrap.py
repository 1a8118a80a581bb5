# ─── Standard library imports ───
import shutil
from dataclasses import dataclass

# ─── Project imports ───
from .logger import get_logger
from .recovery_policy import Thresholds


logger = get_logger("bootstrap")

REQUIRED_TOOLS = ("ip", "ping", "shutdown")
OPTIONAL_TOOLS = ("dhclient", "modprobe", "systemctl", "iwconfig")


@dataclass(frozen=True)
class EnvCapabilities:
    """
    Observed runtime capabilities derived at startup.

    These represent what the host is actually able to do,
    not what the watchdog is configured to do in theory.
    """
    missing_tools: tuple[str, ...]

    @property
    def fully_equipped(self) -> bool:
        return not self.missing_tools


def bootstrap(thresholds: Thresholds) -> EnvCapabilities:
    """
    Validate runtime configuration and derive startup capabilities.

    Hard invariant violations raise and abort startup.
    Soft checks are logged and never prevent a run.
    """
    validate_thresholds(thresholds)
    return discover_runtime_capabilities()


def validate_thresholds(thresholds: Thresholds) -> None:
    # `timeout 0` disables the bound on dhclient altogether
    if thresholds.dhcp_timeout < 1:
        raise ValueError(
            f"DHCP_TIMEOUT must be a positive integer (got {thresholds.dhcp_timeout})"
        )

    # Warn-only: valid, if undesirable, configurations
    if thresholds.max_consecutive_failures < 1:
        logger.warning(
            f"MAX_CONSECUTIVE_FAILURES is {thresholds.max_consecutive_failures}; "
            "every recovery will use the full aggressive ladder"
        )
    if thresholds.reboot_threshold < 1:
        logger.warning(
            f"REBOOT_THRESHOLD is {thresholds.reboot_threshold}; "
            "the host will reboot after the first failed recovery"
        )
    elif thresholds.reboots_before_aggressive:
        logger.warning(
            f"REBOOT_THRESHOLD ({thresholds.reboot_threshold}) is below "
            f"MAX_CONSECUTIVE_FAILURES ({thresholds.max_consecutive_failures}); "
            "the host will reboot before aggressive recovery is ever tried"
        )


def discover_runtime_capabilities() -> EnvCapabilities:
    """
    Look up the host tools the probe and remediation actions call.

    Missing tools are logged for visibility; the affected steps
    simply fail at run time.
    """
    missing = tuple(
        tool for tool in REQUIRED_TOOLS + OPTIONAL_TOOLS if shutil.which(tool) is None
    )
    for tool in missing:
        if tool in REQUIRED_TOOLS:
            logger.error(f"Required tool not found on PATH: {tool}")
        else:
            logger.debug(f"Optional tool not found on PATH: {tool}")

    return EnvCapabilities(missing_tools=missing)
