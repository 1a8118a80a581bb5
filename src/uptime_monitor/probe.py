# --- Future imports ---
from __future__ import annotations

# --- Standard library imports ---
import re
from enum import Enum, auto
from pathlib import Path
from dataclasses import dataclass

# --- Third-party imports ---
import requests

# --- Project imports ---
from .config import Config
from .logger import get_logger
from .utils import run_command, command_output


logger = get_logger("probe")

INET_RE = re.compile(r"inet (\d+(?:\.\d+){3})")
FLAGS_RE = re.compile(r"<([^>]*)>")


class LinkState(Enum):
    MISSING = auto()
    DOWN = auto()
    NO_ADDRESS = auto()
    OK = auto()


@dataclass(frozen=True)
class ReachabilityCheck:
    """
    Internet reachability policy.

    Plain hosts are probed with a single ICMP echo; http(s) URLs with
    an HTTP GET. At least `required_successes` targets must answer.
    """
    targets: tuple[str, ...] = ("8.8.8.8", "1.1.1.1", "208.67.222.222")
    required_successes: int = 2
    per_target_timeout: float = 3

    @classmethod
    def from_config(cls) -> ReachabilityCheck:
        return cls(
            targets=tuple(Config.INTERNET_TARGETS),
            required_successes=Config.REQUIRED_SUCCESSES,
            per_target_timeout=Config.PING_TIMEOUT,
        )


def ping_host(host: str, timeout: float = 3) -> bool:
    """Return True if host answers a single ICMP echo within `timeout`."""
    return run_command(
        ["ping", "-c", "1", "-W", str(int(timeout)), host],
        timeout=timeout + 2,
    )

def http_reachable(url: str, timeout: float = 3) -> bool:
    """Return True if an HTTP GET to `url` completes with a non-error status."""
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
        return True
    except requests.RequestException as e:
        logger.debug(f"HTTP probe failed for {url} ({e.__class__.__name__})")
        return False


class ConnectivityProbe:
    """
    Read-only view of one network interface and of the internet path
    behind it. Never changes host state.
    """

    def __init__(self, interface: str = Config.INTERFACE):
        self.interface = interface

    # --- Interface (Layer 2 / address assignment) ---

    def _link_output(self) -> str | None:
        return command_output(["ip", "link", "show", self.interface])

    def interface_exists(self) -> bool:
        return self._link_output() is not None

    def interface_up(self) -> bool:
        output = self._link_output()
        if output is None:
            return False
        match = FLAGS_RE.search(output)
        return bool(match) and "UP" in match.group(1).split(",")

    def interface_address(self) -> str | None:
        output = command_output(["ip", "-4", "addr", "show", self.interface])
        if not output:
            return None
        match = INET_RE.search(output)
        return match.group(1) if match else None

    def interface_has_address(self) -> bool:
        return self.interface_address() is not None

    def link_state(self) -> LinkState:
        if not self.interface_exists():
            return LinkState.MISSING
        if not self.interface_up():
            return LinkState.DOWN
        if not self.interface_has_address():
            return LinkState.NO_ADDRESS
        return LinkState.OK

    def link_ok(self) -> bool:
        return self.link_state() is LinkState.OK

    # --- Internet (Layer 3+) ---

    def internet_reachable(
        self,
        targets: tuple[str, ...] | list[str],
        required_successes: int,
        per_target_timeout: float,
    ) -> bool:
        """
        Probe targets in order until `required_successes` of them answer.

        `required_successes` is clamped to the number of targets so a
        short target list cannot make the check unsatisfiable.
        """
        targets = list(targets)
        if not targets:
            logger.warning("No internet targets configured; treating as unreachable")
            return False

        needed = max(1, min(required_successes, len(targets)))
        successes = 0
        for target in targets:
            if target.startswith(("http://", "https://")):
                ok = http_reachable(target, timeout=per_target_timeout)
            else:
                ok = ping_host(target, timeout=per_target_timeout)
            logger.debug(f"Reachability {target}: {'ok' if ok else 'no reply'}")
            if ok:
                successes += 1
                if successes >= needed:
                    return True
        return False

    def healthy(self, check: ReachabilityCheck) -> bool:
        """Full health verdict: link up with an address and internet reachable."""
        return self.link_ok() and self.internet_reachable(
            check.targets, check.required_successes, check.per_target_timeout
        )

    # --- Diagnostics ---

    def status_dump(self) -> str:
        """Human-readable interface snapshot for the log."""
        sections = []
        for cmd in (["ip", "addr", "show", self.interface], ["iwconfig", self.interface]):
            output = command_output(cmd)
            sections.append(output.strip() if output else f"{' '.join(cmd)}: unavailable")
        try:
            sections.append(Path("/proc/net/wireless").read_text().strip())
        except OSError:
            sections.append("/proc/net/wireless: unavailable")
        return "\n".join(sections)
