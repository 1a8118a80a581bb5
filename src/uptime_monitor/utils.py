# --- Standard library imports ---
import os
import time
import subprocess
from typing import Sequence

# --- Project imports ---
from .logger import get_logger


# Define the logger once for the entire module
logger = get_logger("utils")

DEFAULT_COMMAND_TIMEOUT = 60  # seconds

def privileged(cmd: Sequence[str]) -> list[str]:
    """Prefix `sudo` unless we already run as root."""
    if hasattr(os, "geteuid") and os.geteuid() == 0:
        return list(cmd)
    return ["sudo", *cmd]

def run_command(
    cmd: Sequence[str],
    timeout: float = DEFAULT_COMMAND_TIMEOUT,
    input: str | None = None,
) -> bool:
    """
    Run a host command and report whether it exited cleanly.

    Launch failures (missing binary, permission, timeout) are logged
    and reported as False; they never propagate to the caller.
    """
    try:
        result = subprocess.run(
            list(cmd),
            input=input,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning(f"Command timed out after {timeout}s: {' '.join(cmd)}")
        return False
    except OSError as e:
        logger.warning(f"Command could not be launched: {' '.join(cmd)} ({e})")
        return False

    if result.returncode != 0:
        logger.debug(
            f"Command exited {result.returncode}: {' '.join(cmd)} "
            f"{result.stderr.strip()}"
        )
        return False
    return True

def command_output(cmd: Sequence[str], timeout: float = 10) -> str | None:
    """Return stdout of a command, or None when it fails."""
    try:
        result = subprocess.run(
            list(cmd), capture_output=True, text=True, timeout=timeout
        )
    except (subprocess.TimeoutExpired, OSError):
        return None
    if result.returncode != 0:
        return None
    return result.stdout

# ============================================================
# Performance Timing Utilities (optional instrumentation)
# ============================================================

class Timer:
    def __init__(self, logger):
        self.logger = logger
        self.cycle_start = None
        self.lap_start = None

    def start_cycle(self):
        """Call once at the beginning of a run."""
        now = time.perf_counter()  # Recommended clock for benchmarking
        self.cycle_start = now
        self.lap_start = now

    def lap(self, label: str) -> float:
        """Measure time since last lap, in seconds."""
        if self.lap_start is None:
            return 0.0

        now = time.perf_counter()
        delta_s = now - self.lap_start
        self.logger.timing(f"Timing | {label:<34} [{delta_s * 1000:10.1f} ms]")
        self.lap_start = now
        return delta_s

    def end_cycle(self):
        """End-to-end duration."""
        if self.cycle_start is None:
            return
        total_ms = (time.perf_counter() - self.cycle_start) * 1000
        self.logger.timing(f"Timing | {'Total run':<34} [{total_ms:10.1f} ms]")
        self.cycle_start = None
        self.lap_start = None
