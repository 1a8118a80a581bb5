# --- Standard library imports ---
import os
import time
from pathlib import Path
from datetime import datetime
from typing import Optional

# --- Project imports ---
from .config import Config
from .logger import get_logger


logger = get_logger("state_store")

# --- State layout ---
FAILURE_COUNT_FILE = "network_failures"
REBOOT_MARKER_FILE = "network_reboot_marker"
LAST_LOGIN_FILE = "last_login_time"

MARKER_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _replace_text(path: Path, text: str) -> None:
    """
    Whole-value replace: write a sibling temp file, then rename over.
    Readers see either the old value or the new one, never a partial write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp")
    tmp.write_text(text)
    os.replace(tmp, path)


class FailureStateStore:
    """
    Durable counter of consecutive fully-failed recovery attempts.

    Invariant: absent on disk <=> count 0. The file is created lazily
    on the first failure and deleted on the first success.

    Unreadable or corrupt content is treated as 0: availability of
    the watchdog matters more than exactness of the counter.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def get(self) -> int:
        try:
            raw = self.path.read_text().strip()
        except FileNotFoundError:
            return 0
        except OSError as e:
            logger.warning(f"Failure counter unreadable ({self.path}): {e}; assuming 0")
            return 0

        try:
            count = int(raw)
        except ValueError:
            logger.warning(f"Failure counter corrupt ({raw!r}); assuming 0")
            return 0

        if count < 0:
            logger.warning(f"Failure counter negative ({count}); assuming 0")
            return 0
        return count

    def increment(self) -> int:
        count = self.get() + 1
        try:
            _replace_text(self.path, f"{count}\n")
        except OSError as e:
            logger.error(f"Failed to persist failure counter ({self.path}): {e}")
        return count

    def reset(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            logger.error(f"Failed to clear failure counter ({self.path}): {e}")
            return
        logger.info("Failure count reset")


class RebootMarker:
    """
    Evidence that this watchdog ordered a reboot.

    Present only between the moment a reboot is scheduled and the first
    invocation that consumes it.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> Optional[datetime]:
        try:
            raw = self.path.read_text().strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Reboot marker unreadable ({self.path}): {e}")
            return None

        try:
            return datetime.strptime(raw, MARKER_TIME_FORMAT)
        except ValueError:
            logger.warning(f"Reboot marker has unexpected content ({raw!r})")
            # Still evidence of a scheduled reboot, just without a usable time
            return datetime.fromtimestamp(0)

    def write(self, when: datetime | None = None) -> datetime:
        when = (when or datetime.now()).replace(microsecond=0)
        try:
            _replace_text(self.path, when.strftime(MARKER_TIME_FORMAT) + "\n")
        except OSError as e:
            logger.error(f"Failed to persist reboot marker ({self.path}): {e}")
        return when

    def consume(self) -> Optional[datetime]:
        """Read and delete the marker. Returns None if there was none."""
        if not self.path.exists():
            return None
        when = self.read() or datetime.fromtimestamp(0)
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to remove reboot marker ({self.path}): {e}")
        return when


class LastLogin:
    """Epoch seconds of the operator's last login, used by the error report."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def get(self) -> float:
        try:
            return float(self.path.read_text().strip())
        except (FileNotFoundError, ValueError, OSError):
            return 0.0

    def set(self, epoch: float | None = None) -> float:
        epoch = time.time() if epoch is None else epoch
        _replace_text(self.path, f"{int(epoch)}\n")
        return epoch


def default_paths(state_dir: Path = Config.STATE_DIR) -> dict[str, Path]:
    return {
        "failures": state_dir / FAILURE_COUNT_FILE,
        "marker": state_dir / REBOOT_MARKER_FILE,
        "last_login": state_dir / LAST_LOGIN_FILE,
    }
