# --- Standard library imports ---
import os
from pathlib import Path

# --- Third-party imports ---
from dotenv import load_dotenv


# Load .env once
load_dotenv()


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default

def _list_env(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


class Config:
    """Centralized config for the watchdog, its escalation ladder and host wiring"""

    # --- Monitored interface ---
    INTERFACE = os.getenv("INTERFACE", "wlan0")

    # --- Persistent state (must survive reboot, so never /tmp) ---
    STATE_DIR = Path(
        os.getenv("STATE_DIR", Path.home() / ".local" / "state" / "uptime_monitor")
    ).expanduser()

    # --- Observability Policy ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_TIMING = os.getenv("LOG_TIMING", "false").lower() == "true"
    LOG_DIR = Path(os.getenv("LOG_DIR", STATE_DIR / "logs")).expanduser()
    LOG_FILE = LOG_DIR / "network_monitor.log"
    MAX_LOG_SIZE = _int_env("MAX_LOG_SIZE", 5 * 1024 * 1024)  # 5MB
    MAX_LOG_FILES = _int_env("MAX_LOG_FILES", 5)

    # --- Escalation Policy ---
    MAX_CONSECUTIVE_FAILURES = _int_env("MAX_CONSECUTIVE_FAILURES", 3)
    REBOOT_THRESHOLD = _int_env("REBOOT_THRESHOLD", 3)
    DHCP_TIMEOUT = _int_env("DHCP_TIMEOUT", 30)  # seconds

    # --- Reachability Policy ---
    INTERNET_TARGETS = _list_env("INTERNET_TARGETS", "8.8.8.8,1.1.1.1,208.67.222.222")
    REQUIRED_SUCCESSES = _int_env("REQUIRED_SUCCESSES", 2)
    PING_TIMEOUT = _int_env("PING_TIMEOUT", 3)  # seconds per target

    # --- Host wiring ---
    WIFI_MODULES = _list_env("WIFI_MODULES", "brcmfmac,brcmutil,cfg80211")
    AUTH_SERVICE = os.getenv("AUTH_SERVICE", "wpa_supplicant")
    NETWORK_SERVICE = os.getenv("NETWORK_SERVICE", "networking")

    # --- Reboot ---
    REBOOT_DELAY_MIN = _int_env("REBOOT_DELAY_MIN", 1)  # shutdown -r +N
