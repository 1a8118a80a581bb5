# --- Standard library imports ---
import os
import sys
import gzip
import shutil
import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler

# --- Project imports ---
from .config import Config


# --- Custom log levels ---
TIMING = 22   # Between INFO (20) and SUCCESS (25)
SUCCESS = 25  # Between INFO (20) and WARNING (30)
logging.addLevelName(TIMING, "TIME")
logging.addLevelName(SUCCESS, "SUCCESS")

def timing(self, message, *args, **kwargs):
    """Add `timing` method to Logger for TIMING-level logs."""
    if self.isEnabledFor(TIMING):
        self._log(TIMING, message, args, stacklevel=2, **kwargs)

def success(self, message, *args, **kwargs):
    """Add `success` method to Logger for SUCCESS-level logs."""
    if self.isEnabledFor(SUCCESS):
        self._log(SUCCESS, message, args, stacklevel=2, **kwargs)

logging.Logger.timing = timing
logging.Logger.success = success

# --- Filters ---
class TimingFilter(logging.Filter):
    """Filter out TIMING logs unless explicitly enabled."""
    def __init__(self, enabled: bool):
        super().__init__()
        self.enabled = enabled

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno == TIMING:
            return self.enabled
        return True

# --- Format configuration constants ---
LOG_LEVEL_EMOJIS = {
    logging.DEBUG: "🧱",
    logging.INFO: "🟢",
    TIMING: "⚡️",
    SUCCESS: "✅",
    logging.WARNING: "⚠️ ",
    logging.ERROR: "❌",
    logging.CRITICAL: "🔥",
}

FILE_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# --- Formatters ---
class EmojiFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        """
        Formatter that prepends an emoji per log level.

        The record's level name is left alone so the file handler
        still writes the full name for the same record.
        """
        record.levelemoji = LOG_LEVEL_EMOJIS.get(record.levelno, "")
        return super().format(record)

# --- Rotation helpers (compress rotated files like `gzip` would) ---
def _gz_namer(name: str) -> str:
    return f"{name}.gz"

def _gz_rotator(source: str, dest: str) -> None:
    with open(source, "rb") as src, gzip.open(dest, "wb") as dst:
        shutil.copyfileobj(src, dst)
    os.remove(source)

def build_file_handler(
    log_file: Path,
    max_bytes: int = Config.MAX_LOG_SIZE,
    backup_count: int = Config.MAX_LOG_FILES,
) -> RotatingFileHandler:
    """
    Size-rotated log file that keeps `backup_count` gzip-compressed
    generations (network_monitor.log.1.gz is the newest).
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.namer = _gz_namer
    handler.rotator = _gz_rotator
    handler.setFormatter(
        logging.Formatter(fmt=FILE_LOG_FORMAT, datefmt=FILE_DATE_FORMAT)
    )
    return handler

# --- Public logging setup API ---
def setup_logging(level=logging.INFO, log_file: Path | None = None) -> None:
    """
    Configure global logging with emoji decorations, optional TIMING logs
    and an optional persistent, size-rotated log file.
    """
    root = logging.getLogger()
    root.setLevel(level)
    for existing in list(root.handlers):
        root.removeHandler(existing)
        existing.close()

    handler = logging.StreamHandler(sys.stdout)
    formatter = EmojiFormatter(
        fmt="%(asctime)s %(levelemoji)s %(name)s:%(funcName)s → %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    # Apply optional TIMING filter based on config
    timing_filter = TimingFilter(enabled=Config.LOG_TIMING)
    handler.addFilter(timing_filter)
    root.addHandler(handler)

    if log_file is not None:
        try:
            file_handler = build_file_handler(log_file)
        except OSError as e:
            root.warning(f"Log file unavailable ({log_file}): {e}")
        else:
            file_handler.addFilter(timing_filter)
            root.addHandler(file_handler)

def get_logger(name: str) -> logging.Logger:
    """
    Return a namespaced logger for any module.
    """
    return logging.getLogger(f"uptime_monitor.{name}")
