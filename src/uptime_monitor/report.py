# --- Standard library imports ---
import re
import gzip
from pathlib import Path
from datetime import datetime
from typing import Iterator

# --- Project imports ---
from .logger import FILE_DATE_FORMAT


LINE_RE = re.compile(
    r"^(?P<ts>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}) \[(?P<level>[A-Z]+)\] "
)
ERROR_LEVELS = {"ERROR", "CRITICAL"}


def _parse_epoch(line: str) -> float | None:
    match = LINE_RE.match(line)
    if not match:
        return None
    try:
        return datetime.strptime(match.group("ts"), FILE_DATE_FORMAT).timestamp()
    except ValueError:
        return None


def _is_error(line: str) -> bool:
    match = LINE_RE.match(line)
    return bool(match) and match.group("level") in ERROR_LEVELS


def log_files(log_file: Path) -> list[Path]:
    """Rotated generations oldest first, then the live file."""
    rotated = []
    for path in log_file.parent.glob(f"{log_file.name}.*.gz"):
        suffix = path.name[len(log_file.name) + 1:-len(".gz")]
        if suffix.isdigit():
            rotated.append((int(suffix), path))
    files = [path for _, path in sorted(rotated, reverse=True)]
    if log_file.exists():
        files.append(log_file)
    return files


def read_lines(log_file: Path) -> Iterator[str]:
    for path in log_files(log_file):
        opener = gzip.open if path.suffix == ".gz" else open
        with opener(path, "rt", encoding="utf-8", errors="replace") as fh:
            for line in fh:
                yield line.rstrip("\n")


def errors_since(
    log_file: Path,
    since_epoch: float,
    before: int = 2,
    after: int = 4,
) -> list[str]:
    """
    ERROR lines newer than `since_epoch`, each with surrounding context.

    Context lines are kept only if they too are newer than `since_epoch`;
    continuation lines (no timestamp) inherit the previous line's time.
    """
    lines = list(read_lines(log_file))

    stamps: list[float | None] = []
    last = None
    for line in lines:
        parsed = _parse_epoch(line)
        last = parsed if parsed is not None else last
        stamps.append(last)

    selected: set[int] = set()
    for idx, line in enumerate(lines):
        if _is_error(line):
            selected.update(range(max(0, idx - before), min(len(lines), idx + after + 1)))

    return [
        lines[idx]
        for idx in sorted(selected)
        if stamps[idx] is not None and stamps[idx] > since_epoch
    ]
