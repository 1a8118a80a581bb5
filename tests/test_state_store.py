import logging
import pytest
from datetime import datetime

from uptime_monitor.state_store import FailureStateStore, LastLogin


# ==================================
# TEST GROUP: Persistent Failure Count
# ==================================
def test_missing_file_reads_as_zero(store):
    assert store.get() == 0
    assert not store.path.exists()

@pytest.mark.parametrize("n", [1, 2, 5])
def test_increment_from_reset_counts_up(store, n):
    for expected in range(1, n + 1):
        assert store.increment() == expected
    assert store.get() == n
    assert store.path.read_text().strip() == str(n)

def test_reset_removes_file(store):
    store.increment()
    store.increment()
    store.reset()

    assert not store.path.exists()
    assert store.get() == 0

def test_reset_when_absent_is_noop(store):
    store.reset()
    assert not store.path.exists()

def test_counter_survives_new_instance(store):
    store.increment()
    assert FailureStateStore(store.path).get() == 1

def test_creates_parent_directory(tmp_path):
    nested = FailureStateStore(tmp_path / "a" / "b" / "network_failures")
    assert nested.increment() == 1

@pytest.mark.parametrize(
    "content",
    [
        # ❌ Not an integer
        "garbage",
        # ❌ Empty file
        "",
        # ❌ Negative count
        "-4",
    ],
)
def test_corrupt_counter_defaults_to_zero(store, caplog, content):
    """Corruption never aborts the run; it is logged and treated as 0"""
    store.path.write_text(content)

    with caplog.at_level(logging.WARNING, logger="uptime_monitor"):
        assert store.get() == 0

    assert any(r.levelno == logging.WARNING for r in caplog.records)

def test_increment_recovers_from_corrupt_counter(store):
    store.path.write_text("not-a-number")
    assert store.increment() == 1


# ============================
# TEST GROUP: Reboot Marker
# ============================
def test_marker_absent(marker):
    assert marker.read() is None
    assert marker.consume() is None

def test_marker_round_trip(marker):
    when = datetime(2025, 3, 1, 12, 30, 5)
    marker.write(when)

    assert marker.exists()
    assert marker.path.read_text().strip() == "2025-03-01 12:30:05"
    assert marker.consume() == when
    assert not marker.exists()

def test_marker_with_garbage_is_still_consumed(marker):
    marker.path.write_text("???")

    assert marker.consume() == datetime.fromtimestamp(0)
    assert not marker.exists()


# ============================
# TEST GROUP: Last Login
# ============================
def test_last_login_defaults_to_epoch_zero(tmp_path):
    assert LastLogin(tmp_path / "last_login_time").get() == 0.0

def test_last_login_set_and_get(tmp_path):
    login = LastLogin(tmp_path / "last_login_time")
    login.set(1700000000)
    assert login.get() == 1700000000.0
