import pytest
from datetime import datetime
from unittest.mock import Mock, call

from uptime_monitor.reboot import RebootCoordinator, boot_time


# ===============================
# TEST GROUP: Reboot Coordinator
# ===============================
def test_schedule_reboot_order_of_operations(marker):
    """marker → sync → shutdown, in that order"""
    events = []
    real_write = marker.write

    def tracking_write(*args, **kwargs):
        events.append("marker")
        return real_write(*args, **kwargs)

    marker.write = tracking_write
    sync = Mock(side_effect=lambda: events.append("sync"))
    runner = Mock(side_effect=lambda cmd: events.append("shutdown") or True)

    coordinator = RebootCoordinator(marker, delay_minutes=1, runner=runner, sync=sync)
    result = coordinator.schedule_reboot("test reason")

    assert events == ["marker", "sync", "shutdown"]
    assert result.requested is True
    assert result.reason == "test reason"
    assert result.delay_minutes == 1
    assert marker.exists()

def test_shutdown_command_is_delayed(marker):
    runner = Mock(return_value=True)
    RebootCoordinator(marker, delay_minutes=2, runner=runner, sync=Mock()).schedule_reboot("why")

    cmd = runner.call_args.args[0]
    assert cmd[-4:] == ["shutdown", "-r", "+2", "why"]

@pytest.mark.parametrize("delay", [0, -3])
def test_delay_is_never_zero(marker, delay):
    coordinator = RebootCoordinator(marker, delay_minutes=delay, runner=Mock(return_value=True), sync=Mock())
    assert coordinator.delay_minutes == 1

def test_failed_shutdown_is_reported(marker):
    coordinator = RebootCoordinator(marker, runner=Mock(return_value=False), sync=Mock())

    result = coordinator.schedule_reboot("why")

    assert result.requested is False
    # Marker is written regardless: it documents the attempt
    assert marker.exists()


# ============================
# TEST GROUP: Boot time
# ============================
def test_boot_time_from_proc_stat(tmp_path):
    stat = tmp_path / "stat"
    stat.write_text("cpu  1 2 3\nbtime 1700000000\nprocesses 42\n")

    assert boot_time(stat) == datetime.fromtimestamp(1700000000)

@pytest.mark.parametrize("content", ["cpu 1 2 3\n", "btime nope\n"])
def test_boot_time_unavailable(tmp_path, content):
    stat = tmp_path / "stat"
    stat.write_text(content)
    assert boot_time(stat) is None

def test_boot_time_missing_file(tmp_path):
    assert boot_time(tmp_path / "missing") is None
