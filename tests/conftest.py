import pytest
from unittest.mock import Mock

from uptime_monitor.config import Config
from uptime_monitor.probe import LinkState, ReachabilityCheck
from uptime_monitor.state_store import FailureStateStore, RebootMarker
from uptime_monitor.strategies import StrategyKind, make_catalog


class FakeProbe:
    """In-memory stand-in for ConnectivityProbe."""

    def __init__(self, link=LinkState.OK, internet=True, interface="wlan0"):
        self.link = link
        self.internet = internet
        self.interface = interface
        self.internet_calls = 0

    def link_state(self):
        return self.link

    def link_ok(self):
        return self.link is LinkState.OK

    def interface_exists(self):
        return self.link is not LinkState.MISSING

    def interface_address(self):
        return "192.168.1.50" if self.link is LinkState.OK else None

    def internet_reachable(self, targets, required_successes, per_target_timeout):
        self.internet_calls += 1
        return self.internet

    def healthy(self, check):
        return self.link_ok() and self.internet

    def status_dump(self):
        return "wlan0: fake"


def mock_catalog(results=None):
    """
    Catalog of Mock actions. `results` maps StrategyKind → bool;
    unmapped kinds fail.
    """
    results = results or {}
    actions = {
        kind: Mock(name=kind.value, return_value=results.get(kind, False))
        for kind in StrategyKind
    }
    return make_catalog(actions), actions


@pytest.fixture
def fake_probe():
    return FakeProbe()

@pytest.fixture
def store(tmp_path):
    return FailureStateStore(tmp_path / "network_failures")

@pytest.fixture
def marker(tmp_path):
    return RebootMarker(tmp_path / "network_reboot_marker")

@pytest.fixture
def reachability():
    return ReachabilityCheck(targets=("8.8.8.8", "1.1.1.1"), required_successes=2, per_target_timeout=1)

@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point every persisted path at a temp directory."""
    monkeypatch.setattr(Config, "STATE_DIR", tmp_path / "state")
    monkeypatch.setattr(Config, "LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(Config, "LOG_FILE", tmp_path / "logs" / "network_monitor.log")
    return tmp_path
