import pytest
import responses
from unittest.mock import patch

from uptime_monitor.probe import ConnectivityProbe, LinkState, ReachabilityCheck, http_reachable


LINK_UP = "3: wlan0: <BROADCAST,MULTICAST,UP,LOWER_UP> mtu 1500 qdisc pfifo_fast state UP\n"
LINK_DOWN = "3: wlan0: <BROADCAST,MULTICAST> mtu 1500 qdisc pfifo_fast state DOWN\n"
ADDR = "3: wlan0: <UP>\n    inet 192.168.1.50/24 brd 192.168.1.255 scope global wlan0\n"
NO_ADDR = "3: wlan0: <UP>\n    link/ether aa:bb:cc:dd:ee:ff\n"


def fake_output(link, addr):
    def _output(cmd, timeout=10):
        if cmd[:2] == ["ip", "link"]:
            return link
        if cmd[:3] == ["ip", "-4", "addr"]:
            return addr
        return None
    return _output


# =================================
# TEST GROUP: Interface state
# =================================
@pytest.mark.parametrize(
    "link, addr, expected",
    [
        # ✅ Up with an IPv4 address
        (LINK_UP, ADDR, LinkState.OK),

        # ❌ Interface absent
        (None, None, LinkState.MISSING),

        # ❌ Present but administratively down
        (LINK_DOWN, ADDR, LinkState.DOWN),

        # ❌ Up but no address
        (LINK_UP, NO_ADDR, LinkState.NO_ADDRESS),
    ],
)
def test_link_state(link, addr, expected):
    with patch("uptime_monitor.probe.command_output", side_effect=fake_output(link, addr)):
        assert ConnectivityProbe("wlan0").link_state() is expected

def test_lower_up_alone_is_not_up():
    link = "3: wlan0: <BROADCAST,LOWER_UP> mtu 1500 state UNKNOWN\n"
    with patch("uptime_monitor.probe.command_output", side_effect=fake_output(link, ADDR)):
        assert ConnectivityProbe("wlan0").interface_up() is False

def test_interface_address():
    with patch("uptime_monitor.probe.command_output", side_effect=fake_output(LINK_UP, ADDR)):
        assert ConnectivityProbe("wlan0").interface_address() == "192.168.1.50"


# =================================
# TEST GROUP: Internet reachability
# =================================
@pytest.mark.parametrize(
    "replies, required, expected",
    [
        # ✅ Two of three answer
        ([True, False, True], 2, True),

        # ❌ Only one answers
        ([False, True, False], 2, False),

        # ✅ Single required
        ([False, False, True], 1, True),

        # ✅ Requirement clamped to target count
        ([True, True, True], 5, True),
    ],
)
def test_internet_reachable(replies, required, expected):
    targets = ["8.8.8.8", "1.1.1.1", "208.67.222.222"]
    answers = dict(zip(targets, replies))
    with patch("uptime_monitor.probe.ping_host", side_effect=lambda host, timeout: answers[host]):
        result = ConnectivityProbe("wlan0").internet_reachable(targets, required, 1)
    assert result is expected

def test_internet_reachable_stops_once_satisfied():
    with patch("uptime_monitor.probe.ping_host", return_value=True) as mock_ping:
        assert ConnectivityProbe().internet_reachable(["a", "b", "c"], 2, 1) is True
    assert mock_ping.call_count == 2

def test_no_targets_is_unreachable():
    assert ConnectivityProbe().internet_reachable([], 2, 1) is False

@responses.activate
def test_http_targets_use_requests():
    responses.add(responses.GET, "http://connectivity.example/generate_204", status=204)
    responses.add(responses.GET, "https://down.example/", status=503)

    with patch("uptime_monitor.probe.ping_host", return_value=True) as mock_ping:
        result = ConnectivityProbe().internet_reachable(
            ["http://connectivity.example/generate_204", "https://down.example/", "8.8.8.8"], 2, 1
        )

    assert result is True
    mock_ping.assert_called_once_with("8.8.8.8", timeout=1)

@responses.activate
def test_http_reachable_connection_error():
    # No registered response → responses raises ConnectionError
    assert http_reachable("https://nowhere.example/") is False

def test_ping_command(monkeypatch):
    captured = {}

    def fake_run(cmd, timeout):
        captured["cmd"] = cmd
        return True

    monkeypatch.setattr("uptime_monitor.probe.run_command", fake_run)
    from uptime_monitor.probe import ping_host

    assert ping_host("8.8.8.8", timeout=3) is True
    assert captured["cmd"] == ["ping", "-c", "1", "-W", "3", "8.8.8.8"]


# ============================
# TEST GROUP: Full health
# ============================
def test_healthy_requires_link_and_internet():
    check = ReachabilityCheck(targets=("8.8.8.8",), required_successes=1)
    probe = ConnectivityProbe("wlan0")
    with patch("uptime_monitor.probe.command_output", side_effect=fake_output(LINK_UP, ADDR)), \
         patch("uptime_monitor.probe.ping_host", return_value=False):
        assert probe.healthy(check) is False
    with patch("uptime_monitor.probe.command_output", side_effect=fake_output(LINK_UP, ADDR)), \
         patch("uptime_monitor.probe.ping_host", return_value=True):
        assert probe.healthy(check) is True
