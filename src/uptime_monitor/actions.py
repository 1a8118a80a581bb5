# --- Standard library imports ---
import re
import time
from pathlib import Path
from typing import Callable, Sequence

# --- Project imports ---
from .config import Config
from .logger import get_logger
from .probe import ConnectivityProbe, ReachabilityCheck
from .utils import run_command, privileged


logger = get_logger("actions")

SYS_CLASS_NET = Path("/sys/class/net")
USB_DRIVER_DIR = Path("/sys/bus/usb/drivers/usb")
WPA_RUN_DIR = Path("/var/run/wpa_supplicant")
USB_DEVICE_RE = re.compile(r"\d+-\d+(?:\.\d+)*")

# --- Settle times (seconds) ---
LINK_TOGGLE_DELAY = 2
LINK_SETTLE = 5
USB_REBIND_DELAY = 2
USB_SETTLE = 5
USB_POST_RESET_SETTLE = 10
MODULE_UNLOAD_DELAY = 2
MODULE_LOAD_SETTLE = 5
MODULE_REAPPEAR_RETRIES = 10
MODULE_REAPPEAR_INTERVAL = 2
MODULE_POST_UP_SETTLE = 10
SERVICE_STOP_DELAY = 2
SERVICE_SETTLE = 15


class RemediationActions:
    """
    Concrete OS-level remediation steps for one wireless interface.

    Every public action performs its remediation, waits its settle time
    and re-runs the health probe; the returned bool is that verdict.
    Individual command failures are logged and never raised.
    """

    def __init__(
        self,
        probe: ConnectivityProbe,
        reachability: ReachabilityCheck,
        dhcp_timeout: int = Config.DHCP_TIMEOUT,
        modules: Sequence[str] = Config.WIFI_MODULES,
        auth_service: str = Config.AUTH_SERVICE,
        network_service: str = Config.NETWORK_SERVICE,
        runner: Callable[..., bool] = run_command,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.probe = probe
        self.interface = probe.interface
        self.reachability = reachability
        self.dhcp_timeout = dhcp_timeout
        self.modules = tuple(modules)
        self.auth_service = auth_service
        self.network_service = network_service
        self.run = runner
        self.sleep = sleep

    # ─── Verification ───

    def _verify(self, label: str) -> bool:
        ok = self.probe.healthy(self.reachability)
        if ok:
            logger.success(f"{label} successful")
        else:
            logger.error(f"{label} failed")
        return ok

    def _sudo(self, *cmd: str, **kwargs) -> bool:
        return self.run(privileged(cmd), **kwargs)

    # ─── 1. Interface restart ───

    def restart_interface(self) -> bool:
        logger.info(f"🔄 Restarting {self.interface} (link down/up)")
        self._sudo("ip", "link", "set", self.interface, "down")
        self.sleep(LINK_TOGGLE_DELAY)
        self._sudo("ip", "link", "set", self.interface, "up")
        self.sleep(LINK_SETTLE)
        return self._verify("Interface restart")

    # ─── 2. DHCP lease renewal ───

    def _renew_lease(self) -> bool:
        self._sudo("dhclient", "-r", self.interface, timeout=self.dhcp_timeout)
        # `timeout` bounds dhclient itself; our own timeout is the backstop
        return self._sudo(
            "timeout", str(self.dhcp_timeout), "dhclient", self.interface,
            timeout=self.dhcp_timeout + 5,
        )

    def renew_dhcp_lease(self) -> bool:
        logger.info(f"🔄 Forcing DHCP renewal on {self.interface}")
        self._renew_lease()
        return self._verify("DHCP renewal")

    # ─── 3. USB bus reset ───

    def usb_device_id(self) -> str | None:
        """
        USB device id (e.g. '1-1.3') owning the interface, or None when the
        adapter is not USB-attached.

        `device` points at the USB interface (e.g. 1-1.3:1.0); its parent
        is the device the usb driver binds.
        """
        device = SYS_CLASS_NET / self.interface / "device"
        try:
            usb_path = (device / "..").resolve(strict=True)
        except (OSError, RuntimeError):
            return None
        if not USB_DEVICE_RE.fullmatch(usb_path.name):
            return None
        return usb_path.name

    def reset_usb_device(self) -> bool:
        bus = self.usb_device_id()
        if bus is None or not (USB_DRIVER_DIR / "unbind").exists():
            logger.warning(f"{self.interface} is not USB-attached; skipping USB reset")
            return False

        logger.info(f"🔄 Resetting USB device {bus}")
        if not self._sudo("tee", str(USB_DRIVER_DIR / "unbind"), input=bus):
            logger.error(f"USB unbind failed for {bus}")
            return False
        self.sleep(USB_REBIND_DELAY)
        if not self._sudo("tee", str(USB_DRIVER_DIR / "bind"), input=bus):
            logger.error(f"USB bind failed for {bus}")
            return False
        self.sleep(USB_SETTLE)
        self.sleep(USB_POST_RESET_SETTLE)
        return self._verify("USB bus reset")

    # ─── 4. Kernel module reload ───

    def _wait_for_interface(self) -> bool:
        for _ in range(MODULE_REAPPEAR_RETRIES):
            if self.probe.interface_exists():
                return True
            self.sleep(MODULE_REAPPEAR_INTERVAL)
        return self.probe.interface_exists()

    def reload_kernel_modules(self) -> bool:
        if not self.modules:
            logger.warning("No driver modules configured; skipping module reload")
            return False

        logger.info(f"🔄 Reloading kernel modules: {', '.join(self.modules)}")
        self._sudo("modprobe", "-r", *self.modules)
        self.sleep(MODULE_UNLOAD_DELAY)
        for module in self.modules:
            self._sudo("modprobe", module)
        self.sleep(MODULE_LOAD_SETTLE)

        if not self._wait_for_interface():
            logger.error(f"{self.interface} did not reappear after module reload")
            return False

        self._sudo("ip", "link", "set", self.interface, "up")
        self.sleep(MODULE_POST_UP_SETTLE)
        return self._verify("Kernel module reload")

    # ─── 5. Authentication service restart ───

    def restart_auth_service(self) -> bool:
        logger.info(f"🔄 Restarting {self.auth_service}")
        self._sudo("systemctl", "stop", self.auth_service)
        self.sleep(SERVICE_STOP_DELAY)
        self._sudo("pkill", "-f", self.auth_service)
        # stale control socket blocks the new daemon from binding
        self._sudo("rm", "-f", str(WPA_RUN_DIR / self.interface))
        self._sudo("systemctl", "start", self.auth_service)
        self.sleep(SERVICE_SETTLE)
        self._renew_lease()
        return self._verify(f"{self.auth_service} restart")

    # ─── 6. Network stack service restart ───

    def restart_network_service(self) -> bool:
        logger.info(f"🔄 Restarting {self.network_service} service")
        self._sudo("systemctl", "stop", self.network_service)
        self.sleep(SERVICE_STOP_DELAY)
        self._sudo("ip", "addr", "flush", "dev", self.interface)
        self._sudo("ip", "route", "flush", "dev", self.interface)
        self._sudo("systemctl", "start", self.network_service)
        self.sleep(SERVICE_SETTLE)
        self._renew_lease()
        return self._verify(f"{self.network_service} restart")
