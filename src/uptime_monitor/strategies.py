# ─── Standard library imports ───
from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Callable

# ─── Project imports ───
from .actions import RemediationActions


class Tier(Enum):
    STANDARD = auto()
    AGGRESSIVE = auto()

    def __str__(self) -> str:
        return self.name.lower()


class StrategyKind(Enum):
    """
    Remediation variants, least to most invasive.
    Declaration order is the escalation order.
    """
    INTERFACE_RESTART = "interface_restart"
    DHCP_RENEWAL = "dhcp_renewal"
    USB_RESET = "usb_reset"
    MODULE_RELOAD = "module_reload"
    AUTH_SERVICE_RESTART = "auth_service_restart"
    NETWORK_SERVICE_RESTART = "network_service_restart"


# Number of leading catalog entries that form the standard tier
STANDARD_TIER_SIZE = 3


@dataclass(frozen=True)
class Strategy:
    """One rung of the escalation ladder, bound to its action."""
    kind: StrategyKind
    rank: int
    tier: Tier
    action: Callable[[], bool] = field(compare=False, repr=False)

    @property
    def name(self) -> str:
        return self.kind.value

    def attempt(self) -> bool:
        return bool(self.action())


def tier_for(rank: int) -> Tier:
    return Tier.STANDARD if rank < STANDARD_TIER_SIZE else Tier.AGGRESSIVE


def make_catalog(
    bindings: dict[StrategyKind, Callable[[], bool]],
) -> tuple[Strategy, ...]:
    """
    Build the ordered catalog from an action per strategy kind.

    Every kind must be bound; order always follows `StrategyKind`,
    whatever order the mapping was built in.
    """
    missing = [kind.value for kind in StrategyKind if kind not in bindings]
    if missing:
        raise ValueError(f"Unbound strategies: {', '.join(missing)}")

    return tuple(
        Strategy(kind=kind, rank=rank, tier=tier_for(rank), action=bindings[kind])
        for rank, kind in enumerate(StrategyKind)
    )


def build_catalog(actions: RemediationActions) -> tuple[Strategy, ...]:
    return make_catalog({
        StrategyKind.INTERFACE_RESTART: actions.restart_interface,
        StrategyKind.DHCP_RENEWAL: actions.renew_dhcp_lease,
        StrategyKind.USB_RESET: actions.reset_usb_device,
        StrategyKind.MODULE_RELOAD: actions.reload_kernel_modules,
        StrategyKind.AUTH_SERVICE_RESTART: actions.restart_auth_service,
        StrategyKind.NETWORK_SERVICE_RESTART: actions.restart_network_service,
    })
