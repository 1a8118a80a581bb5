"""uptime-monitor command line.

One `check` per scheduler tick; the remaining commands are operator
helpers around the persisted state and the log file.
"""

# --- Standard library imports ---
import sys
import logging
from datetime import datetime

# --- Third-party imports ---
import click

# --- Project imports ---
from . import __version__
from .config import Config
from .logger import get_logger, setup_logging
from .bootstrap import bootstrap
from .probe import ConnectivityProbe, ReachabilityCheck
from .actions import RemediationActions
from .strategies import build_catalog
from .reboot import RebootCoordinator
from .recovery_policy import Thresholds
from .controller import EscalationController, EXIT_ESCALATED
from .state_store import FailureStateStore, RebootMarker, LastLogin, default_paths
from .report import errors_since


def build_controller(thresholds: Thresholds) -> EscalationController:
    """Wire the controller and its collaborators from Config."""
    paths = default_paths(Config.STATE_DIR)
    probe = ConnectivityProbe(Config.INTERFACE)
    reachability = ReachabilityCheck.from_config()
    marker = RebootMarker(paths["marker"])

    actions = RemediationActions(
        probe,
        reachability,
        dhcp_timeout=thresholds.dhcp_timeout,
    )

    return EscalationController(
        probe=probe,
        catalog=build_catalog(actions),
        thresholds=thresholds,
        store=FailureStateStore(paths["failures"]),
        marker=marker,
        reboot=RebootCoordinator(marker, delay_minutes=Config.REBOOT_DELAY_MIN),
        reachability=reachability,
    )


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="uptime-monitor")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Wireless network watchdog with progressive recovery."""
    setup_logging(
        level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
        log_file=Config.LOG_FILE,
    )
    if ctx.invoked_subcommand is None:
        ctx.invoke(check)


@cli.command()
def check() -> None:
    """Probe the network once and recover if needed (default)."""
    logger = get_logger("main")
    logger.info("==============================================")
    logger.info(f"🚀 Network monitor starting ({Config.INTERFACE})")
    logger.debug(f"Python version: {sys.version}")

    thresholds = Thresholds.from_config()
    try:
        bootstrap(thresholds)
    except ValueError as e:
        logger.critical(f"Invalid configuration: {e}")
        sys.exit(EXIT_ESCALATED)

    controller = build_controller(thresholds)
    try:
        outcome = controller.run()
    except Exception as e:
        logger.exception(f"Unhandled exception during check: {e}")
        sys.exit(EXIT_ESCALATED)

    logger.info(f"🛜 Network State [{outcome.state.label}]")
    logger.info("Network monitoring check completed")
    logger.info("----------------------------------------------")
    sys.exit(outcome.exit_code)


@cli.command()
def status() -> None:
    """Show the persisted failure counter and reboot marker."""
    paths = default_paths(Config.STATE_DIR)
    marker = RebootMarker(paths["marker"]).read()

    click.echo(f"Interface:              {Config.INTERFACE}")
    click.echo(f"Consecutive failures:   {FailureStateStore(paths['failures']).get()}")
    click.echo(f"Reboot marker:          {marker if marker else 'none'}")
    for key, value in Thresholds.from_config().summary().items():
        click.echo(f"{key + ':':<24}{value}")


@cli.command()
def reset() -> None:
    """Clear the persisted failure counter."""
    FailureStateStore(default_paths(Config.STATE_DIR)["failures"]).reset()
    click.echo("Failure count cleared")


@cli.command()
@click.option("--since", type=float, default=None,
              help="Epoch seconds; defaults to the recorded last login.")
@click.option("--context-before", "-B", default=2, show_default=True)
@click.option("--context-after", "-A", default=4, show_default=True)
def report(since: float | None, context_before: int, context_after: int) -> None:
    """Print errors logged since the last login."""
    if since is None:
        since = LastLogin(default_paths(Config.STATE_DIR)["last_login"]).get()

    lines = errors_since(Config.LOG_FILE, since, context_before, context_after)
    if not lines:
        click.echo(f"No errors since {datetime.fromtimestamp(since):%Y-%m-%d %H:%M:%S}")
        return
    for line in lines:
        click.echo(line)


@cli.command("mark-login")
@click.option("--at", "at", type=float, default=None, help="Epoch seconds; defaults to now.")
def mark_login(at: float | None) -> None:
    """Record the last login time used by `report`."""
    epoch = LastLogin(default_paths(Config.STATE_DIR)["last_login"]).set(at)
    click.echo(f"Last login recorded: {datetime.fromtimestamp(epoch):%Y-%m-%d %H:%M:%S}")
