# --- Project imports ---
from .cli import cli


def main():
    """
    Entry point for `python -m uptime_monitor`.

    Runs a single watchdog check unless a subcommand is given;
    scheduling is left to cron or a systemd timer.
    """
    cli(prog_name="uptime-monitor")

if __name__ == "__main__":
    main()
