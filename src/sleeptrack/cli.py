"""CLI entry point for sleeptrack.

Usage:
    sleeptrack                # Launch TUI
    sleeptrack start          # Start tracking a night
    sleeptrack stop           # Stop tracking the current night
    sleeptrack rate <id> <q>  # Rate a finished night (0-5)
    sleeptrack status         # Tracker status as JSON
    sleeptrack history        # Recorded nights, newest first
    sleeptrack clear          # Delete all nights
"""

import click

from sleeptrack.commands.clear import clear
from sleeptrack.commands.config import config_cmd
from sleeptrack.commands.history import history
from sleeptrack.commands.rate import rate
from sleeptrack.commands.status import status
from sleeptrack.commands.top import top
from sleeptrack.commands.track import start, stop
from sleeptrack.core.config import configure_logging


@click.group(invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="Write debug logs to the log file")
@click.version_option(package_name="sleeptrack")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """sleeptrack - Track your sleep from the terminal.

    Start a night when you go to bed, stop it when you wake up,
    then rate how well you slept.

    Running 'sleeptrack' without a subcommand launches the TUI.
    """
    ctx.ensure_object(dict)
    ctx.obj["log_path"] = configure_logging(verbose)

    # If a subcommand was invoked, let it handle things
    if ctx.invoked_subcommand is not None:
        return

    # No subcommand - launch the TUI
    ctx.invoke(top)


# Register commands
main.add_command(top)
main.add_command(start)
main.add_command(stop)
main.add_command(rate)
main.add_command(status)
main.add_command(history)
main.add_command(clear)
main.add_command(config_cmd)
