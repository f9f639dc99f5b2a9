"""Config command for sleeptrack."""

import click

from sleeptrack.core.config import (
    get_data_dir,
    get_database_path,
    get_log_level,
    set_log_level,
)


@click.command("config")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Set the log level written to the log file",
)
def config_cmd(log_level: str | None) -> None:
    """Show or change sleeptrack settings.

    Examples:

        sleeptrack config

        sleeptrack config --log-level debug
    """
    if log_level:
        set_log_level(log_level)
        click.echo(f"Log level set to {log_level.upper()}")
        return

    click.echo(f"Data directory: {get_data_dir()}")
    click.echo(f"Database:       {get_database_path()}")
    click.echo(f"Log level:      {get_log_level()}")
