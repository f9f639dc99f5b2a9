"""History command for sleeptrack."""

import click

from sleeptrack.core.store import StorageFailure, acquire
from sleeptrack.tui.format import format_sessions


@click.command()
@click.option("-n", "--limit", type=click.IntRange(min=1), help="Show only the newest N nights")
def history(limit: int | None) -> None:
    """Print recorded nights, newest first.

    Examples:

        sleeptrack history

        sleeptrack history -n 7
    """
    try:
        sessions = acquire().get_all_descending()
    except StorageFailure as e:
        click.echo(str(e), err=True)
        raise SystemExit(1)

    if limit is not None:
        sessions = sessions[:limit]
    click.echo(format_sessions(sessions))
