"""Clear command for sleeptrack."""

import click

from sleeptrack.core.coordinator import SleepTrackerCoordinator, run_action


async def _clear(coordinator: SleepTrackerCoordinator) -> None:
    await coordinator.clear()


@click.command()
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
def clear(yes: bool) -> None:
    """Delete every recorded night.

    Examples:

        sleeptrack clear

        sleeptrack clear --yes
    """
    if not yes:
        click.confirm("Delete all sleep data?", abort=True)

    outcome = run_action(_clear)
    if outcome.failure:
        click.echo(outcome.failure, err=True)
        raise SystemExit(1)

    click.echo("All sleep data has been cleared")
