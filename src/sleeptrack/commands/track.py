"""Start and stop commands for sleeptrack."""

import click

from sleeptrack.core.coordinator import SleepTrackerCoordinator, run_action
from sleeptrack.tui.format import format_duration, format_timestamp


async def _stop(coordinator: SleepTrackerCoordinator) -> None:
    await coordinator.stop()


@click.command()
def start() -> None:
    """Start tracking a night of sleep.

    Fails if a night is already being tracked.

    Examples:

        sleeptrack start
    """
    already_open = []

    async def _start(coordinator: SleepTrackerCoordinator) -> None:
        if not coordinator.state.can_start:
            already_open.append(coordinator.state.open_session)
            return
        await coordinator.start()

    outcome = run_action(_start)
    if outcome.failure:
        click.echo(outcome.failure, err=True)
        raise SystemExit(1)
    if already_open:
        click.echo(f"Night {already_open[0].id} is already being tracked", err=True)
        raise SystemExit(1)

    night = outcome.state.open_session
    if night is None:
        click.echo("Could not start tracking", err=True)
        raise SystemExit(1)
    click.echo(f"Started night {night.id} at {format_timestamp(night.start_time)}")


@click.command()
def stop() -> None:
    """Stop tracking the current night.

    Prints the night's ID so it can be rated with 'sleeptrack rate'.

    Examples:

        sleeptrack stop
    """
    outcome = run_action(_stop)
    if outcome.failure:
        click.echo(outcome.failure, err=True)
        raise SystemExit(1)
    if outcome.rate_session is None:
        click.echo("No night is being tracked", err=True)
        raise SystemExit(1)

    night = next(s for s in outcome.state.all_sessions if s.id == outcome.rate_session)
    click.echo(f"Stopped night {night.id} after {format_duration(night.duration_ms)}")
    click.echo(f"Rate it with: sleeptrack rate {night.id} <0-5>")
