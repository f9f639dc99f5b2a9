"""Rate command for sleeptrack."""

import click

from sleeptrack.core.coordinator import (
    RATE_ALREADY_RATED,
    RATE_STILL_OPEN,
    SleepTrackerCoordinator,
    run_action,
)
from sleeptrack.core.session import MAX_QUALITY, MIN_QUALITY
from sleeptrack.tui.format import quality_label


@click.command()
@click.argument("session_id", type=int)
@click.argument("quality", type=click.IntRange(MIN_QUALITY, MAX_QUALITY))
def rate(session_id: int, quality: int) -> None:
    """Rate how well you slept.

    SESSION_ID is the night to rate. QUALITY is 0 (very bad) to 5 (excellent).
    A night can only be rated once, after it has been stopped.

    Examples:

        sleeptrack rate 3 4
    """

    async def _rate(coordinator: SleepTrackerCoordinator) -> str | None:
        return await coordinator.rate(session_id, quality)

    outcome = run_action(_rate)
    if outcome.failure:
        click.echo(outcome.failure, err=True)
        raise SystemExit(1)

    reasons = {
        RATE_STILL_OPEN: "is still being tracked",
        RATE_ALREADY_RATED: "was already rated",
    }
    if outcome.result is not None:
        click.echo(f"Night {session_id} {reasons.get(outcome.result, outcome.result)}", err=True)
        raise SystemExit(1)

    click.echo(f"Rated night {session_id}: {quality_label(quality)}")
