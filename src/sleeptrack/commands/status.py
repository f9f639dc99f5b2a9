"""Status command for sleeptrack.

Returns the tracker state as JSON.
"""

import click
import orjson

from sleeptrack.core.coordinator import SleepTrackerCoordinator, run_action
from sleeptrack.core.store import StoreError, acquire


async def _noop(coordinator: SleepTrackerCoordinator) -> None:
    return None


@click.command()
def status() -> None:
    """Show the tracker status as JSON.

    Includes the open night (if any), the number of nights recorded and
    which actions are currently possible.

    Examples:

        sleeptrack status
    """
    outcome = run_action(_noop)
    if outcome.failure:
        click.echo(outcome.failure, err=True)
        raise SystemExit(1)

    try:
        nights = acquire().count()
    except StoreError as e:
        click.echo(f"Could not count nights: {e}", err=True)
        raise SystemExit(1)

    state = outcome.state
    result: dict = {
        "tracking": state.open_session is not None,
        "nights": nights,
        "can_start": state.can_start,
        "can_stop": state.can_stop,
        "can_clear": state.can_clear,
    }
    if state.open_session is not None:
        result["open_session"] = {
            "id": state.open_session.id,
            "start_time": state.open_session.start_time,
        }

    click.echo(orjson.dumps(result, option=orjson.OPT_INDENT_2).decode())
