"""Top command - launch the sleeptrack TUI."""

import click


@click.command()
def top() -> None:
    """Launch the sleeptrack TUI.

    Start and stop nights, rate them and browse the history.
    """
    from sleeptrack.tui.app import SleepTrackerApp

    app = SleepTrackerApp()
    app.run()
