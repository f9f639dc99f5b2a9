"""Session list widget for the sleeptrack TUI."""

from collections.abc import Sequence

from textual.widgets import DataTable

from sleeptrack.core.session import SessionRecord
from sleeptrack.tui.format import session_row


class SessionTable(DataTable):
    """DataTable widget displaying tracked nights, newest first.

    Columns: ID, Start, End, Duration, Quality
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._sessions: tuple[SessionRecord, ...] = ()

    def on_mount(self) -> None:
        """Set up the table columns on mount."""
        self.add_columns("ID", "Start", "End", "Duration", "Quality")
        self.cursor_type = "row"

    def update_sessions(self, sessions: Sequence[SessionRecord]) -> None:
        """Update the table with the given sessions.

        Args:
            sessions: Sessions in display order.
        """
        sessions = tuple(sessions)
        if sessions == self._sessions:
            return
        self._sessions = sessions
        self.clear()
        for record in sessions:
            self.add_row(*session_row(record), key=str(record.id))
