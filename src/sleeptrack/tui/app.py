"""Main Textual app for the sleeptrack TUI."""

from pathlib import Path

from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.widgets import Button, Footer, Header, Static

from sleeptrack.core.coordinator import DerivedViewState, SleepTrackerCoordinator
from sleeptrack.core.store import acquire
from sleeptrack.tui.format import format_duration, format_timestamp
from sleeptrack.tui.widgets.rating_screen import RatingScreen
from sleeptrack.tui.widgets.session_table import SessionTable


class SleepTrackerApp(App):
    """sleeptrack TUI application.

    Start and stop nights, rate them, and browse the history. Every change
    goes through the coordinator; the screen only renders its state.
    """

    TITLE = "sleeptrack"
    BINDINGS = [
        ("s", "start", "Start"),
        ("x", "stop", "Stop"),
        ("c", "clear", "Clear"),
        ("j", "cursor_down", "Down"),
        ("k", "cursor_up", "Up"),
        ("q", "quit", "Quit"),
    ]
    CSS = """
    #controls {
        height: auto;
        padding: 0 1;
    }

    #controls Button {
        margin-right: 2;
    }

    SessionTable {
        height: 1fr;
    }

    #empty-message {
        width: 100%;
        height: 1fr;
        content-align: center middle;
        color: $text-muted;
    }
    """

    def __init__(self, data_dir: Path | None = None) -> None:
        super().__init__()
        self._data_dir = data_dir
        self._coordinator: SleepTrackerCoordinator | None = None
        self._unsubscribe_state = None

    @property
    def coordinator(self) -> SleepTrackerCoordinator | None:
        return self._coordinator

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        yield Header()
        with Horizontal(id="controls"):
            yield Button("Start", id="start", variant="success", disabled=True)
            yield Button("Stop", id="stop", variant="warning", disabled=True)
            yield Button("Clear", id="clear", variant="error", disabled=True)
        yield SessionTable()
        yield Static("No sleep data yet", id="empty-message")
        yield Footer()

    def on_mount(self) -> None:
        """Called when the app is mounted."""
        self._coordinator = SleepTrackerCoordinator(acquire(self._data_dir))
        self._unsubscribe_state = self._coordinator.subscribe(self.apply_state)
        self.apply_state(self._coordinator.state)
        self.run_worker(self._coordinator.initialize(), group="store")

    def on_unmount(self) -> None:
        """Called when the app is unmounted."""
        if self._unsubscribe_state:
            self._unsubscribe_state()
            self._unsubscribe_state = None
        if self._coordinator:
            self._coordinator.close()

    def apply_state(self, state: DerivedViewState) -> None:
        """Apply a new view state to the widgets."""
        self.query_one("#start", Button).disabled = not state.can_start
        self.query_one("#stop", Button).disabled = not state.can_stop
        self.query_one("#clear", Button).disabled = not state.can_clear

        table = self.query_one(SessionTable)
        empty_msg = self.query_one("#empty-message", Static)
        if state.all_sessions:
            table.update_sessions(state.all_sessions)
            table.display = True
            empty_msg.display = False
        else:
            table.update_sessions(())
            table.display = False
            empty_msg.display = True

        if state.open_session is not None:
            self.sub_title = f"sleeping since {format_timestamp(state.open_session.start_time)}"
        else:
            self.sub_title = f"{len(state.all_sessions)} nights"

        if (session_id := state.rate_session.consume()) is not None:
            self._ask_rating(session_id)
        if state.cleared.consume():
            self.notify("All sleep data has been cleared")
        if (message := state.failure.consume()) is not None:
            self.notify(message, severity="error")

    def _ask_rating(self, session_id: int) -> None:
        state = self._coordinator.state
        ended = next((s for s in state.all_sessions if s.id == session_id), None)
        if ended is not None:
            self.notify(f"Slept for {format_duration(ended.duration_ms)}")

        def on_rated(quality: int | None) -> None:
            if quality is not None and self._coordinator:
                self.run_worker(self._coordinator.rate(session_id, quality), group="store")

        self.push_screen(RatingScreen(session_id), on_rated)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Route the control buttons to their actions."""
        handlers = {
            "start": self.action_start,
            "stop": self.action_stop,
            "clear": self.action_clear,
        }
        if handler := handlers.get(event.button.id or ""):
            handler()

    def action_start(self) -> None:
        """Start tracking a night."""
        if self._coordinator and self._coordinator.state.can_start:
            self.run_worker(self._coordinator.start(), group="store")

    def action_stop(self) -> None:
        """Stop tracking the current night."""
        if self._coordinator:
            self.run_worker(self._coordinator.stop(), group="store")

    def action_clear(self) -> None:
        """Delete all tracked nights."""
        if self._coordinator and self._coordinator.state.can_clear:
            self.run_worker(self._coordinator.clear(), group="store")

    def action_cursor_down(self) -> None:
        self.query_one(SessionTable).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one(SessionTable).action_cursor_up()
