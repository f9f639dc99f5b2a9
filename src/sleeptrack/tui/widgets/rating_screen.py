"""Modal screen asking how well the user slept."""

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label

from sleeptrack.core.session import MAX_QUALITY, MIN_QUALITY
from sleeptrack.tui.format import quality_label


class RatingScreen(ModalScreen[int | None]):
    """Pick a 0-5 quality rating for a finished night.

    Dismisses with the chosen rating, or None when skipped.
    """

    BINDINGS = [("escape", "skip", "Skip")] + [
        (str(q), f"rate({q})", quality_label(q)) for q in range(MIN_QUALITY, MAX_QUALITY + 1)
    ]

    DEFAULT_CSS = """
    RatingScreen {
        align: center middle;
    }

    #rating-dialog {
        width: auto;
        height: auto;
        padding: 1 2;
        border: thick $accent;
        background: $surface;
    }

    #rating-buttons Button {
        margin: 0 1;
    }
    """

    def __init__(self, session_id: int) -> None:
        super().__init__()
        self.session_id = session_id

    def compose(self) -> ComposeResult:
        with Vertical(id="rating-dialog"):
            yield Label(f"How did you sleep? (night {self.session_id})")
            with Horizontal(id="rating-buttons"):
                for q in range(MIN_QUALITY, MAX_QUALITY + 1):
                    yield Button(f"{q} {quality_label(q)}", id=f"rate-{q}")
            yield Label("Press 0-5 to rate, Esc to skip")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id and event.button.id.startswith("rate-"):
            self.dismiss(int(event.button.id.removeprefix("rate-")))

    def action_rate(self, quality: int) -> None:
        self.dismiss(quality)

    def action_skip(self) -> None:
        self.dismiss(None)
