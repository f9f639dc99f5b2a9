"""Tests for the sleeptrack TUI."""

import pytest
from textual.widgets import Button

from sleeptrack.core.coordinator import DerivedViewState
from sleeptrack.core.session import SessionRecord
from sleeptrack.core.store import acquire
from sleeptrack.tui.app import SleepTrackerApp
from sleeptrack.tui.widgets.rating_screen import RatingScreen
from sleeptrack.tui.widgets.session_table import SessionTable
from tests.helpers import closed_night


async def settle(app, pilot) -> None:
    """Wait for store workers to finish and the screen to update."""
    await app.workers.wait_for_complete()
    await pilot.pause()


@pytest.mark.asyncio
async def test_app_launches(mock_data_dir):
    """Test that the app launches without error."""
    app = SleepTrackerApp()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        assert app.is_running


@pytest.mark.asyncio
async def test_app_shows_empty_message(mock_data_dir):
    """Test that an empty store hides the table and only allows start."""
    app = SleepTrackerApp()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        assert app.query_one(SessionTable).display is False
        assert app.query_one("#start", Button).disabled is False
        assert app.query_one("#stop", Button).disabled is True
        assert app.query_one("#clear", Button).disabled is True
        assert app.sub_title == "0 nights"


@pytest.mark.asyncio
async def test_app_displays_sessions(mock_data_dir):
    """Test that recorded nights are listed newest first."""
    store = acquire()
    store.insert(closed_night(1_700_000_000_000, quality=4))
    store.insert(closed_night(1_700_100_000_000))

    app = SleepTrackerApp()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        table = app.query_one(SessionTable)
        assert table.display is True
        assert table.row_count == 2
        assert table.get_row_at(0)[0] == "2"
        assert table.get_row_at(1)[4] == "Pretty good"
        assert app.query_one("#clear", Button).disabled is False


@pytest.mark.asyncio
async def test_app_restores_open_night(mock_data_dir):
    """Test a night left open is shown as in progress."""
    acquire().insert(SessionRecord.begin(1_700_000_000_000))

    app = SleepTrackerApp()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        assert app.query_one("#start", Button).disabled is True
        assert app.query_one("#stop", Button).disabled is False
        assert app.query_one(SessionTable).get_row_at(0)[2] == "(sleeping...)"
        assert app.sub_title.startswith("sleeping since")


@pytest.mark.asyncio
async def test_start_disabled_until_loaded(mock_data_dir):
    """Test start stays off while the store has not been read."""
    acquire().insert(SessionRecord.begin(1_700_000_000_000))

    app = SleepTrackerApp()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        app.apply_state(DerivedViewState())
        await pilot.pause()
        assert app.query_one("#start", Button).disabled is True

        await pilot.press("s")
        await settle(app, pilot)

        assert acquire().count() == 1


@pytest.mark.asyncio
async def test_start_key_opens_night(mock_data_dir):
    """Test pressing s starts tracking."""
    app = SleepTrackerApp()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        await pilot.press("s")
        await settle(app, pilot)

        assert app.query_one(SessionTable).row_count == 1
        assert app.query_one("#start", Button).disabled is True
        assert app.query_one("#stop", Button).disabled is False
        assert acquire().get_latest().is_open


@pytest.mark.asyncio
async def test_stop_asks_for_rating(mock_data_dir):
    """Test stopping a night opens the rating screen and saves the rating."""
    night_id = acquire().insert(SessionRecord.begin(1_700_000_000_000))

    app = SleepTrackerApp()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        await pilot.press("x")
        await settle(app, pilot)

        assert isinstance(app.screen, RatingScreen)
        assert app.screen.session_id == night_id

        await pilot.press("4")
        await settle(app, pilot)

        assert not isinstance(app.screen, RatingScreen)
        assert acquire().get_by_id(night_id).quality == 4
        assert app.query_one(SessionTable).get_row_at(0)[4] == "Pretty good"


@pytest.mark.asyncio
async def test_rating_can_be_skipped(mock_data_dir):
    """Test escape closes the rating screen without rating."""
    night_id = acquire().insert(SessionRecord.begin(1_700_000_000_000))

    app = SleepTrackerApp()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        await pilot.press("x")
        await settle(app, pilot)
        await pilot.press("escape")
        await settle(app, pilot)

        assert not isinstance(app.screen, RatingScreen)
        assert not acquire().get_by_id(night_id).is_rated


@pytest.mark.asyncio
async def test_clear_key_empties_table(mock_data_dir):
    """Test pressing c deletes all nights."""
    store = acquire()
    store.insert(closed_night(1_700_000_000_000))

    app = SleepTrackerApp()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        await pilot.press("c")
        await settle(app, pilot)

        assert app.query_one(SessionTable).display is False
        assert app.query_one("#clear", Button).disabled is True
        assert store.count() == 0


@pytest.mark.asyncio
async def test_app_quit_keeps_sessions(mock_data_dir):
    """Test that quitting the app keeps recorded nights."""
    store = acquire()
    store.insert(closed_night(1_700_000_000_000))

    app = SleepTrackerApp()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        await pilot.press("q")

    assert store.count() == 1
    assert app.coordinator.closed
