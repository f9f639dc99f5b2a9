"""Reactive view state for the sleep tracker.

The coordinator turns user intents (start, stop, rate, clear) into store
operations run through the dispatcher, then rebuilds DerivedViewState from
a fresh read of the store and pushes it to subscribers. Each operation
produces at most one notification.

Lifecycle of the current night:

    no open session --start--> open session --stop--> no open session
                                                        |
                                                      rate (once)
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Generic, TypeVar

from sleeptrack.core.dispatcher import CommandDispatcher, Disposed
from sleeptrack.core.session import MAX_QUALITY, MIN_QUALITY, SessionRecord, now_millis
from sleeptrack.core.store import NotFound, SessionStore, StorageFailure, acquire

logger = logging.getLogger(__name__)

T = TypeVar("T")

RATE_NOT_FOUND = "not found"
RATE_STILL_OPEN = "still open"
RATE_ALREADY_RATED = "already rated"
RATE_FAILED = "failed"
RATE_CLOSED = "closed"


class OneShot(Generic[T]):
    """A signal value that can be consumed exactly once."""

    def __init__(self, value: T | None = None) -> None:
        self._value = value

    @property
    def pending(self) -> bool:
        return self._value is not None

    def consume(self) -> T | None:
        """Return the value and empty the holder."""
        value, self._value = self._value, None
        return value

    def __repr__(self) -> str:
        return f"OneShot({self._value!r})"


@dataclass(frozen=True)
class DerivedViewState:
    """UI-facing values computed from the store. Never persisted."""

    open_session: SessionRecord | None = None
    all_sessions: tuple[SessionRecord, ...] = ()
    loaded: bool = False
    rate_session: OneShot[int] = field(default_factory=OneShot, compare=False)
    cleared: OneShot[bool] = field(default_factory=OneShot, compare=False)
    failure: OneShot[str] = field(default_factory=OneShot, compare=False)

    @property
    def can_start(self) -> bool:
        # Nothing can start until the store has been read once
        return self.loaded and self.open_session is None

    @property
    def can_stop(self) -> bool:
        return self.open_session is not None

    @property
    def can_clear(self) -> bool:
        return len(self.all_sessions) > 0

    @property
    def has_signal(self) -> bool:
        return self.rate_session.pending or self.cleared.pending or self.failure.pending


Subscriber = Callable[[DerivedViewState], None]


class SleepTrackerCoordinator:
    """Holds DerivedViewState and notifies subscribers when it changes.

    All methods must be called from the event loop that owns the
    coordinator.
    """

    def __init__(
        self,
        store: SessionStore,
        dispatcher: CommandDispatcher | None = None,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher or CommandDispatcher()
        self._clock = clock
        self._state = DerivedViewState()
        self._subscribers: list[Subscriber] = []
        self._closed = False

    @property
    def state(self) -> DerivedViewState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register callback for state changes.

        Returns:
            A function that removes the subscription.
        """
        if callback not in self._subscribers:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _load_open_session(self) -> SessionRecord | None:
        # Runs on the worker thread
        latest = self._store.get_latest()
        if latest is not None and not latest.is_open:
            return None
        return latest

    def _disposed(self, action: str) -> bool:
        if self._closed:
            logger.debug("Ignoring %s on a closed coordinator", action)
        return self._closed

    async def initialize(self) -> None:
        """Load the current open session (if any) and the session list."""
        if self._disposed("initialize"):
            return
        try:
            async with self._dispatcher.exclusive():
                open_session = await self._dispatcher.submit(self._load_open_session)
                sessions = await self._dispatcher.submit(self._store.get_all_descending)
                self._publish(open_session, sessions)
        except StorageFailure as e:
            self._fail("initialize", e)
        except Disposed:
            logger.debug("initialize abandoned: dispatcher closed")

    async def start(self) -> None:
        """Start tracking a new night.

        Does nothing when a night is already open, whether cached or only
        found in the store.
        """
        if self._disposed("start"):
            return
        try:
            async with self._dispatcher.exclusive():
                if self._state.open_session is not None:
                    logger.warning(
                        "start ignored: session %s is still open", self._state.open_session.id
                    )
                    return
                if not self._state.loaded:
                    existing = await self._dispatcher.submit(self._load_open_session)
                    if existing is not None:
                        logger.warning("start ignored: session %s is still open", existing.id)
                        sessions = await self._dispatcher.submit(self._store.get_all_descending)
                        self._publish(existing, sessions)
                        return
                record = SessionRecord.begin(self._clock())
                new_id = await self._dispatcher.submit(self._store.insert, record)
                open_session = await self._dispatcher.submit(self._load_open_session)
                sessions = await self._dispatcher.submit(self._store.get_all_descending)
                logger.info("Started session %s", new_id)
                self._publish(open_session, sessions)
        except StorageFailure as e:
            self._fail("start", e)
        except Disposed:
            logger.debug("start abandoned: dispatcher closed")

    async def stop(self) -> None:
        """Stop tracking the open night and ask for a rating.

        Does nothing when no session is open.
        """
        if self._disposed("stop"):
            return
        try:
            async with self._dispatcher.exclusive():
                open_session = self._state.open_session
                if open_session is None:
                    logger.debug("stop ignored: no open session")
                    return
                # The wall clock may have stepped back since the night started
                end_time = max(self._clock(), open_session.start_time + 1)
                ended = open_session.ended(end_time)
                await self._dispatcher.submit(self._store.update, ended)
                sessions = await self._dispatcher.submit(self._store.get_all_descending)
                logger.info("Stopped session %s", ended.id)
                self._publish(None, sessions, rate_session=ended.id)
        except NotFound as e:
            logger.error("stop dropped: %s", e)
        except StorageFailure as e:
            self._fail("stop", e)
        except Disposed:
            logger.debug("stop abandoned: dispatcher closed")

    async def rate(self, session_id: int, quality: int) -> str | None:
        """Record a quality rating for a finished, unrated night.

        Returns:
            None once the rating is stored, otherwise why it was dropped.

        Raises:
            ValueError: If quality is outside 0..5.
        """
        if not MIN_QUALITY <= quality <= MAX_QUALITY:
            raise ValueError(
                f"Invalid quality: {quality}. Must be between {MIN_QUALITY} and {MAX_QUALITY}"
            )
        if self._disposed("rate"):
            return RATE_CLOSED
        try:
            async with self._dispatcher.exclusive():
                record = await self._dispatcher.submit(self._store.get_by_id, session_id)
                if record is None:
                    logger.error("rate dropped: session %s not found", session_id)
                    return RATE_NOT_FOUND
                if record.is_open or record.is_rated:
                    reason = RATE_STILL_OPEN if record.is_open else RATE_ALREADY_RATED
                    logger.warning("rate ignored: session %s is %s", session_id, reason)
                    return reason
                await self._dispatcher.submit(self._store.update, record.rated(quality))
                sessions = await self._dispatcher.submit(self._store.get_all_descending)
                logger.info("Rated session %s as %d", session_id, quality)
                self._publish(self._state.open_session, sessions)
                return None
        except NotFound as e:
            logger.error("rate dropped: %s", e)
            return RATE_NOT_FOUND
        except StorageFailure as e:
            self._fail("rate", e)
            return RATE_FAILED
        except Disposed:
            logger.debug("rate abandoned: dispatcher closed")
            return RATE_CLOSED

    async def clear(self) -> None:
        """Delete every session."""
        if self._disposed("clear"):
            return
        try:
            async with self._dispatcher.exclusive():
                await self._dispatcher.submit(self._store.clear)
                sessions = await self._dispatcher.submit(self._store.get_all_descending)
                self._publish(None, sessions, cleared=True)
        except StorageFailure as e:
            self._fail("clear", e)
        except Disposed:
            logger.debug("clear abandoned: dispatcher closed")

    def _publish(
        self,
        open_session: SessionRecord | None,
        sessions: Sequence[SessionRecord],
        rate_session: int | None = None,
        cleared: bool = False,
        failure: str | None = None,
        loaded: bool = True,
    ) -> None:
        """Replace the state from a fresh read and notify subscribers once."""
        if self._closed:
            return
        new_state = DerivedViewState(
            open_session=open_session,
            all_sessions=tuple(sessions),
            loaded=loaded,
            rate_session=OneShot(rate_session),
            cleared=OneShot(True if cleared else None),
            failure=OneShot(failure),
        )
        if new_state == self._state and not new_state.has_signal:
            return
        self._state = new_state
        for callback in list(self._subscribers):
            try:
                callback(new_state)
            except Exception:
                logger.exception("Subscriber %r failed", callback)
        # Signals are delivered once; later readers see empty holders
        if new_state.has_signal:
            self._state = replace(
                new_state, rate_session=OneShot(), cleared=OneShot(), failure=OneShot()
            )

    def _fail(self, action: str, error: StorageFailure) -> None:
        """Surface a storage failure without touching the derived values."""
        logger.error("%s failed: %s", action, error)
        self._publish(
            self._state.open_session,
            self._state.all_sessions,
            failure=f"Could not {action}: {error}",
            loaded=self._state.loaded,
        )

    def close(self) -> None:
        """Stop notifying subscribers and cancel outstanding store work."""
        if self._closed:
            return
        self._closed = True
        self._subscribers.clear()
        self._dispatcher.close()
        logger.debug("Coordinator closed")


@dataclass
class Outcome:
    """What a single coordinator action produced."""

    state: DerivedViewState
    rate_session: int | None = None
    cleared: bool = False
    failure: str | None = None
    result: Any = None


def run_action(
    action: Callable[[SleepTrackerCoordinator], Awaitable[Any]],
    context: Path | None = None,
) -> Outcome:
    """Run one coordinator action in a fresh event loop.

    Args:
        action: Coroutine function taking the coordinator.
        context: Application data directory passed to acquire().

    Returns:
        The final state, any signals the action emitted and its return value.
    """

    async def _run() -> Outcome:
        coordinator = SleepTrackerCoordinator(acquire(context))
        outcome = Outcome(state=coordinator.state)

        def on_change(state: DerivedViewState) -> None:
            if (session_id := state.rate_session.consume()) is not None:
                outcome.rate_session = session_id
            if state.cleared.consume():
                outcome.cleared = True
            if (message := state.failure.consume()) is not None:
                outcome.failure = message

        unsubscribe = coordinator.subscribe(on_change)
        try:
            await coordinator.initialize()
            outcome.result = await action(coordinator)
            outcome.state = coordinator.state
        finally:
            unsubscribe()
            coordinator.close()
        return outcome

    return asyncio.run(_run())
