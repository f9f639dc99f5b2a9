"""Run store operations off the event loop.

Operations run one at a time on a single background worker thread, in the
order they were submitted. Each result is handed back to the asyncio event
loop that submitted it, so awaiting code always resumes on the loop.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import Any

logger = logging.getLogger(__name__)


class Disposed(Exception):
    """Raised when work is requested from (or lost to) a closed dispatcher."""

    pass


class CommandDispatcher:
    """Bridge between the event loop and the storage worker thread."""

    def __init__(self, executor: ThreadPoolExecutor | None = None) -> None:
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="sleeptrack-io"
        )
        self._loop: asyncio.AbstractEventLoop | None = None
        self._pending: dict[Future, asyncio.Future] = {}
        self._mutation_lock: asyncio.Lock | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Number of submitted operations whose results haven't been delivered."""
        return len(self._pending)

    def submit(self, op: Callable[..., Any], *args: Any) -> asyncio.Future:
        """Schedule op(*args) on the worker thread.

        Must be called from the event loop. The returned future resolves on
        that loop once op has fully finished.

        Raises:
            Disposed: If the dispatcher has been closed.
        """
        if self._closed:
            raise Disposed("Dispatcher is closed")

        loop = asyncio.get_running_loop()
        if self._loop is None:
            self._loop = loop
        result = loop.create_future()
        work = self._executor.submit(op, *args)
        self._pending[work] = result
        work.add_done_callback(self._on_done)
        logger.debug("Submitted %s (%d pending)", getattr(op, "__name__", op), len(self._pending))
        return result

    def _on_done(self, work: Future) -> None:
        # Runs on the worker thread, or on the loop when close() cancels work.
        if self._closed:
            return
        try:
            self._loop.call_soon_threadsafe(self._deliver, work)
        except RuntimeError:
            # Loop already closed; nobody is left to receive the result
            logger.debug("Event loop closed, dropping result")

    def _deliver(self, work: Future) -> None:
        result = self._pending.pop(work, None)
        if result is None or result.done() or self._closed:
            return
        if work.cancelled():
            result.set_exception(Disposed("Operation was cancelled"))
            return
        exc = work.exception()
        if exc is not None:
            result.set_exception(exc)
        else:
            result.set_result(work.result())

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator[None]:
        """Hold the session-mutation lock for a multi-step operation."""
        if self._mutation_lock is None:
            self._mutation_lock = asyncio.Lock()
        async with self._mutation_lock:
            yield

    def close(self) -> None:
        """Cancel queued work and stop delivering results.

        Operations already running are left to finish, but their results are
        discarded. Every outstanding future fails with Disposed.
        """
        if self._closed:
            return
        self._closed = True

        pending = list(self._pending.items())
        self._pending.clear()
        cancelled = 0
        for work, result in pending:
            if work.cancel():
                cancelled += 1
            if not result.done():
                result.set_exception(Disposed("Dispatcher closed"))
        logger.debug(
            "Dispatcher closed: %d queued cancelled, %d in flight discarded",
            cancelled,
            len(pending) - cancelled,
        )

        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
