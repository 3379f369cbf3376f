"""A cooperative main-thread scheduler and a debouncer built on top of it.

Background work never touches shared state directly.  It hands a callable to
:meth:`MainThreadDispatcher.call_soon` and the host loop runs it later via
:meth:`MainThreadDispatcher.run_pending`, one callback at a time.
"""

from __future__ import annotations

import logging
import threading
from queue import Empty, Queue
from typing import Any, Callable, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_DELAY_MS = 200

_Task = Tuple[Callable[..., Any], Tuple[Any, ...]]


class MainThreadDispatcher:
    """Queue of callbacks drained by the host's own loop."""

    def __init__(self) -> None:
        self._tasks: Queue[_Task] = Queue()

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        """Schedule ``callback(*args)``; safe to call from any thread."""
        self._tasks.put((callback, args))

    def run_pending(self, timeout: Optional[float] = None) -> int:
        """Run every queued callback and return how many ran.

        With a ``timeout`` the call first waits up to that many seconds for
        at least one callback to arrive.  Callbacks queued while draining are
        run in the same pass.
        """
        ran = 0
        if timeout is not None:
            try:
                task = self._tasks.get(timeout=timeout)
            except Empty:
                return 0
            self._run(task)
            ran += 1
        while True:
            try:
                task = self._tasks.get_nowait()
            except Empty:
                return ran
            self._run(task)
            ran += 1

    def has_pending(self) -> bool:
        return not self._tasks.empty()

    @staticmethod
    def _run(task: _Task) -> None:
        callback, args = task
        try:
            callback(*args)
        except Exception:
            logger.exception("Scheduled callback %r failed", callback)


class Debouncer:
    """Coalesce bursts of triggers into one call after a quiet period.

    Every :meth:`trigger` restarts the timer.  When it finally expires the
    most recent callable is posted to ``dispatcher`` rather than run on the
    timer thread.
    """

    def __init__(
        self,
        dispatcher: MainThreadDispatcher,
        delay_ms: float = DEFAULT_DEBOUNCE_DELAY_MS,
    ) -> None:
        self.delay_ms = delay_ms
        self._dispatcher = dispatcher
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    def trigger(self, callback: Callable[[], Any]) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self.delay_ms / 1000.0, self._fire, args=(callback,))
            timer.daemon = True
            self._timer = timer
        timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    @property
    def is_armed(self) -> bool:
        with self._lock:
            return self._timer is not None

    def _fire(self, callback: Callable[[], Any]) -> None:
        with self._lock:
            if self._timer is not threading.current_thread():
                # Cancelled or superseded after this timer had already fired
                return
            self._timer = None
        self._dispatcher.call_soon(callback)


__all__ = ["DEFAULT_DEBOUNCE_DELAY_MS", "MainThreadDispatcher", "Debouncer"]
