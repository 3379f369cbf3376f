"""Collapse concurrent status requests for one repository into one."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

StatusCallback = Callable[[Dict[str, str]], None]


class Role(Enum):
    LEADER = "leader"
    FOLLOWER = "follower"


class RequestCoordinator:
    """Track which roots have a ``git status`` run in flight.

    The first caller for a root becomes the leader and is expected to start
    the run and later call :meth:`complete`.  Everyone arriving before that is
    a follower whose callback is queued behind the leader's.  Waiters are
    notified in the order they registered.
    """

    def __init__(self) -> None:
        self._pending: Dict[Path, List[StatusCallback]] = {}
        self._lock = threading.Lock()

    def try_begin(self, root: Path, callback: StatusCallback) -> Role:
        with self._lock:
            waiters = self._pending.get(root)
            if waiters is None:
                self._pending[root] = [callback]
                return Role.LEADER
            waiters.append(callback)
            count = len(waiters)
        logger.debug("Joined pending status request for %s (%d waiting)", root, count)
        return Role.FOLLOWER

    def complete(self, root: Path, result: Dict[str, str]) -> int:
        """Deliver ``result`` to every waiter for ``root`` and forget the request.

        The waiter list is detached before any callback runs, so a callback
        that asks for the same root again starts a fresh request instead of
        joining the one being drained.  Returns the number of waiters notified.
        """
        with self._lock:
            waiters = self._pending.pop(root, [])

        for callback in waiters:
            try:
                callback(result)
            except Exception:
                logger.exception("Status callback for %s failed", root)
        return len(waiters)

    def is_pending(self, root: Path) -> bool:
        with self._lock:
            return root in self._pending


__all__ = ["Role", "RequestCoordinator", "StatusCallback"]
