"""Status acquisition: resolve, cache, run git once, parse, aggregate, deliver."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from .aggregate import propagate_directory_status
from .cache import DEFAULT_CACHE_TIMEOUT_MS, StatusCache, monotonic_ms
from .coordinator import RequestCoordinator, Role, StatusCallback
from .dispatch import MainThreadDispatcher
from .errors import ParseError, ProcessFailure, ResolveFailure
from .git_runner import DEFAULT_GIT_EXECUTABLE, StatusRunner, run_git_status, start_git_status
from .parser import parse_status_output
from .repo import find_repo_root

logger = logging.getLogger(__name__)

_WAIT_POLL_SECONDS = 0.05


@dataclass(frozen=True)
class ServiceSettings:
    cache_timeout_ms: float = DEFAULT_CACHE_TIMEOUT_MS
    show_directory_status: bool = True
    git_executable: str = DEFAULT_GIT_EXECUTABLE
    timeout_seconds: Optional[float] = None

    @classmethod
    def from_config(cls, status_section: Mapping[str, Any]) -> "ServiceSettings":
        """Build settings from the ``[status]`` table of the config file."""
        timeout = status_section.get("git_timeout_seconds")
        return cls(
            cache_timeout_ms=float(status_section.get("cache_timeout_ms", DEFAULT_CACHE_TIMEOUT_MS)),
            show_directory_status=bool(status_section.get("show_directory_status", True)),
            git_executable=str(status_section.get("git_executable", DEFAULT_GIT_EXECUTABLE)),
            timeout_seconds=float(timeout) if timeout else None,
        )


class StatusService:
    """Single entry point used by the rendering layer to obtain status maps.

    One instance is meant to live for the whole process.  It owns the only
    :class:`StatusCache` and :class:`RequestCoordinator`, so every caller in
    the process shares cached results and in-flight ``git`` runs.

    Failures never escape as exceptions: a directory outside any repository
    or a failed ``git status`` both produce an empty map, and failed runs are
    not cached so the next request tries again.
    """

    def __init__(
        self,
        settings: Optional[ServiceSettings] = None,
        dispatcher: Optional[MainThreadDispatcher] = None,
        runner: Optional[StatusRunner] = None,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self.settings = settings or ServiceSettings()
        self.dispatcher = dispatcher or MainThreadDispatcher()
        self.cache = StatusCache(ttl_ms=self.settings.cache_timeout_ms, clock=clock)
        self.coordinator = RequestCoordinator()
        if runner is None:
            runner = partial(
                run_git_status,
                git_executable=self.settings.git_executable,
                timeout_seconds=self.settings.timeout_seconds,
            )
        self._runner = runner

    def resolve_root(self, directory: Path) -> Path:
        root = find_repo_root(directory)
        if root is None:
            raise ResolveFailure(directory)
        return root

    def build_status(self, output: str, root: Path) -> Dict[str, str]:
        """Parse ``output`` and add directory entries when enabled."""
        file_status = parse_status_output(output, root)
        return propagate_directory_status(
            file_status,
            root,
            enabled=self.settings.show_directory_status,
        )

    def acquire(self, directory: Path) -> Dict[str, str]:
        """Return the status map for ``directory``, running git if needed.

        Blocks the caller for the duration of ``git status`` on a cache miss.
        A cache hit returns the very same dict object that was cached.  When a
        background run for the same repository is already in flight, this
        call waits for it instead of starting another one, running the
        :attr:`dispatcher` meanwhile, so it must be made from the host loop.

        Raises:
            ParseError: only if the resolved root is unusable.
        """
        try:
            root = self.resolve_root(directory)
        except ResolveFailure as err:
            logger.debug("%s", err)
            return {}

        entry = self.cache.get(root)
        if entry is not None:
            logger.debug("Status cache hit for %s", root)
            return entry.status

        delivered: List[Dict[str, str]] = []
        if self.coordinator.try_begin(root, delivered.append) is Role.FOLLOWER:
            logger.debug("Waiting for in-flight git status for %s", root)
            while not delivered:
                self.dispatcher.run_pending(timeout=_WAIT_POLL_SECONDS)
            return delivered[0]

        try:
            output = self._runner(root)
        except ProcessFailure as err:
            logger.warning("%s", err)
            self.coordinator.complete(root, {})
            return {}

        try:
            status = self.build_status(output, root)
        except ParseError:
            self.coordinator.complete(root, {})
            raise
        self._publish(root, status)
        return status

    def acquire_async(self, directory: Path, on_result: StatusCallback) -> None:
        """Deliver the status map for ``directory`` to ``on_result`` later.

        ``on_result`` always runs from :attr:`dispatcher`, never from inside
        this call, even on a cache hit.  Concurrent requests for the same
        repository share one ``git status`` run and are answered in the order
        they were made.
        """
        try:
            root = self.resolve_root(directory)
        except ResolveFailure as err:
            logger.debug("%s", err)
            self.dispatcher.call_soon(on_result, {})
            return

        entry = self.cache.get(root)
        if entry is not None:
            logger.debug("Status cache hit for %s", root)
            self.dispatcher.call_soon(on_result, entry.status)
            return

        if self.coordinator.try_begin(root, on_result) is Role.FOLLOWER:
            return

        logger.debug("Starting background git status for %s", root)
        start_git_status(
            root,
            partial(self._post_completion, root),
            self._runner,
        )

    def invalidate_all(self) -> None:
        self.cache.invalidate_all()

    def refresh(self, directory: Path) -> Dict[str, str]:
        """Forget every cached map and synchronously acquire ``directory``."""
        self.invalidate_all()
        return self.acquire(directory)

    def _post_completion(self, root: Path, output: Optional[str]) -> None:
        # Runs on the worker thread; everything else happens on the host loop
        self.dispatcher.call_soon(self._finish, root, output)

    def _finish(self, root: Path, output: Optional[str]) -> None:
        if output is None:
            notified = self.coordinator.complete(root, {})
        else:
            try:
                status = self.build_status(output, root)
            except ParseError:
                logger.exception("Could not parse git status for %s", root)
                notified = self.coordinator.complete(root, {})
            else:
                notified = self._publish(root, status)
        logger.debug("Delivered status for %s to %d waiter(s)", root, notified)

    def _publish(self, root: Path, status: Dict[str, str]) -> int:
        # Only the leader of a root gets here, so this put is always the newest
        self.cache.put(root, status)
        return self.coordinator.complete(root, status)


__all__ = ["ServiceSettings", "StatusService"]
