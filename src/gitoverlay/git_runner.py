"""Minimal wrappers around the ``git`` command line client."""

from __future__ import annotations

import logging
import subprocess
import threading
from pathlib import Path
from typing import Callable, Optional

from .errors import ProcessFailure

logger = logging.getLogger(__name__)

DEFAULT_GIT_EXECUTABLE = "git"


def build_status_command(repo_root: Path, git_executable: str = DEFAULT_GIT_EXECUTABLE) -> list[str]:
    return [git_executable, "-C", str(repo_root), "status", "--porcelain", "--untracked-files=all"]


def run_git_status(
    repo_root: Path,
    git_executable: str = DEFAULT_GIT_EXECUTABLE,
    timeout_seconds: Optional[float] = None,
) -> str:
    """Return the porcelain status output for ``repo_root``.

    Standard error is discarded.  A non-zero exit code, a missing ``git``
    binary or an exceeded ``timeout_seconds`` all raise
    :class:`~gitoverlay.errors.ProcessFailure`.
    """
    command = build_status_command(repo_root, git_executable)
    logger.debug("Running %s", " ".join(command))
    try:
        result = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="surrogateescape",
            check=False,
            timeout=timeout_seconds,
        )
    except subprocess.TimeoutExpired as err:
        raise ProcessFailure(repo_root, None, f"timed out after {err.timeout}s") from err
    except OSError as err:
        raise ProcessFailure(repo_root, None, str(err)) from err
    if result.returncode != 0:
        raise ProcessFailure(repo_root, result.returncode)
    return result.stdout


# Signature shared by run_git_status and test doubles
StatusRunner = Callable[[Path], str]
# Receives the output, or None when the run failed
CompletionCallback = Callable[[Optional[str]], None]


def start_git_status(
    repo_root: Path,
    on_done: CompletionCallback,
    runner: StatusRunner,
) -> threading.Thread:
    """Run ``runner(repo_root)`` on a daemon thread.

    ``on_done`` is called exactly once from that thread, with the output or
    with ``None`` when the runner raised :class:`ProcessFailure`.  Callers that
    need the result on their own thread should forward it through a
    :class:`~gitoverlay.dispatch.MainThreadDispatcher`.
    """

    def _worker() -> None:
        try:
            output: Optional[str] = runner(repo_root)
        except ProcessFailure as err:
            logger.warning("%s", err)
            output = None
        except Exception:
            # Waiters must still hear back or the root stays pending forever
            logger.exception("git status runner crashed for %s", repo_root)
            output = None
        on_done(output)

    worker = threading.Thread(
        target=_worker,
        name=f"gitoverlay-status-{repo_root.name or 'root'}",
        daemon=True,
    )
    worker.start()
    return worker


__all__ = [
    "DEFAULT_GIT_EXECUTABLE",
    "CompletionCallback",
    "StatusRunner",
    "build_status_command",
    "run_git_status",
    "start_git_status",
]
