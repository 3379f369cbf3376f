"""Exceptions raised while collecting git status information."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class GitOverlayError(Exception):
    """Base class for every error raised by :mod:`gitoverlay`."""


class ResolveFailure(GitOverlayError):
    """Raised when a directory does not belong to any git repository."""

    def __init__(self, directory: Path) -> None:
        super().__init__(f"No git repository found above {directory}")
        self.directory = directory


class ProcessFailure(GitOverlayError):
    """Raised when ``git status`` cannot be launched or exits non-zero."""

    def __init__(self, repo_root: Path, returncode: Optional[int], reason: str = "") -> None:
        message = f"git status failed in {repo_root}"
        if returncode is not None:
            message += f" (exit code {returncode})"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.repo_root = repo_root
        self.returncode = returncode


class ParseError(GitOverlayError):
    """Raised when status output is parsed without a repository root."""


__all__ = ["GitOverlayError", "ResolveFailure", "ProcessFailure", "ParseError"]
