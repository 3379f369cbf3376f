"""Locate the git working tree that contains a directory."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

GIT_MARKER = ".git"


def find_repo_root(start: Path, marker: str = GIT_MARKER) -> Optional[Path]:
    """Return the top of the working tree containing ``start``.

    ``start`` and each of its ancestors are checked for ``marker``.  Normal
    checkouts have a ``.git`` directory while worktrees and submodules have a
    ``.git`` file pointing elsewhere; both count.  The returned root is the
    directory holding the marker, never the marker itself.  ``None`` is
    returned when no marker is found or ``start`` cannot be resolved.
    """
    try:
        current = Path(start).expanduser().resolve()
    except (OSError, RuntimeError):
        return None

    for candidate in (current, *current.parents):
        marker_path = candidate / marker
        try:
            if marker_path.is_dir():
                return candidate
            if marker_path.is_file() and _is_gitdir_file(marker_path):
                return candidate
        except OSError:
            continue
    return None


def _is_gitdir_file(marker_path: Path) -> bool:
    try:
        head = marker_path.read_text(encoding="utf-8", errors="replace")[:256]
    except OSError:
        return False
    return head.startswith("gitdir:")


__all__ = ["GIT_MARKER", "find_repo_root"]
