"""Derive directory status from the status of the files below it."""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Dict, Union

from .parser import normalize_root
from .status_codes import status_priority


def directory_key(path: str) -> str:
    """Return ``path`` with exactly one trailing ``/``."""
    return path.rstrip("/") + "/"


def propagate_directory_status(
    file_status: Dict[str, str],
    repo_root: Union[str, Path],
    enabled: bool = True,
) -> Dict[str, str]:
    """Mark every ancestor directory with the strongest status below it.

    Directories are walked from each file's parent up to, but never including,
    ``repo_root``.  A directory keeps the first code it saw unless a code with
    a strictly higher priority shows up, so which of two equally ranked codes
    (renamed vs deleted) wins depends on the iteration order of
    ``file_status`` and is not guaranteed.

    File entries are authoritative: a derived directory key never replaces a
    key already present in ``file_status``.  When ``enabled`` is false the
    input mapping is returned unchanged.
    """
    if not enabled:
        return file_status

    root_text = normalize_root(repo_root)
    root_prefix = root_text + "/"

    dir_status: Dict[str, str] = {}
    for file_path, status_code in file_status.items():
        new_priority = status_priority(status_code)
        parent = posixpath.dirname(file_path.rstrip("/"))

        while parent.startswith(root_prefix) and parent.rstrip("/") != root_text:
            dir_path = directory_key(parent)
            if new_priority > status_priority(dir_status.get(dir_path)):
                dir_status[dir_path] = status_code
            parent = posixpath.dirname(parent)

    merged = dict(dir_status)
    merged.update(file_status)
    return merged


__all__ = ["directory_key", "propagate_directory_status"]
