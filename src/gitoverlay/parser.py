"""Turn ``git status --porcelain`` output into a path to status map."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Dict, Union

from .errors import ParseError

RENAME_SEPARATOR = " -> "

_ESCAPES = {
    "a": b"\a",
    "b": b"\b",
    "f": b"\f",
    "n": b"\n",
    "r": b"\r",
    "t": b"\t",
    "v": b"\v",
    '"': b'"',
    "\\": b"\\",
}


def _unquote(path_text: str) -> str:
    """Undo git's C-style quoting of paths with unusual characters.

    Git wraps such paths in double quotes and escapes bytes outside printable
    ASCII as octal sequences, e.g. ``"caf\\303\\251.txt"``.
    """
    if len(path_text) < 2 or not (path_text.startswith('"') and path_text.endswith('"')):
        return path_text

    body = path_text[1:-1]
    out = bytearray()
    index = 0
    while index < len(body):
        char = body[index]
        if char != "\\" or index + 1 >= len(body):
            out.extend(char.encode("utf-8", errors="surrogateescape"))
            index += 1
            continue
        following = body[index + 1]
        octal = body[index + 1 : index + 4]
        if len(octal) == 3 and all(c in "01234567" for c in octal):
            out.append(int(octal, 8) & 0xFF)
            index += 4
        elif following in _ESCAPES:
            out.extend(_ESCAPES[following])
            index += 2
        else:
            out.extend(following.encode("utf-8", errors="surrogateescape"))
            index += 2
    return out.decode("utf-8", errors="surrogateescape")


def normalize_root(repo_root: Union[str, Path, None]) -> str:
    """Return ``repo_root`` as text without trailing separators."""
    if repo_root is None:
        raise ParseError("Cannot parse git status without a repository root")
    root_text = str(repo_root)
    if not root_text:
        raise ParseError("Cannot parse git status without a repository root")
    # "/" strips to "" so joining with "/" still yields "/<path>"
    return root_text.rstrip("/")


def join_repo_path(root_text: str, relative: str) -> str:
    """Join an already normalized root and a relative path with one ``/``."""
    return f"{root_text}/{relative.lstrip('/')}"


def parse_status_output(output: str, repo_root: Union[str, Path, None]) -> Dict[str, str]:
    """Parse porcelain v1 output into ``{absolute_path: status_code}``.

    Only file entries are produced; directory entries are derived later by
    :func:`gitoverlay.aggregate.propagate_directory_status`.  Lines that are
    too short to contain a code and a path are skipped, as are paths that
    would resolve outside ``repo_root``.

    Raises:
        ParseError: if ``repo_root`` is empty or ``None``.
    """
    root_text = normalize_root(repo_root)

    status: Dict[str, str] = {}
    for line in output.splitlines():
        if len(line) < 3:
            continue
        status_code = line[:2]
        path_text = line[3:]
        if not path_text:
            continue

        # Renames are reported as "old -> new"; only the new name exists on disk
        if status_code[0] == "R" and RENAME_SEPARATOR in path_text:
            path_text = path_text.split(RENAME_SEPARATOR, 1)[1]

        path_text = _unquote(path_text)
        if path_text.startswith("./"):
            path_text = path_text[2:]
        # Directory entries are always derived, never taken from git
        if not path_text or path_text.endswith("/"):
            continue
        if ".." in PurePosixPath(path_text).parts:
            continue

        status[join_repo_path(root_text, path_text)] = status_code
    return status


__all__ = ["RENAME_SEPARATOR", "normalize_root", "parse_status_output", "join_repo_path"]
