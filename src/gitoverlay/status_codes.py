"""Classification of two-character ``git status --porcelain`` codes.

Each code is reduced to a :class:`StatusCategory` whose priority decides which
status a directory inherits from its descendants.  A second, finer lookup
(:func:`display_status`) keeps the staged/unstaged distinction that only
matters when drawing a single entry.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

CONFLICT_CODES = frozenset({"UU", "AA", "DD", "AU", "UA", "DU", "UD"})
PARTIALLY_STAGED_CODES = frozenset({"MM", "MD", "AM", "AD"})
UNTRACKED_CODE = "??"


class StatusCategory(Enum):
    CONFLICT = "conflict"
    PARTIALLY_STAGED = "partially_staged"
    MODIFIED = "modified"
    ADDED = "added"
    RENAMED = "renamed"
    DELETED = "deleted"
    UNTRACKED = "untracked"
    NONE = "none"

    @property
    def priority(self) -> int:
        return _CATEGORY_PRIORITY[self]


# Renamed and deleted share a rank; ties are resolved in propagate_directory_status
_CATEGORY_PRIORITY: Dict[StatusCategory, int] = {
    StatusCategory.CONFLICT: 6,
    StatusCategory.PARTIALLY_STAGED: 5,
    StatusCategory.MODIFIED: 4,
    StatusCategory.ADDED: 3,
    StatusCategory.RENAMED: 2,
    StatusCategory.DELETED: 2,
    StatusCategory.UNTRACKED: 1,
    StatusCategory.NONE: 0,
}


def classify(status_code: Optional[str]) -> StatusCategory:
    """Return the category for ``status_code`` (``None`` means no status)."""
    if not status_code:
        return StatusCategory.NONE

    first_char = status_code[:1]
    second_char = status_code[1:2]

    if status_code in CONFLICT_CODES:
        return StatusCategory.CONFLICT
    if status_code in PARTIALLY_STAGED_CODES:
        return StatusCategory.PARTIALLY_STAGED
    if first_char == "M" or second_char == "M":
        return StatusCategory.MODIFIED
    if first_char == "A":
        return StatusCategory.ADDED
    if first_char == "R":
        return StatusCategory.RENAMED
    if first_char == "D" or second_char == "D":
        return StatusCategory.DELETED
    if status_code == UNTRACKED_CODE:
        return StatusCategory.UNTRACKED
    return StatusCategory.NONE


def status_priority(status_code: Optional[str]) -> int:
    """Shortcut for ``classify(status_code).priority``."""
    return classify(status_code).priority


class DisplayStatus(Enum):
    """What a single listing entry looks like, staged and unstaged kept apart."""

    CONFLICT = "conflict"
    PARTIALLY_STAGED = "partially_staged"
    UNTRACKED = "untracked"
    ADDED = "added"
    STAGED_MODIFIED = "staged_modified"
    UNSTAGED_MODIFIED = "unstaged_modified"
    RENAMED = "renamed"
    STAGED_DELETED = "staged_deleted"
    UNSTAGED_DELETED = "unstaged_deleted"

    @property
    def symbol_key(self) -> str:
        return _DISPLAY_SYMBOL_KEYS[self]

    @property
    def highlight(self) -> str:
        return _DISPLAY_HIGHLIGHTS[self]


_DISPLAY_SYMBOL_KEYS: Dict[DisplayStatus, str] = {
    DisplayStatus.CONFLICT: "conflict",
    DisplayStatus.PARTIALLY_STAGED: "partially_staged",
    DisplayStatus.UNTRACKED: "untracked",
    DisplayStatus.ADDED: "added",
    DisplayStatus.STAGED_MODIFIED: "staged",
    DisplayStatus.UNSTAGED_MODIFIED: "unstaged",
    DisplayStatus.RENAMED: "renamed",
    DisplayStatus.STAGED_DELETED: "staged",
    DisplayStatus.UNSTAGED_DELETED: "unstaged",
}

_DISPLAY_HIGHLIGHTS: Dict[DisplayStatus, str] = {
    DisplayStatus.CONFLICT: "GitConflict",
    DisplayStatus.PARTIALLY_STAGED: "GitPartiallyStaged",
    DisplayStatus.UNTRACKED: "GitUntracked",
    DisplayStatus.ADDED: "GitAdded",
    DisplayStatus.STAGED_MODIFIED: "GitStagedModified",
    DisplayStatus.UNSTAGED_MODIFIED: "GitUnstagedModified",
    DisplayStatus.RENAMED: "GitRenamed",
    DisplayStatus.STAGED_DELETED: "GitStagedDeleted",
    DisplayStatus.UNSTAGED_DELETED: "GitUnstagedDeleted",
}


def display_status(status_code: Optional[str]) -> Optional[DisplayStatus]:
    """Pick how an entry with ``status_code`` should be drawn.

    Unlike :func:`classify` the column of the change matters here: ``"M "`` is
    a staged modification while ``" M"`` is still only in the working tree.
    Codes that have no visual treatment (``"  "``, ``"!!"``, ``"C "``...)
    return ``None``.
    """
    if not status_code:
        return None

    first_char = status_code[:1]
    second_char = status_code[1:2]

    if status_code in CONFLICT_CODES:
        return DisplayStatus.CONFLICT
    if status_code in PARTIALLY_STAGED_CODES:
        return DisplayStatus.PARTIALLY_STAGED
    if status_code == UNTRACKED_CODE:
        return DisplayStatus.UNTRACKED
    if first_char == "A" and second_char == " ":
        return DisplayStatus.ADDED
    if first_char == "M" and second_char == " ":
        return DisplayStatus.STAGED_MODIFIED
    if first_char == " " and second_char == "M":
        return DisplayStatus.UNSTAGED_MODIFIED
    if first_char == "R":
        return DisplayStatus.RENAMED
    if first_char == "D" and second_char == " ":
        return DisplayStatus.STAGED_DELETED
    if first_char == " " and second_char == "D":
        return DisplayStatus.UNSTAGED_DELETED
    return None


__all__ = [
    "CONFLICT_CODES",
    "PARTIALLY_STAGED_CODES",
    "UNTRACKED_CODE",
    "StatusCategory",
    "DisplayStatus",
    "classify",
    "status_priority",
    "display_status",
]
