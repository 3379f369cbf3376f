"""Glue between browser events and the status service.

The browser tells an :class:`OverlayController` what happened (a directory
was entered, a file was written, the window regained focus, an external git
tool exited) and the controller decides whether to ask for status now,
after a debounce, or after dropping the cache.  Results are handed to an
:class:`OverlayListener`, typically the pane that draws the listing.
"""

from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol

from .dispatch import DEFAULT_DEBOUNCE_DELAY_MS, Debouncer
from .service import StatusService

logger = logging.getLogger(__name__)

# Events published by other git integrations that mean the index changed
VCS_EVENTS = frozenset({"FugitiveChanged", "GitSignsUpdate", "LazyGitClosed"})


class OverlayListener(Protocol):
    def show(self, directory: Path, status: Dict[str, str]) -> None:
        ...

    def clear(self) -> None:
        ...


class OverlayController:
    def __init__(
        self,
        service: StatusService,
        listener: OverlayListener,
        debounce_delay_ms: float = DEFAULT_DEBOUNCE_DELAY_MS,
        enabled: bool = True,
    ) -> None:
        self.service = service
        self.listener = listener
        self.enabled = enabled
        self.current_directory: Optional[Path] = None
        self._debouncer = Debouncer(service.dispatcher, debounce_delay_ms)

    @classmethod
    def from_config(
        cls,
        service: StatusService,
        listener: OverlayListener,
        status_section: Mapping[str, Any],
    ) -> "OverlayController":
        """Build a controller from the ``[status]`` table of the config file."""
        return cls(
            service,
            listener,
            debounce_delay_ms=float(status_section.get("debounce_delay_ms", DEFAULT_DEBOUNCE_DELAY_MS)),
            enabled=bool(status_section.get("enabled", True)),
        )

    @property
    def debounce_delay_ms(self) -> float:
        return self._debouncer.delay_ms

    # -- browser events -------------------------------------------------

    def on_enter(self, directory: Path) -> None:
        self.current_directory = Path(directory).expanduser().resolve()
        self.apply()

    def on_leave(self) -> None:
        self._debouncer.cancel()
        self.current_directory = None
        self.listener.clear()

    def on_write(self) -> None:
        self._debouncer.trigger(self.apply)

    def on_text_changed(self) -> None:
        self._debouncer.trigger(self.apply)

    def on_focus(self) -> None:
        self._debouncer.trigger(self.apply)

    def on_terminal_close(self) -> None:
        """An embedded terminal (lazygit, a shell...) exited; anything may have changed."""
        self.service.invalidate_all()
        self.apply()

    def on_vcs_event(self, event_name: str) -> None:
        if event_name not in VCS_EVENTS:
            return
        logger.debug("Invalidating status cache after %s", event_name)
        self.service.invalidate_all()
        self.apply()

    # -- commands -------------------------------------------------------

    def refresh(self) -> None:
        self.service.invalidate_all()
        self.apply()

    def enable(self) -> None:
        self.enabled = True
        self.refresh()

    def disable(self) -> None:
        self.enabled = False
        self._debouncer.cancel()
        self.listener.clear()

    def toggle(self) -> None:
        if self.enabled:
            self.disable()
        else:
            self.enable()

    # -- plumbing -------------------------------------------------------

    def apply(self) -> None:
        """Request status for the current directory and forward the result."""
        if not self.enabled or self.current_directory is None:
            self.listener.clear()
            return
        directory = self.current_directory
        self.service.acquire_async(directory, partial(self._deliver, directory))

    def _deliver(self, directory: Path, status: Dict[str, str]) -> None:
        # The user may have moved on while git was running
        if not self.enabled or directory != self.current_directory:
            return
        if not status:
            self.listener.clear()
            return
        self.listener.show(directory, status)


__all__ = ["OverlayController", "OverlayListener", "VCS_EVENTS"]
