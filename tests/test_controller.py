"""Tests for the browser event glue."""

import time
from pathlib import Path

from gitoverlay.controller import OverlayController
from gitoverlay.service import StatusService


class _Listener:
    def __init__(self) -> None:
        self.shown: list[tuple[Path, dict]] = []
        self.clears = 0

    def show(self, directory, status):
        self.shown.append((directory, status))

    def clear(self):
        self.clears += 1


class _Runner:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, root: Path) -> str:
        self.calls += 1
        return "?? notes.txt\n"


def _make_repo(tmp_path: Path) -> Path:
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    return repo.resolve()


def _drain(service: StatusService, predicate, timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate() and time.monotonic() < deadline:
        service.dispatcher.run_pending(timeout=0.05)


def _controller(tmp_path: Path, delay_ms: float = 200):
    runner = _Runner()
    service = StatusService(runner=runner)
    listener = _Listener()
    controller = OverlayController(service, listener, debounce_delay_ms=delay_ms)
    return controller, listener, runner


def test_enter_shows_status(tmp_path: Path):
    repo = _make_repo(tmp_path)
    controller, listener, _ = _controller(tmp_path)
    controller.on_enter(repo)
    _drain(controller.service, lambda: listener.shown)
    assert listener.shown == [(repo, {f"{repo}/notes.txt": "??"})]


def test_enter_outside_repository_clears(tmp_path: Path):
    outside = tmp_path / "plain"
    outside.mkdir()
    controller, listener, runner = _controller(tmp_path)
    controller.on_enter(outside)
    controller.service.dispatcher.run_pending()
    assert listener.shown == []
    assert listener.clears == 1
    assert runner.calls == 0


def test_stale_delivery_is_ignored(tmp_path: Path):
    repo = _make_repo(tmp_path)
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    controller, listener, _ = _controller(tmp_path)

    controller.on_enter(repo)
    controller.on_enter(elsewhere)
    _drain(controller.service, lambda: not controller.service.coordinator.is_pending(repo))
    controller.service.dispatcher.run_pending()
    assert listener.shown == []


def test_disable_clears_and_blocks_delivery(tmp_path: Path):
    repo = _make_repo(tmp_path)
    controller, listener, _ = _controller(tmp_path)
    controller.on_enter(repo)
    controller.disable()
    assert listener.clears == 1
    _drain(controller.service, lambda: not controller.service.coordinator.is_pending(repo))
    assert listener.shown == []

    controller.toggle()
    assert controller.enabled
    _drain(controller.service, lambda: listener.shown)
    assert len(listener.shown) == 1


def test_vcs_event_invalidates_cache(tmp_path: Path):
    repo = _make_repo(tmp_path)
    controller, listener, runner = _controller(tmp_path)
    controller.on_enter(repo)
    _drain(controller.service, lambda: len(listener.shown) == 1)

    controller.on_vcs_event("SomethingElse")
    controller.service.dispatcher.run_pending()
    assert runner.calls == 1

    controller.on_vcs_event("LazyGitClosed")
    _drain(controller.service, lambda: len(listener.shown) == 2)
    assert runner.calls == 2

    controller.on_terminal_close()
    _drain(controller.service, lambda: len(listener.shown) == 3)
    assert runner.calls == 3


def test_write_events_are_debounced(tmp_path: Path):
    repo = _make_repo(tmp_path)
    controller, listener, runner = _controller(tmp_path, delay_ms=30)
    controller.current_directory = repo

    controller.on_write()
    controller.on_focus()
    controller.on_text_changed()
    _drain(controller.service, lambda: listener.shown)
    time.sleep(0.1)
    controller.service.dispatcher.run_pending()

    assert runner.calls == 1
    assert len(listener.shown) == 1


def test_leave_clears(tmp_path: Path):
    repo = _make_repo(tmp_path)
    controller, listener, _ = _controller(tmp_path)
    controller.current_directory = repo
    controller.on_leave()
    assert controller.current_directory is None
    assert listener.clears == 1


def test_from_config_reads_status_table(tmp_path: Path):
    repo = _make_repo(tmp_path)
    runner = _Runner()
    service = StatusService(runner=runner)
    listener = _Listener()

    controller = OverlayController.from_config(
        service, listener, {"debounce_delay_ms": 50, "enabled": False}
    )
    assert controller.debounce_delay_ms == 50
    assert controller.enabled is False

    controller.on_enter(repo)
    assert listener.clears == 1
    assert runner.calls == 0


def test_from_config_defaults(tmp_path: Path):
    service = StatusService(runner=_Runner())
    controller = OverlayController.from_config(service, _Listener(), {})
    assert controller.debounce_delay_ms == 200
    assert controller.enabled is True
