"""Tests for the main-thread dispatcher and debouncer."""

import threading
import time

from gitoverlay.dispatch import Debouncer, MainThreadDispatcher


def test_call_soon_runs_only_when_drained():
    dispatcher = MainThreadDispatcher()
    calls = []
    dispatcher.call_soon(calls.append, 1)
    dispatcher.call_soon(calls.append, 2)
    assert calls == []
    assert dispatcher.has_pending()

    assert dispatcher.run_pending() == 2
    assert calls == [1, 2]
    assert not dispatcher.has_pending()


def test_callbacks_run_on_draining_thread():
    dispatcher = MainThreadDispatcher()
    seen = []
    worker = threading.Thread(
        target=lambda: dispatcher.call_soon(lambda: seen.append(threading.current_thread()))
    )
    worker.start()
    worker.join()
    dispatcher.run_pending()
    assert seen == [threading.current_thread()]


def test_run_pending_waits_for_work():
    dispatcher = MainThreadDispatcher()
    calls = []
    timer = threading.Timer(0.05, dispatcher.call_soon, args=(calls.append, "late"))
    timer.start()
    assert dispatcher.run_pending(timeout=2.0) == 1
    assert calls == ["late"]


def test_run_pending_timeout_without_work():
    assert MainThreadDispatcher().run_pending(timeout=0.01) == 0


def test_failing_callback_does_not_stop_drain():
    dispatcher = MainThreadDispatcher()
    calls = []
    dispatcher.call_soon(lambda: 1 / 0)
    dispatcher.call_soon(calls.append, "after")
    assert dispatcher.run_pending() == 2
    assert calls == ["after"]


def test_debouncer_coalesces_burst():
    dispatcher = MainThreadDispatcher()
    debouncer = Debouncer(dispatcher, delay_ms=50)
    calls = []
    for index in range(5):
        debouncer.trigger(lambda index=index: calls.append(index))

    deadline = time.monotonic() + 2.0
    while not calls and time.monotonic() < deadline:
        dispatcher.run_pending(timeout=0.05)
    time.sleep(0.1)
    dispatcher.run_pending()

    assert calls == [4]
    assert not debouncer.is_armed


def test_debouncer_cancel():
    dispatcher = MainThreadDispatcher()
    debouncer = Debouncer(dispatcher, delay_ms=20)
    calls = []
    debouncer.trigger(lambda: calls.append("x"))
    debouncer.cancel()
    time.sleep(0.08)
    dispatcher.run_pending()
    assert calls == []
