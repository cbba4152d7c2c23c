from __future__ import annotations

import threading
import time

from src.eduscan.eduscan.scanning.auto_timer import RepeatingTimer


def _wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def test_ticks_until_cancelled():
    calls = []
    timer = RepeatingTimer(0.01, lambda: calls.append(time.monotonic()), name="test-timer")
    timer.start()
    try:
        assert _wait_for(lambda: len(calls) >= 2)
    finally:
        timer.cancel()

    time.sleep(0.05)
    settled = len(calls)
    time.sleep(0.05)
    assert len(calls) == settled


def test_start_twice_runs_one_thread():
    calls = []
    timer = RepeatingTimer(0.01, lambda: calls.append(threading.current_thread().name), name="single-timer")
    timer.start()
    timer.start()
    try:
        assert _wait_for(lambda: len(calls) >= 3)
    finally:
        timer.cancel()

    assert set(calls) == {"single-timer"}
    assert sum(t.name == "single-timer" for t in threading.enumerate()) <= 1


def test_slow_callback_never_overlaps():
    lock = threading.Lock()
    state = {"running": 0, "peak": 0, "calls": 0}

    def slow():
        with lock:
            state["running"] += 1
            state["peak"] = max(state["peak"], state["running"])
        time.sleep(0.03)
        with lock:
            state["running"] -= 1
            state["calls"] += 1

    timer = RepeatingTimer(0.001, slow)
    timer.start()
    try:
        assert _wait_for(lambda: state["calls"] >= 3)
    finally:
        timer.cancel()

    assert state["peak"] == 1


def test_failing_callback_keeps_ticking(caplog):
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("analyzer offline")

    timer = RepeatingTimer(0.01, flaky)
    timer.start()
    try:
        assert _wait_for(lambda: len(calls) >= 2)
    finally:
        timer.cancel()

    assert "Auto-scan tick failed" in caplog.text
