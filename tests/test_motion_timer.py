import threading
import time

import pytest

from darwinframe.motion_timer import MotionTimer


class CountingManager:
    def __init__(self):
        self.count = 0
        self.threads = set()

    def process(self):
        self.count += 1
        self.threads.add(threading.get_ident())


def wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def test_timer_calls_manager_repeatedly_on_other_thread():
    manager = CountingManager()
    timer = MotionTimer(manager, 0.002)
    timer.start()
    try:
        assert timer.is_running()
        assert wait_for(lambda: manager.count >= 3)
    finally:
        timer.stop()
    assert threading.get_ident() not in manager.threads
    assert len(manager.threads) == 1


def test_stop_ends_processing():
    manager = CountingManager()
    timer = MotionTimer(manager, 0.002)
    timer.start()
    assert wait_for(lambda: manager.count >= 1)
    timer.stop()
    assert timer.is_running() is False
    seen = manager.count
    time.sleep(0.03)
    assert manager.count == seen


def test_start_twice_keeps_one_thread():
    manager = CountingManager()
    with MotionTimer(manager, 0.002) as timer:
        timer.start()
        assert timer.is_running()
        assert wait_for(lambda: manager.count >= 3)
    assert len(manager.threads) == 1
    assert timer.is_running() is False


def test_stop_when_not_running_is_harmless():
    timer = MotionTimer(None)
    timer.stop()
    assert timer.is_running() is False


def test_timer_without_manager_runs():
    timer = MotionTimer(None, 0.002)
    timer.start()
    assert timer.is_running()
    timer.stop()
    assert timer.is_running() is False


def test_restart_after_stop():
    manager = CountingManager()
    timer = MotionTimer(manager, 0.002)
    timer.start()
    timer.stop()
    assert timer.is_running() is False
    before = manager.count
    timer.start()
    try:
        assert timer.is_running() is True
        wait_for(lambda: manager.count > before)
        assert manager.count > before
    finally:
        timer.stop()
    assert timer.is_running() is False


def test_non_positive_interval_rejected():
    with pytest.raises(ValueError):
        MotionTimer(None, 0)