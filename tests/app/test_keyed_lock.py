from __future__ import annotations

import threading
import time

from tripsync.locking import KeyedLock


def test_same_key_is_serialised() -> None:
    lock = KeyedLock()
    active = 0
    peak = 0
    guard = threading.Lock()

    def worker() -> None:
        nonlocal active, peak
        with lock.hold("user-1"):
            with guard:
                active += 1
                peak = max(peak, active)
            time.sleep(0.01)
            with guard:
                active -= 1

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert peak == 1
    assert len(lock) == 0


def test_different_keys_do_not_block_each_other() -> None:
    lock = KeyedLock()
    entered = threading.Event()

    def other() -> None:
        with lock.hold("user-2"):
            entered.set()

    with lock.hold("user-1"):
        thread = threading.Thread(target=other)
        thread.start()
        assert entered.wait(timeout=1)
        thread.join()


def test_entry_is_released_after_an_error() -> None:
    lock = KeyedLock()

    try:
        with lock.hold("user-1"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    assert len(lock) == 0
