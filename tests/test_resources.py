import threading

import pytest

from philosim.resources import SharedResource


def test_try_lock_marks_unavailable():
    resource = SharedResource()
    assert resource.available is True
    assert resource.try_lock() is True
    assert resource.available is False
    assert resource.try_lock() is False


def test_unlock_restores_availability():
    resource = SharedResource()
    assert resource.try_lock() is True
    resource.unlock()
    assert resource.available is True
    assert resource.try_lock() is True
    resource.unlock()


def test_unlock_without_lock_raises():
    resource = SharedResource()
    with pytest.raises(RuntimeError):
        resource.unlock()


def test_lock_excludes_other_threads():
    resource = SharedResource()
    acquired = threading.Event()

    def worker():
        resource.lock()
        acquired.set()
        resource.unlock()

    resource.lock()
    thread = threading.Thread(target=worker)
    thread.start()
    assert acquired.wait(0.1) is False
    resource.unlock()
    thread.join(2)
    assert acquired.is_set() is True
    assert resource.try_lock() is True
    resource.unlock()


def test_context_manager_holds_and_releases():
    resource = SharedResource()
    results = []

    def worker():
        results.append(resource.try_lock())
        if results[-1]:
            resource.unlock()

    with resource:
        counter = []
        thread = threading.Thread(target=lambda: counter.append(resource._stuff.locked()))
        thread.start()
        thread.join(2)
        assert counter == [True]
    thread = threading.Thread(target=worker)
    thread.start()
    thread.join(2)
    assert results == [True]
    assert resource.try_lock() is True
    resource.unlock()


def test_counter_under_contention():
    resource = SharedResource()
    total = [0]

    def worker():
        for _ in range(1000):
            with resource:
                total[0] += 1

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert total[0] == 4000
    assert resource.try_lock() is True
    resource.unlock()