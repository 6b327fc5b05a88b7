import threading
import time

import pytest

from philosim.arguments import Status
from philosim.clock import now_ms
from philosim.log import Action
from philosim.monitor import FoundDead, answer_philo_request
from philosim.philosopher import (
    PhilosopherDied,
    perform,
    put_forks,
    run_philosopher,
    take_forks,
)
from philosim.table import Table


def _table(count=3, eat=10, sleep=10, starve=10_000):
    status = Status(
        philo_num=count, time_to_starve=starve, time_to_eat=eat, time_to_sleep=sleep
    )
    return Table.create(status)


def _wait_for(wish, action, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if wish.answer() == action:
            return True
        time.sleep(0.001)
    return False


class _Server:
    """Answers the requests of the given philosophers until stopped."""

    def __init__(self, table, ids):
        self.table = table
        self.ids = ids
        self.stop = threading.Event()
        self.thread = threading.Thread(target=self._run, daemon=True)

    def _run(self):
        while not self.stop.is_set():
            for philo_id in self.ids:
                try:
                    answer_philo_request(self.table, philo_id)
                except FoundDead:
                    pass
            time.sleep(0.0005)

    def __enter__(self):
        self.thread.start()
        return self

    def __exit__(self, *exc):
        self.stop.set()
        self.thread.join(timeout=5)


def test_perform_raises_when_already_dead():
    table = _table()
    philo = table.philosophers()[0]
    table.wishes[0].set_request(Action.DEAD)
    with pytest.raises(PhilosopherDied) as info:
        perform(philo, Action.THINK)
    assert info.value.philo_id == 0


def test_perform_think_is_logged_after_monitor_answer():
    table = _table()
    philo = table.philosophers()[1]
    errors = []

    def worker():
        try:
            perform(philo, Action.THINK)
        except PhilosopherDied as exc:
            errors.append(exc)

    thread = threading.Thread(target=worker, daemon=True)
    thread.start()
    assert _wait_for(table.wishes[1], Action.THINK)
    answer_philo_request(table, 1)
    thread.join(timeout=5)
    assert not thread.is_alive()
    assert errors == []
    messages = table.queue.drain()
    assert len(messages) == 1
    assert messages[0].endswith(" 2 is thinking\n")


def test_perform_raises_on_dead_answer():
    table = _table()
    philo = table.philosophers()[0]
    caught = []

    def worker():
        try:
            perform(philo, Action.THINK)
        except PhilosopherDied as exc:
            caught.append(exc)

    thread = threading.Thread(target=worker, daemon=True)
    thread.start()
    assert _wait_for(table.wishes[0], Action.THINK)
    table.wishes[0].set_request(Action.DEAD)
    thread.join(timeout=5)
    assert len(caught) == 1
    assert caught[0].philo_id == 0
    assert table.wishes[0].answer() == Action.DEAD
    assert table.queue.drain() == []


def test_perform_eat_lasts_time_to_eat():
    table = _table(eat=30)
    philo = table.philosophers()[0]
    with _Server(table, [0]):
        start = now_ms()
        perform(philo, Action.EAT)
        elapsed = now_ms() - start
    assert elapsed >= 30
    assert table.eat_times[0] == 1
    assert table.queue.drain()[0].endswith(" 1 is eating\n")


def test_take_and_put_forks():
    table = _table()
    philo = table.philosophers()[0]
    with _Server(table, [0]):
        take_forks(philo)
        assert table.death_clocks[0].is_taking_fork is True
        put_forks(philo)
    messages = table.queue.drain()
    assert len(messages) == 2
    assert all(m.endswith(" 1 has taken a fork\n") for m in messages)
    for fork in philo.forks:
        assert fork.resource.try_lock() is True
        fork.resource.unlock()


def test_take_forks_raises_when_dead():
    table = _table()
    philo = table.philosophers()[2]
    table.wishes[2].set_request(Action.DEAD)
    with pytest.raises(PhilosopherDied):
        take_forks(philo)
    assert table.queue.drain() == []


def test_run_philosopher_returns_when_dead_from_start():
    table = _table(eat=4)
    philo = table.philosophers()[0]
    table.wishes[0].set_request(Action.DEAD)
    assert run_philosopher(philo) == 0
    assert table.queue.drain() == []