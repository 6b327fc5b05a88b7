"""Philosopher threads: think, take forks, eat, put forks down, sleep."""

from __future__ import annotations

import time

from philosim.clock import msleep, now_ms
from philosim.log import Action
from philosim.table import Fork, Philosopher, WishInfo


class PhilosopherDied(Exception):
    """Raised when the monitor answers a philosopher with a death."""

    def __init__(self, philo_id: int) -> None:
        super().__init__(f"philosopher {philo_id + 1} died")
        self.philo_id = philo_id


def _await_answer(philo: Philosopher) -> None:
    """Wait until the monitor answers OK; raise PhilosopherDied on a death."""
    while True:
        answer = philo.wish.answer()
        if answer == Action.OK:
            return
        if answer == Action.DEAD:
            raise PhilosopherDied(philo.philo_id)
        time.sleep(0)


def perform(philo: Philosopher, action: Action) -> None:
    """Ask the monitor to log ``action``, spend its duration, and wait for the answer."""
    info = WishInfo(request=Action(action), act_time=now_ms(), fork_id=0)
    if not philo.wish.post(info):
        raise PhilosopherDied(philo.philo_id)
    if action == Action.EAT:
        msleep(philo.status.time_to_eat)
    elif action == Action.SLEEP:
        msleep(philo.status.time_to_sleep)
    _await_answer(philo)


def _take_fork(philo: Philosopher, fork: Fork) -> None:
    fork.resource.lock()
    try:
        perform(philo, Action.TAKE_A_FORK)
    except PhilosopherDied:
        fork.resource.unlock()
        raise


def take_forks(philo: Philosopher) -> None:
    """Ask permission to reach for the forks, then take both in order."""
    if not philo.wish.post(WishInfo(request=Action.TRY_TO_TAKE_FORKS)):
        raise PhilosopherDied(philo.philo_id)
    _await_answer(philo)
    first, second = philo.forks
    _take_fork(philo, first)
    try:
        _take_fork(philo, second)
    except PhilosopherDied:
        first.resource.unlock()
        raise


def put_forks(philo: Philosopher) -> None:
    """Put both forks back on the table."""
    for fork in philo.forks:
        fork.resource.unlock()


def run_philosopher(philo: Philosopher) -> int:
    """Live until the monitor declares the dinner over; return the meals eaten."""
    if philo.philo_id % 2 == 0:
        msleep(philo.status.time_to_eat / 2)
    meals = 0
    try:
        perform(philo, Action.INIT)
    except PhilosopherDied:
        pass
    try:
        while True:
            perform(philo, Action.THINK)
            take_forks(philo)
            try:
                perform(philo, Action.EAT)
            finally:
                put_forks(philo)
            meals += 1
            perform(philo, Action.SLEEP)
    except PhilosopherDied:
        return meals