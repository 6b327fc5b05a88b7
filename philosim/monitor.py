"""Monitor threads: answer each philosopher's requests and detect deaths."""

from __future__ import annotations

import time
from dataclasses import replace
from typing import List, Optional

from philosim.arguments import positive_mod
from philosim.clock import now_ms
from philosim.log import Action
from philosim.table import Table, WishInfo


class FoundDead(Exception):
    """Raised when a monitor finds its philosopher dead or can no longer log."""

    def __init__(self, philo_id: int) -> None:
        super().__init__(f"philosopher {philo_id + 1} is done")
        self.philo_id = philo_id


def neighbourhood_ids(table: Table, own_id: int) -> List[int]:
    """Ids of the death clocks guarding ``own_id`` and its neighbours, in lock order.

    Locks are always taken in ascending id order so that monitors of
    adjacent philosophers never deadlock.
    """
    count = table.philo_num
    left_id = positive_mod(own_id - 1, count)
    right_id = positive_mod(own_id + 1, count)
    return sorted({left_id, own_id, right_id})


def lock_neighbourhood(table: Table, own_id: int) -> None:
    """Lock the death clocks of ``own_id`` and its neighbours."""
    for philo_id in neighbourhood_ids(table, own_id):
        table.death_clocks[philo_id].mutex.lock()


def unlock_neighbourhood(table: Table, own_id: int) -> None:
    """Release the death clocks taken by :func:`lock_neighbourhood`."""
    for philo_id in neighbourhood_ids(table, own_id):
        table.death_clocks[philo_id].mutex.unlock()


def may_take_forks(table: Table, own_id: int) -> bool:
    """Decide whether ``own_id`` may reach for its forks now.

    A lone philosopher never may.  With both neighbours idle it may; with
    both neighbours holding forks it may not; otherwise it may only if it
    is at least as close to starving as both neighbours.
    """
    count = table.philo_num
    left_id = positive_mod(own_id - 1, count)
    right_id = positive_mod(own_id + 1, count)
    if own_id in (left_id, right_id):
        return False
    clocks = table.death_clocks
    left, right, own = clocks[left_id], clocks[right_id], clocks[own_id]
    if not left.is_taking_fork and not right.is_taking_fork:
        return True
    if left.is_taking_fork and right.is_taking_fork:
        return False
    return own.time_to_die <= left.time_to_die and own.time_to_die <= right.time_to_die


def has_died(table: Table, philo_id: int, now: Optional[int] = None) -> bool:
    """Tell whether ``philo_id`` has starved by ``now`` (default: the current time)."""
    current = now_ms() if now is None else now
    deadline = table.death_clocks[philo_id].time_to_die
    return deadline != -1 and deadline <= current


def must_eat_fulfilled(table: Table) -> bool:
    """Whether every philosopher has eaten the required number of times."""
    if not table.must_eat_times_exists:
        return False
    return all(times >= table.must_eat_times for times in table.eat_times)


def update_dead_time(table: Table, philo_id: int, info: WishInfo) -> None:
    """Advance the death clock after a meal or start, and clear the fork flag on sleep."""
    clock = table.death_clocks[philo_id]
    if info.request in (Action.EAT, Action.INIT):
        clock.time_to_die = info.act_time + table.time_to_starve + 1
        if info.request == Action.EAT:
            table.eat_times[philo_id] += 1
    elif info.request == Action.SLEEP:
        clock.is_taking_fork = False


def answer_request(table: Table, philo_id: int, info: WishInfo) -> None:
    """Answer ``info``, the pending request of ``philo_id``.

    The caller must hold the neighbourhood locks and the wish mutex.
    Raises FoundDead when the philosopher is dead or its action cannot be
    logged any more.
    """
    wish = table.wishes[philo_id]
    clock = table.death_clocks[philo_id]
    if info.request == Action.DEAD or has_died(table, philo_id):
        when = info.act_time if info.request == Action.DEAD else clock.time_to_die
        table.queue.enqueue_log(philo_id, when, Action.DEAD)
        raise FoundDead(philo_id)
    if info.request == Action.TRY_TO_TAKE_FORKS:
        if may_take_forks(table, philo_id):
            wish.info = replace(wish.info, request=Action.OK)
            clock.is_taking_fork = True
        return
    if not table.queue.enqueue_log(philo_id, info.act_time, info.request):
        raise FoundDead(philo_id)
    wish.info = replace(wish.info, request=Action.OK)


def answer_philo_request(table: Table, philo_id: int) -> None:
    """Answer the pending request of ``philo_id`` under the proper locks."""
    wish = table.wishes[philo_id]
    lock_neighbourhood(table, philo_id)
    try:
        with wish.mutex:
            info = wish.info
            answer_request(table, philo_id, info)
            update_dead_time(table, philo_id, info)
    finally:
        unlock_neighbourhood(table, philo_id)


def answer_dead_to_all(table: Table) -> None:
    """Answer every philosopher's mailbox with a death."""
    for wish in table.wishes:
        wish.mutex.lock()
    try:
        for wish in table.wishes:
            wish.info = replace(wish.info, request=Action.DEAD)
    finally:
        for wish in table.wishes:
            wish.mutex.unlock()


def run_monitor(table: Table, philo_id: int) -> bool:
    """Serve ``philo_id`` until someone dies or everyone has eaten enough.

    Returns True when the dinner ended because the meal count was reached,
    False when it ended with a death.
    """
    while True:
        try:
            answer_philo_request(table, philo_id)
        except FoundDead:
            answer_dead_to_all(table)
            return False
        if must_eat_fulfilled(table):
            table.queue.stop()
            answer_dead_to_all(table)
            return True
        time.sleep(0)