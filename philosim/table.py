"""Shared state of one dinner: wishes, forks, death clocks and philosophers."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from philosim.arguments import Status
from philosim.log import Action, LogQueue
from philosim.resources import SharedResource


@dataclass(frozen=True)
class WishInfo:
    """A request posted by a philosopher, or the monitor's answer to it."""

    request: Action = Action.OK
    act_time: int = 0
    fork_id: int = 0


@dataclass
class Wish:
    """The mailbox between one philosopher and its monitor.

    ``info`` may be read or replaced directly by a caller that holds
    ``mutex``; the methods below take the mutex themselves.
    """

    mutex: SharedResource = field(default_factory=SharedResource)
    info: WishInfo = field(default_factory=WishInfo)

    def post(self, info: WishInfo) -> bool:
        """Replace the pending request with ``info``.

        Returns False, leaving the mailbox untouched, once the monitor has
        answered with a death.
        """
        with self.mutex:
            if self.info.request == Action.DEAD:
                return False
            self.info = info
        return True

    def answer(self) -> Action:
        """The request currently held in the mailbox."""
        with self.mutex:
            return self.info.request

    def set_request(self, request: Action) -> None:
        """Overwrite only the request field, keeping time and fork id."""
        with self.mutex:
            self.info = replace(self.info, request=Action(request))


@dataclass
class Fork:
    """A fork on the table; holding ``resource`` means holding the fork."""

    fork_id: int
    resource: SharedResource = field(default_factory=SharedResource)


@dataclass
class DeathClock:
    """When a philosopher starves (-1 while unknown) and whether it holds forks."""

    mutex: SharedResource = field(default_factory=SharedResource)
    time_to_die: int = -1
    is_taking_fork: bool = False


@dataclass
class Philosopher:
    """One diner: its parameters, its mailbox and the two forks it reaches."""

    philo_id: int
    status: Status
    wish: Wish
    forks: Tuple[Fork, Fork]


@dataclass
class Table:
    """Everything the philosophers, monitors and writer share."""

    status: Status
    wishes: List[Wish]
    forks: List[Fork]
    death_clocks: List[DeathClock]
    eat_times: List[int]
    queue: LogQueue

    @classmethod
    def create(cls, status: Status) -> "Table":
        """Lay the table for ``status.philo_num`` philosophers."""
        count = status.philo_num
        if count <= 0:
            raise ValueError("number of philosophers must be positive")
        return cls(
            status=status,
            wishes=[Wish() for _ in range(count)],
            forks=[Fork(fork_id) for fork_id in range(count)],
            death_clocks=[DeathClock() for _ in range(count)],
            eat_times=[0] * count,
            queue=LogQueue(),
        )

    @property
    def philo_num(self) -> int:
        return self.status.philo_num

    @property
    def time_to_starve(self) -> int:
        return self.status.time_to_starve

    @property
    def must_eat_times(self) -> Optional[int]:
        return self.status.must_eat_times

    @property
    def must_eat_times_exists(self) -> bool:
        return self.status.must_eat_times_exists

    def philosophers(self) -> List[Philosopher]:
        """The diners, each reaching its own fork first and its right neighbour's second."""
        count = self.philo_num
        return [
            Philosopher(
                philo_id=philo_id,
                status=self.status,
                wish=wish,
                forks=(self.forks[philo_id], self.forks[(philo_id + 1) % count]),
            )
            for philo_id, wish in enumerate(self.wishes)
        ]