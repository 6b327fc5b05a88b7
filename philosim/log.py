"""Action log messages, the shared message queue and the writer loop."""

from __future__ import annotations

import sys
import time
from collections import deque
from enum import IntEnum
from typing import Deque, List, Optional, TextIO, Tuple

from philosim.resources import SharedResource


class Action(IntEnum):
    """Requests a philosopher can post and answers the monitor can give."""

    EAT = 0
    THINK = 1
    SLEEP = 2
    TRY_TO_TAKE_FORKS = 3
    TAKE_A_FORK = 4
    DEAD = 5
    OK = 6
    INIT = 7
    WRITER_END = 8


_MESSAGES = {
    Action.TAKE_A_FORK: " has taken a fork\n",
    Action.EAT: " is eating\n",
    Action.THINK: " is thinking\n",
    Action.SLEEP: " is sleeping\n",
    Action.DEAD: " died\n",
}


def is_logged(action: Action) -> bool:
    """Tell whether ``action`` produces a line in the log."""
    return action in _MESSAGES


def format_message(philo_id: int, millis: int, action: Action) -> str:
    """Build the log line for ``action``; ``philo_id`` is zero-based and printed one-based."""
    try:
        suffix = _MESSAGES[Action(action)]
    except (KeyError, ValueError):
        raise ValueError(f"action {action!r} has no log message") from None
    return f"{millis} {philo_id + 1}{suffix}"


class LogQueue:
    """A thread-safe FIFO of log lines that closes after a death or a stop."""

    def __init__(self) -> None:
        self._mutex = SharedResource()
        self._messages: Deque[str] = deque()
        self._proceeding = True

    @property
    def proceeding(self) -> bool:
        """Whether new messages are still accepted."""
        with self._mutex:
            return self._proceeding

    def enqueue_log(self, philo_id: int, millis: int, action: Action) -> bool:
        """Queue the log line for ``action``.

        Returns False when the queue no longer accepts messages; actions that
        produce no line are accepted without queueing anything.  Queueing a
        death closes the queue.
        """
        if not is_logged(action):
            return True
        message = format_message(philo_id, millis, action)
        with self._mutex:
            if not self._proceeding:
                return False
            self._messages.append(message)
            if action == Action.DEAD:
                self._proceeding = False
        return True

    def stop(self) -> None:
        """Stop accepting messages; those already queued stay queued."""
        with self._mutex:
            self._proceeding = False

    def pop(self) -> Optional[str]:
        """Remove and return the oldest message, or None when the queue is empty."""
        return self._pop_with_state()[0]

    def _pop_with_state(self) -> Tuple[Optional[str], bool]:
        with self._mutex:
            message = self._messages.popleft() if self._messages else None
            return message, self._proceeding

    def drain(self) -> List[str]:
        """Remove and return every queued message in order."""
        with self._mutex:
            messages = list(self._messages)
            self._messages.clear()
        return messages

    def __len__(self) -> int:
        with self._mutex:
            return len(self._messages)


def run_writer(
    queue: LogQueue, stream: Optional[TextIO] = None, interval: float = 0.01
) -> int:
    """Write queued messages to ``stream`` until the queue is closed and empty.

    Pauses ``interval`` seconds after each message and returns how many
    messages were written.
    """
    out = sys.stdout if stream is None else stream
    written = 0
    proceeding = True
    message: Optional[str] = None
    while proceeding or message is not None:
        message, proceeding = queue._pop_with_state()
        if message is None:
            time.sleep(0)
            continue
        out.write(message)
        out.flush()
        written += 1
        if interval > 0:
            time.sleep(interval)
    return written