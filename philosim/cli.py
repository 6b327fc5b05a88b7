"""Command entry point: lay the table, start every thread and wait for the end."""

from __future__ import annotations

import sys
import threading
from typing import List, Optional, Sequence, TextIO

from philosim.arguments import ArgumentError, Status, parse_arguments
from philosim.log import run_writer
from philosim.monitor import run_monitor
from philosim.philosopher import run_philosopher
from philosim.table import Table

ERROR = 1


def start_threads(table: Table, stream: Optional[TextIO] = None) -> List[threading.Thread]:
    """Start one monitor and one philosopher per seat, then the writer.

    Returns the started threads in that order.
    """
    threads: List[threading.Thread] = []
    for philo_id in range(table.philo_num):
        threads.append(
            threading.Thread(
                target=run_monitor,
                args=(table, philo_id),
                name=f"monitor-{philo_id + 1}",
                daemon=True,
            )
        )
    for philo in table.philosophers():
        threads.append(
            threading.Thread(
                target=run_philosopher,
                args=(philo,),
                name=f"philosopher-{philo.philo_id + 1}",
                daemon=True,
            )
        )
    threads.append(
        threading.Thread(
            target=run_writer,
            args=(table.queue, stream),
            name="writer",
            daemon=True,
        )
    )
    for thread in threads:
        thread.start()
    return threads


def simulate(status: Status, stream: Optional[TextIO] = None) -> Table:
    """Run one dinner to its end, writing the log to ``stream``; return the table."""
    table = Table.create(status)
    for thread in start_threads(table, stream):
        thread.join()
    return table


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the simulation from command-line arguments; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        status = parse_arguments(args)
    except ArgumentError:
        return ERROR
    try:
        simulate(status, sys.stdout)
    except RuntimeError:
        return ERROR
    return 0


if __name__ == "__main__":
    sys.exit(main())