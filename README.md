# philosim

`philosim` runs the dining-philosophers problem with real threads. The
philosophers sit at a round table with one fork between each pair of
neighbours, and each needs both of its forks to eat.

Every seat has two threads: the philosopher and its own monitor. A philosopher
posts each request to a mailbox. Requests include "I am thinking", "may I reach
for my forks?", "I took a fork", "I am eating" and "I am sleeping". The monitor
answers each one:

- It grants fork access when neither neighbour holds forks. It refuses when
  both neighbours do. Otherwise it grants access only if this philosopher is at
  least as close to starving as both neighbours.
- It logs each action.
- It records a death as soon as the philosopher's deadline has passed.

The deadline is the time of the last meal plus `time_to_die` plus one
millisecond. One writer thread prints the log lines in the order the monitors
queued them.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Command line

```
philosim number_of_philosophers time_to_die time_to_eat time_to_sleep [number_of_times_each_philosopher_must_eat]
```

All times are in milliseconds. Every argument must be a plain decimal integer.
Signs, spaces, other characters and leading zeros are rejected, so `0` is
accepted and `007` is not. In addition:

- The number of philosophers must be greater than zero.
- `time_to_die`, `time_to_eat` and `time_to_sleep` must not exceed 2147483647.
- When the optional count is given, the dinner ends once every philosopher has
  eaten at least that many times. Without it, the dinner runs until a
  philosopher dies.
- A lone philosopher is never allowed to take its forks, so it always starves.

Example:

```
philosim 5 800 200 200 7
```

Each event is printed on its own line as the timestamp in milliseconds since
the epoch, the philosopher's number counted from 1, and the event. Sample
output:

```
1700000000023 2 is thinking
1700000000023 2 has taken a fork
1700000000033 2 has taken a fork
1700000000043 2 is eating
1700000000243 2 is sleeping
1700000001024 3 died
```

Once a `died` line has been queued, no further lines are accepted. The writer
pauses 10 ms after each line it prints.

The command exits with status 0 when the dinner ends. It exits with status 1
when the arguments are invalid or the threads cannot be started.

## Library use

```python
import io

from philosim.arguments import ArgumentError, parse_arguments
from philosim.cli import simulate

try:
    status = parse_arguments(["4", "410", "200", "200", "3"])
except ArgumentError as exc:
    print("bad arguments:", exc, "code", exc.code)
else:
    out = io.StringIO()
    table = simulate(status, out)
    print(out.getvalue())
    print("meals per seat:", table.eat_times)
```

The package is made up of these modules:

- `philosim.arguments`: `parse_arguments`, `Status` (with `Status.from_args`),
  `ArgumentError`, a `strtol` that saturates like C's, `is_digit_str` and
  `positive_mod`.
- `philosim.clock`: `now_ms()` and the busy-waiting `msleep(duration_ms)`.
- `philosim.resources`: `SharedResource`, a lock with `lock`, `unlock`,
  `try_lock` and context-manager support.
- `philosim.log`: the `Action` enum, `format_message`, `is_logged`, the
  thread-safe `LogQueue` (`enqueue_log`, `stop`, `pop`, `drain`) and
  `run_writer(queue, stream=None, interval=0.01)`.
- `philosim.table`: `Table.create(status)`, `Table.philosophers()`, and the
  `Wish`, `WishInfo`, `Fork`, `DeathClock` and `Philosopher` records.
- `philosim.monitor`: `run_monitor(table, philo_id)` and the decision helpers
  `may_take_forks`, `has_died`, `must_eat_fulfilled`, `answer_request` and
  `answer_dead_to_all`.
- `philosim.philosopher`: `run_philosopher(philo)`, `perform`, `take_forks` and
  `put_forks`.
- `philosim.cli`: `start_threads`, `simulate` and `main(argv=None)`. `main` is
  the entry point of the `philosim` command and reads `sys.argv` when it is
  called with no arguments.

## Running the tests

```
pytest
```