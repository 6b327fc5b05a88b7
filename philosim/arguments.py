"""Command-line argument validation and conversion for the simulation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

INT_MAX = 2**31 - 1
LONG_MAX = 2**63 - 1
LONG_MIN = -(2**63)

ERR_INVALID_ARG = 1
ERR_ARG_NUM = 2
ERR_INVALID_VALUE = 1

_DIGITS = "0123456789"
_WHITESPACE = frozenset("\t\n\v\f\r ")


class ArgumentError(ValueError):
    """Raised when the command-line arguments cannot be used."""

    def __init__(self, message: str, code: int = ERR_INVALID_ARG) -> None:
        super().__init__(message)
        self.code = code


def _digit_value(char: str, base: int) -> Optional[int]:
    if char in _DIGITS:
        value = ord(char) - ord("0")
    elif char.isascii() and char.isalpha():
        value = ord(char.upper()) - ord("A") + 10
    else:
        return None
    return value if value < base else None


def strtol(text: str, base: int = 10) -> int:
    """Parse a leading integer like C strtol, saturating at the long range.

    Leading whitespace and a single sign are accepted; parsing stops at the
    first character that is not a digit in ``base``.  Base 0 detects a
    ``0x`` (hexadecimal) or ``0`` (octal) prefix and defaults to decimal.
    """
    if base != 0 and not 2 <= base <= 36:
        raise ValueError(f"invalid base: {base}")
    pos = 0
    while pos < len(text) and text[pos] in _WHITESPACE:
        pos += 1
    negative = False
    if pos < len(text) and text[pos] in "+-":
        negative = text[pos] == "-"
        pos += 1
    rest = text[pos:]
    if base in (0, 16) and rest[:2].lower() == "0x":
        pos += 2
        base = 16
    elif base in (0, 8) and rest[:1] == "0":
        pos += 1
        base = 8
    elif base == 0:
        base = 10

    total = 0
    for char in text[pos:]:
        digit = _digit_value(char, base)
        if digit is None:
            break
        if total > (LONG_MAX - digit) // base:
            return LONG_MIN if negative else LONG_MAX
        total = total * base + digit
    return -total if negative else total


def is_digit_str(text: Optional[str], sign_allowable: int = 0) -> bool:
    """Tell whether ``text`` is a plain decimal number.

    At most ``sign_allowable`` leading ``+``/``-`` characters are accepted,
    and a leading zero is only allowed for the single-character string ``0``.
    """
    if text is None:
        return False
    signs = len(text) - len(text.lstrip("+-"))
    if signs > sign_allowable:
        return False
    body = text[signs:]
    if body.startswith("0") and len(text) != 1:
        return False
    return all(char in _DIGITS for char in body)


def positive_mod(dividend: int, divisor: int) -> int:
    """Remainder with C truncation semantics, shifted up by ``divisor`` when negative."""
    if divisor == 0:
        raise ZeroDivisionError("modulo by zero")
    remainder = abs(dividend) % abs(divisor)
    if dividend < 0:
        remainder = -remainder
    if remainder < 0:
        remainder += divisor
    return remainder


@dataclass(frozen=True)
class Status:
    """Simulation parameters; times are in milliseconds."""

    philo_num: int
    time_to_starve: int
    time_to_eat: int
    time_to_sleep: int
    must_eat_times: Optional[int] = None

    @property
    def must_eat_times_exists(self) -> bool:
        return self.must_eat_times is not None and self.must_eat_times >= 0

    @classmethod
    def from_args(cls, argv: Sequence[str]) -> "Status":
        """Convert the four or five positional arguments to a Status."""
        if len(argv) not in (4, 5):
            raise ArgumentError(
                f"expected 4 or 5 arguments, got {len(argv)}", ERR_ARG_NUM
            )
        time_to_starve, time_to_eat, time_to_sleep = (
            strtol(arg, 10) for arg in argv[1:4]
        )
        if max(time_to_starve, time_to_eat, time_to_sleep) > INT_MAX:
            raise ArgumentError("time value out of range", ERR_INVALID_VALUE)
        must_eat_times = strtol(argv[4], 10) if len(argv) == 5 else None
        if must_eat_times is not None and must_eat_times < 0:
            must_eat_times = None
        philo_num = strtol(argv[0], 10)
        if philo_num <= 0:
            raise ArgumentError(
                "number of philosophers must be positive", ERR_INVALID_VALUE
            )
        return cls(
            philo_num=philo_num,
            time_to_starve=time_to_starve,
            time_to_eat=time_to_eat,
            time_to_sleep=time_to_sleep,
            must_eat_times=must_eat_times,
        )


def parse_arguments(argv: Sequence[str]) -> Status:
    """Validate the positional arguments (program name excluded) and build a Status."""
    if len(argv) not in (4, 5):
        raise ArgumentError(
            f"expected 4 or 5 arguments, got {len(argv)}", ERR_ARG_NUM
        )
    for arg in argv:
        if not is_digit_str(arg, 0):
            raise ArgumentError(f"invalid argument: {arg!r}", ERR_INVALID_ARG)
    return Status.from_args(argv)