"""Threaded dining-philosophers simulation with per-seat monitors and a log writer."""

__version__ = "1.0.0"