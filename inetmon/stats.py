"""Latency and jitter statistics over probe durations."""

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Sequence

_ONE_SECOND = timedelta(seconds=1)


@dataclass(frozen=True)
class LatencyStats:
    """Mean and population standard deviation of a set of latencies."""

    mean: timedelta
    stddev: timedelta


def jitter(durations: Sequence[timedelta]) -> timedelta:
    """Mean absolute difference between successive durations (pure function).

    Durations must be supplied in acquisition order. The summed differences
    are divided by the number of samples, so fewer than two samples yield
    zero jitter.

    Examples:
        >>> jitter([timedelta(milliseconds=30), timedelta(milliseconds=40),
        ...         timedelta(milliseconds=35)])
        datetime.timedelta(microseconds=5000)
    """
    if len(durations) < 2:
        return timedelta(0)

    total = timedelta(0)
    for previous, current in zip(durations, durations[1:]):
        total += abs(current - previous)
    return total / len(durations)


def latency(durations: Sequence[timedelta]) -> LatencyStats | None:
    """Compute mean and population stddev, or None for an empty input."""
    if not durations:
        return None

    mean = sum(durations, timedelta(0)) / len(durations)
    variance = sum(((d - mean) / _ONE_SECOND) ** 2 for d in durations) / len(durations)
    return LatencyStats(mean=mean, stddev=timedelta(seconds=math.sqrt(variance)))
