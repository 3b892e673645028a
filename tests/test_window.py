"""Tests for SlidingWindow eviction and flattening."""

from datetime import datetime, timedelta

import pytest

from inetmon.models import ProbeCycleResult, Protocol, Sample
from inetmon.stats import jitter
from inetmon.window import SlidingWindow


def cycle(udp_ms, http_ms):
    return ProbeCycleResult(
        timestamp=datetime.now(),
        udp_samples=(Sample(Protocol.UDP, "h", True, timedelta(milliseconds=udp_ms)),),
        http_samples=(Sample(Protocol.HTTP, "u", True, timedelta(milliseconds=http_ms)),),
    )


class TestSlidingWindow:
    """Test SlidingWindow behavior."""

    def test_initial_state(self):
        window = SlidingWindow(capacity=3)

        assert len(window) == 0
        assert window.capacity == 3
        assert window.udp_samples() == ()

    def test_invalid_capacity(self):
        with pytest.raises(ValueError, match="capacity must be positive"):
            SlidingWindow(capacity=0)

    def test_capacity_enforced(self):
        window = SlidingWindow(capacity=3)
        cycles = [cycle(i, i) for i in range(1, 6)]
        for c in cycles:
            window.append(c)

        assert len(window) == 3
        assert window.cycles() == cycles[2:]

    def test_evicted_cycle_no_longer_contributes(self):
        """After capacity + 1 inserts the first cycle's samples are gone."""
        window = SlidingWindow(capacity=2)
        window.append(cycle(500, 500))
        window.append(cycle(20, 30))
        before = [s.latency for s in window.http_samples()]

        window.append(cycle(20, 30))
        after = [s.latency for s in window.http_samples()]

        assert jitter(before) > timedelta(0)
        assert jitter(after) == timedelta(0)
        assert all(s.latency != timedelta(milliseconds=500) for s in window.udp_samples())

    def test_samples_in_acquisition_order(self):
        window = SlidingWindow(capacity=5)
        for value in (10, 20, 30):
            window.append(cycle(value, value + 1))

        assert [s.latency.total_seconds() * 1000 for s in window.udp_samples()] == pytest.approx(
            [10, 20, 30]
        )
        assert [s.latency.total_seconds() * 1000 for s in window.http_samples()] == pytest.approx(
            [11, 21, 31]
        )

    def test_clear(self):
        window = SlidingWindow(capacity=2)
        window.append(cycle(1, 1))
        window.clear()

        assert len(window) == 0
