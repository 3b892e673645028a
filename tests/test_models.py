"""Tests for inetmon.models invariants."""

import dataclasses
from datetime import datetime, timedelta

import pytest

from inetmon.models import ProbeCycleResult, Protocol, Sample


class TestSample:
    """Test Sample dataclass behavior and invariants."""

    def test_sample_valid_success(self):
        """Test valid successful sample."""
        sample = Sample(
            protocol=Protocol.UDP,
            target="8.8.8.8",
            success=True,
            latency=timedelta(milliseconds=20),
        )

        assert sample.protocol == Protocol.UDP
        assert sample.target == "8.8.8.8"
        assert sample.success is True
        assert sample.latency == timedelta(milliseconds=20)

    def test_sample_valid_failure(self):
        """Test valid failed sample."""
        sample = Sample(protocol=Protocol.HTTP, target="https://x", success=False, latency=None)

        assert sample.success is False
        assert sample.latency is None

    def test_post_init_failure_drops_latency(self):
        """A failed sample never carries a latency."""
        sample = Sample(
            protocol=Protocol.HTTP,
            target="https://x",
            success=False,
            latency=timedelta(milliseconds=5),
        )

        assert sample.latency is None, "Failed samples must have latency=None"
        assert sample.success is False

    def test_post_init_success_without_latency_is_failure(self):
        """A sample without latency cannot count as a success."""
        sample = Sample(protocol=Protocol.UDP, target="1.1.1.1", success=True, latency=None)

        assert sample.success is False
        assert sample.latency is None

    def test_ids_are_unique(self):
        """Each sample gets its own identity."""
        a = Sample(protocol=Protocol.UDP, target="h", success=False, latency=None)
        b = Sample(protocol=Protocol.UDP, target="h", success=False, latency=None)

        assert a.id != b.id
        assert a != b

    def test_sample_is_immutable(self):
        sample = Sample(protocol=Protocol.UDP, target="h", success=False, latency=None)

        with pytest.raises(dataclasses.FrozenInstanceError):
            sample.success = True


class TestProbeCycleResult:
    """Test ProbeCycleResult helpers."""

    def test_samples_udp_first(self):
        udp = Sample(protocol=Protocol.UDP, target="h", success=False, latency=None)
        http = Sample(protocol=Protocol.HTTP, target="u", success=False, latency=None)

        result = ProbeCycleResult(datetime.now(), (udp,), (http,))

        assert result.samples == (udp, http)

    def test_defaults_empty(self):
        result = ProbeCycleResult(datetime.now())

        assert result.udp_samples == ()
        assert result.http_samples == ()
