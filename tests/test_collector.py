"""Tests for the fake collectors used in simulation and tests."""

from datetime import timedelta

import pytest

from inetmon.fake_collector import FakeProber, StaticPathObserver
from inetmon.models import PathStatus, Protocol, Sample


class TestFakeProber:
    """Test FakeProber behavior and contracts."""

    @pytest.mark.asyncio
    async def test_probe_protocols_and_targets(self):
        prober = FakeProber(seed=123)

        udp = await prober.probe_udp("8.8.8.8")
        http = await prober.probe_http("https://example.com/")

        assert isinstance(udp, Sample)
        assert udp.protocol == Protocol.UDP
        assert udp.target == "8.8.8.8"
        assert http.protocol == Protocol.HTTP
        assert http.target == "https://example.com/"

    def test_deterministic_with_seed(self):
        first = FakeProber(seed=42).generate_sample(Protocol.UDP, "deterministic.test")
        second = FakeProber(seed=42).generate_sample(Protocol.UDP, "deterministic.test")

        assert first.latency == second.latency
        assert first.success == second.success

    def test_samples_respect_success_latency_invariant(self):
        prober = FakeProber(seed=100)
        prober.loss_probability = 0.5

        for i in range(50):
            sample = prober.generate_sample(Protocol.HTTP, f"invariant-test-{i}")
            if sample.success:
                assert sample.latency is not None
                assert sample.latency > timedelta(0)
            else:
                assert sample.latency is None

    def test_loss_probability_one_always_fails(self):
        prober = FakeProber(seed=1)
        prober.loss_probability = 1.0

        assert not prober.generate_sample(Protocol.UDP, "h").success

    def test_empty_target_rejected(self):
        prober = FakeProber()

        with pytest.raises(ValueError, match="Target cannot be empty"):
            prober.generate_sample(Protocol.UDP, "")

        with pytest.raises(ValueError, match="Target cannot be empty"):
            prober.generate_sample(Protocol.UDP, "   ")


class TestStaticPathObserver:
    """Test StaticPathObserver behavior."""

    @pytest.mark.asyncio
    async def test_yields_configured_status_first(self):
        observer = StaticPathObserver(PathStatus.UNSATISFIED)
        stream = observer.watch()

        assert await stream.__anext__() == PathStatus.UNSATISFIED
        await stream.aclose()
