"""Fake data sources for InetMon testing and simulation."""

import asyncio
import random
from datetime import timedelta
from typing import AsyncIterator

from inetmon.models import PathStatus, Protocol, Sample


class FakeProber:
    """Generates fake probe samples for testing."""

    def __init__(self, seed: int | None = None, delay: float = 0.0):
        """Initialize with optional random seed for deterministic behavior.

        Args:
            seed: Seed for the isolated random generator
            delay: Seconds each probe sleeps before answering
        """
        self._random = random.Random(seed)
        self.delay = delay

        # Simulation parameters
        self.base_latency = 25.0  # Base latency in ms
        self.latency_variance = 5.0  # Normal variance
        self.spike_probability = 0.05  # 5% chance of latency spike
        self.spike_multiplier = 3.0  # Spike makes latency 3x higher
        self.loss_probability = 0.02  # 2% chance of a failed probe

    def generate_sample(self, protocol: Protocol, target: str) -> Sample:
        """Generate a single sample for the given target."""
        if not target or not target.strip():
            raise ValueError("Target cannot be empty")

        if self._random.random() < self.loss_probability:
            return Sample(protocol=protocol, target=target, success=False, latency=None)

        if self._random.random() < self.spike_probability:
            latency = self.base_latency * self.spike_multiplier + self._random.gauss(
                0, self.latency_variance
            )
        else:
            latency = self.base_latency + self._random.gauss(0, self.latency_variance)

        latency = max(0.1, latency)
        return Sample(
            protocol=protocol,
            target=target,
            success=True,
            latency=timedelta(milliseconds=round(latency, 2)),
        )

    async def probe_udp(self, host: str) -> Sample:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.generate_sample(Protocol.UDP, host)

    async def probe_http(self, url: str) -> Sample:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.generate_sample(Protocol.HTTP, url)


class StaticPathObserver:
    """Path observer that reports a single status and then stays quiet."""

    def __init__(self, status: PathStatus = PathStatus.SATISFIED):
        self.status = status

    async def watch(self) -> AsyncIterator[PathStatus]:
        yield self.status
        await asyncio.Event().wait()
