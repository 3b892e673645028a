"""Collector abstractions for InetMon data sources."""

from typing import AsyncIterator, Protocol

from inetmon.models import PathStatus, Sample


class Prober(Protocol):
    """Protocol defining the probe primitives used by a probe cycle.

    Implementations report failures as unsuccessful samples instead of
    raising.
    """

    async def probe_udp(self, host: str) -> Sample:
        """Check UDP reachability of port 53 on the given host."""
        ...

    async def probe_http(self, url: str) -> Sample:
        """Issue a GET against the given URL."""
        ...


class PathObserver(Protocol):
    """Protocol for sources of network path status transitions."""

    def watch(self) -> AsyncIterator[PathStatus]:
        """Yield the current path status, then each transition."""
        ...
