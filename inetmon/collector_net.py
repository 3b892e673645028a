"""Real network probes and path observer for InetMon."""

import asyncio
import logging
import socket
import time
from datetime import timedelta
from typing import AsyncIterator

import httpx
import psutil

from inetmon.config import DEFAULT_HTTP_TIMEOUT, DEFAULT_UDP_TIMEOUT
from inetmon.models import PathStatus, Protocol, Sample

logger = logging.getLogger(__name__)

DNS_PORT = 53

# Documentation address (TEST-NET-3); connecting a UDP socket to it only
# consults the routing table, no packet is sent.
ROUTE_CHECK_ADDRESS = ("203.0.113.1", DNS_PORT)


def is_success_status(status_code: int) -> bool:
    """Return True for HTTP statuses that count as a successful probe."""
    return status_code == 204 or 200 <= status_code <= 299


class NetworkProber:
    """Prober that talks to the real network.

    UDP probes resolve the host and connect a datagram endpoint to port 53;
    the probe succeeds once the endpoint is ready. HTTP probes issue a GET
    through a shared ``httpx.AsyncClient``. Failures and timeouts become
    unsuccessful samples.
    """

    def __init__(
        self,
        *,
        http_timeout: float = DEFAULT_HTTP_TIMEOUT,
        udp_timeout: float = DEFAULT_UDP_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize network prober.

        Args:
            http_timeout: Seconds before an HTTP probe fails
            udp_timeout: Seconds before a UDP probe fails
            client: Optional preconfigured client (e.g. with a mock transport)
        """
        if http_timeout <= 0 or udp_timeout <= 0:
            raise ValueError("timeouts must be positive")

        self.http_timeout = http_timeout
        self.udp_timeout = udp_timeout
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(http_timeout), follow_redirects=True
        )

        logger.debug(
            "NetworkProber initialized: http_timeout=%.1fs, udp_timeout=%.1fs",
            http_timeout,
            udp_timeout,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def probe_udp(self, host: str) -> Sample:
        """Measure the time to get a ready UDP endpoint for host:53."""
        loop = asyncio.get_running_loop()
        start = time.monotonic()
        try:
            transport, _ = await asyncio.wait_for(
                loop.create_datagram_endpoint(
                    asyncio.DatagramProtocol, remote_addr=(host, DNS_PORT)
                ),
                timeout=self.udp_timeout,
            )
        except asyncio.TimeoutError:
            logger.debug("UDP probe timeout: host=%s, timeout=%.1fs", host, self.udp_timeout)
            return Sample(protocol=Protocol.UDP, target=host, success=False, latency=None)
        except OSError as e:
            # socket.gaierror is an OSError
            logger.debug("UDP probe failed: host=%s, error=%s", host, str(e))
            return Sample(protocol=Protocol.UDP, target=host, success=False, latency=None)

        elapsed = timedelta(seconds=time.monotonic() - start)
        transport.close()
        logger.debug(
            "UDP probe ready: host=%s, latency=%.2fms",
            host,
            elapsed / timedelta(milliseconds=1),
        )
        return Sample(protocol=Protocol.UDP, target=host, success=True, latency=elapsed)

    async def probe_http(self, url: str) -> Sample:
        """GET the URL and time the response."""
        start = time.monotonic()
        try:
            response = await self._client.get(url, timeout=self.http_timeout)
        except httpx.HTTPError as e:
            logger.debug("HTTP probe failed: url=%s, error=%s", url, str(e))
            return Sample(protocol=Protocol.HTTP, target=url, success=False, latency=None)

        elapsed = timedelta(seconds=time.monotonic() - start)
        success = is_success_status(response.status_code)
        logger.debug("HTTP probe done: url=%s, status=%d", url, response.status_code)
        return Sample(
            protocol=Protocol.HTTP,
            target=url,
            success=success,
            latency=elapsed if success else None,
        )


def _has_route(address: tuple[str, int] = ROUTE_CHECK_ADDRESS) -> bool:
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.connect(address)
        return True
    except OSError:
        return False
    finally:
        sock.close()


def detect_path_status() -> PathStatus:
    """Classify the current network path from interface and route state.

    Returns:
        UNSATISFIED if no non-loopback interface is up,
        REQUIRES_CONNECTION if interfaces are up but nothing routes outward,
        SATISFIED otherwise
    """
    stats = psutil.net_if_stats()
    up = [
        name
        for name, st in stats.items()
        if st.isup and not name.startswith("lo")
    ]
    if not up:
        return PathStatus.UNSATISFIED
    if not _has_route():
        return PathStatus.REQUIRES_CONNECTION
    return PathStatus.SATISFIED


class SystemPathObserver:
    """Path observer that polls the operating system's network state."""

    def __init__(self, poll_interval: float = 2.0):
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self.poll_interval = poll_interval

    async def watch(self) -> AsyncIterator[PathStatus]:
        """Yield the current status, then every change seen while polling."""
        last = None
        while True:
            status = await asyncio.to_thread(detect_path_status)
            if status != last:
                logger.info(
                    "Path status changed: %s -> %s",
                    last.value if last else None,
                    status.value,
                )
                last = status
                yield status
            await asyncio.sleep(self.poll_interval)
