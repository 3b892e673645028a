"""Probe cycle runner: one concurrent batch of UDP and HTTP probes."""

import asyncio
import logging
from datetime import datetime

from inetmon.collector import Prober
from inetmon.config import MonitorConfig
from inetmon.models import ProbeCycleResult, Protocol, Sample

logger = logging.getLogger(__name__)


async def _guarded(protocol: Protocol, target: str, probe) -> Sample:
    """Await a probe, folding unexpected exceptions into a failed sample."""
    try:
        return await probe
    except Exception as e:
        logger.warning(
            "Probe raised: protocol=%s, target=%s, error=%s",
            protocol.value,
            target,
            str(e),
            exc_info=True,
        )
        return Sample(protocol=protocol, target=target, success=False, latency=None)


async def run_probe_cycle(prober: Prober, config: MonitorConfig) -> ProbeCycleResult:
    """Probe every configured target concurrently and collect the results.

    All probes are launched together and the result is assembled only once
    every probe has finished. Samples keep the configured target order.
    Cancelling the cycle cancels every outstanding probe.

    Args:
        prober: Probe primitives to run
        config: Session configuration providing the targets

    Returns:
        ProbeCycleResult stamped with the launch time
    """
    timestamp = datetime.now()

    udp = [
        _guarded(Protocol.UDP, host, prober.probe_udp(host)) for host in config.udp_targets
    ]
    http = [
        _guarded(Protocol.HTTP, url, prober.probe_http(url)) for url in config.http_targets
    ]

    logger.debug("Probe cycle starting: udp=%d, http=%d", len(udp), len(http))
    samples = await asyncio.gather(*udp, *http)

    result = ProbeCycleResult(
        timestamp=timestamp,
        udp_samples=tuple(samples[: len(udp)]),
        http_samples=tuple(samples[len(udp):]),
    )
    logger.debug(
        "Probe cycle finished: %d/%d succeeded",
        sum(1 for s in result.samples if s.success),
        len(result.samples),
    )
    return result
