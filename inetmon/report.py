"""Connectivity report assembled from path status and probe samples."""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from inetmon.models import PathStatus, Quality, Sample
from inetmon.stats import LatencyStats, jitter, latency

# (tier, max mean latency, max http jitter, min success rate), best tier first
QUALITY_THRESHOLDS = (
    (Quality.EXCELLENT, timedelta(milliseconds=40), timedelta(milliseconds=10), 0.995),
    (Quality.GOOD, timedelta(milliseconds=100), timedelta(milliseconds=30), 0.98),
    (Quality.FAIR, timedelta(milliseconds=250), timedelta(milliseconds=60), 0.90),
)


def _latencies(samples: tuple[Sample, ...]) -> list[timedelta]:
    return [s.latency for s in samples if s.latency is not None]


def classify_quality(
    path_status: PathStatus,
    overall: LatencyStats | None,
    http_jitter: timedelta,
    rate: float,
) -> Quality:
    """Map report metrics to a quality tier.

    Tiers are evaluated best first with inclusive bounds; the first tier whose
    latency, jitter and success-rate bounds all hold wins. Anything but a
    satisfied path, or a window without a single latency, is DISCONNECTED.
    """
    if path_status != PathStatus.SATISFIED or overall is None:
        return Quality.DISCONNECTED

    for tier, max_latency, max_jitter, min_rate in QUALITY_THRESHOLDS:
        if overall.mean <= max_latency and http_jitter <= max_jitter and rate >= min_rate:
            return tier
    return Quality.POOR


@dataclass(frozen=True)
class Report:
    """Immutable snapshot of connectivity at one point in time.

    ``dns_samples`` and ``http_samples`` hold the most recent probe cycle only,
    while the ``window_*`` fields hold every sample of the sliding window in
    acquisition order. Latency statistics and the success rate are derived
    from the window.
    """

    timestamp: datetime
    path_status: PathStatus
    dns_samples: tuple[Sample, ...] = ()
    http_samples: tuple[Sample, ...] = ()
    dns_jitter: timedelta = timedelta(0)
    http_jitter: timedelta = timedelta(0)
    window_dns_samples: tuple[Sample, ...] = ()
    window_http_samples: tuple[Sample, ...] = ()

    @classmethod
    def empty(cls, path_status: PathStatus, timestamp: datetime | None = None) -> "Report":
        """Report carrying a path status but no samples yet."""
        return cls(timestamp=timestamp or datetime.now(), path_status=path_status)

    def with_path_status(self, path_status: PathStatus, timestamp: datetime) -> "Report":
        """Copy of this report with a new path status and timestamp."""
        return replace(self, path_status=path_status, timestamp=timestamp)

    @property
    def all(self) -> LatencyStats | None:
        return latency(_latencies(self.window_dns_samples) + _latencies(self.window_http_samples))

    @property
    def dns(self) -> LatencyStats | None:
        return latency(_latencies(self.window_dns_samples))

    @property
    def http(self) -> LatencyStats | None:
        return latency(_latencies(self.window_http_samples))

    @property
    def rate(self) -> float:
        """Success ratio over the window, 0 unless the path is satisfied."""
        if self.path_status != PathStatus.SATISFIED:
            return 0.0
        samples = self.window_dns_samples + self.window_http_samples
        if not samples:
            return 0.0
        return sum(1 for s in samples if s.success) / len(samples)

    @property
    def quality(self) -> Quality:
        return classify_quality(self.path_status, self.all, self.http_jitter, self.rate)


def build_report(
    timestamp: datetime,
    path_status: PathStatus,
    latest_dns: tuple[Sample, ...],
    latest_http: tuple[Sample, ...],
    window_dns: tuple[Sample, ...],
    window_http: tuple[Sample, ...],
) -> Report:
    """Build a report, computing jitter over the window samples."""
    return Report(
        timestamp=timestamp,
        path_status=path_status,
        dns_samples=latest_dns,
        http_samples=latest_http,
        dns_jitter=jitter(_latencies(window_dns)),
        http_jitter=jitter(_latencies(window_http)),
        window_dns_samples=window_dns,
        window_http_samples=window_http,
    )
