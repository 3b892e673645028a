"""Data models for InetMon probes and path status."""

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import UUID, uuid4


class Protocol(enum.Enum):
    """Transport used by a single probe."""

    UDP = "udp"
    HTTP = "http"


class PathStatus(enum.Enum):
    """Coarse connectivity state reported by a path observer."""

    SATISFIED = "satisfied"
    UNSATISFIED = "unsatisfied"
    REQUIRES_CONNECTION = "requires connection"


class Quality(enum.Enum):
    """Ordinal connection quality tier, best first."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class Sample:
    """Outcome of one probe against one target."""

    protocol: Protocol
    target: str
    success: bool
    latency: timedelta | None  # None for failed probes
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self):
        """Ensure consistency between success and latency fields."""
        if not self.success:
            object.__setattr__(self, "latency", None)
        elif self.latency is None:
            object.__setattr__(self, "success", False)


@dataclass(frozen=True)
class ProbeCycleResult:
    """All samples gathered by one scheduling tick."""

    timestamp: datetime
    udp_samples: tuple[Sample, ...] = ()
    http_samples: tuple[Sample, ...] = ()

    @property
    def samples(self) -> tuple[Sample, ...]:
        return self.udp_samples + self.http_samples
