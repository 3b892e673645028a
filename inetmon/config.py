"""Monitoring session configuration."""

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Mapping

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 30.0
DEFAULT_TOLERANCE = 5.0
DEFAULT_WINDOW = 10
DEFAULT_HTTP_TIMEOUT = 5.0
DEFAULT_UDP_TIMEOUT = 5.0
DEFAULT_UDP_TARGETS = ("8.8.8.8", "1.1.1.1")
DEFAULT_HTTP_TARGETS = (
    "https://clients3.google.com/generate_204",
    "https://www.apple.com/library/test/success.html",
    "https://connectivity-test.cloud.microsoft/",
)


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    """Strip, drop empties and duplicates, keep first-seen order."""
    result = []
    for value in values:
        value = value.strip()
        if value and value not in result:
            result.append(value)
    return tuple(result)


@dataclass(frozen=True)
class MonitorConfig:
    """Fixed parameters of one monitoring session.

    Args:
        interval: Seconds between probe cycles
        tolerance: Seconds a tick may run late before it is reported
        udp_targets: Hosts probed on UDP port 53
        http_targets: URLs probed with HTTP GET
        window: Number of probe cycles kept for rolling statistics
        http_timeout: Seconds before an HTTP probe counts as failed
        udp_timeout: Seconds before a UDP probe counts as failed
    """

    interval: float = DEFAULT_INTERVAL
    tolerance: float = DEFAULT_TOLERANCE
    udp_targets: tuple[str, ...] = DEFAULT_UDP_TARGETS
    http_targets: tuple[str, ...] = DEFAULT_HTTP_TARGETS
    window: int = DEFAULT_WINDOW
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    udp_timeout: float = DEFAULT_UDP_TIMEOUT

    def __post_init__(self):
        object.__setattr__(self, "udp_targets", _unique(self.udp_targets))
        object.__setattr__(self, "http_targets", _unique(self.http_targets))

        if self.interval <= 0:
            raise ValueError("interval must be positive")
        if self.tolerance < 0:
            raise ValueError("tolerance must not be negative")
        if self.window <= 0:
            raise ValueError("window must be positive")
        if self.http_timeout <= 0 or self.udp_timeout <= 0:
            raise ValueError("probe timeouts must be positive")
        if not self.udp_targets and not self.http_targets:
            raise ValueError("at least one UDP or HTTP target is required")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "MonitorConfig":
        """Build a configuration from INETMON_* environment variables.

        Environment Variables:
            INETMON_INTERVAL: Seconds between probe cycles (default 30)
            INETMON_TOLERANCE: Allowed tick lateness in seconds (default 5)
            INETMON_WINDOW: Probe cycles kept in the window (default 10)
            INETMON_UDP_TARGETS: Comma separated hosts
            INETMON_HTTP_TARGETS: Comma separated URLs
            INETMON_UDP_TIMEOUT: Seconds before a UDP probe fails (default 5)

        Raises:
            ValueError: If a value cannot be parsed or is out of range
        """
        env = os.environ if environ is None else environ
        kwargs = {}

        for name, key, convert in (
            ("interval", "INETMON_INTERVAL", float),
            ("tolerance", "INETMON_TOLERANCE", float),
            ("window", "INETMON_WINDOW", int),
            ("udp_timeout", "INETMON_UDP_TIMEOUT", float),
        ):
            raw = env.get(key, "").strip()
            if not raw:
                continue
            try:
                kwargs[name] = convert(raw)
            except ValueError:
                raise ValueError(f"{key} must be a number, got {raw!r}") from None

        for name, key in (
            ("udp_targets", "INETMON_UDP_TARGETS"),
            ("http_targets", "INETMON_HTTP_TARGETS"),
        ):
            raw = env.get(key, "").strip()
            if raw:
                kwargs[name] = tuple(raw.split(","))

        config = cls(**kwargs)
        logger.debug("Configuration loaded: %s", config)
        return config
