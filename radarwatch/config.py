"""
Monitored datacenters and services, defaults, and the validated run configuration.
Everything is decided at startup; nothing here is read from or written to disk.
"""
from pathlib import Path
from typing import Optional

from radarwatch.errors import ConfigError

PROGRAM_NAME = "📡 Arvan Cloud Radar Monitor"
BASE_URL = "https://radar.arvancloud.ir/api/v1/internet-monitoring"

# Default config
DEFAULT_DELAY_MINUTES = 1
DEFAULT_OUTAGE_THRESHOLD = 3
DEFAULT_TIMEOUT_S = 10.0

# sindad-buf, sindad-thr and sindad-thr-fanava return no data upstream
DATACENTERS = (
    "mci",
    "irancell",
    "tehran-2",
    "tehran-3",
    "hostiran",
    "parsonline",
    "afranet",
    "bertina-xrx",
    "bertina-thr",
    "ajk-abrbaran",
)

SERVICES = (
    "google",
    "github",
    "wikipedia",
    "playstation",
    "bing",
    "digikala",
    "divar",
    "aparat",
)


def parse_service(value: str) -> str:
    """Accept a service name (any case) or its 1-based number in SERVICES."""
    raw = (value or "").strip().lower()
    if not raw:
        raise ConfigError("must specify a service")
    if raw.isdigit():
        index = int(raw)
        if 1 <= index <= len(SERVICES):
            return SERVICES[index - 1]
        raise ConfigError(f"invalid service number: {raw} (1-{len(SERVICES)})")
    if raw not in SERVICES:
        raise ConfigError(f"invalid service: {raw}")
    return raw


def format_services() -> str:
    lines = ["Available services:"]
    for i, s in enumerate(SERVICES, start=1):
        lines.append(f"  {i:2d}) {s}")
    return "\n".join(lines)


class MonitorConfig:
    __slots__ = (
        "service",
        "datacenters",
        "delay_minutes",
        "threshold",
        "timeout_s",
        "desktop_notifications",
        "icon_path",
        "align_to_minute",
    )

    def __init__(
        self,
        service: str,
        datacenters: Optional[tuple[str, ...]] = None,
        delay_minutes: int = DEFAULT_DELAY_MINUTES,
        threshold: int = DEFAULT_OUTAGE_THRESHOLD,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        desktop_notifications: bool = True,
        icon_path: Optional[Path] = None,
        align_to_minute: bool = False,
    ):
        self.service = parse_service(service)
        self.datacenters = tuple(datacenters) if datacenters else DATACENTERS
        unknown = [d for d in self.datacenters if d not in DATACENTERS]
        if unknown:
            raise ConfigError(f"unknown datacenter(s): {', '.join(unknown)}")
        if int(delay_minutes) < 1:
            raise ConfigError("delay must be greater than 0")
        self.delay_minutes = int(delay_minutes)
        if int(threshold) < 1:
            raise ConfigError("threshold must be greater than 0")
        self.threshold = int(threshold)
        if float(timeout_s) <= 0:
            raise ConfigError("timeout must be greater than 0")
        self.timeout_s = float(timeout_s)
        self.desktop_notifications = bool(desktop_notifications)
        self.icon_path = Path(icon_path) if icon_path else None
        self.align_to_minute = bool(align_to_minute)
