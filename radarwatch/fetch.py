"""
Radar statistics over HTTP (httpx.AsyncClient, injected by the caller).
GET <BASE_URL>?isp=<datacenter> returns {"<service>": [v0, v1, ...], ...}; the last value is the sample.
Sample 0 = reachable, anything else = unreachable.
"""
import logging
from dataclasses import dataclass
from numbers import Real
from typing import Any

import httpx

from radarwatch.config import BASE_URL
from radarwatch.errors import FetchFailed

logger = logging.getLogger("radarwatch.fetch")


def is_accessible(sample: float) -> bool:
    return sample == 0


@dataclass
class ServiceStatistics:
    service: str
    statistics: list[float]

    @property
    def latest(self) -> float:
        return self.statistics[-1]

    def is_accessible_now(self) -> bool:
        return is_accessible(self.latest)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def parse_service_statistics(data: Any, service: str, datacenter: str) -> ServiceStatistics:
    """Pick the series for one service out of a decoded response body."""
    if not isinstance(data, dict):
        raise FetchFailed(datacenter, f"unexpected response body: {type(data).__name__}")
    values = data.get(service)
    if not isinstance(values, list) or not values:
        raise FetchFailed(datacenter, f"no data for service: {service}")
    if not all(_is_number(v) for v in values):
        raise FetchFailed(datacenter, f"non-numeric value in series for service {service}")
    return ServiceStatistics(service=service, statistics=list(values))


class StatsFetcher:
    """One GET per call, no retry; the next scheduled round is the retry."""

    def __init__(self, client: httpx.AsyncClient, base_url: str = BASE_URL):
        self._client = client
        self._base_url = base_url

    async def fetch_statistics(self, datacenter: str, service: str) -> ServiceStatistics:
        try:
            resp = await self._client.get(self._base_url, params={"isp": datacenter})
        except httpx.TimeoutException as e:
            raise FetchFailed(datacenter, f"request timeout: {type(e).__name__}") from e
        except httpx.HTTPError as e:
            raise FetchFailed(datacenter, f"request error: {type(e).__name__}: {e}") from e

        if not resp.is_success:
            raise FetchFailed(datacenter, f"unexpected status code: {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as e:
            raise FetchFailed(datacenter, f"JSON parse error: {e}") from e

        stats = parse_service_statistics(data, service, datacenter)
        logger.debug("Fetched %d values for %s from [%s]", len(stats.statistics), service, datacenter)
        return stats

    async def fetch(self, datacenter: str, service: str) -> float:
        """Latest sample for (datacenter, service); raises FetchFailed."""
        stats = await self.fetch_statistics(datacenter, service)
        return stats.latest
