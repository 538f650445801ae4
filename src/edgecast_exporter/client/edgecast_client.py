"""
Client for the Edgecast realtime stats API.

One GET per (platform, method). Transport failures (including a body
that cannot be read or decoded) are retried up to
`retries` times back to back; anything that got an answer from the
server (error status, bad JSON) is not retried.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, TypeVar

import httpx

from edgecast_exporter.client.base import EdgecastService
from edgecast_exporter.config import (
    DEFAULT_API_URL,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT_SECONDS,
    ExporterConfig,
)
from edgecast_exporter.errors import ApiStatusError, DecodeError, TransportError
from edgecast_exporter.metrics import (
    BandwidthResult,
    CacheStatusResult,
    CacheStatusRow,
    ConnectionResult,
    StatusCodeResult,
    StatusCodeRow,
)
from edgecast_exporter.platforms import PlatformRegistry

log = logging.getLogger(__name__)

# account id, platform id, method
API_PATH = "/v2/realtimestats/customers/{account_id}/media/{platform_id}/{method}"

METHOD_BANDWIDTH = "bandwidth"
METHOD_CONNECTIONS = "connections"
METHOD_CACHESTATUS = "cachestatus"
METHOD_STATUSCODES = "statuscode"

T = TypeVar("T")


class EdgecastClient(EdgecastService):

    def __init__(
        self,
        account_id: str,
        token: str,
        base_url: str = DEFAULT_API_URL,
        retries: int = DEFAULT_RETRIES,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        registry: Optional[PlatformRegistry] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._account_id = account_id
        self._base_url = base_url.rstrip("/")
        self._retries = retries
        self._timeout = timeout_seconds
        self._registry = registry or PlatformRegistry()
        self._client = httpx.Client(
            timeout=self._timeout,
            transport=transport,
            headers={
                "Authorization": f"TOK:{token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    @classmethod
    def from_config(
        cls,
        config: ExporterConfig,
        registry: Optional[PlatformRegistry] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "EdgecastClient":
        return cls(
            account_id=config.account_id,
            token=config.token,
            base_url=config.api_url,
            retries=config.retries,
            timeout_seconds=config.timeout_seconds,
            registry=registry,
            transport=transport,
        )

    @property
    def retries(self) -> int:
        return self._retries

    @property
    def timeout(self) -> float:
        return self._timeout

    def bandwidth(self, platform_id: int) -> BandwidthResult:
        data = self._get_json(platform_id, METHOD_BANDWIDTH)
        bps = self._decode(platform_id, METHOD_BANDWIDTH, lambda: _result_value(data))
        return BandwidthResult(bits_per_second=bps, platform=self._registry.resolve(platform_id))

    def connections(self, platform_id: int) -> ConnectionResult:
        data = self._get_json(platform_id, METHOD_CONNECTIONS)
        count = self._decode(platform_id, METHOD_CONNECTIONS, lambda: _result_value(data))
        return ConnectionResult(connections=count, platform=self._registry.resolve(platform_id))

    def cache_status(self, platform_id: int) -> CacheStatusResult:
        data = self._get_json(platform_id, METHOD_CACHESTATUS)
        return self._decode(platform_id, METHOD_CACHESTATUS, lambda: [
            CacheStatusRow(
                cache_status=_field(row, "CacheStatus", str),
                connections=_field(row, "Connections", int),
            )
            for row in _rows(data)
        ])

    def status_codes(self, platform_id: int) -> StatusCodeResult:
        data = self._get_json(platform_id, METHOD_STATUSCODES)
        return self._decode(platform_id, METHOD_STATUSCODES, lambda: [
            StatusCodeRow(
                status_code=_field(row, "StatusCode", str),
                connections=_field(row, "Connections", int),
            )
            for row in _rows(data)
        ])

    def url_for(self, platform_id: int, method: str) -> str:
        path = API_PATH.format(
            account_id=self._account_id, platform_id=platform_id, method=method,
        )
        return self._base_url + path

    def _get_json(self, platform_id: int, method: str) -> Any:
        url = self.url_for(platform_id, method)
        response = self._request(url, platform_id, method)

        if response.is_error:
            raise ApiStatusError(
                f"{method} for platform {platform_id} returned HTTP {response.status_code}",
                method, platform_id, status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(
                f"{method} for platform {platform_id}: invalid JSON ({exc})",
                method, platform_id,
            ) from exc

    def _request(self, url: str, platform_id: int, method: str) -> httpx.Response:
        last_error: Optional[httpx.RequestError] = None

        for attempt in range(1, self._retries + 1):
            try:
                # Non-streaming get() reads and decodes the body too, so read and
                # content-encoding errors land here
                return self._client.get(url)
            except (httpx.TransportError, httpx.DecodingError) as exc:
                last_error = exc
                log.debug("attempt %d/%d for %s failed: %r", attempt, self._retries, url, exc)

        raise TransportError(
            f"{method} for platform {platform_id} failed after "
            f"{self._retries} attempt(s): {last_error!r}",
            method, platform_id,
        ) from last_error

    @staticmethod
    def _decode(platform_id: int, method: str, build: Callable[[], T]) -> T:
        try:
            return build()
        except (KeyError, TypeError, ValueError) as exc:
            raise DecodeError(
                f"{method} for platform {platform_id}: unexpected response shape ({exc})",
                method, platform_id,
            ) from exc

    def close(self):
        self._client.close()


def _result_value(data: Any) -> float:
    """Bandwidth and connections both come back as {"Result": <number>}."""
    if not isinstance(data, dict):
        raise TypeError(f"expected an object, got {type(data).__name__}")
    return float(_field(data, "Result", (int, float)))


def _rows(data: Any) -> List[dict]:
    if not isinstance(data, list):
        raise TypeError(f"expected an array, got {type(data).__name__}")
    for row in data:
        if not isinstance(row, dict):
            raise TypeError(f"expected array of objects, got {type(row).__name__}")
    return data


def _field(row: dict, key: str, kind):
    value = row[key]
    # bool is an int subclass; JSON true/false is never a valid count
    if isinstance(value, bool) or not isinstance(value, kind):
        raise TypeError(f"{key} has unexpected type {type(value).__name__}")
    return value
