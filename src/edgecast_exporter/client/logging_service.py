"""
Logging wrapper around any EdgecastService.

Logs one line per call with these keys:
    method    the service method that was called
    platform  id(name) of the platform
    output    repr of what the call returned (None on failure)
    err       the raised error (None on success)
    took      wall time from invocation to return
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, TypeVar

from edgecast_exporter.client.base import EdgecastService
from edgecast_exporter.errors import UnknownPlatformError
from edgecast_exporter.metrics import (
    BandwidthResult,
    CacheStatusResult,
    ConnectionResult,
    StatusCodeResult,
)
from edgecast_exporter.platforms import PlatformRegistry

T = TypeVar("T")


class LoggingService(EdgecastService):

    def __init__(
        self,
        inner: EdgecastService,
        registry: Optional[PlatformRegistry] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._inner = inner
        self._registry = registry or PlatformRegistry()
        self._log = logger or logging.getLogger(__name__)

    def bandwidth(self, platform_id: int) -> BandwidthResult:
        return self._call("Bandwidth", platform_id, self._inner.bandwidth)

    def connections(self, platform_id: int) -> ConnectionResult:
        return self._call("Connections", platform_id, self._inner.connections)

    def cache_status(self, platform_id: int) -> CacheStatusResult:
        return self._call("CacheStatus", platform_id, self._inner.cache_status)

    def status_codes(self, platform_id: int) -> StatusCodeResult:
        return self._call("StatusCodes", platform_id, self._inner.status_codes)

    def _call(self, method: str, platform_id: int, fn: Callable[[int], T]) -> T:
        output = None
        err: Optional[BaseException] = None
        begin = time.perf_counter()
        try:
            output = fn(platform_id)
            return output
        except BaseException as exc:
            err = exc
            raise
        finally:
            took = time.perf_counter() - begin
            self._log.log(
                logging.INFO if err is None else logging.WARNING,
                "method=%s platform=%s output=%r err=%r took=%.6fs",
                method, self._platform_label(platform_id), output, err, took,
            )

    def _platform_label(self, platform_id: int) -> str:
        try:
            return f"{platform_id}({self._registry.name_for(platform_id)})"
        except UnknownPlatformError:
            return f"{platform_id}(unknown)"
