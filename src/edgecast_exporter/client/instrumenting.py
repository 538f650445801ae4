"""
Instrumenting wrapper around any EdgecastService.

Every call, successful or not, updates three series labelled by method
and error ("true"/"false"):
    request_count                         one increment per call
    request_latency_distribution_seconds  histogram of call durations
    request_latency_seconds               duration of the latest call
"""

from __future__ import annotations

import time
from typing import Callable, Optional, TypeVar

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram

from edgecast_exporter.client.base import EdgecastService
from edgecast_exporter.metrics import (
    BandwidthResult,
    CacheStatusResult,
    ConnectionResult,
    StatusCodeResult,
)

NAMESPACE = "Edgecast"
SUBSYSTEM = "service_metrics"
FIELD_KEYS = ["method", "error"]

T = TypeVar("T")


class ServiceMetrics:
    """Process-wide metrics for calls against the stats API."""

    def __init__(self, registry: Optional[CollectorRegistry] = REGISTRY):
        self.request_count = Counter(
            "request_count",
            "Number of requests received.",
            FIELD_KEYS,
            namespace=NAMESPACE,
            subsystem=SUBSYSTEM,
            registry=registry,
        )
        self.request_latency_distribution = Histogram(
            "request_latency_distribution_seconds",
            "Total duration of requests in seconds.",
            FIELD_KEYS,
            namespace=NAMESPACE,
            subsystem=SUBSYSTEM,
            registry=registry,
        )
        self.request_latency = Gauge(
            "request_latency_seconds",
            "Duration of request in seconds.",
            FIELD_KEYS,
            namespace=NAMESPACE,
            subsystem=SUBSYSTEM,
            registry=registry,
        )
        # Fetches the collector gave up on; see EdgecastCollector
        self.dropped_series = Counter(
            "dropped_series",
            "Number of (platform, method) fetches that produced no samples.",
            ["platform", "method"],
            namespace=NAMESPACE,
            subsystem=SUBSYSTEM,
            registry=registry,
        )

    def observe(self, method: str, failed: bool, seconds: float):
        labels = {"method": method, "error": "true" if failed else "false"}
        self.request_count.labels(**labels).inc()
        self.request_latency_distribution.labels(**labels).observe(seconds)
        self.request_latency.labels(**labels).set(seconds)


class InstrumentingService(EdgecastService):

    def __init__(self, inner: EdgecastService, metrics: ServiceMetrics):
        self._inner = inner
        self._metrics = metrics

    def bandwidth(self, platform_id: int) -> BandwidthResult:
        return self._call("Bandwidth", platform_id, self._inner.bandwidth)

    def connections(self, platform_id: int) -> ConnectionResult:
        return self._call("Connections", platform_id, self._inner.connections)

    def cache_status(self, platform_id: int) -> CacheStatusResult:
        return self._call("CacheStatus", platform_id, self._inner.cache_status)

    def status_codes(self, platform_id: int) -> StatusCodeResult:
        return self._call("StatusCodes", platform_id, self._inner.status_codes)

    def _call(self, method: str, platform_id: int, fn: Callable[[int], T]) -> T:
        failed = True
        begin = time.perf_counter()
        try:
            result = fn(platform_id)
            failed = False
            return result
        finally:
            self._metrics.observe(method, failed, time.perf_counter() - begin)
