"""
Prometheus collector for Edgecast realtime stats.

Nothing is fetched ahead of time. Every scrape fans out one task per
platform, and each platform task fans out one task per metric type, so a
scrape makes 4 x len(platforms) API calls in parallel. collect() returns
once every one of them has finished.

A failed fetch is dropped on the floor: the scrape still succeeds, it is
just missing the series for that (platform, metric type) pair. The drop
is counted in Edgecast_service_metrics_dropped_series_total and the call
itself was already logged and instrumented by the service wrappers.
"""

from __future__ import annotations

import logging
import queue
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from prometheus_client.core import GaugeMetricFamily

from edgecast_exporter.client.base import EdgecastService
from edgecast_exporter.client.instrumenting import ServiceMetrics
from edgecast_exporter.errors import FetchError
from edgecast_exporter.platforms import Platform, PlatformRegistry

log = logging.getLogger(__name__)

NAMESPACE = "Edgecast"
SUBSYSTEM = "metrics"


@dataclass(frozen=True)
class MetricDescriptor:
    name: str
    help: str
    labels: Tuple[str, ...]

    def family(self) -> GaugeMetricFamily:
        return GaugeMetricFamily(self.name, self.help, labels=list(self.labels))


@dataclass(frozen=True)
class Sample:
    descriptor: MetricDescriptor
    value: float
    label_values: Tuple[str, ...]


def _fq_name(name: str) -> str:
    return f"{NAMESPACE}_{SUBSYSTEM}_{name}"


BANDWIDTH = MetricDescriptor(
    _fq_name("bandwidth_bps"),
    "Current amount of bandwidth usage per platform (bits per second).",
    ("platform",),
)
CACHESTATUS = MetricDescriptor(
    _fq_name("cachestatus"),
    "Breakdown of the cache statuses currently being returned for requests to CDN account.",
    ("platform", "CacheStatus"),
)
CONNECTIONS = MetricDescriptor(
    _fq_name("connections"),
    "Total active connections per second per platform.",
    ("platform",),
)
STATUSCODES = MetricDescriptor(
    _fq_name("statuscodes"),
    "Breakdown of the HTTP status codes currently being returned for requests to CDN account.",
    ("platform", "StatusCode"),
)

DESCRIPTORS = (BANDWIDTH, CACHESTATUS, CONNECTIONS, STATUSCODES)


# -- Result -> samples --


def _bandwidth_samples(result, platform_name: str) -> List[Sample]:
    return [Sample(BANDWIDTH, result.bits_per_second, (platform_name,))]


def _connections_samples(result, platform_name: str) -> List[Sample]:
    return [Sample(CONNECTIONS, result.connections, (platform_name,))]


def _cachestatus_samples(rows, platform_name: str) -> List[Sample]:
    return [
        Sample(CACHESTATUS, float(row.connections), (platform_name, row.cache_status))
        for row in rows
    ]


def _statuscode_samples(rows, platform_name: str) -> List[Sample]:
    return [
        Sample(STATUSCODES, float(row.connections), (platform_name, row.status_code))
        for row in rows
    ]


@dataclass(frozen=True)
class _Fetch:
    method: str                                     # label used in logs and metrics
    call: Callable[[EdgecastService, int], object]
    to_samples: Callable[[object, str], List[Sample]]


_FETCHES = (
    _Fetch("Bandwidth", lambda svc, pid: svc.bandwidth(pid), _bandwidth_samples),
    _Fetch("Connections", lambda svc, pid: svc.connections(pid), _connections_samples),
    _Fetch("CacheStatus", lambda svc, pid: svc.cache_status(pid), _cachestatus_samples),
    _Fetch("StatusCodes", lambda svc, pid: svc.status_codes(pid), _statuscode_samples),
)


class EdgecastCollector:
    """Custom collector; register it on a prometheus_client CollectorRegistry."""

    def __init__(
        self,
        service: EdgecastService,
        platforms: Sequence[Platform],
        registry: Optional[PlatformRegistry] = None,
        metrics: Optional[ServiceMetrics] = None,
        max_workers: Optional[int] = None,
    ):
        self._service = service
        self._platforms = tuple(platforms)
        self._registry = registry or PlatformRegistry()
        self._metrics = metrics
        self._max_workers = max_workers

    def describe(self) -> List[GaugeMetricFamily]:
        return [d.family() for d in DESCRIPTORS]

    def collect(self) -> List[GaugeMetricFamily]:
        sink: "queue.Queue[Sample]" = queue.Queue()

        if self._platforms:
            workers = len(self._platforms)
            if self._max_workers is not None:
                workers = min(workers, self._max_workers)

            with ThreadPoolExecutor(max_workers=workers,
                                    thread_name_prefix="edgecast-platform") as pool:
                futures = [pool.submit(self._collect_platform, p, sink) for p in self._platforms]
            # Leaving the with-block joined every platform task
            for future in futures:
                future.result()

        return self._drain(sink)

    def samples(self) -> List[Sample]:
        """Run one scrape and return the raw samples instead of metric families."""
        families = self.collect()
        by_name = {d.name: d for d in DESCRIPTORS}
        return [
            Sample(
                by_name[family.name],
                s.value,
                tuple(s.labels[label] for label in by_name[family.name].labels),
            )
            for family in families
            for s in family.samples
        ]

    def _collect_platform(self, platform: Platform, sink: "queue.Queue[Sample]"):
        with ThreadPoolExecutor(max_workers=len(_FETCHES),
                                thread_name_prefix=f"edgecast-{platform.name}") as pool:
            futures = [pool.submit(self._fetch, fetch, platform, sink) for fetch in _FETCHES]
        for future in futures:
            future.result()

    def _fetch(self, fetch: _Fetch, platform: Platform, sink: "queue.Queue[Sample]"):
        try:
            result = fetch.call(self._service, platform.id)
        except FetchError as exc:
            log.debug("no %s samples for platform %s: %s", fetch.method, platform.name, exc)
            if self._metrics is not None:
                self._metrics.dropped_series.labels(
                    platform=platform.name, method=fetch.method,
                ).inc()
            return

        for sample in fetch.to_samples(result, self._registry.name_for(platform.id)):
            sink.put(sample)

    @staticmethod
    def _drain(sink: "queue.Queue[Sample]") -> List[GaugeMetricFamily]:
        families: Dict[str, GaugeMetricFamily] = {d.name: d.family() for d in DESCRIPTORS}
        while True:
            try:
                sample = sink.get_nowait()
            except queue.Empty:
                break
            families[sample.descriptor.name].add_metric(list(sample.label_values), sample.value)
        return list(families.values())
