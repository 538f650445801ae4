"""Stats API client and the wrappers stacked around it."""

from __future__ import annotations

from typing import Optional

import httpx

from edgecast_exporter.client.base import EdgecastService
from edgecast_exporter.client.edgecast_client import EdgecastClient
from edgecast_exporter.client.instrumenting import InstrumentingService, ServiceMetrics
from edgecast_exporter.client.logging_service import LoggingService
from edgecast_exporter.config import ExporterConfig
from edgecast_exporter.platforms import PlatformRegistry

__all__ = [
    "EdgecastClient",
    "EdgecastService",
    "InstrumentingService",
    "LoggingService",
    "ServiceMetrics",
    "build_service",
]


def build_service(
    config: ExporterConfig,
    metrics: ServiceMetrics,
    registry: Optional[PlatformRegistry] = None,
    transport: Optional[httpx.BaseTransport] = None,
):
    """Instrumenting -> Logging -> EdgecastClient.

    Returns the outermost service and the raw client (so the caller can
    close it).
    """
    registry = registry or PlatformRegistry()
    client = EdgecastClient.from_config(config, registry=registry, transport=transport)
    service: EdgecastService = LoggingService(client, registry=registry)
    service = InstrumentingService(service, metrics)
    return service, client
