"""
Base service interface.

Anything that can answer the four realtime stats questions for a platform.
The real API client and the logging / instrumenting wrappers all
implement this, so they can be stacked in any order without the
collector knowing which one it talks to.
"""

from abc import ABC, abstractmethod

from edgecast_exporter.metrics import (
    BandwidthResult,
    CacheStatusResult,
    ConnectionResult,
    StatusCodeResult,
)


class EdgecastService(ABC):
    """Interface for all stats sources. Failures raise FetchError subclasses."""

    @abstractmethod
    def bandwidth(self, platform_id: int) -> BandwidthResult:
        ...

    @abstractmethod
    def connections(self, platform_id: int) -> ConnectionResult:
        ...

    @abstractmethod
    def cache_status(self, platform_id: int) -> CacheStatusResult:
        ...

    @abstractmethod
    def status_codes(self, platform_id: int) -> StatusCodeResult:
        ...
