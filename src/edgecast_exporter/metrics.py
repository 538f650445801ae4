"""
Result types returned by the stats API layer.

These mirror the four realtime stats endpoints. Bandwidth and connections
come back as a single number; cache status and status codes come back as
a breakdown, kept in the order the API sent it.
"""

from dataclasses import dataclass
from typing import List

from edgecast_exporter.platforms import Platform


@dataclass
class BandwidthResult:
    bits_per_second: float
    platform: Platform


@dataclass
class ConnectionResult:
    connections: float
    platform: Platform


@dataclass
class CacheStatusRow:
    cache_status: str   # e.g. "TCP_HIT", "TCP_MISS", "NONE"
    connections: int


@dataclass
class StatusCodeRow:
    status_code: str    # e.g. "2xx", "404", "other"
    connections: int


CacheStatusResult = List[CacheStatusRow]
StatusCodeResult = List[StatusCodeRow]
