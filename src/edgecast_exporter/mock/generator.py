"""
Mock Edgecast realtime stats.

Produces fake but plausible payloads in the exact JSON shapes the real API
returns, so we can develop and test without an Edgecast account. Traffic
follows a slow sine wave per platform with the occasional spike.
"""

import math
import random
from typing import Dict, List

CACHE_STATUSES = [
    "TCP_HIT",
    "TCP_EXPIRED_HIT",
    "TCP_MISS",
    "TCP_EXPIRED_MISS",
    "TCP_CLIENT_REFRESH_MISS",
    "NONE",
    "CONFIG_NOCACHE",
    "UNCACHEABLE",
]

STATUS_CODES = ["2xx", "304", "3xx", "403", "404", "4xx", "503", "504", "5xx", "other"]

# Rough share of connections per bucket, before noise
_CACHE_MIX = [0.90, 0.001, 0.03, 0.0, 0.015, 0.005, 0.002, 0.0005]
_STATUS_MIX = [0.96, 0.02, 0.0, 0.012, 0.0003, 0.0013, 0.0, 0.0, 0.0, 0.0]


class MockEdgecastAPI:

    def __init__(self, seed: int = 42):
        self._rng = random.Random(seed)
        self._tick = 0

    def _connections(self, platform_id: int) -> float:
        self._tick += 1
        t = self._tick

        # Each platform gets its own phase so they don't move in lockstep
        base = 5000 + 3000 * math.sin(t * 0.05 + platform_id)
        spike = self._rng.random() * 4000 if self._rng.random() > 0.95 else 0
        return max(0.0, base + spike + self._rng.gauss(0, 150))

    def bandwidth(self, platform_id: int) -> Dict[str, float]:
        # ~400 KB/s per connection
        bps = self._connections(platform_id) * 400_000 * 8 * self._rng.uniform(0.8, 1.2)
        return {"Result": round(bps, 2)}

    def connections(self, platform_id: int) -> Dict[str, float]:
        return {"Result": round(self._connections(platform_id), 5)}

    def cachestatus(self, platform_id: int) -> List[dict]:
        total = self._connections(platform_id)
        return [
            {"CacheStatus": status, "Connections": self._share(total, mix)}
            for status, mix in zip(CACHE_STATUSES, _CACHE_MIX)
        ]

    def statuscode(self, platform_id: int) -> List[dict]:
        total = self._connections(platform_id)
        return [
            {"Connections": self._share(total, mix), "StatusCode": code}
            for code, mix in zip(STATUS_CODES, _STATUS_MIX)
        ]

    def _share(self, total: float, mix: float) -> int:
        return max(0, int(total * mix * self._rng.uniform(0.9, 1.1)))
