"""
Edgecast platforms (a.k.a. media types).

Each platform is a delivery mode identified by an integer that goes
straight into the API url. Stats aren't more fine grained than this: if
several services share a platform you get them added together.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping

from edgecast_exporter.errors import UnknownPlatformError


@dataclass(frozen=True)
class Platform:
    id: int
    name: str


MEDIA_TYPE_FLASH = 2
MEDIA_TYPE_LARGE = 3
MEDIA_TYPE_SSL_LARGE = 7
MEDIA_TYPE_SMALL = 8
MEDIA_TYPE_SSL_SMALL = 9
MEDIA_TYPE_ADN = 14
MEDIA_TYPE_SSL_ADN = 15

PLATFORMS: Mapping[int, str] = {
    MEDIA_TYPE_FLASH: "flash",
    MEDIA_TYPE_LARGE: "http_large",
    MEDIA_TYPE_SSL_LARGE: "ssl_http_large",
    MEDIA_TYPE_SMALL: "http_small",
    MEDIA_TYPE_SSL_SMALL: "ssl_http_small",
    MEDIA_TYPE_ADN: "adn",
    MEDIA_TYPE_SSL_ADN: "ssl_adn",
}


class PlatformRegistry:
    """Closed id -> name table. Read-only once built."""

    def __init__(self, table: Mapping[int, str] = PLATFORMS):
        self._platforms: Dict[int, Platform] = {
            pid: Platform(id=pid, name=name) for pid, name in sorted(table.items())
        }

    def resolve(self, platform_id: int) -> Platform:
        try:
            return self._platforms[platform_id]
        except KeyError:
            raise UnknownPlatformError(platform_id) from None

    def name_for(self, platform_id: int) -> str:
        return self.resolve(platform_id).name

    def all(self) -> List[Platform]:
        return list(self._platforms.values())

    def subset(self, platform_ids: Iterable[int]) -> List[Platform]:
        """Validate a configured list of ids, keeping order and dropping repeats."""
        chosen: List[Platform] = []
        for pid in platform_ids:
            platform = self.resolve(pid)
            if platform not in chosen:
                chosen.append(platform)
        return chosen

    def __contains__(self, platform_id) -> bool:
        return platform_id in self._platforms

    def __len__(self) -> int:
        return len(self._platforms)
