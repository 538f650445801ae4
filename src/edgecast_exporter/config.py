"""
Exporter configuration.

Raw values come from CLI options / environment variables (see main.py).
build_config() validates them once at startup and returns a frozen
ExporterConfig that gets handed to the client and the collector.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from edgecast_exporter.errors import ConfigurationError, UnknownPlatformError
from edgecast_exporter.platforms import Platform, PlatformRegistry

DEFAULT_API_URL = "https://api.edgecast.com"
DEFAULT_RETRIES = 1
DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_LISTEN_ADDRESS = "0.0.0.0"
DEFAULT_PORT = 80


@dataclass(frozen=True)
class ExporterConfig:
    account_id: str
    token: str
    platforms: Tuple[Platform, ...]
    api_url: str = DEFAULT_API_URL
    retries: int = DEFAULT_RETRIES
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_workers: Optional[int] = None   # None = one worker per platform


def parse_platform_ids(raw: Union[str, None]) -> Tuple[int, ...]:
    """Turn "2,8, 14" into (2, 8, 14). Empty input means "no restriction"."""
    if raw is None or not raw.strip():
        return ()

    ids = []
    for part in raw.split(","):
        part = part.strip()
        try:
            ids.append(int(part))
        except ValueError:
            raise ConfigurationError(f"Invalid platform: {part}") from None
    return tuple(ids)


def build_config(
    account_id: Optional[str],
    token: Optional[str],
    platforms: Optional[str] = None,
    registry: Optional[PlatformRegistry] = None,
    api_url: str = DEFAULT_API_URL,
    retries: int = DEFAULT_RETRIES,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    max_workers: Optional[int] = None,
) -> ExporterConfig:
    """Validate raw settings. Raises ConfigurationError on anything unusable."""
    if not account_id or not token:
        raise ConfigurationError(
            "empty Account-ID or Token! Please specify using environment "
            "variables EDGECAST_ACCOUNT_ID and EDGECAST_TOKEN"
        )

    registry = registry or PlatformRegistry()
    ids = parse_platform_ids(platforms)
    try:
        chosen = registry.subset(ids) if ids else registry.all()
    except UnknownPlatformError as exc:
        raise ConfigurationError(str(exc)) from exc

    if retries < 1:
        raise ConfigurationError(f"retries must be at least 1, got {retries}")
    if timeout_seconds <= 0:
        raise ConfigurationError(f"timeout must be positive, got {timeout_seconds}")
    if max_workers is not None and max_workers < 1:
        raise ConfigurationError(f"max workers must be at least 1, got {max_workers}")

    return ExporterConfig(
        account_id=account_id,
        token=token,
        platforms=tuple(chosen),
        api_url=api_url.rstrip("/"),
        retries=retries,
        timeout_seconds=timeout_seconds,
        max_workers=max_workers,
    )
