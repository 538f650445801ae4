"""
Exception types.

Configuration problems are fatal and stop the process before it serves
anything. Fetch problems are per (platform, method) call and never make
it past the collector.
"""

from __future__ import annotations

from typing import Optional


class EdgecastError(Exception):
    """Base class for everything this package raises on purpose."""


class ConfigurationError(EdgecastError):
    pass


class UnknownPlatformError(EdgecastError, LookupError):

    def __init__(self, platform_id):
        super().__init__(f"Invalid platform: {platform_id}")
        self.platform_id = platform_id


class FetchError(EdgecastError):
    """One call against the stats API failed."""

    def __init__(self, message: str, method: str, platform_id: int):
        super().__init__(message)
        self.method = method
        self.platform_id = platform_id


class TransportError(FetchError):
    """Every attempt failed before a response could be read."""


class ApiStatusError(FetchError):

    def __init__(self, message: str, method: str, platform_id: int,
                 status_code: Optional[int] = None):
        super().__init__(message, method, platform_id)
        self.status_code = status_code


class DecodeError(FetchError):
    """Response body was not the JSON shape we expected."""
