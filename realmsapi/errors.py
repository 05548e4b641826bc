"""
Exception hierarchy for the Realms lookup service.

Upstream failures are raised by gateway implementations and absorbed or
reported by the pipelines; store errors surface at startup.
"""

from __future__ import annotations

from typing import Optional


class RealmsApiError(Exception):
    """Base class for every error raised by this package."""


class UpstreamError(RealmsApiError):
    """An upstream provider call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RealmNotFoundError(UpstreamError):
    """The invite code is unknown, expired or malformed."""


class UpstreamUnavailableError(UpstreamError):
    """Transient upstream failure (5xx, throttling); safe to retry."""


class StatusUnavailableError(UpstreamError):
    """The realm server did not answer a status ping."""


class RecordStoreError(RealmsApiError):
    """A record store backing file could not be read or parsed."""


__all__ = [
    "RealmsApiError",
    "UpstreamError",
    "RealmNotFoundError",
    "UpstreamUnavailableError",
    "StatusUnavailableError",
    "RecordStoreError",
]
