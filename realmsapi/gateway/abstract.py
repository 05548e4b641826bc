"""
Upstream capability interface consumed by the pipelines.

The aggregator and the profile fetcher only talk to providers through
``UpstreamGateway``. The HTTP implementation lives in
``realmsapi.gateway.http``; tests substitute in-memory fakes.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable

from realmsapi.domain.models import NetworkAddress, RealmDescriptor, ServerStatus


@runtime_checkable
class UpstreamGateway(Protocol):
    """
    The five lookups a realm aggregation may need.

    Failure contract
    ----------------
    resolve_descriptor
        Raises ``RealmNotFoundError`` for unknown codes, ``UpstreamError`` for
        anything else. This is the only call whose failure is fatal.
    get_address
        Returns ``None`` (or raises ``UpstreamError``) when the realm has no
        joinable address.
    ping
        Raises ``StatusUnavailableError`` when the server does not answer.
    get_profile / get_club
        Return the raw provider payload (``{"people": [...]}`` /
        ``{"clubs": [...]}``); may raise ``UpstreamError``.
    """

    async def resolve_descriptor(self, code: str) -> RealmDescriptor:
        ...

    async def get_address(self, descriptor: RealmDescriptor) -> Optional[NetworkAddress]:
        ...

    async def ping(self, host: str, port: int) -> ServerStatus:
        ...

    async def get_profile(self, xuid: str) -> Dict[str, Any]:
        ...

    async def get_club(self, club_id: str) -> Dict[str, Any]:
        ...


__all__ = ["UpstreamGateway"]
