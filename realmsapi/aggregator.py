"""
Realm aggregation pipeline.

Given an invite code, resolve it to a realm descriptor, then enrich that
descriptor with the realm's live server status, its owner's profile and its
club, reconcile everything into one ``Realm`` record, persist it and return it.

Only the code resolution is fatal. Every enrichment step degrades to empty
defaults on failure so that the emitted record always has the full shape.

Usage:
    aggregator = RealmAggregator(gateway, realm_store, ProtocolVersionTable.load())
    result = await aggregator.resolve("AbCdEfGhIjK")
    if isinstance(result, AggregationError):
        ...
"""

from __future__ import annotations

import asyncio
from typing import Optional, Tuple

from realmsapi.config import Settings, get_settings
from realmsapi.domain.models import (
    AggregationError,
    ClubSummary,
    InviteInfo,
    NetworkAddress,
    OwnerProfile,
    Realm,
    RealmDescriptor,
    RealmResult,
    RealmStub,
    ServerInfo,
)
from realmsapi.gateway.abstract import UpstreamGateway
from realmsapi.protocol_versions import ProtocolVersionTable
from realmsapi.store import RecordStore
from realmsapi.utils.logging import get_logger

log = get_logger(__name__)

# Codes of exactly this length are realm ids, not invite codes.
REALM_ID_LENGTH = 8


class RealmAggregator:
    """
    Resolve invite codes into canonical, persisted realm records.

    Parameters
    ----------
    gateway : UpstreamGateway
        Provider lookups (descriptor, address, ping, profile, club).
    store : RecordStore
        Destination for every successfully aggregated record.
    protocols : ProtocolVersionTable
        Protocol id -> release label table.
    settings : Settings | None
        Supplies the invite link base URL and the default server port.
    """

    def __init__(
        self,
        gateway: UpstreamGateway,
        store: RecordStore,
        protocols: ProtocolVersionTable,
        settings: Optional[Settings] = None,
    ) -> None:
        settings = settings or get_settings()
        self._gateway = gateway
        self._store = store
        self._protocols = protocols
        self.invite_base_url = settings.invite_base_url
        self.default_port = settings.default_server_port

    async def resolve(self, code: str) -> RealmResult:
        """
        Aggregate the realm behind ``code``.

        Returns a ``RealmStub`` without any upstream call or write for 8
        character codes, an ``AggregationError`` when the code cannot be
        resolved, and the persisted ``Realm`` otherwise. Store write failures
        propagate.
        """
        if len(code) == REALM_ID_LENGTH:
            log.info("[REALM] code has realm id length, skipping lookup", extra={"code": code})
            return RealmStub(id=code, name=code)

        try:
            if not code:
                raise ValueError("Realm code must not be empty")
            descriptor = await self._gateway.resolve_descriptor(code)
            log.info(
                f"[REALM] resolved {code} -> {descriptor.id}",
                extra={"code": code, "realm_id": descriptor.id, "state": descriptor.state},
            )
            (address, server), owner, club = await asyncio.gather(
                self._live_status(descriptor),
                self._owner(descriptor),
                self._club(descriptor),
            )
            realm = self._assemble(code, descriptor, address, server, owner, club)
        except Exception as exc:  # noqa: BLE001 - reported to the caller as a lookup failure
            log.warning(
                f"[REALM FAILED] {code}",
                extra={"code": code, "error": str(exc), "error_type": type(exc).__name__},
            )
            return AggregationError(code=code, message=str(exc) or type(exc).__name__)

        await self._store.append(realm.to_record())
        log.info(
            f"[REALM STORED] {code}",
            extra={"code": code, "realm_id": realm.id, "request_id": realm.request_id},
        )
        return realm

    async def _live_status(
        self, descriptor: RealmDescriptor
    ) -> Tuple[NetworkAddress, ServerInfo]:
        unreachable = NetworkAddress(host="", port=self.default_port)
        if descriptor.is_closed:
            return unreachable, ServerInfo.unavailable(self._protocols.resolve(0))

        try:
            address = await self._gateway.get_address(descriptor)
        except Exception as exc:  # noqa: BLE001 - degrade to "no live status"
            log.warning(
                "[STATUS] join address unavailable",
                extra={"realm_id": descriptor.id, "error": str(exc)},
            )
            address = None
        if address is None:
            return unreachable, ServerInfo.unavailable(self._protocols.resolve(0))
        if not address.port:
            address = NetworkAddress(host=address.host, port=self.default_port)

        try:
            status = await self._gateway.ping(address.host, address.port)
        except Exception as exc:  # noqa: BLE001 - degrade to "no live status"
            log.warning(
                "[STATUS] ping failed",
                extra={"realm_id": descriptor.id, "host": address.host, "error": str(exc)},
            )
            return address, ServerInfo.unavailable(self._protocols.resolve(0))

        return address, ServerInfo.from_status(status, self._protocols.resolve(status.protocol))

    async def _owner(self, descriptor: RealmDescriptor) -> OwnerProfile:
        if not descriptor.owner_uuid:
            return OwnerProfile()
        try:
            payload = await self._gateway.get_profile(descriptor.owner_uuid)
            return OwnerProfile.from_people(payload)
        except Exception as exc:  # noqa: BLE001
            log.warning(
                "[OWNER] profile lookup failed",
                extra={"xuid": descriptor.owner_uuid, "error": str(exc)},
            )
            return OwnerProfile()

    async def _club(self, descriptor: RealmDescriptor) -> ClubSummary:
        if not descriptor.club_id:
            return ClubSummary()
        try:
            payload = await self._gateway.get_club(descriptor.club_id)
            return ClubSummary.from_clubs(payload)
        except Exception as exc:  # noqa: BLE001
            log.warning(
                "[CLUB] club lookup failed",
                extra={"club_id": descriptor.club_id, "error": str(exc)},
            )
            return ClubSummary()

    def _assemble(
        self,
        code: str,
        descriptor: RealmDescriptor,
        address: NetworkAddress,
        server: ServerInfo,
        owner: OwnerProfile,
        club: ClubSummary,
    ) -> Realm:
        return Realm(
            id=descriptor.id,
            ip=address.host,
            port=address.port,
            remote_subscription_id=descriptor.remote_subscription_id,
            owner_uuid=descriptor.owner_uuid,
            name=descriptor.name,
            motd=descriptor.motd,
            default_permission=descriptor.default_permission,
            state=descriptor.state,
            days_left=descriptor.days_left,
            expired=descriptor.expired,
            expired_trial=descriptor.expired_trial,
            grace_period=descriptor.grace_period,
            world_type=descriptor.world_type,
            max_players=descriptor.max_players,
            club_id=descriptor.club_id,
            member=list(descriptor.member),
            invite=InviteInfo(
                code=code,
                ownerxuid=descriptor.owner_uuid,
                codeurl=f"{self.invite_base_url}{code}",
            ),
            server=server,
            thumbnail_id=descriptor.thumbnail_id,
            minigame_name=descriptor.minigame_name,
            minigame_id=descriptor.minigame_id,
            minigame_image=descriptor.minigame_image,
            owner=owner,
            club=club,
        )


__all__ = ["RealmAggregator", "REALM_ID_LENGTH"]
