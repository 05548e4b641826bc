"""
User profile lookup pipeline.

A single provider call: fetch the raw profile for a user id, persist the raw
payload to the profile store and return it annotated with a request id and a
timestamp. The annotations exist only on the response, not in the store.
"""

from __future__ import annotations

from realmsapi.domain.models import FetchError, ProfileLookup, ProfileResult
from realmsapi.gateway.abstract import UpstreamGateway
from realmsapi.store import RecordStore
from realmsapi.utils.logging import get_logger

log = get_logger(__name__)


class UserProfileFetcher:
    def __init__(self, gateway: UpstreamGateway, store: RecordStore) -> None:
        self._gateway = gateway
        self._store = store

    async def resolve(self, xuid: str) -> ProfileResult:
        """Fetch and persist one profile; upstream failures become ``FetchError``."""
        try:
            payload = await self._gateway.get_profile(xuid)
            lookup = ProfileLookup(payload=payload)
        except Exception as exc:  # noqa: BLE001 - reported to the caller as FetchError
            log.warning("[PROFILE FAILED] %s", xuid, extra={"xuid": xuid, "error": str(exc)})
            return FetchError(message=str(exc) or type(exc).__name__)

        await self._store.append(payload)
        log.info(
            "[PROFILE STORED] %s",
            xuid,
            extra={"xuid": xuid, "request_id": lookup.request_id},
        )
        return lookup


__all__ = ["UserProfileFetcher"]
