"""
HTTP implementation of the upstream gateway.

Talks to the Bedrock Realms API (invite resolution, join address) and the
Xbox Live people/club hubs over one shared ``httpx.AsyncClient``. Live status
is delegated to ``RakNetPinger``.

Transient failures (transport errors, 5xx, 429) are retried with exponential
backoff using tenacity; client errors are not.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from realmsapi.config import Settings, get_settings
from realmsapi.domain.models import NetworkAddress, RealmDescriptor, ServerStatus
from realmsapi.errors import RealmNotFoundError, UpstreamError, UpstreamUnavailableError
from realmsapi.gateway.raknet import RakNetPinger
from realmsapi.utils.logging import get_logger

log = get_logger(__name__)

PEOPLE_HUB_URL = "https://peoplehub.xboxlive.com"
CLUB_HUB_URL = "https://clubhub.xboxlive.com"

_RETRYABLE = (httpx.TransportError, UpstreamUnavailableError)


class HttpUpstreamGateway:
    """
    ``UpstreamGateway`` over the public Realms and Xbox Live HTTP APIs.

    Parameters
    ----------
    settings : Settings | None
        Endpoints, credentials, timeouts and retry budget.
    client : httpx.AsyncClient | None
        Injected client (tests use ``httpx.MockTransport``). When omitted the
        gateway creates and owns one.
    pinger : RakNetPinger | None
        Status query implementation.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
        pinger: Optional[RakNetPinger] = None,
        retry_wait_multiplier: float = 0.5,
    ) -> None:
        self.settings = settings or get_settings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.settings.upstream_timeout_seconds)
        self._pinger = pinger or RakNetPinger(timeout=self.settings.ping_timeout_seconds)
        self._retry_wait_multiplier = retry_wait_multiplier

    async def __aenter__(self) -> "HttpUpstreamGateway":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # -- transport -----------------------------------------------------------

    def _realms_headers(self) -> Dict[str, str]:
        return {
            "Accept": "*/*",
            "Authorization": self.settings.realms_authorization,
            "Client-Version": self.settings.realms_client_version,
            "User-Agent": "MCPE/UWP",
            "Accept-Language": "en-US",
            "Charset": "utf-8",
        }

    def _xbl_headers(self, contract_version: int) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Authorization": self.settings.xbl_authorization,
            "x-xbl-contract-version": str(contract_version),
            "Accept-Language": "en-US",
        }

    async def _get_json(self, url: str, headers: Dict[str, str], what: str) -> Any:
        """
        GET ``url`` and decode JSON, retrying transient failures.

        4xx answers raise ``UpstreamError`` (``RealmNotFoundError`` is raised
        by callers that know what a 403/404 means for them).
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max(1, self.settings.upstream_retry_attempts)),
            wait=wait_exponential(multiplier=self._retry_wait_multiplier, min=0, max=10),
            retry=retry_if_exception_type(_RETRYABLE),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    number = attempt.retry_state.attempt_number
                    if number > 1:
                        log.info(
                            f"[UPSTREAM RETRY] {what} attempt {number}",
                            extra={"upstream": what, "attempt": number},
                        )
                    response = await self._client.get(url, headers=headers)
                    if response.status_code == 429 or response.status_code >= 500:
                        raise UpstreamUnavailableError(
                            f"{what} answered {response.status_code}",
                            status_code=response.status_code,
                        )
        except httpx.TransportError as exc:
            log.warning(f"[UPSTREAM FAILED] {what}", extra={"upstream": what, "error": str(exc)})
            raise UpstreamError(f"{what} unreachable: {exc}") from exc

        if response.status_code >= 400:
            raise UpstreamError(
                f"{what} answered {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(f"{what} returned invalid JSON") from exc

    # -- UpstreamGateway -----------------------------------------------------

    async def resolve_descriptor(self, code: str) -> RealmDescriptor:
        url = f"{self.settings.realms_api_url.rstrip('/')}/worlds/v1/link/{code}"
        try:
            payload = await self._get_json(url, self._realms_headers(), "realms.link")
        except UpstreamError as exc:
            if exc.status_code in (403, 404):
                raise RealmNotFoundError(
                    f"Invalid or expired realm code '{code}'", status_code=exc.status_code
                ) from exc
            raise
        if not isinstance(payload, dict) or "id" not in payload:
            raise RealmNotFoundError(f"No realm behind code '{code}'")
        return RealmDescriptor.model_validate(payload)

    async def get_address(self, descriptor: RealmDescriptor) -> Optional[NetworkAddress]:
        url = f"{self.settings.realms_api_url.rstrip('/')}/worlds/{descriptor.id}/join"
        payload = await self._get_json(url, self._realms_headers(), "realms.join")
        address = payload.get("address") if isinstance(payload, dict) else None
        if not address:
            return None
        return NetworkAddress.parse(str(address), self.settings.default_server_port)

    async def ping(self, host: str, port: int) -> ServerStatus:
        return await self._pinger.ping(host, port)

    async def get_profile(self, xuid: str) -> Dict[str, Any]:
        url = (
            f"{PEOPLE_HUB_URL}/users/me/people/xuids({xuid})"
            "/decoration/detail,preferredColor,presenceDetail"
        )
        return await self._get_json(url, self._xbl_headers(5), "xbl.people")

    async def get_club(self, club_id: str) -> Dict[str, Any]:
        url = f"{CLUB_HUB_URL}/clubs/Ids({club_id})/decoration/detail"
        return await self._get_json(url, self._xbl_headers(4), "xbl.club")


__all__ = ["HttpUpstreamGateway", "PEOPLE_HUB_URL", "CLUB_HUB_URL"]
