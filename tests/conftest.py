"""
Pytest configuration for the Realms lookup service.

Provides fixtures for:
- Settings pointing the record stores at a temporary directory
- Loaded record stores and the packaged protocol table
- An in-memory upstream gateway with canned provider payloads
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

from realmsapi.config import Settings
from realmsapi.domain.models import NetworkAddress, RealmDescriptor, ServerStatus
from realmsapi.errors import RealmNotFoundError
from realmsapi.protocol_versions import ProtocolVersionTable
from realmsapi.store import RecordStore

OWNER_XUID = "2535416409123456"
CLUB_ID = "3379843210987654"

DESCRIPTOR_PAYLOAD: Dict[str, Any] = {
    "id": 4412345,
    "remoteSubscriptionId": "c0ffee00-1111-2222-3333-444455556666",
    "owner": "",
    "ownerUUID": OWNER_XUID,
    "name": "Sky Block",
    "motd": "Welcome to the sky",
    "defaultPermission": "MEMBER",
    "state": "OPEN",
    "daysLeft": 12,
    "expired": False,
    "expiredTrial": False,
    "gracePeriod": False,
    "worldType": "SURVIVAL",
    "players": None,
    "maxPlayers": 11,
    "minigameName": None,
    "minigameId": None,
    "minigameImage": None,
    "activeSlot": 1,
    "slots": None,
    "member": False,
    "clubId": int(CLUB_ID),
    "subscriptionRefreshStatus": None,
}

PEOPLE_PAYLOAD: Dict[str, Any] = {
    "people": [
        {
            "xuid": OWNER_XUID,
            "displayName": "Sky Owner",
            "gamertag": "SkyOwner",
            "gamerScore": "12345",
            "presenceState": "Online",
            "presenceText": "Minecraft",
        }
    ]
}

CLUBS_PAYLOAD: Dict[str, Any] = {
    "clubs": [
        {
            "id": CLUB_ID,
            "tags": ["survival", "friendly"],
            "preferredColor": "107c10",
            "membersCount": 5,
            "followersCount": 7,
            "reportCount": 1,
            "reportedItemsCount": 2,
        }
    ]
}


class FakeGateway:
    """
    In-memory ``UpstreamGateway``.

    Every call is recorded in ``calls``; set ``errors[<method name>]`` to make
    that method raise.
    """

    def __init__(self) -> None:
        self.descriptor: Dict[str, Any] = copy.deepcopy(DESCRIPTOR_PAYLOAD)
        self.address: Optional[NetworkAddress] = NetworkAddress(host="203.0.113.7", port=19132)
        self.status = ServerStatus(
            motd="Sky Block",
            level_name="Bedrock level",
            players_online=3,
            players_max=11,
            gamemode="Survival",
            gamemode_id=0,
            version="1.21.50",
            protocol=766,
        )
        self.people: Any = copy.deepcopy(PEOPLE_PAYLOAD)
        self.clubs: Any = copy.deepcopy(CLUBS_PAYLOAD)
        self.errors: Dict[str, Exception] = {}
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.errors:
            raise self.errors[name]

    @property
    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    async def resolve_descriptor(self, code: str) -> RealmDescriptor:
        self._record("resolve_descriptor", code)
        return RealmDescriptor.model_validate(self.descriptor)

    async def get_address(self, descriptor: RealmDescriptor) -> Optional[NetworkAddress]:
        self._record("get_address", descriptor.id)
        return self.address

    async def ping(self, host: str, port: int) -> ServerStatus:
        self._record("ping", host, port)
        return self.status

    async def get_profile(self, xuid: str) -> Dict[str, Any]:
        self._record("get_profile", xuid)
        return self.people

    async def get_club(self, club_id: str) -> Dict[str, Any]:
        self._record("get_club", club_id)
        return self.clubs


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings with both record stores under ``tmp_path`` and fast retries.
    """
    return Settings(
        realms_db_path=tmp_path / "database.json",
        xbox_users_db_path=tmp_path / "xboxusers.json",
        protocol_table_path=None,
        log_level="DEBUG",
        realms_api_url="https://realms.test",
        realms_authorization="XBL3.0 x=realms-hash;realms-token",
        xbl_authorization="XBL3.0 x=xbl-hash;xbl-token",
        upstream_retry_attempts=3,
        invite_base_url="https://realms.gg/",
        default_server_port=19132,
    )


@pytest.fixture
def realm_store(test_settings: Settings) -> RecordStore:
    store = RecordStore(test_settings.realms_db_path, kind="realms")
    store.load()
    return store


@pytest.fixture
def profile_store(test_settings: Settings) -> RecordStore:
    store = RecordStore(test_settings.xbox_users_db_path, kind="xbox_users")
    store.load()
    return store


@pytest.fixture(scope="session")
def protocols() -> ProtocolVersionTable:
    return ProtocolVersionTable.load()


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def not_found_gateway(fake_gateway: FakeGateway) -> FakeGateway:
    fake_gateway.errors["resolve_descriptor"] = RealmNotFoundError("Invalid or expired realm code")
    return fake_gateway
