"""
Domain models for the Realms lookup service.

Field names follow the upstream/wire JSON (camelCase aliases) while Python
attributes stay snake_case. Models that represent upstream payloads normalise
absent or null values to typed empties so that every aggregated record has the
same shape regardless of what the providers returned.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

_WIRE_CONFIG = ConfigDict(populate_by_name=True, extra="ignore")


def new_request_id() -> str:
    """Fresh identifier attached to every emitted record or error body."""
    return str(uuid.uuid4())


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        try:
            return int(float(str(value).strip()))
        except (ValueError, OverflowError):
            return 0


def _first_item(payload: Any, key: str) -> Mapping[str, Any]:
    """Return ``payload[key][0]`` when it is a mapping, else an empty dict."""
    if not isinstance(payload, Mapping):
        return {}
    items = payload.get(key)
    if not isinstance(items, list) or not items:
        return {}
    first = items[0]
    return first if isinstance(first, Mapping) else {}


class ProtocolVersion(BaseModel):
    """One row of the protocol table: numeric protocol id -> release label."""

    version: int = Field(..., description="Network protocol id.")
    minecraft_version: str = Field(..., alias="minecraftVersion")

    model_config = {"frozen": True, "populate_by_name": True}


class RealmDescriptor(BaseModel):
    """
    Realm metadata as returned by the invite-resolution provider.

    Unknown upstream keys are ignored; missing ones default to empties.
    """

    id: str = ""
    remote_subscription_id: Optional[str] = Field(None, alias="remoteSubscriptionId")
    owner_uuid: str = Field("", alias="ownerUUID")
    name: str = ""
    motd: str = ""
    default_permission: str = Field("", alias="defaultPermission")
    state: str = ""
    days_left: int = Field(0, alias="daysLeft")
    expired: bool = False
    expired_trial: bool = Field(False, alias="expiredTrial")
    grace_period: bool = Field(False, alias="gracePeriod")
    world_type: str = Field("", alias="worldType")
    max_players: int = Field(0, alias="maxPlayers")
    club_id: str = Field("", alias="clubId")
    member: List[str] = Field(default_factory=list)
    thumbnail_id: Optional[str] = Field(None, alias="thumbnailId")
    minigame_name: Optional[str] = Field(None, alias="minigameName")
    minigame_id: Optional[str] = Field(None, alias="minigameId")
    minigame_image: Optional[str] = Field(None, alias="minigameImage")

    model_config = _WIRE_CONFIG

    @field_validator(
        "id",
        "owner_uuid",
        "name",
        "motd",
        "default_permission",
        "state",
        "world_type",
        "club_id",
        mode="before",
    )
    @classmethod
    def _strings(cls, value: Any) -> str:
        return _as_str(value)

    @field_validator("days_left", "max_players", mode="before")
    @classmethod
    def _ints(cls, value: Any) -> int:
        return _as_int(value)

    @field_validator("expired", "expired_trial", "grace_period", mode="before")
    @classmethod
    def _bools(cls, value: Any) -> bool:
        return bool(value)

    @field_validator(
        "remote_subscription_id",
        "thumbnail_id",
        "minigame_name",
        "minigame_id",
        "minigame_image",
        mode="before",
    )
    @classmethod
    def _nullable(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("member", mode="before")
    @classmethod
    def _members(cls, value: Any) -> List[str]:
        # The provider sends either a list of xuids or a bare membership flag.
        if isinstance(value, (list, tuple, set)):
            return [str(item) for item in value if item is not None]
        return []

    @property
    def is_closed(self) -> bool:
        return self.state.upper() == "CLOSED"


class NetworkAddress(BaseModel):
    host: str = ""
    port: int = 0

    @classmethod
    def parse(cls, address: str, default_port: int) -> "NetworkAddress":
        """Split ``host:port`` (IPv6 hosts may be bracketed)."""
        host, sep, port = address.strip().rpartition(":")
        if not sep or not port.isdigit():
            return cls(host=address.strip(), port=default_port)
        return cls(host=host.strip("[]"), port=int(port))


class ServerStatus(BaseModel):
    """Live status reported by the realm server in answer to a ping."""

    motd: str = ""
    level_name: str = Field("", alias="levelName")
    players_online: int = Field(0, alias="playersOnline")
    players_max: int = Field(0, alias="playersMax")
    gamemode: str = ""
    gamemode_id: int = Field(0, alias="gamemodeId")
    version: str = ""
    protocol: int = 0
    server_id: str = Field("", alias="serverId")
    port_v4: int = Field(0, alias="portV4")
    port_v6: int = Field(0, alias="portV6")

    model_config = _WIRE_CONFIG


class ServerInfo(BaseModel):
    """The ``server`` section of an aggregated realm record."""

    motd: str = ""
    level_name: str = Field("", alias="levelName")
    players_online: int = Field(0, alias="playersOnline")
    max_players: int = Field(0, alias="maxPlayers")
    gamemode: str = "Unknown"
    gamemode_id: int = Field(0, alias="gamemodeId")
    version: str = ""
    protocol: Union[int, str] = 0
    invalid: bool = Field(False, description="True when no live status could be obtained.")

    model_config = _WIRE_CONFIG

    @classmethod
    def unavailable(cls, protocol: Union[int, str] = 0) -> "ServerInfo":
        return cls(protocol=protocol, invalid=True)

    @classmethod
    def from_status(cls, status: ServerStatus, protocol: Union[int, str]) -> "ServerInfo":
        return cls(
            motd=status.motd,
            level_name=status.level_name,
            players_online=status.players_online,
            max_players=status.players_max,
            gamemode=status.gamemode,
            gamemode_id=status.gamemode_id,
            version=status.version,
            protocol=protocol,
            invalid=False,
        )


class InviteInfo(BaseModel):
    code: str
    ownerxuid: str = ""
    codeurl: str = ""


class OwnerProfile(BaseModel):
    """Realm owner's public profile, reduced to the fields we keep."""

    xuid: str = ""
    display_name: str = Field("", alias="displayName")
    gamertag: str = ""
    gamer_score: int = Field(0, alias="gamerScore")
    presence_state: str = Field("", alias="presenceState")
    presence_text: str = Field("", alias="presenceText")

    model_config = _WIRE_CONFIG

    @classmethod
    def from_people(cls, payload: Any) -> "OwnerProfile":
        """Build from a ``{"people": [...]}`` response; empty when absent."""
        person = _first_item(payload, "people")
        return cls(
            xuid=_as_str(person.get("xuid")),
            display_name=_as_str(person.get("displayName")),
            gamertag=_as_str(person.get("gamertag")),
            gamer_score=_as_int(person.get("gamerScore")),
            presence_state=_as_str(person.get("presenceState")),
            presence_text=_as_str(person.get("presenceText")),
        )


class ClubSummary(BaseModel):
    """Engagement metrics of the club attached to a realm."""

    id: str = ""
    tags: List[str] = Field(default_factory=list)
    preferred_color: str = Field("", alias="preferredColor")
    members_count: int = Field(0, alias="membersCount")
    followers_count: int = Field(0, alias="followersCount")
    report_count: int = Field(0, alias="reportCount")
    reported_items_count: int = Field(0, alias="reportedItemsCount")

    model_config = _WIRE_CONFIG

    @classmethod
    def from_clubs(cls, payload: Any) -> "ClubSummary":
        """Build from a ``{"clubs": [...]}`` response; empty when absent."""
        club = _first_item(payload, "clubs")
        tags = club.get("tags")
        color = club.get("preferredColor")
        if isinstance(color, Mapping):
            color = color.get("primaryColor")
        return cls(
            id=_as_str(club.get("id")),
            tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
            preferred_color=_as_str(color),
            members_count=_as_int(club.get("membersCount")),
            followers_count=_as_int(club.get("followersCount")),
            report_count=_as_int(club.get("reportCount")),
            reported_items_count=_as_int(club.get("reportedItemsCount")),
        )


class Realm(BaseModel):
    """Canonical aggregated realm record, as persisted and returned."""

    id: str = Field(..., description="Upstream realm id.")
    ip: str = ""
    port: int = 0
    remote_subscription_id: Optional[str] = Field(None, alias="remoteSubscriptionId")
    owner_uuid: str = Field("", alias="ownerUUID")
    name: str = ""
    motd: str = ""
    default_permission: str = Field("", alias="defaultPermission")
    state: str = ""
    days_left: int = Field(0, alias="daysLeft")
    expired: bool = False
    expired_trial: bool = Field(False, alias="expiredTrial")
    grace_period: bool = Field(False, alias="gracePeriod")
    world_type: str = Field("", alias="worldType")
    max_players: int = Field(0, alias="maxPlayers")
    club_id: str = Field("", alias="clubId")
    member: List[str] = Field(default_factory=list)
    invite: InviteInfo
    server: ServerInfo = Field(default_factory=ServerInfo.unavailable)
    thumbnail_id: Optional[str] = Field(None, alias="thumbnailId")
    minigame_name: Optional[str] = Field(None, alias="minigameName")
    minigame_id: Optional[str] = Field(None, alias="minigameId")
    minigame_image: Optional[str] = Field(None, alias="minigameImage")
    owner: OwnerProfile = Field(default_factory=OwnerProfile)
    club: ClubSummary = Field(default_factory=ClubSummary)
    request_id: str = Field(default_factory=new_request_id)

    model_config = _WIRE_CONFIG

    def to_record(self) -> Dict[str, Any]:
        """JSON-ready dict with wire field names."""
        return self.model_dump(mode="json", by_alias=True)


class RealmStub(BaseModel):
    """
    Returned for 8-character codes, which are taken to be realm ids already.

    Nothing is fetched or persisted for these.
    """

    id: str
    name: str

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class AggregationError(BaseModel):
    """A realm lookup that failed at the code-resolution step."""

    code: str
    message: str
    valid: Literal[False] = False

    def to_response(self) -> Dict[str, Any]:
        return {"name": False, "realmCode": self.code, "valid": False, "error": self.message}


class ProfileLookup(BaseModel):
    """Raw provider profile plus the per-response annotations."""

    payload: Dict[str, Any]
    request_id: str = Field(default_factory=new_request_id)
    timestamp: str = Field(default_factory=utc_timestamp)

    def to_response(self) -> Dict[str, Any]:
        return {**self.payload, "request_id": self.request_id, "timestamp": self.timestamp}


class FetchError(BaseModel):
    error: str = "Failed to fetch Xbox user data"
    request_id: str = Field(default_factory=new_request_id)
    message: str = ""

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


RealmResult = Union[Realm, RealmStub, AggregationError]
ProfileResult = Union[ProfileLookup, FetchError]


__all__ = [
    "AggregationError",
    "ClubSummary",
    "FetchError",
    "InviteInfo",
    "NetworkAddress",
    "OwnerProfile",
    "ProfileLookup",
    "ProfileResult",
    "ProtocolVersion",
    "Realm",
    "RealmDescriptor",
    "RealmResult",
    "RealmStub",
    "ServerInfo",
    "ServerStatus",
    "new_request_id",
    "utc_timestamp",
]
