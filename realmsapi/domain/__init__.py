"""
Domain package for the Realms lookup service.

Exports the record shapes shared by the gateway, the pipelines and the HTTP
layer. Keep this package focused on data definitions and normalisation.
"""

from realmsapi.domain.models import (
    AggregationError,
    ClubSummary,
    FetchError,
    InviteInfo,
    NetworkAddress,
    OwnerProfile,
    ProfileLookup,
    ProfileResult,
    ProtocolVersion,
    Realm,
    RealmDescriptor,
    RealmResult,
    RealmStub,
    ServerInfo,
    ServerStatus,
    new_request_id,
)

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
]
