"""
Realms API - read-through lookup service for Minecraft Bedrock Realms.

Given a realm invite code, the service resolves it through the Realms API,
enriches the result with the server's live status, the owner's Xbox Live
profile and the realm's club, and appends the normalised record to a local
JSON store. A sibling lookup fetches and stores raw Xbox Live profiles.

Main pieces:

- ``RealmAggregator``: the invite-code aggregation pipeline
- ``UserProfileFetcher``: the single-call profile pipeline
- ``RecordStore``: append-only JSON file store, one per record kind
- ``ProtocolVersionTable``: network protocol id -> release label
- ``HttpUpstreamGateway``: Realms/Xbox Live HTTP clients plus RakNet status ping
- ``create_app``: FastAPI application exposing both lookups
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from realmsapi.aggregator import RealmAggregator
from realmsapi.config import Settings, get_settings
from realmsapi.domain.models import (
    AggregationError,
    FetchError,
    ProfileLookup,
    Realm,
    RealmStub,
)
from realmsapi.gateway import HttpUpstreamGateway, UpstreamGateway
from realmsapi.profiles import UserProfileFetcher
from realmsapi.protocol_versions import ProtocolVersionTable
from realmsapi.store import RecordStore
from realmsapi.utils.logging import configure_logging, get_logger
from realmsapi.api import create_app

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Pipelines
    "RealmAggregator",
    "UserProfileFetcher",
    # Results
    "Realm",
    "RealmStub",
    "AggregationError",
    "ProfileLookup",
    "FetchError",
    # Collaborators
    "RecordStore",
    "ProtocolVersionTable",
    "UpstreamGateway",
    "HttpUpstreamGateway",
    # HTTP
    "create_app",
    # Logging
    "configure_logging",
    "get_logger",
]
